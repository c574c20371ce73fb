"""
Checklist subsystem.

Components:
- models.py: data structures (TaskNode, TaskList, Priority, PreviewItem)
- editor.py: pure tree edits (transform, delete_node, add_child, preview_flatten, ...)
- codec.py: dict/JSON encoding of nodes and lists
- list_store.py: SQLite-backed storage of lists
- list_api.py: one user action -> one editor call -> one commit
"""

# src/tally_lists/todos/list_api.py

from __future__ import annotations

import logging
from collections.abc import Callable

from ..core.state import AppState
from . import editor
from .models import PreviewItem, Priority, TaskList, TaskNode, new_node

logger = logging.getLogger(__name__)

Edit = Callable[[tuple[TaskNode, ...]], tuple[TaskNode, ...]]


def _default_priority(state: AppState) -> Priority:
    return Priority.from_raw(getattr(state.settings, "default_priority", "low"))


def _apply(state: AppState, list_id: str, edit: Edit, action: str) -> TaskList | None:
    """
    Load list -> run one editor call -> commit.

    Returns the committed list, the unchanged list if the edit was a no-op,
    or None if the list does not exist.
    """
    with state.lock:
        task_list = state.list_store.get_list(list_id)
        if task_list is None:
            logger.info("%s: list id=%s not found", action, list_id)
            return None

        items = edit(task_list.items)
        if items is task_list.items:
            logger.debug("%s: no-op on list id=%s", action, list_id)
            return task_list

        saved = state.list_store.save_items(list_id, items)
        logger.debug("%s: committed list id=%s", action, list_id)
        return saved


def create_list(state: AppState, title: str, color: str | None = None) -> TaskList:
    if color is None:
        color = str(getattr(state.settings, "default_color", ""))
    return state.list_store.create_list(title=title, color=color)


def add_item(
    state: AppState,
    list_id: str,
    text: str,
    *,
    priority: Priority | None = None,
    due_date: float | None = None,
) -> TaskNode | None:
    """Insert a new top-level item (newest first). Returns the node, or None if the list is missing."""
    if not text or not text.strip():
        raise ValueError("text is required")
    node = new_node(
        text.strip(),
        priority=_default_priority(state) if priority is None else priority,
        due_date=due_date,
    )
    saved = _apply(state, list_id, lambda f: editor.prepend_item(f, node), "add_item")
    return node if saved is not None else None


def add_subtask(
    state: AppState,
    list_id: str,
    parent_id: str,
    text: str | None = None,
    *,
    priority: Priority | None = None,
) -> TaskNode | None:
    """
    Append a child under parent_id and expand the parent.

    Returns the new node, or None if the list or the parent does not exist.
    """
    if text is None or not text.strip():
        text = str(getattr(state.settings, "subtask_text", "New sub-task"))
    node = new_node(text.strip(), priority=_default_priority(state) if priority is None else priority)

    with state.lock:
        task_list = state.list_store.get_list(list_id)
        if task_list is None:
            logger.info("add_subtask: list id=%s not found", list_id)
            return None

        items = editor.add_child(task_list.items, parent_id, node)
        if items is task_list.items:
            logger.debug("add_subtask: parent id=%s not found in list id=%s", parent_id, list_id)
            return None

        if state.list_store.save_items(list_id, items) is None:
            return None
    return node


def toggle_item(state: AppState, list_id: str, node_id: str) -> TaskList | None:
    return _apply(state, list_id, lambda f: editor.toggle_completed(f, node_id), "toggle_item")


def rename_item(state: AppState, list_id: str, node_id: str, text: str) -> TaskList | None:
    if not text or not text.strip():
        raise ValueError("text is required")
    return _apply(state, list_id, lambda f: editor.rename(f, node_id, text.strip()), "rename_item")


def set_item_priority(
    state: AppState, list_id: str, node_id: str, priority: Priority
) -> TaskList | None:
    return _apply(
        state, list_id, lambda f: editor.set_priority(f, node_id, priority), "set_item_priority"
    )


def cycle_item_priority(state: AppState, list_id: str, node_id: str) -> TaskList | None:
    return _apply(state, list_id, lambda f: editor.cycle_priority(f, node_id), "cycle_item_priority")


def set_item_due_date(
    state: AppState, list_id: str, node_id: str, due_date: float | None
) -> TaskList | None:
    return _apply(
        state, list_id, lambda f: editor.set_due_date(f, node_id, due_date), "set_item_due_date"
    )


def toggle_item_expanded(state: AppState, list_id: str, node_id: str) -> TaskList | None:
    return _apply(state, list_id, lambda f: editor.toggle_expanded(f, node_id), "toggle_item_expanded")


def delete_item(state: AppState, list_id: str, node_id: str) -> TaskList | None:
    return _apply(state, list_id, lambda f: editor.delete_node(f, node_id), "delete_item")


def preview_list(state: AppState, list_id: str, limit: int | None = None) -> list[PreviewItem]:
    """Bounded preorder summary for dashboard cards."""
    if limit is None:
        limit = int(getattr(state.settings, "preview_limit", 4))
    task_list = state.list_store.get_list(list_id)
    if task_list is None:
        return []
    return editor.preview_flatten(task_list.items, limit)

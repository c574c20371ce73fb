# src/tally_lists/todos/editor.py

"""
Pure edit operations over a task forest (a sequence of top-level TaskNode).

Every function takes a forest value and returns a new tuple; nothing is mutated.
Ancestors of an edited node are copied with updated children, everything else
is returned by identity.

A missing target id is a no-op, never an error: callers may hold a stale id
(e.g. a double click racing a delete).

Traversals use explicit stacks, so depth is not limited by the recursion limit.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Sequence
from dataclasses import replace

from .models import InvariantViolation, PreviewItem, Priority, TaskNode

logger = logging.getLogger(__name__)

Forest = tuple[TaskNode, ...]
NodePath = list[tuple[Forest, int]]

SORT_MODES = ("default", "priority", "date-asc", "date-desc")


# ---- low-level helpers ----


def _find_path(forest: Forest, target_id: str) -> NodePath | None:
    """
    Preorder search for target_id.

    Returns the (siblings, index) frames from the root level down to the
    target's own level, or None if the id is absent.
    """
    frames: list[list] = [[forest, 0]]
    while frames:
        frame = frames[-1]
        siblings, i = frame
        if i >= len(siblings):
            frames.pop()
            if frames:
                frames[-1][1] += 1
            continue

        node = siblings[i]
        if node.id == target_id:
            return [(s, j) for s, j in frames]

        if node.children:
            frames.append([node.children, 0])
        else:
            frame[1] += 1
    return None


def _rebuild(path: NodePath, replacement: TaskNode | None) -> Forest:
    """Path copy: splice replacement (or remove, if None) and copy every ancestor."""
    siblings, i = path[-1]
    if replacement is None:
        level = siblings[:i] + siblings[i + 1 :]
    else:
        level = siblings[:i] + (replacement,) + siblings[i + 1 :]

    for siblings, i in reversed(path[:-1]):
        parent = replace(siblings[i], children=level)
        level = siblings[:i] + (parent,) + siblings[i + 1 :]
    return level


# ---- core operations ----


def transform(
    forest: Sequence[TaskNode],
    target_id: str,
    fn: Callable[[TaskNode], TaskNode],
) -> Forest:
    """
    Replace the first node (preorder) whose id is target_id with fn(node).

    fn must keep id and children; if it changes them, the originals are put back.
    """
    forest = tuple(forest)
    path = _find_path(forest, target_id)
    if path is None:
        logger.debug("transform: id=%s not found, no-op", target_id)
        return forest

    siblings, i = path[-1]
    node = siblings[i]
    updated = fn(node)
    if updated.id != node.id or updated.children is not node.children:
        updated = replace(updated, id=node.id, children=node.children)
    return _rebuild(path, updated)


def delete_node(forest: Sequence[TaskNode], target_id: str) -> Forest:
    """Remove the node with target_id (at any depth) together with its subtree."""
    forest = tuple(forest)
    path = _find_path(forest, target_id)
    if path is None:
        logger.debug("delete_node: id=%s not found, no-op", target_id)
        return forest
    return _rebuild(path, None)


def add_child(forest: Sequence[TaskNode], parent_id: str, new_node: TaskNode) -> Forest:
    """
    Append new_node as the last child of parent_id and force the parent expanded.

    Unknown parent_id: forest is returned unchanged and new_node is dropped.
    """
    forest = tuple(forest)
    path = _find_path(forest, parent_id)
    if path is None:
        logger.debug("add_child: parent id=%s not found, dropping child %s", parent_id, new_node.id)
        return forest

    siblings, i = path[-1]
    parent = siblings[i]
    updated = replace(parent, expanded=True, children=parent.children + (new_node,))
    return _rebuild(path, updated)


def preview_flatten(forest: Sequence[TaskNode], limit: int) -> list[PreviewItem]:
    """
    Preorder flattening of at most `limit` nodes in total (not per level).

    Scanning stops as soon as the limit is reached.
    """
    out: list[PreviewItem] = []
    if limit <= 0:
        return out

    stack: list[tuple[Iterator[TaskNode], int]] = [(iter(forest), 0)]
    while stack:
        it, depth = stack[-1]
        node = next(it, None)
        if node is None:
            stack.pop()
            continue

        out.append(PreviewItem(id=node.id, completed=node.completed, text=node.text, depth=depth))
        if len(out) >= limit:
            break
        if node.children:
            stack.append((iter(node.children), depth + 1))
    return out


# ---- read-only helpers ----


def iter_preorder(forest: Sequence[TaskNode]) -> Iterator[tuple[TaskNode, int]]:
    """Yield (node, depth) pairs in depth-first preorder."""
    stack: list[tuple[Iterator[TaskNode], int]] = [(iter(forest), 0)]
    while stack:
        it, depth = stack[-1]
        node = next(it, None)
        if node is None:
            stack.pop()
            continue
        yield node, depth
        if node.children:
            stack.append((iter(node.children), depth + 1))


def find_node(forest: Sequence[TaskNode], target_id: str) -> TaskNode | None:
    path = _find_path(tuple(forest), target_id)
    if path is None:
        return None
    siblings, i = path[-1]
    return siblings[i]


def count_nodes(forest: Sequence[TaskNode]) -> int:
    return sum(1 for _ in iter_preorder(forest))


def check_unique_ids(forest: Sequence[TaskNode]) -> None:
    """Raise InvariantViolation on the first id seen twice anywhere in the forest."""
    seen: set[str] = set()
    for node, _depth in iter_preorder(forest):
        if node.id in seen:
            raise InvariantViolation(f"duplicate node id: {node.id}")
        seen.add(node.id)


# ---- derived edits ----


def prepend_item(forest: Sequence[TaskNode], node: TaskNode) -> Forest:
    """New top-level items go first (newest on top)."""
    return (node,) + tuple(forest)


def toggle_completed(forest: Sequence[TaskNode], target_id: str) -> Forest:
    return transform(forest, target_id, lambda n: replace(n, completed=not n.completed))


def toggle_expanded(forest: Sequence[TaskNode], target_id: str) -> Forest:
    return transform(forest, target_id, lambda n: replace(n, expanded=not n.expanded))


def rename(forest: Sequence[TaskNode], target_id: str, text: str) -> Forest:
    return transform(forest, target_id, lambda n: replace(n, text=text))


def set_priority(forest: Sequence[TaskNode], target_id: str, priority: Priority) -> Forest:
    return transform(forest, target_id, lambda n: replace(n, priority=priority))


def set_due_date(forest: Sequence[TaskNode], target_id: str, due_date: float | None) -> Forest:
    return transform(forest, target_id, lambda n: replace(n, due_date=due_date))


def next_priority(current: Priority) -> Priority:
    """Flag cycle: none/low -> medium -> high -> low."""
    if current in (Priority.NONE, Priority.LOW):
        return Priority.MEDIUM
    if current == Priority.MEDIUM:
        return Priority.HIGH
    return Priority.LOW


def cycle_priority(forest: Sequence[TaskNode], target_id: str) -> Forest:
    return transform(forest, target_id, lambda n: replace(n, priority=next_priority(n.priority)))


# ---- display ordering ----


def _priority_key(node: TaskNode) -> int:
    return -node.priority.rank


def _date_asc_key(node: TaskNode) -> tuple[bool, float]:
    return (node.due_date is None, node.due_date or 0.0)


def _date_desc_key(node: TaskNode) -> tuple[bool, float]:
    return (node.due_date is None, -(node.due_date or 0.0))


_SORT_KEYS: dict[str, Callable[[TaskNode], object]] = {
    "priority": _priority_key,
    "date-asc": _date_asc_key,
    "date-desc": _date_desc_key,
}


def sort_forest(forest: Sequence[TaskNode], mode: str = "default") -> Forest:
    """
    Stable recursive ordering for display.

    Modes:
    - default: input order (forest returned as-is)
    - priority: high, medium, low, none
    - date-asc / date-desc: by due date, nodes without a date last
    """
    forest = tuple(forest)
    if mode == "default":
        return forest
    key = _SORT_KEYS.get(mode)
    if key is None:
        raise ValueError(f"unknown sort mode: {mode!r} (expected one of {', '.join(SORT_MODES)})")

    # Post-order rebuild: frames are [nodes, index, rebuilt children].
    frames: list[list] = [[forest, 0, []]]
    while True:
        nodes, i, done = frames[-1]
        if i < len(nodes):
            node = nodes[i]
            if node.children:
                frames.append([node.children, 0, []])
            else:
                done.append(node)
                frames[-1][1] += 1
            continue

        level = tuple(sorted(done, key=key))  # type: ignore[arg-type]
        frames.pop()
        if not frames:
            return level
        parent_frame = frames[-1]
        parent = parent_frame[0][parent_frame[1]]
        parent_frame[2].append(replace(parent, children=level))
        parent_frame[1] += 1

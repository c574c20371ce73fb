# src/tally_lists/todos/codec.py

"""
Dict/JSON codec for TaskNode and TaskList.

Node shape (camelCase keys, shared with the original document store):
    {"id", "text", "completed", "expanded", "priority"?, "dueDate"?, "children": [...]}

Decoding is lenient:
- missing/unknown priority -> Priority.NONE
- "isExpanded" is accepted for "expanded" (default True)
- missing "completed" falls back to legacy "status" ("done" -> True)
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any

from .models import Priority, TaskList, TaskNode


def node_to_dict(node: TaskNode) -> dict[str, Any]:
    out: dict[str, Any] = {
        "id": node.id,
        "text": node.text,
        "completed": node.completed,
        "expanded": node.expanded,
    }
    if node.priority != Priority.NONE:
        out["priority"] = node.priority.value
    if node.due_date is not None:
        out["dueDate"] = node.due_date
    out["children"] = [node_to_dict(c) for c in node.children]
    return out


def _completed_from(raw: dict[str, Any]) -> bool:
    if "completed" in raw:
        return bool(raw["completed"])
    return str(raw.get("status", "")).strip().lower() == "done"


def _due_from(raw: dict[str, Any]) -> float | None:
    val = raw.get("dueDate")
    if val is None:
        return None
    try:
        return float(val)
    except (TypeError, ValueError):
        return None


def node_from_dict(raw: dict[str, Any]) -> TaskNode:
    if not isinstance(raw, dict):
        raise ValueError(f"task node must be an object, got {type(raw).__name__}")
    if raw.get("id") is None:
        raise ValueError("task node is missing 'id'")

    expanded = raw.get("expanded", raw.get("isExpanded", True))
    children = raw.get("children") or []
    return TaskNode(
        id=str(raw["id"]),
        text=str(raw.get("text", "")),
        completed=_completed_from(raw),
        expanded=bool(expanded),
        priority=Priority.from_raw(raw.get("priority")),
        children=tuple(node_from_dict(c) for c in children),
        due_date=_due_from(raw),
    )


def forest_to_list(forest: Sequence[TaskNode]) -> list[dict[str, Any]]:
    return [node_to_dict(n) for n in forest]


def forest_from_list(raw: Sequence[dict[str, Any]] | None) -> tuple[TaskNode, ...]:
    return tuple(node_from_dict(n) for n in (raw or []))


def dumps_forest(forest: Sequence[TaskNode]) -> str:
    return json.dumps(forest_to_list(forest), ensure_ascii=False)


def loads_forest(s: str | None) -> tuple[TaskNode, ...]:
    if not s:
        return ()
    val = json.loads(s)
    if not isinstance(val, list):
        raise ValueError("items document must be a JSON array")
    return forest_from_list(val)


def list_to_dict(task_list: TaskList) -> dict[str, Any]:
    return {
        "id": task_list.id,
        "title": task_list.title,
        "color": task_list.color,
        "items": forest_to_list(task_list.items),
        "createdAt": task_list.created_at,
        "updatedAt": task_list.updated_at,
    }


def list_from_dict(raw: dict[str, Any]) -> TaskList:
    return TaskList(
        id=str(raw["id"]),
        title=str(raw.get("title", "")),
        color=str(raw.get("color", "")),
        items=forest_from_list(raw.get("items")),
        created_at=float(raw.get("createdAt") or 0.0),
        updated_at=float(raw.get("updatedAt") or 0.0),
    )

# src/tally_lists/todos/models.py

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import StrEnum


class Priority(StrEnum):
    """
    Per-node priority flag.

    Notes:
    - NONE is never serialized; an absent "priority" key decodes to NONE.
    """

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    NONE = "none"

    @classmethod
    def from_raw(cls, raw: str | None) -> Priority:
        if not raw:
            return cls.NONE
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            return cls.NONE

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {
    Priority.HIGH: 3,
    Priority.MEDIUM: 2,
    Priority.LOW: 1,
    Priority.NONE: 0,
}


class InvariantViolation(ValueError):
    """Raised when a forest breaks a structural invariant (e.g. duplicate ids)."""


@dataclass(frozen=True, slots=True)
class TaskNode:
    id: str
    text: str
    completed: bool = False
    expanded: bool = True
    priority: Priority = Priority.NONE
    children: tuple[TaskNode, ...] = ()
    due_date: float | None = None  # epoch seconds


@dataclass(frozen=True, slots=True)
class TaskList:
    id: str
    title: str
    color: str
    items: tuple[TaskNode, ...] = field(default_factory=tuple)
    created_at: float = 0.0
    updated_at: float = 0.0


@dataclass(frozen=True, slots=True)
class PreviewItem:
    id: str
    completed: bool
    text: str
    depth: int


def new_node_id() -> str:
    return uuid.uuid4().hex


def new_node(
    text: str,
    priority: Priority = Priority.NONE,
    due_date: float | None = None,
) -> TaskNode:
    """Fresh leaf node: not completed, expanded, no children."""
    return TaskNode(
        id=new_node_id(),
        text=text,
        completed=False,
        expanded=True,
        priority=priority,
        children=(),
        due_date=due_date,
    )

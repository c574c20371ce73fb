# src/tally_lists/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The list API depends on this Protocol instead of the SQLite store,
so tests (or another backend) can swap in any object with the same methods.
"""

from collections.abc import Sequence
from typing import Protocol

from ..todos.models import TaskList, TaskNode


class ListRepo(Protocol):
    def count_lists(self) -> int: ...
    def create_list(self, *, title: str, color: str = "") -> TaskList: ...
    def get_list(self, list_id: str) -> TaskList | None: ...

    def list_lists(
            self,
            *,
            sort: str = "updated",
            search: str | None = None,
            limit: int | None = None,
    ) -> list[TaskList]: ...

    # Commit point for the tree engine: one call per user action.
    def save_items(self, list_id: str, items: Sequence[TaskNode]) -> TaskList | None: ...

    def update_list_fields(
            self,
            list_id: str,
            *,
            title: str | None = None,
            color: str | None = None,
    ) -> bool: ...

    def delete_list(self, list_id: str) -> bool: ...

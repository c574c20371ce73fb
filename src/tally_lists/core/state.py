# src/tally_lists/core/state.py

from __future__ import annotations

import threading
from dataclasses import dataclass, field

from .ports import ListRepo


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: object

    list_store: ListRepo

    # Console session: which list is open and how its items are ordered for display.
    active_list_id: str | None = None
    sort_mode: str = "default"
    # Ids shown by the last /lists call, so /open <n> refers to what the user saw.
    list_index: list[str] = field(default_factory=list)

    # Serializes load -> edit -> commit sequences on the same list.
    lock: threading.RLock = field(default_factory=threading.RLock)

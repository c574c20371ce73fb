# src/tally_lists/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from datetime import datetime
from typing import cast

from ..core.state import AppState
from ..todos import editor, list_api
from ..todos.list_store import LIST_SORTS
from ..todos.models import Priority, TaskList, TaskNode

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

SHORT_ID = 8
_PRIORITY_FLAGS = {Priority.HIGH: "!!!", Priority.MEDIUM: "!!", Priority.LOW: "!"}


class CommandRegistry:
    """Simple slash-command registry used by the console loop (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- helpers ----


def _fmt_date(ts: float) -> str:
    return datetime.fromtimestamp(ts).strftime("%Y-%m-%d")


def _parse_date(raw: str) -> float:
    """YYYY-MM-DD -> local midnight timestamp."""
    return datetime.strptime(raw, "%Y-%m-%d").timestamp()


def _active_list(state: AppState) -> TaskList | None:
    if not state.active_list_id:
        return None
    return state.list_store.get_list(state.active_list_id)


def resolve_node_id(task_list: TaskList, token: str) -> str | None:
    """Exact id, or a prefix matching exactly one node."""
    matches: list[str] = []
    for node, _depth in editor.iter_preorder(task_list.items):
        if node.id == token:
            return node.id
        if node.id.startswith(token):
            matches.append(node.id)
    return matches[0] if len(matches) == 1 else None


def _format_node(node: TaskNode, depth: int) -> str:
    mark = "[x]" if node.completed else "[ ]"
    fold = "+" if node.children and not node.expanded else " "
    line = f"{'  ' * depth}{fold}{mark} {node.id[:SHORT_ID]} {node.text}"
    flag = _PRIORITY_FLAGS.get(node.priority)
    if flag:
        line += f" {flag}"
    if node.due_date is not None:
        line += f" (due {_fmt_date(node.due_date)})"
    if node.children and not node.expanded:
        line += f" [{len(node.children)} hidden]"
    return line


def render_tree(forest: tuple[TaskNode, ...]) -> list[str]:
    """Preorder render that skips the children of collapsed nodes."""
    lines: list[str] = []
    stack = [(iter(forest), 0)]
    while stack:
        it, depth = stack[-1]
        node = next(it, None)
        if node is None:
            stack.pop()
            continue
        lines.append(_format_node(node, depth))
        if node.expanded and node.children:
            stack.append((iter(node.children), depth + 1))
    return lines


def _with_node(
    state: AppState, args: list[str], usage: str
) -> tuple[TaskList, str, list[str]] | str:
    """Common prologue: active list + resolved node id + remaining args, or an error reply."""
    task_list = _active_list(state)
    if task_list is None:
        return "No list is open. Use /lists and /open <n> first."
    if not args:
        return f"Usage: {usage}"
    node_id = resolve_node_id(task_list, args[0])
    if node_id is None:
        return f"No single item matches '{args[0]}'."
    return task_list, node_id, args[1:]


# ---- list-level commands ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_lists(state: AppState, args: list[str]) -> str:
    """
    /lists              -> most recently updated first
    /lists alpha        -> by title
    /lists [alpha] foo  -> only titles containing "foo"
    """
    sort = "updated"
    if args and args[0].lower() in LIST_SORTS:
        sort = args[0].lower()
        args = args[1:]
    search = " ".join(args) or None

    lists = state.list_store.list_lists(sort=sort, search=search)
    state.list_index = [tl.id for tl in lists]
    if not lists:
        return "No lists yet. Create one with /new <title>." if not search else "No matching lists."

    limit = int(getattr(state.settings, "preview_limit", 4))
    lines = ["Lists:"]
    for i, tl in enumerate(lists, start=1):
        total = editor.count_nodes(tl.items)
        lines.append(f"{i}. {tl.title} ({total} items)")
        for p in editor.preview_flatten(tl.items, limit):
            mark = "x" if p.completed else " "
            lines.append(f"     {'  ' * p.depth}[{mark}] {p.text}")
    return "\n".join(lines)


def cmd_new(state: AppState, args: list[str]) -> str:
    title = " ".join(args).strip()
    if not title:
        return "Usage: /new <title>"
    tl = list_api.create_list(state, title)
    state.active_list_id = tl.id
    return f"Created and opened list '{tl.title}'."


def cmd_open(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /open <n|id>"
    token = args[0]
    list_id: str | None = None
    if token.isdigit() and 1 <= int(token) <= len(state.list_index):
        list_id = state.list_index[int(token) - 1]
    else:
        ids = [tl.id for tl in state.list_store.list_lists() if tl.id.startswith(token)]
        if len(ids) == 1:
            list_id = ids[0]

    tl = state.list_store.get_list(list_id) if list_id else None
    if tl is None:
        return f"No list matches '{token}'. Use /lists to see numbers."
    state.active_list_id = tl.id
    return f"Opened '{tl.title}'.\n" + cmd_show(state, [])


def cmd_close(state: AppState, args: list[str]) -> str:
    state.active_list_id = None
    return "List closed."


def cmd_title(state: AppState, args: list[str]) -> str:
    tl = _active_list(state)
    if tl is None:
        return "No list is open."
    title = " ".join(args).strip()
    if not title:
        return "Usage: /title <new title>"
    state.list_store.update_list_fields(tl.id, title=title)
    return f"Renamed list to '{title}'."


def cmd_droplist(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    tl = _active_list(state)
    if tl is None:
        return "No list is open."
    if not args or args[0].lower() != "yes":
        return f"This deletes '{tl.title}' and all its items. Confirm with /droplist yes."
    state.list_store.delete_list(tl.id)
    state.active_list_id = None
    return f"Deleted list '{tl.title}'."


def cmd_show(state: AppState, args: list[str]) -> str:
    tl = _active_list(state)
    if tl is None:
        return "No list is open."
    forest = editor.sort_forest(tl.items, state.sort_mode)
    if args and args[0].isdigit():
        # Bounded summary instead of the full tree.
        items = editor.preview_flatten(forest, int(args[0]))
        body = [f"{'  ' * p.depth}[{'x' if p.completed else ' '}] {p.text}" for p in items]
    else:
        body = render_tree(forest)
    header = f"{tl.title} (sort: {state.sort_mode})"
    return "\n".join([header, *body]) if body else f"{header}\n  (empty)"


def cmd_sort(state: AppState, args: list[str]) -> str:
    if not args or args[0].lower() not in editor.SORT_MODES:
        return f"Usage: /sort {' | '.join(editor.SORT_MODES)}"
    state.sort_mode = args[0].lower()
    return f"Sort mode: {state.sort_mode}."


# ---- item-level commands ----


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add buy milk        -> default priority
    /add !high call bank -> explicit priority
    """
    tl = _active_list(state)
    if tl is None:
        return "No list is open. Use /new <title> or /open <n> first."

    priority: Priority | None = None
    if args and args[0].startswith("!"):
        priority = Priority.from_raw(args[0][1:])
        args = args[1:]
    text = " ".join(args).strip()
    if not text:
        return "Usage: /add [!high|!medium|!low] <text>"

    node = list_api.add_item(state, tl.id, text, priority=priority)
    if node is None:
        return "List no longer exists."
    return f"Added {node.id[:SHORT_ID]} '{node.text}'."


def cmd_sub(state: AppState, args: list[str]) -> str:
    res = _with_node(state, args, "/sub <item> [text]")
    if isinstance(res, str):
        return res
    tl, node_id, rest = res
    node = list_api.add_subtask(state, tl.id, node_id, " ".join(rest) or None)
    if node is None:
        return "Item no longer exists."
    return f"Added sub-task {node.id[:SHORT_ID]} '{node.text}'."


def cmd_toggle(state: AppState, args: list[str]) -> str:
    res = _with_node(state, args, "/toggle <item>")
    if isinstance(res, str):
        return res
    tl, node_id, _ = res
    updated = list_api.toggle_item(state, tl.id, node_id)
    node = editor.find_node(updated.items, node_id) if updated else None
    if node is None:
        return "Item no longer exists."
    return f"'{node.text}' is now {'done' if node.completed else 'open'}."


def cmd_rename(state: AppState, args: list[str]) -> str:
    res = _with_node(state, args, "/rename <item> <text>")
    if isinstance(res, str):
        return res
    tl, node_id, rest = res
    text = " ".join(rest).strip()
    if not text:
        return "Usage: /rename <item> <text>"
    list_api.rename_item(state, tl.id, node_id, text)
    return f"Renamed to '{text}'."


def cmd_prio(state: AppState, args: list[str]) -> str:
    """
    /prio <item>         -> cycle low -> medium -> high -> low
    /prio <item> <level> -> set high|medium|low|none
    """
    res = _with_node(state, args, "/prio <item> [high|medium|low|none]")
    if isinstance(res, str):
        return res
    tl, node_id, rest = res
    if rest:
        updated = list_api.set_item_priority(state, tl.id, node_id, Priority.from_raw(rest[0]))
    else:
        updated = list_api.cycle_item_priority(state, tl.id, node_id)
    node = editor.find_node(updated.items, node_id) if updated else None
    if node is None:
        return "Item no longer exists."
    return f"Priority of '{node.text}': {node.priority.value}."


def cmd_due(state: AppState, args: list[str]) -> str:
    res = _with_node(state, args, "/due <item> <YYYY-MM-DD|none>")
    if isinstance(res, str):
        return res
    tl, node_id, rest = res
    if not rest:
        return "Usage: /due <item> <YYYY-MM-DD|none>"

    due: float | None = None
    if rest[0].lower() != "none":
        try:
            due = _parse_date(rest[0])
        except ValueError:
            return f"Bad date '{rest[0]}'; expected YYYY-MM-DD."
    list_api.set_item_due_date(state, tl.id, node_id, due)
    return "Due date cleared." if due is None else f"Due {_fmt_date(due)}."


def cmd_expand(state: AppState, args: list[str]) -> str:
    res = _with_node(state, args, "/expand <item>")
    if isinstance(res, str):
        return res
    tl, node_id, _ = res
    updated = list_api.toggle_item_expanded(state, tl.id, node_id)
    node = editor.find_node(updated.items, node_id) if updated else None
    if node is None:
        return "Item no longer exists."
    return f"'{node.text}' {'expanded' if node.expanded else 'collapsed'}."


def cmd_del(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    res = _with_node(state, args, "/del <item>")
    if isinstance(res, str):
        return res
    tl, node_id, _ = res
    node = editor.find_node(tl.items, node_id)
    removed = editor.count_nodes((node,)) if node else 0
    if emit and removed > 1:
        emit(f"Deleting '{node.text}' with {removed - 1} sub-task(s)...")
    list_api.delete_item(state, tl.id, node_id)
    logger.debug("Deleted node id=%s (%d nodes) from list id=%s", node_id, removed, tl.id)
    return f"Deleted {removed} item(s)."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("lists", cmd_lists, help_text="Show lists: /lists [alpha] [search].", aliases=["ls"])
registry.register("new", cmd_new, help_text="Create and open a list: /new <title>.")
registry.register("open", cmd_open, help_text="Open a list: /open <n|id>.")
registry.register("close", cmd_close, help_text="Close the open list.")
registry.register("title", cmd_title, help_text="Rename the open list: /title <text>.")
registry.register("droplist", cmd_droplist, help_text="Delete the open list: /droplist yes.")
registry.register("show", cmd_show, help_text="Show the open list: /show [n] for a preview.")
registry.register("sort", cmd_sort, help_text="Display order: /sort default|priority|date-asc|date-desc.")
registry.register("add", cmd_add, help_text="Add an item: /add [!high|!medium|!low] <text>.")
registry.register("sub", cmd_sub, help_text="Add a sub-task: /sub <item> [text].")
registry.register("toggle", cmd_toggle, help_text="Mark done/open: /toggle <item>.", aliases=["x"])
registry.register("rename", cmd_rename, help_text="Rename an item: /rename <item> <text>.")
registry.register("prio", cmd_prio, help_text="Priority: /prio <item> [high|medium|low|none].")
registry.register("due", cmd_due, help_text="Due date: /due <item> <YYYY-MM-DD|none>.")
registry.register("expand", cmd_expand, help_text="Expand/collapse: /expand <item>.")
registry.register("del", cmd_del, help_text="Delete an item and its sub-tasks: /del <item>.", aliases=["rm"])

# tests/test_commands.py

from __future__ import annotations

from tally_lists.cli.commands import CommandRegistry, registry, resolve_node_id
from tally_lists.connectors.console_connector import handle_line
from tally_lists.todos import editor


def test_command_registry_routes_2_and_3_params(state) -> None:
    reg = CommandRegistry()
    called = {"h2": 0, "h3": 0}

    def h2(state, args):
        called["h2"] += 1
        return "h2"

    def h3(state, args, emit):
        called["h3"] += 1
        if emit is not None:
            emit("note")
        return "h3"

    reg.register("a", h2, "a")
    reg.register("b", h3, "b")

    assert reg.handle(state, "/a x") == "h2"
    assert reg.handle(state, "/b y", emit=lambda _: None) == "h3"
    assert called["h2"] == 1
    assert called["h3"] == 1


def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    assert reg.handle(state, "hello") is None
    assert "Unknown command" in (reg.handle(state, "/nope") or "")
    assert "Empty command" in (reg.handle(state, "/") or "")


def _active_items(state):
    return state.list_store.get_list(state.active_list_id).items


def test_console_session_flow(state) -> None:
    assert "Open a list first" in handle_line(state, "buy milk")

    assert "Created" in registry.handle(state, "/new Shopping")
    handle_line(state, "buy milk")
    handle_line(state, "/add !high buy bread")

    items = _active_items(state)
    assert [n.text for n in items] == ["buy bread", "buy milk"]
    bread, milk = items

    reply = registry.handle(state, f"/sub {milk.id[:10]} whole")
    assert "sub-task" in reply
    assert "done" in registry.handle(state, f"/toggle {milk.id}")
    assert "collapsed" in registry.handle(state, f"/expand {milk.id}")

    shown = registry.handle(state, "/show")
    assert "buy milk" in shown
    assert "whole" not in shown  # collapsed
    assert "[1 hidden]" in shown

    assert "high" in registry.handle(state, f"/prio {milk.id} high")
    assert "2030-01-02" in registry.handle(state, f"/due {milk.id} 2030-01-02")
    assert "Bad date" in registry.handle(state, f"/due {milk.id} tomorrow")

    notes: list[str] = []
    assert "Deleted 2" in registry.handle(state, f"/del {milk.id}", emit=notes.append)
    assert notes and "1 sub-task" in notes[0]
    assert [n.id for n in _active_items(state)] == [bread.id]


def test_lists_and_open_by_number(state) -> None:
    registry.handle(state, "/new Beta")
    registry.handle(state, "/add one")
    registry.handle(state, "/new Alpha")
    registry.handle(state, "/close")

    listing = registry.handle(state, "/lists alpha")
    assert listing.index("Alpha") < listing.index("Beta")
    assert "[ ] one" in listing

    reply = registry.handle(state, "/open 2")
    assert reply.startswith("Opened 'Beta'")
    assert "No list matches" in registry.handle(state, "/open nothing")

    assert "Renamed list" in registry.handle(state, "/title Beta two")
    assert state.list_store.get_list(state.active_list_id).title == "Beta two"


def test_sort_and_droplist(state) -> None:
    registry.handle(state, "/new Sorted")
    registry.handle(state, "/add !low later")
    registry.handle(state, "/add !high now")
    registry.handle(state, "/add !low soon")

    assert "Usage" in registry.handle(state, "/sort sideways")
    registry.handle(state, "/sort priority")
    lines = registry.handle(state, "/show").splitlines()
    assert "now" in lines[1]

    assert "Confirm" in registry.handle(state, "/droplist")
    assert "Deleted list" in registry.handle(state, "/droplist yes")
    assert state.active_list_id is None


def test_item_commands_need_open_list_and_match(state) -> None:
    assert "No list is open" in registry.handle(state, "/toggle abc")
    registry.handle(state, "/new Solo")
    assert "No single item" in registry.handle(state, "/toggle zzz")
    assert "Usage" in registry.handle(state, "/rename")


def test_resolve_node_id_prefix(state) -> None:
    registry.handle(state, "/new Prefixes")
    registry.handle(state, "/add a")
    tl = state.list_store.get_list(state.active_list_id)
    node, _ = next(editor.iter_preorder(tl.items))
    assert resolve_node_id(tl, node.id[:4]) == node.id
    assert resolve_node_id(tl, "") == node.id  # single node: empty prefix is unique

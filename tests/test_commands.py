# tests/test_commands.py

from __future__ import annotations

import json
from pathlib import Path

import pytest

from todo_keeper.cli.bootstrap import create_initial_state
from todo_keeper.cli.commands import CommandRegistry
from todo_keeper.cli.commands import registry as commands
from todo_keeper.tasks import task_api
from todo_keeper.tasks.slot_store import MemorySlotStore

DEEP_ARRAY = "[" * 100_000 + "]" * 100_000


def test_command_registry_routes_2_and_3_params(state) -> None:
    reg = CommandRegistry()
    called = {"h2": 0, "h3": 0}
    notes: list[str] = []

    def h2(state, args):
        called["h2"] += 1
        return "h2"

    def h3(state, args, emit):
        called["h3"] += 1
        if emit is not None:
            emit("note")
        return "h3"

    reg.register("a", h2, "a")
    reg.register("b", h3, "b", aliases=["bee"])

    assert reg.handle(state, "/a x") == "h2"
    assert reg.handle(state, "/BEE y", emit=notes.append) == "h3"
    assert called == {"h2": 1, "h3": 1}
    assert notes == ["note"]


def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    assert reg.handle(state, "hello") is None
    assert "Unknown command" in (reg.handle(state, "/nope") or "")
    assert "Empty command" in (reg.handle(state, "/") or "")


def test_add_toggle_delete_flow(state) -> None:
    assert commands.handle(state, "/add buy milk") == "Added #1: buy milk"
    assert commands.handle(state, "/done 1") == "Task #1 marked completed."
    assert commands.handle(state, "/stats") == "All 1 tasks completed!"
    assert commands.handle(state, "/done #1") == "Task #1 marked not completed."
    assert commands.handle(state, "/stats") == "1 of 1 tasks remaining"
    assert commands.handle(state, "/rm 1") == "Task #1 deleted."
    assert commands.handle(state, "/stats") == "0 tasks remaining"


def test_errors_become_messages(state) -> None:
    assert commands.handle(state, "/add") == "Task text cannot be empty."
    assert commands.handle(state, "/done 42") == "No task with id 42."
    assert commands.handle(state, "/rm abc") == "Usage: /rm <id>"
    assert len(state.registry) == 0


def test_clear_requires_confirmation(state) -> None:
    commands.handle(state, "/add a")
    commands.handle(state, "/add b")
    assert "/clear yes" in (commands.handle(state, "/clear") or "")
    assert len(state.registry) == 2
    assert commands.handle(state, "/clear yes") == "All tasks have been cleared."
    assert len(state.registry) == 0
    assert commands.handle(state, "/add c") == "Added #3: c"


def test_list_renders_tasks(state) -> None:
    assert commands.handle(state, "/list").startswith("No tasks yet.")
    commands.handle(state, "/add first")
    commands.handle(state, "/add second")
    commands.handle(state, "/done 2")
    listing = commands.handle(state, "/ls") or ""
    assert "[ ] #1 first" in listing
    assert "[x] #2 second" in listing
    assert listing.endswith("1 of 2 tasks remaining")


def test_export_then_import_merge(state, tmp_path: Path) -> None:
    commands.handle(state, "/add alpha")
    reply = commands.handle(state, f"/export {tmp_path}") or ""
    assert reply.startswith("Exported 1 tasks to")
    exported = next(tmp_path.glob("todos-*.json"))

    assert commands.handle(state, f"/import {exported} merge") == "Imported 1 task."
    assert [(t.id, t.text) for t in state.registry.tasks] == [(1, "alpha"), (2, "alpha")]


def test_import_errors_become_messages(state, tmp_path: Path) -> None:
    bad = tmp_path / "bad.json"
    bad.write_text('{"todos": []}', "utf-8")
    empty = tmp_path / "empty.json"
    empty.write_text('[{"bad": 1}]', "utf-8")

    assert commands.handle(state, f"/import {bad}") == "Invalid file: expected a JSON array of tasks."
    assert commands.handle(state, f"/import {empty}") == "No valid tasks found in the file."
    assert commands.handle(state, f"/import {tmp_path / 'missing.json'}").startswith("Could not read file")
    assert commands.handle(state, f"/import {bad} upsert") == "Usage: /import <path> [replace|merge]"


def test_storage_failure_is_queued_as_warning(state, store: MemorySlotStore) -> None:
    store.max_bytes = 5
    assert commands.handle(state, "/add survives in memory") == "Added #1: survives in memory"
    assert state.drain_warnings() == ["Failed to save your tasks. Storage might be full."]
    assert state.warnings == []
    assert len(state.registry) == 1


def test_bootstrap_persists_across_restarts(settings) -> None:
    first = create_initial_state(settings=settings)
    first.registry.add("persisted")

    second = create_initial_state(settings=settings)
    assert [t.text for t in second.registry.tasks] == ["persisted"]
    assert second.registry.next_id == 2


def test_bootstrap_with_corrupt_store_warns(settings) -> None:
    store = MemorySlotStore(initial={settings.storage_key: json.dumps({"unknown": True})})
    st = create_initial_state(settings=settings, store=store)
    assert st.registry.tasks == []
    assert st.drain_warnings() == ["Failed to load your saved tasks."]


def test_add_keeps_inner_whitespace(state) -> None:
    assert commands.handle(state, "/add   a   b  ") == "Added #1: a   b"
    assert commands.handle(state, "/a x\ty") == "Added #2: x\ty"
    assert [t.text for t in state.registry.tasks] == ["a   b", "x\ty"]


@pytest.mark.parametrize(("size", "shown"), [(2560, " • 3KB stored"), (1535, " • 1KB stored"), (511, "")])
def test_stats_rounds_half_kilobytes_up(state, store: MemorySlotStore, size: int, shown: str) -> None:
    store.slots[state.settings.storage_key] = "x" * size
    assert commands.handle(state, "/stats") == "0 tasks remaining" + shown


def test_bootstrap_with_deeply_nested_slot_warns(settings) -> None:
    store = MemorySlotStore(initial={settings.storage_key: DEEP_ARRAY})
    st = create_initial_state(settings=settings, store=store)
    assert st.registry.tasks == []
    assert st.drain_warnings() == ["Failed to load your saved tasks."]


def test_import_of_deeply_nested_file_is_invalid(state, tmp_path: Path) -> None:
    deep = tmp_path / "deep.json"
    deep.write_text(DEEP_ARRAY, "utf-8")
    assert commands.handle(state, f"/import {deep}") == "Invalid file: expected a JSON array of tasks."


def test_task_api_results_carry_ok_flag(state, tmp_path: Path) -> None:
    added = task_api.add_task(state, "write report")
    assert added.ok and added.message == "Added #1: write report"
    assert not task_api.add_task(state, "   ").ok
    assert not task_api.toggle_task(state, 99).ok
    assert task_api.export_tasks(state, tmp_path).ok
    assert task_api.clear_tasks(state).ok

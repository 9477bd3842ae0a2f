# src/todo_tracker/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import cast

from ..core.models import Category
from ..core.render import render_view_state
from ..core.state import AppState

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /add, ...)."""

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


def _view(state: AppState, note: str | None = None) -> str:
    rendered = render_view_state(state.view_model.state)
    return f"{note}\n{rendered}" if note else rendered


def _parse_id(args: list[str]) -> int | None:
    if not args:
        return None
    raw = args[0].lstrip("#")
    try:
        return int(raw)
    except ValueError:
        return None


def _categories_hint() -> str:
    return " | ".join(c.display_name for c in Category)


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_list(state: AppState, args: list[str]) -> str:
    return _view(state)


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add <category> <description...>
    """
    if len(args) < 2:
        return f"Usage: /add <category> <description>. Categories: {_categories_hint()}"

    try:
        category = Category.parse(args[0])
    except ValueError:
        return f"Unknown category: {args[0]}. Categories: {_categories_hint()}"

    description = " ".join(args[1:])
    try:
        state.view_model.add_task(description, category)
    except ValueError as e:
        return f"Cannot add task: {e}."
    return _view(state, "Task added.")


def cmd_done(state: AppState, args: list[str]) -> str:
    task_id = _parse_id(args)
    if task_id is None:
        return "Usage: /done <id>"
    state.view_model.toggle_completion(task_id)
    return _view(state)


def cmd_rm(state: AppState, args: list[str]) -> str:
    task_id = _parse_id(args)
    if task_id is None:
        return "Usage: /rm <id>"
    state.view_model.remove_task(task_id)
    return _view(state)


def cmd_select(state: AppState, args: list[str]) -> str:
    """
    /select <id>  -> enter selection mode on this task (like a long press)
    """
    task_id = _parse_id(args)
    if task_id is None:
        return "Usage: /select <id>"
    state.view_model.on_task_long_press(task_id)
    return _view(state)


def cmd_tap(state: AppState, args: list[str]) -> str:
    """
    /tap <id>  -> toggle the task in the selection (selection mode only)
    """
    task_id = _parse_id(args)
    if task_id is None:
        return "Usage: /tap <id>"
    if not state.view_model.state.in_selection_mode:
        return "Not in selection mode. Use /select <id> first."
    state.view_model.on_task_press(task_id)
    return _view(state)


def cmd_clear(state: AppState, args: list[str]) -> str:
    state.view_model.clear_selection()
    return _view(state)


def cmd_delete(
    state: AppState,
    args: list[str],
    emit: CommandEmitter | None = None,
) -> str:
    """
    /delete  -> delete every selected task
    """
    selected = state.view_model.state.selected_task_ids
    if not selected:
        return "Nothing selected. Use /select <id> first."
    if emit:
        emit(f"Deleting {len(selected)} task(s)...")
    state.view_model.delete_selected()
    return _view(state)


def cmd_filter(state: AppState, args: list[str]) -> str:
    """
    /filter             -> show the current view
    /filter <category>  -> add/remove a category from the filter
    """
    if not args:
        return _view(state)
    try:
        category = Category.parse(args[0])
    except ValueError:
        return f"Unknown category: {args[0]}. Categories: {_categories_hint()}"
    state.view_model.toggle_category_filter(category)
    return _view(state)


def cmd_show(state: AppState, args: list[str]) -> str:
    state.view_model.request_visualization_toggle()
    return _view(state)


def cmd_sort(state: AppState, args: list[str]) -> str:
    state.view_model.request_sort_cycle()
    return _view(state)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show the task list.", aliases=["ls"])
registry.register("add", cmd_add, help_text="Add a task: /add <category> <description>.")
registry.register("done", cmd_done, help_text="Toggle completion: /done <id>.")
registry.register("rm", cmd_rm, help_text="Remove one task: /rm <id>.")
registry.register("select", cmd_select, help_text="Start selecting: /select <id>.")
registry.register("tap", cmd_tap, help_text="Toggle a task in the selection: /tap <id>.")
registry.register("clear", cmd_clear, help_text="Cancel the selection.")
registry.register("delete", cmd_delete, help_text="Delete all selected tasks.")
registry.register("filter", cmd_filter, help_text="Toggle a category filter: /filter <category>.")
registry.register("show", cmd_show, help_text="Switch between all / not concluded tasks.")
registry.register("sort", cmd_sort, help_text="Cycle sort order: none -> A-Z -> Z-A.")

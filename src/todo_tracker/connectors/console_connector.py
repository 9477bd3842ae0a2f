# src/todo_tracker/connectors/console_connector.py

from __future__ import annotations

import logging
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.models import Status, ViewState
from ..core.render import render_view_state
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started.")
    _print_ts("[CONSOLE] Use /help for commands. Use /exit to quit.\n")
    print(render_view_state(state.view_model.state))

    def emit(text: str) -> None:
        # Immediate feedback before a command finishes.
        print(f"[{_ts_local()}] {text}", flush=True)

    last_status: list[Status] = [state.view_model.state.status]

    def on_view(view: ViewState) -> None:
        if view.status is not last_status[0]:
            logger.info("View status %s -> %s", last_status[0].value, view.status.value)
            last_status[0] = view.status

    sub = state.view_model.subscribe(on_view)
    try:
        while True:
            try:
                user_input = input(">>> ").strip()
            except EOFError:
                logger.info("Console EOF received, exiting.")
                break
            except KeyboardInterrupt:
                logger.info("Console KeyboardInterrupt, exiting.")
                print()
                break

            if not user_input:
                continue

            if user_input.lower() in ("/exit", "/quit"):
                logger.info("Console exit command received.")
                break

            if not user_input.startswith("/"):
                # "<category> <description>" without a slash is a shortcut for /add.
                user_input = f"/add {user_input}" if " " in user_input else "/help"

            try:
                response = command_registry.handle(state, user_input, emit=emit)
            except Exception:
                logger.exception("Command handler crashed.")
                response = "Internal error while handling a command."

            if response is not None:
                print(response)
                print()
    finally:
        sub.close()

    logger.info("Console connector finished.")

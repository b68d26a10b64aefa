# src/tasklist/connectors/console_connector.py

from __future__ import annotations

import logging

from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)

BANNER = "========== TO-DO LIST MANAGER =========="


def run_console_loop(state: AppState, *, prompt: str = "tasks> ") -> None:
    """
    Read slash commands until /exit, EOF or Ctrl+C.

    Nothing is saved implicitly on the way out.
    """
    logger.info("Console connector started (file=%s).", state.tasks_file_path)
    print(BANNER)
    print("Type /help for commands. Use /save to persist, /exit to quit.\n")

    def emit(text: str) -> None:
        # Immediate user-visible feedback for file operations
        print(text, flush=True)

    while True:
        try:
            user_input = input(prompt).strip()
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
            print("Commands start with '/'. Type /help for the list.")
            continue

        try:
            reply = command_registry.handle(state, user_input, emit=emit)
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."

        if reply is not None:
            print(reply)

    logger.info("Console connector finished.")

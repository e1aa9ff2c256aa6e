# vine_editor/cli.py
"""
Vine Command-Line Entry
=======================

Starts the editor:
1) Configuration & Logging: loads config and initializes logging first.
2) Core Import: imports the Vine class once logging is ready.
3) Curses Wrapper: safely initializes/tears down curses.
4) Application Run: opens the file named on the command line, if any, and
   runs the main loop.
"""

import curses
import locale
import logging
import os
import signal
import sys
from typing import Any, Optional

from vine_editor.utils.logging_config import setup_logging
from vine_editor.utils.utils import load_config


logger = logging.getLogger("vine_editor")


def main_app_runner(stdscr: "curses.window", config: dict[str, Any], file_to_open: Optional[str]) -> None:
    """Target for `curses.wrapper`: builds the editor and runs it."""
    from vine_editor.core.Vine import Vine

    # Keep ESC responsive; the prompt treats a lone ESC as cancel.
    try:
        curses.set_escdelay(25)
    except AttributeError:
        os.environ.setdefault("ESCDELAY", "25")

    editor = Vine(stdscr, config=config)

    # Ctrl-Z would otherwise suspend the full-screen UI mid-edit.
    if hasattr(signal, "SIGTSTP"):
        signal.signal(signal.SIGTSTP, signal.SIG_IGN)

    if file_to_open:
        editor.open_file(os.path.expanduser(file_to_open))

    editor.run()


def start(argv: Optional[list[str]] = None) -> int:
    """Loads configuration, sets up logging and runs the curses application."""
    argv = sys.argv if argv is None else argv

    try:
        config: dict[str, Any] = load_config()
        setup_logging(config)
    except Exception as e:
        print(f"FATAL: Could not initialize configuration or logging system: {e}", file=sys.stderr)
        return 1

    logger.info("Vine editor starting up...")
    try:
        locale.setlocale(locale.LC_ALL, "")
    except locale.Error:
        logger.warning("Could not set system locale. Character rendering may be affected.")

    file_to_open = argv[1].strip() if len(argv) > 1 and argv[1].strip() else None

    try:
        curses.wrapper(main_app_runner, config, file_to_open)
    except Exception:
        logger.critical("Unhandled exception at the top level.", exc_info=True)
        return 1

    logger.info("Vine editor shut down gracefully.")
    return 0


def main() -> None:
    sys.exit(start())

# vine_editor/utils/logging_config.py
"""vine_editor.utils.logging_config
===================================

Logging setup for the Vine editor.

Features:
    - Rotating file log for all application events (vine.log).
    - Optional console logging to stderr. Off by default, since stderr is
      the same terminal curses draws on.
    - Optional separate error log (error.log) for ERROR and CRITICAL events.
    - Optional key trace (keytrace.log) enabled via the VINE_KEYTRACE
      environment variable.
    - Safe reconfiguration: existing root handlers are replaced, so calling
      the function twice does not duplicate records.
    - Never raises; problems are reported on stderr.

Globals:
    logger: Main application logger ("vine_editor").
    KEY_LOGGER: Logger for raw key-press trace events ("vine_editor.keyevents").
"""

import logging
import logging.handlers
import os
import sys
import tempfile
from typing import Any, Optional


# ======================== Global loggers ========================
logger = logging.getLogger("vine_editor")
KEY_LOGGER = logging.getLogger("vine_editor.keyevents")

LOG_FILENAME = "vine.log"
ERROR_LOG_FILENAME = "error.log"
KEYTRACE_FILENAME = "keytrace.log"
KEYTRACE_ENV_VAR = "VINE_KEYTRACE"


def _rotating_handler(
    filename: str, max_bytes: int, backup_count: int
) -> logging.handlers.RotatingFileHandler:
    log_dir = os.path.dirname(filename)
    if log_dir and not os.path.exists(log_dir):
        os.makedirs(log_dir)
    return logging.handlers.RotatingFileHandler(
        filename, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
    )


def setup_logging(config: Optional[dict[str, Any]] = None) -> None:
    """Configures application-wide logging handlers and log levels.

    Up to four independent handlers are installed:

    1. File handler: rotating vine.log from `file_level` (default DEBUG) up.
    2. Console handler: optional stderr output at `console_level`
       (default WARNING).
    3. Error-file handler: optional rotating error.log with ERROR and
       CRITICAL only.
    4. Key-event handler: rotating keytrace.log attached to
       ``vine_editor.keyevents`` when ``VINE_KEYTRACE`` is ``1/true/yes``.

    Args:
        config (dict | None): Application configuration. Only the
            ``["logging"]`` section is read: ``file_level``,
            ``console_level``, ``log_to_console`` and ``separate_error_log``.
    """
    if config is None:
        config = {}
    logging_config = config.get("logging", {})
    log_file_level_str = str(logging_config.get("file_level", "DEBUG")).upper()
    log_file_level = getattr(logging, log_file_level_str, logging.DEBUG)

    file_formatter = logging.Formatter(
        "%(asctime)s - %(levelname)-8s - %(name)-15s - %(message)s (%(filename)s:%(lineno)d)"
    )

    log_filename = LOG_FILENAME
    file_handler = None
    try:
        file_handler = _rotating_handler(log_filename, 2 * 1024 * 1024, 5)
    except OSError as e_fh:
        log_filename = os.path.join(tempfile.gettempdir(), LOG_FILENAME)
        print(
            f"Error setting up file logger: {e_fh}. Logging to '{log_filename}'.",
            file=sys.stderr,
        )
        try:
            file_handler = _rotating_handler(log_filename, 2 * 1024 * 1024, 5)
        except OSError as e_tmp:
            print(f"File logging disabled: {e_tmp}", file=sys.stderr)
    if file_handler:
        file_handler.setFormatter(file_formatter)
        file_handler.setLevel(log_file_level)

    # Console Handler
    console_handler = None
    if logging_config.get("log_to_console", False):
        console_level_str = str(logging_config.get("console_level", "WARNING")).upper()
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(
            logging.Formatter("%(levelname)-8s - %(name)-12s - %(message)s")
        )
        console_handler.setLevel(getattr(logging, console_level_str, logging.WARNING))

    # Optional Separate Error Log File
    error_file_handler = None
    if logging_config.get("separate_error_log", False):
        try:
            error_file_handler = _rotating_handler(ERROR_LOG_FILENAME, 1 * 1024 * 1024, 3)
            error_file_handler.setFormatter(file_formatter)
            error_file_handler.setLevel(logging.ERROR)
        except OSError as e_efh:
            print(
                f"Error setting up separate error log '{ERROR_LOG_FILENAME}': {e_efh}.",
                file=sys.stderr,
            )

    root_logger = logging.getLogger()
    root_logger.handlers = []
    for handler in (file_handler, console_handler, error_file_handler):
        if handler:
            root_logger.addHandler(handler)
    root_logger.setLevel(log_file_level)

    # Key Event Logger
    KEY_LOGGER.propagate = False
    KEY_LOGGER.setLevel(logging.DEBUG)
    KEY_LOGGER.handlers = []
    KEY_LOGGER.disabled = False

    if os.environ.get(KEYTRACE_ENV_VAR, "").lower() in {"1", "true", "yes"}:
        try:
            key_trace_handler = _rotating_handler(KEYTRACE_FILENAME, 1 * 1024 * 1024, 3)
            key_trace_handler.setFormatter(logging.Formatter("%(asctime)s - %(message)s"))
            KEY_LOGGER.addHandler(key_trace_handler)
            logging.info("Key event tracing enabled, logging to '%s'.", KEYTRACE_FILENAME)
        except OSError as e_keytrace:
            logging.error(f"Failed to set up key trace logging: {e_keytrace}", exc_info=True)
            KEY_LOGGER.disabled = True
    else:
        KEY_LOGGER.addHandler(logging.NullHandler())
        KEY_LOGGER.disabled = True
        logging.debug("Key event tracing is disabled.")

    logging.info(
        "Logging setup complete. Root logger level: %s.",
        logging.getLevelName(root_logger.level),
    )
    if file_handler:
        logging.info(
            f"File logging to '{log_filename}' at level: {logging.getLevelName(file_handler.level)}."
        )
    if console_handler:
        logging.info(
            f"Console logging to stderr at level: {logging.getLevelName(console_handler.level)}."
        )

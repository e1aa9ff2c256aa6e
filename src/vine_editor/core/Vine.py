# vine_editor/core/Vine.py
"""
Vine.py
=======

The Vine editor controller.

`Vine` owns the document (`DocumentBuffer`), the view state (`EditorState`),
the drawer and the key binder, and runs the main loop. Key handlers return
True when the screen must be redrawn; failures of user-facing operations are
reported through the message bar rather than raised.
"""

import curses
import logging
import time
from typing import Any, Callable, Optional

from vine_editor.core.DocumentBuffer import DocumentBuffer
from vine_editor.core.EditorState import EditorState
from vine_editor.core.Keys import Key, ctrl_key
from vine_editor.core.Search import SearchSession
from vine_editor.core.SyntaxRegistry import SyntaxRegistry
from vine_editor.ui.DrawScreen import MESSAGE_TIMEOUT, DrawScreen
from vine_editor.ui.KeyBinder import KeyBinder
from vine_editor.utils.utils import get_editor_setting, hex_to_xterm


logger = logging.getLogger("vine_editor")

HELP_MESSAGE = "HELP: Ctrl-S = Save | Ctrl-Q = Quit | Ctrl-F = Find"
SAVE_AS_PROMPT = "Save as: {} (ESC to cancel)"
SEARCH_PROMPT = "Search: {} (Use ESC/Arrows/Enter)"
QUIT_WARNING = "[WARNING] File has unsaved changes. Press Ctrl-Q {} more times to quit."


class Vine:
    """Single-buffer terminal editor.

    Attributes:
        stdscr: The curses main window.
        config: Merged application configuration.
        buffer (DocumentBuffer): The open document.
        state (EditorState): Cursor, scroll and screen geometry.
        status_message (str): Last message for the message bar.
        status_time (float): When `status_message` was set.
        colors (dict): Colour name → curses attribute.
        drawer (DrawScreen): Renders frames.
        keybinder (KeyBinder): Maps keys to handlers.
        running (bool): Main-loop flag; cleared by `exit_editor`.
    """

    # getch timeout in the main loop; the message bar expires between keys
    POLL_TIMEOUT_MS = 100

    def __init__(self, stdscr: "curses.window", config: dict[str, Any]) -> None:
        self.stdscr = stdscr
        self.config: dict[str, Any] = config

        self.tab_size: int = get_editor_setting(config, "tab_size")
        self.quit_times: int = get_editor_setting(config, "quit_times")
        show_line_numbers: bool = get_editor_setting(config, "show_line_numbers")

        self.registry = SyntaxRegistry.from_config(config)
        self.buffer = DocumentBuffer(tab_width=self.tab_size, registry=self.registry)
        self.state = EditorState(self.buffer, show_line_numbers=show_line_numbers)

        self.status_message: str = ""
        self.status_time: float = 0.0
        self._message_on_screen: bool = False
        self.quit_times_remaining: int = self.quit_times
        self._quit_warning_issued: bool = False
        self.running: bool = False

        self.colors: dict[str, int] = {}
        self.init_colors()
        self.drawer = DrawScreen(self, self.config)
        self.keybinder = KeyBinder(self)
        self.handle_input = self.keybinder.handle_input

        self._setup_environment()
        self.handle_resize()
        self._set_status_message(HELP_MESSAGE)
        logging.info(
            f"Vine initialized: tab_size={self.tab_size}, quit_times={self.quit_times}, "
            f"{len(self.registry)} syntaxes"
        )

    def _setup_environment(self) -> None:
        """Puts the terminal into raw, no-echo mode with CR delivered as 13."""
        self.stdscr.keypad(True)
        curses.raw()
        curses.noecho()
        curses.nonl()
        try:
            curses.curs_set(1)
        except curses.error:
            logging.debug("Terminal does not support cursor visibility changes")

    def _set_status_message(self, message: str) -> None:
        self.status_message = str(message)
        self.status_time = time.time()
        self._message_on_screen = bool(self.status_message)
        logging.debug(f"Status message set to: '{self.status_message}'")

    def init_colors(self) -> None:
        """Initializes curses color pairs with graceful degradation."""
        self.colors = {}

        if not curses.has_colors() or curses.COLORS < 8:
            logging.warning("Terminal has no or limited color support (< 8). Using monochrome attributes.")
            self.colors = {
                "default": curses.A_NORMAL,
                "comment": curses.A_DIM,
                "keyword": curses.A_BOLD,
                "type": curses.A_BOLD,
                "string": curses.A_NORMAL,
                "number": curses.A_NORMAL,
                "search_match": curses.A_REVERSE,
                "line_number": curses.A_DIM,
                "status": curses.A_NORMAL,
            }
            return

        curses.start_color()
        curses.use_default_colors()

        # name: (default hex, 8-colour fallback, extra attribute)
        color_definitions = {
            "default": ("#E2E2E3", -1, curses.A_NORMAL),
            "comment": ("#7F8490", curses.COLOR_CYAN, curses.A_NORMAL),
            "keyword": ("#FC5D7C", curses.COLOR_YELLOW, curses.A_NORMAL),
            "type": ("#9ED072", curses.COLOR_GREEN, curses.A_NORMAL),
            "string": ("#A7DF78", curses.COLOR_MAGENTA, curses.A_NORMAL),
            "number": ("#B39DF3", curses.COLOR_RED, curses.A_NORMAL),
            "search_match": ("#76CCE0", curses.COLOR_BLUE, curses.A_BOLD),
            "line_number": ("#595F6F", curses.COLOR_WHITE, curses.A_DIM),
            "status": ("#E2E2E3", -1, curses.A_NORMAL),
        }

        user_colors = self.config.get("colors", {})
        can_use_256_colors = curses.COLORS >= 256
        pair_id = 1

        for name, (default_hex, default_8_color, attr) in color_definitions.items():
            if pair_id >= curses.COLOR_PAIRS:
                logging.warning(f"Ran out of color pairs at '{name}'.")
                self.colors[name] = attr
                continue

            if can_use_256_colors:
                hex_code = user_colors.get(name, default_hex)
                fg = hex_to_xterm(hex_code) if isinstance(hex_code, str) else hex_to_xterm(default_hex)
            else:
                fg = default_8_color

            try:
                curses.init_pair(pair_id, fg, -1)
                self.colors[name] = curses.color_pair(pair_id) | attr
                pair_id += 1
            except curses.error as e:
                logging.error(f"Failed to initialize curses pair for '{name}': {e}")
                self.colors[name] = attr

    # --- file handling ---
    def open_file(self, path: str) -> bool:
        """Loads `path` into the buffer; a missing file starts a new named buffer."""
        try:
            count = self.buffer.load_file(path)
        except FileNotFoundError:
            logging.info(f"File {path!r} not found; starting a new buffer")
            self._set_status_message(f"New file: {path}")
        except OSError as e:
            self._set_status_message(f"[ERROR] Can't open {path}: {e.strerror or e}")
        else:
            logging.debug(f"open_file: {count} rows from {path!r}")
        self.state.cx = self.state.cy = 0
        self.state.rowoff = self.state.coloff = 0
        return True

    def save_file(self) -> bool:
        """Writes the buffer, prompting for a name first if it has none."""
        if not self.buffer.filename:
            name = self.prompt(SAVE_AS_PROMPT)
            if name is None:
                self._set_status_message("Save aborted")
                return True
            self.buffer.filename = name
            self.buffer.select_syntax()

        try:
            written = self.buffer.save_file()
        except OSError as e:
            self._set_status_message(f"[ERROR] Can't save! I/O error: {e.strerror or e}")
            return True
        self._set_status_message(f"{written} bytes written to disk")
        return True

    # --- prompt and search ---
    def prompt(
        self,
        template: str,
        callback: Optional[Callable[[str, Any], None]] = None,
    ) -> Optional[str]:
        """Reads a line in the message bar.

        `template` is formatted with the text typed so far. `callback` runs
        after every key with the current text and the logical key.

        Returns:
            The entered text on Enter, or None when cancelled with ESC.
        """
        text = ""
        while True:
            self._set_status_message(template.format(text))
            self._render_screen(True)

            raw_key = self.keybinder.get_key_input()
            if raw_key in (curses.ERR, -1):
                continue
            if raw_key == curses.KEY_RESIZE:
                self.handle_resize()
                continue
            key = self.keybinder.to_logical_key(raw_key)

            if key in (Key.BACKSPACE, ctrl_key("x")):
                text = text[:-1]
            elif key == Key.ESC:
                self._set_status_message("")
                if callback:
                    callback(text, key)
                return None
            elif key == Key.ENTER:
                if text:
                    self._set_status_message("")
                    if callback:
                        callback(text, key)
                    return text
            elif isinstance(key, int) and 32 <= key < 127:
                text += chr(key)
            elif isinstance(key, str) and key.isprintable():
                text += key

            if callback:
                callback(text, key)

    def find(self) -> bool:
        """Incremental search; ESC puts the cursor back where it was."""
        session = SearchSession(self.state)
        query = self.prompt(SEARCH_PROMPT, lambda q, key: session.advance(q, key))
        if query is None:
            session.cancel()
        else:
            session.finish()
        return True

    # --- cursor movement ---
    def handle_up(self) -> bool:
        self.state.move_cursor(Key.ARROW_UP)
        return True

    def handle_down(self) -> bool:
        self.state.move_cursor(Key.ARROW_DOWN)
        return True

    def handle_left(self) -> bool:
        self.state.move_cursor(Key.ARROW_LEFT)
        return True

    def handle_right(self) -> bool:
        self.state.move_cursor(Key.ARROW_RIGHT)
        return True

    def handle_home(self) -> bool:
        self.state.move_line_start()
        return True

    def handle_end(self) -> bool:
        self.state.move_line_end()
        return True

    def handle_page_up(self) -> bool:
        self.state.page(Key.PAGE_UP)
        return True

    def handle_page_down(self) -> bool:
        self.state.page(Key.PAGE_DOWN)
        return True

    # --- editing ---
    def insert_text(self, text: str) -> bool:
        for ch in text:
            self.state.insert_char(ch)
        return bool(text)

    def handle_tab(self) -> bool:
        return self.insert_text("\t")

    def handle_enter(self) -> bool:
        self.state.insert_newline()
        return True

    def handle_backspace(self) -> bool:
        return self.state.delete_char()

    def handle_delete(self) -> bool:
        return self.state.delete_forward()

    def delete_row(self) -> bool:
        return self.state.delete_current_row()

    def handle_escape(self) -> bool:
        return False

    def refresh_screen(self) -> bool:
        return True

    # --- lifecycle ---
    def exit_editor(self) -> bool:
        """Stops the main loop, or warns while unsaved changes remain."""
        if self.buffer.is_dirty and self.quit_times_remaining > 0:
            self._set_status_message(QUIT_WARNING.format(self.quit_times_remaining))
            self.quit_times_remaining -= 1
            self._quit_warning_issued = True
            return True
        self.running = False
        logging.info("Main loop stop signaled.")
        return False

    def handle_resize(self) -> bool:
        """Recomputes the text area from the window size."""
        try:
            height, width = self.stdscr.getmaxyx()
            self.state.screen_rows = max(1, height - 2)
            self.state.screen_cols = max(1, width)
            logging.debug(f"Window size {width}x{height}, {self.state.screen_rows} text rows")
        except curses.error as e:
            logging.error(f"Error in handle_resize: {e}", exc_info=True)
        return True

    def run(self) -> None:
        """The main event loop of the editor."""
        logger.info("Editor main loop started.")
        self.running = True
        self.stdscr.nodelay(True)
        self.stdscr.timeout(self.POLL_TIMEOUT_MS)
        self._render_screen(True)

        while self.running:
            try:
                redraw_needed = self._process_events_and_input()
                self._render_screen(redraw_needed)
            except KeyboardInterrupt:
                logger.info("Main loop interrupted by KeyboardInterrupt.")
                self.running = False
            except Exception as e:
                logger.critical("Unhandled exception in main loop: %s", e, exc_info=True)
                self.running = False

        logger.info("Editor main loop finished.")

    def _process_events_and_input(self) -> bool:
        """Reads and dispatches at most one key.

        Returns:
            bool: True if the screen needs a redraw.
        """
        redraw_needed = False
        if self._message_on_screen and time.time() - self.status_time >= MESSAGE_TIMEOUT:
            self._message_on_screen = False
            redraw_needed = True

        key_input = self.keybinder.get_key_input()
        if key_input in (curses.ERR, -1):
            return redraw_needed

        if key_input == curses.KEY_RESIZE:
            return self.handle_resize()

        self._quit_warning_issued = False
        if self.handle_input(key_input):
            redraw_needed = True
        if not self._quit_warning_issued:
            self.quit_times_remaining = self.quit_times
        return redraw_needed

    def _render_screen(self, redraw_needed: bool) -> None:
        if not redraw_needed:
            return
        self.drawer.draw()
        self.drawer.update_display()

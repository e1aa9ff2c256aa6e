# vine_editor/ui/KeyBinder.py
"""KeyBinder.py
==================
Translates terminal key presses into Vine editor actions.

Key Features:
- Loads default keybindings and lets `[keybindings]` in the user config
  override them (a string, a `|`-separated string or a list per action).
- Maps key codes to editor action methods.
- Reads keys from curses, folding ESC-prefixed CSI/SS3 sequences into
  curses key codes.
- Converts curses codes into the core's logical `Key` events, used by the
  status-bar prompt and incremental search.

Main Methods:
1. handle_input: Dispatches one key event to an editor action or inserts it.
2. get_key_input: Reads one key or escape sequence from the terminal.
3. to_logical_key: Maps a curses code to a `vine_editor.core.Keys.Key`.
4. lookup: Reverse lookup from a key spec to the bound action name.
"""

import curses
import logging
import re
from typing import TYPE_CHECKING, Any, Callable, Optional

from wcwidth import wcwidth

from vine_editor.core.Keys import Key
from vine_editor.utils.logging_config import KEY_LOGGER

if TYPE_CHECKING:
    from vine_editor.core.Vine import Vine


# ==================== KeyBinder Class ====================
class KeyBinder:
    """Class KeyBinder
    ====================
    Owns the key → action table of a Vine editor instance.

    Attributes:
        editor (Vine): The editor whose action methods are bound.
        config: Editor configuration, including user-defined keybindings.
        stdscr: The curses window keys are read from.
        keybindings (dict): Action name → list of key codes.
        action_map (dict): Key code → bound editor method.
    """
    # Keys do NOT include the leading ESC; get_key_input() reads past it.
    ESCAPE_SEQUENCE_MAP: dict[str, str] = {
        "[A": "up", "[B": "down", "[C": "right", "[D": "left",
        "OA": "up", "OB": "down", "OC": "right", "OD": "left",
        "[H": "home", "[F": "end", "OH": "home", "OF": "end",
        "[1~": "home", "[7~": "home", "[4~": "end", "[8~": "end",
        "[3~": "delete", "[5~": "pageup", "[6~": "pagedown",
    }

    def __init__(self, editor: "Vine"):
        logging.debug("KeyBinder initialized with editor: %s", editor)
        self.editor = editor
        self.config = editor.config
        self.stdscr = editor.stdscr

        self.keybindings = self._load_keybindings()
        self.action_map = self._setup_action_map()

    def _handle_printable_character(self, key: str | int) -> bool:
        """Inserts a printable character into the buffer."""
        char_to_insert = ""
        if isinstance(key, str) and len(key) == 1:
            if wcwidth(key) > 0:
                char_to_insert = key
        elif isinstance(key, int) and 32 <= key < 127:
            try:
                char_to_insert = chr(key)
            except ValueError:
                logging.warning(f"Invalid ordinal for chr(): {key}. Cannot convert.")
                return False
            if wcwidth(char_to_insert) <= 0:
                char_to_insert = ""

        if char_to_insert:
            logging.debug(f"handle_input: inserting printable {char_to_insert!r}")
            return self.editor.insert_text(char_to_insert)
        return False

    # ---------------------- Handle Input --------------------
    def handle_input(self, key: str | int) -> bool:
        """Processes a single key event.

        Bound keys call their action; printable characters are inserted;
        anything else is ignored, as the terminal editor it models does with
        Ctrl-L and stray escapes.

        Returns:
            bool: True if the editor needs a redraw.
        """
        KEY_LOGGER.debug("key %r (type: %s)", key, type(key).__name__)

        original_status = self.editor.status_message
        redraw = False
        try:
            if key in self.action_map:
                action = self.action_map[key]
                logging.debug(f"handle_input: key {key!r} → {action.__name__}")
                if action():
                    redraw = True
            elif self._handle_printable_character(key):
                redraw = True
            else:
                logging.debug("Unhandled input: %r (type: %s)", key, type(key).__name__)

            if self.editor.status_message != original_status:
                redraw = True
            return redraw

        except Exception as e_handler:
            logging.exception("Input handler critical error. This should be investigated.")
            self.editor._set_status_message(f"Input handler error: {str(e_handler)[:50]}")
            return True

    def _load_keybindings(self) -> dict[str, list[int]]:
        """Resolves default and user keybindings to lists of key codes."""
        default_keybindings: dict[str, list[int | str]] = {
            "save_file": ["ctrl+s"],
            "quit": ["ctrl+q"],
            "find": ["ctrl+f"],
            "line_start": ["ctrl+j", "home"],
            "line_end": ["ctrl+k", "end"],
            "delete_row": ["ctrl+d"],
            "delete_forward": ["ctrl+x", "del"],
            "backspace": ["backspace", 8, 127],
            "enter": ["enter", 13],
            "tab": ["tab"],
            "page_up": ["pageup"],
            "page_down": ["pagedown"],
            "up": ["up"],
            "down": ["down"],
            "left": ["left"],
            "right": ["right"],
            "refresh": ["ctrl+l"],
            "cancel": ["esc"],
        }

        user_keybindings_config: dict[str, object] = self.config.get("keybindings", {})
        parsed_keybindings: dict[str, list[int]] = {}

        for action, default_value_spec in default_keybindings.items():
            spec: object = user_keybindings_config.get(action, default_value_spec)

            if not spec:
                logging.debug("Keybinding for action %r is disabled or empty.", action)
                continue

            specs_to_process: list[Any]
            if isinstance(spec, list):
                specs_to_process = spec
            elif isinstance(spec, str) and "|" in spec:
                specs_to_process = [s.strip() for s in spec.split("|")]
            else:
                specs_to_process = [spec]

            key_codes: list[int] = []
            for item in specs_to_process:
                try:
                    code = self._decode_keystring(item)
                except ValueError as e:
                    logging.error(
                        "Error parsing keybinding item %r for action %r: %s. Ignored.",
                        item, action, e,
                    )
                    continue
                if code not in key_codes:
                    key_codes.append(code)

            if key_codes:
                parsed_keybindings[action] = key_codes
            else:
                logging.warning("No valid key codes for action %r; it will not be bound.", action)

        logging.debug("Loaded keybindings (action -> key codes): %s", parsed_keybindings)
        return parsed_keybindings

    def _decode_keystring(self, key_input: str | int) -> int:
        """Decodes a key specification such as "ctrl+s", "pageup" or 19.

        Raises:
            ValueError: If the specification is empty or not understood.
        """
        if isinstance(key_input, bool):
            raise ValueError(f"Invalid key_input: {key_input!r}")
        if isinstance(key_input, int):
            return key_input
        if not isinstance(key_input, str):
            raise ValueError(f"Invalid key_input type: {type(key_input)}. Expected str or int.")

        s = key_input.strip().lower()
        if not s:
            raise ValueError("Key string cannot be empty.")

        named_keys_map: dict[str, int] = {
            "left": curses.KEY_LEFT,
            "right": curses.KEY_RIGHT,
            "up": curses.KEY_UP,
            "down": curses.KEY_DOWN,
            "home": curses.KEY_HOME,
            "end": curses.KEY_END,
            "pageup": curses.KEY_PPAGE,
            "pgup": curses.KEY_PPAGE,
            "pagedown": curses.KEY_NPAGE,
            "pgdn": curses.KEY_NPAGE,
            "delete": curses.KEY_DC,
            "del": curses.KEY_DC,
            "backspace": curses.KEY_BACKSPACE,
            "tab": 9,
            "enter": curses.KEY_ENTER,
            "return": curses.KEY_ENTER,
            "space": ord(" "),
            "esc": 27,
            "escape": 27,
        }
        named_keys_map.update(
            {f"f{i}": getattr(curses, f"KEY_F{i}", 264 + i) for i in range(1, 13)}
        )

        if s in named_keys_map:
            return named_keys_map[s]

        parts = [p.strip() for p in s.split("+")]
        base_key_str = parts[-1]
        modifiers = set(parts[:-1])

        if base_key_str in named_keys_map:
            base_code = named_keys_map[base_key_str]
        elif len(base_key_str) == 1:
            base_code = ord(base_key_str)
        else:
            raise ValueError(f"Unknown base key '{base_key_str}' in '{key_input}'")

        if "ctrl" in modifiers:
            modifiers.remove("ctrl")
            if len(base_key_str) == 1 and ("a" <= base_key_str <= "z" or base_key_str in "[\\]^_"):
                base_code = ord(base_key_str.upper()) & 0x1F
            else:
                raise ValueError(f"Ctrl cannot be combined with '{base_key_str}'")

        if "shift" in modifiers:
            modifiers.remove("shift")
            if len(base_key_str) == 1 and "a" <= base_key_str <= "z" and base_code == ord(base_key_str):
                base_code = ord(base_key_str.upper())

        if modifiers:
            raise ValueError(f"Unknown or unhandled modifiers {sorted(modifiers)} in '{key_input}'")

        return base_code

    def _setup_action_map(self) -> dict[int, Callable[..., Any]]:
        """Builds the key code → editor method table."""
        action_to_method_map: dict[str, Callable[..., Any]] = {
            "save_file": self.editor.save_file,
            "quit": self.editor.exit_editor,
            "find": self.editor.find,
            "line_start": self.editor.handle_home,
            "line_end": self.editor.handle_end,
            "delete_row": self.editor.delete_row,
            "delete_forward": self.editor.handle_delete,
            "backspace": self.editor.handle_backspace,
            "enter": self.editor.handle_enter,
            "tab": self.editor.handle_tab,
            "page_up": self.editor.handle_page_up,
            "page_down": self.editor.handle_page_down,
            "up": self.editor.handle_up,
            "down": self.editor.handle_down,
            "left": self.editor.handle_left,
            "right": self.editor.handle_right,
            "refresh": self.editor.refresh_screen,
            "cancel": self.editor.handle_escape,
        }

        final_key_action_map: dict[int, Callable[..., Any]] = {
            curses.KEY_RESIZE: self.editor.handle_resize,
        }

        for action_name, key_code_list in self.keybindings.items():
            method_callable = action_to_method_map.get(action_name)
            if method_callable is None:
                logging.warning(f"Action '{action_name}' in keybindings but no corresponding method. Ignored.")
                continue
            for key_code in key_code_list:
                if key_code in final_key_action_map:
                    logging.warning(
                        f"Keybinding for action '{action_name}' (key: {key_code}) overrides "
                        f"'{final_key_action_map[key_code].__name__}'."
                    )
                final_key_action_map[key_code] = method_callable

        logging.debug(
            "Final constructed action map: %s",
            {k: v.__name__ for k, v in final_key_action_map.items()},
        )
        return final_key_action_map

    def get_key_input(self, window: Optional["curses.window"] = None) -> int | str:
        """Reads a single key or ESC sequence from the terminal.

        Returns:
            int: a curses key code, 27 for a lone ESC, or curses.ERR when no
            input is available.
        """
        target = window or self.stdscr

        try:
            ch = target.getch()
            if 0xC0 <= ch <= 0xF7:
                return self._read_utf8_sequence(target, ch)
            if ch != 27:
                return ch

            seq = ""
            target.nodelay(True)
            try:
                while True:
                    nx = target.getch()
                    if nx == curses.ERR:
                        break
                    if 0 <= nx <= 255:
                        seq += chr(nx)
                    else:
                        seq += f"<{nx}>"
            finally:
                target.timeout(self.editor.POLL_TIMEOUT_MS)

            if not seq:
                return 27

            mapped = self.ESCAPE_SEQUENCE_MAP.get(seq)
            if not mapped:
                cleaned = "".join(re.findall(r"[\[O0-9;~A-Za-z]", seq))
                mapped = self.ESCAPE_SEQUENCE_MAP.get(cleaned)

            if mapped:
                code = self._decode_keystring(mapped)
                KEY_LOGGER.debug("ESC %r -> %r -> code %r", seq, mapped, code)
                return code

            logging.warning("get_key_input: unknown escape sequence: ESC + %r", seq)
            return 27

        except curses.error:
            return curses.ERR

    def _read_utf8_sequence(self, target: "curses.window", lead: int) -> int | str:
        """Collects the continuation bytes of a UTF-8 character started by `lead`."""
        if lead >= 0xF0:
            remaining = 3
        elif lead >= 0xE0:
            remaining = 2
        else:
            remaining = 1

        raw = bytearray([lead])
        for _ in range(remaining):
            nx = target.getch()
            if not 0x80 <= nx <= 0xBF:
                logging.debug(f"Broken UTF-8 sequence after lead byte {lead:#x}: {nx}")
                return curses.ERR
            raw.append(nx)
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError:
            return curses.ERR

    def to_logical_key(self, key: int | str) -> int | str:
        """Maps a curses key code to the core's logical key vocabulary."""
        logical_map: dict[int, Key] = {
            curses.KEY_LEFT: Key.ARROW_LEFT,
            curses.KEY_RIGHT: Key.ARROW_RIGHT,
            curses.KEY_UP: Key.ARROW_UP,
            curses.KEY_DOWN: Key.ARROW_DOWN,
            curses.KEY_HOME: Key.HOME,
            curses.KEY_END: Key.END,
            curses.KEY_PPAGE: Key.PAGE_UP,
            curses.KEY_NPAGE: Key.PAGE_DOWN,
            curses.KEY_DC: Key.DEL,
            curses.KEY_BACKSPACE: Key.BACKSPACE,
            curses.KEY_ENTER: Key.ENTER,
            8: Key.BACKSPACE,
            127: Key.BACKSPACE,
            10: Key.ENTER,
            13: Key.ENTER,
            27: Key.ESC,
        }
        if isinstance(key, int):
            return logical_map.get(key, key)
        return key

    def lookup(self, key_spec: str | int) -> Optional[str]:
        """Returns the action bound to `key_spec`, or None."""
        try:
            decoded_key = self._decode_keystring(key_spec)
        except ValueError:
            return None

        for action_name, key_list in self.keybindings.items():
            if decoded_key in key_list:
                return action_name
        return None

# vine_editor/utils/utils.py
"""
vine_editor.utils.utils
=======================

Configuration loading and small helpers shared by the Vine editor.

Key functionalities include:
- Automatic User Configuration: copies the bundled `config.toml` template to
  `~/.config/vine/config.toml` on first run.
- Robust Configuration Loading: starts from the embedded `DEFAULT_CONFIG`,
  then recursively merges the user's settings on top of it. A missing or
  broken user file never stops the editor from starting.
- Editor settings access with validation (`get_editor_setting`).
- Helper Utilities: dictionary deep-merge and hex → xterm-256 colour conversion.
"""

import logging
from importlib import resources
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict

import toml

if TYPE_CHECKING:
    from importlib.resources.abc import Traversable

logger = logging.getLogger("vine_editor")

# --- Constants ---
WHITE_FG_IDX = 255
CONFIG_DIR_NAME = "vine"

# Hardcoded mirror of the bundled `config.toml`; the last-resort fallback.
DEFAULT_CONFIG: Dict[str, Any] = {
    "editor": {
        "tab_size": 4,
        "quit_times": 3,
        "show_line_numbers": True,
    },
    "colors": {
        "default": "#E2E2E3",
        "comment": "#7F8490",
        "keyword": "#FC5D7C",
        "type": "#9ED072",
        "string": "#A7DF78",
        "number": "#B39DF3",
        "search_match": "#76CCE0",
        "line_number": "#595F6F",
        "status": "#E2E2E3",
    },
    "keybindings": {
        "save_file": "ctrl+s",
        "quit": "ctrl+q",
        "find": "ctrl+f",
        "line_start": "ctrl+j|home",
        "line_end": "ctrl+k|end",
        "delete_row": "ctrl+d",
        "delete_forward": ["ctrl+x", "del"],
        "refresh": "ctrl+l",
    },
    "logging": {
        "file_level": "DEBUG",
        "console_level": "WARNING",
        "log_to_console": False,
        "separate_error_log": False,
    },
    "syntax": [],
}

# (min value, default) for integer editor settings
_INT_EDITOR_SETTINGS: Dict[str, tuple[int, int]] = {
    "tab_size": (1, 4),
    "quit_times": (0, 3),
}


# --- Helper Functions ---

def get_config_template() -> "Traversable":
    """Returns the `config.toml` template shipped as package data."""
    return resources.files("vine_editor").joinpath("config.toml")


def get_user_config_dir() -> Path:
    return Path.home() / ".config" / CONFIG_DIR_NAME


def ensure_user_config_exists() -> None:
    """Creates `~/.config/vine/config.toml` from the bundled template if missing."""
    try:
        config_dir = get_user_config_dir()
        user_config_path = config_dir / "config.toml"
        config_dir.mkdir(parents=True, exist_ok=True)

        if not user_config_path.exists():
            template = get_config_template()
            if template.is_file():
                user_config_path.write_text(template.read_text(encoding="utf-8"), encoding="utf-8")
                logger.info(f"Created user config template at: {user_config_path}")
            else:
                logger.warning(f"Config template {template} not found; skipping user config.")
    except Exception as e:
        logger.critical(f"Could not create user configuration files: {e}", exc_info=True)


def load_config() -> Dict[str, Any]:
    """
    Loads and merges configurations, ensuring the application can always run.
    """
    final_config = deep_merge({}, DEFAULT_CONFIG)
    logger.debug("Loaded embedded default configuration.")

    ensure_user_config_exists()

    user_config_path = get_user_config_dir() / "config.toml"
    if user_config_path.is_file():
        try:
            user_config = toml.load(user_config_path)
            final_config = deep_merge(final_config, user_config)
            logger.info(f"Successfully loaded and merged user config from {user_config_path}")
        except (toml.TomlDecodeError, OSError) as e:
            logger.error(f"Could not parse user config '{user_config_path}': {e}. Using defaults.")

    return final_config


def get_editor_setting(config: Dict[str, Any], key: str) -> Any:
    """
    Returns a validated value from the `[editor]` section.

    Integer settings below their minimum, or of the wrong type, are replaced
    by the default with a warning. `show_line_numbers` is coerced to bool.
    """
    section = config.get("editor", {}) if isinstance(config, dict) else {}
    default = DEFAULT_CONFIG["editor"][key]
    value = section.get(key, default)

    if key in _INT_EDITOR_SETTINGS:
        minimum, fallback = _INT_EDITOR_SETTINGS[key]
        if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
            logger.warning(
                f"Invalid value {value!r} for editor.{key}; using default {fallback}."
            )
            return fallback
        return value

    return bool(value)


def deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Recursively merges the `override` dictionary into the `base` dictionary.
    """
    result = base.copy()
    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def hex_to_xterm(hex_color: str) -> int:
    """
    Converts a hexadecimal color string to the nearest xterm-256 color index.
    """
    hex_color = hex_color.lstrip("#")
    if len(hex_color) != 6:
        return WHITE_FG_IDX
    try:
        r, g, b = (int(hex_color[i:i + 2], 16) for i in (0, 2, 4))
    except ValueError:
        return WHITE_FG_IDX

    if r == g == b:
        if r < 8:
            return 16
        if r > 248:
            return 231
        return round(((r - 8) / 247) * 24) + 232

    return int(
        16
        + (36 * round(r / 255 * 5))
        + (6 * round(g / 255 * 5))
        + round(b / 255 * 5)
    )

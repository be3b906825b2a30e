"""Persistent JSON config helpers.

Stores viewing preferences: line wrapping, line numbers, status bar and the
Pygments style. Malformed or missing config falls back to defaults.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

from .highlight import DEFAULT_STYLE

logger = logging.getLogger(__name__)

APP_NAME = "lazypager"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME


@dataclass(frozen=True)
class PagerPreferences:
    wrap_long_lines: bool = False
    show_line_numbers: bool = True
    show_status_bar: bool = True
    style: str = DEFAULT_STYLE


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.debug("ignoring unreadable config %s: %s", CONFIG_PATH, exc)
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Filesystem errors are logged and otherwise ignored; failing to remember a
    preference must not break the pager.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        logger.warning("could not write config %s: %s", CONFIG_PATH, exc)


def _load_bool(data: dict[str, object], key: str, default: bool) -> bool:
    """Only explicit booleans are accepted; any other type falls back to ``default``."""
    value = data.get(key)
    return value if isinstance(value, bool) else default


def load_preferences() -> PagerPreferences:
    data = load_config()
    defaults = PagerPreferences()
    style = data.get("style")
    return PagerPreferences(
        wrap_long_lines=_load_bool(data, "wrap_long_lines", defaults.wrap_long_lines),
        show_line_numbers=_load_bool(data, "show_line_numbers", defaults.show_line_numbers),
        show_status_bar=_load_bool(data, "show_status_bar", defaults.show_status_bar),
        style=style if isinstance(style, str) and style else defaults.style,
    )


def save_wrap_long_lines(wrap_long_lines: bool) -> None:
    """Persist the line-wrapping preference as a boolean."""
    config = load_config()
    config["wrap_long_lines"] = bool(wrap_long_lines)
    save_config(config)

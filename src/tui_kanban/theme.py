"""YAML-based color scheme for TUI Kanban.

Loads colors from default_theme.yaml and optionally merges a user override
file. The resulting :class:`ColorScheme` is built once at startup and handed
to the widgets.
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass, fields
from pathlib import Path

import yaml

DEFAULT_THEME_PATH = Path(__file__).parent / "default_theme.yaml"


@dataclass(frozen=True)
class ColorScheme:
    """Rich color names used by the board widgets."""

    text_fg: str = "default"
    text_bg: str = "default"
    cursor_fg: str = "#000000"
    cursor_bg: str = "#bfdbfe"
    lane_title_fg: str = "default"
    lane_title_bg: str = "default"
    lane_active_title_fg: str = "#000000"
    lane_active_title_bg: str = "#bfdbfe"
    tag_selected_fg: str = "#000000"
    tag_selected_bg: str = "#d0d0d0"
    tag_filter_fg: str = "#fbbf24"
    status_bar_fg: str = "default"
    status_bar_bg: str = "#d0d0d0"
    error_fg: str = "#000000"
    error_bg: str = "#60a5fa"

    def style(self, fg_field: str, bg_field: str, extra: str = "") -> str:
        """Rich style string from two color attribute names."""
        fg = getattr(self, fg_field)
        bg = getattr(self, bg_field)
        return f"{extra} {fg} on {bg}".strip()

    def css_color(self, name: str) -> str | None:
        """Color for a Textual style; None leaves the widget's CSS in charge."""
        value = getattr(self, name)
        return None if value == "default" else value


# ── Internal helpers ──────────────────────────────────────────────

def _load_yaml(path: Path) -> dict:
    """Load a YAML file and return a dict (empty dict on error)."""
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return data if isinstance(data, dict) else {}
    except (OSError, yaml.YAMLError):
        return {}


def _flatten(data: dict) -> dict[str, str]:
    """Turn ``{lane: {title_fg: x}}`` into ``{lane_title_fg: x}``."""
    result: dict[str, str] = {}
    for section, values in data.items():
        if isinstance(values, dict):
            for key, val in values.items():
                result[f"{section}_{key}"] = str(val)
        else:
            result[str(section)] = str(values)
    return result


# ── Public API ────────────────────────────────────────────────────

def load_color_scheme(override_path: Path | None = None) -> ColorScheme:
    """Build the color scheme.

    1. Load ``default_theme.yaml`` bundled with the package.
    2. If *override_path* is given and exists, its keys win.
    3. Unknown keys are ignored.
    """
    data = _flatten(_load_yaml(DEFAULT_THEME_PATH))
    if override_path is not None and override_path.is_file():
        data.update(_flatten(_load_yaml(override_path)))

    known = {f.name for f in fields(ColorScheme)}
    return ColorScheme(**{k: v for k, v in data.items() if k in known})


def init_theme(dest: Path) -> Path:
    """Copy default_theme.yaml to *dest* for customization.

    Raises FileExistsError if the destination already exists.
    """
    if dest.exists():
        raise FileExistsError(str(dest))
    dest.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(DEFAULT_THEME_PATH, dest)
    return dest

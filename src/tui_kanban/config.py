"""Application configuration stored in ~/.config/tui-kanban/config.toml (tomlkit)."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import tomlkit

CONFIG_DIR = Path.home() / ".config" / "tui-kanban"
CONFIG_FILE = "config.toml"
DEFAULT_DB_PATH = Path.home() / ".local" / "share" / "tui-kanban" / "kanban.db"
DEFAULT_LOG_LEVEL = "WARNING"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class AppConfig:
    """Startup settings. Missing values fall back to the defaults below."""

    db_path: Path = DEFAULT_DB_PATH
    theme_file: Path | None = None
    log_file: Path | None = None
    log_level: str = DEFAULT_LOG_LEVEL

    @property
    def log_level_value(self) -> int:
        return logging.getLevelName(self.log_level)


def default_config_path() -> Path:
    return CONFIG_DIR / CONFIG_FILE


def _optional_path(value) -> Path | None:
    text = str(value).strip() if value is not None else ""
    return Path(text).expanduser() if text else None


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load configuration; an absent or unreadable file yields defaults."""
    path = config_path or default_config_path()
    config = AppConfig()

    if not path.exists():
        return config

    try:
        doc = tomlkit.parse(path.read_text(encoding="utf-8"))
    except Exception:
        return config

    storage = doc.get("storage", {})
    db_path = _optional_path(storage.get("path"))
    if db_path is not None:
        config.db_path = db_path

    ui = doc.get("ui", {})
    config.theme_file = _optional_path(ui.get("theme"))

    log_section = doc.get("logging", {})
    config.log_file = _optional_path(log_section.get("file"))
    level = str(log_section.get("level", DEFAULT_LOG_LEVEL)).upper()
    config.log_level = level if level in _LOG_LEVELS else DEFAULT_LOG_LEVEL

    return config


def save_config(config_path: Path, config: AppConfig) -> None:
    """Write ``config`` as TOML, creating the parent directory."""
    config_path.parent.mkdir(parents=True, exist_ok=True)

    doc = tomlkit.document()
    doc.add(tomlkit.comment("tui-kanban configuration"))

    storage = tomlkit.table()
    storage.add("path", str(config.db_path))
    doc.add("storage", storage)

    ui = tomlkit.table()
    ui.add("theme", str(config.theme_file) if config.theme_file else "")
    doc.add("ui", ui)

    log_section = tomlkit.table()
    log_section.add("file", str(config.log_file) if config.log_file else "")
    log_section.add("level", config.log_level)
    doc.add("logging", log_section)

    config_path.write_text(tomlkit.dumps(doc), encoding="utf-8")


def resolve_db_path(cli_value: str | None, config: AppConfig) -> Path:
    """The ``--db`` flag wins over the config file."""
    if cli_value:
        return Path(cli_value).expanduser()
    return config.db_path

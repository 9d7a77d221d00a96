from __future__ import annotations

from datetime import date, datetime, time
from pathlib import Path
from typing import TypeAlias
import tomllib

DEFAULT_CONFIG_NAME = "colltab.toml"
DEFAULT_LOG_LEVEL = "WARNING"

TomlScalar: TypeAlias = str | int | float | bool | None | date | datetime | time
TomlValue: TypeAlias = TomlScalar | list["TomlValue"] | dict[str, "TomlValue"]
TomlTable: TypeAlias = dict[str, TomlValue]


def _load_toml(path: Path) -> TomlTable:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError:
        return {}
    try:
        data = tomllib.loads(raw)
    except tomllib.TOMLDecodeError:
        return {}
    return data if isinstance(data, dict) else {}


def load_config(root: Path | None = None, config_path: Path | None = None) -> TomlTable:
    if config_path is None:
        base = root if root is not None else Path.cwd()
        config_path = base / DEFAULT_CONFIG_NAME
    return _load_toml(config_path)


def build_defaults(
    root: Path | None = None, config_path: Path | None = None
) -> TomlTable:
    data = load_config(root=root, config_path=config_path)
    section = data.get("build", {})
    return section if isinstance(section, dict) else {}


def build_locale(section: TomlTable | None) -> str:
    if not isinstance(section, dict):
        return ""
    value = section.get("locale")
    return value.strip() if isinstance(value, str) else ""


def build_log_level(section: TomlTable | None) -> str:
    if not isinstance(section, dict):
        return DEFAULT_LOG_LEVEL
    value = section.get("log_level")
    if not isinstance(value, str) or not value.strip():
        return DEFAULT_LOG_LEVEL
    return value.strip().upper()


def merge_payload(payload: TomlTable, defaults: TomlTable) -> TomlTable:
    merged = dict(defaults)
    for key, value in payload.items():
        if value is None:
            continue
        merged[key] = value
    return merged

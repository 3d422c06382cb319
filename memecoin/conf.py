"""Service configuration loaded from YAML with environment overrides."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml


class ConfigError(Exception):
    """The configuration could not be read, decoded or validated."""


@dataclass(frozen=True)
class ServerConfig:
    name: str
    port: str
    version: str


@dataclass(frozen=True)
class LogConfig:
    level: str


@dataclass(frozen=True)
class MySQLConfig:
    host: str
    port: int
    username: str
    password: str
    database: str
    max_idle: int
    max_open: int


@dataclass(frozen=True)
class Config:
    server: ServerConfig
    log: LogConfig
    mysql: MySQLConfig


_SECTIONS = {"server": ServerConfig, "log": LogConfig, "mysql": MySQLConfig}
_FILE_NAMES = ("config.yaml", "config.yml")


def _read_file(config_dir: Path) -> dict[str, Any]:
    for name in _FILE_NAMES:
        path = config_dir / name
        if path.is_file():
            try:
                data = yaml.safe_load(path.read_text(encoding="utf-8"))
            except (OSError, yaml.YAMLError) as exc:
                raise ConfigError(f"read config error: {exc}") from exc
            if data is None:
                return {}
            if not isinstance(data, Mapping):
                raise ConfigError("read config error: top level is not a mapping")
            return {str(key).lower(): value for key, value in data.items()}
    raise ConfigError(f'read config error: Config File "config" Not Found in "{config_dir}"')


def _field_kind(annotation: Any) -> type:
    return int if annotation in ("int", int) else str


def _convert(value: Any, kind: type, key: str) -> Any:
    if value is None:
        return kind()
    try:
        if kind is int:
            if isinstance(value, bool):
                raise TypeError("boolean is not an integer")
            return int(value)
        return str(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"marshal error: {key}: {exc}") from exc


def load_config(config_dir: str | os.PathLike = "config", environ: Mapping[str, str] | None = None) -> Config:
    """Load ``config.yaml`` from ``config_dir``; ``SECTION_KEY`` variables override it."""
    env = os.environ if environ is None else environ
    raw = _read_file(Path(config_dir))

    sections = {}
    missing = []
    for section, cls in _SECTIONS.items():
        values = raw.get(section) or {}
        if not isinstance(values, Mapping):
            raise ConfigError(f"marshal error: {section} is not a mapping")
        values = {str(key).lower(): value for key, value in values.items()}
        kwargs = {}
        for item in fields(cls):
            key = item.name.replace("_", "")
            dotted = f"{section}.{key}"
            value = env.get(dotted.replace(".", "_").upper(), values.get(key))
            converted = _convert(value, _field_kind(item.type), dotted)
            if not converted:
                missing.append(dotted)
            kwargs[item.name] = converted
        sections[section] = cls(**kwargs)

    if missing:
        raise ConfigError("validate error: required fields missing: " + ", ".join(missing))
    return Config(**sections)
"""Typed parser for config.toml sections into immutable app settings."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Mapping

from app_config_schema import (
    AppConfig,
    AppConfigurationError,
    ContainerSettings,
    UIContextSettings,
)

_PROPERTY_PATTERN = re.compile(r"&\{([^}]+)\}")


def parse_app_config(
    raw: Mapping[str, Any],
    *,
    base_dir: Path,
    source_file: str,
    environ: Mapping[str, str] | None = None,
) -> AppConfig:
    """Parse raw TOML mappings into strongly typed application settings."""
    properties = _parse_properties(
        _section(raw, "properties"),
        environ if environ is not None else os.environ,
    )
    container = _parse_container_settings(_section(raw, "container"))
    ui_context = _parse_ui_context_settings(
        _section(raw, "ui_context"),
        base_dir=base_dir,
        properties=properties,
    )

    return AppConfig(
        container=container,
        ui_context=ui_context,
        source_file=source_file,
    )


def substitute_properties(text: str, properties: Mapping[str, str], field: str) -> str:
    """Replace ``&{name}`` placeholders with property values."""

    def _lookup(match: re.Match[str]) -> str:
        name = match.group(1).strip()
        if name not in properties:
            raise AppConfigurationError(f"{field} references unknown property: {name}")
        return properties[name]

    return _PROPERTY_PATTERN.sub(_lookup, text)


def _parse_properties(
    section: Mapping[str, Any],
    environ: Mapping[str, str],
) -> dict[str, str]:
    properties = dict(environ)
    for name, value in section.items():
        properties[name] = _as_str(value, f"properties.{name}")
    return properties


def _parse_container_settings(section: Mapping[str, Any]) -> ContainerSettings:
    return ContainerSettings(
        host=_as_str(section.get("host", "127.0.0.1"), "container.host"),
        port=_as_int(section.get("port", 8080), "container.port"),
    )


def _parse_ui_context_settings(
    section: Mapping[str, Any],
    *,
    base_dir: Path,
    properties: Mapping[str, str],
) -> UIContextSettings:
    def _dir(value: Any, field: str) -> str:
        text = substitute_properties(_as_str(value, field), properties, field)
        return _resolve_path(base_dir, text)

    default_dir = _dir(section.get("default_dir", ""), "ui_context.default_dir")
    extension_dir = _dir(section.get("extension_dir", ""), "ui_context.extension_dir")

    if "allowed_dirs" in section:
        allowed_dirs = tuple(
            _dir(item, "ui_context.allowed_dirs")
            for item in _as_str_list(section["allowed_dirs"], "ui_context.allowed_dirs")
        )
    else:
        allowed_dirs = tuple(path for path in (extension_dir, default_dir) if path)

    return UIContextSettings(
        enabled=_as_bool(section.get("enabled", True), "ui_context.enabled"),
        url_context_root=_as_str(
            section.get("url_context_root", ""),
            "ui_context.url_context_root",
        ),
        default_dir=default_dir,
        extension_dir=extension_dir,
        allowed_dirs=allowed_dirs,
        excluded_prefixes=tuple(
            _as_str_list(
                section.get("excluded_prefixes", ["/system/console"]),
                "ui_context.excluded_prefixes",
            )
        ),
        index_document=(
            _as_str(section.get("index_document", "/index.html"), "ui_context.index_document")
            or "/index.html"
        ),
        mime_types=_as_str_table(section.get("mime_types", {}), "ui_context.mime_types"),
        chunk_size=_as_int(section.get("chunk_size", 1024), "ui_context.chunk_size"),
    )


def _section(root: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    raw = root.get(name, {})
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise AppConfigurationError(f"[{name}] must be a table.")
    return raw


def _as_str(value: Any, field: str) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    raise AppConfigurationError(f"{field} must be a string.")


def _as_str_list(value: Any, field: str) -> list[str]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        raise AppConfigurationError(f"{field} must be a list of strings.")
    items = [_as_str(item, field) for item in value]
    return [item for item in items if item]


def _as_str_table(value: Any, field: str) -> dict[str, str]:
    if not isinstance(value, Mapping):
        raise AppConfigurationError(f"{field} must be a table.")
    return {
        _as_str(key, field): _as_str(item, f"{field}.{key}")
        for key, item in value.items()
    }


def _as_bool(value: Any, field: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "1", "yes", "on"):
            return True
        if lowered in ("false", "0", "no", "off"):
            return False
    raise AppConfigurationError(f"{field} must be a boolean.")


def _as_int(value: Any, field: str) -> int:
    if isinstance(value, bool):
        raise AppConfigurationError(f"{field} must be an integer.")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError as error:
            raise AppConfigurationError(f"{field} must be an integer.") from error
    raise AppConfigurationError(f"{field} must be an integer.")


def _resolve_path(base_dir: Path, raw: str) -> str:
    if not raw:
        return ""
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = (base_dir / path).resolve()
    return str(path)

"""Immutable application settings parsed from config.toml."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping


class AppConfigurationError(Exception):
    """Raised when application configuration fails."""


@dataclass(frozen=True)
class ContainerSettings:
    host: str = "127.0.0.1"
    port: int = 8080


@dataclass(frozen=True)
class UIContextSettings:
    enabled: bool = True
    url_context_root: str = ""
    default_dir: str = ""
    extension_dir: str = ""
    allowed_dirs: tuple[str, ...] = ()
    excluded_prefixes: tuple[str, ...] = ("/system/console",)
    index_document: str = "/index.html"
    mime_types: Mapping[str, str] = field(default_factory=dict)
    chunk_size: int = 1024


@dataclass(frozen=True)
class AppConfig:
    container: ContainerSettings
    ui_context: UIContextSettings
    source_file: str

"""Configuration snapshot for the UI resource context."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

from .errors import UIContextConfigurationError
from .paths import DEFAULT_INDEX_DOCUMENT, prepend_slash
from .static_files import DEFAULT_CHUNK_SIZE

FELIX_WEB_CONSOLE = "/system/console"


@dataclass(frozen=True)
class UIContextConfig:
    """Immutable UI context settings, replaced wholesale on reconfiguration."""
    enabled: bool = True
    context_root: str = "/"
    default_dir: str = ""
    extension_dir: str = ""
    allowed_dirs: tuple[str, ...] = ()
    excluded_prefixes: tuple[str, ...] = (FELIX_WEB_CONSOLE,)
    index_document: str = DEFAULT_INDEX_DOCUMENT
    mime_types: Mapping[str, str] = field(default_factory=dict)
    chunk_size: int = DEFAULT_CHUNK_SIZE

    def __post_init__(self) -> None:
        object.__setattr__(self, "context_root", prepend_slash(self.context_root.strip()))
        object.__setattr__(self, "index_document", prepend_slash(self.index_document))
        object.__setattr__(self, "allowed_dirs", tuple(self.allowed_dirs))
        object.__setattr__(
            self,
            "excluded_prefixes",
            tuple(prepend_slash(prefix.strip()) for prefix in self.excluded_prefixes),
        )
        object.__setattr__(
            self,
            "mime_types",
            MappingProxyType(
                {_extension_key(ext): mime for ext, mime in dict(self.mime_types).items()}
            ),
        )

        if self.chunk_size < 1:
            raise UIContextConfigurationError(
                f"UI chunk size must be positive, got: {self.chunk_size}"
            )

        if not self.enabled:
            return

        if len(self.context_root) > 1 and self.context_root.endswith("/"):
            raise UIContextConfigurationError(
                f"UI context root must not end with '/': {self.context_root}"
            )
        if not self.default_dir:
            raise UIContextConfigurationError("UI does not specify default directory")
        if not self.extension_dir:
            raise UIContextConfigurationError("UI does not specify extension directory")
        if not self.allowed_dirs:
            raise UIContextConfigurationError("UI does not specify allowed directories")

        for allowed_dir in self.allowed_dirs:
            if not Path(allowed_dir).is_absolute():
                raise UIContextConfigurationError(
                    f"UI allowed directory must be absolute: {allowed_dir}"
                )

    @property
    def roots(self) -> tuple[str, str]:
        """Root directories in lookup order."""
        return (self.extension_dir, self.default_dir)

    @classmethod
    def from_settings(cls, settings) -> "UIContextConfig":
        context_root = settings.url_context_root.strip() if settings.url_context_root else ""
        if settings.enabled and not context_root:
            raise UIContextConfigurationError("UI does not specify contextRoot")
        return cls(
            enabled=bool(settings.enabled),
            context_root=context_root or "/",
            default_dir=settings.default_dir,
            extension_dir=settings.extension_dir,
            allowed_dirs=tuple(settings.allowed_dirs),
            excluded_prefixes=tuple(settings.excluded_prefixes),
            index_document=settings.index_document,
            mime_types=dict(settings.mime_types),
            chunk_size=settings.chunk_size,
        )


def _extension_key(extension: str) -> str:
    key = extension.strip().lower()
    return key if key.startswith(".") else f".{key}"

"""UI resource context: resolves request paths to files under configured roots."""

from .config import UIContextConfig
from .errors import (
    ResourceError,
    ResourceForbiddenError,
    ResourceNotFoundError,
    UIContextConfigurationError,
)
from .lifecycle import ContextHandle, UIContextComponent, start, stop
from .resolver import ResolvedResource, ResourceResolver

__all__ = [
    "ContextHandle",
    "ResolvedResource",
    "ResourceError",
    "ResourceForbiddenError",
    "ResourceNotFoundError",
    "ResourceResolver",
    "UIContextComponent",
    "UIContextConfig",
    "UIContextConfigurationError",
    "start",
    "stop",
]

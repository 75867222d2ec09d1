"""Web container hosting mounted request handlers."""

from .config import ContainerConfig, ContainerConfigurationError
from .service import WebContainer
from .types import HttpRequest, HttpResponse, ResponseBuffer

__all__ = [
    "ContainerConfig",
    "ContainerConfigurationError",
    "HttpRequest",
    "HttpResponse",
    "ResponseBuffer",
    "WebContainer",
]

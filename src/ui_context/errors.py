class ResourceError(Exception):
    """Base exception for UI resource resolution."""


class ResourceNotFoundError(ResourceError):
    """Raised when no configured root holds the requested file."""


class ResourceForbiddenError(ResourceError):
    """Raised when a located file lies outside every allowed directory."""


class UIContextConfigurationError(Exception):
    """Raised when UI context configuration is invalid."""

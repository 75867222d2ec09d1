"""Configuration model for the hosting web container."""

from __future__ import annotations

from dataclasses import dataclass


class ContainerConfigurationError(Exception):
    """Raised when web container configuration is invalid."""


@dataclass(frozen=True)
class ContainerConfig:
    """Validated listener settings derived from app settings."""
    host: str = "127.0.0.1"
    port: int = 8080

    def __post_init__(self) -> None:
        if not self.host.strip():
            raise ContainerConfigurationError("container.host cannot be empty")

        if not 1 <= self.port <= 65535:
            raise ContainerConfigurationError(
                f"container.port must be in [1, 65535], got: {self.port}"
            )

    @classmethod
    def from_settings(cls, settings) -> "ContainerConfig":
        return cls(host=settings.host, port=settings.port)

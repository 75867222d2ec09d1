"""Mounting and unmounting the UI context in a web container."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from web_container.types import Handler

from .config import UIContextConfig
from .resolver import ResourceResolver


class Container(Protocol):
    def register(self, context_root: str, handler: Handler) -> None: ...

    def unregister(self, context_root: str) -> None: ...


@dataclass(frozen=True)
class ContextHandle:
    context_root: str
    resolver: ResourceResolver


def start(
    container: Container,
    config: UIContextConfig,
    logger: Optional[logging.Logger] = None,
) -> Optional[ContextHandle]:
    """Mount a resolver for ``config``; returns None when the UI is disabled."""
    log = logger or logging.getLogger("ui_context")
    if not config.enabled:
        log.info("UI is disabled - not registering UI context")
        return None

    resolver = ResourceResolver(config, logger=log)
    container.register(config.context_root, resolver)
    log.debug("Registered UI context at %s", config.context_root)
    return ContextHandle(context_root=config.context_root, resolver=resolver)


def stop(container: Container, handle: Optional[ContextHandle]) -> None:
    if handle is None:
        return
    container.unregister(handle.context_root)
    logging.getLogger("ui_context").debug(
        "Unregistered UI context at %s", handle.context_root
    )


class UIContextComponent:
    """Keeps one UI context mounted across configuration changes."""

    def __init__(
        self,
        container: Container,
        logger: Optional[logging.Logger] = None,
    ):
        self._container = container
        self._logger = logger or logging.getLogger("ui_context")
        self._handle: Optional[ContextHandle] = None

    @property
    def handle(self) -> Optional[ContextHandle]:
        return self._handle

    def activate(self, config: UIContextConfig) -> None:
        self._logger.info("Activating UI context with configuration %s", config)
        self._handle = start(self._container, config, logger=self._logger)

    def modified(self, config: UIContextConfig) -> None:
        """Swap in a resolver for the new configuration.

        A context that stays on the same mount is replaced in place so requests
        never see it missing.
        """
        self._logger.info("Modifying UI context with configuration %s", config)
        previous = self._handle
        if previous is not None and (
            not config.enabled or previous.context_root != config.context_root
        ):
            stop(self._container, previous)
        self._handle = start(self._container, config, logger=self._logger)

    def deactivate(self) -> None:
        self._logger.info("Deactivating UI context")
        stop(self._container, self._handle)
        self._handle = None

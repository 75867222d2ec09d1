"""Standalone launcher for the UI resource context."""

import logging
import signal
import sys
import threading
from pathlib import Path

if __package__ is None or __package__ == "":
    sys.path.insert(0, str(Path(__file__).resolve().parent))

from app_config import AppConfigurationError, load_app_config, resolve_config_path
from ui_context import UIContextComponent, UIContextConfig, UIContextConfigurationError
from web_container import ContainerConfig, ContainerConfigurationError, WebContainer

_CONFIG_ERRORS = (
    AppConfigurationError,
    ContainerConfigurationError,
    UIContextConfigurationError,
)


def load_configs() -> tuple[ContainerConfig, UIContextConfig]:
    app_config = load_app_config(str(resolve_config_path()))
    return (
        ContainerConfig.from_settings(app_config.container),
        UIContextConfig.from_settings(app_config.ui_context),
    )


def main() -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    logger = logging.getLogger("ui_context")

    try:
        container_config, context_config = load_configs()
    except _CONFIG_ERRORS as error:
        logger.error("UI context configuration error: %s", error)
        return 1

    container = WebContainer(container_config, logger=logging.getLogger("web_container"))
    component = UIContextComponent(container, logger=logger)
    shutdown = threading.Event()

    def _request_shutdown(signum, frame) -> None:
        del frame
        logger.info("%s received, shutting down UI context", signal.Signals(signum).name)
        shutdown.set()

    signal.signal(signal.SIGINT, _request_shutdown)
    signal.signal(signal.SIGTERM, _request_shutdown)

    container.start()
    try:
        component.activate(context_config)
        while not shutdown.wait(0.5):
            pass
    finally:
        component.deactivate()
        container.stop()

    return 0


if __name__ == "__main__":
    raise SystemExit(main())

from __future__ import annotations

import asyncio
import contextlib
import logging
import threading
from typing import Mapping, Optional
from urllib.parse import unquote, urlsplit

import websockets
from websockets.asyncio.server import ServerConnection
from websockets.datastructures import Headers
from websockets.http11 import Request, Response

from .config import ContainerConfig
from .types import Handler, HttpRequest, HttpResponse

ROOT_MOUNT = "/"


class WebContainer:
    """Threaded asyncio HTTP container dispatching GETs to mounted handlers."""

    def __init__(
        self,
        config: ContainerConfig,
        logger: Optional[logging.Logger] = None,
    ):
        self._config = config
        self._logger = logger or logging.getLogger("web_container")
        self._thread: Optional[threading.Thread] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._stop_async: Optional[asyncio.Event] = None
        self._started = threading.Event()
        self._startup_error: Optional[Exception] = None
        self._mounts: dict[str, Handler] = {}
        self._mounts_lock = threading.Lock()

    @property
    def host(self) -> str:
        return self._config.host

    @property
    def port(self) -> int:
        return self._config.port

    @property
    def is_running(self) -> bool:
        return (
            self._thread is not None
            and self._thread.is_alive()
            and self._startup_error is None
        )

    def register(self, context_root: str, handler: Handler) -> None:
        """Mount ``handler`` at ``context_root``, replacing any current one."""
        mount = _normalize_mount(context_root)
        with self._mounts_lock:
            mounts = dict(self._mounts)
            mounts[mount] = handler
            self._mounts = mounts

    def unregister(self, context_root: str) -> None:
        mount = _normalize_mount(context_root)
        with self._mounts_lock:
            mounts = dict(self._mounts)
            mounts.pop(mount, None)
            self._mounts = mounts

    def mounts(self) -> tuple[str, ...]:
        return tuple(self._mounts)

    def dispatch(
        self,
        raw_path: str,
        headers: Optional[Mapping[str, str]] = None,
    ) -> HttpResponse:
        """Route a raw request path to the longest matching mount.

        A handler returning None leaves the request to shorter mounts; the
        container answers 404 when nothing takes it.
        """
        path = unquote(urlsplit(raw_path).path) or "/"
        mounts = self._mounts
        for mount in sorted(mounts, key=len, reverse=True):
            request = _route(mount, path, headers or {})
            if request is None:
                continue
            response = mounts[mount](request)
            if response is not None:
                return response

        body = b"no handler for path\n"
        return HttpResponse(
            404,
            "Not Found",
            {
                "Content-Type": "text/plain; charset=utf-8",
                "Content-Length": str(len(body)),
            },
            body,
        )

    def start(self, timeout_seconds: float = 5.0) -> None:
        if self.is_running:
            self._logger.warning("Web container is already running")
            return

        self._startup_error = None
        self._started.clear()
        self._thread = threading.Thread(
            target=self._run_loop,
            daemon=True,
            name="web-container",
        )
        self._thread.start()

        if not self._started.wait(timeout_seconds):
            raise RuntimeError(
                f"Web container did not start within {timeout_seconds:.1f}s"
            )

        if self._startup_error is not None:
            raise RuntimeError(f"Web container startup failed: {self._startup_error}")

    def stop(self, timeout_seconds: float = 5.0) -> None:
        if self._thread is None:
            return

        if self._loop and self._stop_async:
            self._loop.call_soon_threadsafe(self._stop_async.set)

        self._thread.join(timeout=timeout_seconds)
        if self._thread.is_alive():
            self._logger.error(
                "Web container thread did not stop within %.1fs",
                timeout_seconds,
            )

        self._thread = None
        self._loop = None
        self._stop_async = None

    def _run_loop(self) -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        self._loop = loop
        self._stop_async = asyncio.Event()

        try:
            loop.run_until_complete(self._serve())
        except Exception as error:
            self._startup_error = error
            self._logger.error("Web container failed: %s", error, exc_info=True)
            self._started.set()
        finally:
            _drain(loop)
            loop.close()

    async def _serve(self) -> None:
        async with websockets.serve(
            self._handler,
            host=self._config.host,
            port=self._config.port,
            process_request=self._process_request,
            logger=self._logger,
        ):
            self._logger.info(
                "Web container running at http://%s:%d",
                self._config.host,
                self._config.port,
            )
            self._started.set()
            await self._stop_async.wait()

    async def _handler(self, websocket: ServerConnection) -> None:
        # Every request is answered in _process_request.
        await websocket.close(code=1008, reason="No websocket endpoints")

    async def _process_request(
        self,
        connection: ServerConnection,
        request: Request,
    ) -> Response:
        del connection
        headers = {name: value for name, value in request.headers.raw_items()}
        # File reads block, keep them off the event loop.
        response = await asyncio.to_thread(self.dispatch, request.path, headers)
        return _to_websockets_response(response)


def _drain(loop: asyncio.AbstractEventLoop) -> None:
    pending = asyncio.all_tasks(loop)
    if not pending:
        return
    for task in pending:
        task.cancel()
    with contextlib.suppress(Exception):
        loop.run_until_complete(asyncio.gather(*pending, return_exceptions=True))


def _normalize_mount(context_root: str) -> str:
    return "/" + context_root.strip().strip("/")


def _route(
    mount: str,
    path: str,
    headers: Mapping[str, str],
) -> Optional[HttpRequest]:
    if mount == ROOT_MOUNT:
        return HttpRequest(path=path, servlet_path=path, path_info=None, headers=headers)

    if path == mount:
        return HttpRequest(path=path, servlet_path=mount, path_info=None, headers=headers)

    if path.startswith(mount + "/"):
        return HttpRequest(
            path=path,
            servlet_path=mount,
            path_info=path[len(mount):],
            headers=headers,
        )
    return None


def _to_websockets_response(response: HttpResponse) -> Response:
    headers = Headers()
    for name, value in response.headers.items():
        headers[name] = value
    return Response(response.status, response.reason, headers, response.body)

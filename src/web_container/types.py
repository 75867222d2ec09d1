"""Request and response values exchanged between the container and handlers."""

from __future__ import annotations

import io
from dataclasses import dataclass, field
from typing import Callable, Mapping, Optional


@dataclass(frozen=True)
class HttpRequest:
    """A GET request routed to a mounted handler.

    ``servlet_path`` is the mount point that matched (the full path for a root
    mount) and ``path_info`` the remainder, or None when nothing follows.
    """
    path: str
    servlet_path: str
    path_info: Optional[str] = None
    headers: Mapping[str, str] = field(default_factory=dict)

    def header(self, name: str) -> Optional[str]:
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return None


@dataclass
class HttpResponse:
    status: int
    reason: str
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""


class ResponseBuffer(io.BytesIO):
    """Response output stream whose payload survives ``close()``."""

    def __init__(self) -> None:
        super().__init__()
        self._payload = b""

    @property
    def payload(self) -> bytes:
        if self.closed:
            return self._payload
        return self.getvalue()

    def close(self) -> None:
        if not self.closed:
            self._payload = self.getvalue()
        super().close()


Handler = Callable[[HttpRequest], Optional[HttpResponse]]

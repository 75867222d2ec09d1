"""Request handling for the UI resource context."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from web_container.types import HttpRequest, HttpResponse, ResponseBuffer

from .config import UIContextConfig
from .errors import ResourceForbiddenError, ResourceNotFoundError
from .guard import is_allowed_path
from .locator import locate_resource
from .paths import is_excluded, needs_redirect, normalize_target, request_target
from .static_files import (
    content_type_header,
    copy_resource,
    format_http_date,
    guess_content_type,
    last_modified,
    parse_http_date,
    resource_modified,
)

FORBIDDEN_MESSAGE = b"Access to the requested resource is forbidden.\n"
NOT_FOUND_MESSAGE = b"not found\n"


@dataclass(frozen=True)
class ResolvedResource:
    path: Path
    last_modified: float
    content_type: Optional[str]


class ResourceResolver:
    """Serves UI assets for one immutable configuration snapshot."""

    def __init__(
        self,
        config: UIContextConfig,
        logger: Optional[logging.Logger] = None,
    ):
        self._config = config
        self._logger = logger or logging.getLogger("ui_context")

    @property
    def config(self) -> UIContextConfig:
        return self._config

    def __call__(self, request: HttpRequest) -> Optional[HttpResponse]:
        return self.handle(request)

    def resolve(self, target: str) -> ResolvedResource:
        """Locate ``target`` in the configured roots and check the allow-list.

        Raises:
            ResourceNotFoundError: no root holds a regular file for the target.
            ResourceForbiddenError: the located file is outside every allowed
                directory.
        """
        located = locate_resource(self._config.roots, target)
        if located is None:
            raise ResourceNotFoundError(target)

        if not is_allowed_path(located, self._config.allowed_dirs):
            raise ResourceForbiddenError(target)

        return ResolvedResource(
            path=located,
            last_modified=last_modified(located),
            content_type=guess_content_type(target, self._config.mime_types),
        )

    def handle(self, request: HttpRequest) -> Optional[HttpResponse]:
        """Answer ``request``, or return None when it is not for this context."""
        self._logger.debug("GET call on %s", request.path)

        target = request_target(
            self._config.context_root,
            request.servlet_path,
            request.path_info,
        )
        if needs_redirect(target):
            return _redirect(request.servlet_path.rstrip("/") + "/")

        target = normalize_target(target, self._config.index_document)
        if is_excluded(target, self._config.excluded_prefixes):
            return None

        headers: dict[str, str] = {}
        # The entry page is the version discovery point for every other asset.
        if target == self._config.index_document:
            headers["Cache-Control"] = "no-cache"

        try:
            resource = self.resolve(target)
        except ResourceForbiddenError:
            self._logger.warning("Forbidden UI resource request: %s", target)
            return _text_response(403, "Forbidden", FORBIDDEN_MESSAGE, headers)
        except ResourceNotFoundError:
            self._logger.debug("UI resource not found: %s", target)
            return _text_response(404, "Not Found", NOT_FOUND_MESSAGE, headers)

        return self._deliver(resource, request, headers)

    def _deliver(
        self,
        resource: ResolvedResource,
        request: HttpRequest,
        headers: dict[str, str],
    ) -> HttpResponse:
        if resource.content_type is not None:
            headers["Content-Type"] = content_type_header(resource.content_type)

        if resource.last_modified:
            headers["Last-Modified"] = format_http_date(resource.last_modified)

        modified_since = parse_http_date(request.header("If-Modified-Since"))
        if not resource_modified(resource.last_modified, modified_since):
            return HttpResponse(304, "Not Modified", headers)

        output = ResponseBuffer()
        length = copy_resource(resource.path, output, self._config.chunk_size)
        headers["Content-Length"] = str(length)
        return HttpResponse(200, "OK", headers, output.payload)


def _redirect(location: str) -> HttpResponse:
    return HttpResponse(
        302,
        "Found",
        {"Location": location, "Content-Length": "0"},
    )


def _text_response(
    status: int,
    reason: str,
    body: bytes,
    headers: dict[str, str],
) -> HttpResponse:
    headers["Content-Type"] = "text/plain; charset=utf-8"
    headers["Content-Length"] = str(len(body))
    return HttpResponse(status, reason, headers, body)

"""Pure string handling for request targets inside the UI context."""

from __future__ import annotations

from typing import Iterable, Optional

ROOT_CONTEXT = "/"
DEFAULT_INDEX_DOCUMENT = "/index.html"


def prepend_slash(path: str) -> str:
    return "/" + path.lstrip("/")


def request_target(
    context_root: str,
    servlet_path: str,
    path_info: Optional[str],
) -> Optional[str]:
    """Return the part of the request path the context resolves.

    A context mounted at the root sees the whole path as its servlet path and
    never gets path info, so the servlet path is the target there.
    """
    if context_root == ROOT_CONTEXT:
        return servlet_path
    return path_info


def needs_redirect(target: Optional[str]) -> bool:
    return not target


def normalize_target(target: str, index_document: str = DEFAULT_INDEX_DOCUMENT) -> str:
    normalized = prepend_slash(target)
    if normalized == "/":
        return index_document
    return normalized


def is_excluded(target: str, excluded_prefixes: Iterable[str]) -> bool:
    return any(target.startswith(prefix) for prefix in excluded_prefixes)

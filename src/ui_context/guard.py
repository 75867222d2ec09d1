"""Second containment check against the sanctioned directory allow-list."""

from __future__ import annotations

from typing import Iterable

from .locator import PathLike, canonical_path, is_contained


def is_allowed_path(path: PathLike, allowed_dirs: Iterable[PathLike]) -> bool:
    """Check ``path`` lies under at least one allowed directory.

    The path is canonicalized here again instead of trusting the locator's
    result.
    """
    canonical = canonical_path(path)
    if canonical is None:
        return False

    for allowed_dir in allowed_dirs:
        canonical_dir = canonical_path(allowed_dir)
        if canonical_dir is not None and is_contained(canonical, canonical_dir):
            return True
    return False

"""Locate request targets under an ordered list of root directories."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence, Union

PathLike = Union[str, Path]


def canonical_path(path: PathLike) -> Optional[Path]:
    """Return the absolute, symlink-resolved form of ``path`` or None."""
    try:
        return Path(path).resolve()
    except (OSError, RuntimeError, ValueError):
        return None


def is_contained(path: Path, root: Path) -> bool:
    return path == root or root in path.parents


def is_valid_file(candidate: PathLike, root: PathLike) -> bool:
    canonical = canonical_path(candidate)
    canonical_root = canonical_path(root)
    if canonical is None or canonical_root is None:
        return False

    if not is_contained(canonical, canonical_root):
        return False

    try:
        return canonical.is_file()
    except (OSError, ValueError):
        return False


def locate_resource(roots: Sequence[PathLike], target: str) -> Optional[Path]:
    """Return the canonical path of the first root holding ``target``.

    Roots are tried in order, so an earlier root overrides a later one for the
    same relative path.
    """
    relative = target.lstrip("/")
    for root in roots:
        candidate = Path(root) / relative
        if is_valid_file(candidate, root):
            return canonical_path(candidate)
    return None

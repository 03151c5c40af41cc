"""Source-tree root marker rewriting for report paths."""

from __future__ import annotations

from enum import Enum
from typing import Optional, Tuple

from plogconverter.diagnostics.models import SOURCE_TREE_ROOT_MARKER, SourcePosition

_SEPARATORS = "\\/"


class PathMode(str, Enum):
    ABSOLUTE = "absolute"
    RELATIVE = "relative"

    @classmethod
    def parse(cls, value: str) -> "PathMode":
        wanted = value.strip().lower()
        # accept the converter's historical spellings as well
        aliases = {"toabsolute": cls.ABSOLUTE, "torelative": cls.RELATIVE}
        if wanted in aliases:
            return aliases[wanted]
        return cls(wanted)


def normalize_root(src_root: Optional[str]) -> str:
    """Strip quotes and trailing separators; ``""`` when no root is set."""
    if not src_root or not src_root.strip():
        return ""
    return src_root.strip().strip('"').rstrip(_SEPARATORS)


def remove_marker(path: str) -> str:
    return path.replace(SOURCE_TREE_ROOT_MARKER, "")


def to_absolute(path: str, root: str) -> str:
    """Replace a leading root marker with *root*."""
    if path.startswith(SOURCE_TREE_ROOT_MARKER):
        return root + path[len(SOURCE_TREE_ROOT_MARKER):]
    return path


def to_relative(path: str, root: str) -> str:
    """Replace a leading *root* (case-insensitive, on a separator boundary) with the marker."""
    if not root or len(path) < len(root):
        return path
    if path[: len(root)].casefold() != root.casefold():
        return path
    rest = path[len(root):]
    if rest and rest[0] not in _SEPARATORS:
        return path
    return SOURCE_TREE_ROOT_MARKER + rest


def convert_path(
    path: str,
    src_root: Optional[str],
    mode: PathMode = PathMode.ABSOLUTE,
    *,
    keep_marker: bool = False,
) -> str:
    """Rewrite *path* for output.

    Without a source root the marker is kept (``keep_marker``) or stripped.
    In absolute mode a leading marker becomes the root. In relative mode a
    leading root becomes the marker; with ``keep_marker=False`` the result is
    a plain relative path with the marker and leading separators removed.
    """
    root = normalize_root(src_root)
    if not root:
        return path if keep_marker else remove_marker(path)
    if mode is PathMode.ABSOLUTE:
        return to_absolute(path, root)
    relative = to_relative(path, root)
    if keep_marker or not relative.startswith(SOURCE_TREE_ROOT_MARKER):
        return relative
    return remove_marker(relative).lstrip(_SEPARATORS)


def convert_positions(
    positions: Tuple[SourcePosition, ...],
    src_root: Optional[str],
    mode: PathMode = PathMode.ABSOLUTE,
) -> Tuple[SourcePosition, ...]:
    if not normalize_root(src_root):
        return positions
    return tuple(
        SourcePosition(convert_path(p.file_path, src_root, mode, keep_marker=True), p.line_number)
        for p in positions
    )

"""I/O helpers: resolve spreadsheet sources, write page artifacts."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Union

from sheet_catalog.errors import PathResolutionError

Source = Union[bytes, bytearray, memoryview, str, os.PathLike]

# ── Loading ──────────────────────────────────────────────────────


def is_remote(source: object) -> bool:
    """Return True if *source* is an ``http(s)://`` URL string."""
    return isinstance(source, str) and source.lower().startswith(("http://", "https://"))


def resolve_source(source: Source) -> bytes:
    """Return the full contents of *source* as bytes.

    Byte buffers are returned as an immutable copy. Paths are made absolute
    and read fully into memory.

    Raises
    ------
    PathResolutionError
        If the path cannot be made absolute, does not exist, is not a file,
        or cannot be read.
    """
    if isinstance(source, (bytes, bytearray, memoryview)):
        return bytes(source)
    if is_remote(source):
        raise PathResolutionError(f"Remote source must be fetched first: {source}")

    try:
        path = Path(source).expanduser().absolute()
    except (TypeError, ValueError, OSError, RuntimeError) as exc:
        raise PathResolutionError(f"Cannot resolve source path {source!r}: {exc}") from exc

    if not path.exists():
        raise PathResolutionError(f"Input file not found: {path}")
    if not path.is_file():
        raise PathResolutionError(f"Input path is not a file: {path}")
    try:
        return path.read_bytes()
    except OSError as exc:
        raise PathResolutionError(f"Cannot read {path}: {exc}") from exc


# ── Writing ──────────────────────────────────────────────────────


def write_text(path: Path, text: str) -> Path:
    """Write *text* to *path* atomically (temp file, then replace)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    tmp_path.write_text(text, encoding="utf-8")
    tmp_path.replace(path)
    return path

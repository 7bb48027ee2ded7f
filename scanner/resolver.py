"""Path resolution utilities for mapping references to actual files."""

import logging
import os
from pathlib import Path
from typing import Dict, Optional, Sequence, Union

from graph.model import FileInfo
from .errors import InvalidInputError

logger = logging.getLogger(__name__)


# Tried in this order when a reference omits its extension
DEFAULT_EXTENSIONS = (
    ".vue", ".js", ".ts", ".jsx", ".tsx",
    ".css", ".scss", ".sass", ".less",
)

# Files the tree builder descends into; ES module and CommonJS scripts are
# parsed but never probed for
SUPPORTED_EXTENSIONS = frozenset(DEFAULT_EXTENSIONS) | {".mjs", ".cjs"}

_SEPARATORS = ("/", "\\")


def resolve_path(path: Union[str, Path, None], base_dir: Union[str, Path, None] = None) -> Path:
    """
    Resolve a path string to an absolute, normalized path.

    Symlinks are not followed; only ``.`` and ``..`` segments are collapsed.

    Args:
        path: Absolute or relative path.
        base_dir: Directory that relative paths are joined to
                  (default: current working directory).

    Returns:
        Absolute normalized Path.

    Raises:
        InvalidInputError: If path is empty or None.
    """
    if path is None or str(path) == "":
        raise InvalidInputError("File path must not be empty")

    raw = os.fspath(path)
    if os.path.isabs(raw):
        return Path(os.path.normpath(raw))

    base = os.path.abspath(os.fspath(base_dir) if base_dir else os.getcwd())
    return Path(os.path.normpath(os.path.join(base, raw)))


def resolve_alias(
    reference: Union[str, Path],
    alias_map: Optional[Dict[str, str]],
    base_dir: Union[str, Path, None] = None,
) -> Union[Path, str]:
    """
    Substitute a configured alias prefix in a reference.

    The longest alias wins, and an alias only matches when the reference
    continues with a path separator or ends right after the alias, so ``@``
    matches ``@/foo`` and ``@`` but never ``@foo``.

    Args:
        reference: Raw reference found in source text.
        alias_map: Mapping of alias prefix to target directory.
        base_dir: Directory that relative alias targets are resolved against.

    Returns:
        Absolute Path if an alias matched or the reference was already
        absolute, otherwise the reference unchanged.
    """
    if not reference:
        return reference

    text = os.fspath(reference)

    for alias in sorted(alias_map or {}, key=len, reverse=True):
        if not alias or not text.startswith(alias):
            continue
        rest = text[len(alias):]
        if rest and rest[0] not in _SEPARATORS:
            continue
        target = os.path.join(os.fspath(alias_map[alias]), rest.lstrip("/\\"))
        resolved = resolve_path(target, base_dir)
        logger.debug("Alias %r: %s -> %s", alias, text, resolved)
        return resolved

    if os.path.isabs(text):
        return Path(os.path.normpath(text))

    return reference


def resolve_with_extensions(
    path: Union[str, Path],
    extensions: Sequence[str] = DEFAULT_EXTENSIONS,
) -> Optional[Path]:
    """
    Find the file a path refers to, trying implicit extensions.

    Tries, in order:
    1. The path itself, if it has an extension and exists.
    2. The path with each candidate extension appended.
    3. ``index<ext>`` inside the path, if it is a directory.
    4. The path itself, if it is an extensionless regular file.

    Args:
        path: Absolute path, possibly without extension.
        extensions: Candidate extensions in priority order.

    Returns:
        The matching Path, or None if nothing exists.
    """
    path = Path(path)

    if path.suffix and path.exists():
        return path

    for ext in extensions:
        candidate = Path(f"{path}{ext}")
        if candidate.is_file():
            return candidate

    if path.is_dir():
        for ext in extensions:
            index_file = path / f"index{ext}"
            if index_file.is_file():
                return index_file
    elif path.is_file():
        return path

    return None


def check_file(path: Union[str, Path]) -> FileInfo:
    """
    Stat a path without raising.

    Args:
        path: Path to inspect.

    Returns:
        FileInfo describing the path, with ``error`` set if stat failed.
    """
    try:
        stats = os.stat(path)
    except OSError as e:
        return FileInfo(exists=False, error=e.strerror or str(e))

    path = Path(path)
    return FileInfo(
        exists=True,
        is_file=path.is_file(),
        is_dir=path.is_dir(),
        size=stats.st_size,
        mtime=stats.st_mtime,
    )


def is_supported_file(path: Union[str, Path]) -> bool:
    """Check if the tree builder can look inside a file of this type."""
    return Path(path).suffix.lower() in SUPPORTED_EXTENSIONS


def is_within(path: Path, root: Path) -> bool:
    """Check if a path is inside a directory (lexically, without following links)."""
    try:
        resolve_path(path).relative_to(resolve_path(root))
        return True
    except ValueError:
        return False


def get_relative_path(file_path: Path, root: Path) -> Path:
    """
    Get the path relative to root.

    Args:
        file_path: The file path to make relative.
        root: The root directory.

    Returns:
        Relative path, or the original path if it can't be made relative.
    """
    try:
        return resolve_path(file_path).relative_to(resolve_path(root))
    except ValueError:
        return file_path

"""Copy an entry file and every file it depends on into a target directory."""

import logging
import os
import shutil
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from scanner.builder import DEFAULT_MAX_DEPTH, analyze_tree
from scanner.dependencies import analyze_dependencies
from scanner.errors import InvalidInputError
from scanner.resolver import check_file, is_within, resolve_path

logger = logging.getLogger(__name__)


class CopyResult:
    """Outcome of copying one file."""

    def __init__(
        self,
        source: Path,
        target: Optional[Path] = None,
        relative_path: Optional[Path] = None,
        size: int = 0,
        error: Optional[str] = None,
    ):
        self.source = source
        self.target = target
        self.relative_path = relative_path
        self.size = size
        self.error = error

    @property
    def copied(self) -> bool:
        return self.error is None

    def to_dict(self) -> Dict[str, Any]:
        if not self.copied:
            return {"file": str(self.source), "error": self.error}
        return {
            "source": str(self.source),
            "target": str(self.target),
            "relativePath": str(self.relative_path).replace("\\", "/"),
            "size": self.size,
        }


class CopyReport:
    """Outcome of copying a component and its dependencies."""

    def __init__(
        self,
        source_file: Path,
        target_dir: Path,
        results: List[CopyResult],
        include_node_modules: bool = False,
    ):
        self.source_file = source_file
        self.target_dir = target_dir
        self.results = list(results)
        self.include_node_modules = include_node_modules

    @property
    def copied(self) -> List[CopyResult]:
        return [r for r in self.results if r.copied]

    @property
    def skipped(self) -> List[CopyResult]:
        return [r for r in self.results if not r.copied]

    @property
    def total_size(self) -> int:
        return sum(r.size for r in self.copied)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": True,
            "sourceFile": str(self.source_file),
            "targetDir": str(self.target_dir),
            "copiedFiles": [r.to_dict() for r in self.copied],
            "skippedFiles": [r.to_dict() for r in self.skipped],
            "summary": {
                "copiedCount": len(self.copied),
                "skippedCount": len(self.skipped),
                "totalSize": self.total_size,
                "includeNodeModules": self.include_node_modules,
            },
        }


def copy_file(source: Path, destination_root: Path, relative_base: Path) -> CopyResult:
    """
    Copy a file, keeping its location relative to ``relative_base``.

    Args:
        source: Existing file to copy.
        destination_root: Directory the relative layout is recreated under.
        relative_base: Directory the source's relative path is computed from.

    Returns:
        CopyResult; ``error`` is set if the file was not copied.
    """
    info = check_file(source)
    if not info.exists:
        return CopyResult(source, error=f"File not found: {info.error}")
    if not info.is_file:
        return CopyResult(source, error="Not a regular file")
    if not is_within(source, relative_base):
        return CopyResult(source, error=f"Outside base directory {relative_base}")

    relative_path = Path(os.path.relpath(source, relative_base))
    target = destination_root / relative_path

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(source, target)
    except OSError as e:
        logger.warning("Copy failed: %s -> %s: %s", source, target, e)
        return CopyResult(source, error=str(e))

    return CopyResult(source, target, relative_path, info.size)


def copy_dependencies(
    file_path: Union[str, Path, None],
    target_dir: Union[str, Path, None],
    alias_map: Optional[Dict[str, str]] = None,
    base_dir: Union[str, Path, None] = None,
    include_node_modules: bool = False,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> CopyReport:
    """
    Copy a component and all of its transitive dependencies.

    The directory layout relative to ``base_dir`` is preserved under
    ``target_dir``. Store module files found for the entry file are copied
    too.

    Args:
        file_path: Entry file.
        target_dir: Destination directory (relative to base_dir if relative).
        alias_map: Alias configuration.
        base_dir: Project root (default: current working directory).
        include_node_modules: If True, copy files inside node_modules too.
        max_depth: Maximum dependency depth to follow.

    Returns:
        CopyReport listing copied and skipped files.

    Raises:
        InvalidInputError: If file_path or target_dir is empty, or target_dir
                           contains base_dir.
    """
    if not target_dir:
        raise InvalidInputError("targetDir is required")

    base = resolve_path(base_dir or os.getcwd())
    destination = resolve_path(target_dir, base)
    if is_within(base, destination):
        raise InvalidInputError(f"targetDir {destination} must not contain the base directory {base}")

    analysis = analyze_tree(file_path, alias_map, base, max_depth)
    destination.mkdir(parents=True, exist_ok=True)

    report = analyze_dependencies(analysis.entry_file, alias_map, base)
    files = list(analysis.all_files)
    for store_file in report.dependencies.store:
        if store_file not in files:
            files.append(store_file)

    results: List[CopyResult] = []
    for path in files:
        if not include_node_modules and "node_modules" in path.parts:
            continue
        if is_within(path, destination):
            result = CopyResult(path, error=f"Inside target directory {destination}")
        else:
            result = copy_file(path, destination, base)
        if not result.copied:
            logger.info("Skipped %s: %s", path, result.error)
        results.append(result)

    return CopyReport(analysis.entry_file, destination, results, include_node_modules)

"""Dependency resolver: the direct file dependencies of one source file."""

import logging
import os
import re
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

from graph.model import DependencyReport, DependencySet
from .errors import DependencyError, InternalError, NotFoundError
from .extractors import (
    extract_code_references,
    extract_markup_references,
    extract_style_references,
    is_local_reference,
)
from .parser import split_sections
from .resolver import resolve_alias, resolve_path
from .store import find_store_dependencies

logger = logging.getLogger(__name__)


EXTRACTORS: Dict[str, Callable[[str], List[str]]] = {
    "markup": extract_markup_references,
    "code": extract_code_references,
    "style": extract_style_references,
}

_QUERY_RE = re.compile(r"[?#].*$")


def _strip_query(reference: str) -> str:
    """Drop ``?query`` and ``#fragment`` suffixes (``font.woff?v=1#iefix``)."""
    return _QUERY_RE.sub("", reference)


def is_relative_reference(reference: str) -> bool:
    """Check if a reference is explicitly relative (``./`` or ``../``)."""
    return reference in (".", "..") or reference.startswith(("./", "../", ".\\", "..\\"))


def resolve_reference(
    reference: str,
    category: str,
    source_dir: Path,
    alias_map: Optional[Dict[str, str]] = None,
    base_dir: Union[str, Path, None] = None,
) -> Optional[Path]:
    """
    Turn one raw reference into a candidate path.

    Aliased and absolute references resolve through the alias map. Explicitly
    relative references resolve against the directory of the file that
    contains them. Bare references are relative in markup and styles but
    name packages in code; ``~`` marks a package in styles.

    Args:
        reference: Raw reference text.
        category: markup, code or style.
        source_dir: Directory of the referencing file.
        alias_map: Alias configuration.
        base_dir: Project root for alias targets.

    Returns:
        Candidate absolute Path (not checked for existence), or None for
        package specifiers.
    """
    cleaned = _strip_query(reference.strip())
    if not cleaned:
        return None

    is_package_prefix = category == "style" and cleaned.startswith("~")
    if is_package_prefix:
        cleaned = cleaned[1:]

    resolved = resolve_alias(cleaned, alias_map, base_dir)
    if isinstance(resolved, Path):
        return resolved

    if is_relative_reference(cleaned):
        return resolve_path(cleaned, source_dir)

    if category == "code" or is_package_prefix:
        logger.debug("Skipping package specifier %r", reference)
        return None

    return resolve_path(cleaned, source_dir)


def resolve_dependencies(
    file_path: Union[str, Path, None],
    alias_map: Optional[Dict[str, str]] = None,
    base_dir: Union[str, Path, None] = None,
) -> DependencyReport:
    """
    Find the direct dependencies of a file.

    Args:
        file_path: Relative or absolute path of the file to analyze.
        alias_map: Mapping of alias prefix to directory (e.g. {"@": "./src"}).
        base_dir: Project root (default: current working directory).

    Returns:
        DependencyReport whose dependency set holds absolute candidate paths,
        deduplicated per category in first-seen order.

    Raises:
        InvalidInputError: If file_path is empty.
        NotFoundError: If the file does not exist.
        ParseError: If a component has malformed block boundaries.
        InternalError: If extraction or resolution fails unexpectedly.
        OSError: If the file cannot be read.
    """
    base_dir = base_dir or os.getcwd()
    resolved_path = resolve_path(file_path, base_dir)

    if not resolved_path.exists():
        raise NotFoundError(f"File not found: {resolved_path}", resolved_path)

    content = resolved_path.read_text(encoding="utf-8")
    sections = split_sections(resolved_path, content)

    dependencies = DependencySet()
    source_dir = resolved_path.parent

    try:
        for category, extract in EXTRACTORS.items():
            references: List[str] = [
                ref for ref in getattr(sections, f"{category}_refs") if is_local_reference(ref)
            ]
            for text in getattr(sections, category):
                references.extend(extract(text))

            for reference in references:
                candidate = resolve_reference(reference, category, source_dir, alias_map, base_dir)
                if candidate is not None:
                    dependencies.add(category, candidate, reference)
    except (ValueError, TypeError) as e:
        raise InternalError(f"Reference extraction failed for {resolved_path}: {e}", resolved_path) from e

    store = find_store_dependencies(sections.code, base_dir, alias_map)
    for store_file in store.files:
        dependencies.add("store", store_file)

    logger.debug("%s: %r", resolved_path, dependencies)

    return DependencyReport(
        file_path=resolved_path,
        dependencies=dependencies,
        uses_legacy_store=store.uses_legacy_store,
        used_store_modules=store.used_modules,
    )


def analyze_dependencies(
    file_path: Union[str, Path, None],
    alias_map: Optional[Dict[str, str]] = None,
    base_dir: Union[str, Path, None] = None,
) -> DependencyReport:
    """
    Like resolve_dependencies, but failures become an unsuccessful report.

    Returns:
        DependencyReport; ``success`` is False and ``error`` is set when the
        file could not be analyzed.
    """
    try:
        return resolve_dependencies(file_path, alias_map, base_dir)
    except DependencyError as e:
        logger.warning("%s", e.message)
        return DependencyReport(_best_effort_path(e.file_path or file_path, base_dir), error=e.message)
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Cannot read %s: %s", file_path, e)
        return DependencyReport(_best_effort_path(file_path, base_dir), error=str(e))


def _best_effort_path(file_path: Union[str, Path, None], base_dir: Union[str, Path, None]) -> Optional[Path]:
    if not file_path:
        return None
    return resolve_path(file_path, base_dir)

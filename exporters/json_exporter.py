"""JSON exporter for dependency reports (machine-friendly format)."""

import json
from pathlib import Path
from typing import Any, Optional, Union

from graph.model import DependencyReport, TreeAnalysis


def to_json(
    report: Union[DependencyReport, TreeAnalysis, Any],
    base: Optional[Path] = None,
    indent: int = 2,
) -> str:
    """
    Convert a report to JSON.

    Args:
        report: A DependencyReport, TreeAnalysis, or anything with ``to_dict``.
        base: If given, paths inside ``base`` are written relative to it.
        indent: JSON indentation level.

    Returns:
        JSON string representation of the report.
    """
    data = report.to_dict() if hasattr(report, "to_dict") else report
    if base is not None:
        data = _relativize(data, base)
    return json.dumps(data, indent=indent, ensure_ascii=False)


def _relativize(data: Any, base: Path) -> Any:
    """Rewrite absolute path strings under base as base-relative strings."""
    if isinstance(data, dict):
        return {key: _relativize(value, base) for key, value in data.items()}
    if isinstance(data, list):
        return [_relativize(item, base) for item in data]
    if isinstance(data, str):
        return _get_path_str(data, base)
    return data


def _get_path_str(value: str, base: Path) -> str:
    """Get the string representation of a path."""
    path = Path(value)
    if not path.is_absolute():
        return value
    try:
        rel_path = path.relative_to(base)
        return str(rel_path).replace("\\", "/")
    except ValueError:
        return value

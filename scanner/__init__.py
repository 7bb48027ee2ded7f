"""Scanner module for reference extraction, path resolution and tree building."""

from .resolver import resolve_path, resolve_alias, resolve_with_extensions
from .extractors import (
    extract_markup_references,
    extract_code_references,
    extract_style_references,
)
from .parser import parse_component, split_sections
from .dependencies import resolve_dependencies, analyze_dependencies
from .builder import build_tree, flatten_tree, analyze_tree

__all__ = [
    "resolve_path",
    "resolve_alias",
    "resolve_with_extensions",
    "extract_markup_references",
    "extract_code_references",
    "extract_style_references",
    "parse_component",
    "split_sections",
    "resolve_dependencies",
    "analyze_dependencies",
    "build_tree",
    "flatten_tree",
    "analyze_tree",
]

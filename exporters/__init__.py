"""Exporters for converting dependency trees to output formats and copies."""

from .mermaid_exporter import to_mermaid
from .ascii_exporter import to_ascii
from .json_exporter import to_json
from .copy_exporter import copy_dependencies, copy_file

__all__ = ["to_mermaid", "to_ascii", "to_json", "copy_dependencies", "copy_file"]

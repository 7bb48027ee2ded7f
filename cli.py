#!/usr/bin/env python3
"""
SFC Mapper CLI

A tool for finding every file a single-file component depends on, directly
or transitively, and for copying that set of files elsewhere.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict

from scanner.builder import DEFAULT_MAX_DEPTH, analyze_tree
from scanner.config import load_alias_config, parse_alias_args
from scanner.dependencies import analyze_dependencies
from scanner.errors import DependencyError
from exporters import copy_dependencies, to_ascii, to_json, to_mermaid


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    """Arguments shared by every subcommand."""
    parser.add_argument(
        "file",
        help="Component or source file to analyze (relative to --base-dir)",
    )

    parser.add_argument(
        "--base-dir",
        type=str,
        default=".",
        help="Project root used to resolve relative paths (default: current directory)",
    )

    parser.add_argument(
        "--alias",
        action="append",
        default=None,
        metavar="PREFIX=PATH",
        help="Path alias, e.g. @=./src (may be repeated)",
    )

    parser.add_argument(
        "--alias-config",
        type=str,
        default=None,
        help="JSON/YAML/TOML file with aliases (jsconfig.json/tsconfig.json paths are understood)",
    )

    parser.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        help="Output file (default: stdout)",
    )

    parser.add_argument(
        "--relative",
        action="store_true",
        help="Show paths relative to --base-dir",
    )


def parse_args(args=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="sfcmap",
        description="Find every file a single-file component depends on.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  sfcmap deps src/App.vue --alias @=./src         # Direct dependencies as JSON
  sfcmap tree src/App.vue --alias-config jsconfig.json
  sfcmap tree src/App.vue -f mermaid -o deps.mmd  # Mermaid flowchart
  sfcmap tree src/App.vue --max-depth 3 --ascii-style=ascii
  sfcmap copy src/App.vue ../extracted            # Copy the file and its dependencies
        """,
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log debug information to stderr",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # deps
    deps_parser = subparsers.add_parser("deps", help="List the direct dependencies of a file")
    _add_common_arguments(deps_parser)

    # tree
    tree_parser = subparsers.add_parser("tree", help="Analyze the full dependency tree of a file")
    _add_common_arguments(tree_parser)

    tree_parser.add_argument(
        "--max-depth",
        type=int,
        default=DEFAULT_MAX_DEPTH,
        help=f"Maximum recursion depth (default: {DEFAULT_MAX_DEPTH})",
    )

    tree_parser.add_argument(
        "-f", "--format",
        choices=["ascii", "mermaid", "json"],
        default="ascii",
        help="Output format (default: ascii)",
    )

    tree_parser.add_argument(
        "--ascii-style",
        choices=["tree", "ascii"],
        default="tree",
        help="ASCII output style: 'tree' (Unicode) or 'ascii' (pure ASCII)",
    )

    tree_parser.add_argument(
        "--orientation",
        choices=["LR", "TD", "TB", "RL", "BT"],
        default="LR",
        help="Mermaid flowchart orientation (default: LR)",
    )

    tree_parser.add_argument(
        "--ignore-missing",
        action="store_true",
        help="Hide missing (unresolved) file references from output",
    )

    # copy
    copy_parser = subparsers.add_parser("copy", help="Copy a file and all of its dependencies")
    _add_common_arguments(copy_parser)

    copy_parser.add_argument(
        "target",
        help="Destination directory (relative to --base-dir)",
    )

    copy_parser.add_argument(
        "--max-depth",
        type=int,
        default=DEFAULT_MAX_DEPTH,
        help=f"Maximum recursion depth (default: {DEFAULT_MAX_DEPTH})",
    )

    copy_parser.add_argument(
        "--include-node-modules",
        action="store_true",
        help="Also copy files inside node_modules",
    )

    return parser.parse_args(args)


def _load_aliases(parsed) -> Dict[str, str]:
    """File aliases first, then --alias values on top."""
    aliases: Dict[str, str] = {}
    if parsed.alias_config:
        aliases.update(load_alias_config(Path(parsed.alias_config)))
    aliases.update(parse_alias_args(parsed.alias))
    return aliases


def main(args=None):
    """Main entry point."""
    parsed = parse_args(args)

    logging.basicConfig(
        level=logging.DEBUG if parsed.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    base_dir = Path(parsed.base_dir).resolve()
    if not base_dir.is_dir():
        print(f"Error: '{parsed.base_dir}' is not a directory", file=sys.stderr)
        return 1

    base = base_dir if parsed.relative else None

    try:
        aliases = _load_aliases(parsed)

        if parsed.command == "deps":
            report = analyze_dependencies(parsed.file, aliases, base_dir)
            if not report.success:
                print(f"Error: {report.error}", file=sys.stderr)
                return 1
            output = to_json(report, base=base)

        elif parsed.command == "tree":
            analysis = analyze_tree(parsed.file, aliases, base_dir, parsed.max_depth)
            if parsed.format == "mermaid":
                output = to_mermaid(
                    analysis.tree,
                    base=base,
                    orientation=parsed.orientation,
                    include_missing=not parsed.ignore_missing,
                )
            elif parsed.format == "json":
                output = to_json(analysis, base=base)
            else:  # ascii (default)
                output = to_ascii(
                    analysis.tree,
                    base=base,
                    style=parsed.ascii_style,
                    include_missing=not parsed.ignore_missing,
                )

        else:  # copy
            copy_report = copy_dependencies(
                parsed.file,
                parsed.target,
                aliases,
                base_dir,
                include_node_modules=parsed.include_node_modules,
                max_depth=parsed.max_depth,
            )
            output = to_json(copy_report, base=base)

    except DependencyError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    # Write output
    if parsed.output:
        try:
            output_path = Path(parsed.output)
            output_path.write_text(output, encoding="utf-8")
            print(f"Output written to: {output_path}", file=sys.stderr)
        except OSError as e:
            print(f"Error writing output: {e}", file=sys.stderr)
            return 1
    else:
        print(output)

    return 0


if __name__ == "__main__":
    sys.exit(main())

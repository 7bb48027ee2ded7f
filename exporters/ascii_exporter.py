"""ASCII tree-style exporter for dependency trees."""

from pathlib import Path
from typing import List, Optional, Tuple

from graph.model import NodeStatus, TreeNode


# Unicode tree characters
UNICODE_BRANCH = "├── "
UNICODE_LAST = "└── "
UNICODE_VERTICAL = "│   "
UNICODE_SPACE = "    "

# ASCII fallback characters
ASCII_BRANCH = "|-- "
ASCII_LAST = "\\-- "
ASCII_VERTICAL = "|   "
ASCII_SPACE = "    "

STATUS_MARKERS = {
    NodeStatus.OK: "",
    NodeStatus.CIRCULAR: " [CIRCULAR]",
    NodeStatus.MAX_DEPTH: " [MAX DEPTH]",
    NodeStatus.NOT_FOUND: " [MISSING]",
    NodeStatus.ERROR: " [ERROR]",
    NodeStatus.LEAF: "",
}


def to_ascii(
    tree: TreeNode,
    base: Optional[Path] = None,
    style: str = "tree",
    include_missing: bool = True,
    include_leaves: bool = True,
) -> str:
    """
    Convert a dependency tree to ASCII tree representation.

    Args:
        tree: Root node of the dependency tree.
        base: Optional base path for relative path display.
        style: Output style - "tree" (Unicode) or "ascii" (pure ASCII).
        include_missing: If True, show not-found references.
        include_leaves: If True, show non-source files (images, fonts, ...).

    Returns:
        ASCII tree string.
    """
    # Select character set based on style
    if style == "ascii":
        chars = (ASCII_BRANCH, ASCII_LAST, ASCII_VERTICAL, ASCII_SPACE)
    else:
        chars = (UNICODE_BRANCH, UNICODE_LAST, UNICODE_VERTICAL, UNICODE_SPACE)

    lines: List[str] = [_format_node(tree, base)]
    _render_children(tree, base, "", chars, lines, include_missing, include_leaves)
    return "\n".join(lines)


def _render_children(
    node: TreeNode,
    base: Optional[Path],
    prefix: str,
    chars: Tuple[str, str, str, str],
    lines: List[str],
    include_missing: bool,
    include_leaves: bool,
) -> None:
    """
    Recursively render the children of a node.

    Args:
        node: Node whose children are rendered.
        base: Base path for display.
        prefix: Current line prefix for indentation.
        chars: Character set (branch, last, vertical, space).
        lines: Output lines list (modified in place).
        include_missing: If True, show not-found references.
        include_leaves: If True, show leaf files.
    """
    branch, last, vertical, space = chars

    children = [
        child for child in node.children
        if (include_missing or child.status is not NodeStatus.NOT_FOUND)
        and (include_leaves or child.status is not NodeStatus.LEAF)
    ]

    for index, child in enumerate(children):
        is_last = index == len(children) - 1
        connector = last if is_last else branch
        lines.append(f"{prefix}{connector}{_format_node(child, base)}")
        _render_children(
            child,
            base,
            prefix + (space if is_last else vertical),
            chars,
            lines,
            include_missing,
            include_leaves,
        )


def _format_node(node: TreeNode, base: Optional[Path]) -> str:
    """Get the display line for a node."""
    if node.status is NodeStatus.NOT_FOUND and node.reference:
        text = node.reference
    else:
        text = _get_display_path(node.path, base)

    marker = STATUS_MARKERS[node.status]
    if node.status is NodeStatus.ERROR and node.error:
        marker = f"{marker} {node.error}"
    return f"{text}{marker}"


def _get_display_path(path: Path, base: Optional[Path]) -> str:
    """Get the display path for a node."""
    if base is not None:
        try:
            return str(path.relative_to(base)).replace("\\", "/")
        except ValueError:
            pass
    return str(path).replace("\\", "/")

"""Mermaid flowchart exporter for dependency trees."""

import re
from pathlib import Path
from typing import Dict, List, Optional, Set, Tuple

from graph.model import NodeStatus, TreeNode


STATUS_STYLES = {
    NodeStatus.CIRCULAR: "stroke:#ff9900,stroke-width:2px",
    NodeStatus.MAX_DEPTH: "stroke:#999999,stroke-dasharray: 2 2",
    NodeStatus.NOT_FOUND: "stroke:#ff0000,stroke-dasharray: 5 5",
    NodeStatus.ERROR: "stroke:#cc0000,stroke-width:2px",
    NodeStatus.LEAF: "stroke:#0066cc",
}

STATUS_LABELS = {
    NodeStatus.CIRCULAR: " [CIRCULAR]",
    NodeStatus.MAX_DEPTH: " [MAX DEPTH]",
    NodeStatus.NOT_FOUND: " [MISSING]",
    NodeStatus.ERROR: " [ERROR]",
}


def to_mermaid(
    tree: TreeNode,
    base: Optional[Path] = None,
    orientation: str = "LR",
    include_missing: bool = True,
) -> str:
    """
    Convert a dependency tree to Mermaid flowchart syntax.

    The same file reached along several branches becomes one node; edges to
    circular or missing files are dashed.

    Args:
        tree: Root node of the dependency tree.
        base: Optional base path for relative labels and IDs.
        orientation: Flowchart orientation (LR, TD, TB, RL, BT).
        include_missing: If True, show not-found references.

    Returns:
        Mermaid flowchart string.
    """
    lines = [f"flowchart {orientation}"]

    node_ids: Dict[Path, str] = {}
    statuses: Dict[Path, NodeStatus] = {}
    edges: List[Tuple[Path, Path, bool]] = []
    seen_edges: Set[Tuple[Path, Path]] = set()

    for node in tree.iter_nodes():
        if node.status is NodeStatus.NOT_FOUND and not include_missing:
            continue
        if node.path not in node_ids:
            node_ids[node.path] = _unique_id(_sanitize_id(node.path, base), node_ids)
        # A file expanded anywhere is shown as expanded
        if statuses.get(node.path) is not NodeStatus.OK:
            statuses[node.path] = node.status

        for child in node.children:
            if child.status is NodeStatus.NOT_FOUND and not include_missing:
                continue
            if (node.path, child.path) in seen_edges:
                continue
            seen_edges.add((node.path, child.path))
            dashed = child.status in (NodeStatus.CIRCULAR, NodeStatus.NOT_FOUND)
            edges.append((node.path, child.path, dashed))

    for path, node_id in node_ids.items():
        label = _get_label(path, base) + STATUS_LABELS.get(statuses[path], "")
        lines.append(f'    {node_id}["{label}"]')

    styled = [(node_ids[p], s) for p, s in statuses.items() if s in STATUS_STYLES]
    if styled:
        lines.append("")
        for node_id, status in styled:
            lines.append(f"    style {node_id} {STATUS_STYLES[status]}")

    if edges:
        lines.append("")
        for source, target, dashed in edges:
            arrow = "-.->" if dashed else "-->"
            lines.append(f"    {node_ids[source]} {arrow} {node_ids[target]}")

    return "\n".join(lines)


def _unique_id(candidate: str, taken: Dict[Path, str]) -> str:
    """Disambiguate IDs of different paths that sanitize to the same text."""
    used = set(taken.values())
    node_id = candidate
    counter = 2
    while node_id in used:
        node_id = f"{candidate}_{counter}"
        counter += 1
    return node_id


def _sanitize_id(path: Path, base: Optional[Path]) -> str:
    """
    Convert a file path to a valid Mermaid node ID.

    Mermaid IDs can only contain letters, digits, and underscores.
    """
    return _sanitize_id_simple(_get_label(path, base))


def _sanitize_id_simple(value: str) -> str:
    """Sanitize a string to be a valid Mermaid ID."""
    # Replace path separators and dots with underscores
    sanitized = re.sub(r"[/\\.\-]", "_", value)
    # Remove any remaining invalid characters
    sanitized = re.sub(r"[^a-zA-Z0-9_]", "", sanitized)
    # Ensure it starts with a letter
    if sanitized and not sanitized[0].isalpha():
        sanitized = "n_" + sanitized
    return sanitized or "unknown"


def _get_label(path: Path, base: Optional[Path]) -> str:
    """Get the display label for a node."""
    if base is not None:
        try:
            return str(path.relative_to(base)).replace("\\", "/")
        except ValueError:
            pass
    return str(path).replace("\\", "/")

"""Tree builder that recursively expands a file's dependencies."""

import logging
import os
from pathlib import Path
from typing import Dict, FrozenSet, List, Optional, Union

from graph.model import NodeStatus, TreeAnalysis, TreeNode
from .dependencies import resolve_dependencies
from .errors import DependencyError, InvalidInputError
from .resolver import (
    check_file,
    is_supported_file,
    resolve_alias,
    resolve_path,
    resolve_with_extensions,
)

logger = logging.getLogger(__name__)


DEFAULT_MAX_DEPTH = 10


def build_tree(
    file_path: Union[str, Path],
    alias_map: Optional[Dict[str, str]] = None,
    base_dir: Union[str, Path, None] = None,
    max_depth: int = DEFAULT_MAX_DEPTH,
    visited: FrozenSet[Path] = frozenset(),
    depth: int = 0,
) -> TreeNode:
    """
    Build the dependency tree rooted at a file.

    ``visited`` holds the files on the current branch only. Each child gets
    its own extended copy, so a file reached from two unrelated branches is
    expanded in both and only a true back-edge is reported as circular.

    Args:
        file_path: File to expand.
        alias_map: Alias configuration.
        base_dir: Project root (default: current working directory).
        max_depth: Nodes at this depth or deeper are not expanded.
        visited: Paths already on the current branch.
        depth: Depth of this node.

    Returns:
        TreeNode for the file.

    Raises:
        InvalidInputError: If file_path is empty.
    """
    base_dir = base_dir or os.getcwd()
    path = resolve_path(file_path, base_dir)

    if path in visited:
        logger.debug("Circular dependency: %s", path)
        return TreeNode(path, depth, NodeStatus.CIRCULAR)

    if depth >= max_depth:
        return TreeNode(path, depth, NodeStatus.MAX_DEPTH)

    if not path.exists():
        return TreeNode(path, depth, NodeStatus.NOT_FOUND)

    branch = visited | {path}

    try:
        report = resolve_dependencies(path, alias_map, base_dir)
    except (DependencyError, OSError, UnicodeDecodeError) as e:
        message = e.message if isinstance(e, DependencyError) else str(e)
        logger.warning("Cannot resolve dependencies of %s: %s", path, message)
        return TreeNode(path, depth, NodeStatus.ERROR, error=message)

    children: List[TreeNode] = []
    deps = report.dependencies
    for candidate in deps.all_paths():
        children.append(
            _build_child(
                candidate, deps.reference(candidate), path, alias_map, base_dir, max_depth, branch, depth + 1
            )
        )

    return TreeNode(path, depth, NodeStatus.OK, children=tuple(children))


def _build_child(
    candidate: Path,
    reference: Optional[str],
    parent: Path,
    alias_map: Optional[Dict[str, str]],
    base_dir: Union[str, Path],
    max_depth: int,
    branch: FrozenSet[Path],
    depth: int,
) -> TreeNode:
    """
    Resolve one dependency of ``parent`` and build its node.

    ``reference`` is the text as written in ``parent``; not-found nodes keep
    it.
    """
    try:
        full_path = resolve_alias(candidate, alias_map, base_dir)
        if not isinstance(full_path, Path):
            full_path = resolve_path(full_path, parent.parent)

        actual = resolve_with_extensions(full_path)
        if actual is None:
            logger.debug("Unresolved reference %s in %s", candidate, parent)
            return TreeNode(full_path, depth, NodeStatus.NOT_FOUND, reference=reference or str(candidate))

        info = check_file(actual)
        if info.is_file and is_supported_file(actual):
            return build_tree(actual, alias_map, base_dir, max_depth, branch, depth)

        return TreeNode(actual, depth, NodeStatus.LEAF, file_info=info)

    except DependencyError as e:
        return TreeNode(Path(candidate), depth, NodeStatus.ERROR, error=e.message)
    except OSError as e:
        return TreeNode(Path(candidate), depth, NodeStatus.ERROR, error=str(e))


def flatten_tree(tree: TreeNode) -> List[Path]:
    """
    Collect every path in a tree, including not-found and circular nodes.

    Args:
        tree: Root node.

    Returns:
        Unique paths in depth-first pre-order.
    """
    seen = set()
    files: List[Path] = []
    for node in tree.iter_nodes():
        if node.path not in seen:
            seen.add(node.path)
            files.append(node.path)
    return files


def get_tree_depth(tree: TreeNode) -> int:
    """Return the deepest node depth in a tree."""
    return max(node.depth for node in tree.iter_nodes())


def find_circular(tree: TreeNode) -> List[Path]:
    """Return the unique paths flagged circular, in depth-first order."""
    circular: List[Path] = []
    for node in tree.iter_nodes():
        if node.status is NodeStatus.CIRCULAR and node.path not in circular:
            circular.append(node.path)
    return circular


def analyze_tree(
    file_path: Union[str, Path, None],
    alias_map: Optional[Dict[str, str]] = None,
    base_dir: Union[str, Path, None] = None,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> TreeAnalysis:
    """
    Build a dependency tree and summarize it.

    Failures below the entry file are recorded on the tree's nodes; only an
    invalid entry argument is raised.

    Args:
        file_path: Entry file.
        alias_map: Alias configuration.
        base_dir: Project root (default: current working directory).
        max_depth: Maximum expansion depth (integer >= 0).

    Returns:
        TreeAnalysis with the tree, flattened files and summary values.

    Raises:
        InvalidInputError: If file_path is empty or max_depth is invalid.
    """
    if not file_path:
        raise InvalidInputError("filePath is required")
    if isinstance(max_depth, bool) or not isinstance(max_depth, int) or max_depth < 0:
        raise InvalidInputError(f"maxDepth must be a non-negative integer, got {max_depth!r}")

    base_dir = base_dir or os.getcwd()
    entry = resolve_path(file_path, base_dir)

    tree = build_tree(entry, alias_map, base_dir, max_depth)

    return TreeAnalysis(
        entry_file=entry,
        tree=tree,
        all_files=flatten_tree(tree),
        circular_dependencies=find_circular(tree),
        max_depth=get_tree_depth(tree),
    )

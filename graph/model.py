"""Data model for component dependency sets and dependency trees."""

from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple


CATEGORIES = ("markup", "code", "style", "store")


class FileInfo:
    """Filesystem metadata for a resolved path."""

    def __init__(
        self,
        exists: bool,
        is_file: bool = False,
        is_dir: bool = False,
        size: int = 0,
        mtime: Optional[float] = None,
        error: Optional[str] = None,
    ):
        self.exists = exists
        self.is_file = is_file
        self.is_dir = is_dir
        self.size = size
        self.mtime = mtime
        self.error = error

    def to_dict(self) -> Dict[str, Any]:
        if not self.exists:
            return {"exists": False, "error": self.error}
        return {
            "exists": True,
            "isFile": self.is_file,
            "isDirectory": self.is_dir,
            "size": self.size,
            "mtime": self.mtime,
        }

    def __repr__(self) -> str:
        return f"FileInfo(exists={self.exists}, is_file={self.is_file}, size={self.size})"


class DependencySet:
    """
    The dependencies of one source file, partitioned by category.

    Each category keeps insertion order and silently drops duplicates.
    Store files are tracked but are not part of the ``total`` count. The
    first raw reference text seen for each path is kept for diagnostics.
    """

    def __init__(self):
        self._categories: Dict[str, List[Path]] = {name: [] for name in CATEGORIES}
        self._references: Dict[Path, str] = {}

    def add(self, category: str, path: Path, reference: Optional[str] = None) -> bool:
        """
        Add a resolved path to a category.

        Args:
            category: One of markup, code, style, store.
            path: The resolved dependency path.
            reference: The reference text as written in the source file.

        Returns:
            True if the path was new for that category.
        """
        if category not in self._categories:
            raise KeyError(f"Unknown dependency category: {category}")
        if reference and path not in self._references:
            self._references[path] = reference
        bucket = self._categories[category]
        if path in bucket:
            return False
        bucket.append(path)
        return True

    def get(self, category: str) -> List[Path]:
        """Return a copy of the paths in a category."""
        return list(self._categories[category])

    def reference(self, path: Path) -> Optional[str]:
        """Return the raw reference a path was first added with, if any."""
        return self._references.get(path)

    @property
    def markup(self) -> List[Path]:
        return self.get("markup")

    @property
    def code(self) -> List[Path]:
        return self.get("code")

    @property
    def style(self) -> List[Path]:
        return self.get("style")

    @property
    def store(self) -> List[Path]:
        return self.get("store")

    @property
    def total(self) -> int:
        """Number of markup, code and style dependencies."""
        return len(self._categories["markup"]) + len(self._categories["code"]) + len(self._categories["style"])

    def iter_all(self) -> Iterator[Tuple[str, Path]]:
        """Iterate over (category, path) pairs in category order."""
        for category in CATEGORIES:
            for path in self._categories[category]:
                yield category, path

    def all_paths(self) -> List[Path]:
        """Union of every category, in category order, without duplicates."""
        seen = set()
        result: List[Path] = []
        for _, path in self.iter_all():
            if path not in seen:
                seen.add(path)
                result.append(path)
        return result

    def summary(self) -> Dict[str, int]:
        counts = {name: len(paths) for name, paths in self._categories.items()}
        return {"total": self.total, **counts}

    def to_dict(self) -> Dict[str, List[str]]:
        return {name: [str(p) for p in paths] for name, paths in self._categories.items()}

    def __len__(self) -> int:
        return self.total

    def __repr__(self) -> str:
        counts = ", ".join(f"{name}={len(paths)}" for name, paths in self._categories.items())
        return f"DependencySet({counts})"


class DependencyReport:
    """Outcome of analyzing the direct dependencies of a single file."""

    def __init__(
        self,
        file_path: Optional[Path],
        dependencies: Optional[DependencySet] = None,
        uses_legacy_store: bool = False,
        used_store_modules: Optional[List[str]] = None,
        error: Optional[str] = None,
    ):
        self.file_path = file_path
        self.dependencies = dependencies if dependencies is not None else DependencySet()
        self.uses_legacy_store = uses_legacy_store
        self.used_store_modules = list(used_store_modules or [])
        self.error = error

    @property
    def success(self) -> bool:
        return self.error is None

    def to_dict(self) -> Dict[str, Any]:
        file_path = str(self.file_path) if self.file_path is not None else None
        if not self.success:
            return {"success": False, "filePath": file_path, "error": self.error}
        return {
            "success": True,
            "filePath": file_path,
            "dependencies": self.dependencies.to_dict(),
            "usesLegacyStore": self.uses_legacy_store,
            "usedStoreModules": list(self.used_store_modules),
            "summary": self.dependencies.summary(),
        }


class NodeStatus(Enum):
    """Terminal status of a tree node."""

    OK = "ok"
    CIRCULAR = "circular"
    MAX_DEPTH = "max-depth-reached"
    NOT_FOUND = "not-found"
    ERROR = "error"
    LEAF = "leaf"


class TreeNode:
    """
    One file in a dependency tree.

    Nodes are built bottom-up by the tree builder and never change afterwards;
    ``children`` is a tuple for that reason.
    """

    __slots__ = ("_path", "_children", "_depth", "_status", "_error", "_reference", "_file_info")

    def __init__(
        self,
        path: Path,
        depth: int,
        status: NodeStatus = NodeStatus.OK,
        children: Tuple["TreeNode", ...] = (),
        error: Optional[str] = None,
        reference: Optional[str] = None,
        file_info: Optional[FileInfo] = None,
    ):
        self._path = path
        self._children = tuple(children)
        self._depth = depth
        self._status = status
        self._error = error
        self._reference = reference
        self._file_info = file_info

    @property
    def path(self) -> Path:
        return self._path

    @property
    def children(self) -> Tuple["TreeNode", ...]:
        return self._children

    @property
    def depth(self) -> int:
        return self._depth

    @property
    def status(self) -> NodeStatus:
        return self._status

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def reference(self) -> Optional[str]:
        """The unresolved reference text, for not-found children."""
        return self._reference

    @property
    def file_info(self) -> Optional[FileInfo]:
        return self._file_info

    def iter_nodes(self) -> Iterator["TreeNode"]:
        """Depth-first, pre-order iteration over this node and its descendants."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node._children))

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "file": str(self._path),
            "status": self._status.value,
            "depth": self._depth,
            "dependencies": [child.to_dict() for child in self._children],
        }
        if self._error is not None:
            data["error"] = self._error
        if self._reference is not None:
            data["originalPath"] = self._reference
        if self._file_info is not None:
            data["fileInfo"] = self._file_info.to_dict()
        return data

    def __repr__(self) -> str:
        return (
            f"TreeNode(path={str(self._path)!r}, status={self._status.value}, "
            f"depth={self._depth}, children={len(self._children)})"
        )


class TreeAnalysis:
    """A dependency tree together with its flattened file set and summary."""

    def __init__(
        self,
        entry_file: Path,
        tree: TreeNode,
        all_files: List[Path],
        circular_dependencies: List[Path],
        max_depth: int,
    ):
        self.entry_file = entry_file
        self.tree = tree
        self.all_files = list(all_files)
        self.circular_dependencies = list(circular_dependencies)
        self.max_depth = max_depth

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": True,
            "entryFile": str(self.entry_file),
            "dependencyTree": self.tree.to_dict(),
            "allFiles": [str(p) for p in self.all_files],
            "summary": {
                "totalFiles": len(self.all_files),
                "maxDepth": self.max_depth,
                "circularDependencies": [str(p) for p in self.circular_dependencies],
                "hasCircularDependencies": bool(self.circular_dependencies),
            },
        }

    def __repr__(self) -> str:
        return (
            f"TreeAnalysis(entry={str(self.entry_file)!r}, files={len(self.all_files)}, "
            f"max_depth={self.max_depth}, circular={len(self.circular_dependencies)})"
        )

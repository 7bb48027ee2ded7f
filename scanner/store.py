"""
Detection of legacy (Vuex) store usage and lookup of store module files.

A component that maps state from a namespaced store module depends on that
module's file even though it never imports it. These heuristics recover
those implicit dependencies from the store entry file's ``modules`` option.
"""

import logging
import re
from pathlib import Path
from typing import Dict, List, Optional, Union

from .resolver import resolve_alias, resolve_path

logger = logging.getLogger(__name__)


# Any of these means the code talks to a Vuex store
USAGE_PATTERNS = [
    re.compile(r"""\bimport\s+\{[^}]*\}\s*from\s+["']vuex["']"""),
    re.compile(r"""\bimport\s+[\w$]+\s+from\s+["']vuex["']"""),
    re.compile(r"""\brequire\(\s*["']vuex["']\s*\)"""),
    re.compile(r"this\.\$store\b"),
    re.compile(r"\.\.\.\s*map(?:State|Getters|Actions|Mutations)\("),
]

# Patterns whose first group names (or starts with) a store module
MODULE_PATTERNS = [
    re.compile(r"""\.\.\.\s*map(?:State|Getters|Actions|Mutations)\(\s*["']([^"']+)["']"""),
    re.compile(r"""\bcreateNamespacedHelpers\(\s*["']([^"']+)["']"""),
    re.compile(r"this\.\$store\.state\.([a-zA-Z_$][\w$]*)"),
    re.compile(r"""this\.\$store\.(?:dispatch|commit)\(\s*["']([^"'/]+)/"""),
    re.compile(r"""this\.\$store\.getters\[\s*["']([^"'/]+)/"""),
]

STORE_ENTRY_CANDIDATES = [
    "src/store.js",
    "src/store.ts",
    "src/store/index.js",
    "src/store/index.ts",
    "src/stores/index.js",
    "src/stores/index.ts",
    "store.js",
    "store.ts",
    "store/index.js",
    "store/index.ts",
]

MODULE_FILE_SUFFIXES = [".js", ".ts", "/index.js", "/index.ts"]

_ENTRY_IMPORT_RE = re.compile(r"""\bimport\s+([\w$]+)\s+from\s+["']([^"']+)["']""")
_MODULES_BLOCK_RE = re.compile(r"\bmodules\s*:\s*\{([^}]*)\}", re.DOTALL)
_MODULE_PAIR_RE = re.compile(r"([\w$]+)\s*:\s*([\w$]+)")


class StoreUsage:
    """Whether code uses the legacy store, and which modules it touches."""

    def __init__(
        self,
        uses_legacy_store: bool = False,
        used_modules: Optional[List[str]] = None,
        files: Optional[List[Path]] = None,
    ):
        self.uses_legacy_store = uses_legacy_store
        self.used_modules = list(used_modules or [])
        # Module files located on disk; only filled by find_store_dependencies
        self.files = list(files or [])

    def __repr__(self) -> str:
        return f"StoreUsage(uses_legacy_store={self.uses_legacy_store}, used_modules={self.used_modules!r})"


class StoreEntry:
    """Default imports and registered modules of a store entry file."""

    def __init__(self, path: Path, imports: Dict[str, str], modules: Dict[str, str]):
        self.path = path
        self.imports = imports  # variable -> import path
        self.modules = modules  # module name -> variable


def detect_store_usage(code: str) -> StoreUsage:
    """
    Detect legacy store usage in a code section.

    Args:
        code: Script content.

    Returns:
        StoreUsage; ``used_modules`` keeps first-seen order.
    """
    if not code or not any(pattern.search(code) for pattern in USAGE_PATTERNS):
        return StoreUsage()

    modules: List[str] = []
    for pattern in MODULE_PATTERNS:
        for match in pattern.finditer(code):
            # Nested namespaces ("user/profile") live in the top-level module file
            name = match.group(1).split("/")[0].strip()
            if name and name not in modules:
                modules.append(name)

    return StoreUsage(True, modules)


def find_store_entry(base_dir: Union[str, Path]) -> Optional[Path]:
    """Return the first conventional store entry file under base_dir, if any."""
    base = resolve_path(".", base_dir)
    for candidate in STORE_ENTRY_CANDIDATES:
        path = base / candidate
        if path.is_file():
            return path
    return None


def parse_store_entry(store_file: Path) -> StoreEntry:
    """
    Read the default imports and ``modules`` option of a store entry file.

    Both ``user: userModule`` and the shorthand ``user`` forms are understood.

    Args:
        store_file: Path to the store entry.

    Returns:
        StoreEntry for the file.
    """
    content = store_file.read_text(encoding="utf-8")

    imports = {variable: path for variable, path in _ENTRY_IMPORT_RE.findall(content)}

    modules: Dict[str, str] = {}
    block = _MODULES_BLOCK_RE.search(content)
    if block:
        body = block.group(1)
        for name, variable in _MODULE_PAIR_RE.findall(body):
            modules[name] = variable
        remainder = _MODULE_PAIR_RE.sub("", body)
        for entry in remainder.split(","):
            name = entry.strip()
            if re.fullmatch(r"[\w$]+", name) and name not in modules:
                modules[name] = name

    return StoreEntry(store_file, imports, modules)


def locate_store_module(
    module_name: str,
    base_dir: Union[str, Path],
    alias_map: Optional[Dict[str, str]] = None,
    entry: Optional[StoreEntry] = None,
) -> Optional[Path]:
    """
    Find the file that defines a registered store module.

    Args:
        module_name: Module name as registered in the store's ``modules``.
        base_dir: Project root used to find the store entry and resolve aliases.
        alias_map: Alias configuration.
        entry: Already parsed store entry, to avoid re-reading it.

    Returns:
        Path to the module file, or None if it cannot be found.
    """
    if entry is None:
        entry_path = find_store_entry(base_dir)
        if entry_path is None:
            return None
        entry = parse_store_entry(entry_path)

    variable = entry.modules.get(module_name)
    if variable is None or variable not in entry.imports:
        logger.debug("Store module %r is not registered in %s", module_name, entry.path)
        return None

    import_path = resolve_alias(entry.imports[variable], alias_map, base_dir)
    if not isinstance(import_path, Path):
        import_path = resolve_path(import_path, entry.path.parent)

    for suffix in MODULE_FILE_SUFFIXES:
        candidate = Path(f"{import_path}{suffix}")
        if candidate.is_file():
            return candidate

    if import_path.is_file():
        return import_path

    return None


def find_store_dependencies(
    code_sections: List[str],
    base_dir: Union[str, Path],
    alias_map: Optional[Dict[str, str]] = None,
) -> StoreUsage:
    """
    Run store detection over code sections and locate every used module file.

    Args:
        code_sections: Script contents of one file.
        base_dir: Project root.
        alias_map: Alias configuration.

    Returns:
        StoreUsage with ``files`` set to the located module files.
    """
    uses_store = False
    used_modules: List[str] = []
    for code in code_sections:
        usage = detect_store_usage(code)
        if usage.uses_legacy_store:
            uses_store = True
            used_modules.extend(m for m in usage.used_modules if m not in used_modules)

    files: List[Path] = []
    if uses_store and used_modules:
        entry_path = find_store_entry(base_dir)
        if entry_path is None:
            logger.debug("Store usage detected but no store entry under %s", base_dir)
        else:
            entry = parse_store_entry(entry_path)
            for name in used_modules:
                module_file = locate_store_module(name, base_dir, alias_map, entry)
                if module_file is not None and module_file not in files:
                    files.append(module_file)

    return StoreUsage(uses_store, used_modules, files)

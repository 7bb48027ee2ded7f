"""Loading of path alias configuration from command-line values and files."""

import json
import logging
import os
import tomllib
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

import yaml

from .errors import ConfigError

logger = logging.getLogger(__name__)


# Keys that may hold a flat alias mapping
ALIAS_KEYS = ("alias", "aliases", "aliasConfig")


def parse_config_file(file_path: Path) -> Any:
    """
    Parse a JSON, YAML or TOML configuration file.

    Files with other extensions are tried as JSON first, then YAML.

    Args:
        file_path: Path to the file to parse.

    Returns:
        Parsed data structure.

    Raises:
        ConfigError: If the file cannot be read or parsed.
    """
    suffix = file_path.suffix.lower()

    try:
        content = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Cannot read alias config {file_path}: {e}", file_path) from e

    try:
        if suffix in {".yaml", ".yml"}:
            return yaml.safe_load(content)

        elif suffix == ".toml":
            return tomllib.loads(content)

        else:
            try:
                return json.loads(content)
            except json.JSONDecodeError:
                return yaml.safe_load(content)

    except (json.JSONDecodeError, yaml.YAMLError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"Invalid alias config {file_path}: {e}", file_path) from e


def _paths_to_aliases(compiler_options: Dict[str, Any], config_dir: Path) -> Dict[str, str]:
    """
    Convert a ``compilerOptions.paths`` table to an alias mapping.

    ``"@/*": ["src/*"]`` becomes ``"@": "<config_dir>/<baseUrl>/src"``.
    Only the first target of each entry is used.
    """
    base_url = config_dir / str(compiler_options.get("baseUrl") or ".")
    aliases: Dict[str, str] = {}

    for pattern, targets in (compiler_options.get("paths") or {}).items():
        if isinstance(targets, str):
            targets = [targets]
        if not targets:
            continue
        alias = pattern[:-2] if pattern.endswith("/*") else pattern.rstrip("*")
        target = str(targets[0])
        target = target[:-2] if target.endswith("/*") else target.rstrip("*")
        if alias:
            aliases[alias] = os.path.normpath(str(base_url / target))

    return aliases


def extract_aliases(data: Any, config_dir: Path) -> Dict[str, str]:
    """
    Find an alias mapping inside parsed configuration data.

    Understands, in order: ``compilerOptions.paths`` (jsconfig/tsconfig),
    ``resolve.alias`` (bundler style), a mapping under one of ALIAS_KEYS, and
    a flat mapping of prefix to directory.

    Args:
        data: Parsed configuration.
        config_dir: Directory of the configuration file.

    Returns:
        Mapping of alias prefix to target directory.

    Raises:
        ConfigError: If no mapping of strings can be found.
    """
    if not isinstance(data, dict):
        raise ConfigError("Alias config must be a mapping")

    compiler_options = data.get("compilerOptions")
    if isinstance(compiler_options, dict) and compiler_options.get("paths"):
        return _paths_to_aliases(compiler_options, config_dir)

    resolve_section = data.get("resolve")
    if isinstance(resolve_section, dict) and isinstance(resolve_section.get("alias"), dict):
        data = resolve_section["alias"]
    else:
        for key in ALIAS_KEYS:
            if isinstance(data.get(key), dict):
                data = data[key]
                break

    aliases: Dict[str, str] = {}
    for alias, target in data.items():
        if not isinstance(target, str):
            raise ConfigError(f"Alias {alias!r} must map to a directory string")
        aliases[str(alias)] = target
    return aliases


def load_alias_config(file_path: Path) -> Dict[str, str]:
    """
    Load an alias mapping from a configuration file.

    Args:
        file_path: JSON, YAML or TOML file.

    Returns:
        Mapping of alias prefix to target directory.
    """
    file_path = Path(file_path)
    aliases = extract_aliases(parse_config_file(file_path), file_path.resolve().parent)
    logger.debug("Loaded %d aliases from %s", len(aliases), file_path)
    return aliases


def parse_alias_args(values: Optional[Iterable[str]]) -> Dict[str, str]:
    """
    Parse ``PREFIX=PATH`` command-line values into an alias mapping.

    Args:
        values: Values such as ``["@=./src", "~assets=./src/assets"]``.

    Returns:
        Mapping of alias prefix to target directory.

    Raises:
        ConfigError: If a value has no ``=`` or an empty prefix.
    """
    aliases: Dict[str, str] = {}
    for value in values or []:
        alias, sep, target = value.partition("=")
        alias = alias.strip()
        if not sep or not alias or not target.strip():
            raise ConfigError(f"Invalid alias {value!r}, expected PREFIX=PATH")
        aliases[alias] = target.strip()
    return aliases

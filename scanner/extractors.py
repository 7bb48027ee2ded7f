"""
Reference extraction from component sections.

Each strategy is a pure function over the text of one section. They work by
pattern scanning rather than parsing, so they tolerate syntax variety but
miss references built at runtime.
"""

import re
from typing import Iterable, List, Pattern, Tuple


# Scheme-prefixed references: http:, https:, data:, mailto:, ...
_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]*:")

# Static src="..." attribute. Bound forms (:src, v-bind:src) hold expressions
# and prefixed names (data-src) are not resource references.
_MARKUP_SRC_RE = re.compile(r"""(?<![\w:.\-@])src\s*=\s*["']([^"']+)["']""")

# require('...') inside a bound attribute expression
_MARKUP_REQUIRE_RE = re.compile(r"""\brequire\s*\(\s*\\?["']([^"'\\]+)\\?["']\s*\)""")

# import 'module'
_IMPORT_BARE_RE = re.compile(r"""\bimport\s+["']([^"']+)["']""")

# import name from 'module'
_IMPORT_DEFAULT_RE = re.compile(r"""\bimport\s+(?:type\s+)?[\w$]+\s+from\s+["']([^"']+)["']""")

# import { a, b } from 'module'
_IMPORT_NAMED_RE = re.compile(r"""\bimport\s+(?:type\s+)?\{[^}]*\}\s*from\s+["']([^"']+)["']""")

# import * as name from 'module'
_IMPORT_NAMESPACE_RE = re.compile(r"""\bimport\s+\*\s+as\s+[\w$]+\s+from\s+["']([^"']+)["']""")

# import name, { a } from 'module'
_IMPORT_MIXED_RE = re.compile(
    r"""\bimport\s+[\w$]+\s*,\s*(?:\{[^}]*\}|\*\s+as\s+[\w$]+)\s*from\s+["']([^"']+)["']"""
)

# export { a } from 'module' / export * from 'module'
_REEXPORT_RE = re.compile(
    r"""\bexport\s+(?:type\s+)?(?:\{[^}]*\}|\*(?:\s+as\s+[\w$]+)?)\s*from\s+["']([^"']+)["']"""
)

# import('module') with a string literal
_DYNAMIC_IMPORT_RE = re.compile(r"""\bimport\s*\(\s*["']([^"']+)["']\s*\)""")

# require('module')
_REQUIRE_RE = re.compile(r"""\brequire\s*\(\s*["']([^"']+)["']\s*\)""")

CODE_PATTERNS: Tuple[Pattern[str], ...] = (
    _IMPORT_BARE_RE,
    _IMPORT_DEFAULT_RE,
    _IMPORT_NAMED_RE,
    _IMPORT_NAMESPACE_RE,
    _IMPORT_MIXED_RE,
    _REEXPORT_RE,
    _DYNAMIC_IMPORT_RE,
    _REQUIRE_RE,
)

# @import 'x' / @import url('x') / @use 'x' / @forward 'x'
_STYLE_IMPORT_RE = re.compile(
    r"""@(?:import|use|forward)\s+(?:url\(\s*)?["']([^"']+)["']"""
)

# url(x) / url('x') / url("x")
_STYLE_URL_RE = re.compile(r"""\burl\(\s*["']?([^"')\s]+)["']?\s*\)""")


def is_local_reference(reference: str) -> bool:
    """
    Check whether a reference can point at a local file.

    Rejects remote URLs, protocol-relative URLs, data URIs, fragment
    references, package-directory paths and interpolated strings.

    Args:
        reference: Raw reference text.

    Returns:
        True if the reference is a filesystem-local specifier.
    """
    if not reference or not reference.strip():
        return False

    value = reference.strip()

    if value.startswith(("//", "#")):
        return False

    # Windows drive letters look like a scheme but are local
    if _SCHEME_RE.match(value) and not re.match(r"^[a-zA-Z]:[\\/]", value):
        return False

    if "node_modules" in re.split(r"[\\/]", value):
        return False

    if "{{" in value or "${" in value or "#{" in value:
        return False

    return True


def _scan(text: str, patterns: Iterable[Pattern[str]]) -> List[str]:
    """Run every pattern over the text and return local references in source order."""
    if not text:
        return []

    found: List[Tuple[int, int, str]] = []
    for order, pattern in enumerate(patterns):
        for match in pattern.finditer(text):
            found.append((match.start(1), order, match.group(1).strip()))

    found.sort()

    references: List[str] = []
    last_position = None
    for position, _, reference in found:
        # The same literal matched by two forms is one reference
        if position == last_position:
            continue
        last_position = position
        if is_local_reference(reference):
            references.append(reference)
    return references


def extract_markup_references(text: str) -> List[str]:
    """
    Extract resource references from template markup.

    Args:
        text: Template section content.

    Returns:
        Local references in source order.
    """
    return _scan(text, (_MARKUP_SRC_RE, _MARKUP_REQUIRE_RE))


def extract_code_references(text: str) -> List[str]:
    """
    Extract module references from script code.

    Recognizes bare, default, named, namespace and mixed imports, re-exports,
    literal dynamic imports and require calls.

    Args:
        text: Script section content.

    Returns:
        Local references in source order.
    """
    return _scan(text, CODE_PATTERNS)


def extract_style_references(text: str) -> List[str]:
    """
    Extract file references from stylesheet code.

    Args:
        text: Style section content.

    Returns:
        Local references in source order.
    """
    return _scan(text, (_STYLE_IMPORT_RE, _STYLE_URL_RE))

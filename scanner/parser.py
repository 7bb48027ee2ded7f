"""Parsers for splitting source files into markup, code and style sections."""

import logging
import re
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from .errors import ParseError

logger = logging.getLogger(__name__)


COMPONENT_EXTENSIONS = {".vue"}
SCRIPT_EXTENSIONS = {".js", ".ts", ".jsx", ".tsx", ".mjs", ".cjs"}
STYLE_EXTENSIONS = {".css", ".scss", ".sass", ".less"}

# Blocks whose content is raw text: the first matching end tag closes them
RAW_TEXT_BLOCKS = {"script", "style"}

_ATTR = r"""(?:[^>"']|"[^"]*"|'[^']*')*"""

# A comment, a start tag, or an end tag at the current scan position
_TAG_RE = re.compile(
    r"<!--.*?-->"
    r"|<(?P<name>[a-zA-Z][\w\-]*)(?P<attrs>" + _ATTR + r")>"
    r"|</(?P<end>[a-zA-Z][\w\-]*)\s*>",
    re.DOTALL,
)

_ATTR_RE = re.compile(r"""([^\s=/>"']+)(?:\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s>"']+)))?""")


class SectionBlock:
    """One top-level block of a single-file component."""

    def __init__(
        self,
        kind: str,
        content: str,
        attrs: Dict[str, Union[str, bool]],
        offset: int = 0,
    ):
        self.kind = kind
        self.content = content
        self.attrs = attrs
        self.offset = offset

    @property
    def lang(self) -> Optional[str]:
        lang = self.attrs.get("lang")
        return lang if isinstance(lang, str) else None

    @property
    def src(self) -> Optional[str]:
        """External file the block content lives in (``<style src="...">``)."""
        src = self.attrs.get("src")
        return src if isinstance(src, str) and src else None

    @property
    def is_setup(self) -> bool:
        return self.kind == "script" and "setup" in self.attrs

    def __repr__(self) -> str:
        return f"SectionBlock(kind={self.kind!r}, attrs={self.attrs!r}, length={len(self.content)})"


class ComponentDescriptor:
    """The blocks found in a single-file component."""

    def __init__(self, filename: str):
        self.filename = filename
        self.template: Optional[SectionBlock] = None
        self.script: Optional[SectionBlock] = None
        self.script_setup: Optional[SectionBlock] = None
        self.styles: List[SectionBlock] = []
        self.custom_blocks: List[SectionBlock] = []

    @property
    def scripts(self) -> List[SectionBlock]:
        """The plain script block followed by the setup block, if present."""
        return [block for block in (self.script, self.script_setup) if block is not None]


class Sections:
    """
    The content sections of one source file, grouped by extraction strategy.

    ``*_refs`` hold references declared by block ``src`` attributes, which
    never appear in section content.
    """

    def __init__(self):
        self.markup: List[str] = []
        self.code: List[str] = []
        self.style: List[str] = []
        self.markup_refs: List[str] = []
        self.code_refs: List[str] = []
        self.style_refs: List[str] = []

    def is_empty(self) -> bool:
        return not (self.markup or self.code or self.style
                    or self.markup_refs or self.code_refs or self.style_refs)


def _parse_attrs(raw: str) -> Dict[str, Union[str, bool]]:
    """Parse a tag's attribute text into a dict (valueless attributes map to True)."""
    attrs: Dict[str, Union[str, bool]] = {}
    for match in _ATTR_RE.finditer(raw):
        name = match.group(1).lower()
        value = next((g for g in match.groups()[1:] if g is not None), None)
        attrs[name] = value if value is not None else True
    return attrs


def _find_end(source: str, name: str, start: int) -> Tuple[int, int]:
    """
    Find the end tag closing a block whose content starts at ``start``.

    Raw-text blocks end at the first matching end tag; other blocks track
    nested tags of the same name.

    Returns:
        (content_end, after_end_tag), or (-1, -1) if the block is unclosed.
    """
    if name in RAW_TEXT_BLOCKS:
        end_re = re.compile(r"</" + re.escape(name) + r"\s*>", re.IGNORECASE)
        match = end_re.search(source, start)
        if match is None:
            return -1, -1
        return match.start(), match.end()

    depth = 1
    pos = start
    while True:
        match = _TAG_RE.search(source, pos)
        if match is None:
            return -1, -1
        pos = match.end()
        if match.group("name") and match.group("name").lower() == name:
            if not match.group("attrs").rstrip().endswith("/"):
                depth += 1
        elif match.group("end") and match.group("end").lower() == name:
            depth -= 1
            if depth == 0:
                return match.start(), match.end()


def parse_component(source: str, filename: str = "anonymous.vue") -> ComponentDescriptor:
    """
    Split a single-file component into its top-level blocks.

    Only block boundaries are examined; block content is kept verbatim.

    Args:
        source: Component source text.
        filename: Name used in diagnostics.

    Returns:
        ComponentDescriptor with template, script, script setup, style and
        custom blocks.

    Raises:
        ParseError: If any block is unclosed, an end tag is stray, or a
                    singleton block appears twice. All problems are reported
                    together.
    """
    descriptor = ComponentDescriptor(filename)
    errors: List[str] = []
    pos = 0

    while True:
        match = _TAG_RE.search(source, pos)
        if match is None:
            break

        if match.group("end"):
            errors.append(f"Invalid end tag </{match.group('end')}> at offset {match.start()}.")
            pos = match.end()
            continue

        name = match.group("name")
        if name is None:
            # Comment
            pos = match.end()
            continue

        name = name.lower()
        raw_attrs = match.group("attrs")
        attrs = _parse_attrs(raw_attrs.rstrip().rstrip("/"))

        if raw_attrs.rstrip().endswith("/"):
            content, content_start, pos = "", match.end(), match.end()
        else:
            content_start = match.end()
            content_end, after = _find_end(source, name, content_start)
            if content_end < 0:
                errors.append(f"Element <{name}> is missing end tag.")
                break
            content = source[content_start:content_end]
            pos = after

        block = SectionBlock(name, content, attrs, content_start)

        if name == "template":
            if descriptor.template is not None:
                errors.append("Single file component can contain only one <template> element.")
            else:
                descriptor.template = block
        elif name == "script":
            if block.is_setup:
                if descriptor.script_setup is not None:
                    errors.append("Single file component can contain only one <script setup> element.")
                else:
                    descriptor.script_setup = block
            elif descriptor.script is not None:
                errors.append("Single file component can contain only one <script> element.")
            else:
                descriptor.script = block
        elif name == "style":
            descriptor.styles.append(block)
        else:
            descriptor.custom_blocks.append(block)

    if errors:
        raise ParseError(filename, errors)

    return descriptor


def split_sections(file_path: Path, content: str) -> Sections:
    """
    Route a file's content to the sections each extraction strategy reads.

    Components are split into blocks; script and stylesheet files become a
    single code or style section; anything else yields no sections.

    Args:
        file_path: Path of the file (used for classification and diagnostics).
        content: File content.

    Returns:
        Sections for the file.

    Raises:
        ParseError: If a component has malformed block boundaries.
    """
    sections = Sections()
    suffix = file_path.suffix.lower()

    if suffix in COMPONENT_EXTENSIONS:
        descriptor = parse_component(content, str(file_path))

        if descriptor.template is not None:
            sections.markup.append(descriptor.template.content)
            if descriptor.template.src:
                sections.markup_refs.append(descriptor.template.src)

        for block in descriptor.scripts:
            sections.code.append(block.content)
            if block.src:
                sections.code_refs.append(block.src)

        for block in descriptor.styles:
            sections.style.append(block.content)
            if block.src:
                sections.style_refs.append(block.src)

    elif suffix in SCRIPT_EXTENSIONS:
        sections.code.append(content)

    elif suffix in STYLE_EXTENSIONS:
        sections.style.append(content)

    else:
        logger.debug("No extraction strategy for %s", file_path)

    return sections

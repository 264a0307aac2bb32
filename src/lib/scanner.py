"""
Scanner for :::type ... ::: annotation blocks

Finds annotation blocks in annotated Markdown and reports structural
problems. Everything outside the blocks is opaque text the scanner never
looks into.

The scanner is a single-pass, line-driven state machine:
1. An opener line (":::tabs", "::: code-block lang=python") starts a block
2. A closer line (":::" alone) completes the open block
3. Lines in between are accumulated verbatim as block content

There is no nesting. An opener while a block is open reports the open block
as unclosed and starts tracking the new one instead.

Example:
    >>> scanner = Scanner(":::callout-info\\nHello\\n:::")
    >>> result = scanner.scan()
    >>> result.blocks[0].type
    'callout-info'
    >>> result.blocks[0].content
    'Hello'
"""

import re
from typing import Dict, List, Optional

from ..models.annotations import AnnotationBlock, ErrorKind, ScanResult, TransformError
from .log import LOG


OPENER_PATTERN = re.compile(r'^:::\s*([a-zA-Z-]+)(?:\s+(.+))?$')
CLOSER_PATTERN = re.compile(r'^:::$')

# key="quoted value" or key=unquoted-token
ATTRIBUTE_PATTERN = re.compile(r'([\w-]+)=(?:"([^"]*)"|(\S+))')


def attributes_parse(source: Optional[str]) -> Dict[str, str]:
    """
    Parse the attribute list trailing an opener line

    Quoted values may contain whitespace, unquoted values may not. When a
    key repeats the last occurrence wins. Anything that is not a key=value
    token is ignored.

    Args:
        source: Text after the type name, or None

    Returns:
        Attribute mapping

    Example:
        >>> attributes_parse('lang=python title="Hello world"')
        {'lang': 'python', 'title': 'Hello world'}
    """
    attributes: Dict[str, str] = {}
    if not source or not source.strip():
        return attributes

    for match in ATTRIBUTE_PATTERN.finditer(source):
        key, quoted, unquoted = match.groups()
        attributes[key] = quoted if quoted is not None else unquoted

    return attributes


class Scanner:
    """
    Line-driven scanner for annotation blocks

    Handles:
    - Openers with optional attributes
    - Verbatim content, blank lines included
    - Unclosed blocks (at a new opener and at end of input)
    - Stray closers
    """

    def __init__(self, source: str):
        """
        Initialize scanner with source text

        Args:
            source: Annotated Markdown text (frontmatter already removed)

        Attributes:
            source: Text being scanned
            lines: Source split into lines
            blocks: Completed blocks, in source order
            errors: Structural errors, in source order
        """
        self.source = source
        self.lines = source.split("\n")
        self.blocks: List[AnnotationBlock] = []
        self.errors: List[TransformError] = []

        # Open block tracking
        self.open_type: Optional[str] = None
        self.open_attributes: Dict[str, str] = {}
        self.open_line = 0
        self.open_text = ""
        self.content_lines: List[str] = []

    def scan(self) -> ScanResult:
        """
        Scan the source for annotation blocks

        Returns:
            ScanResult with blocks ordered by start line and structural
            errors. Structural errors never stop the scan.
        """
        for index, line in enumerate(self.lines):
            line_number = index + 1

            opener = OPENER_PATTERN.match(line)
            if opener:
                if self.open_type is not None:
                    self.unclosed_report()
                self.block_open(opener.group(1), opener.group(2), line, line_number)
                continue

            if CLOSER_PATTERN.match(line):
                if self.open_type is None:
                    self.errors.append(TransformError(
                        message="Found closing annotation without opening block",
                        line=line_number,
                        kind=ErrorKind.ERROR,
                    ))
                    continue
                self.block_close(line, line_number)
                continue

            if self.open_type is not None:
                self.content_lines.append(line)

        if self.open_type is not None:
            self.unclosed_report()
            self.open_type = None

        LOG(f"Scanned {len(self.blocks)} annotation blocks, "
            f"{len(self.errors)} structural errors", level=2)

        return ScanResult(blocks=self.blocks, errors=self.errors)

    def block_open(self, annotation_type: str, attributes_source: Optional[str],
                   line: str, line_number: int) -> None:
        """Start tracking a new block, discarding any open one"""
        self.open_type = annotation_type
        self.open_attributes = attributes_parse(attributes_source)
        self.open_line = line_number
        self.open_text = line
        self.content_lines = []

    def block_close(self, line: str, line_number: int) -> None:
        """Complete the open block at a closer line"""
        content = "\n".join(self.content_lines)
        original_parts = [self.open_text, *self.content_lines, line]

        block = AnnotationBlock(
            type=self.open_type or "",
            attributes=self.open_attributes,
            content=content,
            start_line=self.open_line,
            end_line=line_number,
            original_text="\n".join(original_parts),
        )
        self.blocks.append(block)
        LOG(f"Block '{block.type}' at lines {block.start_line}-{block.end_line}", level=3)

        self.open_type = None
        self.open_attributes = {}
        self.content_lines = []

    def unclosed_report(self) -> None:
        """Record the currently open block as unclosed"""
        self.errors.append(TransformError(
            message=f"Unclosed annotation block '{self.open_type}' started at line {self.open_line}",
            line=self.open_line,
            kind=ErrorKind.ERROR,
            annotation_type=self.open_type,
        ))

"""
Depth-aware scanner for component markup

Finds the elements of one tag name in MDX text, e.g. every top-level
<Tabs ...>...</Tabs>. Matching is keyed on the exact tag name, so <Tab> is
never confused with <Tabs>, and opening/closing tags are paired with a
depth counter, so nested and adjacent same-name elements are delimited
correctly. Tags inside fenced code blocks are ignored.

Attribute values may be quoted strings (value="Tab 1") or brace
expressions (items={["A", "B"]}). A ">" inside either does not end the tag.

Example:
    >>> scan = elements_find('<Callout type="warn">\\nHi\\n</Callout>', "Callout")
    >>> scan.elements[0].attributes
    {'type': 'warn'}
    >>> scan.elements[0].inner
    '\\nHi\\n'
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .fences import fenceSpans_find


@dataclass
class TagElement:
    """
    One matched element

    Attributes:
        name: Tag name
        attributes: Parsed attributes (brace expressions without the braces)
        inner: Text between opening and closing tag, None if self-closing
        start: Offset of the opening "<"
        end: Offset just past the closing ">"
        line: 1-based line of the opening tag
    """
    name: str
    attributes: Dict[str, str]
    inner: Optional[str]
    start: int
    end: int
    line: int

    @property
    def self_closing(self) -> bool:
        return self.inner is None


@dataclass
class TagScan:
    """Top-level elements found and lines of opening tags never closed"""
    elements: List[TagElement] = field(default_factory=list)
    unclosed: List[int] = field(default_factory=list)


@dataclass
class _TagEvent:
    closing: bool
    self_closing: bool
    attributes: Dict[str, str]
    start: int
    end: int


_ATTRIBUTE_NAME = re.compile(r'\s*([A-Za-z_][\w.:-]*)\s*')


def attribute_render(value: str) -> str:
    """Quote an attribute value for markup ("" escaped as &quot;)"""
    return '"' + value.replace('"', "&quot;") + '"'


def attribute_unescape(value: str) -> str:
    """Inverse of attribute_render's escaping"""
    return value.replace("&quot;", '"')


def expression_end(text: str, start: int) -> int:
    """
    Find the "}" closing the brace expression opened at `start`

    Nested braces and quoted strings (with backslash escapes) are skipped.

    Returns:
        Offset of the closing brace, -1 if the expression never closes
    """
    depth = 0
    quote: Optional[str] = None
    pos = start

    while pos < len(text):
        char = text[pos]
        if quote:
            if char == "\\":
                pos += 2
                continue
            if char == quote:
                quote = None
        elif char in "\"'`":
            quote = char
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return pos
        pos += 1

    return -1


def tagEnd_find(text: str, start: int) -> int:
    """
    Find the ">" ending a tag whose attributes start at `start`

    Returns:
        Offset of the ">", -1 if the tag never ends
    """
    pos = start
    while pos < len(text):
        char = text[pos]
        if char == '"' or char == "'":
            close = text.find(char, pos + 1)
            if close == -1:
                return -1
            pos = close + 1
            continue
        if char == "{":
            close = expression_end(text, pos)
            if close == -1:
                return -1
            pos = close + 1
            continue
        if char == ">":
            return pos
        pos += 1
    return -1


def tagAttributes_parse(source: str) -> Dict[str, str]:
    """
    Parse the attribute part of an opening tag

    Example:
        >>> tagAttributes_parse(' items={["A", "B"]} value="x &quot;y&quot;" open')
        {'items': '["A", "B"]', 'value': 'x "y"', 'open': 'true'}
    """
    attributes: Dict[str, str] = {}
    pos = 0

    while pos < len(source):
        match = _ATTRIBUTE_NAME.match(source, pos)
        if not match:
            break
        name = match.group(1)
        pos = match.end()

        if pos >= len(source) or source[pos] != "=":
            attributes[name] = "true"
            continue

        pos += 1
        while pos < len(source) and source[pos].isspace():
            pos += 1
        if pos >= len(source):
            attributes[name] = ""
            break

        char = source[pos]
        if char in "\"'":
            close = source.find(char, pos + 1)
            if close == -1:
                close = len(source)
            attributes[name] = attribute_unescape(source[pos + 1:close])
            pos = close + 1
        elif char == "{":
            close = expression_end(source, pos)
            if close == -1:
                close = len(source)
            attributes[name] = source[pos + 1:close]
            pos = close + 1
        else:
            token = re.match(r'\S+', source[pos:])
            value = token.group(0) if token else ""
            attributes[name] = value
            pos += len(value)

    return attributes


def protectedSpans_find(text: str) -> List[Tuple[int, int]]:
    """Character spans [start, end) covered by fenced code blocks"""
    lines = text.split("\n")
    offsets = []
    offset = 0
    for line in lines:
        offsets.append(offset)
        offset += len(line) + 1

    spans = []
    for first, last in fenceSpans_find(lines):
        spans.append((offsets[first], offsets[last] + len(lines[last])))
    return spans


def _protected(position: int, spans: List[Tuple[int, int]]) -> bool:
    return any(start <= position < end for start, end in spans)


def events_collect(text: str, name: str) -> List[_TagEvent]:
    """Opening, closing and self-closing tags of `name`, in text order"""
    pattern = re.compile(r'<(/?)' + re.escape(name) + r'(?=[\s/>])')
    protected = protectedSpans_find(text)
    events: List[_TagEvent] = []

    for match in pattern.finditer(text):
        if _protected(match.start(), protected):
            continue

        if match.group(1):
            close = text.find(">", match.end())
            if close == -1:
                continue
            events.append(_TagEvent(True, False, {}, match.start(), close + 1))
            continue

        close = tagEnd_find(text, match.end())
        if close == -1:
            continue
        source = text[match.end():close]
        self_closing = source.rstrip().endswith("/")
        if self_closing:
            source = source.rstrip()[:-1]
        events.append(_TagEvent(False, self_closing, tagAttributes_parse(source),
                                match.start(), close + 1))

    return events


def elements_find(text: str, name: str) -> TagScan:
    """
    Find the top-level elements named `name`

    Opening and closing tags are paired with a depth counter: only
    elements at depth zero are returned, each one spanning its nested
    same-name elements. Closing tags without an opener are ignored.

    Args:
        text: Markup to search
        name: Exact tag name (e.g. "Tabs")

    Returns:
        TagScan with elements in text order and lines of unclosed openers
    """
    scan = TagScan()
    depth = 0
    opener: Optional[_TagEvent] = None

    for event in events_collect(text, name):
        if event.self_closing:
            if depth == 0:
                scan.elements.append(TagElement(
                    name=name,
                    attributes=event.attributes,
                    inner=None,
                    start=event.start,
                    end=event.end,
                    line=text.count("\n", 0, event.start) + 1,
                ))
            continue

        if not event.closing:
            if depth == 0:
                opener = event
            depth += 1
            continue

        if depth == 0:
            continue
        depth -= 1
        if depth == 0 and opener is not None:
            scan.elements.append(TagElement(
                name=name,
                attributes=opener.attributes,
                inner=text[opener.end:event.start],
                start=opener.start,
                end=event.end,
                line=text.count("\n", 0, opener.start) + 1,
            ))
            opener = None

    if depth > 0 and opener is not None:
        scan.unclosed.append(text.count("\n", 0, opener.start) + 1)

    return scan


def spans_replace(text: str, replacements: List[Tuple[int, int, str]]) -> str:
    """
    Apply (start, end, replacement) character edits in one pass

    Edits must not overlap; they are applied in offset order.
    """
    parts = []
    position = 0
    for start, end, replacement in sorted(replacements, key=lambda edit: edit[0]):
        parts.append(text[position:start])
        parts.append(replacement)
        position = end
    parts.append(text[position:])
    return "".join(parts)

"""
Fenced code block handling

Locates ``` / ~~~ fenced code regions in Markdown and manages the
`title="..."` attribute of their info strings:

- codeTitles_enhance(): forward direction, adds a title inferred from the
  nearest level 2/3 heading above a fence
- codeTitles_strip(): reverse direction, removes fence titles again

Fence regions are also used by the tag scanner so that markup shown inside
code samples is never mistaken for real components.
"""

import re
from typing import Iterable, List, Optional, Set, Tuple

from .log import LOG


FENCE_PATTERN = re.compile(r'^(\s*)(`{3,}|~{3,})(.*)$')
HEADING_PATTERN = re.compile(r'^(#{1,6})\s+(.+?)\s*$')
FENCE_LANGUAGE_PATTERN = re.compile(r'^(\s*(?:`{3,}|~{3,}))([\w+#.-]+)(.*)$')
FENCE_TITLE_PATTERN = re.compile(r'^(\s*(?:`{3,}|~{3,})[\w+#.-]+)\s+title="[^"]*"')


def fenceSpans_find(lines: List[str]) -> List[Tuple[int, int]]:
    """
    Find fenced code regions

    A fence closes on a line holding only the same fence character repeated
    at least as often as in the opener. An unclosed fence runs to the end.

    Args:
        lines: Document lines

    Returns:
        (open_index, close_index) pairs of 0-based inclusive line indexes

    Example:
        >>> fenceSpans_find(["text", "```py", "x = 1", "```"])
        [(1, 3)]
    """
    spans: List[Tuple[int, int]] = []
    open_index: Optional[int] = None
    fence = ""

    for index, line in enumerate(lines):
        match = FENCE_PATTERN.match(line)
        if not match:
            continue
        marker = match.group(2)
        if open_index is None:
            open_index = index
            fence = marker
        elif marker[0] == fence[0] and len(marker) >= len(fence) and not match.group(3).strip():
            spans.append((open_index, index))
            open_index = None

    if open_index is not None:
        spans.append((open_index, len(lines) - 1))

    return spans


def spanLines_collect(spans: Iterable[Tuple[int, int]]) -> Set[int]:
    """Expand inclusive (start, end) index spans into a set of indexes"""
    covered: Set[int] = set()
    for start, end in spans:
        covered.update(range(start, end + 1))
    return covered


def codeTitles_enhance(lines: List[str], excluded: Iterable[Tuple[int, int]] = ()) -> List[str]:
    """
    Add heading-derived titles to plain fenced code blocks

    Walks the document once, remembering the latest level 2 or 3 heading.
    A level 1 heading forgets it, so no title is ever inferred across a
    level 1 heading. Each fence opener that has a language and no title yet
    gets title="<heading>" appended.

    Lines inside fences and inside the excluded spans (annotation blocks)
    are never read as headings and their fences are left alone.

    Args:
        lines: Document lines (not modified)
        excluded: 1-based inclusive line spans to skip entirely

    Returns:
        New list of lines, same length as the input

    Example:
        Input:
            ## Install
            ```bash
            pip install annodocs
            ```
        Output:
            ## Install
            ```bash title="Install"
            pip install annodocs
            ```
    """
    result = list(lines)
    skipped = spanLines_collect((start - 1, end - 1) for start, end in excluded)
    fences = [span for span in fenceSpans_find(lines) if span[0] not in skipped]
    fence_openers = {start for start, _ in fences}
    in_fence = spanLines_collect(fences)

    heading: Optional[str] = None
    enhanced = 0

    for index, line in enumerate(lines):
        if index in skipped:
            continue

        if index in fence_openers:
            if heading and 'title=' not in line:
                match = FENCE_LANGUAGE_PATTERN.match(line)
                if match:
                    result[index] = f'{match.group(1)}{match.group(2)} title="{heading}"{match.group(3)}'
                    enhanced += 1
            continue

        if index in in_fence:
            continue

        heading_match = HEADING_PATTERN.match(line)
        if not heading_match:
            continue
        level = len(heading_match.group(1))
        if level == 1:
            heading = None
        elif level in (2, 3):
            heading = heading_match.group(2).replace('"', "'")

    if enhanced:
        LOG(f"Added heading titles to {enhanced} code fences", level=2)

    return result


def codeTitles_strip(text: str) -> str:
    """
    Remove title="..." from fenced code block openers

    Example:
        >>> codeTitles_strip('```bash title="Install"\\nls\\n```')
        '```bash\\nls\\n```'
    """
    lines = text.split("\n")
    for start, _ in fenceSpans_find(lines):
        lines[start] = FENCE_TITLE_PATTERN.sub(r'\1', lines[start], count=1)
    return "\n".join(lines)

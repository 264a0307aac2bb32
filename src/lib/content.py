"""
Per-type content parsers

Turn the raw content of an annotation block into structured items:

    tabs       "Title|Body" lines        -> List[TabItem]
    accordion  "Question|Answer" lines   -> List[AccordionItem]
    steps      "Step N: text" lines      -> List[StepItem]
    files      indented listing          -> List[FileTreeNode] (a forest)

Blank lines never produce items. The parsers are lenient: malformed lines
still produce an item, and it is the validator's job to report them.
"""

import re
from typing import List, Tuple

from ..models.annotations import AccordionItem, FileTreeNode, StepItem, TabItem


STEP_PATTERN = re.compile(r'^Step\s+(\d+):\s*(.+)$', re.IGNORECASE)
INDENT_WIDTH = 2


def contentLines_get(content: str) -> List[str]:
    """Non-blank lines of a block's content"""
    return [line for line in content.split("\n") if line.strip()]


def pipeLine_split(line: str) -> Tuple[str, str]:
    """
    Split a "label|body" line at its first pipe

    Further pipes belong to the body. A line without any pipe has an empty
    label and the whole line as body.

    Example:
        >>> pipeLine_split(" Shell | ls | wc -l ")
        ('Shell', 'ls | wc -l')
        >>> pipeLine_split("no separator")
        ('', 'no separator')
    """
    if "|" not in line:
        return "", line.strip()
    label, body = line.split("|", 1)
    return label.strip(), body.strip()


def tabs_parse(content: str) -> List[TabItem]:
    """Parse a tabs block into one TabItem per non-blank line"""
    items = []
    for line in contentLines_get(content):
        title, body = pipeLine_split(line)
        items.append(TabItem(title=title, content=body))
    return items


def accordion_parse(content: str) -> List[AccordionItem]:
    """Parse an accordion block into one AccordionItem per non-blank line"""
    items = []
    for line in contentLines_get(content):
        title, body = pipeLine_split(line)
        items.append(AccordionItem(title=title, content=body))
    return items


def steps_parse(content: str) -> List[StepItem]:
    """
    Parse a steps block into one StepItem per non-blank line

    "Step N: text" lines become StepItem("Step N", "text"); any other line
    falls back to StepItem("Step", line).

    Example:
        >>> steps_parse("step 2:  Install\\nThen run it")
        [StepItem(title='Step 2', content='Install'), StepItem(title='Step', content='Then run it')]
    """
    items = []
    for line in contentLines_get(content):
        match = STEP_PATTERN.match(line.strip())
        if match:
            items.append(StepItem(title=f"Step {match.group(1)}", content=match.group(2).strip()))
        else:
            items.append(StepItem(title="Step", content=line.strip()))
    return items


def files_parse(content: str) -> List[FileTreeNode]:
    """
    Parse an indented file listing into a forest

    Depth is the number of leading spaces divided by two. A stack holds the
    chain of open directories: before a node is placed, every entry at the
    same or a deeper level is popped; the node then becomes a child of the
    stack top, or a root when the stack is empty. Lines ending in "/" are
    directories and are pushed onto the stack.

    Example:
        Input:
            src/
              a.ts
              lib/
                b.ts
        Result:
            [FileTreeNode("src", children=[
                FileTreeNode("a.ts"),
                FileTreeNode("lib", children=[FileTreeNode("b.ts")])])]
    """
    roots: List[FileTreeNode] = []
    stack: List[Tuple[FileTreeNode, int]] = []

    for line in contentLines_get(content):
        indent = len(line) - len(line.lstrip(" "))
        level = indent // INDENT_WIDTH
        name = line.strip()
        is_file = not name.endswith("/")

        node = FileTreeNode(
            name=name if is_file else name.rstrip("/"),
            is_file=is_file,
            level=level,
            children=None if is_file else [],
        )

        while stack and stack[-1][1] >= level:
            stack.pop()

        if stack:
            parent = stack[-1][0]
            if parent.children is not None:
                parent.children.append(node)
        else:
            roots.append(node)

        if not is_file:
            stack.append((node, level))

    return roots

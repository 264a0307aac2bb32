"""
Frontmatter and title handling

Forward direction:
    title_extract()      leading "# Title" line -> title field
    document_assemble()  frontmatter + import declarations + body

Reverse direction:
    frontmatter_split()  "---" YAML block -> mapping + body
    title_reintegrate()  title field -> leading "# Title" line

Frontmatter is read with PyYAML. It is written as JSON-encoded values,
which YAML reads back unchanged (title: "Getting Started"). Dates and other
values JSON has no form for are written in YAML flow style.
"""

import json
import yaml
from typing import Any, Dict, Iterable, Optional, Tuple

from .log import LOG


FRONTMATTER_DELIMITER = "---"


class FrontmatterError(ValueError):
    """Raised when a frontmatter block is not valid YAML or not a mapping"""
    pass


def frontmatter_split(text: str) -> Tuple[Dict[str, Any], str, int]:
    """
    Split a leading "---" delimited YAML block from the body

    Text without a complete frontmatter block is returned unchanged as body.

    Args:
        text: Document text

    Returns:
        (frontmatter mapping, body, number of lines the block occupied)

    Raises:
        FrontmatterError: If the block is not valid YAML or not a mapping

    Example:
        >>> frontmatter_split('---\\ntitle: "Intro"\\n---\\nHello')
        ({'title': 'Intro'}, 'Hello', 3)
    """
    lines = text.split("\n")
    if not lines or lines[0].rstrip() != FRONTMATTER_DELIMITER:
        return {}, text, 0

    closing = None
    for index in range(1, len(lines)):
        if lines[index].rstrip() == FRONTMATTER_DELIMITER:
            closing = index
            break
    if closing is None:
        return {}, text, 0

    block = "\n".join(lines[1:closing])
    try:
        data = yaml.safe_load(block)
    except yaml.YAMLError as e:
        raise FrontmatterError(f"Invalid frontmatter: {e}")

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise FrontmatterError("Frontmatter must be a mapping")

    body = "\n".join(lines[closing + 1:])
    return data, body, closing + 1


def title_extract(text: str) -> Tuple[str, str]:
    """
    Promote a leading level 1 heading to a title

    The heading must be the first non-blank line. It is removed together
    with the blank lines that directly follow it.

    Args:
        text: Document body

    Returns:
        (title or "", body without the heading)

    Example:
        >>> title_extract("\\n# Guide\\n\\nText")
        ('Guide', '\\nText')
    """
    lines = text.split("\n")

    first = next((index for index, line in enumerate(lines) if line.strip()), None)
    if first is None or not lines[first].startswith("# "):
        return "", text

    title = lines[first][2:].strip()
    if not title:
        return "", text

    rest = first + 1
    while rest < len(lines) and not lines[rest].strip():
        rest += 1

    LOG(f"Promoted heading '{title}' to frontmatter title", level=2)
    return title, "\n".join(lines[:first] + lines[rest:])


def value_render(value: Any) -> str:
    """
    Serialize one frontmatter value (strings become quoted strings)

    Values JSON cannot express, such as the dates YAML reads from
    "date: 2024-01-15", are written in YAML flow style instead.
    """
    try:
        return json.dumps(value, ensure_ascii=False)
    except TypeError:
        LOG(f"Writing {type(value).__name__} frontmatter value as YAML", level=3)
    text = yaml.safe_dump(value, default_flow_style=True, allow_unicode=True, width=float("inf")).strip()
    if text.endswith("\n..."):
        text = text[:-4].rstrip()
    return text


def frontmatter_build(fields: Dict[str, Any]) -> str:
    """
    Render frontmatter lines between "---" delimiters

    Empty values are left out. Returns "" when nothing is left.

    Example:
        >>> frontmatter_build({"title": "Intro", "description": ""})
        '---\\ntitle: "Intro"\\n---\\n'
    """
    lines = [f"{key}: {value_render(value)}" for key, value in fields.items()
             if value not in (None, "")]
    if not lines:
        return ""
    return "\n".join([FRONTMATTER_DELIMITER, *lines, FRONTMATTER_DELIMITER]) + "\n"


def fields_merge(title: str = "", description: Optional[str] = None,
                 existing: Optional[Dict[str, Any]] = None,
                 fallback_title: Optional[str] = None) -> Dict[str, Any]:
    """
    Order the frontmatter fields of a forward transform

    title and description come first, then any pass-through fields in their
    original order. An extracted title wins over a pass-through one, which
    wins over the fallback title.
    """
    existing = existing or {}
    fields: Dict[str, Any] = {
        "title": title or existing.get("title") or fallback_title or "",
        "description": description or existing.get("description") or "",
    }
    for key, value in existing.items():
        if key not in fields:
            fields[key] = value
    return fields


def document_assemble(body: str, imports: Iterable[str], fields: Dict[str, Any]) -> str:
    """
    Assemble the final document

    Layout:
        ---
        title: "..."
        ---
        <blank>
        import ...;
        <blank>
        body

    Each part is only present when it has content.
    """
    parts = []

    frontmatter = frontmatter_build(fields)
    if frontmatter:
        parts.append(frontmatter + "\n")

    declarations = list(imports)
    if declarations:
        parts.append("\n".join(declarations) + "\n\n")

    parts.append(body)
    return "".join(parts)


def title_reintegrate(body: str, frontmatter: Dict[str, Any]) -> str:
    """
    Turn a frontmatter title back into a leading "# " heading

    Example:
        >>> title_reintegrate("\\nText", {"title": "Guide"})
        '# Guide\\n\\nText'
    """
    title = frontmatter.get("title")
    if not title:
        return body
    return f"# {str(title).strip()}\n\n{body.lstrip(chr(10))}"

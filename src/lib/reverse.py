"""
Reverse matcher: component markup back to annotation blocks

The inverse of the emitter. The text goes through these steps in order:

1. imports_strip()    drop import declarations of the component package
                      (and of configured custom imports) with the blank
                      lines that follow them
2. codeTitles_strip() drop title="..." from fenced code openers
3. one pass per component, in order Callout, Tabs, Steps, Accordions,
   CodeBlock, Files, Banner: every top-level element is located with the
   tag scanner and replaced by its annotation form

Elements that cannot be converted, and elements that are never closed, are
left as they are and reported as warnings.

Code block titles are ambiguous: a title may have been written by the
author or inferred from a heading. Titles matching the configured
heading-title patterns are taken as inferred and dropped, which turns the
<CodeBlock> into a plain fenced code block.
"""

from typing import Callable, List, Optional, Tuple

from ..config import TranspilerConfig
from ..models.annotations import ErrorKind, TransformError, TransformResult
from ..models.components import CALLOUT_KINDS
from .content import INDENT_WIDTH
from .fences import FENCE_PATTERN, HEADING_PATTERN, codeTitles_strip
from .log import LOG
from .tags import TagElement, elements_find, spans_replace


class ReverseError(Exception):
    """Raised by a converter for an element it cannot turn into an annotation"""
    pass


def body_collapse(text: str) -> str:
    """Join the non-blank lines of an item body into one line"""
    return " ".join(line.strip() for line in text.split("\n") if line.strip())


def pipeLine_make(label: str, body: str) -> str:
    """Inverse of pipeLine_split(): an empty label gives the body alone"""
    return f"{label}|{body}" if label else body


def attribute_quote(value: str) -> str:
    """Annotation attribute value, quoted unless it holds a double quote"""
    return value if '"' in value else f'"{value}"'


def block_make(opener: str, lines: List[str]) -> str:
    return "\n".join([f":::{opener}", *lines, ":::"])


def content_lines(inner: Optional[str]) -> List[str]:
    """Trimmed element content as block body lines, none when empty"""
    content = (inner or "").strip()
    return [content] if content else []


def fencedCode_extract(text: str) -> Tuple[str, str]:
    """
    Split the fenced code of a <CodeBlock> body

    Returns:
        (fence language or "", code). Text that is not a single fenced
        block is returned as code with surrounding blank lines removed.
    """
    lines = text.strip("\n").split("\n")
    if len(lines) >= 2:
        opener = FENCE_PATTERN.match(lines[0])
        closer = FENCE_PATTERN.match(lines[-1])
        if opener and closer and not closer.group(3).strip():
            language = opener.group(3).strip().split(" ")[0]
            return language, "\n".join(lines[1:-1])
    return "", "\n".join(lines)


class ReverseMatcher:
    """
    Converts component markup back to annotation text

    Example:
        >>> ReverseMatcher().reverse('<Callout type="warn">\\nBe careful\\n</Callout>').content
        ':::callout-warn\\nBe careful\\n:::'
    """

    def __init__(self, config: Optional[TranspilerConfig] = None) -> None:
        self.config = config or TranspilerConfig()
        self.heading_patterns = self.config.headingPatterns_compile()
        self.passes: List[Tuple[str, Callable[[TagElement], str]]] = [
            ("Callout", self.callout_reverse),
            ("Tabs", self.tabs_reverse),
            ("Steps", self.steps_reverse),
            ("Accordions", self.accordion_reverse),
            ("CodeBlock", self.codeBlock_reverse),
            ("Files", self.files_reverse),
            ("Banner", self.banner_reverse),
        ]

    def reverse(self, text: str) -> TransformResult:
        """
        Convert every recognised component element to annotation form

        Args:
            text: Markup text without frontmatter

        Returns:
            TransformResult with the annotation text and any warnings
        """
        errors: List[TransformError] = []

        text = self.imports_strip(text)
        text = codeTitles_strip(text)

        for name, convert in self.passes:
            text = self.elements_convert(text, name, convert, errors)

        return TransformResult(content=text, errors=errors)

    def import_owned(self, line: str) -> bool:
        """True for import declarations this tool generates"""
        statement = line.strip()
        if not statement.startswith("import "):
            return False
        if self.config.component_package in statement:
            return True
        return statement in {custom.strip() for custom in self.config.custom_imports.values()}

    def imports_strip(self, text: str) -> str:
        """Remove owned import lines and the blank lines directly after them"""
        output: List[str] = []
        stripping = False
        removed = 0

        for line in text.split("\n"):
            if self.import_owned(line):
                stripping = True
                removed += 1
                continue
            if stripping and not line.strip():
                continue
            stripping = False
            output.append(line)

        if removed:
            LOG(f"Stripped {removed} import declarations", level=3)
        return "\n".join(output)

    def elements_convert(self, text: str, name: str,
                         convert: Callable[[TagElement], str],
                         errors: List[TransformError]) -> str:
        """One pass: replace every top-level `name` element"""
        scan = elements_find(text, name)
        replacements = []

        for element in scan.elements:
            try:
                replacements.append((element.start, element.end, convert(element)))
            except ReverseError as e:
                errors.append(TransformError(
                    message=f"<{name}> left unchanged: {e}",
                    line=element.line,
                    kind=ErrorKind.WARNING,
                ))

        for line in scan.unclosed:
            errors.append(TransformError(
                message=f"Unclosed <{name}> element left unchanged",
                line=line,
                kind=ErrorKind.WARNING,
            ))

        if replacements:
            LOG(f"Converted {len(replacements)} <{name}> elements", level=2)
        return spans_replace(text, replacements)

    def children_get(self, element: TagElement, child: str) -> List[TagElement]:
        """Direct `child` elements of a container, in document order"""
        if element.inner is None:
            raise ReverseError("element has no content")
        children = elements_find(element.inner, child).elements
        if not children:
            raise ReverseError(f"no <{child}> items")
        return children

    def title_isHeadingDerived(self, title: str) -> bool:
        """Classify a code title as inferred from a heading"""
        return any(pattern.match(title) for pattern in self.heading_patterns)

    def callout_reverse(self, element: TagElement) -> str:
        kind = element.attributes.get("type")
        if not kind:
            raise ReverseError('missing "type" attribute')
        if kind not in CALLOUT_KINDS:
            raise ReverseError(f"unsupported callout type '{kind}'")
        return block_make(f"callout-{kind}", content_lines(element.inner))

    def tabs_reverse(self, element: TagElement) -> str:
        lines = []
        for tab in self.children_get(element, "Tab"):
            lines.append(pipeLine_make(tab.attributes.get("value", ""), body_collapse(tab.inner or "")))
        return block_make("tabs", lines)

    def steps_reverse(self, element: TagElement) -> str:
        lines = []
        for step in self.children_get(element, "Step"):
            body = (step.inner or "").strip("\n").split("\n")
            heading = HEADING_PATTERN.match(body[0].strip()) if body else None
            if heading and len(heading.group(1)) == 2:
                title = heading.group(2)
                text = body_collapse("\n".join(body[1:]))
                lines.append(text if title == "Step" else f"{title}: {text}")
            else:
                lines.append(body_collapse("\n".join(body)))
        return block_make("steps", lines)

    def accordion_reverse(self, element: TagElement) -> str:
        lines = []
        for item in self.children_get(element, "Accordion"):
            lines.append(pipeLine_make(item.attributes.get("title", ""), body_collapse(item.inner or "")))
        return block_make("accordion", lines)

    def codeBlock_reverse(self, element: TagElement) -> str:
        if element.inner is None:
            raise ReverseError("element has no content")

        fence_language, code = fencedCode_extract(element.inner)
        lang = element.attributes.get("lang") or fence_language
        title = element.attributes.get("title")

        if title and self.title_isHeadingDerived(title):
            LOG(f"Code title '{title}' taken as heading-derived", level=3)
            return f"```{lang}\n{code}\n```"

        opener = "code-block"
        if lang:
            opener += f" lang={attribute_quote(lang)}"
        if title:
            opener += f" title={attribute_quote(title)}"
        return block_make(opener, [code])

    def fileTree_lines(self, text: str, level: int) -> List[str]:
        lines = []
        for node in elements_find(text, "File").elements:
            name = node.attributes.get("name")
            if not name:
                raise ReverseError('<File> without "name" attribute')
            indent = " " * (INDENT_WIDTH * level)
            if node.self_closing and not name.endswith("/"):
                lines.append(indent + name)
                continue
            lines.append(indent + (name if name.endswith("/") else name + "/"))
            lines.extend(self.fileTree_lines(node.inner or "", level + 1))
        return lines

    def files_reverse(self, element: TagElement) -> str:
        self.children_get(element, "File")
        return block_make("files", self.fileTree_lines(element.inner or "", 0))

    def banner_reverse(self, element: TagElement) -> str:
        banner_type = element.attributes.get("type")
        opener = f"banner type={attribute_quote(banner_type)}" if banner_type else "banner"
        return block_make(opener, content_lines(element.inner))

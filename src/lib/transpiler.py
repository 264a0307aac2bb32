"""
Transpiler: the two transform directions over one document

Forward pipeline (annotations -> components):
    Text -> Scanner -> Blocks -> Validator -> Emitter -> Edits
         -> edits_apply() -> title_extract() -> document_assemble()

Reverse pipeline (components -> annotations):
    Text -> frontmatter_split() -> ReverseMatcher -> title_reintegrate()

Both directions are pure functions of the input text and the
configuration: nothing is carried over from one call to the next.
"""

from typing import Any, Dict, List, Optional

from ..config import TranspilerConfig
from ..models.annotations import ErrorKind, TransformError, TransformResult
from .components import ComponentRegistry
from .emitter import Emitter, edits_apply, imports_order
from .fences import codeTitles_enhance
from .frontmatter import (
    FrontmatterError,
    document_assemble,
    fields_merge,
    frontmatter_split,
    title_extract,
    title_reintegrate,
)
from .log import LOG
from .reverse import ReverseMatcher
from .scanner import Scanner
from .validator import Validator


class Transpiler:
    """
    Annotation Markdown <-> component MDX transpiler

    Example:
        >>> result = Transpiler().forward(":::callout-warn\\nBe careful\\n:::")
        >>> print(result.content)
        import { Callout } from 'fumadocs-ui/components/callout';

        <Callout type="warn">
        Be careful
        </Callout>
    """

    def __init__(self, config: Optional[TranspilerConfig] = None) -> None:
        self.config = config or TranspilerConfig()
        self.registry = ComponentRegistry(self.config.component_package)
        self.validator = Validator()
        self.emitter = Emitter(self.config, self.registry)
        self.matcher = ReverseMatcher(self.config)

    def forward(self, text: str, description: Optional[str] = None,
                frontmatter: Optional[Dict[str, Any]] = None,
                fallback_title: Optional[str] = None) -> TransformResult:
        """
        Convert annotation Markdown to component markup

        Blocks with errors are still emitted where possible; an unknown or
        failing block is left in place unmodified. The result is
        unsuccessful as soon as any error of kind ERROR was recorded.

        Args:
            text: Document body (frontmatter already split off)
            description: Description written to the frontmatter
            frontmatter: Existing frontmatter fields to pass through
            fallback_title: Title used when the document has none

        Returns:
            TransformResult with the assembled document, the import
            declarations used and every problem found
        """
        scan = Scanner(text).scan()
        errors: List[TransformError] = list(scan.errors)

        if self.config.validate_syntax:
            errors.extend(self.validator.blocks_validate(scan.blocks))

        lines = text.split("\n")
        if self.config.enhance_code_titles:
            spans = [(block.start_line, block.end_line) for block in scan.blocks]
            lines = codeTitles_enhance(lines, spans)

        emitted = self.emitter.blocks_emit(scan.blocks)
        errors.extend(emitted.errors)
        body = edits_apply(lines, emitted.edits)

        title = ""
        if self.config.extract_title:
            title, body = title_extract(body)

        fields = fields_merge(title, description, frontmatter, fallback_title)
        content = document_assemble(body, imports_order(emitted.imports), fields)

        errors.sort(key=lambda error: error.line)
        LOG(f"Forward transform: {len(scan.blocks)} blocks, {len(errors)} problems", level=2)
        return TransformResult(content=content, imports=emitted.imports, errors=errors)

    def reverse(self, text: str) -> TransformResult:
        """
        Convert component markup back to annotation Markdown

        The frontmatter block is consumed: its title becomes a leading
        "# " heading, everything else in it is dropped.

        Args:
            text: Full document, frontmatter included

        Returns:
            TransformResult with the annotation text and any warnings
        """
        try:
            frontmatter, body, offset = frontmatter_split(text)
        except FrontmatterError as e:
            return TransformResult(content=text, errors=[
                TransformError(message=str(e), line=1, kind=ErrorKind.ERROR)
            ])

        if offset:
            body = body.lstrip("\n")

        result = self.matcher.reverse(body)
        result.content = title_reintegrate(result.content, frontmatter)

        LOG(f"Reverse transform: {len(result.errors)} problems", level=2)
        return result

    def validate(self, text: str) -> List[TransformError]:
        """Problems a forward transform of `text` would report"""
        return self.forward(text).errors

    def supportedTypes_list(self) -> List[str]:
        """Built-in annotation types followed by the custom mapped ones"""
        types = self.registry.types_list()
        types.extend(name for name in self.config.component_mappings if name not in types)
        return types

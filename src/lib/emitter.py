"""
Emitter for annotation blocks to component markup

Transforms scanned annotation blocks into fumadocs-ui component markup and
substitutes it into the document.

The emitter works in two phases:
1. Emission: every block becomes one Edit (line span -> markup) and the
   import declarations its component needs are collected
2. Application: all edits are applied in a single ordered pass over the
   original, unmodified line buffer

Because every edit refers to the original line numbers and is applied in
one pass, no substitution can shift the lines of another block.
"""

from typing import List, Optional, Set, Tuple

from ..config import TranspilerConfig, appsettings
from ..models.annotations import (
    AnnotationBlock,
    Edit,
    EmitResult,
    ErrorKind,
    TransformError,
)
from .components import ComponentRegistry
from .log import LOG


class UnknownAnnotationError(Exception):
    """Raised for a block type with neither a built-in nor a custom mapping"""
    pass


class Emitter:
    """
    Emits component markup for annotation blocks

    Responsibilities:
    - Look up built-in handlers in the ComponentRegistry
    - Fall back to custom template mappings for other types
    - Collect import declarations per call
    - Isolate failures: a failing block is left unmodified and reported
    """

    def __init__(self, config: Optional[TranspilerConfig] = None,
                 registry: Optional[ComponentRegistry] = None) -> None:
        """
        Initialize emitter

        Args:
            config: Transform configuration (custom mappings and imports)
            registry: Component registry, built from config if not given
        """
        self.config = config or TranspilerConfig()
        self.registry = registry or ComponentRegistry(self.config.component_package)

    def blocks_emit(self, blocks: List[AnnotationBlock]) -> EmitResult:
        """
        Emit markup for every block

        Args:
            blocks: Blocks in source order

        Returns:
            EmitResult with one edit per emitted block, the set of import
            declarations used and one error per block that failed
        """
        result = EmitResult()

        for block in blocks:
            try:
                markup, declaration = self.block_emit(block)
            except UnknownAnnotationError as e:
                result.errors.append(TransformError(
                    message=str(e),
                    line=block.start_line,
                    kind=ErrorKind.ERROR,
                    annotation_type=block.type,
                ))
                continue
            except Exception as e:
                result.errors.append(TransformError(
                    message=f"Failed to transform {block.type}: {e}",
                    line=block.start_line,
                    kind=ErrorKind.ERROR,
                    annotation_type=block.type,
                ))
                continue

            result.edits.append(Edit(block.start_line, block.end_line, markup))
            if declaration:
                result.imports.add(declaration)
            LOG(f"Emitted '{block.type}' for lines {block.start_line}-{block.end_line}", level=3)

        LOG(f"Emitted {len(result.edits)} of {len(blocks)} blocks, "
            f"{len(result.imports)} imports", level=2)
        return result

    def block_emit(self, block: AnnotationBlock) -> Tuple[str, Optional[str]]:
        """
        Emit markup for one block

        Returns:
            (markup, import declaration or None)

        Raises:
            UnknownAnnotationError: If the type is neither built in nor mapped
        """
        handler = self.registry.get(block.type)
        if handler:
            return handler(block), self.registry.import_get(block.type)

        template = self.config.component_mappings.get(block.type)
        if template is not None:
            markup = template.replace(appsettings.content_placeholder, block.content, 1)
            return markup, self.config.custom_imports.get(block.type)

        raise UnknownAnnotationError(f"Unknown annotation type '{block.type}'")


def edits_apply(lines: List[str], edits: List[Edit]) -> str:
    """
    Apply line-span edits to a line buffer in one pass

    Each edit replaces lines start_line..end_line (1-based, inclusive) with
    its replacement text. Edits never overlap since blocks never do.

    Args:
        lines: Original document lines (not modified)
        edits: Edits in any order

    Returns:
        The edited document text

    Example:
        >>> edits_apply(["a", ":::x", "b", ":::", "c"], [Edit(2, 4, "<X/>")])
        'a\\n<X/>\\nc'
    """
    output: List[str] = []
    position = 0

    for edit in sorted(edits, key=lambda e: e.start_line):
        output.extend(lines[position:edit.start_line - 1])
        output.append(edit.replacement)
        position = edit.end_line

    output.extend(lines[position:])
    return "\n".join(output)


def imports_order(imports: Set[str]) -> List[str]:
    """Import declarations in a stable output order"""
    return sorted(imports)

"""
Annotation and transform data models

Type-safe structures passed between the scanner, the per-type content
parsers, the emitter and the reverse matcher. Everything here is created
fresh for one transform call and never shared between calls.
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set


class ErrorKind(str, Enum):
    """Severity of a TransformError"""
    WARNING = "warning"
    ERROR = "error"


@dataclass
class TransformError:
    """
    A problem found while scanning, validating or emitting

    Warnings never abort processing. Errors mark the enclosing operation
    unsuccessful but never stop the remaining blocks from being processed.

    Attributes:
        message: Human-readable description
        line: 1-based source line the problem refers to (0 when unknown)
        kind: ErrorKind.WARNING or ErrorKind.ERROR
        annotation_type: Annotation type involved, if any (e.g. "tabs")
    """
    message: str
    line: int
    kind: ErrorKind = ErrorKind.ERROR
    annotation_type: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.kind == ErrorKind.ERROR


@dataclass
class AnnotationBlock:
    """
    One `:::type ... :::` region found by the scanner

    Attributes:
        type: Annotation type name (e.g. "callout-info", "tabs")
        attributes: Opener attributes (e.g. {"lang": "python"})
        content: Raw lines between the markers, newline-joined
        start_line: 1-based line of the opening marker
        end_line: 1-based line of the closing marker
        original_text: Verbatim text of the whole block, markers included

    Example:
        For ":::code-block lang=python\\nprint(1)\\n:::" at line 1:
        AnnotationBlock(
            type="code-block",
            attributes={"lang": "python"},
            content="print(1)",
            start_line=1,
            end_line=3,
            original_text=":::code-block lang=python\\nprint(1)\\n:::"
        )
    """
    type: str
    attributes: Dict[str, str]
    content: str
    start_line: int
    end_line: int
    original_text: str


@dataclass
class ScanResult:
    """Blocks and structural errors produced by one scan"""
    blocks: List[AnnotationBlock]
    errors: List[TransformError]


@dataclass
class TabItem:
    title: str
    content: str


@dataclass
class StepItem:
    title: str
    content: str


@dataclass
class AccordionItem:
    title: str
    content: str


@dataclass
class FileTreeNode:
    """
    Node of a file tree forest parsed from a `:::files` block

    Directories always carry a children list (possibly empty), files carry
    None. `level` is the indentation depth the node was read at.
    """
    name: str
    is_file: bool
    level: int
    children: Optional[List['FileTreeNode']] = None


@dataclass
class Edit:
    """Replacement of the 1-based inclusive line span start_line..end_line"""
    start_line: int
    end_line: int
    replacement: str


@dataclass
class EmitResult:
    """
    Result of emitting every block of one document

    Attributes:
        edits: One Edit per successfully emitted block, in source order
        imports: Import declarations required by the emitted components
        errors: Emission errors (unknown types, failing handlers)
    """
    edits: List[Edit] = field(default_factory=list)
    imports: Set[str] = field(default_factory=set)
    errors: List[TransformError] = field(default_factory=list)


@dataclass
class TransformResult:
    """
    Outcome of a forward or reverse transform

    Attributes:
        content: Transformed text
        imports: Import declarations used (always empty in reverse)
        errors: Every scan, validation and emission problem, in order
    """
    content: str
    imports: Set[str] = field(default_factory=set)
    errors: List[TransformError] = field(default_factory=list)

    @property
    def success(self) -> bool:
        """True when no error of kind ERROR was recorded"""
        return not any(error.is_error for error in self.errors)

"""
Models package for annodocs

Contains data structures and type definitions for the transform pipeline.
"""

from .state import ProgramState, pipeline
from .annotations import (
    AnnotationBlock,
    TransformError,
    ErrorKind,
    TransformResult,
    ScanResult,
    TabItem,
    StepItem,
    AccordionItem,
    FileTreeNode,
    Edit,
    EmitResult,
)
from .components import ComponentSpec, ComponentCategory, CALLOUT_KINDS, BUILTIN_TYPES
from .documents import SourceDocument, FileResult

__all__ = [
    "ProgramState",
    "pipeline",
    "AnnotationBlock",
    "TransformError",
    "ErrorKind",
    "TransformResult",
    "ScanResult",
    "TabItem",
    "StepItem",
    "AccordionItem",
    "FileTreeNode",
    "Edit",
    "EmitResult",
    "ComponentSpec",
    "ComponentCategory",
    "CALLOUT_KINDS",
    "BUILTIN_TYPES",
    "SourceDocument",
    "FileResult",
]

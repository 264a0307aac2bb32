"""
Document and file-level data models

Structures exchanged with the file handling layer: what was read from
disk and what happened to each processed file.
"""

from pathlib import Path
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .annotations import TransformError


@dataclass
class SourceDocument:
    """
    A source file split into frontmatter and body

    Attributes:
        body: Text after the frontmatter block (the whole text if none)
        frontmatter: Parsed frontmatter mapping ({} if none)
        body_offset: Number of lines consumed by the frontmatter block,
                     added to body line numbers to get file line numbers
        original: Complete file text as read
    """
    body: str
    frontmatter: Dict[str, Any] = field(default_factory=dict)
    body_offset: int = 0
    original: str = ""


@dataclass
class FileResult:
    """
    Outcome of processing one file

    Attributes:
        input_path: Source file
        output_path: Target file (None when nothing was produced)
        success: False if any error-kind problem was recorded
        errors: Every problem found for this file
    """
    input_path: Path
    output_path: Optional[Path] = None
    success: bool = True
    errors: List[TransformError] = field(default_factory=list)

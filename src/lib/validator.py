"""
Content validation for annotation blocks

Checks each block's content and attributes against the rules of its type.
Soft requirements (a missing "lang" or banner "type", empty content) are
warnings; broken item structure (tabs/accordion lines without a "|", steps
lines not in "Step N:" form) is an error. Neither ever stops processing:
the emitter still renders the block with lenient defaults.

Unknown types are not reported here; the emitter reports them when it
finds neither a built-in nor a custom mapping.
"""

from typing import List

from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from ..models.annotations import AnnotationBlock, ErrorKind, TransformError
from ..models.components import CALLOUT_KINDS
from .content import STEP_PATTERN, contentLines_get


CALLOUT_TYPES = {f"callout-{kind}" for kind in CALLOUT_KINDS}


def issue_make(block: AnnotationBlock, message: str, kind: ErrorKind) -> TransformError:
    """Build a TransformError located at the block's opener"""
    return TransformError(
        message=message,
        line=block.start_line,
        kind=kind,
        annotation_type=block.type,
    )


def language_known(lang: str) -> bool:
    """Check a code language name against the Pygments lexer aliases"""
    try:
        get_lexer_by_name(lang)
    except ClassNotFound:
        return False
    return True


class Validator:
    """
    Per-type validation of annotation blocks

    Example:
        >>> Validator().block_validate(block)   # ":::tabs\\nA\\nB|C\\n:::"
        [TransformError(message='Tabs annotation must have content in format "Title|Content"',
                        line=1, kind=ErrorKind.ERROR, annotation_type='tabs')]
    """

    def blocks_validate(self, blocks: List[AnnotationBlock]) -> List[TransformError]:
        """Validate every block, problems in source order"""
        errors: List[TransformError] = []
        for block in blocks:
            errors.extend(self.block_validate(block))
        return errors

    def block_validate(self, block: AnnotationBlock) -> List[TransformError]:
        """Validate one block according to its type"""
        if block.type in CALLOUT_TYPES:
            return self.callout_validate(block)

        validators = {
            'tabs': self.tabs_validate,
            'accordion': self.accordion_validate,
            'steps': self.steps_validate,
            'code-block': self.codeBlock_validate,
            'files': self.files_validate,
            'banner': self.banner_validate,
        }
        validate = validators.get(block.type)
        return validate(block) if validate else []

    def callout_validate(self, block: AnnotationBlock) -> List[TransformError]:
        if not block.content.strip():
            return [issue_make(block, f"Callout annotation '{block.type}' has empty content",
                               ErrorKind.WARNING)]
        return []

    def pipeLines_validate(self, block: AnnotationBlock, label: str, fmt: str) -> List[TransformError]:
        """Every non-blank line must hold a "|" separator"""
        lines = contentLines_get(block.content)
        if not lines:
            return [issue_make(block, f"{label} annotation has no items", ErrorKind.ERROR)]
        if not all("|" in line for line in lines):
            return [issue_make(block, f'{label} annotation must have content in format "{fmt}"',
                               ErrorKind.ERROR)]
        return []

    def tabs_validate(self, block: AnnotationBlock) -> List[TransformError]:
        return self.pipeLines_validate(block, "Tabs", "Title|Content")

    def accordion_validate(self, block: AnnotationBlock) -> List[TransformError]:
        return self.pipeLines_validate(block, "Accordion", "Question|Answer")

    def steps_validate(self, block: AnnotationBlock) -> List[TransformError]:
        lines = contentLines_get(block.content)
        if not lines:
            return [issue_make(block, "Steps annotation has no items", ErrorKind.ERROR)]
        if not all(STEP_PATTERN.match(line.strip()) for line in lines):
            return [issue_make(block, 'Steps annotation must have content in format "Step N: Description"',
                               ErrorKind.ERROR)]
        return []

    def codeBlock_validate(self, block: AnnotationBlock) -> List[TransformError]:
        lang = block.attributes.get('lang')
        if not lang:
            return [issue_make(block, 'Code block annotation requires "lang" attribute',
                               ErrorKind.WARNING)]
        if not language_known(lang):
            return [issue_make(block, f"Code block language '{lang}' is not recognised",
                               ErrorKind.WARNING)]
        return []

    def files_validate(self, block: AnnotationBlock) -> List[TransformError]:
        if not block.content.strip():
            return [issue_make(block, "Files annotation has empty content", ErrorKind.WARNING)]
        return []

    def banner_validate(self, block: AnnotationBlock) -> List[TransformError]:
        errors = []
        if not block.attributes.get('type'):
            errors.append(issue_make(block, 'Banner annotation requires "type" attribute',
                                     ErrorKind.WARNING))
        if not block.content.strip():
            errors.append(issue_make(block, "Banner annotation has empty content", ErrorKind.WARNING))
        return errors

"""
Component specification and metadata models

Defines how a built-in annotation type maps onto a target component:
its tags, the import declaration it needs and the routine that emits it.
Used by ComponentRegistry for lookup, type listings and import handling.
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import Callable, List, Tuple


class ComponentCategory(Enum):
    """
    Categories of built-in annotation types

    Used for organization and for the supported-type listing.
    """
    CALLOUT = "callout"      # :::callout-info, :::banner
    LAYOUT = "layout"        # :::tabs, :::steps, :::accordion
    CODE = "code"            # :::code-block, :::files


@dataclass
class ComponentSpec:
    """
    Specification for one built-in annotation type

    Attributes:
        name: Annotation type name (e.g. "tabs", "callout-warn")
        category: Category for organization
        description: Human-readable description
        handler: Emission function (block) -> markup string
        module: Component module below the configured package
                (e.g. "tabs" -> "fumadocs-ui/components/tabs")
        exports: Component names imported from that module, in order
        examples: Example annotation sources
    """
    name: str
    category: ComponentCategory
    description: str
    handler: Callable
    module: str
    exports: Tuple[str, ...]
    examples: List[str] = field(default_factory=list)

    def import_make(self, package: str) -> str:
        """
        Build the import declaration for this component

        Example:
            >>> spec.import_make("fumadocs-ui/components")
            "import { Tabs, Tab } from 'fumadocs-ui/components/tabs';"
        """
        names = ", ".join(self.exports)
        return f"import {{ {names} }} from '{package}/{self.module}';"


# Fixed callout subtypes (":::callout-<kind>")
CALLOUT_KINDS: Tuple[str, ...] = ("info", "warn", "error", "note")

# Types with a built-in handler; custom template mappings cannot reuse them
BUILTIN_TYPES: Tuple[str, ...] = tuple(f"callout-{kind}" for kind in CALLOUT_KINDS) + (
    "banner", "tabs", "steps", "accordion", "code-block", "files",
)


def calloutKind_get(annotation_type: str) -> str:
    """Return the kind of a callout type name ("callout-warn" -> "warn")"""
    return annotation_type.split("-", 1)[1]

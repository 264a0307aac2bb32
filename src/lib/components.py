"""
Component implementations for annodocs

Each built-in annotation type has an emission routine turning its block
into fumadocs-ui component markup. Uses ComponentSpec for metadata, the
import declaration and type listings.
"""

import json
from typing import Callable, Dict, Iterable, List, Optional

from ..models.annotations import AnnotationBlock, FileTreeNode
from ..models.components import ComponentSpec, ComponentCategory, CALLOUT_KINDS, calloutKind_get
from .content import accordion_parse, files_parse, steps_parse, tabs_parse
from .tags import attribute_render


def callout_emit(block: AnnotationBlock) -> str:
    """Handle :::callout-<kind> - compile to <Callout type="kind">"""
    kind = calloutKind_get(block.type)
    return f'<Callout type={attribute_render(kind)}>\n{block.content.strip()}\n</Callout>'


def tabs_emit(block: AnnotationBlock) -> str:
    """Handle :::tabs - compile to <Tabs> with one <Tab> per line"""
    tabs = tabs_parse(block.content)
    labels = json.dumps([tab.title for tab in tabs], ensure_ascii=False)

    lines = [f'<Tabs items={{{labels}}}>']
    for tab in tabs:
        lines.append(f'<Tab value={attribute_render(tab.title)}>')
        lines.append(tab.content)
        lines.append('</Tab>')
    lines.append('</Tabs>')
    return "\n".join(lines)


def steps_emit(block: AnnotationBlock) -> str:
    """Handle :::steps - each <Step> opens with a level 2 heading"""
    lines = ['<Steps>']
    for step in steps_parse(block.content):
        lines.append('<Step>')
        lines.append(f'## {step.title}')
        lines.append(step.content)
        lines.append('</Step>')
    lines.append('</Steps>')
    return "\n".join(lines)


def accordion_emit(block: AnnotationBlock) -> str:
    """Handle :::accordion - compile to <Accordions> of titled <Accordion>"""
    lines = ['<Accordions type="single">']
    for item in accordion_parse(block.content):
        lines.append(f'<Accordion title={attribute_render(item.title)}>')
        lines.append(item.content)
        lines.append('</Accordion>')
    lines.append('</Accordions>')
    return "\n".join(lines)


def codeBlock_emit(block: AnnotationBlock) -> str:
    """Handle :::code-block - <CodeBlock lang title> around a fenced block"""
    lang = block.attributes.get('lang') or 'text'
    title = block.attributes.get('title')

    # lang always precedes title
    opening = f'<CodeBlock lang={attribute_render(lang)}'
    if title:
        opening += f' title={attribute_render(title)}'
    opening += '>'

    return f'{opening}\n```{lang}\n{block.content}\n```\n</CodeBlock>'


def fileTree_render(nodes: Iterable[FileTreeNode]) -> List[str]:
    """Render a file forest as <File> lines, directories wrapping children"""
    lines: List[str] = []
    for node in nodes:
        if node.is_file:
            lines.append(f'<File name={attribute_render(node.name)} />')
            continue
        lines.append(f'<File name={attribute_render(node.name + "/")}>')
        lines.extend(fileTree_render(node.children or []))
        lines.append('</File>')
    return lines


def files_emit(block: AnnotationBlock) -> str:
    """Handle :::files - compile the indented listing to nested <File>"""
    lines = ['<Files>', *fileTree_render(files_parse(block.content)), '</Files>']
    return "\n".join(lines)


def banner_emit(block: AnnotationBlock) -> str:
    """Handle :::banner - compile to <Banner type>"""
    banner_type = block.attributes.get('type') or 'info'
    return f'<Banner type={attribute_render(banner_type)}>\n{block.content.strip()}\n</Banner>'


class ComponentRegistry:
    """
    Registry of built-in annotation types

    Maps annotation type names to ComponentSpec objects containing the
    emission handler and the import declaration of the component.
    """

    def __init__(self, package: str = "fumadocs-ui/components") -> None:
        """
        Initialize the registry and register all built-in types

        Args:
            package: Module prefix of the component import declarations
        """
        self.package = package
        self.specs: Dict[str, ComponentSpec] = {}
        self.calloutComponents_register()
        self.layoutComponents_register()
        self.codeComponents_register()

    def register(self, spec: ComponentSpec) -> None:
        """Register a component specification"""
        self.specs[spec.name] = spec

    def get(self, name: str) -> Optional[Callable[[AnnotationBlock], str]]:
        """Get the emission handler of a built-in type, None if unknown"""
        spec = self.specs.get(name)
        return spec.handler if spec else None

    def spec_get(self, name: str) -> Optional[ComponentSpec]:
        """Get full component specification by type name"""
        return self.specs.get(name)

    def import_get(self, name: str) -> Optional[str]:
        """Import declaration required by a built-in type"""
        spec = self.specs.get(name)
        return spec.import_make(self.package) if spec else None

    def types_list(self) -> List[str]:
        """Built-in type names, in registration order"""
        return list(self.specs)

    def components_listByCategory(self, category: ComponentCategory) -> List[ComponentSpec]:
        """Get all built-in types in a category"""
        return [spec for spec in self.specs.values() if spec.category == category]

    def calloutComponents_register(self) -> None:
        """Register callouts and banners"""
        for kind in CALLOUT_KINDS:
            self.register(ComponentSpec(
                name=f'callout-{kind}',
                category=ComponentCategory.CALLOUT,
                description=f'{kind.capitalize()} callout box',
                handler=callout_emit,
                module='callout',
                exports=('Callout',),
                examples=[f':::callout-{kind}\nRemember to save.\n:::'],
            ))

        self.register(ComponentSpec(
            name='banner',
            category=ComponentCategory.CALLOUT,
            description='Page-wide banner, "type" attribute defaults to info',
            handler=banner_emit,
            module='banner',
            exports=('Banner',),
            examples=[':::banner type=warning\nv2 is deprecated\n:::'],
        ))

    def layoutComponents_register(self) -> None:
        """Register tabs, steps and accordions"""
        self.register(ComponentSpec(
            name='tabs',
            category=ComponentCategory.LAYOUT,
            description='Tabbed panels, one "Label|Content" line per tab',
            handler=tabs_emit,
            module='tabs',
            exports=('Tabs', 'Tab'),
            examples=[':::tabs\nnpm|npm install\nyarn|yarn add\n:::'],
        ))

        self.register(ComponentSpec(
            name='steps',
            category=ComponentCategory.LAYOUT,
            description='Numbered steps, one "Step N: text" line per step',
            handler=steps_emit,
            module='steps',
            exports=('Steps', 'Step'),
            examples=[':::steps\nStep 1: Install\nStep 2: Configure\n:::'],
        ))

        self.register(ComponentSpec(
            name='accordion',
            category=ComponentCategory.LAYOUT,
            description='Collapsible items, one "Question|Answer" line per item',
            handler=accordion_emit,
            module='accordion',
            exports=('Accordions', 'Accordion'),
            examples=[':::accordion\nIs it free?|Yes\n:::'],
        ))

    def codeComponents_register(self) -> None:
        """Register code blocks and file trees"""
        self.register(ComponentSpec(
            name='code-block',
            category=ComponentCategory.CODE,
            description='Code block with "lang" and optional "title" attributes',
            handler=codeBlock_emit,
            module='codeblock',
            exports=('CodeBlock',),
            examples=[':::code-block lang=python title="hello.py"\nprint("hi")\n:::'],
        ))

        self.register(ComponentSpec(
            name='files',
            category=ComponentCategory.CODE,
            description='File tree from a two-space indented listing, directories end in "/"',
            handler=files_emit,
            module='files',
            exports=('Files', 'File'),
            examples=[':::files\nsrc/\n  index.ts\n:::'],
        ))

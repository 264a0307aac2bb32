"""
Reverse matcher tests - markup back to annotations

Code block titles matching the heading-title patterns are dropped on the
way back, so round trips are only exact for titles outside that table.
"""

import pytest

from annodocs.config import TranspilerConfig
from annodocs.lib.reverse import ReverseMatcher
from annodocs.models.annotations import ErrorKind


def reverse(text: str, config: TranspilerConfig = None) -> str:
    return ReverseMatcher(config).reverse(text).content


class TestImports:
    """Test import declaration stripping"""

    def test_strip_component_imports(self):
        text = "import { Callout } from 'fumadocs-ui/components/callout';\n\n\nBody"
        assert reverse(text) == "Body"

    def test_foreign_imports_kept(self):
        text = "import { Chart } from '../chart';\n\nBody"
        assert reverse(text) == text

    def test_indented_imports_stripped(self):
        text = "  import { Callout } from 'fumadocs-ui/components/callout';\nBody"
        assert reverse(text) == "Body"

        config = TranspilerConfig(custom_imports={"custom-tip": "import { Tip } from './tip';"})
        assert reverse("\timport { Tip } from './tip';\nBody", config) == "Body"

    def test_custom_imports_stripped(self):
        config = TranspilerConfig(custom_imports={"custom-tip": "import { Tip } from './tip';"})
        assert reverse("import { Tip } from './tip';\nBody", config) == "Body"


class TestElements:
    """Test each component's annotation form"""

    def test_callout(self):
        assert reverse('<Callout type="warn">\nBe careful\n</Callout>') == ":::callout-warn\nBe careful\n:::"

    def test_callout_single_line(self):
        assert reverse('<Callout type="info">Hi</Callout>') == ":::callout-info\nHi\n:::"

    def test_tabs(self):
        text = '<Tabs items={["npm", "yarn"]}>\n<Tab value="npm">\nnpm i\n</Tab>\n<Tab value="yarn">\nyarn add\n</Tab>\n</Tabs>'
        assert reverse(text) == ":::tabs\nnpm|npm i\nyarn|yarn add\n:::"

    def test_tab_multiline_body_collapsed(self):
        text = '<Tabs items={["A"]}>\n<Tab value="A">\nline one\n\nline two\n</Tab>\n</Tabs>'
        assert reverse(text) == ":::tabs\nA|line one line two\n:::"

    def test_steps(self):
        text = "<Steps>\n<Step>\n## Step 1\nInstall\n</Step>\n<Step>\n## Step\nThen run\n</Step>\n</Steps>"
        assert reverse(text) == ":::steps\nStep 1: Install\nThen run\n:::"

    def test_accordion(self):
        text = '<Accordions type="single">\n<Accordion title="Free?">\nYes\n</Accordion>\n</Accordions>'
        assert reverse(text) == ":::accordion\nFree?|Yes\n:::"

    def test_code_block_explicit_title(self):
        text = '<CodeBlock lang="python" title="hello.py">\n```python\nprint(1)\n```\n</CodeBlock>'
        assert reverse(text) == ':::code-block lang="python" title="hello.py"\nprint(1)\n:::'

    def test_code_block_without_title(self):
        text = '<CodeBlock lang="text">\n```text\nplain\n```\n</CodeBlock>'
        assert reverse(text) == ':::code-block lang="text"\nplain\n:::'

    def test_files(self):
        text = '<Files>\n<File name="src/">\n<File name="a.ts" />\n<File name="lib/">\n<File name="b.ts" />\n</File>\n</File>\n</Files>'
        assert reverse(text) == ":::files\nsrc/\n  a.ts\n  lib/\n    b.ts\n:::"

    def test_banner(self):
        assert reverse('<Banner type="warning">\nOld\n</Banner>') == ':::banner type="warning"\nOld\n:::'

    def test_empty_content(self):
        assert reverse('<Callout type="info">\n\n</Callout>') == ":::callout-info\n:::"
        assert reverse('<Banner type="warning"></Banner>') == ':::banner type="warning"\n:::'

    def test_siblings(self):
        text = '<Callout type="info">\na\n</Callout>\n\n<Callout type="note">\nb\n</Callout>'
        assert reverse(text) == ":::callout-info\na\n:::\n\n:::callout-note\nb\n:::"

    def test_tags_in_code_fence_untouched(self):
        text = '```mdx\n<Callout type="info">\nexample\n</Callout>\n```'
        assert reverse(text) == text


class TestHeadingHeuristic:
    """Test the heading-derived code title classifier"""

    @pytest.mark.parametrize("title", [
        "Installation",
        "Getting Started",
        "Step 2",
        "Quick Start",
        "Python Example",
    ])
    def test_heading_like_titles_dropped(self, title):
        text = f'<CodeBlock lang="bash" title="{title}">\n```bash\nls\n```\n</CodeBlock>'
        assert reverse(text) == "```bash\nls\n```"

    @pytest.mark.parametrize("title", ["hello.py", "src/index.ts", "main"])
    def test_explicit_titles_kept(self, title):
        assert ReverseMatcher().title_isHeadingDerived(title) is False

    def test_pattern_table_is_configuration(self):
        config = TranspilerConfig(heading_title_patterns=[r"^Demo"])
        matcher = ReverseMatcher(config)
        assert matcher.title_isHeadingDerived("Demo run")
        assert not matcher.title_isHeadingDerived("Installation")

    def test_fence_titles_stripped(self):
        assert reverse('## Install\n```bash title="Install"\nls\n```') == "## Install\n```bash\nls\n```"


class TestWarnings:
    """Elements that cannot be converted are left unchanged"""

    def test_callout_without_type(self):
        text = "<Callout>\nx\n</Callout>"
        result = ReverseMatcher().reverse(text)
        assert result.content == text
        assert len(result.errors) == 1
        assert result.errors[0].kind == ErrorKind.WARNING

    def test_tabs_without_items(self):
        text = "<Tabs items={[]}>\n</Tabs>"
        result = ReverseMatcher().reverse(text)
        assert result.content == text
        assert result.errors[0].kind == ErrorKind.WARNING

    def test_unclosed(self):
        text = 'intro\n<Banner type="info">\nnever closed'
        result = ReverseMatcher().reverse(text)
        assert result.content == text
        assert result.errors[0].line == 2
        assert result.success

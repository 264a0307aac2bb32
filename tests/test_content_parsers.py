"""
Per-type content parser tests

Tests tabs/accordion pipe lines, step lines and the file tree forest.
"""

from annodocs.lib.content import (
    accordion_parse,
    files_parse,
    pipeLine_split,
    steps_parse,
    tabs_parse,
)
from annodocs.models.annotations import AccordionItem, StepItem, TabItem


class TestPipeLines:
    """Test "label|body" splitting shared by tabs and accordions"""

    def test_first_pipe_splits(self):
        assert pipeLine_split("Shell | ls | wc -l") == ("Shell", "ls | wc -l")

    def test_no_pipe(self):
        assert pipeLine_split("  lonely line ") == ("", "lonely line")

    def test_tabs(self):
        items = tabs_parse("npm|npm install\n\nyarn|yarn add")
        assert items == [
            TabItem(title="npm", content="npm install"),
            TabItem(title="yarn", content="yarn add"),
        ]

    def test_accordion(self):
        items = accordion_parse("Is it free?|Yes\nCan I self host?|Of course")
        assert items == [
            AccordionItem(title="Is it free?", content="Yes"),
            AccordionItem(title="Can I self host?", content="Of course"),
        ]

    def test_blank_content(self):
        assert tabs_parse("") == []
        assert accordion_parse("\n  \n") == []


class TestSteps:
    """Test "Step N: text" parsing"""

    def test_numbered_steps(self):
        items = steps_parse("Step 1: Install\nStep 2: Configure")
        assert items == [
            StepItem(title="Step 1", content="Install"),
            StepItem(title="Step 2", content="Configure"),
        ]

    def test_case_insensitive(self):
        assert steps_parse("step 3:   Run it") == [StepItem(title="Step 3", content="Run it")]

    def test_fallback_title(self):
        """A line not in step form keeps the generic title"""
        assert steps_parse("Just do it") == [StepItem(title="Step", content="Just do it")]


class TestFileTree:
    """Test the indentation based file tree parser"""

    def test_forest(self):
        nodes = files_parse("src/\n  a.ts\n  lib/\n    b.ts")

        assert len(nodes) == 1
        root = nodes[0]
        assert root.name == "src"
        assert not root.is_file
        assert [child.name for child in root.children] == ["a.ts", "lib"]

        a_ts, lib = root.children
        assert a_ts.is_file
        assert a_ts.children is None
        assert not lib.is_file
        assert [child.name for child in lib.children] == ["b.ts"]
        assert lib.children[0].level == 2

    def test_multiple_roots(self):
        nodes = files_parse("package.json\nsrc/\n  index.ts\nREADME.md")
        assert [node.name for node in nodes] == ["package.json", "src", "README.md"]
        assert [child.name for child in nodes[1].children] == ["index.ts"]

    def test_dedent_pops_to_parent(self):
        nodes = files_parse("a/\n  b/\n    c.txt\n  d.txt")
        a = nodes[0]
        assert [child.name for child in a.children] == ["b", "d.txt"]
        assert [child.name for child in a.children[0].children] == ["c.txt"]

    def test_empty_directory(self):
        nodes = files_parse("empty/")
        assert nodes[0].children == []

    def test_file_under_file_becomes_sibling_root(self):
        """Files never take children, deeper lines under a file go up a level"""
        nodes = files_parse("a.txt\n  b.txt")
        assert [node.name for node in nodes] == ["a.txt", "b.txt"]

"""
Scanner tests - block boundaries, attributes and structural errors
"""

import pytest

from annodocs.lib.scanner import Scanner, attributes_parse
from annodocs.models.annotations import ErrorKind


class TestAttributes:
    """Test the opener attribute parser"""

    def test_empty(self):
        assert attributes_parse(None) == {}
        assert attributes_parse("   ") == {}

    def test_quoted_and_unquoted(self):
        """Quoted values keep their spaces, unquoted ones stop at whitespace"""
        attributes = attributes_parse('lang=python title="Hello world"')
        assert attributes == {"lang": "python", "title": "Hello world"}

    def test_last_occurrence_wins(self):
        assert attributes_parse("lang=js lang=ts") == {"lang": "ts"}

    def test_hyphenated_keys(self):
        assert attributes_parse('data-id=7 aria-label="x y"') == {"data-id": "7", "aria-label": "x y"}

    def test_stray_tokens_ignored(self):
        assert attributes_parse("just words lang=go") == {"lang": "go"}


class TestBlocks:
    """Test well-formed block scanning"""

    def test_no_blocks(self):
        result = Scanner("# Title\n\nPlain text").scan()
        assert result.blocks == []
        assert result.errors == []

    def test_single_block(self):
        result = Scanner("Intro\n:::callout-info\nHello\n:::\nOutro").scan()

        assert len(result.blocks) == 1
        block = result.blocks[0]
        assert block.type == "callout-info"
        assert block.content == "Hello"
        assert block.start_line == 2
        assert block.end_line == 4
        assert block.original_text == ":::callout-info\nHello\n:::"
        assert result.errors == []

    def test_content_verbatim(self):
        """Interior blank lines and indentation are preserved"""
        source = ":::files\nsrc/\n\n  a.ts\n:::"
        block = Scanner(source).scan().blocks[0]
        assert block.content == "src/\n\n  a.ts"

    def test_attributes_on_opener(self):
        block = Scanner(':::code-block lang=python title="hello.py"\nprint(1)\n:::').scan().blocks[0]
        assert block.type == "code-block"
        assert block.attributes == {"lang": "python", "title": "hello.py"}

    def test_empty_block(self):
        block = Scanner(":::callout-note\n:::").scan().blocks[0]
        assert block.content == ""
        assert block.start_line == 1
        assert block.end_line == 2

    def test_blocks_in_source_order(self):
        source = "\n".join([
            ":::callout-info", "a", ":::",
            "text",
            ":::tabs", "A|1", ":::",
            ":::banner type=info", "b", ":::",
        ])
        blocks = Scanner(source).scan().blocks

        assert [block.type for block in blocks] == ["callout-info", "tabs", "banner"]
        assert [(block.start_line, block.end_line) for block in blocks] == [(1, 3), (5, 7), (8, 10)]

    def test_closer_with_trailing_text_is_content(self):
        block = Scanner(":::callout-info\n::: not a closer\n:::").scan().blocks[0]
        assert block.content == "::: not a closer"


class TestStructuralErrors:
    """Test unclosed blocks and stray closers"""

    def test_unclosed_at_end(self):
        """Exactly one error at the opener line and no blocks"""
        result = Scanner("text\n:::callout-warn\nnever closed").scan()

        assert result.blocks == []
        assert len(result.errors) == 1
        error = result.errors[0]
        assert error.line == 2
        assert error.kind == ErrorKind.ERROR
        assert error.annotation_type == "callout-warn"

    def test_stray_closer(self):
        result = Scanner("text\n:::\nmore").scan()

        assert result.blocks == []
        assert len(result.errors) == 1
        assert result.errors[0].line == 2
        assert result.errors[0].message == "Found closing annotation without opening block"

    def test_opener_inside_open_block(self):
        """The first block is reported unclosed, the second one still completes"""
        source = ":::callout-info\nfirst\n:::callout-warn\nsecond\n:::"
        result = Scanner(source).scan()

        assert len(result.errors) == 1
        assert result.errors[0].line == 1
        assert len(result.blocks) == 1
        assert result.blocks[0].type == "callout-warn"
        assert result.blocks[0].content == "second"
        assert result.blocks[0].start_line == 3

    def test_errors_do_not_stop_scan(self):
        source = ":::\n:::tabs\nA|B\n:::\n:::"
        result = Scanner(source).scan()

        assert len(result.blocks) == 1
        assert [error.line for error in result.errors] == [1, 5]

    @pytest.mark.parametrize("count", [1, 3, 5])
    def test_n_blocks_no_errors(self, count):
        source = "\n\n".join(f":::callout-note\nitem {i}\n:::" for i in range(count))
        result = Scanner(source).scan()
        assert len(result.blocks) == count
        assert result.errors == []

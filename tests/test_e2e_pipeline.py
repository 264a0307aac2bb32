"""
End-to-end pipeline tests

Tests the full batch: ProgramState -> env_check -> sources_find ->
sources_transform -> results_report, forward and back again.
"""

import pytest
from pathlib import Path
import tempfile

from annodocs.__main__ import (
    config_init,
    env_check,
    examples_print,
    results_report,
    sources_find,
    sources_transform,
    types_print,
)
from annodocs.config import config_load
from annodocs.lib import ComponentRegistry, Transpiler
from annodocs.models import ProgramState, pipeline


GUIDE = """# Getting Started

:::callout-info
Requires Python 3.9 or later
:::

:::tabs
pip|pip install annodocs
uv|uv add annodocs
:::

:::steps
Step 1: Install
Step 2: Run annodocs docs/ out/
:::
"""


def run(inputdir: Path, outputdir: Path, **options) -> ProgramState:
    state = ProgramState(inputdir=inputdir, outputdir=outputdir, **options)
    return pipeline(state, env_check, sources_find, sources_transform, results_report)


class TestBatch:
    """Test complete batch runs"""

    def test_forward_then_reverse(self):
        """A documentation tree survives the trip to MDX and back"""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            docs = root / "docs"
            (docs / "guide").mkdir(parents=True)
            (docs / "guide" / "start.md").write_text(GUIDE)

            state = run(docs, root / "mdx")
            assert state.envOK
            assert len(state.fileResults) == 1
            assert all(result.success for result in state.fileResults)

            mdx = (root / "mdx" / "guide" / "start.mdx").read_text()
            assert mdx.startswith('---\ntitle: "Getting Started"\n---\n')
            assert "import { Steps, Step } from 'fumadocs-ui/components/steps';" in mdx
            assert "<Tab value=\"uv\">" in mdx

            run(root / "mdx", root / "back", reverse=True)
            assert (root / "back" / "guide" / "start.md").read_text() == GUIDE

    def test_failures_exit_nonzero(self, capsys):
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            docs = root / "docs"
            docs.mkdir()
            (docs / "good.md").write_text(":::callout-note\nfine\n:::\n")
            (docs / "bad.md").write_text(":::callout-note\nnever closed\n")

            with pytest.raises(SystemExit) as exit_info:
                run(docs, root / "out")

            assert exit_info.value.code == 1
            assert (root / "out" / "good.mdx").exists()
            assert "bad.md:1: error: Unclosed annotation block" in capsys.readouterr().err

    def test_validate_only(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            docs = root / "docs"
            docs.mkdir()
            (docs / "a.md").write_text(GUIDE)

            state = run(docs, root / "out", validateOnly=True)
            assert all(result.success for result in state.fileResults)
            assert not (root / "out").exists()

    def test_missing_inputdir(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            with pytest.raises(SystemExit):
                run(Path(tmpdir) / "missing", Path(tmpdir) / "out")

    def test_config_file_discovered(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            docs = root / "docs"
            docs.mkdir()
            (docs / "annodocs.config.yaml").write_text("output_extension: .markdown-x\n")
            (docs / "a.md").write_text("text\n")

            state = run(docs, root / "out")
            assert state.config.output_extension == ".markdown-x"
            assert (root / "out" / "a.markdown-x").exists()


class TestOneShotActions:
    """Test --initConfig, --listTypes and --examples"""

    def test_init_config(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            config_init(Path(tmpdir) / "out")
            config = config_load(Path(tmpdir) / "out" / "annodocs.config.yaml")
            assert config.component_package == "fumadocs-ui/components"

    def test_list_types(self, capsys):
        with tempfile.TemporaryDirectory() as tmpdir:
            docs = Path(tmpdir)
            (docs / "annodocs.config.yaml").write_text(
                "component_mappings:\n  custom-tip: '<Tip>{{content}}</Tip>'\n"
            )
            types_print(None, docs)

        output = capsys.readouterr().out
        assert output.startswith("callout:\n  callout-info")
        assert "layout:\n  tabs" in output
        assert "code:\n  code-block" in output
        assert "custom:\n  custom-tip" in output

    def test_examples(self, capsys):
        examples_print()

        output = capsys.readouterr().out
        assert output.startswith("# callout-info: ")
        assert "\n:::tabs\nnpm|npm install\nyarn|yarn add\n:::\n" in output
        assert "\n:::banner type=warning\nv2 is deprecated\n:::\n" in output

    def test_examples_transform_cleanly(self):
        """Every printed example is accepted by the forward transform"""
        registry = ComponentRegistry()
        for name in registry.types_list():
            for example in registry.spec_get(name).examples:
                result = Transpiler().forward(example)
                assert result.success, name
                assert result.errors == [], name

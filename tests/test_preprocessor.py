"""
Directive processor tests

Tests the fixed filter-then-include order and the Preprocessor wrapper.
"""

import tempfile
from pathlib import Path

import pytest

from content_factory.lib.fileio import raw_read
from content_factory.lib.preprocessor import Preprocessor, directives_process


@pytest.fixture
def root():
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


class RecordingReader:
    """Raw reader that remembers every path requested"""

    def __init__(self):
        self.paths = []

    def __call__(self, path):
        self.paths.append(Path(path))
        return raw_read(path)


class TestOrdering:
    """Filtering must finish before inclusion at every level"""

    def test_dropped_region_never_reads_file(self, root):
        """An include inside a dropped region causes no read"""
        (root / "claude-only.md").write_text("Claude Content")
        (root / "roo-only.md").write_text("Roo Content")
        content = (
            '\n<content-factory-filter include="claude">\n'
            '<content-factory-include-file path="./claude-only.md" />\n'
            '</content-factory-filter>\n'
            '<content-factory-filter include="roo">\n'
            '<content-factory-include-file path="./roo-only.md" />\n'
            '</content-factory-filter>\n'
        )
        reader = RecordingReader()

        result = directives_process(
            content, "claude", "default", None, root, root / "main.md", reader=reader
        )

        assert "Claude Content" in result
        assert "Roo Content" not in result
        assert reader.paths == [root / "claude-only.md"]

    def test_filter_applies_inside_included_files(self, root):
        """Nested levels filter before including too"""
        (root / "deep.md").write_text("Deep Content")
        (root / "middle.md").write_text(
            'Middle-<content-factory-filter include="claude">'
            '<content-factory-include-file path="./deep.md" />'
            '</content-factory-filter>-Middle'
        )
        content = '<content-factory-include-file path="./middle.md" />'

        claude_reader = RecordingReader()
        claude = directives_process(
            content, "claude", "default", None, root, root / "main.md", reader=claude_reader
        )
        roo_reader = RecordingReader()
        roo = directives_process(
            content, "roo", "default", None, root, root / "main.md", reader=roo_reader
        )

        assert claude == "Middle-Deep Content-Middle"
        assert roo == "Middle--Middle"
        assert root / "deep.md" not in roo_reader.paths

    def test_missing_file_in_dropped_region_not_reported(self, root):
        """A dropped include never produces a missing-file marker"""
        content = (
            '<content-factory-filter include="roo">'
            '<content-factory-include-file path="./missing.md" />'
            '</content-factory-filter>ok'
        )
        assert directives_process(content, "claude", "default", None, root, root / "main.md") == "ok"


class TestPreprocessor:
    """Test the bound Preprocessor wrapper"""

    def test_plain_content(self, root):
        """Content without directives is returned as-is"""
        assert Preprocessor(tool="claude", strategy="s", root=root).process("Hello", root / "a.md") == "Hello"

    def test_independent_visitation_per_call(self, root):
        """Each process() call gets a fresh visitation set"""
        (root / "shared.md").write_text("S")
        pre = Preprocessor(tool="claude", strategy="s", root=root)
        content = '<content-factory-include-file path="./shared.md" />'

        assert pre.process(content, root / "a.md") == "S"
        assert pre.process(content, root / "a.md") == "S"

    def test_diagnostics_collected(self, root):
        """Recoverable conditions land in the bound diagnostics"""
        pre = Preprocessor(tool="claude", strategy="s", root=root)
        pre.diagnostics.echo = False
        pre.process('<content-factory-include-file path="./x.md" />', root / "a.md")

        assert len(pre.diagnostics.records) == 1

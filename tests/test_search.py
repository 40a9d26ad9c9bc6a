"""
Tests for the bounded regex search.
"""

import tempfile
from pathlib import Path

import pytest

from winbasic.filesystem import (
    FileAccessDeniedError,
    FileSystemConfig,
    InvalidPatternError,
    NotDirectoryError,
    PathNotFoundError,
    RestrictedSearchEngine,
    Root,
    RootRegistry,
    SearchResult,
    SearchType,
    format_results,
)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def project(temp_dir):
    """Create a small project tree inside the allowed root."""
    root = temp_dir / "project"
    root.mkdir()
    (root / "file1.txt").write_text("first line\nthe needle is here\nlast line\n")
    (root / "file2.log").write_text("nothing to see\n")
    return root


@pytest.fixture
def engine(project):
    """Create a search engine restricted to the project."""
    registry = RootRegistry([Root.from_path(project)])
    return RestrictedSearchEngine(FileSystemConfig(), registry)


class TestSearchType:
    """Test SearchType."""

    def test_flags(self):
        """Test what each type checks."""
        assert SearchType.NAME.checks_name and not SearchType.NAME.checks_content
        assert SearchType.CONTENT.checks_content and not SearchType.CONTENT.checks_name
        assert SearchType.BOTH.checks_name and SearchType.BOTH.checks_content

    def test_from_string(self):
        """Test building from the wire value."""
        assert SearchType("content") is SearchType.CONTENT


class TestRestrictedSearchEngine:
    """Test RestrictedSearchEngine."""

    def test_content_search(self, project, engine):
        """Test finding a single content match."""
        results = engine.search(project, "needle", SearchType.CONTENT)

        assert len(results) == 1
        assert results[0].relative_path == "file1.txt"
        assert results[0].matches == ["Line 2: the needle is here"]

    def test_search_is_case_insensitive(self, project, engine):
        """Test that patterns ignore case."""
        results = engine.search(project, "NEEDLE", "content")
        assert [r.relative_path for r in results] == ["file1.txt"]

    def test_name_search(self, project, engine):
        """Test matching file names only."""
        results = engine.search(project, r"\.log$", SearchType.NAME)

        assert len(results) == 1
        assert results[0].matches == ["File name matches pattern: file2.log"]

    def test_name_search_ignores_content(self, project, engine):
        """Test that a name search does not read contents."""
        assert engine.search(project, "needle", SearchType.NAME) == []

    def test_both_prefers_name_match(self, project, engine):
        """Test that a name hit short-circuits the content scan."""
        (project / "needle.md").write_text("needle\nneedle\n")

        results = engine.search(project, "needle", SearchType.BOTH)
        by_path = {r.relative_path: r.matches for r in results}

        assert by_path["needle.md"] == ["File name matches pattern: needle.md"]
        assert by_path["file1.txt"] == ["Line 2: the needle is here"]

    def test_matches_per_file_are_capped(self, project, engine):
        """Test truncation after five matches in one file."""
        (project / "many.txt").write_text("".join(f"hit {i}\n" for i in range(1, 8)))

        results = engine.search(project, "hit", SearchType.CONTENT)

        assert len(results) == 1
        matches = results[0].matches
        assert len(matches) == 6
        assert matches[:5] == [f"Line {i}: hit {i}" for i in range(1, 6)]
        assert matches[5] == "... more matches found (showing first 5 only)"

    def test_exactly_five_matches_not_truncated(self, project, engine):
        """Test that five matches don't produce the truncation marker."""
        (project / "five.txt").write_text("".join(f"hit {i}\n" for i in range(1, 6)))

        results = engine.search(project, "hit", SearchType.CONTENT)

        assert len(results[0].matches) == 5

    def test_max_results(self, project, engine):
        """Test the cap on matching files."""
        for i in range(5):
            (project / f"match{i}.txt").write_text("needle\n")

        results = engine.search(project, "needle", SearchType.CONTENT, max_results=2)

        assert [r.relative_path for r in results] == ["file1.txt", "match0.txt"]

    def test_max_results_zero(self, project, engine):
        """Test that a zero cap returns nothing."""
        assert engine.search(project, "needle", max_results=0) == []

    def test_recursive(self, project, engine):
        """Test descending into subdirectories."""
        sub = project / "sub"
        sub.mkdir()
        (sub / "deep.txt").write_text("needle\n")

        recursive = engine.search(project, "needle", SearchType.CONTENT)
        shallow = engine.search(project, "needle", SearchType.CONTENT, recursive=False)

        assert [r.relative_path.replace("\\", "/") for r in recursive] == [
            "file1.txt",
            "sub/deep.txt",
        ]
        assert [r.relative_path for r in shallow] == ["file1.txt"]

    def test_bare_carriage_return_is_not_a_line_break(self, project, engine):
        """Test that line numbers agree with read-file and write-lines."""
        (project / "cr.txt").write_bytes(b"a\rneedle\nz\n")

        results = engine.search(project, "needle", SearchType.CONTENT)
        by_path = {r.relative_path: r.matches for r in results}

        assert by_path["cr.txt"] == ["Line 1: a\rneedle"]

    def test_crlf_line_numbers(self, project, engine):
        """Test that CRLF files number lines the same way."""
        (project / "crlf.txt").write_bytes(b"one\r\ntwo needle\r\n")

        results = engine.search(project, "needle", SearchType.CONTENT)
        by_path = {r.relative_path: r.matches for r in results}

        assert by_path["crlf.txt"] == ["Line 2: two needle"]

    def test_undecodable_files_are_skipped(self, project, engine):
        """Test that binary files don't abort the search."""
        (project / "binary.bin").write_bytes(b"\xff\xfeneedle\x00\x81")

        results = engine.search(project, "needle", SearchType.CONTENT)

        assert [r.relative_path for r in results] == ["file1.txt"]

    def test_invalid_pattern(self, project, engine):
        """Test that a bad regex is reported."""
        with pytest.raises(InvalidPatternError) as exc_info:
            engine.search(project, "[unclosed", SearchType.CONTENT)

        assert str(exc_info.value).startswith("Invalid regular expression")

    def test_base_outside_roots(self, temp_dir, engine):
        """Test that searching outside the roots is denied."""
        with pytest.raises(FileAccessDeniedError):
            engine.search(temp_dir, "needle")

    def test_base_missing(self, project, engine):
        """Test that a missing base directory is reported."""
        with pytest.raises(PathNotFoundError):
            engine.search(project / "missing", "needle")

    def test_base_is_file(self, project, engine):
        """Test that a file base path is rejected."""
        with pytest.raises(NotDirectoryError):
            engine.search(project / "file1.txt", "needle")


class TestFormatResults:
    """Test rendering search results."""

    def test_no_matches(self):
        """Test the explicit no-match message."""
        text = format_results([], "needle", "C:/project")
        assert text == "No matches found for pattern 'needle' in 'C:/project'"

    def test_matches(self):
        """Test rendering matching files."""
        results = [
            SearchResult("file1.txt", ["Line 2: the needle is here"]),
            SearchResult("needle.md", ["File name matches pattern: needle.md"]),
        ]

        text = format_results(results, "needle", "C:/project")

        assert text == (
            "Found 2 matching files in 'C:/project':\n\n"
            "File: file1.txt\n"
            "  Line 2: the needle is here\n\n"
            "File: needle.md\n"
            "  File name matches pattern: needle.md\n\n"
        )

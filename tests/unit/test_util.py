"""Unit tests for util/fs.py and core/utils/diff.py"""

from mdxdoc.core.utils.diff import changed_lines, unified_diff
from mdxdoc.util.fs import discover_files


def test_discover_files_single(tmp_path):
    """discover_files returns a list with one file when given a file path."""
    f = tmp_path / "doc.mdx"
    f.write_text("# Hello")
    assert discover_files(f) == [f]


def test_discover_files_non_md_skipped(tmp_path):
    (tmp_path / "notes.txt").write_text("text")
    assert discover_files(tmp_path) == []
    assert discover_files(tmp_path / "notes.txt") == []


def test_discover_files_dir_sorted(tmp_path):
    """discover_files finds .md and .mdx files recursively, sorted."""
    sub = tmp_path / "sub"
    sub.mkdir()
    (sub / "b.mdx").write_text("b")
    (tmp_path / "a.md").write_text("a")
    assert discover_files(tmp_path) == [tmp_path / "a.md", sub / "b.mdx"]


def test_unified_diff_identical_is_empty():
    assert unified_diff("a\nb\n", "a\nb\n") == []


def test_unified_diff_labels_and_lines():
    lines = unified_diff("a\nb\n", "a\nc\n", "old.mdx", "new.mdx")
    assert lines[0].startswith("--- old.mdx")
    assert lines[1].startswith("+++ new.mdx")
    assert "-b\n" in lines
    assert "+c\n" in lines


def test_changed_lines():
    assert changed_lines("a\nb\n", "a\nc\nd\n") == 3


def test_changed_lines_counts_dashed_content():
    """Removed lines that begin with dashes are counted, not mistaken for headers."""
    assert changed_lines("---\nt: 1\n---\nx\n", "x\n") == 3
    assert changed_lines("same\n", "same\n") == 0

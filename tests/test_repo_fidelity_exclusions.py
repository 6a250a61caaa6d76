"""Unit tests for repo_fidelity.exclusions.ExclusionSet"""

import os

import pytest

from repo_fidelity.config import DEFAULT_EXCLUDED_NAMES, DEFAULT_EXCLUDED_PATHS
from repo_fidelity.exclusions import ExclusionSet


class TestExclusionSetMatching:
    """Tests for ExclusionSet.is_excluded()"""

    def test_name_matches_at_any_depth(self):
        """Names match the final segment anywhere in the tree"""
        exclusions = ExclusionSet(names=[".gitkeep"])
        assert exclusions.is_excluded(".gitkeep")
        assert exclusions.is_excluded("object-1/v1/content/.gitkeep")

    def test_path_matches_only_that_path(self):
        """Path entries exclude just the named file"""
        exclusions = ExclusionSet(["docs/notes.md"])
        assert exclusions.is_excluded("docs/notes.md")
        assert not exclusions.is_excluded("other/notes.md")
        assert not exclusions.is_excluded("notes.md")

    def test_root_path_does_not_match_deeper_file(self):
        """A root-level path entry leaves same-named content files alone"""
        exclusions = ExclusionSet(["ocfl_1.1.md"])
        assert exclusions.is_excluded("ocfl_1.1.md")
        assert not exclusions.is_excluded("object-1/v1/content/ocfl_1.1.md")

    def test_partial_names_do_not_match(self):
        """Matching is literal, not substring based"""
        exclusions = ExclusionSet(["ocfl_1.1.md"], names=[".gitkeep"])
        assert not exclusions.is_excluded("ocfl_1.1.md.bak")
        assert not exclusions.is_excluded("my_ocfl_1.1.md")
        assert not exclusions.is_excluded("a/.gitkeep.old")

    def test_entries_are_normalized(self):
        """Leading and trailing separators in entries are ignored"""
        exclusions = ExclusionSet(["/docs/notes.md/"])
        assert exclusions.is_excluded("docs/notes.md")

    @pytest.mark.skipif(os.sep == "\\", reason="backslash is a separator on Windows")
    def test_backslash_entry_kept_on_posix(self):
        """A backslash entry names a file containing a backslash"""
        exclusions = ExclusionSet(["a\\b.txt"])
        assert exclusions.is_excluded("a\\b.txt")
        assert not exclusions.is_excluded("a/b.txt")

    def test_empty_set_excludes_nothing(self):
        """An empty set lets every path through"""
        exclusions = ExclusionSet()
        assert not exclusions.is_excluded(".gitkeep")
        assert len(exclusions) == 0

    def test_contains_operator(self):
        """`in` delegates to is_excluded"""
        exclusions = ExclusionSet(names=[".gitkeep"])
        assert "a/.gitkeep" in exclusions
        assert "a/file" not in exclusions
        assert 42 not in exclusions


class TestExclusionSetConstruction:
    """Tests for default() / extended() / filter()"""

    def test_default_contains_fixture_files(self):
        """The default set ignores files bundled next to repository fixtures"""
        exclusions = ExclusionSet.default()
        for entry in DEFAULT_EXCLUDED_PATHS + DEFAULT_EXCLUDED_NAMES:
            assert exclusions.is_excluded(entry)
        assert exclusions.is_excluded("deep/dir/.gitkeep")
        assert not exclusions.is_excluded("object-1/v1/content/ocfl_1.0.txt")
        assert exclusions.is_excluded("0=ocfl_1.1") is False

    def test_extended_returns_new_set(self):
        """extended() leaves the original untouched"""
        base = ExclusionSet(names=[".gitkeep"])
        bigger = base.extended(["README.md"], names=["Thumbs.db"])
        assert bigger.is_excluded("README.md")
        assert bigger.is_excluded("v1/Thumbs.db")
        assert not base.is_excluded("README.md")
        assert bigger.is_excluded(".gitkeep")
        assert len(bigger) == 3  # noqa: PLR2004

    def test_filter_drops_excluded_paths(self):
        """filter() yields only content paths in input order"""
        exclusions = ExclusionSet(["ocfl_1.1.md"], names=[".gitkeep"])
        paths = ["b.txt", ".gitkeep", "ocfl_1.1.md", "dir/.gitkeep", "a.txt"]
        assert list(exclusions.filter(paths)) == ["b.txt", "a.txt"]

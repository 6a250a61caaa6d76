"""Unit tests for repo_fidelity.local_inventory - PathEnumerator"""

import os
import sys

import pytest

from repo_fidelity.errors import ConfigurationError
from repo_fidelity.exclusions import ExclusionSet
from repo_fidelity.local_inventory import PathEnumerator, iter_local_files, list_local_files


class TestIterLocalFiles:
    """Tests for iter_local_files()"""

    def test_lists_nested_files_with_forward_slashes(self, make_tree):
        """Every regular file is reported relative to the root"""
        root = make_tree({"a.txt": "hi", "v1/content/b.bin": b"\x00\x01", "inventory.json": "{}"})

        paths = sorted(iter_local_files(root, ExclusionSet()))

        assert paths == ["a.txt", "inventory.json", "v1/content/b.bin"]

    @pytest.mark.skipif(os.sep == "\\", reason="backslash is a separator on Windows")
    def test_backslash_in_file_name_preserved(self, make_tree):
        """A POSIX file name containing a backslash is one segment"""
        root = make_tree({"v1/a\\b.txt": "hi"})

        assert list(iter_local_files(root, ExclusionSet())) == ["v1/a\\b.txt"]

    def test_is_lazy(self, make_tree):
        """The enumeration is a generator, not a materialized list"""
        root = make_tree({"a.txt": "hi"})
        result = iter_local_files(root)
        assert next(result) == "a.txt"

    def test_directories_are_not_reported(self, make_tree):
        """Empty directories contribute nothing"""
        root = make_tree({"a.txt": "hi"})
        (root / "empty" / "deeper").mkdir(parents=True)

        assert list(iter_local_files(root)) == ["a.txt"]

    def test_default_exclusions_applied(self, make_tree):
        """Marker and specification files bundled with fixtures are skipped"""
        root = make_tree(
            {
                "a.txt": "hi",
                ".gitkeep": "",
                "deep/dir/.gitkeep": "",
                "ocfl_1.1.md": "spec",
                "ocfl_1.0.txt": "spec",
            }
        )

        assert list(iter_local_files(root)) == ["a.txt"]

    @pytest.mark.skipif(sys.platform.startswith("win"), reason="symlinks need privileges on Windows")
    def test_symlinked_directory_not_descended(self, make_tree):
        """Links to directories are not followed"""
        outside = make_tree({"secret.txt": "x"}, name="outside")
        root = make_tree({"a.txt": "hi"})
        os.symlink(outside, root / "linked", target_is_directory=True)

        assert list(iter_local_files(root)) == ["a.txt"]

    @pytest.mark.skipif(sys.platform.startswith("win"), reason="symlinks need privileges on Windows")
    def test_broken_symlink_skipped(self, make_tree):
        """Dangling links are not regular files"""
        root = make_tree({"a.txt": "hi"})
        os.symlink(root / "does-not-exist", root / "dangling")

        assert list(iter_local_files(root)) == ["a.txt"]

    @pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="requires named pipes")
    def test_fifo_skipped(self, make_tree):
        """Special files are not part of the content comparison"""
        root = make_tree({"a.txt": "hi"})
        os.mkfifo(root / "pipe")

        assert list(iter_local_files(root)) == ["a.txt"]


class TestIterLocalFilesErrors:
    """Tests for fatal local enumeration errors"""

    def test_missing_root_raises(self, tmp_path):
        """A root that does not exist aborts before any comparison"""
        with pytest.raises(ConfigurationError, match="does not exist"):
            list(iter_local_files(tmp_path / "missing"))

    def test_file_root_raises(self, tmp_path):
        """A root that is a file is a configuration error"""
        target = tmp_path / "file.txt"
        target.write_text("x")
        with pytest.raises(ConfigurationError, match="not a directory"):
            list(iter_local_files(target))

    def test_unreadable_directory_raises(self, make_tree, monkeypatch):
        """Errors while walking surface as configuration errors"""
        root = make_tree({"a.txt": "hi"})

        def _failing_walk(top, onerror=None, **kwargs):
            del kwargs
            onerror(PermissionError(13, "Permission denied", str(top)))
            yield from ()

        monkeypatch.setattr("repo_fidelity.local_inventory.os.walk", _failing_walk)

        with pytest.raises(ConfigurationError, match="Permission denied"):
            list(iter_local_files(root))


class TestPathEnumerator:
    """Tests for PathEnumerator and list_local_files()"""

    def test_list_local_files_sorted(self, make_tree):
        """Results are sorted for deterministic comparison"""
        root = make_tree({"z.txt": "1", "a/b.txt": "2", "m.txt": "3"})

        assert list_local_files(root) == ["a/b.txt", "m.txt", "z.txt"]

    def test_enumerator_uses_injected_exclusions(self, make_tree):
        """Custom exclusion tables replace the defaults"""
        root = make_tree({"a.txt": "hi", "README.md": "docs", ".gitkeep": ""})

        enumerator = PathEnumerator(ExclusionSet(["README.md"]))

        assert enumerator.list_relative_paths(root) == [".gitkeep", "a.txt"]

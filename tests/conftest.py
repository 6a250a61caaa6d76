"""Shared pytest fixtures for test files."""

from __future__ import annotations

import pytest

from tests.s3_stub_test_utils import FakeS3


@pytest.fixture(name="fake_s3")
def fixture_fake_s3():
    """Empty in-memory S3 with a bucket named ``bucket``."""
    store = FakeS3()
    store.create_bucket("bucket")
    return store


@pytest.fixture(name="make_tree")
def fixture_make_tree(tmp_path):
    """Write a mapping of relative paths to content below a fresh local root."""

    def _make_tree(files: dict[str, str | bytes], name: str = "repo"):
        root = tmp_path / name
        root.mkdir(parents=True, exist_ok=True)
        for relative_path, content in files.items():
            target = root / relative_path
            target.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, str):
                target.write_text(content)
            else:
                target.write_bytes(content)
        return root

    return _make_tree


@pytest.fixture(name="mirror")
def fixture_mirror(fake_s3):
    """Upload a mapping of relative paths to content under a prefix of the fake bucket."""

    def _mirror(files: dict[str, str | bytes], prefix: str = "prefix", bucket: str = "bucket"):
        for relative_path, content in files.items():
            key = f"{prefix}/{relative_path}" if prefix else relative_path
            fake_s3.put(bucket, key, content)
        return fake_s3

    return _mirror

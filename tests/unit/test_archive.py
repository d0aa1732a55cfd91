"""Unit tests for ArchiveDownload."""

import zipfile

import pytest
from unittest.mock import Mock

from ftpcmd.ftp.archive import ArchiveDownload
from ftpcmd.ftp.exceptions import FTPRemoteOperationError
from ftpcmd.ftp.search import FileSearch

from ..fake_client import InMemoryFTPClient


class TestArchiveDownload:
    """Tests for zipping downloaded files."""

    def test_writes_entries_in_order(self, tmp_path):
        """Test each remote file becomes an entry, in the given order."""
        client = InMemoryFTPClient(files={
            "dir/pre-test": b"one",
            "/abs/dir1/pre-test-dir1": b"two",
        })
        archive = tmp_path / "findings.zip"
        callback = Mock()

        result = ArchiveDownload(
            ["dir/pre-test", "/abs/dir1/pre-test-dir1"], archive, callback
        ).execute(client)

        assert result == archive
        callback.assert_called_once_with(archive)
        with zipfile.ZipFile(archive) as zf:
            assert zf.namelist() == ["dir/pre-test", "abs/dir1/pre-test-dir1"]
            assert zf.read("abs/dir1/pre-test-dir1") == b"two"

    def test_failure_removes_partial_archive(self, tmp_path):
        """Test a failed download leaves no archive behind."""
        client = InMemoryFTPClient(files={"a": b"1"})
        archive = tmp_path / "out" / "partial.zip"
        callback = Mock()

        with pytest.raises(FTPRemoteOperationError):
            ArchiveDownload(["a", "missing"], archive, callback).execute(client)

        assert not archive.exists()
        callback.assert_not_called()

    def test_archive_search_findings(self, tmp_path, search_client):
        """Test zipping the findings of a search on the same client."""
        search_client.files.update({
            "dir/pre-test": b"top",
            "dir/dir1/pre-test-dir1": b"nested",
        })
        archive = tmp_path / "findings.zip"

        def on_found(paths):
            ArchiveDownload(paths, archive).execute(search_client)

        FileSearch("dir", "pre", True, on_found).execute(search_client)

        with zipfile.ZipFile(archive) as zf:
            assert zf.namelist() == ["dir/pre-test", "dir/dir1/pre-test-dir1"]

    def test_empty_archive(self, tmp_path):
        """Test no paths still produces a valid empty archive."""
        archive = ArchiveDownload([], tmp_path / "empty.zip").execute(InMemoryFTPClient())

        with zipfile.ZipFile(archive) as zf:
            assert zf.namelist() == []

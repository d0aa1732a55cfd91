"""Pytest configuration and shared fixtures for ftpcmd tests."""

import pytest
from pathlib import Path

from ftpcmd.ftp.connection import ConnectionParameters

from .fake_client import InMemoryFTPClient, dir_entry, file_entry


# Test constants
TEST_FTP_HOST = "127.0.0.1"
TEST_FTP_PORT = 2121
TEST_FTP_USER = "testuser"
TEST_FTP_PASS = "testpass"


@pytest.fixture
def connection_parameters() -> ConnectionParameters:
    """Provide connection parameters for tests."""
    return ConnectionParameters(
        host=TEST_FTP_HOST,
        port=TEST_FTP_PORT,
        username=TEST_FTP_USER,
        password=TEST_FTP_PASS,
    )


@pytest.fixture
def search_client() -> InMemoryFTPClient:
    """
    Client holding the sample search tree.

    dir/
        pre-test
        ppp-test
        dir1/
            pre-test-dir1
            ppp-test-dir1
    """
    return InMemoryFTPClient(tree={
        "dir": [file_entry("pre-test"), file_entry("ppp-test"), dir_entry("dir1")],
        "dir/dir1": [file_entry("pre-test-dir1"), file_entry("ppp-test-dir1")],
    })


@pytest.fixture
def sample_local_file(tmp_path: Path) -> Path:
    """Create a small local file for upload tests."""
    local_file = tmp_path / "upload.txt"
    local_file.write_bytes(b"stream")
    return local_file

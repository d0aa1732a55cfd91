"""Recursive file search for ftpcmd.

Walks a remote directory tree depth-first, in pre-order, collecting the
paths of files accepted by a filter predicate. Remote trees are assumed to
be acyclic: there is no cycle detection, so a symbolic link loop on the
server makes a recursive search run forever.
"""

import fnmatch
import logging
from typing import Callable, List, Union

from ftpcmd.ftp.client import RemoteFileClient, RemoteFileEntry
from ftpcmd.ftp.commands import Callback, FTPCommand, ignore_result
from ftpcmd.utils.validators import validate_remote_directory

logger = logging.getLogger("ftpcmd.search")

# Type alias for entry filters
FilterPredicate = Callable[[RemoteFileEntry], bool]


def prefix_filter(prefix: str) -> FilterPredicate:
    """Accept files whose name starts with prefix."""
    return lambda entry: entry.name.startswith(prefix)


def suffix_filter(suffix: str) -> FilterPredicate:
    """Accept files whose name ends with suffix."""
    return lambda entry: entry.name.endswith(suffix)


def glob_filter(pattern: str) -> FilterPredicate:
    """Accept files whose name matches a shell-style pattern (case-sensitive)."""
    return lambda entry: fnmatch.fnmatchcase(entry.name, pattern)


def search_files(
    client: RemoteFileClient,
    directory: str,
    predicate: FilterPredicate,
    recursive: bool = True,
) -> List[str]:
    """
    Find remote files under a directory.

    One listing is requested per visited directory. Entries are handled in
    the order the server returns them; a subdirectory is searched as soon as
    its entry is reached.

    Args:
        client: Connected client
        directory: Directory to start from
        predicate: Decides which file entries are included
        recursive: Descend into subdirectories (default True)

    Returns:
        Matching paths joined with '/', in discovery order

    Raises:
        ValueError: If directory is empty
        FTPRemoteOperationError: If any visited directory cannot be listed
    """
    _require_directory(directory)

    found: List[str] = []
    _search(client, directory, predicate, recursive, found)
    return found


def _require_directory(directory: str) -> None:
    is_valid, error = validate_remote_directory(directory)
    if not is_valid:
        raise ValueError(error)


def _search(
    client: RemoteFileClient,
    directory: str,
    predicate: FilterPredicate,
    recursive: bool,
    found: List[str],
) -> None:
    entries = client.list_entries(directory)
    logger.debug(f"Searching {directory} ({len(entries)} entries)")

    for entry in entries:
        path = f"{directory}/{entry.name}"
        if entry.is_file and predicate(entry):
            found.append(path)
        elif entry.is_directory and recursive:
            _search(client, path, predicate, recursive, found)


class FileSearch(FTPCommand[List[str]]):
    """Searches a remote directory, optionally recursively, for matching files."""

    def __init__(
        self,
        directory: str,
        match: Union[str, FilterPredicate],
        recursive: bool = True,
        callback: Callback[List[str]] = ignore_result,
    ):
        """
        Args:
            directory: Directory to start from (non-empty)
            match: Filename prefix, or a predicate over file entries
            recursive: Descend into subdirectories (default True)
            callback: Receives the list of matching paths

        Raises:
            ValueError: If directory is empty
        """
        _require_directory(directory)

        super().__init__(callback)
        self.directory = directory
        self.predicate = prefix_filter(match) if isinstance(match, str) else match
        self.recursive = recursive

    def ftp_call(self, client: RemoteFileClient) -> List[str]:
        found = search_files(client, self.directory, self.predicate, self.recursive)
        logger.info(f"Search of {self.directory} found {len(found)} files")
        return found

    def __repr__(self) -> str:
        return f"FileSearch({self.directory!r}, recursive={self.recursive})"

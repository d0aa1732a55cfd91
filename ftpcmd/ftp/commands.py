"""FTP commands for ftpcmd.

Each command performs one remote operation against a connected
RemoteFileClient and hands the result to its callback.
"""

import io
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import BinaryIO, Callable, Generic, List, TypeVar, Union

from ftpcmd.ftp.client import RemoteFileClient, RemoteFileEntry

logger = logging.getLogger("ftpcmd.commands")

T = TypeVar("T")

# Type alias for result callbacks
Callback = Callable[[T], None]

UploadSource = Union[BinaryIO, bytes, Path]


def ignore_result(result) -> None:
    """Callback for commands whose result is not needed."""


class FTPCommand(ABC, Generic[T]):
    """A single remote operation bound to a result callback."""

    def __init__(self, callback: Callback[T] = ignore_result):
        """
        Initialize the command.

        Args:
            callback: Receives the result once the operation succeeds
        """
        self._callback = callback

    def execute(self, client: RemoteFileClient) -> T:
        """
        Run the operation once and pass its result to the callback.

        Failures propagate and the callback is not called.

        Args:
            client: Connected, logged-in client

        Returns:
            The operation result, also given to the callback
        """
        result = self.ftp_call(client)
        self._callback(result)
        return result

    @abstractmethod
    def ftp_call(self, client: RemoteFileClient) -> T:
        """Perform the remote operation."""


class DirList(FTPCommand[List[RemoteFileEntry]]):
    """Lists the entries of a remote directory."""

    def __init__(self, directory: str, callback: Callback[List[RemoteFileEntry]] = ignore_result):
        """
        Args:
            directory: Remote directory to list
            callback: Receives the entries in server order
        """
        super().__init__(callback)
        self.directory = directory

    def ftp_call(self, client: RemoteFileClient) -> List[RemoteFileEntry]:
        """
        List the directory.

        Returns:
            Entries without "." and ".."

        Raises:
            FTPRemoteOperationError: If the directory cannot be listed
        """
        return client.list_entries(self.directory)

    def __repr__(self) -> str:
        return f"DirList({self.directory!r})"


class FileUpload(FTPCommand[bool]):
    """Uploads local content to a remote path."""

    def __init__(self, remote_path: str, source: UploadSource, callback: Callback[bool] = ignore_result):
        """
        Args:
            remote_path: Destination on the server
            source: Binary file object, raw bytes, or a local file path
            callback: Receives True if the server accepted the upload
        """
        super().__init__(callback)
        self.remote_path = remote_path
        self.source = source

    def ftp_call(self, client: RemoteFileClient) -> bool:
        if isinstance(self.source, Path):
            with open(self.source, "rb") as f:
                success = client.store_stream(self.remote_path, f)
        elif isinstance(self.source, (bytes, bytearray)):
            success = client.store_stream(self.remote_path, io.BytesIO(self.source))
        else:
            success = client.store_stream(self.remote_path, self.source)

        logger.debug(f"Upload to {self.remote_path}: {'ok' if success else 'refused'}")
        return success

    def __repr__(self) -> str:
        return f"FileUpload({self.remote_path!r})"


class FileDownload(FTPCommand[BinaryIO]):
    """Downloads a remote file as a binary stream."""

    def __init__(self, remote_path: str, callback: Callback[BinaryIO] = ignore_result):
        """
        Args:
            remote_path: File to download
            callback: Receives the content as a stream positioned at 0
        """
        super().__init__(callback)
        self.remote_path = remote_path

    def ftp_call(self, client: RemoteFileClient) -> BinaryIO:
        """
        Download the file into memory.

        Returns:
            Binary stream holding the whole file

        Raises:
            FTPRemoteOperationError: If the file is missing or the transfer fails
        """
        return client.retrieve_stream(self.remote_path)

    def __repr__(self) -> str:
        return f"FileDownload({self.remote_path!r})"


class FileDelete(FTPCommand[bool]):
    """Deletes a remote file."""

    def __init__(self, remote_path: str, callback: Callback[bool] = ignore_result):
        """
        Args:
            remote_path: File to delete
            callback: Receives True if the file was deleted
        """
        super().__init__(callback)
        self.remote_path = remote_path

    def ftp_call(self, client: RemoteFileClient) -> bool:
        """
        Delete the file.

        Returns:
            True if deleted, False if the server refused

        Raises:
            FTPRemoteOperationError: If the request fails for another reason
        """
        return client.delete_file(self.remote_path)

    def __repr__(self) -> str:
        return f"FileDelete({self.remote_path!r})"

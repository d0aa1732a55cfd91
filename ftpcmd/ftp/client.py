"""Remote file transfer capability for ftpcmd.

Provides RemoteFileEntry, the RemoteFileClient interface that commands run
against, and FTPClient, its implementation over ftplib.
"""

import io
import logging
import socket
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from ftplib import FTP, all_errors, error_perm
from typing import BinaryIO, Dict, List, Optional

from ftpcmd.ftp.exceptions import (
    FTPAuthenticationError,
    FTPConnectionError,
    FTPNotConnectedError,
    FTPRemoteOperationError,
    FTPTimeoutError,
)

logger = logging.getLogger("ftpcmd.client")

# Replies meaning the server does not implement MLSD (or OPTS MLST)
MLSD_UNSUPPORTED_CODES = ("500", "501", "502")


class EntryType(Enum):
    """Kind of entry reported by a remote listing."""
    FILE = "file"
    DIRECTORY = "directory"
    LINK = "link"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class RemoteFileEntry:
    """A single entry of a remote directory listing."""
    name: str
    type: EntryType
    size: Optional[int] = None
    modified: Optional[datetime] = None

    @property
    def is_file(self) -> bool:
        """True if the entry is a regular file."""
        return self.type == EntryType.FILE

    @property
    def is_directory(self) -> bool:
        """True if the entry is a directory."""
        return self.type == EntryType.DIRECTORY

    @classmethod
    def from_facts(cls, name: str, facts: Dict[str, str]) -> "RemoteFileEntry":
        """
        Create an entry from an MLSD fact dictionary.

        Args:
            name: Entry name as returned by the server
            facts: Facts dictionary (keys lowercased by ftplib)

        Returns:
            RemoteFileEntry instance
        """
        kind = facts.get("type", "").lower()
        if kind == "file":
            entry_type = EntryType.FILE
        elif kind in ("dir", "cdir", "pdir"):
            entry_type = EntryType.DIRECTORY
        elif "symlink" in kind or "slink" in kind:
            entry_type = EntryType.LINK
        else:
            entry_type = EntryType.UNKNOWN

        size = None
        if facts.get("size", "").isdigit():
            size = int(facts["size"])

        modified = None
        if "modify" in facts:
            try:
                modified = datetime.strptime(facts["modify"][:14], "%Y%m%d%H%M%S")
            except ValueError:
                modified = None

        return cls(name=name, type=entry_type, size=size, modified=modified)

    @classmethod
    def from_list_line(cls, line: str) -> Optional["RemoteFileEntry"]:
        """
        Parse a Unix-style LIST line.

        Example: ``drwxr-xr-x  2 user group 4096 Jan  1 12:00 name``

        Args:
            line: Raw line from the LIST reply

        Returns:
            RemoteFileEntry, or None if the line is not a listing entry
        """
        parts = line.split(None, 8)
        if len(parts) < 9:
            return None

        mode, name = parts[0], parts[8]
        if mode.startswith("d"):
            entry_type = EntryType.DIRECTORY
        elif mode.startswith("-"):
            entry_type = EntryType.FILE
        elif mode.startswith("l"):
            entry_type = EntryType.LINK
            name = name.split(" -> ", 1)[0]
        else:
            entry_type = EntryType.UNKNOWN

        size = int(parts[4]) if parts[4].isdigit() else None
        return cls(
            name=name,
            type=entry_type,
            size=size,
            modified=_parse_list_timestamp(parts[5], parts[6], parts[7]),
        )


def _parse_list_timestamp(month: str, day: str, year_or_time: str) -> Optional[datetime]:
    """Parse the date columns of a LIST line; recent entries omit the year."""
    try:
        if ":" in year_or_time:
            return datetime.strptime(f"{month} {day} {datetime.now().year} {year_or_time}", "%b %d %Y %H:%M")
        return datetime.strptime(f"{month} {day} {year_or_time}", "%b %d %Y")
    except ValueError:
        return None


class RemoteFileClient(ABC):
    """Capability set the session and commands need from a file transfer client."""

    @abstractmethod
    def connect(self, host: str, port: int, timeout: float = 30) -> None:
        """Open the network connection."""

    @abstractmethod
    def login(self, user: str, password: str) -> None:
        """Authenticate on the open connection."""

    @abstractmethod
    def set_passive(self, passive: bool) -> None:
        """Select passive or active data connections."""

    @abstractmethod
    def logout(self) -> None:
        """End the authenticated session."""

    @abstractmethod
    def disconnect(self) -> None:
        """Close the network connection."""

    @abstractmethod
    def list_entries(self, path: str) -> List[RemoteFileEntry]:
        """List the entries of a remote directory."""

    @abstractmethod
    def retrieve_stream(self, path: str) -> BinaryIO:
        """Return the content of a remote file as a binary stream."""

    @abstractmethod
    def store_stream(self, path: str, stream: BinaryIO) -> bool:
        """Write a binary stream to a remote file."""

    @abstractmethod
    def delete_file(self, path: str) -> bool:
        """Remove a remote file."""


class FTPClient(RemoteFileClient):
    """RemoteFileClient implemented over ftplib.FTP."""

    # Block size for FTP transfers (8KB)
    BLOCK_SIZE = 8192

    def __init__(self):
        """Initialize an unconnected client."""
        self._ftp: Optional[FTP] = None
        self._host: Optional[str] = None
        self._port: Optional[int] = None

    @property
    def is_connected(self) -> bool:
        """True if a connection is open."""
        return self._ftp is not None

    @property
    def ftp(self) -> FTP:
        """
        Get the underlying FTP object.

        Raises:
            FTPNotConnectedError: If not connected
        """
        if self._ftp is None:
            raise FTPNotConnectedError("FTP access")
        return self._ftp

    def connect(self, host: str, port: int = 21, timeout: float = 30) -> None:
        """
        Open the control connection.

        The FTP object is closed again if the server cannot be reached or
        rejects the greeting.

        Raises:
            FTPTimeoutError: If the connection times out
            FTPConnectionError: If the host is unreachable or refuses
        """
        ftp = FTP()
        ftp.set_debuglevel(0)
        try:
            ftp.connect(host=host, port=port, timeout=timeout)
        except socket.timeout:
            ftp.close()
            raise FTPTimeoutError(host, port, timeout)
        except all_errors as e:
            ftp.close()
            raise FTPConnectionError(host, port, e)

        self._ftp = ftp
        self._host = host
        self._port = port
        logger.debug(f"Connected to {host}:{port}")

    def login(self, user: str, password: str) -> None:
        """
        Log in on the open connection.

        Raises:
            FTPAuthenticationError: If the server rejects the credentials
            FTPConnectionError: If the connection drops during login
        """
        try:
            self.ftp.login(user=user, passwd=password)
        except error_perm as e:
            raise FTPAuthenticationError(user, e)
        except all_errors as e:
            raise FTPConnectionError(self._host, self._port, e)

    def set_passive(self, passive: bool) -> None:
        """
        Select the data connection mode for later transfers and listings.

        Args:
            passive: True for PASV, False for active (PORT) connections

        Raises:
            FTPNotConnectedError: If not connected
        """
        self.ftp.set_pasv(passive)

    def logout(self) -> None:
        """Send QUIT. Does nothing if the connection is already gone."""
        if self._ftp is None:
            return
        self._ftp.quit()

    def disconnect(self) -> None:
        """Close the socket. Safe to call more than once."""
        if self._ftp is None:
            return
        try:
            self._ftp.close()
        finally:
            self._ftp = None

    def list_entries(self, path: str) -> List[RemoteFileEntry]:
        """
        List directory entries, preferring MLSD over LIST.

        Args:
            path: Remote directory path

        Returns:
            Entries in the order the server returned them

        Raises:
            FTPNotConnectedError: If not connected
            FTPRemoteOperationError: If the path cannot be listed
        """
        ftp = self.ftp
        try:
            try:
                listing = ftp.mlsd(path, facts=["type", "size", "modify"])
                entries = [RemoteFileEntry.from_facts(name, facts) for name, facts in listing
                           if facts.get("type", "").lower() not in ("cdir", "pdir")]
            except error_perm as e:
                if not str(e).startswith(MLSD_UNSUPPORTED_CODES):
                    raise
                logger.debug(f"MLSD not supported ({e}), falling back to LIST")
                lines: List[str] = []
                ftp.retrlines(f"LIST {path}" if path else "LIST", lines.append)
                entries = [entry for entry in map(RemoteFileEntry.from_list_line, lines)
                           if entry is not None]
        except all_errors as e:
            raise FTPRemoteOperationError(path, "list", e)

        return [entry for entry in entries if entry.name not in (".", "..")]

    def retrieve_stream(self, path: str) -> BinaryIO:
        """
        Download a remote file into memory.

        Raises:
            FTPRemoteOperationError: If the file is missing or the transfer fails
        """
        ftp = self.ftp
        buffer = io.BytesIO()
        try:
            ftp.retrbinary(f"RETR {path}", buffer.write, blocksize=self.BLOCK_SIZE)
        except all_errors as e:
            raise FTPRemoteOperationError(path, "retrieve", e)
        buffer.seek(0)
        return buffer

    def store_stream(self, path: str, stream: BinaryIO) -> bool:
        """
        Upload a binary stream.

        Returns:
            True on a 2xx reply, False if the server refused the transfer

        Raises:
            FTPRemoteOperationError: If the transfer fails for another reason
        """
        ftp = self.ftp
        try:
            response = ftp.storbinary(f"STOR {path}", stream, blocksize=self.BLOCK_SIZE)
        except error_perm as e:
            logger.warning(f"Server refused upload to {path}: {e}")
            return False
        except all_errors as e:
            raise FTPRemoteOperationError(path, "store", e)
        return response.startswith("2")

    def delete_file(self, path: str) -> bool:
        """
        Delete a remote file.

        Returns:
            True if deleted, False if the server refused

        Raises:
            FTPRemoteOperationError: If the request fails for another reason
        """
        ftp = self.ftp
        try:
            ftp.delete(path)
        except error_perm as e:
            logger.warning(f"Server refused to delete {path}: {e}")
            return False
        except all_errors as e:
            raise FTPRemoteOperationError(path, "delete", e)
        return True

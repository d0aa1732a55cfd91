"""FTP session management for ftpcmd.

Provides ConnectionParameters, the ConnectionState enum, and FTPSession,
which owns one connection for the duration of a batch of commands.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Callable, Optional

from ftpcmd.ftp.client import FTPClient, RemoteFileClient
from ftpcmd.utils.validators import validate_host, validate_port, validate_timeout

if TYPE_CHECKING:
    from ftpcmd.ftp.commands import FTPCommand

logger = logging.getLogger("ftpcmd.session")


class ConnectionState(Enum):
    """FTP connection state."""
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    ERROR = "error"


@dataclass(frozen=True)
class ConnectionParameters:
    """Where and how to connect. Immutable once built."""
    host: str
    port: int = 21
    username: str = "anonymous"
    password: str = field(default="", repr=False)
    passive_mode: bool = True
    timeout: float = 30

    def __post_init__(self):
        """Validate parameters after initialization."""
        for is_valid, error in (
            validate_host(self.host),
            validate_port(self.port),
            validate_timeout(self.timeout),
        ):
            if not is_valid:
                raise ValueError(error)


class FTPSession:
    """Runs a batch of commands over a single managed connection."""

    def __init__(
        self,
        parameters: ConnectionParameters,
        client_factory: Callable[[], RemoteFileClient] = FTPClient,
    ):
        """
        Initialize the session.

        Args:
            parameters: Connection parameters
            client_factory: Creates the client for each batch
        """
        self._parameters = parameters
        self._client_factory = client_factory
        self._state = ConnectionState.DISCONNECTED
        self._connected_at: Optional[datetime] = None

    @property
    def parameters(self) -> ConnectionParameters:
        """Connection parameters."""
        return self._parameters

    @property
    def state(self) -> ConnectionState:
        """Current connection state."""
        return self._state

    @property
    def connected_at(self) -> Optional[datetime]:
        """Timestamp when the current connection was established."""
        return self._connected_at

    def on_connect(self, *commands: "FTPCommand") -> None:
        """
        Connect, log in, run commands in order, then log out and disconnect.

        A failed connect or login propagates before any command runs, and
        no logout is attempted. Once logged in, logout and disconnect run on
        every exit path; their own failures are discarded so the first
        fault is the one raised.

        Args:
            *commands: Commands to execute, in order

        Raises:
            FTPConnectionError: If the host cannot be reached
            FTPAuthenticationError: If login is rejected
            FTPError: Whatever the first failing command raises
        """
        params = self._parameters
        client = self._client_factory()
        self._state = ConnectionState.CONNECTING

        try:
            client.connect(params.host, params.port, params.timeout)
        except Exception:
            self._state = ConnectionState.ERROR
            raise

        try:
            client.login(params.username, params.password)
        except Exception:
            self._state = ConnectionState.ERROR
            self._close_quietly(client)
            raise

        self._state = ConnectionState.CONNECTED
        self._connected_at = datetime.now()
        logger.info(f"Logged in to {params.host}:{params.port} as {params.username}")

        try:
            client.set_passive(params.passive_mode)
            for command in commands:
                logger.debug(f"Executing {command!r}")
                command.execute(client)
        except Exception:
            self._state = ConnectionState.ERROR
            raise
        finally:
            self._logout_quietly(client)
            self._close_quietly(client)
            if self._state == ConnectionState.CONNECTED:
                self._state = ConnectionState.DISCONNECTED
            self._connected_at = None
            logger.info(f"Disconnected from {params.host}:{params.port}")

    def _logout_quietly(self, client: RemoteFileClient) -> None:
        """Best-effort logout."""
        try:
            client.logout()
        except Exception as e:
            logger.debug(f"Ignoring logout failure: {e}")

    def _close_quietly(self, client: RemoteFileClient) -> None:
        """Best-effort disconnect."""
        try:
            client.disconnect()
        except Exception as e:
            logger.debug(f"Ignoring disconnect failure: {e}")

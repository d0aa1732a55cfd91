"""ftpcmd: composable FTP commands over a single managed connection."""

__version__ = "1.0.0"

"""Archive download for ftpcmd.

Downloads several remote files over one connection into a local zip file,
typically the findings of a FileSearch.
"""

import logging
import shutil
import zipfile
from pathlib import Path
from typing import Iterable, List, Union

from ftpcmd.ftp.client import RemoteFileClient
from ftpcmd.ftp.commands import Callback, FTPCommand, ignore_result

logger = logging.getLogger("ftpcmd.archive")


class ArchiveDownload(FTPCommand[Path]):
    """Downloads remote files into a zip archive."""

    def __init__(
        self,
        remote_paths: Iterable[str],
        archive_path: Union[str, Path],
        callback: Callback[Path] = ignore_result,
    ):
        """
        Args:
            remote_paths: Files to download, in archive order
            archive_path: Local zip file to write (overwritten)
            callback: Receives the archive path
        """
        super().__init__(callback)
        self.remote_paths: List[str] = list(remote_paths)
        self.archive_path = Path(archive_path)

    def ftp_call(self, client: RemoteFileClient) -> Path:
        """
        Write each remote file to the archive under its remote path.

        Raises:
            FTPRemoteOperationError: If a download fails; the partial
                archive is removed
        """
        self.archive_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            with zipfile.ZipFile(self.archive_path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
                for remote_path in self.remote_paths:
                    stream = client.retrieve_stream(remote_path)
                    with zf.open(remote_path.lstrip("/"), "w") as entry:
                        shutil.copyfileobj(stream, entry)
                    logger.debug(f"Archived {remote_path}")
        except Exception:
            self.archive_path.unlink(missing_ok=True)
            raise

        logger.info(f"Wrote {len(self.remote_paths)} files to {self.archive_path}")
        return self.archive_path

    def __repr__(self) -> str:
        return f"ArchiveDownload({len(self.remote_paths)} files -> {str(self.archive_path)!r})"

"""FTP operations module for ftpcmd.

This module handles all FTP-related functionality:
- FTPSession: Runs a batch of commands over one connection
- FTPClient: ftplib-backed remote file transfer client
- Commands: DirList, FileSearch, FileUpload, FileDownload, FileDelete, ArchiveDownload
- Exceptions: FTP-specific error types
"""

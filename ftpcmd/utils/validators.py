"""Input validators for ftpcmd.

Provides validation functions for connection parameters and remote paths.
"""

import re
from typing import Optional, Tuple


# IPv4 address pattern
IPV4_PATTERN = re.compile(
    r'^(?:(?:25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)\.){3}'
    r'(?:25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)$'
)

# Hostname pattern (simplified)
HOSTNAME_PATTERN = re.compile(
    r'^(?=.{1,253}$)(?!-)[A-Za-z0-9-]{1,63}(?<!-)(\.[A-Za-z0-9-]{1,63})*$'
)


def validate_host(host: str) -> Tuple[bool, Optional[str]]:
    """
    Validate a host (IPv4 address or hostname).

    Args:
        host: Host string to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not isinstance(host, str) or not host.strip():
        return False, "Host is required"

    if host != host.strip():
        return False, "Host must not have surrounding whitespace"

    if IPV4_PATTERN.match(host) or HOSTNAME_PATTERN.match(host):
        return True, None

    return False, f"Invalid host: {host}. Must be a valid IP address or hostname."


def validate_port(port: int) -> Tuple[bool, Optional[str]]:
    """
    Validate a port number.

    Args:
        port: Port number to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    # bool is an int subclass
    if isinstance(port, bool) or not isinstance(port, int):
        return False, "Port must be an integer"

    if port < 1 or port > 65535:
        return False, f"Port must be between 1 and 65535, got {port}"

    return True, None


def validate_timeout(timeout: float) -> Tuple[bool, Optional[str]]:
    """
    Validate a timeout value in seconds.

    Args:
        timeout: Timeout in seconds

    Returns:
        Tuple of (is_valid, error_message)
    """
    try:
        timeout = float(timeout)
    except (ValueError, TypeError):
        return False, "Timeout must be a number"

    if timeout < 1 or timeout > 300:
        return False, f"Timeout must be between 1 and 300 seconds, got {timeout:g}"

    return True, None


def validate_remote_directory(path: str) -> Tuple[bool, Optional[str]]:
    """
    Validate a remote directory used as a search root.

    Relative paths are allowed; they resolve against the login directory.

    Args:
        path: Remote directory path

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not isinstance(path, str) or not path:
        return False, "Remote directory is required"

    return True, None

"""Utility Module.

This module contains a variety of helper functions used across the project.
"""
import hashlib
import ipaddress
import os
import sys
from pathlib import Path

from country_lookup.error_messages import format_type_error
from country_lookup.exceptions import InvalidIPv4AddressError

APP_DIR_NAME = 'Country Lookup'


def get_app_dir() -> Path:
    """Return the per-user, machine-local application data directory.

    On Windows this prefers the `LOCALAPPDATA` environment variable to support redirected
    profiles, falling back to `Path.home() / 'AppData' / 'Local'`.<br>
    Everywhere else `XDG_DATA_HOME` is honored, falling back to `~/.local/share`.

    The directory is not created here; callers create what they write into.
    """
    if sys.platform == 'win32':
        base = Path(os.getenv('LOCALAPPDATA', str(Path.home() / 'AppData' / 'Local')))
    else:
        base = Path(os.getenv('XDG_DATA_HOME', str(Path.home() / '.local' / 'share')))

    return base / APP_DIR_NAME


def parse_ipv4_address(ip: str | int | ipaddress.IPv4Address) -> ipaddress.IPv4Address:
    """Parse a textual, integer or already parsed IPv4 address.

    Raises:
        TypeError: If `ip` is `None` or of an unsupported type.
        InvalidIPv4AddressError: If `ip` is not a valid IPv4 address.
    """
    if isinstance(ip, ipaddress.IPv4Address):
        return ip

    # bool is an int subclass, but never a meaningful address.
    if not isinstance(ip, (str, int)) or isinstance(ip, bool):
        raise TypeError(format_type_error(ip, (str, int, ipaddress.IPv4Address)))

    try:
        return ipaddress.IPv4Address(ip.strip() if isinstance(ip, str) else ip)
    except ipaddress.AddressValueError as e:
        raise InvalidIPv4AddressError(str(ip)) from e


def ip_to_number(ip: str | int | ipaddress.IPv4Address) -> int:
    """Convert an IPv4 address to its 32-bit unsigned integer (most significant byte first)."""
    return int.from_bytes(parse_ipv4_address(ip).packed, 'big')


def compute_file_md5(file_path: Path) -> str | None:
    """Return the lowercase MD5 hex digest of a file, or `None` if it does not exist."""
    if not file_path.is_file():
        return None

    digest = hashlib.md5()  # noqa: S324  # Required by the update endpoint, not used for security
    with file_path.open('rb') as f:
        for chunk in iter(lambda: f.read(65536), b''):
            digest.update(chunk)

    return digest.hexdigest()

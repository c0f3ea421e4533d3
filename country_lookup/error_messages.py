"""Error message formatting functions.

This module contains functions for formatting error and status messages.
"""

from pathlib import Path

from country_lookup.text_utils import format_message_paragraph


def format_type_error(
    obj: object,
    expected_types: type | tuple[type, ...],
    suffix: str = '',
) -> str:
    """Generate a formatted error message for a type mismatch.

    Args:
        obj: The object whose type is being checked.
        expected_types: The expected type(s) for the object.
        suffix: An optional suffix to append to the error message.

    Returns:
        The formatted error message.
    """
    actual_type = type(obj).__name__

    if isinstance(expected_types, tuple):
        expected_types_names = ' | '.join(t.__name__ for t in expected_types)
        expected_type_count = len(expected_types)
    else:
        expected_types_names = expected_types.__name__
        expected_type_count = 1

    plural_suffix = '' if expected_type_count == 1 else 's'
    return f'Expected type{plural_suffix} {expected_types_names}, got {actual_type} instead.{suffix}'


def format_database_not_ready_message(database_path: Path) -> str:
    """Format the message used when no readable country database is available."""
    return format_message_paragraph(f"""
        Country database is not ready: "{database_path}".
        Please check that the database file exists, that there are no permission issues
        accessing it, or that a license key is configured so it can be downloaded.
    """)


def format_missing_license_key_message() -> str:
    """Format the trace message used when an update cannot run without a license key."""
    return 'Cannot update database file because license key is not set.'


def format_update_fetch_failed_message(*, url: str, http_code: int | None, reason: str | None = None) -> str:
    """Format the message describing a failed update download."""
    message = f'Failed fetching url: "{url}".'
    if reason is not None:
        message += f' ({reason})'
    if http_code is not None:
        message += f' (http_code: {http_code})'
    return message

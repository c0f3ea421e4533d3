"""Country database custom exceptions.

This module contains the exception classes raised while reading the country database.
Callers catch `DatabaseError` to treat every database failure as "no answer available".
"""
from pathlib import Path

from country_lookup.error_messages import format_database_not_ready_message


class DatabaseError(Exception):
    """Base class for all country database errors."""


class DatabaseNotReadyError(DatabaseError):
    """Raised when no readable database file is open."""

    def __init__(self, database_path: Path) -> None:
        """Initialize the exception with the expected database location.

        Args:
            database_path: Path of the database file that could not be used.
        """
        super().__init__(format_database_not_ready_message(database_path))
        self.database_path = database_path


class CorruptDatabaseError(DatabaseError):
    """Raised when the database file does not match the packed trie layout."""

    def __init__(self, message: str) -> None:
        """Initialize the exception with details about the structural failure.

        Args:
            message: What was wrong with the record being read.
        """
        super().__init__(message)


class ShortReadError(CorruptDatabaseError):
    """Raised when a node record is truncated (read past the end of the file)."""

    def __init__(self, position: int, expected: int, received: int) -> None:
        """Initialize the exception with the failed read geometry."""
        super().__init__(f'Short read at byte {position}: expected {expected} bytes, got {received}')
        self.position = position

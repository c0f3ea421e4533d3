"""Ownership of the open country database file.

`DatabaseSource` holds the single read handle to the active database file. Every seek+read
pair and the whole file replacement sequence run under one lock, because the handle has a
shared cursor. A reader therefore sees each record either fully from the old file or fully
from the new one.
"""
import enum
from collections.abc import Callable
from pathlib import Path
from threading import RLock
from types import TracebackType
from typing import BinaryIO, Self

from country_lookup.constants.standalone import DATABASE_FILE_NAME, LOG_CATEGORY
from country_lookup.database.exceptions import DatabaseNotReadyError, ShortReadError
from country_lookup.lookup_logging import LookupLogger
from country_lookup.utils import compute_file_md5


class DatabaseState(enum.Enum):
    """Lifecycle of a `DatabaseSource`."""

    UNINITIALIZED = enum.auto()
    READY = enum.auto()
    SWAPPING = enum.auto()
    CLOSED = enum.auto()


class DatabaseSource:
    """Lazily opened, lock-guarded handle to the country database file.

    Args:
        store_dir: Directory holding the database file (created on first use).
        logger: Collaborator receiving errors and lifecycle traces.
        provision: Optional callable run once when the database file is missing at start-up,
            expected to download it and install it through `swap`.
        file_name: Name of the active database file inside `store_dir`.
    """

    def __init__(
        self,
        store_dir: Path,
        *,
        logger: LookupLogger,
        provision: Callable[[], object] | None = None,
        file_name: str = DATABASE_FILE_NAME,
    ) -> None:
        self.store_dir = store_dir
        self.database_path = store_dir / file_name
        self._logger = logger
        self._provision = provision
        self._lock = RLock()
        self._file: BinaryIO | None = None
        self._state = DatabaseState.UNINITIALIZED

    def __enter__(self) -> Self:
        return self

    def __exit__(self, exc_type: type[BaseException] | None, exc_value: BaseException | None, exc_traceback: TracebackType | None) -> None:
        self.close()

    @property
    def state(self) -> DatabaseState:
        return self._state

    @property
    def is_open(self) -> bool:
        """Whether a readable database handle is currently held."""
        with self._lock:
            return self._file is not None

    def ensure_ready(self) -> bool:
        """Initialize the source once; later calls return immediately.

        Creates the storage directory, provisions a missing database file when possible and
        opens the file for reading. Failing to obtain a file is not fatal: reads then raise
        `DatabaseNotReadyError` until an update installs one.

        Returns:
            `True` only for the initializing call, and only if it downloaded a fresh file.
        """
        if self._state is not DatabaseState.UNINITIALIZED:
            return False

        with self._lock:
            if self._state is not DatabaseState.UNINITIALIZED:
                return False

            freshly_provisioned = False
            try:
                self.store_dir.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                # Left without a handle: reads raise DatabaseNotReadyError.
                self._logger.log_error(LOG_CATEGORY, e)
            else:
                freshly_provisioned = self._provision_missing_file()

                if self._file is None:
                    self._open_file()

            self._state = DatabaseState.READY
            return freshly_provisioned

    def read_at(self, position: int, length: int) -> bytes:
        """Seek to `position` and read `length` bytes as one atomic operation.

        Raises:
            DatabaseNotReadyError: If no database file is open or the handle failed.
            ShortReadError: If fewer than `length` bytes are available.
        """
        with self._lock:
            if self._file is None:
                raise DatabaseNotReadyError(self.database_path)

            try:
                self._file.seek(position)
                data = self._file.read(length)
            except (OSError, ValueError) as e:
                raise DatabaseNotReadyError(self.database_path) from e

        if len(data) != length:
            raise ShortReadError(position, length, len(data))

        return data

    def swap(self, new_file_path: Path) -> None:
        """Replace the active database file with `new_file_path` and reopen it.

        `new_file_path` must live in the same directory so the rename is atomic. The handle is
        reopened whether or not the replacement succeeded, so readers keep whichever file is
        current.

        Raises:
            DatabaseNotReadyError: If the source has been closed.
            OSError: If the file could not be replaced.
        """
        with self._lock:
            if self._state is DatabaseState.CLOSED:
                new_file_path.unlink(missing_ok=True)
                raise DatabaseNotReadyError(self.database_path)

            previous_state = self._state
            self._state = DatabaseState.SWAPPING
            try:
                self._close_file()
                new_file_path.replace(self.database_path)
            finally:
                self._open_file()
                self._state = previous_state

        self._logger.trace(f'Database file replaced: {self.database_path}', LOG_CATEGORY)

    def checksum(self) -> str | None:
        """Return the MD5 hex digest of the active database file, or `None` if there is none."""
        with self._lock:
            return compute_file_md5(self.database_path)

    def close(self) -> None:
        """Release the file handle. Idempotent; a closed source stays closed."""
        with self._lock:
            if self._state is DatabaseState.CLOSED:
                return

            self._close_file()
            self._state = DatabaseState.CLOSED

        self._logger.trace('Database file closed', LOG_CATEGORY)

    def _provision_missing_file(self) -> bool:
        if self.database_path.is_file():
            return False

        if self._provision is None:
            self._logger.trace(f'Database file not found and no way to download it: {self.database_path}', LOG_CATEGORY)
            return False

        try:
            self._provision()
        except Exception as e:  # noqa: BLE001  # Start-up must survive a failed download
            self._logger.log_error(LOG_CATEGORY, e)
            return False

        return self.database_path.is_file()

    def _open_file(self) -> None:
        if not self.database_path.is_file():
            self._file = None
            return

        try:
            self._file = self.database_path.open('rb')
        except OSError as e:
            self._file = None
            self._logger.log_error(LOG_CATEGORY, e)
            return

        self._logger.trace(f'Database file opened: {self.database_path}', LOG_CATEGORY)

    def _close_file(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None

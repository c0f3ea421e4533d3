"""Country database updater: checksum-conditioned download, decompression and swap."""

import gzip
import io
import shutil
import zlib
from pathlib import Path
from threading import Lock

import requests

from country_lookup.constants.standalone import (
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_UPDATE_URL,
    LOG_CATEGORY,
    NO_UPDATE_SENTINEL,
    TEMP_DATABASE_FILE_NAME,
)
from country_lookup.database.data_source import DatabaseSource
from country_lookup.database.exceptions import DatabaseNotReadyError
from country_lookup.error_messages import format_missing_license_key_message, format_type_error
from country_lookup.lookup_logging import LookupLogger
from country_lookup.networking.http_session import session as default_http_session
from country_lookup.updater.exceptions import UpdateApplyError, UpdateFetchError
from country_lookup.updater.result_types import (
    UpdateFetchFailure,
    UpdateFetchResult,
    UpdateFetchSuccess,
    UpdateOutcome,
    UpdateResult,
)


def is_no_update_sentinel(payload: bytes) -> bool:
    """Return whether the endpoint answered "you already have the latest version".

    Anything that is not exactly the sentinel, even one byte off, is an update payload.
    """
    return payload == NO_UPDATE_SENTINEL


def decompress_database(payload: bytes, destination_path: Path) -> int:
    """Gunzip a full database payload into `destination_path`.

    Returns:
        The size in bytes of the decompressed database.

    Raises:
        UpdateApplyError: If the payload is not valid gzip data, is empty once
            decompressed, or could not be written. The partial file is removed.
    """
    try:
        with gzip.GzipFile(fileobj=io.BytesIO(payload)) as gzip_file, destination_path.open('wb') as f:
            shutil.copyfileobj(gzip_file, f)
            database_size = f.tell()
    except (OSError, EOFError, zlib.error) as e:
        destination_path.unlink(missing_ok=True)
        error_msg = f'Failed decompressing database update into "{destination_path}": {e}'
        raise UpdateApplyError(error_msg) from e

    if not database_size:
        destination_path.unlink(missing_ok=True)
        raise UpdateApplyError('Downloaded database update is empty')

    return database_size


class DatabaseUpdater:
    """Check the update endpoint and install newer databases into a `DatabaseSource`.

    The request carries the license key and the MD5 of the active file, so the endpoint
    only sends a payload when the local copy is out of date.
    """

    def __init__(  # pylint: disable=too-many-arguments  # noqa: PLR0913
        self,
        source: DatabaseSource,
        *,
        license_key: str | None,
        logger: LookupLogger,
        update_url: str = DEFAULT_UPDATE_URL,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
        session: requests.Session = default_http_session,
    ) -> None:
        self.license_key = license_key
        self.update_url = update_url
        self.request_timeout = request_timeout
        self._source = source
        self._logger = logger
        self._session = session
        # Scheduled and manual checks share one staging file.
        self._update_lock = Lock()

    @property
    def temp_path(self) -> Path:
        """Staging file, next to the active file so the final rename stays on one filesystem."""
        return self._source.store_dir / TEMP_DATABASE_FILE_NAME

    def update_database(self) -> UpdateResult:
        """Run one update check and install the new database if one was sent.

        Raises:
            UpdateFetchError: If the request failed, timed out or returned an error status.
            UpdateApplyError: If the payload could not be decompressed or installed.
        """
        with self._update_lock:
            return self._update_database()

    def _update_database(self) -> UpdateResult:
        if not self.license_key:
            self._logger.trace(format_missing_license_key_message(), LOG_CATEGORY)
            return UpdateResult(outcome=UpdateOutcome.SKIPPED)

        checksum = self._source.checksum()

        self._logger.trace('Checking for updates', LOG_CATEGORY)
        fetch_result = self.fetch_update_payload(checksum)
        if isinstance(fetch_result, UpdateFetchFailure):
            # The request error embeds the full query string, license key included.
            reason = type(fetch_result.exception).__name__
            raise UpdateFetchError(self.update_url, fetch_result.http_code, reason=reason) from None

        if is_no_update_sentinel(fetch_result.payload):
            self._logger.trace('Database file is up to date', LOG_CATEGORY)
            return UpdateResult(outcome=UpdateOutcome.NO_UPDATE, checksum=checksum)

        self._logger.trace('Updating database file', LOG_CATEGORY)
        database_size = decompress_database(fetch_result.payload, self.temp_path)

        try:
            self._source.swap(self.temp_path)
        except (OSError, DatabaseNotReadyError) as e:
            self.temp_path.unlink(missing_ok=True)
            error_msg = f'Failed installing database update into "{self._source.database_path}": {e}'
            raise UpdateApplyError(error_msg) from e

        self._logger.trace('Database file updated', LOG_CATEGORY)
        return UpdateResult(outcome=UpdateOutcome.UPDATED, checksum=self._source.checksum(), database_size=database_size)

    def fetch_update_payload(self, checksum: str | None) -> UpdateFetchResult:
        """Download the endpoint's answer for the given checksum of the active file."""
        params = {'license_key': self.license_key, 'md5': checksum or ''}

        try:
            response = self._session.get(self.update_url, params=params, timeout=self.request_timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            return UpdateFetchFailure(exception=e, http_code=getattr(e.response, 'status_code', None))

        if not isinstance(response.content, bytes):
            raise TypeError(format_type_error(response.content, bytes))

        return UpdateFetchSuccess(payload=response.content)

"""IP-to-country lookup service.

`CountryLookup` owns the database source and its update schedule. Create one per process,
share it between threads, and call `close()` (or use it as a context manager) on shutdown.

Example:
    with CountryLookup(load_settings(Path('settings.toml'))) as lookup:
        lookup.lookup_country_code('8.8.8.8')
"""
import ipaddress
from threading import Lock
from types import TracebackType
from typing import Self

import requests

from country_lookup.constants.standalone import LOG_CATEGORY
from country_lookup.country_tables import get_country_code, get_country_name
from country_lookup.database.data_source import DatabaseSource
from country_lookup.database.exceptions import CorruptDatabaseError, DatabaseNotReadyError
from country_lookup.database.trie_reader import seek_country
from country_lookup.exceptions import InvalidIPv4AddressError
from country_lookup.lookup_logging import LookupLogger, StandardLookupLogger
from country_lookup.models.settings import CountryLookupSettings
from country_lookup.networking.http_session import session as default_http_session
from country_lookup.updater.database_updater import DatabaseUpdater
from country_lookup.updater.result_types import UpdateResult
from country_lookup.updater.scheduler import UpdateScheduler
from country_lookup.utils import ip_to_number

type IPv4Input = str | int | ipaddress.IPv4Address


class CountryLookup:
    """Resolve IPv4 addresses to countries, keeping the database up to date in the background."""

    def __init__(
        self,
        settings: CountryLookupSettings | None = None,
        *,
        logger: LookupLogger | None = None,
        session: requests.Session = default_http_session,
    ) -> None:
        self.settings = settings if settings is not None else CountryLookupSettings()
        self._logger = logger if logger is not None else StandardLookupLogger()
        self._lifecycle_lock = Lock()
        self._ready = False
        self._closed = False

        # A missing database can only be downloaded with a license key.
        self.source = DatabaseSource(
            self.settings.resolved_store_dir,
            logger=self._logger,
            provision=self._provision_database if self.settings.license_key else None,
        )
        self.updater = DatabaseUpdater(
            self.source,
            license_key=self.settings.license_key,
            logger=self._logger,
            update_url=self.settings.update_url,
            request_timeout=self.settings.request_timeout,
            session=session,
        )
        self.scheduler: UpdateScheduler | None = None

    def __enter__(self) -> Self:
        return self

    def __exit__(self, exc_type: type[BaseException] | None, exc_value: BaseException | None, exc_traceback: TracebackType | None) -> None:
        self.close()

    def ensure_ready(self) -> None:
        """Open the database and start the update schedule on first use (idempotent, thread-safe)."""
        if self._ready:
            return

        with self._lifecycle_lock:
            if self._ready or self._closed:
                return

            freshly_provisioned = self.source.ensure_ready()

            if self.settings.license_key:
                self.scheduler = UpdateScheduler(
                    self.updater.update_database,
                    logger=self._logger,
                    check_hour=self.settings.update_check_hour,
                )
                self.scheduler.start(freshly_provisioned=freshly_provisioned)

            self._ready = True

    def lookup_country_index(self, ip: IPv4Input) -> int:
        """Return the country index of `ip`, 0 when the address is not assigned.

        Raises:
            TypeError: If `ip` is `None` or of an unsupported type.
            InvalidIPv4AddressError: If `ip` is not a valid IPv4 address.
            DatabaseNotReadyError: If no database file is available.
            CorruptDatabaseError: If the database file is malformed.
        """
        ip_number = ip_to_number(ip)
        self.ensure_ready()
        return seek_country(self.source, ip_number)

    def lookup_country_code(self, ip: IPv4Input) -> str | None:
        """Return the ISO 3166 alpha-2 code of `ip`, or `None` when it cannot be resolved."""
        country_index = self._lookup_country_index_or_none(ip)
        if country_index is None:
            return None
        return get_country_code(country_index)

    def lookup_country_name(self, ip: IPv4Input) -> str | None:
        """Return the country name of `ip`, or `None` when it cannot be resolved."""
        country_index = self._lookup_country_index_or_none(ip)
        if country_index is None:
            return None
        return get_country_name(country_index)

    def check_for_update(self) -> UpdateResult:
        """Run one update check immediately, outside of the schedule.

        Raises:
            UpdateFetchError: If the update endpoint could not be reached.
            UpdateApplyError: If the downloaded update could not be installed.
        """
        self.ensure_ready()
        return self.updater.update_database()

    def close(self) -> None:
        """Stop the update schedule and release the database file. Idempotent."""
        with self._lifecycle_lock:
            if self._closed:
                return
            self._closed = True
            scheduler = self.scheduler

        self._logger.trace('Closing down services', LOG_CATEGORY)
        if scheduler is not None:
            scheduler.stop()
        self.source.close()

    def _provision_database(self) -> None:
        self.updater.update_database()

    def _lookup_country_index_or_none(self, ip: IPv4Input) -> int | None:
        try:
            return self.lookup_country_index(ip)
        except (InvalidIPv4AddressError, TypeError):
            return None
        except DatabaseNotReadyError:
            return None
        except CorruptDatabaseError as e:
            self._logger.log_error(LOG_CATEGORY, e)
            return None

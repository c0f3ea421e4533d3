"""Updater module - database download, installation and scheduling."""

from country_lookup.updater.database_updater import DatabaseUpdater, decompress_database, is_no_update_sentinel
from country_lookup.updater.exceptions import UpdateApplyError, UpdateError, UpdateFetchError
from country_lookup.updater.result_types import UpdateOutcome, UpdateResult
from country_lookup.updater.scheduler import UpdateScheduler, compute_first_check_delay

__all__ = [
    'DatabaseUpdater',
    'UpdateApplyError',
    'UpdateError',
    'UpdateFetchError',
    'UpdateOutcome',
    'UpdateResult',
    'UpdateScheduler',
    'compute_first_check_delay',
    'decompress_database',
    'is_no_update_sentinel',
]

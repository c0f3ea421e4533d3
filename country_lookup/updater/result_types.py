"""Result types for database update attempts."""

from dataclasses import dataclass
from enum import Enum, auto


class UpdateOutcome(Enum):
    """Outcome of a single update check."""

    UPDATED = auto()
    NO_UPDATE = auto()
    SKIPPED = auto()


@dataclass(kw_only=True, slots=True)
class UpdateResult:
    """Outcome of an update check that did not raise."""

    outcome: UpdateOutcome
    checksum: str | None = None
    database_size: int | None = None


@dataclass(slots=True)
class UpdateFetchFailure:
    """Outcome of an update download that failed."""
    exception: Exception
    http_code: int | None


@dataclass(slots=True)
class UpdateFetchSuccess:
    """Outcome of an update download that succeeded."""
    payload: bytes


UpdateFetchResult = UpdateFetchFailure | UpdateFetchSuccess

"""Background schedule for database update checks.

The first periodic check runs at the next occurrence of a fixed local hour, then every
24 hours. Deadlines are tracked on the monotonic clock, so wall-clock jumps after start-up
do not shift the schedule.
"""
import time
from collections.abc import Callable
from datetime import datetime, timedelta
from threading import Event, Lock, Thread, current_thread

from country_lookup.constants.external import LOCAL_TZ
from country_lookup.constants.standalone import DEFAULT_UPDATE_CHECK_HOUR, LOG_CATEGORY
from country_lookup.lookup_logging import LookupLogger

ONE_DAY = timedelta(days=1)
EARLY_CHECK_DELAY = timedelta(minutes=1)
EARLY_CHECK_THRESHOLD = timedelta(minutes=5)


def local_now() -> datetime:
    return datetime.now(tz=LOCAL_TZ)


def compute_first_check_delay(now: datetime, check_hour: int) -> timedelta:
    """Return the time left until the next `check_hour`:00 after `now`.

    If that time has already passed today (or is exactly now), the check is tomorrow.
    """
    start = now.replace(hour=check_hour, minute=0, second=0, microsecond=0)
    if start <= now:
        start += ONE_DAY
    return start - now


def needs_early_check(first_check_delay: timedelta, *, freshly_provisioned: bool) -> bool:
    """Whether an extra check should run one minute after start-up.

    An existing database may be stale, so it is checked soon instead of waiting for the
    daily check, unless that check is only minutes away. A database downloaded during
    start-up is already current.
    """
    return not freshly_provisioned and first_check_delay > EARLY_CHECK_THRESHOLD


class UpdateScheduler:
    """Run `run_check` on a daily schedule from a daemon thread.

    Any exception raised by `run_check` is reported through `logger` and the schedule keeps
    going; failed checks are not retried before the next scheduled one.
    """

    def __init__(  # pylint: disable=too-many-arguments  # noqa: PLR0913
        self,
        run_check: Callable[[], object],
        *,
        logger: LookupLogger,
        check_hour: int = DEFAULT_UPDATE_CHECK_HOUR,
        interval: timedelta = ONE_DAY,
        early_check_delay: timedelta = EARLY_CHECK_DELAY,
        now: Callable[[], datetime] = local_now,
    ) -> None:
        self.check_hour = check_hour
        self.interval = interval
        self.early_check_delay = early_check_delay
        self._run_check = run_check
        self._logger = logger
        self._now = now
        self._stop_event = Event()
        self._lock = Lock()
        self._thread: Thread | None = None
        self._next_periodic_due = 0.0
        self._early_check_due: float | None = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self, *, freshly_provisioned: bool = False) -> None:
        """Start the schedule. Calling it again while started does nothing."""
        with self._lock:
            if self._thread is not None:
                return

            now = self._now()
            first_check_delay = compute_first_check_delay(now, self.check_hour)
            started_at = time.monotonic()

            self._next_periodic_due = started_at + first_check_delay.total_seconds()
            if needs_early_check(first_check_delay, freshly_provisioned=freshly_provisioned):
                self._early_check_due = started_at + self.early_check_delay.total_seconds()

            self._thread = Thread(target=self._run, name='CountryDatabaseUpdater', daemon=True)
            self._thread.start()

        next_check_at = (now + first_check_delay).strftime('%Y-%m-%d %H:%M')
        self._logger.trace(f'File update timer started, next check at {next_check_at}', LOG_CATEGORY)

    def stop(self, timeout: float | None = None) -> None:
        """Stop the schedule and wait for an in-flight check to finish."""
        self._stop_event.set()

        thread = self._thread
        if thread is not None and thread is not current_thread():
            thread.join(timeout)

    def _next_due(self) -> float:
        if self._early_check_due is None:
            return self._next_periodic_due
        return min(self._next_periodic_due, self._early_check_due)

    def _run(self) -> None:
        while not self._stop_event.wait(max(0.0, self._next_due() - time.monotonic())):
            now = time.monotonic()
            is_due = False

            if self._early_check_due is not None and now >= self._early_check_due:
                self._early_check_due = None
                is_due = True

            if now >= self._next_periodic_due:
                # Skip ticks missed while the process was suspended.
                while self._next_periodic_due <= now:
                    self._next_periodic_due += self.interval.total_seconds()
                is_due = True

            if is_due:
                self._run_check_safely()

    def _run_check_safely(self) -> None:
        try:
            self._run_check()
        except Exception as e:  # noqa: BLE001  # A failed check must never end the schedule
            self._logger.log_error(LOG_CATEGORY, e)

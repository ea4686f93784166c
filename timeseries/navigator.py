"""
Time window selection: presets, manual start/end edits and half-window
stepping. Publishes a ViewConfig to listeners whenever the window changes.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional, Tuple

from timeseries.formatting import format_date, parse_date
from timeseries.model import ViewConfig, as_utc

logger = logging.getLogger(__name__)

REALTIME = "realtime"
PAST_HOUR = "pasthour"
PAST_DAY = "pastday"
CUSTOM = "custom"
TIME_MODES = (REALTIME, PAST_HOUR, PAST_DAY, CUSTOM)

PRESET_SPANS = {
    REALTIME: timedelta(minutes=15),
    PAST_HOUR: timedelta(hours=1),
    PAST_DAY: timedelta(hours=24),
}

# 31 days
MAX_RANGE = timedelta(milliseconds=2678400000)

# Where a validation message is shown
START_FIELD = "start"
END_FIELD = "end"
TIME_FIELD = "time"
UPDATE_BUTTON = "update"

INVALID_TIME_MESSAGE = "Please enter a valid time."
ORDER_MESSAGE = "Start Time must come before End Time."
RANGE_MESSAGE = "Please select less than 1 month of data."


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def round_up_to_nearest_n_minutes(dt: datetime, n: int = 5) -> datetime:
    """
    Round up to the next n-minute boundary, dropping seconds.

    A time already on a boundary moves to the following one.
    """
    dt = as_utc(dt)
    minute = n * ((dt.minute + n) // n)
    return dt.replace(minute=0, second=0, microsecond=0) + timedelta(minutes=minute)


def resolve_window(config: ViewConfig, now: datetime) -> Tuple[datetime, datetime]:
    """Concrete (start, end) for a config; presets end at now."""
    span = PRESET_SPANS.get(config.timemode)
    if span is not None:
        return (now - span, now)
    return (config.starttime, config.endtime)


class TimeRangeNavigator:
    """
    Turns preset selection, manual edits and stepping into a validated window.

    Manual edits are stored as text and validated only on commit (blur or
    submit). Rejected edits leave the published window untouched and record
    a message per field in `errors`.
    """

    def __init__(self, config: ViewConfig, clock: Optional[Callable[[], datetime]] = None):
        self.config = config
        self.clock = clock or utc_now
        self.errors: Dict[str, str] = {}
        self.editing_custom = config.timemode == CUSTOM
        self.start_text = format_date(config.starttime)
        self.end_text = format_date(config.endtime)
        self._listeners: List[Callable[[ViewConfig], None]] = []

    # ------------------ Listeners ------------------ #

    def on_change(self, listener: Callable[[ViewConfig], None]) -> Callable[[], None]:
        """Register a listener; returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self, config: ViewConfig) -> None:
        self.config = config
        self.start_text = format_date(config.starttime)
        self.end_text = format_date(config.endtime)
        logger.info(
            f"Time window {config.timemode}: "
            f"{self.start_text or '-'} to {self.end_text or '-'}"
        )
        for listener in list(self._listeners):
            listener(config)

    # ------------------ State ------------------ #

    @property
    def mode(self) -> str:
        return CUSTOM if self.editing_custom else self.config.timemode

    @property
    def next_enabled(self) -> bool:
        """Stepping forward only makes sense for a window ending in the past."""
        if self.config.timemode != CUSTOM or self.config.endtime is None:
            return False
        return self.config.endtime < self.clock()

    # ------------------ User intent ------------------ #

    def select_mode(self, mode: str) -> None:
        if mode not in TIME_MODES:
            raise ValueError(f"Unknown time mode '{mode}'. Use one of {', '.join(TIME_MODES)}.")
        if mode == CUSTOM:
            # let the user edit the fields, nothing to publish yet
            self.editing_custom = True
            return
        self.editing_custom = False
        self.errors = {}
        start, end = resolve_window(ViewConfig(timemode=mode), self.clock())
        self._publish(self.config.update(timemode=mode, starttime=start, endtime=end))

    def set_start_text(self, text: str) -> None:
        self.start_text = text

    def set_end_text(self, text: str) -> None:
        self.end_text = text

    def commit(self, source: str = UPDATE_BUTTON) -> bool:
        """
        Validate the edited fields and publish them as a custom window.

        Args:
            source: field or button that triggered the commit

        Returns:
            True if the window was accepted
        """
        if not self.editing_custom:
            return False

        start = parse_date(self.start_text)
        end = parse_date(self.end_text)

        errors = {}
        if start is None:
            errors[START_FIELD] = INVALID_TIME_MESSAGE
        if end is None:
            errors[END_FIELD] = INVALID_TIME_MESSAGE
        if not errors and start > end:
            # no ordering complaint while the start field is still being edited
            if source != START_FIELD:
                self.errors = {TIME_FIELD: ORDER_MESSAGE}
            return False
        if not errors and end - start > MAX_RANGE:
            errors[TIME_FIELD] = RANGE_MESSAGE

        self.errors = errors
        if errors:
            logger.debug(f"Rejected time window edit: {errors}")
            return False

        self._publish(self.config.update(timemode=CUSTOM, starttime=start, endtime=end))
        return True

    def step(self, direction: int) -> ViewConfig:
        """
        Shift the window by half its width; direction is 1 (later) or -1.
        """
        if direction not in (1, -1):
            raise ValueError(f"direction must be 1 or -1, got {direction}")

        start, end = resolve_window(self.config, self.clock())
        round_to = 5 if self.config.timemode == PAST_DAY else 1
        increment = (end - start) / 2 * direction

        self.editing_custom = True
        self.errors = {}
        self._publish(self.config.update(
            timemode=CUSTOM,
            starttime=round_up_to_nearest_n_minutes(start + increment, round_to),
            endtime=round_up_to_nearest_n_minutes(end + increment, round_to),
        ))
        return self.config

    def step_next(self) -> bool:
        if not self.next_enabled:
            return False
        self.step(1)
        return True

    def step_previous(self) -> bool:
        self.step(-1)
        return True

    def set_channel(self, channel: str) -> None:
        if channel != self.config.channel:
            self._publish(self.config.update(channel=channel))

    def set_observatory(self, observatory: Optional[str]) -> None:
        if observatory != self.config.observatory:
            self._publish(self.config.update(observatory=observatory))

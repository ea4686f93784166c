"""
Application controller: configuration in, newest Timeseries out.

Every configuration change issues a new request to the factory. Only the
result of the most recent request is handed on; older ones are dropped.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from functools import partial
from typing import Callable, Optional, Protocol

from timeseries.config import Settings
from timeseries.model import Timeseries, ViewConfig
from timeseries.navigator import TimeRangeNavigator, resolve_window, utc_now

logger = logging.getLogger(__name__)

# Windows up to this long are requested at one-second resolution
SECONDS_THRESHOLD = timedelta(minutes=30)


@dataclass(frozen=True)
class TimeseriesRequest:
    request_id: int
    channel: str
    observatory: Optional[str]
    starttime: datetime
    endtime: datetime
    sampling_period: int   # seconds


class TimeseriesFactory(Protocol):
    def get_timeseries(
        self,
        request: TimeseriesRequest,
        callback: Callable[[Timeseries], None],
        errback: Callable[[Exception], None],
    ) -> None:
        ...


def default_config(settings: Optional[Settings] = None,
                   now: Optional[datetime] = None) -> ViewConfig:
    """Initial config: the previous UTC day, channel/mode from settings."""
    settings = settings or Settings()
    now = now or utc_now()
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    return ViewConfig(
        channel=settings.channel,
        observatory=settings.observatory,
        starttime=midnight - timedelta(days=1),
        endtime=midnight,
        timemode=settings.timemode,
    )


class TimeseriesApp:
    """
    Wires a TimeRangeNavigator to a factory and hands results to a consumer.

    Args:
        factory: produces Timeseries for a request, possibly asynchronously
        navigator: source of configuration changes
        on_timeseries: receives each accepted Timeseries
        on_request: notified of every request before it is issued
    """

    def __init__(
        self,
        factory: TimeseriesFactory,
        navigator: TimeRangeNavigator,
        on_timeseries: Callable[[Timeseries], None],
        on_request: Optional[Callable[[TimeseriesRequest], None]] = None,
    ):
        self.factory = factory
        self.navigator = navigator
        self.on_timeseries = on_timeseries
        self.on_request = on_request
        self.timeseries: Optional[Timeseries] = None
        self._next_request_id = 0
        self._latest_request_id: Optional[int] = None
        self._unsubscribe = navigator.on_change(self._on_config_change)

    def refresh(self) -> TimeseriesRequest:
        """Request data for the current configuration."""
        return self._on_config_change(self.navigator.config)

    def build_request(self, config: ViewConfig) -> TimeseriesRequest:
        starttime, endtime = resolve_window(config, self.navigator.clock())
        self._next_request_id += 1
        return TimeseriesRequest(
            request_id=self._next_request_id,
            channel=config.channel,
            observatory=config.observatory,
            starttime=starttime,
            endtime=endtime,
            sampling_period=1 if endtime - starttime <= SECONDS_THRESHOLD else 60,
        )

    def _on_config_change(self, config: ViewConfig) -> TimeseriesRequest:
        request = self.build_request(config)
        self._latest_request_id = request.request_id
        logger.info(
            f"Requesting {request.observatory or '-'} {request.channel} "
            f"{request.starttime.isoformat()} to {request.endtime.isoformat()} "
            f"every {request.sampling_period}s (request {request.request_id})"
        )
        if self.on_request is not None:
            self.on_request(request)
        self.factory.get_timeseries(
            request,
            callback=partial(self._on_timeseries_load, request),
            errback=partial(self._on_timeseries_error, request),
        )
        return request

    def _is_stale(self, request: TimeseriesRequest) -> bool:
        if request.request_id != self._latest_request_id:
            logger.debug(f"Dropping stale result for request {request.request_id}")
            return True
        return False

    def _on_timeseries_load(self, request: TimeseriesRequest, timeseries: Timeseries) -> None:
        if self._is_stale(request):
            return
        logger.info(f"Loaded {timeseries!r}")
        self._deliver(timeseries)

    def _on_timeseries_error(self, request: TimeseriesRequest, error: Exception) -> None:
        if self._is_stale(request):
            return
        logger.warning(f"Timeseries request {request.request_id} failed: {error}")
        self._deliver(Timeseries.empty(channel=request.channel, observatory=request.observatory))

    def _deliver(self, timeseries: Timeseries) -> None:
        self.timeseries = timeseries
        if self.on_timeseries is not None:
            self.on_timeseries(timeseries)

    def destroy(self) -> None:
        if self._unsubscribe is None:
            return
        self._unsubscribe()
        self._unsubscribe = None
        self._latest_request_id = None
        self.on_timeseries = None
        self.on_request = None

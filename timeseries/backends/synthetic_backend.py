"""
Synthetic observatory data.

Produces a smooth daily variation around a per-channel baseline with a bit
of noise, and drops samples during periodic outages so the chart has gaps
to show. Output is deterministic for a given request.
"""
import logging
import math
from datetime import datetime, timedelta, timezone

import numpy as np

from timeseries.model import Timeseries

logger = logging.getLogger(__name__)

# Rough field levels in nT
CHANNEL_BASELINES = {
    "H": 20500.0,
    "E": 0.0,
    "Z": 47000.0,
    "F": 52000.0,
}

# Longer requests than this are refused
MAX_SAMPLES = 100_000

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class SyntheticTimeseriesFactory:
    """
    Synchronous factory, see TimeseriesFactory in timeseries.app.

    Args:
        amplitude: daily variation in nT
        noise: standard deviation of the per-sample noise in nT
        outage_every: period between outages
        outage_length: duration of each outage
        seed: base seed for the noise generator
    """

    def __init__(
        self,
        amplitude: float = 30.0,
        noise: float = 0.5,
        outage_every: timedelta = timedelta(hours=6),
        outage_length: timedelta = timedelta(minutes=20),
        seed: int = 0,
    ):
        self.amplitude = amplitude
        self.noise = noise
        self.outage_every = outage_every
        self.outage_length = outage_length
        self.seed = seed

    def build(self, request) -> Timeseries:
        if request.endtime < request.starttime:
            raise ValueError(
                f"endtime {request.endtime.isoformat()} is before "
                f"starttime {request.starttime.isoformat()}"
            )
        period = int(request.sampling_period)
        if period <= 0:
            raise ValueError(f"sampling_period must be positive, got {period}")

        first = math.ceil((request.starttime - _EPOCH).total_seconds() / period) * period
        last = math.floor((request.endtime - _EPOCH).total_seconds() / period) * period
        seconds = np.arange(first, last + 1, period, dtype=np.int64)
        if seconds.size > MAX_SAMPLES:
            raise ValueError(f"request would return {seconds.size} samples (max {MAX_SAMPLES})")

        baseline = CHANNEL_BASELINES.get(request.channel, 0.0)
        rng = np.random.default_rng(self.seed + int(first))
        values = (
            baseline
            + self.amplitude * np.sin(2 * np.pi * (seconds % 86400) / 86400.0)
            + rng.normal(0.0, self.noise, seconds.size)
        )
        outage = (seconds % int(self.outage_every.total_seconds())) < self.outage_length.total_seconds()

        times = [_EPOCH + timedelta(seconds=int(s)) for s in seconds]
        samples = [None if gap else round(float(v), 2) for v, gap in zip(values, outage)]
        return Timeseries(
            times,
            samples,
            channel=request.channel,
            observatory=request.observatory,
        )

    def get_timeseries(self, request, callback, errback) -> None:
        try:
            timeseries = self.build(request)
        except ValueError as e:
            logger.warning(f"Synthetic request {request.request_id} rejected: {e}")
            errback(e)
            return
        callback(timeseries)

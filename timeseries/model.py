# timeseries/model.py
import math
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import List, Optional, Sequence, Tuple

import numpy as np


class InvalidTimeseriesError(ValueError):
    """Raised when times and values do not form a valid series."""


@dataclass(frozen=True)
class Gap:
    start: datetime    # first instant without data
    end: datetime      # last instant without data


@dataclass(frozen=True)
class TooltipLine:
    tag: str           # "value" or "time"
    text: str


@dataclass(frozen=True)
class ViewConfig:
    """
    Configuration record shared by the navigator, the app and the data provider.
    """
    channel: str = "H"
    observatory: Optional[str] = None
    starttime: Optional[datetime] = None
    endtime: Optional[datetime] = None
    timemode: str = "pasthour"

    def update(self, **changes) -> "ViewConfig":
        return replace(self, **changes)


def as_utc(dt: datetime) -> datetime:
    """Interpret naive datetimes as UTC, convert aware ones to UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_epoch_ms(dt: datetime) -> float:
    return as_utc(dt).timestamp() * 1000.0


def from_epoch_ms(ms: float) -> datetime:
    return datetime.fromtimestamp(ms / 1000.0, tz=timezone.utc)


def is_missing(value) -> bool:
    """
    A sample is missing when it is None or NaN. Zero is a valid reading.
    """
    if value is None:
        return True
    try:
        return math.isnan(value)
    except TypeError:
        return False


class Timeseries:
    """
    Ordered samples of one channel at one observatory.

    times are strictly increasing UTC datetimes; values are index-aligned and
    may contain missing entries (None or NaN). Gaps may be supplied by the
    provider; otherwise they are derived from runs of missing samples.
    """

    def __init__(
        self,
        times: Sequence[datetime],
        values: Sequence[Optional[float]],
        gaps: Optional[Sequence[Gap]] = None,
        channel: Optional[str] = None,
        observatory: Optional[str] = None,
    ):
        if len(times) != len(values):
            raise InvalidTimeseriesError(
                f"times and values differ in length ({len(times)} != {len(values)})"
            )
        self.times: List[datetime] = [as_utc(t) for t in times]
        for i in range(1, len(self.times)):
            if not self.times[i - 1] < self.times[i]:
                raise InvalidTimeseriesError(
                    f"times must be strictly increasing (index {i}: {self.times[i].isoformat()})"
                )
        self.values: List[Optional[float]] = [None if is_missing(v) else v for v in values]
        self.channel = channel
        self.observatory = observatory
        self._gaps = list(gaps) if gaps is not None else None

    @classmethod
    def empty(cls, channel: Optional[str] = None, observatory: Optional[str] = None) -> "Timeseries":
        return cls([], [], channel=channel, observatory=observatory)

    def __len__(self) -> int:
        return len(self.times)

    def __repr__(self) -> str:
        return (
            f"Timeseries(channel={self.channel!r}, observatory={self.observatory!r}, "
            f"samples={len(self)})"
        )

    def is_missing(self, index: int) -> bool:
        return self.values[index] is None

    def value_array(self) -> np.ndarray:
        """Values as floats, NaN where missing."""
        return np.array(
            [np.nan if v is None else float(v) for v in self.values], dtype=float
        )

    def defined_runs(self) -> List[Tuple[int, int]]:
        """
        Maximal [start, stop) index runs whose values are all present.
        """
        runs = []
        start = None
        for i, v in enumerate(self.values):
            if v is None:
                if start is not None:
                    runs.append((start, i))
                    start = None
            elif start is None:
                start = i
        if start is not None:
            runs.append((start, len(self.values)))
        return runs

    def gaps(self) -> List[Gap]:
        """
        Supplied gaps, or one gap per run of missing samples.

        A derived gap spans from the last present sample before the run to
        the first present sample after it, or to the series ends.
        """
        if self._gaps is not None:
            return list(self._gaps)
        gaps = []
        first = None
        for i, v in enumerate(self.values):
            if v is None:
                if first is None:
                    first = i
            elif first is not None:
                gaps.append(Gap(self.times[max(first - 1, 0)], self.times[i]))
                first = None
        if first is not None:
            gaps.append(Gap(self.times[max(first - 1, 0)], self.times[-1]))
        return gaps

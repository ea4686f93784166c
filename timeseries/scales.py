"""
Continuous scales mapping data values to pixel positions.

The host canvas keeps each scale's range in sync with the axes bounding box
(display coordinates, origin bottom-left) while the chart sets the domains.
"""
import math
from datetime import datetime
from typing import Optional, Tuple

from timeseries.model import from_epoch_ms, to_epoch_ms


class LinearScale:
    """Linear mapping from a float domain to a pixel range."""

    def __init__(self, domain=(0.0, 1.0), range=(0.0, 1.0)):
        self._d0, self._d1 = float(domain[0]), float(domain[1])
        self._r0, self._r1 = float(range[0]), float(range[1])

    def domain(self) -> Tuple[float, float]:
        return (self._d0, self._d1)

    def set_domain(self, extent) -> None:
        self._d0 = _as_float(extent[0])
        self._d1 = _as_float(extent[1])

    def range(self) -> Tuple[float, float]:
        return (self._r0, self._r1)

    def set_range(self, extent) -> None:
        self._r0, self._r1 = float(extent[0]), float(extent[1])

    def is_valid(self) -> bool:
        return not (math.isnan(self._d0) or math.isnan(self._d1))

    def __call__(self, value: float) -> float:
        span = self._d1 - self._d0
        if span == 0 or math.isnan(span):
            return (self._r0 + self._r1) / 2
        return self._r0 + (float(value) - self._d0) / span * (self._r1 - self._r0)

    def invert(self, px: float) -> Optional[float]:
        """
        Pixel back to a domain value, or None when px is outside the range or
        the domain cannot be inverted.
        """
        if px is None or not self.is_valid() or not _within(px, self._r0, self._r1):
            return None
        pixels = self._r1 - self._r0
        if pixels == 0:
            return None
        return self._d0 + (float(px) - self._r0) / pixels * (self._d1 - self._d0)


class UtcTimeScale:
    """Linear mapping from UTC datetimes to a pixel range."""

    def __init__(self, domain: Optional[Tuple[datetime, datetime]] = None, range=(0.0, 1.0)):
        self._linear = LinearScale((math.nan, math.nan), range)
        if domain is not None:
            self.set_domain(domain)

    def domain(self) -> Tuple[Optional[datetime], Optional[datetime]]:
        if not self._linear.is_valid():
            return (None, None)
        d0, d1 = self._linear.domain()
        return (from_epoch_ms(d0), from_epoch_ms(d1))

    def set_domain(self, extent) -> None:
        if extent[0] is None or extent[1] is None:
            self._linear.set_domain((math.nan, math.nan))
        else:
            self._linear.set_domain((to_epoch_ms(extent[0]), to_epoch_ms(extent[1])))

    def range(self) -> Tuple[float, float]:
        return self._linear.range()

    def set_range(self, extent) -> None:
        self._linear.set_range(extent)

    def is_valid(self) -> bool:
        return self._linear.is_valid()

    def __call__(self, value: datetime) -> float:
        return self._linear(to_epoch_ms(value))

    def invert(self, px: float) -> Optional[datetime]:
        ms = self._linear.invert(px)
        if ms is None:
            return None
        return from_epoch_ms(ms)


def _as_float(value) -> float:
    if value is None:
        return math.nan
    return float(value)


def _within(px: float, a: float, b: float) -> bool:
    try:
        px = float(px)
    except (TypeError, ValueError):
        return False
    if math.isnan(px):
        return False
    return min(a, b) <= px <= max(a, b)

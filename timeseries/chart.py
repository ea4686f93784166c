"""
Interactive line chart for a single Timeseries.

The chart draws into a matplotlib Axes owned by a host canvas. It renders the
line (one stroke per run of present samples), a "no data" overlay for gaps
and a marker for the hovered sample, and resolves pointer positions to the
nearest sample or gap so the host can show a tooltip.
"""
import logging
import math
from bisect import bisect_left
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np
from matplotlib.collections import LineCollection
from matplotlib.dates import date2num, num2date
from matplotlib.ticker import FuncFormatter

from timeseries.formatting import (
    format_axis_tick,
    format_gap_range,
    format_tooltip_time,
    format_value,
)
from timeseries.gaps import GapOverlay
from timeseries.model import Gap, Timeseries, TooltipLine, as_utc
from timeseries.scales import LinearScale, UtcTimeScale
from ui.styles import ACCENT_BLUE, ACCENT_YELLOW

logger = logging.getLogger(__name__)

LINE_COLOR = ACCENT_BLUE
POINT_COLOR = ACCENT_YELLOW

OPTION_FIELDS = ("data", "x_extent", "y_extent", "point_radius")
# Fields that only change how things look, not where they are.
COSMETIC_FIELDS = frozenset({"point_radius"})

ShowTooltip = Callable[..., None]


class HoverKind(Enum):
    NONE = "none"
    POINT = "point"
    GAP = "gap"


@dataclass(frozen=True)
class HoverState:
    kind: HoverKind = HoverKind.NONE
    index: Optional[int] = None
    gap: Optional[Gap] = None


@dataclass(frozen=True)
class TooltipRequest:
    anchor: Tuple[datetime, float]
    lines: Tuple[TooltipLine, ...]


class Subscription:
    """Handle for one canvas callback. release() disconnects it exactly once."""

    def __init__(self, canvas, event_name: str, handler):
        self.event_name = event_name
        self._canvas = canvas
        self._cid = canvas.mpl_connect(event_name, handler)

    @property
    def active(self) -> bool:
        return self._canvas is not None

    def release(self) -> None:
        if self._canvas is None:
            return
        canvas, self._canvas = self._canvas, None
        canvas.mpl_disconnect(self._cid)


class TimeSeriesChart:
    """
    Line chart with gap overlay and nearest-sample hover.

    Args:
        ax: Axes to draw into; its figure canvas is the pointer surface
        data: Timeseries to plot (empty series when omitted)
        x_scale: time scale, kept in sync with the axes by render()
        y_scale: value scale, kept in sync with the axes by render()
        x_extent: fixed (start, end) instead of the series time extent
        y_extent: fixed (min, max) instead of the visible value extent
        point_radius: hovered marker radius in points
        show_tooltip: host callback, show_tooltip(anchor, lines) to show,
            show_tooltip(None) to hide
    """

    def __init__(
        self,
        ax,
        data: Optional[Timeseries] = None,
        *,
        x_scale: Optional[UtcTimeScale] = None,
        y_scale: Optional[LinearScale] = None,
        x_extent: Optional[Tuple[datetime, datetime]] = None,
        y_extent: Optional[Tuple[float, float]] = None,
        point_radius: float = 3.0,
        show_tooltip: Optional[ShowTooltip] = None,
    ):
        self.ax = ax
        self.data = data if data is not None else Timeseries.empty()
        self.x_scale = x_scale if x_scale is not None else UtcTimeScale()
        self.y_scale = y_scale if y_scale is not None else LinearScale((math.nan, math.nan))
        self.x_extent = x_extent
        self.y_extent = y_extent
        self.point_radius = point_radius

        self.hover_state = HoverState()
        self.tooltip: Optional[TooltipRequest] = None
        self.marker_position: Optional[Tuple[float, float]] = None
        self._show_tooltip = show_tooltip
        self._destroyed = False

        # Layers, bottom to top: gaps, line, hovered point
        self.gap_layer = GapOverlay(ax, zorder=1)
        self.line = LineCollection([], linewidths=1.5, colors=LINE_COLOR, zorder=2)
        ax.add_collection(self.line, autolim=False)
        self.marker, = ax.plot(
            [], [],
            marker="o",
            linestyle="",
            markersize=2 * point_radius,
            color=POINT_COLOR,
            zorder=3,
        )
        self.marker.set_visible(False)

        ax.xaxis.set_major_formatter(FuncFormatter(_format_tick))

        canvas = ax.figure.canvas
        self._subscriptions: List[Subscription] = [
            Subscription(canvas, "motion_notify_event", self._on_mouse_move),
            Subscription(canvas, "axes_leave_event", self._on_mouse_out),
            Subscription(canvas, "figure_leave_event", self._on_mouse_out),
        ]

    # ==========================================================================
    # Extents
    # ==========================================================================

    def get_x_extent(self) -> Tuple[Optional[datetime], Optional[datetime]]:
        if self.x_extent is not None:
            return self.x_extent
        times = self.data.times
        if not times:
            return (None, None)
        return (times[0], times[-1])

    def get_y_extent(self, x_extent=None) -> Tuple[float, float]:
        """
        Value extent, restricted to the samples of x_extent when given.

        The sample one past the right bound is included so a point that is
        partly visible is not clipped. Returns (nan, nan) when every sample
        in range is missing.
        """
        if self.y_extent is not None:
            return self.y_extent
        values = self.data.value_array()
        if x_extent is not None and x_extent[0] is not None and x_extent[1] is not None:
            times = self.data.times
            lo = bisect_left(times, as_utc(x_extent[0]))
            hi = bisect_left(times, as_utc(x_extent[1]))
            values = values[lo:hi + 1]
        return _extent(values)

    # ==========================================================================
    # Rendering
    # ==========================================================================

    def set_data(self, data: Timeseries) -> None:
        self.set_options(data=data)

    def set_options(self, **options) -> None:
        unknown = set(options) - set(OPTION_FIELDS)
        if unknown:
            raise TypeError(f"Unknown chart option(s): {', '.join(sorted(unknown))}")
        for name, value in options.items():
            setattr(self, name, value)
        if "data" in options:
            if self.data is None:
                self.data = Timeseries.empty()
            # hovered index may not exist in the new series
            self._on_mouse_out()
        self.render(changed=set(options))

    def render(self, changed: Optional[Sequence[str]] = None) -> None:
        """Sync scales with the axes and the current extents, then plot."""
        self._update_scales()
        self.plot(changed)
        self._redraw()

    def plot(self, changed: Optional[Sequence[str]] = None) -> None:
        """
        Draw gaps and line against the current scales.

        Args:
            changed: option names that changed; everything when None
        """
        changed = set(OPTION_FIELDS) if changed is None else set(changed)

        if "point_radius" in changed:
            self.marker.set_markersize(2 * self.point_radius)
        if changed and changed <= COSMETIC_FIELDS:
            return

        if len(self.data) == 0:
            self.gap_layer.clear()
            self.line.set_segments([])
            return

        if not self.y_scale.is_valid() or not self.x_scale.is_valid():
            logger.debug("No data in visible window, skipping plot")
            return

        self.gap_layer.reconcile(
            self.data.gaps(),
            self.x_scale,
            self.y_scale,
            on_over=self._on_gap_over,
            on_out=self._on_gap_out,
        )
        self.line.set_segments(self._line_segments())

    def _line_segments(self) -> List[np.ndarray]:
        if not self.data.times:
            return []
        xs = np.asarray(date2num(self.data.times), dtype=float)
        ys = self.data.value_array()
        return [
            np.column_stack([xs[start:stop], ys[start:stop]])
            for start, stop in self.data.defined_runs()
        ]

    def _update_scales(self) -> None:
        bbox = self.ax.bbox
        self.x_scale.set_range((bbox.x0, bbox.x1))
        self.y_scale.set_range((bbox.y0, bbox.y1))

        x_extent = self.get_x_extent()
        if x_extent[0] is None or x_extent[1] is None:
            self.x_scale.set_domain((None, None))
            x_extent = None
        else:
            x0, x1 = x_extent
            if x0 == x1:
                x0, x1 = x0 - timedelta(minutes=1), x1 + timedelta(minutes=1)
            self.x_scale.set_domain((x0, x1))
            self.ax.set_xlim(date2num(x0), date2num(x1))

        y0, y1 = self.get_y_extent(x_extent)
        if math.isnan(y0) or math.isnan(y1):
            self.y_scale.set_domain((math.nan, math.nan))
            return
        if y0 == y1:
            y0, y1 = y0 - 1, y1 + 1
        self.y_scale.set_domain((y0, y1))
        self.ax.set_ylim(y0, y1)

    def _redraw(self) -> None:
        self.ax.figure.canvas.draw_idle()

    # ==========================================================================
    # Pointer handling
    # ==========================================================================

    def nearest_index(self, x: datetime) -> Optional[int]:
        """
        Index of the sample closest in time to x; ties go to the later sample.
        """
        times = self.data.times
        if not times:
            return None
        i = min(bisect_left(times, x, 1), len(times) - 1)
        i0 = max(0, i - 1)
        if x - times[i0] < times[i] - x:
            i = i0
        return i

    def _on_mouse_move(self, event) -> None:
        if self._destroyed:
            return
        px, py = event.x, event.y
        if px is None or py is None:
            self._on_mouse_out()
            return

        if self.gap_layer.pointer_moved(px, py):
            return

        y_range = self.y_scale.range()
        if not min(y_range) <= py <= max(y_range):
            self._on_mouse_out()
            return

        x = self.x_scale.invert(px)
        if x is None:
            self._on_mouse_out()
            return

        i = self.nearest_index(x)
        if i is None or self.data.is_missing(i):
            self._on_mouse_out()
            return
        if self.hover_state == HoverState(HoverKind.POINT, index=i):
            return

        t = self.data.times[i]
        value = self.data.values[i]
        self._move_marker(t, value)
        self.hover_state = HoverState(HoverKind.POINT, index=i)
        self._request_tooltip(
            (t, value),
            [
                TooltipLine("value", format_value(value)),
                TooltipLine("time", format_tooltip_time(t)),
            ],
        )
        self._redraw()

    def _on_mouse_out(self, event=None) -> None:
        if self._destroyed:
            return
        self.gap_layer.pointer_left()
        self._hide()

    def _on_gap_over(self, gap: Gap) -> None:
        if not self.y_scale.is_valid():
            self._hide()
            return
        y0, y1 = self.y_scale.domain()
        center_x = gap.start + (gap.end - gap.start) / 2
        center_y = (y0 + y1) / 2

        self._move_marker(center_x, center_y)
        self.hover_state = HoverState(HoverKind.GAP, gap=gap)
        self._request_tooltip(
            (center_x, center_y),
            [
                TooltipLine("value", "NO DATA"),
                TooltipLine("time", format_gap_range(gap.start, gap.end)),
            ],
        )
        self._redraw()

    def _on_gap_out(self) -> None:
        self._hide()

    def _move_marker(self, t: datetime, value: float) -> None:
        self.marker.set_data([date2num(t)], [value])
        self.marker.set_visible(True)
        self.marker_position = (self.x_scale(t), self.y_scale(value))

    def _hide(self) -> None:
        if self.hover_state.kind is HoverKind.NONE and self.tooltip is None:
            return
        self.marker.set_visible(False)
        self.marker_position = None
        self.hover_state = HoverState()
        self._request_tooltip(None)
        self._redraw()

    def _request_tooltip(self, anchor, lines=None) -> None:
        if anchor is None:
            self.tooltip = None
        else:
            self.tooltip = TooltipRequest(anchor, tuple(lines))
        if self._show_tooltip is None:
            return
        if anchor is None:
            self._show_tooltip(None)
        else:
            self._show_tooltip(anchor, list(lines))

    # ==========================================================================
    # Teardown
    # ==========================================================================

    def destroy(self) -> None:
        """Release pointer subscriptions, gap handlers and artists."""
        if self._destroyed:
            return
        for subscription in self._subscriptions:
            subscription.release()
        self._subscriptions = []
        self.gap_layer.clear()
        self.line.remove()
        self.marker.remove()
        self._destroyed = True

        self.gap_layer = None
        self.line = None
        self.marker = None
        self.data = None
        self.x_scale = None
        self.y_scale = None
        self.tooltip = None
        self._show_tooltip = None
        self.ax = None


def _extent(values: np.ndarray) -> Tuple[float, float]:
    present = values[~np.isnan(values)]
    if present.size == 0:
        return (math.nan, math.nan)
    return (float(present.min()), float(present.max()))


def _format_tick(x, pos=None) -> str:
    return format_axis_tick(num2date(x))

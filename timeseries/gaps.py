"""
"No data" overlay for a time series chart.

Each gap interval is drawn as a full-height rectangle and doubles as a hit
region with its own hover handlers. Rendering is a keyed reconciliation:
regions are created, updated or removed by interval identity.
"""
import logging
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from matplotlib.dates import date2num
from matplotlib.patches import Rectangle

from timeseries.model import Gap
from ui.styles import ACCENT_RED

logger = logging.getLogger(__name__)

GAP_COLOR = ACCENT_RED


class GapRegion:
    """One rendered gap: rectangle artist, pixel bounds and hover handlers."""

    def __init__(self, gap: Gap, patch: Rectangle,
                 on_over: Callable[[Gap], None], on_out: Callable[[], None]):
        self.gap = gap
        self.patch = patch
        self.on_over: Optional[Callable[[Gap], None]] = on_over
        self.on_out: Optional[Callable[[], None]] = on_out
        self.bounds: Tuple[float, float, float, float] = (0.0, 0.0, 0.0, 0.0)

    def contains(self, px: float, py: float) -> bool:
        x0, x1, y0, y1 = self.bounds
        return x0 <= px <= x1 and y0 <= py <= y1

    def unwire(self) -> None:
        self.on_over = None
        self.on_out = None


class GapOverlay:
    """
    Gap layer of a chart.

    Only one region can be hovered at a time; entering a region calls its
    on_over handler and leaving it calls on_out.
    """

    def __init__(self, ax, zorder: float = 1.0):
        self.ax = ax
        self.zorder = zorder
        self._regions: Dict[Gap, GapRegion] = {}
        self._hovered: Optional[GapRegion] = None

    @property
    def regions(self) -> List[GapRegion]:
        return sorted(self._regions.values(), key=lambda r: r.gap.start)

    @property
    def hovered(self) -> Optional[Gap]:
        return self._hovered.gap if self._hovered is not None else None

    def reconcile(self, gaps: Sequence[Gap], x_scale, y_scale,
                  on_over: Callable[[Gap], None], on_out: Callable[[], None]) -> None:
        """
        Bind gaps to regions. New gaps get a region with hover handlers,
        retained gaps get fresh geometry, gaps that disappeared are unwired
        and removed.
        """
        keys = list(dict.fromkeys(gaps))
        wanted = set(keys)

        for key in [k for k in self._regions if k not in wanted]:
            self._remove(key)

        y0, y1 = y_scale.domain()
        py0, py1 = sorted((y_scale(y0), y_scale(y1)))
        # hit regions never extend past the plot area
        left, right = sorted(x_scale.range())
        for gap in keys:
            region = self._regions.get(gap)
            if region is None:
                patch = Rectangle((0, 0), 0, 0, facecolor=GAP_COLOR, alpha=0.15,
                                  edgecolor="none", zorder=self.zorder)
                self.ax.add_patch(patch)
                region = GapRegion(gap, patch, on_over, on_out)
                self._regions[gap] = region
            x_start, x_end = date2num(gap.start), date2num(gap.end)
            region.patch.set_bounds(x_start, y0, x_end - x_start, y1 - y0)
            px0, px1 = sorted((x_scale(gap.start), x_scale(gap.end)))
            region.bounds = (max(px0, left), min(px1, right), py0, py1)

        logger.debug(f"Gap overlay holds {len(self._regions)} region(s)")

    def pointer_moved(self, px: float, py: float) -> bool:
        """
        Update gap hover for a pointer position.

        Returns True when the pointer is over a gap region.
        """
        hit = None
        for region in self._regions.values():
            if region.contains(px, py):
                hit = region
                break
        if hit is self._hovered:
            return hit is not None
        self.pointer_left()
        if hit is not None:
            self._hovered = hit
            if hit.on_over is not None:
                hit.on_over(hit.gap)
        return hit is not None

    def pointer_left(self) -> None:
        region, self._hovered = self._hovered, None
        if region is not None and region.on_out is not None:
            region.on_out()

    def clear(self) -> None:
        for key in list(self._regions):
            self._remove(key)

    def _remove(self, key: Gap) -> None:
        region = self._regions.pop(key)
        if region is self._hovered:
            self.pointer_left()
        region.unwire()
        region.patch.remove()

import os
import sys
from pathlib import Path

# Avoid GUI crashes in headless CI
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import matplotlib

matplotlib.use("Agg")

import pytest
from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.figure import Figure

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


class TooltipRecorder:
    """Stands in for the host tooltip surface."""

    def __init__(self):
        self.calls = []

    def __call__(self, anchor, lines=None):
        self.calls.append((anchor, lines))

    @property
    def last(self):
        return self.calls[-1] if self.calls else None

    @property
    def visible(self):
        return self.last is not None and self.last[0] is not None


@pytest.fixture
def ax():
    fig = Figure(figsize=(9.6, 3.0), dpi=100)
    FigureCanvasAgg(fig)
    return fig.add_subplot(111)


@pytest.fixture
def tooltip():
    return TooltipRecorder()

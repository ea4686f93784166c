"""
Matplotlib canvas widgets for observatory data visualization.
"""
from ui.canvases.time_series import TimeSeriesCanvas

__all__ = ['TimeSeriesCanvas']

"""
Timeseries model, scales and interactive chart for observatory data.
"""
from timeseries.chart import TimeSeriesChart
from timeseries.model import Gap, Timeseries, TooltipLine, ViewConfig
from timeseries.navigator import TimeRangeNavigator

__all__ = ['Gap', 'Timeseries', 'TimeSeriesChart', 'TimeRangeNavigator', 'TooltipLine', 'ViewConfig']

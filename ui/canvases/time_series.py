"""
Time series canvas for observatory data visualization.
"""
from matplotlib.backends.backend_qt5agg import FigureCanvasQTAgg as FigureCanvas
from matplotlib.dates import date2num
from matplotlib.figure import Figure

from timeseries.chart import TimeSeriesChart
from timeseries.scales import LinearScale, UtcTimeScale
from ui.styles import ACCENT_BLUE, BG_COLOR, BG_COLOR_LIGHT, GRID_COLOR, TEXT_COLOR, TEXT_COLOR_DIM


class TimeSeriesCanvas(FigureCanvas):
    """
    Matplotlib canvas hosting a TimeSeriesChart.

    Supplies the chart with its axes, scales and a tooltip surface, and
    re-renders the chart when the widget is resized.
    """

    def __init__(self, title: str, parent=None, width=9.6, height=3.0, dpi=100, point_radius=3.0):
        """
        Initialize time series canvas.

        Args:
            title: Chart title
            parent: Parent QWidget
            width: Figure width in inches
            height: Figure height in inches
            dpi: Dots per inch resolution
            point_radius: Hovered point marker radius
        """
        self.fig = Figure(figsize=(width, height), dpi=dpi)
        self.ax = self.fig.add_subplot(111)
        super().__init__(self.fig)
        self.setParent(parent)

        self.fig.patch.set_facecolor(BG_COLOR)
        self.ax.set_facecolor(BG_COLOR_LIGHT)

        # Style axes
        for spine in self.ax.spines.values():
            spine.set_color(TEXT_COLOR_DIM)
        self.ax.tick_params(colors=TEXT_COLOR_DIM, labelsize=7)
        self.ax.xaxis.label.set_color(TEXT_COLOR_DIM)
        self.ax.yaxis.label.set_color(TEXT_COLOR_DIM)
        self.ax.title.set_color("#FFFFFF")

        # Configure plot
        self.title = title
        self.ax.set_title(title, fontsize=8)
        self.ax.grid(True, color=GRID_COLOR, alpha=0.6)
        self.ax.set_xlabel("Time (UTC)", fontsize=7)

        # Tooltip box, hidden until the chart asks for it
        self.tooltip = self.ax.annotate(
            "",
            xy=(0, 0),
            xytext=(12, 12),
            textcoords="offset points",
            fontsize=7,
            color=TEXT_COLOR,
            bbox=dict(boxstyle="round,pad=0.4", fc=BG_COLOR, ec=ACCENT_BLUE, alpha=0.9),
            zorder=10,
        )
        self.tooltip.set_visible(False)

        self.chart = TimeSeriesChart(
            self.ax,
            x_scale=UtcTimeScale(),
            y_scale=LinearScale(),
            point_radius=point_radius,
            show_tooltip=self.show_tooltip,
        )

        self.fig.tight_layout(pad=0.5)

    def set_timeseries(self, timeseries):
        """
        Replace the plotted series.

        Args:
            timeseries: Timeseries to plot
        """
        label = " ".join(p for p in (timeseries.observatory, timeseries.channel) if p)
        self.ax.set_title(f"{self.title} {label}".strip(), fontsize=8)
        if self.chart is not None:
            self.chart.set_data(timeseries)

    def show_tooltip(self, anchor, lines=None):
        """
        Show a tooltip at a data coordinate, or hide it when anchor is None.

        Args:
            anchor: (datetime, value) point the tooltip refers to
            lines: TooltipLine entries, one text line each
        """
        if anchor is None:
            self.tooltip.set_visible(False)
            return
        t, value = anchor
        self.tooltip.xy = (date2num(t), value)
        self.tooltip.set_text("\n".join(line.text for line in lines))
        self.tooltip.set_visible(True)

    def resizeEvent(self, event):
        super().resizeEvent(event)
        if getattr(self, "chart", None) is None:
            return
        self.fig.tight_layout(pad=0.5)
        self.chart.render()

    def closeEvent(self, event):
        if self.chart is not None:
            self.chart.destroy()
            self.chart = None
        super().closeEvent(event)

#!/usr/bin/env python3
"""
Geomagnetic Timeseries Viewer - Main Entry Point

Interactive chart of one observatory channel with "no data" gaps, nearest
sample tooltips and time window navigation.

Usage:
    python main.py                  # Defaults from environment / .env
    python main.py --realtime       # Start in realtime mode (last 15 minutes)
    python main.py --pastday        # Start with the past 24 hours
"""
import sys
import logging

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from timeseries.config import load_settings

settings = load_settings()

# Configure logging before the UI modules are imported
logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format='[%(levelname)s] %(name)s: %(message)s',
    stream=sys.stdout
)
logger = logging.getLogger("main")

from PyQt5 import QtWidgets

from timeseries.app import TimeseriesApp, default_config
from timeseries.backends.synthetic_backend import SyntheticTimeseriesFactory
from timeseries.backends.worker import QtThreadedFactory
from timeseries.navigator import CUSTOM, PAST_DAY, REALTIME, TimeRangeNavigator
from ui.main_window import MainWindow


def main(timemode=None):
    """
    Entry point for the viewer.

    Args:
        timemode: initial time mode, overrides TIMESERIES_TIMEMODE
    """
    logger.info("Creating Qt application...")
    app = QtWidgets.QApplication(sys.argv)

    config = default_config(settings)
    if timemode is not None:
        config = config.update(timemode=timemode)
    navigator = TimeRangeNavigator(config)

    logger.info("Creating main window...")
    window = MainWindow(navigator, settings)

    factory = QtThreadedFactory(SyntheticTimeseriesFactory())
    viewer = TimeseriesApp(
        factory,
        navigator,
        on_timeseries=window.handle_timeseries,
        on_request=window.handle_request,
    )
    if config.timemode == CUSTOM:
        viewer.refresh()
    else:
        # presets are anchored to "now" at selection time
        navigator.select_mode(config.timemode)

    window.show()
    logger.info("Viewer ready")

    # Run Qt event loop
    result = app.exec_()

    # Clean shutdown
    logger.info("Shutting down...")
    viewer.destroy()
    factory.stop()
    sys.exit(result)


if __name__ == "__main__":
    # Parse command line arguments
    timemode = None
    if "--realtime" in sys.argv:
        timemode = REALTIME
    if "--pastday" in sys.argv:
        timemode = PAST_DAY

    try:
        main(timemode)
    except Exception:
        logger.exception("Fatal error")
        sys.exit(1)

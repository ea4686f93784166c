"""
Runs a synchronous TimeseriesFactory on Qt worker threads.

Results come back through queued signals, so callbacks run on the thread
that owns the QtThreadedFactory (normally the GUI thread).
"""
import logging
from typing import Callable, Dict, Tuple

from PyQt5 import QtCore

logger = logging.getLogger(__name__)


class TimeseriesFetchWorker(QtCore.QThread):
    """Background thread that builds one Timeseries"""
    loaded = QtCore.pyqtSignal(int, object)   # request_id, Timeseries
    failed = QtCore.pyqtSignal(int, str)      # request_id, error message

    def __init__(self, factory, request, parent=None):
        super().__init__(parent)
        self.factory = factory
        self.request = request

    def run(self):
        request_id = self.request.request_id
        try:
            self.factory.get_timeseries(
                self.request,
                callback=lambda timeseries: self.loaded.emit(request_id, timeseries),
                errback=lambda error: self.failed.emit(request_id, str(error)),
            )
        except Exception as e:
            logger.error(f"Timeseries worker error: {e}", exc_info=True)
            self.failed.emit(request_id, str(e))


class TimeseriesFetchError(RuntimeError):
    """Factory failure reported by a worker thread."""


class QtThreadedFactory(QtCore.QObject):
    """
    Asynchronous TimeseriesFactory wrapping a synchronous one.

    Each request gets its own worker thread; stop() waits for all of them.
    """

    def __init__(self, factory, parent=None):
        super().__init__(parent)
        self.factory = factory
        self._pending: Dict[int, Tuple[Callable, Callable]] = {}
        self._workers: Dict[int, TimeseriesFetchWorker] = {}

    def get_timeseries(self, request, callback, errback) -> None:
        worker = TimeseriesFetchWorker(self.factory, request)
        worker.loaded.connect(self._on_loaded)
        worker.failed.connect(self._on_failed)
        worker.finished.connect(self._on_finished)
        self._pending[request.request_id] = (callback, errback)
        self._workers[request.request_id] = worker
        worker.start()

    @QtCore.pyqtSlot(int, object)
    def _on_loaded(self, request_id, timeseries):
        callbacks = self._pending.pop(request_id, None)
        if callbacks is not None:
            callbacks[0](timeseries)

    @QtCore.pyqtSlot(int, str)
    def _on_failed(self, request_id, message):
        callbacks = self._pending.pop(request_id, None)
        if callbacks is not None:
            callbacks[1](TimeseriesFetchError(message))

    @QtCore.pyqtSlot()
    def _on_finished(self):
        worker = self.sender()
        if worker is None:
            return
        self._workers.pop(worker.request.request_id, None)
        worker.deleteLater()

    def stop(self):
        """Wait for running workers and forget pending callbacks"""
        logger.info(f"Waiting for {len(self._workers)} timeseries worker(s)...")
        for worker in list(self._workers.values()):
            worker.wait()
        self._pending.clear()

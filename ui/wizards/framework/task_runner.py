# -*- coding: utf-8 -*-
"""
Task Runner - runs blocking store calls off the UI thread.

Wizard logic stays single-threaded: the call itself runs in a worker
thread, but on_success / on_error are always invoked on the thread that
owns the runner (the UI thread), in completion order.
"""

import itertools
from abc import ABCMeta, abstractmethod
from typing import Any, Callable, Dict, Set, Tuple

from PyQt5.QtCore import QObject, QThread, pyqtSignal, pyqtSlot

from utils.logger import get_logger

logger = get_logger(__name__)

SuccessCallback = Callable[[Any], None]
ErrorCallback = Callable[[Exception], None]


# Combine PyQt5 metaclass with ABC metaclass
class ABCQObjectMeta(type(QObject), ABCMeta):
    """Metaclass that combines PyQt5's metaclass with ABC."""
    pass


class TaskRunner(QObject, metaclass=ABCQObjectMeta):
    """Executes a callable and reports its outcome through callbacks."""

    @abstractmethod
    def submit(self, func: Callable[[], Any],
               on_success: SuccessCallback, on_error: ErrorCallback):
        """
        Run func asynchronously.

        Args:
            func: blocking call (typically a DraftStore method)
            on_success: receives func's return value
            on_error: receives the exception func raised
        """
        pass

    def shutdown(self):
        """Wait for outstanding work. Nothing to do by default."""
        pass


class _StoreCallWorker(QThread):
    """Background worker for one store call."""

    succeeded = pyqtSignal(int, object)  # task id, result
    failed = pyqtSignal(int, object)  # task id, exception

    def __init__(self, task_id: int, func: Callable[[], Any]):
        super().__init__()
        self.task_id = task_id
        self._func = func

    def run(self):
        """Run the call in background."""
        try:
            result = self._func()
        except Exception as e:
            self.failed.emit(self.task_id, e)
            return
        self.succeeded.emit(self.task_id, result)


class QThreadTaskRunner(TaskRunner):
    """
    TaskRunner backed by one QThread per call.

    Worker signals are queued to this object's thread, so callbacks never
    run concurrently with other wizard code.
    """

    task_finished = pyqtSignal(int, bool)  # task id, success

    def __init__(self, parent=None):
        super().__init__(parent)
        self._ids = itertools.count(1)
        self._callbacks: Dict[int, Tuple[SuccessCallback, ErrorCallback]] = {}
        self._workers: Set[_StoreCallWorker] = set()

    @property
    def pending_count(self) -> int:
        return len(self._callbacks)

    def submit(self, func: Callable[[], Any],
               on_success: SuccessCallback, on_error: ErrorCallback) -> int:
        task_id = next(self._ids)
        worker = _StoreCallWorker(task_id, func)
        worker.succeeded.connect(self._on_succeeded)
        worker.failed.connect(self._on_failed)
        worker.finished.connect(self._on_worker_finished)

        self._callbacks[task_id] = (on_success, on_error)
        self._workers.add(worker)
        logger.debug(f"Task {task_id} started")
        worker.start()
        return task_id

    @pyqtSlot(int, object)
    def _on_succeeded(self, task_id: int, result: Any):
        on_success, _ = self._callbacks.pop(task_id)
        try:
            on_success(result)
        finally:
            self.task_finished.emit(task_id, True)

    @pyqtSlot(int, object)
    def _on_failed(self, task_id: int, error: Exception):
        _, on_error = self._callbacks.pop(task_id)
        logger.debug(f"Task {task_id} failed: {error}")
        try:
            on_error(error)
        finally:
            self.task_finished.emit(task_id, False)

    @pyqtSlot()
    def _on_worker_finished(self):
        worker = self.sender()
        # finished is emitted just before the thread exits
        worker.wait()
        self._workers.discard(worker)

    def shutdown(self):
        """Block until every running worker thread has exited."""
        for worker in list(self._workers):
            worker.wait()

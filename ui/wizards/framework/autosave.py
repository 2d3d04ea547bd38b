# -*- coding: utf-8 -*-
"""
Autosave Scheduler - debounced, single-flight draft persistence.

Rules:
- Every draft change restarts a debounce window unless the content equals
  what was last persisted.
- When the window elapses the fields that differ from the persisted
  baseline are written, together with the step progress.
- At most one write is in flight. A window that elapses during a write is
  dropped; once the write completes a new window starts if the draft still
  differs. Forced saves (step transition, manual) wait in a single pending
  slot and are sent as soon as the in-flight write completes.
- Autosave failures are logged only. A rate-limited autosave (HTTP 429) is
  not retried either; the baseline stays untouched so the next change
  writes the same fields again.
- Forced-save failures are reported through save_failed; nothing in memory
  is rolled back.
"""

import copy
import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from PyQt5.QtCore import QObject, QTimer, pyqtSignal

from app.config import Config
from services.exceptions import is_rate_limited
from utils.datetime_utils import format_last_saved, utc_now
from utils.logger import get_logger

logger = get_logger(__name__)

CompletionCallback = Callable[[bool], None]


class SaveKind:
    """Why a save was issued."""
    AUTOSAVE = "autosave"
    TRANSITION = "transition"
    MANUAL = "manual"


def content_snapshot(content: Dict[str, Any]) -> str:
    """Stable serialized form of draft content, used to detect no-op saves."""
    return json.dumps(content, sort_keys=True, ensure_ascii=False, default=str)


class DebounceTimer(QObject):
    """Owned single-shot timer: schedule(delay, callback) / cancel()."""

    def __init__(self, parent=None):
        super().__init__(parent)
        self._callback: Optional[Callable[[], None]] = None
        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self._on_timeout)

    def schedule(self, delay_ms: int, callback: Callable[[], None]):
        """(Re)start the window; an earlier pending callback is replaced."""
        self._callback = callback
        self._timer.start(delay_ms)

    def cancel(self):
        self._timer.stop()
        self._callback = None

    def is_active(self) -> bool:
        return self._timer.isActive()

    def _on_timeout(self):
        callback, self._callback = self._callback, None
        if callback is not None:
            callback()


@dataclass
class _SaveRequest:
    kind: str
    fields: Dict[str, Any]
    callbacks: List[CompletionCallback] = field(default_factory=list)

    def absorb(self, other: "_SaveRequest"):
        """Fold a later forced save into this one; later values win."""
        self.fields.update(other.fields)
        if other.kind == SaveKind.MANUAL:
            self.kind = SaveKind.MANUAL
        self.callbacks.extend(other.callbacks)


class AutosaveScheduler(QObject):
    """
    Persists a wizard's draft without blocking the UI.

    The scheduler is attached to a source exposing:
        draft_id            store id of the draft
        content_dict()      content fields by name
        progress_fields()   current step / completed / errored
    """

    saved = pyqtSignal(str, object)  # kind, saved_at (datetime)
    save_failed = pyqtSignal(str, object)  # kind, exception
    saving_changed = pyqtSignal(bool)

    def __init__(self, store, runner, timer=None, debounce_ms: int = None, parent=None):
        """
        Args:
            store: DraftStore used for patch_draft
            runner: TaskRunner executing store calls
            timer: object with schedule/cancel/is_active (DebounceTimer by default)
            debounce_ms: debounce window, Config.AUTOSAVE_DEBOUNCE_MS by default
        """
        super().__init__(parent)
        self.store = store
        self.runner = runner
        self.timer = timer if timer is not None else DebounceTimer(self)
        self.debounce_ms = Config.AUTOSAVE_DEBOUNCE_MS if debounce_ms is None else debounce_ms

        self._source = None
        self._baseline: Dict[str, Any] = {}
        self._baseline_snapshot = content_snapshot({})
        self._in_flight: Optional[_SaveRequest] = None
        self._pending: Optional[_SaveRequest] = None
        self._window_dropped = False
        self._stopped = False
        self._last_saved_at: Optional[datetime] = None

    # ==================== State ====================

    @property
    def is_saving(self) -> bool:
        return self._in_flight is not None

    @property
    def last_saved_at(self) -> Optional[datetime]:
        return self._last_saved_at

    def last_saved_display(self, now: Optional[datetime] = None) -> Optional[str]:
        return format_last_saved(self._last_saved_at, now)

    def attach(self, source, last_saved_at: Optional[datetime] = None):
        """
        Start tracking a freshly hydrated draft.

        Its current content is taken as persisted.
        """
        self.timer.cancel()
        self._source = source
        self._set_baseline(source.content_dict())
        self._in_flight = None
        self._pending = None
        self._window_dropped = False
        self._stopped = False
        self._last_saved_at = last_saved_at
        logger.debug(f"Autosave attached to draft {source.draft_id}")

    def stop(self):
        """Cancel the debounce window and ignore further changes."""
        self.timer.cancel()
        self._stopped = True

    def has_unsaved_changes(self) -> bool:
        if self._source is None:
            return False
        return content_snapshot(self._source.content_dict()) != self._baseline_snapshot

    def _set_baseline(self, content: Dict[str, Any]):
        self._baseline = copy.deepcopy(content)
        self._baseline_snapshot = content_snapshot(self._baseline)

    def _changed_fields(self) -> Dict[str, Any]:
        current = self._source.content_dict()
        return {
            name: value for name, value in current.items()
            if content_snapshot(value) != content_snapshot(self._baseline.get(name))
        }

    # ==================== Triggers ====================

    def notify_changed(self):
        """Called after every draft mutation."""
        if self._source is None or self._stopped:
            return
        if not self.has_unsaved_changes():
            logger.debug("Draft matches last saved state, autosave not scheduled")
            return
        self.timer.schedule(self.debounce_ms, self._on_window_elapsed)

    def save_now(self, kind: str, fields: Dict[str, Any],
                 on_complete: Optional[CompletionCallback] = None):
        """
        Forced save, bypassing the debounce window and the no-op check.

        Args:
            kind: SaveKind.TRANSITION or SaveKind.MANUAL
            fields: content and progress fields to write
            on_complete: called with True/False when this save finishes
        """
        if self._source is None:
            logger.warning(f"{kind} save requested before a draft was attached")
            if on_complete:
                on_complete(False)
            return

        request = _SaveRequest(kind, dict(fields), [on_complete] if on_complete else [])
        if self._in_flight is not None:
            if self._pending is None:
                self._pending = request
            else:
                self._pending.absorb(request)
            logger.debug(f"{kind} save queued behind {self._in_flight.kind} save")
            return
        self._start(request)

    def _on_window_elapsed(self):
        if self._source is None or self._stopped:
            return
        if self._in_flight is not None:
            logger.debug("Autosave window elapsed during a save, waiting for it to finish")
            self._window_dropped = True
            return

        changes = self._changed_fields()
        if not changes:
            return
        changes.update(self._source.progress_fields())
        self._start(_SaveRequest(SaveKind.AUTOSAVE, changes))

    # ==================== Execution ====================

    def _start(self, request: _SaveRequest, announce: bool = True):
        self._in_flight = request
        if announce:
            self.saving_changed.emit(True)
        draft_id = self._source.draft_id
        fields = copy.deepcopy(request.fields)
        logger.info(f"Saving draft {draft_id} ({request.kind}): {sorted(fields)}")
        self.runner.submit(
            lambda: self.store.patch_draft(draft_id, fields),
            lambda ack: self._on_save_succeeded(request, ack),
            lambda error: self._on_save_failed(request, error),
        )

    def _on_save_succeeded(self, request: _SaveRequest, ack: Any):
        persisted = {k: v for k, v in request.fields.items() if k in self._baseline}
        baseline = dict(self._baseline)
        baseline.update(copy.deepcopy(persisted))
        self._set_baseline(baseline)
        self._last_saved_at = utc_now()
        self._in_flight = None

        logger.info(f"Draft saved ({request.kind})")
        self.saved.emit(request.kind, self._last_saved_at)
        self._finish(request, True)

    def _on_save_failed(self, request: _SaveRequest, error: Exception):
        self._in_flight = None

        if request.kind == SaveKind.AUTOSAVE:
            if is_rate_limited(error):
                logger.info("Autosave rate limited, next change will save again")
            else:
                logger.warning(f"Autosave failed: {error}")
        else:
            logger.error(f"{request.kind} save failed: {error}")
            self.save_failed.emit(request.kind, error)
        self._finish(request, False)

    def _finish(self, request: _SaveRequest, success: bool):
        for callback in request.callbacks:
            callback(success)

        if self._pending is not None:
            pending, self._pending = self._pending, None
            self._start(pending, announce=False)
            return

        self.saving_changed.emit(False)
        if self._window_dropped:
            self._window_dropped = False
            if not self._stopped and self.has_unsaved_changes():
                self.timer.schedule(self.debounce_ms, self._on_window_elapsed)

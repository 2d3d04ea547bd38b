# -*- coding: utf-8 -*-
"""
Tests for AutosaveScheduler: debouncing, no-op detection, single flight,
forced-save queueing and failure handling.
"""

import pytest

from models.memorial import MemorialDraft
from services.exceptions import ApiException, NetworkException
from ui.wizards.framework.autosave import AutosaveScheduler, SaveKind
from ui.wizards.memorial.memorial_context import MemorialContext


@pytest.fixture
def context(mock_store):
    draft_id = mock_store.add_draft(MemorialDraft(headline="Beloved teacher"))
    return MemorialContext(mock_store.get_draft(draft_id))


def make_scheduler(store, runner, timer, context):
    scheduler = AutosaveScheduler(store, runner, timer=timer, debounce_ms=2000)
    scheduler.attach(context)
    events = {"saved": [], "failed": [], "saving": []}
    scheduler.saved.connect(lambda kind, at: events["saved"].append(kind))
    scheduler.save_failed.connect(lambda kind, error: events["failed"].append((kind, error)))
    scheduler.saving_changed.connect(events["saving"].append)
    return scheduler, events


class TestDebounce:
    """Debounced autosave"""

    def test_unchanged_content_not_scheduled(self, store, runner, timer, context):
        """Re-entering persisted values schedules nothing."""
        scheduler, _ = make_scheduler(store, runner, timer, context)
        context.update_draft({"headline": "Beloved teacher"})
        scheduler.notify_changed()
        context.update_draft({"headline": "Beloved teacher"})
        scheduler.notify_changed()
        assert timer.schedule_count == 0
        assert not scheduler.has_unsaved_changes()

    def test_reverted_edit_not_scheduled(self, store, runner, timer, context):
        """Changing a field and changing it back leaves nothing to save."""
        scheduler, _ = make_scheduler(store, runner, timer, context)
        context.update_draft({"headline": "Something else"})
        context.update_draft({"headline": "Beloved teacher"})
        scheduler.notify_changed()
        assert not timer.is_active()

    def test_burst_saves_once_with_final_state(self, store, runner, timer, context):
        """Three edits in one window produce one save of the final values."""
        scheduler, events = make_scheduler(store, runner, timer, context)
        for name in ("Ada", "Adah", "Adelaide"):
            context.update_draft({"first_name": name})
            scheduler.notify_changed()

        assert timer.delay_ms == 2000
        assert store.calls_to("patch_draft") == []
        timer.fire()

        patches = store.calls_to("patch_draft")
        assert len(patches) == 1
        assert patches[0][2]["first_name"] == "Adelaide"
        assert events["saved"] == [SaveKind.AUTOSAVE]
        assert events["saving"] == [True, False]

    def test_payload_is_changed_fields_plus_progress(self, store, runner, timer, context):
        """Only differing content fields are sent, always with progress."""
        scheduler, _ = make_scheduler(store, runner, timer, context)
        context.mark_step_completed(0)
        context.update_draft({"obituary": "o" * 60})
        scheduler.notify_changed()
        timer.fire()

        fields = store.calls_to("patch_draft")[0][2]
        assert set(fields) == {"obituary", "current_step_index", "completed_steps", "errored_steps"}
        assert fields["completed_steps"] == [0]

    def test_saved_content_becomes_baseline(self, store, runner, timer, context):
        """After a save the same content is a no-op again."""
        scheduler, _ = make_scheduler(store, runner, timer, context)
        context.update_draft({"nickname": "Peggy"})
        scheduler.notify_changed()
        timer.fire()

        scheduler.notify_changed()
        assert not timer.is_active()
        assert scheduler.last_saved_display() == "Just saved"

    def test_stopped_scheduler_ignores_changes(self, store, runner, timer, context):
        scheduler, _ = make_scheduler(store, runner, timer, context)
        scheduler.stop()
        context.update_draft({"nickname": "Peggy"})
        scheduler.notify_changed()
        assert not timer.is_active()


class TestSingleFlight:
    """At most one write in flight"""

    def test_window_during_save_is_dropped_then_rescheduled(self, store, manual_runner, timer, context):
        """An elapsed window waits for the running save, then starts over."""
        scheduler, _ = make_scheduler(store, manual_runner, timer, context)
        context.update_draft({"nickname": "Peggy"})
        scheduler.notify_changed()
        timer.fire()
        assert manual_runner.pending == 1

        context.update_draft({"nickname": "Peg"})
        scheduler.notify_changed()
        timer.fire()
        assert manual_runner.pending == 1
        assert scheduler.is_saving

        manual_runner.run_next()
        assert not scheduler.is_saving
        assert timer.is_active()

        timer.fire()
        manual_runner.run_all()
        patches = store.calls_to("patch_draft")
        assert [p[2]["nickname"] for p in patches] == ["Peggy", "Peg"]

    def test_no_reschedule_when_nothing_left(self, store, manual_runner, timer, context):
        """A dropped window is not restarted if the save already covered everything."""
        scheduler, _ = make_scheduler(store, manual_runner, timer, context)
        context.update_draft({"nickname": "Peggy"})
        scheduler.notify_changed()
        timer.fire()
        scheduler.notify_changed()
        timer.fire()

        manual_runner.run_next()
        assert not timer.is_active()

    def test_forced_saves_queue_and_merge(self, store, manual_runner, timer, context):
        """Forced saves wait behind the running write and go out as one."""
        scheduler, events = make_scheduler(store, manual_runner, timer, context)
        context.update_draft({"nickname": "Peggy"})
        scheduler.notify_changed()
        timer.fire()

        results = []
        scheduler.save_now(SaveKind.TRANSITION, {"headline": "Beloved teacher", "current_step_index": 2},
                           results.append)
        scheduler.save_now(SaveKind.MANUAL, {"obituary": "o" * 60, "current_step_index": 3},
                           results.append)
        assert manual_runner.pending == 1

        manual_runner.run_next()
        assert manual_runner.pending == 1
        manual_runner.run_next()

        patches = store.calls_to("patch_draft")
        assert len(patches) == 2
        assert patches[1][2] == {"headline": "Beloved teacher", "obituary": "o" * 60, "current_step_index": 3}
        assert events["saved"] == [SaveKind.AUTOSAVE, SaveKind.MANUAL]
        assert results == [True, True]
        assert events["saving"] == [True, False]


class TestFailures:
    """Failed writes"""

    def test_rate_limited_autosave_keeps_baseline(self, store, runner, timer, context):
        """A 429 is silent, not retried, and the change is still unsaved."""
        scheduler, events = make_scheduler(store, runner, timer, context)
        store.fail_next("patch_draft", ApiException("Too many", status_code=429))
        context.update_draft({"nickname": "Peggy"})
        scheduler.notify_changed()
        timer.fire()

        assert events["failed"] == []
        assert events["saved"] == []
        assert scheduler.has_unsaved_changes()
        assert not timer.is_active()

        scheduler.notify_changed()
        timer.fire()
        assert store.inner.get_draft(context.draft_id).nickname == "Peggy"

    def test_autosave_failure_is_silent(self, store, runner, timer, context):
        scheduler, events = make_scheduler(store, runner, timer, context)
        store.fail_next("patch_draft", NetworkException("offline"))
        context.update_draft({"nickname": "Peggy"})
        scheduler.notify_changed()
        timer.fire()
        assert events["failed"] == []
        assert scheduler.last_saved_at is None

    def test_forced_failure_is_reported(self, store, runner, timer, context):
        """Transition and manual failures are signalled; memory is untouched."""
        scheduler, events = make_scheduler(store, runner, timer, context)
        error = NetworkException("offline")
        store.fail_next("patch_draft", error)
        context.update_draft({"nickname": "Peggy"})

        results = []
        scheduler.save_now(SaveKind.MANUAL, {"nickname": "Peggy"}, results.append)
        assert events["failed"] == [(SaveKind.MANUAL, error)]
        assert results == [False]
        assert context.draft.nickname == "Peggy"
        assert scheduler.has_unsaved_changes()

    def test_save_before_attach_fails(self, store, runner, timer):
        scheduler = AutosaveScheduler(store, runner, timer=timer)
        results = []
        scheduler.save_now(SaveKind.MANUAL, {}, results.append)
        assert results == [False]
        assert store.calls == []

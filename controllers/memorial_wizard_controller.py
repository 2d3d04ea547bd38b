# -*- coding: utf-8 -*-
"""
Memorial Wizard Controller
==========================
Root of the memorial creation wizard.

Owns the draft being authored and its step progress, gates forward
navigation behind step validation, and drives persistence:
- every edit feeds the debounced autosave
- every step transition saves the step that was left, immediately
- manual save and publish write the whole draft

Store calls run through a TaskRunner; their results arrive back on the
UI thread, so all wizard state changes happen on one thread. Store
failures are converted to signals here and never reach the views as
exceptions.
"""

from typing import Any, Dict, List, Optional, Tuple

from PyQt5.QtCore import pyqtSignal

from controllers.base_controller import BaseController, OperationResult
from models.memorial import MemorialDraft
from services.error_mapper import map_exception
from services.translation_manager import tr
from services.wizard.step_registry import StepDefinition, StepRegistry, StepState, StepValidationResult
from services.wizard.step_validator import StepValidator
from ui.wizards.framework import (
    AutosaveScheduler, MobileView, QThreadTaskRunner, SaveKind, StepNavigator, TaskRunner,
)
from ui.wizards.memorial.memorial_context import MemorialContext
from ui.wizards.memorial.preview import MemorialPreview, render_preview
from ui.wizards.memorial.prompts import ExitAction, WizardPrompts
from utils.logger import get_logger

logger = get_logger(__name__)


class WizardPhase:
    """Lifecycle of one wizard session."""
    IDLE = "idle"            # initialize() not called yet
    LOADING = "loading"      # listing or fetching drafts
    CREATING = "creating"    # waiting for a new draft id
    READY = "ready"          # draft hydrated, accepting input
    FAILED = "failed"        # load/create failed, caller sent back
    CLOSED = "closed"        # author left the wizard


class MemorialWizardController(BaseController):
    """
    Controller for the memorial creation wizard.

    Until initialization completes every input (navigation, edits, saves)
    is ignored.
    """

    initialized = pyqtSignal(str)  # draft id
    load_failed = pyqtSignal(str)  # user message
    exit_requested = pyqtSignal()
    step_changed = pyqtSignal(int, int)  # old index, new index
    step_warning = pyqtSignal(int, str)  # step index, user message
    draft_changed = pyqtSignal(dict)  # draft content
    preview_changed = pyqtSignal(object)  # MemorialPreview
    mobile_view_changed = pyqtSignal(str)
    saved = pyqtSignal(str, str)  # save kind, last saved display
    save_failed = pyqtSignal(str, str)  # save kind, user message
    publish_blocked = pyqtSignal(str)  # user message
    publish_requested = pyqtSignal(str)  # draft id

    def __init__(
        self,
        store,
        owner_id: str,
        prompts: WizardPrompts,
        runner: TaskRunner = None,
        timer=None,
        registry: StepRegistry = None,
        parent=None
    ):
        """
        Args:
            store: DraftStore to read and write drafts
            owner_id: signed-in author
            prompts: asks the resume / exit questions
            runner: executes store calls (QThreadTaskRunner by default)
            timer: debounce timer for autosave (DebounceTimer by default)
            registry: wizard steps (memorial steps by default)
        """
        super().__init__(parent)
        self.store = store
        self.owner_id = owner_id
        self.prompts = prompts
        self.runner = runner if runner is not None else QThreadTaskRunner(self)
        self.validator = StepValidator(registry)
        self.registry = self.validator.registry

        self.context: Optional[MemorialContext] = None
        self.navigator: Optional[StepNavigator] = None
        self.autosave = AutosaveScheduler(store, self.runner, timer=timer, parent=self)
        self.autosave.saved.connect(self._on_saved)
        self.autosave.save_failed.connect(self._on_save_failed)

        self._phase = WizardPhase.IDLE
        self._publish_pending = False
        self._publish_requested = False

    # ==================== State ====================

    @property
    def phase(self) -> str:
        return self._phase

    @property
    def is_initialized(self) -> bool:
        return self._phase == WizardPhase.READY

    @property
    def is_creating(self) -> bool:
        return self._phase == WizardPhase.CREATING

    @property
    def draft(self) -> Optional[MemorialDraft]:
        return self.context.draft if self.context else None

    @property
    def current_step_index(self) -> int:
        return self.context.current_step_index if self.context else 0

    @property
    def current_step(self) -> Optional[StepDefinition]:
        return self.registry.by_index(self.current_step_index) if self.context else None

    @property
    def completed_steps(self) -> frozenset:
        return self.context.completed_steps if self.context else frozenset()

    @property
    def errored_steps(self) -> frozenset:
        return self.context.errored_steps if self.context else frozenset()

    @property
    def mobile_view(self) -> str:
        return self.context.mobile_view if self.context else MobileView.FORM

    @property
    def preview(self) -> Optional[MemorialPreview]:
        """Rendered from the live draft on every access."""
        return render_preview(self.context.draft) if self.context else None

    @property
    def has_unsaved_changes(self) -> bool:
        return self.is_initialized and self.autosave.has_unsaved_changes()

    @property
    def last_saved_display(self) -> Optional[str]:
        return self.autosave.last_saved_display()

    @property
    def can_go_next(self) -> bool:
        return self.is_initialized and self.navigator.can_go_next()

    def step_states(self) -> List[Tuple[StepDefinition, StepState]]:
        """Each step with its indicator state."""
        current = self.current_step_index
        completed = self.completed_steps
        errored = self.errored_steps
        return [
            (step, self.validator.step_state(index, current, completed, errored))
            for index, step in enumerate(self.registry)
        ]

    def check_step(self, index: int) -> StepValidationResult:
        """Validation messages of a step for its editor (no side effects)."""
        if not self.context:
            return StepValidationResult(is_valid=False)
        return self.validator.check(index, self.context.draft)

    def _accepting_input(self, action: str) -> bool:
        if self._phase != WizardPhase.READY:
            logger.debug(f"Ignoring {action}: wizard is {self._phase}")
            return False
        return True

    # ==================== Initialization ====================

    def initialize(self, existing_id: Optional[str] = None):
        """
        Open a draft: the given one, a resumed one, or a new one.

        Completion is reported through initialized, or load_failed followed
        by exit_requested.
        """
        if self._phase not in (WizardPhase.IDLE, WizardPhase.FAILED):
            logger.warning(f"initialize() called while {self._phase}")
            return

        self._log_operation("initialize", existing_id=existing_id, owner_id=self.owner_id)
        self._emit_started("initialize")
        self._phase = WizardPhase.LOADING

        if existing_id:
            self._fetch_draft(existing_id)
        else:
            self.runner.submit(
                lambda: self.store.list_unfinished_drafts(self.owner_id),
                self._on_drafts_listed,
                self._on_listing_failed,
            )

    def _fetch_draft(self, draft_id: str):
        self.runner.submit(
            lambda: self.store.get_draft(draft_id),
            self._hydrate,
            lambda error: self._fail_initialization(error, "load"),
        )

    def _on_drafts_listed(self, drafts: List[MemorialDraft]):
        if drafts and self.prompts.confirm_resume(drafts):
            logger.info(f"Resuming draft {drafts[0].id}")
            self._fetch_draft(drafts[0].id)
            return
        self._create_draft()

    def _on_listing_failed(self, error: Exception):
        logger.warning(f"Could not list unfinished drafts, starting a new one: {error}")
        self._create_draft()

    def _create_draft(self):
        self._phase = WizardPhase.CREATING
        self.runner.submit(
            lambda: self.store.create_draft(self.owner_id),
            self._hydrate,
            lambda error: self._fail_initialization(error, "create"),
        )

    def _hydrate(self, draft: MemorialDraft):
        if not self.registry.contains_index(draft.current_step_index):
            logger.warning(f"Stored step {draft.current_step_index} out of range, starting at 0")
            draft.current_step_index = 0

        self.context = MemorialContext(draft)
        self.navigator = StepNavigator(self.context, self.validator, self)
        self.navigator.step_changed.connect(self.step_changed)
        self.navigator.validation_failed.connect(self._on_validation_failed)
        self.autosave.attach(self.context, last_saved_at=draft.updated_at)

        self._phase = WizardPhase.READY
        logger.info(f"Wizard ready: draft {draft.id} at step {draft.current_step_index}")
        self._emit_completed("initialize", True)
        self.initialized.emit(draft.id)
        self._emit_draft_changed()

    def _fail_initialization(self, error: Exception, context: str):
        logger.error(f"Wizard {context} failed: {error}", exc_info=error)
        message = map_exception(error, context)
        self._phase = WizardPhase.FAILED
        self._emit_error("initialize", message)
        self.load_failed.emit(message)
        self.exit_requested.emit()

    # ==================== Navigation ====================

    def go_to(self, index: int) -> bool:
        """
        Move to a step.

        Backward moves always succeed. Forward moves validate the current
        step first; a required step that fails is marked errored and the
        move is refused. A successful move saves the step that was left.
        """
        if not self._accepting_input("navigation"):
            return False

        left = self.navigator.current_index
        if not self.navigator.go_to(index):
            return False
        if index == left:
            return True

        fields = self.registry[left].project(self.context.draft)
        fields.update(self.context.progress_fields())
        self.autosave.save_now(SaveKind.TRANSITION, fields)
        self.set_mobile_view(MobileView.FORM)
        return True

    def next_step(self) -> bool:
        return self.go_to(self.current_step_index + 1)

    def previous_step(self) -> bool:
        return self.go_to(self.current_step_index - 1)

    def click_step(self, index: int) -> bool:
        """Step indicator click: only earlier or completed steps can be opened."""
        if not self._accepting_input("step click"):
            return False
        if not self.navigator.can_visit(index):
            logger.debug(f"Step {index} cannot be opened from the indicator yet")
            return False
        return self.go_to(index)

    def _on_validation_failed(self, index: int, result: StepValidationResult):
        step = self.registry[index]
        lines = [tr("wizard.validation.failed", step=step.title)]
        lines.extend(result.errors)
        self.step_warning.emit(index, "\n".join(lines))

    def set_mobile_view(self, view: str):
        if view not in MobileView.ALL:
            raise ValueError(f"Unknown view: {view}")
        if self.context is None or self.context.mobile_view == view:
            return
        self.context.mobile_view = view
        self.mobile_view_changed.emit(view)

    # ==================== Editing ====================

    def update_draft(self, partial: Dict[str, Any]) -> bool:
        """
        Merge edited fields into the draft.

        Returns:
            True if any field changed

        Raises:
            ValidationException: unknown or non-editable field
        """
        if not self._accepting_input("edit"):
            return False
        if self._publish_pending or self._publish_requested:
            logger.warning("Ignoring edit: publication in progress")
            return False

        changed = self.context.update_draft(partial)
        if changed:
            self._emit_draft_changed()
        self.autosave.notify_changed()
        return bool(changed)

    def _emit_draft_changed(self):
        self.draft_changed.emit(self.context.content_dict())
        self.preview_changed.emit(self.preview)

    # ==================== Saving ====================

    def manual_save(self, on_complete=None):
        """Write the whole draft now, whether or not it changed."""
        if not self._accepting_input("save"):
            if on_complete:
                on_complete(False)
            return
        fields = self.context.content_dict()
        fields.update(self.context.progress_fields())
        self.autosave.save_now(SaveKind.MANUAL, fields, on_complete)

    def _on_saved(self, kind: str, saved_at):
        self.saved.emit(kind, self.autosave.last_saved_display() or "")

    def _on_save_failed(self, kind: str, error: Exception):
        message = f"{tr('wizard.save.failed')}\n{map_exception(error, 'save')}"
        self.save_failed.emit(kind, message)

    # ==================== Leaving ====================

    def exit(self):
        """
        Leave the wizard.

        With unsaved changes the author chooses to save first (leaving only
        once the save succeeds), discard, or stay.
        """
        if self._phase in (WizardPhase.LOADING, WizardPhase.CREATING):
            logger.debug(f"Ignoring exit: wizard is {self._phase}")
            return
        if self._phase != WizardPhase.READY:
            self._leave()
            return

        if not self.autosave.has_unsaved_changes():
            self._leave()
            return

        action = self.prompts.choose_exit_action()
        logger.info(f"Exit with unsaved changes: {action.value}")
        if action == ExitAction.SAVE:
            self.manual_save(on_complete=self._on_exit_save_done)
        elif action == ExitAction.DISCARD:
            self._leave()

    def _on_exit_save_done(self, success: bool):
        if success:
            self._leave()
        else:
            logger.warning("Staying in the wizard: save before exit failed")

    def _leave(self):
        self.autosave.stop()
        if self._phase == WizardPhase.READY:
            self._phase = WizardPhase.CLOSED
        self.exit_requested.emit()

    # ==================== Publishing ====================

    def publish(self) -> OperationResult:
        """
        Save the draft and ask the store to publish it.

        Blocked with publish_blocked while any required step is incomplete;
        validity is recomputed from the current draft every time.
        """
        if not self._accepting_input("publish"):
            return OperationResult.fail(tr("error.draft.publish_failed"))
        if self._publish_pending or self._publish_requested:
            return OperationResult.fail(tr("wizard.publish.requested"))

        incomplete = self.validator.incomplete_required_steps(self.context.draft)
        if incomplete:
            titles = [step.title for step in incomplete]
            message = tr("wizard.publish.blocked", steps="\n".join(f"• {t}" for t in titles))
            logger.info(f"Publish blocked: {[s.id.value for s in incomplete]}")
            self.publish_blocked.emit(message)
            return OperationResult.fail(message, errors=titles)

        self._publish_pending = True
        self._emit_started("publish")
        self.manual_save(on_complete=self._on_publish_save_done)
        return OperationResult.ok(data=self.context.draft_id)

    def _on_publish_save_done(self, success: bool):
        if not success:
            self._publish_pending = False
            self._emit_error("publish", tr("error.draft.publish_failed"))
            return
        draft_id = self.context.draft_id
        self.runner.submit(
            lambda: self.store.request_publish(draft_id),
            self._on_publish_accepted,
            self._on_publish_failed,
        )

    def _on_publish_accepted(self, ack: Dict[str, Any]):
        self._publish_pending = False
        self._publish_requested = True
        self.autosave.stop()
        logger.info(f"Publication requested for draft {self.context.draft_id}")
        self._emit_completed("publish", True)
        self.publish_requested.emit(self.context.draft_id)

    def _on_publish_failed(self, error: Exception):
        self._publish_pending = False
        self._emit_error("publish", map_exception(error, "publish"))

    def shutdown(self):
        """Stop autosave and wait for running store calls."""
        self.autosave.stop()
        self.runner.shutdown()

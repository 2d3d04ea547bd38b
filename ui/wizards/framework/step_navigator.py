# -*- coding: utf-8 -*-
"""
Step Navigator - Manages navigation between wizard steps.

Handles:
- Step progression (next/previous/jump)
- Validation of the current step before moving forward
- Completed/errored bookkeeping on the wizard context
"""

from typing import Optional

from PyQt5.QtCore import QObject, pyqtSignal

from services.wizard.step_registry import StepDefinition, StepValidationResult
from services.wizard.step_validator import StepValidator
from .wizard_context import WizardContext
from utils.logger import get_logger

logger = get_logger(__name__)


class StepNavigator(QObject):
    """
    Manages navigation between wizard steps.

    Going back (or staying) is always allowed. Going forward first
    validates the step being left: a pass marks it completed, a failure of
    a required step marks it errored and refuses the move.
    """

    # Signals
    step_changed = pyqtSignal(int, int)  # old_index, new_index
    validation_failed = pyqtSignal(int, object)  # step index, StepValidationResult

    def __init__(self, context: WizardContext, validator: StepValidator, parent=None):
        """
        Initialize the navigator.

        Args:
            context: Wizard context holding the record and its progress
            validator: Validation engine bound to the step registry
        """
        super().__init__(parent)
        self.context = context
        self.validator = validator
        self.registry = validator.registry

    @property
    def current_index(self) -> int:
        return self.context.current_step_index

    def get_current_step(self) -> Optional[StepDefinition]:
        """Get the current step."""
        return self.registry.by_index(self.current_index)

    def get_step_count(self) -> int:
        """Get total number of steps."""
        return len(self.registry)

    def can_go_next(self) -> bool:
        return self.current_index < self.registry.last_index

    def can_go_previous(self) -> bool:
        return self.current_index > 0

    def can_visit(self, index: int) -> bool:
        """Step indicator clicks may open earlier steps or completed ones."""
        if not self.registry.contains_index(index):
            return False
        return index <= self.current_index or self.context.is_step_completed(index)

    def next_step(self) -> bool:
        """Navigate to the next step."""
        if not self.can_go_next():
            logger.debug(f"Cannot go next: already at last step ({self.current_index})")
            return False
        return self.go_to(self.current_index + 1)

    def previous_step(self) -> bool:
        """Navigate to the previous step."""
        if not self.can_go_previous():
            logger.debug(f"Cannot go previous: already at first step ({self.current_index})")
            return False
        return self.go_to(self.current_index - 1)

    def go_to(self, index: int) -> bool:
        """
        Navigate to a specific step.

        Args:
            index: Target step index

        Returns:
            True if the target is now the current step
        """
        if not self.registry.contains_index(index):
            logger.debug(f"Ignoring navigation to invalid step index: {index}")
            return False

        current = self.current_index
        if index == current:
            return True

        if index > current:
            result = self.validator.check(current, self.context.record)
            if result.is_valid:
                self.context.mark_step_completed(current)
            elif self.registry.is_required(current):
                logger.warning(f"Step {current} validation failed: {result.errors}")
                self.context.mark_step_errored(current)
                self.validation_failed.emit(current, result)
                return False

        self._navigate_to(index)
        return True

    def _navigate_to(self, new_index: int):
        old_index = self.current_index
        logger.info(f"Navigating: Step {old_index} → {new_index}")
        self.context.current_step_index = new_index
        self.step_changed.emit(old_index, new_index)

    def check_current_step(self) -> StepValidationResult:
        """Validation result of the current step, without side effects."""
        return self.validator.check(self.current_index, self.context.record)

# -*- coding: utf-8 -*-
"""
Wizard Context - Base class for managing wizard state.

Provides unified interface for:
- Step progress (current step, completed and errored steps)
- Editor/preview view state

Progress is stored on the record being authored so that record
stays the single source of truth.
"""

from typing import Dict, Any, FrozenSet
from abc import ABC, abstractmethod


class MobileView:
    """Which of the two views is shown on narrow screens."""
    FORM = "form"
    PREVIEW = "preview"

    ALL = (FORM, PREVIEW)


class WizardContext(ABC):
    """
    Base class for wizard context.

    Subclasses provide the record that carries progress.

    The completed and errored sets are kept disjoint: marking a step as one
    removes it from the other.
    """

    def __init__(self):
        """Initialize base context properties."""
        self.mobile_view: str = MobileView.FORM

    @property
    @abstractmethod
    def record(self):
        """The record being authored; carries current_step_index, completed_steps and errored_steps."""
        pass

    @property
    def current_step_index(self) -> int:
        return self.record.current_step_index

    @current_step_index.setter
    def current_step_index(self, index: int):
        self.record.current_step_index = index

    @property
    def completed_steps(self) -> FrozenSet[int]:
        return frozenset(self.record.completed_steps)

    @property
    def errored_steps(self) -> FrozenSet[int]:
        return frozenset(self.record.errored_steps)

    def mark_step_completed(self, step_index: int):
        """Mark a step as completed (clears an earlier error)."""
        record = self.record
        record.completed_steps.add(step_index)
        record.errored_steps.discard(step_index)

    def mark_step_errored(self, step_index: int):
        """Mark a step as errored (it is no longer complete)."""
        record = self.record
        record.errored_steps.add(step_index)
        record.completed_steps.discard(step_index)

    def is_step_completed(self, step_index: int) -> bool:
        """Check if a step is completed."""
        return step_index in self.record.completed_steps

    def progress_fields(self) -> Dict[str, Any]:
        """Progress metadata in the shape the draft store accepts."""
        return {
            "current_step_index": self.current_step_index,
            "completed_steps": sorted(self.completed_steps),
            "errored_steps": sorted(self.errored_steps),
        }

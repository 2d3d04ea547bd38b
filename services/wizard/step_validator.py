# -*- coding: utf-8 -*-
"""
Step validation service for the memorial wizard.

Validates draft data for each step without UI coupling.
"""

from typing import AbstractSet, List

from models.memorial import MemorialDraft
from utils.logger import get_logger

from .memorial_steps import MEMORIAL_STEPS, StepId
from .step_registry import StepDefinition, StepRegistry, StepState, StepValidationResult

logger = get_logger(__name__)


class StepValidator:
    """Runs step checkers against the current draft."""

    def __init__(self, registry: StepRegistry = None):
        self.registry = registry or MEMORIAL_STEPS

    def validate(self, step_index: int, draft: MemorialDraft) -> bool:
        """
        Validate one step.

        Args:
            step_index: registry index of the step
            draft: current draft

        Returns:
            True if the step's required content is present. An index outside
            the registry is never valid.
        """
        step = self.registry.by_index(step_index)
        if step is None:
            return False
        return step.validate(draft)

    def check(self, step_index: int, draft: MemorialDraft) -> StepValidationResult:
        """Like validate() but with error and warning messages."""
        step = self.registry.by_index(step_index)
        if step is None:
            return StepValidationResult(is_valid=False)
        return step.check(draft)

    def incomplete_required_steps(self, draft: MemorialDraft) -> List[StepDefinition]:
        """
        Required steps (other than the terminal review step) that fail right now.

        Recomputed on every call; membership in the completed set is never
        trusted because earlier steps can be edited out of order.
        """
        incomplete = [
            step for step in self.registry.required_steps()
            if step.id != StepId.REVIEW and not step.validate(draft)
        ]
        if incomplete:
            logger.debug(f"Incomplete required steps: {[s.id.value for s in incomplete]}")
        return incomplete

    def is_review_complete(self, draft: MemorialDraft) -> bool:
        return self.validate(self.registry.index_of(StepId.REVIEW), draft)

    @staticmethod
    def step_state(step_index: int, current_index: int,
                   completed: AbstractSet[int], errored: AbstractSet[int]) -> StepState:
        """Display state of a step for the step indicator."""
        if step_index == current_index:
            return StepState.CURRENT
        if step_index in errored:
            return StepState.ERRORED
        if step_index in completed:
            return StepState.COMPLETE
        return StepState.UPCOMING

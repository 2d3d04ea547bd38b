# -*- coding: utf-8 -*-
"""
Wizard services - step definitions and validation without UI coupling.
"""

from .step_registry import StepDefinition, StepRegistry, StepState, StepValidationResult
from .memorial_steps import MEMORIAL_STEPS, StepId
from .step_validator import StepValidator

__all__ = [
    "StepDefinition",
    "StepRegistry",
    "StepState",
    "StepValidationResult",
    "MEMORIAL_STEPS",
    "StepId",
    "StepValidator",
]

# -*- coding: utf-8 -*-
"""
Wizard Framework - multi-step wizard state for Memorial Studio.

Provides the building blocks wizards are assembled from: context,
navigation, debounced persistence and background execution.
"""

from .wizard_context import WizardContext, MobileView
from .step_navigator import StepNavigator
from .autosave import AutosaveScheduler, DebounceTimer, SaveKind
from .task_runner import TaskRunner, QThreadTaskRunner

__all__ = [
    'WizardContext',
    'MobileView',
    'StepNavigator',
    'AutosaveScheduler',
    'DebounceTimer',
    'SaveKind',
    'TaskRunner',
    'QThreadTaskRunner',
]

# -*- coding: utf-8 -*-
"""
Memorial Studio Controllers
===========================
Controller layer between the views and the services.

Usage:
    from controllers import MemorialWizardController

    controller = MemorialWizardController(store, owner_id, prompts)
    controller.initialized.connect(on_ready)
    controller.initialize()
"""

from .base_controller import BaseController, OperationResult
from .memorial_wizard_controller import MemorialWizardController, WizardPhase

__all__ = [
    "BaseController",
    "OperationResult",
    "MemorialWizardController",
    "WizardPhase",
]

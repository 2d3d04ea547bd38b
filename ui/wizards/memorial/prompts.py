# -*- coding: utf-8 -*-
"""
Prompts - the decisions the wizard asks the author to make.

The controller only depends on WizardPrompts; DialogPrompts is the
desktop implementation.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import List

from PyQt5.QtWidgets import QMessageBox, QWidget

from models.memorial import MemorialDraft
from services.translation_manager import tr
from ui.error_handler import ErrorHandler
from utils.datetime_utils import format_last_saved


class ExitAction(Enum):
    SAVE = "save"
    DISCARD = "discard"
    CANCEL = "cancel"


class WizardPrompts(ABC):
    """Questions asked synchronously during the wizard flow."""

    @abstractmethod
    def confirm_resume(self, drafts: List[MemorialDraft]) -> bool:
        """True to resume drafts[0] (the most recent), False to start a new memorial."""
        pass

    @abstractmethod
    def choose_exit_action(self) -> ExitAction:
        """What to do with unsaved changes when leaving."""
        pass

    @abstractmethod
    def notify(self, level: str, message: str):
        """Show a non-blocking notice ("info", "warning" or "error")."""
        pass


class DialogPrompts(WizardPrompts):
    """Prompts shown as message boxes."""

    def __init__(self, parent: QWidget = None):
        self.parent = parent

    def confirm_resume(self, drafts: List[MemorialDraft]) -> bool:
        latest = drafts[0]
        saved = format_last_saved(latest.updated_at) or tr("wizard.resume.never_saved")
        message = tr(
            "wizard.resume.message",
            name=latest.display_name,
            saved=saved,
        )
        return ErrorHandler.confirm(self.parent, message, tr("wizard.resume.title"))

    def choose_exit_action(self) -> ExitAction:
        reply = ErrorHandler.ask(self.parent, tr("wizard.exit.message"), tr("wizard.exit.title"))
        if reply == QMessageBox.Save:
            return ExitAction.SAVE
        if reply == QMessageBox.Discard:
            return ExitAction.DISCARD
        return ExitAction.CANCEL

    def notify(self, level: str, message: str):
        if level == "error":
            ErrorHandler.show_error(self.parent, message)
        elif level == "warning":
            ErrorHandler.show_warning(self.parent, message)
        else:
            ErrorHandler.show_success(self.parent, message)

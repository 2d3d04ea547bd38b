# -*- coding: utf-8 -*-
"""Centralized error handler for UI layer."""

from PyQt5.QtWidgets import QMessageBox, QWidget

from services.error_mapper import map_exception
from services.translation_manager import tr
from utils.logger import get_logger

logger = get_logger(__name__)


class ErrorHandler:
    """Maps exceptions to user-friendly dialogs."""

    @staticmethod
    def handle(error: Exception, parent: QWidget = None,
               context: str = None, show_dialog: bool = True) -> str:
        """
        Handle any exception: log it, map it, optionally show dialog.

        Args:
            error: The exception to handle
            parent: Parent widget for dialog
            context: Context for error mapping (e.g., "load", "save")
            show_dialog: Whether to show dialog to user

        Returns:
            User-friendly error message string
        """
        logger.error(f"Error in {context or 'unknown'}: {error}", exc_info=error)

        message = map_exception(error, context)

        if show_dialog:
            ErrorHandler.show_error(parent, message)

        return message

    @staticmethod
    def show_error(parent: QWidget, message: str, title: str = None):
        QMessageBox.critical(parent, title or tr("dialog.error"), message)

    @staticmethod
    def show_warning(parent: QWidget, message: str, title: str = None):
        QMessageBox.warning(parent, title or tr("dialog.warning"), message)

    @staticmethod
    def show_success(parent: QWidget, message: str, title: str = None):
        QMessageBox.information(parent, title or tr("dialog.success"), message)

    @staticmethod
    def confirm(parent: QWidget, message: str, title: str = None) -> bool:
        """Show confirmation dialog, return True if confirmed."""
        reply = QMessageBox.question(
            parent, title or tr("dialog.confirm"), message,
            QMessageBox.Yes | QMessageBox.No, QMessageBox.Yes
        )
        return reply == QMessageBox.Yes

    @staticmethod
    def ask(parent: QWidget, message: str, title: str = None) -> int:
        """Save / Discard / Cancel question. Returns the QMessageBox button pressed."""
        return QMessageBox.question(
            parent, title or tr("dialog.confirm"), message,
            QMessageBox.Save | QMessageBox.Discard | QMessageBox.Cancel, QMessageBox.Save
        )

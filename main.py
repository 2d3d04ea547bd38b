#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Memorial Studio - memorial creation wizard launcher.

Opens (or resumes) a memorial draft and logs its preview:

    python main.py [draft-id]
"""

import sys

from PyQt5.QtWidgets import QApplication

from app.config import Config
from controllers import MemorialWizardController
from services.draft_store import create_draft_store
from ui.wizards.memorial import DialogPrompts, render_text
from utils.logger import setup_logger


def main():
    """Main application entry point."""

    # Initialize logging
    logger = setup_logger()

    try:
        app = QApplication(sys.argv)
        app.setApplicationName(Config.APP_NAME)

        logger.info("=" * 80)
        logger.info(f"Starting {Config.APP_NAME} {Config.VERSION} ({Config.DATA_MODE} mode)")
        logger.info("=" * 80)

        store = create_draft_store()
        prompts = DialogPrompts()
        controller = MemorialWizardController(store, Config.MOCK_OWNER_ID, prompts)

        def on_initialized(draft_id):
            logger.info(f">> Draft {draft_id} opened")
            logger.info("\n" + render_text(controller.preview))
            controller.exit()

        controller.initialized.connect(on_initialized)
        controller.load_failed.connect(lambda message: prompts.notify("error", message))
        controller.save_failed.connect(lambda kind, message: prompts.notify("error", message))
        controller.step_warning.connect(lambda index, message: prompts.notify("warning", message))
        controller.publish_blocked.connect(lambda message: prompts.notify("warning", message))
        controller.exit_requested.connect(app.quit)

        existing_id = sys.argv[1] if len(sys.argv) > 1 else None
        controller.initialize(existing_id)

        exit_code = app.exec_()
        controller.shutdown()
        logger.info(f"Application closed with exit code: {exit_code}")
        sys.exit(exit_code)

    except Exception as e:
        logger.exception(f"Fatal error during application startup: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()

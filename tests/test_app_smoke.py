# -*- coding: utf-8 -*-
"""
Smoke tests to ensure application doesn't break after changes.
These tests verify basic functionality works.
"""
import sys
import pytest
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


def test_imports():
    """Test that all main modules can be imported."""
    try:
        from app.config import Config
        from models.memorial import MemorialDraft
        from services.draft_store import create_draft_store
        from services.api_client import MemorialApiClient
        from services.mock_draft_store import MockDraftStore
        from controllers import MemorialWizardController
        assert True
    except ImportError as e:
        pytest.fail(f"Import failed: {e}")


def test_config_defaults():
    """Test that configuration has sane defaults."""
    from app.config import Config

    assert Config.AUTOSAVE_DEBOUNCE_MS > 0
    assert Config.DATA_MODE in ("api", "mock")
    assert Config.LOG_PATH.name == Config.LOG_FILE


def test_services_lazy_exports():
    """Test that the services package exposes the draft stores."""
    import services

    assert services.MockDraftStore is not None
    assert services.create_draft_store is not None
    with pytest.raises(AttributeError):
        services.NotAService


def test_wizard_components_import():
    """Test that wizard components can be imported."""
    try:
        from ui.wizards.framework import AutosaveScheduler, StepNavigator, QThreadTaskRunner
        from ui.wizards.memorial import MemorialContext, DialogPrompts, render_preview
        assert True
    except ImportError as e:
        pytest.fail(f"Wizard component import failed: {e}")


def test_translations_cover_steps():
    """Test that every step title has a translation."""
    from services.wizard import MEMORIAL_STEPS

    for step in MEMORIAL_STEPS:
        assert step.title != step.title_key
        assert step.description != step.description_key


def test_logger_setup(tmp_path, monkeypatch):
    """Test that the logger writes to the configured file."""
    import logging
    from app.config import Config
    from utils.logger import setup_logger, get_logger

    monkeypatch.setattr(Config, "LOG_PATH", tmp_path / "memorial.log")
    monkeypatch.setattr(Config, "LOGS_DIR", tmp_path)
    logger = setup_logger(console_level=logging.WARNING)
    try:
        get_logger("smoke").info("hello")
        for handler in logger.handlers:
            handler.flush()
        assert "hello" in (tmp_path / "memorial.log").read_text(encoding="utf-8")
    finally:
        for handler in logger.handlers:
            handler.close()
        setup_logger(log_to_file=False)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

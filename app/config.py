# -*- coding: utf-8 -*-
"""
Application configuration.

Values are read from the environment (or a local .env file) once at import.
"""

from pathlib import Path
from dataclasses import dataclass
import os

from dotenv import load_dotenv

# ============================================================================
# Load .env file for local environment configuration
# ============================================================================
load_dotenv()

# ============================================================================
# Read settings from environment variables (from .env or system)
# ============================================================================
# API Settings
_API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:3000/api")
_API_TIMEOUT = int(os.getenv("API_TIMEOUT", "30"))
_API_VERIFY_SSL = os.getenv("API_VERIFY_SSL", "true").lower() in ("true", "1", "yes")
_API_ACCESS_TOKEN = os.getenv("API_ACCESS_TOKEN", None)

# Data Mode: "api" (HTTP backend) or "mock" (in-memory store)
_DATA_MODE = os.getenv("DATA_MODE", "api")

# Autosave
_AUTOSAVE_DEBOUNCE_MS = int(os.getenv("AUTOSAVE_DEBOUNCE_MS", "2000"))

# Mock store
_MOCK_OWNER_ID = os.getenv("MOCK_OWNER_ID", "local-user")
_MOCK_SIMULATE_DELAY = os.getenv("MOCK_SIMULATE_DELAY", "false").lower() in ("true", "1", "yes")


@dataclass
class Config:
    """Application configuration."""

    # Application Info
    APP_NAME: str = "Memorial Studio"
    VERSION: str = "1.0.0"

    # Data Mode
    DATA_MODE: str = _DATA_MODE

    # HTTP API Backend Settings
    API_BASE_URL: str = _API_BASE_URL
    API_TIMEOUT: int = _API_TIMEOUT
    API_VERIFY_SSL: bool = _API_VERIFY_SSL
    API_ACCESS_TOKEN: str = _API_ACCESS_TOKEN

    # Wizard
    AUTOSAVE_DEBOUNCE_MS: int = _AUTOSAVE_DEBOUNCE_MS
    MAX_RESUMABLE_DRAFTS: int = 5

    # Mock store
    MOCK_OWNER_ID: str = _MOCK_OWNER_ID
    MOCK_SIMULATE_DELAY: bool = _MOCK_SIMULATE_DELAY
    MOCK_DELAY_MS: int = 300
    RATE_LIMIT_WINDOW_MS: int = 1000  # Server rejects patches closer than this

    # Paths
    PROJECT_ROOT: Path = Path(__file__).parent.parent
    LOGS_DIR: Path = PROJECT_ROOT / "logs"

    # Logging
    LOG_FILE: str = "app.log"
    LOG_PATH: Path = LOGS_DIR / LOG_FILE
    LOG_MAX_BYTES: int = 5 * 1024 * 1024  # 5MB
    LOG_BACKUP_COUNT: int = 3

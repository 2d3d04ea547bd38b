# -*- coding: utf-8 -*-
"""
Draft Store Abstraction Layer.

The memorial wizard reads and writes drafts only through this interface:
- MockDraftStore: in-memory drafts for development and tests
- MemorialApiClient: the hosted REST backend

Implementations are called from worker threads (see TaskRunner) and must
not touch Qt widgets. Failures are raised as exceptions from
services.exceptions; DraftNotFoundException for a missing draft.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, List, Optional

from models.memorial import MemorialDraft
from utils.logger import get_logger

logger = get_logger(__name__)


class DraftStoreType(Enum):
    """Supported draft store types."""
    MOCK = "mock"      # In-memory drafts
    HTTP_API = "api"   # REST API backend


class DraftStore(ABC):
    """
    Abstract base class for memorial draft storage.

    Patches carry content fields by MemorialDraft field name plus the
    progress fields current_step_index / completed_steps / errored_steps
    (0-based). Applying the same patch twice must leave the same state.
    """

    @property
    @abstractmethod
    def store_type(self) -> DraftStoreType:
        """Return the type of this store."""
        pass

    @abstractmethod
    def list_unfinished_drafts(self, owner_id: str) -> List[MemorialDraft]:
        """Unpublished drafts of the owner, most recently updated first."""
        pass

    @abstractmethod
    def create_draft(self, owner_id: Optional[str] = None) -> MemorialDraft:
        """Create an empty draft. The store assigns the id; status is draft."""
        pass

    @abstractmethod
    def get_draft(self, draft_id: str) -> MemorialDraft:
        """Fetch a draft. Raises DraftNotFoundException if absent or not owned by the caller."""
        pass

    @abstractmethod
    def patch_draft(self, draft_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        """Apply a partial update and return the store's acknowledgement."""
        pass

    @abstractmethod
    def request_publish(self, draft_id: str) -> Dict[str, Any]:
        """Ask the backend to publish a complete draft."""
        pass

    @abstractmethod
    def get_save_status(self, draft_id: str) -> Dict[str, Any]:
        """Last save time and status of a draft."""
        pass


def create_draft_store(data_mode: Optional[str] = None, owner_id: Optional[str] = None) -> DraftStore:
    """
    Create the draft store selected by configuration.

    Args:
        data_mode: "api" or "mock"; defaults to Config.DATA_MODE
        owner_id: caller identity for the mock store
    """
    from app.config import Config

    store_type = DraftStoreType(data_mode or Config.DATA_MODE)
    logger.info(f"Creating draft store: {store_type.value}")

    if store_type == DraftStoreType.MOCK:
        from .mock_draft_store import MockDraftStore
        return MockDraftStore(
            owner_id=owner_id or Config.MOCK_OWNER_ID,
            simulate_delay=Config.MOCK_SIMULATE_DELAY,
            delay_ms=Config.MOCK_DELAY_MS,
            rate_limit_ms=Config.RATE_LIMIT_WINDOW_MS,
        )

    from .api_client import get_api_client
    return get_api_client()

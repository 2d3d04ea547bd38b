# -*- coding: utf-8 -*-
"""
Mock Draft Store for Development.

Keeps memorial drafts in memory and mimics the hosted backend: ownership
checks, most-recent-first listing, refusal to edit published memorials and
the autosave rate limit. Drafts are copied in and out so callers never
share state with the store.
"""

import threading
import time
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from app.config import Config
from models.memorial import MemorialDraft, MemorialStatus, CONTENT_FIELDS, PROGRESS_FIELDS
from services.draft_store import DraftStore, DraftStoreType
from services.exceptions import ApiException, DraftNotFoundException, RATE_LIMIT_STATUS
from utils.datetime_utils import format_last_saved
from utils.logger import get_logger

logger = get_logger(__name__)


class MockDraftStore(DraftStore):
    """
    In-memory draft store.

    Features:
    - Per-owner drafts, other owners' drafts read as not found
    - Simulated network delay
    - Optional rate limit on patches (HTTP 429 like the autosave endpoint)
    """

    def __init__(
        self,
        owner_id: str = None,
        simulate_delay: bool = False,
        delay_ms: int = 200,
        rate_limit_ms: int = 0,
        max_unfinished: int = None
    ):
        """
        Initialize mock draft store.

        Args:
            owner_id: identity of the caller (the signed-in author)
            simulate_delay: Whether to simulate network latency
            delay_ms: Simulated delay in milliseconds
            rate_limit_ms: reject patches arriving closer than this; 0 disables
            max_unfinished: cap on list_unfinished_drafts results
        """
        self.owner_id = owner_id or Config.MOCK_OWNER_ID
        self.simulate_delay = simulate_delay
        self.delay_ms = delay_ms
        self.rate_limit_ms = rate_limit_ms
        self.max_unfinished = max_unfinished or Config.MAX_RESUMABLE_DRAFTS

        self._lock = threading.Lock()
        self._drafts: Dict[str, MemorialDraft] = {}
        self._touched: Dict[str, int] = {}
        self._sequence = 0
        self._last_patch_at: Dict[str, float] = {}
        self.patch_log: List[Dict[str, Any]] = []

    @property
    def store_type(self) -> DraftStoreType:
        return DraftStoreType.MOCK

    def _simulate_delay(self):
        """Simulate network delay if enabled."""
        if self.simulate_delay and self.delay_ms > 0:
            time.sleep(self.delay_ms / 1000.0)

    def _touch(self, draft: MemorialDraft):
        self._sequence += 1
        self._touched[draft.id] = self._sequence
        draft.updated_at = datetime.now()

    def _owned(self, draft_id: str) -> MemorialDraft:
        draft = self._drafts.get(draft_id)
        if draft is None or draft.owner_id != self.owner_id:
            raise DraftNotFoundException(draft_id)
        return draft

    def add_draft(self, draft: MemorialDraft) -> str:
        """Store a copy of an existing draft (seeding); assigns an id if missing."""
        with self._lock:
            stored = draft.clone()
            stored.id = stored.id or str(uuid.uuid4())
            stored.owner_id = stored.owner_id or self.owner_id
            stored.created_at = stored.created_at or datetime.now()
            self._drafts[stored.id] = stored
            self._touch(stored)
            return stored.id

    # ==================== Draft Store ====================

    def list_unfinished_drafts(self, owner_id: str) -> List[MemorialDraft]:
        self._simulate_delay()
        with self._lock:
            drafts = [
                d for d in self._drafts.values()
                if d.owner_id == owner_id and d.status == MemorialStatus.DRAFT
            ]
            drafts.sort(key=lambda d: self._touched[d.id], reverse=True)
            result = [d.clone() for d in drafts[:self.max_unfinished]]
        logger.debug(f"Listed {len(result)} unfinished drafts for {owner_id}")
        return result

    def create_draft(self, owner_id: Optional[str] = None) -> MemorialDraft:
        self._simulate_delay()
        with self._lock:
            now = datetime.now()
            draft = MemorialDraft(
                id=str(uuid.uuid4()),
                owner_id=owner_id or self.owner_id,
                status=MemorialStatus.DRAFT,
                created_at=now,
            )
            self._drafts[draft.id] = draft
            self._touch(draft)
            logger.info(f"Created draft {draft.id}")
            return draft.clone()

    def get_draft(self, draft_id: str) -> MemorialDraft:
        self._simulate_delay()
        with self._lock:
            return self._owned(draft_id).clone()

    def patch_draft(self, draft_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        self._simulate_delay()
        with self._lock:
            draft = self._owned(draft_id)
            if draft.is_published:
                raise ApiException(
                    "Cannot autosave published memorial",
                    status_code=400,
                    response_data={"error": "Cannot autosave published memorial"}
                )

            now = time.monotonic()
            last = self._last_patch_at.get(draft_id)
            if self.rate_limit_ms and last is not None and (now - last) * 1000 < self.rate_limit_ms:
                raise ApiException(
                    "Too many save requests",
                    status_code=RATE_LIMIT_STATUS,
                    response_data={"error": "Please wait before saving again"}
                )
            self._last_patch_at[draft_id] = now

            content = {k: v for k, v in fields.items() if k in CONTENT_FIELDS}
            progress = {k: v for k, v in fields.items() if k in PROGRESS_FIELDS}
            unknown = set(fields) - set(content) - set(progress)
            if unknown:
                raise ApiException(
                    f"Unknown fields: {sorted(unknown)}",
                    status_code=400,
                    response_data={"errors": {name: "unknown field" for name in unknown}}
                )

            draft.merge(content)
            draft.apply_progress(progress)
            self._touch(draft)
            self.patch_log.append({"draft_id": draft_id, "fields": dict(fields)})
            logger.debug(f"Patched draft {draft_id}: {sorted(fields)}")
            return {
                "success": True,
                "saved_at": draft.updated_at.isoformat(),
            }

    def request_publish(self, draft_id: str) -> Dict[str, Any]:
        self._simulate_delay()
        with self._lock:
            draft = self._owned(draft_id)
            draft.status = MemorialStatus.PUBLISHED
            self._touch(draft)
            logger.info(f"Draft {draft_id} published")
            return {"success": True, "memorial_id": draft_id, "status": draft.status}

    def get_save_status(self, draft_id: str) -> Dict[str, Any]:
        self._simulate_delay()
        with self._lock:
            draft = self._owned(draft_id)
            return {
                "last_saved_at": draft.updated_at.isoformat() if draft.updated_at else None,
                "last_saved_display": format_last_saved(draft.updated_at, datetime.now()),
                "status": draft.status,
            }

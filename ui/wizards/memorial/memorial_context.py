# -*- coding: utf-8 -*-
"""
Memorial Context - state of one memorial creation session.

Wraps the one canonical MemorialDraft. Step editors write into it through
update_draft(); the preview and the autosave scheduler only read it.
"""

from typing import Any, Dict, Set

from ui.wizards.framework import WizardContext
from models.memorial import MemorialDraft
from utils.logger import get_logger

logger = get_logger(__name__)


class MemorialContext(WizardContext):
    """Context for the memorial creation wizard."""

    def __init__(self, draft: MemorialDraft = None):
        super().__init__()
        self.draft: MemorialDraft = draft if draft is not None else MemorialDraft()

    @property
    def record(self) -> MemorialDraft:
        return self.draft

    @property
    def draft_id(self) -> str:
        return self.draft.id

    def update_draft(self, partial: Dict[str, Any]) -> Set[str]:
        """Merge partial content into the draft; returns the changed field names."""
        changed = self.draft.merge(partial)
        if changed:
            logger.debug(f"Draft fields changed: {sorted(changed)}")
        return changed

    def content_dict(self) -> Dict[str, Any]:
        return self.draft.content_dict()

# -*- coding: utf-8 -*-
"""
Memorial Studio Service Layer
"""

# Lazy imports to avoid circular dependencies
__all__ = [
    "DraftStore",
    "MockDraftStore",
    "MemorialApiClient",
    "create_draft_store",
]


def __getattr__(name):
    """Lazy import to avoid circular dependencies."""
    if name == "DraftStore":
        from .draft_store import DraftStore
        return DraftStore
    elif name == "MockDraftStore":
        from .mock_draft_store import MockDraftStore
        return MockDraftStore
    elif name == "MemorialApiClient":
        from .api_client import MemorialApiClient
        return MemorialApiClient
    elif name == "create_draft_store":
        from .draft_store import create_draft_store
        return create_draft_store
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

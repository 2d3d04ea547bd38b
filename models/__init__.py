# -*- coding: utf-8 -*-
"""
Memorial Studio Data Models
"""

from .memorial import (
    MemorialDraft,
    MemorialStatus,
    ServiceEvent,
    DonationInfo,
    GalleryItem,
    GuestbookSettings,
    PrivacySettings,
)

__all__ = [
    "MemorialDraft",
    "MemorialStatus",
    "ServiceEvent",
    "DonationInfo",
    "GalleryItem",
    "GuestbookSettings",
    "PrivacySettings",
]

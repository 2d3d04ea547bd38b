# -*- coding: utf-8 -*-
"""
Memorial draft model.

MemorialDraft is the single mutable aggregate edited by the creation wizard.
Content fields are grouped by the wizard step that owns them; progress
metadata (current step, completed/errored steps) travels with the draft so
an abandoned draft can be resumed where it was left.
"""

import copy
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Set

from services.exceptions import ValidationException
from services.translation_manager import tr
from utils.datetime_utils import from_isoformat, to_date_isoformat


class MemorialStatus:
    DRAFT = "draft"
    PUBLISHED = "published"


SERVICE_TYPES = ("visitation", "funeral", "burial", "celebration")
DONATION_TYPES = ("charity", "gofundme", "parish", "other")
GALLERY_ITEM_TYPES = ("image", "video")
MODERATION_MODES = ("none", "pre", "post")
NOTIFY_FREQUENCIES = ("instant", "daily", "weekly", "none")
PRIVACY_LEVELS = ("public", "private", "password")


def _known_fields(cls, data: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in data.items() if k in cls.__dataclass_fields__}


@dataclass
class ServiceEvent:
    """A visitation, funeral, burial or celebration of life."""

    service_type: str = "funeral"
    date: Optional[str] = None
    time: Optional[str] = None
    location: str = ""
    address: str = ""
    notes: str = ""

    def to_dict(self) -> dict:
        return {
            "service_type": self.service_type,
            "date": self.date,
            "time": self.time,
            "location": self.location,
            "address": self.address,
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ServiceEvent":
        data = dict(data)
        # Accept the short "type" key used by the web editor
        if "type" in data and "service_type" not in data:
            data["service_type"] = data.pop("type")
        if data.get("date") is not None:
            data["date"] = to_date_isoformat(data["date"])
        return cls(**_known_fields(cls, data))


@dataclass
class DonationInfo:
    """Where mourners are asked to give in memory of the deceased."""

    donation_type: str = "charity"
    url: str = ""
    description: str = ""

    def to_dict(self) -> dict:
        return {
            "donation_type": self.donation_type,
            "url": self.url,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "DonationInfo":
        data = dict(data)
        if "type" in data and "donation_type" not in data:
            data["donation_type"] = data.pop("type")
        return cls(**_known_fields(cls, data))


@dataclass
class GalleryItem:
    """Photo or video shown in the memorial gallery."""

    item_type: str = "image"
    url: str = ""
    caption: str = ""
    order_index: int = 0

    def to_dict(self) -> dict:
        return {
            "item_type": self.item_type,
            "url": self.url,
            "caption": self.caption,
            "order_index": self.order_index,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "GalleryItem":
        data = dict(data)
        if "type" in data and "item_type" not in data:
            data["item_type"] = data.pop("type")
        return cls(**_known_fields(cls, data))


@dataclass
class GuestbookSettings:
    """
    Guestbook policy.

    enabled is None until the author makes an explicit choice; both True
    and False are complete answers.
    """

    enabled: Optional[bool] = None
    moderation: str = "pre"
    notify_email: str = ""
    notify_frequency: str = "instant"

    def to_dict(self) -> dict:
        return {
            "enabled": self.enabled,
            "moderation": self.moderation,
            "notify_email": self.notify_email,
            "notify_frequency": self.notify_frequency,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "GuestbookSettings":
        return cls(**_known_fields(cls, data))


@dataclass
class PrivacySettings:
    """Who can see the memorial and at which address."""

    level: Optional[str] = None
    password: Optional[str] = None
    custom_url: Optional[str] = None

    @property
    def seo_enabled(self) -> bool:
        """Search engines may index public memorials only."""
        return self.level == "public"

    def to_dict(self) -> dict:
        return {
            "level": self.level,
            "password": self.password,
            "custom_url": self.custom_url,
            "seo_enabled": self.seo_enabled,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PrivacySettings":
        return cls(**_known_fields(cls, data))


TEXT_FIELDS = (
    "first_name", "middle_name", "last_name", "nickname",
    "featured_image_url", "cover_image_url", "headline", "obituary",
)
DATE_FIELDS = ("date_of_birth", "date_of_death")
LIST_FIELDS = {"services": ServiceEvent, "gallery": GalleryItem}
DESCRIPTOR_FIELDS = {
    "donation": DonationInfo,
    "guestbook": GuestbookSettings,
    "privacy": PrivacySettings,
}
CONTENT_FIELDS = TEXT_FIELDS + DATE_FIELDS + tuple(LIST_FIELDS) + tuple(DESCRIPTOR_FIELDS)
PROGRESS_FIELDS = ("current_step_index", "completed_steps", "errored_steps")


@dataclass
class MemorialDraft:
    """
    Memorial record being authored.

    id is assigned by the store when the draft is created and never changes
    afterwards. Only content fields can be edited through merge().
    """

    # Identity
    id: Optional[str] = None
    owner_id: Optional[str] = None
    status: str = MemorialStatus.DRAFT

    # Basic information
    first_name: str = ""
    middle_name: str = ""
    last_name: str = ""
    nickname: str = ""
    date_of_birth: Optional[str] = None  # YYYY-MM-DD
    date_of_death: Optional[str] = None  # YYYY-MM-DD
    featured_image_url: str = ""
    cover_image_url: str = ""

    # Story
    headline: str = ""
    obituary: str = ""

    # Optional sections
    services: List[ServiceEvent] = field(default_factory=list)
    donation: Optional[DonationInfo] = None
    gallery: List[GalleryItem] = field(default_factory=list)

    # Policies
    guestbook: GuestbookSettings = field(default_factory=GuestbookSettings)
    privacy: PrivacySettings = field(default_factory=PrivacySettings)

    # Progress (0-based step indexes)
    current_step_index: int = 0
    completed_steps: Set[int] = field(default_factory=set)
    errored_steps: Set[int] = field(default_factory=set)

    # Metadata
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        """First, middle and last name joined; empty when nothing is entered."""
        parts = [self.first_name, self.middle_name, self.last_name]
        return " ".join(p.strip() for p in parts if p and p.strip())

    @property
    def display_name(self) -> str:
        return self.full_name or tr("memorial.untitled")

    @property
    def is_published(self) -> bool:
        return self.status == MemorialStatus.PUBLISHED

    def merge(self, partial: Dict[str, Any]) -> Set[str]:
        """
        Apply a partial update, last write wins per field.

        Args:
            partial: content field name -> new value. Descriptor fields
                (donation, guestbook, privacy) accept a dict that is merged
                into the current value field by field.

        Returns:
            Names of the fields whose value actually changed.

        Raises:
            ValidationException: for unknown or non-editable fields, or when
                the draft is already published.
        """
        if self.is_published:
            raise ValidationException(
                "Published memorials cannot be edited by the wizard",
                context="memorial"
            )

        updates = {}
        for name, value in partial.items():
            if name not in CONTENT_FIELDS:
                raise ValidationException(
                    f"Field '{name}' is not an editable memorial field",
                    field=name,
                    context="memorial"
                )
            updates[name] = self._coerce(name, value)

        changed = set()
        for name, value in updates.items():
            if getattr(self, name) != value:
                setattr(self, name, value)
                changed.add(name)

        if changed:
            self.updated_at = datetime.now()
        return changed

    def _coerce(self, name: str, value: Any) -> Any:
        if name in TEXT_FIELDS:
            return "" if value is None else str(value)

        if name in DATE_FIELDS:
            if value is None or value == "":
                return None
            return to_date_isoformat(value)

        if name in LIST_FIELDS:
            item_cls = LIST_FIELDS[name]
            return [
                item if isinstance(item, item_cls) else item_cls.from_dict(item)
                for item in (value or [])
            ]

        descriptor_cls = DESCRIPTOR_FIELDS[name]
        if value is None:
            # donation is optional; the policies reset to their defaults
            return None if name == "donation" else descriptor_cls()
        if isinstance(value, descriptor_cls):
            return copy.deepcopy(value)
        current = getattr(self, name)
        merged = current.to_dict() if current is not None else {}
        merged.update(value)
        return descriptor_cls.from_dict(merged)

    def content_dict(self) -> Dict[str, Any]:
        """Content fields only, in serializable form."""
        return {name: _serialize(getattr(self, name)) for name in CONTENT_FIELDS}

    def progress_dict(self) -> Dict[str, Any]:
        return {
            "current_step_index": self.current_step_index,
            "completed_steps": sorted(self.completed_steps),
            "errored_steps": sorted(self.errored_steps),
        }

    def apply_progress(self, data: Dict[str, Any]):
        """Restore progress metadata written by progress_dict()."""
        if "current_step_index" in data and data["current_step_index"] is not None:
            self.current_step_index = int(data["current_step_index"])
        if "completed_steps" in data:
            self.completed_steps = set(int(i) for i in (data["completed_steps"] or []))
        if "errored_steps" in data:
            self.errored_steps = set(int(i) for i in (data["errored_steps"] or []))
        self.errored_steps -= self.completed_steps

    def clone(self) -> "MemorialDraft":
        return copy.deepcopy(self)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        data = {
            "id": self.id,
            "owner_id": self.owner_id,
            "status": self.status,
        }
        data.update(self.content_dict())
        data.update(self.progress_dict())
        data["created_at"] = self.created_at.isoformat() if self.created_at else None
        data["updated_at"] = self.updated_at.isoformat() if self.updated_at else None
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "MemorialDraft":
        """Create MemorialDraft from dictionary. Missing fields take defaults."""
        draft = cls(
            id=data.get("id"),
            owner_id=data.get("owner_id"),
            status=data.get("status") or MemorialStatus.DRAFT,
            created_at=from_isoformat(data.get("created_at")),
            updated_at=from_isoformat(data.get("updated_at")),
        )
        for name in CONTENT_FIELDS:
            if name in data:
                setattr(draft, name, draft._coerce(name, data[name]))
        draft.apply_progress(data)
        return draft


def _serialize(value: Any) -> Any:
    if isinstance(value, list):
        return [_serialize(item) for item in value]
    if hasattr(value, "to_dict"):
        return value.to_dict()
    return value

# -*- coding: utf-8 -*-
"""
Preview Renderer - read-only rendering of a memorial draft.

render_preview() is a pure function of the draft: it never mutates it and
renders a neutral placeholder for anything missing. The wizard calls it
on every draft change; nothing is cached.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from models.memorial import MemorialDraft
from services.translation_manager import tr
from utils.datetime_utils import calculate_age, format_display_date

MAX_PREVIEW_SERVICES = 2
MAX_PREVIEW_GALLERY_ITEMS = 6


@dataclass(frozen=True)
class ServicePreview:
    label: str
    when: str
    location: str


@dataclass(frozen=True)
class GalleryPreview:
    item_type: str
    url: str
    caption: str


@dataclass(frozen=True)
class MemorialPreview:
    """Everything the preview pane shows, already formatted."""
    display_name: str
    nickname: Optional[str]
    life_span: Optional[str]
    age: Optional[str]
    featured_image_url: Optional[str]
    cover_image_url: Optional[str]
    headline: str
    obituary: str
    services: Tuple[ServicePreview, ...]
    more_services: Optional[str]
    gallery: Tuple[GalleryPreview, ...]
    more_gallery: Optional[str]
    donation: Optional[str]
    guestbook: Optional[str]
    privacy: str
    footer: str
    is_placeholder_name: bool = False


def _clean(value) -> str:
    return value.strip() if isinstance(value, str) else ""


def render_preview(draft: MemorialDraft) -> MemorialPreview:
    """Project a draft into its preview."""
    name = draft.full_name
    born = format_display_date(draft.date_of_birth)
    died = format_display_date(draft.date_of_death)
    life_span = None
    if born and died:
        life_span = f"{born} – {died}"
    elif born or died:
        life_span = born or died

    age = calculate_age(draft.date_of_birth, draft.date_of_death)

    services = []
    for event in (draft.services or [])[:MAX_PREVIEW_SERVICES]:
        when = " ".join(p for p in (format_display_date(event.date), _clean(event.time)) if p)
        location = ", ".join(p for p in (_clean(event.location), _clean(event.address)) if p)
        services.append(ServicePreview(
            label=tr(f"service.{event.service_type}"),
            when=when,
            location=location,
        ))
    extra_services = len(draft.services or []) - MAX_PREVIEW_SERVICES

    ordered = sorted(draft.gallery or [], key=lambda item: item.order_index)
    gallery = tuple(
        GalleryPreview(item.item_type, item.url, _clean(item.caption))
        for item in ordered[:MAX_PREVIEW_GALLERY_ITEMS]
    )
    extra_items = len(ordered) - MAX_PREVIEW_GALLERY_ITEMS

    donation = None
    if draft.donation is not None:
        target = _clean(draft.donation.description) or _clean(draft.donation.url)
        if target:
            donation = tr("preview.donation", target=target)

    guestbook = None
    if draft.guestbook is not None and draft.guestbook.enabled is not None:
        guestbook = tr("preview.guestbook.enabled" if draft.guestbook.enabled
                       else "preview.guestbook.disabled")

    level = draft.privacy.level if draft.privacy is not None else None
    privacy = tr(f"preview.privacy.{level}") if level else tr("preview.privacy.unset")

    return MemorialPreview(
        display_name=name or tr("preview.name.placeholder"),
        nickname=_clean(draft.nickname) or None,
        life_span=life_span,
        age=tr("preview.age", age=age) if age is not None else None,
        featured_image_url=_clean(draft.featured_image_url) or None,
        cover_image_url=_clean(draft.cover_image_url) or None,
        headline=_clean(draft.headline) or tr("preview.headline.placeholder"),
        obituary=_clean(draft.obituary) or tr("preview.obituary.placeholder"),
        services=tuple(services),
        more_services=tr("preview.services.more", count=extra_services) if extra_services > 0 else None,
        gallery=gallery,
        more_gallery=tr("preview.gallery.more", count=extra_items) if extra_items > 0 else None,
        donation=donation,
        guestbook=guestbook,
        privacy=privacy,
        footer=tr("preview.footer"),
        is_placeholder_name=not name,
    )


def render_text(preview: MemorialPreview) -> str:
    """Plain-text rendering of a preview, for logs and the console launcher."""
    lines = [preview.display_name]
    if preview.nickname:
        lines.append(f'"{preview.nickname}"')
    if preview.life_span:
        lines.append(preview.life_span + (f" ({preview.age})" if preview.age else ""))
    lines.extend(["", preview.headline, "", preview.obituary])

    if preview.services:
        lines.append("")
        for service in preview.services:
            details = " · ".join(p for p in (service.when, service.location) if p)
            lines.append(f"{service.label}: {details}" if details else service.label)
        if preview.more_services:
            lines.append(preview.more_services)

    if preview.gallery:
        lines.append("")
        lines.extend(f"[{item.item_type}] {item.caption or item.url}" for item in preview.gallery)
        if preview.more_gallery:
            lines.append(preview.more_gallery)

    if preview.donation:
        lines.extend(["", preview.donation])
    if preview.guestbook:
        lines.append(preview.guestbook)
    lines.extend([preview.privacy, "", preview.footer])
    return "\n".join(lines)

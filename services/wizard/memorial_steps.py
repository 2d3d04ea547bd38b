# -*- coding: utf-8 -*-
"""
Memorial creation wizard steps.

Each step pairs a checker (pure and total: any draft, including an empty
one, is accepted without raising) with a projector that returns the fields
the step owns. Warnings never block navigation.
"""

import re
from datetime import date
from enum import Enum
from typing import Any, Dict, List

from models.memorial import MemorialDraft, PRIVACY_LEVELS
from services.translation_manager import tr
from utils.datetime_utils import parse_date

from .step_registry import StepDefinition, StepRegistry, StepValidationResult

MIN_HEADLINE_LENGTH = 10
MIN_OBITUARY_LENGTH = 50
CUSTOM_URL_PATTERN = re.compile(r"^[a-z0-9-]+$")
CUSTOM_URL_MIN_LENGTH = 3
CUSTOM_URL_MAX_LENGTH = 50


class StepId(Enum):
    """Wizard steps, in registry order."""
    BASIC_INFO = "basic-info"
    HEADLINE = "headline"
    OBITUARY = "obituary"
    SERVICE = "service"
    DONATION = "donation"
    GALLERY = "gallery"
    GUESTBOOK = "guestbook"
    PRIVACY = "privacy"
    REVIEW = "review"


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _fields(draft: MemorialDraft, *names: str) -> Dict[str, Any]:
    content = draft.content_dict()
    return {name: content[name] for name in names}


# ==================== Basic information ====================

def check_basic_info(draft: MemorialDraft) -> StepValidationResult:
    result = StepValidationResult()
    if not _text(draft.first_name).strip():
        result.add_error(tr("validation.first_name.required"))
    if not _text(draft.last_name).strip():
        result.add_error(tr("validation.last_name.required"))

    born = parse_date(draft.date_of_birth)
    died = parse_date(draft.date_of_death)
    if born is None:
        result.add_error(tr("validation.date_of_birth.required"))
    if died is None:
        result.add_error(tr("validation.date_of_death.required"))
    if born is not None and died is not None:
        if born >= died:
            result.add_error(tr("validation.dates.order"))
        elif died > date.today():
            result.add_warning(tr("warning.date_of_death.future"))

    if not _text(draft.featured_image_url).strip():
        result.add_error(tr("validation.featured_image.required"))
    return result


def project_basic_info(draft: MemorialDraft) -> Dict[str, Any]:
    return _fields(
        draft,
        "first_name", "middle_name", "last_name", "nickname",
        "date_of_birth", "date_of_death", "featured_image_url", "cover_image_url",
    )


# ==================== Headline & obituary ====================

def check_headline(draft: MemorialDraft) -> StepValidationResult:
    result = StepValidationResult()
    if len(_text(draft.headline)) < MIN_HEADLINE_LENGTH:
        result.add_error(tr("validation.headline.min_length", min=MIN_HEADLINE_LENGTH))
    return result


def project_headline(draft: MemorialDraft) -> Dict[str, Any]:
    return _fields(draft, "headline")


def check_obituary(draft: MemorialDraft) -> StepValidationResult:
    result = StepValidationResult()
    if len(_text(draft.obituary)) < MIN_OBITUARY_LENGTH:
        result.add_error(tr("validation.obituary.min_length", min=MIN_OBITUARY_LENGTH))
    return result


def project_obituary(draft: MemorialDraft) -> Dict[str, Any]:
    return _fields(draft, "obituary")


# ==================== Optional sections ====================

def check_optional(draft: MemorialDraft) -> StepValidationResult:
    """Services, donation and gallery: zero items is a complete answer."""
    return StepValidationResult()


def project_service(draft: MemorialDraft) -> Dict[str, Any]:
    return _fields(draft, "services")


def project_donation(draft: MemorialDraft) -> Dict[str, Any]:
    return _fields(draft, "donation")


def project_gallery(draft: MemorialDraft) -> Dict[str, Any]:
    return _fields(draft, "gallery")


# ==================== Guestbook & privacy ====================

def check_guestbook(draft: MemorialDraft) -> StepValidationResult:
    result = StepValidationResult()
    guestbook = draft.guestbook
    enabled = getattr(guestbook, "enabled", None)
    if not isinstance(enabled, bool):
        result.add_error(tr("validation.guestbook.choice"))
    elif enabled and guestbook.notify_frequency != "none" and not _text(guestbook.notify_email).strip():
        result.add_warning(tr("warning.guestbook.notify_email"))
    return result


def project_guestbook(draft: MemorialDraft) -> Dict[str, Any]:
    return _fields(draft, "guestbook")


def check_privacy(draft: MemorialDraft) -> StepValidationResult:
    result = StepValidationResult()
    privacy = draft.privacy
    level = getattr(privacy, "level", None)
    custom_url = _text(getattr(privacy, "custom_url", None)).strip()

    if level not in PRIVACY_LEVELS:
        result.add_error(tr("validation.privacy.level"))
    if not custom_url:
        result.add_error(tr("validation.privacy.custom_url"))

    if level == "password" and not _text(privacy.password):
        result.add_warning(tr("warning.privacy.password"))
    if custom_url:
        if not CUSTOM_URL_PATTERN.match(custom_url):
            result.add_warning(tr("warning.custom_url.format"))
        if not CUSTOM_URL_MIN_LENGTH <= len(custom_url) <= CUSTOM_URL_MAX_LENGTH:
            result.add_warning(tr(
                "warning.custom_url.length",
                min=CUSTOM_URL_MIN_LENGTH, max=CUSTOM_URL_MAX_LENGTH
            ))
    return result


def project_privacy(draft: MemorialDraft) -> Dict[str, Any]:
    return _fields(draft, "privacy")


# ==================== Review ====================

def _review_checker(prerequisites: List[StepDefinition]):
    """Review is valid only if every required step validates now; nothing is cached."""

    def check_review(draft: MemorialDraft) -> StepValidationResult:
        result = StepValidationResult()
        for step in prerequisites:
            if not step.validate(draft):
                result.add_error(step.title)
        return result

    return check_review


def project_review(draft: MemorialDraft) -> Dict[str, Any]:
    return {}


def build_memorial_registry() -> StepRegistry:
    """Create the registry of memorial wizard steps."""
    steps = [
        StepDefinition(StepId.BASIC_INFO, "wizard.step.basic_info", True,
                       check_basic_info, project_basic_info,
                       "wizard.step.basic_info.description"),
        StepDefinition(StepId.HEADLINE, "wizard.step.headline", True,
                       check_headline, project_headline,
                       "wizard.step.headline.description"),
        StepDefinition(StepId.OBITUARY, "wizard.step.obituary", True,
                       check_obituary, project_obituary,
                       "wizard.step.obituary.description"),
        StepDefinition(StepId.SERVICE, "wizard.step.service", False,
                       check_optional, project_service,
                       "wizard.step.service.description"),
        StepDefinition(StepId.DONATION, "wizard.step.donation", False,
                       check_optional, project_donation,
                       "wizard.step.donation.description"),
        StepDefinition(StepId.GALLERY, "wizard.step.gallery", False,
                       check_optional, project_gallery,
                       "wizard.step.gallery.description"),
        StepDefinition(StepId.GUESTBOOK, "wizard.step.guestbook", True,
                       check_guestbook, project_guestbook,
                       "wizard.step.guestbook.description"),
        StepDefinition(StepId.PRIVACY, "wizard.step.privacy", True,
                       check_privacy, project_privacy,
                       "wizard.step.privacy.description"),
    ]
    prerequisites = [step for step in steps if step.required]
    steps.append(StepDefinition(StepId.REVIEW, "wizard.step.review", True,
                                _review_checker(prerequisites), project_review,
                                "wizard.step.review.description"))
    return StepRegistry(steps, id_type=StepId)


MEMORIAL_STEPS = build_memorial_registry()

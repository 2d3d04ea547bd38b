# -*- coding: utf-8 -*-
"""
Unit tests for the MemorialDraft model.

Covers partial merges, descriptor merging, progress metadata and
dictionary round trips.
"""

import pytest

from models.memorial import (
    MemorialDraft, MemorialStatus, DonationInfo, GalleryItem, GuestbookSettings,
    PrivacySettings, ServiceEvent, CONTENT_FIELDS,
)
from services.exceptions import ValidationException


class TestMerge:
    """MemorialDraft.merge()"""

    def test_returns_only_changed_fields(self):
        """Fields set to their current value are not reported."""
        draft = MemorialDraft(first_name="Ada")
        changed = draft.merge({"first_name": "Ada", "last_name": "Lovelace"})
        assert changed == {"last_name"}
        assert draft.last_name == "Lovelace"

    def test_untouched_fields_are_preserved(self):
        """A partial update leaves every other field alone."""
        draft = MemorialDraft(headline="Mathematician and poet")
        draft.merge({"obituary": "x" * 60})
        assert draft.headline == "Mathematician and poet"

    def test_unknown_field_rejected(self):
        """Unknown names raise before anything is applied."""
        draft = MemorialDraft()
        with pytest.raises(ValidationException) as exc:
            draft.merge({"first_name": "Ada", "favourite_colour": "blue"})
        assert exc.value.field == "favourite_colour"
        assert draft.first_name == ""

    def test_progress_fields_not_editable(self):
        """Progress metadata cannot be changed through merge()."""
        draft = MemorialDraft()
        with pytest.raises(ValidationException):
            draft.merge({"current_step_index": 4})

    def test_published_draft_rejects_edits(self):
        """Published memorials are frozen for the wizard."""
        draft = MemorialDraft(status=MemorialStatus.PUBLISHED)
        with pytest.raises(ValidationException):
            draft.merge({"headline": "Too late"})

    def test_descriptor_merges_field_by_field(self):
        """A partial privacy dict keeps the other privacy fields."""
        draft = MemorialDraft(privacy=PrivacySettings(level="public", custom_url="ada"))
        changed = draft.merge({"privacy": {"custom_url": "ada-lovelace"}})
        assert changed == {"privacy"}
        assert draft.privacy.level == "public"
        assert draft.privacy.custom_url == "ada-lovelace"

    def test_seo_follows_privacy_level(self):
        """Only public memorials are indexable; a supplied flag is ignored."""
        draft = MemorialDraft()
        draft.merge({"privacy": {"level": "password", "password": "pw", "seo_enabled": True}})
        assert draft.privacy.seo_enabled is False
        draft.merge({"privacy": {"level": "public"}})
        assert draft.privacy.seo_enabled is True
        assert draft.content_dict()["privacy"]["seo_enabled"] is True

    def test_guestbook_false_is_an_answer(self):
        """Disabling the guestbook is stored as False, not as unset."""
        draft = MemorialDraft()
        draft.merge({"guestbook": {"enabled": False}})
        assert draft.guestbook.enabled is False

    def test_donation_can_be_cleared(self):
        """donation=None removes the donation section."""
        draft = MemorialDraft(donation=DonationInfo(url="https://give.example.org"))
        assert draft.merge({"donation": None}) == {"donation"}
        assert draft.donation is None

    def test_lists_accept_dicts_and_type_alias(self):
        """Service and gallery items may be given as dicts using the short 'type' key."""
        draft = MemorialDraft()
        draft.merge({
            "services": [{"type": "burial", "date": "2023-11-25T00:00:00", "location": "Oak Hill"}],
            "gallery": [{"type": "video", "url": "https://v.example.com/1.mp4"}],
        })
        assert draft.services == [ServiceEvent(service_type="burial", date="2023-11-25", location="Oak Hill")]
        assert draft.gallery[0].item_type == "video"

    def test_empty_date_clears(self):
        """An empty date string is stored as None."""
        draft = MemorialDraft(date_of_birth="1941-03-02")
        draft.merge({"date_of_birth": ""})
        assert draft.date_of_birth is None

    def test_text_none_becomes_empty(self):
        """Clearing a text field stores an empty string."""
        draft = MemorialDraft(nickname="Peggy")
        draft.merge({"nickname": None})
        assert draft.nickname == ""


class TestProgress:
    """Progress metadata on the draft."""

    def test_apply_progress_keeps_sets_disjoint(self):
        """A step listed as both completed and errored counts as completed."""
        draft = MemorialDraft()
        draft.apply_progress({"current_step_index": 3, "completed_steps": [0, 1], "errored_steps": [1, 2]})
        assert draft.current_step_index == 3
        assert draft.completed_steps == {0, 1}
        assert draft.errored_steps == {2}

    def test_progress_dict_is_sorted(self):
        """Sets are written as sorted lists."""
        draft = MemorialDraft(completed_steps={2, 0, 1}, errored_steps={6})
        assert draft.progress_dict() == {
            "current_step_index": 0,
            "completed_steps": [0, 1, 2],
            "errored_steps": [6],
        }


class TestSerialization:
    """to_dict / from_dict / content_dict"""

    def test_content_dict_has_every_content_field(self):
        """content_dict() lists exactly the content fields."""
        assert set(MemorialDraft().content_dict()) == set(CONTENT_FIELDS)

    def test_from_dict_restores_nested_values(self):
        """Nested sections and progress survive a dictionary round trip."""
        draft = MemorialDraft(
            id="m-1",
            first_name="Ada",
            services=[ServiceEvent(service_type="visitation", date="2023-11-24")],
            gallery=[GalleryItem(url="https://img.example.com/1.jpg", order_index=1)],
            donation=DonationInfo(donation_type="parish", description="St. Mary's"),
            guestbook=GuestbookSettings(enabled=True, moderation="post"),
            privacy=PrivacySettings(level="password", password="secret", custom_url="ada"),
            current_step_index=5,
            completed_steps={0, 1, 2, 3, 4},
        )
        restored = MemorialDraft.from_dict(draft.to_dict())
        assert restored.id == "m-1"
        assert restored.content_dict() == draft.content_dict()
        assert restored.progress_dict() == draft.progress_dict()

    def test_from_dict_defaults_missing_sections(self):
        """Missing columns take their defaults."""
        draft = MemorialDraft.from_dict({"id": "m-2"})
        assert draft.status == MemorialStatus.DRAFT
        assert draft.guestbook.enabled is None
        assert draft.privacy.level is None
        assert draft.services == []

    def test_clone_is_independent(self):
        """Edits to a clone never reach the original."""
        draft = MemorialDraft(completed_steps={0})
        copy = draft.clone()
        copy.completed_steps.add(1)
        copy.merge({"headline": "Changed headline"})
        assert draft.completed_steps == {0}
        assert draft.headline == ""

    def test_full_name_skips_blank_parts(self):
        """Blank middle names do not leave double spaces."""
        draft = MemorialDraft(first_name="Ada ", middle_name=" ", last_name="Lovelace")
        assert draft.full_name == "Ada Lovelace"

    def test_display_name_placeholder(self):
        """Unnamed drafts are listed as untitled."""
        assert MemorialDraft().display_name == "Untitled Memorial"
        assert MemorialDraft(first_name="Ada").display_name == "Ada"

# -*- coding: utf-8 -*-
"""
Unit tests for MemorialApiClient.

requests.request is replaced with a recorder so no server is needed.
"""

import json

import pytest
import requests

from services.api_client import ApiConfig, MemorialApiClient, get_api_client, reset_api_client
from services.draft_store import DraftStoreType
from services.exceptions import ApiException, DraftNotFoundException, NetworkException


class FakeResponse:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self._payload = payload
        self.text = json.dumps(payload) if payload is not None else ""

    def json(self):
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error", response=self)


class FakeServer:
    """Records requests and answers from a queue of responses."""

    def __init__(self):
        self.requests = []
        self.responses = []

    def reply(self, status_code=200, payload=None):
        self.responses.append(FakeResponse(status_code, payload))

    def fail(self, error):
        self.responses.append(error)

    def __call__(self, method, url, json=None, params=None, headers=None, timeout=None, verify=None):
        self.requests.append({"method": method, "url": url, "json": json, "headers": headers})
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


API_ROW = {
    "id": "m-7",
    "user_id": "owner-1",
    "status": "draft",
    "first_name": "Margaret",
    "last_name": "Hale",
    "date_of_birth": "1941-03-02T00:00:00.000Z",
    "featured_photo_url": "https://img.example.com/margaret.jpg",
    "headline": "Beloved teacher",
    "services": [{"type": "funeral", "date": "2023-11-25", "location": "St. Mary's"}],
    "donation_enabled": True,
    "donation_type": "charity",
    "donation_url": "https://give.example.org",
    "guestbook_enabled": False,
    "privacy": "public",
    "custom_url": "margaret-hale",
    "current_step": 3,
    "completed_steps": [1, 2],
    "errored_steps": [],
    "updated_at": "2024-05-01T12:00:00Z",
}


@pytest.fixture
def server(monkeypatch):
    fake = FakeServer()
    monkeypatch.setattr(requests, "request", fake)
    return fake


@pytest.fixture
def client():
    return MemorialApiClient(ApiConfig(
        base_url="http://api.test/api/", timeout=5, verify_ssl=True, access_token="token-1"
    ))


class TestRequests:
    """Endpoints and headers"""

    def test_store_type(self, client):
        assert client.store_type == DraftStoreType.HTTP_API

    def test_bearer_token_sent(self, client, server):
        """The access token travels as a bearer header."""
        server.reply(payload={"drafts": []})
        client.list_unfinished_drafts("owner-1")
        sent = server.requests[0]
        assert sent["method"] == "GET"
        assert sent["url"] == "http://api.test/api/memorials/create"
        assert sent["headers"]["Authorization"] == "Bearer token-1"

    def test_create_then_fetch(self, client, server):
        """create_draft posts, then loads the new draft by id."""
        server.reply(payload={"success": True, "memorial_id": "m-7"})
        server.reply(payload={"memorial": API_ROW})
        draft = client.create_draft("owner-1")
        assert [r["method"] for r in server.requests] == ["POST", "GET"]
        assert server.requests[1]["url"].endswith("/memorials/m-7")
        assert draft.id == "m-7"

    def test_create_without_id(self, client, server):
        """A create response without an id is an error."""
        server.reply(payload={"success": True})
        with pytest.raises(ApiException):
            client.create_draft()

    def test_publish_endpoint(self, client, server):
        server.reply(payload={"success": True})
        assert client.request_publish("m-7") == {"success": True}
        assert server.requests[0]["url"].endswith("/memorials/m-7/publish")

    def test_save_status(self, client, server):
        """Autosave status keys are normalized."""
        server.reply(payload={"lastSaved": "2024-05-01T12:00:00Z", "lastSavedDisplay": "2 minutes ago",
                              "status": "draft"})
        status = client.get_save_status("m-7")
        assert status == {"last_saved_at": "2024-05-01T12:00:00Z",
                          "last_saved_display": "2 minutes ago", "status": "draft"}


class TestConversion:
    """Mapping between API rows and drafts"""

    def test_row_to_draft(self, client, server):
        """Flat columns and 1-based steps become a draft."""
        server.reply(payload={"memorial": API_ROW})
        draft = client.get_draft("m-7")
        assert draft.owner_id == "owner-1"
        assert draft.full_name == "Margaret Hale"
        assert draft.date_of_birth == "1941-03-02"
        assert draft.featured_image_url == "https://img.example.com/margaret.jpg"
        assert draft.services[0].service_type == "funeral"
        assert draft.donation.url == "https://give.example.org"
        assert draft.guestbook.enabled is False
        assert draft.privacy.level == "public"
        assert draft.current_step_index == 2
        assert draft.completed_steps == {0, 1}
        assert draft.updated_at is not None

    def test_patch_is_flattened(self, client, server):
        """Descriptors are flattened and steps become 1-based."""
        server.reply(payload={"success": True, "saved_at": "2024-05-01T12:00:01Z"})
        client.patch_draft("m-7", {
            "featured_image_url": "https://img.example.com/new.jpg",
            "donation": None,
            "guestbook": {"enabled": True, "moderation": "post", "notify_email": "", "notify_frequency": "daily"},
            "privacy": {"level": "password", "password": "pw", "custom_url": "mh", "seo_enabled": False},
            "current_step_index": 0,
            "completed_steps": [],
            "errored_steps": [0],
        })
        body = server.requests[0]["json"]
        assert server.requests[0]["method"] == "PATCH"
        assert body["featured_photo_url"] == "https://img.example.com/new.jpg"
        assert body["donation_enabled"] is False
        assert body["guestbook_enabled"] is True
        assert body["guestbook_moderation"] == "post"
        assert body["privacy"] == "password"
        assert body["seo_enabled"] is False
        assert body["current_step"] == 1
        assert body["errored_steps"] == [1]

    def test_seo_flag_derived_from_level(self, client, server):
        """A public memorial is always sent as indexable."""
        server.reply(payload={"success": True, "saved_at": "2024-05-01T12:00:01Z"})
        client.patch_draft("m-7", {"privacy": {"level": "public", "custom_url": "mh", "seo_enabled": False}})
        assert server.requests[0]["json"]["seo_enabled"] is True


class TestErrors:
    """HTTP and network failures"""

    def test_missing_draft(self, client, server):
        """404 on fetch is DraftNotFoundException."""
        server.reply(404, {"error": "Memorial not found"})
        with pytest.raises(DraftNotFoundException):
            client.get_draft("m-404")

    def test_forbidden_draft_reads_as_missing(self, client, server):
        """Someone else's draft looks the same as a missing one."""
        server.reply(403, {"error": "Forbidden"})
        with pytest.raises(DraftNotFoundException):
            client.get_draft("m-other")

    def test_rate_limited_patch(self, client, server):
        """429 keeps its status code for the autosave scheduler."""
        server.reply(429, {"error": "Please wait before saving again"})
        with pytest.raises(ApiException) as exc:
            client.patch_draft("m-7", {"headline": "Beloved teacher"})
        assert exc.value.status_code == 429
        assert exc.value.response_data == {"error": "Please wait before saving again"}

    def test_connection_error(self, client, server):
        """Unreachable servers raise NetworkException."""
        server.fail(requests.exceptions.ConnectionError("refused"))
        with pytest.raises(NetworkException):
            client.request_publish("m-7")

    def test_timeout(self, client, server):
        server.fail(requests.exceptions.Timeout("timed out"))
        with pytest.raises(NetworkException):
            client.get_save_status("m-7")


class TestSingleton:
    """get_api_client()"""

    def test_shared_instance(self):
        reset_api_client()
        try:
            first = get_api_client(ApiConfig(base_url="http://api.test", timeout=1, verify_ssl=True))
            assert get_api_client() is first
        finally:
            reset_api_client()

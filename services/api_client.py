# -*- coding: utf-8 -*-
"""
Memorial API Client
===================

Draft Store backed by the hosted memorial REST API.

Endpoints used:
    GET    /memorials/create          unfinished drafts of the signed-in user
    POST   /memorials/create          create an empty draft
    GET    /memorials/{id}            fetch a draft
    PATCH  /memorials/{id}            partial update
    POST   /memorials/{id}/publish    request publication
    GET    /memorials/{id}/autosave   last save status

The API stores drafts as flat snake_case columns with 1-based step numbers;
this module converts to and from MemorialDraft (0-based steps).
"""

import json
import requests
import urllib3
from dataclasses import dataclass
from typing import Optional, Dict, List, Any

from models.memorial import MemorialDraft, MemorialStatus, PrivacySettings
from services.draft_store import DraftStore, DraftStoreType
from services.exceptions import ApiException, DraftNotFoundException, NetworkException
from utils.logger import get_logger

logger = get_logger(__name__)

# Columns copied unchanged between MemorialDraft and the API
_PLAIN_COLUMNS = (
    "first_name", "middle_name", "last_name", "nickname",
    "date_of_birth", "date_of_death", "cover_image_url",
    "headline", "obituary",
)


@dataclass
class ApiConfig:
    """
    API connection settings.

    Values not given are loaded from Config (which reads .env).
    """
    base_url: str = None
    timeout: int = None
    verify_ssl: bool = None
    access_token: Optional[str] = None

    def __post_init__(self):
        """Load from Config if not provided."""
        from app.config import Config

        if self.base_url is None:
            self.base_url = Config.API_BASE_URL
        if self.timeout is None:
            self.timeout = Config.API_TIMEOUT
        if self.verify_ssl is None:
            self.verify_ssl = Config.API_VERIFY_SSL
        if self.access_token is None:
            self.access_token = Config.API_ACCESS_TOKEN


class MemorialApiClient(DraftStore):
    """
    Client for the memorial REST API.

    Usage:
        client = MemorialApiClient(ApiConfig(base_url="http://localhost:3000/api"))
        client.set_access_token(token)
        draft = client.create_draft()
    """

    def __init__(self, config: ApiConfig = None):
        self.config = config or ApiConfig()
        self.base_url = self.config.base_url.rstrip('/')
        self.access_token: Optional[str] = self.config.access_token

        if not self.config.verify_ssl:
            # Self-signed certificates in development
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

        logger.info(f"Memorial API client ready at {self.base_url}")

    @property
    def store_type(self) -> DraftStoreType:
        return DraftStoreType.HTTP_API

    # ==================== Authentication ====================

    def set_access_token(self, token: str):
        """Use the bearer token of the signed-in session."""
        self.access_token = token
        logger.debug("Access token updated")

    def _headers(self) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json"
        }
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        return headers

    def _request(
        self,
        method: str,
        endpoint: str,
        json_data: Optional[Dict] = None,
        params: Optional[Dict] = None
    ) -> Any:
        """
        Execute an HTTP request with error handling.

        Args:
            method: HTTP method (GET, POST, PATCH)
            endpoint: API endpoint (e.g., "/memorials/create")
            json_data: JSON payload
            params: Query parameters

        Returns:
            Response JSON data (None for an empty body)

        Raises:
            ApiException: the server answered with an error status
            NetworkException: the server could not be reached
        """
        url = f"{self.base_url}{endpoint}"

        logger.info(f"[API REQ] {method} {endpoint}")
        if params:
            logger.debug(f"[API REQ] Params: {params}")
        if json_data:
            logger.debug(f"[API REQ] Body: {json.dumps(json_data, ensure_ascii=False, default=str)}")

        try:
            response = requests.request(
                method=method,
                url=url,
                json=json_data,
                params=params,
                headers=self._headers(),
                timeout=self.config.timeout,
                verify=self.config.verify_ssl
            )
            response.raise_for_status()

            result = None
            if response.text:
                result = response.json()

            logger.info(f"[API RES] {response.status_code} {endpoint}")
            if result:
                res_str = json.dumps(result, ensure_ascii=False, default=str)
                if len(res_str) > 1000:
                    logger.debug(f"[API RES] Body (truncated): {res_str[:1000]}...")
                else:
                    logger.debug(f"[API RES] Body: {res_str}")

            return result

        except requests.exceptions.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else 0
            response_data = {}
            try:
                response_data = e.response.json() if e.response is not None else {}
            except ValueError:
                pass
            logger.error(f"[API ERR] {status_code} {method} {endpoint} | Response: {response_data}")
            raise ApiException(
                message=str(e),
                status_code=status_code,
                response_data=response_data
            )
        except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as e:
            logger.error(f"Network error: {endpoint} - {e}")
            raise NetworkException(
                message=str(e),
                original_error=e
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Request failed: {endpoint} - {e}")
            raise NetworkException(
                message=str(e),
                original_error=e
            )

    # ==================== Drafts ====================

    def list_unfinished_drafts(self, owner_id: str) -> List[MemorialDraft]:
        """The server scopes the listing to the token's user; owner_id is logged only."""
        logger.debug(f"Listing unfinished drafts for {owner_id}")
        result = self._request("GET", "/memorials/create") or {}
        return [self._draft_from_api(row) for row in result.get("drafts", [])]

    def create_draft(self, owner_id: Optional[str] = None) -> MemorialDraft:
        result = self._request("POST", "/memorials/create", json_data={}) or {}
        draft_id = result.get("memorial_id") or result.get("id")
        if not draft_id:
            raise ApiException("Create response did not include a memorial id",
                               response_data=result, context="create")
        logger.info(f"Created draft {draft_id}")
        return self.get_draft(draft_id)

    def get_draft(self, draft_id: str) -> MemorialDraft:
        try:
            result = self._request("GET", f"/memorials/{draft_id}") or {}
        except ApiException as e:
            if e.status_code in (403, 404):
                raise DraftNotFoundException(draft_id, response_data=e.response_data)
            raise
        row = result.get("memorial", result)
        if not row:
            raise DraftNotFoundException(draft_id)
        return self._draft_from_api(row)

    def patch_draft(self, draft_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        payload = self._convert_fields_to_api_format(fields)
        try:
            result = self._request("PATCH", f"/memorials/{draft_id}", json_data=payload)
        except ApiException as e:
            if e.status_code == 404:
                raise DraftNotFoundException(draft_id, response_data=e.response_data)
            raise
        return result or {"success": True}

    def request_publish(self, draft_id: str) -> Dict[str, Any]:
        return self._request("POST", f"/memorials/{draft_id}/publish", json_data={}) or {"success": True}

    def get_save_status(self, draft_id: str) -> Dict[str, Any]:
        result = self._request("GET", f"/memorials/{draft_id}/autosave") or {}
        return {
            "last_saved_at": result.get("lastSaved") or result.get("last_saved_at"),
            "last_saved_display": result.get("lastSavedDisplay"),
            "status": result.get("status"),
        }

    # ==================== Conversion ====================

    def _convert_fields_to_api_format(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        """Flatten a draft patch into API columns."""
        payload = {}
        for name, value in fields.items():
            if name in _PLAIN_COLUMNS:
                payload[name] = value
            elif name == "featured_image_url":
                payload["featured_photo_url"] = value
            elif name == "services":
                payload["services"] = [_as_dict(s) for s in value or []]
            elif name == "gallery":
                payload["gallery"] = [_as_dict(g) for g in value or []]
            elif name == "donation":
                donation = _as_dict(value) if value is not None else None
                payload["donation_enabled"] = donation is not None
                payload["donation_type"] = donation.get("donation_type") if donation else None
                payload["donation_url"] = donation.get("url") if donation else None
                payload["donation_description"] = donation.get("description") if donation else None
            elif name == "guestbook":
                guestbook = _as_dict(value)
                payload["guestbook_enabled"] = guestbook.get("enabled")
                payload["guestbook_moderation"] = guestbook.get("moderation")
                payload["guestbook_notify_email"] = guestbook.get("notify_email")
                payload["guestbook_notify_frequency"] = guestbook.get("notify_frequency")
            elif name == "privacy":
                privacy = _as_dict(value)
                payload["privacy"] = privacy.get("level")
                payload["password"] = privacy.get("password")
                payload["custom_url"] = privacy.get("custom_url")
                payload["seo_enabled"] = PrivacySettings.from_dict(privacy).seo_enabled
            elif name == "current_step_index":
                payload["current_step"] = int(value) + 1
            elif name == "completed_steps":
                payload["completed_steps"] = sorted(int(i) + 1 for i in value)
            elif name == "errored_steps":
                payload["errored_steps"] = sorted(int(i) + 1 for i in value)
            else:
                logger.warning(f"Dropping unknown draft field from patch: {name}")
        return payload

    def _draft_from_api(self, row: Dict[str, Any]) -> MemorialDraft:
        """Build a MemorialDraft from an API row. Missing columns take defaults."""
        data = {
            "id": row.get("id"),
            "owner_id": row.get("user_id") or row.get("owner_id"),
            "status": row.get("status") or MemorialStatus.DRAFT,
            "created_at": row.get("created_at"),
            "updated_at": row.get("updated_at"),
        }
        for name in _PLAIN_COLUMNS:
            if row.get(name) is not None:
                data[name] = row[name]
        featured = row.get("featured_photo_url") or row.get("featured_image_url")
        if featured:
            data["featured_image_url"] = featured

        if row.get("services") is not None:
            data["services"] = row["services"]
        if row.get("gallery") is not None:
            data["gallery"] = row["gallery"]

        if row.get("donation_enabled"):
            data["donation"] = {
                "donation_type": row.get("donation_type") or "charity",
                "url": row.get("donation_url") or "",
                "description": row.get("donation_description") or "",
            }

        guestbook = {"enabled": row.get("guestbook_enabled")}
        for column, key in (("guestbook_moderation", "moderation"),
                            ("guestbook_notify_email", "notify_email"),
                            ("guestbook_notify_frequency", "notify_frequency")):
            if row.get(column) is not None:
                guestbook[key] = row[column]
        data["guestbook"] = guestbook

        data["privacy"] = {
            "level": row.get("privacy"),
            "password": row.get("password"),
            "custom_url": row.get("custom_url"),
        }

        current_step = row.get("current_step")
        data["current_step_index"] = max(int(current_step) - 1, 0) if current_step else 0
        data["completed_steps"] = [int(i) - 1 for i in row.get("completed_steps") or [] if int(i) >= 1]
        data["errored_steps"] = [int(i) - 1 for i in row.get("errored_steps") or [] if int(i) >= 1]

        return MemorialDraft.from_dict(data)


def _as_dict(value: Any) -> Dict[str, Any]:
    if value is None:
        return {}
    if hasattr(value, "to_dict"):
        return value.to_dict()
    return dict(value)


# ==================== Singleton ====================

_api_client_instance: Optional[MemorialApiClient] = None


def get_api_client(config: Optional[ApiConfig] = None) -> MemorialApiClient:
    """
    Return the shared API client (created on first use).

    Args:
        config: API settings (only used the first time)
    """
    global _api_client_instance

    if _api_client_instance is None:
        _api_client_instance = MemorialApiClient(config or ApiConfig())

    return _api_client_instance


def reset_api_client():
    """Drop the shared client (e.g. after sign-out)."""
    global _api_client_instance
    _api_client_instance = None

# -*- coding: utf-8 -*-
"""Centralized error message mapper."""

from services.translation_manager import tr
from services.exceptions import (
    ApiException, DraftNotFoundException, ValidationException, NetworkException,
    RATE_LIMIT_STATUS,
)
from utils.logger import get_logger

logger = get_logger(__name__)


def map_api_error(error: ApiException) -> str:
    """Map API exception to a user-friendly message.

    Technical details are logged only - never shown to the user.
    """
    status = error.status_code

    if status == 400:
        details = _extract_validation_details(error.response_data)
        if details:
            logger.warning(f"API validation error (400): {details}")
    elif status:
        logger.warning(f"API error ({status}): {error}")

    if isinstance(error, DraftNotFoundException) or status == 404:
        return tr("error.draft.not_found")
    if status == 401:
        return tr("error.api.unauthorized")
    if status == 403:
        return tr("error.api.forbidden")
    if status == RATE_LIMIT_STATUS:
        return tr("error.api.rate_limited")
    if status and status >= 500:
        return tr("error.api.server")
    return tr("error.api.connection")


def map_network_error(error: NetworkException) -> str:
    """Map network exception to user-friendly translated message."""
    msg = str(error.original_error) if error.original_error else str(error)
    if "timeout" in msg.lower() or "timed out" in msg.lower():
        return tr("error.api.timeout")
    return tr("error.api.connection")


def map_exception(error: Exception, context: str = None) -> str:
    """Map any exception to a user-friendly message.

    Args:
        error: the exception raised by a store call
        context: operation label used when nothing more specific applies
            ("load", "create", "save", "publish")
    """
    if isinstance(error, ApiException):
        if not error.context and context:
            error.context = context
        return map_api_error(error)

    if isinstance(error, NetworkException):
        return map_network_error(error)

    if isinstance(error, ValidationException):
        if error.errors:
            logger.warning(f"Validation error: {error.errors}")
        return error.message

    logger.warning(f"Unexpected error: {error}")
    fallback = {
        "load": "error.draft.load_failed",
        "create": "error.draft.create_failed",
        "save": "error.draft.save_failed",
        "publish": "error.draft.publish_failed",
    }.get(context, "error.api.connection")
    return tr(fallback)


def _extract_validation_details(response_data: dict) -> str:
    """Extract validation error details from API response."""
    if not response_data:
        return ""

    errors = response_data.get("errors", {})
    if isinstance(errors, dict):
        lines = []
        for field, messages in errors.items():
            if isinstance(messages, list):
                for msg in messages:
                    lines.append(f"• {field}: {msg}")
            else:
                lines.append(f"• {field}: {messages}")
        return "\n".join(lines)

    if isinstance(errors, list):
        return "\n".join(f"• {e}" for e in errors)

    return response_data.get("error", "") or response_data.get("title", "")

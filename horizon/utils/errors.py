"""
Error sanitization for HTTP responses.

Internal exception text (database errors, stack details, keys) is logged
server-side and replaced by a generic message before it reaches a client.
"""

from __future__ import annotations
import logging
from typing import Optional
from flask import current_app, has_app_context

logger = logging.getLogger(__name__)

GENERIC_MESSAGES = {
    "database": "A database error occurred. Please try again later.",
    "moderation": "The campaign could not be moderated. It has not been approved.",
    "validation": "The submitted data is invalid.",
    "auth": "Authentication failed.",
    "not_found": "The requested resource was not found.",
    "default": "An unexpected error occurred. Please try again later.",
}


def sanitize_error(error: Exception, category: str = "default", context: Optional[str] = None) -> str:
    """
    Log the real error and return a message that is safe to show a client.

    Args:
        error: the exception that was caught
        category: key into GENERIC_MESSAGES
        context: short description of what was being attempted

    Returns:
        Generic user-facing message for the category
    """
    prefix = f"{context}: " if context else ""
    message = f"{prefix}{type(error).__name__}: {error}"
    if has_app_context():
        current_app.logger.error(message)
    else:
        logger.error(message)
    return GENERIC_MESSAGES.get(category, GENERIC_MESSAGES["default"])

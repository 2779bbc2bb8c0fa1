"""
Error taxonomy shared by every SkillFolio app.

Each error carries a human readable ``message`` that views hand straight to
``django.contrib.messages`` (or to the chat socket) as the banner text.
"""

import logging
from contextlib import contextmanager

from django.db import DatabaseError

logger = logging.getLogger(__name__)


class SkillfolioError(Exception):
    """Base class for failures surfaced to the user as a banner."""
    default_message = "Something went wrong. Please try again."

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def __str__(self):
        return self.message


class AuthError(SkillfolioError):
    """Bad credentials, malformed email, weak password or duplicate account."""
    INVALID_EMAIL = 'invalid-email'
    WEAK_PASSWORD = 'weak-password'
    EMAIL_IN_USE = 'email-in-use'
    WRONG_PASSWORD = 'wrong-password'

    MESSAGES = {
        INVALID_EMAIL: "Please enter a valid email address.",
        WEAK_PASSWORD: "Password should be at least 6 characters long.",
        EMAIL_IN_USE: "This email is already registered. Please sign in instead.",
        WRONG_PASSWORD: "Invalid email or password.",
    }

    def __init__(self, code, message=None):
        self.code = code
        super().__init__(message or self.MESSAGES.get(code))


class NotFoundError(SkillfolioError):
    default_message = "The requested item was not found."


class ValidationError(SkillfolioError):
    """Missing form fields, oversized or wrong-type files, blank messages."""
    default_message = "Please fill in all fields."


class StoreError(SkillfolioError):
    default_message = "The server could not complete the request. Please try again."


class StorageError(StoreError):
    """Object store (uploaded files) failure."""
    default_message = "File storage is unavailable. Please try again."


class PermissionDeniedError(SkillfolioError):
    default_message = "You do not have permission to do that."


@contextmanager
def store_errors(message=None):
    """Re-raise database failures inside the block as ``StoreError``."""
    try:
        yield
    except DatabaseError as exc:
        logger.error("Store call failed: %s", exc)
        raise StoreError(message) from exc

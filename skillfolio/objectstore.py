"""
Object store for uploaded documents.

A thin layer over Django's storage API so the backend (local disk in
development, a hosted bucket in production) is a settings concern. Callers get
``StorageError`` instead of backend specific exceptions.
"""

import logging

from django.core.files.base import ContentFile, File
from django.core.files.storage import default_storage

from .errors import StorageError

logger = logging.getLogger(__name__)


def upload(path, content, content_type=None, storage=None, overwrite=False):
    """
    Store ``content`` (bytes or a file object) at ``path`` and return the
    stored path. An existing object at ``path`` is an error unless
    ``overwrite`` is set, in which case it is replaced.
    """
    storage = storage or default_storage
    if isinstance(content, (bytes, bytearray)):
        content = ContentFile(bytes(content))
    elif not isinstance(content, File):
        content = File(content)
    if content_type and not getattr(content, 'content_type', None):
        content.content_type = content_type

    try:
        if storage.exists(path):
            if not overwrite:
                raise StorageError(f"A file already exists at {path}.")
            storage.delete(path)
        stored = storage.save(path, content)
    except StorageError:
        raise
    except Exception as exc:
        logger.error("Upload to %s failed: %s", path, exc)
        raise StorageError() from exc

    logger.info("Stored %s", stored)
    return stored


def get_public_url(path, storage=None):
    storage = storage or default_storage
    try:
        return storage.url(path)
    except Exception as exc:
        logger.error("Could not resolve a URL for %s: %s", path, exc)
        raise StorageError() from exc


def remove(path, storage=None):
    storage = storage or default_storage
    try:
        storage.delete(path)
    except Exception as exc:
        logger.error("Removing %s failed: %s", path, exc)
        raise StorageError("Could not remove the stored file. Please try again.") from exc
    logger.info("Removed %s", path)

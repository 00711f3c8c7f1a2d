"""
Error taxonomy surfaced by the blog content layer.

Repositories translate every SQLAlchemy / botocore failure into one of
these, so callers never have to know which store sits underneath.
"""
from typing import Dict, Optional


class BlogError(Exception):
    """Base class for content-layer errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(BlogError):
    """Malformed or out-of-range input. Raised before any store call."""

    def __init__(self, message: str, errors: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.errors = errors or {}


class NotFoundError(BlogError):
    """Referenced post, tag or media record does not exist."""


class PermissionDeniedError(BlogError):
    """Caller is not the resource's author or uploader."""


class DuplicateKeyError(BlogError):
    """Unique constraint violation (post slug, tag name/slug)."""


class ForeignKeyViolationError(BlogError):
    """Referenced record does not exist at the store level."""


class StoreError(BlogError):
    """Generic persistence or network failure, carries the original message."""


class StorageError(StoreError):
    """Blob store (S3) failure."""

# review_browser/domain/errors.py

"""Exception types shared across the review browser."""

from __future__ import annotations


class ReviewAppError(Exception):
    """Base class for all review browser errors."""


class InvalidInputError(ReviewAppError, ValueError):
    """Raised when a value object or user input fails validation."""


class PersistenceError(ReviewAppError, RuntimeError):
    """Raised when the backing store cannot be read or written."""

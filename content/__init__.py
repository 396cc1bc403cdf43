"""Content layer for the German tutor.

Provides the content provider interface, its load errors, and a provider
that reads the catalog and lesson files from JSON on disk.
"""

from .base import (
    CatalogUnavailableError,
    ContentError,
    ContentProvider,
    LessonLoadError,
)
from .json_provider import JsonContentProvider

__all__ = [
    # Interface
    "ContentProvider",
    # Errors
    "ContentError",
    "CatalogUnavailableError",
    "LessonLoadError",
    # Implementations
    "JsonContentProvider",
]

"""Abstract content provider interface and load errors."""

from abc import ABC, abstractmethod

from models import Catalog, Lesson, LessonContent


class ContentError(Exception):
    """Content could not be loaded."""


class CatalogUnavailableError(ContentError):
    """The level catalog could not be loaded."""


class LessonLoadError(ContentError):
    """A lesson's content could not be loaded."""

    def __init__(self, lesson_id: str, message: str):
        super().__init__(f"Lesson {lesson_id}: {message}")
        self.lesson_id = lesson_id


class ContentProvider(ABC):
    """Source of levels, lessons and lesson content."""

    @abstractmethod
    def fetch_catalog(self) -> Catalog:
        """Load all levels with their lesson metadata.

        Returns:
            The catalog.

        Raises:
            CatalogUnavailableError: If the catalog cannot be read or parsed.
        """
        pass

    @abstractmethod
    def fetch_lesson_content(self, lesson: Lesson) -> LessonContent:
        """Load the content of a lesson.

        Args:
            lesson: Lesson metadata from the catalog.

        Returns:
            The lesson's summary and exercise sets.

        Raises:
            LessonLoadError: If the content cannot be read or parsed.
        """
        pass

"""Content provider backed by JSON files on disk."""

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from content.base import (
    CatalogUnavailableError,
    ContentProvider,
    LessonLoadError,
)
from logger import get_logger
from models import Catalog, Lesson, LessonContent

log = get_logger(__name__)


class JsonContentProvider(ContentProvider):
    """Reads ``index.json`` and per-lesson files from a data directory.

    Lesson files may wrap their content as ``{"content": {...}}`` (a full
    lesson record) or hold the content object directly.
    """

    def __init__(self, data_dir: Path, catalog_path: Path | None = None):
        self.data_dir = Path(data_dir)
        self.catalog_path = Path(catalog_path) if catalog_path else self.data_dir / "index.json"

    def _read_json(self, path: Path) -> Any:
        with open(path, encoding="utf-8") as f:
            return json.load(f)

    def resolve(self, reference: str) -> Path:
        """Resolve a lesson file reference against the data directory.

        Catalogs refer to lessons as ``./data/lessons/...`` whatever the
        directory is called on disk, so ``data/`` is dropped along with the
        directory's own name.
        """
        reference = reference.removeprefix("./")
        for prefix in ("data/", f"{self.data_dir.name}/"):
            reference = reference.removeprefix(prefix)
        return self.data_dir / reference

    def fetch_catalog(self) -> Catalog:
        path = self.catalog_path
        log.debug("Reading catalog from %s", path)
        try:
            return Catalog.model_validate(self._read_json(path))
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            raise CatalogUnavailableError(f"Could not load {path}: {e}") from e

    def fetch_lesson_content(self, lesson: Lesson) -> LessonContent:
        if lesson.content is not None:
            return lesson.content
        if not lesson.file:
            raise LessonLoadError(lesson.id, "no content and no file reference")

        path = self.resolve(lesson.file)
        log.debug("Reading lesson %s from %s", lesson.id, path)
        try:
            data = self._read_json(path)
            if isinstance(data, dict) and "content" in data:
                data = data["content"]
            return LessonContent.model_validate(data)
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            raise LessonLoadError(lesson.id, f"could not load {path}: {e}") from e

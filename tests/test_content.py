"""Tests for the JSON content provider."""

import json
import tomllib
from pathlib import Path

import pytest

from config import DATA_DIR
from content import CatalogUnavailableError, JsonContentProvider, LessonLoadError
from models import Lesson, LessonContent, SingleBlankExercise

PROJECT_ROOT = Path(__file__).resolve().parent.parent


class TestFetchCatalog:
    def test_reads_index(self, data_dir):
        catalog = JsonContentProvider(data_dir).fetch_catalog()
        assert [level.id for level in catalog.levels] == ["a1"]
        assert [lesson.id for lesson in catalog.levels[0].lessons] == ["l1", "missing"]
        assert catalog.levels[0].icon == "🎓"

    def test_missing_index(self, tmp_path):
        with pytest.raises(CatalogUnavailableError):
            JsonContentProvider(tmp_path).fetch_catalog()

    def test_malformed_json(self, tmp_path):
        (tmp_path / "index.json").write_text("{levels: [", encoding="utf-8")
        with pytest.raises(CatalogUnavailableError):
            JsonContentProvider(tmp_path).fetch_catalog()

    def test_wrong_shape(self, tmp_path):
        (tmp_path / "index.json").write_text(
            json.dumps({"levels": [{"name": "no id"}]}), encoding="utf-8"
        )
        with pytest.raises(CatalogUnavailableError):
            JsonContentProvider(tmp_path).fetch_catalog()

    def test_custom_catalog_file(self, data_dir):
        (data_dir / "index.json").rename(data_dir / "levels.json")
        catalog = JsonContentProvider(data_dir, data_dir / "levels.json").fetch_catalog()
        assert catalog.find_lesson("l1") is not None


class TestFetchLessonContent:
    def test_reads_lesson_file(self, data_dir, lesson_content):
        provider = JsonContentProvider(data_dir)
        lesson = provider.fetch_catalog().find_lesson("l1")
        assert provider.fetch_lesson_content(lesson) == lesson_content

    def test_missing_file(self, data_dir):
        provider = JsonContentProvider(data_dir)
        lesson = provider.fetch_catalog().find_lesson("missing")
        with pytest.raises(LessonLoadError) as exc_info:
            provider.fetch_lesson_content(lesson)
        assert exc_info.value.lesson_id == "missing"

    def test_unwraps_full_lesson_record(self, data_dir, lesson_content):
        record = {
            "id": "l3",
            "name": "Lektion 3",
            "content": json.loads(lesson_content.model_dump_json(by_alias=True)),
        }
        (data_dir / "lessons" / "l3.json").write_text(json.dumps(record), encoding="utf-8")
        lesson = Lesson(id="l3", name="Lektion 3", file="lessons/l3.json")
        assert JsonContentProvider(data_dir).fetch_lesson_content(lesson) == lesson_content

    def test_camel_case_keys(self, tmp_path):
        content = {
            "summary": {"vocabulary": [], "grammarTip": "<b>du</b> bist"},
            "exerciseBlocks": [
                {
                    "title": "Übung 1",
                    "exercises": [
                        {
                            "type": "single-blank",
                            "sentence": "Du ___ nett.",
                            "englishSentence": "You are nice.",
                            "options": ["bist", "bin"],
                            "correctAnswer": "bist",
                        }
                    ],
                }
            ],
            "exercises2": [
                {
                    "type": "sentence-scramble",
                    "englishSentence": "I am going home.",
                    "correctSentence": "Ich gehe nach Hause",
                    "scrambledWords": ["nach", "Ich", "Hause", "gehe"],
                }
            ],
        }
        (tmp_path / "l.json").write_text(json.dumps(content), encoding="utf-8")
        lesson = Lesson(id="l", name="L", file="l.json")
        loaded = JsonContentProvider(tmp_path).fetch_lesson_content(lesson)

        exercise = loaded.exercise_blocks[0].exercises[0]
        assert isinstance(exercise, SingleBlankExercise)
        assert exercise.correct_answer == "bist"
        assert loaded.summary.grammar_tip == "<b>du</b> bist"
        assert loaded.scramble_exercises[0].scrambled_words[0] == "nach"
        assert loaded.dialogue_exercises is None

    def test_unknown_exercise_type(self, tmp_path):
        content = {"exerciseBlocks": [{"title": "x", "exercises": [{"type": "essay"}]}]}
        (tmp_path / "l.json").write_text(json.dumps(content), encoding="utf-8")
        lesson = Lesson(id="l", name="L", file="l.json")
        with pytest.raises(LessonLoadError):
            JsonContentProvider(tmp_path).fetch_lesson_content(lesson)

    def test_inline_content_needs_no_file(self, tmp_path, lesson_content):
        lesson = Lesson(id="l", name="L", content=lesson_content)
        assert JsonContentProvider(tmp_path).fetch_lesson_content(lesson) is lesson_content

    def test_no_content_no_file(self, tmp_path):
        with pytest.raises(LessonLoadError):
            JsonContentProvider(tmp_path).fetch_lesson_content(Lesson(id="l", name="L"))


class TestResolve:
    @pytest.mark.parametrize(
        "reference",
        ["lessons/l1.json", "./lessons/l1.json", "./data/lessons/l1.json", "data/lessons/l1.json"],
    )
    def test_references_resolve_inside_data_dir(self, data_dir, reference):
        assert JsonContentProvider(data_dir).resolve(reference) == data_dir / "lessons" / "l1.json"

    def test_data_prefix_with_differently_named_dir(self, tmp_path, lesson_content):
        content_dir = tmp_path / "german-content"
        (content_dir / "lessons").mkdir(parents=True)
        (content_dir / "lessons" / "l1.json").write_text(
            lesson_content.model_dump_json(by_alias=True), encoding="utf-8"
        )
        provider = JsonContentProvider(content_dir)
        lesson = Lesson(id="l1", name="L", file="./data/lessons/l1.json")

        assert provider.resolve(lesson.file) == content_dir / "lessons" / "l1.json"
        assert provider.fetch_lesson_content(lesson) == lesson_content

    def test_own_name_prefix(self, tmp_path):
        provider = JsonContentProvider(tmp_path / "german-content")
        assert provider.resolve("german-content/l1.json") == tmp_path / "german-content" / "l1.json"


class TestBundledContent:
    """The lessons shipped with the package load cleanly."""

    def test_every_bundled_lesson_loads(self):
        provider = JsonContentProvider(DATA_DIR)
        catalog = provider.fetch_catalog()
        for level in catalog.levels:
            for lesson in level.lessons:
                assert isinstance(provider.fetch_lesson_content(lesson), LessonContent)

    def test_data_ships_with_content_package(self):
        with open(PROJECT_ROOT / "pyproject.toml", "rb") as f:
            setuptools = tomllib.load(f)["tool"]["setuptools"]
        assert "content" in setuptools["packages"]
        package_dir = PROJECT_ROOT / "content"
        assert DATA_DIR.resolve().parent == package_dir

        patterns = setuptools["package-data"]["content"]
        for path in DATA_DIR.resolve().rglob("*.json"):
            relative = path.relative_to(package_dir)
            assert any(relative.match(pattern) for pattern in patterns), relative

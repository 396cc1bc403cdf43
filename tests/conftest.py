"""Shared pytest fixtures for the German Tutor test suite."""

import json
import pytest

import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from content import ContentProvider, LessonLoadError
from models import (
    AgentTurn,
    Catalog,
    DialogueSimulationExercise,
    DoubleBlankExercise,
    ExerciseBlock,
    ImageAssociationExercise,
    Lesson,
    LessonContent,
    LessonSummary,
    Level,
    SentenceScrambleExercise,
    SingleBlankExercise,
    TripleBlankExercise,
    UserTurn,
    VocabularyItem,
)


@pytest.fixture
def single_blank() -> SingleBlankExercise:
    return SingleBlankExercise(
        sentence="Ich ___ müde.",
        english_sentence="I am tired.",
        hint="sein, first person",
        options=["bin", "bist", "ist"],
        correct_answer="bin",
    )


@pytest.fixture
def double_blank() -> DoubleBlankExercise:
    """The bin/Frau exercise used throughout the grading tests."""
    return DoubleBlankExercise(
        sentence="Ich ___(1)___ eine ___(2)___.",
        english_sentence="I am a woman.",
        options1=["bin", "bist"],
        correct_answer1="bin",
        options2=["Frau", "Mann"],
        correct_answer2="Frau",
    )


@pytest.fixture
def triple_blank() -> TripleBlankExercise:
    return TripleBlankExercise(
        sentence="___(1)___ heißt du? Ich ___(2)___ aus ___(3)___.",
        english_sentence="What is your name? I come from Berlin.",
        options1=["Wie", "Wo"],
        correct_answer1="Wie",
        options2=["komme", "kommst"],
        correct_answer2="komme",
        options3=["Berlin", "Deutsch"],
        correct_answer3="Berlin",
    )


@pytest.fixture
def scramble() -> SentenceScrambleExercise:
    return SentenceScrambleExercise(
        english_sentence="I am going home.",
        correct_sentence="Ich gehe nach Hause",
        scrambled_words=["Ich", "gehe", "nach", "Hause"],
    )


@pytest.fixture
def dialogue() -> DialogueSimulationExercise:
    return DialogueSimulationExercise(
        scenario="At the bakery",
        english_sentence="Good morning! - Good morning, two rolls please.",
        dialogue=[
            AgentTurn(line="Guten Morgen! Was möchten Sie?"),
            UserTurn(
                prompt="Order two rolls.",
                options=["Zwei Brötchen, bitte.", "Ich bin müde."],
                correct_answer="Zwei Brötchen, bitte.",
            ),
            AgentTurn(line="Sonst noch etwas?"),
            AgentTurn(line="Vielleicht einen Kaffee?"),
            UserTurn(
                prompt="Say no, thanks.",
                options=["Ja, gern.", "Nein, danke."],
                correct_answer="Nein, danke.",
            ),
        ],
    )


@pytest.fixture
def image() -> ImageAssociationExercise:
    return ImageAssociationExercise(
        image_url="images/frau.png",
        english_sentence="the woman",
        options=["die Frau", "der Mann"],
        correct_answer="die Frau",
    )


@pytest.fixture
def all_exercises(single_blank, double_blank, triple_blank, scramble, dialogue, image):
    """One exercise of every variant."""
    return [single_blank, double_blank, triple_blank, scramble, dialogue, image]


@pytest.fixture
def lesson_content(single_blank, double_blank, triple_blank, scramble, dialogue, image):
    return LessonContent(
        summary=LessonSummary(
            vocabulary=[VocabularyItem(german="die Frau", english="the woman")],
            grammar_tip="<strong>sein</strong>: ich bin",
        ),
        exercise_blocks=[
            ExerciseBlock(title="Übung 1a", exercises=[single_blank, double_blank]),
            ExerciseBlock(title="Übung 1b", exercises=[triple_blank]),
        ],
        scramble_exercises=[scramble],
        dialogue_exercises=[dialogue],
        image_exercises=[image],
    )


@pytest.fixture
def catalog() -> Catalog:
    return Catalog(
        levels=[
            Level(
                id="a1",
                name="A1",
                lessons=[
                    Lesson(id="l1", name="Lektion 1", file="lessons/l1.json"),
                    Lesson(id="l2", name="Lektion 2", file="lessons/l2.json"),
                ],
            ),
            Level(id="a2", name="A2", lessons=[]),
        ]
    )


class FakeProvider(ContentProvider):
    """In-memory provider that records every fetch."""

    def __init__(self, catalog: Catalog, lessons: dict[str, LessonContent]):
        self.catalog = catalog
        self.lessons = lessons
        self.fetched: list[str] = []

    def fetch_catalog(self) -> Catalog:
        return self.catalog

    def fetch_lesson_content(self, lesson: Lesson) -> LessonContent:
        self.fetched.append(lesson.id)
        if lesson.id not in self.lessons:
            raise LessonLoadError(lesson.id, "not found")
        return self.lessons[lesson.id]


@pytest.fixture
def fake_provider(catalog, lesson_content) -> FakeProvider:
    return FakeProvider(catalog, {"l1": lesson_content})


@pytest.fixture
def data_dir(tmp_path, lesson_content) -> Path:
    """A data directory with a catalog and one lesson file."""
    data = tmp_path / "data"
    (data / "lessons").mkdir(parents=True)
    index = {
        "levels": [
            {
                "id": "a1",
                "name": "A1",
                "description": "Anfänger",
                "icon": "🎓",
                "lessons": [
                    {
                        "id": "l1",
                        "name": "Lektion 1",
                        "description": "Hallo",
                        "icon": "👋",
                        "file": "./data/lessons/l1.json",
                    },
                    {
                        "id": "missing",
                        "name": "Lektion 2",
                        "file": "lessons/missing.json",
                    },
                ],
            }
        ]
    }
    (data / "index.json").write_text(json.dumps(index), encoding="utf-8")
    (data / "lessons" / "l1.json").write_text(
        lesson_content.model_dump_json(by_alias=True), encoding="utf-8"
    )
    return data

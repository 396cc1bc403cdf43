"""Content models for the German tutor.

Covers the content hierarchy (level -> lesson -> lesson content) and the
closed set of exercise variants. Every exercise carries a ``type`` tag and
the ``Exercise`` union is discriminated on it, so content JSON maps directly
onto these models.
"""

from typing import Annotated, Literal, NewType, Union

from pydantic import BaseModel, ConfigDict, Field

# Markup-bearing text (exercise sentences, grammar tips). Everything else
# in the content is plain text.
RichText = NewType("RichText", str)


class ContentModel(BaseModel):
    """Base for read-only content snapshots."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)


# ============================================================================
# Exercise variants
# ============================================================================


class SingleBlankExercise(ContentModel):
    """Sentence with one ``___`` blank and one option list."""

    type: Literal["single-blank"] = "single-blank"
    sentence: RichText
    english_sentence: str = Field(alias="englishSentence")
    hint: str = ""
    options: list[str]
    correct_answer: str | None = Field(default=None, alias="correctAnswer")


class DoubleBlankExercise(ContentModel):
    """Sentence with ``___(1)___`` and ``___(2)___`` blanks."""

    type: Literal["double-blank"] = "double-blank"
    sentence: RichText
    english_sentence: str = Field(alias="englishSentence")
    hint: str = ""
    options1: list[str]
    correct_answer1: str | None = Field(default=None, alias="correctAnswer1")
    options2: list[str]
    correct_answer2: str | None = Field(default=None, alias="correctAnswer2")


class TripleBlankExercise(ContentModel):
    """Sentence with three numbered blanks."""

    type: Literal["triple-blank"] = "triple-blank"
    sentence: RichText
    english_sentence: str = Field(alias="englishSentence")
    hint: str = ""
    options1: list[str]
    correct_answer1: str | None = Field(default=None, alias="correctAnswer1")
    options2: list[str]
    correct_answer2: str | None = Field(default=None, alias="correctAnswer2")
    options3: list[str]
    correct_answer3: str | None = Field(default=None, alias="correctAnswer3")


class SentenceScrambleExercise(ContentModel):
    """Build the correct sentence from a bag of scrambled words."""

    type: Literal["sentence-scramble"] = "sentence-scramble"
    english_sentence: str = Field(alias="englishSentence")
    correct_sentence: str = Field(alias="correctSentence")
    scrambled_words: list[str] = Field(alias="scrambledWords")


class AgentTurn(ContentModel):
    """A static line spoken by the other party."""

    speaker: Literal["agent"] = "agent"
    line: str


class UserTurn(ContentModel):
    """A learner turn: pick the right reply from the options."""

    speaker: Literal["user"] = "user"
    prompt: str = ""
    options: list[str]
    correct_answer: str | None = Field(default=None, alias="correctAnswer")


DialogueTurn = Annotated[Union[AgentTurn, UserTurn], Field(discriminator="speaker")]


class DialogueSimulationExercise(ContentModel):
    """Multi-turn dialogue; only user turns are answered."""

    type: Literal["dialogue-simulation"] = "dialogue-simulation"
    scenario: str
    english_sentence: str = Field(default="", alias="englishSentence")
    dialogue: list[DialogueTurn]

    @property
    def user_turns(self) -> list[UserTurn]:
        """User turns in their original dialogue order."""
        return [turn for turn in self.dialogue if isinstance(turn, UserTurn)]


class ImageAssociationExercise(ContentModel):
    """Pick the word that matches a picture."""

    type: Literal["image-association"] = "image-association"
    image_url: str = Field(default="", alias="imageUrl")
    english_sentence: str = Field(alias="englishSentence")
    options: list[str]
    correct_answer: str | None = Field(default=None, alias="correctAnswer")


BlankExercise = Annotated[
    Union[SingleBlankExercise, DoubleBlankExercise, TripleBlankExercise],
    Field(discriminator="type"),
]

Exercise = Annotated[
    Union[
        SingleBlankExercise,
        DoubleBlankExercise,
        TripleBlankExercise,
        SentenceScrambleExercise,
        DialogueSimulationExercise,
        ImageAssociationExercise,
    ],
    Field(discriminator="type"),
]

# Concrete classes, for isinstance checks and annotations.
ExerciseType = Union[
    SingleBlankExercise,
    DoubleBlankExercise,
    TripleBlankExercise,
    SentenceScrambleExercise,
    DialogueSimulationExercise,
    ImageAssociationExercise,
]


# ============================================================================
# Lesson content
# ============================================================================


class VocabularyItem(ContentModel):
    german: str
    english: str


class PhraseItem(ContentModel):
    german: str
    english: str


class LessonSummary(ContentModel):
    """Vocabulary, key phrases and the grammar tip of a lesson."""

    vocabulary: list[VocabularyItem] = Field(default_factory=list)
    phrases: list[PhraseItem] = Field(default_factory=list)
    grammar_tip: RichText = Field(default=RichText(""), alias="grammarTip")


class ExerciseBlock(ContentModel):
    """A named group of fill-in-the-blank exercises."""

    title: str
    exercises: list[BlankExercise] = Field(default_factory=list)


class LessonContent(ContentModel):
    summary: LessonSummary = Field(default_factory=LessonSummary)
    exercise_blocks: list[ExerciseBlock] = Field(
        default_factory=list, alias="exerciseBlocks"
    )
    scramble_exercises: list[SentenceScrambleExercise] | None = Field(
        default=None, alias="exercises2"
    )
    dialogue_exercises: list[DialogueSimulationExercise] | None = Field(
        default=None, alias="exercises3"
    )
    image_exercises: list[ImageAssociationExercise] | None = Field(
        default=None, alias="exercises4"
    )


class Lesson(ContentModel):
    """Lesson metadata; content is inline or behind a file reference."""

    id: str
    name: str
    description: str = ""
    icon: str = ""
    file: str | None = None
    content: LessonContent | None = None


class Level(ContentModel):
    id: str
    name: str
    description: str = ""
    icon: str = ""
    lessons: list[Lesson] = Field(default_factory=list)

    def get_lesson(self, lesson_id: str) -> Lesson | None:
        """Find a lesson of this level by ID."""
        for lesson in self.lessons:
            if lesson.id == lesson_id:
                return lesson
        return None


class Catalog(ContentModel):
    """All levels, loaded once at startup."""

    levels: list[Level] = Field(default_factory=list)

    def get_level(self, level_id: str) -> Level | None:
        """Find a level by ID."""
        for level in self.levels:
            if level.id == level_id:
                return level
        return None

    def find_lesson(self, lesson_id: str) -> Lesson | None:
        """Find a lesson by ID across all levels."""
        for level in self.levels:
            lesson = level.get_lesson(lesson_id)
            if lesson is not None:
                return lesson
        return None

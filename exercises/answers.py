"""Learner answers and the mutators that build them up.

Each exercise in the active set owns one answer whose shape follows the
exercise variant:

- single-blank / image-association: ``ChoiceAnswer``
- double-blank / triple-blank: ``SlotsAnswer`` with 2 or 3 slots
- sentence-scramble: ``WordOrderAnswer`` (the sentence built so far)
- dialogue-simulation: ``DialogueAnswer`` with one slot per user turn

Answers are immutable; every mutator returns a new answer. The word bank of
a scramble exercise is never stored, it is derived from the scrambled bag
minus the words already placed.
"""

from enum import Enum
from typing import Annotated, Literal, Sequence, Union, assert_never

from pydantic import BaseModel, ConfigDict, Field

from models import (
    DialogueSimulationExercise,
    DoubleBlankExercise,
    ExerciseType,
    ImageAssociationExercise,
    SentenceScrambleExercise,
    SingleBlankExercise,
    TripleBlankExercise,
)


class ChoiceAnswer(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["choice"] = "choice"
    choice: str | None = None


class SlotsAnswer(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["slots"] = "slots"
    slots: tuple[str | None, ...]


class WordOrderAnswer(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["words"] = "words"
    words: tuple[str, ...] = ()


class DialogueAnswer(BaseModel):
    """Choices indexed by user-turn order, not by dialogue position."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["dialogue"] = "dialogue"
    slots: tuple[str | None, ...]


Answer = Annotated[
    Union[ChoiceAnswer, SlotsAnswer, WordOrderAnswer, DialogueAnswer],
    Field(discriminator="kind"),
]

AnswerType = Union[ChoiceAnswer, SlotsAnswer, WordOrderAnswer, DialogueAnswer]


class WordSource(str, Enum):
    """Where a scramble word is moved from."""

    BANK = "bank"
    SENTENCE = "sentence"


def blank_count(exercise: ExerciseType) -> int:
    """Number of independently answered slots of an exercise."""
    if isinstance(exercise, (SingleBlankExercise, ImageAssociationExercise)):
        return 1
    elif isinstance(exercise, DoubleBlankExercise):
        return 2
    elif isinstance(exercise, TripleBlankExercise):
        return 3
    elif isinstance(exercise, SentenceScrambleExercise):
        return len(exercise.scrambled_words)
    elif isinstance(exercise, DialogueSimulationExercise):
        return len(exercise.user_turns)
    else:
        assert_never(exercise)


def empty_answer(exercise: ExerciseType) -> AnswerType:
    """Return the fully unset answer shaped for the exercise."""
    if isinstance(exercise, (SingleBlankExercise, ImageAssociationExercise)):
        return ChoiceAnswer()
    elif isinstance(exercise, (DoubleBlankExercise, TripleBlankExercise)):
        return SlotsAnswer(slots=(None,) * blank_count(exercise))
    elif isinstance(exercise, SentenceScrambleExercise):
        return WordOrderAnswer()
    elif isinstance(exercise, DialogueSimulationExercise):
        return DialogueAnswer(slots=(None,) * blank_count(exercise))
    else:
        assert_never(exercise)


def initialize_answers(exercises: Sequence[ExerciseType]) -> tuple[AnswerType, ...]:
    """Build one empty answer per exercise, in exercise order."""
    return tuple(empty_answer(exercise) for exercise in exercises)


def _replace_slot(
    slots: tuple[str | None, ...], index: int, value: str
) -> tuple[str | None, ...]:
    if index < 0 or index >= len(slots):
        raise IndexError(f"Slot index {index} out of range for {len(slots)} slots")
    return slots[:index] + (value,) + slots[index + 1 :]


def set_choice(
    exercise: ExerciseType,
    answer: AnswerType,
    value: str,
    blank_index: int | None = None,
) -> AnswerType:
    """Record a picked option.

    Args:
        exercise: The exercise being answered.
        answer: Its current answer.
        value: The picked option.
        blank_index: Blank number (0-based) for double/triple blanks, or the
            user-turn index for dialogues. Ignored for single choices.

    Returns:
        The updated answer. Other slots are left untouched.

    Raises:
        IndexError: If ``blank_index`` is missing or out of range.
        TypeError: For sentence-scramble exercises, which take words instead.
    """
    if isinstance(exercise, (SingleBlankExercise, ImageAssociationExercise)):
        return ChoiceAnswer(choice=value)
    elif isinstance(exercise, (DoubleBlankExercise, TripleBlankExercise)):
        if blank_index is None:
            raise IndexError("A blank index is required for multi-blank exercises")
        if not isinstance(answer, SlotsAnswer):
            answer = empty_answer(exercise)
        return SlotsAnswer(slots=_replace_slot(answer.slots, blank_index, value))
    elif isinstance(exercise, DialogueSimulationExercise):
        if blank_index is None:
            raise IndexError("A user-turn index is required for dialogues")
        if not isinstance(answer, DialogueAnswer):
            answer = empty_answer(exercise)
        return DialogueAnswer(slots=_replace_slot(answer.slots, blank_index, value))
    elif isinstance(exercise, SentenceScrambleExercise):
        raise TypeError("Sentence-scramble answers are built with move_word")
    else:
        assert_never(exercise)


def word_bank(exercise: SentenceScrambleExercise, answer: AnswerType) -> list[str]:
    """Words still available to place, in scramble order.

    Each placed word removes one occurrence from the bag, so duplicates
    stay independently placeable.
    """
    available = list(exercise.scrambled_words)
    placed = answer.words if isinstance(answer, WordOrderAnswer) else ()
    for word in placed:
        if word in available:
            available.remove(word)
    return available


def move_word(
    exercise: ExerciseType,
    answer: AnswerType,
    word: str,
    source: WordSource,
    position: int | None = None,
) -> WordOrderAnswer:
    """Move a scramble word between the bank and the built sentence.

    From the bank the word is appended to the sentence. From the sentence the
    word at ``position`` is removed and returns to the bank.

    Raises:
        TypeError: If the exercise is not a sentence-scramble.
        ValueError: If the word is not in the bank.
        IndexError: If ``position`` is missing, out of range, or does not
            hold ``word``.
    """
    if not isinstance(exercise, SentenceScrambleExercise):
        raise TypeError(f"Cannot move words in a {exercise.type} exercise")

    words = answer.words if isinstance(answer, WordOrderAnswer) else ()

    if source == WordSource.BANK:
        if word not in word_bank(exercise, answer):
            raise ValueError(f"Word {word!r} is not in the word bank")
        return WordOrderAnswer(words=words + (word,))

    if position is None or position < 0 or position >= len(words):
        raise IndexError(f"Word position {position} out of range")
    if words[position] != word:
        raise IndexError(f"Position {position} holds {words[position]!r}, not {word!r}")
    return WordOrderAnswer(words=words[:position] + words[position + 1 :])

"""Grading engine.

Compares learner answers with answer keys. Grading is pure: it never
touches the answers it is given and returns the same report for the same
input. Content defects (a missing key, a key that is not among the offered
options, an answer of the wrong shape) make an exercise ungradable, which
means it is simply never counted correct.
"""

from enum import Enum
from typing import Sequence, assert_never

from pydantic import BaseModel, ConfigDict

from exercises.answers import (
    AnswerType,
    ChoiceAnswer,
    DialogueAnswer,
    SlotsAnswer,
    WordOrderAnswer,
)
from exercises.completeness import is_answer_complete
from models import (
    DialogueSimulationExercise,
    DoubleBlankExercise,
    ExerciseType,
    ImageAssociationExercise,
    SentenceScrambleExercise,
    SingleBlankExercise,
    TripleBlankExercise,
)


class ExerciseResult(str, Enum):
    CORRECT = "correct"
    INCORRECT = "incorrect"
    INCOMPLETE = "incomplete"


class OptionMark(str, Enum):
    """How an option button (or built sentence) is rendered."""

    NEUTRAL = ""
    SELECTED = "selected"
    CORRECT = "correct"
    INCORRECT = "incorrect"


class GradeReport(BaseModel):
    model_config = ConfigDict(frozen=True)

    score: int
    results: tuple[ExerciseResult, ...]

    @property
    def total(self) -> int:
        return len(self.results)


def answer_keys(exercise: ExerciseType) -> tuple[str | None, ...]:
    """Answer key per slot, in slot order.

    Dialogue keys follow user-turn order; agent turns have no key. A
    sentence-scramble has a single key, the canonical sentence.
    """
    if isinstance(exercise, (SingleBlankExercise, ImageAssociationExercise)):
        return (exercise.correct_answer,)
    elif isinstance(exercise, DoubleBlankExercise):
        return (exercise.correct_answer1, exercise.correct_answer2)
    elif isinstance(exercise, TripleBlankExercise):
        return (
            exercise.correct_answer1,
            exercise.correct_answer2,
            exercise.correct_answer3,
        )
    elif isinstance(exercise, SentenceScrambleExercise):
        return (exercise.correct_sentence,)
    elif isinstance(exercise, DialogueSimulationExercise):
        return tuple(turn.correct_answer for turn in exercise.user_turns)
    else:
        assert_never(exercise)


def _slots_match(
    slots: tuple[str | None, ...], keys: tuple[str | None, ...]
) -> bool:
    if not keys or len(slots) != len(keys):
        return False
    return all(key is not None and slot == key for slot, key in zip(slots, keys))


def is_correct(exercise: ExerciseType, answer: AnswerType | None) -> bool:
    """Whether an answer is fully correct for its exercise."""
    keys = answer_keys(exercise)
    if isinstance(exercise, (SingleBlankExercise, ImageAssociationExercise)):
        return isinstance(answer, ChoiceAnswer) and _slots_match(
            (answer.choice,), keys
        )
    elif isinstance(exercise, (DoubleBlankExercise, TripleBlankExercise)):
        return isinstance(answer, SlotsAnswer) and _slots_match(answer.slots, keys)
    elif isinstance(exercise, SentenceScrambleExercise):
        # Exact string comparison: case, spacing and punctuation all count.
        return (
            isinstance(answer, WordOrderAnswer)
            and bool(answer.words)
            and " ".join(answer.words) == exercise.correct_sentence
        )
    elif isinstance(exercise, DialogueSimulationExercise):
        return isinstance(answer, DialogueAnswer) and _slots_match(answer.slots, keys)
    else:
        assert_never(exercise)


def grade_exercise(exercise: ExerciseType, answer: AnswerType | None) -> ExerciseResult:
    if is_correct(exercise, answer):
        return ExerciseResult.CORRECT
    if not is_answer_complete(exercise, answer):
        return ExerciseResult.INCOMPLETE
    return ExerciseResult.INCORRECT


def grade(
    exercises: Sequence[ExerciseType], answers: Sequence[AnswerType]
) -> GradeReport:
    """Grade a whole exercise set.

    Args:
        exercises: The active exercise set.
        answers: One answer per exercise, by position. Missing answers are
            graded as incomplete.

    Returns:
        GradeReport with the number of fully correct exercises and a result
        per exercise.
    """
    results = tuple(
        grade_exercise(exercise, answers[i] if i < len(answers) else None)
        for i, exercise in enumerate(exercises)
    )
    score = sum(1 for result in results if result == ExerciseResult.CORRECT)
    return GradeReport(score=score, results=results)


def selected_value(answer: AnswerType | None, blank_index: int | None = None) -> str | None:
    """The learner's current value at a position, or None if unset."""
    if isinstance(answer, ChoiceAnswer):
        return answer.choice
    if isinstance(answer, (SlotsAnswer, DialogueAnswer)):
        if blank_index is None or not 0 <= blank_index < len(answer.slots):
            return None
        return answer.slots[blank_index]
    return None


def mark_option(
    exercise: ExerciseType,
    answer: AnswerType | None,
    option: str,
    checked: bool,
    blank_index: int | None = None,
) -> OptionMark:
    """Annotate one option for rendering.

    Before checking an option is SELECTED when it is the current answer at
    its position. After checking the key is always CORRECT (selected or not),
    a wrong selection is INCORRECT, and everything else is NEUTRAL.
    """
    selected = selected_value(answer, blank_index)
    if not checked:
        return OptionMark.SELECTED if selected == option else OptionMark.NEUTRAL

    keys = answer_keys(exercise)
    position = blank_index or 0
    key = keys[position] if position < len(keys) else None
    if key is not None and option == key:
        return OptionMark.CORRECT
    if selected == option:
        return OptionMark.INCORRECT
    return OptionMark.NEUTRAL


def mark_sentence(
    exercise: SentenceScrambleExercise, answer: AnswerType | None, checked: bool
) -> OptionMark:
    """Annotate the built sentence of a scramble exercise."""
    if not checked:
        return OptionMark.NEUTRAL
    return OptionMark.CORRECT if is_correct(exercise, answer) else OptionMark.INCORRECT

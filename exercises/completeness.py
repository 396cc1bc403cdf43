"""Completeness gate: may the learner check this exercise set yet?"""

from typing import Sequence, assert_never

from exercises.answers import (
    AnswerType,
    ChoiceAnswer,
    DialogueAnswer,
    SlotsAnswer,
    WordOrderAnswer,
    blank_count,
)
from models import (
    DialogueSimulationExercise,
    DoubleBlankExercise,
    ExerciseType,
    ImageAssociationExercise,
    SentenceScrambleExercise,
    SingleBlankExercise,
    TripleBlankExercise,
)


def _slots_filled(slots: tuple[str | None, ...], expected: int) -> bool:
    return len(slots) == expected and all(slot is not None for slot in slots)


def is_answer_complete(exercise: ExerciseType, answer: AnswerType | None) -> bool:
    """Whether an answer is fully formed. Correctness is not considered."""
    if isinstance(exercise, (SingleBlankExercise, ImageAssociationExercise)):
        return isinstance(answer, ChoiceAnswer) and bool(answer.choice)
    elif isinstance(exercise, (DoubleBlankExercise, TripleBlankExercise)):
        return isinstance(answer, SlotsAnswer) and _slots_filled(
            answer.slots, blank_count(exercise)
        )
    elif isinstance(exercise, SentenceScrambleExercise):
        return isinstance(answer, WordOrderAnswer) and len(answer.words) == len(
            exercise.scrambled_words
        )
    elif isinstance(exercise, DialogueSimulationExercise):
        return isinstance(answer, DialogueAnswer) and _slots_filled(
            answer.slots, blank_count(exercise)
        )
    else:
        assert_never(exercise)


def is_complete(
    exercises: Sequence[ExerciseType], answers: Sequence[AnswerType]
) -> bool:
    """True when every exercise has a complete answer.

    An empty exercise set is never complete, so it cannot be checked.
    """
    if not exercises or len(answers) != len(exercises):
        return False
    return all(
        is_answer_complete(exercise, answer)
        for exercise, answer in zip(exercises, answers)
    )

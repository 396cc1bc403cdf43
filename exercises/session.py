"""Practice session: the state of one active exercise set.

A session bundles the exercises of the active practice view with the
learner's answers, the checked flag, the score and the per-exercise
translation/hint toggles. Sessions are immutable; every operation returns a
new session, so a view transition can swap the whole thing atomically.
"""

from typing import Sequence

from pydantic import BaseModel, ConfigDict

from exercises.answers import (
    Answer,
    WordOrderAnswer,
    WordSource,
    initialize_answers,
    move_word,
    set_choice,
    word_bank,
)
from exercises.completeness import is_complete
from exercises.grading import (
    ExerciseResult,
    OptionMark,
    grade,
    mark_option,
    mark_sentence,
)
from logger import get_logger
from models import Exercise, SentenceScrambleExercise

log = get_logger(__name__)


class PracticeSession(BaseModel):
    model_config = ConfigDict(frozen=True)

    exercises: tuple[Exercise, ...] = ()
    answers: tuple[Answer, ...] = ()
    checked: bool = False
    score: int = 0
    results: tuple[ExerciseResult, ...] = ()
    visible_translations: frozenset[int] = frozenset()
    visible_hints: frozenset[int] = frozenset()

    @classmethod
    def start(cls, exercises: Sequence[Exercise]) -> "PracticeSession":
        """Create a fresh session with every answer unset."""
        exercises = tuple(exercises)
        return cls(exercises=exercises, answers=initialize_answers(exercises))

    @property
    def total(self) -> int:
        return len(self.exercises)

    @property
    def can_check(self) -> bool:
        """Whether the check action is enabled."""
        return not self.checked and is_complete(self.exercises, self.answers)

    def _exercise_index(self, exercise_index: int) -> int:
        if exercise_index < 0 or exercise_index >= len(self.exercises):
            raise IndexError(
                f"Exercise index {exercise_index} out of range "
                f"for {len(self.exercises)} exercises"
            )
        return exercise_index

    def _with_answer(self, exercise_index: int, answer) -> "PracticeSession":
        answers = list(self.answers)
        answers[exercise_index] = answer
        return self.model_copy(update={"answers": tuple(answers)})

    def choose(
        self, exercise_index: int, value: str, blank_index: int | None = None
    ) -> "PracticeSession":
        """Pick an option for a blank, image, or dialogue user turn."""
        i = self._exercise_index(exercise_index)
        if self.checked:
            return self
        answer = set_choice(self.exercises[i], self.answers[i], value, blank_index)
        return self._with_answer(i, answer)

    def place_word(self, exercise_index: int, word: str) -> "PracticeSession":
        """Append a word from the bank to the built sentence."""
        i = self._exercise_index(exercise_index)
        if self.checked:
            return self
        answer = move_word(self.exercises[i], self.answers[i], word, WordSource.BANK)
        return self._with_answer(i, answer)

    def remove_word(self, exercise_index: int, position: int) -> "PracticeSession":
        """Send the word at ``position`` of the built sentence back to the bank."""
        i = self._exercise_index(exercise_index)
        if self.checked:
            return self
        answer = self.answers[i]
        words = answer.words if isinstance(answer, WordOrderAnswer) else ()
        if position < 0 or position >= len(words):
            raise IndexError(f"Word position {position} out of range")
        answer = move_word(
            self.exercises[i], answer, words[position], WordSource.SENTENCE, position
        )
        return self._with_answer(i, answer)

    def word_bank(self, exercise_index: int) -> list[str]:
        i = self._exercise_index(exercise_index)
        exercise = self.exercises[i]
        if not isinstance(exercise, SentenceScrambleExercise):
            return []
        return word_bank(exercise, self.answers[i])

    def check(self) -> "PracticeSession":
        """Grade the set and lock the answers.

        Does nothing unless every exercise is complete.
        """
        if not self.can_check:
            return self
        report = grade(self.exercises, self.answers)
        log.info("Checked practice set: %d/%d correct", report.score, report.total)
        return self.model_copy(
            update={"checked": True, "score": report.score, "results": report.results}
        )

    def reset(self) -> "PracticeSession":
        """Start the same exercise set over."""
        return PracticeSession.start(self.exercises)

    def toggle_translation(self, exercise_index: int) -> "PracticeSession":
        i = self._exercise_index(exercise_index)
        return self.model_copy(
            update={"visible_translations": self.visible_translations ^ {i}}
        )

    def toggle_hint(self, exercise_index: int) -> "PracticeSession":
        i = self._exercise_index(exercise_index)
        return self.model_copy(update={"visible_hints": self.visible_hints ^ {i}})

    def option_mark(
        self, exercise_index: int, option: str, blank_index: int | None = None
    ) -> OptionMark:
        i = self._exercise_index(exercise_index)
        return mark_option(
            self.exercises[i], self.answers[i], option, self.checked, blank_index
        )

    def sentence_mark(self, exercise_index: int) -> OptionMark:
        i = self._exercise_index(exercise_index)
        exercise = self.exercises[i]
        if not isinstance(exercise, SentenceScrambleExercise):
            return OptionMark.NEUTRAL
        return mark_sentence(exercise, self.answers[i], self.checked)

"""Exercise engine for the German tutor.

This package holds everything that works on an active exercise set and
knows nothing about navigation or rendering.

Architecture:
- Answers are immutable shapes per exercise variant, built by mutators
- The completeness gate decides when a set may be checked
- The grading engine scores answers against answer keys and marks options
- PracticeSession bundles one set with its answers and check state

Answer models:
- ChoiceAnswer, SlotsAnswer, WordOrderAnswer, DialogueAnswer

Text helpers:
- split_sentence, speech_text, speakable_text, markup_to_text
"""

from exercises.answers import (
    Answer,
    AnswerType,
    ChoiceAnswer,
    DialogueAnswer,
    SlotsAnswer,
    WordOrderAnswer,
    WordSource,
    blank_count,
    empty_answer,
    initialize_answers,
    move_word,
    set_choice,
    word_bank,
)
from exercises.completeness import is_answer_complete, is_complete
from exercises.grading import (
    ExerciseResult,
    GradeReport,
    OptionMark,
    answer_keys,
    grade,
    grade_exercise,
    is_correct,
    mark_option,
    mark_sentence,
)
from exercises.session import PracticeSession
from exercises.text import (
    SentenceSegment,
    markup_to_text,
    speakable_text,
    speech_text,
    split_sentence,
)

__all__ = [
    # Answers
    "Answer",
    "AnswerType",
    "ChoiceAnswer",
    "SlotsAnswer",
    "WordOrderAnswer",
    "DialogueAnswer",
    "WordSource",
    "blank_count",
    "empty_answer",
    "initialize_answers",
    "set_choice",
    "move_word",
    "word_bank",
    # Completeness gate
    "is_answer_complete",
    "is_complete",
    # Grading
    "ExerciseResult",
    "GradeReport",
    "OptionMark",
    "answer_keys",
    "grade",
    "grade_exercise",
    "is_correct",
    "mark_option",
    "mark_sentence",
    # Session
    "PracticeSession",
    # Text
    "SentenceSegment",
    "split_sentence",
    "speech_text",
    "speakable_text",
    "markup_to_text",
]

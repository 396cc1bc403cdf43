"""German Tutor UI Module - terminal interface for the exercise engine."""

from ui.app import TutorUI
from ui.commands import CommandError, Help, Quit, Speak, parse_command
from ui.components import (
    Breadcrumbs,
    ExercisePanel,
    PracticeMenu,
    QuizControls,
    SelectionGrid,
    SummaryPanel,
)
from ui.speech import SpeechSink
from ui.styles import (
    FLAG_RED,
    FLAG_GOLD,
    SUCCESS_GREEN,
    ERROR_RED,
    INFO_BLUE,
    MUTED_GRAY,
)

__all__ = [
    "TutorUI",
    "SpeechSink",
    "parse_command",
    "CommandError",
    "Quit",
    "Help",
    "Speak",
    "Breadcrumbs",
    "ExercisePanel",
    "PracticeMenu",
    "QuizControls",
    "SelectionGrid",
    "SummaryPanel",
    "FLAG_RED",
    "FLAG_GOLD",
    "SUCCESS_GREEN",
    "ERROR_RED",
    "INFO_BLUE",
    "MUTED_GRAY",
]

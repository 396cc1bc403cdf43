"""Sentence and markup helpers.

Blank markers in sentences are ``___`` for a single blank and
``___(1)___``, ``___(2)___``, ``___(3)___`` for numbered blanks. Sentences
and grammar tips may carry a small amount of HTML markup; everything else
in the content is plain text.
"""

import re
from html.parser import HTMLParser

from pydantic import BaseModel, ConfigDict
from rich.style import Style
from rich.text import Text

from models import (
    AgentTurn,
    DialogueSimulationExercise,
    DoubleBlankExercise,
    ExerciseType,
    RichText,
    SingleBlankExercise,
    TripleBlankExercise,
)

NUMBERED_BLANK = re.compile(r"___\((\d)\)___")
SINGLE_BLANK = "___"
UNDERLINE_TAG = re.compile(r"</?u>")


class SentenceSegment(BaseModel):
    """Either a run of sentence text or a blank marker."""

    model_config = ConfigDict(frozen=True)

    text: RichText = RichText("")
    blank: int | None = None  # 1-based blank number

    @property
    def is_blank(self) -> bool:
        return self.blank is not None


def split_sentence(exercise: ExerciseType) -> list[SentenceSegment]:
    """Split a blank exercise's sentence into text and blank segments.

    Returns an empty list for exercises that have no blank sentence.
    """
    if isinstance(exercise, SingleBlankExercise):
        before, marker, after = exercise.sentence.partition(SINGLE_BLANK)
        segments = [SentenceSegment(text=RichText(before))]
        if marker:
            segments.append(SentenceSegment(blank=1))
            segments.append(SentenceSegment(text=RichText(after)))
        return [seg for seg in segments if seg.is_blank or seg.text]

    if isinstance(exercise, (DoubleBlankExercise, TripleBlankExercise)):
        segments = []
        position = 0
        for match in NUMBERED_BLANK.finditer(exercise.sentence):
            if match.start() > position:
                segments.append(
                    SentenceSegment(text=RichText(exercise.sentence[position : match.start()]))
                )
            segments.append(SentenceSegment(blank=int(match.group(1))))
            position = match.end()
        if position < len(exercise.sentence):
            segments.append(SentenceSegment(text=RichText(exercise.sentence[position:])))
        return segments

    return []


def speech_text(sentence: str) -> str:
    """Strip blank markers and underline tags before speaking a sentence."""
    cleaned = NUMBERED_BLANK.sub("", sentence)
    cleaned = cleaned.replace(SINGLE_BLANK, "", 1)
    cleaned = UNDERLINE_TAG.sub("", cleaned)
    return " ".join(cleaned.split())


class _MarkupParser(HTMLParser):
    """Collects styled text runs from the markup allowed in content."""

    STYLES = {
        "b": Style(bold=True),
        "strong": Style(bold=True),
        "i": Style(italic=True),
        "em": Style(italic=True),
        "u": Style(underline=True),
    }

    def __init__(self, base_style: Style | str = ""):
        super().__init__(convert_charrefs=True)
        self.text = Text(style=base_style)
        self._open: list[str] = []

    def _current_style(self) -> Style:
        style = Style()
        for tag in self._open:
            style += self.STYLES[tag]
        return style

    def handle_starttag(self, tag, attrs):
        if tag in self.STYLES:
            self._open.append(tag)
        elif tag == "br":
            self.text.append("\n")
        elif tag == "li":
            self.text.append("\n  • ")
        elif tag == "p" and self.text.plain:
            self.text.append("\n")

    def handle_endtag(self, tag):
        if tag in self.STYLES and tag in self._open:
            # Drop the innermost matching tag.
            index = len(self._open) - 1 - self._open[::-1].index(tag)
            del self._open[index]
        elif tag in ("p", "ul", "ol"):
            self.text.append("\n")

    def handle_data(self, data):
        self.text.append(data, self._current_style())


def markup_to_text(markup: RichText | str, base_style: Style | str = "") -> Text:
    """Render content markup as a styled rich Text.

    Unknown tags are dropped; only their text content is kept.
    """
    parser = _MarkupParser(base_style)
    parser.feed(markup)
    parser.close()
    return parser.text


def speakable_text(exercise: ExerciseType) -> str | None:
    """German text the speech sink may read aloud for an exercise.

    Blank sentences are read without their blanks; dialogues read the other
    party's lines. Other exercises would give the answer away.
    """
    if isinstance(exercise, (SingleBlankExercise, DoubleBlankExercise, TripleBlankExercise)):
        return speech_text(exercise.sentence)
    if isinstance(exercise, DialogueSimulationExercise):
        return " ".join(turn.line for turn in exercise.dialogue if isinstance(turn, AgentTurn))
    return None

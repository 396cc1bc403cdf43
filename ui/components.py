from rich.text import Text
from rich.panel import Panel
from rich.table import Table
from rich.style import Style
from rich.align import Align
from rich.console import Group
from rich import box
from typing import List, Optional

from exercises.answers import WordOrderAnswer
from exercises.session import PracticeSession
from exercises.text import markup_to_text, split_sentence
from exercises.grading import ExerciseResult, OptionMark, selected_value
from models import (
    AgentTurn,
    DialogueSimulationExercise,
    DoubleBlankExercise,
    ImageAssociationExercise,
    LessonSummary,
    SentenceScrambleExercise,
    SingleBlankExercise,
    TripleBlankExercise,
)
from navigation import MenuEntry
from ui.styles import (
    FLAG_RED,
    FLAG_GOLD,
    SUCCESS_GREEN,
    ERROR_RED,
    INFO_BLUE,
    MUTED_GRAY,
    TEXT_WHITE,
    create_score_header,
    get_mark_style,
    get_mark_symbol,
)


def option_label(index: int) -> str:
    """Letter label for an option (A, B, C, ...)."""
    return chr(65 + index)


class Breadcrumbs:
    """Trail of the current location, e.g. ``Levels › A1 › Lektion 1``."""

    def __init__(self, trail: List[str]):
        self.trail = trail

    def render(self) -> Text:
        text = Text()
        for i, part in enumerate(self.trail):
            if i:
                text.append(" › ", Style(color=MUTED_GRAY))
            is_last = i == len(self.trail) - 1
            text.append(
                part,
                Style(color=TEXT_WHITE, bold=True) if is_last else Style(color=INFO_BLUE),
            )
        return text

    def __rich__(self) -> Text:
        return self.render()


class SelectionGrid:
    """Numbered cards for picking a level or a lesson."""

    def __init__(self, title: str, cards: List[tuple[str, str, str]]):
        self.title = title
        self.cards = cards  # (icon, name, description)

    def render(self) -> Panel:
        table = Table(
            show_header=False,
            border_style=MUTED_GRAY,
            box=box.SIMPLE,
            expand=True,
        )
        table.add_column("#", style=Style(color=FLAG_GOLD, bold=True), width=4)
        table.add_column("", width=3)
        table.add_column("Name", style=Style(color=FLAG_RED, bold=True))
        table.add_column("Description", style=Style(color=MUTED_GRAY))

        for i, (icon, name, description) in enumerate(self.cards, 1):
            table.add_row(f"{i}.", icon, name, description)

        return Panel(
            table,
            title=self.title,
            border_style=FLAG_RED,
            box=box.HEAVY,
            padding=(1, 2),
        )

    def __rich__(self) -> Panel:
        return self.render()


class PracticeMenu:
    """The practice choices of a lesson."""

    def __init__(self, entries: List[MenuEntry]):
        self.entries = entries

    def render(self) -> Panel:
        grid = SelectionGrid(
            "Wähle eine Übung",
            [(entry.icon, entry.title, entry.subtitle) for entry in self.entries],
        )
        return grid.render()

    def __rich__(self) -> Panel:
        return self.render()


class SummaryPanel:
    """Vocabulary table, key phrases and the grammar tip of a lesson."""

    def __init__(self, summary: LessonSummary):
        self.summary = summary

    def render(self) -> Panel:
        vocabulary = Table(
            title="Wortschatz (Vocabulary)",
            show_header=True,
            header_style=Style(color=FLAG_RED, bold=True),
            border_style=MUTED_GRAY,
            row_styles=[Style(), Style(dim=True)],
            box=box.HEAVY,
        )
        vocabulary.add_column("Deutsch", style=Style(color=FLAG_GOLD, bold=True))
        vocabulary.add_column("English", style=Style(color=TEXT_WHITE))
        for item in self.summary.vocabulary:
            vocabulary.add_row(item.german, item.english)

        phrases = Text()
        phrases.append("Wichtige Sätze (Key Phrases)\n", Style(color=FLAG_RED, bold=True))
        for phrase in self.summary.phrases:
            phrases.append(f"  {phrase.german}\n", Style(color=FLAG_GOLD, bold=True))
            phrases.append(f"  {phrase.english}\n", Style(color=MUTED_GRAY, italic=True))

        tip = Text()
        tip.append("Grammatik-Tipp (Grammar Tip)\n", Style(color=FLAG_RED, bold=True))
        grammar_tip = markup_to_text(self.summary.grammar_tip)
        grammar_tip.rstrip()
        tip.append_text(grammar_tip)

        return Panel(
            Group(vocabulary, Text(), phrases, tip),
            title="Übung 0: Zusammenfassung (Practice 0: Summary)",
            border_style=FLAG_RED,
            box=box.HEAVY,
            padding=(1, 2),
        )

    def __rich__(self) -> Panel:
        return self.render()


class ExercisePanel:
    """One exercise of the active set, with its options marked."""

    def __init__(self, session: PracticeSession, index: int):
        self.session = session
        self.index = index
        self.exercise = session.exercises[index]
        self.answer = session.answers[index]

    def _options_line(
        self, options: List[str], blank_index: Optional[int] = None
    ) -> Text:
        line = Text("    ")
        for i, option in enumerate(options):
            mark = self.session.option_mark(self.index, option, blank_index)
            line.append(f"{option_label(i)}. ", Style(color=FLAG_GOLD, bold=True))
            line.append(get_mark_symbol(mark), get_mark_style(mark))
            line.append(option, get_mark_style(mark))
            line.append("   ")
        return line

    def _sentence(self) -> Text:
        text = Text("  ")
        for segment in split_sentence(self.exercise):
            if segment.is_blank:
                filled = selected_value(
                    self.answer,
                    None if isinstance(self.exercise, SingleBlankExercise)
                    else segment.blank - 1,
                )
                label = f"({segment.blank})" if filled is None else f"[{filled}]"
                text.append(label, Style(color=INFO_BLUE, bold=True))
            else:
                text.append_text(markup_to_text(segment.text))
        return text

    def _blank_body(self, content: Text) -> None:
        content.append_text(self._sentence())
        content.append("\n")
        exercise = self.exercise
        if isinstance(exercise, SingleBlankExercise):
            content.append_text(self._options_line(exercise.options))
            content.append("\n")
            return
        groups = [exercise.options1, exercise.options2]
        if isinstance(exercise, TripleBlankExercise):
            groups.append(exercise.options3)
        for blank, options in enumerate(groups):
            content.append(f"  Lücke ({blank + 1})\n", Style(color=MUTED_GRAY))
            content.append_text(self._options_line(options, blank))
            content.append("\n")

    def _scramble_body(self, content: Text) -> None:
        exercise = self.exercise
        words = self.answer.words if isinstance(self.answer, WordOrderAnswer) else ()
        mark = self.session.sentence_mark(self.index)

        content.append(f"  {exercise.english_sentence}\n", Style(color=MUTED_GRAY, italic=True))
        content.append("  Satz: ", Style(color=MUTED_GRAY))
        if not words and not self.session.checked:
            content.append("Build your sentence here...", Style(color=MUTED_GRAY, dim=True))
        for position, word in enumerate(words, 1):
            style = get_mark_style(mark) if mark != OptionMark.NEUTRAL else Style(color=TEXT_WHITE)
            content.append(f"{position}:", Style(color=MUTED_GRAY))
            content.append(f"{word} ", style)
        content.append("\n")

        content.append("  Wörter: ", Style(color=MUTED_GRAY))
        for i, word in enumerate(self.session.word_bank(self.index)):
            content.append(f"{option_label(i)}. ", Style(color=FLAG_GOLD, bold=True))
            content.append(f"{word}   ", Style(color=TEXT_WHITE))
        content.append("\n")

        if mark == OptionMark.INCORRECT:
            content.append("  Correct: ", Style(color=SUCCESS_GREEN, bold=True))
            content.append(f"{exercise.correct_sentence}\n", Style(color=SUCCESS_GREEN))

    def _dialogue_body(self, content: Text) -> None:
        exercise = self.exercise
        content.append("  Scenario: ", Style(color=MUTED_GRAY, bold=True))
        content.append(f"{exercise.scenario}\n", Style(color=MUTED_GRAY, italic=True))
        user_turn = 0
        for turn in exercise.dialogue:
            if isinstance(turn, AgentTurn):
                content.append("  🤖 ", Style())
                content.append(f"{turn.line}\n", Style(color=FLAG_GOLD))
                continue
            chosen = selected_value(self.answer, user_turn)
            content.append(f"  🧑 ({user_turn + 1}) ", Style(color=INFO_BLUE, bold=True))
            if turn.prompt:
                content.append(f"{turn.prompt} ", Style(color=MUTED_GRAY, italic=True))
            content.append(f"{chosen or '...'}\n", Style(color=TEXT_WHITE))
            content.append_text(self._options_line(turn.options, user_turn))
            content.append("\n")
            user_turn += 1

    def _image_body(self, content: Text) -> None:
        exercise = self.exercise
        if exercise.image_url:
            content.append("  🖼  ", Style())
            content.append(exercise.image_url, Style(color=INFO_BLUE, underline=True))
        else:
            content.append("  [ ? ]", Style(color=MUTED_GRAY, bold=True))
        content.append("\n")
        content.append_text(self._options_line(exercise.options))
        content.append("\n")

    def render(self) -> Panel:
        content = Text()
        exercise = self.exercise

        if self.index in self.session.visible_translations and exercise.english_sentence:
            content.append(f"  {exercise.english_sentence}\n", Style(color=MUTED_GRAY, italic=True))
        hint = getattr(exercise, "hint", "")
        if self.index in self.session.visible_hints and hint:
            content.append("  Hint: ", Style(color=FLAG_GOLD, bold=True))
            content.append(f"{hint}\n", Style(color=TEXT_WHITE))

        if isinstance(exercise, (SingleBlankExercise, DoubleBlankExercise, TripleBlankExercise)):
            self._blank_body(content)
        elif isinstance(exercise, SentenceScrambleExercise):
            self._scramble_body(content)
        elif isinstance(exercise, DialogueSimulationExercise):
            self._dialogue_body(content)
        elif isinstance(exercise, ImageAssociationExercise):
            self._image_body(content)

        border = MUTED_GRAY
        if self.session.checked and self.index < len(self.session.results):
            border = SUCCESS_GREEN if self.session.results[self.index] == ExerciseResult.CORRECT else ERROR_RED

        return Panel(
            Align.left(content),
            title=f"{self.index + 1}",
            title_align="left",
            border_style=border,
            box=box.ROUNDED,
        )

    def __rich__(self) -> Panel:
        return self.render()


class QuizControls:
    """Check button state before checking, the score afterwards."""

    def __init__(self, session: PracticeSession):
        self.session = session

    def render(self) -> Text:
        if self.session.checked:
            text = create_score_header(self.session.score, self.session.total)
            text.append("   [r] Try Again", Style(color=MUTED_GRAY))
            return text
        if self.session.can_check:
            return Text("[c] Check Answers", Style(color=SUCCESS_GREEN, bold=True))
        return Text(
            "Check Answers (answer every exercise first)",
            Style(color=MUTED_GRAY, dim=True),
        )

    def __rich__(self) -> Text:
        return self.render()

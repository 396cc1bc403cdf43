"""Turns typed learner input into navigation actions.

Input is validated here, against what the current view actually shows, so
that the state machine only ever receives in-range indices.

Commands:
    <n>            pick level / lesson / practice entry n
    <n> <X>        pick option X for exercise n (or place bank word X)
    <n>.<b> <X>    pick option X for blank (or dialogue reply) b of exercise n
    <n> -<p>       take word p of exercise n's sentence back to the bank
    t <n> / h <n>  toggle translation / hint of exercise n
    s <n>          speak exercise n
    c / r          check answers / try again
    b / l          back one step / back to the level list
    ? / q          help / quit
"""

import re

from pydantic import BaseModel, ConfigDict

from exercises.answers import WordOrderAnswer
from models import (
    DialogueSimulationExercise,
    DoubleBlankExercise,
    ImageAssociationExercise,
    SentenceScrambleExercise,
    SingleBlankExercise,
    TripleBlankExercise,
)
from navigation import (
    Action,
    CheckAnswers,
    ChooseOption,
    GoToLessonMenu,
    GoToLessons,
    GoToLevels,
    LessonMenuView,
    LessonsView,
    LevelsView,
    NavigationState,
    PlaceWord,
    RemoveWord,
    ResetPractice,
    SelectLesson,
    SelectLevel,
    ToggleHint,
    ToggleTranslation,
    menu_entries,
)

ANSWER_PATTERN = re.compile(r"^(\d+)(?:\.(\d+))?\s+(-?\w+)$")
TOGGLE_PATTERN = re.compile(r"^([ths])\s*(\d+)$")


class CommandError(ValueError):
    """Input that does not make sense in the current view."""


class Quit(BaseModel):
    model_config = ConfigDict(frozen=True)


class Help(BaseModel):
    model_config = ConfigDict(frozen=True)


class Speak(BaseModel):
    model_config = ConfigDict(frozen=True)

    exercise_index: int


def _pick(number: str, count: int, what: str) -> int:
    index = int(number) - 1
    if index < 0 or index >= count:
        raise CommandError(f"Choose a {what} between 1 and {count}")
    return index


def _letter(token: str, count: int) -> int:
    token = token.upper()
    if len(token) == 1 and token.isalpha():
        index = ord(token) - ord("A")
    elif token.isdigit():
        index = int(token) - 1
    else:
        raise CommandError(f"Not an option: {token}")
    if index < 0 or index >= count:
        raise CommandError(f"Option {token} does not exist")
    return index


def _back(state: NavigationState) -> Action:
    view = state.view
    if isinstance(view, LevelsView):
        raise CommandError("Already at the level list")
    if isinstance(view, LessonsView):
        return GoToLevels()
    if isinstance(view, LessonMenuView):
        return GoToLessons()
    return GoToLessonMenu()


def _answer_command(state: NavigationState, match: re.Match) -> Action:
    session = state.session
    i = _pick(match.group(1), session.total, "exercise")
    exercise = session.exercises[i]
    blank, token = match.group(2), match.group(3)

    if isinstance(exercise, SentenceScrambleExercise):
        if token.startswith("-"):
            answer = session.answers[i]
            words = answer.words if isinstance(answer, WordOrderAnswer) else ()
            if not words:
                raise CommandError("The sentence is still empty")
            return RemoveWord(exercise_index=i, position=_pick(token[1:], len(words), "word"))
        bank = session.word_bank(i)
        if not bank:
            raise CommandError("Every word has been placed")
        return PlaceWord(exercise_index=i, word=bank[_letter(token, len(bank))])

    if isinstance(exercise, (SingleBlankExercise, ImageAssociationExercise)):
        options = exercise.options
        return ChooseOption(exercise_index=i, value=options[_letter(token, len(options))])

    if isinstance(exercise, (DoubleBlankExercise, TripleBlankExercise)):
        groups = [exercise.options1, exercise.options2]
        if isinstance(exercise, TripleBlankExercise):
            groups.append(exercise.options3)
        if blank is None:
            raise CommandError(f"Say which blank, e.g. {i + 1}.1 A")
        b = _pick(blank, len(groups), "blank")
        value = groups[b][_letter(token, len(groups[b]))]
        return ChooseOption(exercise_index=i, value=value, blank_index=b)

    if isinstance(exercise, DialogueSimulationExercise):
        turns = exercise.user_turns
        if blank is None:
            raise CommandError(f"Say which reply, e.g. {i + 1}.1 A")
        t = _pick(blank, len(turns), "reply")
        value = turns[t].options[_letter(token, len(turns[t].options))]
        return ChooseOption(exercise_index=i, value=value, blank_index=t)

    raise CommandError("This exercise cannot be answered")


def parse_command(state: NavigationState, raw: str):
    """Parse one line of input.

    Returns:
        A navigation action, or one of ``Quit``, ``Help``, ``Speak``.

    Raises:
        CommandError: If the input is not valid in the current view.
    """
    text = raw.strip().lower()
    if not text:
        raise CommandError("Type a command, or ? for help")
    if text == "q":
        return Quit()
    if text == "?":
        return Help()
    if text == "b":
        return _back(state)
    if text == "l":
        if isinstance(state.view, LevelsView):
            raise CommandError("Already at the level list")
        return GoToLevels()

    view = state.view
    if isinstance(view, LevelsView):
        if not text.isdigit() or state.catalog is None:
            raise CommandError("Choose a level by number")
        levels = state.catalog.levels
        return SelectLevel(level_id=levels[_pick(text, len(levels), "level")].id)

    if isinstance(view, LessonsView):
        lessons = state.level.lessons if state.level else []
        if not text.isdigit():
            raise CommandError("Choose a lesson by number")
        return SelectLesson(lesson_id=lessons[_pick(text, len(lessons), "lesson")].id)

    if isinstance(view, LessonMenuView):
        entries = menu_entries(state)
        if not entries:
            raise CommandError("The lesson is not available yet")
        if not text.isdigit():
            raise CommandError("Choose an exercise by number")
        return entries[_pick(text, len(entries), "exercise")].action

    session = state.session
    if session is None:
        raise CommandError("Nothing to answer here")
    if text == "c":
        if not session.can_check:
            raise CommandError("Answer every exercise before checking")
        return CheckAnswers()
    if text == "r":
        return ResetPractice()

    toggle = TOGGLE_PATTERN.match(text)
    if toggle:
        i = _pick(toggle.group(2), session.total, "exercise")
        if toggle.group(1) == "t":
            return ToggleTranslation(exercise_index=i)
        if toggle.group(1) == "h":
            return ToggleHint(exercise_index=i)
        return Speak(exercise_index=i)

    answer = ANSWER_PATTERN.match(text)
    if answer:
        if session.checked:
            raise CommandError("Answers are locked; press r to try again")
        return _answer_command(state, answer)

    raise CommandError(f"Unknown command: {raw.strip()}")

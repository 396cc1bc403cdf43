"""
Navigation state machine for the tutor.

The learner moves through levels -> lessons -> a lesson's practice menu ->
one practice view. All state lives in an immutable ``NavigationState`` and
every transition is a pure ``reduce(state, action) -> state`` call. The
controller (see ``main.py``) performs lesson fetches: after each transition
it asks ``requested_fetches`` which lessons became pending, fetches them, and
dispatches ``LessonLoaded`` or ``LessonLoadFailed``.
"""

from enum import Enum
from typing import Annotated, Callable, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from exercises.session import PracticeSession
from logger import get_logger
from models import Catalog, Exercise, Lesson, LessonContent, Level

log = get_logger(__name__)


class NavigationError(ValueError):
    """An action that is not valid in the current state."""


class FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)


# ============================================================================
# Views
# ============================================================================


class LevelsView(FrozenModel):
    kind: Literal["levels"] = "levels"


class LessonsView(FrozenModel):
    kind: Literal["lessons"] = "lessons"
    level_id: str


class LessonMenuView(FrozenModel):
    kind: Literal["lesson-menu"] = "lesson-menu"
    level_id: str
    lesson_id: str


class SummaryView(FrozenModel):
    kind: Literal["summary"] = "summary"
    level_id: str
    lesson_id: str


class PracticeBlockView(FrozenModel):
    kind: Literal["practice-block"] = "practice-block"
    level_id: str
    lesson_id: str
    block_index: int


class ScrambleView(FrozenModel):
    kind: Literal["scramble"] = "scramble"
    level_id: str
    lesson_id: str


class DialogueView(FrozenModel):
    kind: Literal["dialogue"] = "dialogue"
    level_id: str
    lesson_id: str


class ImageAssociationView(FrozenModel):
    kind: Literal["image-association"] = "image-association"
    level_id: str
    lesson_id: str


View = Annotated[
    Union[
        LevelsView,
        LessonsView,
        LessonMenuView,
        SummaryView,
        PracticeBlockView,
        ScrambleView,
        DialogueView,
        ImageAssociationView,
    ],
    Field(discriminator="kind"),
]

# Views below the lesson menu.
LESSON_VIEWS = (
    SummaryView,
    PracticeBlockView,
    ScrambleView,
    DialogueView,
    ImageAssociationView,
)
# Views that own an exercise set.
EXERCISE_VIEWS = (PracticeBlockView, ScrambleView, DialogueView, ImageAssociationView)


class CatalogStatus(str, Enum):
    LOADING = "loading"
    READY = "ready"
    UNAVAILABLE = "unavailable"


# ============================================================================
# Actions
# ============================================================================


class CatalogLoaded(FrozenModel):
    kind: Literal["catalog-loaded"] = "catalog-loaded"
    catalog: Catalog


class CatalogFailed(FrozenModel):
    kind: Literal["catalog-failed"] = "catalog-failed"
    message: str


class SelectLevel(FrozenModel):
    kind: Literal["select-level"] = "select-level"
    level_id: str


class SelectLesson(FrozenModel):
    kind: Literal["select-lesson"] = "select-lesson"
    lesson_id: str


class ShowSummary(FrozenModel):
    kind: Literal["show-summary"] = "show-summary"


class SelectPracticeBlock(FrozenModel):
    kind: Literal["select-practice-block"] = "select-practice-block"
    block_index: int


class SelectScramble(FrozenModel):
    kind: Literal["select-scramble"] = "select-scramble"


class SelectDialogue(FrozenModel):
    kind: Literal["select-dialogue"] = "select-dialogue"


class SelectImageAssociation(FrozenModel):
    kind: Literal["select-image-association"] = "select-image-association"


class GoToLevels(FrozenModel):
    kind: Literal["go-to-levels"] = "go-to-levels"


class GoToLessons(FrozenModel):
    kind: Literal["go-to-lessons"] = "go-to-lessons"


class GoToLessonMenu(FrozenModel):
    kind: Literal["go-to-lesson-menu"] = "go-to-lesson-menu"


class LessonLoaded(FrozenModel):
    kind: Literal["lesson-loaded"] = "lesson-loaded"
    lesson_id: str
    content: LessonContent


class LessonLoadFailed(FrozenModel):
    kind: Literal["lesson-load-failed"] = "lesson-load-failed"
    lesson_id: str
    message: str


class ChooseOption(FrozenModel):
    kind: Literal["choose-option"] = "choose-option"
    exercise_index: int
    value: str
    blank_index: int | None = None


class PlaceWord(FrozenModel):
    kind: Literal["place-word"] = "place-word"
    exercise_index: int
    word: str


class RemoveWord(FrozenModel):
    kind: Literal["remove-word"] = "remove-word"
    exercise_index: int
    position: int


class CheckAnswers(FrozenModel):
    kind: Literal["check-answers"] = "check-answers"


class ResetPractice(FrozenModel):
    kind: Literal["reset-practice"] = "reset-practice"


class ToggleTranslation(FrozenModel):
    kind: Literal["toggle-translation"] = "toggle-translation"
    exercise_index: int


class ToggleHint(FrozenModel):
    kind: Literal["toggle-hint"] = "toggle-hint"
    exercise_index: int


Action = Union[
    CatalogLoaded,
    CatalogFailed,
    SelectLevel,
    SelectLesson,
    ShowSummary,
    SelectPracticeBlock,
    SelectScramble,
    SelectDialogue,
    SelectImageAssociation,
    GoToLevels,
    GoToLessons,
    GoToLessonMenu,
    LessonLoaded,
    LessonLoadFailed,
    ChooseOption,
    PlaceWord,
    RemoveWord,
    CheckAnswers,
    ResetPractice,
    ToggleTranslation,
    ToggleHint,
]


# ============================================================================
# State
# ============================================================================


class NavigationState(FrozenModel):
    catalog_status: CatalogStatus = CatalogStatus.LOADING
    catalog: Catalog | None = None
    catalog_error: str | None = None
    view: View = Field(default_factory=LevelsView)
    # Lesson content cache, keyed by lesson ID. Entries are never replaced.
    lessons: dict[str, LessonContent] = Field(default_factory=dict)
    pending: frozenset[str] = frozenset()
    failed: dict[str, str] = Field(default_factory=dict)
    session: PracticeSession | None = None

    @property
    def level(self) -> Level | None:
        level_id = getattr(self.view, "level_id", None)
        if level_id is None or self.catalog is None:
            return None
        return self.catalog.get_level(level_id)

    @property
    def lesson(self) -> Lesson | None:
        lesson_id = getattr(self.view, "lesson_id", None)
        level = self.level
        if lesson_id is None or level is None:
            return None
        return level.get_lesson(lesson_id)

    @property
    def content(self) -> LessonContent | None:
        """Loaded content of the active lesson, if any."""
        lesson_id = getattr(self.view, "lesson_id", None)
        if lesson_id is None:
            return None
        return self.lessons.get(lesson_id)

    @property
    def is_loading(self) -> bool:
        """The active lesson's content is being fetched."""
        lesson_id = getattr(self.view, "lesson_id", None)
        return lesson_id is not None and lesson_id in self.pending

    @property
    def load_error(self) -> str | None:
        """Why the active lesson's content could not be loaded."""
        lesson_id = getattr(self.view, "lesson_id", None)
        if lesson_id is None or lesson_id in self.lessons:
            return None
        return self.failed.get(lesson_id)


def exercises_for_view(content: LessonContent, view) -> list[Exercise] | None:
    """The exercise set a view practices, or None if the lesson lacks it."""
    if isinstance(view, PracticeBlockView):
        if 0 <= view.block_index < len(content.exercise_blocks):
            return list(content.exercise_blocks[view.block_index].exercises)
        return None
    if isinstance(view, ScrambleView):
        return content.scramble_exercises
    if isinstance(view, DialogueView):
        return content.dialogue_exercises
    if isinstance(view, ImageAssociationView):
        return content.image_exercises
    return None


# ============================================================================
# Transitions
# ============================================================================


def _require_view(state: NavigationState, *view_types) -> None:
    if not isinstance(state.view, view_types):
        names = ", ".join(t.__name__ for t in view_types)
        raise NavigationError(
            f"Action not valid in {type(state.view).__name__} (expected {names})"
        )


def _request_lesson(state: NavigationState, lesson: Lesson) -> dict:
    """State updates that make sure a lesson's content is (being) loaded."""
    if lesson.id in state.lessons or lesson.id in state.pending:
        return {}
    if lesson.content is not None:
        return {"lessons": {**state.lessons, lesson.id: lesson.content}}
    failed = {k: v for k, v in state.failed.items() if k != lesson.id}
    return {"pending": state.pending | {lesson.id}, "failed": failed}


def _catalog_loaded(state: NavigationState, action: CatalogLoaded) -> NavigationState:
    if state.catalog_status != CatalogStatus.LOADING:
        raise NavigationError("The catalog is only loaded once")
    lessons = dict(state.lessons)
    for level in action.catalog.levels:
        for lesson in level.lessons:
            if lesson.content is not None:
                lessons.setdefault(lesson.id, lesson.content)
    log.info("Catalog ready with %d levels", len(action.catalog.levels))
    return state.model_copy(
        update={
            "catalog_status": CatalogStatus.READY,
            "catalog": action.catalog,
            "lessons": lessons,
        }
    )


def _catalog_failed(state: NavigationState, action: CatalogFailed) -> NavigationState:
    if state.catalog_status != CatalogStatus.LOADING:
        raise NavigationError("The catalog is only loaded once")
    log.error("Catalog unavailable: %s", action.message)
    return state.model_copy(
        update={
            "catalog_status": CatalogStatus.UNAVAILABLE,
            "catalog_error": action.message,
        }
    )


def _select_level(state: NavigationState, action: SelectLevel) -> NavigationState:
    _require_view(state, LevelsView)
    if state.catalog is None or state.catalog.get_level(action.level_id) is None:
        raise NavigationError(f"Unknown level: {action.level_id}")
    return state.model_copy(
        update={"view": LessonsView(level_id=action.level_id), "session": None}
    )


def _select_lesson(state: NavigationState, action: SelectLesson) -> NavigationState:
    _require_view(state, LessonsView)
    level = state.level
    lesson = level.get_lesson(action.lesson_id) if level else None
    if lesson is None:
        raise NavigationError(f"Unknown lesson: {action.lesson_id}")
    update = _request_lesson(state, lesson)
    update["view"] = LessonMenuView(level_id=level.id, lesson_id=lesson.id)
    update["session"] = None
    return state.model_copy(update=update)


def _enter_lesson_view(state: NavigationState, view) -> NavigationState:
    """Enter a view below the lesson menu, starting a fresh exercise set."""
    _require_view(state, LessonMenuView)
    update = _request_lesson(state, state.lesson)
    update["view"] = view
    update["session"] = None

    content = update.get("lessons", state.lessons).get(view.lesson_id)
    if content is not None and isinstance(view, EXERCISE_VIEWS):
        exercises = exercises_for_view(content, view)
        if exercises is None:
            raise NavigationError(f"Lesson {view.lesson_id} has no {view.kind} set")
        update["session"] = PracticeSession.start(exercises)
        log.info("Entered %s with %d exercises", view.kind, len(exercises))
    return state.model_copy(update=update)


def _lesson_view_ids(state: NavigationState) -> dict:
    view = state.view
    return {"level_id": view.level_id, "lesson_id": view.lesson_id}


def _show_summary(state: NavigationState, action: ShowSummary) -> NavigationState:
    _require_view(state, LessonMenuView)
    return _enter_lesson_view(state, SummaryView(**_lesson_view_ids(state)))


def _select_practice_block(
    state: NavigationState, action: SelectPracticeBlock
) -> NavigationState:
    _require_view(state, LessonMenuView)
    view = PracticeBlockView(**_lesson_view_ids(state), block_index=action.block_index)
    return _enter_lesson_view(state, view)


def _select_scramble(state: NavigationState, action: SelectScramble) -> NavigationState:
    _require_view(state, LessonMenuView)
    return _enter_lesson_view(state, ScrambleView(**_lesson_view_ids(state)))


def _select_dialogue(state: NavigationState, action: SelectDialogue) -> NavigationState:
    _require_view(state, LessonMenuView)
    return _enter_lesson_view(state, DialogueView(**_lesson_view_ids(state)))


def _select_image_association(
    state: NavigationState, action: SelectImageAssociation
) -> NavigationState:
    _require_view(state, LessonMenuView)
    return _enter_lesson_view(state, ImageAssociationView(**_lesson_view_ids(state)))


def _go_to_levels(state: NavigationState, action: GoToLevels) -> NavigationState:
    _require_view(state, LessonsView, LessonMenuView, *LESSON_VIEWS)
    return state.model_copy(update={"view": LevelsView(), "session": None})


def _go_to_lessons(state: NavigationState, action: GoToLessons) -> NavigationState:
    _require_view(state, LessonMenuView, *LESSON_VIEWS)
    view = LessonsView(level_id=state.view.level_id)
    return state.model_copy(update={"view": view, "session": None})


def _go_to_lesson_menu(
    state: NavigationState, action: GoToLessonMenu
) -> NavigationState:
    _require_view(state, *LESSON_VIEWS)
    view = LessonMenuView(**_lesson_view_ids(state))
    return state.model_copy(update={"view": view, "session": None})


def _lesson_loaded(state: NavigationState, action: LessonLoaded) -> NavigationState:
    pending = state.pending - {action.lesson_id}
    if action.lesson_id in state.lessons:
        log.debug("Lesson %s already cached, keeping first result", action.lesson_id)
        return state.model_copy(update={"pending": pending})

    log.info("Lesson %s loaded", action.lesson_id)
    update = {
        "pending": pending,
        "lessons": {**state.lessons, action.lesson_id: action.content},
        "failed": {k: v for k, v in state.failed.items() if k != action.lesson_id},
    }

    view = state.view
    if getattr(view, "lesson_id", None) != action.lesson_id:
        log.debug("Lesson %s is not the active view, caching only", action.lesson_id)
    elif isinstance(view, EXERCISE_VIEWS) and state.session is None:
        exercises = exercises_for_view(action.content, view)
        if exercises is None:
            log.warning(
                "Lesson %s has no %s set, returning to menu", action.lesson_id, view.kind
            )
            update["view"] = LessonMenuView(**_lesson_view_ids(state))
        else:
            update["session"] = PracticeSession.start(exercises)
    return state.model_copy(update=update)


def _lesson_load_failed(
    state: NavigationState, action: LessonLoadFailed
) -> NavigationState:
    pending = state.pending - {action.lesson_id}
    if action.lesson_id in state.lessons:
        return state.model_copy(update={"pending": pending})
    log.error("Lesson %s failed to load: %s", action.lesson_id, action.message)
    return state.model_copy(
        update={
            "pending": pending,
            "failed": {**state.failed, action.lesson_id: action.message},
        }
    )


def _require_session(state: NavigationState) -> PracticeSession:
    if state.session is None:
        raise NavigationError(f"No active exercise set in {type(state.view).__name__}")
    return state.session


def _with_session(state: NavigationState, session: PracticeSession) -> NavigationState:
    if session is state.session:
        return state
    return state.model_copy(update={"session": session})


def _choose_option(state: NavigationState, action: ChooseOption) -> NavigationState:
    session = _require_session(state)
    return _with_session(
        state, session.choose(action.exercise_index, action.value, action.blank_index)
    )


def _place_word(state: NavigationState, action: PlaceWord) -> NavigationState:
    session = _require_session(state)
    return _with_session(state, session.place_word(action.exercise_index, action.word))


def _remove_word(state: NavigationState, action: RemoveWord) -> NavigationState:
    session = _require_session(state)
    return _with_session(
        state, session.remove_word(action.exercise_index, action.position)
    )


def _check_answers(state: NavigationState, action: CheckAnswers) -> NavigationState:
    return _with_session(state, _require_session(state).check())


def _reset_practice(state: NavigationState, action: ResetPractice) -> NavigationState:
    log.info("Practice set reset")
    return _with_session(state, _require_session(state).reset())


def _toggle_translation(
    state: NavigationState, action: ToggleTranslation
) -> NavigationState:
    session = _require_session(state)
    return _with_session(state, session.toggle_translation(action.exercise_index))


def _toggle_hint(state: NavigationState, action: ToggleHint) -> NavigationState:
    session = _require_session(state)
    return _with_session(state, session.toggle_hint(action.exercise_index))


# Registry of transition functions, one per action type
TRANSITIONS: dict[type, Callable[[NavigationState, Action], NavigationState]] = {
    CatalogLoaded: _catalog_loaded,
    CatalogFailed: _catalog_failed,
    SelectLevel: _select_level,
    SelectLesson: _select_lesson,
    ShowSummary: _show_summary,
    SelectPracticeBlock: _select_practice_block,
    SelectScramble: _select_scramble,
    SelectDialogue: _select_dialogue,
    SelectImageAssociation: _select_image_association,
    GoToLevels: _go_to_levels,
    GoToLessons: _go_to_lessons,
    GoToLessonMenu: _go_to_lesson_menu,
    LessonLoaded: _lesson_loaded,
    LessonLoadFailed: _lesson_load_failed,
    ChooseOption: _choose_option,
    PlaceWord: _place_word,
    RemoveWord: _remove_word,
    CheckAnswers: _check_answers,
    ResetPractice: _reset_practice,
    ToggleTranslation: _toggle_translation,
    ToggleHint: _toggle_hint,
}


def reduce(state: NavigationState, action: Action) -> NavigationState:
    """Apply one action and return the resulting state.

    Raises:
        NavigationError: If the action is not valid in the current state.
    """
    transition = TRANSITIONS.get(type(action))
    if transition is None:
        raise NavigationError(f"Unknown action: {type(action).__name__}")
    return transition(state, action)


def requested_fetches(before: NavigationState, after: NavigationState) -> list[str]:
    """Lesson IDs that a transition asked to fetch."""
    return sorted(after.pending - before.pending)


# ============================================================================
# Derived display data
# ============================================================================

PRACTICE_NAMES = {
    "summary": "Summary",
    "practice-block": "Fill in the Blanks",
    "scramble": "Build Sentences",
    "dialogue": "Dialogue Simulation",
    "image-association": "Picture Puzzle",
}


class MenuEntry(FrozenModel):
    """One choice on a lesson's practice menu."""

    title: str
    subtitle: str
    icon: str
    action: Action


def menu_entries(state: NavigationState) -> list[MenuEntry]:
    """Practice choices offered by the active lesson's menu.

    Empty until the lesson's content is loaded.
    """
    content = state.content
    if not isinstance(state.view, LessonMenuView) or content is None:
        return []

    entries = [
        MenuEntry(title="Übung 0", subtitle="Zusammenfassung", icon="📖", action=ShowSummary())
    ]
    for i, block in enumerate(content.exercise_blocks):
        entries.append(
            MenuEntry(
                title=block.title,
                subtitle="Lücken füllen",
                icon="✍️",
                action=SelectPracticeBlock(block_index=i),
            )
        )
    if content.scramble_exercises is not None:
        entries.append(
            MenuEntry(title="Übung 2", subtitle="Sätze bilden", icon="🧩", action=SelectScramble())
        )
    if content.dialogue_exercises is not None:
        entries.append(
            MenuEntry(
                title="Übung 3", subtitle="Dialog-Simulation", icon="💬", action=SelectDialogue()
            )
        )
    if content.image_exercises is not None:
        entries.append(
            MenuEntry(
                title="Übung 4",
                subtitle="Bilderrätsel",
                icon="🖼️",
                action=SelectImageAssociation(),
            )
        )
    return entries


def practice_name(state: NavigationState) -> str | None:
    """Display name of the active lesson view."""
    view = state.view
    if not isinstance(view, LESSON_VIEWS):
        return None
    if isinstance(view, PracticeBlockView) and state.content is not None:
        blocks = state.content.exercise_blocks
        if 0 <= view.block_index < len(blocks) and blocks[view.block_index].title:
            return blocks[view.block_index].title
    return PRACTICE_NAMES[view.kind]


def breadcrumbs(state: NavigationState) -> list[str]:
    """Trail from the level list down to the active view."""
    if isinstance(state.view, LevelsView):
        return []
    trail = ["Levels"]
    if state.level is not None:
        trail.append(state.level.name)
    if state.lesson is not None:
        trail.append(state.lesson.name)
    name = practice_name(state)
    if name is not None:
        trail.append(name)
    return trail

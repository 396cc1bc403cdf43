from rich.console import Console
from rich.text import Text
from rich.panel import Panel
from ui.components import (
    Breadcrumbs,
    ExercisePanel,
    PracticeMenu,
    QuizControls,
    SelectionGrid,
    SummaryPanel,
)
from ui.commands import __doc__ as COMMANDS_HELP
from ui.styles import (
    FLAG_RED,
    ERROR_RED,
    INFO_BLUE,
    MUTED_GRAY,
    DEFAULT_THEME,
    create_welcome_banner,
)
from typing import Optional

from navigation import (
    CatalogStatus,
    LessonMenuView,
    LessonsView,
    LevelsView,
    NavigationState,
    SummaryView,
    breadcrumbs,
    menu_entries,
    practice_name,
)


class TutorUI:
    """Main UI orchestrator for the German tutor."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console(theme=DEFAULT_THEME)

    def show_welcome(self) -> None:
        self.console.print(create_welcome_banner())
        self.console.print()

    def render(self, state: NavigationState) -> None:
        """Draw the whole screen for the current state."""
        if state.catalog_status == CatalogStatus.LOADING:
            self.show_loading("Loading...")
            return
        if state.catalog_status == CatalogStatus.UNAVAILABLE:
            self.show_error(f"Could not load data. {state.catalog_error or ''}".strip())
            return

        trail = breadcrumbs(state)
        if trail:
            self.console.print(Breadcrumbs(trail))
            self.console.print()

        view = state.view
        if isinstance(view, LevelsView):
            self._render_levels(state)
        elif isinstance(view, LessonsView):
            self._render_lessons(state)
        elif state.load_error is not None:
            self.show_error(f"Could not load lesson. {state.load_error}")
        elif state.is_loading or state.content is None:
            self.show_loading("Loading lesson...")
        elif isinstance(view, LessonMenuView):
            self.console.print(PracticeMenu(menu_entries(state)))
        elif isinstance(view, SummaryView):
            self.console.print(SummaryPanel(state.content.summary))
        elif state.session is not None:
            self._render_practice(state)

    def _render_levels(self, state: NavigationState) -> None:
        cards = [
            (level.icon, level.name, level.description) for level in state.catalog.levels
        ]
        self.console.print(SelectionGrid("Wähle dein Niveau (Choose your level)", cards))

    def _render_lessons(self, state: NavigationState) -> None:
        level = state.level
        cards = [
            (lesson.icon, lesson.name, lesson.description) for lesson in level.lessons
        ]
        self.console.print(
            SelectionGrid(f"{level.name} Lektionen ({level.name} Lessons)", cards)
        )

    def _render_practice(self, state: NavigationState) -> None:
        session = state.session
        self.console.print(Text(practice_name(state) or "", style=f"bold {FLAG_RED}"))
        if not session.exercises:
            self.console.print(Text("No exercises in this set.", style=MUTED_GRAY))
        for i in range(session.total):
            self.console.print(ExercisePanel(session, i))
        self.console.print(QuizControls(session))

    def read_command(self) -> str:
        """Read one line of learner input."""
        return self.console.input(Text("> ", style=f"bold {MUTED_GRAY}"))

    def show_loading(self, message: str) -> None:
        self.console.print(Text(message, style=INFO_BLUE))

    def show_help(self) -> None:
        self.console.print(
            Panel(
                Text(COMMANDS_HELP.strip(), style=MUTED_GRAY),
                title="Commands",
                border_style=INFO_BLUE,
            )
        )

    def show_error(self, message: str) -> None:
        """Display an error message."""
        self.console.print(
            Panel(
                Text(f"Error: {message}", style=ERROR_RED),
                title="Error",
                border_style=ERROR_RED,
            )
        )

    def show_info(self, message: str) -> None:
        """Display an informational message."""
        self.console.print(Text(message, style=INFO_BLUE))

    def show_quit_message(self) -> None:
        self.console.print()
        self.console.print(Text("Tschüss! Bis bald.", style=MUTED_GRAY))

    def clear_screen(self) -> None:
        """Clear the terminal screen."""
        self.console.clear()

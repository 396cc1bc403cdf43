import argparse
import sys
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from config import TutorConfig
from content import ContentError, ContentProvider, JsonContentProvider
from exercises.text import speakable_text
from logger import get_logger, setup_logging
from navigation import (
    Action,
    CatalogFailed,
    CatalogLoaded,
    LessonLoadFailed,
    LessonLoaded,
    NavigationState,
    reduce,
    requested_fetches,
)
from ui import CommandError, Help, Quit, Speak, SpeechSink, TutorUI, parse_command
from ui.styles import DEFAULT_THEME

log = get_logger(__name__)


class TutorController:
    """Drives the navigation state machine and performs lesson fetches.

    Every action goes through ``dispatch``. Fetches requested by a transition
    are run right away and their results dispatched in turn; a result for a
    lesson that is no longer on screen is cached without touching the view.
    """

    def __init__(self, provider: ContentProvider, state: NavigationState | None = None):
        self.provider = provider
        self.state = state or NavigationState()

    def load_catalog(self) -> NavigationState:
        """Fetch the catalog once, at startup."""
        log.info("Loading catalog")
        try:
            catalog = self.provider.fetch_catalog()
        except ContentError as e:
            return self.dispatch(CatalogFailed(message=str(e)))
        return self.dispatch(CatalogLoaded(catalog=catalog))

    def dispatch(self, action: Action) -> NavigationState:
        before = self.state
        self.state = reduce(before, action)
        for lesson_id in requested_fetches(before, self.state):
            self._fetch_lesson(lesson_id)
        return self.state

    def _fetch_lesson(self, lesson_id: str) -> None:
        lesson = self.state.catalog.find_lesson(lesson_id)
        log.info("Fetching lesson %s", lesson_id)
        try:
            content = self.provider.fetch_lesson_content(lesson)
        except ContentError as e:
            self.dispatch(LessonLoadFailed(lesson_id=lesson_id, message=str(e)))
            return
        self.dispatch(LessonLoaded(lesson_id=lesson_id, content=content))


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser with subcommands."""
    parser = argparse.ArgumentParser(description="German Tutor")
    parser.add_argument(
        "--data-dir",
        "-d",
        type=Path,
        default=None,
        help="Directory containing index.json and lesson files",
    )
    parser.add_argument(
        "--no-speech",
        action="store_true",
        help="Disable text-to-speech",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Log level (DEBUG, INFO, WARNING, ERROR)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Shortcut for --log-level INFO",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")
    subparsers.add_parser(
        "check-content", help="Load the catalog and every lesson, report failures"
    )
    return parser


def build_config(args) -> TutorConfig:
    """Combine environment configuration with CLI flags."""
    log_level = args.log_level or ("INFO" if args.verbose else None)
    return TutorConfig.from_env().with_overrides(
        data_dir=args.data_dir,
        speech_enabled=False if args.no_speech else None,
        log_level=log_level,
    )


def create_provider(config: TutorConfig) -> ContentProvider:
    return JsonContentProvider(config.data_dir, config.catalog_path)


def run_check_content(config: TutorConfig, console: Console | None = None) -> int:
    """Load every lesson once and report what fails. Returns an exit code."""
    console = console or Console(theme=DEFAULT_THEME)
    provider = create_provider(config)
    try:
        catalog = provider.fetch_catalog()
    except ContentError as e:
        console.print(f"[error]✗[/error] {escape(str(e))}")
        return 1

    failures = 0
    for level in catalog.levels:
        for lesson in level.lessons:
            try:
                content = provider.fetch_lesson_content(lesson)
            except ContentError as e:
                failures += 1
                console.print(f"[error]✗[/error] {level.name} / {lesson.name}: {escape(str(e))}")
                continue
            count = sum(len(block.exercises) for block in content.exercise_blocks)
            for extra in (
                content.scramble_exercises,
                content.dialogue_exercises,
                content.image_exercises,
            ):
                count += len(extra or [])
            console.print(
                f"[success]✓[/success] {level.name} / {lesson.name}: {count} exercises"
            )
    return 1 if failures else 0


def run_interactive(config: TutorConfig, ui: TutorUI | None = None) -> None:
    """Run the interactive tutoring session."""
    ui = ui or TutorUI()
    speech = SpeechSink(config.speech_language, enabled=config.speech_enabled)
    controller = TutorController(create_provider(config))

    ui.clear_screen()
    ui.show_welcome()
    controller.load_catalog()

    while True:
        ui.render(controller.state)
        if controller.state.catalog is None:
            # Catalog unavailable: nothing to interact with.
            return

        try:
            command = parse_command(controller.state, ui.read_command())
        except CommandError as e:
            ui.show_error(str(e))
            continue
        except (EOFError, KeyboardInterrupt):
            ui.show_quit_message()
            return

        if isinstance(command, Quit):
            ui.show_quit_message()
            return
        if isinstance(command, Help):
            ui.show_help()
            continue
        if isinstance(command, Speak):
            exercise = controller.state.session.exercises[command.exercise_index]
            text = speakable_text(exercise)
            if text:
                speech.speak(text)
            else:
                ui.show_info("Nothing to read aloud for this exercise.")
            continue

        controller.dispatch(command)
        ui.clear_screen()


def main():
    """Main entry point with CLI routing."""
    parser = create_parser()
    args = parser.parse_args()
    config = build_config(args)
    setup_logging(config.log_level)

    if args.command == "check-content":
        sys.exit(run_check_content(config))
    else:
        # Default to interactive mode
        run_interactive(config)


if __name__ == "__main__":
    main()

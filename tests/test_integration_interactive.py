"""Integration tests for run_interactive() and run_check_content() in main.py.

These tests simulate user input through stdin by mocking Console.input().
"""

import io
from typing import Any

import pytest
from rich.console import Console

import main
from config import DATA_DIR, TutorConfig
from ui import TutorUI
from ui.styles import DEFAULT_THEME


class InputSequence:
    """Callable providing sequential inputs for mocked Console.input().

    Used in integration tests to simulate user input through stdin.
    Tracks all prompts received for debugging failed tests.
    """

    def __init__(self, inputs: list[str]):
        self.inputs = inputs
        self.index = 0
        self.call_history: list[tuple[int, Any]] = []

    def __call__(self, prompt: Any = "") -> str:
        """Return next input in sequence, tracking prompts received."""
        self.call_history.append((self.index, prompt))
        if self.index >= len(self.inputs):
            history = "\n".join(f"  {i}: {p}" for i, p in self.call_history)
            raise StopIteration(
                f"Ran out of inputs at call {self.index}.\n"
                f"Prompt: {prompt}\n"
                f"History:\n{history}"
            )
        result = self.inputs[self.index]
        self.index += 1
        return result

    @property
    def remaining(self) -> int:
        """Number of unused inputs remaining."""
        return len(self.inputs) - self.index


def make_console() -> Console:
    return Console(file=io.StringIO(), width=100, color_system=None, theme=DEFAULT_THEME)


@pytest.fixture
def interactive_runner(monkeypatch, data_dir):
    """Fixture providing a patched run_interactive runner.

    Patches:
    - Console.input to use provided InputSequence
    - Console.clear to no-op (avoid terminal manipulation)

    Returns a callable that takes an InputSequence and runs the session
    against the temporary data directory. The callable returns everything
    the UI printed.
    """
    monkeypatch.setattr(Console, "clear", lambda self, home=True: None)

    def runner(input_sequence: InputSequence, config: TutorConfig | None = None) -> str:
        config = config or TutorConfig(data_dir=data_dir, speech_enabled=False)
        console = make_console()
        monkeypatch.setattr(Console, "input", input_sequence)
        main.run_interactive(config, TutorUI(console))
        return console.file.getvalue()

    return runner


class TestInteractiveBasicFlow:
    """Tests for basic interactive session flow."""

    def test_complete_practice_set_correct(self, interactive_runner):
        inputs = InputSequence(
            [
                "1",  # level A1
                "1",  # Lektion 1
                "2",  # Übung 1a
                "1 a",  # bin
                "2.1 a",  # bin
                "2.2 a",  # Frau
                "c",
                "q",
            ]
        )
        output = interactive_runner(inputs)
        assert inputs.remaining == 0
        assert "Your Score: 2 / 2" in output
        assert "Tschüss" in output

    def test_wrong_slot_scores_zero_then_retry(self, interactive_runner):
        inputs = InputSequence(
            [
                "1",
                "1",
                "2",
                "1 b",  # bist
                "2.1 a",
                "2.2 b",  # Mann
                "c",
                "r",
                "1 a",
                "2.1 a",
                "2.2 a",
                "c",
                "q",
            ]
        )
        output = interactive_runner(inputs)
        assert "Your Score: 0 / 2" in output
        assert "Your Score: 2 / 2" in output

    def test_scramble_flow(self, interactive_runner):
        inputs = InputSequence(
            [
                "1",
                "1",
                "4",  # Übung 2
                "1 a",  # Ich
                "1 b",  # nach
                "1 a",  # gehe
                "1 a",  # Hause
                "c",
                "q",
            ]
        )
        output = interactive_runner(inputs)
        assert "Your Score: 0 / 1" in output

    def test_quit_at_level_prompt(self, interactive_runner):
        inputs = InputSequence(["q"])
        output = interactive_runner(inputs)
        assert inputs.remaining == 0
        assert "Tschüss" in output

    def test_end_of_input_quits(self, monkeypatch):
        def eof(self, prompt=""):
            raise EOFError

        monkeypatch.setattr(Console, "clear", lambda self, home=True: None)
        console = make_console()
        monkeypatch.setattr(Console, "input", eof)
        main.run_interactive(TutorConfig(speech_enabled=False), TutorUI(console))
        assert "Tschüss" in console.file.getvalue()


class TestInteractiveErrors:
    """Invalid input and unavailable content."""

    def test_invalid_command_shows_error(self, interactive_runner):
        inputs = InputSequence(["9", "x", "q"])
        output = interactive_runner(inputs)
        assert inputs.remaining == 0
        assert "Error" in output

    def test_missing_lesson_shows_load_error(self, interactive_runner):
        inputs = InputSequence(["1", "2", "b", "q"])
        output = interactive_runner(inputs)
        assert "Could not load lesson" in output

    def test_catalog_unavailable_stops(self, interactive_runner, tmp_path):
        inputs = InputSequence([])
        output = interactive_runner(inputs, TutorConfig(data_dir=tmp_path / "nowhere"))
        assert "Could not load data" in output
        assert inputs.call_history == []

    def test_speak_without_sentence(self, interactive_runner):
        inputs = InputSequence(["1", "1", "4", "s 1", "q"])
        output = interactive_runner(inputs)
        assert "Nothing to read aloud" in output


class TestCheckContent:
    def test_reports_missing_lesson(self, data_dir):
        console = make_console()
        config = TutorConfig(data_dir=data_dir)
        assert main.run_check_content(config, console) == 1
        output = console.file.getvalue()
        assert "Lektion 1: 6 exercises" in output
        assert "Lektion 2" in output

    def test_bundled_content_is_clean(self):
        console = make_console()
        assert main.run_check_content(TutorConfig(data_dir=DATA_DIR), console) == 0

    def test_custom_catalog_file(self, data_dir):
        (data_dir / "index.json").rename(data_dir / "levels.json")
        config = TutorConfig(data_dir=data_dir, catalog_file="levels.json")
        assert main.create_provider(config).catalog_path == data_dir / "levels.json"

        console = make_console()
        main.run_check_content(config, console)
        assert "Lektion 1: 6 exercises" in console.file.getvalue()

    def test_missing_catalog(self, tmp_path):
        console = make_console()
        assert main.run_check_content(TutorConfig(data_dir=tmp_path), console) == 1

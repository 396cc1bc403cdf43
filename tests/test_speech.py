"""Tests for the speech sink."""

import subprocess

import pytest

from ui import speech
from ui.speech import SpeechSink


@pytest.fixture
def calls(monkeypatch):
    recorded = []
    monkeypatch.setattr(
        speech.subprocess, "run", lambda argv, **kwargs: recorded.append(argv)
    )
    return recorded


def with_commands(monkeypatch, *available):
    monkeypatch.setattr(
        speech.shutil, "which", lambda cmd: f"/usr/bin/{cmd}" if cmd in available else None
    )


class TestSpeechSink:
    def test_espeak_uses_language_code(self, monkeypatch, calls):
        with_commands(monkeypatch, "espeak", "say")
        SpeechSink("de-DE").speak("Ich ___(1)___ müde.")
        assert calls == [["espeak", "-v", "de", "Ich müde."]]

    def test_prefers_espeak_ng(self, monkeypatch, calls):
        with_commands(monkeypatch, "espeak-ng", "espeak")
        assert SpeechSink().command == "espeak-ng"

    def test_say_fallback(self, monkeypatch, calls):
        with_commands(monkeypatch, "say")
        SpeechSink().speak("Hallo")
        assert calls == [["say", "Hallo"]]

    def test_no_command_is_silent(self, monkeypatch, calls):
        with_commands(monkeypatch)
        sink = SpeechSink()
        assert not sink.available
        sink.speak("Hallo")
        assert calls == []

    def test_disabled(self, monkeypatch, calls):
        with_commands(monkeypatch, "espeak")
        SpeechSink(enabled=False).speak("Hallo")
        assert calls == []

    def test_blank_text_not_spoken(self, monkeypatch, calls):
        with_commands(monkeypatch, "espeak")
        SpeechSink().speak("___")
        assert calls == []

    def test_command_failure_swallowed(self, monkeypatch):
        with_commands(monkeypatch, "espeak")

        def fail(argv, **kwargs):
            raise subprocess.TimeoutExpired(argv, 30)

        monkeypatch.setattr(speech.subprocess, "run", fail)
        SpeechSink().speak("Hallo")

"""Best-effort text-to-speech through a locally installed command."""

import shutil
import subprocess

from exercises.text import speech_text
from logger import get_logger

log = get_logger(__name__)

# Tried in order; the first one found on PATH is used.
SPEECH_COMMANDS = ("espeak-ng", "espeak", "say")


class SpeechSink:
    """Speaks German sentences if the platform can.

    Never raises: without a speech command, or if the command fails, the
    request is dropped and logged at debug level.
    """

    def __init__(self, language: str = "de-DE", enabled: bool = True):
        self.language = language
        self.enabled = enabled
        self._command: str | None = None
        self._resolved = False

    @property
    def command(self) -> str | None:
        if not self._resolved:
            self._command = next(
                (cmd for cmd in SPEECH_COMMANDS if shutil.which(cmd)), None
            )
            self._resolved = True
        return self._command

    @property
    def available(self) -> bool:
        return self.enabled and self.command is not None

    def _argv(self, text: str) -> list[str]:
        if self.command == "say":
            return ["say", text]
        # espeak voices use the bare language code, e.g. "de"
        return [self.command, "-v", self.language.split("-")[0].lower(), text]

    def speak(self, text: str) -> None:
        text = speech_text(text)
        if not text:
            return
        if not self.available:
            log.debug("Speech unavailable, not speaking: %s", text)
            return
        try:
            subprocess.run(
                self._argv(text),
                check=False,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                timeout=30,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            log.debug("Speech command failed: %s", e)

"""Runtime configuration for the German tutor.

Values come from defaults, then environment variables, then CLI flags.
"""

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

DATA_DIR = Path(__file__).parent / "content" / "data"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class TutorConfig(BaseModel):
    """Configuration for content loading, speech and logging."""

    data_dir: Path = DATA_DIR
    catalog_file: str = "index.json"
    speech_language: str = Field(default="de-DE", min_length=2)
    speech_enabled: bool = True
    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        value = value.upper()
        if value not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return value

    @property
    def catalog_path(self) -> Path:
        return self.data_dir / self.catalog_file

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "TutorConfig":
        """Build a config from ``GERMAN_TUTOR_*`` environment variables."""
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {}

        if env.get("GERMAN_TUTOR_DATA_DIR"):
            values["data_dir"] = Path(env["GERMAN_TUTOR_DATA_DIR"])
        if env.get("GERMAN_TUTOR_CATALOG"):
            values["catalog_file"] = env["GERMAN_TUTOR_CATALOG"]
        if env.get("GERMAN_TUTOR_SPEECH_LANG"):
            values["speech_language"] = env["GERMAN_TUTOR_SPEECH_LANG"]
        if env.get("GERMAN_TUTOR_SPEECH"):
            values["speech_enabled"] = env["GERMAN_TUTOR_SPEECH"].lower() not in (
                "0",
                "false",
                "no",
                "off",
            )
        if env.get("GERMAN_TUTOR_LOG_LEVEL"):
            values["log_level"] = env["GERMAN_TUTOR_LOG_LEVEL"]

        return cls(**values)

    def with_overrides(self, **overrides: Any) -> "TutorConfig":
        """Return a validated copy with the non-None overrides applied."""
        values = self.model_dump()
        values.update({k: v for k, v in overrides.items() if v is not None})
        return TutorConfig(**values)

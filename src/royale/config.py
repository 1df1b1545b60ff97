"""Application settings via pydantic-settings. Loads from environment and .env file.

The GitHub Actions workflow exports the triggering event through plain
environment variables (``EVENT_NAME``, ``ISSUE_AUTHOR``, ``ISSUE_NUMBER``),
so no prefix is applied.
"""

from __future__ import annotations

import pathlib

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """GitHub Wars configuration.

    Built once per invocation and passed explicitly to the dispatcher.
    """

    # Storage
    state_file: pathlib.Path = pathlib.Path("players.json")
    readme_file: pathlib.Path = pathlib.Path("README.md")

    # Scheduling
    elimination_interval_minutes: int = Field(default=30, ge=1)

    # GitHub
    github_token: str = ""
    github_repository: str = ""  # "owner/repo"
    github_api_url: str = "https://api.github.com"

    # Triggering event
    event_name: str = ""
    issue_author: str = ""
    issue_number: int | None = None

    # Logging
    royale_log_level: str = "INFO"

    model_config = {"env_prefix": "", "env_file": ".env", "extra": "ignore"}

    @field_validator("issue_number", mode="before")
    @classmethod
    def _lenient_issue_number(cls, value: object) -> object:
        """Scheduled runs export ``ISSUE_NUMBER`` as an empty string.

        The issue number only feeds the advisory issue close, so anything
        that is not a positive integer becomes ``None`` instead of failing.
        """
        if isinstance(value, str):
            value = value.strip()
            return int(value) if value.isascii() and value.isdigit() and int(value) > 0 else None
        if isinstance(value, int) and not isinstance(value, bool) and value > 0:
            return value
        return None

    @property
    def elimination_interval_seconds(self) -> int:
        return self.elimination_interval_minutes * 60

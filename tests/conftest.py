"""Shared test fixtures."""

from datetime import UTC, datetime, timedelta

import pytest

from royale.config import Settings


class ScriptedRng:
    """Index source that replays a fixed sequence of picks."""

    def __init__(self, picks: list[int]) -> None:
        self.picks = list(picks)
        self.calls: list[int] = []

    def randrange(self, n: int) -> int:
        self.calls.append(n)
        pick = self.picks.pop(0)
        assert 0 <= pick < n
        return pick


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Test settings writing into a temporary directory."""
    return Settings(
        state_file=tmp_path / "players.json",
        readme_file=tmp_path / "README.md",
        github_token="",
        github_repository="",
        event_name="",
        issue_author="",
        issue_number=None,
    )


@pytest.fixture
def now() -> datetime:
    return datetime(2026, 3, 1, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def interval() -> timedelta:
    return timedelta(minutes=30)


@pytest.fixture
def scripted_rng():
    """Factory: ``scripted_rng([0, 1])`` picks index 0, then index 1."""
    return ScriptedRng

"""Event dispatch — one inbound trigger, one transition, one commit.

An invocation runs in a fixed order:
    1. load ``players.json`` (defaults on any read problem)
    2. start the next season if a finished one is still latched
    3. apply the join or the tick
    4. save the state and regenerate the README (failures are fatal)
    5. close the join-request issue (best effort, after commit)

Only the settings object carries environment-derived values; the engine
and normalizer never see it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import StrEnum

import httpx

from royale.config import Settings
from royale.core.engine import IndexSource, join, reset_season, season_phase, tick
from royale.core.readme import render_readme, write_readme
from royale.core.store import load_state, save_state
from royale.github import close_issue
from royale.models.state import GameState

logger = logging.getLogger(__name__)

# GitHub Actions event names that trigger an elimination tick.
TICK_EVENTS = frozenset({"schedule", "workflow_dispatch"})


class EventKind(StrEnum):
    JOIN = "join-request"
    TICK = "scheduled-tick"
    NONE = "none"


@dataclass(frozen=True)
class Event:
    """A normalized inbound trigger."""

    kind: EventKind
    username: str = ""
    issue_number: int | None = None


def event_from_settings(settings: Settings) -> Event:
    """Map the GitHub Actions event to a game event.

    An ``issues`` event without an author and any unrecognized event name
    fall through to ``NONE``, which only re-renders the README.
    """
    if settings.event_name == "issues" and settings.issue_author:
        return Event(
            kind=EventKind.JOIN,
            username=settings.issue_author,
            issue_number=settings.issue_number,
        )
    if settings.event_name in TICK_EVENTS:
        return Event(kind=EventKind.TICK)
    return Event(kind=EventKind.NONE)


def apply_event(
    state: GameState,
    event: Event,
    now: datetime,
    interval: timedelta,
    rng: IndexSource | None = None,
) -> GameState:
    """Apply *event* to *state*, clearing a finished season first."""
    if event.kind is EventKind.NONE:
        logger.info("event_ignored phase=%s", season_phase(state))
        return state

    if state.pending_reset or state.winner is not None:
        state = reset_season(state)

    if event.kind is EventKind.JOIN:
        return join(state, event.username, now, interval).state

    # The tick timestamp records scheduler activity, even for a no-op tick.
    state = state.model_copy(update={"last_tick": now.isoformat()})
    return tick(state, now, interval, rng)


async def run(
    settings: Settings,
    now: datetime | None = None,
    rng: IndexSource | None = None,
    client: httpx.AsyncClient | None = None,
) -> GameState:
    """Process the event described by *settings* end to end.

    Raises:
        StoreWriteError: The state or the README could not be written.
    """
    now = now or datetime.now(UTC)
    interval = timedelta(seconds=settings.elimination_interval_seconds)
    event = event_from_settings(settings)
    logger.info(
        "invocation_start event=%s kind=%s author=%s issue=%s",
        settings.event_name or "-",
        event.kind,
        event.username or "-",
        event.issue_number,
    )

    state = load_state(settings.state_file)
    state = apply_event(state, event, now, interval, rng)

    save_state(state, settings.state_file)
    write_readme(render_readme(state, now, interval), settings.readme_file)

    if event.kind is EventKind.JOIN:
        await close_issue(
            settings.github_repository,
            event.issue_number,
            settings.github_token,
            api_url=settings.github_api_url,
            client=client,
        )

    logger.info(
        "invocation_complete season=%d phase=%s alive=%d",
        state.season,
        season_phase(state),
        len(state.alive),
    )
    return state

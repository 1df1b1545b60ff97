"""Game transitions — join, tick, win finalization, and season reset.

Every function here is pure: it takes a GameState and returns a new one,
leaving the argument untouched. Wall-clock time and randomness arrive as
arguments so that a whole season can be replayed deterministically in tests.

Season phases:
    WAITING -> IN_PROGRESS -> FINISHED -> (next event) WAITING of season + 1

The FINISHED -> WAITING step is not taken by ``tick``. The dispatcher calls
``reset_season`` at the start of the *next* invocation, so a declared winner
is persisted and rendered at least once.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import StrEnum
from typing import Protocol

from royale.models.state import GameState, WinnerRecord

logger = logging.getLogger(__name__)


class IndexSource(Protocol):
    """Anything that can pick a uniform integer in ``[0, n)``.

    ``random.Random`` satisfies this; tests pass a scripted sequence.
    """

    def randrange(self, n: int, /) -> int: ...


class SeasonPhase(StrEnum):
    """Where the current season stands."""

    WAITING = "waiting"
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"


def season_phase(state: GameState) -> SeasonPhase:
    """Classify a state for rendering and logging."""
    if state.winner is not None:
        return SeasonPhase.FINISHED
    if state.started:
        return SeasonPhase.IN_PROGRESS
    return SeasonPhase.WAITING


@dataclass(frozen=True)
class JoinResult:
    """Outcome of a join request. A rejection is a result, not an error."""

    state: GameState
    accepted: bool
    event_text: str


def _next_due(now: datetime, interval: timedelta) -> str:
    return (now + interval).isoformat()


def join(
    state: GameState,
    username: str,
    now: datetime,
    interval: timedelta,
) -> JoinResult:
    """Add *username* to the current season if the rules allow it.

    Rejections leave everything but ``last_event`` unchanged. The join that
    brings the roster to two players starts the season and arms the first
    elimination at ``now + interval``.
    """
    new = state.model_copy(deep=True)

    if not username:
        text = "A join request arrived without a username."
        reason = "empty_username"
    elif new.started and len(new.alive) > 1:
        text = f"{username} tried to join, but the game has already started!"
        reason = "already_started"
    elif username in new.alive:
        text = f"{username} tried to join again, but they're already in the game!"
        reason = "already_alive"
    elif username in new.eliminated:
        text = f"{username} tried to rejoin, but they were already eliminated this season!"
        reason = "already_eliminated"
    else:
        reason = ""
        text = ""

    if reason:
        logger.info("join_rejected user=%s reason=%s season=%d", username, reason, new.season)
        new.last_event = text
        return JoinResult(state=new, accepted=False, event_text=text)

    new.alive.append(username)
    text = f"🎮 {username} has joined the battle!"
    logger.info("join_accepted user=%s season=%d alive=%d", username, new.season, len(new.alive))

    if len(new.alive) >= 2 and not new.started:
        new.started = True
        new.next_elimination = _next_due(now, interval)
        text = (
            f"🎮 {username} has joined! "
            f"The battle has begun with {len(new.alive)} players!"
        )
        logger.info("season_started season=%d players=%d", new.season, len(new.alive))

    new.last_event = text
    return JoinResult(state=new, accepted=True, event_text=text)


def finalize_win(state: GameState) -> GameState:
    """Crown the sole survivor and record the season in the winners history.

    Expects exactly one alive player. Clears scheduling and latches
    ``pending_reset`` so the next event starts a new season.
    """
    new = state.model_copy(deep=True)
    champion = new.alive[0]
    new.winner = champion
    new.started = False
    new.next_elimination = None
    new.pending_reset = True
    if all(record.season != new.season for record in new.winners):
        new.winners.append(WinnerRecord(season=new.season, username=champion))
    logger.info("season_won season=%d winner=%s", new.season, champion)
    return new


def tick(
    state: GameState,
    now: datetime,
    interval: timedelta,
    rng: IndexSource | None = None,
) -> GameState:
    """Run one scheduled elimination.

    A no-op until a season has started. With one player left the tick only
    declares the winner; otherwise one uniformly random alive player is
    eliminated, and a winner is declared in the same tick if that leaves a
    single survivor.
    """
    if not state.started or not state.alive:
        logger.info("tick_skipped started=%s alive=%d", state.started, len(state.alive))
        return state.model_copy(deep=True)

    if len(state.alive) == 1:
        new = finalize_win(state)
        new.last_event = f"👑 {new.winner} is the winner of Season {new.season}!"
        return new

    rng = rng or random.Random()
    new = state.model_copy(deep=True)
    index = rng.randrange(len(new.alive))
    fallen = new.alive.pop(index)
    new.eliminated.append(fallen)
    logger.info(
        "player_eliminated season=%d user=%s remaining=%d", new.season, fallen, len(new.alive)
    )

    if len(new.alive) == 1:
        new = finalize_win(new)
        new.last_event = (
            f"💀 {fallen} has been eliminated!\n"
            f"👑 {new.winner} is the winner of Season {new.season}!"
        )
        return new

    new.next_elimination = _next_due(now, interval)
    new.last_event = f"💀 {fallen} has been eliminated! {len(new.alive)} players remain."
    return new


def reset_season(state: GameState) -> GameState:
    """Start the next season. Only the winners history survives."""
    season = state.season + 1
    new = GameState(
        season=season,
        last_event=f"Season {season} is ready! Open an issue to join the battle!",
        winners=[record.model_copy() for record in state.winners],
    )
    logger.info("season_reset season=%d", season)
    return new

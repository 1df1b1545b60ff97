"""Render the game state as the repository README.

The README is a one-way projection: it is regenerated in full on every run
and never read back. Output depends only on the state and the reference
time passed in.
"""

from __future__ import annotations

import logging
import math
import pathlib
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from royale.core.engine import SeasonPhase, season_phase
from royale.core.store import atomic_write_text
from royale.models.state import GameState

logger = logging.getLogger(__name__)

TITLE = "# 🎮 GitHub Wars - Battle Royale"
UNKNOWN_NEXT = "Unknown (awaiting next scheduled tick)"


@dataclass(frozen=True)
class TimingInfo:
    """Display strings for the scheduling lines."""

    last_tick: str
    next_event: str


def format_duration(seconds: float) -> str:
    """Format a duration as ``"12 min"``, ``"2 hr"`` or ``"1 hr 5 min"``."""
    total_minutes = max(0, math.floor(seconds / 60 + 0.5))
    if total_minutes < 60:
        return f"{total_minutes} min"
    hours, minutes = divmod(total_minutes, 60)
    return f"{hours} hr" if minutes == 0 else f"{hours} hr {minutes} min"


def _parse_time(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _iso(dt: datetime) -> str:
    return dt.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")


def timing_info(state: GameState, now: datetime, interval: timedelta) -> TimingInfo:
    """Describe the last tick and when the next elimination is expected.

    Prefers the armed ``next_elimination``; otherwise assumes the next tick
    lands one interval after the last one.
    """
    last = _parse_time(state.last_tick)
    last_text = _iso(last) if last else "Unknown"

    due = _parse_time(state.next_elimination)
    if due is None and last is not None:
        due = last + interval
    if due is None:
        return TimingInfo(last_tick=last_text, next_event=UNKNOWN_NEXT)

    delta = (due - now).total_seconds()
    relative = (
        f"{format_duration(delta)} from now" if delta >= 0 else f"{format_duration(-delta)} ago"
    )
    return TimingInfo(last_tick=last_text, next_event=f"{relative} ({_iso(due)})")


def _status_lines(state: GameState) -> list[str]:
    phase = season_phase(state)
    if phase is SeasonPhase.FINISHED:
        return [
            f"### 👑 WINNER: {state.winner}",
            "",
            f"**{state.winner}** has won Season {state.season}!",
            "",
            "🎉 New season starting soon...",
            "",
        ]
    if phase is SeasonPhase.IN_PROGRESS:
        return [
            "### ⚔️ Battle in Progress",
            "",
            f"**{len(state.alive)} players** are fighting for survival!",
            "",
        ]
    return ["### 🎯 Waiting for Players", "", "Open an issue to join the battle!", ""]


def _player_lines(state: GameState) -> list[str]:
    lines = [f"### 💚 Alive Players ({len(state.alive)})", ""]
    if state.alive:
        lines += [
            f"{i}. **[@{name}](https://github.com/{name})**"
            for i, name in enumerate(state.alive, start=1)
        ]
    else:
        lines.append("*No players alive*")
    lines += ["", f"### 💀 Eliminated Players ({len(state.eliminated)})", ""]
    if state.eliminated:
        lines += [
            f"{i}. ~~[@{name}](https://github.com/{name})~~"
            for i, name in enumerate(state.eliminated, start=1)
        ]
    else:
        lines.append("*No eliminations yet*")
    lines.append("")
    return lines


def _champion_lines(state: GameState) -> list[str]:
    lines = ["## 🏆 Hall of Champions", ""]
    if not state.winners:
        return lines + ["*No champions yet. Be the first!*", ""]
    lines += ["| Season | Champion |", "| --- | --- |"]
    for record in sorted(state.winners, key=lambda r: r.season, reverse=True):
        name = record.username
        lines.append(f"| {record.season} | [@{name}](https://github.com/{name}) |")
    lines.append("")
    return lines


def render_readme(state: GameState, now: datetime, interval: timedelta) -> str:
    """Build the full README text for *state* as seen at *now*."""
    minutes = int(interval.total_seconds() // 60)
    timing = timing_info(state, now, interval)

    lines = [
        TITLE,
        "",
        "An automated multiplayer Battle Royale game running entirely through GitHub Actions!",
        "",
        "## 🕹️ How to Play",
        "",
        "**Open a new Issue to join the game!** "
        "Your GitHub username will be automatically added to the current season.",
        "",
        f"- Every {minutes} minutes, one random player is eliminated",
        "- Last player standing wins the season",
        "- New season starts automatically after a winner is declared",
        "",
        "---",
        "",
        f"## 📊 Season {state.season} Status",
        "",
    ]
    lines += _status_lines(state)
    # Multi-line events (elimination + win) stay inside the list item.
    last_event = state.last_event.replace("\n", " ")
    lines += [
        f"- **Last Event:** {last_event}",
        f"- **Last Tick:** {timing.last_tick}",
        f"- **Next Event:** {timing.next_event}",
        "",
        "---",
        "",
    ]
    lines += _player_lines(state)
    lines += ["---", ""]
    lines += _champion_lines(state)
    lines += [
        "---",
        "",
        "## 📜 Game Rules",
        "",
        "1. **Join:** Open any issue to join the current season",
        f"2. **Battle:** Every {minutes} minutes, one player is randomly eliminated",
        "3. **Win:** Last player standing wins the season",
        "4. **New Season:** Game resets automatically after a winner is declared",
        "5. **No Rejoining:** Cannot rejoin during the same season once eliminated",
        "",
        "---",
        "",
        f"*Powered by GitHub Actions • Updates every {minutes} minutes*",
    ]
    return "\n".join(lines) + "\n"


def write_readme(content: str, path: pathlib.Path) -> None:
    """Replace the README on disk. Raises StoreWriteError on failure."""
    atomic_write_text(path, content)
    logger.info("readme_written path=%s", path)

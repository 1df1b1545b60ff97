"""State normalization — coerce any decoded document into a valid GameState.

``normalize_state`` is total: whatever ``json.loads`` produced (or ``None``
when nothing was stored), it returns a GameState that satisfies every
invariant. Malformed fields fall back to their defaults one by one; the
function never raises.

Invariants enforced:
    - ``alive`` and ``eliminated`` hold unique, non-empty strings and are
      disjoint (elimination wins on conflict).
    - ``winner`` is unset unless it is in ``alive``.
    - ``pending_reset`` is set exactly when ``winner`` is set, and a season
      with a winner is no longer ``started``.
    - ``winners`` holds at most one record per season.
    - ``season`` is a positive integer.

Normalizing an already-normalized state returns an equal state.
"""

from __future__ import annotations

import logging
from typing import Any

from royale.models.state import DEFAULT_LAST_EVENT, GameState, WinnerRecord

logger = logging.getLogger(__name__)


def default_state() -> GameState:
    """A fresh season-1 state with nobody in it."""
    return GameState()


def _is_positive_int(value: Any) -> bool:
    # bool is an int subclass; ``true`` in JSON is not a season number.
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def _unique_names(values: Any) -> list[str]:
    """Keep non-empty strings in order, dropping repeats."""
    if not isinstance(values, list):
        return []
    result: list[str] = []
    for value in values:
        if isinstance(value, str) and value and value not in result:
            result.append(value)
    return result


def _unique_winners(records: Any) -> list[WinnerRecord]:
    """Keep well-formed winner records, first one per season."""
    if not isinstance(records, list):
        return []
    seen: set[int] = set()
    result: list[WinnerRecord] = []
    for record in records:
        if not isinstance(record, dict):
            continue
        season = record.get("season")
        username = record.get("username")
        if not _is_positive_int(season) or not isinstance(username, str) or not username:
            continue
        if season in seen:
            continue
        seen.add(season)
        result.append(WinnerRecord(season=season, username=username))
    return result


def _optional_str(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _bool(value: Any, default: bool) -> bool:
    return value if isinstance(value, bool) else default


def normalize_state(raw: Any, log_prefix: str = "") -> GameState:
    """Build a valid GameState from an arbitrary decoded JSON value.

    Args:
        raw: Output of ``json.loads`` on the stored document, or ``None``.
        log_prefix: Label for the "normalized" log line (e.g. ``"load"``).

    Returns:
        A GameState satisfying every schema invariant.
    """
    doc: dict[str, Any] = raw if isinstance(raw, dict) else {}

    eliminated = _unique_names(doc.get("eliminatedPlayers"))
    alive = [name for name in _unique_names(doc.get("alivePlayers")) if name not in eliminated]

    winner = _optional_str(doc.get("winner"))
    if winner not in alive:
        winner = None

    last_event = doc.get("lastEvent")
    state = GameState(
        season=doc["season"] if _is_positive_int(doc.get("season")) else 1,
        started=_bool(doc.get("gameStarted"), False) and winner is None,
        alive=alive,
        eliminated=eliminated,
        winner=winner,
        last_event=last_event if isinstance(last_event, str) else DEFAULT_LAST_EVENT,
        last_tick=_optional_str(doc.get("lastTick")),
        next_elimination=_optional_str(doc.get("nextEliminationTime")),
        # A recorded winner always means the season still awaits its reset.
        pending_reset=winner is not None,
        winners=_unique_winners(doc.get("winners")),
    )

    if raw is not None and raw != state.to_document():
        logger.info("state_normalized prefix=%s", log_prefix or "-")
    return state

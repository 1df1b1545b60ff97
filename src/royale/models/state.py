"""Game state models — the single persisted entity and its history records.

Field aliases keep the on-disk ``players.json`` in camelCase while Python
code uses snake_case. Always dump with ``by_alias=True`` when persisting.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_LAST_EVENT = "Waiting for players to join..."


class WinnerRecord(BaseModel):
    """One completed season's champion. Unique by season."""

    season: int = Field(ge=1)
    username: str


class GameState(BaseModel):
    """Everything the game knows, between two invocations."""

    model_config = ConfigDict(populate_by_name=True)

    season: int = Field(default=1, ge=1)
    started: bool = Field(default=False, alias="gameStarted")
    alive: list[str] = Field(default_factory=list, alias="alivePlayers")
    eliminated: list[str] = Field(default_factory=list, alias="eliminatedPlayers")
    winner: str | None = None
    last_event: str = Field(default=DEFAULT_LAST_EVENT, alias="lastEvent")
    last_tick: str | None = Field(default=None, alias="lastTick")  # ISO-8601, scheduler ran
    next_elimination: str | None = Field(default=None, alias="nextEliminationTime")
    pending_reset: bool = Field(default=False, alias="pendingReset")
    winners: list[WinnerRecord] = Field(default_factory=list)

    def to_document(self) -> dict:
        """Return the JSON-ready dict stored in ``players.json``."""
        return self.model_dump(by_alias=True, mode="json")

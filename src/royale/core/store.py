"""JSON file store for the game state.

Reads are forgiving: a missing, unreadable, or corrupt file yields the
default state. Writes are strict: any failure raises StoreWriteError, since
losing a write loses the event that triggered the run.

Writes go to a temporary file in the target directory and are moved into
place with ``os.replace``, so readers never see a half-written document.
There is no locking; the hosting workflow must not run two invocations at
once.
"""

from __future__ import annotations

import json
import logging
import os
import pathlib
import tempfile

from royale.core.normalize import default_state, normalize_state
from royale.errors import StoreWriteError
from royale.models.state import GameState

logger = logging.getLogger(__name__)


def load_state(path: pathlib.Path) -> GameState:
    """Load and normalize the stored state, falling back to defaults."""
    if not path.exists():
        logger.info("state_file_missing path=%s using_defaults=true", path)
        return default_state()
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        logger.error("state_file_unreadable path=%s error=%s using_defaults=true", path, exc)
        return default_state()
    return normalize_state(raw, log_prefix="load")


def dump_state(state: GameState) -> str:
    """Serialize a state exactly as it is stored on disk."""
    document = normalize_state(state.to_document(), log_prefix="save").to_document()
    return json.dumps(document, indent=2, ensure_ascii=False) + "\n"


def atomic_write_text(path: pathlib.Path, content: str) -> None:
    """Replace *path* with *content* in one step.

    Raises:
        StoreWriteError: The directory is not writable or the move failed.
    """
    tmp_name: str | None = None
    try:
        directory = path.parent
        directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=directory, prefix=f".{path.name}.", suffix=".tmp")
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(content)
        # mkstemp creates 0600; keep the existing mode or use 0644.
        mode = path.stat().st_mode & 0o777 if path.exists() else 0o644
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, path)
        tmp_name = None
    except OSError as exc:
        raise StoreWriteError(str(path), str(exc)) from exc
    finally:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)


def save_state(state: GameState, path: pathlib.Path) -> None:
    """Normalize and persist *state* to *path*."""
    atomic_write_text(path, dump_state(state))
    logger.info("state_saved path=%s season=%d alive=%d", path, state.season, len(state.alive))

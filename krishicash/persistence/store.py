"""
Save Stores - Where saved games live.

The stores:
- Speak GameState on both sides; serialization lives in schema.py
- Treat missing or corrupt saves as "no save" (load returns None)
- Report write failures through SaveResult and never raise them

Design decisions:
- One JSON file per slot on local disk
- Writes go to a temporary file first and are moved into place
- An in-memory store for tests and for sessions that opt out of disk
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any
import json
import logging
import os
import time

from ..engine_core.state import GameState
from .schema import SaveValidationError, dump_save, load_save

logger = logging.getLogger(__name__)


@dataclass
class SaveResult:
    """Outcome of a save attempt."""
    success: bool
    saved_at: float | None = None
    location: str | None = None
    error: str | None = None


class SaveStore(ABC):
    """
    Load/store gateway for a single saved game.

    Usage:
        store = FileSaveStore(save_dir="~/.krishicash/saves")

        state = store.load() or initial_state()
        ...
        result = store.save(state)
        if not result.success:
            show_error(result.error)
    """

    @abstractmethod
    def load(self) -> GameState | None:
        """Return the saved state, or None when there is no usable save."""
        pass

    @abstractmethod
    def save(self, state: GameState) -> SaveResult:
        pass

    @abstractmethod
    def delete(self) -> bool:
        """Remove the save. Returns True if something was removed."""
        pass

    def _decode(self, payload: Any, source: str) -> GameState | None:
        try:
            state, repairs = load_save(payload)
        except SaveValidationError as e:
            logger.warning("Ignoring invalid save in %s: %s", source, e)
            return None
        for repair in repairs:
            logger.info("Repaired save from %s: %s", source, repair)
        return state


class FileSaveStore(SaveStore):
    """File-based store: one JSON document per slot."""

    def __init__(
        self,
        save_dir: str | Path | None = None,
        slot: str = "default",
    ):
        if save_dir is None:
            save_dir = Path.home() / ".krishicash" / "saves"
        self.save_dir = Path(save_dir).expanduser()
        self.slot = slot

        # The slot names a file directly inside save_dir, nothing else
        resolved = (self.save_dir / f"{slot}.json").resolve()
        if not slot or Path(slot).name != slot or resolved.parent != self.save_dir.resolve():
            raise ValueError(f"Save slot {slot!r} escapes save directory {self.save_dir}")

    @property
    def path(self) -> Path:
        return self.save_dir / f"{self.slot}.json"

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> GameState | None:
        if not self.path.exists():
            return None

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                payload = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Could not read save %s: %s", self.path, e)
            return None

        return self._decode(payload, str(self.path))

    def save(self, state: GameState) -> SaveResult:
        saved_at = time.time()
        document = dump_save(state, saved_at=saved_at)
        tmp_path = self.path.with_suffix(".json.tmp")

        try:
            self.save_dir.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(document, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as e:
            logger.warning("Saving to %s failed: %s", self.path, e)
            if tmp_path.exists():
                tmp_path.unlink()
            return SaveResult(success=False, error=str(e), location=str(self.path))

        logger.debug("Saved month %d to %s", state.month, self.path)
        return SaveResult(success=True, saved_at=saved_at, location=str(self.path))

    def delete(self) -> bool:
        if not self.path.exists():
            return False
        self.path.unlink(missing_ok=True)
        return True

    def list_slots(self) -> list[str]:
        if not self.save_dir.exists():
            return []
        return sorted(f.stem for f in self.save_dir.glob("*.json"))


class MemorySaveStore(SaveStore):
    """
    In-memory store.

    Documents are kept in serialized form so loading goes through the
    same validation as the file store.
    """

    def __init__(self, document: dict[str, Any] | None = None):
        self.document = document
        self.save_count = 0

    def load(self) -> GameState | None:
        if self.document is None:
            return None
        return self._decode(self.document, "memory")

    def save(self, state: GameState) -> SaveResult:
        saved_at = time.time()
        self.document = dump_save(state, saved_at=saved_at)
        self.save_count += 1
        return SaveResult(success=True, saved_at=saved_at, location="memory")

    def delete(self) -> bool:
        existed = self.document is not None
        self.document = None
        return existed

"""Local usage counter that locks the randomizer until a donation is accepted."""

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 5


def default_gate_path() -> Path:
    """SLIPCHECK_GATE_PATH, or ~/.slipcheck/gate.json."""
    env_path = os.environ.get("SLIPCHECK_GATE_PATH")
    if env_path:
        return Path(env_path)
    return Path.home() / ".slipcheck" / "gate.json"


class UsageGate:
    """Persisted click counter.

    Each use increments ``click_count``; once it exceeds ``limit`` the gate
    locks and stays locked until ``unlock()`` is called after a verified
    donation.
    """

    def __init__(self, path: Optional[Path | str] = None, limit: int = DEFAULT_LIMIT):
        self.path = Path(path) if path is not None else default_gate_path()
        self.limit = limit

    def _load(self) -> dict[str, Any]:
        state = {"click_count": 0, "is_locked": False}
        if not self.path.exists():
            return state
        try:
            stored = json.loads(self.path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Ignoring unreadable usage gate file %s: %s", self.path, e)
            return state
        if isinstance(stored, dict):
            state["click_count"] = int(stored.get("click_count", 0))
            state["is_locked"] = bool(stored.get("is_locked", False))
        return state

    def _save(self, state: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(state), encoding="utf-8")

    @property
    def click_count(self) -> int:
        return self._load()["click_count"]

    @property
    def is_locked(self) -> bool:
        return self._load()["is_locked"]

    def record_use(self) -> bool:
        """Count one use. Returns False when the gate is (now) locked."""
        state = self._load()
        if state["is_locked"]:
            return False
        state["click_count"] += 1
        if state["click_count"] > self.limit:
            state["is_locked"] = True
            logger.info("Usage gate locked after %d uses", state["click_count"])
        self._save(state)
        return not state["is_locked"]

    def unlock(self) -> None:
        """Clear the counter and lock."""
        self._save({"click_count": 0, "is_locked": False})
        logger.info("Usage gate unlocked")

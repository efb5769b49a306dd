"""
Best completion times per difficulty.

The storage backend is a plain string key-value store; this module owns
the key layout, the value format and the comparison rule.
"""
import json
import logging
import math
from pathlib import Path
from typing import Dict, Optional, Protocol, Union

from .config import Difficulty

logger = logging.getLogger(__name__)

NO_SCORE = "No score yet"
KEY_PREFIX = "best_time."


def normalize_score(duration: float, difficulty: Union[Difficulty, int]) -> int:
    """
    Round an elapsed time up to the nearest multiple of the difficulty.

    ``ceil(duration / d) * d``; e.g. 89.3 seconds on Medium scores 90.
    """
    level = int(Difficulty.parse(difficulty))
    return math.ceil(duration / level) * level


def score_key(difficulty: Difficulty) -> str:
    return f"{KEY_PREFIX}{difficulty.label.lower()}"


# ============================================================================
# Key-Value Backends
# ============================================================================

class KeyValueStore(Protocol):
    """Minimal string key-value persistence."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class InMemoryKeyValueStore:
    """Dictionary-backed store for tests and throwaway sessions."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self.data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


class JsonFileKeyValueStore:
    """
    Store backed by a single JSON object on disk.

    The file is read once on construction and rewritten on every ``set``.
    An unreadable or malformed file is treated as empty.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)
        self.data: Dict[str, str] = self._load()

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable score file %s: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring score file %s: not a JSON object", self.path)
            return {}
        return {str(key): str(value) for key, value in data.items()}

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # A failed write leaves the previous file in place
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(self.data, f, indent=2, sort_keys=True)
            tmp_path.replace(self.path)
        finally:
            tmp_path.unlink(missing_ok=True)


# ============================================================================
# Score Store
# ============================================================================

class ScoreStore:
    """
    Compares and records the best completion time per difficulty.

    Args:
        backend: Key-value store holding the formatted values.
    """

    def __init__(self, backend: Optional[KeyValueStore] = None) -> None:
        self.backend = backend if backend is not None else InMemoryKeyValueStore()

    def best(self, difficulty: Union[Difficulty, int]) -> Optional[int]:
        """
        Stored best time, or None if absent or unreadable.

        Malformed values are logged and treated as absent.
        """
        difficulty = Difficulty.parse(difficulty)
        raw = self.backend.get(score_key(difficulty))
        if raw is None:
            return None
        try:
            value = int(raw.strip())
        except (AttributeError, ValueError):
            logger.warning(
                "Ignoring malformed %s score %r", difficulty.label, raw
            )
            return None
        if value < 0:
            logger.warning(
                "Ignoring negative %s score %r", difficulty.label, raw
            )
            return None
        return value

    def save(self, candidate: int, difficulty: Union[Difficulty, int]) -> bool:
        """
        Record ``candidate`` if it beats the stored best.

        Returns:
            True if the value was written.
        """
        difficulty = Difficulty.parse(difficulty)
        current = self.best(difficulty)
        if current is not None and candidate >= current:
            return False
        self.backend.set(score_key(difficulty), str(int(candidate)))
        logger.info("New %s best: %ds", difficulty.label, candidate)
        return True

    def format_best(self, difficulty: Union[Difficulty, int]) -> str:
        best = self.best(difficulty)
        if best is None:
            return NO_SCORE
        return f"{best}s"

    def snapshot(self) -> Dict[str, Optional[int]]:
        """Best value for every difficulty, keyed by label."""
        return {level.label: self.best(level) for level in Difficulty}

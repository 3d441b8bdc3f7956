"""
Best-score persistence.

The run controller only needs ``load()`` and ``save()``; where the number
actually lives is up to the implementation.
"""

from abc import ABC, abstractmethod
from pathlib import Path
import json
import logging

logger = logging.getLogger(__name__)


class BestScoreStore(ABC):
    """Abstract best-score storage."""

    @abstractmethod
    def load(self) -> int:
        """Return the stored best score, or 0 when nothing is stored."""
        ...

    @abstractmethod
    def save(self, score: int) -> None:
        """Persist a new best score."""
        ...


class MemoryBestScoreStore(BestScoreStore):
    """Keeps the best score for the lifetime of the process only."""

    def __init__(self, initial: int = 0) -> None:
        self._best = initial
        self.saves = 0

    def load(self) -> int:
        return self._best

    def save(self, score: int) -> None:
        self._best = score
        self.saves += 1


class JsonBestScoreStore(BestScoreStore):
    """Stores the best score as ``{"best_score": n}`` in a JSON file.

    Read and write failures are logged and never raised: an unreadable file
    counts as no best score, a failed write just loses the record.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def load(self) -> int:
        if not self.path.exists():
            return 0

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            best = int(data.get("best_score", 0))
        except Exception as e:
            logger.error(f"Failed to load best score from {self.path}: {e}")
            return 0

        logger.info(f"Loaded best score {best}")
        return max(0, best)

    def save(self, score: int) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump({"best_score": int(score)}, f, indent=2)
        except Exception as e:
            logger.error(f"Failed to save best score to {self.path}: {e}")
            return

        logger.info(f"Saved best score {score}")

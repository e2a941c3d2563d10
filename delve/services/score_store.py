"""Best-score persistence backends.

The engine only needs ``load() -> int`` and ``save(depth)``. ``SqlScoreStore``
goes through the ``BestScore`` model and must be used inside a Flask app
context; ``MemoryScoreStore`` backs the terminal client and tests.
"""

from __future__ import annotations

import os
from typing import Protocol

DEFAULT_SCORE_KEY = "bestScore"


def best_score_key() -> str:
    return os.getenv("DELVE_BEST_SCORE_KEY", DEFAULT_SCORE_KEY)


class ScoreStore(Protocol):
    def load(self) -> int: ...

    def save(self, depth: int) -> None: ...


class MemoryScoreStore:
    def __init__(self, initial: int = 0):
        self.value = initial

    def load(self) -> int:
        return self.value

    def save(self, depth: int) -> None:
        self.value = depth


class SqlScoreStore:
    def __init__(self, key: str | None = None):
        self.key = key or best_score_key()

    def load(self) -> int:
        from delve.models.score import BestScore

        return BestScore.get(self.key)

    def save(self, depth: int) -> None:
        from delve.models.score import BestScore

        BestScore.set(self.key, depth)


__all__ = ["ScoreStore", "MemoryScoreStore", "SqlScoreStore", "best_score_key", "DEFAULT_SCORE_KEY"]

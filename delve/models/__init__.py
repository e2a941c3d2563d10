# Model package init
from .entities import Monster, MonsterView, Player, PlayerView  # noqa: F401 re-export
from .events import EVENT_KINDS, Event  # noqa: F401 re-export
from .run_state import RunState  # noqa: F401 re-export
from .score import BestScore  # noqa: F401 re-export
from .snapshot import Snapshot  # noqa: F401 re-export

__all__ = [
    "BestScore",
    "EVENT_KINDS",
    "Event",
    "Monster",
    "MonsterView",
    "Player",
    "PlayerView",
    "RunState",
    "Snapshot",
]

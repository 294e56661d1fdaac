from app import db  # noqa: F401 - imported for model imports

from .game import Game
from .game_player_stats import GamePlayerStats
from .league import League
from .player import Player

__all__ = [
    "Player",
    "League",
    "Game",
    "GamePlayerStats",
]

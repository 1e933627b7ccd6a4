from gapslide.engine.gamemoves.engine import MoveCase, MoveEngine, MovePlan, MoveSession
from gapslide.engine.gamemoves.enumerator import Move, MoveEnumerator

__all__ = ["Move", "MoveCase", "MoveEngine", "MoveEnumerator", "MovePlan", "MoveSession"]

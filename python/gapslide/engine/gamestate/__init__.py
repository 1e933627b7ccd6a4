from gapslide.engine.gamestate.state import ChallengeInfo, GameMode, GameState

__all__ = ["ChallengeInfo", "GameMode", "GameState"]

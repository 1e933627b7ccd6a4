from gapslide.engine.gamegenerator.generator import (
    DEFAULT_TUNING,
    GameGenerator,
    ShuffleResult,
    ShuffleTuning,
)
from gapslide.engine.gamegenerator.rng import SeededRandom, daily_seed, mix_seed

__all__ = [
    "DEFAULT_TUNING",
    "GameGenerator",
    "SeededRandom",
    "ShuffleResult",
    "ShuffleTuning",
    "daily_seed",
    "mix_seed",
]

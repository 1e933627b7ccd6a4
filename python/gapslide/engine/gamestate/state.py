"""Tracks the mutable state of a game in progress."""

from __future__ import annotations

import time
from dataclasses import dataclass
from enum import StrEnum


class GameMode(StrEnum):
    FREEPLAY = "freeplay"
    CHALLENGE = "challenge"


@dataclass(frozen=True)
class ChallengeInfo:
    """Everything needed to replay a challenge exactly."""

    seed: int
    steps: int
    board: str
    gap_config: str
    randomize_gaps: bool = False
    wrap_horizontal: bool = False
    wrap_vertical: bool = False


class GameState:
    """Mode, move counter, timer and the flags that gate input."""

    def __init__(self) -> None:
        self.mode = GameMode.FREEPLAY
        self.challenge: ChallengeInfo | None = None
        self.moves: int = 0
        self.solved: bool = False
        self.is_shuffling: bool = False
        self._start_time: float | None = None
        self._elapsed_banked: float = 0.0
        self._running: bool = False

    # -- mode -----------------------------------------------------------------

    @property
    def is_challenge(self) -> bool:
        return self.mode is GameMode.CHALLENGE

    def begin_challenge(self, info: ChallengeInfo) -> None:
        self.mode = GameMode.CHALLENGE
        self.challenge = info
        self.moves = 0
        self.solved = False
        self.stop_timer()

    def end_challenge(self) -> None:
        self.mode = GameMode.FREEPLAY
        self.challenge = None
        self.moves = 0
        self.solved = False
        self.stop_timer()

    @property
    def accepts_moves(self) -> bool:
        """False once a challenge is won or while its clock is paused."""
        if not self.is_challenge or self.is_shuffling:
            return True
        return not (self.solved or self.paused)

    # -- time tracking --------------------------------------------------------

    @property
    def elapsed_time(self) -> float:
        if self._running and self._start_time is not None:
            return self._elapsed_banked + (time.time() - self._start_time)
        return self._elapsed_banked

    @property
    def paused(self) -> bool:
        return self._start_time is not None and not self._running

    def start_timer(self) -> None:
        self._start_time = time.time()
        self._elapsed_banked = 0.0
        self._running = True

    def pause(self) -> None:
        if self._running and self._start_time is not None:
            self._elapsed_banked += time.time() - self._start_time
            self._running = False

    def resume(self) -> None:
        if self.paused:
            self._start_time = time.time()
            self._running = True

    def freeze(self) -> None:
        """Stop the clock for good (challenge solved)."""
        self.pause()
        self._start_time = None

    def stop_timer(self) -> None:
        self._start_time = None
        self._elapsed_banked = 0.0
        self._running = False

    # -- moves ----------------------------------------------------------------

    def increment_moves(self) -> None:
        self.moves += 1

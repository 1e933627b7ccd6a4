"""Core gameplay logic: the session that owns a board and hosts its moves."""

from __future__ import annotations

import logging
import random
from collections.abc import Callable

from gapslide.engine.gamegenerator import GameGenerator, SeededRandom, ShuffleResult
from gapslide.engine.gamegenerator.generator import StepCallback
from gapslide.engine.gamemoves import Move, MoveEngine, MoveEnumerator
from gapslide.engine.gamestate import ChallengeInfo, GameState
from gapslide.models.board import Board, Direction, Piece, Snapshot
from gapslide.models.config import BoardConfig

logger = logging.getLogger(__name__)


class GamePlay:
    """Orchestrates a single game session.

    The session is what the move engine reports back to: it gates input
    while a challenge is paused or won, repaints through *on_render*, keeps
    the undo history and counts challenge moves.
    """

    def __init__(
        self,
        config: BoardConfig,
        gap_key: str | None = None,
        wrap_horizontal: bool = False,
        wrap_vertical: bool = False,
        on_render: Callable[[], None] | None = None,
    ) -> None:
        self.config: BoardConfig | None = config
        self.board = GameGenerator.solved(config, gap_key, wrap_horizontal, wrap_vertical)
        self.state = GameState()
        self.on_render = on_render
        self.last_shuffle: ShuffleResult | None = None
        self._history: list[Snapshot] = []
        self._cursor = -1
        self._clear_history()

    @classmethod
    def from_board(cls, board: Board) -> GamePlay:
        """Create a game session from an existing board (e.g. built in a test)."""
        obj = object.__new__(cls)
        obj.config = None
        obj.board = board
        obj.state = GameState()
        obj.on_render = None
        obj.last_shuffle = None
        obj._history = []
        obj._cursor = -1
        obj._clear_history()
        return obj

    # -- engine hooks ---------------------------------------------------------

    @property
    def render_suppressed(self) -> bool:
        """Challenge shuffles run without repainting so the walk stays hidden."""
        return self.state.is_shuffling and self.state.is_challenge

    def accepts_moves(self) -> bool:
        return self.state.accepts_moves

    def finalize(self, skip_render: bool, dry_run: bool) -> None:
        if dry_run:
            return
        if not skip_render:
            self._render()
        if self.state.is_shuffling:
            return
        self._capture()
        if self.state.is_challenge:
            self.state.increment_moves()
            if self.board.all_at_home():
                self._handle_win()

    # -- movement (direction = the side of the gap being looked at) ------------

    def move(
        self,
        direction: Direction | str,
        gap: Piece | None = None,
        dry_run: bool = False,
    ) -> bool:
        """Slide whatever sits on the *direction* side of the gap into it.

        E.g. ``Direction.UP`` moves the piece **below** the gap upward.
        Returns True if the move was valid.
        """
        return MoveEngine.try_move(self.board, direction, gap, dry_run, session=self)

    def valid_moves(self) -> list[Move]:
        return MoveEnumerator.valid_moves(self.board, session=self)

    def cycle_gap(self) -> Piece | None:
        if not self.accepts_moves():
            return None
        gap = self.board.cycle_selected_gap()
        self._render()
        return gap

    # -- shuffling & challenges -----------------------------------------------

    def shuffle(
        self,
        steps: int,
        seed: int | None = None,
        randomize_gaps: bool = False,
        on_step: StepCallback | None = None,
    ) -> ShuffleResult:
        """Scramble the current board; the undo history starts afresh."""
        self.state.is_shuffling = True
        try:
            result = GameGenerator.shuffle(
                self.board,
                steps,
                seed,
                randomize_gaps,
                session=self,
                on_step=on_step,
            )
        finally:
            self.state.is_shuffling = False
        self.last_shuffle = result
        self._clear_history()
        self._render()
        return result

    def start_challenge(
        self,
        seed: int,
        steps: int,
        randomize_gaps: bool = False,
        on_step: StepCallback | None = None,
    ) -> ShuffleResult:
        """Reset to solved, shuffle with the challenge parameters, start the clock."""
        topo = self.board.topology
        self.state.begin_challenge(
            ChallengeInfo(
                seed=seed,
                steps=steps,
                board=self.board.slug,
                gap_config=self.board.gap_key,
                randomize_gaps=randomize_gaps,
                wrap_horizontal=topo.wrap_horizontal,
                wrap_vertical=topo.wrap_vertical,
            )
        )
        self._reset_board()
        result = self.shuffle(steps, seed, randomize_gaps, on_step)
        self.state.start_timer()
        logger.info(f"Challenge started: seed={seed} steps={steps} board={self.board.slug}")
        return result

    def restart_challenge(self, on_step: StepCallback | None = None) -> ShuffleResult | None:
        info = self.state.challenge
        if info is None:
            return None
        return self.start_challenge(info.seed, info.steps, info.randomize_gaps, on_step)

    def give_up(self) -> None:
        """Leave challenge mode, keeping the board as it is."""
        self.state.end_challenge()
        self._render()

    def shuffle_score(self) -> int:
        return GameGenerator.shuffle_score(self.board)

    # -- board management -----------------------------------------------------

    def reset(self) -> None:
        """Back to the solved state with the configured gaps."""
        self._reset_board()
        self._clear_history()
        self._render()

    def switch_board(self, config: BoardConfig, gap_key: str | None = None) -> None:
        topo = self.board.topology
        self.config = config
        self.board = GameGenerator.solved(
            config, gap_key, topo.wrap_horizontal, topo.wrap_vertical
        )
        self.state.end_challenge()
        self._clear_history()
        self._render()

    def set_wrap(self, horizontal: bool, vertical: bool) -> None:
        """Change wrap flags; turning off an axis a 2×2 piece straddles resets the board."""
        topo = self.board.topology
        turning_off_h = topo.wrap_horizontal and not horizontal
        turning_off_v = topo.wrap_vertical and not vertical
        straddling = self.board.has_wrapped_large_pieces(turning_off_h, turning_off_v)

        # Reset while the old wrap still applies; the straddling footprint
        # cannot be placed on the narrower grid.
        if straddling:
            logger.info("Wrap disabled under a straddling large piece; board reset")
            self.board.reset_to_home()
        self.board.set_wrap(horizontal, vertical)
        self._clear_history()
        self._render()

    def reset_gap_identities(self) -> None:
        self.board.reset_gap_identities()
        self._clear_history()
        self._render()

    def randomize_gap_identities(self, seed: int | None = None) -> None:
        rand_int = SeededRandom(seed).next_int if seed is not None else random.randrange
        self.board.randomize_gap_identities(rand_int)
        self._clear_history()
        self._render()

    # -- history --------------------------------------------------------------

    @property
    def can_undo(self) -> bool:
        return self._cursor > 0

    @property
    def can_redo(self) -> bool:
        return self._cursor < len(self._history) - 1

    def undo(self) -> bool:
        if not self.can_undo or not self.accepts_moves():
            return False
        self._cursor -= 1
        self._jump()
        return True

    def redo(self) -> bool:
        if not self.can_redo or not self.accepts_moves():
            return False
        self._cursor += 1
        self._jump()
        return True

    # -- queries --------------------------------------------------------------

    @property
    def is_won(self) -> bool:
        return self.board.all_at_home()

    def all_at_home(self) -> bool:
        return self.board.all_at_home()

    # -- helpers --------------------------------------------------------------

    def _reset_board(self) -> None:
        if self.config is not None:
            topo = self.board.topology
            self.board = GameGenerator.solved(
                self.config, self.board.gap_key, topo.wrap_horizontal, topo.wrap_vertical
            )
        else:
            self.board.reset_to_home()

    def _render(self) -> None:
        if self.on_render is not None:
            self.on_render()

    def _capture(self) -> None:
        del self._history[self._cursor + 1:]
        self._history.append(self.board.snapshot())
        self._cursor = len(self._history) - 1

    def _clear_history(self) -> None:
        self._history = [self.board.snapshot()]
        self._cursor = 0

    def _jump(self) -> None:
        self.board.restore(self._history[self._cursor])
        self._render()
        if self.state.is_challenge and self.board.all_at_home():
            self._handle_win()

    def _handle_win(self) -> None:
        self.state.solved = True
        self.state.freeze()
        logger.info(
            f"Challenge solved in {self.state.moves} moves "
            f"({self.state.elapsed_time:.1f}s)"
        )

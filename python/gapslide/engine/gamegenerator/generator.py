"""Generates solvable boards by walking legal moves away from the solved state."""

from __future__ import annotations

import logging
import math
import random
from collections.abc import Callable
from dataclasses import dataclass, field

from gapslide.engine.gamegenerator.rng import SeededRandom, mix_seed
from gapslide.engine.gamemoves import Move, MoveEngine, MoveEnumerator, MoveSession
from gapslide.models.board import Board, Piece
from gapslide.models.config import BoardConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ShuffleTuning:
    """Knobs of the weighted walk.

    Urgency grows by ``1 / urgency_buildup_rate`` for every move that is not
    a large-piece move and resets when one is played; it boosts large-piece
    moves and, through the distance heuristic, moves that pull gaps together.
    """

    urgency_buildup_rate: float = 5
    urgency_max: float = 1.0
    adaptive_influence: float = 1.0
    distance_influence: float = 1.0
    distance_weight_closer: float = 4.0
    distance_weight_further: float = 0.25
    big_base_weight: int = 5
    urgency_big_bonus: int = 30
    small_base_weight: float = 1.0
    gap_swap_probability: float = 0.1


DEFAULT_TUNING = ShuffleTuning()


@dataclass
class ShuffleResult:
    seed: int
    mixed_seed: int
    steps: int
    moves: list[Move] = field(default_factory=list)
    score: int = 0
    exhausted: bool = False


StepCallback = Callable[[int, Move], None]


class GameGenerator:
    """Creates solvable puzzles by shuffling from the solved state."""

    @staticmethod
    def solved(
        config: BoardConfig,
        gap_key: str | None = None,
        wrap_horizontal: bool = False,
        wrap_vertical: bool = False,
    ) -> Board:
        """Return the goal-state board for *config*."""
        return Board.from_config(config, gap_key, wrap_horizontal, wrap_vertical)

    @staticmethod
    def generate(
        config: BoardConfig,
        steps: int,
        seed: int | None = None,
        gap_key: str | None = None,
        randomize_gaps: bool = False,
        wrap_horizontal: bool = False,
        wrap_vertical: bool = False,
    ) -> tuple[Board, ShuffleResult]:
        """Return a shuffled board and the record of how it was shuffled."""
        board = GameGenerator.solved(config, gap_key, wrap_horizontal, wrap_vertical)
        result = GameGenerator.shuffle(board, steps, seed, randomize_gaps)
        return board, result

    @staticmethod
    def shuffle(
        board: Board,
        steps: int,
        seed: int | None = None,
        randomize_gaps: bool = False,
        session: MoveSession | None = None,
        on_step: StepCallback | None = None,
        tuning: ShuffleTuning = DEFAULT_TUNING,
    ) -> ShuffleResult:
        """Scramble *board* in-place with a weighted random walk of *steps* moves.

        Every step is a legal engine move, so the result is always solvable.
        The walk is fully determined by the seed, step count, board slug,
        gap configuration, ``randomize_gaps`` and the wrap flags. Without a
        seed a fresh 32-bit one is drawn and reported in the result.

        *on_step* is called after each move with its index and the move; it
        is the host's chance to repaint and does not affect the outcome.
        """
        if seed is None:
            seed = random.getrandbits(32)
            logger.debug(f"Random seed generated: {seed}")

        topo = board.topology
        mixed = mix_seed(
            seed,
            steps,
            board.slug,
            board.gap_key,
            randomize_gaps,
            topo.wrap_horizontal,
            topo.wrap_vertical,
        )
        rng = SeededRandom(mixed)
        result = ShuffleResult(seed=seed, mixed_seed=mixed, steps=steps)

        if randomize_gaps:
            board.randomize_gap_identities(rng.next_int)

        gaps = board.gaps()
        last: Move | None = None
        since_big = 0

        try:
            for i in range(steps):
                moves = MoveEnumerator.valid_moves(board, gaps, session)
                if not moves:
                    result.exhausted = True
                    break

                candidates = [m for m in moves if not m.reverse_of(last)] or moves
                urgency = (
                    min(since_big / tuning.urgency_buildup_rate, tuning.urgency_max)
                    * tuning.adaptive_influence
                )
                pool = GameGenerator._weighted_pool(
                    board, candidates, urgency, gaps, rng, tuning
                )
                move = pool[rng.next_int(len(pool))]

                gap = board.piece_by_id[move.gap_id]
                board.select_gap(gap)
                MoveEngine.try_move(board, move.direction, gap, session=session)
                result.moves.append(move)
                last = move
                since_big = 0 if move.is_big else since_big + 1

                if on_step is not None:
                    on_step(i, move)
        finally:
            # Hide which gap moved last.
            if gaps:
                board.select_gap(gaps[rng.next_int(len(gaps))])

        result.score = GameGenerator.shuffle_score(board)
        logger.info(
            f"Shuffle complete: seed={seed} steps={len(result.moves)}/{steps} "
            f"score={result.score}"
        )
        return result

    @staticmethod
    def shuffle_score(board: Board) -> int:
        """Sum of wrap-aware Manhattan distances of large tiles from home.

        Higher means more scrambled; purely diagnostic.
        """
        return sum(
            board.topology.distance(p.pos, p.home)
            for p in board.pieces
            if p.is_large and not p.is_gap
        )

    # -- weighting ------------------------------------------------------------

    @staticmethod
    def _weighted_pool(
        board: Board,
        candidates: list[Move],
        urgency: float,
        gaps: list[Piece],
        rng: SeededRandom,
        tuning: ShuffleTuning,
    ) -> list[Move]:
        pool: list[Move] = []
        has_non_swap = any(not m.is_gap_swap for m in candidates)

        for move in candidates:
            if move.is_big:
                count = tuning.big_base_weight + math.floor(urgency * tuning.urgency_big_bonus)
                pool.extend([move] * count)
            elif move.is_gap_swap:
                if not has_non_swap or rng.next() < tuning.gap_swap_probability:
                    pool.append(move)
            else:
                weight = tuning.small_base_weight
                if tuning.distance_influence > 0:
                    weight *= GameGenerator.distance_weight(board, move, urgency, gaps, tuning)
                if tuning.adaptive_influence > 0:
                    weight *= 1 + urgency
                # Round half up.
                pool.extend([move] * max(1, math.floor(weight + 0.5)))

        return pool or list(candidates)

    @staticmethod
    def distance_weight(
        board: Board,
        move: Move,
        urgency: float,
        gaps: list[Piece],
        tuning: ShuffleTuning = DEFAULT_TUNING,
    ) -> float:
        """Weight multiplier favouring moves that bring the acting gap nearer another gap."""
        if move.is_gap_swap or move.is_big or len(gaps) < 2:
            return 1.0

        topo = board.topology
        gap = board.piece_by_id[move.gap_id]
        others = [g.pos for g in gaps if g is not gap]
        if not others:
            return 1.0

        # The gap steps against the travel of the piece it lets in.
        tx, ty = move.direction.travel
        after = topo.normalize(gap.x - tx, gap.y - ty)

        before_dist = min(topo.distance(gap.pos, o) for o in others)
        after_dist = min(topo.distance(after, o) for o in others)

        scale = urgency * tuning.distance_influence
        if after_dist < before_dist:
            return 1.0 + (tuning.distance_weight_closer - 1.0) * scale
        if after_dist > before_dist:
            return 1.0 - (1.0 - tuning.distance_weight_further) * scale
        return 1.0

"""Lists every legal move on the current board."""

from __future__ import annotations

from dataclasses import dataclass

from gapslide.engine.gamemoves.engine import MoveEngine, MoveSession
from gapslide.models.board import Board, Direction, Piece


@dataclass(frozen=True)
class Move:
    """A legal (gap, direction) pair with what kind of entity it pulls in.

    ``is_big``: the looked-at entity is a large tile.
    ``is_gap_swap``: the looked-at entity is another gap.
    """

    gap_id: str
    direction: Direction
    is_big: bool = False
    is_gap_swap: bool = False

    def reverse_of(self, other: Move | None) -> bool:
        """True if this move undoes *other* (same gap, opposite side)."""
        return (
            other is not None
            and self.gap_id == other.gap_id
            and self.direction == other.direction.opposite
        )

    def __str__(self) -> str:
        kind = "gap swap" if self.is_gap_swap else "big piece" if self.is_big else "small piece"
        return f"{self.gap_id} {self.direction.value} ({kind})"


class MoveEnumerator:
    """Dry-runs the engine for every gap and direction."""

    @staticmethod
    def valid_moves(
        board: Board,
        gaps: list[Piece] | None = None,
        session: MoveSession | None = None,
    ) -> list[Move]:
        if gaps is None:
            gaps = board.gaps()

        moves: list[Move] = []
        for gap in gaps:
            for direction in Direction:
                if not MoveEngine.try_move(board, direction, gap, dry_run=True, session=session):
                    continue
                source = MoveEngine.source_piece(board, gap, direction)
                moves.append(
                    Move(
                        gap_id=gap.id,
                        direction=direction,
                        is_big=source is not None and source.is_large and not source.is_gap,
                        is_gap_swap=source is not None and source.is_gap,
                    )
                )
        return moves

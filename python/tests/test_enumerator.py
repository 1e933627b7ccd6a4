from __future__ import annotations

from gapslide.engine.gamemoves import Move, MoveEnumerator
from gapslide.models.board import Board, Direction


def test_solved_default_board_moves(default_board: Board):
    assert MoveEnumerator.valid_moves(default_board) == [
        Move("G0", Direction.UP, is_gap_swap=True),
        Move("G0", Direction.DOWN),
        Move("G0", Direction.RIGHT, is_big=True),
        Move("G1", Direction.DOWN, is_gap_swap=True),
        Move("G1", Direction.RIGHT, is_big=True),
    ]


def test_large_gap_board_moves(large_gap_board: Board):
    moves = MoveEnumerator.valid_moves(large_gap_board)
    # The 2×2 gap sits in the bottom-left corner: only down (looking at y-1)
    # and left (looking at x+2) stay on the grid.
    assert [(m.gap_id, m.direction) for m in moves] == [
        ("BG0", Direction.DOWN),
        ("BG0", Direction.LEFT),
    ]
    assert not any(m.is_big or m.is_gap_swap for m in moves)


def test_enumeration_does_not_mutate(default_board: Board):
    snap = default_board.snapshot()
    MoveEnumerator.valid_moves(default_board)
    assert default_board.snapshot() == snap


def test_restricted_gap_list(default_board: Board):
    g1 = default_board.piece_by_id["G1"]
    assert {m.gap_id for m in MoveEnumerator.valid_moves(default_board, [g1])} == {"G1"}


def test_reverse_of():
    move = Move("G0", Direction.UP)
    assert move.reverse_of(Move("G0", Direction.DOWN))
    assert not move.reverse_of(Move("G1", Direction.DOWN))
    assert not move.reverse_of(Move("G0", Direction.UP))
    assert not move.reverse_of(None)


def test_move_str():
    assert str(Move("G0", Direction.RIGHT, is_big=True)) == "G0 right (big piece)"

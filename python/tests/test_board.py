"""Board model: construction, selection, gap identity and integrity checks."""

from __future__ import annotations

import logging
import random

from gapslide.models.board import Board, Cell, Direction
from gapslide.models.config import BOARDS

from conftest import make_board, make_config


# -- construction -------------------------------------------------------------


def test_default_board_layout(default_board: Board):
    large = [p for p in default_board if p.is_large]
    small_tiles = [p for p in default_board if not p.is_large and not p.is_gap]
    assert [p.id for p in large] == [f"B{i}" for i in range(8)]
    assert len(small_tiles) == 30
    assert [(g.id, g.pos) for g in default_board.gaps()] == [("G0", (7, 6)), ("G1", (7, 7))]
    assert default_board.selected_gap().id == "G0"
    assert default_board.all_at_home()
    assert default_board.violations() == []


def test_large_gap_board_layout(large_gap_board: Board):
    (gap,) = large_gap_board.gaps()
    assert gap.id == "BG0"
    assert gap.is_large and gap.pos == (0, 6)
    assert large_gap_board.gap_counts() == (0, 1)
    assert large_gap_board.grid[7][1] == Cell("BG0", 1, 1)


def test_large_piece_cells_carry_quarter_offsets(default_board: Board):
    b7 = default_board.piece_by_id["B7"]
    assert b7.pos == (5, 6)
    assert default_board.grid[6][5] == Cell("B7", 0, 0)
    assert default_board.grid[7][6] == Cell("B7", 1, 1)
    assert default_board.piece_at(6, 7) is b7


def test_cell_at_outside_grid_is_none(default_board: Board):
    assert default_board.cell_at(8, 0) is None
    assert default_board.cell_at(0, -1) is None


def test_gap_anchor_inside_large_piece_is_skipped(caplog):
    with caplog.at_level(logging.WARNING):
        board = make_board(4, 4, large=((0, 0),), gaps=((1, 1), (3, 3)))
    assert [g.pos for g in board.gaps()] == [(3, 3)]
    assert "matches no entity" in caplog.text


def test_rebuild_grid_is_idempotent(default_board: Board):
    before = [row[:] for row in default_board.grid]
    default_board.rebuild_grid()
    default_board.rebuild_grid()
    assert default_board.grid == before


# -- selection ----------------------------------------------------------------


def test_cycle_selected_gap_wraps_around(default_board: Board):
    assert default_board.cycle_selected_gap().id == "G1"
    assert default_board.cycle_selected_gap().id == "G0"
    assert sum(p.selected for p in default_board) == 1


# -- gap identity -------------------------------------------------------------


def test_randomize_gap_identities_keeps_counts_per_size():
    board = Board.from_config(BOARDS["default"], "mixed")
    assert board.gap_counts() == (1, 1)
    rng = random.Random(3)
    for _ in range(20):
        board.randomize_gap_identities(rng.randrange)
        assert board.gap_counts() == (1, 1)
        assert board.selected_gap() is not None
        assert board.violations() == []


def test_reset_gap_identities_restores_configured_gaps(default_board: Board):
    default_board.randomize_gap_identities(random.Random(9).randrange)
    default_board.reset_gap_identities()
    assert [g.id for g in default_board.gaps()] == ["G0", "G1"]
    assert default_board.selected_gap().id == "G0"


def test_reset_to_home_after_moves(default_board: Board):
    from gapslide.engine.gamemoves import MoveEngine

    assert MoveEngine.try_move(default_board, Direction.RIGHT)
    assert not default_board.all_at_home()
    default_board.reset_to_home()
    assert default_board.all_at_home()
    assert default_board.violations() == []


# -- snapshots ----------------------------------------------------------------


def test_snapshot_restore_round_trip(default_board: Board):
    snap = default_board.snapshot()
    g0 = default_board.piece_by_id["G0"]
    s = default_board.piece_at(7, 5)
    g0.x, g0.y, s.x, s.y = 7, 5, 7, 6
    default_board.rebuild_grid()
    default_board.restore(snap)
    assert default_board.all_at_home()
    assert default_board.piece_at(7, 6) is g0


def test_copy_is_independent(default_board: Board):
    clone = default_board.copy()
    clone.piece_by_id["G0"].x = 0
    assert default_board.piece_by_id["G0"].x == 7
    assert clone.topology is default_board.topology


# -- integrity ----------------------------------------------------------------


def test_violations_reports_missing_marker(default_board: Board):
    default_board.grid[0][2] = None
    problems = default_board.violations()
    assert len(problems) == 1
    assert "(2, 0)" in problems[0]


def test_violations_reports_selected_tile(default_board: Board):
    default_board.piece_by_id["S0"].selected = True
    assert any("more than one" in p for p in default_board.violations())


def test_has_wrapped_large_pieces():
    board = make_board(3, 2, large=((0, 0),), gaps=((2, 0), (2, 1)), wrap_h=True)
    assert not board.has_wrapped_large_pieces(True, True)
    big = board.piece_by_id["B0"]
    big.x = 2
    g0, g1 = board.gaps()
    g0.x, g1.x = 1, 1
    board.rebuild_grid()
    assert board.violations() == []
    assert board.has_wrapped_large_pieces(True, False)
    assert not board.has_wrapped_large_pieces(False, True)


def test_make_config_defaults():
    config = make_config(4, 4)
    assert config.gap_counts() == (1, 0)

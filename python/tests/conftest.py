"""Shared fixtures and helpers for the gapslide test suite."""

from __future__ import annotations

import pytest

from gapslide.engine.gameplay import GamePlay
from gapslide.models.board import Board
from gapslide.models.config import BOARDS, BoardConfig


def make_config(
    width: int,
    height: int,
    large: tuple[tuple[int, int], ...] = (),
    gaps: tuple[tuple[int, int], ...] = ((0, 0),),
    slug: str = "test",
) -> BoardConfig:
    return BoardConfig(
        slug=slug,
        width=width,
        height=height,
        large_pieces=large,
        gap_configurations={"default": gaps},
    )


def make_board(
    width: int,
    height: int,
    large: tuple[tuple[int, int], ...] = (),
    gaps: tuple[tuple[int, int], ...] = ((0, 0),),
    wrap_h: bool = False,
    wrap_v: bool = False,
) -> Board:
    return Board.from_config(make_config(width, height, large, gaps), None, wrap_h, wrap_v)


@pytest.fixture
def default_board() -> Board:
    """8×8 board, small gaps at (7,6) and (7,7)."""
    return Board.from_config(BOARDS["default"])


@pytest.fixture
def large_gap_board() -> Board:
    """8×8 board with a single 2×2 gap at (0,6)."""
    return Board.from_config(BOARDS["largegap"])


@pytest.fixture
def game() -> GamePlay:
    return GamePlay(BOARDS["default"])

from gapslide.models.board import Board, Cell, Direction, Piece
from gapslide.models.config import BOARDS, BoardConfig, get_board
from gapslide.models.topology import Topology

__all__ = [
    "BOARDS",
    "Board",
    "BoardConfig",
    "Cell",
    "Direction",
    "Piece",
    "Topology",
    "get_board",
]

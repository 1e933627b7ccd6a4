"""Board model: a grid of occupancy markers plus the pieces that own them."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass, replace
from enum import StrEnum

from gapslide.models.config import BoardConfig
from gapslide.models.topology import Topology

logger = logging.getLogger(__name__)


class Direction(StrEnum):
    """The side of the gap that is *looked at* for something to slide in.

    ``UP`` looks below the gap (the piece there moves up), ``LEFT`` looks to
    the right of it, and so on.
    """

    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

    @property
    def opposite(self) -> Direction:
        return _OPPOSITES[self]

    @property
    def travel(self) -> tuple[int, int]:
        """Unit vector of the piece that slides into the gap."""
        return _TRAVEL[self]


_OPPOSITES = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}

_TRAVEL = {
    Direction.UP: (0, -1),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
    Direction.RIGHT: (1, 0),
}


@dataclass(frozen=True)
class Cell:
    """Occupancy marker: which piece covers a cell, and which quarter of it."""

    piece_id: str
    ox: int = 0
    oy: int = 0


@dataclass(eq=False)
class Piece:
    """A tile or a gap, small (1×1) or large (2×2).

    Gaps and tiles share this one type; ``is_gap`` is the role flag and only
    gap-identity reassignment flips it.
    """

    id: str
    is_large: bool
    is_gap: bool
    x: int
    y: int
    home_x: int
    home_y: int
    selected: bool = False

    @property
    def pos(self) -> tuple[int, int]:
        return self.x, self.y

    @property
    def home(self) -> tuple[int, int]:
        return self.home_x, self.home_y

    @property
    def at_home(self) -> bool:
        return self.x == self.home_x and self.y == self.home_y


# id -> (x, y, is_gap, selected)
Snapshot = dict[str, tuple[int, int, bool, bool]]


class Board:
    """Authoritative puzzle state.

    ``grid[y][x]`` holds a :class:`Cell` naming the piece covering that
    cell. Pieces are kept in creation order, which is also the order gaps
    are enumerated in.
    """

    def __init__(
        self,
        topology: Topology,
        pieces: list[Piece],
        gap_anchors: tuple[tuple[int, int], ...] = (),
        slug: str = "custom",
        gap_key: str = "default",
    ) -> None:
        self.topology = topology
        self.pieces = pieces
        self.piece_by_id: dict[str, Piece] = {p.id: p for p in pieces}
        self.gap_anchors = gap_anchors
        self.slug = slug
        self.gap_key = gap_key
        self.grid: list[list[Cell | None]] = []
        self.rebuild_grid()

    # -- construction helpers -------------------------------------------------

    @classmethod
    def from_config(
        cls,
        config: BoardConfig,
        gap_key: str | None = None,
        wrap_horizontal: bool = False,
        wrap_vertical: bool = False,
    ) -> Board:
        """Create the solved board for *config*.

        Large tiles come first (``B<i>``), then large gaps (``BG<i>``), then
        every uncovered cell in row-major order as a small gap (``G<i>``) or
        small tile (``S<i>``). The first gap starts selected.
        """
        key = gap_key or config.default_gap_key
        gap_anchors = config.gaps_for(key)
        large_gap_anchors = [g for g in gap_anchors if config.is_large_anchor(g)]
        small_gap_anchors = {g for g in gap_anchors if not config.is_large_anchor(g)}

        covered: set[tuple[int, int]] = set()
        for ax, ay in config.large_pieces:
            covered.update(
                ((ax, ay), (ax + 1, ay), (ax, ay + 1), (ax + 1, ay + 1))
            )

        pieces: list[Piece] = []
        big = 0
        for ax, ay in config.large_pieces:
            if (ax, ay) in large_gap_anchors:
                continue
            pieces.append(Piece(f"B{big}", True, False, ax, ay, ax, ay))
            big += 1
        for i, (ax, ay) in enumerate(large_gap_anchors):
            pieces.append(Piece(f"BG{i}", True, True, ax, ay, ax, ay))

        s_idx = g_idx = 0
        for y in range(config.height):
            for x in range(config.width):
                if (x, y) in covered:
                    continue
                if (x, y) in small_gap_anchors:
                    pieces.append(Piece(f"G{g_idx}", False, True, x, y, x, y))
                    g_idx += 1
                else:
                    pieces.append(Piece(f"S{s_idx}", False, False, x, y, x, y))
                    s_idx += 1

        for anchor in small_gap_anchors & covered:
            logger.warning(
                f"Gap anchor {anchor} of '{config.slug}/{key}' lies inside a "
                f"large piece and matches no entity; skipped"
            )

        first_gap = next((p for p in pieces if p.is_gap), None)
        if first_gap is not None:
            first_gap.selected = True

        topology = Topology(config.width, config.height, wrap_horizontal, wrap_vertical)
        return cls(topology, pieces, gap_anchors, config.slug, key)

    # -- footprints -----------------------------------------------------------

    def footprint(self, piece: Piece) -> list[tuple[int, int]]:
        return self.topology.footprint(piece.x, piece.y, piece.is_large)

    def place_footprint(self, piece: Piece) -> None:
        if not piece.is_large:
            x, y = self.topology.normalize(piece.x, piece.y)
            self.grid[y][x] = Cell(piece.id)
            return
        for oy in range(2):
            for ox in range(2):
                x, y = self.topology.normalize(piece.x + ox, piece.y + oy)
                self.grid[y][x] = Cell(piece.id, ox, oy)

    def clear_footprint(self, piece: Piece) -> None:
        for x, y in self.footprint(piece):
            self.grid[y][x] = None

    def rebuild_grid(self) -> None:
        """Recreate every marker from piece positions."""
        self.grid = [[None] * self.width for _ in range(self.height)]
        for piece in self.pieces:
            self.place_footprint(piece)

    # -- queries --------------------------------------------------------------

    @property
    def width(self) -> int:
        return self.topology.width

    @property
    def height(self) -> int:
        return self.topology.height

    def cell_at(self, x: int, y: int) -> Cell | None:
        """Marker at (x, y), or None when the coordinate is off the grid."""
        if not self.topology.in_bounds(x, y):
            return None
        return self.grid[y][x]

    def piece_at(self, x: int, y: int) -> Piece | None:
        cell = self.cell_at(x, y)
        if cell is None:
            return None
        return self.piece_by_id.get(cell.piece_id)

    def gaps(self) -> list[Piece]:
        return [p for p in self.pieces if p.is_gap]

    def selected_gap(self) -> Piece | None:
        return next((p for p in self.pieces if p.is_gap and p.selected), None)

    def gap_counts(self) -> tuple[int, int]:
        """Return ``(small, large)`` counts of current gaps."""
        gaps = self.gaps()
        large = sum(1 for g in gaps if g.is_large)
        return len(gaps) - large, large

    def all_at_home(self) -> bool:
        """Win condition: every piece, gaps included, sits on its home anchor."""
        return all(p.at_home for p in self.pieces)

    def has_wrapped_large_pieces(self, horizontal: bool, vertical: bool) -> bool:
        """True if a 2×2 piece straddles the right or bottom edge."""
        for piece in self.pieces:
            if not piece.is_large:
                continue
            if horizontal and piece.x + 1 >= self.width:
                return True
            if vertical and piece.y + 1 >= self.height:
                return True
        return False

    def __iter__(self) -> Iterator[Piece]:
        return iter(self.pieces)

    # -- selection ------------------------------------------------------------

    def select_gap(self, gap: Piece) -> None:
        for p in self.pieces:
            p.selected = False
        gap.selected = True

    def cycle_selected_gap(self) -> Piece | None:
        """Move the selection to the next gap in board order."""
        gaps = self.gaps()
        if not gaps:
            return None
        current = self.selected_gap()
        idx = gaps.index(current) + 1 if current in gaps else 0
        nxt = gaps[idx % len(gaps)]
        self.select_gap(nxt)
        return nxt

    # -- gap identity ---------------------------------------------------------

    def reset_gap_identities(self) -> None:
        """Give gap identity back to the pieces whose homes are the configured gaps."""
        for p in self.pieces:
            p.is_gap = False
            p.selected = False

        for anchor in self.gap_anchors:
            piece = next((p for p in self.pieces if p.home == anchor), None)
            if piece is None:
                logger.warning(f"Gap anchor {anchor} matches no piece; skipped")
                continue
            piece.is_gap = True

        first_gap = next((p for p in self.pieces if p.is_gap), None)
        if first_gap is not None:
            first_gap.selected = True
        self.rebuild_grid()

    def reset_to_home(self) -> None:
        """Return every piece to its home anchor with the configured gaps."""
        for p in self.pieces:
            p.x, p.y = p.home
        self.reset_gap_identities()

    def randomize_gap_identities(self, rand_int: Callable[[int], int]) -> None:
        """Hand gap identity to random pieces, keeping per-size gap counts.

        Each size class is Fisher–Yates shuffled with *rand_int* (uniform in
        ``[0, n)``) and its first *k* members become gaps, where *k* is the
        current number of gaps of that size.
        """
        n_small, n_large = self.gap_counts()
        small = [p for p in self.pieces if not p.is_large]
        large = [p for p in self.pieces if p.is_large]

        chosen: list[Piece] = []
        for group, k in ((small, n_small), (large, n_large)):
            shuffled = group[:]
            for i in range(len(shuffled) - 1, 0, -1):
                j = rand_int(i + 1)
                shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
            chosen.extend(shuffled[:k])

        for p in self.pieces:
            p.is_gap = False
            p.selected = False
        for p in chosen:
            p.is_gap = True
        if chosen:
            chosen[0].selected = True
        self.rebuild_grid()

    # -- snapshots ------------------------------------------------------------

    def snapshot(self) -> Snapshot:
        return {p.id: (p.x, p.y, p.is_gap, p.selected) for p in self.pieces}

    def positions(self) -> dict[str, tuple[int, int]]:
        return {p.id: (p.x, p.y) for p in self.pieces}

    def restore(self, snapshot: Snapshot) -> None:
        for p in self.pieces:
            p.x, p.y, p.is_gap, p.selected = snapshot[p.id]
        self.rebuild_grid()

    def copy(self) -> Board:
        return Board(
            topology=self.topology,
            pieces=[replace(p) for p in self.pieces],
            gap_anchors=self.gap_anchors,
            slug=self.slug,
            gap_key=self.gap_key,
        )

    def set_wrap(self, horizontal: bool, vertical: bool) -> None:
        self.topology = self.topology.with_wrap(horizontal, vertical)
        self.rebuild_grid()

    # -- integrity ------------------------------------------------------------

    def violations(self) -> list[str]:
        """Describe every broken structural invariant; empty when healthy."""
        problems: list[str] = []
        seen: dict[tuple[int, int], str] = {}
        for p in self.pieces:
            if not self.topology.is_valid(p.x, p.y) or not self.topology.in_bounds(p.x, p.y):
                problems.append(f"{p.id} anchor {p.pos} is not normalized")
                continue
            if p.is_large and not self.topology.is_valid(p.x + 1, p.y + 1):
                problems.append(f"{p.id} footprint leaves the board at {p.pos}")
                continue
            cells = self.footprint(p)
            for i, (x, y) in enumerate(cells):
                if (x, y) in seen:
                    problems.append(f"{p.id} overlaps {seen[(x, y)]} at {(x, y)}")
                seen[(x, y)] = p.id
                expected = Cell(p.id, i % 2, i // 2) if p.is_large else Cell(p.id)
                if self.grid[y][x] != expected:
                    problems.append(
                        f"cell {(x, y)} holds {self.grid[y][x]}, expected {expected}"
                    )

        for y in range(self.height):
            for x in range(self.width):
                if (x, y) not in seen and self.grid[y][x] is not None:
                    problems.append(f"stale marker {self.grid[y][x]} at {(x, y)}")

        selected = [p.id for p in self.pieces if p.selected]
        if len(selected) > 1:
            problems.append(f"more than one selected piece: {selected}")
        if any(not self.piece_by_id[i].is_gap for i in selected):
            problems.append(f"selected piece is not a gap: {selected}")
        return problems

"""Board extents and wrap-around coordinate arithmetic."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Topology:
    """Grid extents plus the per-axis toroidal wrap flags.

    All coordinate arithmetic in the engine goes through :meth:`normalize`
    so that a wrapping axis behaves like a ring while a non-wrapping axis
    keeps its hard edges.
    """

    width: int
    height: int
    wrap_horizontal: bool = False
    wrap_vertical: bool = False

    def normalize(self, x: int, y: int) -> tuple[int, int]:
        """Reduce *x* / *y* modulo the extent on each wrapping axis."""
        if self.wrap_horizontal:
            x %= self.width
        if self.wrap_vertical:
            y %= self.height
        return x, y

    def is_valid(self, x: int, y: int) -> bool:
        """Return True if (*x*, *y*) is addressable under the wrap settings.

        Wrapping axes impose no bound; callers normalize before lookup.
        """
        if not self.wrap_horizontal and not 0 <= x < self.width:
            return False
        if not self.wrap_vertical and not 0 <= y < self.height:
            return False
        return True

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def footprint(self, x: int, y: int, large: bool) -> list[tuple[int, int]]:
        """Normalized cells covered by a 1×1 or 2×2 entity anchored at (x, y).

        Cells of a 2×2 footprint are returned row-major: (0,0) (1,0) (0,1) (1,1).
        """
        if not large:
            return [self.normalize(x, y)]
        return [
            self.normalize(x + ox, y + oy)
            for oy in range(2)
            for ox in range(2)
        ]

    def distance(self, a: tuple[int, int], b: tuple[int, int]) -> int:
        """Manhattan distance, taking the short way round on wrapping axes."""
        dx = abs(a[0] - b[0])
        dy = abs(a[1] - b[1])
        if self.wrap_horizontal:
            dx = min(dx, self.width - dx)
        if self.wrap_vertical:
            dy = min(dy, self.height - dy)
        return dx + dy

    def with_wrap(self, horizontal: bool, vertical: bool) -> Topology:
        return Topology(self.width, self.height, horizontal, vertical)

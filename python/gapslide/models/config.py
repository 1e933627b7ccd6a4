"""Board layouts: extents, large-piece homes and named gap configurations."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

Anchor = tuple[int, int]


@dataclass(frozen=True)
class BoardConfig:
    """Immutable description of a puzzle layout.

    ``large_pieces`` lists the top-left anchors of every 2×2 home block.
    Each entry of ``gap_configurations`` is a set of anchors acting as gaps
    in the solved state; an anchor that coincides with a large-piece anchor
    yields a 2×2 gap, any other anchor a 1×1 gap.
    """

    slug: str
    width: int
    height: int
    large_pieces: tuple[Anchor, ...]
    gap_configurations: dict[str, tuple[Anchor, ...]] = field(
        default_factory=dict
    )
    default_gap_key: str = "default"
    title: str = ""

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Board '{self.slug}' needs positive extents, "
                f"got {self.width}×{self.height}."
            )
        if not self.gap_configurations:
            raise ValueError(f"Board '{self.slug}' defines no gap configurations.")
        if self.default_gap_key not in self.gap_configurations:
            raise ValueError(
                f"Board '{self.slug}' has no gap configuration "
                f"'{self.default_gap_key}'."
            )

        covered: set[Anchor] = set()
        for ax, ay in self.large_pieces:
            if not (0 <= ax and ax + 1 < self.width and 0 <= ay and ay + 1 < self.height):
                raise ValueError(
                    f"Large piece at ({ax}, {ay}) does not fit on "
                    f"board '{self.slug}' ({self.width}×{self.height})."
                )
            for cell in ((ax, ay), (ax + 1, ay), (ax, ay + 1), (ax + 1, ay + 1)):
                if cell in covered:
                    raise ValueError(
                        f"Large pieces overlap at {cell} on board '{self.slug}'."
                    )
                covered.add(cell)

        for key, gaps in self.gap_configurations.items():
            seen: set[Anchor] = set()
            for gx, gy in gaps:
                if not (0 <= gx < self.width and 0 <= gy < self.height):
                    raise ValueError(
                        f"Gap ({gx}, {gy}) of configuration '{key}' lies "
                        f"outside board '{self.slug}'."
                    )
                if (gx, gy) in seen:
                    raise ValueError(
                        f"Gap configuration '{key}' repeats {(gx, gy)} on board '{self.slug}'."
                    )
                seen.add((gx, gy))

    # -- queries --------------------------------------------------------------

    def gaps_for(self, gap_key: str | None = None) -> tuple[Anchor, ...]:
        key = gap_key or self.default_gap_key
        try:
            return self.gap_configurations[key]
        except KeyError:
            raise ValueError(
                f"Unknown gap configuration '{key}' for board '{self.slug}'. "
                f"Choose from: {', '.join(self.gap_configurations)}."
            ) from None

    def is_large_anchor(self, anchor: Anchor) -> bool:
        return anchor in self.large_pieces

    def gap_counts(self, gap_key: str | None = None) -> tuple[int, int]:
        """Return ``(small, large)`` gap counts for a configuration."""
        gaps = self.gaps_for(gap_key)
        large = sum(1 for g in gaps if self.is_large_anchor(g))
        return len(gaps) - large, large

    # -- serialization --------------------------------------------------------

    @classmethod
    def from_dict(cls, slug: str, data: dict) -> BoardConfig:
        """Build a config from its JSON form.

        Example::

            {"width": 4, "height": 4, "large_pieces": [[0, 0]],
             "gap_configurations": {"default": [[3, 3]]}}
        """
        try:
            gap_configs = {
                key: tuple((int(x), int(y)) for x, y in anchors)
                for key, anchors in data["gap_configurations"].items()
            }
            return cls(
                slug=slug,
                width=int(data["width"]),
                height=int(data["height"]),
                large_pieces=tuple(
                    (int(x), int(y)) for x, y in data.get("large_pieces", [])
                ),
                gap_configurations=gap_configs,
                default_gap_key=data.get("default_gap_key", next(iter(gap_configs), "default")),
                title=data.get("title", slug),
            )
        except (KeyError, TypeError) as e:
            raise ValueError(f"Malformed board '{slug}': {e!r}") from e

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "width": self.width,
            "height": self.height,
            "large_pieces": [list(a) for a in self.large_pieces],
            "gap_configurations": {
                key: [list(a) for a in anchors]
                for key, anchors in self.gap_configurations.items()
            },
            "default_gap_key": self.default_gap_key,
        }


# -- built-in boards ----------------------------------------------------------

_HALF_BOARD: tuple[Anchor, ...] = (
    (0, 0), (3, 0), (5, 0),
    (0, 3), (3, 3), (6, 3),
    (0, 6), (5, 6),
)


def _shifted(anchors: tuple[Anchor, ...], dx: int, dy: int) -> tuple[Anchor, ...]:
    return tuple((x + dx, y + dy) for x, y in anchors)


DEFAULT_BOARD = BoardConfig(
    slug="default",
    title="Classic 8×8",
    width=8,
    height=8,
    large_pieces=_HALF_BOARD,
    gap_configurations={
        "default": ((7, 6), (7, 7)),
        "single": ((7, 7),),
        "large": ((0, 6),),
        "mixed": ((5, 6), (7, 7)),
    },
)

HORIZONTAL_BOARD = BoardConfig(
    slug="horizontal",
    title="Wide 16×8",
    width=16,
    height=8,
    large_pieces=_HALF_BOARD + _shifted(_HALF_BOARD, 8, 0),
    gap_configurations={
        "default": ((15, 6), (15, 7)),
        "large": ((13, 6),),
    },
)

VERTICAL_BOARD = BoardConfig(
    slug="vertical",
    title="Tall 8×16",
    width=8,
    height=16,
    large_pieces=_HALF_BOARD + _shifted(_HALF_BOARD, 0, 8),
    gap_configurations={
        "default": ((7, 14), (7, 15)),
        "large": ((5, 14),),
    },
)

LARGE_GAP_BOARD = BoardConfig(
    slug="largegap",
    title="Large gap 8×8",
    width=8,
    height=8,
    large_pieces=_HALF_BOARD,
    gap_configurations={"default": ((0, 6),)},
)

BOARDS: dict[str, BoardConfig] = {
    b.slug: b
    for b in (DEFAULT_BOARD, HORIZONTAL_BOARD, VERTICAL_BOARD, LARGE_GAP_BOARD)
}


def get_board(slug: str, registry: dict[str, BoardConfig] | None = None) -> BoardConfig:
    boards = BOARDS if registry is None else registry
    try:
        return boards[slug]
    except KeyError:
        raise ValueError(
            f"Unknown board '{slug}'. Choose from: {', '.join(boards)}."
        ) from None


def load_board_configs(path: Path) -> dict[str, BoardConfig]:
    """Load custom boards from a JSON file keyed by slug.

    Unreadable files and malformed entries are logged and skipped so a bad
    file never hides the built-in boards.
    """
    if not path.exists():
        logger.debug(f"No custom boards file at {path}")
        return {}

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError) as e:
        logger.warning(f"Failed to read custom boards from {path}: {e}")
        return {}

    if not isinstance(data, dict):
        logger.warning(f"Custom boards file {path} must hold a JSON object")
        return {}

    boards: dict[str, BoardConfig] = {}
    for slug, entry in data.items():
        try:
            boards[slug] = BoardConfig.from_dict(slug, entry)
        except ValueError as e:
            logger.warning(f"Skipping board '{slug}': {e}")
    logger.debug(f"Loaded {len(boards)} custom board(s) from {path}")
    return boards


def board_registry(data_dir: Path | None = None) -> dict[str, BoardConfig]:
    """Built-in boards merged with ``boards.json`` from *data_dir*."""
    registry = dict(BOARDS)
    if data_dir is not None:
        registry.update(load_board_configs(data_dir / "boards.json"))
    return registry

"""gapslide: sliding puzzle with 2×2 pieces, several gaps and wrap-around.

Usage::

    gapslide play                          # interactive menu
    gapslide play -b horizontal --wrap-h   # straight into a board
    gapslide play --daily                  # today's challenge
    gapslide shuffle --seed 42 --moves     # headless shuffle
    gapslide boards                        # list available boards
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from gapslide.engine.gamegenerator import GameGenerator, daily_seed
from gapslide.models.config import BoardConfig, board_registry, get_board
from gapslide.settings import load_settings, settings_path

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = Path.home() / ".gapslide"

console = Console()

app = typer.Typer(add_completion=False, help="Sliding puzzle with large pieces and many gaps.")


# -- shared state -------------------------------------------------------------


@dataclass
class _Context:
    data_dir: Path = DEFAULT_DATA_DIR
    settings: dict = field(default_factory=dict)
    registry: dict[str, BoardConfig] = field(default_factory=dict)


_ctx = _Context()


def _resolve_board(board: str | None, gap_config: str | None) -> tuple[BoardConfig, str]:
    slug = board or _ctx.settings["board"]
    try:
        config = get_board(slug, _ctx.registry)
        key = gap_config or _ctx.settings["gap_config"]
        if key not in config.gap_configurations:
            if gap_config is not None:
                config.gaps_for(gap_config)
            key = config.default_gap_key
    except ValueError as e:
        raise typer.BadParameter(str(e)) from None
    return config, key


def _flag(value: bool | None, setting: str) -> bool:
    return bool(_ctx.settings[setting]) if value is None else value


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(
        None, "--log-level",
        help="Logging level (DEBUG, INFO, WARNING, ERROR).",
    ),
    data_dir: Path = typer.Option(
        DEFAULT_DATA_DIR, "--data-dir",
        help="Directory holding settings.json and boards.json.",
    ),
) -> None:
    """Sliding puzzle with large pieces, several gaps and wrap-around."""
    _ctx.data_dir = data_dir
    _ctx.settings = load_settings(settings_path(data_dir))

    level = (log_level or _ctx.settings["log_level"]).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
    )
    logger.debug(f"Data directory: {data_dir}")
    _ctx.registry = board_registry(data_dir)


# -- commands -----------------------------------------------------------------


@app.command()
def play(
    board: Optional[str] = typer.Option(None, "-b", "--board", help="Board slug."),
    gap_config: Optional[str] = typer.Option(None, "-g", "--gaps", help="Gap configuration."),
    wrap_h: Optional[bool] = typer.Option(None, "--wrap-h/--no-wrap-h", help="Wrap left/right edges."),
    wrap_v: Optional[bool] = typer.Option(None, "--wrap-v/--no-wrap-v", help="Wrap top/bottom edges."),
    seed: Optional[int] = typer.Option(None, "--seed", help="Start a challenge with this seed."),
    steps: Optional[int] = typer.Option(None, "-n", "--steps", min=0, help="Shuffle length."),
    randomize_gaps: bool = typer.Option(False, "--randomize-gaps", help="Shuffle which pieces are gaps."),
    daily: bool = typer.Option(False, "--daily", help="Start today's challenge."),
) -> None:
    """Play in the Rich terminal frontend."""
    from gapslide.frontend.cli.rich import app as rich_app

    config, key = _resolve_board(board, gap_config)
    n = _ctx.settings["steps"] if steps is None else steps

    challenge = None
    if daily:
        seed = daily_seed()
    if seed is not None:
        challenge = (seed, n, randomize_gaps)

    rich_app.run(
        _ctx.registry,
        board=config.slug,
        gap_key=key,
        wrap_horizontal=_flag(wrap_h, "wrap_horizontal"),
        wrap_vertical=_flag(wrap_v, "wrap_vertical"),
        steps=n,
        challenge=challenge,
    )


@app.command()
def shuffle(
    board: Optional[str] = typer.Option(None, "-b", "--board", help="Board slug."),
    gap_config: Optional[str] = typer.Option(None, "-g", "--gaps", help="Gap configuration."),
    wrap_h: Optional[bool] = typer.Option(None, "--wrap-h/--no-wrap-h", help="Wrap left/right edges."),
    wrap_v: Optional[bool] = typer.Option(None, "--wrap-v/--no-wrap-v", help="Wrap top/bottom edges."),
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed; random if omitted."),
    steps: Optional[int] = typer.Option(None, "-n", "--steps", min=0, help="Shuffle length."),
    randomize_gaps: bool = typer.Option(False, "--randomize-gaps", help="Shuffle which pieces are gaps."),
    moves: bool = typer.Option(False, "--moves", help="Also list the moves that were played."),
) -> None:
    """Shuffle a board headlessly and print the result."""
    from gapslide.frontend.cli.rich.app import render_board

    config, key = _resolve_board(board, gap_config)
    n = _ctx.settings["steps"] if steps is None else steps

    result_board, result = GameGenerator.generate(
        config,
        n,
        seed,
        key,
        randomize_gaps,
        _flag(wrap_h, "wrap_horizontal"),
        _flag(wrap_v, "wrap_vertical"),
    )

    console.print(render_board(result_board))
    console.print(
        f"[dim]board[/dim] [bold]{config.slug}[/bold]  "
        f"[dim]gaps[/dim] [bold]{key}[/bold]  "
        f"[dim]seed[/dim] [bold yellow]{result.seed}[/bold yellow]  "
        f"[dim]steps[/dim] [bold]{len(result.moves)}/{result.steps}[/bold]  "
        f"[dim]score[/dim] [bold yellow]{result.score}[/bold yellow]"
    )
    if result.exhausted:
        console.print("[yellow]Ran out of legal moves before the last step.[/yellow]")
    if moves:
        for i, move in enumerate(result.moves, 1):
            console.print(f"  {i:>4}. {move}")


@app.command()
def boards() -> None:
    """List the available boards and their gap configurations."""
    table = Table(title="Boards", border_style="bright_blue")
    table.add_column("Slug", style="bold cyan")
    table.add_column("Size")
    table.add_column("Large pieces", justify="right")
    table.add_column("Gap configurations")

    for config in _ctx.registry.values():
        gaps = []
        for key in config.gap_configurations:
            small, large = config.gap_counts(key)
            label = f"{key} ({small}×1, {large}×2)"
            gaps.append(f"[bold]{label}[/bold]" if key == config.default_gap_key else label)
        table.add_row(
            config.slug,
            f"{config.width}×{config.height}",
            str(len(config.large_pieces)),
            ", ".join(gaps),
        )
    console.print(table)


if __name__ == "__main__":
    app()

"""Rich terminal frontend: board tables, menus and the game loop.

Draws the grid with the ``rich`` library and drives a :class:`GamePlay`
session from raw keypresses. Includes a menu for board, gap configuration
and wrap selection, free play, and seeded challenges.
"""

from __future__ import annotations

import sys
import time

import rich.box
from rich.align import Align
from rich.console import Console, Group
from rich.panel import Panel
from rich.prompt import Confirm, IntPrompt
from rich.table import Table
from rich.text import Text

from gapslide.engine.gamegenerator import daily_seed
from gapslide.engine.gamegenerator.generator import StepCallback
from gapslide.engine.gameplay import GamePlay
from gapslide.engine.gamemoves import Move
from gapslide.models.board import Board, Direction
from gapslide.models.config import BoardConfig
from gapslide.frontend.cli.input_handler import get_key, read_key

console = Console()

_PALETTE = (
    "red", "green", "blue", "magenta", "cyan", "yellow",
    "bright_red", "bright_green", "bright_blue", "bright_magenta",
    "bright_cyan", "orange3", "purple", "turquoise2", "gold3", "deep_pink3",
)

_DIRECTIONS = {d.value: d for d in Direction}


# -- helpers ------------------------------------------------------------------


def _format_time(seconds: float) -> str:
    m, s = divmod(int(seconds), 60)
    return f"{m}:{s:02d}"


def _piece_colour(piece_id: str) -> str:
    return _PALETTE[int(piece_id.lstrip("BG") or 0) % len(_PALETTE)]


# -- board rendering ----------------------------------------------------------


def render_board(board: Board, show_selection: bool = True) -> Table:
    """Return a Rich Table representing the puzzle grid."""
    width = max(len(p.id) for p in board.pieces)
    table = Table(
        show_header=False,
        show_edge=True,
        pad_edge=False,
        box=rich.box.SQUARE,
        border_style="bright_blue",
        padding=(0, 0),
    )
    for _ in range(board.width):
        table.add_column(width=width + 1, justify="center")

    for y in range(board.height):
        cells: list[str] = []
        for x in range(board.width):
            cell = board.grid[y][x]
            piece = board.piece_by_id[cell.piece_id] if cell else None
            if piece is None:
                cells.append("")
                continue

            selected = show_selection and piece.selected
            if piece.is_gap:
                mark = "◆" if selected else "·"
                style = "bold black on yellow" if selected else "dim"
                cells.append(f"[{style}]{mark:^{width + 1}}[/{style}]")
            elif piece.is_large:
                label = piece.id if (cell.ox, cell.oy) == (0, 0) else "▒" * len(piece.id)
                colour = _piece_colour(piece.id)
                cells.append(f"[bold white on {colour}]{label:^{width + 1}}[/]")
            elif piece.at_home:
                cells.append(f"[green]{piece.id:>{width}}[/green]")
            else:
                cells.append(f"[bold white]{piece.id:>{width}}[/bold white]")
        table.add_row(*cells)

    return table


def _describe_moves(moves: list[Move]) -> str:
    if not moves:
        return "[yellow]No valid moves.[/yellow]"
    lines = [f"[cyan]{len(moves)} valid moves:[/cyan]"]
    lines.extend(f"  {i}. {m}" for i, m in enumerate(moves, 1))
    return "\n".join(lines)


# -- menu screen --------------------------------------------------------------


def _draw_menu(
    boards: list[BoardConfig], board_idx: int, gap_key: str, wrap_h: bool, wrap_v: bool
) -> None:
    console.clear()
    config = boards[board_idx]

    names = Text()
    for i, b in enumerate(boards):
        if i:
            names.append("  ")
        style = "bold green on #313244" if i == board_idx else "dim"
        names.append(f" {b.slug} ", style=style)

    detail = Text()
    detail.append(f"  {config.title or config.slug}  ", style="bold")
    detail.append(f"{config.width}×{config.height}   ", style="dim")
    detail.append("gaps: ", style="dim")
    detail.append(gap_key, style="bold yellow")
    detail.append("   wrap: ", style="dim")
    detail.append(("H" if wrap_h else "-") + ("V" if wrap_v else "-"), style="bold cyan")

    nav = Text(
        "  ← →  board    ↑ ↓  gaps    H / V  wrap", style="dim"
    )

    opts = Text()
    opts.append("  1", style="bold cyan")
    opts.append("  Free play    ")
    opts.append("2", style="bold yellow")
    opts.append("  Challenge    ")
    opts.append("3", style="bold magenta")
    opts.append("  Daily    ")
    opts.append("Q", style="dim bold")
    opts.append("  Quit", style="dim")

    body = Group(
        Text(""),
        Align.center(names),
        Align.center(detail),
        Align.center(nav),
        Text(""),
        Align.center(opts),
        Text(""),
    )
    console.print()
    console.print(
        Align.center(
            Panel(
                body,
                title="[bold]G A P S L I D E[/bold]",
                border_style="bright_blue",
                padding=(1, 4),
            )
        )
    )


# -- game screen --------------------------------------------------------------


def _draw_game(game: GamePlay, status: str = "") -> None:
    """Draw the board with mode-dependent stats and controls."""
    console.clear()
    board = game.board
    state = game.state
    show_selection = not (state.is_challenge and state.solved)

    stats = Text()
    if state.is_challenge and state.challenge is not None:
        info = state.challenge
        stats.append("  Seed: ", style="dim")
        stats.append(str(info.seed), style="bold yellow")
        stats.append("  Steps: ", style="dim")
        stats.append(str(info.steps), style="bold yellow")
        stats.append("  Moves: ", style="dim")
        stats.append(str(state.moves), style="bold yellow")
        stats.append("  Time: ", style="dim")
        stats.append(_format_time(state.elapsed_time), style="bold yellow")
        if state.paused:
            stats.append("  PAUSED", style="bold red")
    else:
        stats.append("  Free play", style="dim")
        if game.last_shuffle is not None:
            stats.append("  Last shuffle score: ", style="dim")
            stats.append(str(game.last_shuffle.score), style="bold yellow")

    controls = Text()
    controls.append("  ↑↓←→", style="bold cyan")
    controls.append(" / ", style="dim")
    controls.append("WASD", style="bold cyan")
    controls.append(" move  ", style="dim")
    controls.append("Space", style="bold cyan")
    controls.append(" gap  ", style="dim")
    controls.append("U/Y", style="bold cyan")
    controls.append(" undo/redo  ", style="dim")
    controls.append("M", style="bold cyan")
    controls.append(" moves  ", style="dim")
    if state.is_challenge:
        controls.append("R", style="bold cyan")
        controls.append(" restart  ", style="dim")
        controls.append("P", style="bold cyan")
        controls.append(" pause  ", style="dim")
        controls.append("G", style="bold cyan")
        controls.append(" give up  ", style="dim")
    else:
        controls.append("X", style="bold yellow")
        controls.append(" shuffle  ", style="dim")
        controls.append("R", style="bold cyan")
        controls.append(" reset  ", style="dim")
    controls.append("Q", style="bold cyan")
    controls.append(" back", style="dim")

    topo = board.topology
    wrap = ("H" if topo.wrap_horizontal else "") + ("V" if topo.wrap_vertical else "")
    title_style = "bold yellow" if state.is_challenge else "bold cyan"
    title = f"[{title_style}]{board.slug} / {board.gap_key}"
    if wrap:
        title += f"  wrap {wrap}"
    title += f"[/{title_style}]"

    console.print()
    console.print(
        Align.center(
            Panel(
                Align.center(render_board(board, show_selection)),
                title=title,
                border_style="green" if state.solved else "bright_blue",
                padding=(1, 2),
            )
        )
    )
    console.print(Align.center(stats))
    if state.is_challenge and state.solved:
        congrats = Text()
        congrats.append("\n  ★ ", style="bold yellow")
        congrats.append("SOLVED!", style="bold green")
        congrats.append(
            f"  {state.moves} moves in {_format_time(state.elapsed_time)}  ",
            style="green",
        )
        congrats.append("★\n", style="bold yellow")
        console.print(Align.center(congrats))
    if status:
        console.print(Align.center(Text.from_markup(f"  {status}")))
    console.print(Align.center(controls))


def _animate_step(game: GamePlay) -> StepCallback:
    """Repaint during a free-play shuffle: every early step, then every tenth."""

    def on_step(index: int, move: Move) -> None:
        if index < 40 or index % 10 == 0:
            _draw_game(game, f"[cyan]Shuffling… step {index + 1}[/cyan] ({move})")
            sys.stdout.flush()
            time.sleep(0.01)

    return on_step


# -- game loop ----------------------------------------------------------------


def _play(game: GamePlay, steps: int) -> None:
    status = ""
    while True:
        _draw_game(game, status)
        status = ""

        # Keep the challenge clock ticking while waiting for a key.
        ticking = game.state.is_challenge and not game.state.solved and not game.state.paused
        key = read_key(1.0 if ticking else None)
        if key is None:
            continue

        if key in _DIRECTIONS:
            if not game.move(_DIRECTIONS[key]):
                status = "[dim]Nothing can slide in from there.[/dim]"
        elif key == "cycle":
            game.cycle_gap()
        elif key == "undo":
            if not game.undo():
                status = "[dim]Nothing to undo.[/dim]"
        elif key == "redo":
            if not game.redo():
                status = "[dim]Nothing to redo.[/dim]"
        elif key == "moves":
            status = _describe_moves(game.valid_moves())
        elif key == "pause" and game.state.is_challenge and not game.state.solved:
            if game.state.paused:
                game.state.resume()
            else:
                game.state.pause()
        elif key == "reset":
            if game.state.is_challenge:
                game.restart_challenge()
                status = "[yellow]Challenge restarted.[/yellow]"
            else:
                game.reset()
        elif key == "shuffle" and not game.state.is_challenge:
            result = game.shuffle(steps, on_step=_animate_step(game))
            status = f"[yellow]Shuffled![/yellow] seed {result.seed}, score {result.score}"
        elif key == "giveup" and game.state.is_challenge:
            game.give_up()
            status = "[yellow]Back to free play.[/yellow]"
        elif key == "quit":
            return


def _ask_challenge(default_seed: int | None, default_steps: int) -> tuple[int, int, bool]:
    console.clear()
    console.print(Panel("[bold yellow]New challenge[/bold yellow]", border_style="yellow"))
    seed = IntPrompt.ask("  Seed", default=default_seed if default_seed is not None else daily_seed())
    steps = IntPrompt.ask("  Shuffle steps", default=default_steps)
    randomize = Confirm.ask("  Randomize gap identities?", default=False)
    return seed, max(0, steps), randomize


# -- menu loop ----------------------------------------------------------------


def _menu_loop(
    registry: dict[str, BoardConfig],
    board: str,
    gap_key: str | None,
    wrap_h: bool,
    wrap_v: bool,
    steps: int,
) -> None:
    boards = list(registry.values())
    board_idx = next((i for i, b in enumerate(boards) if b.slug == board), 0)
    keys = list(boards[board_idx].gap_configurations)
    gap_idx = keys.index(gap_key) if gap_key in keys else 0

    while True:
        config = boards[board_idx]
        keys = list(config.gap_configurations)
        gap_idx %= len(keys)
        _draw_menu(boards, board_idx, keys[gap_idx], wrap_h, wrap_v)
        key = get_key()

        if key == "quit":
            console.clear()
            console.print(Align.center(Text("\nGoodbye!\n", style="bold cyan")))
            return
        elif key == "left":
            board_idx = (board_idx - 1) % len(boards)
            gap_idx = 0
        elif key == "right":
            board_idx = (board_idx + 1) % len(boards)
            gap_idx = 0
        elif key == "up":
            gap_idx -= 1
        elif key == "down":
            gap_idx += 1
        elif key in ("h", "H"):
            wrap_h = not wrap_h
        elif key in ("v", "V"):
            wrap_v = not wrap_v
        elif key in ("1", "enter"):
            game = GamePlay(config, keys[gap_idx], wrap_h, wrap_v)
            _play(game, steps)
        elif key in ("2", "3"):
            seed, n, randomize = _ask_challenge(daily_seed() if key == "3" else None, steps)
            game = GamePlay(config, keys[gap_idx], wrap_h, wrap_v)
            game.start_challenge(seed, n, randomize)
            _play(game, steps)


# -- public entry point -------------------------------------------------------


def run(
    registry: dict[str, BoardConfig],
    board: str = "default",
    gap_key: str | None = None,
    wrap_horizontal: bool = False,
    wrap_vertical: bool = False,
    steps: int = 250,
    challenge: tuple[int, int, bool] | None = None,
) -> None:
    """Launch the Rich frontend.

    With *challenge* ``(seed, steps, randomize_gaps)`` the game starts
    straight into that challenge; otherwise the menu is shown.
    """
    if challenge is not None:
        game = GamePlay(registry[board], gap_key, wrap_horizontal, wrap_vertical)
        seed, n, randomize = challenge
        game.start_challenge(seed, n, randomize)
        _play(game, steps)
        return
    _menu_loop(registry, board, gap_key, wrap_horizontal, wrap_vertical, steps)

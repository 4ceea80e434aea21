"""Command-line equity calculator."""

import argparse
import logging
import sys
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from pokerodds import __version__
from pokerodds.errors import PokerOddsError
from pokerodds.game.cards import parse_board, parse_hand_notation
from pokerodds.game.equity import (
    EquityCalculator,
    EquityConfig,
    EquityResult,
    RangeEquityResult,
    calculate_hand_strength,
)
from pokerodds.game.ranges import Range, parse_range, position_range
from pokerodds.viz import RangeDisplay


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pokerodds",
        description="Heads-up Hold'em equity calculator (Monte Carlo)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    hand = sub.add_parser("hand", help="Equity of one hand against another")
    hand.add_argument("hand_a", help="First hand (e.g., 'AA', 'AKs', 'AsKh')")
    hand.add_argument("hand_b", help="Second hand")
    hand.add_argument(
        "-n", "--trials",
        type=int,
        default=10000,
        help="Number of Monte Carlo trials (default: 10000)",
    )
    _add_common(hand)

    rng = sub.add_parser("range", help="Equity of one range against another")
    rng.add_argument(
        "range_a",
        help="First range (e.g., '77+,AJs+,KQo') or a preset like '@BTN'",
    )
    rng.add_argument("range_b", help="Second range or preset")
    rng.add_argument(
        "-n", "--trials",
        type=int,
        default=20000,
        help="Target number of board runouts (default: 20000)",
    )
    rng.add_argument(
        "--max-pairs",
        type=int,
        default=EquityConfig.max_hand_pairs,
        help=f"Hand matchups tested before sampling (default: {EquityConfig.max_hand_pairs})",
    )
    _add_common(rng)

    show = sub.add_parser("show", help="Print a range as a 13x13 grid")
    show.add_argument("range", help="Range notation or preset like '@CO'")

    return parser


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-b", "--board",
        default="",
        help="Board cards (e.g., 'AsKhTd' or 'As Kh Td')",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Random seed for reproducible results",
    )
    parser.add_argument(
        "--time-limit",
        type=float,
        help="Stop after this many seconds and report what was sampled",
    )


def main(argv: Optional[list[str]] = None, console: Optional[Console] = None) -> int:
    args = build_parser().parse_args(argv)
    console = console or Console()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )

    try:
        if args.command == "hand":
            return _run_hand(args, console)
        if args.command == "range":
            return _run_range(args, console)
        return _run_show(args, console)
    except PokerOddsError as exc:
        console.print(f"[red]{exc}[/]")
        return 1


def _load_range(text: str) -> Range:
    """Parse range notation, or a position preset written as '@BTN'."""
    if text.startswith("@"):
        try:
            return position_range(text[1:])
        except ValueError as exc:
            raise PokerOddsError(str(exc)) from exc
    return parse_range(text)


def _run_hand(args, console: Console) -> int:
    hand_a = parse_hand_notation(args.hand_a)
    hand_b = parse_hand_notation(args.hand_b)
    board = parse_board(args.board)

    console.print(f"[bold]Hand 1:[/] {hand_a} ({hand_a.display_name})")
    console.print(f"[bold]Hand 2:[/] {hand_b} ({hand_b.display_name})")
    if board:
        console.print(f"[bold]Board:[/] {' '.join(str(c) for c in board)}")
    console.print()

    calculator = EquityCalculator(
        config=EquityConfig(time_limit=args.time_limit),
        seed=args.seed,
    )
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        progress.add_task(f"Simulating {args.trials} trials...")
        result = calculator.hand_vs_hand(hand_a, hand_b, args.trials, board)

    _display_result(console, str(hand_a), str(hand_b), result)

    if len(board) >= 3:
        made = []
        for hand in (hand_a, hand_b):
            if hand.is_concrete:
                made.append(f"[cyan]{hand}[/]: {calculate_hand_strength(hand, board).name}")
        if made:
            console.print(Panel("\n".join(made), title="[bold]Made Hands[/]", border_style="green"))

    return 0


def _run_range(args, console: Console) -> int:
    range_a = _load_range(args.range_a)
    range_b = _load_range(args.range_b)
    board = parse_board(args.board)

    console.print(f"[bold]Range 1:[/] {len(range_a)} hands, {range_a.combo_count} combos")
    console.print(f"[bold]Range 2:[/] {len(range_b)} hands, {range_b.combo_count} combos")
    if board:
        console.print(f"[bold]Board:[/] {' '.join(str(c) for c in board)}")
    console.print()

    config = EquityConfig(max_hand_pairs=args.max_pairs, time_limit=args.time_limit)
    calculator = EquityCalculator(config=config, seed=args.seed)
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        progress.add_task("Calculating range equity...")
        result = calculator.range_vs_range(range_a, range_b, board, args.trials)

    _display_result(console, "Range 1", "Range 2", result)
    return 0


def _run_show(args, console: Console) -> int:
    hand_range = _load_range(args.range)
    title = f"{args.range[1:].upper()} range" if args.range.startswith("@") else "Range"
    RangeDisplay(hand_range, console=console).display_terminal(title=title)
    return 0


def _display_result(console: Console, label_a: str, label_b: str, result: EquityResult) -> None:
    """Display equity table and sample size."""
    table = Table(title="Equity", show_header=True, header_style="bold")
    table.add_column("", style="cyan")
    table.add_column("Equity", justify="right")
    table.add_column("Win", justify="right")
    table.add_column("Tie", justify="right")

    table.add_row(
        label_a,
        f"[green]{result.equity_a:.2f}%[/]",
        f"{result.win_pct_a:.2f}%",
        f"{result.tie_pct:.2f}%",
    )
    table.add_row(
        label_b,
        f"[green]{result.equity_b:.2f}%[/]",
        f"{result.win_pct_b:.2f}%",
        f"{result.tie_pct:.2f}%",
    )
    console.print(table)

    if isinstance(result, RangeEquityResult):
        console.print(
            f"[dim]{result.hand_pairs_sampled} hand pairs, "
            f"{result.combos_sampled} combo draws, {result.trials} runouts "
            f"({result.hands_a} vs {result.hands_b} hands)[/]"
        )
    else:
        console.print(f"[dim]{result.trials} trials[/]")


if __name__ == "__main__":
    sys.exit(main())

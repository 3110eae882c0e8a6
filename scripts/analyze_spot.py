#!/usr/bin/env python3
"""Analyze a hand against a villain range on a given board."""

import argparse
import logging
import sys
from pathlib import Path

import numpy as np
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from holdem.game import EquityCalculator, calc_outs, describe_outs, parse_cards
from holdem.game.cards import cards_label
from holdem.ranges import RangeTracker
from holdem.solver import recommend
from holdem.viz import RangeDisplay, build_grid_table


def main():
    parser = argparse.ArgumentParser(
        description="Estimate equity and get a recommendation for a single spot"
    )
    parser.add_argument(
        "--hero",
        required=True,
        help="Hero hole cards (e.g., 'AhKh')",
    )
    parser.add_argument(
        "-b", "--board",
        default="",
        help="Board cards (e.g., 'Qh7h2c' or 'Qh 7h 2c')",
    )
    parser.add_argument(
        "-r", "--villain-range",
        default="",
        help="Villain range (e.g., 'TT+, AJs+, KQs'); random hands if omitted",
    )
    parser.add_argument(
        "--opponents",
        type=int,
        default=1,
        help="Opponents when no range is given (default: 1)",
    )
    parser.add_argument(
        "-p", "--pot",
        type=int,
        default=60,
        help="Pot size in chips (default: 60)",
    )
    parser.add_argument(
        "-c", "--call",
        type=int,
        default=0,
        help="Chips to call (default: 0)",
    )
    parser.add_argument(
        "-t", "--trials",
        type=int,
        default=2000,
        help="Monte Carlo trials (default: 2000)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Random seed",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output",
    )

    args = parser.parse_args()
    console = Console()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )

    try:
        hero = parse_cards(args.hero)
        board = parse_cards(args.board) if args.board else []
    except ValueError as e:
        console.print(f"[red]{e}[/]")
        return 1

    if len(hero) != 2:
        console.print("[red]Hero needs exactly two cards[/]")
        return 1
    if len(board) > 5 or len(board) in (1, 2):
        console.print("[red]Board must have 0, 3, 4 or 5 cards[/]")
        return 1
    if len(set(hero + board)) != len(hero) + len(board):
        console.print("[red]Duplicate cards detected[/]")
        return 1

    console.print(f"[bold]Hero:[/] {cards_label(hero)}")
    console.print(f"[bold]Board:[/] {cards_label(board) or '(preflop)'}")
    console.print(f"[bold]Pot:[/] ${args.pot}   [bold]To call:[/] ${args.call}")
    console.print()

    rng = np.random.default_rng(args.seed)
    calculator = EquityCalculator(rng)

    villain_seat = 1
    tracker = None
    if args.villain_range:
        tracker = RangeTracker(2, hero_seat=0, rng=rng)
        try:
            tracker.set_range(villain_seat, args.villain_range)
        except (ValueError, KeyError) as e:
            console.print(f"[red]Invalid range: {e}[/]")
            return 1

        display = RangeDisplay(console)
        display.load_from_tracker(tracker, villain_seat)
        display.display_terminal(title=f"Villain range ({tracker.range_percent(villain_seat)}%)")

        with console.status("Simulating..."):
            equity = calculator.simulate_vs_ranges(hero, board, [villain_seat], tracker, args.trials)
        num_opponents = 1
    else:
        with console.status("Simulating..."):
            equity = calculator.simulate(hero, board, args.opponents, args.trials)
        num_opponents = args.opponents

    outs = calc_outs(hero, board)
    rec = recommend(equity, args.pot, args.call, num_opponents)

    results = Table(title="Spot Analysis")
    results.add_column("Metric", style="cyan")
    results.add_column("Value", justify="right")
    results.add_row("Equity", f"{equity * 100:.1f}%")
    if args.call > 0:
        results.add_row("Pot odds", f"{rec.pot_odds * 100:.1f}%")
    if 3 <= len(board) <= 4:
        results.add_row("Outs", describe_outs(hero, board, outs))
    console.print(results)

    if tracker is not None and len(board) >= 3:
        breakdown = tracker.equity_breakdown(villain_seat, board, hero)
        if breakdown is not None:
            console.print(
                f"[bold]vs range now:[/] win {breakdown.win}, tie {breakdown.tie}, "
                f"lose {breakdown.lose} of {breakdown.total} combos"
            )
        grid = build_grid_table(tracker, villain_seat, hero + board)
        if grid is not None:
            console.print(grid)

    color = {"raise": "green", "call": "yellow", "fold": "red"}[rec.tone]
    console.print(Panel(rec.reason, title=f"[{color}]{rec.label}[/]", expand=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
"""Play a session of AI opponents against an advisor-driven hero."""

import argparse
import logging
import sys
from pathlib import Path

import numpy as np
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from holdem.ai import AIPlayer, PolicyConfig
from holdem.game import EquityCalculator, Game
from holdem.game.cards import cards_label
from holdem.history import HandHistory
from holdem.ranges import RangeTracker
from holdem.solver import Advisor
from holdem.viz import display_range


def play_hand(game, tracker, advisor, ai, hero_seat):
    """Drive one hand to completion."""
    while not game.game_over:
        seat = game.to_act
        if seat == hero_seat:
            action = advisor.suggest_action(game, hero_seat)
        else:
            action = ai.decide(game, seat)
        game.apply_action(action, seat)
        tracker.update(game)


def main():
    parser = argparse.ArgumentParser(
        description="Simulate a Limit Hold'em session with the advisor on autopilot"
    )
    parser.add_argument(
        "-n", "--players",
        type=int,
        default=6,
        help="Seats at the table, 2-9 (default: 6)",
    )
    parser.add_argument(
        "--hands",
        type=int,
        default=50,
        help="Maximum hands to play (default: 50)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Random seed for a reproducible session",
    )
    parser.add_argument(
        "--trials",
        type=int,
        default=200,
        help="Advisor equity trials per decision (default: 200)",
    )
    parser.add_argument(
        "--show-ranges",
        action="store_true",
        help="Print opponent ranges after the last hand",
    )
    parser.add_argument(
        "-o", "--export",
        help="Write PokerStars hand histories to this file",
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

    hero_seat = 0
    rng = np.random.default_rng(args.seed)
    game = Game(num_players=args.players, player_seat=hero_seat, rng=rng)
    calculator = EquityCalculator(rng)
    tracker = RangeTracker(game.num_players, hero_seat=hero_seat, rng=rng)
    advisor = Advisor(calculator, tracker, trials=args.trials)
    ai = AIPlayer(calculator, PolicyConfig(), rng)
    history = HandHistory(hero_seat=hero_seat)

    console.print(f"[bold]Table:[/] {game.num_players} seats, hero in seat {hero_seat + 1}")
    console.print()

    wins = 0
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        task = progress.add_task("Playing...", total=args.hands)
        for i in range(args.hands):
            if game.bust or game.tour_win:
                break
            tracker.reset_all(game.num_players)
            play_hand(game, tracker, advisor, ai, hero_seat)
            history.record(game)
            if hero_seat in game.winners:
                wins += 1
            progress.update(
                task,
                advance=1,
                description=f"Hand {game.hands_played}: {cards_label(game.hands[hero_seat])}",
            )
            # The last hand stays on the table so its ranges can be shown
            if i < args.hands - 1:
                game.new_hand()

    table = Table(title="Session Results")
    table.add_column("Seat", style="cyan")
    table.add_column("Chips", justify="right")
    table.add_column("Net", justify="right")
    start = game.config.starting_chips
    for seat in range(game.num_players):
        net = game.chips[seat] - start
        color = "green" if net > 0 else "red" if net < 0 else "white"
        name = "You" if seat == hero_seat else f"Player {seat + 1}"
        table.add_row(name, str(game.chips[seat]), f"[{color}]{net:+d}[/]")
    console.print(table)
    console.print(f"[bold]Hands played:[/] {game.hands_played}, hero won {wins}")

    if game.bust:
        console.print("[red]Hero busted.[/]")
    elif game.tour_win:
        console.print("[green]Hero won the table.[/]")

    if args.show_ranges:
        for seat in range(game.num_players):
            if seat != hero_seat and tracker.has_range(seat):
                display_range(tracker, seat, console=console)

    if args.export:
        count = history.save(args.export)
        console.print(f"[green]Saved {count} hands to {args.export}[/]")

    return 0


if __name__ == "__main__":
    sys.exit(main())

"""Terminal display of tracked ranges."""

from dataclasses import dataclass
from typing import Iterable, Optional

import numpy as np
from rich.console import Console
from rich.style import Style
from rich.table import Table
from rich.text import Text

from ..game.cards import RANK_STR, Card
from ..ranges.hand_types import HAND_TYPES, hand_type_for_label
from ..ranges.tracker import DISPLAY_THRESHOLD, GRID_RANKS, RangeTracker


# Standard hand matrix layout (13x13)
RANKS = "AKQJT98765432"

# Pairs on diagonal, suited above, offsuit below
HAND_MATRIX = []
for i, r1 in enumerate(RANKS):
    row = []
    for j, r2 in enumerate(RANKS):
        if i == j:
            row.append(f"{r1}{r2}")
        elif i < j:
            row.append(f"{r1}{r2}s")
        else:
            row.append(f"{r2}{r1}o")
    HAND_MATRIX.append(row)


@dataclass
class RangeCell:
    """One hand type in the matrix."""
    hand: str
    # Weight relative to the heaviest type, 0-1
    frequency: float = 0.0

    @property
    def in_range(self) -> bool:
        return self.frequency >= DISPLAY_THRESHOLD


def _cell_style(frequency: float) -> Style:
    if frequency > 0.8:
        return Style(bgcolor="green", color="white")
    if frequency > 0.5:
        return Style(bgcolor="yellow", color="black")
    if frequency >= DISPLAY_THRESHOLD:
        return Style(bgcolor="orange3", color="black")
    if frequency > 0:
        return Style(bgcolor="red", color="white")
    return Style(bgcolor="grey30", color="grey50")


class RangeDisplay:
    """13x13 range matrix with cells shaded by relative weight."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()
        self.cells: dict[str, RangeCell] = {
            hand: RangeCell(hand=hand) for row in HAND_MATRIX for hand in row
        }

    def set_frequency(self, hand: str, frequency: float) -> None:
        if hand in self.cells:
            self.cells[hand].frequency = frequency

    def load_weights(self, weights: np.ndarray) -> None:
        """Load a 169-entry weight vector, scaled so the top type is 1."""
        top = float(np.max(weights)) if len(weights) else 0.0
        for idx, ht in enumerate(HAND_TYPES):
            self.set_frequency(ht.label, float(weights[idx]) / top if top > 0 else 0.0)

    def load_from_tracker(self, tracker: RangeTracker, seat: int) -> bool:
        """Load a seat's range; False if the seat is not tracked."""
        weights = tracker.weights(seat)
        if weights is None:
            return False
        self.load_weights(weights)
        return True

    def frequency(self, hand: str) -> float:
        return self.cells[HAND_TYPES[hand_type_for_label(hand)].label].frequency

    def build_table(self, title: str = "Range") -> Table:
        table = Table(title=title, show_header=True, header_style="bold")
        table.add_column("", style="bold")
        for rank in RANKS:
            table.add_column(rank, justify="center")

        for i, rank in enumerate(RANKS):
            row = [rank]
            for j in range(13):
                cell = self.cells[HAND_MATRIX[i][j]]
                label = f"{cell.frequency * 100:.0f}" if cell.frequency > 0 else ""
                row.append(Text(label.center(3), style=_cell_style(cell.frequency)))
            table.add_row(*row)
        return table

    def display_terminal(self, title: str = "Range") -> None:
        self.console.print(self.build_table(title))


def build_grid_table(
    tracker: RangeTracker,
    seat: int,
    excluded: Iterable[Card] = (),
    title: str = "Top of range",
) -> Optional[Table]:
    """Compact A-9 grid with live combo counts for in-range cells."""
    grid = tracker.grid(seat, excluded)
    if grid is None:
        return None

    labels = [RANK_STR[r] for r in GRID_RANKS]
    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("", style="bold")
    for label in labels:
        table.add_column(label, justify="center")

    for label, cells in zip(labels, grid):
        row = [label]
        for cell in cells:
            if cell.in_range:
                row.append(Text(str(cell.combos).center(3), style=Style(bgcolor="green", color="white")))
            else:
                row.append(Text("", style=Style(bgcolor="grey30")))
        table.add_row(*row)
    return table


def display_range(
    tracker: RangeTracker,
    seat: int,
    title: Optional[str] = None,
    console: Optional[Console] = None,
) -> None:
    """
    Print a seat's range matrix followed by its notation.

    Args:
        tracker: Range tracker holding the seat
        seat: Seat to show
        title: Table title (defaults to the seat number)
        console: Console to print to
    """
    display = RangeDisplay(console)
    title = title or f"Seat {seat + 1} range"
    if not display.load_from_tracker(tracker, seat):
        display.console.print(f"[dim]{title}: not tracked[/]")
        return

    display.display_terminal(title=title)
    notation = tracker.notation(seat) or "(empty)"
    display.console.print(
        f"[bold]{notation}[/] [dim]({tracker.range_percent(seat)}% of hands)[/]"
    )

"""
Hand history recording and PokerStars-style text export.

The export follows the PokerStars Limit Hold'em layout closely enough
for common tracking tools to import it.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from .game.actions import ActionRecord, ActionType
from .game.cards import Card, card_label
from .game.state import Game, Street, WinnerHand, split_pot

logger = logging.getLogger(__name__)

FOLD_STREET_TEXT = {
    Street.PREFLOP: "before Flop",
    Street.FLOP: "on the Flop",
    Street.TURN: "on the Turn",
    Street.RIVER: "on the River",
}


@dataclass
class HandRecord:
    """Frozen copy of a finished hand."""
    hand_number: int
    timestamp: datetime
    num_players: int
    dealer_seat: int
    sb_seat: int
    bb_seat: int
    small_blind: int
    big_blind: int
    small_bet: int
    big_bet: int
    chips_start: list[int]
    chips_end: list[int]
    hands: list[list[Card]]
    board: list[Card]
    actions: list[ActionRecord]
    winners: list[int]
    winner_hand: Optional[WinnerHand]
    pot: int
    folded: list[bool]
    eliminated: list[bool]
    is_showdown: bool
    shown_hands: dict[int, str] = field(default_factory=dict)

    @classmethod
    def from_game(cls, game: Game) -> Optional["HandRecord"]:
        """
        Snapshot a game whose hand just finished.

        Returns None while the hand is running, after the session ended,
        or when no action was taken.
        """
        if not game.game_over or game.bust or game.tour_win:
            return None
        if not game.action_history:
            return None

        small_blind, big_blind = game.blind_amounts()
        return cls(
            hand_number=game.hands_played,
            timestamp=datetime.now(),
            num_players=game.num_players,
            dealer_seat=game.dealer_seat,
            sb_seat=game.sb_seat,
            bb_seat=game.bb_seat,
            small_blind=min(small_blind, game.chips_start[game.sb_seat]),
            big_blind=min(big_blind, game.chips_start[game.bb_seat]),
            small_bet=game.config.small_bet * game.multiplier,
            big_bet=game.config.big_bet * game.multiplier,
            chips_start=list(game.chips_start),
            chips_end=list(game.chips),
            hands=[list(h) for h in game.hands],
            board=list(game.board),
            actions=list(game.action_history),
            winners=list(game.winners),
            winner_hand=game.winner_hand,
            pot=game.pot,
            folded=list(game.folded),
            eliminated=list(game.eliminated),
            is_showdown=game.street == Street.SHOWDOWN,
            shown_hands={s: ev.category_name for s, ev in game.eval_results.items()},
        )


def ps_cards(cards: list[Card]) -> str:
    return "[" + " ".join(card_label(c) for c in cards) + "]"


def ps_time(ts: datetime) -> str:
    return ts.strftime("%Y/%m/%d %H:%M:%S") + " ET"


def ps_action(name: str, record: ActionRecord) -> str:
    """One action line, e.g. 'Player 3: raises $30 to $60'."""
    if record.action_type == ActionType.FOLD:
        return f"{name}: folds"
    if record.action_type == ActionType.CHECK:
        return f"{name}: checks"
    amount = record.label.split("$", 1)[-1]
    if record.action_type == ActionType.CALL:
        return f"{name}: calls ${amount}"
    if record.action_type == ActionType.BET:
        return f"{name}: bets ${amount}"
    to = f" to ${record.total_bet}" if record.total_bet else ""
    return f"{name}: raises ${amount}{to}"


class HandHistory:
    """Collects finished hands of one session and exports them."""

    def __init__(self, hero_seat: Optional[int] = 0, table_name: Optional[str] = None):
        self.hero_seat = hero_seat
        self.table_name = table_name
        self.hands: list[HandRecord] = []

    def __len__(self) -> int:
        return len(self.hands)

    def seat_name(self, seat: int) -> str:
        if seat == self.hero_seat:
            return "You"
        return f"Player {seat + 1}"

    def record(self, game: Game) -> bool:
        """Record the hand just finished; False if there was nothing to record."""
        rec = HandRecord.from_game(game)
        if rec is None:
            return False
        self.hands.append(rec)
        logger.debug("Recorded hand %d", rec.hand_number)
        return True

    def format_hand(self, h: HandRecord, number: int) -> str:
        """Render one hand as PokerStars text."""
        name = self.seat_name
        table = self.table_name or f"Limit{h.small_bet}-{h.big_bet}"
        lines = [
            f"PokerStars Hand #{number}: Hold'em Limit "
            f"(${h.small_bet}/${h.big_bet}) - {ps_time(h.timestamp)}",
            f"Table '{table}' {h.num_players}-max Seat #{h.dealer_seat + 1} is the button",
        ]

        for seat in range(h.num_players):
            if not h.eliminated[seat]:
                lines.append(f"Seat {seat + 1}: {name(seat)} (${h.chips_start[seat]} in chips)")

        lines.append(f"{name(h.sb_seat)}: posts small blind ${h.small_blind}")
        lines.append(f"{name(h.bb_seat)}: posts big blind ${h.big_blind}")

        lines.append("*** HOLE CARDS ***")
        hero = self.hero_seat
        if hero is not None and len(h.hands[hero]) == 2:
            lines.append(f"Dealt to {name(hero)} {ps_cards(h.hands[hero])}")

        headers = {
            Street.FLOP: lambda: f"*** FLOP *** {ps_cards(h.board[:3])}",
            Street.TURN: lambda: f"*** TURN *** {ps_cards(h.board[:3])} {ps_cards(h.board[3:4])}",
            Street.RIVER: lambda: f"*** RIVER *** {ps_cards(h.board[:4])} {ps_cards(h.board[4:5])}",
        }
        for street in (Street.PREFLOP, Street.FLOP, Street.TURN, Street.RIVER):
            acts = [a for a in h.actions if a.street == street]
            if street != Street.PREFLOP and not acts:
                continue
            if street in headers:
                lines.append(headers[street]())
            lines.extend(ps_action(name(a.seat), a) for a in acts)

        _, payouts = split_pot(h.pot, {seat: 0 for seat in h.winners})
        if h.is_showdown:
            lines.append("*** SHOW DOWN ***")
            for seat in h.winners:
                hand_name = h.shown_hands.get(seat, "")
                lines.append(f"{name(seat)}: shows {ps_cards(h.hands[seat])} ({hand_name})")
                lines.append(f"{name(seat)}: collected (${payouts[seat]})")
            for seat in range(h.num_players):
                if seat in h.winners or h.folded[seat] or len(h.hands[seat]) != 2:
                    continue
                hand_name = h.shown_hands.get(seat, "")
                lines.append(f"{name(seat)}: shows {ps_cards(h.hands[seat])} ({hand_name})")
                lines.append(f"{name(seat)}: lost")

        lines.append("*** SUMMARY ***")
        lines.append(f"Total pot ${h.pot} | Rake $0")
        if h.board:
            lines.append(f"Board {ps_cards(h.board)}")

        for seat in range(h.num_players):
            if h.eliminated[seat]:
                continue
            tag = self._position_tag(seat, h)
            prefix = f"Seat {seat + 1}: {name(seat)}{tag}"
            if seat in h.winners:
                if h.is_showdown:
                    lines.append(
                        f"{prefix} showed {ps_cards(h.hands[seat])} and won "
                        f"(${payouts[seat]}) with {h.shown_hands.get(seat, '')}"
                    )
                else:
                    lines.append(f"{prefix} collected (${h.pot})")
            elif h.folded[seat]:
                fold_street = next(
                    (a.street for a in reversed(h.actions)
                     if a.seat == seat and a.action_type == ActionType.FOLD),
                    Street.PREFLOP,
                )
                lines.append(f"{prefix} folded {FOLD_STREET_TEXT[Street(fold_street)]}")
            elif h.is_showdown:
                lines.append(f"{prefix} showed {ps_cards(h.hands[seat])} and lost")

        lines.append("")
        return "\n".join(lines)

    @staticmethod
    def _position_tag(seat: int, h: HandRecord) -> str:
        if seat == h.dealer_seat:
            return " (button)"
        if seat == h.sb_seat:
            return " (small blind)"
        if seat == h.bb_seat:
            return " (big blind)"
        return ""

    def export_text(self) -> str:
        """All recorded hands, numbered from 1, separated by blank lines."""
        return "\n".join(self.format_hand(h, i + 1) for i, h in enumerate(self.hands))

    def save(self, path: Union[str, Path]) -> int:
        """
        Write the export to ``path``.

        Returns:
            Number of hands written
        """
        path = Path(path)
        path.write_text(self.export_text())
        logger.info("Wrote %d hands to %s", len(self.hands), path)
        return len(self.hands)

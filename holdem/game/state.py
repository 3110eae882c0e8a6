"""
Limit Texas Hold'em state machine for 2-9 seats.

A ``Game`` lives for a whole session. ``new_hand()`` mutates it in place:
the button moves, blinds are posted and cards are redealt, while chip
stacks and eliminations carry over from hand to hand.

Streets run PREFLOP -> FLOP -> TURN -> RIVER -> SHOWDOWN. A street ends
when every active seat has acted since the last bet or raise; a hand
can also end early when all but one seat have folded.
"""

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional, Union

import numpy as np

from .actions import Action, ActionRecord, ActionRequest, ActionType, action_label
from .cards import Card, Deck
from .evaluator import HandEvaluation, evaluate_best

logger = logging.getLogger(__name__)


class InvariantViolation(RuntimeError):
    """The engine was driven in a way that indicates a caller bug."""


class Street(IntEnum):
    """Betting streets plus the terminal showdown phase."""
    PREFLOP = 0
    FLOP = 1
    TURN = 2
    RIVER = 3
    SHOWDOWN = 4


STREET_NAMES = ["Pre-Flop", "Flop", "Turn", "River", "Showdown"]

# Position names by offset from the button, keyed by seats alive
POSITION_NAMES = {
    2: ["BTN", "BB"],
    3: ["BTN", "SB", "BB"],
    4: ["BTN", "SB", "BB", "UTG"],
    5: ["BTN", "SB", "BB", "UTG", "CO"],
    6: ["BTN", "SB", "BB", "UTG", "HJ", "CO"],
    7: ["BTN", "SB", "BB", "UTG", "LJ", "HJ", "CO"],
    8: ["BTN", "SB", "BB", "UTG", "MP", "LJ", "HJ", "CO"],
    9: ["BTN", "SB", "BB", "UTG", "UTG+1", "MP", "LJ", "HJ", "CO"],
}


def seat_offset(seat: int, dealer_seat: int, alive_seats: list[int]) -> Optional[int]:
    """Seats clockwise from the button among alive seats (0 = button)."""
    if seat not in alive_seats or dealer_seat not in alive_seats:
        return None
    num_alive = len(alive_seats)
    return (alive_seats.index(seat) - alive_seats.index(dealer_seat)) % num_alive


def position_name(seat: int, dealer_seat: int, alive_seats: list[int]) -> str:
    """Table position label such as 'BTN' or 'UTG'; '' for dead seats."""
    if len(alive_seats) < 2:
        return ""
    offset = seat_offset(seat, dealer_seat, alive_seats)
    if offset is None:
        return ""
    names = POSITION_NAMES.get(len(alive_seats), [])
    return names[offset] if offset < len(names) else ""


@dataclass
class TableConfig:
    """Limit structure and table limits. Sizes double per bet level."""
    small_bet: int = 30
    big_bet: int = 60
    small_blind: int = 15
    big_blind: int = 30
    max_raises: int = 4
    starting_chips: int = 1500
    min_seats: int = 2
    max_seats: int = 9


@dataclass(frozen=True)
class WinnerHand:
    """What the winning seat won with."""
    category_name: str
    best_cards: tuple[Card, ...] = ()

    @classmethod
    def from_evaluation(cls, evaluation: HandEvaluation) -> "WinnerHand":
        return cls(evaluation.category_name, evaluation.best_cards)


FOLD_WIN = WinnerHand("Fold Win")


def split_pot(pot: int, scores: dict[int, int]) -> tuple[list[int], dict[int, int]]:
    """
    Split a pot among the seats holding the best score.

    Each winner gets ``pot // n``; the odd chips go to the first winner
    in seat order.

    Returns:
        Tuple of (winning seats, payout per winning seat)
    """
    best = max(scores.values())
    winners = sorted(seat for seat, score in scores.items() if score == best)
    share = pot // len(winners)
    payouts = {seat: share for seat in winners}
    payouts[winners[0]] += pot - share * len(winners)
    return winners, payouts


class Game:
    """
    Authoritative per-session table state.

    Seat ``player_seat`` is the human-controlled seat; pass None for an
    observer session. All mutation goes through ``new_hand`` and
    ``apply_action`` and must be serialised by the caller.
    """

    def __init__(
        self,
        num_players: int = 9,
        player_seat: Optional[int] = 0,
        bet_level: int = 0,
        config: Optional[TableConfig] = None,
        rng: Optional[np.random.Generator] = None,
        dealer_seat: Optional[int] = None,
    ):
        """
        Create a session and deal its first hand.

        Args:
            num_players: Seats at the table (clamped to 2-9)
            player_seat: Human seat, or None when only observing
            bet_level: Blind level; every level doubles blinds and bets
            config: Limit structure
            rng: Random generator for the deck and button
            dealer_seat: Button for the first hand (random if omitted)
        """
        self.config = config or TableConfig()
        self.num_players = max(self.config.min_seats, min(self.config.max_seats, num_players))
        if player_seat is not None and not 0 <= player_seat < self.num_players:
            raise ValueError(f"Player seat {player_seat} is not at the table")

        self.player_seat = player_seat
        self.bet_level = bet_level
        self.rng = rng if rng is not None else np.random.default_rng()

        if dealer_seat is None:
            dealer_seat = int(self.rng.integers(self.num_players))
        # new_hand() moves the button before posting, so start one seat back
        self.dealer_seat = (dealer_seat - 1) % self.num_players

        self.chips = [self.config.starting_chips] * self.num_players
        self.eliminated = [False] * self.num_players
        self.hands_played = 0

        self._reset_hand_state()
        self.new_hand()

    # Hand lifecycle --------------------------------------------------

    def _reset_hand_state(self) -> None:
        n = self.num_players
        self.deck = Deck(self.rng)
        self.board: list[Card] = []
        self.hands: list[list[Card]] = [[] for _ in range(n)]
        self.pot = 0
        self.street = Street.PREFLOP
        self.bets = [0] * n
        self.raise_count = 0
        self.current_bet = 0
        self.action_history: list[ActionRecord] = []
        self.last_action = [""] * n
        # Eliminated seats sit out every hand as if already folded
        self.folded = list(self.eliminated)
        self.to_act: Optional[int] = None
        self.pending_action: set[int] = set()
        self.winner: Optional[int] = None
        self.winners: list[int] = []
        self.winner_hand: Optional[WinnerHand] = None
        self.eval_results: dict[int, HandEvaluation] = {}
        self.chips_start = list(self.chips)
        self.sb_seat: Optional[int] = None
        self.bb_seat: Optional[int] = None
        self.game_over = False
        self.bust = False
        self.tour_win = False

    def new_hand(self) -> None:
        """
        Start the next hand, or end the session if it is decided.

        Raises:
            InvariantViolation: If the current hand is still running
        """
        if self.hands_played > 0 and not self.game_over:
            raise InvariantViolation(
                f"Hand {self.hands_played} is still in progress; finish it before dealing"
            )
        for seat in range(self.num_players):
            if self.chips[seat] <= 0:
                self.eliminated[seat] = True

        alive = self.alive_seats()
        bust = self.player_seat is not None and self.eliminated[self.player_seat]
        if bust or len(alive) < 2:
            self.game_over = True
            self.bust = bust
            self.tour_win = not bust and len(alive) < 2
            self.to_act = None
            self.pending_action.clear()
            logger.info(
                "Session over after %d hands (bust=%s, tour_win=%s)",
                self.hands_played, self.bust, self.tour_win,
            )
            return

        self._reset_hand_state()
        self.dealer_seat = self._next_alive(self.dealer_seat)

        heads_up = len(alive) == 2
        if heads_up:
            self.sb_seat = self.dealer_seat
        else:
            self.sb_seat = self._next_alive(self.dealer_seat)
        self.bb_seat = self._next_alive(self.sb_seat)

        small_blind, big_blind = self.blind_amounts()
        self._post_blind(self.sb_seat, small_blind)
        self._post_blind(self.bb_seat, big_blind)
        self.current_bet = big_blind
        # The big blind counts as the opening bet
        self.raise_count = 1

        for seat in alive:
            self.hands[seat] = self.deck.deal(2)

        self.to_act = self.sb_seat if heads_up else self._next_alive(self.bb_seat)
        self.pending_action = set(self.active_players())
        self.hands_played += 1
        logger.debug(
            "Hand %d: button=%d sb=%d bb=%d", self.hands_played,
            self.dealer_seat, self.sb_seat, self.bb_seat,
        )

    def _post_blind(self, seat: int, amount: int) -> None:
        actual = min(amount, self.chips[seat])
        self.chips[seat] -= actual
        self.bets[seat] += actual
        self.pot += actual

    # Helpers ---------------------------------------------------------

    @property
    def multiplier(self) -> int:
        return 1 << self.bet_level

    def alive_seats(self) -> list[int]:
        """Seats not eliminated from the session."""
        return [s for s in range(self.num_players) if not self.eliminated[s]]

    def active_players(self) -> list[int]:
        """Seats still holding cards this hand."""
        return [s for s in range(self.num_players) if not self.folded[s]]

    def _next_alive(self, from_seat: int) -> int:
        for i in range(1, self.num_players + 1):
            seat = (from_seat + i) % self.num_players
            if not self.eliminated[seat]:
                return seat
        raise InvariantViolation("No alive seat left")

    def _next_active(self, from_seat: int) -> int:
        for i in range(1, self.num_players + 1):
            seat = (from_seat + i) % self.num_players
            if not self.folded[seat]:
                return seat
        raise InvariantViolation("No active seat left")

    def _next_pending(self, from_seat: int) -> int:
        for i in range(1, self.num_players + 1):
            seat = (from_seat + i) % self.num_players
            if seat in self.pending_action:
                return seat
        raise InvariantViolation("No seat pending action")

    def _require_actor(self) -> int:
        if self.to_act is None:
            raise InvariantViolation("No seat is to act")
        return self.to_act

    # Queries ---------------------------------------------------------

    def blind_amounts(self) -> tuple[int, int]:
        """Small and big blind at the current bet level."""
        return (
            self.config.small_blind * self.multiplier,
            self.config.big_blind * self.multiplier,
        )

    def bet_size(self) -> int:
        """Fixed increment for the current street."""
        base = self.config.small_bet if self.street <= Street.FLOP else self.config.big_bet
        return base * self.multiplier

    def call_amount(self) -> int:
        """Chips the seat to act needs to match the highest bet."""
        seat = self._require_actor()
        return max(0, max(self.bets) - self.bets[seat])

    def street_name(self) -> str:
        return STREET_NAMES[self.street] if self.street < len(STREET_NAMES) else "Showdown"

    def is_player_turn(self) -> bool:
        return (
            not self.game_over
            and self.player_seat is not None
            and self.to_act == self.player_seat
        )

    def position_name(self, seat: int) -> str:
        return position_name(seat, self.dealer_seat, self.alive_seats())

    def legal_actions(self) -> list[Action]:
        """Action menu for the seat to act; empty once the hand is over."""
        if self.game_over:
            return []
        seat = self._require_actor()
        call = self.call_amount()
        stack = self.chips[seat]
        increment = self.bet_size()

        actions = [Action.fold()]
        if call <= 0:
            actions.append(Action.check())
        else:
            actions.append(Action.call(min(call, stack)))

        if self.raise_count < self.config.max_raises and stack > call:
            if call <= 0:
                actions.append(Action.bet(min(increment, stack)))
            else:
                actions.append(Action.raise_(min(call + increment, stack)))
        return actions

    # Actions ---------------------------------------------------------

    def apply_action(
        self,
        action: Union[Action, ActionRequest],
        seat: Optional[int] = None,
    ) -> bool:
        """
        Apply an action for the seat to act.

        Stale or invalid submissions (hand over, wrong seat, malformed or
        illegal action) are ignored and reported by returning False.

        Args:
            action: Action or raw request ("fold", {"action": "call", ...})
            seat: Submitting seat; checked against the seat to act if given

        Returns:
            True if the action was applied
        """
        if self.game_over:
            logger.info("Ignoring %r: hand is over", action)
            return False

        parsed = Action.from_request(action)
        if parsed is None:
            logger.info("Ignoring malformed action %r", action)
            return False

        actor = self._require_actor()
        if seat is not None and seat != actor:
            logger.info("Ignoring %s from seat %d: seat %d is to act", parsed, seat, actor)
            return False

        legal = {a.action_type for a in self.legal_actions()}
        if parsed.action_type not in legal:
            logger.info("Ignoring illegal %s from seat %d", parsed, actor)
            return False

        moved = 0
        if parsed.action_type == ActionType.FOLD:
            self.folded[actor] = True
            self.pending_action.discard(actor)
            label = action_label(ActionType.FOLD, 0)

        elif parsed.action_type == ActionType.CHECK:
            self.pending_action.discard(actor)
            label = action_label(ActionType.CHECK, 0)

        elif parsed.action_type == ActionType.CALL:
            moved = min(self.call_amount(), self.chips[actor])
            self._commit(actor, moved)
            self.pending_action.discard(actor)
            label = action_label(ActionType.CALL, moved)

        else:
            increment = self.bet_size()
            moved = min(self.call_amount() + increment, self.chips[actor])
            self._commit(actor, moved)
            self.raise_count += 1
            self.current_bet = max(self.bets)
            # A bet or raise reopens the action for everyone else
            self.pending_action = {s for s in self.active_players() if s != actor}
            label = action_label(parsed.action_type, increment)

        self.last_action[actor] = label
        self.action_history.append(ActionRecord(
            seat=actor,
            street=int(self.street),
            action_type=parsed.action_type,
            label=label,
            total_bet=self.bets[actor],
            amount=moved,
        ))

        active = self.active_players()
        if len(active) == 1:
            self._award_uncontested(active[0])
        elif not self.pending_action:
            self._next_street()
        else:
            self.to_act = self._next_pending(actor)
        return True

    def _commit(self, seat: int, amount: int) -> None:
        self.chips[seat] -= amount
        self.bets[seat] += amount
        self.pot += amount

    def _award_uncontested(self, seat: int) -> None:
        self.chips[seat] += self.pot
        self.winner = seat
        self.winners = [seat]
        self.winner_hand = FOLD_WIN
        self.game_over = True
        self.pending_action.clear()
        logger.debug("Seat %d wins %d uncontested", seat, self.pot)

    # Street transitions ----------------------------------------------

    def _next_street(self) -> None:
        self.bets = [0] * self.num_players
        self.raise_count = 0
        self.current_bet = 0
        self.last_action = [""] * self.num_players
        self.street = Street(self.street + 1)

        if self.street == Street.SHOWDOWN:
            self._showdown()
            return

        self.deck.burn()
        if self.street == Street.FLOP:
            self.board.extend(self.deck.deal(3))
        else:
            self.board.extend(self.deck.deal(1))

        self.pending_action = set(self.active_players())
        self.to_act = self._next_active(self.dealer_seat)
        logger.debug("%s dealt, seat %d to act", self.street_name(), self.to_act)

    def _showdown(self) -> None:
        self.game_over = True
        self.pending_action.clear()
        active = self.active_players()

        self.eval_results = {
            seat: evaluate_best(self.hands[seat] + self.board) for seat in active
        }
        scores = {seat: ev.score for seat, ev in self.eval_results.items()}
        self.winners, payouts = split_pot(self.pot, scores)
        for seat, amount in payouts.items():
            self.chips[seat] += amount

        self.winner = self.winners[0] if len(self.winners) == 1 else None
        self.winner_hand = WinnerHand.from_evaluation(self.eval_results[self.winners[0]])
        logger.debug(
            "Showdown: seats %s win %d with %s",
            self.winners, self.pot, self.winner_hand.category_name,
        )

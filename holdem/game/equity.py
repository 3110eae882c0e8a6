"""Monte Carlo equity estimation against uniform or range-weighted opponents."""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Sequence

import numpy as np

from .cards import Card, card_suit, unseen_cards
from .evaluator import evaluate_best
from .state import Game

if TYPE_CHECKING:
    from ..ranges.tracker import RangeTracker

logger = logging.getLogger(__name__)


@dataclass
class EquityConfig:
    """Simulation budgets for the two consumers of the estimator."""
    ai_trials: int = 300
    solver_trials: int = 800


@dataclass
class EquityResult:
    """Equity of one seat plus a description of its outs."""
    equity: float
    outs: int = 0
    outs_desc: str = ""
    range_aware: bool = False


def _check_inputs(hole: Sequence[Card], trials: int) -> None:
    if trials <= 0:
        raise ValueError(f"trials must be positive, got {trials}")
    if len(hole) < 2:
        raise ValueError("Need two hole cards to estimate equity")


def _showdown_share(hero_score: int, opponent_scores: list[int]) -> float:
    """1 for an outright win, 1/n for an n-way tie, 0 for a loss."""
    tied = 1
    for score in opponent_scores:
        if score > hero_score:
            return 0.0
        if score == hero_score:
            tied += 1
    return 1.0 / tied


class EquityCalculator:
    """
    Monte Carlo equity for a known hand against unknown opponents.

    The estimate is unbiased with error shrinking as 1/sqrt(trials).
    A hand no runout can beat scores exactly 1.0.
    """

    def __init__(self, rng: Optional[np.random.Generator] = None):
        self.rng = rng if rng is not None else np.random.default_rng()

    def simulate(
        self,
        hole: Sequence[Card],
        board: Sequence[Card],
        num_opponents: int,
        trials: int = EquityConfig.solver_trials,
    ) -> float:
        """
        Equity against opponents holding uniformly random cards.

        Args:
            hole: Hero's two hole cards
            board: Board cards (0-5)
            num_opponents: Opponents still in the hand
            trials: Number of simulated runouts

        Returns:
            Average share of the pot won (0-1)
        """
        _check_inputs(hole, trials)
        hole = list(hole)
        board = list(board)
        needed = 5 - len(board)
        pool = np.array(unseen_cards(hole + board))

        total = 0.0
        for _ in range(trials):
            shuffled = self.rng.permutation(pool).tolist()
            full_board = board + shuffled[:needed]
            idx = needed

            hero_score = evaluate_best(hole + full_board).score
            opponent_scores = []
            for _ in range(num_opponents):
                opp = shuffled[idx:idx + 2]
                idx += 2
                opponent_scores.append(evaluate_best(opp + full_board).score)

            total += _showdown_share(hero_score, opponent_scores)

        return total / trials

    def simulate_vs_ranges(
        self,
        hole: Sequence[Card],
        board: Sequence[Card],
        opponent_seats: Sequence[int],
        tracker: "RangeTracker",
        trials: int = EquityConfig.solver_trials,
    ) -> float:
        """
        Equity against opponents whose cards are drawn from tracked ranges.

        Each trial samples a hand for every opponent from its weight vector,
        removing each sampled hand from the pool before the next. An
        opponent whose range has nothing left gets two random cards.
        """
        _check_inputs(hole, trials)
        hole = list(hole)
        board = list(board)
        needed = 5 - len(board)

        total = 0.0
        completed = 0
        for _ in range(trials):
            excluded = set(hole + board)
            opponent_hands = []
            for seat in opponent_seats:
                hand = tracker.sample_hand(seat, excluded)
                if hand is None:
                    pool = unseen_cards(excluded)
                    if len(pool) < 2:
                        break
                    picked = self.rng.choice(len(pool), size=2, replace=False)
                    hand = (pool[picked[0]], pool[picked[1]])
                opponent_hands.append(list(hand))
                excluded.update(hand)
            else:
                pool = unseen_cards(excluded)
                if len(pool) < needed:
                    continue
                runout = [pool[i] for i in self.rng.permutation(len(pool))[:needed]]
                full_board = board + runout

                hero_score = evaluate_best(hole + full_board).score
                opponent_scores = [
                    evaluate_best(opp + full_board).score for opp in opponent_hands
                ]
                total += _showdown_share(hero_score, opponent_scores)
                completed += 1

        if completed == 0:
            return 0.0
        return total / completed

    def estimate_equity(
        self, game: Game, hero_seat: int, trials: int = EquityConfig.solver_trials
    ) -> float:
        """Equity of ``hero_seat`` against every other active seat."""
        opponents = [s for s in game.active_players() if s != hero_seat]
        return self.simulate(game.hands[hero_seat], game.board, len(opponents), trials)

    def estimate_equity_vs_ranges(
        self,
        game: Game,
        hero_seat: int,
        tracker: "RangeTracker",
        trials: int = EquityConfig.solver_trials,
    ) -> float:
        opponents = [s for s in game.active_players() if s != hero_seat]
        return self.simulate_vs_ranges(
            game.hands[hero_seat], game.board, opponents, tracker, trials
        )

    def analyze(
        self,
        game: Game,
        hero_seat: int,
        tracker: Optional["RangeTracker"] = None,
        trials: int = EquityConfig.solver_trials,
    ) -> EquityResult:
        """
        Equity plus outs for one seat.

        The range-weighted estimator is used when a tracker is given and
        any active opponent has acted this hand.
        """
        hole = game.hands[hero_seat]
        opponents = [s for s in game.active_players() if s != hero_seat]
        range_aware = tracker is not None and any(tracker.has_range(s) for s in opponents)

        if range_aware:
            equity = self.estimate_equity_vs_ranges(game, hero_seat, tracker, trials)
        else:
            equity = self.estimate_equity(game, hero_seat, trials)

        outs: list[Card] = []
        if len(game.board) >= 3:
            outs = calc_outs(hole, game.board)

        logger.debug(
            "Seat %d equity %.3f over %d trials (range_aware=%s)",
            hero_seat, equity, trials, range_aware,
        )
        return EquityResult(
            equity=equity,
            outs=len(outs),
            outs_desc=describe_outs(hole, game.board, outs) if len(game.board) >= 3 else "",
            range_aware=range_aware,
        )


def calc_outs(
    hole: Sequence[Card],
    board: Sequence[Card],
    unseen: Optional[Sequence[Card]] = None,
) -> list[Card]:
    """
    Cards that would lift the hand into a higher category.

    Only meaningful on the flop and turn; returns [] otherwise. Opponent
    holdings are unknown, so ``unseen`` defaults to every card outside
    the hole cards and board.
    """
    if len(board) < 3 or len(board) >= 5:
        return []
    known = list(hole) + list(board)
    if unseen is None:
        unseen = unseen_cards(known)

    current = evaluate_best(known).category
    return [c for c in unseen if evaluate_best(known + [c]).category > current]


def describe_outs(hole: Sequence[Card], board: Sequence[Card], outs: Sequence[Card]) -> str:
    """Short text such as '9 flush + 6 other outs'."""
    if not outs:
        return "No clean outs"

    suit_counts = [0, 0, 0, 0]
    for c in list(hole) + list(board):
        suit_counts[card_suit(c)] += 1

    parts = []
    flush_outs = 0
    if 4 in suit_counts:
        flush_suit = suit_counts.index(4)
        flush_outs = sum(1 for c in outs if card_suit(c) == flush_suit)
        if flush_outs:
            parts.append(f"{flush_outs} flush")

    other = len(outs) - flush_outs
    if other > 0 and not parts:
        parts.append(f"{len(outs)} improve")
    elif other > 0:
        parts.append(f"{other} other")

    suffix = "out" if len(outs) == 1 else "outs"
    return " + ".join(parts) + " " + suffix

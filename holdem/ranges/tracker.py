"""
Bayesian hand-range tracking for opponent seats.

Each tracked seat carries a weight per hand type, starting at the type's
combo count. Every observed action multiplies each weight by how likely
that hand type was to take the action, then the vector is rescaled so
its maximum is 1. Weak hands that keep raising therefore shrink quickly.

Preflop likelihoods come from the AI opening tables; postflop ones from
evaluating a representative holding of each type on the board.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

import numpy as np

from ..ai.preflop import chen_score, position_bonus, preflop_call_prob, preflop_raise_prob
from ..game.actions import ActionRecord, ActionType
from ..game.cards import RANK_STR, Card, parse_range
from ..game.evaluator import HAND_NAMES, HandCategory, compare, evaluate_best
from ..game.state import Game, Street
from .hand_types import BASE_WEIGHTS, HAND_TYPES, NUM_HAND_TYPES, TOTAL_COMBOS, hand_type_for_label, hand_type_index

logger = logging.getLogger(__name__)

# Types below this fraction of the top weight are treated as out of range
DISPLAY_THRESHOLD = 0.15
MIN_WEIGHT = 1e-10
RAISE_ACCELERATION = 0.15

# Ranks shown in the compact grid: A, K, Q, J, T, 9
GRID_RANKS = [12, 11, 10, 9, 8, 7]

# Board cards visible on each street
BOARD_SIZE = {Street.PREFLOP: 0, Street.FLOP: 3, Street.TURN: 4, Street.RIVER: 5}


@dataclass
class PostflopLikelihoods:
    """
    Probability of (aggressive, fold, passive) actions per made-hand band.

    Passive covers checks and calls.
    """
    monster: tuple[float, float, float] = (0.85, 0.02, 0.70)
    strong: tuple[float, float, float] = (0.70, 0.05, 0.65)
    trips: tuple[float, float, float] = (0.60, 0.08, 0.60)
    two_pair: tuple[float, float, float] = (0.50, 0.12, 0.55)
    one_pair: tuple[float, float, float] = (0.30, 0.25, 0.55)
    high_card: tuple[float, float, float] = (0.10, 0.65, 0.35)
    blocked: float = 0.3

    def band(self, category: int) -> tuple[float, float, float]:
        if category >= HandCategory.FULL_HOUSE:
            return self.monster
        if category >= HandCategory.STRAIGHT:
            return self.strong
        if category == HandCategory.THREE_OF_A_KIND:
            return self.trips
        if category == HandCategory.TWO_PAIR:
            return self.two_pair
        if category == HandCategory.ONE_PAIR:
            return self.one_pair
        return self.high_card

    def likelihood(self, category: int, action_type: ActionType) -> float:
        aggressive, fold, passive = self.band(category)
        if action_type.is_aggressive:
            return aggressive
        if action_type == ActionType.FOLD:
            return fold
        return passive


@dataclass
class RangeState:
    """Tracked range of one seat."""
    weights: np.ndarray = field(default_factory=lambda: BASE_WEIGHTS.copy())
    action_count: int = 0
    has_aggressed: bool = False
    raise_count: int = 0
    # Street of the last counted bet or raise
    street: int = Street.PREFLOP


@dataclass
class GridCell:
    in_range: bool
    combos: int


@dataclass
class HandDistribution:
    """In-range combos grouped by the category they make on the board."""
    counts: list[int]
    total: int

    def named(self) -> dict[str, int]:
        return {HAND_NAMES[i]: n for i, n in enumerate(self.counts) if n}


@dataclass
class EquityBreakdown:
    """Combo-by-combo showdown of a known hand against a range."""
    win: int
    tie: int
    lose: int
    total: int
    category_pct: list[int]

    @property
    def win_pct(self) -> float:
        return self.win / self.total if self.total else 0.0


# Chen score of each type, from its default holding
_CHEN_SCORES = np.array([
    chen_score(*HAND_TYPES[i].representative()) for i in range(NUM_HAND_TYPES)
])


class RangeTracker:
    """
    Per-session range state for every seat at the table.

    The hero seat is never tracked; its actions are ignored.
    """

    def __init__(
        self,
        num_seats: int,
        hero_seat: Optional[int] = None,
        likelihoods: Optional[PostflopLikelihoods] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        self.hero_seat = hero_seat
        self.likelihoods = likelihoods or PostflopLikelihoods()
        self.rng = rng if rng is not None else np.random.default_rng()
        self.num_seats = num_seats
        self._states: dict[int, RangeState] = {}
        self.reset_all(num_seats)

    def reset_all(self, num_seats: Optional[int] = None) -> None:
        """Put every seat back to the uniform prior."""
        if num_seats is not None:
            self.num_seats = num_seats
        self._states = {seat: RangeState() for seat in range(self.num_seats)}

    # Updates ---------------------------------------------------------

    def update(self, game: Game) -> bool:
        """
        Fold the newest action in the game's history into its seat's range.

        Returns:
            True if a range changed
        """
        if not game.action_history:
            return False
        return self._apply(game, game.action_history[-1])

    def replay(self, game: Game, start: int = 0) -> int:
        """
        Apply history records from ``start`` onward.

        Replaying from 0 resets every seat first, so a replayed hand ends
        in the same state as one tracked action by action.

        Returns:
            Number of records that changed a range
        """
        if start == 0:
            self.reset_all(game.num_players)
        return sum(1 for record in game.action_history[start:] if self._apply(game, record))

    def _apply(self, game: Game, record: ActionRecord) -> bool:
        seat = record.seat
        if seat == self.hero_seat or seat not in self._states:
            return False
        if game.eliminated[seat]:
            return False

        state = self._states[seat]
        action_type = record.action_type
        power = 1.0
        if action_type.is_aggressive:
            state.has_aggressed = True
            if state.street != record.street:
                state.street = record.street
                state.raise_count = 0
            state.raise_count += 1
            power = 1.0 + (state.raise_count - 1) * RAISE_ACCELERATION

        live = state.weights >= MIN_WEIGHT
        if record.street == Street.PREFLOP:
            probs = self._preflop_likelihoods(game, seat, action_type)
        else:
            # Board as it stood when the action was taken
            board = game.board[:BOARD_SIZE[record.street]]
            probs = self._postflop_likelihoods(board, action_type, live)

        state.weights[live] *= probs[live] ** power
        top = state.weights.max()
        if top > MIN_WEIGHT:
            state.weights /= top
        state.action_count += 1

        logger.debug(
            "Seat %d %s on %s: %d types live",
            seat, record.label, Street(record.street).name,
            int((state.weights >= MIN_WEIGHT).sum()),
        )
        return True

    def _preflop_likelihoods(self, game: Game, seat: int, action_type: ActionType) -> np.ndarray:
        bonus = position_bonus(seat, game.dealer_seat, game.alive_seats())
        raise_p = np.array([preflop_raise_prob(s, bonus) for s in _CHEN_SCORES])
        if action_type.is_aggressive:
            return raise_p
        call_p = np.array([preflop_call_prob(s, bonus) for s in _CHEN_SCORES])
        if action_type == ActionType.FOLD:
            return np.maximum(0.0, 1.0 - raise_p - call_p)
        return call_p

    def _postflop_likelihoods(
        self,
        board: list[Card],
        action_type: ActionType,
        live: np.ndarray,
    ) -> np.ndarray:
        probs = np.ones(NUM_HAND_TYPES)
        for i in np.flatnonzero(live):
            holding = HAND_TYPES[i].representative(board)
            if holding is None:
                probs[i] = self.likelihoods.blocked
                continue
            category = evaluate_best(list(holding) + list(board)).category
            probs[i] = self.likelihoods.likelihood(category, action_type)
        return probs

    # Direct manipulation ---------------------------------------------

    def set_weights(self, seat: int, weights: Iterable[float]) -> None:
        """Overwrite a seat's weight vector (169 non-negative values)."""
        arr = np.asarray(list(weights), dtype=np.float64)
        if arr.shape != (NUM_HAND_TYPES,):
            raise ValueError(f"Expected {NUM_HAND_TYPES} weights, got {arr.shape}")
        if (arr < 0).any():
            raise ValueError("Range weights must be non-negative")
        self._states.setdefault(seat, RangeState()).weights = arr

    def set_range(self, seat: int, notation: str) -> None:
        """
        Assign an explicit range such as "TT+, AKs, AQo".

        The seat counts as having a range afterwards, so equity
        estimates sample from it.
        """
        weights = np.zeros(NUM_HAND_TYPES)
        for label in parse_range(notation):
            weights[hand_type_for_label(label)] = 1.0
        self.set_weights(seat, weights)
        state = self._states[seat]
        state.action_count = max(state.action_count, 1)

    # Queries ---------------------------------------------------------

    def has_range(self, seat: int) -> bool:
        """True once the seat has been observed acting."""
        state = self._states.get(seat)
        return state is not None and state.action_count > 0

    def has_aggressed(self, seat: int) -> bool:
        state = self._states.get(seat)
        return state is not None and state.has_aggressed

    def weights(self, seat: int) -> Optional[np.ndarray]:
        """Copy of a seat's weights, or None if the seat is untracked."""
        state = self._states.get(seat)
        return None if state is None else state.weights.copy()

    def _in_range(self, seat: int) -> Optional[np.ndarray]:
        """Boolean mask of types at or above the display threshold."""
        state = self._states.get(seat)
        if state is None:
            return None
        top = state.weights.max()
        if top < MIN_WEIGHT:
            return None
        return state.weights >= DISPLAY_THRESHOLD * top

    def sample_hand(self, seat: int, excluded: Iterable[Card] = ()) -> Optional[tuple[Card, Card]]:
        """
        Draw a concrete holding for a seat.

        Each holding not blocked by ``excluded`` is drawn with its type's
        weight. Returns None if the seat is untracked or nothing survives.
        """
        state = self._states.get(seat)
        if state is None:
            return None
        excluded = set(excluded)

        holdings = []
        holding_weights = []
        for i in np.flatnonzero(state.weights >= 1e-9):
            weight = state.weights[i]
            for combo in HAND_TYPES[i].combos_excluding(excluded):
                holdings.append(combo)
                holding_weights.append(weight)

        if not holdings:
            return None
        p = np.asarray(holding_weights)
        total = p.sum()
        if total < 1e-12:
            return None
        return holdings[self.rng.choice(len(holdings), p=p / total)]

    def notation(self, seat: int) -> str:
        """
        Compact text for the in-range types, e.g. "TT+, 55, AJs+, KQo".

        Pair runs reaching aces collapse to "XX+"; suited and offsuit runs
        whose top kicker sits just below the high card collapse to "XYs+".
        """
        mask = self._in_range(seat)
        if mask is None:
            return ""

        pairs: list[int] = []
        suited: dict[int, list[int]] = {}
        offsuit: dict[int, list[int]] = {}
        for i in np.flatnonzero(mask):
            ht = HAND_TYPES[i]
            if ht.is_pair:
                pairs.append(ht.high)
            elif ht.suited:
                suited.setdefault(ht.high, []).append(ht.low)
            else:
                offsuit.setdefault(ht.high, []).append(ht.low)

        parts = []
        for run in _runs(sorted(pairs, reverse=True)):
            if run[0] == 12 and len(run) > 1:
                parts.append(f"{RANK_STR[run[-1]] * 2}+")
            else:
                parts.extend(RANK_STR[r] * 2 for r in run)

        for suffix, groups in (("s", suited), ("o", offsuit)):
            for high in sorted(groups, reverse=True):
                for run in _runs(sorted(groups[high], reverse=True)):
                    if run[0] == high - 1 and len(run) > 1:
                        parts.append(f"{RANK_STR[high]}{RANK_STR[run[-1]]}{suffix}+")
                    else:
                        parts.extend(f"{RANK_STR[high]}{RANK_STR[k]}{suffix}" for k in run)

        return ", ".join(parts)

    def range_percent(self, seat: int) -> int:
        """Share of all 1326 holdings in range; 100 when nothing is known."""
        mask = self._in_range(seat)
        if mask is None:
            return 100
        above = BASE_WEIGHTS[mask].sum()
        return _percent(above, TOTAL_COMBOS)

    def combo_count(self, seat: int, excluded: Iterable[Card] = ()) -> int:
        """Concrete in-range holdings not blocked by ``excluded``."""
        mask = self._in_range(seat)
        if mask is None:
            return 0
        excluded = set(excluded)
        return sum(len(HAND_TYPES[i].combos_excluding(excluded)) for i in np.flatnonzero(mask))

    def grid(self, seat: int, excluded: Iterable[Card] = ()) -> Optional[list[list[GridCell]]]:
        """
        6x6 matrix over A-9: pairs on the diagonal, suited hands above it,
        offsuit below. Blocked holdings are not counted.
        """
        mask = self._in_range(seat)
        if mask is None:
            return None
        excluded = set(excluded)

        rows = []
        for ri, r1 in enumerate(GRID_RANKS):
            row = []
            for ci, r2 in enumerate(GRID_RANKS):
                idx = hand_type_index(r1, r2, ci > ri)
                in_range = bool(mask[idx])
                combos = len(HAND_TYPES[idx].combos_excluding(excluded)) if in_range else 0
                row.append(GridCell(in_range, combos))
            rows.append(row)
        return rows

    def hand_distribution(
        self,
        seat: int,
        board: list[Card],
        excluded: Iterable[Card] = (),
    ) -> Optional[HandDistribution]:
        """Count in-range holdings by the category they make on the board."""
        if len(board) < 3:
            return None
        mask = self._in_range(seat)
        if mask is None:
            return None
        blocked = set(excluded) | set(board)

        counts = [0] * len(HAND_NAMES)
        total = 0
        for i in np.flatnonzero(mask):
            for combo in HAND_TYPES[i].combos_excluding(blocked):
                counts[evaluate_best(list(combo) + board).category] += 1
                total += 1
        return HandDistribution(counts, total)

    def equity_breakdown(
        self,
        seat: int,
        board: list[Card],
        hero_cards: list[Card],
    ) -> Optional[EquityBreakdown]:
        """Win/tie/lose counts of ``hero_cards`` against every in-range holding."""
        if len(board) < 3 or len(hero_cards) < 2:
            return None
        mask = self._in_range(seat)
        if mask is None:
            return None

        hero = evaluate_best(list(hero_cards) + board)
        blocked = set(hero_cards) | set(board)
        win = tie = lose = 0
        categories = [0] * len(HAND_NAMES)
        for i in np.flatnonzero(mask):
            for combo in HAND_TYPES[i].combos_excluding(blocked):
                villain = evaluate_best(list(combo) + board)
                categories[villain.category] += 1
                result = compare(hero, villain)
                if result > 0:
                    win += 1
                elif result == 0:
                    tie += 1
                else:
                    lose += 1

        total = win + tie + lose
        if total == 0:
            return None
        pct = [_percent(n, total) for n in categories]
        return EquityBreakdown(win, tie, lose, total, pct)


def _percent(n: float, total: int) -> int:
    """Whole percentage, halves rounded up."""
    return int(n * 100 / total + 0.5)


def _runs(ranks: list[int]) -> list[list[int]]:
    """Split descending ranks into runs of consecutive values."""
    runs: list[list[int]] = []
    for rank in ranks:
        if runs and runs[-1][-1] - rank == 1:
            runs[-1].append(rank)
        else:
            runs.append([rank])
    return runs

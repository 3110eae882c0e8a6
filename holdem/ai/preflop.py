"""Preflop hand strength and opening tables.

Starting hands are scored with the Chen formula; the score plus a
position bonus indexes fixed raise and call probability tables. The
range tracker reuses the same tables to infer what a seat holds from
what it did.
"""

from ..game.cards import Card, card_rank, card_suit
from ..game.state import position_name, seat_offset

# Chen points for the highest card, indexed by rank (deuce first)
RANK_POINTS = [1, 1.5, 2, 2.5, 3, 3.5, 4, 4.5, 5, 6, 7, 8, 10]

# (threshold, probability) pairs, checked top to bottom
RAISE_TABLE = [(10, 1.0), (8, 0.85), (7, 0.65), (6, 0.45), (5, 0.25), (4, 0.10)]
RAISE_FLOOR = 0.04
CALL_TABLE = [(7, 1.0), (5, 0.80), (4, 0.55), (3, 0.30)]
CALL_FLOOR = 0.12

__all__ = [
    "chen_score",
    "preflop_raise_prob",
    "preflop_call_prob",
    "position_bonus",
    "position_name",
]


def chen_score(card1: Card, card2: Card) -> float:
    """
    Chen formula score of a starting hand.

    Pairs score double the high card (minimum 5). Unpaired hands score
    the high card, +2 if suited, minus a gap penalty, +1 for small
    connected cards.
    """
    r1, r2 = card_rank(card1), card_rank(card2)
    high, low = max(r1, r2), min(r1, r2)
    score = RANK_POINTS[high]

    if r1 == r2:
        return max(score * 2, 5)

    if card_suit(card1) == card_suit(card2):
        score += 2

    gap = high - low
    if gap == 1:
        score -= 1
    elif gap == 2:
        score -= 2
    elif gap == 3:
        score -= 4
    elif gap > 3:
        score -= 5

    if gap <= 1 and low >= 2 and high <= 9:
        score += 1
    return score


def _lookup(table: list[tuple[float, float]], floor: float, adjusted: float) -> float:
    for threshold, prob in table:
        if adjusted >= threshold:
            return prob
    return floor


def preflop_raise_prob(score: float, pos_bonus: float) -> float:
    return _lookup(RAISE_TABLE, RAISE_FLOOR, score + pos_bonus)


def preflop_call_prob(score: float, pos_bonus: float) -> float:
    return _lookup(CALL_TABLE, CALL_FLOOR, score + pos_bonus)


def position_bonus(seat: int, dealer_seat: int, alive_seats: list[int]) -> float:
    """
    Late positions play wider.

    Button 2.5, small blind 1.0, big blind 0.5, the last two seats
    before the button 1.5 at tables of five or more, otherwise 0.
    """
    offset = seat_offset(seat, dealer_seat, alive_seats)
    if offset is None:
        return 0.0
    num_alive = len(alive_seats)
    if offset == 0:
        return 2.5
    if offset == 1:
        return 1.0
    if offset == 2:
        return 0.5
    if offset >= num_alive - 2 and num_alive > 4:
        return 1.5
    return 0.0

"""Five-to-seven card hand evaluation.

Scores form a total order: the category base (a multiple of 10,000,000)
dominates, and the remainder encodes the ranks that break ties inside a
category. Downstream code compares raw scores, so the encoding is fixed.
"""

from collections import Counter
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional, Sequence

from .cards import Card, card_rank, card_suit


class HandCategory(IntEnum):
    """Hand categories, weakest first."""
    HIGH_CARD = 0
    ONE_PAIR = 1
    TWO_PAIR = 2
    THREE_OF_A_KIND = 3
    STRAIGHT = 4
    FLUSH = 5
    FULL_HOUSE = 6
    FOUR_OF_A_KIND = 7
    STRAIGHT_FLUSH = 8
    ROYAL_FLUSH = 9


HAND_NAMES = [
    "High Card", "One Pair", "Two Pair", "Three of a Kind",
    "Straight", "Flush", "Full House", "Four of a Kind",
    "Straight Flush", "Royal Flush",
]

CATEGORY_WEIGHT = 10_000_000

# Base score per tier. Royal flush shares the straight flush tier.
HC_HIGH_CARD = 0
HC_ONE_PAIR = 1 * CATEGORY_WEIGHT
HC_TWO_PAIR = 2 * CATEGORY_WEIGHT
HC_TRIPS = 3 * CATEGORY_WEIGHT
HC_STRAIGHT = 4 * CATEGORY_WEIGHT
HC_FLUSH = 5 * CATEGORY_WEIGHT
HC_FULL_HOUSE = 6 * CATEGORY_WEIGHT
HC_QUADS = 7 * CATEGORY_WEIGHT
HC_STRAIGHT_FLUSH = 8 * CATEGORY_WEIGHT

# Rank index the wheel (A-2-3-4-5) reports as its high card: the five.
WHEEL_HIGH = 3


@dataclass(frozen=True)
class HandEvaluation:
    """Best five-card hand found in a set of cards."""
    score: int
    category: HandCategory
    best_cards: tuple[Card, ...]

    @property
    def category_index(self) -> int:
        return int(self.category)

    @property
    def category_name(self) -> str:
        return HAND_NAMES[self.category]

    def __repr__(self) -> str:
        return f"HandEvaluation({self.category_name}, score={self.score})"


def kicker_score(ranks: Sequence[int]) -> int:
    """Base-13 positional encoding of ranks, most significant first."""
    score = 0
    for rank in ranks:
        score = score * 13 + rank
    return score


def _straight_high(sorted_ranks: Sequence[int]) -> Optional[int]:
    """High rank of a five-card straight (descending ranks), else None."""
    if len(set(sorted_ranks)) != 5:
        return None
    if sorted_ranks[0] - sorted_ranks[4] == 4:
        return sorted_ranks[0]
    if list(sorted_ranks) == [12, 3, 2, 1, 0]:
        return WHEEL_HIGH
    return None


def evaluate5(cards: Sequence[Card]) -> tuple[HandCategory, int]:
    """
    Score exactly five cards.

    Returns:
        Tuple of (category, score)
    """
    if len(cards) != 5:
        raise ValueError(f"evaluate5 needs 5 cards, got {len(cards)}")

    ranks = sorted((card_rank(c) for c in cards), reverse=True)
    flush = len({card_suit(c) for c in cards}) == 1
    straight_high = _straight_high(ranks)

    counts = Counter(ranks)
    # Groups ordered by count, then by rank, both descending
    groups = sorted(counts.items(), key=lambda item: (item[1], item[0]), reverse=True)
    shape = [count for _, count in groups]
    singles = sorted((r for r, c in counts.items() if c == 1), reverse=True)

    if flush and straight_high is not None:
        royal = ranks[0] == 12 and ranks[1] == 11
        category = HandCategory.ROYAL_FLUSH if royal else HandCategory.STRAIGHT_FLUSH
        return category, HC_STRAIGHT_FLUSH + straight_high * 1000
    if shape[0] == 4:
        quad, kicker = groups[0][0], groups[1][0]
        return HandCategory.FOUR_OF_A_KIND, HC_QUADS + quad * 1000 + kicker
    if shape == [3, 2]:
        trips, pair = groups[0][0], groups[1][0]
        return HandCategory.FULL_HOUSE, HC_FULL_HOUSE + trips * 100 + pair
    if flush:
        return HandCategory.FLUSH, HC_FLUSH + kicker_score(ranks)
    if straight_high is not None:
        return HandCategory.STRAIGHT, HC_STRAIGHT + straight_high * 1000
    if shape[0] == 3:
        trips = groups[0][0]
        return HandCategory.THREE_OF_A_KIND, HC_TRIPS + trips * 10000 + kicker_score(singles)
    if shape[:2] == [2, 2]:
        high_pair, low_pair = groups[0][0], groups[1][0]
        kicker = singles[0]
        return (
            HandCategory.TWO_PAIR,
            HC_TWO_PAIR + high_pair * 10000 + low_pair * 100 + kicker,
        )
    if shape[0] == 2:
        pair = groups[0][0]
        return HandCategory.ONE_PAIR, HC_ONE_PAIR + pair * 100000 + kicker_score(singles)
    return HandCategory.HIGH_CARD, HC_HIGH_CARD + kicker_score(ranks)


def combinations(items: Sequence, k: int) -> list[tuple]:
    """
    All k-element subsets of items, in lexicographic index order.

    Walks an explicit index vector instead of recursing, so C(7,5)
    yields the same 21 subsets in the same order on every call.
    """
    n = len(items)
    if k > n or k < 0:
        return []
    indices = list(range(k))
    result = [tuple(items[i] for i in indices)]
    while True:
        # Rightmost index that can still move forward
        i = k - 1
        while i >= 0 and indices[i] == i + n - k:
            i -= 1
        if i < 0:
            return result
        indices[i] += 1
        for j in range(i + 1, k):
            indices[j] = indices[j - 1] + 1
        result.append(tuple(items[idx] for idx in indices))


def evaluate_best(cards: Sequence[Card]) -> Optional[HandEvaluation]:
    """
    Best five-card hand from 5-7 cards.

    Returns None when fewer than five cards are given.
    """
    if len(cards) < 5:
        return None

    best: Optional[HandEvaluation] = None
    for combo in combinations(list(cards), 5):
        category, score = evaluate5(combo)
        if best is None or score > best.score:
            best = HandEvaluation(score=score, category=category, best_cards=combo)
    return best


def compare(a: HandEvaluation, b: HandEvaluation) -> int:
    """1 if a wins, -1 if b wins, 0 on a tie."""
    if a.score > b.score:
        return 1
    if a.score < b.score:
        return -1
    return 0

"""
The 169 strategically distinct starting-hand types.

Index layout:
    0-12     pairs, 22 ... AA (6 combos each)
    13-90    suited, AKs AQs ... A2s KQs ... 32s (4 combos each)
    91-168   offsuit, same order as suited (12 combos each)
"""

from dataclasses import dataclass
from typing import Iterable, Optional

import numpy as np

from ..game.cards import RANK_STR, STR_RANK, Card, card_rank, card_suit

NUM_HAND_TYPES = 169
TOTAL_COMBOS = 1326


@dataclass(frozen=True)
class HandType:
    """A hand class like 'AKs' or 'TT', independent of specific suits."""
    high: int
    low: int
    suited: bool
    combos: int

    @property
    def is_pair(self) -> bool:
        return self.high == self.low

    @property
    def label(self) -> str:
        if self.is_pair:
            return f"{RANK_STR[self.high]}{RANK_STR[self.low]}"
        suffix = "s" if self.suited else "o"
        return f"{RANK_STR[self.high]}{RANK_STR[self.low]}{suffix}"

    def all_combos(self) -> list[tuple[Card, Card]]:
        """Every concrete two-card holding of this type."""
        h, l = self.high * 4, self.low * 4
        if self.is_pair:
            return [(h + s1, h + s2) for s1 in range(4) for s2 in range(s1 + 1, 4)]
        if self.suited:
            return [(h + s, l + s) for s in range(4)]
        return [(h + s1, l + s2) for s1 in range(4) for s2 in range(4) if s1 != s2]

    def combos_excluding(self, excluded: Iterable[Card]) -> list[tuple[Card, Card]]:
        """Concrete holdings that share no card with ``excluded``."""
        excluded = set(excluded)
        return [
            (c1, c2) for c1, c2 in self.all_combos()
            if c1 not in excluded and c2 not in excluded
        ]

    def representative(self, board: Iterable[Card] = ()) -> Optional[tuple[Card, Card]]:
        """
        One concrete holding used to stand in for the whole type.

        The default is spade-heart for pairs and offsuit hands and two
        spades for suited hands. If the board blocks it, the first
        unblocked holding in suit order is used instead; None if every
        holding is blocked.
        """
        board = set(board)
        h, l = self.high * 4, self.low * 4
        if self.is_pair:
            default = (h, h + 1)
        elif self.suited:
            default = (h, l)
        else:
            default = (h, l + 1)

        if default[0] not in board and default[1] not in board:
            return default
        for combo in self.all_combos():
            if combo[0] not in board and combo[1] not in board:
                return combo
        return None

    def __str__(self) -> str:
        return self.label


def _build_hand_types() -> list[HandType]:
    types = [HandType(r, r, False, 6) for r in range(13)]
    for suited, combos in ((True, 4), (False, 12)):
        for high in range(12, 0, -1):
            for low in range(high - 1, -1, -1):
                types.append(HandType(high, low, suited, combos))
    return types


HAND_TYPES: list[HandType] = _build_hand_types()

# Prior weight of each type: its number of concrete combos
BASE_WEIGHTS = np.array([ht.combos for ht in HAND_TYPES], dtype=np.float64)

_INDEX = {(ht.high, ht.low, ht.suited or ht.is_pair): i for i, ht in enumerate(HAND_TYPES)}
_LABEL_INDEX = {ht.label: i for i, ht in enumerate(HAND_TYPES)}


def hand_type_index(high: int, low: int, suited: bool) -> int:
    """Index of the type with ranks high/low (in any order)."""
    if high < low:
        high, low = low, high
    if high == low:
        suited = True
    return _INDEX[(high, low, suited)]


def hand_type_of(c1: Card, c2: Card) -> int:
    """Index of the type a concrete holding belongs to."""
    return hand_type_index(card_rank(c1), card_rank(c2), card_suit(c1) == card_suit(c2))


def hand_type_for_label(label: str) -> int:
    """
    Index for a canonical label such as 'AKs', 'T9o' or 'QQ'.

    Raises:
        ValueError: If the label is not a valid hand type
    """
    label = label.strip()
    if len(label) >= 2:
        normalized = label[0].upper() + label[1].upper() + label[2:].lower()
        if normalized in _LABEL_INDEX:
            return _LABEL_INDEX[normalized]
        # Accept "KA s" style orderings by re-sorting the ranks
        r1, r2 = STR_RANK.get(normalized[0]), STR_RANK.get(normalized[1])
        if r1 is not None and r2 is not None and len(normalized) in (2, 3):
            suffix = normalized[2:] if r1 != r2 else ""
            if r1 == r2 or suffix in ("s", "o"):
                return hand_type_index(r1, r2, suffix == "s")
    raise ValueError(f"Invalid hand type: {label}")

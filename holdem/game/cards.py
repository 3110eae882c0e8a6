"""Card encoding and deck utilities.

Cards are plain integers in [0, 52): ``rank = card // 4`` (0 is a deuce,
12 is an ace) and ``suit = card % 4``.
"""

from typing import Iterable, Optional

import numpy as np
from treys import Card as TreysCard


Card = int

DECK_SIZE = 52


# Mapping for string conversion
RANK_STR = {
    0: "2", 1: "3", 2: "4", 3: "5", 4: "6", 5: "7", 6: "8", 7: "9",
    8: "T", 9: "J", 10: "Q", 11: "K", 12: "A"
}
STR_RANK = {v: k for k, v in RANK_STR.items()}

SUIT_STR = {0: "s", 1: "h", 2: "d", 3: "c"}
STR_SUIT = {v: k for k, v in SUIT_STR.items()}


class DeckExhausted(RuntimeError):
    """Raised when more cards are requested than the deck holds."""


def card_rank(card: Card) -> int:
    return card // 4


def card_suit(card: Card) -> int:
    return card % 4


def make_card(rank: int, suit: int) -> Card:
    """Build a card from rank (0-12) and suit (0-3)."""
    if not 0 <= rank < 13 or not 0 <= suit < 4:
        raise ValueError(f"Invalid card: rank={rank}, suit={suit}")
    return rank * 4 + suit


def card_label(card: Card) -> str:
    """Two-character label such as 'As' or 'Td'."""
    return f"{RANK_STR[card_rank(card)]}{SUIT_STR[card_suit(card)]}"


def cards_label(cards: Iterable[Card]) -> str:
    return " ".join(card_label(c) for c in cards)


def parse_card(s: str) -> Card:
    """Parse card from string like 'As', 'Th', '2c'."""
    if len(s) != 2:
        raise ValueError(f"Invalid card string: {s}")
    rank_char = s[0].upper()
    suit_char = s[1].lower()

    if rank_char not in STR_RANK:
        raise ValueError(f"Invalid rank: {rank_char}")
    if suit_char not in STR_SUIT:
        raise ValueError(f"Invalid suit: {suit_char}")

    return make_card(STR_RANK[rank_char], STR_SUIT[suit_char])


def parse_cards(s: str) -> list[Card]:
    """Parse a run of cards, e.g. 'AsKhTd' or 'As Kh Td'."""
    compact = s.replace(" ", "").replace(",", "")
    if len(compact) % 2:
        raise ValueError(f"Invalid card list: {s}")
    return [parse_card(compact[i:i + 2]) for i in range(0, len(compact), 2)]


def to_treys(card: Card) -> int:
    """Convert to treys library card format."""
    return TreysCard.new(card_label(card))


class Deck:
    """
    A shuffled 52-card deck with a dealing cursor.

    Dealt cards stay in ``cards``; ``pos`` marks the next card to deal,
    so a deck never hands out the same card twice until it is reset.
    """

    def __init__(self, rng: Optional[np.random.Generator] = None):
        self.rng = rng if rng is not None else np.random.default_rng()
        self.cards: list[Card] = []
        self.pos = 0
        self.burned: list[Card] = []
        self.reset()

    def reset(self) -> None:
        """Reset deck to full 52 cards and shuffle."""
        self.cards = list(range(DECK_SIZE))
        self.burned = []
        self.shuffle()

    def shuffle(self) -> None:
        """Fisher-Yates shuffle of the whole deck; rewinds the cursor."""
        self.cards = [self.cards[i] for i in self.rng.permutation(len(self.cards))]
        self.pos = 0

    def deal(self, n: int = 1) -> list[Card]:
        """Deal n cards from the deck."""
        if n > len(self):
            raise DeckExhausted(f"Cannot deal {n} cards, only {len(self)} remaining")
        dealt = self.cards[self.pos:self.pos + n]
        self.pos += n
        return dealt

    def burn(self) -> Card:
        card = self.deal(1)[0]
        self.burned.append(card)
        return card

    def remaining(self) -> list[Card]:
        return self.cards[self.pos:]

    def __len__(self) -> int:
        return len(self.cards) - self.pos


def unseen_cards(known: Iterable[Card]) -> list[Card]:
    """All cards not in ``known``, in ascending order."""
    known = set(known)
    return [c for c in range(DECK_SIZE) if c not in known]


def parse_range(range_str: str) -> list[str]:
    """
    Parse a comma separated range string into canonical hand labels.

    Examples:
        "AA" -> ["AA"]
        "TT+" -> ["TT", "JJ", "QQ", "KK", "AA"]
        "ATs+" -> ["ATs", "AJs", "AQs", "AKs"]
        "22-55" -> ["22", "33", "44", "55"]
        "AA, KK, AKs" -> ["AA", "KK", "AKs"]
    """
    hands = []
    for part in range_str.split(","):
        part = part.strip()
        if part:
            hands.extend(_parse_range_part(part))
    return hands


def _parse_range_part(part: str) -> list[str]:
    # Pair plus: "TT+"
    if len(part) == 3 and part[2] == "+" and part[0] == part[1]:
        start_rank = STR_RANK[part[0].upper()]
        return [f"{RANK_STR[r]}{RANK_STR[r]}" for r in range(start_rank, 13)]

    # Pair range: "22-55"
    if "-" in part and len(part) == 5:
        low = STR_RANK[part[0].upper()]
        high = STR_RANK[part[3].upper()]
        return [f"{RANK_STR[r]}{RANK_STR[r]}" for r in range(low, high + 1)]

    # Suited/offsuit plus: "ATs+"
    if len(part) == 4 and part[3] == "+":
        high_rank = STR_RANK[part[0].upper()]
        low_rank = STR_RANK[part[1].upper()]
        suffix = part[2].lower()
        return [
            f"{RANK_STR[high_rank]}{RANK_STR[r]}{suffix}"
            for r in range(low_rank, high_rank)
        ]

    if len(part) not in (2, 3):
        raise ValueError(f"Invalid range part: {part}")
    return [part[0].upper() + part[1].upper() + part[2:].lower()]

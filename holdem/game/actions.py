"""Betting actions as a tagged variant."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class ActionType(Enum):
    """Available actions at a decision point."""
    FOLD = "fold"
    CHECK = "check"
    CALL = "call"
    BET = "bet"
    RAISE = "raise"

    @property
    def is_aggressive(self) -> bool:
        return self in (ActionType.BET, ActionType.RAISE)


# What the presentation and transport layers hand to the engine:
# "fold", "check", or {"action": "call" | "bet" | "raise", "amount": n}
ActionRequest = Union[str, dict]


@dataclass(frozen=True)
class Action:
    """
    An action with the chips it moves.

    ``amount`` is the total moved by the acting seat: the capped call for
    a call, call plus the street increment for a bet or raise.
    """
    action_type: ActionType
    amount: int = 0

    @classmethod
    def fold(cls) -> "Action":
        return cls(ActionType.FOLD)

    @classmethod
    def check(cls) -> "Action":
        return cls(ActionType.CHECK)

    @classmethod
    def call(cls, amount: int) -> "Action":
        return cls(ActionType.CALL, amount)

    @classmethod
    def bet(cls, amount: int) -> "Action":
        return cls(ActionType.BET, amount)

    @classmethod
    def raise_(cls, amount: int) -> "Action":
        return cls(ActionType.RAISE, amount)

    @property
    def is_aggressive(self) -> bool:
        return self.action_type.is_aggressive

    @classmethod
    def from_request(cls, request: Union["Action", ActionRequest, None]) -> Optional["Action"]:
        """
        Build an action from a presentation-layer request.

        Returns None for anything malformed; callers treat that as a
        rejected submission.
        """
        if isinstance(request, Action):
            return request
        if isinstance(request, str):
            name = request.lower().strip()
            if name == "fold":
                return cls.fold()
            if name == "check":
                return cls.check()
            return None
        if isinstance(request, dict):
            try:
                action_type = ActionType(str(request.get("action", "")).lower())
            except ValueError:
                return None
            amount = request.get("amount", 0) or 0
            if not isinstance(amount, (int, float)) or amount < 0:
                return None
            return cls(action_type, int(amount))
        return None

    def to_request(self) -> ActionRequest:
        """Inverse of from_request."""
        if self.action_type in (ActionType.FOLD, ActionType.CHECK):
            return self.action_type.value
        return {"action": self.action_type.value, "amount": self.amount}

    def __str__(self) -> str:
        if self.amount > 0:
            return f"{self.action_type.name}_{self.amount}"
        return self.action_type.name


@dataclass(frozen=True)
class ActionRecord:
    """One entry of a hand's action history."""
    seat: int
    street: int
    action_type: ActionType
    label: str
    total_bet: int
    amount: int = 0

    @property
    def is_aggressive(self) -> bool:
        return self.action_type.is_aggressive


def action_label(action_type: ActionType, amount: int) -> str:
    """
    Display label stored in the action history.

    Bets and raises show the street increment, calls the chips moved.
    """
    if action_type == ActionType.FOLD:
        return "Fold"
    if action_type == ActionType.CHECK:
        return "Check"
    if action_type == ActionType.CALL:
        return f"Call ${amount}"
    if action_type == ActionType.BET:
        return f"Bet ${amount}"
    return f"Raise ${amount}"

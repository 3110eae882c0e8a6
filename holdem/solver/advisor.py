"""
Advisory solver for the analysed seat.

Estimates the seat's equity (range-weighted once opponents have shown
actions), compares it with the pot odds on offer and turns the result
into a recommended action with a short explanation.
"""

from dataclasses import dataclass
from typing import Optional

from ..game.actions import Action, ActionType
from ..game.equity import EquityCalculator, EquityConfig
from ..game.state import Game
from ..ranges.tracker import RangeTracker


def pct(value: float) -> str:
    return f"{value * 100:.1f}%"


@dataclass
class Recommendation:
    """Suggested action with its reasoning."""
    action: ActionType
    reason: str
    # Display hint: "raise", "call" or "fold"
    tone: str
    pot_odds: float

    @property
    def label(self) -> str:
        return self.action.value.capitalize()


@dataclass
class SolverAnalysis:
    """Full advisory output for one decision point."""
    equity: float
    outs: int
    outs_desc: str
    recommendation: Recommendation
    num_opponents: int
    range_aware: bool = False


def recommend(equity: float, pot: int, call_amount: int, num_opponents: int) -> Recommendation:
    """
    Map equity and price to an action.

    With nothing to call: bet at 50% equity or more, otherwise check
    (marking weak hands as check/fold). Facing a bet: raise at 55% or
    more, call when equity clears the pot odds, fold otherwise.
    """
    pot_odds = call_amount / (pot + call_amount) if call_amount > 0 else 0.0
    players = num_opponents + 1

    if call_amount <= 0:
        if equity >= 0.50:
            return Recommendation(
                ActionType.BET,
                f"Strong equity {pct(equity)} in {players}-way pot. Bet for value.",
                "raise", pot_odds,
            )
        if equity >= 0.35:
            return Recommendation(
                ActionType.CHECK,
                f"Marginal {pct(equity)}. Check and see a free card.",
                "call", pot_odds,
            )
        return Recommendation(
            ActionType.CHECK,
            f"Weak {pct(equity)} in {players}-way. Check/fold to bets.",
            "fold", pot_odds,
        )

    margin = equity - pot_odds
    if equity >= 0.55:
        return Recommendation(
            ActionType.RAISE,
            f"Dominant {pct(equity)} vs {num_opponents} opp. Raise for value.",
            "raise", pot_odds,
        )
    if margin >= 0.08:
        return Recommendation(
            ActionType.CALL,
            f"Equity {pct(equity)} beats pot odds {pct(pot_odds)}. Call.",
            "call", pot_odds,
        )
    if margin >= 0:
        return Recommendation(
            ActionType.CALL,
            f"Thin call: {pct(equity)} ≈ pot odds {pct(pot_odds)}.",
            "call", pot_odds,
        )
    return Recommendation(
        ActionType.FOLD,
        f"Equity {pct(equity)} < pot odds {pct(pot_odds)}. Fold.",
        "fold", pot_odds,
    )


class Advisor:
    """Equity-based advice for one seat, using tracked ranges when available."""

    def __init__(
        self,
        calculator: EquityCalculator,
        tracker: Optional[RangeTracker] = None,
        trials: int = EquityConfig.solver_trials,
    ):
        self.calculator = calculator
        self.tracker = tracker
        self.trials = trials

    def analyze(self, game: Game, hero_seat: int) -> Optional[SolverAnalysis]:
        """
        Analyse the current spot for ``hero_seat``.

        Returns None if the seat has no hole cards or has folded. The
        call amount only counts when the seat is the one to act.
        """
        if len(game.hands[hero_seat]) < 2 or game.folded[hero_seat]:
            return None

        num_opponents = sum(1 for s in game.active_players() if s != hero_seat)
        result = self.calculator.analyze(game, hero_seat, self.tracker, self.trials)

        hero_to_act = not game.game_over and game.to_act == hero_seat
        call_amount = game.call_amount() if hero_to_act else 0
        rec = recommend(result.equity, game.pot, call_amount, num_opponents)

        return SolverAnalysis(
            equity=result.equity,
            outs=result.outs,
            outs_desc=result.outs_desc,
            recommendation=rec,
            num_opponents=num_opponents,
            range_aware=result.range_aware,
        )

    def suggest_action(self, game: Game, hero_seat: int) -> Optional[Action]:
        """
        The recommendation as a legal action, for autopilot play.

        Returns None unless ``hero_seat`` is to act.
        """
        if game.game_over or game.to_act != hero_seat:
            return None
        analysis = self.analyze(game, hero_seat)
        if analysis is None:
            return None

        legal = {a.action_type: a for a in game.legal_actions()}
        passive = legal.get(ActionType.CHECK) or legal.get(ActionType.CALL)
        wanted = analysis.recommendation.action

        if wanted.is_aggressive:
            return legal.get(ActionType.RAISE) or legal.get(ActionType.BET) or passive
        if wanted == ActionType.FOLD:
            return legal.get(ActionType.CHECK) or legal[ActionType.FOLD]
        return passive or legal[ActionType.FOLD]

"""Fixed-policy opponent: Chen-table preflop, equity bands postflop."""

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..game.actions import Action, ActionType
from ..game.equity import EquityCalculator, EquityConfig
from ..game.state import Game, Street
from .preflop import chen_score, position_bonus, preflop_call_prob, preflop_raise_prob

logger = logging.getLogger(__name__)


@dataclass
class PolicyConfig:
    """Thresholds and frequencies of the opponent policy."""
    strong_equity: float = 0.55
    medium_equity: float = 0.40
    draw_equity: float = 0.28
    bluff_freq: float = 0.06
    facing_raise_discount: float = 0.55
    equity_trials: int = EquityConfig.ai_trials
    strong_aggression: float = 0.80
    medium_check_aggression: float = 0.35
    medium_call_aggression: float = 0.20
    call_margin: float = 0.05


class AIPlayer:
    """
    Decision policy for computer-controlled seats.

    Uses a single uniform draw per decision so a seeded generator gives
    reproducible play.
    """

    def __init__(
        self,
        calculator: Optional[EquityCalculator] = None,
        config: Optional[PolicyConfig] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        self.rng = rng if rng is not None else np.random.default_rng()
        self.calculator = calculator or EquityCalculator(self.rng)
        self.config = config or PolicyConfig()

    def decide(self, game: Game, seat: int) -> Action:
        """
        Choose an action for ``seat``, which must be the seat to act.

        Returns:
            One of the game's legal actions
        """
        legal = {a.action_type: a for a in game.legal_actions()}
        aggress = legal.get(ActionType.RAISE) or legal.get(ActionType.BET)
        can_check = ActionType.CHECK in legal
        call = legal.get(ActionType.CALL)
        passive = legal[ActionType.CHECK] if can_check else (call or legal[ActionType.FOLD])
        fold = legal[ActionType.FOLD]

        r = self.rng.random()
        cfg = self.config

        if game.street == Street.PREFLOP:
            hole = game.hands[seat]
            score = chen_score(hole[0], hole[1])
            bonus = position_bonus(seat, game.dealer_seat, game.alive_seats())
            _, big_blind = game.blind_amounts()

            if max(game.bets) <= big_blind:
                if aggress and r < preflop_raise_prob(score, bonus):
                    return aggress
                return passive

            raise_p = preflop_raise_prob(score, bonus) * cfg.facing_raise_discount
            if aggress and r < raise_p:
                return aggress
            if r < preflop_call_prob(score, bonus):
                return call or fold
            return fold

        equity = self.calculator.estimate_equity(game, seat, cfg.equity_trials)
        call_amount = game.call_amount()
        pot_odds = call_amount / (game.pot + call_amount) if call_amount > 0 else 0.0
        logger.debug("Seat %d equity %.3f, pot odds %.3f", seat, equity, pot_odds)

        if equity >= cfg.strong_equity:
            if aggress and r < cfg.strong_aggression:
                return aggress
            return passive

        if equity >= cfg.medium_equity:
            if can_check:
                if aggress and r < cfg.medium_check_aggression:
                    return aggress
                return legal[ActionType.CHECK]
            if equity > pot_odds + cfg.call_margin:
                if aggress and r < cfg.medium_call_aggression:
                    return aggress
                return call or fold
            return (call or fold) if equity > pot_odds else fold

        if equity >= cfg.draw_equity:
            if can_check:
                return legal[ActionType.CHECK]
            return (call or fold) if equity > pot_odds else fold

        if can_check:
            return legal[ActionType.CHECK]
        if aggress and r < cfg.bluff_freq:
            return aggress
        return fold

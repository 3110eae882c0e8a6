"""Tests for the AI opponent."""

import numpy as np

from holdem.ai import AIPlayer, PolicyConfig, chen_score, position_bonus, preflop_call_prob, preflop_raise_prob
from holdem.game import ActionType, EquityConfig, Game
from holdem.game.cards import parse_cards


def chen(s):
    return chen_score(*parse_cards(s))


class TestChenScore:
    def test_pairs(self):
        assert chen("AsAh") == 20
        assert chen("KsKh") == 16
        assert chen("2s2h") == 5

    def test_suited_connectors(self):
        assert chen("AsKs") == 11
        assert chen("5s4s") == 4.5

    def test_gap_penalties(self):
        assert chen("7s2h") == -1.5
        assert chen("KsJh") == 6
        assert chen("KsTh") == 4
        assert chen("Ks9h") == 3


class TestTables:
    def test_raise_table(self):
        assert preflop_raise_prob(10, 0) == 1.0
        assert preflop_raise_prob(7.5, 0) == 0.65
        assert preflop_raise_prob(3, 0.5) == 0.04
        assert preflop_raise_prob(3, 1.0) == 0.10

    def test_call_table(self):
        assert preflop_call_prob(7, 0) == 1.0
        assert preflop_call_prob(4.5, 0) == 0.55
        assert preflop_call_prob(0, 0) == 0.12

    def test_position_bonus(self):
        alive = list(range(6))
        assert [position_bonus(s, 0, alive) for s in alive] == [2.5, 1.0, 0.5, 0.0, 1.5, 1.5]

    def test_position_bonus_short_table(self):
        alive = [0, 1, 2, 3]
        assert position_bonus(3, 0, alive) == 0.0

    def test_position_bonus_dead_seat(self):
        assert position_bonus(4, 0, [0, 1, 2]) == 0.0


class TestDecide:
    def test_default_budget(self):
        assert PolicyConfig().equity_trials == EquityConfig().ai_trials

    def test_always_legal(self, rng):
        ai = AIPlayer(rng=rng, config=PolicyConfig(equity_trials=40))
        game = Game(6, player_seat=None, rng=rng)
        for _ in range(8):
            while not game.game_over:
                action = ai.decide(game, game.to_act)
                assert action in game.legal_actions()
                assert game.apply_action(action, game.to_act)
            game.new_hand()

    def test_aces_open_raise(self, six_max, rng):
        six_max.hands[3] = parse_cards("AsAh")
        ai = AIPlayer(rng=rng)
        for _ in range(20):
            assert ai.decide(six_max, 3).action_type == ActionType.RAISE

    def test_aces_never_fold_to_raise(self, six_max, rng):
        six_max.apply_action({"action": "raise"}, 3)
        six_max.hands[4] = parse_cards("AsAh")
        ai = AIPlayer(rng=rng)
        for _ in range(20):
            assert ai.decide(six_max, 4).action_type in (ActionType.RAISE, ActionType.CALL)

    def test_weak_hand_checks_when_free(self, heads_up, rng):
        # Bands above any reachable equity force the weak branch
        config = PolicyConfig(strong_equity=3.0, medium_equity=2.0, draw_equity=1.5, equity_trials=10)
        ai = AIPlayer(rng=rng, config=config)
        heads_up.apply_action({"action": "call"}, 1)
        heads_up.apply_action("check", 0)
        assert heads_up.to_act == 0
        for _ in range(10):
            assert ai.decide(heads_up, 0).action_type == ActionType.CHECK

    def test_weak_hand_folds_to_bet_without_bluff(self, heads_up):
        config = PolicyConfig(
            strong_equity=3.0, medium_equity=2.0, draw_equity=1.5,
            bluff_freq=0.0, equity_trials=10,
        )
        ai = AIPlayer(rng=np.random.default_rng(0), config=config)
        heads_up.apply_action({"action": "call"}, 1)
        heads_up.apply_action("check", 0)
        heads_up.apply_action({"action": "bet"}, 0)
        assert ai.decide(heads_up, 1).action_type == ActionType.FOLD

    def test_nuts_never_fold(self, heads_up, rng):
        ai = AIPlayer(rng=rng, config=PolicyConfig(equity_trials=30))
        heads_up.apply_action({"action": "call"}, 1)
        heads_up.apply_action("check", 0)
        heads_up.board = parse_cards("QsJsTs")
        heads_up.hands[0] = parse_cards("AsKs")
        for _ in range(10):
            assert ai.decide(heads_up, 0).action_type in (ActionType.BET, ActionType.CHECK)

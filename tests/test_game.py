"""Tests for the betting state machine."""

import numpy as np
import pytest

from holdem.game.actions import Action, ActionType
from holdem.game.state import Game, InvariantViolation, Street, TableConfig, split_pot


def types(game):
    return [a.action_type for a in game.legal_actions()]


def call_around(game):
    """Everyone calls the big blind, the big blind checks."""
    while game.street == Street.PREFLOP:
        if ActionType.CALL in types(game):
            game.apply_action({"action": "call"}, game.to_act)
        else:
            game.apply_action("check", game.to_act)


class TestNewHand:
    def test_six_max_setup(self, six_max):
        g = six_max
        assert g.dealer_seat == 0
        assert (g.sb_seat, g.bb_seat) == (1, 2)
        assert g.to_act == 3
        assert g.pot == 45
        assert g.bets == [0, 15, 30, 0, 0, 0]
        assert g.current_bet == 30
        assert g.raise_count == 1
        assert g.pending_action == set(range(6))
        assert g.hands_played == 1

    def test_hole_cards_unique(self, six_max):
        dealt = [c for hand in six_max.hands for c in hand]
        assert all(len(hand) == 2 for hand in six_max.hands)
        assert len(set(dealt)) == 12
        assert six_max.deck.pos == 12

    def test_heads_up_dealer_posts_small_blind(self, heads_up):
        g = heads_up
        assert g.dealer_seat == 1
        assert g.sb_seat == 1 and g.bb_seat == 0
        assert g.to_act == 1
        assert g.chips == [1470, 1485]

    def test_seat_count_clamped(self, rng):
        assert Game(12, rng=rng).num_players == 9
        assert Game(1, rng=rng).num_players == 2

    def test_invalid_player_seat(self, rng):
        with pytest.raises(ValueError):
            Game(3, player_seat=5, rng=rng)

    def test_bet_level_doubles_sizes(self, rng):
        g = Game(3, bet_level=1, dealer_seat=0, rng=rng)
        assert g.blind_amounts() == (30, 60)
        assert g.pot == 90
        assert g.bet_size() == 60

    def test_button_moves(self, six_max):
        six_max.apply_action("fold", 3)
        for seat in (4, 5, 0, 1):
            six_max.apply_action("fold", seat)
        assert six_max.game_over
        six_max.new_hand()
        assert six_max.dealer_seat == 1
        assert six_max.hands_played == 2

    def test_short_blind_is_capped(self, heads_up):
        heads_up.apply_action("fold", 1)
        heads_up.chips[1] = 10
        heads_up.new_hand()
        assert heads_up.bb_seat == 1
        assert heads_up.bets[1] == 10
        assert heads_up.chips[1] == 0

    def test_positions(self, six_max):
        names = [six_max.position_name(s) for s in range(6)]
        assert names == ["BTN", "SB", "BB", "UTG", "HJ", "CO"]


class TestLegalActions:
    def test_first_to_act_preflop(self, six_max):
        legal = six_max.legal_actions()
        assert legal == [Action.fold(), Action.call(30), Action.raise_(60)]

    def test_big_blind_option(self, six_max):
        for seat in (3, 4, 5, 0, 1):
            assert six_max.apply_action({"action": "call", "amount": 30}, seat)
        assert six_max.to_act == 2
        assert six_max.call_amount() == 0
        assert types(six_max) == [ActionType.FOLD, ActionType.CHECK, ActionType.BET]

    def test_raise_cap(self, six_max):
        for seat in (3, 4, 5):
            assert six_max.apply_action({"action": "raise"}, seat)
        assert six_max.raise_count == 4
        assert types(six_max) == [ActionType.FOLD, ActionType.CALL]

    def test_fold_and_one_of_check_call(self, six_max, rng, play_random_hand):
        def check(game):
            if game.game_over:
                return
            t = types(game)
            assert t[0] == ActionType.FOLD
            assert (ActionType.CHECK in t) != (ActionType.CALL in t)

        play_random_hand(six_max, rng, on_action=check)

    def test_empty_when_over(self, heads_up):
        heads_up.apply_action("fold", 1)
        assert heads_up.legal_actions() == []

    def test_no_actor_is_invariant_violation(self, heads_up):
        heads_up.to_act = None
        with pytest.raises(InvariantViolation):
            heads_up.legal_actions()


class TestApplyAction:
    def test_fold_win_heads_up(self, heads_up):
        g = heads_up
        assert g.apply_action("fold", 1)
        assert g.game_over
        assert g.winner == 0
        assert g.winners == [0]
        assert g.pot == 45
        assert g.chips == [1515, 1485]
        assert g.winner_hand.category_name == "Fold Win"

    def test_raise_reopens_action(self, six_max):
        assert six_max.apply_action({"action": "raise", "amount": 60}, 3)
        assert six_max.bets[3] == 60
        assert six_max.raise_count == 2
        assert six_max.pending_action == {0, 1, 2, 4, 5}
        assert six_max.to_act == 4
        record = six_max.action_history[-1]
        assert record.label == "Raise $30"
        assert record.total_bet == 60
        assert record.amount == 60

    def test_wrong_seat_rejected(self, six_max):
        assert not six_max.apply_action("fold", 4)
        assert six_max.to_act == 3
        assert six_max.action_history == []

    def test_malformed_rejected(self, six_max):
        assert not six_max.apply_action({"action": "shove"})
        assert not six_max.apply_action(None)

    def test_illegal_type_rejected(self, six_max):
        assert not six_max.apply_action("check", 3)
        assert six_max.to_act == 3

    def test_rejected_after_hand_over(self, heads_up):
        heads_up.apply_action("fold", 1)
        assert not heads_up.apply_action("check", 0)

    def test_flop_dealt_after_preflop(self, six_max):
        call_around(six_max)
        g = six_max
        assert g.street == Street.FLOP
        assert g.street_name() == "Flop"
        assert len(g.board) == 3
        assert len(g.deck.burned) == 1
        assert g.bets == [0] * 6
        assert g.raise_count == 0
        assert g.to_act == 1
        assert g.bet_size() == 30
        assert types(g) == [ActionType.FOLD, ActionType.CHECK, ActionType.BET]

    def test_big_bet_on_turn(self, heads_up):
        g = heads_up
        call_around(g)
        # Postflop the big blind acts first heads-up
        assert g.to_act == 0
        g.apply_action("check", 0)
        g.apply_action("check", 1)
        assert g.street == Street.TURN
        assert len(g.board) == 4
        assert g.bet_size() == 60
        assert g.legal_actions()[-1] == Action.bet(60)

    def test_showdown(self, heads_up):
        g = heads_up
        call_around(g)
        while not g.game_over:
            g.apply_action("check", g.to_act)
        assert g.street == Street.SHOWDOWN
        assert len(g.board) == 5
        assert set(g.eval_results) == {0, 1}
        assert g.winners
        assert sum(g.chips) == sum(g.chips_start)
        assert g.winner_hand.category_name == g.eval_results[g.winners[0]].category_name


class TestChipConservation:
    def test_many_random_hands(self, rng, play_random_hand):
        g = Game(num_players=5, player_seat=None, rng=rng)
        total = sum(g.chips) + g.pot

        def conserved(game):
            if game.game_over:
                assert sum(game.chips) == sum(game.chips_start)
            else:
                assert sum(game.chips) + game.pot == sum(game.chips_start)

        for _ in range(40):
            if g.game_over and (g.tour_win or g.bust):
                break
            play_random_hand(g, rng, on_action=conserved)
            assert sum(g.chips) == total
            assert all(c >= 0 for c in g.chips)
            g.new_hand()

    def test_eliminated_seats_are_folded(self, rng):
        g = Game(num_players=3, player_seat=0, dealer_seat=0, rng=rng)
        g.apply_action("fold", 0)
        g.apply_action("fold", 1)
        assert g.game_over
        g.chips[2] = 0
        g.new_hand()
        assert g.eliminated[2]
        assert g.folded[2]
        assert g.hands[2] == []
        assert g.alive_seats() == [0, 1]

    def test_new_hand_mid_hand_refused(self, rng):
        g = Game(num_players=3, player_seat=0, dealer_seat=0, rng=rng)
        assert g.apply_action({"action": "raise"}, g.to_act)
        before = (list(g.chips), g.pot, list(g.bets), g.hands_played)
        with pytest.raises(InvariantViolation):
            g.new_hand()
        assert (list(g.chips), g.pot, list(g.bets), g.hands_played) == before
        assert sum(g.chips) + g.pot == sum(g.chips_start)


class TestSessionEnd:
    def test_bust(self, heads_up):
        heads_up.apply_action("fold", 1)
        heads_up.chips[0] = 0
        heads_up.new_hand()
        assert heads_up.game_over
        assert heads_up.bust
        assert not heads_up.tour_win

    def test_tour_win(self, heads_up):
        heads_up.apply_action("fold", 1)
        heads_up.chips[1] = 0
        heads_up.new_hand()
        assert heads_up.game_over
        assert heads_up.tour_win
        assert not heads_up.bust

    def test_observer_never_busts(self, rng):
        g = Game(2, player_seat=None, dealer_seat=1, rng=rng)
        assert not g.is_player_turn()
        g.apply_action("fold", 1)
        g.chips[0] = 0
        g.new_hand()
        assert g.tour_win and not g.bust


class TestSplitPot:
    def test_even_split(self):
        winners, payouts = split_pot(90, {0: 100, 1: 100, 2: 50})
        assert winners == [0, 1]
        assert payouts == {0: 45, 1: 45}

    def test_odd_chip_to_first_winner(self):
        winners, payouts = split_pot(91, {2: 7, 0: 7, 1: 3})
        assert winners == [0, 2]
        assert payouts == {0: 46, 2: 45}

    def test_single_winner(self):
        assert split_pot(60, {3: 1, 4: 2}) == ([4], {4: 60})


class TestConfig:
    def test_custom_limits(self, rng):
        config = TableConfig(small_bet=2, big_bet=4, small_blind=1, big_blind=2, starting_chips=100)
        g = Game(4, config=config, dealer_seat=0, rng=np.random.default_rng(3))
        assert g.pot == 3
        assert g.chips_start == [100] * 4
        assert g.legal_actions()[-1] == Action.raise_(4)

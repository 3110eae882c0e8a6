"""Tests for host/client state sharing."""

import json

import numpy as np

from holdem.game import Game
from holdem.game.snapshot import apply_snapshot, private_cards, public_snapshot
from holdem.game.state import Street
from holdem.ranges import RangeTracker


def client_for(host):
    return Game(host.num_players, player_seat=1, rng=np.random.default_rng(99))


def check_down(game):
    while not game.game_over:
        legal = {a.action_type.value: a for a in game.legal_actions()}
        game.apply_action(legal.get("check") or legal["call"], game.to_act)


class TestPublicSnapshot:
    def test_hands_hidden_mid_hand(self, six_max):
        state = public_snapshot(six_max, human_seats=[0, 1])
        assert state["hands"] == [[]] * 6
        assert state["human_seats"] == [0, 1]
        assert state["pot"] == 45

    def test_json_serialisable(self, six_max):
        six_max.apply_action({"action": "raise"}, 3)
        state = public_snapshot(six_max)
        restored = json.loads(json.dumps(state))
        assert restored["action_history"][0]["action"] == "raise"
        assert restored["action_history"][0]["label"] == "Raise $30"

    def test_hands_shown_at_showdown(self, heads_up):
        check_down(heads_up)
        state = public_snapshot(heads_up)
        assert heads_up.street == Street.SHOWDOWN
        assert state["hands"][0] == heads_up.hands[0]
        assert state["hands"][1] == heads_up.hands[1]
        assert set(state["eval_results"]) == {0, 1}

    def test_hands_hidden_on_fold_win(self, heads_up):
        heads_up.apply_action("fold", 1)
        state = public_snapshot(heads_up)
        assert state["hands"] == [[], []]
        assert state["winner_hand"]["category_name"] == "Fold Win"

    def test_private_cards(self, six_max):
        cards = private_cards(six_max, [0, 3])
        assert set(cards) == {"seat0", "seat3"}
        assert cards["seat3"] == six_max.hands[3]


class TestApplySnapshot:
    def test_first_sync_is_new_hand(self, six_max):
        client = client_for(six_max)
        client.hands_played = 0
        result = apply_snapshot(client, public_snapshot(six_max), 1, six_max.hands[1])
        assert result.new_hand
        assert result.first_new_action == 0
        assert client.hands[1] == six_max.hands[1]
        assert client.hands[0] == []
        assert client.pot == six_max.pot

    def test_keeps_own_cards_within_hand(self, six_max):
        client = client_for(six_max)
        client.hands_played = 0
        apply_snapshot(client, public_snapshot(six_max), 1, six_max.hands[1])
        six_max.apply_action("fold", 3)
        result = apply_snapshot(client, public_snapshot(six_max), 1)
        assert not result.new_hand
        assert result.first_new_action == 0
        assert client.hands[1] == six_max.hands[1]
        assert len(client.action_history) == 1

    def test_first_new_action_advances(self, six_max):
        client = client_for(six_max)
        client.hands_played = 0
        six_max.apply_action("fold", 3)
        apply_snapshot(client, public_snapshot(six_max), 1)
        six_max.apply_action("fold", 4)
        six_max.apply_action({"action": "raise"}, 5)
        result = apply_snapshot(client, public_snapshot(six_max), 1)
        assert result.first_new_action == 1
        assert len(client.action_history) == 3

    def test_client_tracker_matches_host(self, six_max, rng, play_random_hand):
        host_tracker = RangeTracker(6, hero_seat=1)
        client = client_for(six_max)
        client.hands_played = 0
        client_tracker = RangeTracker(6, hero_seat=1)

        def sync(game):
            host_tracker.update(game)
            result = apply_snapshot(client, public_snapshot(game), 1, game.hands[1])
            if result.new_hand:
                client_tracker.reset_all(6)
            client_tracker.replay(client, result.first_new_action)

        play_random_hand(six_max, rng, on_action=sync)
        for seat in range(6):
            assert np.allclose(client_tracker.weights(seat), host_tracker.weights(seat))

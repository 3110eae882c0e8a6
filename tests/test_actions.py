"""Tests for the action variant."""

from holdem.game.actions import Action, ActionRecord, ActionType, action_label


class TestAction:
    def test_from_string_requests(self):
        assert Action.from_request("fold") == Action.fold()
        assert Action.from_request("Check") == Action.check()

    def test_from_dict_requests(self):
        assert Action.from_request({"action": "call", "amount": 30}) == Action.call(30)
        assert Action.from_request({"action": "raise", "amount": 60}) == Action.raise_(60)
        assert Action.from_request({"action": "bet"}) == Action.bet(0)

    def test_malformed_requests(self):
        assert Action.from_request(None) is None
        assert Action.from_request("shove") is None
        assert Action.from_request("call") is None
        assert Action.from_request({"action": "jam", "amount": 10}) is None
        assert Action.from_request({"action": "call", "amount": -5}) is None
        assert Action.from_request({"action": "call", "amount": "lots"}) is None
        assert Action.from_request(42) is None

    def test_to_request_round_trip(self):
        for action in (Action.fold(), Action.check(), Action.call(30), Action.bet(30), Action.raise_(90)):
            assert Action.from_request(action.to_request()) == action

    def test_aggression(self):
        assert Action.bet(30).is_aggressive
        assert Action.raise_(60).is_aggressive
        assert not Action.call(30).is_aggressive
        assert not Action.fold().is_aggressive

    def test_str(self):
        assert str(Action.raise_(60)) == "RAISE_60"
        assert str(Action.check()) == "CHECK"


class TestLabels:
    def test_labels(self):
        assert action_label(ActionType.FOLD, 0) == "Fold"
        assert action_label(ActionType.CHECK, 0) == "Check"
        assert action_label(ActionType.CALL, 30) == "Call $30"
        assert action_label(ActionType.BET, 30) == "Bet $30"
        assert action_label(ActionType.RAISE, 60) == "Raise $60"

    def test_record_aggression(self):
        record = ActionRecord(seat=1, street=0, action_type=ActionType.RAISE, label="Raise $30", total_bet=60)
        assert record.is_aggressive

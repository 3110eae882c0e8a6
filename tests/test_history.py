"""Tests for hand history export."""

from holdem.game.cards import card_label
from holdem.history import HandHistory, HandRecord, ps_action


def check_down(game):
    while not game.game_over:
        legal = {a.action_type.value: a for a in game.legal_actions()}
        game.apply_action(legal.get("check") or legal["call"], game.to_act)


class TestRecord:
    def test_not_recorded_mid_hand(self, heads_up):
        history = HandHistory(hero_seat=0)
        assert not history.record(heads_up)
        assert len(history) == 0

    def test_not_recorded_after_session_end(self, heads_up):
        heads_up.apply_action("fold", 1)
        heads_up.chips[1] = 0
        heads_up.new_hand()
        assert HandRecord.from_game(heads_up) is None

    def test_record_fields(self, heads_up):
        heads_up.apply_action("fold", 1)
        rec = HandRecord.from_game(heads_up)
        assert rec.hand_number == 1
        assert (rec.small_blind, rec.big_blind) == (15, 30)
        assert (rec.small_bet, rec.big_bet) == (30, 60)
        assert rec.winners == [0]
        assert not rec.is_showdown


class TestExport:
    def test_fold_win_text(self, heads_up):
        history = HandHistory(hero_seat=0)
        heads_up.apply_action("fold", 1)
        assert history.record(heads_up)
        text = history.export_text()
        assert text.startswith("PokerStars Hand #1: Hold'em Limit ($30/$60)")
        assert "Table 'Limit30-60' 2-max Seat #2 is the button" in text
        assert "Player 2: posts small blind $15" in text
        assert "You: posts big blind $30" in text
        assert "Dealt to You [" in text
        assert "Player 2: folds" in text
        assert "*** FLOP ***" not in text
        assert "Seat 1: You (big blind) collected ($45)" in text
        assert "Seat 2: Player 2 (button) folded before Flop" in text

    def test_showdown_text(self, heads_up):
        history = HandHistory(hero_seat=0, table_name="Practice")
        check_down(heads_up)
        history.record(heads_up)
        text = history.export_text()
        assert "Table 'Practice'" in text
        assert "*** FLOP ***" in text
        assert "*** RIVER ***" in text
        assert "*** SHOW DOWN ***" in text
        board = " ".join(card_label(c) for c in heads_up.board)
        assert f"Board [{board}]" in text
        assert "Total pot $60 | Rake $0" in text
        assert f"collected (${60 // len(heads_up.winners)})" in text

    def test_numbering_and_save(self, heads_up, tmp_path):
        history = HandHistory(hero_seat=0)
        heads_up.apply_action("fold", 1)
        history.record(heads_up)
        heads_up.new_hand()
        heads_up.apply_action("fold", heads_up.to_act)
        history.record(heads_up)
        path = tmp_path / "session.txt"
        assert history.save(path) == 2
        text = path.read_text()
        assert "PokerStars Hand #1:" in text
        assert "PokerStars Hand #2:" in text

    def test_observer_has_no_dealt_line(self, heads_up):
        history = HandHistory(hero_seat=None)
        heads_up.apply_action("fold", 1)
        history.record(heads_up)
        assert "Dealt to" not in history.export_text()


class TestActionLines:
    def test_raise_line(self, six_max):
        six_max.apply_action({"action": "raise"}, 3)
        assert ps_action("Player 4", six_max.action_history[-1]) == "Player 4: raises $30 to $60"

    def test_call_line(self, six_max):
        six_max.apply_action({"action": "call"}, 3)
        assert ps_action("Player 4", six_max.action_history[-1]) == "Player 4: calls $30"

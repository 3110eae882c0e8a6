"""
Public/private state split for sharing a game between processes.

The host publishes ``public_snapshot`` to every client and each human
seat's hole cards separately through ``private_cards``. Clients mirror
the host with ``apply_snapshot``.
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Union

from .actions import ActionRecord, ActionType
from .evaluator import HAND_NAMES, HandCategory, HandEvaluation
from .state import Game, Street, WinnerHand

logger = logging.getLogger(__name__)


@dataclass
class SyncResult:
    """What changed when a snapshot was applied."""
    new_hand: bool
    # Index of the first history record the client had not seen
    first_new_action: int


def record_to_dict(record: ActionRecord) -> dict[str, Any]:
    return {
        "seat": record.seat,
        "street": record.street,
        "action": record.action_type.value,
        "label": record.label,
        "total_bet": record.total_bet,
        "amount": record.amount,
    }


def record_from_dict(data: dict[str, Any]) -> ActionRecord:
    return ActionRecord(
        seat=int(data["seat"]),
        street=int(data["street"]),
        action_type=ActionType(data["action"]),
        label=data["label"],
        total_bet=int(data.get("total_bet", 0)),
        amount=int(data.get("amount", 0)),
    )


def _hand_to_dict(hand: Union[WinnerHand, HandEvaluation]) -> dict[str, Any]:
    return {"category_name": hand.category_name, "best_cards": list(hand.best_cards)}


def _showdown_seats(game: Game) -> set[int]:
    if game.game_over and game.street == Street.SHOWDOWN:
        return set(game.eval_results)
    return set()


def public_snapshot(game: Game, human_seats: Iterable[int] = ()) -> dict[str, Any]:
    """
    Everything every client may see.

    Hole cards appear only for seats that reached showdown; all other
    seats publish an empty hand.
    """
    shown = _showdown_seats(game)
    return {
        "to_act": game.to_act,
        "bets": list(game.bets),
        "pot": game.pot,
        "chips": list(game.chips),
        "folded": list(game.folded),
        "eliminated": list(game.eliminated),
        "street": int(game.street),
        "board": list(game.board),
        "hands_played": game.hands_played,
        "game_over": game.game_over,
        "bust": game.bust,
        "tour_win": game.tour_win,
        "winner": game.winner,
        "winners": list(game.winners),
        "winner_hand": _hand_to_dict(game.winner_hand) if game.winner_hand else None,
        "dealer_seat": game.dealer_seat,
        "sb_seat": game.sb_seat,
        "bb_seat": game.bb_seat,
        "chips_start": list(game.chips_start),
        "num_players": game.num_players,
        "bet_level": game.bet_level,
        "raise_count": game.raise_count,
        "last_action": list(game.last_action),
        "eval_results": {
            seat: _hand_to_dict(ev) for seat, ev in game.eval_results.items()
        },
        "hands": [
            list(game.hands[seat]) if seat in shown else []
            for seat in range(game.num_players)
        ],
        "human_seats": sorted(human_seats),
        "action_history": [record_to_dict(r) for r in game.action_history],
    }


def private_cards(game: Game, human_seats: Iterable[int]) -> dict[str, list[int]]:
    """Hole cards per human seat, keyed ``seat<N>``."""
    return {
        f"seat{seat}": list(game.hands[seat])
        for seat in human_seats
        if game.hands[seat]
    }


def _evaluation_from_dict(data: dict[str, Any]) -> HandEvaluation:
    category = HandCategory(HAND_NAMES.index(data["category_name"]))
    # Clients only display showdown results, the score is not published
    return HandEvaluation(score=0, category=category, best_cards=tuple(data["best_cards"]))


def apply_snapshot(
    game: Game,
    state: dict[str, Any],
    local_seat: Optional[int],
    private: Optional[list[int]] = None,
) -> SyncResult:
    """
    Overwrite a client's game with the host's public state.

    Args:
        game: Client-side game to update in place
        state: Output of ``public_snapshot``
        local_seat: Seat this client plays, or None when observing
        private: This seat's hole cards, if received

    Returns:
        SyncResult telling the caller whether to reset range tracking
        and where new history starts
    """
    previous_hands = game.hands_played
    previous_history = len(game.action_history)
    own_cards = list(game.hands[local_seat]) if local_seat is not None else []

    game.to_act = state["to_act"]
    game.bets = list(state["bets"])
    game.pot = state["pot"]
    game.chips = list(state["chips"])
    game.folded = list(state["folded"])
    game.eliminated = list(state["eliminated"])
    game.street = Street(state["street"])
    game.board = list(state["board"])
    game.hands_played = state["hands_played"]
    game.game_over = state["game_over"]
    game.bust = state["bust"]
    game.tour_win = state["tour_win"]
    game.winner = state["winner"]
    game.winners = list(state["winners"])
    winner_hand = state.get("winner_hand")
    game.winner_hand = (
        WinnerHand(winner_hand["category_name"], tuple(winner_hand["best_cards"]))
        if winner_hand else None
    )
    game.dealer_seat = state["dealer_seat"]
    game.sb_seat = state["sb_seat"]
    game.bb_seat = state["bb_seat"]
    if state.get("chips_start"):
        game.chips_start = list(state["chips_start"])
    game.bet_level = state.get("bet_level", game.bet_level)
    game.raise_count = state["raise_count"]
    game.last_action = list(state["last_action"])
    game.eval_results = {
        int(seat): _evaluation_from_dict(ev)
        for seat, ev in state.get("eval_results", {}).items()
    }
    game.hands = [list(h) for h in state["hands"]]
    game.action_history = [record_from_dict(r) for r in state["action_history"]]
    game.player_seat = local_seat

    new_hand = game.hands_played != previous_hands
    if local_seat is not None:
        if private:
            game.hands[local_seat] = list(private)
        elif own_cards and not new_hand and not game.hands[local_seat]:
            game.hands[local_seat] = own_cards

    first_new = 0 if new_hand else min(previous_history, len(game.action_history))
    if new_hand:
        logger.debug("Synced to hand %d", game.hands_played)
    return SyncResult(new_hand=new_hand, first_new_action=first_new)

"""Pytest configuration and fixtures."""

import numpy as np
import pytest

from holdem.game import EquityCalculator, Game
from holdem.ranges import RangeTracker


@pytest.fixture
def rng():
    """Seeded generator so tests are reproducible."""
    return np.random.default_rng(1234)


@pytest.fixture
def calculator(rng):
    return EquityCalculator(rng)


@pytest.fixture
def heads_up(rng):
    """Heads-up game, seat 1 on the button (and small blind)."""
    return Game(num_players=2, player_seat=0, dealer_seat=1, rng=rng)


@pytest.fixture
def six_max(rng):
    """Six-handed game: button 0, blinds 1 and 2, seat 3 first to act."""
    return Game(num_players=6, player_seat=0, dealer_seat=0, rng=rng)


@pytest.fixture
def tracker(rng):
    return RangeTracker(6, hero_seat=0, rng=rng)


@pytest.fixture
def play_random_hand():
    """Play the current hand to the end with uniformly random legal actions."""

    def _play(game, rng, tracker=None, on_action=None):
        while not game.game_over:
            legal = game.legal_actions()
            action = legal[int(rng.integers(len(legal)))]
            assert game.apply_action(action, game.to_act)
            if tracker is not None:
                tracker.update(game)
            if on_action is not None:
                on_action(game)

    return _play

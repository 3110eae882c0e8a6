"""
holdem: Limit Texas Hold'em decision core

Hand evaluation, a 2-9 seat betting state machine, Monte Carlo equity,
Bayesian opponent range tracking, a fixed-policy AI opponent and an
equity-based advisor for the analysed seat.
"""

__version__ = "0.1.0"

"""Pairwise multiplayer Elo."""

from domain.ratings.elo.calculator import (
    EloParameters,
    PairwiseEloCalculator,
    PlayerEloEvent,
    calculate_expected_score,
    calculate_match_score,
    calculate_pairwise_deltas,
    round_half_up,
)

__all__ = [
    "EloParameters",
    "PairwiseEloCalculator",
    "PlayerEloEvent",
    "calculate_expected_score",
    "calculate_match_score",
    "calculate_pairwise_deltas",
    "round_half_up",
]

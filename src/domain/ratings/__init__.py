"""Rating calculators."""

from domain.ratings.common import RatingParticipant
from domain.ratings.elo import (
    EloParameters,
    PairwiseEloCalculator,
    PlayerEloEvent,
    calculate_expected_score,
    calculate_pairwise_deltas,
)

__all__ = [
    "EloParameters",
    "PairwiseEloCalculator",
    "PlayerEloEvent",
    "RatingParticipant",
    "calculate_expected_score",
    "calculate_pairwise_deltas",
]

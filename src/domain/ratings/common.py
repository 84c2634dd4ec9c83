"""Shared types for rating calculators."""

from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass


@dataclass(frozen=True)
class RatingParticipant:
    """One player's standing going into a day's comparison round."""

    participant_id: Hashable
    rating: float
    guess_count: int

"""Pairwise multiplayer Elo logic for one game day."""

from __future__ import annotations

from collections.abc import Hashable, Sequence
from dataclasses import dataclass
from itertools import combinations
from math import floor

from domain.ratings.common import RatingParticipant


@dataclass(frozen=True)
class EloParameters:
    default_rating: int = 1000
    k_factor: float = 32.0
    scale_factor: float = 400.0


@dataclass(frozen=True)
class PlayerEloEvent:
    participant_id: Hashable
    guess_count: int
    opponents: int
    actual_score: float
    expected_score: float
    pre_elo: int
    elo_delta: int
    post_elo: int
    k_factor: float
    scale_factor: float


def calculate_expected_score(rating: float, opponent_rating: float, scale_factor: float = 400.0) -> float:
    """Compute the Elo expected score for one side."""
    return 1.0 / (1.0 + 10.0 ** ((opponent_rating - rating) / scale_factor))


def calculate_match_score(guess_count: int, opponent_guess_count: int) -> float:
    """Score one head-to-head: fewer guesses wins, equal guesses draw.

    Failed attempts carry the largest guess count, so they lose to any solve
    and draw with each other.
    """
    if guess_count < opponent_guess_count:
        return 1.0
    if guess_count > opponent_guess_count:
        return 0.0
    return 0.5


def round_half_up(value: float) -> int:
    return int(floor(value + 0.5))


def _accumulate_round(
    participants: Sequence[RatingParticipant],
    *,
    scaled_k: float,
    scale_factor: float,
) -> tuple[dict[Hashable, float], dict[Hashable, float], dict[Hashable, float]]:
    raw_deltas: dict[Hashable, float] = {p.participant_id: 0.0 for p in participants}
    actual_totals: dict[Hashable, float] = {p.participant_id: 0.0 for p in participants}
    expected_totals: dict[Hashable, float] = {p.participant_id: 0.0 for p in participants}

    for first, second in combinations(participants, 2):
        first_score = calculate_match_score(first.guess_count, second.guess_count)
        second_score = 1.0 - first_score
        first_expected = calculate_expected_score(first.rating, second.rating, scale_factor)
        second_expected = calculate_expected_score(second.rating, first.rating, scale_factor)

        raw_deltas[first.participant_id] += scaled_k * (first_score - first_expected)
        raw_deltas[second.participant_id] += scaled_k * (second_score - second_expected)
        actual_totals[first.participant_id] += first_score
        actual_totals[second.participant_id] += second_score
        expected_totals[first.participant_id] += first_expected
        expected_totals[second.participant_id] += second_expected

    return raw_deltas, actual_totals, expected_totals


def _validate_participants(participants: Sequence[RatingParticipant]) -> None:
    seen: set[Hashable] = set()
    for participant in participants:
        if participant.participant_id in seen:
            raise ValueError(f"participant_id={participant.participant_id!r} appears more than once")
        seen.add(participant.participant_id)


def calculate_pairwise_deltas(
    participants: Sequence[RatingParticipant],
    k_factor: float,
    scale_factor: float = 400.0,
) -> dict[Hashable, int]:
    """Compare every pair of participants once and return integer rating deltas.

    ``k_factor`` is split across the ``n - 1`` opponents each participant
    faces, so nobody moves more than ``k_factor`` in one round. Contributions
    are summed per participant and rounded once at the end.
    """
    if k_factor <= 0.0:
        raise ValueError("k_factor must be > 0")
    _validate_participants(participants)

    if len(participants) < 2:
        return {participant.participant_id: 0 for participant in participants}

    scaled_k = k_factor / (len(participants) - 1)
    raw_deltas, _, _ = _accumulate_round(participants, scaled_k=scaled_k, scale_factor=scale_factor)
    return {participant_id: round_half_up(delta) for participant_id, delta in raw_deltas.items()}


class PairwiseEloCalculator:
    """Daily all-pairs Elo calculator."""

    def __init__(self, params: EloParameters) -> None:
        if params.k_factor <= 0.0:
            raise ValueError("k_factor must be > 0")
        if params.scale_factor <= 0.0:
            raise ValueError("scale_factor must be > 0")
        self.params = params

    def process_day(self, participants: Sequence[RatingParticipant]) -> list[PlayerEloEvent]:
        """Rate one day's participants and describe each player's movement."""
        _validate_participants(participants)
        opponents = max(len(participants) - 1, 0)
        scaled_k = self.params.k_factor / opponents if opponents else 0.0

        if opponents:
            raw_deltas, actual_totals, expected_totals = _accumulate_round(
                participants,
                scaled_k=scaled_k,
                scale_factor=self.params.scale_factor,
            )
        else:
            raw_deltas = {p.participant_id: 0.0 for p in participants}
            actual_totals = dict(raw_deltas)
            expected_totals = dict(raw_deltas)

        events: list[PlayerEloEvent] = []
        for participant in participants:
            pre_elo = int(participant.rating)
            delta = round_half_up(raw_deltas[participant.participant_id])
            events.append(
                PlayerEloEvent(
                    participant_id=participant.participant_id,
                    guess_count=participant.guess_count,
                    opponents=opponents,
                    actual_score=actual_totals[participant.participant_id],
                    expected_score=expected_totals[participant.participant_id],
                    pre_elo=pre_elo,
                    elo_delta=delta,
                    post_elo=pre_elo + delta,
                    k_factor=scaled_k,
                    scale_factor=self.params.scale_factor,
                )
            )
        return events

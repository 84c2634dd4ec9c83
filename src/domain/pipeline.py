"""Apply one daily results announcement to the rating store exactly once."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from enum import Enum

from domain.activity import update_player_activity
from domain.common import Announcement, ParsedAnnouncement, PlayerRecord, ResolvedResult, is_solved
from domain.exceptions import PersistenceError
from domain.protocol import MemberDirectory, PlayerStore
from domain.ratings.common import RatingParticipant
from domain.ratings.elo.calculator import EloParameters, PairwiseEloCalculator, PlayerEloEvent
from ingestion.parser import is_announcer_message, parse_announcement
from ingestion.resolver import resolve_rows

logger = logging.getLogger(__name__)


class ProcessingStatus(str, Enum):
    """How a pipeline run ended."""

    PROCESSED = "processed"
    NOT_QUALIFYING = "not_qualifying"
    ALREADY_PROCESSED = "already_processed"
    NOTHING_TO_PROCESS = "nothing_to_process"


@dataclass(frozen=True)
class RatingChange:
    """One participant's outcome for the processed day."""

    player_id: int
    discord_id: str
    display_name: str
    guess_count: int
    crowned: bool
    rating_before: int
    rating_after: int

    @property
    def rating_change(self) -> int:
        return self.rating_after - self.rating_before


@dataclass(frozen=True)
class DailySummaryReport:
    """Everything the presentation layer needs about a processed day."""

    game_date: str
    puzzle_number: int | None
    participant_count: int
    rating_changes: tuple[RatingChange, ...]
    highest_players: tuple[PlayerRecord, ...]
    lowest_players: tuple[PlayerRecord, ...]
    players_marked_inactive: int
    unresolved: tuple[str, ...] = ()


@dataclass(frozen=True)
class DailyProcessingResult:
    status: ProcessingStatus
    game_date: str | None = None
    summary: DailySummaryReport | None = None
    unresolved: tuple[str, ...] = field(default_factory=tuple)

    @property
    def processed(self) -> bool:
        return self.status is ProcessingStatus.PROCESSED


class DateLockRegistry:
    """Serialises runs for the same game date.

    A date's lock exists only while some run holds or waits for it.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}
        self._holders: dict[str, int] = {}

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)

    @contextmanager
    def hold(self, game_date: str) -> Iterator[None]:
        with self._guard:
            lock = self._locks.setdefault(game_date, threading.Lock())
            self._holders[game_date] = self._holders.get(game_date, 0) + 1
        try:
            with lock:
                yield
        finally:
            with self._guard:
                self._holders[game_date] -= 1
                if self._holders[game_date] == 0:
                    del self._holders[game_date]
                    del self._locks[game_date]


@dataclass
class _PendingParticipant:
    result: ResolvedResult
    player: PlayerRecord | None


class DailyResultsPipeline:
    """Parse, resolve, rate and persist one announcement at a time."""

    def __init__(
        self,
        *,
        store: PlayerStore,
        directory: MemberDirectory,
        elo_params: EloParameters,
        inactivity_threshold: int,
        announcer_id: str | None = None,
        date_locks: DateLockRegistry | None = None,
    ) -> None:
        if inactivity_threshold < 1:
            raise ValueError("inactivity_threshold must be >= 1")
        if elo_params.default_rating < 0:
            raise ValueError("default_rating must be >= 0")

        self.store = store
        self.directory = directory
        self.elo_params = elo_params
        self.calculator = PairwiseEloCalculator(elo_params)
        self.inactivity_threshold = inactivity_threshold
        self.announcer_id = announcer_id
        self.date_locks = date_locks if date_locks is not None else DateLockRegistry()

    def process_announcement(self, announcement: Announcement) -> DailyProcessingResult:
        """Run the whole pipeline for one chat message."""
        if not is_announcer_message(announcement.author_id, self.announcer_id):
            logger.debug("Ignoring message from author %s", announcement.author_id)
            return DailyProcessingResult(status=ProcessingStatus.NOT_QUALIFYING)

        parsed = parse_announcement(announcement.content, announcement.posted_at)
        if parsed is None:
            logger.debug("Message did not contain parseable results")
            return DailyProcessingResult(status=ProcessingStatus.NOT_QUALIFYING)

        return self.process_parsed(parsed)

    def process_parsed(self, parsed: ParsedAnnouncement) -> DailyProcessingResult:
        """Resolve identities for a parsed announcement and apply its results."""
        outcome = resolve_rows(parsed.rows, self.directory)
        if not outcome.resolved:
            logger.warning("No results could be resolved for %s", parsed.game_date)
            return DailyProcessingResult(
                status=ProcessingStatus.NOTHING_TO_PROCESS,
                game_date=parsed.game_date,
                unresolved=outcome.unresolved,
            )

        with self.date_locks.hold(parsed.game_date):
            return self._apply_day(parsed, outcome.resolved, outcome.unresolved)

    def _apply_day(
        self,
        parsed: ParsedAnnouncement,
        resolved: Sequence[ResolvedResult],
        unresolved: tuple[str, ...],
    ) -> DailyProcessingResult:
        game_date = parsed.game_date
        store = self.store

        try:
            if store.is_date_processed(game_date):
                store.rollback()
                logger.warning("Results for %s already processed, skipping", game_date)
                return DailyProcessingResult(
                    status=ProcessingStatus.ALREADY_PROCESSED,
                    game_date=game_date,
                    unresolved=unresolved,
                )

            pending = self._pending_participants(game_date, resolved)
            if not pending:
                store.rollback()
                logger.warning("No new participants to process for %s", game_date)
                return DailyProcessingResult(
                    status=ProcessingStatus.NOTHING_TO_PROCESS,
                    game_date=game_date,
                    unresolved=unresolved,
                )

            players = [self._ensure_player(entry) for entry in pending]
            results = [entry.result for entry in pending]
            events = self.calculator.process_day(
                [
                    RatingParticipant(
                        participant_id=player.id,
                        rating=player.rating,
                        guess_count=result.guess_count,
                    )
                    for player, result in zip(players, results)
                ]
            )

            changes = [
                self._persist_result(player, result, event, parsed)
                for player, result, event in zip(players, results, events)
            ]

            activity = update_player_activity(store, game_date, self.inactivity_threshold)

            highest = tuple(store.highest_rated_players())
            lowest = tuple(store.lowest_rated_players())
            store.record_daily_summary(
                game_date,
                participant_count=len(changes),
                highest_player_ids=[player.id for player in highest],
                lowest_player_ids=[player.id for player in lowest],
                puzzle_number=parsed.puzzle_number,
            )
            store.commit()
        except Exception as exc:
            store.rollback()
            logger.error("Failed to apply results for %s: %s", game_date, exc)
            raise PersistenceError(game_date, f"results were not applied ({exc})") from exc

        logger.info("Processed %d results for %s", len(changes), game_date)
        return DailyProcessingResult(
            status=ProcessingStatus.PROCESSED,
            game_date=game_date,
            summary=DailySummaryReport(
                game_date=game_date,
                puzzle_number=parsed.puzzle_number,
                participant_count=len(changes),
                rating_changes=tuple(changes),
                highest_players=highest,
                lowest_players=lowest,
                players_marked_inactive=activity.players_marked_inactive,
                unresolved=unresolved,
            ),
            unresolved=unresolved,
        )

    def _pending_participants(
        self,
        game_date: str,
        resolved: Sequence[ResolvedResult],
    ) -> list[_PendingParticipant]:
        pending: list[_PendingParticipant] = []
        for result in resolved:
            player = self.store.find_player(result.discord_id)
            if player is not None and self.store.has_game_record(player.id, game_date):
                logger.warning(
                    "Player %s already has a record for %s, excluding from this round",
                    result.display_name,
                    game_date,
                )
                continue
            pending.append(_PendingParticipant(result=result, player=player))
        return pending

    def _ensure_player(self, entry: _PendingParticipant) -> PlayerRecord:
        result = entry.result
        if entry.player is None:
            logger.info("Creating player %s (%s)", result.display_name, result.discord_id)
            return self.store.create_player(
                result.discord_id,
                result.display_name,
                self.elo_params.default_rating,
            )

        if entry.player.username != result.display_name:
            self.store.update_display_name(entry.player.id, result.display_name)
            return replace(entry.player, username=result.display_name)
        return entry.player

    def _persist_result(
        self,
        player: PlayerRecord,
        result: ResolvedResult,
        event: PlayerEloEvent,
        parsed: ParsedAnnouncement,
    ) -> RatingChange:
        self.store.update_rating_and_counters(
            player.id,
            new_rating=event.post_elo,
            guess_count=result.guess_count,
            game_date=parsed.game_date,
            crowned=result.crowned,
        )
        self.store.record_game(
            player.id,
            guess_count=result.guess_count,
            game_date=parsed.game_date,
            rating_before=event.pre_elo,
            rating_after=event.post_elo,
            puzzle_number=parsed.puzzle_number,
        )
        self.store.record_rating_history(player.id, rating=event.post_elo, game_date=parsed.game_date)

        logger.debug(
            "Player %s: %s, rating %d -> %d (%+d)",
            player.username,
            f"{result.guess_count}/6" if is_solved(result.guess_count) else "X/6",
            event.pre_elo,
            event.post_elo,
            event.elo_delta,
        )
        return RatingChange(
            player_id=player.id,
            discord_id=player.discord_id,
            display_name=player.username,
            guess_count=result.guess_count,
            crowned=result.crowned,
            rating_before=event.pre_elo,
            rating_after=event.post_elo,
        )


__all__ = [
    "DailyProcessingResult",
    "DailyResultsPipeline",
    "DailySummaryReport",
    "DateLockRegistry",
    "ProcessingStatus",
    "RatingChange",
]

"""Gamification screen: stats, achievements, challenges and rewards."""

import asyncio
import logging
from dataclasses import dataclass, field

from nutriai.adapters.api_client import ApiClient
from nutriai.domain.gamification import (
    Achievement,
    Challenge,
    GamificationSnapshot,
    LeaderboardEntry,
    Reward,
    UserStats,
)
from nutriai.errors import ApiError
from nutriai.services.aggregation import coerce_number
from nutriai.services.fallback import FallbackGenerator
from nutriai.services.notifications import Notifier, error, success

_logger = logging.getLogger(__name__)


def _int(value: object) -> int:
    return int(coerce_number(value))


def _records(body: dict[str, object], key: str) -> list[dict[str, object]]:
    raw = body.get(key)
    if not isinstance(raw, list):
        return []
    return [item for item in raw if isinstance(item, dict)]


def parse_stats(raw: dict[str, object]) -> UserStats:
    return UserStats(
        level=_int(raw.get("level")),
        experience=_int(raw.get("experience")),
        experience_to_next=_int(raw.get("experienceToNext")),
        total_points=_int(raw.get("totalPoints")),
        rank=str(raw.get("rank") or ""),
        current_streak=_int(raw.get("currentStreak")),
        longest_streak=_int(raw.get("longestStreak")),
    )


def parse_achievement(raw: dict[str, object]) -> Achievement:
    return Achievement(
        id=_int(raw.get("id")),
        title=str(raw.get("title") or ""),
        description=str(raw.get("description") or ""),
        category=str(raw.get("category") or ""),
        points=_int(raw.get("points")),
        progress=coerce_number(raw.get("progress")),
        target=coerce_number(raw.get("target")),
        rarity=str(raw.get("rarity") or "common"),
        unlocked=bool(raw.get("unlocked")),
        unlocked_at=raw.get("unlockedAt") or None,
    )


def parse_challenge(raw: dict[str, object]) -> Challenge:
    return Challenge(
        id=_int(raw.get("id")),
        title=str(raw.get("title") or ""),
        description=str(raw.get("description") or ""),
        category=str(raw.get("category") or ""),
        points=_int(raw.get("points")),
        progress=coerce_number(raw.get("progress")),
        target=coerce_number(raw.get("target")),
        status=str(raw.get("status") or "active"),
        difficulty=str(raw.get("difficulty") or "medium"),
        duration=str(raw.get("duration") or ""),
        participants=_int(raw.get("participants")),
    )


def parse_leaderboard_entry(raw: dict[str, object]) -> LeaderboardEntry:
    return LeaderboardEntry(
        id=_int(raw.get("id")),
        name=str(raw.get("name") or ""),
        points=_int(raw.get("points")),
        level=_int(raw.get("level")),
        rank=_int(raw.get("rank")),
        is_current_user=bool(raw.get("isCurrentUser")),
    )


def parse_reward(raw: dict[str, object]) -> Reward:
    return Reward(
        id=_int(raw.get("id")),
        title=str(raw.get("title") or ""),
        description=str(raw.get("description") or ""),
        points_required=_int(raw.get("pointsRequired")),
        progress=coerce_number(raw.get("progress")),
        unlocked=bool(raw.get("unlocked")),
    )


@dataclass
class GamificationController:
    api: ApiClient
    notifier: Notifier
    fallback: FallbackGenerator = field(default_factory=FallbackGenerator)
    user_name: str | None = None
    snapshot: GamificationSnapshot | None = None

    async def load(self) -> GamificationSnapshot:
        """Read the four resources together; any failure shows the demo data."""
        results = await asyncio.gather(
            self.api.get("/api/gamification/stats"),
            self.api.get("/api/gamification/achievements"),
            self.api.get("/api/gamification/challenges"),
            self.api.get("/api/gamification/leaderboard"),
            return_exceptions=True,
        )
        failures = [r for r in results if isinstance(r, BaseException)]
        for failure in failures:
            if not isinstance(failure, ApiError):
                raise failure
        if failures:
            _logger.warning("Loading gamification data failed", exc_info=failures[0])
            self.snapshot = self.fallback.gamification(self.user_name)
            return self.snapshot
        stats, achievements, challenges, leaderboard = results
        raw_stats = stats.get("stats")
        raw_streaks = stats.get("streaks")
        self.snapshot = GamificationSnapshot(
            stats=parse_stats(raw_stats)
            if isinstance(raw_stats, dict)
            else self.fallback.gamification(self.user_name).stats,
            achievements=[
                parse_achievement(item)
                for item in _records(achievements, "achievements")
            ],
            challenges=[
                parse_challenge(item) for item in _records(challenges, "challenges")
            ],
            leaderboard=[
                parse_leaderboard_entry(item)
                for item in _records(leaderboard, "leaderboard")
            ],
            streaks={str(k): _int(v) for k, v in raw_streaks.items()}
            if isinstance(raw_streaks, dict)
            else {},
            rewards=[parse_reward(item) for item in _records(stats, "rewards")],
        )
        return self.snapshot

    async def join_challenge(self, challenge_id: int) -> bool:
        try:
            await self.api.post(f"/api/gamification/challenges/{challenge_id}/join")
        except ApiError:
            _logger.warning("Joining challenge %s failed", challenge_id, exc_info=True)
            error(self.notifier, "Failed to join challenge")
            return False
        success(self.notifier, "Challenge joined successfully!")
        await self.load()
        return True

    async def claim_reward(self, reward_id: int) -> bool:
        try:
            await self.api.post(f"/api/gamification/rewards/{reward_id}/claim")
        except ApiError:
            _logger.warning("Claiming reward %s failed", reward_id, exc_info=True)
            error(self.notifier, "Failed to claim reward")
            return False
        success(self.notifier, "Reward claimed successfully!")
        await self.load()
        return True

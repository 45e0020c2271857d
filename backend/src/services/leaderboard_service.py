"""Leaderboard rankings by all-time or windowed XP."""

from collections import defaultdict
from datetime import UTC, datetime, timedelta

from models.leaderboard import LeaderboardEntry, Timeframe
from stores.base import PredictionStore, ReportStore, UserStore

DEFAULT_LIMIT = 10
MAX_LIMIT = 100


def window_start(timeframe: Timeframe, now: datetime) -> datetime | None:
    """Start of the XP window, or None for all-time."""
    if timeframe == Timeframe.DAILY:
        return now.astimezone(UTC).replace(hour=0, minute=0, second=0, microsecond=0)
    if timeframe == Timeframe.WEEKLY:
        return now - timedelta(days=7)
    return None


class LeaderboardService:
    def __init__(
        self,
        user_store: UserStore,
        report_store: ReportStore,
        prediction_store: PredictionStore,
    ):
        self.user_store = user_store
        self.report_store = report_store
        self.prediction_store = prediction_store

    def get_leaderboard(
        self,
        timeframe: Timeframe,
        limit: int = DEFAULT_LIMIT,
        now: datetime | None = None,
    ) -> list[LeaderboardEntry]:
        """Rank users by XP, highest first.

        All-time uses each user's total XP. Daily and weekly only count XP
        from reports and predictions created inside the window, and omit
        users with no activity there.
        """
        limit = max(1, min(limit, MAX_LIMIT))
        now = now or datetime.now(UTC)
        users = {u.user_id: u for u in self.user_store.list_all()}

        start = window_start(timeframe, now)
        if start is None:
            xp_by_user = {user_id: u.total_xp for user_id, u in users.items()}
            reports_by_user = {user_id: u.reports_count for user_id, u in users.items()}
            predictions_by_user = {
                user_id: u.predictions_count for user_id, u in users.items()
            }
        else:
            since = start.isoformat()
            xp_by_user = defaultdict(int)
            reports_by_user = defaultdict(int)
            predictions_by_user = defaultdict(int)
            for report in self.report_store.list_since(since):
                xp_by_user[report.user_id] += report.xp_awarded
                reports_by_user[report.user_id] += 1
            for prediction in self.prediction_store.list_since(since):
                xp_by_user[prediction.user_id] += prediction.xp_awarded
                predictions_by_user[prediction.user_id] += 1

        ranked = sorted(
            (user_id for user_id in xp_by_user if user_id in users),
            key=lambda user_id: (-xp_by_user[user_id], users[user_id].username.lower()),
        )

        entries = []
        for rank, user_id in enumerate(ranked[:limit], start=1):
            user = users[user_id]
            entries.append(
                LeaderboardEntry(
                    rank=rank,
                    user_id=user_id,
                    username=user.username,
                    display_name=user.display_name,
                    total_xp=xp_by_user[user_id],
                    level=user.level,
                    reports_count=reports_by_user.get(user_id, 0),
                    predictions_count=predictions_by_user.get(user_id, 0),
                    accuracy_rate=user.accuracy_rate,
                )
            )
        return entries

"""User progression service: XP, levels and activity counters."""

from datetime import UTC, datetime

from models.user import User
from services.errors import NotFoundError
from services.scoring_service import accuracy_rate, level_for_xp
from stores.base import UserStore


class UserService:
    """Service for reading users and applying progression updates."""

    def __init__(self, user_store: UserStore):
        """Initialize the service with a user store."""
        self.user_store = user_store

    def get_user(self, user_id: str) -> User:
        """Get user by ID.

        Raises:
            NotFoundError: If the user does not exist
        """
        user = self.user_store.get(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def award_report_xp(self, user: User, xp: int) -> User:
        """Credit XP for a report and bump the report count."""
        user.reports_count += 1
        return self._add_xp(user, xp)

    def award_prediction_xp(self, user: User, xp: int) -> User:
        """Credit XP for a nowcast and bump the prediction count."""
        user.predictions_count += 1
        return self._add_xp(user, xp)

    def record_prediction_result(self, user_id: str, correct: bool) -> User:
        """Fold a verified nowcast into the user's accuracy rate."""
        user = self.get_user(user_id)
        user.verified_predictions += 1
        if correct:
            user.correct_predictions += 1
        user.accuracy_rate = accuracy_rate(
            user.correct_predictions, user.verified_predictions
        )
        user.updated_at = datetime.now(UTC).isoformat()
        return self.user_store.update(user)

    def _add_xp(self, user: User, xp: int) -> User:
        if xp < 0:
            raise ValueError("XP awards cannot be negative")
        user.total_xp += xp
        user.level = level_for_xp(user.total_xp)
        user.updated_at = datetime.now(UTC).isoformat()
        return self.user_store.update(user)

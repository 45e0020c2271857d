"""Service for nowcasts: short-horizon predictions and their verification."""

import logging
from datetime import UTC, datetime, timedelta

from ulid import ULID

from models.observation import RAIN_CONDITIONS, ConditionCode
from models.prediction import (
    PredictedCondition,
    Prediction,
    PredictionRequest,
    PredictionStatus,
)
from models.user import User
from services.errors import NotFoundError, PermissionDeniedError, StateConflictError
from services.scoring_service import prediction_xp
from services.user_service import UserService
from services.weather_service import WeatherService
from stores.base import PredictionStore

logger = logging.getLogger(__name__)

_DRY_CONDITIONS = frozenset(
    {
        ConditionCode.CLEAR,
        ConditionCode.PARTLY_CLOUDY,
        ConditionCode.CLOUDY,
        ConditionCode.FOG,
    }
)

# Observed conditions that count as a hit for each prediction
PREDICTION_MATCHES: dict[PredictedCondition, frozenset[ConditionCode]] = {
    PredictedCondition.CLEAR: frozenset({ConditionCode.CLEAR}),
    PredictedCondition.PARTLY_CLOUDY: frozenset({ConditionCode.PARTLY_CLOUDY}),
    PredictedCondition.CLOUDY: frozenset({ConditionCode.CLOUDY}),
    PredictedCondition.RAIN_STARTING: RAIN_CONDITIONS | {ConditionCode.STORM},
    PredictedCondition.RAIN_STOPPING: _DRY_CONDITIONS,
    PredictedCondition.STORM_APPROACHING: frozenset({ConditionCode.STORM}),
}


def is_prediction_correct(
    predicted: PredictedCondition | str, observed: ConditionCode | str
) -> bool:
    return ConditionCode(observed) in PREDICTION_MATCHES[PredictedCondition(predicted)]


class PredictionService:
    """Service for submitting and verifying nowcasts."""

    def __init__(
        self,
        prediction_store: PredictionStore,
        user_service: UserService,
        weather_service: WeatherService,
    ):
        self.prediction_store = prediction_store
        self.user_service = user_service
        self.weather_service = weather_service

    def submit_prediction(
        self, user_id: str, request: PredictionRequest
    ) -> tuple[Prediction, User]:
        """Store a nowcast and credit its XP to the author immediately."""
        user = self.user_service.get_user(user_id)
        xp = prediction_xp(request.window_minutes)
        now = datetime.now(UTC)

        prediction = Prediction(
            prediction_id=str(ULID()),
            user_id=user.user_id,
            latitude=request.latitude,
            longitude=request.longitude,
            window_minutes=request.window_minutes,
            predicted_condition=request.predicted_condition,
            confidence=request.confidence,
            xp_awarded=xp,
            created_at=now.isoformat(),
            due_at=(now + timedelta(minutes=request.window_minutes)).isoformat(),
        )
        self.prediction_store.create(prediction)
        user = self.user_service.award_prediction_xp(user, xp)

        logger.info(
            "Prediction %s by %s: %s in %d min (+%d XP)",
            prediction.prediction_id,
            user.user_id,
            prediction.predicted_condition,
            prediction.window_minutes,
            xp,
        )
        return prediction, user

    def verify_prediction(
        self, prediction_id: str, user_id: str, now: datetime | None = None
    ) -> Prediction:
        """Resolve a due nowcast against current live conditions.

        Raises:
            NotFoundError: Unknown prediction
            PermissionDeniedError: Prediction belongs to someone else
            StateConflictError: Not yet due, already resolved, or no live data
        """
        prediction = self.prediction_store.get(prediction_id)
        if not prediction:
            raise NotFoundError("Prediction not found")
        if prediction.user_id != user_id:
            raise PermissionDeniedError("Only the author can verify a prediction")
        if prediction.status != PredictionStatus.PENDING.value:
            raise StateConflictError("Prediction has already been verified")

        now = now or datetime.now(UTC)
        if now < datetime.fromisoformat(prediction.due_at):
            raise StateConflictError("Prediction window has not elapsed yet")

        observation = self.weather_service.get_current_observation(
            prediction.latitude, prediction.longitude
        )
        if observation.is_mock_data:
            raise StateConflictError("Live weather is unavailable; try again later")

        correct = is_prediction_correct(
            prediction.predicted_condition, observation.condition
        )
        prediction.status = (
            PredictionStatus.CORRECT if correct else PredictionStatus.INCORRECT
        ).value
        prediction.observed_condition = observation.condition
        prediction.verified_at = now.isoformat()
        self.prediction_store.update(prediction)
        self.user_service.record_prediction_result(user_id, correct)

        logger.info(
            "Prediction %s verified: %s (observed %s)",
            prediction_id,
            prediction.status,
            observation.condition,
        )
        return prediction

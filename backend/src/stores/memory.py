"""Process-local stores. Contents are lost on restart."""

import threading
from datetime import datetime

from models.prediction import Prediction
from models.user import User
from models.weather_report import WeatherReport
from services.errors import ConflictError, NotFoundError
from utils.geo_utils import is_within_radius

from .base import PredictionStore, ReportStore, UserStore


def _parse_iso(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


class InMemoryUserStore(UserStore):
    def __init__(self):
        self._users: dict[str, User] = {}
        self._lock = threading.RLock()

    def create(self, user: User) -> User:
        with self._lock:
            if self.find_by_email(user.email):
                raise ConflictError("Email already in use")
            if self.find_by_username(user.username):
                raise ConflictError("Username already taken")
            if user.user_id in self._users:
                raise ConflictError(f"User {user.user_id} already exists")
            self._users[user.user_id] = user.model_copy(deep=True)
            return user

    def get(self, user_id: str) -> User | None:
        with self._lock:
            user = self._users.get(user_id)
            return user.model_copy(deep=True) if user else None

    def find_by_email(self, email: str) -> User | None:
        email = email.lower()
        with self._lock:
            for user in self._users.values():
                if user.email == email:
                    return user.model_copy(deep=True)
        return None

    def find_by_username(self, username: str) -> User | None:
        with self._lock:
            for user in self._users.values():
                if user.username == username:
                    return user.model_copy(deep=True)
        return None

    def update(self, user: User) -> User:
        with self._lock:
            if user.user_id not in self._users:
                raise NotFoundError(f"User {user.user_id} does not exist")
            self._users[user.user_id] = user.model_copy(deep=True)
            return user

    def list_all(self) -> list[User]:
        with self._lock:
            return [u.model_copy(deep=True) for u in self._users.values()]


class InMemoryReportStore(ReportStore):
    def __init__(self):
        self._reports: list[WeatherReport] = []
        self._lock = threading.Lock()

    def create(self, report: WeatherReport) -> WeatherReport:
        with self._lock:
            self._reports.append(report)
        return report

    def query_by_radius(
        self,
        latitude: float,
        longitude: float,
        radius_miles: float,
        limit: int | None = None,
    ) -> list[WeatherReport]:
        with self._lock:
            snapshot = list(self._reports)

        nearby = [
            r
            for r in snapshot
            if is_within_radius(latitude, longitude, r.latitude, r.longitude, radius_miles)
        ]
        # sorted() is stable, so equal timestamps keep insertion order
        nearby = sorted(nearby, key=lambda r: _parse_iso(r.created_at), reverse=True)
        return nearby[:limit] if limit is not None else nearby

    def list_since(self, since_iso: str) -> list[WeatherReport]:
        cutoff = _parse_iso(since_iso)
        with self._lock:
            return [r for r in self._reports if _parse_iso(r.created_at) >= cutoff]


class InMemoryPredictionStore(PredictionStore):
    def __init__(self):
        self._predictions: dict[str, Prediction] = {}
        self._lock = threading.Lock()

    def create(self, prediction: Prediction) -> Prediction:
        with self._lock:
            self._predictions[prediction.prediction_id] = prediction.model_copy()
        return prediction

    def get(self, prediction_id: str) -> Prediction | None:
        with self._lock:
            prediction = self._predictions.get(prediction_id)
            return prediction.model_copy() if prediction else None

    def update(self, prediction: Prediction) -> Prediction:
        with self._lock:
            if prediction.prediction_id not in self._predictions:
                raise NotFoundError(
                    f"Prediction {prediction.prediction_id} does not exist"
                )
            self._predictions[prediction.prediction_id] = prediction.model_copy()
        return prediction

    def list_since(self, since_iso: str) -> list[Prediction]:
        cutoff = _parse_iso(since_iso)
        with self._lock:
            return [
                p
                for p in self._predictions.values()
                if _parse_iso(p.created_at) >= cutoff
            ]

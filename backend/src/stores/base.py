"""Storage contracts used by the services.

Request handlers never touch a concrete store; they receive whichever
implementation the app was configured with.
"""

from abc import ABC, abstractmethod

from models.prediction import Prediction
from models.user import User
from models.weather_report import WeatherReport


class UserStore(ABC):
    """Create, find and update users."""

    @abstractmethod
    def create(self, user: User) -> User:
        """Persist a new user. Raises ConflictError on duplicate email/username."""

    @abstractmethod
    def get(self, user_id: str) -> User | None: ...

    @abstractmethod
    def find_by_email(self, email: str) -> User | None:
        """Lookup is case-insensitive."""

    @abstractmethod
    def find_by_username(self, username: str) -> User | None: ...

    @abstractmethod
    def update(self, user: User) -> User:
        """Replace an existing user. Raises NotFoundError if it does not exist."""

    @abstractmethod
    def list_all(self) -> list[User]: ...


class ReportStore(ABC):
    """Append-only weather report collection."""

    @abstractmethod
    def create(self, report: WeatherReport) -> WeatherReport: ...

    @abstractmethod
    def query_by_radius(
        self,
        latitude: float,
        longitude: float,
        radius_miles: float,
        limit: int | None = None,
    ) -> list[WeatherReport]:
        """Reports within radius_miles (inclusive), newest first."""

    @abstractmethod
    def list_since(self, since_iso: str) -> list[WeatherReport]:
        """Reports created at or after the given ISO timestamp."""


class PredictionStore(ABC):
    """Nowcast collection."""

    @abstractmethod
    def create(self, prediction: Prediction) -> Prediction: ...

    @abstractmethod
    def get(self, prediction_id: str) -> Prediction | None: ...

    @abstractmethod
    def update(self, prediction: Prediction) -> Prediction: ...

    @abstractmethod
    def list_since(self, since_iso: str) -> list[Prediction]: ...

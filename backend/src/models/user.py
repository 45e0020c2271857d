"""User data models."""

from pydantic import BaseModel, Field


class User(BaseModel):
    """Stored user record."""

    user_id: str = Field(..., description="Unique user identifier")
    email: str = Field(..., description="Lower-cased email address")
    username: str = Field(..., description="Unique public username")
    display_name: str | None = Field(None, description="Name shown on leaderboards")
    password_hash: str = Field(..., description="Salted PBKDF2 password hash")
    total_xp: int = Field(default=0, ge=0, description="Cumulative experience points")
    level: int = Field(default=1, ge=1, description="Derived from total_xp")
    streak: int = Field(default=0, ge=0, description="Consecutive active days")
    last_active_date: str | None = Field(
        None, description="ISO timestamp of the last sign-in"
    )
    reports_count: int = Field(default=0, ge=0)
    predictions_count: int = Field(default=0, ge=0)
    verified_predictions: int = Field(default=0, ge=0)
    correct_predictions: int = Field(default=0, ge=0)
    accuracy_rate: float = Field(default=0.0, description="Percent of correct nowcasts")
    created_at: str = Field(..., description="ISO timestamp when user was created")
    updated_at: str = Field(..., description="ISO timestamp of the last change")

    def to_public(self) -> "PublicUser":
        """Strip the credential hash."""
        return PublicUser(**self.model_dump(exclude={"password_hash"}))


class PublicUser(BaseModel):
    """User fields that are safe to return to clients."""

    user_id: str
    email: str
    username: str
    display_name: str | None = None
    total_xp: int
    level: int
    streak: int
    last_active_date: str | None = None
    reports_count: int
    predictions_count: int
    verified_predictions: int = 0
    correct_predictions: int = 0
    accuracy_rate: float
    created_at: str
    updated_at: str


class SignUpRequest(BaseModel):
    """Request body for account creation."""

    email: str = Field(..., min_length=3, max_length=254)
    username: str = Field(..., min_length=1, max_length=40)
    password: str = Field(..., min_length=1, max_length=256)


class SignInRequest(BaseModel):
    """Request body for signing in."""

    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

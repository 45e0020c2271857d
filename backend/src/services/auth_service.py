"""Authentication service: email/password accounts and JWT sessions."""

import hashlib
import hmac
import logging
import os
import secrets
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt
from jose.exceptions import ExpiredSignatureError
from ulid import ULID

from models.user import PublicUser, User
from services.errors import AuthenticationError, ConflictError
from services.scoring_service import next_streak
from stores.base import UserStore

logger = logging.getLogger(__name__)

PASSWORD_HASH_ALGORITHM = "pbkdf2_sha256"
PASSWORD_HASH_ITERATIONS = 260_000
PASSWORD_SALT_BYTES = 16

INVALID_CREDENTIALS = "Invalid credentials"


def hash_password(password: str, iterations: int = PASSWORD_HASH_ITERATIONS) -> str:
    """Hash a password as ``algorithm$iterations$salt$digest``."""
    salt = secrets.token_hex(PASSWORD_SALT_BYTES)
    digest = hashlib.pbkdf2_hmac(
        "sha256", password.encode(), salt.encode(), iterations
    ).hex()
    return f"{PASSWORD_HASH_ALGORITHM}${iterations}${salt}${digest}"


def verify_password(password: str, password_hash: str) -> bool:
    """Constant-time check of a password against a stored hash."""
    try:
        algorithm, iterations, salt, expected = password_hash.split("$")
    except ValueError:
        return False
    if algorithm != PASSWORD_HASH_ALGORITHM:
        return False
    digest = hashlib.pbkdf2_hmac(
        "sha256", password.encode(), salt.encode(), int(iterations)
    ).hex()
    return hmac.compare_digest(digest, expected)


@dataclass
class SignInResult:
    """Session issued on successful sign-in."""

    token: str
    user: PublicUser

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": "Sign in successful",
            "token": self.token,
            "token_type": "Bearer",
            "user": self.user.model_dump(),
        }


class AuthService:
    """Service for sign-up, sign-in and bearer token checks."""

    # JWT settings
    JWT_ALGORITHM = "HS256"
    JWT_EXPIRATION_HOURS = 24 * 7  # 7 days

    def __init__(self, user_store: UserStore, jwt_secret: str | None = None):
        """Initialize auth service.

        Args:
            user_store: Storage for user records
            jwt_secret: Secret for signing JWTs
        """
        self.user_store = user_store
        self.jwt_secret = jwt_secret or os.environ.get(
            "JWT_SECRET_KEY", "dev-secret-change-in-prod"
        )

    # ============================================
    # Accounts
    # ============================================

    def sign_up(self, email: str, username: str, password: str) -> PublicUser:
        """Register a new account.

        Raises:
            ValueError: If a field is blank
            ConflictError: If the email or username is already registered
        """
        email = (email or "").strip().lower()
        username = (username or "").strip()
        if not email or not username or not password:
            raise ValueError("All fields are required")
        if "@" not in email:
            raise ValueError("A valid email address is required")

        if self.user_store.find_by_email(email):
            raise ConflictError("Email already in use")
        if self.user_store.find_by_username(username):
            raise ConflictError("Username already taken")

        now = datetime.now(UTC).isoformat()
        user = User(
            user_id=f"user_{ULID()}",
            email=email,
            username=username,
            display_name=username,
            password_hash=hash_password(password),
            created_at=now,
            updated_at=now,
        )
        self.user_store.create(user)
        logger.info("Created user %s (%s)", user.user_id, username)
        return user.to_public()

    def sign_in(self, email: str, password: str, now: datetime | None = None) -> SignInResult:
        """Check credentials, refresh the daily streak and issue a token.

        The same error is raised for an unknown email and a wrong password.
        """
        if not email or not password:
            raise ValueError("Email and password are required")

        user = self.user_store.find_by_email(email.strip().lower())
        if not user or not verify_password(password, user.password_hash):
            raise AuthenticationError(INVALID_CREDENTIALS)

        now = now or datetime.now(UTC)
        user.streak = next_streak(user.streak, user.last_active_date, now)
        user.last_active_date = now.isoformat()
        user.updated_at = now.isoformat()
        self.user_store.update(user)

        return SignInResult(
            token=self.create_access_token(user.user_id, user.email),
            user=user.to_public(),
        )

    # ============================================
    # JWT Session Management
    # ============================================

    def create_access_token(self, user_id: str, email: str | None = None) -> str:
        """Create a signed access token for a user."""
        now = datetime.now(UTC)
        payload = {
            "sub": user_id,
            "type": "access",
            "iat": now,
            "exp": now + timedelta(hours=self.JWT_EXPIRATION_HOURS),
        }
        if email:
            payload["email"] = email
        return jwt.encode(payload, self.jwt_secret, algorithm=self.JWT_ALGORITHM)

    def verify_access_token(self, token: str) -> str:
        """Verify an access token and return the user ID.

        Raises:
            AuthenticationError: If token is invalid
        """
        try:
            payload = jwt.decode(
                token,
                self.jwt_secret,
                algorithms=[self.JWT_ALGORITHM],
                options={"verify_exp": True},
            )

            if payload.get("type") != "access":
                raise AuthenticationError("Invalid token type")

            user_id = payload.get("sub")
            if not user_id:
                raise AuthenticationError("Missing user ID in token")

            return user_id

        except ExpiredSignatureError:
            raise AuthenticationError("Token has expired")
        except JWTError as e:
            raise AuthenticationError(f"Invalid token: {str(e)}")

"""Domain errors raised by services and translated to HTTP by the API."""


class AuthenticationError(Exception):
    """Missing, malformed or expired token, or credential mismatch."""

    pass


class ConflictError(Exception):
    """Unique field (email, username) already registered."""

    pass


class NotFoundError(Exception):
    """Referenced record does not exist."""

    pass


class PermissionDeniedError(Exception):
    """Authenticated user may not act on this record."""

    pass


class StateConflictError(Exception):
    """Record is not in a state that allows the operation."""

    pass


class UpstreamError(Exception):
    """A weather provider failed. Always recovered by the resolution chain."""

    def __init__(self, provider: str, message: str):
        super().__init__(f"{provider}: {message}")
        self.provider = provider

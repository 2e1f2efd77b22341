"""
Authentication error taxonomy.

Every failure is an APIException so it is rendered at the request boundary
and never reaches route handlers. All session failures share one external
code; the internal ``reason`` is only ever logged.
"""

from common.utils.exceptions import (
    UnauthorizedException,
    ValidationException,
    InternalServerException,
    ServiceUnavailableException,
)


class SessionFailure:
    """Internal reasons a session does not verify."""

    UNKNOWN_IDENTITY = "unknown_identity"
    EXPIRED = "expired"
    NO_ACTIVE_SESSION = "no_active_session"
    BAD_TOKEN = "bad_token"


class CredentialsMissing(UnauthorizedException):
    """Client token or user id absent from the request."""

    def __init__(self):
        super().__init__(
            message="Client token and user id are required",
            code="client_token_and_user_id_required",
        )


class MalformedToken(ValidationException):
    """Client token too short to carry enough entropy."""

    def __init__(self, min_length: int):
        super().__init__(
            message=f"Client token must be at least {min_length} characters",
            code="client_token_required",
        )


class SessionInvalid(UnauthorizedException):
    """Unknown identity, expired session, no session or token mismatch."""

    def __init__(self, reason: str):
        super().__init__(message="Invalid or expired session", code="invalid_token")
        self.reason = reason


class InvalidCredentials(UnauthorizedException):
    """Email unknown or password wrong (never says which)."""

    def __init__(self):
        super().__init__(message="Invalid email or password", code="invalid_credentials")


class Unauthenticated(UnauthorizedException):
    """Role check reached without a resolved identity."""

    def __init__(self):
        super().__init__(message="User not authenticated", code="user_not_authenticated")


class AccountNotFound(InternalServerException):
    """Account vanished between the credential check and the session write."""

    def __init__(self, user_id: str):
        super().__init__(message="Account no longer exists", code="account_not_found")
        self.user_id = user_id


class StoreUnavailable(ServiceUnavailableException):
    """Credential store could not be reached."""

    def __init__(self):
        super().__init__(message="Credential store unavailable", code="store_unavailable")

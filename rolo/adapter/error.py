"""Infrastructure layer errors."""

from enum import Enum


class AdapterError(Exception):
    """Base infrastructure error."""

    pass


class ProviderErrorCode(str, Enum):
    """Typed failure reported by an external provider."""

    INVALID_TOKEN = "invalid_token"
    TOKEN_EXPIRED = "token_expired"
    SESSION_NOT_FOUND = "session_not_found"
    USER_NOT_FOUND = "user_not_found"
    USER_BANNED = "user_banned"
    EMAIL_NOT_CONFIRMED = "email_not_confirmed"
    RATE_LIMITED = "rate_limited"
    UNAVAILABLE = "unavailable"
    UNKNOWN = "unknown"

    @property
    def retryable(self) -> bool:
        return self in (ProviderErrorCode.RATE_LIMITED, ProviderErrorCode.UNAVAILABLE)


class ProviderError(AdapterError):
    """External provider error."""

    def __init__(
        self,
        provider: str,
        code: ProviderErrorCode,
        message: str = "",
        status_code: int | None = None,
    ) -> None:
        self.provider = provider
        self.code = code
        self.status_code = status_code
        super().__init__(f"{provider}: {code.value} {message}".strip())

    @property
    def retryable(self) -> bool:
        return self.code.retryable

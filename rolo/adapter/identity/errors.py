"""Identity provider error payload parsing.

The provider reports failures as JSON bodies carrying an ``error_code`` (newer
API versions) or an ``error`` string. All interpretation of those strings
happens here, through PROVIDER_ERROR_CODES.
"""

from typing import Any

import httpx

from rolo.adapter.error import ProviderError, ProviderErrorCode

PROVIDER_ERROR_CODES: dict[str, ProviderErrorCode] = {
    "bad_jwt": ProviderErrorCode.INVALID_TOKEN,
    "invalid_token": ProviderErrorCode.INVALID_TOKEN,
    "no_authorization": ProviderErrorCode.INVALID_TOKEN,
    "jwt_expired": ProviderErrorCode.TOKEN_EXPIRED,
    "session_expired": ProviderErrorCode.TOKEN_EXPIRED,
    "session_not_found": ProviderErrorCode.SESSION_NOT_FOUND,
    "refresh_token_not_found": ProviderErrorCode.SESSION_NOT_FOUND,
    "user_not_found": ProviderErrorCode.USER_NOT_FOUND,
    "user_banned": ProviderErrorCode.USER_BANNED,
    "email_not_confirmed": ProviderErrorCode.EMAIL_NOT_CONFIRMED,
    "over_request_rate_limit": ProviderErrorCode.RATE_LIMITED,
    "over_email_send_rate_limit": ProviderErrorCode.RATE_LIMITED,
    "too_many_requests": ProviderErrorCode.RATE_LIMITED,
    "request_timeout": ProviderErrorCode.UNAVAILABLE,
    "unexpected_failure": ProviderErrorCode.UNAVAILABLE,
}

# Used when the body carries no known code
STATUS_ERROR_CODES: dict[int, ProviderErrorCode] = {
    401: ProviderErrorCode.INVALID_TOKEN,
    403: ProviderErrorCode.INVALID_TOKEN,
    404: ProviderErrorCode.USER_NOT_FOUND,
    429: ProviderErrorCode.RATE_LIMITED,
}


def provider_error_from_response(provider: str, response: httpx.Response) -> ProviderError:
    """Build a typed ProviderError from a non-success provider response."""
    try:
        body: Any = response.json()
    except ValueError:
        body = {}

    raw_code = None
    message = ""
    if isinstance(body, dict):
        raw_code = body.get("error_code") or body.get("error")
        message = str(body.get("msg") or body.get("error_description") or "")

    code = PROVIDER_ERROR_CODES.get(str(raw_code).lower()) if raw_code else None
    if code is None:
        if response.status_code >= 500:
            code = ProviderErrorCode.UNAVAILABLE
        else:
            code = STATUS_ERROR_CODES.get(response.status_code, ProviderErrorCode.UNKNOWN)

    return ProviderError(provider, code, message, status_code=response.status_code)

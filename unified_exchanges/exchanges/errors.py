"""
Exception hierarchy for exchange adapters.

Adapters raise these instead of transport or parsing errors so callers can
tell remote rejections apart from network trouble. Nothing here is retried;
retry policy belongs to the caller.
"""


class ExchangeError(Exception):
    """Base class for all exchange-related errors."""


class BadRequest(ExchangeError):
    """Request rejected as malformed (bad method, parameters, dates)."""


class BadSymbol(BadRequest):
    """Symbol is unknown to the loaded market catalog."""


class ArgumentsRequired(BadRequest):
    """A required argument or credential was not supplied by the caller."""


class BadResponse(ExchangeError):
    """Response body could not be interpreted (e.g. no status code)."""


class AuthenticationError(ExchangeError):
    """API key/secret rejected or missing."""


class PermissionDenied(AuthenticationError):
    """Credentials valid but not allowed to perform this request."""


class AccountSuspended(AuthenticationError):
    """API key expired or the account was suspended."""


class InvalidNonce(ExchangeError):
    """Request timestamp outside the window accepted by the exchange."""


class InsufficientFunds(ExchangeError):
    """Insufficient balance for the requested order."""


class InvalidOrder(ExchangeError):
    """Invalid order parameters (price/amount precision, minimums)."""


class OrderNotFound(InvalidOrder):
    """Order does not exist or could not be matched unambiguously."""


class NetworkError(ExchangeError):
    """Transport-level failure or unknown endpoint."""


class RateLimitExceeded(NetworkError):
    """Request frequency limit hit. Caller should back off."""


class RequestTimeout(NetworkError):
    """Request did not complete within the configured timeout."""


class ExchangeNotAvailable(NetworkError):
    """Exchange answered with a server-side (5xx) failure."""

"""
DigiFinex error classifier.

Every response body carries a numeric "code"; "0" means success. Other
codes map to an exception class and the exchange's message.
"""

import logging
from typing import Any, Dict, Optional, Tuple, Type

from .errors import (
    AccountSuspended,
    AuthenticationError,
    BadRequest,
    BadResponse,
    ExchangeError,
    InsufficientFunds,
    InvalidNonce,
    InvalidOrder,
    NetworkError,
    PermissionDenied,
    RateLimitExceeded,
)
from .exchange_support import safe_string

logger = logging.getLogger(__name__)

EXACT_ERRORS: Dict[str, Tuple[Type[ExchangeError], str]] = {
    "10001": (BadRequest, "Wrong request method, please check it's a GET ot POST request"),
    "10002": (AuthenticationError, "Invalid ApiKey"),
    "10003": (AuthenticationError, "Sign doesn't match"),
    "10004": (BadRequest, "Illegal request parameters"),
    "10005": (RateLimitExceeded, "Request frequency exceeds the limit"),
    "10006": (PermissionDenied, "Unauthorized to execute this request"),
    "10007": (PermissionDenied, "IP address Unauthorized"),
    "10008": (InvalidNonce, "Timestamp for this request is invalid, timestamp must within 1 minute"),
    "10009": (NetworkError, "Unexist endpoint, please check endpoint URL"),
    "10011": (AccountSuspended, "ApiKey expired. Please go to client side to re-create an ApiKey"),
    "20001": (PermissionDenied, "Trade is not open for this trading pair"),
    "20002": (PermissionDenied, "Trade of this trading pair is suspended"),
    "20003": (InvalidOrder, "Invalid price or amount"),
    "20007": (InvalidOrder, "Price precision error"),
    "20008": (InvalidOrder, "Amount precision error"),
    "20009": (InvalidOrder, "Amount is less than the minimum requirement"),
    "20010": (InvalidOrder, "Cash Amount is less than the minimum requirement"),
    "20011": (InsufficientFunds, "Insufficient balance"),
    "20012": (BadRequest, "Invalid trade type, valid value: buy/sell)"),
    "20013": (InvalidOrder, "No order info found"),
    "20014": (BadRequest, "Invalid date, Valid format: 2018-07-25)"),
    "20015": (BadRequest, "Date exceeds the limit"),
    "20018": (PermissionDenied, "Your trading rights have been banned by the system"),
    "20019": (BadRequest, 'Wrong trading pair symbol. Correct format:"usdt_btc". Quote asset is in the front'),
    "20020": (RateLimitExceeded, "You have violated the API operation trading rules and temporarily forbid trading. At present, we have certain restrictions on the user's transaction rate and withdrawal rate."),
    "50000": (ExchangeError, "Exception error"),
}


def handle_errors(response: Any, body: Optional[str] = None):
    """
    Raise the exception matching a response's code.

    Args:
        response: Decoded JSON body
        body: Raw response text, used as the message for unknown codes

    Raises:
        BadResponse: Non-empty body without a code
        ExchangeError: Subclass from EXACT_ERRORS, or ExchangeError itself
            for codes not in the table
    """
    if not response:
        return
    code = safe_string(response, "code")
    if code == "0":
        return
    feedback = f"digifinex {body if body is not None else response}"
    if code is None:
        logger.error(f"[DIGIFINEX] Malformed response without code: {feedback}")
        raise BadResponse(feedback)
    exception_class, message = EXACT_ERRORS.get(code, (ExchangeError, feedback))
    logger.error(f"[DIGIFINEX] API Error: {code} - {message}")
    raise exception_class(message)

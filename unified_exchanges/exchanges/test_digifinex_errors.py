import pytest

from unified_exchanges.exchanges.digifinex_errors import handle_errors
from unified_exchanges.exchanges import errors


def test_success_code_does_not_raise():
    handle_errors({"code": "0"})
    handle_errors({"code": 0, "data": []})


def test_empty_response_is_left_to_the_caller():
    handle_errors(None)
    handle_errors({})


def test_insufficient_funds():
    with pytest.raises(errors.InsufficientFunds, match="Insufficient balance"):
        handle_errors({"code": "20011"})


@pytest.mark.parametrize("code, exception_class", [
    (10002, errors.AuthenticationError),
    (10005, errors.RateLimitExceeded),
    (10007, errors.PermissionDenied),
    (10008, errors.InvalidNonce),
    (10009, errors.NetworkError),
    (10011, errors.AccountSuspended),
    (20003, errors.InvalidOrder),
    (20014, errors.BadRequest),
    (50000, errors.ExchangeError),
])
def test_code_table(code, exception_class):
    with pytest.raises(exception_class):
        handle_errors({"code": code})


def test_missing_code_is_malformed():
    with pytest.raises(errors.BadResponse):
        handle_errors({"data": []}, '{"data": []}')


def test_unknown_code_carries_raw_body():
    body = '{"code": 99999, "msg": "boom"}'
    with pytest.raises(errors.ExchangeError, match="boom") as excinfo:
        handle_errors({"code": 99999, "msg": "boom"}, body)
    assert type(excinfo.value) is errors.ExchangeError

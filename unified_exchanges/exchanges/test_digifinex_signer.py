import hashlib
import hmac

import pytest

from unified_exchanges.exchanges.digifinex_signer import (
    DigiFinexSigner,
    extract_params,
    implode_params,
    keysort_urlencode,
)
from unified_exchanges.exchanges.errors import AuthenticationError

BASE_URL = "https://openapi.digifinex.vip"


def make_signer(nonce=1564520000000, api_key="test-key", secret="test-secret"):
    return DigiFinexSigner(api_key=api_key, secret=secret, base_url=BASE_URL, nonce=lambda: nonce)


def expected_signature(payload, secret="test-secret"):
    return hmac.new(secret.encode(), payload.encode(), hashlib.sha256).hexdigest()


def test_keysort_urlencode_ignores_insertion_order():
    first = keysort_urlencode({"symbol": "btc_usdt", "amount": "1", "type": "buy"})
    second = keysort_urlencode({"type": "buy", "amount": "1", "symbol": "btc_usdt"})
    assert first == second == "amount=1&symbol=btc_usdt&type=buy"


def test_placeholders():
    assert extract_params("{market}/order/new") == ["market"]
    assert implode_params("{market}/order/new", {"market": "margin"}) == "margin/order/new"


def test_public_request_has_query_and_no_auth():
    request = make_signer().sign("order_book", params={"symbol": "btc_usdt", "limit": 5})
    assert request.url == f"{BASE_URL}/v3/order_book?limit=5&symbol=btc_usdt"
    assert request.headers == {}
    assert request.body is None


def test_v2_uses_legacy_version():
    request = make_signer().sign("ticker", api="v2", params={"apiKey": "k"})
    assert request.url == f"{BASE_URL}/v2/ticker?apiKey=k"


def test_private_get_signs_sorted_query():
    request = make_signer().sign("spot/assets", api="private", params={"symbol": "btc_usdt", "amount": "1"})
    assert request.url == f"{BASE_URL}/v3/spot/assets?amount=1&symbol=btc_usdt"
    assert request.headers["ACCESS-KEY"] == "test-key"
    assert request.headers["ACCESS-SIGN"] == expected_signature("amount=1&symbol=btc_usdt")
    assert request.headers["ACCESS-TIMESTAMP"] == "1564520000000"
    assert request.body is None


def test_private_post_sends_form_body_and_consumes_placeholder():
    params = {"market": "spot", "symbol": "btc_usdt", "type": "buy", "amount": "1", "price": "9605.77"}
    request = make_signer().sign("{market}/order/new", api="private", method="POST", params=params)
    assert request.url == f"{BASE_URL}/v3/spot/order/new"
    assert request.body == "amount=1&price=9605.77&symbol=btc_usdt&type=buy"
    assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"
    assert request.headers["ACCESS-SIGN"] == expected_signature(request.body)


def test_signature_is_deterministic_and_independent_of_nonce():
    first = make_signer(nonce=1).sign("spot/assets", api="private", params={"b": 2, "a": 1})
    second = make_signer(nonce=2).sign("spot/assets", api="private", params={"a": 1, "b": 2})
    assert first.url == second.url
    assert first.headers["ACCESS-SIGN"] == second.headers["ACCESS-SIGN"]
    assert first.headers["ACCESS-TIMESTAMP"] != second.headers["ACCESS-TIMESTAMP"]


def test_private_request_requires_credentials():
    with pytest.raises(AuthenticationError):
        make_signer(api_key="", secret="").sign("spot/assets", api="private")

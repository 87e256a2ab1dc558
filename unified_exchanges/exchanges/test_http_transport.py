from unittest.mock import Mock, patch

import pytest
import requests

from unified_exchanges.exchanges.errors import NetworkError, RequestTimeout
from unified_exchanges.exchanges.http_transport import HttpTransport


def make_transport(**kwargs):
    session = Mock(spec=requests.Session)
    kwargs.setdefault("enable_rate_limit", False)
    return HttpTransport(session=session, **kwargs), session


def test_decodes_json_body():
    transport, session = make_transport(timeout=5)
    session.request.return_value = Mock(status_code=200, text='{"code": 0, "data": []}')
    response = transport.fetch("POST", "https://example.test/v3/spot/order/new",
                               {"ACCESS-KEY": "k"}, "amount=1")
    session.request.assert_called_once_with(
        "POST", "https://example.test/v3/spot/order/new",
        headers={"ACCESS-KEY": "k"}, data="amount=1", timeout=5,
    )
    assert response.status_code == 200
    assert response.data == {"code": 0, "data": []}


def test_non_json_body():
    transport, session = make_transport()
    session.request.return_value = Mock(status_code=502, text="Bad Gateway")
    response = transport.fetch("GET", "https://example.test/v3/time")
    assert response.data is None
    assert response.text == "Bad Gateway"


def test_timeout_is_wrapped():
    transport, session = make_transport()
    session.request.side_effect = requests.exceptions.ReadTimeout("slow")
    with pytest.raises(RequestTimeout):
        transport.fetch("GET", "https://example.test/v2/ticker?apiKey=secret")


def test_connection_error_hides_query_string():
    transport, session = make_transport()
    session.request.side_effect = requests.exceptions.ConnectionError("refused")
    with pytest.raises(NetworkError) as excinfo:
        transport.fetch("GET", "https://example.test/v2/ticker?apiKey=secret")
    assert "secret" not in str(excinfo.value)


def test_throttle_spaces_requests():
    transport, session = make_transport(enable_rate_limit=True, rate_limit_ms=900)
    session.request.return_value = Mock(status_code=200, text="{}")
    with patch("unified_exchanges.exchanges.http_transport.time") as mock_time:
        mock_time.monotonic.side_effect = [100.0, 100.0, 100.5, 100.9]
        transport.fetch("GET", "https://example.test/v3/ping")
        transport.fetch("GET", "https://example.test/v3/ping")
    mock_time.sleep.assert_called_once()
    assert mock_time.sleep.call_args[0][0] == pytest.approx(0.4)

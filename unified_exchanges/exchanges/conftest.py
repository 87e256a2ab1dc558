"""
Shared fixtures for exchange adapter tests.

The transport is a Mock returning canned DigiFinex documents; nothing
touches the network.
"""

import json
from unittest.mock import Mock

import pytest

from unified_exchanges.config.settings import DigiFinexConfig
from unified_exchanges.exchanges.digifinex_adapter import DigiFinexAdapter
from unified_exchanges.exchanges.http_transport import HttpTransport, TransportResponse

AGGREGATE_MARKETS = {
    "data": [
        {"volume_precision": 4, "price_precision": 2, "market": "btc_usdt",
         "min_amount": 2, "min_volume": 0.0001},
        {"volume_precision": 3, "price_precision": 6, "market": "eth_btc",
         "min_amount": 0.0001, "min_volume": 0.001},
    ],
    "date": 1564507456,
    "code": 0,
}


def respond(data, status_code=200):
    """Build a transport response for a JSON document."""
    return TransportResponse(status_code=status_code, text=json.dumps(data), data=data)


def last_request(transport):
    """Return (method, url, headers, body) of the last fetch call."""
    return transport.fetch.call_args[0]


@pytest.fixture
def config():
    return DigiFinexConfig(api_key="test-key", secret="test-secret", enable_rate_limit=False)


@pytest.fixture
def transport():
    return Mock(spec=HttpTransport)


@pytest.fixture
def adapter(config, transport):
    """Adapter with the aggregate market catalog already loaded."""
    transport.fetch.return_value = respond(AGGREGATE_MARKETS)
    adapter = DigiFinexAdapter(config=config, transport=transport)
    adapter.load_markets()
    transport.reset_mock()
    return adapter

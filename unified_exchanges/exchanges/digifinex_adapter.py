"""
DigiFinex spot adapter implementation.

Maps the DigiFinex REST API (v3, plus the legacy v2 ticker) onto the
unified exchange interface. Signing, transport and error classification
are composed in rather than inherited.

API Documentation: https://docs.digifinex.vip
"""

import logging
from dataclasses import replace
from decimal import Decimal
from typing import Any, Dict, List, Optional

from ..config.settings import DIGIFINEX_CONFIG, DIGIFINEX_MARKET_TYPES, DigiFinexConfig
from .base_adapter import (
    OHLCV,
    BaseExchangeAdapter,
    UnifiedBalance,
    UnifiedMarket,
    UnifiedOrder,
    UnifiedOrderbook,
    UnifiedTicker,
    UnifiedTrade,
)
from .digifinex_errors import handle_errors
from .digifinex_parsers import (
    find_market,
    parse_balance,
    parse_market,
    parse_market_by_type,
    parse_ohlcvs,
    parse_order,
    parse_order_book,
    parse_orders,
    parse_ticker,
    parse_tickers,
    parse_trades,
)
from .digifinex_signer import PRIVATE, PUBLIC, V2, DigiFinexSigner
from .errors import (
    ArgumentsRequired,
    BadRequest,
    BadSymbol,
    ExchangeError,
    ExchangeNotAvailable,
    OrderNotFound,
)
from .exchange_support import (
    omit,
    parse_timeframe,
    round_to_precision,
    safe_integer,
    safe_value,
    seconds,
    seconds_to_ms,
    truncate_to_precision,
    ymd,
)
from .http_transport import HttpTransport

logger = logging.getLogger(__name__)


class DigiFinexAdapter(BaseExchangeAdapter):
    """
    DigiFinex adapter.

    Market catalog is loaded once and cached for the adapter's lifetime;
    every other call issues exactly one request. Nothing is retried.
    """

    TIMEFRAMES = {
        "1m": "1",
        "5m": "5",
        "15m": "15",
        "30m": "30",
        "1h": "60",
        "4h": "240",
        "12h": "720",
        "1d": "1D",
        "1w": "1W",
    }

    # Per-type endpoints, selected by the "type" parameter
    SYMBOLS_ENDPOINTS = {market_type: f"{market_type}/symbols" for market_type in DIGIFINEX_MARKET_TYPES}
    ASSETS_ENDPOINTS = {market_type: f"{market_type}/assets" for market_type in DIGIFINEX_MARKET_TYPES}

    def __init__(
        self,
        config: Optional[DigiFinexConfig] = None,
        transport: Optional[HttpTransport] = None,
        api_key: Optional[str] = None,
        secret: Optional[str] = None,
    ):
        """
        Initialize DigiFinex adapter.

        Args:
            config: Settings, DIGIFINEX_CONFIG from the environment by default
            transport: HTTP transport, built from config when omitted
            api_key: Overrides config.api_key
            secret: Overrides config.secret
        """
        super().__init__()
        config = config or DIGIFINEX_CONFIG
        overrides = {k: v for k, v in (("api_key", api_key), ("secret", secret)) if v is not None}
        self.config = config.model_copy(update=overrides) if overrides else config

        self.signer = DigiFinexSigner(
            api_key=self.config.api_key,
            secret=self.config.secret,
            base_url=self.config.base_url,
            version=self.config.version,
            legacy_version=self.config.legacy_version,
        )
        self.transport = transport or HttpTransport(
            timeout=self.config.timeout,
            rate_limit_ms=self.config.rate_limit_ms,
            enable_rate_limit=self.config.enable_rate_limit,
        )

        self.markets: Dict[str, UnifiedMarket] = {}
        self.markets_by_id: Dict[str, UnifiedMarket] = {}

        logger.info(f"[DIGIFINEX] Adapter initialized for {self.config.base_url}")

    def _get_exchange_name(self) -> str:
        return "digifinex"

    def _request(
        self,
        path: str,
        api: str = PUBLIC,
        method: str = "GET",
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Sign, send and classify one request.

        Returns:
            Decoded JSON response

        Raises:
            ExchangeError: Subclass matching the response code or HTTP status
        """
        request = self.signer.sign(path, api, method, params)
        logger.debug(f"[DIGIFINEX] {method} {path} ({api})")
        response = self.transport.fetch(request.method, request.url, request.headers, request.body)
        handle_errors(response.data, response.text)
        if response.status_code >= 400:
            message = f"digifinex {response.status_code} {response.text}"
            logger.error(f"[DIGIFINEX] HTTP Error: {message}")
            if response.status_code >= 500:
                raise ExchangeNotAvailable(message)
            raise ExchangeError(message)
        return response.data

    def _market_type(self, params: Optional[Dict[str, Any]]) -> str:
        market_type = (params or {}).get("type", self.config.default_type)
        if market_type not in DIGIFINEX_MARKET_TYPES:
            raise BadRequest(f"digifinex does not support market type {market_type}")
        return market_type

    # ==================== Market Catalog ====================

    def fetch_markets(self, params: Optional[Dict[str, Any]] = None) -> List[UnifiedMarket]:
        """Fetch markets from the aggregate (undocumented) listing."""
        response = self._request("markets", params=params)
        return [parse_market(m) for m in safe_value(response, "data", [])]

    def fetch_markets_by_type(self, market_type: Optional[str] = None,
                              params: Optional[Dict[str, Any]] = None) -> List[UnifiedMarket]:
        """
        Fetch markets from a per-type listing.

        Args:
            market_type: "spot", "margin" or "otc" (default from config)
        """
        market_type = market_type or self.config.default_type
        path = self.SYMBOLS_ENDPOINTS.get(market_type)
        if path is None:
            raise BadRequest(f"digifinex does not support market type {market_type}")
        response = self._request(path, params=params)
        return [parse_market_by_type(m) for m in safe_value(response, "symbol_list", [])]

    def load_markets(self, reload: bool = False, market_type: Optional[str] = None) -> Dict[str, UnifiedMarket]:
        """
        Load and cache the market catalog.

        Args:
            reload: Refetch even when a catalog is cached
            market_type: Load from the per-type listing instead of the aggregate one
        """
        if self.markets and not reload:
            return self.markets
        if market_type is None:
            markets = self.fetch_markets()
        else:
            markets = self.fetch_markets_by_type(market_type)
        markets = [m for m in markets if m.symbol is not None and m.id is not None]
        self.markets = {m.symbol: m for m in markets}
        self.markets_by_id = {m.id: m for m in markets}
        logger.info(f"[DIGIFINEX] Loaded {len(markets)} markets")
        return self.markets

    def market(self, symbol: str) -> UnifiedMarket:
        """Resolve a canonical symbol or a native market id."""
        self.load_markets()
        if symbol in self.markets:
            return self.markets[symbol]
        market = find_market(symbol, self.markets_by_id)
        if market is None:
            raise BadSymbol(f"digifinex does not have market symbol {symbol}")
        return market

    def amount_to_precision(self, symbol: str, amount: Any) -> str:
        return truncate_to_precision(amount, self.market(symbol).precision.amount)

    def price_to_precision(self, symbol: str, price: Any) -> str:
        return round_to_precision(price, self.market(symbol).precision.price)

    # ==================== Public Market Data ====================

    def fetch_time(self) -> Optional[int]:
        """Server time in milliseconds."""
        response = self._request("time")
        return seconds_to_ms(safe_integer(response, "server_time"))

    def ping(self) -> Dict[str, Any]:
        return self._request("ping")

    def _ticker_api_key(self, params: Dict[str, Any]) -> str:
        api_key = params.get("apiKey") or self.config.api_key
        if not api_key:
            raise ArgumentsRequired(
                "digifinex fetch_ticker is a private v2 endpoint that requires "
                "an `api_key` credential or an `apiKey` extra parameter"
            )
        return api_key

    def fetch_tickers(self, symbols: Optional[List[str]] = None,
                      params: Optional[Dict[str, Any]] = None) -> Dict[str, UnifiedTicker]:
        """Fetch all tickers from the v2 endpoint, optionally filtered by symbols."""
        params = params or {}
        api_key = self._ticker_api_key(params)
        self.load_markets()
        request = {**params, "apiKey": api_key}
        response = self._request("ticker", api=V2, params=request)
        tickers = parse_tickers(response, self.markets_by_id)
        if symbols is not None:
            tickers = {s: t for s, t in tickers.items() if s in symbols}
        return tickers

    def fetch_ticker(self, symbol: str, params: Optional[Dict[str, Any]] = None) -> UnifiedTicker:
        params = params or {}
        api_key = self._ticker_api_key(params)
        market = self.market(symbol)
        # v2 ids are quote first and lower-case
        market_id = f"{market.quote_id}_{market.base_id}".lower()
        request = {**params, "symbol": market_id, "apiKey": api_key}
        response = self._request("ticker", api=V2, params=request)
        tickers = safe_value(response, "ticker", {})
        raw = next((t for key, t in tickers.items() if key.lower() == market_id), {})
        ticker = dict(raw)
        ticker["date"] = safe_integer(response, "date")
        return parse_ticker(ticker, market)

    def fetch_order_book(self, symbol: str, limit: Optional[int] = None) -> UnifiedOrderbook:
        market = self.market(symbol)
        request: Dict[str, Any] = {"symbol": market.id}
        if limit is not None:
            request["limit"] = limit  # default 10, max 150
        response = self._request("order_book", params=request)
        return parse_order_book(response, market.symbol)

    def fetch_trades(self, symbol: str, since: Optional[int] = None,
                     limit: Optional[int] = None) -> List[UnifiedTrade]:
        market = self.market(symbol)
        request: Dict[str, Any] = {"symbol": market.id}
        if limit is not None:
            request["limit"] = limit  # default 100, max 500
        response = self._request("trades", params=request)
        return parse_trades(safe_value(response, "data", []), market, since, limit)

    def fetch_ohlcv(self, symbol: str, timeframe: str = "1m", since: Optional[int] = None,
                    limit: Optional[int] = None) -> List[OHLCV]:
        market = self.market(symbol)
        period = self.TIMEFRAMES.get(timeframe)
        if period is None:
            raise BadRequest(f"digifinex does not support timeframe {timeframe}")
        duration = parse_timeframe(timeframe)
        request: Dict[str, Any] = {"symbol": market.id, "period": period}
        if since is not None:
            start_time = since // 1000
            request["start_time"] = start_time
            if limit is not None:
                request["end_time"] = start_time + limit * duration
        elif limit is not None:
            request["start_time"] = seconds() - limit * duration
        response = self._request("kline", params=request)
        return parse_ohlcvs(safe_value(response, "data", []), since, limit)

    def get_supported_timeframes(self) -> List[str]:
        return list(self.TIMEFRAMES)

    # ==================== Account ====================

    def fetch_balance(self, params: Optional[Dict[str, Any]] = None) -> UnifiedBalance:
        path = self.ASSETS_ENDPOINTS[self._market_type(params)]
        response = self._request(path, api=PRIVATE, params=omit(params, "type"))
        return parse_balance(response)

    def fetch_my_trades(self, symbol: str, since: Optional[int] = None, limit: Optional[int] = None,
                        params: Optional[Dict[str, Any]] = None) -> List[UnifiedTrade]:
        market = self.market(symbol)
        request: Dict[str, Any] = {
            **omit(params, "type"),
            "market": self._market_type(params),
            "symbol": market.id,
        }
        if limit is not None:
            request["limit"] = limit
        response = self._request("{market}/mytrades", api=PRIVATE, params=request)
        return parse_trades(safe_value(response, "list", []), market, since, limit)

    # ==================== Orders ====================

    def create_order(self, symbol: str, type: str, side: str, amount: Any, price: Any = None,
                     params: Optional[Dict[str, Any]] = None) -> UnifiedOrder:
        """
        Place an order.

        Args:
            symbol: Canonical symbol (e.g., "BTC/USDT")
            type: "limit" or "market"
            side: "buy" or "sell"
            amount: Order amount, truncated to market precision
            price: Limit price, required unless type is "market"
            params: Extra request fields; "type" selects spot or margin

        Returns:
            UnifiedOrder with the requested symbol/side/type/amount/price
        """
        market = self.market(symbol)
        request: Dict[str, Any] = {
            **omit(params, "type"),
            "market": self._market_type(params),
            "symbol": market.id,
            "amount": self.amount_to_precision(symbol, amount),
        }
        suffix = ""
        if type == "market":
            suffix = "_market"
        else:
            if price is None:
                raise ArgumentsRequired(f"digifinex create_order requires a price for {type} orders")
            request["price"] = self.price_to_precision(symbol, price)
        request["type"] = side + suffix

        response = self._request("{market}/order/new", api=PRIVATE, method="POST", params=request)
        order = parse_order(response, market)
        logger.info(f"[DIGIFINEX] Created {type} {side} order {order.id} on {market.symbol}")
        # The exchange only echoes the order id back
        return replace(
            order,
            symbol=market.symbol,
            side=side,
            type=type,
            amount=Decimal(str(amount)),
            price=Decimal(str(price)) if price is not None else None,
        )

    def cancel_order(self, id: str, symbol: Optional[str] = None,
                     params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Cancel one order.

        Raises:
            OrderNotFound: Unless exactly one id is reported as canceled
        """
        request = {
            **omit(params, "type"),
            "market": self._market_type(params),
            "order_id": id,
        }
        response = self._request("{market}/order/cancel", api=PRIVATE, method="POST", params=request)
        canceled = safe_value(response, "success", [])
        # two successes for one id is treated as not found too
        if len(canceled) != 1:
            raise OrderNotFound(f"digifinex cancel_order {id} not found")
        logger.info(f"[DIGIFINEX] Canceled order {id}")
        return response

    def cancel_orders(self, ids: List[str], symbol: Optional[str] = None,
                      params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Cancel several orders in one request.

        Returns:
            Raw response with "success" and "error" id lists

        Raises:
            OrderNotFound: When no order was canceled
        """
        request = {
            **omit(params, "type"),
            "market": self._market_type(params),
            "order_id": ",".join(str(i) for i in ids),
        }
        response = self._request("{market}/order/cancel", api=PRIVATE, method="POST", params=request)
        canceled = safe_value(response, "success", [])
        if len(canceled) < 1:
            raise OrderNotFound("digifinex cancel_orders error")
        logger.info(f"[DIGIFINEX] Canceled {len(canceled)} of {len(ids)} orders")
        return response

    def fetch_order(self, id: str, symbol: Optional[str] = None,
                    params: Optional[Dict[str, Any]] = None) -> UnifiedOrder:
        """
        Fetch one order by id.

        Parsed without market context: the symbol comes from the order's own
        market id when that id is in the loaded catalog.
        """
        request = {
            **omit(params, "type"),
            "market": self._market_type(params),
            "order_id": id,
        }
        response = self._request("{market}/order", api=PRIVATE, params=request)
        data = safe_value(response, "data", response)
        if isinstance(data, list):
            if not data:
                raise OrderNotFound(f"digifinex fetch_order {id} not found")
            data = data[0]
        return parse_order(data, markets_by_id=self.markets_by_id)

    def _split_market_type(self, params: Optional[Dict[str, Any]]):
        """
        Separate a market type from order listing params.

        Order listings also accept "type" as a side filter (buy, sell_market, ...).
        """
        params = dict(params or {})
        if params.get("type") in DIGIFINEX_MARKET_TYPES:
            return params.pop("type"), params
        return self.config.default_type, params

    def _order_list(self, response: Any) -> List[Dict[str, Any]]:
        return safe_value(response, "data", safe_value(response, "orders", []))

    def fetch_open_orders(self, symbol: str, since: Optional[int] = None, limit: Optional[int] = None,
                          params: Optional[Dict[str, Any]] = None) -> List[UnifiedOrder]:
        # extra params: page (1-based), type (buy/sell/buy_market/sell_market)
        market = self.market(symbol)
        market_type, params = self._split_market_type(params)
        request = {
            **params,
            "market": market_type,
            "symbol": market.id,
        }
        response = self._request("{market}/order/current", api=PRIVATE, params=request)
        return parse_orders(self._order_list(response), market, since, limit)

    def fetch_closed_orders(self, symbol: str, since: Optional[int] = None, limit: Optional[int] = None,
                            params: Optional[Dict[str, Any]] = None) -> List[UnifiedOrder]:
        """
        Fetch finished orders.

        The exchange keeps roughly the last three days of history and filters
        by calendar date (UTC+8) only, so since is re-applied locally.
        """
        market = self.market(symbol)
        market_type, params = self._split_market_type(params)
        request = {
            **params,
            "market": market_type,
            "symbol": market.id,
        }
        if since is not None:
            request["date"] = self.date_utc8(since)
        response = self._request("{market}/order/history", api=PRIVATE, params=request)
        return parse_orders(self._order_list(response), market, since, limit)

    def date_utc8(self, timestamp_ms: int) -> str:
        return ymd(timestamp_ms + self.config.utc8_offset_ms)


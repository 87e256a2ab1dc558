"""
DigiFinex response normalizers.

Pure functions converting DigiFinex JSON shapes into the unified records
from base_adapter. Timestamps on the wire are seconds; unified timestamps
are milliseconds.
"""

from decimal import Decimal
from typing import Any, Dict, List, Optional

from .base_adapter import (
    OHLCV,
    BalanceEntry,
    MarketLimits,
    MarketPrecision,
    MinMax,
    TradeFee,
    UnifiedBalance,
    UnifiedMarket,
    UnifiedOrder,
    UnifiedOrderbook,
    UnifiedTicker,
    UnifiedTrade,
)
from .exchange_support import (
    filter_by_since_limit,
    iso8601,
    safe_decimal,
    safe_integer,
    safe_string,
    safe_value,
    seconds_to_ms,
)
from .symbol_mapper import SymbolMapper

ORDER_STATUSES = {
    "0": "open",
    "1": "open",  # partially filled
    "2": "closed",
    "3": "canceled",
    "4": "canceled",  # partially filled and canceled
}


def find_market(market_id: Optional[str], markets_by_id: Optional[Dict[str, UnifiedMarket]]) -> Optional[UnifiedMarket]:
    """Look up a market id as given, then upper- and lower-cased."""
    if not market_id or not markets_by_id:
        return None
    for candidate in (market_id, market_id.upper(), market_id.lower()):
        if candidate in markets_by_id:
            return markets_by_id[candidate]
    return None


# ==================== Markets ====================

def _build_market(raw: Dict[str, Any], market_id: Optional[str], base_id: Optional[str], quote_id: Optional[str],
                  precision: MarketPrecision, limits: MarketLimits) -> UnifiedMarket:
    # The documented status (TRADING/HALT/BREAK) reads HALT even for live
    # markets, so active is left unknown.
    return UnifiedMarket(
        id=market_id,
        symbol=SymbolMapper.to_symbol(base_id, quote_id),
        base=SymbolMapper.safe_currency_code(base_id),
        quote=SymbolMapper.safe_currency_code(quote_id),
        base_id=base_id,
        quote_id=quote_id,
        active=None,
        precision=precision,
        limits=limits,
        info=raw,
    )


def parse_market(raw: Dict[str, Any]) -> UnifiedMarket:
    """
    Parse an entry of the aggregate "markets" listing.

        {"volume_precision": 4, "price_precision": 2, "market": "btc_usdt",
         "min_amount": 2, "min_volume": 0.0001}
    """
    market_id = safe_string(raw, "market")
    base_id, quote_id = SymbolMapper.split_market_id(market_id)
    precision = MarketPrecision(
        amount=safe_integer(raw, "volume_precision"),
        price=safe_integer(raw, "price_precision"),
    )
    limits = MarketLimits(
        amount=MinMax(min=safe_decimal(raw, "min_volume")),
        price=MinMax(),
        cost=MinMax(min=safe_decimal(raw, "min_amount")),
    )
    return _build_market(raw, market_id, base_id, quote_id, precision, limits)


def parse_market_by_type(raw: Dict[str, Any]) -> UnifiedMarket:
    """
    Parse an entry of a per-type "{type}/symbols" listing.

        {"order_types": ["LIMIT", "MARKET"], "quote_asset": "USDT",
         "minimum_value": 2, "amount_precision": 4, "status": "TRADING",
         "minimum_amount": 0.001, "symbol": "LTC_USDT", "margin_rate": 0.3,
         "zone": "MAIN", "base_asset": "LTC", "price_precision": 2}
    """
    precision = MarketPrecision(
        amount=safe_integer(raw, "amount_precision"),
        price=safe_integer(raw, "price_precision"),
    )
    limits = MarketLimits(
        amount=MinMax(min=safe_decimal(raw, "minimum_amount")),
        price=MinMax(),
        cost=MinMax(min=safe_decimal(raw, "minimum_value")),
    )
    return _build_market(
        raw,
        safe_string(raw, "symbol"),
        safe_string(raw, "base_asset"),
        safe_string(raw, "quote_asset"),
        precision,
        limits,
    )


# ==================== Tickers ====================

def parse_ticker(ticker: Dict[str, Any], market: Optional[UnifiedMarket] = None) -> UnifiedTicker:
    """
    Parse a v2 ticker entry with the response "date" injected.

    DigiFinex "buy" is the best bid and "sell" the best ask.
    """
    timestamp = seconds_to_ms(safe_integer(ticker, "date"))
    last = safe_decimal(ticker, "last")
    return UnifiedTicker(
        symbol=market.symbol if market is not None else None,
        timestamp=timestamp,
        datetime=iso8601(timestamp),
        high=safe_decimal(ticker, "high"),
        low=safe_decimal(ticker, "low"),
        bid=safe_decimal(ticker, "buy"),
        ask=safe_decimal(ticker, "sell"),
        last=last,
        close=last,
        percentage=safe_decimal(ticker, "change"),
        base_volume=safe_decimal(ticker, "base_vol"),
        quote_volume=safe_decimal(ticker, "vol"),
        info=ticker,
    )


def parse_tickers(response: Dict[str, Any], markets_by_id: Optional[Dict[str, UnifiedMarket]] = None) -> Dict[str, UnifiedTicker]:
    """
    Parse a v2 ticker response keyed by reversed "quote_base" ids.

    Returns:
        Dict of canonical symbol -> UnifiedTicker
    """
    tickers = safe_value(response, "ticker", {})
    date = safe_integer(response, "date")
    result = {}
    for reversed_id, raw in tickers.items():
        entry = dict(raw)
        entry["date"] = date
        market_id = SymbolMapper.reverse_market_id(reversed_id)
        market = find_market(market_id, markets_by_id)
        ticker = parse_ticker(entry, market)
        if market is None:
            ticker.symbol = SymbolMapper.to_symbol(*SymbolMapper.split_market_id(market_id))
        if ticker.symbol is None:
            continue
        result[ticker.symbol] = ticker
    return result


# ==================== Trades ====================

def parse_trade(trade: Dict[str, Any], market: Optional[UnifiedMarket] = None) -> UnifiedTrade:
    """
    Parse a public trade or a private fill.

    Public:  {"date": 1564520003, "id": 1596149203, "amount": 0.7073,
              "type": "buy", "price": 0.02193}
    Private: {"symbol": "BTC_USDT", "order_id": "...", "id": 3494, "price": 7.1,
              "amount": 0.2, "fee": 0.0014, "fee_currency": "USDT",
              "timestamp": 1564520003, "side": "sell", "is_maker": true}
    """
    seconds = safe_integer(trade, "date")
    if seconds is None:
        seconds = safe_integer(trade, "timestamp")
    timestamp = seconds_to_ms(seconds)
    price = safe_decimal(trade, "price")
    amount = safe_decimal(trade, "amount")
    cost = price * amount if price is not None and amount is not None else None

    taker_or_maker = None
    is_maker = safe_value(trade, "is_maker")
    if is_maker is not None:
        taker_or_maker = "maker" if is_maker else "taker"

    fee = None
    fee_cost = safe_decimal(trade, "fee")
    if fee_cost is not None:
        fee = TradeFee(cost=fee_cost, currency=SymbolMapper.safe_currency_code(safe_string(trade, "fee_currency")))

    return UnifiedTrade(
        id=safe_string(trade, "id"),
        timestamp=timestamp,
        datetime=iso8601(timestamp),
        symbol=market.symbol if market is not None else None,
        side=safe_string(trade, "type", safe_string(trade, "side")),
        price=price,
        amount=amount,
        cost=cost,
        order=safe_string(trade, "order_id"),
        taker_or_maker=taker_or_maker,
        fee=fee,
        info=trade,
    )


def parse_trades(trades: List[Dict[str, Any]], market: Optional[UnifiedMarket] = None,
                 since: Optional[int] = None, limit: Optional[int] = None) -> List[UnifiedTrade]:
    return filter_by_since_limit([parse_trade(t, market) for t in trades], since, limit)


# ==================== Orders ====================

def parse_order_status(status: Optional[str]) -> Optional[str]:
    """Map a status code; unknown codes pass through unchanged."""
    return ORDER_STATUSES.get(status, status)


def parse_order(order: Dict[str, Any], market: Optional[UnifiedMarket] = None,
                markets_by_id: Optional[Dict[str, UnifiedMarket]] = None) -> UnifiedOrder:
    """
    Parse an order record.

    The unified type is always "limit"; the order's "type" field holds the
    side. Without a market, the order's own "symbol" is looked up in
    markets_by_id and symbol stays None when unresolved.
    """
    if market is None:
        market = find_market(safe_string(order, "symbol"), markets_by_id)
    timestamp = seconds_to_ms(safe_integer(order, "created_date"))
    amount = safe_decimal(order, "amount")
    filled = safe_decimal(order, "executed_amount")
    remaining = amount - filled if amount is not None and filled is not None else None
    return UnifiedOrder(
        id=str(order["order_id"]),
        timestamp=timestamp,
        datetime=iso8601(timestamp),
        last_trade_timestamp=seconds_to_ms(safe_integer(order, "finished_date")),
        symbol=market.symbol if market is not None else None,
        type="limit",
        side=safe_string(order, "type"),
        price=safe_decimal(order, "price"),
        average=safe_decimal(order, "avg_price"),
        amount=amount,
        filled=filled,
        remaining=remaining,
        status=parse_order_status(safe_string(order, "status")),
        info=order,
    )


def parse_orders(orders: List[Dict[str, Any]], market: Optional[UnifiedMarket] = None,
                 since: Optional[int] = None, limit: Optional[int] = None,
                 markets_by_id: Optional[Dict[str, UnifiedMarket]] = None) -> List[UnifiedOrder]:
    parsed = [parse_order(o, market, markets_by_id) for o in orders]
    return filter_by_since_limit(parsed, since, limit)


# ==================== Candles ====================

def parse_ohlcv(ohlcv: List[Any]) -> OHLCV:
    """
    Reorder a DigiFinex candle.

    Wire:    [timestamp_s, volume, close, high, low, open]
    Unified: [timestamp_ms, open, high, low, close, volume]
    """
    return [
        ohlcv[0] * 1000,
        ohlcv[5],
        ohlcv[3],
        ohlcv[4],
        ohlcv[2],
        ohlcv[1],
    ]


def parse_ohlcvs(ohlcvs: List[List[Any]], since: Optional[int] = None,
                 limit: Optional[int] = None) -> List[OHLCV]:
    result = sorted((parse_ohlcv(c) for c in ohlcvs), key=lambda c: c[0])
    if since is not None:
        result = [c for c in result if c[0] >= since]
    if limit is not None:
        result = result[:limit]
    return result


# ==================== Account ====================

def parse_balance(response: Dict[str, Any]) -> UnifiedBalance:
    """
    Parse an assets listing.

        {"code": 0, "list": [{"currency": "BTC", "free": 4723846.89, "frozen": 0}]}
    """
    result = UnifiedBalance(info=response)
    for balance in safe_value(response, "list", []):
        code = SymbolMapper.safe_currency_code(safe_string(balance, "currency"))
        result.currencies[code] = BalanceEntry(
            free=safe_decimal(balance, "free"),
            used=safe_decimal(balance, "frozen"),
        )
    return result


def _parse_levels(levels: List[List[Any]], descending: bool) -> List[List[Decimal]]:
    parsed = [[Decimal(str(price)), Decimal(str(amount))] for price, amount, *_ in levels]
    return sorted(parsed, key=lambda level: level[0], reverse=descending)


def parse_order_book(response: Dict[str, Any], symbol: str) -> UnifiedOrderbook:
    """
    Parse an order book snapshot.

        {"bids": [[9605.77, 0.0016]], "asks": [[9627.22, 0.025803]],
         "date": 1564509499, "code": 0}
    """
    timestamp = seconds_to_ms(safe_integer(response, "date"))
    return UnifiedOrderbook(
        symbol=symbol,
        timestamp=timestamp,
        datetime=iso8601(timestamp),
        bids=_parse_levels(safe_value(response, "bids", []), descending=True),
        asks=_parse_levels(safe_value(response, "asks", []), descending=False),
    )

"""
Base adapter interface for exchange integrations.

All exchange adapters must inherit from BaseExchangeAdapter and implement
the required methods for market data, account and order operations.
Values an exchange does not report stay None; they are never defaulted to zero.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Dict, List, Optional, Any
from dataclasses import dataclass, field

# [timestamp_ms, open, high, low, close, volume]
OHLCV = List[Any]


@dataclass
class MinMax:
    min: Optional[Decimal] = None
    max: Optional[Decimal] = None


@dataclass
class MarketLimits:
    amount: MinMax = field(default_factory=MinMax)
    price: MinMax = field(default_factory=MinMax)
    cost: MinMax = field(default_factory=MinMax)


@dataclass
class MarketPrecision:
    """Decimal places the exchange accepts."""
    amount: Optional[int] = None
    price: Optional[int] = None


@dataclass
class UnifiedMarket:
    """Unified tradable instrument."""
    id: Optional[str]  # Exchange-native id (e.g., "btc_usdt")
    symbol: Optional[str]  # Canonical "BASE/QUOTE", None if either asset is missing
    base: Optional[str]
    quote: Optional[str]
    base_id: Optional[str]
    quote_id: Optional[str]
    active: Optional[bool] = None  # None when the exchange status can't be trusted
    precision: MarketPrecision = field(default_factory=MarketPrecision)
    limits: MarketLimits = field(default_factory=MarketLimits)
    info: Dict[str, Any] = field(default_factory=dict)


@dataclass
class UnifiedTicker:
    """Unified point-in-time ticker snapshot."""
    symbol: Optional[str]
    timestamp: Optional[int]  # Milliseconds
    datetime: Optional[str]
    high: Optional[Decimal] = None
    low: Optional[Decimal] = None
    bid: Optional[Decimal] = None
    ask: Optional[Decimal] = None
    last: Optional[Decimal] = None
    close: Optional[Decimal] = None
    percentage: Optional[Decimal] = None
    base_volume: Optional[Decimal] = None
    quote_volume: Optional[Decimal] = None
    info: Dict[str, Any] = field(default_factory=dict)


@dataclass
class TradeFee:
    cost: Optional[Decimal]
    currency: Optional[str]


@dataclass
class UnifiedTrade:
    """Unified trade data structure."""
    id: Optional[str]
    timestamp: Optional[int]  # Milliseconds
    datetime: Optional[str]
    symbol: Optional[str]
    side: Optional[str]  # "buy" or "sell"
    price: Optional[Decimal]
    amount: Optional[Decimal]
    cost: Optional[Decimal]  # price * amount when both known
    order: Optional[str] = None
    taker_or_maker: Optional[str] = None
    fee: Optional[TradeFee] = None
    info: Dict[str, Any] = field(default_factory=dict)


@dataclass
class UnifiedOrder:
    """Unified order structure. Orders are re-fetched, never tracked locally."""
    id: str
    timestamp: Optional[int]  # Milliseconds
    datetime: Optional[str]
    last_trade_timestamp: Optional[int]
    symbol: Optional[str]
    type: Optional[str]  # "limit" or "market"
    side: Optional[str]
    price: Optional[Decimal]
    average: Optional[Decimal]
    amount: Optional[Decimal]
    filled: Optional[Decimal]
    remaining: Optional[Decimal]
    status: Optional[str]  # "open", "closed", "canceled" or the raw code
    info: Dict[str, Any] = field(default_factory=dict)


@dataclass
class BalanceEntry:
    free: Optional[Decimal] = None
    used: Optional[Decimal] = None

    @property
    def total(self) -> Optional[Decimal]:
        if self.free is None or self.used is None:
            return None
        return self.free + self.used


@dataclass
class UnifiedBalance:
    """Per-currency balances, rebuilt fully on every query."""
    currencies: Dict[str, BalanceEntry] = field(default_factory=dict)
    info: Dict[str, Any] = field(default_factory=dict)

    def __getitem__(self, code: str) -> BalanceEntry:
        return self.currencies[code]

    def __contains__(self, code: str) -> bool:
        return code in self.currencies

    @property
    def free(self) -> Dict[str, Optional[Decimal]]:
        return {code: entry.free for code, entry in self.currencies.items()}

    @property
    def used(self) -> Dict[str, Optional[Decimal]]:
        return {code: entry.used for code, entry in self.currencies.items()}

    @property
    def total(self) -> Dict[str, Optional[Decimal]]:
        return {code: entry.total for code, entry in self.currencies.items()}


@dataclass
class UnifiedOrderbook:
    """Unified orderbook snapshot; levels are [price, amount]."""
    symbol: str
    timestamp: Optional[int]  # Milliseconds
    datetime: Optional[str]
    bids: List[List[Decimal]]  # Best (highest) first
    asks: List[List[Decimal]]  # Best (lowest) first


class BaseExchangeAdapter(ABC):
    """
    Abstract base class for exchange adapters.

    Each exchange adapter must implement these methods to provide
    unified access across different exchanges.
    """

    def __init__(self):
        self.exchange_name = self._get_exchange_name()

    @abstractmethod
    def _get_exchange_name(self) -> str:
        """Return the exchange name (e.g., 'digifinex')."""
        pass

    # ==================== Market Data Methods ====================

    @abstractmethod
    def load_markets(self, reload: bool = False) -> Dict[str, UnifiedMarket]:
        """
        Load the market catalog, cached until reload is requested.

        Returns:
            Dict of canonical symbol -> UnifiedMarket
        """
        pass

    @abstractmethod
    def fetch_ticker(self, symbol: str, params: Optional[Dict[str, Any]] = None) -> UnifiedTicker:
        pass

    @abstractmethod
    def fetch_tickers(
        self, symbols: Optional[List[str]] = None, params: Optional[Dict[str, Any]] = None
    ) -> Dict[str, UnifiedTicker]:
        pass

    @abstractmethod
    def fetch_order_book(self, symbol: str, limit: Optional[int] = None) -> UnifiedOrderbook:
        pass

    @abstractmethod
    def fetch_trades(
        self, symbol: str, since: Optional[int] = None, limit: Optional[int] = None
    ) -> List[UnifiedTrade]:
        pass

    @abstractmethod
    def fetch_ohlcv(
        self,
        symbol: str,
        timeframe: str = "1m",
        since: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[OHLCV]:
        """
        Fetch candles as [timestamp_ms, open, high, low, close, volume].

        Args:
            symbol: Canonical symbol (e.g., "BTC/USDT")
            timeframe: Unified timeframe ("1m", "1h", ...)
            since: Start timestamp in milliseconds (optional)
            limit: Number of candles (optional)
        """
        pass

    # ==================== Account / Order Methods ====================

    @abstractmethod
    def fetch_balance(self, params: Optional[Dict[str, Any]] = None) -> UnifiedBalance:
        pass

    @abstractmethod
    def create_order(
        self,
        symbol: str,
        type: str,
        side: str,
        amount: Any,
        price: Any = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> UnifiedOrder:
        pass

    @abstractmethod
    def cancel_order(
        self, id: str, symbol: Optional[str] = None, params: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        pass

    @abstractmethod
    def fetch_order(
        self, id: str, symbol: Optional[str] = None, params: Optional[Dict[str, Any]] = None
    ) -> UnifiedOrder:
        pass

    @abstractmethod
    def fetch_open_orders(
        self,
        symbol: str,
        since: Optional[int] = None,
        limit: Optional[int] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> List[UnifiedOrder]:
        pass

    @abstractmethod
    def fetch_closed_orders(
        self,
        symbol: str,
        since: Optional[int] = None,
        limit: Optional[int] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> List[UnifiedOrder]:
        pass

    # ==================== Optional Methods ====================

    def cancel_orders(
        self, ids: List[str], symbol: Optional[str] = None, params: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Cancel several orders in one request.
        Not all exchanges support this.
        """
        raise NotImplementedError(f"{self.exchange_name} does not support cancel_orders")

    def fetch_my_trades(
        self,
        symbol: str,
        since: Optional[int] = None,
        limit: Optional[int] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> List[UnifiedTrade]:
        """
        Fetch the account's own fills.
        Not all exchanges support this.
        """
        raise NotImplementedError(f"{self.exchange_name} does not support fetch_my_trades")

"""
Symbol mapping utilities for multi-exchange support.

Handles conversion between the canonical symbol format (e.g., "ETH/BTC")
and DigiFinex market ids (e.g., "eth_btc", or the reversed "btc_eth"
quote-first form used by the legacy v2 ticker endpoint).
"""

from typing import Optional, Tuple


class SymbolMapper:
    """
    Mapper for exchange-native symbol and currency formats.

    Canonical format: "BASE/QUOTE" with upper-case currency codes
    DigiFinex v3 format: "base_quote" (e.g., "btc_usdt" or "LTC_USDT")
    DigiFinex v2 ticker format: "quote_base" (e.g., "btc_eth" for ETH/BTC)
    """

    # Exchange-native tickers that differ from the common currency code
    COMMON_CURRENCIES = {
        "XBT": "BTC",
        "BCC": "BCH",
        "BCHABC": "BCH",
        "BCHSV": "BSV",
        "DRK": "DASH",
    }

    SEPARATOR = "_"

    @classmethod
    def safe_currency_code(cls, currency_id: Optional[str]) -> Optional[str]:
        """
        Convert an exchange asset ticker to a common currency code.

        Args:
            currency_id: Exchange asset (e.g., "btc", "XBT")

        Returns:
            Common code (e.g., "BTC"), None if the id is missing
        """
        if currency_id is None:
            return None
        code = currency_id.upper()
        return cls.COMMON_CURRENCIES.get(code, code)

    @classmethod
    def split_market_id(cls, market_id: Optional[str]) -> Tuple[Optional[str], Optional[str]]:
        """Split "base_quote" on the first separator."""
        if market_id is None:
            return None, None
        parts = market_id.split(cls.SEPARATOR, 1)
        if len(parts) < 2:
            return parts[0], None
        return parts[0], parts[1]

    @classmethod
    def to_symbol(cls, base_id: Optional[str], quote_id: Optional[str]) -> Optional[str]:
        """Build the canonical symbol from exchange asset ids, None if either is missing."""
        if not base_id or not quote_id:
            return None
        base = cls.safe_currency_code(base_id)
        quote = cls.safe_currency_code(quote_id)
        return f"{base}/{quote}"

    @classmethod
    def reverse_market_id(cls, market_id: str) -> str:
        """
        Swap the two halves of a market id.

        "btc_eth" (v2 quote_base) <-> "eth_btc" (v3 base_quote)
        """
        first, second = cls.split_market_id(market_id)
        if second is None:
            return market_id
        return f"{second}{cls.SEPARATOR}{first}"

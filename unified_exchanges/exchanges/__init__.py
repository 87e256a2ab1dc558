"""
Exchange adapters for multi-exchange support.

This module provides a unified interface for interacting with different
cryptocurrency exchanges. Each exchange has its own adapter that handles
request signing, format conversion, and order execution.

Supported exchanges:
- DigiFinex (spot REST API)
"""

from .base_adapter import BaseExchangeAdapter
from .symbol_mapper import SymbolMapper
from .digifinex_adapter import DigiFinexAdapter
from .http_transport import HttpTransport

__all__ = [
    "BaseExchangeAdapter",
    "SymbolMapper",
    "DigiFinexAdapter",
    "HttpTransport",
]

from pydantic import BaseModel
import os


class DigiFinexConfig(BaseModel):
    """DigiFinex REST API configuration"""
    api_key: str = ""
    secret: str = ""
    base_url: str = "https://openapi.digifinex.vip"
    version: str = "v3"
    legacy_version: str = "v2"  # ticker family only
    timeout: float = 10.0  # seconds
    enable_rate_limit: bool = True
    rate_limit_ms: int = 900  # 300 would be enough for POSTs
    default_type: str = "spot"  # spot, margin or otc
    utc8_offset_ms: int = 8 * 60 * 60 * 1000  # order history dates are UTC+8


# DigiFinex configuration from environment (credentials empty if unset)
DIGIFINEX_CONFIG = DigiFinexConfig(
    api_key=os.getenv("DIGIFINEX_API_KEY", ""),
    secret=os.getenv("DIGIFINEX_SECRET", ""),
    base_url=os.getenv("DIGIFINEX_BASE_URL", "https://openapi.digifinex.vip"),
    timeout=float(os.getenv("DIGIFINEX_TIMEOUT", "10")),
    rate_limit_ms=int(os.getenv("DIGIFINEX_RATE_LIMIT_MS", "900")),
    default_type=os.getenv("DIGIFINEX_DEFAULT_TYPE", "spot"),
)

# Market types with their own symbol/asset listing endpoints
DIGIFINEX_MARKET_TYPES = ("spot", "margin", "otc")

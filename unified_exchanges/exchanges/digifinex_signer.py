"""
DigiFinex request signer.

Builds the outgoing URL, headers and body for a REST call. Private calls
carry an HMAC-SHA256 signature over the key-sorted urlencoded parameters.
The exchange does not bind the timestamp into the signed payload; it is
only sent alongside as ACCESS-TIMESTAMP.
"""

import hashlib
import hmac
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple
from urllib.parse import urlencode

from .errors import AuthenticationError
from .exchange_support import milliseconds

PLACEHOLDER = re.compile(r"\{([^}]+)\}")

PUBLIC = "public"
PRIVATE = "private"
V2 = "v2"


@dataclass
class SignedRequest:
    url: str
    method: str
    headers: Dict[str, str]
    body: Optional[str] = None


def extract_params(path: str) -> List[str]:
    """Return placeholder names in a path template, e.g. ["market"]."""
    return PLACEHOLDER.findall(path)


def implode_params(path: str, params: Dict[str, Any]) -> str:
    """Substitute {placeholder} segments from matching parameter keys."""
    return PLACEHOLDER.sub(lambda m: str(params.get(m.group(1), m.group(0))), path)


def keysort_urlencode(params: Dict[str, Any]) -> str:
    """
    Urlencode parameters in key order.

    Sorting keeps the signed string identical regardless of insertion order.
    """
    return urlencode(sorted(params.items(), key=lambda item: item[0]))


class DigiFinexSigner:
    """
    Request builder with HMAC authentication for private endpoints.

    Args:
        api_key: DigiFinex API key
        secret: DigiFinex API secret
        base_url: API host, e.g. "https://openapi.digifinex.vip"
        version: Default path version ("v3")
        legacy_version: Version segment of the "v2" endpoint family
        nonce: Callable producing the ACCESS-TIMESTAMP value
    """

    def __init__(
        self,
        api_key: str,
        secret: str,
        base_url: str,
        version: str = "v3",
        legacy_version: str = "v2",
        nonce: Callable[[], int] = milliseconds,
    ):
        self.api_key = api_key
        self.secret = secret
        self.base_url = base_url.rstrip("/")
        self.version = version
        self.legacy_version = legacy_version
        self.nonce = nonce

    def hmac_sign(self, payload: str) -> str:
        """
        Generate HMAC SHA256 signature for a payload.

        Returns:
            Hex-encoded signature string
        """
        return hmac.new(
            self.secret.encode("utf-8"),
            payload.encode("utf-8"),
            hashlib.sha256,
        ).hexdigest()

    def _split_params(self, path: str, params: Dict[str, Any]) -> Tuple[str, Dict[str, Any]]:
        consumed = extract_params(path)
        query = {k: v for k, v in params.items() if k not in consumed}
        return implode_params(path, params), query

    def sign(
        self,
        path: str,
        api: str = PUBLIC,
        method: str = "GET",
        params: Optional[Dict[str, Any]] = None,
    ) -> SignedRequest:
        """
        Build a request for an endpoint.

        Args:
            path: Path template, e.g. "{market}/order/new"
            api: "public", "private" or "v2"
            method: "GET" or "POST"
            params: Request parameters, placeholders included

        Returns:
            SignedRequest with url, method, headers and body

        Raises:
            AuthenticationError: Private call without api key and secret
        """
        params = params or {}
        version = self.legacy_version if api == V2 else self.version
        path, query = self._split_params(path, params)
        url = f"{self.base_url}/{version}/{path}"
        urlencoded = keysort_urlencode(query)
        headers: Dict[str, str] = {}
        body = None

        if api == PRIVATE:
            if not self.api_key or not self.secret:
                raise AuthenticationError("digifinex requires `api_key` and `secret` credentials")
            nonce = str(self.nonce())
            signature = self.hmac_sign(urlencoded)
            if method == "POST":
                headers["Content-Type"] = "application/x-www-form-urlencoded"
                if urlencoded:
                    body = urlencoded
            elif urlencoded:
                url += "?" + urlencoded
            headers.update({
                "ACCESS-KEY": self.api_key,
                "ACCESS-SIGN": signature,
                "ACCESS-TIMESTAMP": nonce,
            })
        elif urlencoded:
            url += "?" + urlencoded

        return SignedRequest(url=url, method=method, headers=headers, body=body)

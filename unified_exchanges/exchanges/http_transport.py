"""
HTTP transport for exchange REST APIs.

Wraps a requests.Session with a timeout and a minimum spacing between
requests. Requests are not retried.
"""

import json
import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from .errors import NetworkError, RequestTimeout

logger = logging.getLogger(__name__)


@dataclass
class TransportResponse:
    status_code: int
    text: str
    data: Any  # Decoded JSON, None when the body is empty or not JSON


class HttpTransport:
    """
    Blocking HTTP transport with connection pooling.

    Args:
        timeout: Request timeout in seconds
        rate_limit_ms: Minimum spacing between requests in milliseconds
        enable_rate_limit: Disable to send without spacing
        session: Optional pre-configured requests.Session
    """

    def __init__(
        self,
        timeout: float = 10.0,
        rate_limit_ms: int = 900,
        enable_rate_limit: bool = True,
        session: Optional[requests.Session] = None,
    ):
        self.timeout = timeout
        self.rate_limit_ms = rate_limit_ms
        self.enable_rate_limit = enable_rate_limit
        self.session = session or requests.Session()
        self._last_request_time: float = 0
        self._lock = threading.Lock()

    def _throttle(self):
        if not self.enable_rate_limit:
            return
        with self._lock:
            elapsed = time.monotonic() - self._last_request_time
            delay = self.rate_limit_ms / 1000 - elapsed
            if delay > 0:
                time.sleep(delay)
            self._last_request_time = time.monotonic()

    def fetch(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        body: Optional[str] = None,
    ) -> TransportResponse:
        """
        Send a prepared request.

        Raises:
            RequestTimeout: When the request times out
            NetworkError: On any other transport failure
        """
        self._throttle()
        # query strings may carry an api key
        endpoint = url.split("?", 1)[0]
        try:
            response = self.session.request(
                method, url, headers=headers, data=body, timeout=self.timeout
            )
        except requests.exceptions.Timeout as e:
            logger.error(f"[HTTP] {method} {endpoint} timed out")
            raise RequestTimeout(f"{method} {endpoint} timed out") from e
        except requests.exceptions.RequestException as e:
            logger.error(f"[HTTP] {method} {endpoint} failed - {type(e).__name__}")
            raise NetworkError(f"{method} {endpoint} failed") from e

        text = response.text or ""
        data = None
        if text:
            try:
                data = json.loads(text)
            except ValueError:
                logger.debug(f"[HTTP] {method} {endpoint} returned non-JSON body")
        return TransportResponse(status_code=response.status_code, text=text, data=data)

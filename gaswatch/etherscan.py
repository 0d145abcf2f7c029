"""Etherscan API client supplying gas oracle samples, ETH price and block height."""

import math
from datetime import datetime
from typing import Any, Callable

import requests

from .constants import DEFAULT_ETHERSCAN_URL, DEFAULT_HTTP_TIMEOUT_SECS, LABEL_TIME_FORMAT
from .models import GasSample


class FetchError(Exception):
    """Raised when a request fails or Etherscan returns an unusable payload."""
    def __init__(self, action: str, message: str):
        self.action = action
        self.message = message
        super().__init__(f"{action}: {message}")


def _parse_price(value: Any, field: str, action: str) -> float:
    try:
        price = float(value)
    except (TypeError, ValueError):
        raise FetchError(action, f"field {field!r} is not a number: {value!r}")
    if not math.isfinite(price) or price < 0:
        raise FetchError(action, f"field {field!r} is out of range: {value!r}")
    return price


class EtherscanClient:
    """Etherscan HTTP client with persistent session."""

    def __init__(
        self,
        api_key: str,
        url: str = DEFAULT_ETHERSCAN_URL,
        timeout: float = DEFAULT_HTTP_TIMEOUT_SECS,
        clock: Callable[[], datetime] = datetime.now,
        session: requests.Session = None,
    ):
        """
        Initialize client.

        Args:
            api_key: Etherscan API key (may be empty for rate-limited access)
            url: API base URL
            timeout: Per-request timeout in seconds
            clock: Wall-clock source used to label samples
            session: Optional preconfigured requests session
        """
        self.url = url
        self.api_key = api_key
        self.timeout = timeout
        self._clock = clock
        self.session = session or requests.Session()

    def call(self, module: str, action: str) -> Any:
        """
        Make an API call and return its ``result`` field.

        Args:
            module: Etherscan module name (e.g., "gastracker")
            action: Etherscan action name (e.g., "gasoracle")

        Returns:
            The ``result`` member of the response

        Raises:
            FetchError: On transport errors, HTTP error statuses, or API errors
        """
        params = {"module": module, "action": action, "apikey": self.api_key}
        try:
            response = self.session.get(self.url, params=params, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as e:
            raise FetchError(action, f"request failed: {e}") from e
        except ValueError as e:
            raise FetchError(action, f"invalid JSON: {e}") from e

        if not isinstance(payload, dict):
            raise FetchError(action, f"unexpected payload: {payload!r}")

        if payload.get("error"):
            raise FetchError(action, str(payload["error"]))

        # The proxy module answers in JSON-RPC form without a status field
        if str(payload.get("status", "1")) == "0":
            detail = payload.get("result") or payload.get("message", "unknown error")
            raise FetchError(action, str(detail))

        if "result" not in payload:
            raise FetchError(action, "response has no result")
        return payload["result"]

    def fetch_gas_oracle(self) -> GasSample:
        """
        Fetch the current safe/propose/fast gas prices.

        Returns:
            GasSample labelled with the local wall-clock time of the fetch
        """
        action = "gasoracle"
        result = self.call("gastracker", action)
        if not isinstance(result, dict):
            raise FetchError(action, f"unexpected result: {result!r}")

        base_fee = None
        if result.get("suggestBaseFee") not in (None, ""):
            base_fee = _parse_price(result["suggestBaseFee"], "suggestBaseFee", action)

        return GasSample(
            low=_parse_price(result.get("SafeGasPrice"), "SafeGasPrice", action),
            avg=_parse_price(result.get("ProposeGasPrice"), "ProposeGasPrice", action),
            high=_parse_price(result.get("FastGasPrice"), "FastGasPrice", action),
            timestamp=self._clock().strftime(LABEL_TIME_FORMAT),
            base_fee=base_fee,
        )

    def fetch_eth_usd_price(self) -> float:
        action = "ethprice"
        result = self.call("stats", action)
        if not isinstance(result, dict):
            raise FetchError(action, f"unexpected result: {result!r}")
        return _parse_price(result.get("ethusd"), "ethusd", action)

    def fetch_latest_block_number(self) -> int:
        action = "eth_blockNumber"
        result = self.call("proxy", action)
        try:
            return int(result, 16)
        except (TypeError, ValueError):
            raise FetchError(action, f"block number is not hex: {result!r}")

    def close(self) -> None:
        self.session.close()


"""Tests for the Etherscan client."""

from datetime import datetime
from unittest.mock import Mock
import pytest
import requests
from gaswatch.etherscan import EtherscanClient, FetchError


def _client(payload=None, side_effect=None) -> EtherscanClient:
    session = Mock(spec=requests.Session)
    response = Mock()
    response.json.return_value = payload
    response.raise_for_status.return_value = None
    session.get.return_value = response
    if side_effect is not None:
        session.get.side_effect = side_effect
    return EtherscanClient("KEY", clock=lambda: datetime(2024, 1, 1, 9, 5, 7), session=session)


def test_fetch_gas_oracle():
    """Test parsing a gas oracle response."""
    client = _client({
        "status": "1",
        "message": "OK",
        "result": {
            "LastBlock": "19000000",
            "SafeGasPrice": "21.5",
            "ProposeGasPrice": "22",
            "FastGasPrice": "25.25",
            "suggestBaseFee": "20.9",
        },
    })

    sample = client.fetch_gas_oracle()

    assert (sample.low, sample.avg, sample.high) == (21.5, 22.0, 25.25)
    assert sample.base_fee == 20.9
    assert sample.timestamp == "09:05:07"
    _, kwargs = client.session.get.call_args
    assert kwargs["params"] == {"module": "gastracker", "action": "gasoracle", "apikey": "KEY"}


def test_fetch_gas_oracle_api_error():
    """Test that status 0 responses raise FetchError."""
    client = _client({"status": "0", "message": "NOTOK", "result": "Invalid API Key"})
    with pytest.raises(FetchError) as exc:
        client.fetch_gas_oracle()
    assert exc.value.action == "gasoracle"
    assert "Invalid API Key" in str(exc.value)


def test_fetch_gas_oracle_malformed_price():
    """Test that non-numeric prices raise FetchError."""
    client = _client({"status": "1", "result": {
        "SafeGasPrice": "abc", "ProposeGasPrice": "1", "FastGasPrice": "2",
    }})
    with pytest.raises(FetchError):
        client.fetch_gas_oracle()


def test_fetch_gas_oracle_transport_error():
    """Test that request exceptions are wrapped in FetchError."""
    client = _client(side_effect=requests.ConnectionError("down"))
    with pytest.raises(FetchError):
        client.fetch_gas_oracle()


def test_fetch_gas_oracle_invalid_json():
    """Test that an undecodable body raises FetchError."""
    client = _client()
    client.session.get.return_value.json.side_effect = ValueError("no json")
    with pytest.raises(FetchError):
        client.fetch_gas_oracle()


def test_fetch_eth_usd_price():
    """Test parsing the ETH price response."""
    client = _client({"status": "1", "result": {"ethbtc": "0.05", "ethusd": "3012.44"}})
    assert client.fetch_eth_usd_price() == 3012.44


def test_fetch_latest_block_number():
    """Test decoding the hex block number from the proxy module."""
    client = _client({"jsonrpc": "2.0", "id": 83, "result": "0x10d4f"})
    assert client.fetch_latest_block_number() == 68943


def test_fetch_latest_block_number_rpc_error():
    """Test that JSON-RPC errors raise FetchError."""
    client = _client({"jsonrpc": "2.0", "id": 1, "error": {"code": -32000, "message": "bad"}})
    with pytest.raises(FetchError):
        client.fetch_latest_block_number()


def test_fetch_latest_block_number_not_hex():
    """Test that a non-hex block result raises FetchError."""
    client = _client({"status": "1", "result": "Max rate limit reached"})
    with pytest.raises(FetchError):
        client.fetch_latest_block_number()

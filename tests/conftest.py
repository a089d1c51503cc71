"""Pytest configuration and shared fixtures"""
import json
import pytest
from datetime import datetime, timezone
from unittest.mock import MagicMock

from promexport.http_client import PrometheusHttpClient, QueryTarget
from promexport.query import Series
from promexport.resolution import TimeWindow


# Shape of a real Prometheus /api/v1/query_range response
MATRIX_RESPONSE = {
    "status": "success",
    "data": {
        "resultType": "matrix",
        "result": [
            {
                "metric": {"__name__": "up", "job": "prometheus", "instance": "localhost:9090"},
                "values": [
                    [1435781430.781, "1"],
                    [1435781445.781, "1"],
                    [1435781460.781, "1"]
                ]
            },
            {
                "metric": {"instance": "localhost:9091", "job": "node", "__name__": "up"},
                "values": [
                    [1435781430.781, "0"],
                    [1435781460.781, "1"]
                ]
            }
        ]
    }
}


def _make_response(payload, status=200, reason="OK"):
    """Mock urlopen() result usable as a context manager"""
    body = payload if isinstance(payload, bytes) else json.dumps(payload).encode()
    mock_response = MagicMock()
    mock_response.status = status
    mock_response.reason = reason
    mock_response.read.return_value = body
    mock_response.__enter__.return_value = mock_response
    mock_response.__exit__.return_value = False
    return mock_response


@pytest.fixture
def make_response():
    """Factory for mocked HTTP responses"""
    return _make_response


@pytest.fixture
def matrix_response():
    return json.loads(json.dumps(MATRIX_RESPONSE))


@pytest.fixture
def window():
    """10 minute window starting at the epoch"""
    start = datetime(1970, 1, 1, 0, 0, tzinfo=timezone.utc)
    end = datetime(1970, 1, 1, 0, 10, tzinfo=timezone.utc)
    return TimeWindow(start=start, end=end)


@pytest.fixture
def client():
    return PrometheusHttpClient("http://prometheus:9090")


@pytest.fixture
def gateway_client():
    return PrometheusHttpClient(
        "https://gateway.example.com:8443",
        target=QueryTarget.gateway("Bearer secret-token"),
    )


@pytest.fixture
def two_series():
    """up{job="a"} with samples at 0 and 300, up{job="b"} only at 0"""
    return [
        Series(display_name='up{job="a"}', samples={0: "1", 300: "1"}),
        Series(display_name='up{job="b"}', samples={0: "0"}),
    ]

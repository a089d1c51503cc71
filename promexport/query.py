"""
Range query execution and matrix decoding.

Issues one query_range request and turns the matrix result into a list
of Series keyed by integer Unix timestamps.
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Mapping

from pydantic import ValidationError

from .errors import DecodeError, EmptyResult, UnsupportedResultType
from .http_client import PrometheusHttpClient
from .labels import metric_name
from .resolution import TimeWindow
from .schemas import MatrixSeries, QueryRangeResponse

logger = logging.getLogger("promexport.query")

MATRIX_RESULT_TYPE = "matrix"


@dataclass(frozen=True)
class Series:
    """Single time series: display name and sparse timestamp -> value map"""
    display_name: str
    samples: Mapping[int, str] = field(default_factory=dict)

    def __post_init__(self):
        # Read-only view so a decoded series cannot change after construction
        object.__setattr__(self, "samples", MappingProxyType(dict(self.samples)))


def build_params(query: str, window: TimeWindow) -> Dict[str, str]:
    """Query parameters for a query_range request."""
    return {
        "query": query,
        "start": str(window.start_unix),
        "end": str(window.end_unix),
        "step": str(window.resolved_step),
    }


def decode_matrix(body: bytes, query: str) -> List[Series]:
    """
    Decode a query_range response body.

    Args:
        body: Raw JSON response body
        query: Query expression, used in error messages

    Returns:
        Series in response order

    Raises:
        DecodeError: Invalid JSON or unexpected response shape
        UnsupportedResultType: Result is not a matrix
        EmptyResult: Matrix contains no series
    """
    try:
        response = QueryRangeResponse.model_validate_json(body)
    except ValidationError as e:
        raise DecodeError(f"invalid query_range response: {e}") from e

    for warning in response.warnings or []:
        logger.warning("prometheus warning for %s: %s", query, warning)

    if response.data.resultType != MATRIX_RESULT_TYPE:
        raise UnsupportedResultType(response.data.resultType)

    if not response.data.result:
        raise EmptyResult(query)

    results = []
    for raw in response.data.result:
        try:
            matrix = MatrixSeries.model_validate(raw)
        except ValidationError as e:
            raise DecodeError(f"invalid series in query_range response: {e}") from e

        samples = {round(timestamp): value for timestamp, value in matrix.values}
        results.append(Series(display_name=metric_name(matrix.metric), samples=samples))

    return results


def query_range(client: PrometheusHttpClient, query: str, window: TimeWindow) -> List[Series]:
    """
    Run a range query and return its series.

    Exactly one request is made; any failure propagates to the caller.
    """
    params = build_params(query, window)
    body = client.get(params)
    results = decode_matrix(body, query)
    logger.info("query %s returned %d series (step=%ss)", query, len(results), params["step"])
    return results

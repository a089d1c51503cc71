"""
promexport - Prometheus range query export

Modules split by concern:
- http_client.py: request construction, auth header, TLS trust
- query.py: range query execution and matrix decoding
- labels.py: label set display names
- resolution.py: query step selection and time windows
- alignment.py: merging series onto a shared timestamp axis
- writers.py: CSV and matplotlib output
"""

from .alignment import AlignedGrid, align_series
from .errors import (
    DecodeError,
    EmptyResult,
    PromExportError,
    RequestFailed,
    TransportError,
    TrustLoadError,
    UnsupportedResultType,
    UrlParseError,
)
from .http_client import PrometheusHttpClient, QueryTarget
from .labels import metric_name
from .query import Series, query_range
from .resolution import TimeWindow, select_step
from .writers import (
    WRITERS,
    csv_header_writer,
    csv_writer,
    matplotlib_legend_writer,
    matplotlib_writer,
    write_series,
)

__all__ = [
    # Query
    'PrometheusHttpClient',
    'QueryTarget',
    'Series',
    'TimeWindow',
    'query_range',
    'select_step',
    'metric_name',

    # Alignment and output
    'AlignedGrid',
    'align_series',
    'WRITERS',
    'csv_header_writer',
    'csv_writer',
    'matplotlib_writer',
    'matplotlib_legend_writer',
    'write_series',

    # Errors
    'PromExportError',
    'UrlParseError',
    'TrustLoadError',
    'TransportError',
    'RequestFailed',
    'DecodeError',
    'UnsupportedResultType',
    'EmptyResult',
]

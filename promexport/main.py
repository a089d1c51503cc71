#!/usr/bin/env python3
"""
promexport - export Prometheus range queries as CSV or matplotlib scripts

Flow:
- load YAML config, apply CLI overrides, fall back to PROMEXPORT_TOKEN
- build one HTTP client (URL and CA bundle validated up front)
- run each --query sequentially over the same window
- render every successful query with the selected writers

Exit codes: 0 all queries rendered, 1 at least one query failed,
2 invalid configuration, host, CA bundle, time window or output file.
"""

import argparse
import logging
import re
import sys
from contextlib import nullcontext
from datetime import datetime, timedelta
from pathlib import Path
from typing import List, Optional, TextIO

import yaml

from .config import OUTPUT_FORMATS, ExportConfig, load_config_from
from .errors import EmptyResult, PromExportError
from .http_client import PrometheusHttpClient, QueryTarget
from .query import query_range
from .resolution import TimeWindow
from .writers import write_series

logger = logging.getLogger("promexport")

DEFAULT_SINCE = "1h"
_DURATION_RE = re.compile(r"(\d+)([smhdw])")
_DURATION_UNITS = {"s": 1, "m": 60, "h": 3600, "d": 86400, "w": 604800}


def parse_duration(value: str) -> timedelta:
    """Convert a human duration (e.g. '90s', '15m', '24h', '7d') to a timedelta."""
    m = _DURATION_RE.fullmatch(value.strip())
    if not m:
        raise ValueError(f"invalid duration {value!r} (expected e.g. 15m, 2h, 7d)")
    amount, unit = int(m.group(1)), m.group(2)
    return timedelta(seconds=amount * _DURATION_UNITS[unit])


def parse_time(value: str) -> datetime:
    """Parse Unix seconds or ISO-8601; naive times are local time."""
    try:
        return datetime.fromtimestamp(float(value)).astimezone()
    except (ValueError, OverflowError, OSError):
        pass
    try:
        return datetime.fromisoformat(value).astimezone()
    except ValueError:
        raise ValueError(f"invalid time {value!r} (expected Unix seconds or ISO-8601)") from None


def resolve_window(start: Optional[str], end: Optional[str], since: Optional[str],
                   step: Optional[int], now: Optional[datetime] = None) -> TimeWindow:
    """Build the query window from CLI values; end defaults to now, start to end - since."""
    end_time = parse_time(end) if end else (now or datetime.now().astimezone())
    if start:
        start_time = parse_time(start)
    else:
        start_time = end_time - parse_duration(since or DEFAULT_SINCE)
    return TimeWindow(start=start_time, end=end_time, step=step)


def build_client(config: ExportConfig) -> PrometheusHttpClient:
    """Create the HTTP client for the configured deployment."""
    if config.gateway:
        target = QueryTarget.gateway(config.token)
    else:
        target = QueryTarget(token=config.token)
    return PrometheusHttpClient(
        config.host,
        target=target,
        ca_file=config.ca_file,
        verify_tls=config.verify_tls,
        timeout=config.timeout,
    )


def run_queries(client: PrometheusHttpClient, queries: List[str], window: TimeWindow,
                config: ExportConfig, out: TextIO) -> int:
    """
    Run every query independently and render its result.

    Returns:
        Number of failed queries
    """
    failures = 0
    for query in queries:
        try:
            series = query_range(client, query, window)
        except EmptyResult as e:
            if config.allow_empty:
                logger.warning("%s", e)
                continue
            logger.error("%s", e)
            failures += 1
            continue
        except PromExportError as e:
            logger.error("query %s failed: %s", query, e)
            failures += 1
            continue

        write_series(out, series, config.output_format)
    return failures


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Export Prometheus range queries as CSV or matplotlib scripts")
    parser.add_argument("-c", "--config", type=Path, default=Path("promexport.yaml"),
                        help="YAML configuration file (default: promexport.yaml)")
    parser.add_argument("--host", help="Prometheus base URL (e.g., https://prometheus:9090)")
    parser.add_argument("--token", help="Authorization header value (default: $PROMEXPORT_TOKEN)")
    parser.add_argument("--gateway", action="store_true",
                        help="query through a gateway serving Prometheus under /prometheus")
    parser.add_argument("--ca-file", dest="ca_file", help="PEM CA bundle trusted for the server certificate")
    parser.add_argument("--insecure", action="store_true", help="skip TLS certificate verification")
    parser.add_argument("--timeout", type=int, help="request timeout in seconds")
    parser.add_argument("-q", "--query", dest="queries", action="append", required=True,
                        help="PromQL expression; repeat for multiple queries")
    parser.add_argument("--start", help="window start (Unix seconds or ISO-8601)")
    parser.add_argument("--end", help="window end (Unix seconds or ISO-8601, default: now)")
    parser.add_argument("--since", help=f"window length when --start is omitted (default: {DEFAULT_SINCE})")
    parser.add_argument("--step", type=int, help="query resolution in seconds (default: derived from window)")
    parser.add_argument("-f", "--format", dest="output_format", choices=OUTPUT_FORMATS, help="output format")
    parser.add_argument("-o", "--output", type=Path, help="output file (default: stdout)")
    parser.add_argument("--allow-empty", dest="allow_empty", action="store_true",
                        help="skip queries returning no series instead of failing")
    parser.add_argument("--log-level", dest="log_level",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="logging level")
    args = parser.parse_args(argv)

    try:
        # Load config: YAML first, then CLI overrides, then environment token
        config = load_config_from(args.config).override_with_args(args).with_env_token()
    except (OSError, yaml.YAMLError, ValueError) as e:
        logging.basicConfig(level=logging.INFO)
        logger.error("invalid configuration: %s", e)
        return 2

    # Configure logging
    logging.basicConfig(level=getattr(logging, config.log_level, logging.INFO))
    logger.info("promexport starting: host=%s, gateway=%s, queries=%d",
                config.host, config.gateway, len(args.queries))

    try:
        window = resolve_window(args.start, args.end, args.since, config.step)
        client = build_client(config)
    except (ValueError, PromExportError) as e:
        logger.error("%s", e)
        return 2

    logger.debug("window %s - %s, step %ss", window.start, window.end, window.resolved_step)

    try:
        output = open(args.output, "w") if args.output else nullcontext(sys.stdout)
    except OSError as e:
        logger.error("cannot open output %s: %s", args.output, e)
        return 2

    with output as out:
        failures = run_queries(client, args.queries, window, config, out)

    if failures:
        logger.error("%d of %d queries failed", failures, len(args.queries))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

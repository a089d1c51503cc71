"""
Label set formatting.

Turns a Prometheus label set into the display name used for CSV headers
and plot legends.
"""

from typing import List, Mapping

METRIC_NAME_LABEL = "__name__"


def metric_name(labels: Mapping[str, str]) -> str:
    """
    Build a stable display name from a label set.

    The metric name comes first, followed by the remaining labels as
    key="value" pairs sorted lexicographically, e.g. up{instance="h1",job="api"}.
    Label values are substituted literally, embedded quotes are not escaped.

    Args:
        labels: Label set of a single series, may include __name__

    Returns:
        Display name; "{}" for an empty label set
    """
    if not labels:
        return "{}"

    base = ""
    inner: List[str] = []
    for key, value in labels.items():
        if key == METRIC_NAME_LABEL:
            base = value
            continue
        inner.append(f'{key}="{value}"')

    if not inner:
        return base

    inner.sort()
    return base + "{" + ",".join(inner) + "}"

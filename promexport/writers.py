"""
Output writers for aligned series.

Every writer takes an output stream and the series of one query. An empty
series list writes nothing.
"""

from datetime import datetime
from typing import Callable, Dict, Optional, Sequence, TextIO, Tuple

from .alignment import align_series
from .query import Series

Writer = Callable[[TextIO, Sequence[Series]], None]

# Prometheus special float values and their Python literals
_PLOT_LITERALS = {
    "NaN": "float('nan')",
    "+Inf": "float('inf')",
    "Inf": "float('inf')",
    "-Inf": "-float('inf')",
}


def format_timestamp(timestamp: int) -> str:
    """Local time rendering, e.g. 2024-01-02 15:04:05 +0100 CET"""
    return datetime.fromtimestamp(timestamp).astimezone().strftime("%Y-%m-%d %H:%M:%S %z %Z")


def _plot_value(value: Optional[str]) -> str:
    if value is None:
        return "None"
    return _PLOT_LITERALS.get(value, value)


def csv_header_writer(out: TextIO, series: Sequence[Series]) -> None:
    if not series:
        return
    header = ["Time"] + [s.display_name for s in series]
    out.write(",".join(header) + "\n")


def csv_writer(out: TextIO, series: Sequence[Series]) -> None:
    """One row per aligned timestamp, missing samples as empty fields."""
    if not series:
        return
    grid = align_series(series)
    for timestamp, values in grid.rows():
        fields = [format_timestamp(timestamp)] + ["" if v is None else v for v in values]
        out.write(",".join(fields) + "\n")


def matplotlib_writer(out: TextIO, series: Sequence[Series]) -> None:
    """
    Write the series as Python list literals followed by plot calls.

    The output expects matplotlib.pyplot to be imported as `plot`.
    """
    if not series:
        return
    grid = align_series(series)
    out.write(f"t = [{', '.join(str(ts) for ts in grid.timestamps)}]\n")
    for i in range(len(series)):
        values = ", ".join(_plot_value(v) for v in grid.column(i))
        out.write(f"s{i} = [{values}]\n")
        out.write(f"plot.plot(t, s{i})\n")


def matplotlib_legend_writer(out: TextIO, series: Sequence[Series]) -> None:
    if not series:
        return
    # repr() escapes quotes and backslashes in label values
    labels = ", ".join(repr(s.display_name) for s in series)
    out.write(f"plot.legend([{labels}], loc='upper left')\n")


# Output format -> writers applied in order
WRITERS: Dict[str, Tuple[Writer, ...]] = {
    "csv": (csv_header_writer, csv_writer),
    "matplotlib": (matplotlib_writer, matplotlib_legend_writer),
}


def write_series(out: TextIO, series: Sequence[Series], output_format: str) -> None:
    """Render series with every writer registered for output_format."""
    try:
        writers = WRITERS[output_format]
    except KeyError:
        raise ValueError(f"unknown output format: {output_format}") from None
    for writer in writers:
        writer(out, series)

"""
Alignment of sparse series onto a shared timestamp axis.

Each series only carries the timestamps it has samples for. Rendering
needs one ascending axis covering all of them, with an explicit gap
wherever a series has no sample.
"""

from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple

import pandas as pd

from .query import Series


@dataclass(frozen=True)
class AlignedGrid:
    """Union timestamp axis plus one value-or-None per (timestamp, series)"""
    names: List[str]
    timestamps: List[int]
    values: List[List[Optional[str]]]  # one row per timestamp, one column per series

    def rows(self) -> Iterator[Tuple[int, List[Optional[str]]]]:
        return zip(self.timestamps, self.values)

    def column(self, index: int) -> List[Optional[str]]:
        return [row[index] for row in self.values]


def align_series(series: Sequence[Series]) -> AlignedGrid:
    """
    Merge series onto the sorted union of their timestamps.

    Column order follows the input order, duplicate names stay separate
    columns. Missing samples are None.
    """
    names = [s.display_name for s in series]
    if not series:
        return AlignedGrid(names=names, timestamps=[], values=[])

    # Positional column keys so duplicate display names never collide
    df = pd.DataFrame({
        i: pd.Series(dict(s.samples), dtype=object)
        for i, s in enumerate(series)
    })
    df = df.sort_index()

    timestamps = [int(ts) for ts in df.index]
    values = [
        [None if pd.isna(v) else v for v in row]
        for row in df.itertuples(index=False, name=None)
    ]
    return AlignedGrid(names=names, timestamps=timestamps, values=values)

#!/usr/bin/env python3
"""
Grouping and ordering of rados bench results.

Results are indexed as jobs -> block size -> benchmark name -> metrics and
flattened per jobs level into series that all share one sorted block-size axis.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

import pandas as pd

from rados_utils import RawMetrics, parse_size, split_name

LATENCY_SCALE = 1000.0  # s -> ms
FRAME_COLUMNS = ["block_size", "name", "iops", "bandwidth_mb_s", "latency_ms"]


ZERO = RawMetrics()


@dataclass(frozen=True)
class RecordKey:
    name: str = ""
    concurrency: str = ""
    block_size: str = ""

    @classmethod
    def from_id(cls, ident):
        return cls(*split_name(ident))

    @property
    def valid(self):
        return bool(self.name or self.concurrency or self.block_size)


@dataclass(frozen=True)
class AxisCache:
    block_sizes: tuple   # byte-ascending
    names: tuple         # lexicographic


@dataclass(frozen=True)
class FlattenedSeries:
    """Per-name metric sequences, position i belongs to block_sizes[i]. Read-only once built."""

    block_sizes: Tuple[str, ...] = ()
    names: Tuple[str, ...] = ()
    rate: Mapping[str, Tuple[int, ...]] = field(default_factory=lambda: MappingProxyType({}))
    bandwidth: Mapping[str, Tuple[float, ...]] = field(default_factory=lambda: MappingProxyType({}))
    latency: Mapping[str, Tuple[float, ...]] = field(default_factory=lambda: MappingProxyType({}))

    @property
    def empty(self):
        return not self.block_sizes


class RadosBenchData:
    def __init__(self, records=None):
        # data[jobs][bs][name] = RawMetrics
        self.data: Dict[str, Dict[str, Dict[str, RawMetrics]]] = {}
        self.axes: Dict[str, AxisCache] = {}
        self.flat: Dict[str, FlattenedSeries] = {}
        self.skipped: List[str] = []
        if records:
            self.ingest(records)

    def ingest(self, records):
        """
        Insert {identifier: RawMetrics} into the index.
        Returns the identifiers that could not be split into name/jobs/bs.
        """
        skipped = []
        for ident, m in records.items():
            key = RecordKey.from_id(ident)
            if not key.valid:
                skipped.append(ident)
                continue
            by_bs = self.data.setdefault(key.concurrency, {})
            by_bs.setdefault(key.block_size, {})[key.name] = m
        self.skipped.extend(skipped)
        return skipped

    def concurrency_levels(self):
        return sorted(self.data, key=lambda c: (parse_size(c), c))

    def axis(self, jobs) -> Optional[AxisCache]:
        jobs = str(jobs)
        if jobs in self.axes:
            return self.axes[jobs]
        job_data = self.data.get(jobs)
        if not job_data:
            return None

        names = set()
        for bs_data in job_data.values():
            names.update(bs_data)
        # sorted() is stable: equal byte values keep insertion order
        ax = AxisCache(
            block_sizes=tuple(sorted(job_data, key=parse_size)),
            names=tuple(sorted(names)),
        )
        self.axes[jobs] = ax
        return ax

    def series(self, jobs) -> FlattenedSeries:
        jobs = str(jobs)
        if jobs in self.flat:
            return self.flat[jobs]
        ax = self.axis(jobs)
        if ax is None:
            return FlattenedSeries()

        job_data = self.data[jobs]
        rate, bw, lat = {}, {}, {}
        for name in ax.names:
            cells = [job_data.get(bs, {}).get(name, ZERO) for bs in ax.block_sizes]
            rate[name] = tuple(m.rate for m in cells)
            bw[name] = tuple(m.bandwidth for m in cells)
            lat[name] = tuple(m.latency * LATENCY_SCALE for m in cells)
        out = FlattenedSeries(
            block_sizes=ax.block_sizes,
            names=ax.names,
            rate=MappingProxyType(rate),
            bandwidth=MappingProxyType(bw),
            latency=MappingProxyType(lat),
        )
        self.flat[jobs] = out
        return out

    def to_frame(self, jobs):
        """Long-form table of one jobs level, rows in axis order then name order."""
        s = self.series(jobs)
        rows = []
        for i, bs in enumerate(s.block_sizes):
            for name in s.names:
                rows.append((bs, name, s.rate[name][i], s.bandwidth[name][i], s.latency[name][i]))
        return pd.DataFrame(rows, columns=FRAME_COLUMNS)

"""Timing harness for `PrefixTrie` over seeded workloads.

`run_benchmark` builds a trie from a workload and times each public operation
call by call with `time.perf_counter`. The raw per-call samples come back as a
`pandas.DataFrame` (one row per call) and `summarize` reduces them to
per-operation latency percentiles.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence

import numpy as np
import pandas as pd

from .trie import PrefixTrie
from .workloads import WorkLoad

log = logging.getLogger(__name__)

WORKLOAD_KINDS = ("words", "routes")
OPERATIONS = ("insert", "contains_exact", "iter_prefix", "match_fuzzy", "remove")


@dataclass
class BenchConfig:
    """
    Configuration for run_benchmark
        workload: str, "words" or "routes"
        num_keys: int, keys inserted into the trie
        num_queries: int, keys sampled for each timed lookup operation
        prefix_freq: float, prefix clustering for word workloads (0..1)
        prefix_len: int, prefix length used for enumeration queries
        max_distance: int, bound for fuzzy queries
        seed: int, seed for workload generation and sampling
    """
    workload: str = "words"
    num_keys: int = 5_000
    num_queries: int = 200
    prefix_freq: float = 0.3
    prefix_len: int = 2
    max_distance: int = 1
    seed: Optional[int] = 42

    def __post_init__(self):
        if self.workload not in WORKLOAD_KINDS:
            raise ValueError(f"workload must be one of {WORKLOAD_KINDS}")
        if self.num_keys < 1 or self.num_queries < 1:
            raise ValueError("num_keys and num_queries must be positive")
        if not 0.0 <= self.prefix_freq <= 1.0:
            raise ValueError("prefix_freq must be between 0 and 1")
        if self.prefix_len < 0:
            raise ValueError("prefix_len must be non-negative")
        if self.max_distance < 0:
            raise ValueError("max_distance must be non-negative")


def time_calls(fn: Callable, inputs: Iterable) -> np.ndarray:
    """Return per-call latency in seconds for `fn(x)` over `inputs`."""
    samples: List[float] = []
    for x in inputs:
        start = time.perf_counter()
        fn(x)
        samples.append(time.perf_counter() - start)
    return np.asarray(samples, dtype=float)


def _drain(it):
    for _ in it:
        pass


def build_keys(config: BenchConfig) -> List[str]:
    wl = WorkLoad(seed=config.seed)
    if config.workload == "routes":
        return wl.routes(config.num_keys)
    return wl.words(config.num_keys, p_freq=config.prefix_freq)


def run_benchmark(config: BenchConfig, keys: Optional[Sequence[str]] = None,
                  trie: Optional[PrefixTrie] = None) -> pd.DataFrame:
    """Time every operation of `trie` (a fresh `PrefixTrie` by default).

    Returns
    -------
    pandas.DataFrame
        Columns `operation`, `seconds`; one row per timed call.
    """
    keys = list(keys) if keys is not None else build_keys(config)
    trie = trie if trie is not None else PrefixTrie()
    rng = np.random.default_rng(config.seed)

    frames = []

    def record(op, samples):
        frames.append(pd.DataFrame({"operation": op, "seconds": samples}))

    record("insert", time_calls(trie.insert, keys))

    unique = sorted(set(keys))
    idx = rng.choice(len(unique), size=min(config.num_queries, len(unique)), replace=False)
    queries = [unique[i] for i in idx]

    record("contains_exact", time_calls(trie.contains_exact, queries))
    prefixes = [q[:config.prefix_len] for q in queries]
    record("iter_prefix", time_calls(lambda p: _drain(trie.iter_prefix(p)), prefixes))

    typos = [q for _, q in WorkLoad(seed=config.seed).typos(queries, config.max_distance)]
    record("match_fuzzy", time_calls(lambda q: trie.match_fuzzy(q, config.max_distance), typos))

    record("remove", time_calls(trie.remove, queries))

    df = pd.concat(frames, ignore_index=True)
    log.info("benchmark %s: %d keys, %d timed calls", config.workload, len(keys), len(df))
    return df


def summarize(df: pd.DataFrame) -> pd.DataFrame:
    """Per-operation call count, mean and p50/p95/p99 latency in microseconds."""
    rows = []
    for op, group in df.groupby("operation", sort=False):
        us = group["seconds"].to_numpy() * 1e6
        p50, p95, p99 = np.percentile(us, [50, 95, 99])
        rows.append({
            "operation": op,
            "calls": int(us.size),
            "mean_us": float(us.mean()),
            "p50_us": float(p50),
            "p95_us": float(p95),
            "p99_us": float(p99),
        })
    return pd.DataFrame(rows, columns=["operation", "calls", "mean_us", "p50_us", "p95_us", "p99_us"])

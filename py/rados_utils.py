#!/usr/bin/env python3
import json, os, re, sys
from dataclasses import dataclass

JSON_SUFFIX = ".json"
DELIM = "_"

# binary multiples, used only for ordering labels
UNITS = {"k": 1024, "m": 1024 ** 2, "g": 1024 ** 3}
_DIGITS = re.compile(r"\d+", re.ASCII)


@dataclass(frozen=True)
class RawMetrics:
    rate: int = 0            # ops/s
    bandwidth: float = 0.0   # MB/s
    latency: float = 0.0     # s


def parse_size(s):
    """
    Byte value of a block-size label such as "512", "4k", "64K" or "1M".
    Malformed magnitudes give 0 so callers only lose sort order.
    """
    if not s:
        return 0
    mag, mult = s, 1
    unit = s[-1].lower()
    if unit in UNITS:
        mag, mult = s[:-1], UNITS[unit]
    if not _DIGITS.fullmatch(mag):
        return 0
    return int(mag) * mult


def split_name(name):
    """
    "<name>_<jobs>_<bs>" -> (name, jobs, bs). The benchmark name may hold
    underscores itself; fewer than 3 segments gives ("", "", "").
    """
    parts = name.split(DELIM)
    if len(parts) < 3:
        return "", "", ""
    return DELIM.join(parts[:-2]), parts[-2], parts[-1]


def to_uint(x, default=0):
    if isinstance(x, bool):
        return default
    if isinstance(x, int):
        return x if x >= 0 else default
    s = str(x).strip() if x is not None else ""
    return int(s) if _DIGITS.fullmatch(s) else default


def to_float(x, default=0.0):
    try:
        return float(x)
    except (TypeError, ValueError):
        return default


def load_results(results_dir):
    """
    Read every rados bench JSON output in results_dir.
    Returns {file stem: RawMetrics}; unreadable files are skipped with a warning.
    """
    records = {}
    n = 0
    for fname in sorted(os.listdir(results_dir)):
        path = os.path.join(results_dir, fname)
        if os.path.isdir(path) or not fname.endswith(JSON_SUFFIX):
            continue
        try:
            with open(path, "r", encoding="utf-8") as fh:
                data = json.load(fh)
        except Exception as e:
            print(f"[WARN] Failed {path}: {e}", file=sys.stderr)
            continue
        if not isinstance(data, dict):
            print(f"[WARN] Failed {path}: not a rados bench object", file=sys.stderr)
            continue

        records[fname[:-len(JSON_SUFFIX)]] = RawMetrics(
            rate=to_uint(data.get("average_iops")),
            bandwidth=to_float(data.get("bandwidth")),
            latency=to_float(data.get("average_latency")),
        )
        n += 1
        print(f"{n:5d} json file(s) detected: {path}")
    return records

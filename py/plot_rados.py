#!/usr/bin/env python3
# plot_rados.py: rados bench results -> grouped bar charts (IOPS, BW, latency per block size)

import argparse
import os
import sys
import time

import numpy as np

import matplotlib
matplotlib.use("Agg")  # headless backend
import matplotlib.pyplot as plt

from bench_data import RadosBenchData
from rados_utils import load_results

ROOT = "data"
OUTPUT_DIR = "output"

# (series attribute, title word, y label)
PANELS = [
    ("rate", "IOPS", "IOPS"),
    ("bandwidth", "BW", "BW (MB/s)"),
    ("latency", "Latency", "Latency (ms)"),
]


def fmt_value(v):
    if isinstance(v, float):
        return f"{v:.2f}".rstrip("0").rstrip(".")
    return str(v)


def plot_bars(ax, series, attr, title, ylabel):
    """One grouped bar chart: block sizes on x, one bar per benchmark name."""
    values = getattr(series, attr)
    x = np.arange(len(series.block_sizes))
    n = max(len(series.names), 1)
    width = 0.8 / n

    for k, name in enumerate(series.names):
        ys = values[name]
        bars = ax.bar(x - 0.4 + width * (k + 0.5), ys, width, label=name)
        ax.bar_label(bars, labels=[fmt_value(v) for v in ys], fontsize=7, padding=2)

    ax.set_xticks(x)
    ax.set_xticklabels(series.block_sizes)
    ax.set_xlabel("Block Size")
    ax.set_ylabel(ylabel)
    ax.set_title(title)
    ax.grid(True, axis="y", ls="--", alpha=0.4)
    ax.legend(fontsize=8)


def plot_page(series, jobs, out):
    fig, axes = plt.subplots(len(PANELS), 1, figsize=(max(7, 1.2 * len(series.block_sizes) + 3), 13))
    for ax, (attr, word, ylabel) in zip(axes, PANELS):
        plot_bars(ax, series, attr, f"RADOS Bench {word} / Jobs = {jobs}", ylabel)
    fig.tight_layout()
    fig.savefig(out, dpi=150)
    plt.close(fig)
    print(f"[plot] wrote {out}")


def create_parser():
    a = argparse.ArgumentParser(description="Plot rados bench JSON results grouped by jobs and block size")
    a.add_argument("--data", default=ROOT, help=f"directory with <name>_<jobs>_<bs>.json files (default: {ROOT})")
    a.add_argument("--out", default=OUTPUT_DIR, help=f"output directory (default: {OUTPUT_DIR})")
    a.add_argument("--jobs", nargs="+", default=["1"], help="jobs level(s) to plot (default: 1)")
    a.add_argument("--all-jobs", action="store_true", help="plot every jobs level found")
    a.add_argument("--csv", action="store_true", help="also write each level's table as CSV")
    return a


def main(argv=None):
    args = create_parser().parse_args(argv)

    if not os.path.isdir(args.data):
        sys.exit(f"No results directory {args.data}")
    os.makedirs(args.out, exist_ok=True)

    print("detecting json file(s)...")
    bench = RadosBenchData(load_results(args.data))
    for ident in bench.skipped:
        print(f"[WARN] Skipping {ident}: expected <name>_<jobs>_<bs>", file=sys.stderr)
    print("...")

    levels = bench.concurrency_levels() if args.all_jobs else args.jobs
    stamp = int(time.time())
    written = []
    for jobs in levels:
        series = bench.series(jobs)
        if series.empty:
            print(f"[WARN] No data for jobs = {jobs}", file=sys.stderr)
            continue

        out = os.path.join(args.out, f"rados-{stamp}-jobs{jobs}.png")
        plot_page(series, jobs, out)
        written.append(out)

        if args.csv:
            csv_out = os.path.join(args.out, f"rados-{stamp}-jobs{jobs}.csv")
            bench.to_frame(jobs).to_csv(csv_out, index=False)
            print(f"[csv] wrote {csv_out}")

    if not written:
        print("nothing plotted", file=sys.stderr)
        return 1
    print(f"the results have been saved in {args.out} ({len(written)} page(s))")
    return 0


if __name__ == "__main__":
    sys.exit(main())

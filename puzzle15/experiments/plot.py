#!/usr/bin/env python3
import argparse, os, sys
from pathlib import Path
from typing import List

import matplotlib
# Default to a non-interactive backend; we'll only show() if --show
if "MPLBACKEND" not in os.environ:
    matplotlib.use("Agg")
import matplotlib.pyplot as plt
import pandas as pd

METRICS = ["expanded", "generated", "duplicates", "time_sec"]


def read_rows(paths: List[Path]) -> pd.DataFrame:
    frames = [pd.read_csv(p) for p in paths]
    df = pd.concat(frames, ignore_index=True) if frames else pd.DataFrame()
    if df.empty:
        return df
    return df[df["solvable"] == 1]


def summarize(df: pd.DataFrame) -> pd.DataFrame:
    """Mean and std of each metric per (heuristic, depth)."""
    return (
        df.groupby(["heuristic", "depth"])[["moves"] + METRICS]
        .agg(["mean", "std"])
        .fillna(0.0)
    )


def plot_metric(ax, summary: pd.DataFrame, metric: str):
    for heur in summary.index.get_level_values("heuristic").unique():
        part = summary.loc[heur]
        ax.errorbar(part.index, part[(metric, "mean")], yerr=part[(metric, "std")],
                    marker="o", capsize=3, label=heur)
    ax.set_xlabel("Scramble depth")
    ax.set_ylabel(metric)
    ax.set_title(f"{metric} vs depth (mean ± std)")
    ax.grid(True)
    ax.legend()


def save_fig(fig, outdir: Path, name: str):
    outdir.mkdir(parents=True, exist_ok=True)
    path = outdir / f"{name}.png"
    fig.savefig(path, dpi=200, bbox_inches="tight")
    print(f"Saved: {path}")


def main(argv=None):
    ap = argparse.ArgumentParser(description="Summarize and plot heuristic comparison CSVs.")
    ap.add_argument("csv", nargs="+", type=Path, help="CSV files written by runner.py --compare")
    ap.add_argument("--save", default="results/plots", help="Directory to save plots")
    ap.add_argument("--show", action="store_true", help="Also open interactive windows (if GUI available)")
    args = ap.parse_args(argv)

    df = read_rows(args.csv)
    if df.empty:
        print("No rows to plot. Are your CSVs empty?")
        return 0

    summary = summarize(df)
    with pd.option_context("display.width", 160, "display.max_columns", None):
        print(summary)

    outdir = Path(args.save)
    base = "combo" if len(args.csv) > 1 else args.csv[0].stem

    fig, axes = plt.subplots(1, 3, figsize=(15, 5))
    for ax, metric in zip(axes, ["expanded", "generated", "time_sec"]):
        plot_metric(ax, summary, metric)
    plt.tight_layout()
    save_fig(fig, outdir, f"{base}_combined")
    plt.close(fig)

    for metric in METRICS:
        fig, ax = plt.subplots(figsize=(8, 6))
        plot_metric(ax, summary, metric)
        plt.tight_layout()
        save_fig(fig, outdir, f"{base}_{metric}")
        plt.close(fig)

    if args.show:
        plt.show()
    return 0


if __name__ == "__main__":
    sys.exit(main())

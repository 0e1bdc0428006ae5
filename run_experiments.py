#!/usr/bin/env python3
import subprocess, sys
from pathlib import Path

def run(desc, cmd):
    print(f"\n=== {desc} ===\n{cmd}")
    r = subprocess.run(cmd, shell=True)
    if r.returncode != 0:
        sys.exit(r.returncode)

def main():
    Path("results").mkdir(exist_ok=True)
    run("Manhattan vs disjoint databases",
        "python -m puzzle15.experiments.runner --compare --depths 10 20 30 40 --per_depth 10 "
        "--pdb_cache results/pdb_rows.npz --include_unsolvable --out results/compare.csv --log-level INFO")
    run("Plots", "python -m puzzle15.experiments.plot results/compare.csv --save results/plots")

if __name__ == "__main__":
    main()

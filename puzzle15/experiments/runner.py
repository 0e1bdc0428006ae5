#!/usr/bin/env python3
from __future__ import annotations
import argparse, csv, logging, sys
from pathlib import Path
from typing import List, Optional

from puzzle15.domains.board import Board
from puzzle15.domains.generator import Instance, generate_instances, make_unsolvable_variant, scramble
from puzzle15.errors import PuzzleError
from puzzle15.heuristics.selection import DISJOINT_DATABASES, HEURISTIC_NAMES, MANHATTAN, get_heuristic
from puzzle15.search.a_star import TIE_BREAKS, SolveResult
from puzzle15.search.solver import solve

logger = logging.getLogger(__name__)

HEADER = [
    "heuristic", "depth", "seed", "moves",
    "expanded", "generated", "duplicates",
    "peak_open", "peak_closed", "time_sec", "tie_break",
    "termination", "solvable",
]


def write_row(w, res: SolveResult, inst: Instance, solvable_flag: int):
    w.writerow([
        res.heuristic, inst.depth, inst.seed,
        "" if res.length is None else res.length,
        res.expanded, res.generated, res.duplicates,
        res.peak_open, res.peak_closed, f"{res.time:.6f}", res.tie_break,
        res.termination, solvable_flag,
    ])


def compare(insts: List[Instance], heuristics: List[str], out: Path, tie_break: str = "g",
            include_unsolvable: bool = False, pdb_cache: Optional[Path] = None,
            workers: Optional[int] = None) -> int:
    """Solve every instance with every heuristic and write one CSV row per solve."""
    if DISJOINT_DATABASES in heuristics:
        # build up front so the first timed solve does not pay for it
        get_heuristic(DISJOINT_DATABASES, cache_path=pdb_cache, max_workers=workers)
    out.parent.mkdir(parents=True, exist_ok=True)
    rows = 0
    with out.open("w", newline="") as f:
        w = csv.writer(f); w.writerow(HEADER)
        for inst in insts:
            lengths = set()
            for heur in heuristics:
                r = solve(inst.board, heur, tie_break=tie_break, pdb_cache=pdb_cache)
                lengths.add(r.length)
                write_row(w, r, inst, 1)
                rows += 1
            if len(lengths) > 1:
                logger.warning("heuristics disagree on optimal length for seed %d: %s", inst.seed, sorted(lengths))
            if include_unsolvable:
                u = Instance(seed=inst.seed, depth=inst.depth, board=make_unsolvable_variant(inst.board))
                for heur in heuristics:
                    write_row(w, solve(u.board, heur, tie_break=tie_break), u, 0)
                    rows += 1
    return rows


def print_solution(board: Board, res: SolveResult):
    print(f"Initial puzzle state: {board}")
    if not res.solvable:
        print("State unsolvable.")
        return
    print(f"Solution steps: [{', '.join(str(m) for m in res.moves)}]")
    print(f"Solution len: {res.length}")
    print(f"Number of visited states: {res.expanded}")
    print(f"Time: {res.time:.3f}s ({res.heuristic})")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Optimal 15-puzzle solver (A* with Manhattan or disjoint pattern databases)")
    ap.add_argument("--heuristic", choices=list(HEURISTIC_NAMES), default=MANHATTAN)
    ap.add_argument("--board", default=None, help='Initial board, e.g. "[1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12, 13, 14, , 15]"')
    ap.add_argument("--depth", type=int, default=30, help="Scramble depth when --board is not given")
    ap.add_argument("--seed", type=int, default=1)
    ap.add_argument("--tie_break", choices=list(TIE_BREAKS), default="g")
    ap.add_argument("--pdb_cache", type=Path, default=None, help="Optional .npz file to reuse pattern databases across runs")
    ap.add_argument("--workers", type=int, default=None, help="Build pattern databases in this many processes")
    ap.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])

    # heuristic comparison
    ap.add_argument("--compare", action="store_true", help="Compare heuristics on generated instances, write CSV")
    ap.add_argument("--depths", type=int, nargs="+", default=[10, 20, 30, 40])
    ap.add_argument("--per_depth", type=int, default=10)
    ap.add_argument("--include_unsolvable", action="store_true", help="Also run parity-flipped variants")
    ap.add_argument("--out", type=Path, default=Path("results/compare.csv"))
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    try:
        if args.compare:
            insts = generate_instances(args.depths, args.per_depth, start_seed=args.seed)
            n = compare(insts, list(HEURISTIC_NAMES), args.out, tie_break=args.tie_break,
                        include_unsolvable=args.include_unsolvable, pdb_cache=args.pdb_cache,
                        workers=args.workers)
            print(f"Wrote {args.out} ({len(insts)} instances, {n} rows)")
            return 0

        board = Board.parse(args.board) if args.board else scramble(args.depth, args.seed)
        res = solve(board, args.heuristic, tie_break=args.tie_break,
                    pdb_cache=args.pdb_cache, max_workers=args.workers)
        print_solution(board, res)
        return 0
    except PuzzleError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())

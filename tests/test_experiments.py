"""Command-line runner and comparison plots."""

import csv

import pandas as pd
import pytest

from puzzle15.domains.generator import generate_instances, scramble
from puzzle15.experiments import plot, runner


class TestGenerator:
    def test_scramble_reproducible(self):
        assert scramble(30, 4) == scramble(30, 4)
        assert scramble(0, 4).is_goal()

    def test_instances(self):
        insts = generate_instances([4, 8], per_depth=3, start_seed=10)
        assert [i.depth for i in insts] == [4, 4, 4, 8, 8, 8]
        assert len({i.seed for i in insts}) == 6


class TestRunnerCLI:
    def test_solve_board(self, capsys):
        rc = runner.main(["--board", "[1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12, 13, 14, , 15]"])
        out = capsys.readouterr().out
        assert rc == 0
        assert "Solution steps: [Right]" in out
        assert "Solution len: 1" in out

    def test_solve_unsolvable(self, capsys):
        rc = runner.main(["--board", "[1, 2, 4, 3, 5, 6, 7, 8, 9, 10, 11, 12, 13, 14, 15, ]",
                          "--heuristic", "disjoint-databases"])
        assert rc == 0
        assert "State unsolvable." in capsys.readouterr().out

    def test_scrambled_with_databases(self, disjoint, capsys):
        rc = runner.main(["--depth", "12", "--seed", "3", "--heuristic", "disjoint-databases"])
        assert rc == 0
        assert "Solution len:" in capsys.readouterr().out

    def test_invalid_board_exit_code(self, capsys):
        rc = runner.main(["--board", "[1, 1, 3]"])
        assert rc == 2
        assert "error:" in capsys.readouterr().err


@pytest.fixture
def compare_csv(tmp_path, disjoint):
    out = tmp_path / "compare.csv"
    insts = generate_instances([6, 12], per_depth=2)
    rows = runner.compare(insts, ["manhattan-distance", "disjoint-databases"], out, include_unsolvable=True)
    assert rows == 16
    return out


class TestCompare:
    def test_csv_rows(self, compare_csv):
        with compare_csv.open(newline="") as f:
            rows = list(csv.DictReader(f))
        assert list(rows[0].keys()) == runner.HEADER
        solved = [r for r in rows if r["solvable"] == "1"]
        unsolved = [r for r in rows if r["solvable"] == "0"]
        assert len(solved) == len(unsolved) == 8
        assert all(r["termination"] == "unsolvable" and r["moves"] == "" for r in unsolved)
        by_seed = {}
        for r in solved:
            by_seed.setdefault(r["seed"], set()).add(r["moves"])
        assert all(len(lengths) == 1 for lengths in by_seed.values())

    def test_summary(self, compare_csv):
        df = plot.read_rows([compare_csv])
        assert set(df["solvable"]) == {1}
        summary = plot.summarize(df)
        assert set(summary.index.get_level_values("heuristic")) == {"manhattan-distance", "disjoint-databases"}
        assert ("expanded", "mean") in summary.columns
        m = summary.loc[("manhattan-distance", 6), ("moves", "mean")]
        d = summary.loc[("disjoint-databases", 6), ("moves", "mean")]
        assert m == d

    def test_plots_written(self, compare_csv, tmp_path, capsys):
        outdir = tmp_path / "plots"
        assert plot.main([str(compare_csv), "--save", str(outdir)]) == 0
        names = {p.name for p in outdir.iterdir()}
        assert "compare_combined.png" in names
        assert "compare_expanded.png" in names

    def test_empty_csv(self, tmp_path, capsys):
        p = tmp_path / "empty.csv"
        pd.DataFrame(columns=runner.HEADER).to_csv(p, index=False)
        assert plot.main([str(p)]) == 0
        assert "No rows" in capsys.readouterr().out

"""Tests for flipflop/summary.py - year summary building and rendering."""

from unittest.mock import MagicMock, patch

import pytest

from flipflop.bench import BenchResult
from flipflop.fetcher import TransportError
from flipflop.score import NotAuthenticatedError
from flipflop.summary import (
    PuzzlePointers,
    SummaryError,
    YearSummary,
    build_year_summary,
    format_summary,
    list_years,
    parse_repo_slug,
    pointers_from_parts,
    puzzle_dirs,
    repo_slug,
)


def bench_line(part: int, nanoseconds: int) -> str:
    return f"BenchmarkSolve/part{part}-8  100  {nanoseconds} ns/op\n"


@pytest.fixture
def year_dir(tmp_path):
    """A year directory with two puzzles and some noise."""
    year = tmp_path / "2025"
    for name in ["puzzle02", "puzzle01", "puzzle3", "puzzleXY", "notes"]:
        (year / name).mkdir(parents=True)
    (year / "puzzle04").write_text("not a directory")
    return year


class TestListYears:
    """Tests for list_years function."""

    def test_lists_year_directories(self, tmp_path):
        """Only numeric directories from 1000 upwards are years."""
        for name in ["2025", "2024", "template", "999"]:
            (tmp_path / name).mkdir()
        (tmp_path / "2023").write_text("file")

        assert list_years(tmp_path) == [2024, 2025]

    def test_skips_non_ascii_digit_names(self, tmp_path):
        """Names made of other Unicode digits are not years."""
        for name in ["2025", "\u00b2", "\uff12\uff10\uff12\uff16"]:
            (tmp_path / name).mkdir()

        assert list_years(tmp_path) == [2025]

    def test_missing_root(self, tmp_path):
        """A missing root is an error."""
        with pytest.raises(SummaryError):
            list_years(tmp_path / "missing")


class TestPuzzleDirs:
    """Tests for puzzle_dirs function."""

    def test_only_two_digit_puzzle_dirs(self, year_dir):
        """Non-matching names and files are skipped, ids ascend."""
        found = puzzle_dirs(year_dir)
        assert [puzzle_id for puzzle_id, _ in found] == [1, 2]
        assert found[0][1] == year_dir / "puzzle01"

    def test_skips_non_ascii_digit_puzzle_dirs(self, tmp_path):
        """Puzzle ids must be ASCII digits."""
        (tmp_path / "puzzle01").mkdir()
        (tmp_path / "puzzle\uff10\uff13").mkdir()

        assert [puzzle_id for puzzle_id, _ in puzzle_dirs(tmp_path)] == [1]

    def test_missing_year_dir(self, tmp_path):
        """A missing year directory is an error."""
        with pytest.raises(SummaryError):
            puzzle_dirs(tmp_path / "2030")


class TestPointersFromParts:
    """Tests for pointers_from_parts function."""

    def test_flags(self):
        """Each listed part sets its flag."""
        row = pointers_from_parts(5, [1, 3])
        assert row == PuzzlePointers(puzzle_id=5, part1=True, part2=False, part3=True)
        assert row.complete is False

    def test_complete(self):
        """All three parts make a complete puzzle."""
        assert pointers_from_parts(1, [1, 2, 3]).complete is True


class TestBuildYearSummary:
    """Tests for build_year_summary function."""

    def test_builds_sorted_summary(self, year_dir):
        """Score, pointers and benchmarks are collected per puzzle."""
        parts = {1: [1, 2, 3], 2: [1]}
        outputs = {
            "puzzle01": bench_line(1, 1500) + bench_line(2, 2_000_000),
            "puzzle02": bench_line(1, 999),
        }

        with (
            patch("flipflop.summary.fetch_score", return_value=(12, 30)) as mock_score,
            patch(
                "flipflop.summary.fetch_available_parts",
                side_effect=lambda year, puzzle_id, token: parts[puzzle_id],
            ),
            patch(
                "flipflop.summary.run_bench",
                side_effect=lambda path, command: outputs[path.name],
            ) as mock_bench,
        ):
            summary = build_year_summary(2025, "tok", year_dir, ["make", "bench"])

        mock_score.assert_called_once_with(2025, "tok")
        assert mock_bench.call_args.args[1] == ["make", "bench"]
        assert summary == YearSummary(
            year=2025,
            score=12,
            total=30,
            puzzles=[
                PuzzlePointers(1, True, True, True),
                PuzzlePointers(2, True, False, False),
            ],
            bench=[
                BenchResult(1, "1.5 us", "2 ms", ""),
                BenchResult(2, "999 ns", "", ""),
            ],
        )

    def test_score_failure_aborts(self, year_dir):
        """Nothing else runs when the score cannot be fetched."""
        with (
            patch("flipflop.summary.fetch_score", side_effect=NotAuthenticatedError("log in")),
            patch("flipflop.summary.fetch_available_parts") as mock_parts,
        ):
            with pytest.raises(NotAuthenticatedError):
                build_year_summary(2025, None, year_dir)

        mock_parts.assert_not_called()

    def test_puzzle_failure_aborts(self, year_dir):
        """One failing puzzle aborts the whole year."""
        with (
            patch("flipflop.summary.fetch_score", return_value=(1, 2)),
            patch(
                "flipflop.summary.fetch_available_parts",
                side_effect=[[1], TransportError("https://flipflop.slome.org/2025/2", "Unexpected status 500", 500)],
            ),
            patch("flipflop.summary.run_bench", return_value=""),
        ):
            with pytest.raises(TransportError):
                build_year_summary(2025, None, year_dir)

    def test_empty_year(self, tmp_path):
        """A year without puzzles has empty tables."""
        (tmp_path / "2026").mkdir()
        with patch("flipflop.summary.fetch_score", return_value=(0, 0)):
            summary = build_year_summary(2026, None, tmp_path / "2026")

        assert summary.puzzles == []
        assert summary.bench == []


class TestRepoSlug:
    """Tests for parse_repo_slug and repo_slug."""

    @pytest.mark.parametrize(
        "url, expected",
        [
            ("git@github.com:someone/flipflop.git", "someone/flipflop"),
            ("https://github.com/someone/flipflop", "someone/flipflop"),
            ("https://github.com/someone/flipflop.git", "someone/flipflop"),
            ("https://gitlab.com/someone/flipflop", ""),
            ("", ""),
        ],
    )
    def test_parse_repo_slug(self, url, expected):
        """GitHub remotes give owner/repo, anything else is empty."""
        assert parse_repo_slug(url) == expected

    def test_repo_slug_from_git(self, tmp_path):
        """The origin remote is read with git config."""
        completed = MagicMock()
        completed.returncode = 0
        completed.stdout = "git@github.com:someone/flipflop.git\n"

        with patch("flipflop.summary.subprocess.run", return_value=completed) as mock_run:
            assert repo_slug(tmp_path) == "someone/flipflop"

        assert mock_run.call_args.args[0] == ["git", "config", "--get", "remote.origin.url"]

    def test_repo_slug_without_remote(self, tmp_path):
        """No remote means no slug."""
        completed = MagicMock()
        completed.returncode = 1
        completed.stdout = ""

        with patch("flipflop.summary.subprocess.run", return_value=completed):
            assert repo_slug(tmp_path) == ""

    def test_repo_slug_without_git(self, tmp_path):
        """A missing git executable means no slug."""
        with patch("flipflop.summary.subprocess.run", side_effect=FileNotFoundError("git")):
            assert repo_slug(tmp_path) == ""


class TestFormatSummary:
    """Tests for format_summary function."""

    def _summary(self) -> YearSummary:
        return YearSummary(
            year=2025,
            score=12,
            total=0,
            puzzles=[PuzzlePointers(1, True, True, False), PuzzlePointers(2, True, True, True)],
            bench=[BenchResult(1, "1.5 us", "", "")],
        )

    def test_plain_summary(self):
        """Without slug or other years only the core sections render."""
        expected = "\n".join(
            [
                "# Flip Flop",
                "",
                "## Year : 2025",
                "",
                "### Pointers",
                "",
                "Pointers (2025): 12/?",
                "",
                "| Puzzle | Part 1 | Part 2 | Part 3 |",
                "| --- | --- | --- | --- |",
                "| 01 | Y | Y | - |",
                "| 02 | Y | Y | Y |",
                "",
                "### Benchmarks",
                "",
                "| Puzzle | Part 1 | Part 2 | Part 3 |",
                "| --- | --- | --- | --- |",
                "| 01 | 1.5 us | - | - |",
            ]
        )
        assert format_summary(self._summary()) == expected

    def test_known_total(self):
        """A known total is shown instead of a question mark."""
        summary = YearSummary(year=2024, score=5, total=20)
        assert "Pointers (2024): 5/20" in format_summary(summary)

    def test_no_benchmarks(self):
        """An empty benchmark list renders a placeholder and no pointer table."""
        text = format_summary(YearSummary(year=2024, score=0, total=0))
        assert text.endswith("### Benchmarks\n\nNo benchmarks yet.")
        assert "| Puzzle |" not in text

    def test_badges(self):
        """A repository slug adds the badge line first."""
        text = format_summary(self._summary(), slug="someone/flipflop")
        first, blank, title = text.split("\n")[:3]

        assert first.startswith(
            "![Last Commit](https://img.shields.io/github/last-commit/someone/flipflop?style=flat-square)"
        )
        assert "pointers-%E2%AD%90-12-yellow" in first
        assert "Puzzles%20completed-1-red" in first
        assert blank == ""
        assert title == "# Flip Flop"

    def test_other_years(self):
        """Other years with any score are listed, the current year is not."""
        summary = self._summary()
        others = [
            YearSummary(year=2023, score=0, total=0),
            YearSummary(year=2024, score=5, total=20),
            summary,
        ]
        assert format_summary(summary, other_years=others).endswith("\n\nOther years: 2024:5/20")

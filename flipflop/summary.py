"""Year summary building and markdown rendering.

A summary collects, for one year, the score from the status page, the parts
published for each puzzle directory on disk, and the benchmark timings of
each puzzle solution.
"""

import re
import subprocess
from dataclasses import dataclass, field
from pathlib import Path

from flipflop.bench import BenchResult, parse_bench_output, run_bench
from flipflop.puzzle_text import fetch_available_parts
from flipflop.score import fetch_score


class SummaryError(Exception):
    """Raised when a summary cannot be built."""

    pass


@dataclass
class PuzzlePointers:
    """Which parts of a puzzle are published."""

    puzzle_id: int
    part1: bool = False
    part2: bool = False
    part3: bool = False

    @property
    def complete(self) -> bool:
        return self.part1 and self.part2 and self.part3


@dataclass
class YearSummary:
    """Everything rendered into a year's README."""

    year: int
    score: int
    total: int
    puzzles: list[PuzzlePointers] = field(default_factory=list)
    bench: list[BenchResult] = field(default_factory=list)


PUZZLE_DIR_PATTERN = re.compile(r"puzzle([0-9]{2})")
YEAR_DIR_PATTERN = re.compile(r"[0-9]+")
REPO_SLUG_PATTERN = re.compile(r"github\.com[:/]+([^/]+)/([^/.]+)")

TABLE_HEADER = ["| Puzzle | Part 1 | Part 2 | Part 3 |", "| --- | --- | --- | --- |"]


def list_years(root: Path) -> list[int]:
    """List the year directories under the repository root.

    Args:
        root: Repository root.

    Returns:
        Years in ascending order.
    """
    root = Path(root)
    if not root.is_dir():
        raise SummaryError(f"Repository root not found: {root}")

    years = []
    for entry in root.iterdir():
        if not entry.is_dir() or not YEAR_DIR_PATTERN.fullmatch(entry.name):
            continue
        year = int(entry.name)
        if year >= 1000:
            years.append(year)
    return sorted(years)


def puzzle_dirs(year_dir: Path) -> list[tuple[int, Path]]:
    """List the puzzle directories of a year.

    Only ``puzzleNN`` directories count; anything else is skipped.

    Args:
        year_dir: Directory of one year.

    Returns:
        List of (puzzle_id, path) tuples sorted by puzzle id.
    """
    year_dir = Path(year_dir)
    if not year_dir.is_dir():
        raise SummaryError(f"Year directory not found: {year_dir}")

    found = []
    for entry in year_dir.iterdir():
        if not entry.is_dir():
            continue
        match = PUZZLE_DIR_PATTERN.fullmatch(entry.name)
        if match:
            found.append((int(match.group(1)), entry))
    return sorted(found)


def pointers_from_parts(puzzle_id: int, parts: list[int]) -> PuzzlePointers:
    """Turn a list of available part numbers into a pointers row."""
    return PuzzlePointers(
        puzzle_id=puzzle_id,
        part1=1 in parts,
        part2=2 in parts,
        part3=3 in parts,
    )


def build_year_summary(
    year: int,
    token: str | None,
    year_dir: Path,
    bench_command: list[str] | None = None,
) -> YearSummary:
    """Build the summary for one year.

    Puzzles are processed one at a time. Any failure aborts the whole year so
    that a README is never written from partial data.

    Args:
        year: Puzzle year.
        token: Optional session token.
        year_dir: Directory holding the year's puzzle directories.
        bench_command: Optional benchmark command override.

    Returns:
        The assembled YearSummary.
    """
    print(f"[{year}] Fetching score...", flush=True)
    score, total = fetch_score(year, token)

    summary = YearSummary(year=year, score=score, total=total)
    for puzzle_id, path in puzzle_dirs(year_dir):
        print(f"[{year}] Puzzle {puzzle_id:02d}", flush=True)
        parts = fetch_available_parts(year, puzzle_id, token)
        summary.puzzles.append(pointers_from_parts(puzzle_id, parts))

        output = run_bench(path, bench_command)
        summary.bench.append(parse_bench_output(output, puzzle_id))

    return summary


def parse_repo_slug(url: str) -> str:
    """Extract ``owner/repo`` from a GitHub remote URL, or "" if it is not one."""
    if not url:
        return ""
    match = REPO_SLUG_PATTERN.search(url)
    if match is None:
        return ""
    return f"{match.group(1)}/{match.group(2)}"


def repo_slug(root: Path) -> str:
    """Return the GitHub slug of the repository's origin remote, or ""."""
    try:
        completed = subprocess.run(
            ["git", "config", "--get", "remote.origin.url"],
            cwd=root,
            capture_output=True,
            text=True,
        )
    except OSError:
        return ""
    if completed.returncode != 0:
        return ""
    return parse_repo_slug(completed.stdout.strip())


def format_total(total: int) -> str:
    return str(total) if total > 0 else "?"


def format_pointer_line(year: int, score: int, total: int) -> str:
    return f"Pointers ({year}): {score}/{format_total(total)}"


def format_badges(summary: YearSummary, slug: str) -> str:
    """Render the shields.io badge line for a repository."""
    completed = sum(1 for row in summary.puzzles if row.complete)

    last_commit = f"https://img.shields.io/github/last-commit/{slug}?style=flat-square"
    pointers = f"https://img.shields.io/badge/pointers-%E2%AD%90-{summary.score}-yellow"
    puzzles = f"https://img.shields.io/badge/Puzzles%20completed-{completed}-red"

    return " ".join(
        [
            f"![Last Commit]({last_commit})",
            f"![Pointers]({pointers})",
            f"![Puzzles Completed]({puzzles})",
        ]
    )


def format_pointer_table(puzzles: list[PuzzlePointers]) -> str:
    if not puzzles:
        return ""

    def mark(available: bool) -> str:
        return "Y" if available else "-"

    lines = list(TABLE_HEADER)
    for row in puzzles:
        lines.append(
            f"| {row.puzzle_id:02d} | {mark(row.part1)} | {mark(row.part2)} | {mark(row.part3)} |"
        )
    return "\n".join(lines)


def format_bench_table(bench: list[BenchResult]) -> str:
    if not bench:
        return "No benchmarks yet."

    def cell(value: str) -> str:
        return value if value.strip() else "-"

    lines = list(TABLE_HEADER)
    for row in bench:
        lines.append(
            f"| {row.puzzle_id:02d} | {cell(row.part1)} | {cell(row.part2)} | {cell(row.part3)} |"
        )
    return "\n".join(lines)


def format_other_years(summary: YearSummary, others: list[YearSummary]) -> str:
    """Render the one-line score overview of the other years."""
    parts = [
        f"{other.year}:{other.score}/{format_total(other.total)}"
        for other in others
        if other.year != summary.year and (other.score or other.total)
    ]
    if not parts:
        return ""
    return "Other years: " + " ".join(parts)


def format_summary(
    summary: YearSummary,
    slug: str = "",
    other_years: list[YearSummary] | None = None,
) -> str:
    """Render a year summary as the markdown placed between the README markers.

    Args:
        summary: The year to render.
        slug: GitHub ``owner/repo`` for badges; no badges when empty.
        other_years: Summaries of the other years for the overview line.

    Returns:
        Markdown text without the markers.
    """
    lines = []
    if slug:
        lines.extend([format_badges(summary, slug), ""])

    lines.extend(
        [
            "# Flip Flop",
            "",
            f"## Year : {summary.year}",
            "",
            "### Pointers",
            "",
            format_pointer_line(summary.year, summary.score, summary.total),
        ]
    )

    pointer_table = format_pointer_table(summary.puzzles)
    if pointer_table:
        lines.extend(["", pointer_table])

    lines.extend(["", "### Benchmarks", "", format_bench_table(summary.bench)])

    other = format_other_years(summary, other_years or [])
    if other:
        lines.extend(["", other])

    return "\n".join(lines)

"""Benchmark running and output parsing for puzzle solutions."""

import re
import subprocess
from dataclasses import dataclass
from pathlib import Path


class BenchParseError(Exception):
    """Raised when a benchmark line carries an unreadable duration."""

    pass


class BenchRunError(Exception):
    """Raised when the benchmark process fails."""

    pass


@dataclass
class BenchResult:
    """Formatted per-part durations for one puzzle; empty means not measured."""

    puzzle_id: int
    part1: str = ""
    part2: str = ""
    part3: str = ""


# e.g. "BenchmarkSolve/part1-8    1000    1234.5 ns/op"
BENCH_LINE_PATTERN = re.compile(r"^BenchmarkSolve/part([1-3])-[0-9]+\s+\d+\s+([0-9.]+)\s+(ns/op)$")

DEFAULT_BENCH_COMMAND = ["go", "test", "-bench", ".", "-run", "^$"]

DURATION_UNITS = [
    (1e9, "s"),
    (1e6, "ms"),
    (1e3, "us"),
]


def format_duration(nanoseconds: float) -> str:
    """Format a nanosecond count with the largest fitting unit.

    The value is shown with up to two decimals, without trailing zeros:
    ``1500`` gives ``"1.5 us"`` and ``2_000_000`` gives ``"2 ms"``.

    Args:
        nanoseconds: Duration in nanoseconds.

    Returns:
        Human readable duration.
    """
    value = float(nanoseconds)
    unit = "ns"
    for scale, scaled_unit in DURATION_UNITS:
        if value >= scale:
            value /= scale
            unit = scaled_unit
            break

    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text or '0'} {unit}"


def parse_bench_output(output: str, puzzle_id: int) -> BenchResult:
    """Parse benchmark tool output into per-part durations.

    Lines that are not ``BenchmarkSolve/partN`` results are ignored. When a
    part appears more than once, the last line wins.

    Args:
        output: Combined output of the benchmark run.
        puzzle_id: Puzzle the output belongs to.

    Returns:
        BenchResult with formatted durations.

    Raises:
        BenchParseError: If a matching line has a non-numeric duration.
    """
    result = BenchResult(puzzle_id=puzzle_id)
    for line in output.splitlines():
        match = BENCH_LINE_PATTERN.match(line)
        if match is None:
            continue

        part, raw_value = match.group(1), match.group(2)
        try:
            value = float(raw_value)
        except ValueError as e:
            raise BenchParseError(
                f"Puzzle {puzzle_id:02d}: invalid duration {raw_value!r} in line {line!r}"
            ) from e

        setattr(result, f"part{part}", format_duration(value))

    return result


def run_bench(puzzle_dir: Path, command: list[str] | None = None) -> str:
    """Run the benchmark command inside a puzzle directory.

    Args:
        puzzle_dir: Directory holding the puzzle solution.
        command: Command line to run, defaults to ``go test -bench``.

    Returns:
        Combined stdout and stderr of the run.

    Raises:
        BenchRunError: If the command cannot start or exits non-zero.
    """
    puzzle_dir = Path(puzzle_dir)
    command = command or DEFAULT_BENCH_COMMAND

    print(f"    [bench] {' '.join(command)} in {puzzle_dir}", flush=True)
    try:
        completed = subprocess.run(
            command,
            cwd=puzzle_dir,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
        )
    except OSError as e:
        raise BenchRunError(f"Failed to run benchmark in {puzzle_dir}: {e}") from e

    if completed.returncode != 0:
        raise BenchRunError(
            f"Benchmark in {puzzle_dir} exited with status {completed.returncode}:\n{completed.stdout}"
        )

    return completed.stdout

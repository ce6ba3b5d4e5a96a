#!/usr/bin/env python
"""Entry point for refreshing the pointers and benchmark summary in the READMEs.

Usage:
    python scripts/update_summary/run.py

Configuration is auto-loaded from config.yaml in the same directory.
"""

from pathlib import Path
import sys

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from flipflop.config import load_config, validate_summary_config
from flipflop.readme import update_document
from flipflop.summary import SummaryError, build_year_summary, format_summary, list_years, repo_slug

# Script directory for auto-loading config
SCRIPT_DIR = Path(__file__).resolve().parent

DEFAULT_TITLE = "# FlipFlop {year}"


def get_config_path() -> Path:
    """Get path to config.yaml in the script directory."""
    return SCRIPT_DIR / "config.yaml"


def resolve_root(config: dict) -> Path:
    """Resolve the repository root, relative paths being taken from the script directory."""
    root = Path(config["root"])
    if not root.is_absolute():
        root = SCRIPT_DIR / root
    return root.resolve()


def render_title(title: str, year: int) -> str:
    """Fill the {year} placeholder; any other braces are left as written."""
    return title.replace("{year}", str(year))


def main() -> None:
    """Main entry point for the summary update script."""
    config_path = get_config_path()
    config = load_config(config_path, validator=validate_summary_config)

    root = resolve_root(config)
    token = config.get("session_token")
    bench_command = config.get("bench_command")
    title = config.get("title", DEFAULT_TITLE)

    years = list_years(root)
    if not years:
        raise SummaryError(f"No year directories found in {root}")

    print(f"Updating summaries for {len(years)} year(s) in {root}", flush=True)

    # Build every year before writing so a failure leaves all READMEs untouched
    summaries = [build_year_summary(year, token, root / str(year), bench_command) for year in years]

    slug = repo_slug(root)
    for summary in summaries:
        content = format_summary(summary, slug=slug, other_years=summaries)
        update_document(root / str(summary.year) / "README.md", content, render_title(title, summary.year))

    latest = summaries[-1]
    content = format_summary(latest, slug=slug, other_years=summaries)
    update_document(root / "README.md", content, render_title(title, latest.year))

    total = latest.total if latest.total > 0 else "?"
    print(f"\nDone! Pointers updated: {latest.score}/{total}", flush=True)


if __name__ == "__main__":
    main()

#!/usr/bin/env python
"""Entry point for printing the text of one puzzle part.

Usage:
    python scripts/fetch_puzzle_text/run.py

Configuration is auto-loaded from config.yaml in the same directory.
"""

from pathlib import Path
import sys

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from flipflop.config import load_config, validate_fetch_config
from flipflop.puzzle_text import fetch_part_text

# Script directory for auto-loading config
SCRIPT_DIR = Path(__file__).resolve().parent


def get_config_path() -> Path:
    """Get path to config.yaml in the script directory."""
    return SCRIPT_DIR / "config.yaml"


def main() -> None:
    """Main entry point for the puzzle text script."""
    config_path = get_config_path()
    config = load_config(config_path, validator=validate_fetch_config)

    year = config["year"]
    puzzle = config["puzzle"]
    part = config.get("part", 1)

    text = fetch_part_text(year, puzzle, part, config.get("session_token"))
    print(text, flush=True)


if __name__ == "__main__":
    main()

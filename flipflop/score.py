"""Year score ("pointers") scraping from the status page."""

import re

from flipflop.fetcher import build_year_url, fetch_page


class NotAuthenticatedError(Exception):
    """Raised when the status page carries no score, i.e. the session is not logged in."""

    pass


SCORE_PATTERN = re.compile(r"const score = ([0-9]+);")
TOTAL_PATTERN = re.compile(r'completed <span class="score">\?</span>/([0-9]+) parts')


def parse_score(body: str) -> tuple[int, int]:
    """Extract the score and total parts from a year status page.

    The total is best effort: a page without it yields 0 (unknown).

    Args:
        body: Raw page body.

    Returns:
        Tuple of (score, total).

    Raises:
        NotAuthenticatedError: If the score is missing from the page.
    """
    score_match = SCORE_PATTERN.search(body)
    if score_match is None:
        raise NotAuthenticatedError("Score not found; are you logged in? Update the session token.")
    score = int(score_match.group(1))

    total_match = TOTAL_PATTERN.search(body)
    total = int(total_match.group(1)) if total_match else 0

    return score, total


def fetch_score(year: int, token: str | None = None) -> tuple[int, int]:
    """Fetch the status page for a year and scrape its score.

    Args:
        year: Puzzle year.
        token: Optional session token.

    Returns:
        Tuple of (score, total).
    """
    if year < 1000:
        raise ValueError(f"Invalid year: {year}")

    url = build_year_url(year)
    body = fetch_page(url, token)
    try:
        return parse_score(body)
    except NotAuthenticatedError as e:
        raise NotAuthenticatedError(f"{year}: {e}") from e

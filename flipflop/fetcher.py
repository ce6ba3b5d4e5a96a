"""HTTP page fetching for the FlipFlop puzzle site."""

import requests


class TransportError(Exception):
    """Raised when a page cannot be fetched."""

    def __init__(self, url: str, message: str, status_code: int | None = None):
        super().__init__(f"{message} ({url})")
        self.url = url
        self.status_code = status_code


BASE_URL = "https://flipflop.slome.org"

# Name of the cookie carrying the session token
SESSION_COOKIE = "PHPSESSID"

# Firefox user-agent headers for requests
REQUEST_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Macintosh; Intel Mac OS X 10.15; rv:109.0) Gecko/20100101 Firefox/119.0",
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
    "Connection": "keep-alive",
}

REQUEST_TIMEOUT = 30


def build_year_url(year: int) -> str:
    """Build the status page URL for a year.

    Args:
        year: Puzzle year.

    Returns:
        Full URL to the year page.
    """
    return f"{BASE_URL}/{year}"


def build_puzzle_url(year: int, puzzle_id: int) -> str:
    """Build the page URL for a single puzzle.

    Args:
        year: Puzzle year.
        puzzle_id: Puzzle number within the year.

    Returns:
        Full URL to the puzzle page.
    """
    return f"{BASE_URL}/{year}/{puzzle_id}"


def session_cookies(token: str | None) -> dict[str, str]:
    """Return the cookie jar for a session token; blank tokens send nothing."""
    if token is None or not token.strip():
        return {}
    return {SESSION_COOKIE: token.strip()}


def fetch_page(url: str, token: str | None = None) -> str:
    """Fetch a page body, optionally authenticated with a session token.

    There is no retry: a failure is reported to the caller immediately.

    Args:
        url: URL to fetch.
        token: Optional session token sent as the PHPSESSID cookie.

    Returns:
        The decoded response body.

    Raises:
        TransportError: On network failure or a non-200 status.
    """
    print(f"    [fetch] GET {url}", flush=True)
    try:
        response = requests.get(
            url,
            headers=REQUEST_HEADERS,
            cookies=session_cookies(token),
            timeout=REQUEST_TIMEOUT,
        )
    except requests.RequestException as e:
        raise TransportError(url, f"Request failed: {e}") from e

    if response.status_code != 200:
        raise TransportError(
            url,
            f"Unexpected status {response.status_code}",
            status_code=response.status_code,
        )

    return response.text

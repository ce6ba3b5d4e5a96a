"""Puzzle page parsing: part text extraction and part availability.

A puzzle page holds one ``<article class="description">`` per published part,
each introduced by an ``<h3 id="part-N">`` heading. The text of a part is
rendered from the article's tree, collapsing inline whitespace while keeping
``<pre>`` blocks verbatim.
"""

import re

from lxml import etree, html

from flipflop.fetcher import build_puzzle_url, fetch_page


class PuzzleTextError(Exception):
    """Raised when puzzle text cannot be extracted."""

    pass


class PartNotFoundError(PuzzleTextError):
    """Raised when the requested part is not on the page."""

    def __init__(self, part: int, available: list[int]):
        if available:
            listed = ", ".join(str(p) for p in available)
            message = f"Part {part} not found; available parts: {listed}"
        else:
            message = f"Part {part} not found"
        super().__init__(message)
        self.part = part
        self.available = available


class EmptySectionError(PuzzleTextError):
    """Raised when the requested part renders to no text."""

    def __init__(self, part: int):
        super().__init__(f"Part {part} is empty")
        self.part = part


ARTICLE_TAG = "article"
ARTICLE_CLASS = "description"
HEADING_TAG = "h3"

PART_ID_PATTERN = re.compile(r"part-([0-9]+)")

SKIPPED_TAGS = frozenset({"script", "style"})
PARAGRAPH_TAGS = frozenset({"p", HEADING_TAG})

# What the rendered text currently ends with
_EMPTY = 0
_WHITESPACE = 1
_TEXT = 2


def part_id(part: int) -> str:
    """Return the heading id used for a part, e.g. ``part-2``."""
    return f"part-{part}"


def has_class(element: html.HtmlElement, class_name: str) -> bool:
    """Check whether an element's class attribute contains a class token."""
    return class_name in element.get("class", "").split()


def _is_element(node) -> bool:
    # Comments and processing instructions carry a non-string tag
    return isinstance(node.tag, str)


def available_parts(root: html.HtmlElement) -> list[int]:
    """Collect the part numbers that have a heading on the page.

    Args:
        root: Parsed page tree.

    Returns:
        Distinct positive part numbers, ascending. The ``part-0`` prologue
        heading is not a part.
    """
    parts = set()
    for heading in root.iter(HEADING_TAG):
        match = PART_ID_PATTERN.fullmatch(heading.get("id", ""))
        if match is None:
            continue
        part = int(match.group(1))
        if part > 0:
            parts.add(part)
    return sorted(parts)


def find_part_article(root: html.HtmlElement, part: int) -> html.HtmlElement | None:
    """Find the first description article holding the heading for a part.

    Args:
        root: Parsed page tree.
        part: Part number.

    Returns:
        The article element, or None if no article has that part's heading.
    """
    wanted = part_id(part)
    for article in root.iter(ARTICLE_TAG):
        if not has_class(article, ARTICLE_CLASS):
            continue
        for heading in article.iter(HEADING_TAG):
            if heading.get("id") == wanted:
                return article
    return None


class _TextBuffer:
    """Accumulates rendered text and tracks how it currently ends."""

    def __init__(self) -> None:
        self._chunks: list[str] = []
        self._state = _EMPTY

    def write(self, text: str) -> None:
        if not text:
            return
        self._chunks.append(text)
        self._state = _WHITESPACE if text[-1] in "\n " else _TEXT

    def write_inline(self, text: str) -> None:
        text = text.strip()
        if not text:
            return
        if self._state == _TEXT:
            self.write(" ")
        self.write(text)

    def paragraph_break(self) -> None:
        if self._state != _EMPTY:
            self.write("\n\n")

    def getvalue(self) -> str:
        return "".join(self._chunks)


def render_text(element: html.HtmlElement) -> str:
    """Render an element tree to normalized plain text.

    Text outside ``<pre>`` is stripped and joined with single spaces,
    ``<p>``, ``<h3>`` and ``<pre>`` start a new paragraph, ``<br>`` breaks
    the line, and ``<script>``/``<style>`` are dropped.

    Args:
        element: Root of the subtree to render.

    Returns:
        The rendered text with surrounding whitespace removed.
    """
    buffer = _TextBuffer()
    # Entries are (node, preformatted); strings are text nodes
    stack: list[tuple[html.HtmlElement | str, bool]] = [(element, False)]

    while stack:
        node, preformatted = stack.pop()

        if isinstance(node, str):
            if preformatted:
                buffer.write(node)
            else:
                buffer.write_inline(node)
            continue

        if not _is_element(node):
            continue

        tag = node.tag
        if tag in SKIPPED_TAGS:
            continue
        if tag == "br":
            buffer.write("\n")
            continue
        if tag in PARAGRAPH_TAGS:
            buffer.paragraph_break()
        elif tag == "pre":
            buffer.paragraph_break()
            preformatted = True

        text = node.text
        if tag == "pre" and text and text.startswith("\n"):
            # A newline right after <pre> is not content
            text = text[1:]

        children: list[tuple[html.HtmlElement | str, bool]] = []
        if text:
            children.append((text, preformatted))
        for child in node:
            children.append((child, preformatted))
            if child.tail:
                children.append((child.tail, preformatted))
        stack.extend(reversed(children))

    return buffer.getvalue().strip()


def extract_part_text(root: html.HtmlElement, part: int) -> str:
    """Extract the plain text of one part from a parsed puzzle page.

    Args:
        root: Parsed page tree.
        part: Part number, starting at 1.

    Returns:
        The rendered text of the part's article.

    Raises:
        ValueError: If part is not positive.
        PartNotFoundError: If no article holds the part's heading.
        EmptySectionError: If the article renders to no text.
    """
    if part < 1:
        raise ValueError(f"Invalid part: {part}")

    article = find_part_article(root, part)
    if article is None:
        raise PartNotFoundError(part, available_parts(root))

    text = render_text(article)
    if not text:
        raise EmptySectionError(part)
    return text


def parse_page(body: str, url: str) -> html.HtmlElement:
    """Parse a fetched page body into an lxml tree.

    Raises:
        PuzzleTextError: If the body is not parseable HTML.
    """
    try:
        return html.fromstring(body)
    except (etree.ParserError, ValueError) as e:
        raise PuzzleTextError(f"Failed to parse puzzle HTML from {url}: {e}") from e


def fetch_part_text(year: int, puzzle_id: int, part: int, token: str | None = None) -> str:
    """Fetch a puzzle page and return the text of one part.

    Args:
        year: Puzzle year.
        puzzle_id: Puzzle number.
        part: Part number, starting at 1.
        token: Optional session token.

    Returns:
        The rendered part text.
    """
    if part < 1:
        raise ValueError(f"Invalid part: {part}")

    url = build_puzzle_url(year, puzzle_id)
    root = parse_page(fetch_page(url, token), url)
    return extract_part_text(root, part)


def fetch_available_parts(year: int, puzzle_id: int, token: str | None = None) -> list[int]:
    """Fetch a puzzle page and return the parts published on it."""
    url = build_puzzle_url(year, puzzle_id)
    root = parse_page(fetch_page(url, token), url)
    return available_parts(root)

"""Marker-delimited region patching for README documents.

The generated summary lives between two marker lines. Everything outside the
markers is hand written and is preserved byte for byte on every update.
"""

import re
from pathlib import Path

START_MARKER = "<!-- GOFF:POINTERS:START -->"
END_MARKER = "<!-- GOFF:POINTERS:END -->"

# Markers only count when they sit alone on their own line
START_PATTERN = re.compile(r"^" + re.escape(START_MARKER) + r"\r?$", re.MULTILINE)
END_PATTERN = re.compile(r"^" + re.escape(END_MARKER) + r"\r?$", re.MULTILINE)


def find_region(text: str) -> tuple[int, int] | None:
    """Locate the managed region in a document.

    The region runs from the first start marker to the first end marker.

    Args:
        text: Document contents.

    Returns:
        ``(start, end)`` offsets spanning the start marker through the end of
        the end marker, or None if either marker is missing or out of order.
    """
    start = START_PATTERN.search(text)
    end = END_PATTERN.search(text)
    if start is None or end is None or end.start() < start.start():
        return None
    return start.start(), end.start() + len(END_MARKER)


def extract_region(text: str) -> str | None:
    """Return the content between the markers, or None if there is no region."""
    span = find_region(text)
    if span is None:
        return None
    start, end = span
    inner = text[start + len(START_MARKER) : end - len(END_MARKER)]
    if inner.startswith("\n"):
        inner = inner[1:]
    if inner.endswith("\n"):
        inner = inner[:-1]
    return inner


def render_region(content: str) -> str:
    """Wrap content in the start and end marker lines."""
    return f"{START_MARKER}\n{content}\n{END_MARKER}"


def patch_text(text: str, content: str) -> str:
    """Replace or append the managed region in a document.

    Args:
        text: Current document contents.
        content: New region content.

    Returns:
        The updated document.
    """
    span = find_region(text)
    if span is None:
        return text.rstrip("\n") + "\n\n" + render_region(content) + "\n"

    start, end = span
    return text[:start] + render_region(content) + text[end:]


def new_document(title: str, content: str) -> str:
    """Build a fresh document holding only a title and the managed region."""
    return f"{title}\n\n{render_region(content)}\n"


def update_document(path: Path, content: str, title: str) -> None:
    """Write content into the managed region of a document.

    Creates the document when it does not exist, and appends a region when
    the document has no well-formed markers. Running twice with the same
    content leaves the file unchanged.

    Args:
        path: Document path.
        content: Rendered region content.
        title: Header line for a newly created document.
    """
    path = Path(path)

    if not path.exists():
        print(f"  [readme] Creating {path}", flush=True)
        updated = new_document(title, content)
    else:
        with open(path, "r", encoding="utf-8", newline="") as f:
            current = f.read()
        updated = patch_text(current, content)

    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(updated)

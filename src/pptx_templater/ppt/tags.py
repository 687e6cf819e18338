"""
Tag matching for pptx_templater.

A tag is a placeholder token of the form ``{{identifier}}`` where the
identifier is made of zero or more characters from ``[A-Za-z0-9_+-.]``.
Matching is case-sensitive and ``{{}}`` is a valid (empty) tag.
"""
import re
from typing import Iterator

TAG_PATTERN = re.compile(r"\{\{[A-Za-z0-9_+\-.]*\}\}")


class TagMatches:
    """
    Lazy, restartable sequence of the tags found in a text.

    Each iteration scans the text again, so the same instance can be
    iterated any number of times.
    """

    def __init__(self, text: str):
        self.text = text or ""

    def __iter__(self) -> Iterator[str]:
        for match in TAG_PATTERN.finditer(self.text):
            yield match.group(0)

    def __bool__(self) -> bool:
        return TAG_PATTERN.search(self.text) is not None

    def __repr__(self) -> str:
        return f"TagMatches({self.text!r})"


def find_tags(text: str) -> TagMatches:
    """
    Find the non-overlapping tags inside a text.

    Args:
        text: Any string, None is treated as an empty string.

    Returns:
        A restartable iterable over the matched tag strings, in order.
    """
    return TagMatches(text)


def is_tag(text: str) -> bool:
    """Return True if the whole string is exactly one tag."""
    return bool(text) and TAG_PATTERN.fullmatch(text) is not None

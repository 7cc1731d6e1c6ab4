"""
Glob matching over dotted qualified names.

A pattern is split on `.` into tokens, and each token is matched against one
segment of the name:

- `**` on its own matches zero or more whole segments
- `*` on its own matches exactly one segment
- inside a token, `*` matches any run of characters and `?` exactly one
  character, never crossing a `.`
- every other character matches itself (case-sensitive, no escaping)

The whole pattern must consume the whole name. Matching never raises: a
pattern that cannot match anything simply returns `False`.
"""

from __future__ import annotations

import re
from functools import cache

MULTI_SEGMENT = "**"
SEPARATOR = "."


@cache
def _tokenize(pattern: str) -> tuple[str, ...]:
    """Split a pattern into tokens, collapsing runs of `**` into one."""
    tokens: list[str] = []
    for token in pattern.split(SEPARATOR):
        if token == MULTI_SEGMENT and tokens and tokens[-1] == MULTI_SEGMENT:
            continue
        tokens.append(token)
    return tuple(tokens)


@cache
def _segment_regex(token: str) -> re.Pattern[str]:
    parts: list[str] = []
    for char in token:
        if char == "*":
            parts.append(".*")
        elif char == "?":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    return re.compile("".join(parts), re.DOTALL)


def match_segment(token: str, segment: str) -> bool:
    """Match one pattern token (not `**`) against one name segment."""
    if token == "*":
        return True
    if "*" not in token and "?" not in token:
        return token == segment
    return _segment_regex(token).fullmatch(segment) is not None


def match(pattern: str, name: str) -> bool:
    """
    Return whether `pattern` matches the whole qualified `name`.

    Tokens other than `**` consume exactly one segment, so on a mismatch only
    the most recent `**` needs to take one more segment and the remaining
    tokens are retried from there.
    """
    tokens = _tokenize(pattern)
    segments = name.split(SEPARATOR)

    t = s = 0
    star = -1  # index of the last `**` token seen
    star_end = 0  # segments consumed up to and including that `**`
    while s < len(segments):
        if t < len(tokens) and tokens[t] == MULTI_SEGMENT:
            star = t
            star_end = s
            t += 1
        elif t < len(tokens) and match_segment(tokens[t], segments[s]):
            t += 1
            s += 1
        elif star >= 0:
            star_end += 1
            s = star_end
            t = star + 1
        else:
            return False

    while t < len(tokens) and tokens[t] == MULTI_SEGMENT:
        t += 1
    return t == len(tokens)


class PatternMatcher:
    """Stateless matcher object, safe to share between threads and walks."""

    def match(self, pattern: str, name: str) -> bool:
        return match(pattern, name)

    def accepts(self, include: str, exclude: str, name: str) -> bool:
        """A name is accepted when it matches `include` and does not match `exclude`."""
        return match(include, name) and not match(exclude, name)

"""Regex extraction of identifiers from free-form tool output."""

from __future__ import annotations

import re

from .errors import MalformedPattern, NoMatchFound
from .shared.logging import get_logger

logger = get_logger(__name__)


def _compile(pattern: str) -> re.Pattern[str]:
    try:
        return re.compile(pattern)
    except re.error as e:
        raise MalformedPattern(pattern=pattern, reason=str(e)) from e


def _capture(match: re.Match[str]) -> str:
    # Patterns without a group capture the whole match.
    if match.re.groups == 0:
        return match.group(0)
    return match.group(1)


def extract_one(text: str, pattern: str) -> str:
    """Return the first capture of ``pattern`` in ``text``.

    Args:
        text: Captured tool output
        pattern: Regex with one capture group (extra groups are ignored)

    Returns:
        Capture of the first match

    Raises:
        NoMatchFound: If the pattern does not match
        MalformedPattern: If the pattern does not compile
    """
    match = _compile(pattern).search(text)
    if match is None:
        logger.debug("pattern_not_found", pattern=pattern)
        raise NoMatchFound(pattern=pattern, text=text)
    value = _capture(match)
    logger.debug("pattern_matched", pattern=pattern, value=value)
    return value


def extract_all(text: str, pattern: str) -> list[str]:
    """Return the captures of every non-overlapping match, in text order.

    An empty list means no match; it is not an error.
    """
    values = [_capture(m) for m in _compile(pattern).finditer(text)]
    logger.debug("pattern_scanned", pattern=pattern, matches=len(values))
    return values

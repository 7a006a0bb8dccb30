"""
Selector Validation
-------------------

Two gates stand between a model answer and the caller:

:func:`is_safe_selector`
    A cheap syntax check.  The candidate must consist only of letters,
    digits, whitespace and CSS selector punctuation, and must not carry
    a script injection marker.  Unsafe candidates never reach the
    parser.

:func:`validates`
    Parses the markup and reports whether the selector matches at least
    one node.  Parser or selector errors count as "does not match".
"""

from __future__ import annotations

import re

from bs4 import BeautifulSoup

from ..utils.logger import get_logger

logger = get_logger(__name__)

SELECTOR_WHITELIST = re.compile(r"^[a-zA-Z0-9#.\[\]\-_:()>+~*=,\"'^$|/\s]+$")
INJECTION_MARKERS = ("javascript:", "<script")


def is_safe_selector(candidate: str) -> bool:
    if not candidate or not candidate.strip():
        return False
    lowered = candidate.lower()
    if any(marker in lowered for marker in INJECTION_MARKERS):
        logger.warning("Rejected selector with script injection marker: %r", candidate)
        return False
    return SELECTOR_WHITELIST.match(candidate) is not None


def validates(candidate: str, markup: str) -> bool:
    """Return ``True`` iff ``candidate`` is safe and matches a node in ``markup``."""
    if not is_safe_selector(candidate):
        return False
    try:
        soup = BeautifulSoup(markup, "html.parser")
        found = soup.select_one(candidate) is not None
    except Exception as exc:
        logger.debug("Validation of %r failed: %s", candidate, exc)
        return False
    logger.debug("Validation: selector %r %s", candidate, "matched" if found else "did not match")
    return found


__all__ = ["is_safe_selector", "validates", "SELECTOR_WHITELIST"]

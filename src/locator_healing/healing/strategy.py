"""
Healing Data Model
------------------

Value types shared by the self‑healing components: the element hint
supplied by the caller, the closed set of context extraction
strategies and the outcome returned by the resolver.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional

STOP_WORDS = frozenset({"the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with"})

_NON_ALNUM = re.compile(r"[^a-z0-9\s]")


def normalize_text(text: str) -> str:
    """Lower‑case ``text`` and strip everything but letters, digits and spaces."""
    return _NON_ALNUM.sub("", (text or "").lower()).strip()


def extract_keywords(text: str) -> List[str]:
    """Return the search keywords of a human readable element name.

    >>> extract_keywords("The Login Button!")
    ['login', 'button']
    """
    keywords: List[str] = []
    for word in normalize_text(text).split():
        if word not in STOP_WORDS and word not in keywords:
            keywords.append(word)
    return keywords


@dataclass(frozen=True)
class ElementHint:
    """What the caller knows about an element it can no longer find."""

    name: str
    previous_locator: Optional[str] = None
    keywords: List[str] = field(init=False, repr=False, compare=False, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "keywords", extract_keywords(self.name))


class ExtractionStrategy(Enum):
    """Markup context strategies, declared in escalation order.

    Each member carries the character budget of the fragment it may
    produce (``None`` for unbounded) and the model call timeout in
    seconds.
    """

    COMPACT = (1000, 5.0)
    EXPANDED = (3000, 10.0)
    FULL = (None, 30.0)

    def __init__(self, max_chars: Optional[int], timeout: float) -> None:
        self.max_chars = max_chars
        self.timeout = timeout

    @property
    def bounded(self) -> bool:
        return self.max_chars is not None

    @classmethod
    def escalation(cls) -> Iterator["ExtractionStrategy"]:
        """Yield the strategies in the order the resolver must try them."""
        return iter((cls.COMPACT, cls.EXPANDED, cls.FULL))


@dataclass(frozen=True)
class ResolutionOutcome:
    """Result of a resolution request.

    ``locator`` is either a selector that matched the live markup or
    ``None`` for "not found".  ``strategy`` records which extraction
    strategy produced (or found in the cache) the locator.
    """

    locator: Optional[str] = None
    strategy: Optional[ExtractionStrategy] = None
    from_cache: bool = False

    @property
    def found(self) -> bool:
        return self.locator is not None

    def __bool__(self) -> bool:
        return self.found


NOT_FOUND = ResolutionOutcome()


__all__ = [
    "ElementHint",
    "ExtractionStrategy",
    "ResolutionOutcome",
    "NOT_FOUND",
    "extract_keywords",
    "normalize_text",
]

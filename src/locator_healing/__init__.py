"""
Locator Healing
===============

Self‑healing element locators for keyword‑driven UI test automation.
When a stored locator no longer matches the page, the resolver asks a
language model for a replacement CSS selector, feeding it escalating
amounts of (redacted) page markup, and only hands back selectors that
match the live markup.

Modules
-------

``config``
    YAML + environment configuration loader (feature flag, provider,
    rate limit and cache settings).

``healing``
    Sanitizer, context extractor, rate limiter, locator cache, selector
    validator, the resolver that orchestrates them and the lookup helper
    used by driver keywords.

``utils``
    Logging and language model clients.
"""

from .config import Config
from .healing import (
    NOT_FOUND,
    ElementNotFoundError,
    ExtractionStrategy,
    ResolutionOutcome,
    SelfHealingResolver,
    find_with_healing,
)

__all__ = [
    "Config",
    "SelfHealingResolver",
    "ResolutionOutcome",
    "ExtractionStrategy",
    "NOT_FOUND",
    "find_with_healing",
    "ElementNotFoundError",
]

"""
Self‑healing subpackage.

When a stored locator stops matching, :class:`SelfHealingResolver`
asks a language model for a replacement, escalating from a compact
markup excerpt to the full page, and only ever returns selectors that
match the live markup.

```
from locator_healing.healing import SelfHealingResolver, find_with_healing
```
"""

from .cache import LocatorCache, fingerprint
from .extractor import extract_context
from .lookup import (
    ElementNotFoundError,
    PlaywrightMarkupSource,
    SeleniumMarkupSource,
    find_with_healing,
)
from .rate_limiter import RateLimiter
from .resolver import SelfHealingResolver, build_prompt, extract_candidate
from .sanitizer import sanitize
from .strategy import NOT_FOUND, ElementHint, ExtractionStrategy, ResolutionOutcome
from .validator import is_safe_selector, validates

__all__ = [
    "ElementHint",
    "ExtractionStrategy",
    "ResolutionOutcome",
    "NOT_FOUND",
    "sanitize",
    "extract_context",
    "RateLimiter",
    "LocatorCache",
    "fingerprint",
    "is_safe_selector",
    "validates",
    "SelfHealingResolver",
    "build_prompt",
    "extract_candidate",
    "find_with_healing",
    "ElementNotFoundError",
    "SeleniumMarkupSource",
    "PlaywrightMarkupSource",
]

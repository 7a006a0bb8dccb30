"""
Element Lookup with Self‑Healing
--------------------------------

Glue between a browser driver and :class:`SelfHealingResolver`.  The
keyword layer calls :func:`find_with_healing` with the element's stored
locators and a ``probe`` callable that performs the actual driver
lookup (and raises when nothing is found).  Stored locators are tried
first; only when all of them fail is the resolver consulted, and the
healed locator is probed like any other.

Two markup sources adapt the common drivers to the resolver's
``current_markup()`` contract without importing them:

- :class:`SeleniumMarkupSource` reads ``driver.page_source``
- :class:`PlaywrightMarkupSource` reads ``page.content()``
"""

from __future__ import annotations

from typing import Any, Callable, Optional, Protocol, Sequence, Tuple, TypeVar

from ..utils.logger import get_logger
from .resolver import SelfHealingResolver

logger = get_logger(__name__)

T = TypeVar("T")


class MarkupSource(Protocol):
    def current_markup(self) -> str:
        ...


class SeleniumMarkupSource:
    """Markup source backed by a Selenium/Appium ``WebDriver``."""

    def __init__(self, driver: Any) -> None:
        self.driver = driver

    def current_markup(self) -> str:
        return self.driver.page_source


class PlaywrightMarkupSource:
    """Markup source backed by a synchronous Playwright ``Page``."""

    def __init__(self, page: Any) -> None:
        self.page = page

    def current_markup(self) -> str:
        return self.page.content()


class ElementNotFoundError(LookupError):
    """Raised when neither stored nor healed locators find the element."""

    def __init__(self, element_name: str, tried: Sequence[str]) -> None:
        self.element_name = element_name
        self.tried = list(tried)
        super().__init__(
            f"Could not find element '{element_name}' with any method (tried: {', '.join(self.tried) or 'none'})"
        )


def find_with_healing(
    name: str,
    locators: Sequence[str],
    probe: Callable[[str], T],
    resolver: Optional[SelfHealingResolver],
    description: Optional[str] = None,
) -> Tuple[T, str]:
    """Locate an element, falling back to self‑healing.

    Returns ``(element, locator)`` where ``locator`` is the selector that
    worked.  ``probe`` receives a CSS selector and must return the
    element or raise.  The resolver sees the element name combined with
    ``description`` and the first stored locator as the failing one.
    """
    tried = []
    for locator in locators:
        tried.append(locator)
        try:
            logger.info("Looking up '%s' with locator: %s", name, locator)
            return probe(locator), locator
        except Exception as exc:
            logger.warning("Element '%s' not found with locator %s: %s", name, locator, exc)

    if resolver is None or not resolver.is_available():
        raise ElementNotFoundError(name, tried)

    logger.warning("All stored locators failed for '%s'; trying AI self-healing", name)
    hint_name = f"{name} [description: {description}]" if description else name
    outcome = resolver.resolve(hint_name, locators[0] if locators else None)
    if not outcome.found:
        raise ElementNotFoundError(name, tried)

    healed = outcome.locator
    tried.append(healed)
    try:
        logger.info("AI proposed new locator for '%s': %s", name, healed)
        return probe(healed), healed
    except Exception as exc:
        logger.error("Healed locator %s for '%s' also failed: %s", healed, name, exc)
        raise ElementNotFoundError(name, tried) from exc


__all__ = [
    "MarkupSource",
    "SeleniumMarkupSource",
    "PlaywrightMarkupSource",
    "ElementNotFoundError",
    "find_with_healing",
]

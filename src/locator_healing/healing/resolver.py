"""
Self‑Healing Resolver
---------------------

Orchestrates locator recovery for an element whose stored locator no
longer matches the page.  For every :class:`ExtractionStrategy`, in
escalation order (compact, expanded, full), the resolver:

1. cuts a markup fragment for the element and redacts it;
2. returns a cached locator straight away if this exact fragment was
   healed before;
3. asks the rate limiter for a call slot (denied → next strategy);
4. prompts the model with the element name, the failing locator and
   the fragment, under the strategy's timeout;
5. pulls a single selector out of the answer and checks it against the
   selector whitelist;
6. validates the selector against the original, unredacted markup and,
   if it matches, caches and returns it.

The first strategy that yields a validated selector wins.  Every
failure along the way (model errors, timeouts, rate limiting, bad or
non‑matching selectors) only moves on to the next strategy; once all
strategies are spent the caller receives :data:`NOT_FOUND`.  Nothing
raises out of :meth:`SelfHealingResolver.resolve`.

The cache and the rate limiter are plain constructor arguments so that
several independent resolvers (one per test worker, say) can coexist,
or share instances deliberately.
"""

from __future__ import annotations

import re
from typing import Any, Optional

from ..utils.llm_client import ModelClient, create_model_client
from ..utils.logger import get_logger
from .cache import LocatorCache, fingerprint
from .extractor import extract_context
from .rate_limiter import RateLimiter
from .sanitizer import sanitize
from .strategy import NOT_FOUND, ElementHint, ExtractionStrategy, ResolutionOutcome
from .validator import is_safe_selector, validates

logger = get_logger(__name__)

PROMPT_TEMPLATE = (
    "You are a web automation expert. Find the EXACT CSS selector.\n\n"
    "ELEMENT: {element}\n"
    "PREVIOUS LOCATOR (FAILED): {previous}\n\n"
    "HTML:\n```html\n{html}\n```\n\n"
    "RULES:\n"
    "1. Return ONLY a CSS selector that EXISTS in the HTML\n"
    "2. Prefer ID > class > attribute\n"
    "3. DO NOT invent IDs\n"
    "4. Verify the selector mentally\n\n"
    "CSS SELECTOR:"
)

_FENCED_BLOCK = re.compile(r"```(?:[\w-]+[ \t]*\n|[ \t]*\n?)(.+?)```", re.DOTALL)
_ANSWER_MARKERS = ("RESPONSE:", "CSS SELECTOR:", "SELECTOR:", "```")


def build_prompt(element_name: str, fragment: str, previous_locator: Optional[str] = None) -> str:
    return PROMPT_TEMPLATE.format(
        element=element_name,
        previous=previous_locator or "none",
        html=fragment,
    )


def extract_candidate(answer: Optional[str]) -> Optional[str]:
    """Pull a single selector out of a free‑text model answer.

    The first fenced code block wins; otherwise the answer is stripped of
    stray markers.  Only the first non‑empty line is kept, and a selector
    wrapped in matching quotes or backticks is unwrapped.
    """
    if not answer:
        return None
    match = _FENCED_BLOCK.search(answer)
    if match:
        text = match.group(1)
    else:
        text = answer
        for marker in _ANSWER_MARKERS:
            text = text.replace(marker, "")

    lines = [line.strip() for line in text.strip().splitlines() if line.strip()]
    if not lines:
        return None
    candidate = lines[0]
    while len(candidate) >= 2 and candidate[0] == candidate[-1] and candidate[0] in "`'\"":
        candidate = candidate[1:-1].strip()
    return candidate or None


class SelfHealingResolver:
    """Recover a working CSS selector for an element with the help of an LLM."""

    def __init__(
        self,
        model_client: Optional[ModelClient],
        cache: Optional[LocatorCache] = None,
        rate_limiter: Optional[RateLimiter] = None,
        markup_source: Any = None,
        enabled: bool = True,
        sanitize_full_context: bool = True,
    ) -> None:
        self.model_client = model_client
        self.cache = cache if cache is not None else LocatorCache()
        self.rate_limiter = rate_limiter if rate_limiter is not None else RateLimiter()
        self.markup_source = markup_source
        self.enabled = enabled
        self.sanitize_full_context = sanitize_full_context

    @classmethod
    def from_config(
        cls,
        config: Any,
        model_client: Optional[ModelClient] = None,
        markup_source: Any = None,
    ) -> "SelfHealingResolver":
        """Build a resolver from the ``ai.*`` section of a :class:`Config`.

        The model client is created from ``ai.provider`` unless one is
        passed in; it is not created at all while the feature flag is off.
        """
        enabled = config.get_bool("ai.self_healing.enabled", False)
        if model_client is None and enabled:
            model_client = create_model_client(config)
        cache = LocatorCache(
            ttl_seconds=config.get_float("ai.cache.ttl_hours", 24.0) * 3600,
            max_size=config.get_int("ai.cache.max_size", 1000),
        )
        limiter = RateLimiter(
            max_calls=config.get_int("ai.rate_limit.max_calls", 10),
            window_seconds=config.get_float("ai.rate_limit.window_seconds", 60.0),
        )
        return cls(
            model_client,
            cache=cache,
            rate_limiter=limiter,
            markup_source=markup_source,
            enabled=enabled,
            sanitize_full_context=config.get_bool("ai.self_healing.sanitize_full_dom", True),
        )

    def is_available(self) -> bool:
        return self.enabled and self.model_client is not None

    def clear_cache(self) -> None:
        self.cache.clear()

    def resolve(
        self,
        element_name: str,
        previous_locator: Optional[str] = None,
        markup: Optional[str] = None,
    ) -> ResolutionOutcome:
        """Find a new locator for ``element_name``.

        ``markup`` is the current page markup; when omitted it is read
        from the configured markup source.  Returns a
        :class:`ResolutionOutcome` whose ``locator`` is guaranteed to
        match the markup, or :data:`NOT_FOUND`.
        """
        if not self.is_available():
            logger.warning("AI self-healing is disabled or has no model client")
            return NOT_FOUND

        if markup is None:
            markup = self._current_markup()
            if markup is None:
                return NOT_FOUND

        hint = ElementHint(element_name, previous_locator)
        for strategy in ExtractionStrategy.escalation():
            logger.info("Trying AI self-healing for '%s' with strategy: %s", element_name, strategy.name)
            outcome = self._try_strategy(hint, markup, strategy)
            if outcome.found:
                logger.info("Self-healing succeeded for '%s' with strategy %s: %s", element_name, strategy.name, outcome.locator)
                return outcome
            logger.warning("Strategy %s failed for '%s', escalating", strategy.name, element_name)

        logger.error("All strategies failed for element: %s", element_name)
        return NOT_FOUND

    def _current_markup(self) -> Optional[str]:
        if self.markup_source is None:
            logger.error("No markup passed and no markup source configured")
            return None
        try:
            markup = self.markup_source.current_markup()
        except Exception as exc:
            logger.error("Failed to read current page markup: %s", exc)
            return None
        if not isinstance(markup, str):
            logger.error("Markup source returned %s instead of text", type(markup).__name__)
            return None
        return markup

    def _prepare_fragment(self, markup: str, hint: ElementHint, strategy: ExtractionStrategy) -> str:
        fragment = extract_context(markup, hint, strategy)
        if strategy is ExtractionStrategy.FULL and not self.sanitize_full_context:
            logger.warning("Sending unsanitized full markup for '%s'", hint.name)
            return fragment
        return sanitize(fragment)

    def _try_strategy(self, hint: ElementHint, markup: str, strategy: ExtractionStrategy) -> ResolutionOutcome:
        try:
            fragment = self._prepare_fragment(markup, hint, strategy)
            logger.debug("Extracted %d chars for strategy %s", len(fragment), strategy.name)
            if not fragment.strip():
                logger.info("No context extracted for '%s' with strategy %s", hint.name, strategy.name)
                return NOT_FOUND

            context_hash = fingerprint(fragment)
            cached = self.cache.get(hint.name, context_hash)
            if cached is not None:
                logger.info("Cache HIT for '%s' with strategy %s", hint.name, strategy.name)
                return ResolutionOutcome(cached, strategy, from_cache=True)

            if not self.rate_limiter.try_acquire():
                logger.warning("Rate limit exceeded, skipping model call for strategy %s", strategy.name)
                return NOT_FOUND

            candidate = self._ask_model(hint, fragment, strategy)
            if candidate is None:
                return NOT_FOUND
            if not is_safe_selector(candidate):
                logger.warning("Model proposed a disallowed selector: %r", candidate)
                return NOT_FOUND
            if not validates(candidate, markup):
                logger.warning("Locator '%s' validation failed against DOM", candidate)
                return NOT_FOUND

            self.cache.put(hint.name, context_hash, candidate)
            return ResolutionOutcome(candidate, strategy)
        except Exception as exc:
            logger.error("Error with strategy %s: %s", strategy.name, exc)
            return NOT_FOUND

    def _ask_model(self, hint: ElementHint, fragment: str, strategy: ExtractionStrategy) -> Optional[str]:
        prompt = build_prompt(hint.name, fragment, hint.previous_locator)
        logger.debug("Prompt for '%s' (%s):\n%s", hint.name, strategy.name, prompt)
        try:
            answer = self.model_client.chat(prompt, timeout=strategy.timeout)
        except Exception as exc:
            logger.warning("AI call failed for strategy %s: %s", strategy.name, exc)
            return None
        logger.debug("Model answer for '%s': %r", hint.name, answer)
        return extract_candidate(answer)


__all__ = ["SelfHealingResolver", "build_prompt", "extract_candidate", "PROMPT_TEMPLATE"]

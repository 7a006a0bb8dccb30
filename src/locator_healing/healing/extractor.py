"""
Context Extractor
-----------------

Cuts a bounded excerpt out of the page markup for the model to look at.
The excerpt is chosen by the :class:`ExtractionStrategy`:

``COMPACT``
    Locate nodes related to the element hint (own text first, then
    identifying attributes, then the page's main content area) and emit
    a small snippet per node: the parent's opening tag with a handful
    of identifying attributes, the node itself, up to two siblings and
    the parent's closing tag.  Snippets are added whole until the next
    one would overflow the budget.

``EXPANDED``
    Locate the first related node as above and emit its enclosing
    semantic container (``form``, ``section``, ``article``, ``main`` or
    any node whose class mentions ``container``/``content``), cut at
    the budget.

``FULL``
    The markup, untouched.

Parsing uses BeautifulSoup with the stdlib ``html.parser`` backend and
soupsieve for CSS queries.  Extraction never raises: if anything goes
wrong the raw markup is truncated to the budget instead.
"""

from __future__ import annotations

from typing import List, Optional, Union

from bs4 import BeautifulSoup, Comment, Tag

from ..utils.logger import get_logger
from .strategy import ElementHint, ExtractionStrategy

logger = get_logger(__name__)

MAX_CANDIDATES = 5
MAX_SIBLINGS = 2

SEARCH_ATTRIBUTES = ("id", "name", "class", "data-test-id", "data-testid", "aria-label")
SNIPPET_ATTRIBUTES = ("id", "class", "name", "data-test-id", "role", "type")
SEMANTIC_CONTAINERS = frozenset({"form", "section", "article", "main"})
CONTAINER_CLASS_MARKERS = ("container", "content")

_TEXTLESS_TAGS = frozenset({"script", "style", "noscript", "template", "title"})
_UNWRAPPED_PARENTS = frozenset({"body", "html", "[document]"})

MAIN_CONTENT_SELECTOR = "main, article, [role=main]"
CONTAINER_SELECTOR = "form, [class*=container], [class*=content], #content"


def extract_context(
    full_markup: str,
    hint: Union[ElementHint, str],
    strategy: ExtractionStrategy,
) -> str:
    """Return the markup fragment ``strategy`` selects for ``hint``."""
    if strategy is ExtractionStrategy.FULL:
        logger.debug("Using FULL markup strategy: %d chars", len(full_markup))
        return full_markup

    if isinstance(hint, str):
        hint = ElementHint(hint)

    try:
        soup = BeautifulSoup(full_markup, "html.parser")
        if strategy is ExtractionStrategy.EXPANDED:
            return _expanded_context(soup, hint, strategy.max_chars)
        return _compact_context(soup, hint, strategy.max_chars)
    except Exception as exc:
        logger.error("Context extraction failed (%s), falling back to truncated markup: %s", strategy.name, exc)
        return (full_markup or "")[: strategy.max_chars]


def _compact_context(soup: BeautifulSoup, hint: ElementHint, max_chars: int) -> str:
    candidates = find_related_nodes(soup, hint)
    if not candidates:
        main = find_main_content_area(soup)
        candidates = [main] if main is not None else []

    context = ""
    for node in candidates:
        snippet = build_compact_snippet(node)
        if len(context) + len(snippet) > max_chars:
            break
        context += snippet
    logger.debug("Compact context: %d node(s), %d chars", len(candidates), len(context))
    return context


def _expanded_context(soup: BeautifulSoup, hint: ElementHint, max_chars: int) -> str:
    candidates = find_related_nodes(soup, hint)
    if candidates:
        container = find_container(candidates[0])
        if container is not None:
            markup = str(container)
            logger.debug("Found container <%s> with %d chars", container.name, len(markup))
            return markup[:max_chars]

    main = find_main_content_area(soup)
    if main is not None:
        return str(main)[:max_chars]

    body = soup.body
    return (body.decode_contents() if body is not None else str(soup))[:max_chars]


def find_related_nodes(soup: BeautifulSoup, hint: ElementHint) -> List[Tag]:
    """Nodes whose own text, or failing that identifying attributes, mention the hint."""
    nodes = find_by_text(soup, hint.keywords)
    if not nodes:
        nodes = find_by_attributes(soup, hint.keywords)
    return nodes


def find_by_text(soup: BeautifulSoup, keywords: List[str]) -> List[Tag]:
    results: List[Tag] = []
    seen = set()
    for keyword in keywords:
        for tag in soup.find_all(True):
            if id(tag) in seen or tag.name in _TEXTLESS_TAGS:
                continue
            if keyword in _own_text(tag).lower():
                seen.add(id(tag))
                results.append(tag)
        if len(results) >= MAX_CANDIDATES:
            break
    return results[:MAX_CANDIDATES]


def find_by_attributes(soup: BeautifulSoup, keywords: List[str]) -> List[Tag]:
    results: List[Tag] = []
    if not keywords:
        return results
    seen = set()
    for attr in SEARCH_ATTRIBUTES:
        for tag in soup.find_all(attrs={attr: True}):
            if id(tag) in seen:
                continue
            value = _attribute_text(tag, attr).lower()
            if any(keyword in value for keyword in keywords):
                seen.add(id(tag))
                results.append(tag)
        if len(results) >= MAX_CANDIDATES:
            break
    return results[:MAX_CANDIDATES]


def find_main_content_area(soup: BeautifulSoup) -> Optional[Tag]:
    main = soup.select_one(MAIN_CONTENT_SELECTOR)
    if main is not None:
        return main
    return soup.select_one(CONTAINER_SELECTOR)


def find_container(node: Tag) -> Optional[Tag]:
    """Walk from ``node`` up to the nearest semantic container, if any."""
    current = node
    while isinstance(current, Tag) and current.name != "[document]":
        if current.name in SEMANTIC_CONTAINERS:
            return current
        classes = [c.lower() for c in current.get("class") or []]
        if any(marker in c for c in classes for marker in CONTAINER_CLASS_MARKERS):
            return current
        current = current.parent
    return None


def build_compact_snippet(node: Tag) -> str:
    parent = node.parent
    wrap = isinstance(parent, Tag) and parent.name not in _UNWRAPPED_PARENTS

    parts: List[str] = []
    if wrap:
        parts.append(f"<{parent.name}{_relevant_attributes(parent)}>\n")
    parts.append(f"  {node}\n")
    if isinstance(parent, Tag):
        siblings = [s for s in parent.find_all(True, recursive=False) if s is not node]
        for sibling in siblings[:MAX_SIBLINGS]:
            parts.append(f"  {sibling}\n")
    if wrap:
        parts.append(f"</{parent.name}>\n")
    return "".join(parts)


def _relevant_attributes(tag: Tag) -> str:
    rendered = ""
    for attr in SNIPPET_ATTRIBUTES:
        value = _attribute_text(tag, attr)
        if value:
            rendered += ' {}="{}"'.format(attr, value.replace('"', "&quot;"))
    return rendered


def _attribute_text(tag: Tag, attr: str) -> str:
    value = tag.get(attr)
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return " ".join(value)
    return str(value)


def _own_text(tag: Tag) -> str:
    return "".join(
        str(s) for s in tag.find_all(string=True, recursive=False) if not isinstance(s, Comment)
    )


__all__ = [
    "extract_context",
    "find_related_nodes",
    "find_by_text",
    "find_by_attributes",
    "find_main_content_area",
    "find_container",
    "build_compact_snippet",
]

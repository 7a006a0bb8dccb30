"""
Markup Sanitizer
----------------

Redacts personal data and secrets from a markup fragment before it is
sent to an external language model.  The function is pure: it never
touches the network or the file system and always returns a string.

Redactions are applied in a fixed order:

1. e‑mail addresses
2. phone‑number shaped digit sequences
3. values of secret‑like attributes (``password``, ``secret``,
   ``token``, ``api-key``, ``auth``, ``session`` and compound names
   such as ``data-auth-token``) and ``key: "value"`` secrets inside
   inline scripts or JSON blobs
4. 13–19 digit credit‑card shaped sequences

Attribute quoting is kept intact (quoted or bare values alike) so the
result is still well formed markup.  Redacting a placeholder yields the
same placeholder, which makes :func:`sanitize` idempotent.
"""

from __future__ import annotations

import re
from typing import Callable, List, Tuple, Union

from ..utils.logger import get_logger

logger = get_logger(__name__)

EMAIL_PLACEHOLDER = "***@***.***"
PHONE_PLACEHOLDER = "***-***-****"
SECRET_PLACEHOLDER = "***"
CARD_PLACEHOLDER = "****-****-****-****"

_SECRET_NAMES = r"(?:password|passwd|secret|token|api[-_]?key|auth|session|jwt)"
_SECRET_IDENT = r"(?:[a-z0-9]+[-_])*" + _SECRET_NAMES + r"(?:[-_][a-z0-9]+)*"

EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")

PHONE_PATTERN = re.compile(
    r"(?<!\d)(?:\+?\d{1,3}[-.\s]?)?\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}(?!\d)"
)

SECRET_ATTRIBUTE_PATTERN = re.compile(
    r"(?<![\w-])(" + _SECRET_IDENT + r")(\s*=\s*)(?:([\"'])(.*?)\3|([^\s\"'=<>`]+))",
    re.IGNORECASE | re.DOTALL,
)

INLINE_SECRET_PATTERN = re.compile(
    r"(?<![\w-])(" + _SECRET_IDENT + r")([\"']?\s*:\s*)([\"'])([^\"']*)\3",
    re.IGNORECASE,
)

CREDIT_CARD_PATTERN = re.compile(r"(?<!\d)\d(?:[ -]?\d){12,18}(?!\d)")

def _redact_secret_attribute(match: "re.Match[str]") -> str:
    name, equals, quote = match.group(1), match.group(2), match.group(3)
    if quote is None:
        # unquoted value
        return f"{name}{equals}{SECRET_PLACEHOLDER}"
    return f"{name}{equals}{quote}{SECRET_PLACEHOLDER}{quote}"


_RULES: List[Tuple[str, "re.Pattern[str]", Union[str, Callable[["re.Match[str]"], str]]]] = [
    ("email", EMAIL_PATTERN, EMAIL_PLACEHOLDER),
    ("phone", PHONE_PATTERN, PHONE_PLACEHOLDER),
    ("secret-attribute", SECRET_ATTRIBUTE_PATTERN, _redact_secret_attribute),
    ("inline-secret", INLINE_SECRET_PATTERN, r"\1\2\3" + SECRET_PLACEHOLDER + r"\3"),
    ("credit-card", CREDIT_CARD_PATTERN, CARD_PLACEHOLDER),
]


def sanitize(fragment: str) -> str:
    """Return ``fragment`` with personal data and secrets redacted."""
    if not fragment:
        return fragment

    sanitized = fragment
    redacted = 0
    for label, pattern, replacement in _RULES:
        try:
            sanitized, count = pattern.subn(replacement, sanitized)
        except Exception as exc:
            # leave the text as it is for this rule only
            logger.debug("Sanitizer rule %s failed: %s", label, exc)
            continue
        redacted += count

    if redacted:
        logger.debug("Sanitized markup: redacted %d sensitive value(s)", redacted)
    return sanitized


__all__ = [
    "sanitize",
    "EMAIL_PLACEHOLDER",
    "PHONE_PLACEHOLDER",
    "SECRET_PLACEHOLDER",
    "CARD_PLACEHOLDER",
]

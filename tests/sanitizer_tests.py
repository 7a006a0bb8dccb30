"""
Sanitizer Tests
---------------

Personal data and secrets must not survive sanitisation, the markup
must stay well formed and sanitising twice must change nothing.
"""

import pytest

from locator_healing.healing.sanitizer import (
    CARD_PLACEHOLDER,
    EMAIL_PLACEHOLDER,
    PHONE_PLACEHOLDER,
    sanitize,
)


SAMPLES = [
    "",
    "<p>nothing to hide</p>",
    "Contact: a@b.com, call 555-123-4567",
    '<input type="password" password="hunter2" data-auth-token=\'abc\'>',
    "<span>card 4111 1111 1111 1111 and 4111111111111111</span>",
    '<script>var cfg = {"apiKey": "sk-123", session: \'s1\'};</script>',
    "<p>+1 (555) 123-4567 / jane.doe+qa@example.co.uk</p>",
    "<input type=hidden session=S3CRETVALUE>",
]


def test_contact_details_are_removed() -> None:
    result = sanitize("Contact: a@b.com, call 555-123-4567")
    assert "a@b.com" not in result
    assert "555-123-4567" not in result
    assert EMAIL_PLACEHOLDER in result
    assert PHONE_PLACEHOLDER in result


@pytest.mark.parametrize("fragment", SAMPLES)
def test_sanitize_is_idempotent(fragment: str) -> None:
    once = sanitize(fragment)
    assert sanitize(once) == once


def test_secret_attribute_values_keep_their_quotes() -> None:
    html = '<input name="q" token=\'abc123\' data-auth-token="xyz" api-key = "k1">'
    result = sanitize(html)
    assert "token='***'" in result
    assert 'data-auth-token="***"' in result
    assert 'api-key = "***"' in result
    assert "abc123" not in result and "xyz" not in result and "k1" not in result
    assert 'name="q"' in result


def test_similar_attribute_names_are_left_alone() -> None:
    html = '<meta author="Jane" name="description">'
    assert sanitize(html) == html


def test_inline_script_secrets_are_redacted() -> None:
    result = sanitize('<script>init({"apiKey": "sk-123", "jwt": "eyJhbGci"})</script>')
    assert '"apiKey": "***"' in result
    assert '"jwt": "***"' in result
    assert "sk-123" not in result


@pytest.mark.parametrize(
    "card",
    ["4111 1111 1111 1111", "4111-1111-1111-1111", "4111111111111111", "3714496353984310005"],
)
def test_credit_card_numbers_are_replaced(card: str) -> None:
    result = sanitize(f"<td>{card}</td>")
    assert card not in result
    assert CARD_PLACEHOLDER in result


def test_international_phone_number() -> None:
    result = sanitize("<p>Call +1 (555) 123-4567 today</p>")
    assert "123-4567" not in result
    assert result.startswith("<p>Call ") and result.endswith(" today</p>")


def test_short_numbers_are_kept() -> None:
    html = '<li data-index="42">Item 1234</li>'
    assert sanitize(html) == html


def test_empty_and_none_pass_through() -> None:
    assert sanitize("") == ""
    assert sanitize(None) is None


def test_unquoted_secret_attribute_values_are_redacted() -> None:
    html = "<input type=hidden token=abc123secret><div data-session=S3CRETVALUE id=box></div>"
    result = sanitize(html)
    assert result == "<input type=hidden token=***><div data-session=*** id=box></div>"
    assert sanitize(result) == result

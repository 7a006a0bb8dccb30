"""
Context Extractor Tests
-----------------------

Covers the three extraction strategies, their character budgets and
the fallbacks used when nothing related to the hint can be found or
the markup cannot be parsed.
"""

import pytest

from locator_healing.healing import extractor
from locator_healing.healing.extractor import extract_context
from locator_healing.healing.strategy import ElementHint, ExtractionStrategy


def _long_list_page(items: int = 300) -> str:
    rows = "".join(f'<li class="row">Login option {i}</li>' for i in range(items))
    return f"<html><body><ul id='options'>{rows}</ul></body></html>"


def test_full_strategy_returns_markup_verbatim() -> None:
    markup = _long_list_page(2000)
    assert extract_context(markup, ElementHint("Login"), ExtractionStrategy.FULL) == markup


@pytest.mark.parametrize("strategy", [ExtractionStrategy.COMPACT, ExtractionStrategy.EXPANDED])
def test_bounded_strategies_respect_budget(strategy: ExtractionStrategy) -> None:
    result = extract_context(_long_list_page(), ElementHint("Login option"), strategy)
    assert 0 < len(result) <= strategy.max_chars


def test_compact_never_cuts_a_snippet() -> None:
    result = extract_context(_long_list_page(), ElementHint("Login option"), ExtractionStrategy.COMPACT)
    assert result.startswith('<ul id="options">')
    assert result.endswith("</ul>\n")
    assert result.count("<ul") == result.count("</ul>")


def test_compact_snippet_contains_parent_node_and_siblings(login_page: str) -> None:
    result = extract_context(login_page, ElementHint("Login Button"), ExtractionStrategy.COMPACT)
    first_line = result.splitlines()[0]
    assert first_line == '<form id="login-form" class="auth-form">'
    assert 'id="login-btn"' in result
    assert "Username" in result
    assert 'id="user"' in result
    # only two siblings are included
    assert 'id="pwd"' not in result
    assert result.rstrip().endswith("</form>")


def test_compact_falls_back_to_attributes() -> None:
    markup = "<html><body><div class='field'><input id='email-field' type='email'></div></body></html>"
    result = extract_context(markup, ElementHint("Email Field"), ExtractionStrategy.COMPACT)
    assert 'id="email-field"' in result
    assert result.startswith('<div class="field">')


def test_compact_falls_back_to_main_content(login_page: str) -> None:
    result = extract_context(login_page, ElementHint("Checkout widget"), ExtractionStrategy.COMPACT)
    assert "<main>" in result


def test_script_text_is_not_searched() -> None:
    markup = "<html><body><script>var login = 1;</script><p>hello</p></body></html>"
    result = extract_context(markup, ElementHint("login"), ExtractionStrategy.COMPACT)
    assert "var login" not in result


def test_expanded_returns_enclosing_form(login_page: str) -> None:
    result = extract_context(login_page, ElementHint("Login Button"), ExtractionStrategy.EXPANDED)
    assert result.startswith("<form")
    assert result.endswith("</form>")
    assert 'id="pwd"' in result


def test_expanded_uses_content_class_container() -> None:
    markup = (
        "<html><body><div class='page-content'><div><a id='go'>Continue</a></div></div>"
        "<div class='footer'>x</div></body></html>"
    )
    result = extract_context(markup, ElementHint("Continue"), ExtractionStrategy.EXPANDED)
    assert result.startswith('<div class="page-content">')
    assert "footer" not in result


def test_expanded_without_match_uses_main_area(login_page: str) -> None:
    result = extract_context(login_page, ElementHint("Nothing like this"), ExtractionStrategy.EXPANDED)
    assert result.startswith("<main>")


def test_expanded_truncates_large_container() -> None:
    rows = "".join(f"<p>Pay now line {i}</p>" for i in range(1000))
    markup = f"<html><body><section>{rows}</section></body></html>"
    result = extract_context(markup, ElementHint("Pay now"), ExtractionStrategy.EXPANDED)
    assert len(result) == ExtractionStrategy.EXPANDED.max_chars
    assert result.startswith("<section>")


def test_parse_error_falls_back_to_truncation(monkeypatch: pytest.MonkeyPatch) -> None:
    def broken(*args, **kwargs):
        raise ValueError("parser exploded")

    monkeypatch.setattr(extractor, "BeautifulSoup", broken)
    markup = "x" * 5000
    result = extract_context(markup, ElementHint("Login"), ExtractionStrategy.COMPACT)
    assert result == "x" * ExtractionStrategy.COMPACT.max_chars


def test_string_hint_is_accepted(login_page: str) -> None:
    assert extract_context(login_page, "Login Button", ExtractionStrategy.COMPACT) == extract_context(
        login_page, ElementHint("Login Button"), ExtractionStrategy.COMPACT
    )

"""
Shared fixtures for the self‑healing test suite.

Time is controlled through :class:`FakeClock` so cache expiry and rate
windows can be exercised without sleeping, and the language model is
replaced by :class:`ScriptedModelClient`, which replays canned answers
and records every prompt it receives.
"""

from typing import List, Tuple, Union

import pytest

from locator_healing.utils.llm_client import ModelCallError, ModelClient


LOGIN_PAGE = """<html>
<head><title>Shop</title></head>
<body>
  <header class="site-header"><a href="/">Home</a></header>
  <main>
    <form id="login-form" class="auth-form" action="/session">
      <label for="user">Username</label>
      <input id="user" name="username" type="text">
      <input id="pwd" name="pwd" type="password" data-session="abc123">
      <button id="login-btn" class="btn primary" type="submit">Login</button>
    </form>
    <span id="ok">ready</span>
    <p class="contact">Contact: a@b.com, call 555-123-4567</p>
  </main>
</body>
</html>"""


class FakeClock:
    """Manually advanced clock usable wherever ``time.time`` is expected."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class ScriptedModelClient(ModelClient):
    """Model client that answers from a script.

    Each script item is either the text to return or an exception to
    raise.  Calls beyond the script raise :class:`ModelCallError`.
    """

    name = "scripted"

    def __init__(self, answers: List[Union[str, Exception]] = None) -> None:
        self.answers = list(answers or [])
        self.calls: List[Tuple[str, float]] = []

    def chat(self, prompt: str, timeout: float) -> str:
        self.calls.append((prompt, timeout))
        if not self.answers:
            raise ModelCallError("script exhausted")
        answer = self.answers.pop(0)
        if isinstance(answer, Exception):
            raise answer
        return answer

    @property
    def prompts(self) -> List[str]:
        return [prompt for prompt, _ in self.calls]


class StaticMarkupSource:
    def __init__(self, markup: str) -> None:
        self.markup = markup
        self.reads = 0

    def current_markup(self) -> str:
        self.reads += 1
        return self.markup


@pytest.fixture
def login_page() -> str:
    return LOGIN_PAGE


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def scripted_client():
    """Factory fixture: ``scripted_client("#a", TimeoutError())``."""

    def _make(*answers: Union[str, Exception]) -> ScriptedModelClient:
        return ScriptedModelClient(list(answers))

    return _make


@pytest.fixture
def markup_source():
    def _make(markup: str = LOGIN_PAGE) -> StaticMarkupSource:
        return StaticMarkupSource(markup)

    return _make

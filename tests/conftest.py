"""
Global test fixtures for the remix service.

Creates an isolated Flask app over a temp data dir and injects a scripted
fake generator so tests never hit the OpenAI API.
"""

from __future__ import annotations
import os
import sys
import threading
from pathlib import Path
from typing import Any, Callable, List, Optional, Union

import pytest

# ---------------------------------------------------------------------------
# Import target app
# ---------------------------------------------------------------------------
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app import create_app  # type: ignore
from connectors.openai_text import GenerationError  # type: ignore
from retrieval.storage import Storage  # type: ignore
from service import GenerationParams, RemixContext  # type: ignore

# ---------------------------------------------------------------------------
# Pytest Hooks
# ---------------------------------------------------------------------------

def pytest_configure(config):
    """Called once per test run."""
    os.environ.setdefault("OPENAI_API_KEY", "sk-test")
    os.environ.setdefault("TESTING", "1")

# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------

Reply = Union[str, Exception, Callable[[str, GenerationParams], str]]


class FakeGenerator:
    """
    Replays scripted replies in order; the last one repeats once exhausted.
    Exceptions in the script are raised. Every call is recorded.
    """

    def __init__(self, *replies: Reply):
        self.replies: List[Reply] = list(replies) or ["ok"]
        self.calls: List[tuple[str, GenerationParams]] = []
        self._lock = threading.Lock()

    def generate(self, instruction: str, params: GenerationParams) -> str:
        with self._lock:
            idx = len(self.calls)
            self.calls.append((instruction, params))
            reply = self.replies[min(idx, len(self.replies) - 1)]
        if isinstance(reply, Exception):
            raise reply
        if callable(reply):
            return reply(instruction, params)
        return reply


def paragraphs(*chunks: str) -> str:
    return "\n\n".join(chunks)

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def fake_generator() -> FakeGenerator:
    return FakeGenerator(paragraphs("one", "two", "three", "four"))


@pytest.fixture()
def settings_override(tmp_path: Path) -> dict:
    return {
        "OPENAI_API_KEY": "sk-test",
        "SECRET_KEY": "test-secret",
        "DATA_DIR": str(tmp_path / "data"),
        "LOG_DIR": str(tmp_path / "logs"),
    }


@pytest.fixture()
def app(settings_override: dict, fake_generator: FakeGenerator):
    """
    Flask app fixture (testing mode ON) with the fake generator wired in.
    """
    flask_app = create_app(settings_override, generator=fake_generator)
    flask_app.config.update(TESTING=True)
    yield flask_app


@pytest.fixture()
def client(app):
    """Flask test client."""
    return app.test_client()


@pytest.fixture()
def storage(tmp_path: Path) -> Storage:
    return Storage(tmp_path / "data")


@pytest.fixture()
def make_ctx() -> Callable[..., RemixContext]:
    def _make(generator: Optional[Any] = None, **kw: Any) -> RemixContext:
        return RemixContext(generator=generator or FakeGenerator(), **kw)
    return _make


@pytest.fixture()
def json_headers():
    return {"Content-Type": "application/json"}


@pytest.fixture()
def provider_error() -> GenerationError:
    return GenerationError("Rate limit reached for gpt-3.5-turbo")

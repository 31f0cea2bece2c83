"""Integration conftest: live contextual oracles, skipped without real keys."""
import os

import pytest

_REAL_OPENAI_KEY = os.environ.get("OPENAI_API_KEY", "")
_REAL_ANTHROPIC_KEY = os.environ.get("ANTHROPIC_API_KEY", "")


def _usable(key: str) -> bool:
    return bool(key) and not key.startswith("test-")


@pytest.fixture
def anthropic_key(monkeypatch):
    if not _usable(_REAL_ANTHROPIC_KEY):
        pytest.skip("ANTHROPIC_API_KEY not configured, skipping integration test")
    monkeypatch.setenv("ANTHROPIC_API_KEY", _REAL_ANTHROPIC_KEY)


@pytest.fixture
def openai_key(monkeypatch):
    if not _usable(_REAL_OPENAI_KEY):
        pytest.skip("OPENAI_API_KEY not configured, skipping integration test")
    monkeypatch.setenv("OPENAI_API_KEY", _REAL_OPENAI_KEY)

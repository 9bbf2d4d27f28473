"""
Shared test setup.

The app modules read their configuration at import time, so the mock
backend is forced here, before any of them is imported.
"""

import os

os.environ["LLM_BACKEND"] = "mock"
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest

from schemas import LLMResponse


WELL_FORMED_REPLY = (
    "### Palabra a estudiar:\n"
    "**猫** (neko): gato\n"
    "\n"
    "* 猫が好きです。\n"
    "* Neko ga suki desu.\n"
    "* Me gustan los gatos.\n"
    "--- PROMPTS ---\n"
    "PROMPT: A cat\n"
    "PROMPT: A kanji infographic\n"
    "PROMPT: A sleeping cat\n"
)


@pytest.fixture
def fake_service(monkeypatch):
    """
    Replace the async text service used by the orchestrator.

    Returns a function that installs a canned reply and gives back the list
    of prompts the service received.
    """
    def install(text=WELL_FORMED_REPLY, sources=(), error=None):
        calls = []

        async def _agenerate(prompt):
            calls.append(prompt)
            if error is not None:
                raise error
            return LLMResponse(text=text, sources=list(sources))

        monkeypatch.setattr("agents.agenerate", _agenerate)
        return calls

    return install

"""Shared fixtures for chat proxy tests."""

import pytest
from fastapi.testclient import TestClient

from chat_proxy.main import app
from chat_proxy.providers.base import BaseProvider
from chat_proxy.routes.chat import get_provider


class RecordingProvider(BaseProvider):
    """Provider stand-in that records outbound messages instead of calling out."""

    name = "recording"

    def __init__(self, reply="  hello there  "):
        super().__init__(api_key="test-key", model="test-model")
        self.reply = reply
        self.calls = []

    async def complete(self, messages):
        self.calls.append(messages)
        if isinstance(self.reply, Exception):
            raise self.reply
        return self.reply


@pytest.fixture
def provider():
    return RecordingProvider()


@pytest.fixture
def client(provider):
    app.dependency_overrides[get_provider] = lambda: provider
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def unconfigured_client():
    app.dependency_overrides[get_provider] = lambda: None
    yield TestClient(app)
    app.dependency_overrides.clear()

"""Shared test fixtures and factories."""

import asyncio
import json
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from evntboard_openai.config import REQUIRED_ENV_VARS, ModuleConfig, ModuleIdentity
from evntboard_openai.config.loader import OPTIONAL_ENV_VARS
from evntboard_openai.provider import OpenAIProvider

# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture
def module_config() -> ModuleConfig:
    """Minimal valid configuration."""
    return ModuleConfig(
        host="ws://hub.test:5001",
        module=ModuleIdentity(name="OpenAI", token="secret-token"),
    )


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove module variables from the environment, restoring them afterwards.

    Setting before deleting makes monkeypatch restore the absent state even
    when a .env file loads the variable during the test.
    """
    for var in (*REQUIRED_ENV_VARS, *OPTIONAL_ENV_VARS):
        monkeypatch.setenv(var, "placeholder")
        monkeypatch.delenv(var)
    return monkeypatch


@pytest.fixture
def env_file(tmp_path: Path) -> Path:
    """A complete .env file."""
    path = tmp_path / ".env"
    path.write_text(
        "EVNTBOARD_HOST=ws://hub.test:5001\n"
        "MODULE_NAME=OpenAI\n"
        "MODULE_TOKEN=secret-token-value\n"
    )
    return path


@pytest.fixture
def cli_runner():
    """CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner(env={"NO_COLOR": "1"})


# =============================================================================
# RPC Fixtures
# =============================================================================


class FakeModel:
    """Stands in for an OpenAI SDK response object."""

    def __init__(self, **data: Any) -> None:
        self._data = data
        for key, value in data.items():
            setattr(self, key, value)

    def model_dump(self, mode: str = "python") -> dict[str, Any]:
        return dict(self._data)


class Wire:
    """Collects frames a session writes."""

    def __init__(self) -> None:
        self.frames: list[Any] = []

    async def send(self, frame: str) -> None:
        self.frames.append(json.loads(frame))


class FakeRPCSession:
    """Records registered handlers and notifications."""

    def __init__(self) -> None:
        self.methods: dict[str, Callable[[dict[str, Any]], Awaitable[Any]]] = {}
        self.notifications: list[tuple[str, dict[str, Any]]] = []
        self.tasks: list[asyncio.Task[Any]] = []
        self.is_closed = False

    def register(self, name: str, handler) -> None:  # noqa: ANN001
        self.methods[name] = handler

    async def notify(self, method: str, params: dict[str, Any]) -> None:
        self.notifications.append((method, params))

    def spawn(self, coro) -> asyncio.Task[Any]:  # noqa: ANN001
        task = asyncio.create_task(coro)
        self.tasks.append(task)
        return task

    async def drain(self) -> None:
        await asyncio.gather(*self.tasks)


@pytest.fixture
def wire() -> Wire:
    return Wire()


@pytest.fixture
def fake_session() -> FakeRPCSession:
    return FakeRPCSession()


@pytest.fixture
def openai_client() -> MagicMock:
    """OpenAI client whose endpoints are AsyncMocks."""
    client = MagicMock()
    client.api_key = "sk-test"
    client.beta.assistants.list = AsyncMock()
    client.beta.assistants.retrieve = AsyncMock()
    client.beta.threads.create = AsyncMock()
    client.beta.threads.messages.create = AsyncMock()
    client.beta.threads.messages.list = AsyncMock()
    client.beta.threads.messages.retrieve = AsyncMock()
    client.beta.threads.runs.create = AsyncMock()
    client.beta.threads.runs.retrieve = AsyncMock()
    client.beta.threads.runs.list = AsyncMock()
    client.beta.threads.runs.submit_tool_outputs = AsyncMock()
    client.beta.threads.runs.steps.list = AsyncMock()
    client.chat.completions.create = AsyncMock()
    client.images.generate = AsyncMock()
    return client


@pytest.fixture
def provider(openai_client: MagicMock) -> OpenAIProvider:
    return OpenAIProvider(client=openai_client)

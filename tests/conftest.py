"""Pytest configuration and shared fixtures."""
import asyncio
import os
from collections.abc import Sequence

import pytest

from sahamchat.llm import CompletionClient
from sahamchat.memory import InMemoryHistoryStore


class ScriptedClient(CompletionClient):
    """Completion client whose replies are resolved by the test.

    Every call parks on a future; ``resolve``/``reject`` settle it.
    """

    def __init__(self) -> None:
        self.calls: list[list[tuple[str, str]]] = []
        self._futures: list[asyncio.Future] = []

    async def complete(self, messages: Sequence) -> str:
        self.calls.append([(m.role.value, m.content) for m in messages])
        future = asyncio.get_running_loop().create_future()
        self._futures.append(future)
        return await future

    async def wait_for_calls(self, count: int) -> None:
        for _ in range(100):
            if len(self.calls) >= count:
                return
            await asyncio.sleep(0)
        raise AssertionError(f"expected {count} completion call(s), got {len(self.calls)}")

    def resolve(self, index: int, reply: str) -> None:
        self._futures[index].set_result(reply)

    def reject(self, index: int, error: BaseException) -> None:
        self._futures[index].set_exception(error)


class StubbornClient(ScriptedClient):
    """Ignores cancellation and answers anyway, like a transport without abort."""

    async def complete(self, messages: Sequence) -> str:
        try:
            return await super().complete(messages)
        except asyncio.CancelledError:
            return "late reply"


class ReplyClient(CompletionClient):
    """Answers every call immediately with a fixed reply."""

    def __init__(self, reply: str = "Baik, mari kita bahas.") -> None:
        self.reply = reply
        self.calls = 0

    async def complete(self, messages: Sequence) -> str:
        self.calls += 1
        return self.reply


class FailingClient(CompletionClient):
    """Fails every call with the given exception."""

    def __init__(self, error: Exception) -> None:
        self.error = error

    async def complete(self, messages: Sequence) -> str:
        raise self.error


class FlakyClient(CompletionClient):
    """Fails the first call, then answers every later one."""

    def __init__(self, error: Exception, reply: str = "Baik, mari kita bahas.") -> None:
        self.error = error
        self.reply = reply
        self.calls = 0

    async def complete(self, messages: Sequence) -> str:
        self.calls += 1
        if self.calls == 1:
            raise self.error
        return self.reply


class BrokenHistoryStore(InMemoryHistoryStore):
    """History store whose reads and/or writes fail."""

    def __init__(self, fail_read: bool = False, fail_write: bool = False) -> None:
        super().__init__()
        self.fail_read = fail_read
        self.fail_write = fail_write

    async def read(self, key: str) -> str | None:
        if self.fail_read:
            raise OSError("storage unavailable")
        return await super().read(key)

    async def write(self, key: str, value: str) -> None:
        if self.fail_write:
            raise OSError("quota exceeded")
        await super().write(key, value)


@pytest.fixture(scope="session")
def api_keys():
    """Return API keys from environment."""
    return {
        "openai": os.getenv("OPENAI_API_KEY"),
        "anthropic": os.getenv("ANTHROPIC_API_KEY"),
    }


@pytest.fixture
def scripted_client():
    return ScriptedClient()


@pytest.fixture
def memory_store():
    return InMemoryHistoryStore()

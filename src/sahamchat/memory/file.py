"""JSON file chat history backend.

Stores each key as a separate file inside a data directory. Writes go to a
temporary file first and are then renamed over the target, so a crash never
leaves a half-written record behind. File I/O runs in a worker thread so the
event loop driving the UI is never blocked.
"""

import asyncio
import re
from pathlib import Path

from .base import ChatHistoryStore

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")


def _read_file(target: Path) -> str | None:
    if not target.exists():
        return None
    return target.read_text(encoding="utf-8")


def _replace_file(target: Path, value: str) -> None:
    target.parent.mkdir(parents=True, exist_ok=True)
    tmp = target.with_suffix(".json.tmp")
    tmp.write_text(value, encoding="utf-8")
    tmp.replace(target)


class JsonFileHistoryStore(ChatHistoryStore):
    """File-backed history store, one ``<key>.json`` file per key."""

    def __init__(self, path: str | Path = "./chat_history"):
        self._dir = Path(path)

    async def connect(self) -> None:
        """Create the data directory if needed."""
        await asyncio.to_thread(self._dir.mkdir, parents=True, exist_ok=True)

    async def disconnect(self) -> None:
        """Nothing to release for plain files."""
        pass

    def _file_for(self, key: str) -> Path:
        return self._dir / f"{_UNSAFE_CHARS.sub('_', key)}.json"

    async def read(self, key: str) -> str | None:
        return await asyncio.to_thread(_read_file, self._file_for(key))

    async def write(self, key: str, value: str) -> None:
        await asyncio.to_thread(_replace_file, self._file_for(key), value)

    async def delete(self, key: str) -> None:
        await asyncio.to_thread(self._file_for(key).unlink, missing_ok=True)

    @property
    def backend_type(self) -> str:
        return "file"

    @property
    def directory(self) -> Path:
        return self._dir

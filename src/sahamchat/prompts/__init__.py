"""Prompt texts for the assistant.

The packaged prompts ship as ``<name>.txt`` resources next to this module. A
deployment can replace any of them without touching the package by pointing
``SAHAMCHAT_PROMPTS_DIR`` at a directory holding files of the same names.
"""

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path

SYSTEM_PROMPT_NAME = "system"


def _override_dir() -> Path | None:
    value = os.getenv("SAHAMCHAT_PROMPTS_DIR")
    return Path(value).expanduser() if value else None


@lru_cache(maxsize=8)
def load_prompt(name: str) -> str:
    """Return the text of a prompt, stripped of surrounding whitespace.

    Raises:
        FileNotFoundError: No override and no packaged prompt of that name
    """
    filename = f"{name}.txt"

    override = _override_dir()
    if override is not None and (override / filename).is_file():
        return (override / filename).read_text(encoding="utf-8").strip()

    resource = resources.files(__name__).joinpath(filename)
    if not resource.is_file():
        raise FileNotFoundError(f"Unknown prompt '{name}'")
    return resource.read_text(encoding="utf-8").strip()


def get_system_prompt() -> str:
    """The Indonesian investing-education instructions sent with every request."""
    return load_prompt(SYSTEM_PROMPT_NAME)


def clear_cache() -> None:
    load_prompt.cache_clear()


__all__ = [
    "SYSTEM_PROMPT_NAME",
    "clear_cache",
    "get_system_prompt",
    "load_prompt",
]

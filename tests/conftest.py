"""
Shared fixtures.

- Adds the project root to ``sys.path`` so ``import tiddlymd`` works without
  installing
- Clears TIDDLYMD_* variables and the settings cache around every test
"""

from __future__ import annotations

import os
import sys
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

_PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))


@pytest.fixture(autouse=True)
def _test_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[None]:
    """Isolate every test from the developer's environment and .env file."""
    from tiddlymd.config import clear_settings_cache

    for key in list(os.environ):
        if key.startswith("TIDDLYMD_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def make_tiddler() -> Callable[..., object]:
    """Factory for tiddlers with sensible dates."""
    from tiddlymd.tiddlers.models import Tiddler

    def factory(title: str, text: str = "", **fields: object) -> Tiddler:
        data: dict[str, object] = {
            "title": title,
            "text": text,
            "created": "20240101120000000",
            "modified": "20240102120000000",
        }
        data.update(fields)
        return Tiddler.model_validate(data)

    return factory

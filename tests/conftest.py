"""Pytest configuration.

The repository uses a flat `src/` layout without an installed package. This conftest ensures tests
can import from the `src.*` namespace when running `pytest` locally, and provides a throwaway
Dialogflow agent directory per test.
"""

from __future__ import annotations

import json
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

# Ensure `import src...` works when running pytest without installing the package.
REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))

from src.dialogflow.context import BuildContext  # noqa: E402
from src.dialogflow.files import AgentFiles  # noqa: E402


@pytest.fixture
def agent_files(tmp_path: Path) -> AgentFiles:
    return AgentFiles(tmp_path / "platforms" / "dialogflow")


@pytest.fixture
def ctx(agent_files: AgentFiles) -> BuildContext:
    return BuildContext(locale="en", files=agent_files)


def _write_json(path: Path, payload: Any) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def _read_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


@pytest.fixture
def write_json() -> Callable[[Path, Any], Path]:
    """Write a JSON fixture file, creating parent directories."""

    return _write_json


@pytest.fixture
def read_json() -> Callable[[Path], Any]:
    return _read_json

"""Shared fixtures for tests.

This module contains pytest fixtures that are shared across multiple test modules.
The template decks are built on the fly with python-pptx, see deck_factory.py.
"""

import json
from pathlib import Path
from typing import Dict, Iterator

import pytest
from _pytest.monkeypatch import MonkeyPatch

from deck_factory import build_template, make_png
from pptx_templater.core.settings import Settings
from pptx_templater.ppt.document import TemplateDocument


@pytest.fixture
def png_bytes() -> bytes:
    return make_png()


@pytest.fixture
def template_file(tmp_path: Path) -> Path:
    """Fixture that provides a freshly built template deck."""
    return build_template(tmp_path / "template.pptx")


@pytest.fixture
def document(template_file: Path) -> Iterator[TemplateDocument]:
    """Fixture that provides the template deck opened for writing, saved on teardown."""
    doc = TemplateDocument(template_file)
    yield doc
    doc.close()


@pytest.fixture
def test_env_vars(monkeypatch: MonkeyPatch) -> Iterator[Dict[str, str]]:
    """Fixture that provides test environment variables.

    Args:
        monkeypatch: Pytest monkeypatch fixture

    Yields:
        Dictionary of test environment variables
    """
    env_vars = {
        "PPTX_TEMPLATER_LOG_LEVEL": "debug",
        "PPTX_TEMPLATER_DEBUG": "True",
        "PPTX_TEMPLATER_PRUNE_UNUSED_ROWS": "false",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    yield env_vars


@pytest.fixture
def settings(test_env_vars: Dict[str, str]) -> Settings:
    """Fixture that provides a Settings instance with test values."""
    return Settings(_env_file=None)


@pytest.fixture
def write_json(tmp_path: Path):
    """Fixture that writes data as a JSON file in tmp_path."""
    def _write(data, name: str = "data.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path
    return _write

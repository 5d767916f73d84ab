"""Shared pytest fixtures for docskills tests."""

import pytest

from docskills.strings import Strings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Ensure no local configuration leaks into tests."""
    for name in (
        "DOCSKILLS_SKILLS_DIR",
        "DOCSKILLS_EXTERNAL_SKILLS",
        "DOCSKILLS_LANG",
        "DOCSKILLS_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    Strings.set_language("en")
    yield
    Strings.set_language("en")


@pytest.fixture
def registry():
    """Registry over the bundled template library."""
    from docskills.skills import TemplateRegistry
    return TemplateRegistry()

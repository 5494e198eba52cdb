"""Shared fixtures for the arroyo test suite."""

from collections.abc import Iterator

import pytest

from arroyo.config import reset_lex_config


@pytest.fixture(autouse=True)
def _default_lex_config() -> Iterator[None]:
    """Every test starts and ends with the default configuration."""
    reset_lex_config()
    yield
    reset_lex_config()

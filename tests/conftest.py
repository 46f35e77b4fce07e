"""Pytest configuration.

pythonpath in pyproject.toml puts src/ and the project root on sys.path, so
tests import ``godolint`` directly and share helpers through
``tests.go_test_utils``.
"""

from collections.abc import Iterator

import pytest

from godolint.infrastructure.di.container import GodoLintContainer


@pytest.fixture(autouse=True)
def _reset_container() -> Iterator[None]:
    """Keep the container singleton from leaking between tests."""
    GodoLintContainer.reset()
    yield
    GodoLintContainer.reset()

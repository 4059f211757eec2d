from __future__ import annotations

from collections.abc import Generator

import pytest

from sqlbricks.dialect import reset_options


@pytest.fixture(autouse=True)
def default_dialect() -> Generator[None, None, None]:
    """Every test starts and ends with the built-in dialect defaults."""
    reset_options()
    yield
    reset_options()

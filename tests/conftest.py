import dataclasses

import pytest

from core.config import ProjectionConfig

# 2025-01-01 is a Wednesday; Mondays in January 2025 are the 6th, 13th, 20th and 27th.
START = "2025-01-01"


@pytest.fixture
def make_config():
    def _make(**overrides) -> ProjectionConfig:
        base = ProjectionConfig(start_date=START)
        return dataclasses.replace(base, **overrides)

    return _make

from __future__ import annotations

import pytest

from fakes import turn
from storyloop.models.story import StoryResponse


@pytest.fixture
def forest_turn() -> StoryResponse:
    return turn("You wake in a forest.", ["Go north", "Go south"], "a dark forest at dawn")

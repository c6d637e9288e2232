"""Unit-test fixtures."""

import pytest

from fakes import Game


@pytest.fixture
def make_game() -> type[Game]:
    """Factory: ``make_game({"alice": 100000})`` wires a whole engine in memory."""
    return Game

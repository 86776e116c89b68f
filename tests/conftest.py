from typing import Callable, List

import pytest

from pairing.models import Player


@pytest.fixture
def make_roster() -> Callable[[int], List[Player]]:
    def _make(n: int) -> List[Player]:
        return [Player(id=f"p{i}", name=f"Player {i}") for i in range(n)]

    return _make

import os
import random

import pytest

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")


class FixedRandom(random.Random):
    """Every draw returns the same fraction, so rolls either all pass or all fail."""

    def __init__(self, value):
        self.value = value
        super().__init__(0)

    def random(self):
        return self.value


@pytest.fixture
def unlucky():
    # Never passes a probability roll; uniform() lands at the top of its range.
    return FixedRandom(0.999)


@pytest.fixture
def lucky():
    return FixedRandom(0.0)

import random

import pytest


@pytest.fixture
def rng():
    """Provide a seeded random source so leaf assignment is reproducible."""
    return random.Random(0x0ddba11)

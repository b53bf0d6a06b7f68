import sys
from pathlib import Path

import pytest

# Ensure the flat layout is importable as top-level `ml`
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture
def diagonal_points():
    """Four points separable by x + y = 0."""
    return [((0.5, 0.5), 1), ((-0.5, -0.5), -1), ((0.9, 0.9), 1), ((-0.9, -0.1), -1)]


@pytest.fixture
def xor_points():
    return [((1.0, 1.0), 1), ((-1.0, -1.0), 1), ((1.0, -1.0), -1), ((-1.0, 1.0), -1)]

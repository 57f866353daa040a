import pytest

from pocketcam.grid import HEIGHT, WIDTH


def patterned_grid() -> list[int]:
    """A full grid whose values vary with both coordinates."""
    return [(x * 7 + y * 3 + (x * y) // 5) % 4 for y in range(HEIGHT) for x in range(WIDTH)]


@pytest.fixture
def grid() -> list[int]:
    return patterned_grid()

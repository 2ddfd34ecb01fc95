import pytest

from helpers import WINNERS


@pytest.fixture
def winners():
    return list(WINNERS)

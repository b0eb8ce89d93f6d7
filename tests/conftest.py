import pytest

from yaku import TaskQueue


@pytest.fixture
def queue():
    return TaskQueue()

import pytest

from symbolic.config import config
from symbolic import parallel


@pytest.fixture
def parallel_threshold(monkeypatch):
    """Lower the reduction threshold so small expressions take the pooled path."""
    def set_threshold(n):
        monkeypatch.setattr(config, "parallelism", n)
    yield set_threshold
    parallel.shutdown()

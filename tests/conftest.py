import pytest
from callback_registry.services.registry import Registry, RegistryConfig

class Clock:
    def __init__(self, t: int = 1_700_000_000):
        self.t = t
    def __call__(self):
        return self.t

@pytest.fixture
def clock():
    return Clock()

@pytest.fixture
def registry(clock):
    return Registry(RegistryConfig(mount="/_r/", max_age=3600), clock=clock)

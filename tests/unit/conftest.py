import pytest
from keydash.settings import KeydashSettings, BackendType


@pytest.fixture
def settings():
    return KeydashSettings(
        backend=BackendType.in_memory,
        secret="test" * 8,
        password_iterations=1000,
    )

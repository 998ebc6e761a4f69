import pytest

from sqlitebridge import BridgeConfig, Commands, SessionRegistry


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "test.db")


@pytest.fixture
def registry():
    reg = SessionRegistry(BridgeConfig())
    yield reg
    reg.close()


@pytest.fixture
def commands(registry):
    return Commands(registry)

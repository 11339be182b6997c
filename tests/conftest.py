from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from typer.testing import CliRunner

from filepool import FileCachePool, LocalDirectoryStorage, PickleCodec, open_pool
from filepool.domain.interfaces.storage import CacheStorage
from filepool.infrastructure.config import settings


class FrozenClock:
    """Controllable replacement for the clock cache items evaluate expiry against."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


@pytest.fixture
def clock(monkeypatch) -> FrozenClock:
    """Freezes the cache item clock at a fixed instant."""
    frozen = FrozenClock(datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc))
    monkeypatch.setattr("filepool.core.cache_item._utcnow", frozen)
    return frozen


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    """Empty directory backing a pool."""
    directory = tmp_path / "cache"
    directory.mkdir()
    return directory


@pytest.fixture
def pool(cache_dir: Path) -> FileCachePool:
    """Pool on a real temporary directory."""
    return open_pool(cache_dir)


@pytest.fixture
def mock_storage() -> MagicMock:
    """Storage double; every operation succeeds unless a test says otherwise."""
    storage = MagicMock(spec=CacheStorage)
    storage.exists.return_value = False
    storage.write_exclusive.return_value = True
    storage.remove.return_value = True
    storage.list_keys.return_value = []
    return storage


@pytest.fixture
def mock_pool(mock_storage: MagicMock) -> FileCachePool:
    """Pool over the storage double with the real pickle codec."""
    return FileCachePool(mock_storage, PickleCodec())


@pytest.fixture(scope="session")
def runner():
    """Provides a Typer CliRunner instance."""
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    """Keeps tests away from ~/.filepool/config.yaml, .env files and FILEPOOL_* variables."""
    monkeypatch.setattr(settings, "_config", {})
    monkeypatch.setattr(settings, "_loaded", True)
    for name in (
        "FILEPOOL_CACHE_DIRECTORY",
        "FILEPOOL_CACHE_DEFAULT_TTL",
        "FILEPOOL_LOGGING_LEVEL",
        "FILEPOOL_LOGGING_FILE",
        "FILEPOOL_LOGGING_FORMAT",
    ):
        monkeypatch.delenv(name, raising=False)
    yield
    settings.clear_test_config()


@pytest.fixture
def quiet_logging(mocker):
    """Stops the CLI from reconfiguring the root logger during a test."""
    return mocker.patch("filepool.main.configure_logging")


@pytest.fixture
def storage_dir_pool(cache_dir: Path):
    """Factory for independent pool instances on the same directory."""
    def _make() -> FileCachePool:
        return FileCachePool(LocalDirectoryStorage(cache_dir), PickleCodec())
    return _make

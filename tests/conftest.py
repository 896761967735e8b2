import logging

import pytest


@pytest.fixture(autouse=True)
def reset_logging():
    logger = logging.getLogger("uniforge")
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate
    yield
    logger.handlers = handlers
    logger.setLevel(level)
    logger.propagate = propagate


@pytest.fixture(autouse=True)
def uniforge_home(tmp_path, monkeypatch):
    home = tmp_path / "uniforge"
    (home / "images").mkdir(parents=True)
    (home / "volumes").mkdir()
    (home / "packages").mkdir()
    monkeypatch.setenv("UNIFORGE_HOME", str(home))
    monkeypatch.delenv("GOOGLE_CLOUD_ZONE", raising=False)
    monkeypatch.delenv("UNIFORGE_PACKAGES_URL", raising=False)
    monkeypatch.delenv("AWS_PROFILE", raising=False)
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-west-2")
    return home


class FakeClock:
    """Clock advanced only by the fake sleep."""

    def __init__(self):
        self.now = 0.0
        self.sleeps: list[float] = []

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds

    def monotonic(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()

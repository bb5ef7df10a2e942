"""Shared test fixtures for the conlog test suite."""

import pytest

from conlog import logger as _logger_mod
from conlog.config import FLAG_ENV_VARS, LEVEL_ENV_VARS, Settings
from conlog.logger import Logger
from conlog.sink import MemorySink


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: real timers or subprocesses (run_tests.py --all)")


# ---------------------------------------------------------------------------
# Environment isolation
# ---------------------------------------------------------------------------
@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    """Clear conlog env vars, leave the repo's cwd, reset the singleton."""
    for var in (*LEVEL_ENV_VARS, *FLAG_ENV_VARS.values()):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    saved = _logger_mod._logger
    _logger_mod._logger = None
    yield
    if _logger_mod._logger is not None:
        _logger_mod._logger.close()
    _logger_mod._logger = saved


# ---------------------------------------------------------------------------
# Timer double
# ---------------------------------------------------------------------------
class ManualTimer:
    """Stand-in for threading.Timer that only fires when told to."""

    def __init__(self, interval, function, args=None, kwargs=None):
        self.interval = interval
        self.function = function
        self.args = tuple(args or ())
        self.kwargs = dict(kwargs or {})
        self.daemon = False
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        if not self.cancelled:
            self.function(*self.args, **self.kwargs)


@pytest.fixture
def timers():
    """List of every ManualTimer created through ``timer_factory``."""
    return []


@pytest.fixture
def timer_factory(timers):
    def factory(interval, function, args=None, kwargs=None):
        timer = ManualTimer(interval, function, args=args, kwargs=kwargs)
        timers.append(timer)
        return timer
    return factory


# ---------------------------------------------------------------------------
# Logger fixtures
# ---------------------------------------------------------------------------
@pytest.fixture
def sink():
    """A recording sink."""
    return MemorySink()


@pytest.fixture
def make_logger(sink, timer_factory):
    """Build a colorless, banner-free Logger writing to ``sink``."""
    def _make(level="log", **kwargs):
        settings = Settings(level=level, boring=True, hide_arguments=True)
        kwargs.setdefault("console", sink)
        kwargs.setdefault("timer_factory", timer_factory)
        return Logger(settings=settings, **kwargs)
    return _make


@pytest.fixture
def log(make_logger):
    """A Logger at level 'log' (everything except debug output)."""
    return make_logger("log")

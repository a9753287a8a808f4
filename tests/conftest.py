from concurrent.futures import Future

import pytest

from terrain_profile.models import GeoPoint


class ImmediateExecutor:
    """Executor stand-in that runs submitted work on the calling thread."""

    def submit(self, fn, *args, **kwargs):
        future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)
        return future

    def shutdown(self, wait=True):
        pass


@pytest.fixture
def immediate_executor():
    return ImmediateExecutor()


@pytest.fixture
def point_a():
    return GeoPoint(lat=10.0, lon=20.0)


@pytest.fixture
def point_b():
    return GeoPoint(lat=10.0, lon=20.1)


@pytest.fixture
def scenario_elevations():
    """51 elevations: climbing from 100 m to 150 m, then down to 80 m."""
    rising = [100.0 + 2 * i for i in range(26)]
    falling = [150.0 - (70 * k) // 25 for k in range(1, 26)]
    return rising + falling


@pytest.fixture
def no_config(tmp_path, monkeypatch):
    """Ensure no config files exist."""
    from terrain_profile import config
    monkeypatch.setattr(config, "LOCAL_CONFIG_PATH", tmp_path / "nonexistent" / "terrain-profile.json")
    monkeypatch.setattr(config, "CONFIG_PATH", tmp_path / "nonexistent" / "terrain-profile.json")
    for env_name in config.ENV_OVERRIDES.values():
        monkeypatch.delenv(env_name, raising=False)

import json

from terrain_profile import config


class TestLoadConfig:
    def test_no_files(self, no_config):
        assert config._load_config() == {}

    def test_local_overrides_global(self, tmp_path, monkeypatch):
        global_path = tmp_path / "global.json"
        local_path = tmp_path / "local.json"
        global_path.write_text(json.dumps({"sample_count": 20, "elevation_api": "opentopodata"}))
        local_path.write_text(json.dumps({"sample_count": 80}))
        monkeypatch.setattr(config, "CONFIG_PATH", global_path)
        monkeypatch.setattr(config, "LOCAL_CONFIG_PATH", local_path)

        assert config._load_config() == {"sample_count": 80, "elevation_api": "opentopodata"}

    def test_invalid_json_skipped(self, tmp_path, monkeypatch):
        global_path = tmp_path / "global.json"
        local_path = tmp_path / "local.json"
        global_path.write_text("{not json")
        local_path.write_text(json.dumps({"user_agent": "me"}))
        monkeypatch.setattr(config, "CONFIG_PATH", global_path)
        monkeypatch.setattr(config, "LOCAL_CONFIG_PATH", local_path)

        assert config._load_config() == {"user_agent": "me"}


class TestGetSettings:
    def test_defaults(self, no_config):
        settings = config.get_settings()
        assert settings["elevation_api"] == "open-elevation"
        assert settings["sample_count"] == 50
        assert settings["request_timeout"] == 30.0
        assert settings["search_min_chars"] == 3

    def test_environment_overrides(self, no_config, monkeypatch):
        monkeypatch.setenv("TERRAIN_PROFILE_SAMPLES", "25")
        monkeypatch.setenv("TERRAIN_PROFILE_ELEVATION_API", "opentopodata")
        settings = config.get_settings()
        assert settings["sample_count"] == 25
        assert settings["elevation_api"] == "opentopodata"

    def test_file_values_coerced(self, tmp_path, monkeypatch):
        local_path = tmp_path / "local.json"
        local_path.write_text(json.dumps({"sample_count": "30", "request_timeout": 5}))
        monkeypatch.setattr(config, "CONFIG_PATH", tmp_path / "missing.json")
        monkeypatch.setattr(config, "LOCAL_CONFIG_PATH", local_path)
        for env_name in config.ENV_OVERRIDES.values():
            monkeypatch.delenv(env_name, raising=False)

        settings = config.get_settings()
        assert settings["sample_count"] == 30
        assert settings["request_timeout"] == 5.0

    def test_unparseable_environment_value_uses_default(self, no_config, monkeypatch, caplog):
        monkeypatch.setenv("TERRAIN_PROFILE_SAMPLES", "fifty")
        settings = config.get_settings()
        assert settings["sample_count"] == 50
        assert "sample_count" in caplog.text

    def test_out_of_range_file_values_use_defaults(self, tmp_path, monkeypatch):
        local_path = tmp_path / "local.json"
        local_path.write_text(
            json.dumps({"sample_count": 0, "request_timeout": -1, "search_limit": True, "search_min_chars": "x"})
        )
        monkeypatch.setattr(config, "CONFIG_PATH", tmp_path / "missing.json")
        monkeypatch.setattr(config, "LOCAL_CONFIG_PATH", local_path)
        for env_name in config.ENV_OVERRIDES.values():
            monkeypatch.delenv(env_name, raising=False)

        settings = config.get_settings()
        assert settings["sample_count"] == 50
        assert settings["request_timeout"] == 30.0
        assert settings["search_limit"] == 5
        assert settings["search_min_chars"] == 3

    def test_nan_timeout_uses_default(self, tmp_path, monkeypatch):
        local_path = tmp_path / "local.json"
        local_path.write_text('{"request_timeout": NaN}')
        monkeypatch.setattr(config, "CONFIG_PATH", tmp_path / "missing.json")
        monkeypatch.setattr(config, "LOCAL_CONFIG_PATH", local_path)
        for env_name in config.ENV_OVERRIDES.values():
            monkeypatch.delenv(env_name, raising=False)

        assert config.get_settings()["request_timeout"] == 30.0

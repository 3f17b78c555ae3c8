"""Tests for configuration models and loading."""

from pathlib import Path

import pytest

from recpipe.config.env import EnvReader
from recpipe.config.loader import (
    DEFAULT_CONFIG_FILE,
    build_config,
    get_config,
    get_default_config_path,
    load_config_file,
)
from recpipe.config.models import (
    EncoderConfig,
    LoggingConfig,
    ProgressConfig,
    RecPipeConfig,
    ServerConfig,
)


class TestConfigModels:
    """Tests for configuration validation."""

    def test_defaults(self) -> None:
        """Should provide usable defaults for every section."""
        config = RecPipeConfig()
        assert config.server.url == "http://localhost:8888"
        assert config.server.timeout_seconds == 30.0
        assert config.encoder.probe_timeout_seconds == 60.0
        assert config.progress.capacity == 16
        assert config.tools.ffmpeg is None
        assert config.logging.level == "info"

    def test_server_url_scheme(self) -> None:
        with pytest.raises(ValueError, match="http"):
            ServerConfig(url="ftp://epg")

    def test_server_timeout_range(self) -> None:
        with pytest.raises(ValueError, match="timeout_seconds"):
            ServerConfig(timeout_seconds=0)

    def test_probe_timeout_positive(self) -> None:
        with pytest.raises(ValueError, match="probe_timeout_seconds"):
            EncoderConfig(probe_timeout_seconds=0)

    def test_progress_capacity(self) -> None:
        with pytest.raises(ValueError, match="capacity"):
            ProgressConfig(capacity=0)

    def test_logging_level(self) -> None:
        with pytest.raises(ValueError, match="level"):
            LoggingConfig(level="verbose")

    def test_logging_format(self) -> None:
        with pytest.raises(ValueError, match="format"):
            LoggingConfig(format="xml")


class TestLoadConfigFile:
    """Tests for load_config_file."""

    def test_missing_file(self, tmp_path: Path) -> None:
        """Should return an empty dict when the file does not exist."""
        assert load_config_file(tmp_path / "absent.toml") == {}

    def test_valid_file(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text('[server]\nurl = "http://epg:8888"\n')
        assert load_config_file(path) == {"server": {"url": "http://epg:8888"}}

    def test_invalid_toml(self, tmp_path: Path, caplog) -> None:
        """Should warn and fall back to defaults on a broken file."""
        path = tmp_path / "config.toml"
        path.write_text("[server\n")
        assert load_config_file(path) == {}
        assert "Failed to load config file" in caplog.text


class TestDefaultConfigPath:
    """Tests for get_default_config_path."""

    def test_default(self) -> None:
        assert get_default_config_path(EnvReader(env={})) == DEFAULT_CONFIG_FILE

    def test_env_override(self, tmp_path: Path) -> None:
        custom = tmp_path / "custom.toml"
        env = EnvReader(env={"RECPIPE_CONFIG_PATH": str(custom)})
        assert get_default_config_path(env) == custom


class TestBuildConfig:
    """Tests for build_config precedence."""

    def test_file_values(self, tmp_path: Path) -> None:
        file_config = {
            "server": {"url": "http://epg:8888", "timeout_seconds": 10},
            "encoder": {"probe_timeout_seconds": 15},
            "progress": {"capacity": 4},
            "logging": {"level": "debug", "format": "json"},
            "tools": {"ffmpeg": str(tmp_path / "ffmpeg")},
        }
        config = build_config(file_config, EnvReader(env={}))
        assert config.server.url == "http://epg:8888"
        assert config.server.timeout_seconds == 10.0
        assert config.encoder.probe_timeout_seconds == 15.0
        assert config.progress.capacity == 4
        assert config.logging.level == "debug"
        assert config.logging.format == "json"
        assert config.tools.ffmpeg == tmp_path / "ffmpeg"
        assert config.tools.ffprobe is None

    def test_env_overrides_file(self) -> None:
        """Environment variables take precedence over the file."""
        env = EnvReader(
            env={
                "RECPIPE_SERVER_URL": "http://env:8888",
                "RECPIPE_SERVER_TIMEOUT": "5",
                "RECPIPE_PROGRESS_CAPACITY": "2",
                "RECPIPE_LOG_LEVEL": "warning",
            }
        )
        config = build_config(
            {"server": {"url": "http://file:8888"}, "progress": {"capacity": 8}}, env
        )
        assert config.server.url == "http://env:8888"
        assert config.server.timeout_seconds == 5.0
        assert config.progress.capacity == 2
        assert config.logging.level == "warning"

    def test_include_stderr_from_env(self) -> None:
        """RECPIPE_LOG_INCLUDE_STDERR overrides the [logging] file value."""
        file_config = {"logging": {"include_stderr": True}}
        assert build_config(file_config, EnvReader(env={})).logging.include_stderr

        env = EnvReader(env={"RECPIPE_LOG_INCLUDE_STDERR": "off"})
        assert not build_config(file_config, env).logging.include_stderr

        env = EnvReader(env={"RECPIPE_LOG_INCLUDE_STDERR": "yes"})
        assert build_config({}, env).logging.include_stderr

    def test_cli_overrides_env(self, tmp_path: Path) -> None:
        """Explicit arguments take precedence over environment variables."""
        ffprobe = tmp_path / "ffprobe"
        ffprobe.write_text("")
        env = EnvReader(env={"RECPIPE_SERVER_URL": "http://env:8888"})
        config = build_config(
            {}, env, server_url="http://cli:8888", ffprobe_path=ffprobe
        )
        assert config.server.url == "http://cli:8888"
        assert config.tools.ffprobe == ffprobe

    def test_env_tool_path_must_exist(self, tmp_path: Path) -> None:
        """A non-existent env tool path is ignored in favour of the file."""
        env = EnvReader(env={"RECPIPE_FFMPEG_PATH": str(tmp_path / "missing")})
        config = build_config({"tools": {"ffmpeg": "/opt/ffmpeg/bin/ffmpeg"}}, env)
        assert config.tools.ffmpeg == Path("/opt/ffmpeg/bin/ffmpeg")

    def test_invalid_merged_value(self) -> None:
        env = EnvReader(env={"RECPIPE_PROGRESS_CAPACITY": "0"})
        with pytest.raises(ValueError, match="capacity"):
            build_config({}, env)


class TestGetConfig:
    """Tests for get_config."""

    def test_reads_explicit_file(self, tmp_path: Path, monkeypatch) -> None:
        monkeypatch.delenv("RECPIPE_SERVER_URL", raising=False)
        path = tmp_path / "config.toml"
        path.write_text('[server]\nurl = "https://epg.example"\n')
        assert get_config(path).server.url == "https://epg.example"

    def test_cached_without_arguments(self, tmp_path: Path, monkeypatch) -> None:
        """Repeated calls without overrides return the same object."""
        monkeypatch.setenv("RECPIPE_CONFIG_PATH", str(tmp_path / "none.toml"))
        first = get_config()
        assert get_config() is first

    def test_overrides_not_cached(self, tmp_path: Path, monkeypatch) -> None:
        monkeypatch.setenv("RECPIPE_CONFIG_PATH", str(tmp_path / "none.toml"))
        cached = get_config()
        override = get_config(server_url="http://other:8888")
        assert override.server.url == "http://other:8888"
        assert get_config() is cached

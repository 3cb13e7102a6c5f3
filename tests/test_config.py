"""Tests for ClientConfig defaults and environment loading."""
import pytest
from pydantic import ValidationError

from viteset_client import (
    DEFAULT_HOST,
    DEFAULT_INTERVAL_SECONDS,
    MIN_INTERVAL_SECONDS,
    ClientConfig,
)


class TestDefaults:

    def test_defaults(self):
        config = ClientConfig(blob="b", secret="s")

        assert config.host == DEFAULT_HOST
        assert config.interval_seconds == DEFAULT_INTERVAL_SECONDS
        assert config.buffer_size == 1
        assert config.url == f"{DEFAULT_HOST}/b"

    def test_empty_host_means_default(self):
        assert ClientConfig(host="").host == DEFAULT_HOST
        assert ClientConfig(host=None).host == DEFAULT_HOST

    def test_host_trailing_slash_stripped(self):
        assert ClientConfig(host="http://localhost:8080/").host == "http://localhost:8080"

    def test_zero_interval_means_default(self):
        assert ClientConfig(interval_seconds=0).interval_seconds == DEFAULT_INTERVAL_SECONDS
        assert ClientConfig(interval_seconds=None).interval_seconds == DEFAULT_INTERVAL_SECONDS

    def test_negative_interval_rejected(self):
        with pytest.raises(ValidationError):
            ClientConfig(interval_seconds=-1)

    def test_small_interval_is_kept_but_flagged(self):
        config = ClientConfig(interval_seconds=1)

        assert config.interval_seconds == 1
        assert config.below_recommended_interval is True
        assert ClientConfig().below_recommended_interval is False
        assert MIN_INTERVAL_SECONDS <= DEFAULT_INTERVAL_SECONDS

    def test_empty_blob_and_secret_allowed_until_subscribe(self):
        config = ClientConfig()

        assert config.blob == ""
        assert config.secret == ""

    def test_repr_hides_secret(self):
        config = ClientConfig(blob="b", secret="very-secret-value")

        assert "very-secret-value" not in repr(config)
        assert "very-secret-value" not in str(config)


class TestFromEnv:

    def test_reads_prefixed_variables(self, monkeypatch):
        monkeypatch.setenv("VITESET_BLOB", "flags")
        monkeypatch.setenv("VITESET_SECRET", "abc")
        monkeypatch.setenv("VITESET_HOST", "http://localhost:9000")
        monkeypatch.setenv("VITESET_INTERVAL_SECONDS", "30")

        config = ClientConfig.from_env()

        assert config.blob == "flags"
        assert config.secret == "abc"
        assert config.host == "http://localhost:9000"
        assert config.interval_seconds == 30.0

    def test_missing_variables_use_defaults(self, monkeypatch):
        for name in ("BLOB", "SECRET", "HOST", "INTERVAL_SECONDS"):
            monkeypatch.delenv(f"VITESET_{name}", raising=False)

        config = ClientConfig.from_env()

        assert config.blob == ""
        assert config.host == DEFAULT_HOST
        assert config.interval_seconds == DEFAULT_INTERVAL_SECONDS

    def test_invalid_interval_falls_back(self, monkeypatch):
        monkeypatch.setenv("VITESET_INTERVAL_SECONDS", "soon")

        assert ClientConfig.from_env().interval_seconds == DEFAULT_INTERVAL_SECONDS

    def test_overrides_win_over_environment(self, monkeypatch):
        monkeypatch.setenv("VITESET_BLOB", "from-env")

        config = ClientConfig.from_env(blob="from-arg", host=None)

        assert config.blob == "from-arg"
        assert config.host == DEFAULT_HOST

    def test_custom_prefix(self, monkeypatch):
        monkeypatch.setenv("APP_BLOB", "other")

        assert ClientConfig.from_env(prefix="APP_").blob == "other"

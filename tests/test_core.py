"""Tests for core infrastructure modules."""

from unittest.mock import patch
import asyncio
import json
import logging
import pytest
from pydantic import ValidationError

from stratus.base.config import EC2Config, GCPConfig, validate_config
from stratus.base.exceptions import (
    ConfigurationError,
    DecodeError,
    ProviderError,
    StratusError,
    TransportError,
)
from stratus.base.retry import retry
from stratus.base.logger import StratusLogger, StructuredFormatter
from stratus.base.async_support import async_wrap, AsyncMixin


# ══════════════════════════════════════════════════════════════════════
# Config
# ══════════════════════════════════════════════════════════════════════

class TestEC2Config:
    def test_explicit_values(self):
        cfg = EC2Config(
            aws_access_key_id="AKIA",
            aws_secret_access_key="secret",
            host="ec2.eu-west-1.amazonaws.com",
        )
        assert cfg.aws_access_key_id == "AKIA"
        assert cfg.endpoint == "https://ec2.eu-west-1.amazonaws.com:443"
        assert cfg.api_version == "2009-04-04"

    def test_env_fallback(self, monkeypatch):
        monkeypatch.setenv("AWS_ACCESS_KEY_ID", "env_key")
        monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "env_secret")
        cfg = EC2Config()
        assert cfg.aws_access_key_id == "env_key"
        assert cfg.aws_secret_access_key == "env_secret"

    def test_frozen(self):
        cfg = EC2Config(aws_access_key_id="k", aws_secret_access_key="s")
        with pytest.raises(ValidationError):
            cfg.host = "evil.example.com"

    def test_secret_not_in_repr(self):
        cfg = EC2Config(aws_access_key_id="k", aws_secret_access_key="topsecret")
        assert "topsecret" not in repr(cfg)

    def test_invalid_scheme(self):
        with pytest.raises(ValidationError):
            EC2Config(aws_access_key_id="k", aws_secret_access_key="s", scheme="ftp")


class TestGCPConfig:
    def test_explicit_values(self):
        cfg = GCPConfig(project_id="my-proj")
        assert cfg.project_id == "my-proj"

    def test_env_fallback(self, monkeypatch):
        monkeypatch.setenv("GOOGLE_CLOUD_PROJECT", "env-proj")
        cfg = GCPConfig()
        assert cfg.project_id == "env-proj"


class TestValidateConfig:
    def test_aws(self):
        cfg = validate_config("aws", {
            "aws_access_key_id": "k",
            "aws_secret_access_key": "s",
        })
        assert isinstance(cfg, EC2Config)
        assert cfg.aws_access_key_id == "k"

    def test_passthrough_model(self):
        cfg = EC2Config(aws_access_key_id="k", aws_secret_access_key="s")
        assert validate_config("aws", cfg) is cfg

    def test_gcp(self):
        cfg = validate_config("gcp", {"project_id": "p"})
        assert cfg.project_id == "p"

    def test_missing_credentials(self, monkeypatch):
        monkeypatch.delenv("AWS_ACCESS_KEY_ID", raising=False)
        monkeypatch.delenv("AWS_SECRET_ACCESS_KEY", raising=False)
        with pytest.raises(ConfigurationError, match="aws_access_key_id"):
            validate_config("aws", {})

    def test_empty_secret(self, monkeypatch):
        monkeypatch.delenv("AWS_SECRET_ACCESS_KEY", raising=False)
        with pytest.raises(ConfigurationError):
            validate_config("aws", {"aws_access_key_id": "k", "aws_secret_access_key": ""})

    def test_unknown_provider(self):
        with pytest.raises(ConfigurationError, match="No config model"):
            validate_config("azure", {"key": "val"})


# ══════════════════════════════════════════════════════════════════════
# Exceptions
# ══════════════════════════════════════════════════════════════════════

class TestExceptions:
    def test_hierarchy(self):
        for exc in (ConfigurationError, TransportError, ProviderError, DecodeError):
            assert issubclass(exc, StratusError)

    def test_provider_error_message(self):
        err = ProviderError("InvalidVolume.NotFound", "gone", status=400, request_id="r")
        assert str(err) == "InvalidVolume.NotFound: gone"
        assert err.status == 400

    def test_provider_error_without_details(self):
        assert str(ProviderError(None, None)) == "UnknownError"

    def test_transport_error_context(self):
        err = TransportError("refused", host="ec2.amazonaws.com", action="DescribeVolumes")
        assert err.host == "ec2.amazonaws.com"
        assert err.action == "DescribeVolumes"


# ══════════════════════════════════════════════════════════════════════
# Retry
# ══════════════════════════════════════════════════════════════════════

class TestRetry:
    def test_success_no_retry(self):
        call_count = 0

        @retry(max_attempts=3, base_delay=0)
        def ok():
            nonlocal call_count
            call_count += 1
            return "ok"

        assert ok() == "ok"
        assert call_count == 1

    def test_retries_transport_errors_by_default(self):
        call_count = 0

        @retry(max_attempts=3, base_delay=0)
        def flaky():
            nonlocal call_count
            call_count += 1
            if call_count < 3:
                raise TransportError("refused")
            return "ok"

        assert flaky() == "ok"
        assert call_count == 3

    def test_provider_error_not_retried(self):
        call_count = 0

        @retry(max_attempts=3, base_delay=0)
        def rejected():
            nonlocal call_count
            call_count += 1
            raise ProviderError("AuthFailure", "bad signature")

        with pytest.raises(ProviderError):
            rejected()
        assert call_count == 1

    def test_max_attempts_exceeded(self):
        @retry(max_attempts=2, base_delay=0)
        def always_fail():
            raise TransportError("nope")

        with pytest.raises(TransportError):
            always_fail()

    def test_backoff_delays(self):
        @retry(max_attempts=4, base_delay=1.0, backoff_factor=2.0, max_delay=3.0)
        def always_fail():
            raise TransportError("nope")

        with patch("stratus.base.retry.time.sleep") as mock_sleep:
            with pytest.raises(TransportError):
                always_fail()
        assert [c.args[0] for c in mock_sleep.call_args_list] == [1.0, 2.0, 3.0]

    def test_invalid_attempts(self):
        with pytest.raises(ValueError):
            retry(max_attempts=0)


# ══════════════════════════════════════════════════════════════════════
# Logger
# ══════════════════════════════════════════════════════════════════════

class TestStratusLogger:
    def test_log_operation(self, capfd):
        logger = StratusLogger("test_st")
        logger.logger.setLevel(logging.DEBUG)
        logger.info(
            "DescribeVolumes completed",
            provider="aws",
            service="ec2",
            operation="DescribeVolumes",
            status=200,
        )
        captured = capfd.readouterr()
        entry = json.loads(captured.err.strip().splitlines()[-1])
        assert entry["message"] == "DescribeVolumes completed"
        assert entry["operation"] == "DescribeVolumes"
        assert entry["status"] == 200
        assert "host" not in entry

    def test_structured_formatter(self):
        fmt = StructuredFormatter()
        record = logging.LogRecord(
            name="test", level=logging.INFO, pathname="", lineno=0,
            msg="hi", args=(), exc_info=None,
        )
        record.provider = "gcp"
        record.request_id = "abc"
        record.elapsed_ms = 12.5
        output = fmt.format(record)
        assert '"provider": "gcp"' in output
        assert '"request_id": "abc"' in output
        assert '"elapsed_ms": 12.5' in output


# ══════════════════════════════════════════════════════════════════════
# Async Support
# ══════════════════════════════════════════════════════════════════════

class TestAsyncWrap:
    def test_basic(self):
        def sync_fn(x: int) -> int:
            return x * 2

        async_fn = async_wrap(sync_fn)
        result = asyncio.run(async_fn(5))
        assert result == 10

    def test_preserves_name(self):
        def my_func():
            pass

        wrapped = async_wrap(my_func)
        assert wrapped.__name__ == "my_func"


class TestAsyncMixin:
    def test_auto_generates(self):
        class MyService(AsyncMixin):
            def do_work(self) -> str:
                return "done"

        svc = MyService()
        assert hasattr(svc, "ado_work")
        result = asyncio.run(svc.ado_work())
        assert result == "done"

    def test_skips_private_and_properties(self):
        class MyService(AsyncMixin):
            def _helper(self):
                return 1

            @property
            def name(self) -> str:
                return "svc"

        assert not hasattr(MyService, "a_helper")
        assert not hasattr(MyService, "aname")

"""
Tests for client and telemetry configuration
"""
import os
import pytest
from unittest.mock import patch

from jsonrpc_kit.config import ClientConfig, TelemetryConfig, setup_telemetry


class TestClientConfig:
    """Test client configuration"""

    def test_default_values(self):
        config = ClientConfig(url="http://localhost/rpc")
        assert config.timeout == 3.0
        assert config.suppress_errors is False
        assert config.named_arguments is True
        assert config.ssl_verify is True
        assert config.max_redirects == 2
        assert config.headers == {}

    def test_from_env(self):
        with patch.dict(os.environ, {
            "JSONRPC_URL": "https://api.example.com/rpc",
            "JSONRPC_TIMEOUT": "10",
            "JSONRPC_SUPPRESS_ERRORS": "true",
            "JSONRPC_SSL_VERIFY": "0",
            "JSONRPC_USERNAME": "admin",
            "JSONRPC_PASSWORD": "secret",
        }):
            config = ClientConfig.from_env()
            assert config.url == "https://api.example.com/rpc"
            assert config.timeout == 10.0
            assert config.suppress_errors is True
            assert config.ssl_verify is False
            assert config.username == "admin"
            assert config.password == "secret"

    def test_from_env_without_url(self):
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ValueError, match="JSONRPC_URL"):
                ClientConfig.from_env()

    def test_explicit_url_wins(self):
        with patch.dict(os.environ, {"JSONRPC_URL": "http://env/rpc"}):
            assert ClientConfig.from_env("http://arg/rpc").url == "http://arg/rpc"

    def test_to_dict_omits_password(self):
        config = ClientConfig(url="http://localhost/rpc", username="u", password="p")
        data = config.to_dict()
        assert data["username"] == "u"
        assert "password" not in data


class TestTelemetryConfig:
    def test_from_env(self):
        with patch.dict(os.environ, {
            "OTEL_SERVICE_NAME": "billing",
            "JSONRPC_ENABLE_METRICS": "false",
        }):
            config = TelemetryConfig.from_env()
            assert config.service_name == "billing"
            assert config.enable_metrics is False
            assert config.enable_tracing is True

    def test_setup_telemetry_respects_flags(self):
        config = TelemetryConfig(service_name="svc", enable_tracing=True, enable_metrics=False)
        with patch("jsonrpc_kit.telemetry.tracer.setup_tracer") as mock_tracer, \
                patch("jsonrpc_kit.telemetry.metrics.setup_metrics") as mock_metrics:
            setup_telemetry(config)
        mock_tracer.assert_called_once_with("svc", "localhost:4317")
        mock_metrics.assert_not_called()

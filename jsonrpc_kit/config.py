"""
Configuration settings for the JSON-RPC client and telemetry
"""
import os
import logging
from typing import Dict, Any, Optional
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class ClientConfig:
    """Configuration for a JSON-RPC client"""
    url: str
    timeout: float = 3.0
    headers: Dict[str, str] = field(default_factory=dict)
    suppress_errors: bool = False
    named_arguments: bool = True
    ssl_verify: bool = True
    ssl_cert: Optional[str] = None
    max_redirects: int = 2
    username: Optional[str] = None
    password: Optional[str] = None
    debug: bool = False

    @classmethod
    def from_env(cls, url: Optional[str] = None) -> "ClientConfig":
        """Create config from environment variables"""
        url = url or os.getenv("JSONRPC_URL")
        if not url:
            raise ValueError("JSONRPC_URL environment variable is not set")

        return cls(
            url=url,
            timeout=float(os.getenv("JSONRPC_TIMEOUT", "3")),
            suppress_errors=_env_bool("JSONRPC_SUPPRESS_ERRORS", False),
            ssl_verify=_env_bool("JSONRPC_SSL_VERIFY", True),
            ssl_cert=os.getenv("JSONRPC_SSL_CERT"),
            username=os.getenv("JSONRPC_USERNAME"),
            password=os.getenv("JSONRPC_PASSWORD"),
            debug=_env_bool("JSONRPC_DEBUG", False),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization (credentials omitted)"""
        return {
            "url": self.url,
            "timeout": self.timeout,
            "headers": dict(self.headers),
            "suppress_errors": self.suppress_errors,
            "named_arguments": self.named_arguments,
            "ssl_verify": self.ssl_verify,
            "max_redirects": self.max_redirects,
            "username": self.username,
            "debug": self.debug,
        }


@dataclass
class TelemetryConfig:
    """OpenTelemetry export settings"""
    service_name: str = "jsonrpc_kit"
    otlp_endpoint: str = "localhost:4317"
    enable_tracing: bool = True
    enable_metrics: bool = True
    export_interval_ms: int = 5000

    @classmethod
    def from_env(cls) -> "TelemetryConfig":
        return cls(
            service_name=os.getenv("OTEL_SERVICE_NAME", "jsonrpc_kit"),
            otlp_endpoint=os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", "localhost:4317"),
            enable_tracing=_env_bool("JSONRPC_ENABLE_TRACING", True),
            enable_metrics=_env_bool("JSONRPC_ENABLE_METRICS", True),
        )


def setup_telemetry(config: TelemetryConfig) -> None:
    """Install tracer and meter providers according to ``config``"""
    from jsonrpc_kit.telemetry.tracer import setup_tracer
    from jsonrpc_kit.telemetry.metrics import setup_metrics

    if config.enable_tracing:
        setup_tracer(config.service_name, config.otlp_endpoint)
    if config.enable_metrics:
        setup_metrics(config.service_name, config.otlp_endpoint, config.export_interval_ms)
    logger.info(f"Telemetry enabled for {config.service_name}: tracing={config.enable_tracing}, metrics={config.enable_metrics}")

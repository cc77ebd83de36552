"""Configuration management for meshverify."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from meshverify.core.exceptions import ConfigurationError


class KubernetesConfig(BaseModel):
    """Cluster connection configuration."""

    kubeconfig: str | None = None
    context: str | None = None
    request_timeout_seconds: float = 30.0


class IstioctlConfig(BaseModel):
    """istioctl renderer configuration."""

    binary: str = "istioctl"
    timeout_seconds: int = 120


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "console"
    output: str = "stderr"


class VerifierConfig(BaseModel):
    """Main meshverify configuration."""

    istio_namespace: str = "istio-system"
    workload_name_prefix: str = "istio"
    default_namespace: str = "default"
    manifests_path: str | None = None  # install package path override
    max_expansion_depth: int = Field(default=5, ge=1)
    kubernetes: KubernetesConfig = Field(default_factory=KubernetesConfig)
    istioctl: IstioctlConfig = Field(default_factory=IstioctlConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_file(cls, path: str | Path) -> "VerifierConfig":
        """Load configuration from YAML file.

        Args:
            path: Path to configuration file

        Returns:
            VerifierConfig instance

        Raises:
            ConfigurationError: If file cannot be loaded or parsed
        """
        config_path = Path(path).expanduser()

        if not config_path.exists():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            with config_path.open() as f:
                data = yaml.safe_load(f)
        except Exception as e:
            raise ConfigurationError(f"Failed to load configuration: {e}") from e

        try:
            return cls(**(data or {}))
        except Exception as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

    def with_overrides(self, **overrides: Any) -> "VerifierConfig":
        """Return a copy with the non-None top-level overrides applied.

        Args:
            **overrides: Field values, typically taken from CLI flags

        Returns:
            New VerifierConfig instance
        """
        updates = {key: value for key, value in overrides.items() if value is not None}
        return self.model_copy(update=updates)

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary.

        Returns:
            Dictionary representation
        """
        return self.model_dump()

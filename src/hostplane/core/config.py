"""Configuration management for hostplane."""

import ipaddress
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

from hostplane.core.exceptions import ConfigurationError
from hostplane.core.versions import MasterVersion

DEFAULT_CONFIG_PATH = "~/.hostplane/config.yaml"


class ImagesConfig(BaseModel):
    """Container images used by the compiled control plane."""

    hyperkube: str = "gcr.io/google_containers/hyperkube-amd64"
    machine_controller: str = "kubermatic/machine-controller:v0.7.5"


class VersionsConfig(BaseModel):
    """Supported master versions."""

    master: list[MasterVersion] = Field(
        default_factory=lambda: [
            MasterVersion(version="1.8.0"),
            MasterVersion(version="1.9.0"),
            MasterVersion(version="1.10.0", default=True),
            MasterVersion(version="1.12.0"),
        ]
    )


class SeedConfig(BaseModel):
    """Seed admission configuration."""

    namespace: str = "hostplane"
    name: str = "default"
    single_seed: bool = False
    admission_timeout_seconds: float = 10.0


class CompilerConfig(BaseModel):
    """Resource compiler configuration."""

    node_access_network: str = "10.254.0.0/16"
    apiserver_replicas: int = 1

    @field_validator("node_access_network")
    @classmethod
    def validate_node_access_network(cls, v: str) -> str:
        ipaddress.ip_network(v, strict=False)
        return v


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "json"
    output: str = "stdout"


class HostplaneConfig(BaseModel):
    """Main hostplane configuration."""

    images: ImagesConfig = Field(default_factory=ImagesConfig)
    versions: VersionsConfig = Field(default_factory=VersionsConfig)
    seed: SeedConfig = Field(default_factory=SeedConfig)
    compiler: CompilerConfig = Field(default_factory=CompilerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_file(cls, path: str | Path = DEFAULT_CONFIG_PATH) -> "HostplaneConfig":
        """Load configuration from YAML file.

        Args:
            path: Path to configuration file

        Returns:
            HostplaneConfig instance

        Raises:
            ConfigurationError: If file cannot be loaded or parsed
        """
        config_path = Path(path).expanduser()

        if not config_path.exists():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            with config_path.open() as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Failed to load configuration: {e}") from e

        try:
            return cls(**(data or {}))
        except Exception as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary.

        Returns:
            Dictionary representation
        """
        return self.model_dump()

"""Immutable runtime configuration."""

import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from terraform_ai.errors import ConfigurationError
from terraform_ai.model.client import DEFAULT_API_VERSION, DEFAULT_TIMEOUT_SECONDS
from terraform_ai.model.models import Backend

DEFAULT_DEPLOYMENT_NAME = "text-davinci-003"


@dataclass(frozen=True)
class AppConfig:
    """
    Settings for one terraform-ai invocation.

    Built once by the CLI from flags and environment variables, then handed
    to every component that needs it.
    """
    api_key: str = ""
    deployment_name: str = DEFAULT_DEPLOYMENT_NAME
    max_tokens: int = 0  # 0 keeps the model table value
    azure_endpoint: str = ""
    api_version: str = DEFAULT_API_VERSION
    require_confirmation: bool = True
    temperature: float = 0.0
    working_dir: str = "."
    exec_dir: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT_SECONDS
    log_file: Optional[str] = None
    verbose: bool = False

    @property
    def backend(self) -> Backend:
        """Gateway when an endpoint is configured, direct API otherwise."""
        if self.azure_endpoint:
            return Backend.GATEWAY
        return Backend.DIRECT

    def validate(self) -> "AppConfig":
        """
        Check values that would otherwise fail deep inside a run.

        Returns:
            self, so the call can be chained

        Raises:
            ConfigurationError: on a missing key or out-of-range values
        """
        if not self.api_key:
            raise ConfigurationError("Please provide an OpenAI key.")
        if self.max_tokens < 0:
            raise ConfigurationError(f"max tokens must not be negative, got {self.max_tokens}")
        if not 0.0 <= self.temperature <= 2.0:
            raise ConfigurationError(f"temperature must be between 0 and 2, got {self.temperature}")
        if self.timeout <= 0:
            raise ConfigurationError(f"timeout must be positive, got {self.timeout}")
        return self

    def to_dict(self) -> dict:
        """Convert to dictionary with the API key masked."""
        return {
            "api_key": "***" if self.api_key else "",
            "deployment_name": self.deployment_name,
            "max_tokens": self.max_tokens,
            "azure_endpoint": self.azure_endpoint,
            "api_version": self.api_version,
            "backend": self.backend.value,
            "require_confirmation": self.require_confirmation,
            "temperature": self.temperature,
            "working_dir": self.working_dir,
            "exec_dir": self.exec_dir,
            "timeout": self.timeout,
        }


def resolve_working_dir(value: Optional[str]) -> str:
    """Expand and resolve the working directory, defaulting to the cwd."""
    path = Path(value).expanduser() if value else Path.cwd()
    path = path.resolve()
    if not path.is_dir():
        raise ConfigurationError(f"working directory does not exist: {path}")
    return str(path)


def resolve_exec_dir(value: Optional[str]) -> Optional[str]:
    """Return the configured terraform executable, or the one on PATH."""
    if value:
        return value
    return shutil.which("terraform")

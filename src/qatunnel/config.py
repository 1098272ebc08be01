"""Settings for the tunnel client."""

import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .exceptions import ConfigError

DEFAULT_API_URL = "http://qadept.com/system/createTunnel"
DEFAULT_SSH_DOWNLOAD_URL = (
    "https://github.com/PowerShell/Win32-OpenSSH/releases/download/"
    "5_30_2016/OpenSSH-Win32.zip"
)
DEFAULT_LOCAL_HOST = "127.0.0.1"

ENV_PREFIX = "QATUNNEL_"
ENV_FIELDS = {
    "API_URL": "api_url",
    "REQUEST_TIMEOUT": "request_timeout",
    "TEMP_DIR": "temp_dir",
    "SSH_DOWNLOAD_URL": "ssh_download_url",
}


class TunnelSettings(BaseModel):
    """Pydantic model for tunnel client settings."""

    model_config = ConfigDict(
        str_strip_whitespace=True, validate_assignment=True, extra="forbid"
    )

    api_url: str = Field(default=DEFAULT_API_URL, description="Tunnel creation endpoint")
    request_timeout: float = Field(
        default=30.0, gt=0, le=600, description="Tunnel request timeout in seconds"
    )
    temp_dir: Path | None = Field(
        default=None, description="Base temp directory (system default if None)"
    )
    workspace_subdir: tuple[str, ...] = Field(
        default=("Qadept", "tunnel"), min_length=1, description="Workspace path under temp_dir"
    )
    ssh_download_url: str = Field(
        default=DEFAULT_SSH_DOWNLOAD_URL, description="OpenSSH archive for Windows"
    )
    max_key_attempts: int = Field(
        default=1000, ge=1, le=100000, description="Key file name candidates to try"
    )
    version_check_timeout: float = Field(
        default=10.0, gt=0, le=120, description="Timeout for `ssh -V` checks"
    )

    @field_validator("api_url", "ssh_download_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Only plain HTTP(S) endpoints are supported."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("URL must start with http:// or https://")
        return v

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "TunnelSettings":
        """Build settings from QATUNNEL_* environment variables.

        Args:
            environ: Environment mapping (default: os.environ)

        Returns:
            Validated settings

        Raises:
            ConfigError: If an environment value is invalid
        """
        if environ is None:
            environ = os.environ

        values = {}
        for suffix, field_name in ENV_FIELDS.items():
            raw = environ.get(ENV_PREFIX + suffix)
            if raw:
                values[field_name] = raw

        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigError(f"Invalid settings in environment: {e}") from e

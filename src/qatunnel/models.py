"""Tunnel models using Pydantic for type safety and validation."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator

from .config import DEFAULT_LOCAL_HOST
from .utils import validate_non_empty_string, validate_port


class TunnelRequest(BaseModel):
    """Immutable tunnel request built from command line input."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    token: str = Field(description="Access token")
    project_names: tuple[str, ...] = Field(
        default=(), description="Projects to expose (empty means all projects)"
    )
    local_host: str = Field(default=DEFAULT_LOCAL_HOST, description="Web server host")

    @field_validator("token")
    @classmethod
    def validate_token(cls, v: str) -> str:
        return validate_non_empty_string(v, "Access token")

    @field_validator("local_host")
    @classmethod
    def validate_local_host(cls, v: str) -> str:
        return validate_non_empty_string(v, "Local host")

    @field_validator("project_names")
    @classmethod
    def drop_blank_projects(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(name.strip() for name in v if name and name.strip())

    def query_params(self) -> dict[str, str]:
        """Query parameters for the tunnel creation endpoint."""
        return {"token": self.token, "projects": ",".join(self.project_names)}


class PortMapping(BaseModel):
    """One remote forward: remote_port on the SSH server to local_port here.

    The service sends each mapping as a ``[local_port, remote_port]`` pair.
    """

    model_config = ConfigDict(frozen=True)

    local_port: int = Field(description="Local web server port")
    remote_port: int = Field(description="Port opened on the SSH server")

    @model_validator(mode="before")
    @classmethod
    def from_pair(cls, data: Any) -> Any:
        if isinstance(data, (list, tuple)):
            if len(data) != 2:
                raise ValueError("Port mapping must be a [local_port, remote_port] pair")
            return {"local_port": data[0], "remote_port": data[1]}
        return data

    @field_validator("local_port", "remote_port")
    @classmethod
    def validate_ports(cls, v: int, info: ValidationInfo) -> int:
        validate_port(v, info.field_name.replace("_", " ").capitalize())
        return v

    def forward_spec(self, local_host: str) -> str:
        """Argument for ssh -R."""
        return f"{self.remote_port}:{local_host}:{self.local_port}"


class TunnelDescriptor(BaseModel):
    """Tunnel configuration returned by the tunnel service."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    success: bool = Field(alias="ret")
    error_message: str | None = Field(default=None, alias="message")
    ssh_user: str = Field(min_length=1, alias="user")
    ssh_host: str = Field(min_length=1, alias="host")
    port_mappings: tuple[PortMapping, ...] = Field(alias="ports")
    private_key: str = Field(min_length=1, alias="key")
    public_urls: tuple[str, ...] = Field(default=(), alias="urls")

    @property
    def target(self) -> str:
        """SSH destination in user@host form."""
        return f"{self.ssh_user}@{self.ssh_host}"


class ClientSource(str, Enum):
    """Where an SSH client was found."""

    PATH = "path"
    KNOWN_LOCATION = "known_location"
    CACHED = "cached"
    DOWNLOADED = "downloaded"


class SSHClient(BaseModel):
    """A validated, invocable SSH client."""

    model_config = ConfigDict(frozen=True)

    command: str = Field(min_length=1, description="Executable name or path")
    source: ClientSource = Field(default=ClientSource.PATH)


class TunnelResult(BaseModel):
    """Outcome of a finished SSH tunnel process."""

    model_config = ConfigDict(frozen=True)

    returncode: int
    stdout: str = ""
    stderr: str = ""
    interrupted: bool = False

    @property
    def success(self) -> bool:
        return self.returncode == 0 or self.interrupted

"""qatunnel - reverse SSH tunnels from local web projects to QAdept."""

__version__ = "0.1.0"

from .api import request_tunnel
from .config import TunnelSettings
from .exceptions import (
    ClientNotFoundError,
    ConfigError,
    NetworkError,
    ProtocolError,
    QATunnelError,
    TunnelProcessError,
    WorkspaceError,
)
from .keys import save_tunnel_key
from .launcher import TunnelProcess, build_ssh_command
from .locator import find_ssh_client
from .logging import get_logger, setup_logging
from .models import (
    ClientSource,
    PortMapping,
    SSHClient,
    TunnelDescriptor,
    TunnelRequest,
    TunnelResult,
)
from .workspace import prepare_workspace

# Setup logging on package initialization
setup_logging(level="WARNING")

__all__ = [
    # Workflow
    "prepare_workspace",
    "request_tunnel",
    "save_tunnel_key",
    "find_ssh_client",
    "build_ssh_command",
    "TunnelProcess",
    # Models
    "TunnelSettings",
    "TunnelRequest",
    "TunnelDescriptor",
    "PortMapping",
    "SSHClient",
    "ClientSource",
    "TunnelResult",
    # Exceptions
    "QATunnelError",
    "ConfigError",
    "WorkspaceError",
    "NetworkError",
    "ProtocolError",
    "ClientNotFoundError",
    "TunnelProcessError",
    # Logging
    "get_logger",
    "setup_logging",
]

"""Custom exceptions for qatunnel."""


class QATunnelError(Exception):
    """Base exception for all qatunnel errors."""
    pass


class ConfigError(QATunnelError):
    """Raised when command line input or settings are invalid."""
    pass


class WorkspaceError(QATunnelError):
    """Raised when the scratch directory or key file cannot be used."""
    pass


class NetworkError(QATunnelError):
    """Raised when the tunnel service cannot be reached."""
    pass


class ProtocolError(QATunnelError):
    """Raised when the tunnel service response is rejected or malformed."""
    pass


class ClientNotFoundError(QATunnelError):
    """Raised when no usable SSH client can be located or downloaded."""
    pass


class TunnelProcessError(QATunnelError):
    """Raised when the SSH client exits with a non-zero status."""

    def __init__(
        self,
        message: str,
        returncode: int | None = None,
        stdout: str = "",
        stderr: str = "",
    ):
        super().__init__(message)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr

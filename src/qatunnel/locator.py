"""Locating, and on Windows bootstrapping, an SSH client binary."""

import platform
import shutil
import subprocess
import zipfile
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Protocol
from urllib.error import URLError
from urllib.request import urlretrieve

from .config import TunnelSettings
from .exceptions import ClientNotFoundError
from .logging import get_logger
from .models import ClientSource, SSHClient

logger = get_logger(__name__)

WINDOWS_GIT_SSH_PATHS = (
    "C:\\Program Files\\Git\\usr\\bin\\ssh.exe",
    "C:\\Program Files (x86)\\Git\\usr\\bin\\ssh.exe",
)
OPENSSH_DIR_NAME = "OpenSSH-Win32"
OPENSSH_ARCHIVE_NAME = "OpenSSH-Win32.zip"

Notify = Callable[[str], None]


def check_ssh_client(command: str, timeout: float = 10.0) -> bool:
    """Return True if `command -V` runs and exits successfully."""
    try:
        result = subprocess.run(
            [command, "-V"],
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            timeout=timeout,
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        logger.debug("SSH client check failed", command=command, error=str(e))
        return False

    logger.debug("SSH client checked", command=command, returncode=result.returncode)
    return result.returncode == 0


class ClientStrategy(Protocol):
    """One way of obtaining an SSH client."""

    def locate(self) -> SSHClient | None:
        """Return a validated client, or None if this strategy has none."""
        ...


class PathStrategy:
    """Look the client up on PATH."""

    def __init__(self, name: str = "ssh", timeout: float = 10.0):
        self.name = name
        self.timeout = timeout

    def locate(self) -> SSHClient | None:
        command = shutil.which(self.name)
        if command and check_ssh_client(command, self.timeout):
            return SSHClient(command=command, source=ClientSource.PATH)
        return None


class KnownPathsStrategy:
    """Check fixed vendor install locations (Git for Windows)."""

    def __init__(self, paths: Sequence[str] = WINDOWS_GIT_SSH_PATHS, timeout: float = 10.0):
        self.paths = tuple(paths)
        self.timeout = timeout

    def locate(self) -> SSHClient | None:
        for path in self.paths:
            if Path(path).exists() and check_ssh_client(path, self.timeout):
                return SSHClient(command=path, source=ClientSource.KNOWN_LOCATION)
        return None


class CachedClientStrategy:
    """Reuse an OpenSSH client unpacked into the workspace earlier."""

    def __init__(self, workspace: Path, timeout: float = 10.0):
        self.workspace = workspace
        self.timeout = timeout

    @property
    def binary_path(self) -> Path:
        return self.workspace / OPENSSH_DIR_NAME / "ssh.exe"

    def locate(self) -> SSHClient | None:
        path = self.binary_path
        if path.exists() and check_ssh_client(str(path), self.timeout):
            return SSHClient(command=str(path), source=ClientSource.CACHED)
        return None


class DownloadStrategy:
    """Download the OpenSSH archive into the workspace and unpack it."""

    def __init__(
        self,
        workspace: Path,
        url: str,
        timeout: float = 10.0,
        notify: Notify | None = None,
    ):
        self.workspace = workspace
        self.url = url
        self.timeout = timeout
        self.notify = notify

    @property
    def archive_path(self) -> Path:
        return self.workspace / OPENSSH_ARCHIVE_NAME

    @property
    def binary_path(self) -> Path:
        return self.workspace / OPENSSH_DIR_NAME / "ssh.exe"

    def _report(self, message: str) -> None:
        if self.notify is not None:
            self.notify(message)

    def download(self) -> Path:
        """Fetch the archive.

        Raises:
            ClientNotFoundError: If the download fails
        """
        self._report("Downloading OpenSSH client...")
        logger.info("Downloading OpenSSH client", url=self.url, path=str(self.archive_path))
        try:
            urlretrieve(self.url, self.archive_path)
        except (URLError, OSError) as e:
            logger.info("OpenSSH download failed", url=self.url, error=str(e))
            raise ClientNotFoundError("Can't download OpenSSH client.") from e

        self._report("OpenSSH client was successfully downloaded.")
        return self.archive_path

    def extract(self, archive_path: Path) -> None:
        """Unpack the archive into the workspace.

        Raises:
            ClientNotFoundError: If the archive cannot be opened or unpacked
        """
        try:
            with zipfile.ZipFile(archive_path) as archive:
                archive.extractall(self.workspace)
        except (zipfile.BadZipFile, OSError) as e:
            logger.info("OpenSSH archive extraction failed", path=str(archive_path), error=str(e))
            raise ClientNotFoundError("Can't open downloaded archive.") from e

    def locate(self) -> SSHClient | None:
        self.extract(self.download())
        path = self.binary_path
        if check_ssh_client(str(path), self.timeout):
            return SSHClient(command=str(path), source=ClientSource.DOWNLOADED)
        return None


def is_windows(system: str | None = None) -> bool:
    return (system or platform.system()).lower().startswith("win")


def strategies_for_platform(
    workspace: Path,
    settings: TunnelSettings,
    system: str | None = None,
    notify: Notify | None = None,
) -> list[ClientStrategy]:
    """Strategies to try, in order, for the given platform.

    Only Windows lacks a bundled client, so only there are install
    locations checked and a download attempted.
    """
    timeout = settings.version_check_timeout
    strategies: list[ClientStrategy] = [PathStrategy("ssh", timeout)]

    if is_windows(system):
        strategies.extend([
            KnownPathsStrategy(WINDOWS_GIT_SSH_PATHS, timeout),
            CachedClientStrategy(workspace, timeout),
            DownloadStrategy(workspace, settings.ssh_download_url, timeout, notify),
        ])

    return strategies


def locate_client(strategies: Sequence[ClientStrategy]) -> SSHClient:
    """Return the first client any strategy yields.

    Raises:
        ClientNotFoundError: If every strategy comes up empty
    """
    for strategy in strategies:
        client = strategy.locate()
        if client is not None:
            logger.info("SSH client found", command=client.command, source=client.source.value)
            return client
        logger.debug("No SSH client from strategy", strategy=type(strategy).__name__)

    raise ClientNotFoundError("SSH client was not found.")


def find_ssh_client(
    workspace: Path,
    settings: TunnelSettings,
    system: str | None = None,
    notify: Notify | None = None,
) -> SSHClient:
    """Find a usable SSH client for this platform.

    Args:
        workspace: Workspace directory used as a download cache
        settings: Tool settings
        system: Platform name override (default: platform.system())
        notify: Callback for user-facing progress messages

    Returns:
        Validated SSH client

    Raises:
        ClientNotFoundError: If no client is available
    """
    return locate_client(strategies_for_platform(workspace, settings, system, notify))

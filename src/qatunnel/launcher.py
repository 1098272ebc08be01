"""Building and running the SSH tunnel command."""

import subprocess
from collections.abc import Callable, Iterable
from pathlib import Path
from types import TracebackType
from typing import Literal

from .exceptions import TunnelProcessError
from .logging import get_logger
from .models import SSHClient, TunnelDescriptor, TunnelResult

logger = get_logger(__name__)


def build_ssh_command(
    client: SSHClient,
    descriptor: TunnelDescriptor,
    key_path: Path | str,
    local_host: str,
) -> list[str]:
    """Compose the ssh argument list for a reverse tunnel.

    One -R flag is emitted per port mapping, in descriptor order.
    """
    command = [client.command, "-N"]
    for mapping in descriptor.port_mappings:
        command.extend(["-R", mapping.forward_spec(local_host)])
    command.extend(["-i", str(key_path), descriptor.target])
    return command


def announce_urls(
    urls: Iterable[str],
    echo: Callable[[str], None] = print,
    highlight: Callable[[str], None] | None = None,
) -> None:
    """Tell the user which domains became reachable."""
    (highlight or echo)("Now following domains are available from QAdept:")
    for url in urls:
        echo(f" - {url}")
    echo("")
    echo("Tunnel will be closed once you terminate this process.")


class TunnelProcess:
    """Manages the SSH client process lifecycle with context manager support"""

    def __init__(self, command: list[str], stop_timeout: float = 5.0):
        """Initialize TunnelProcess with the full ssh command

        Args:
            command: ssh argument list, as built by build_ssh_command
            stop_timeout: Seconds to wait for graceful termination

        Raises:
            ValueError: If command is empty
        """
        if not command:
            raise ValueError("Tunnel command cannot be empty")

        self.command = command
        self.stop_timeout = stop_timeout
        self._process: subprocess.Popen[str] | None = None

    def start(self) -> None:
        """Start the SSH process

        Raises:
            TunnelProcessError: If the process cannot be spawned
        """
        if self.is_running():
            logger.debug("Process already running", pid=self.pid)
            return

        logger.info("Starting SSH tunnel", command=self.command[0], args=len(self.command) - 1)
        try:
            self._process = subprocess.Popen(
                self.command,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
            )
        except OSError as e:
            logger.info("Failed to start SSH process", error=str(e))
            raise TunnelProcessError(f"Failed to start SSH client: {e}") from e

        logger.info("SSH process started", pid=self._process.pid)

    def wait(self) -> TunnelResult:
        """Block until the SSH process exits, collecting its output.

        No timeout applies: the tunnel lives until the user or the remote
        side ends it.
        """
        if self._process is None:
            raise TunnelProcessError("SSH process was not started")

        stdout, stderr = self._process.communicate()
        result = TunnelResult(
            returncode=self._process.returncode,
            stdout=stdout or "",
            stderr=stderr or "",
        )
        self._process = None
        logger.info("SSH process exited", returncode=result.returncode)
        return result

    def stop(self) -> TunnelResult | None:
        """Stop the SSH process gracefully, killing it if it does not exit

        Returns:
            Result of the stopped process, or None if nothing was running
        """
        if self._process is None:
            return None

        process = self._process
        logger.info("Stopping SSH process", pid=process.pid)
        if process.poll() is None:
            process.terminate()
        try:
            stdout, stderr = process.communicate(timeout=self.stop_timeout)
        except subprocess.TimeoutExpired:
            logger.warning(
                "Process did not terminate gracefully, force killing", pid=process.pid
            )
            process.kill()
            stdout, stderr = process.communicate()

        self._process = None
        return TunnelResult(
            returncode=process.returncode,
            stdout=stdout or "",
            stderr=stderr or "",
            interrupted=True,
        )

    def run(self) -> TunnelResult:
        """Start the tunnel and block until it closes

        Returns:
            Result of the finished process; interrupted is True when the
            user stopped it with Ctrl-C

        Raises:
            TunnelProcessError: If the process fails to start or exits
                with a non-zero status on its own
        """
        self.start()
        try:
            result = self.wait()
        except KeyboardInterrupt:
            logger.info("Tunnel interrupted by user")
            result = self.stop() or TunnelResult(returncode=0, interrupted=True)

        if not result.success:
            raise TunnelProcessError(
                f"SSH client exited with status {result.returncode}",
                returncode=result.returncode,
                stdout=result.stdout,
                stderr=result.stderr,
            )
        return result

    def is_running(self) -> bool:
        """Check if process is currently running"""
        if self._process is None:
            return False

        return self._process.poll() is None

    @property
    def pid(self) -> int | None:
        """Get process ID if running"""
        if self.is_running() and self._process:
            return self._process.pid
        return None

    def __enter__(self) -> "TunnelProcess":
        logger.debug("Entering TunnelProcess context")
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> Literal[False]:
        """Context manager exit - stop the process if still running

        Returns:
            False to propagate any exception
        """
        logger.debug("Exiting TunnelProcess context")
        try:
            self.stop()
        except OSError as e:
            logger.error("Error during context exit", error=str(e))
        return False

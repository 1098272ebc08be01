"""Persisting the tunnel private key."""

import os
from collections.abc import Iterator
from pathlib import Path

from .exceptions import WorkspaceError
from .logging import get_logger

logger = get_logger(__name__)

KEY_FILE_NAME = "tunnel_key"
KEY_FILE_MODE = 0o600
_OPEN_FLAGS = (
    os.O_WRONLY | os.O_CREAT | os.O_TRUNC | getattr(os, "O_BINARY", 0) | getattr(os, "O_NOFOLLOW", 0)
)


def _is_writable(path: Path) -> bool:
    return os.access(path, os.W_OK)


def key_path_candidates(workspace: Path, max_attempts: int) -> Iterator[Path]:
    """Yield tunnel_key, tunnel_key_1, tunnel_key_2, ... under workspace."""
    base = workspace / KEY_FILE_NAME
    yield base
    for i in range(1, max_attempts):
        yield base.with_name(f"{KEY_FILE_NAME}_{i}")


def choose_key_path(workspace: Path, max_attempts: int = 1000) -> Path:
    """Pick the first candidate that is missing or writable by us.

    A key file left behind by another user in a shared temp directory
    cannot be overwritten, so the next numbered name is tried.

    Raises:
        WorkspaceError: If no usable name is found within max_attempts
    """
    for candidate in key_path_candidates(workspace, max_attempts):
        if not candidate.exists() or _is_writable(candidate):
            return candidate
        logger.debug("Key file is not writable, trying next name", path=str(candidate))

    raise WorkspaceError(
        f"Can't find a writable key file name in {workspace} "
        f"after {max_attempts} attempts."
    )


def save_tunnel_key(key: str | bytes, workspace: Path, max_attempts: int = 1000) -> Path:
    """Write the private key with owner-only permissions.

    Args:
        key: Private key material from the tunnel service
        workspace: Workspace directory
        max_attempts: Maximum number of file names to try

    Returns:
        Path to the written key file

    Raises:
        WorkspaceError: If the key cannot be written
    """
    data = key.encode("utf-8") if isinstance(key, str) else key
    key_path = choose_key_path(workspace, max_attempts)

    try:
        fd = os.open(key_path, _OPEN_FLAGS, KEY_FILE_MODE)
        with os.fdopen(fd, "wb") as f:
            # os.open only applies the mode to new files
            if hasattr(os, "fchmod"):
                os.fchmod(f.fileno(), KEY_FILE_MODE)
            f.write(data)
        if not hasattr(os, "fchmod"):
            os.chmod(key_path, KEY_FILE_MODE)
    except OSError as e:
        logger.info("Failed to write key file", path=str(key_path), error=str(e))
        raise WorkspaceError(f'Can\'t write key file "{key_path}": {e}') from e

    logger.info("Tunnel key saved", path=str(key_path))
    return key_path

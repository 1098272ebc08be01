"""Scratch directory for key material and downloaded binaries."""

import os
import tempfile
from pathlib import Path

from .config import TunnelSettings
from .exceptions import WorkspaceError
from .logging import get_logger

logger = get_logger(__name__)


def prepare_workspace(settings: TunnelSettings) -> Path:
    """Ensure the workspace directory exists and return its path.

    Args:
        settings: Tool settings (temp_dir and workspace_subdir are used)

    Returns:
        Path to the workspace directory

    Raises:
        WorkspaceError: If the temp directory is not writable, or the
            workspace cannot be created or is not writable
    """
    base_dir = settings.temp_dir or Path(tempfile.gettempdir())

    if not os.access(base_dir, os.W_OK):
        logger.info("Temporary directory is not writable", temp_dir=str(base_dir))
        raise WorkspaceError(f'Temporary directory "{base_dir}" is not writable.')

    workspace = base_dir.joinpath(*settings.workspace_subdir)
    try:
        workspace.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.info("Failed to create workspace", workspace=str(workspace), error=str(e))
        raise WorkspaceError(f'Can\'t create directory "{workspace}": {e}') from e

    if not os.access(workspace, os.W_OK):
        logger.info("Workspace is not writable", workspace=str(workspace))
        raise WorkspaceError(f'Directory "{workspace}" is not writable.')

    logger.debug("Workspace ready", workspace=str(workspace))
    return workspace

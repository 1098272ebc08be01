"""Shared pytest fixtures for qatunnel tests."""

import json
from unittest.mock import MagicMock, Mock

import pytest

from qatunnel.config import TunnelSettings
from qatunnel.logging import setup_logging
from qatunnel.models import SSHClient, TunnelDescriptor


@pytest.fixture
def settings(tmp_path):
    """Settings rooted in a per-test temp directory."""
    return TunnelSettings(temp_dir=tmp_path)


@pytest.fixture
def workspace(tmp_path):
    """Create the workspace directory the way prepare_workspace would."""
    path = tmp_path / "Qadept" / "tunnel"
    path.mkdir(parents=True)
    return path


@pytest.fixture
def tunnel_payload():
    """A successful tunnel service response.

    Returns:
        dict: Decoded JSON body
    """
    return {
        "ret": True,
        "key": "KEYDATA",
        "host": "tun.example.com",
        "user": "tunnel",
        "ports": [[2222, 8080]],
        "urls": ["https://a.qadept.com"],
    }


@pytest.fixture
def descriptor(tunnel_payload):
    return TunnelDescriptor.model_validate(tunnel_payload)


@pytest.fixture
def ssh_client():
    return SSHClient(command="/usr/bin/ssh")


@pytest.fixture
def mock_urlopen(monkeypatch):
    """Mock urlopen in the api module.

    Returns:
        Mock: Mocked urlopen; set ``respond(payload)`` to choose the body
    """
    mock = MagicMock()

    def respond(payload):
        body = payload if isinstance(payload, bytes) else json.dumps(payload).encode()
        mock.return_value.__enter__.return_value.read.return_value = body

    mock.respond = respond
    monkeypatch.setattr("qatunnel.api.urlopen", mock)
    return mock


@pytest.fixture
def mock_popen(monkeypatch):
    """Mock subprocess.Popen for the launcher.

    Returns:
        Mock: Mocked Popen class
    """
    mock = Mock()
    monkeypatch.setattr("qatunnel.launcher.subprocess.Popen", mock)
    return mock


@pytest.fixture
def mock_process():
    """Create a mock SSH process that exits cleanly.

    Returns:
        Mock: Mock process with common attributes
    """
    process = Mock()
    process.pid = 12345
    process.returncode = 0
    process.poll.return_value = None
    process.communicate.return_value = ("", "")
    return process


@pytest.fixture(autouse=True)
def reset_logging():
    """Reset logging configuration after each test.

    The CLI binds log output to the stream active during the invocation,
    which CliRunner closes afterwards.
    """
    yield
    setup_logging(level="WARNING")

"""Utility functions for qatunnel."""

from typing import Any

import click

# Port range constants
MIN_PORT = 1
MAX_PORT = 65535


def validate_port(port: int, port_name: str = "Port") -> None:
    """Validate port number range.

    Args:
        port: Port number to validate
        port_name: Name of the port for error messages

    Raises:
        ValueError: If port is not in valid range (1-65535)
    """
    if isinstance(port, bool) or not isinstance(port, int) or not (MIN_PORT <= port <= MAX_PORT):
        raise ValueError(f"{port_name} must be between {MIN_PORT} and {MAX_PORT}")


def validate_non_empty_string(value: str, field_name: str) -> str:
    """Validate that a string is not empty or only whitespace.

    Args:
        value: String value to validate
        field_name: Name of the field for error messages

    Returns:
        Stripped string value

    Raises:
        ValueError: If string is empty or only whitespace
    """
    if not value or not value.strip():
        raise ValueError(f"{field_name} cannot be empty")
    return value.strip()


def mask_sensitive_data(
    value: str | None, mask_char: str = "*", show_chars: int = 4
) -> str:
    """Mask sensitive data for logging while preserving some characters for debugging.

    Args:
        value: Sensitive string to mask (e.g., access token, private key)
        mask_char: Character to use for masking
        show_chars: Number of characters to show at the end

    Returns:
        Masked string safe for logging
    """
    if not value:
        return "<None>"

    if len(value) <= show_chars:
        return mask_char * len(value)

    masked_length = len(value) - show_chars
    return mask_char * masked_length + value[-show_chars:]


def sanitize_log_data(data: dict[str, Any]) -> dict[str, Any]:
    """Sanitize dictionary data for safe logging by masking sensitive fields.

    Args:
        data: Dictionary potentially containing sensitive data

    Returns:
        Sanitized dictionary safe for logging
    """
    sensitive_fields = {
        "token",
        "password",
        "secret",
        "key",
    }

    sanitized = {}
    for key, value in data.items():
        if any(sensitive_field in key.lower() for sensitive_field in sensitive_fields):
            sanitized[key] = mask_sensitive_data(str(value) if value else None)
        else:
            sanitized[key] = value

    return sanitized


def print_error(message: str) -> None:
    """Print an error message in red to stderr."""
    click.secho(message, fg="red", err=True)


def print_info(message: str) -> None:
    """Print an informational message."""
    click.echo(message)


def print_success(message: str) -> None:
    """Print a success message in green."""
    click.secho(message, fg="green")

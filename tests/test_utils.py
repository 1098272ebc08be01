"""Tests for utility functions."""

import pytest

from qatunnel.utils import (
    MAX_PORT,
    MIN_PORT,
    mask_sensitive_data,
    print_error,
    print_info,
    print_success,
    sanitize_log_data,
    validate_non_empty_string,
    validate_port,
)


class TestValidatePort:
    """Test port validation function."""

    def test_valid_ports(self):
        validate_port(1, "Test port")
        validate_port(8080, "Alt HTTP port")
        validate_port(65535, "Max port")

    def test_invalid_ports(self):
        with pytest.raises(ValueError, match="Test port must be between 1 and 65535"):
            validate_port(0, "Test port")

        with pytest.raises(ValueError, match="Test port must be between 1 and 65535"):
            validate_port(65536, "Test port")

    def test_non_integer_ports(self):
        with pytest.raises(ValueError, match="Test port must be between 1 and 65535"):
            validate_port("80", "Test port")  # type: ignore

        with pytest.raises(ValueError, match="Test port must be between 1 and 65535"):
            validate_port(True, "Test port")  # type: ignore

    def test_constants(self):
        assert MIN_PORT == 1
        assert MAX_PORT == 65535


class TestValidateNonEmptyString:
    """Test non-empty string validation function."""

    def test_valid_strings(self):
        assert validate_non_empty_string("test", "Field") == "test"
        assert validate_non_empty_string("  test  ", "Field") == "test"

    def test_invalid_strings(self):
        with pytest.raises(ValueError, match="Field cannot be empty"):
            validate_non_empty_string("", "Field")

        with pytest.raises(ValueError, match="Access token cannot be empty"):
            validate_non_empty_string("   ", "Access token")


class TestMaskSensitiveData:
    """Test sensitive data masking function."""

    def test_mask_normal_data(self):
        assert mask_sensitive_data("secret123456") == "********3456"
        assert mask_sensitive_data("token_abcdef", show_chars=6) == "******abcdef"
        assert mask_sensitive_data("key") == "***"

    def test_mask_none_data(self):
        assert mask_sensitive_data(None) == "<None>"
        assert mask_sensitive_data("") == "<None>"

    def test_custom_mask_char(self):
        assert mask_sensitive_data("secret123456", mask_char="X") == "XXXXXXXX3456"


class TestSanitizeLogData:
    """Test log data sanitization function."""

    def test_sanitize_query_params(self):
        """Test that the access token is masked but projects are not."""
        sanitized = sanitize_log_data({"token": "abc123def456", "projects": "shop,blog"})
        assert sanitized == {"token": "********f456", "projects": "shop,blog"}

    def test_case_insensitive_detection(self):
        sanitized = sanitize_log_data({"PRIVATE_KEY": "KEYDATA1234", "Secret": "mypassword"})
        assert sanitized["PRIVATE_KEY"] == "*******1234"
        assert sanitized["Secret"] == "******word"

    def test_no_sensitive_fields(self):
        data = {"host": "tun.example.com", "port": 8080}
        assert sanitize_log_data(data) == data


class TestOutput:
    """Test user-facing output helpers."""

    def test_print_error_goes_to_stderr(self, capsys):
        print_error("Access token is required.")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Access token is required." in captured.err

    def test_print_info_and_success(self, capsys):
        print_info("Downloading OpenSSH client...")
        print_success("done")
        captured = capsys.readouterr()
        assert "Downloading OpenSSH client..." in captured.out
        assert "done" in captured.out

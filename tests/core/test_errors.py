"""Tests for error types and codes."""

import pytest

from convexgen.core.errors import (
    ConfigError,
    ConvexGenError,
    ErrorCode,
    GenerateError,
    ParseError,
)


class TestErrorCode:
    """Error code value tests."""

    @pytest.mark.parametrize(
        ("code", "expected_range"),
        [
            (ErrorCode.CONFIG_PARSE_ERROR, 2000),
            (ErrorCode.CONFIG_FILE_NOT_FOUND, 2000),
            (ErrorCode.PARSE_FILE_UNREADABLE, 3000),
            (ErrorCode.GENERATE_OUTPUT_FAILED, 4000),
        ],
    )
    def test_given_error_code_when_checked_then_in_correct_range(
        self, code: ErrorCode, expected_range: int
    ) -> None:
        """Error codes fall within their designated numeric range."""
        assert expected_range <= code.value < expected_range + 1000


class TestConvexGenError:
    """Base error behavior tests."""

    def test_given_error_when_to_dict_then_serializes_all_fields(self) -> None:
        """Error serializes to dict with all required fields."""
        # Given
        error = ConvexGenError(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message="Test message",
            retryable=True,
            details={"key": "value"},
        )

        # When
        result = error.to_dict()

        # Then
        assert result == {
            "code": 2001,
            "error": "CONFIG_PARSE_ERROR",
            "message": "Test message",
            "retryable": True,
            "details": {"key": "value"},
        }

    def test_str_includes_code_and_name(self) -> None:
        error = ParseError.file_unreadable("a.ts", "denied")

        assert str(error) == "[3001] PARSE_FILE_UNREADABLE: Cannot read a.ts: denied"
        assert error.details == {"path": "a.ts", "reason": "denied"}

    def test_errors_are_exceptions(self) -> None:
        with pytest.raises(ConvexGenError):
            raise ParseError.file_unreadable("a.ts", "denied")


class TestConstructors:
    """Classmethod constructors."""

    def test_config_errors(self) -> None:
        assert ConfigError.parse_error("c.json", "bad").code is ErrorCode.CONFIG_PARSE_ERROR
        assert ConfigError.file_not_found("c.json").details == {"path": "c.json"}

        missing = ConfigError.missing_required("org", 'e.g. "@acme"')
        assert missing.message == 'Missing required config field: org (e.g. "@acme")'

        invalid = ConfigError.invalid_value("convex.path", "/x", "does not exist")
        assert invalid.details == {
            "field": "convex.path",
            "value": "/x",
            "reason": "does not exist",
        }

    def test_generate_error(self) -> None:
        error = GenerateError.output_failed("/out/a.ts", "write", "disk full")

        assert error.message == "Failed to write /out/a.ts: disk full"
        assert not error.retryable

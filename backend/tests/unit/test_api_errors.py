"""Tests for API error classes."""

from career_pathway.core.errors import (
    APIError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from career_pathway.core.responses import DataResponse, ErrorDetail, ErrorResponse


class TestAPIError:
    """Tests for the APIError base class."""

    def test_carries_code_message_status(self):
        """APIError stores its envelope fields."""
        error = APIError(code="CUSTOM", message="Something", status_code=418)

        assert (error.code, error.message, error.status_code) == (
            "CUSTOM",
            "Something",
            418,
        )
        assert error.details is None
        assert str(error) == "Something"

    def test_default_status_is_500(self):
        """Unspecified status defaults to 500."""
        assert APIError(code="X", message="y").status_code == 500


class TestValidationError:
    """Tests for ValidationError."""

    def test_is_400_with_details(self):
        """ValidationError maps to 400 and keeps details."""
        details = [{"question_id": "transport", "allowed": ["car"]}]
        error = ValidationError("Invalid answer", details=details)

        assert error.status_code == 400
        assert error.code == "VALIDATION_ERROR"
        assert error.details == details


class TestNotFoundError:
    """Tests for NotFoundError."""

    def test_message_includes_id(self):
        """The message names the resource and id."""
        error = NotFoundError("Question", "shoe_size")

        assert error.status_code == 404
        assert error.code == "NOT_FOUND"
        assert error.message == "Question with id 'shoe_size' not found"

    def test_message_without_id(self):
        """Without an id the message names only the resource."""
        assert NotFoundError("Question").message == "Question not found"


class TestInternalError:
    """Tests for InternalError."""

    def test_generic_message(self):
        """InternalError defaults to a generic message."""
        error = InternalError()

        assert error.status_code == 500
        assert error.code == "INTERNAL_ERROR"
        assert error.message == "An unexpected error occurred"


class TestResponseEnvelopes:
    """Tests for the data and error envelope models."""

    def test_data_envelope(self):
        """Success bodies serialize under a data key."""
        response = DataResponse(data={"id": "edu", "type": "single"})

        assert response.model_dump() == {"data": {"id": "edu", "type": "single"}}

    def test_error_envelope(self):
        """Error bodies serialize under an error key with optional details."""
        response = ErrorResponse(
            error=ErrorDetail(code="NOT_FOUND", message="Question not found")
        )

        assert response.model_dump() == {
            "error": {
                "code": "NOT_FOUND",
                "message": "Question not found",
                "details": None,
            }
        }

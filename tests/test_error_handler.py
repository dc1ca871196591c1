"""Tests for error categorization and handling."""

import pytest
from sqlalchemy.exc import OperationalError

from core.error_handler import (
    ErrorCategory,
    ErrorSeverity,
    ErrorHandler,
    NotFoundError,
    PasswordMismatchError,
    ValidationError,
    ImageStorageError,
    get_error_handler,
)


@pytest.fixture
def handler():
    """Create a fresh ErrorHandler."""
    return ErrorHandler()


class TestErrorHandler:
    """Test suite for ErrorHandler."""

    def test_not_found(self, handler):
        """Test lookup failures are informational and keep their message."""
        context = handler.handle_error(NotFoundError("Article 3 not found"), "read article",
                                       article_id=3)

        assert context.category == ErrorCategory.NOT_FOUND
        assert context.severity == ErrorSeverity.INFO
        assert context.user_message == "Article 3 not found"
        assert context.article_id == 3

    def test_password_mismatch(self, handler):
        """Test authorization failures are warnings with a generic message."""
        context = handler.handle_error(PasswordMismatchError("article 1"), "update article")

        assert context.category == ErrorCategory.AUTHORIZATION
        assert context.severity == ErrorSeverity.WARNING
        assert context.user_message == "The password does not match."

    def test_validation(self, handler):
        """Test validation failures."""
        context = handler.handle_error(ValidationError("Article title is required"), "create")

        assert context.category == ErrorCategory.VALIDATION
        assert context.user_message == "Article title is required"

    def test_image_storage(self, handler):
        """Test image storage failures."""
        context = handler.handle_error(ImageStorageError("disk"), "add image")

        assert context.category == ErrorCategory.STORAGE
        assert context.severity == ErrorSeverity.ERROR

    def test_foreign_database_error(self, handler):
        """Test that SQLAlchemy errors are categorized as storage."""
        error = OperationalError("SELECT 1", {}, Exception("database is locked"))
        context = handler.handle_error(error, "list boards")

        assert context.category == ErrorCategory.STORAGE
        assert context.severity == ErrorSeverity.CRITICAL

    def test_unknown_error(self, handler):
        """Test that unrelated errors fall back to unknown."""
        context = handler.handle_error(RuntimeError("boom"), "render")

        assert context.category == ErrorCategory.UNKNOWN
        assert context.user_message == "An error occurred during render. Please try again."

    def test_error_count(self, handler):
        """Test that handled errors are counted."""
        handler.handle_error(RuntimeError("a"), "x")
        handler.handle_error(RuntimeError("b"), "y")
        assert handler.get_error_count() == 2

        handler.reset_error_count()
        assert handler.get_error_count() == 0

    def test_global_handler(self):
        """Test that the global handler is created once and reused."""
        assert get_error_handler() is get_error_handler()

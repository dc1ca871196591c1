"""
Error Handler for the community bulletin board.

Provides centralized error handling with categorization, logging, and user-friendly messages.
Handles lookup, authorization, validation and storage errors with appropriate responses.
"""

import logging
import traceback
from enum import Enum
from typing import Optional
from dataclasses import dataclass


logger = logging.getLogger(__name__)


class ErrorCategory(Enum):
    """Error categories for classification."""
    NOT_FOUND = "not_found"
    AUTHORIZATION = "authorization"
    VALIDATION = "validation"
    STORAGE = "storage"
    UNKNOWN = "unknown"


class ErrorSeverity(Enum):
    """Error severity levels."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


@dataclass
class ErrorContext:
    """Context information for an error."""
    category: ErrorCategory
    severity: ErrorSeverity
    operation: str
    user_message: str
    technical_details: str
    board_id: Optional[int] = None
    article_id: Optional[int] = None


# Custom Exception Classes

class CommunityError(Exception):
    """Base exception for bulletin board errors."""

    def __init__(self, message: str, category: ErrorCategory = ErrorCategory.UNKNOWN):
        super().__init__(message)
        self.category = category


class NotFoundError(CommunityError):
    """A board, article, comment or image lookup by id failed."""

    def __init__(self, message: str):
        super().__init__(message, ErrorCategory.NOT_FOUND)


class PasswordMismatchError(CommunityError):
    """The supplied password does not match the stored one."""

    def __init__(self, message: str):
        super().__init__(message, ErrorCategory.AUTHORIZATION)


class ValidationError(CommunityError):
    """Data validation errors."""

    def __init__(self, message: str):
        super().__init__(message, ErrorCategory.VALIDATION)


class StorageError(CommunityError):
    """Storage operation errors."""

    def __init__(self, message: str):
        super().__init__(message, ErrorCategory.STORAGE)


class ImageStorageError(StorageError):
    """Writing or removing an image file failed."""
    pass


class ErrorHandler:
    """
    Global error handler for the bulletin board.

    Provides centralized error handling with:
    - Error categorization (not found, authorization, validation, storage)
    - Severity classification
    - User-friendly error messages
    - Detailed logging for debugging

    Usage:
        error_handler = get_error_handler()

        try:
            article_manager.read_article(article_id)
        except Exception as e:
            context = error_handler.handle_error(e, "read article", article_id=article_id)
    """

    def __init__(self):
        """Initialize error handler."""
        self._error_count = 0

    def handle_error(
        self,
        error: Exception,
        context: str,
        board_id: Optional[int] = None,
        article_id: Optional[int] = None
    ) -> ErrorContext:
        """
        Handle an error with appropriate categorization and response.

        Args:
            error: The exception that occurred
            context: Description of the operation that failed
            board_id: Optional board ID if error relates to a board
            article_id: Optional article ID if error relates to an article

        Returns:
            ErrorContext with categorized error information
        """
        self._error_count += 1

        if isinstance(error, CommunityError):
            category = error.category
        else:
            category = self._categorize_error(error)

        severity = self._determine_severity(error, category)
        user_message = self._generate_user_message(error, category, context)
        technical_details = self._get_technical_details(error)

        error_context = ErrorContext(
            category=category,
            severity=severity,
            operation=context,
            user_message=user_message,
            technical_details=technical_details,
            board_id=board_id,
            article_id=article_id
        )

        self._log_error(error_context)

        return error_context

    def _categorize_error(self, error: Exception) -> ErrorCategory:
        """
        Categorize a foreign error based on its type and message.

        Args:
            error: The exception to categorize

        Returns:
            ErrorCategory
        """
        error_type = type(error).__name__.lower()
        error_msg = str(error).lower()

        if any(keyword in error_type or keyword in error_msg for keyword in [
            'database', 'storage', 'disk', 'file', 'sqlite', 'integrity', 'operational'
        ]):
            return ErrorCategory.STORAGE

        if isinstance(error, (ValueError, KeyError)):
            return ErrorCategory.VALIDATION

        return ErrorCategory.UNKNOWN

    def _determine_severity(
        self,
        error: Exception,
        category: ErrorCategory
    ) -> ErrorSeverity:
        """
        Determine the severity of an error.

        Args:
            error: The exception
            category: Error category

        Returns:
            ErrorSeverity
        """
        # Caller mistakes, not system faults
        if category in (ErrorCategory.NOT_FOUND, ErrorCategory.VALIDATION):
            return ErrorSeverity.INFO

        if category == ErrorCategory.AUTHORIZATION:
            return ErrorSeverity.WARNING

        if category == ErrorCategory.STORAGE:
            if isinstance(error, ImageStorageError):
                return ErrorSeverity.ERROR
            return ErrorSeverity.CRITICAL

        return ErrorSeverity.ERROR

    def _generate_user_message(
        self,
        error: Exception,
        category: ErrorCategory,
        context: str
    ) -> str:
        """
        Generate a user-friendly error message.

        Args:
            error: The exception
            category: Error category
            context: Operation context

        Returns:
            User-friendly error message
        """
        if category == ErrorCategory.NOT_FOUND:
            return str(error) or "The requested item was not found."
        elif category == ErrorCategory.AUTHORIZATION:
            return "The password does not match."
        elif category == ErrorCategory.VALIDATION:
            return str(error) or "The submitted data is invalid."
        elif category == ErrorCategory.STORAGE:
            if isinstance(error, ImageStorageError):
                return "Failed to store the image. Please try again."
            return "Failed to save data. Please try again later."
        else:
            return f"An error occurred during {context}. Please try again."

    def _get_technical_details(self, error: Exception) -> str:
        """
        Get technical details for logging.

        Args:
            error: The exception

        Returns:
            Technical details string
        """
        details = [
            f"Exception Type: {type(error).__name__}",
            f"Message: {str(error)}",
            "Traceback:",
            traceback.format_exc()
        ]
        return "\n".join(details)

    def _log_error(self, error_context: ErrorContext):
        """
        Log error with appropriate level.

        Args:
            error_context: Error context information
        """
        log_message = (
            f"[{error_context.category.value.upper()}] "
            f"{error_context.operation}: {error_context.user_message}"
        )

        extra_info = []
        if error_context.board_id is not None:
            extra_info.append(f"board_id={error_context.board_id}")
        if error_context.article_id is not None:
            extra_info.append(f"article_id={error_context.article_id}")

        if extra_info:
            log_message += f" ({', '.join(extra_info)})"

        if error_context.severity == ErrorSeverity.CRITICAL:
            logger.critical(log_message)
            logger.critical(f"Technical details:\n{error_context.technical_details}")
        elif error_context.severity == ErrorSeverity.ERROR:
            logger.error(log_message)
            logger.debug(f"Technical details:\n{error_context.technical_details}")
        elif error_context.severity == ErrorSeverity.WARNING:
            logger.warning(log_message)
        else:
            logger.info(log_message)

    def get_error_count(self) -> int:
        """
        Get total number of errors handled.

        Returns:
            Error count
        """
        return self._error_count

    def reset_error_count(self):
        """Reset error counter."""
        self._error_count = 0


# Global error handler instance
_global_error_handler: Optional[ErrorHandler] = None


def get_error_handler() -> ErrorHandler:
    """
    Get the global error handler instance.

    Returns:
        Global ErrorHandler instance
    """
    global _global_error_handler
    if _global_error_handler is None:
        _global_error_handler = ErrorHandler()
    return _global_error_handler

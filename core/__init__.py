"""
Core module for the community bulletin board.

This module contains the core functionality including:
- Database operations
- Image file storage
- Error categorization and handling
"""

__version__ = "0.1.0"

from core.db_manager import DBManager
from core.image_store import ImageStore
from core.error_handler import (
    ErrorHandler,
    get_error_handler,
    CommunityError,
    NotFoundError,
    PasswordMismatchError,
    ValidationError,
    StorageError,
    ImageStorageError,
)

__all__ = [
    'DBManager',
    'ImageStore',
    'ErrorHandler',
    'get_error_handler',
    'CommunityError',
    'NotFoundError',
    'PasswordMismatchError',
    'ValidationError',
    'StorageError',
    'ImageStorageError',
]

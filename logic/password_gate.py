"""
Shared password check for article and comment mutations.

Passwords are plaintext shared secrets compared by exact string equality.
In legacy mode a mismatch makes the mutation a silent no-op; in strict mode
it raises PasswordMismatchError.
"""

import logging

from core.error_handler import PasswordMismatchError


logger = logging.getLogger(__name__)


def check_password(stored: str, supplied: str, strict: bool, target: str) -> bool:
    """
    Compare a supplied password against the stored one.

    Args:
        stored: Password saved with the article or comment
        supplied: Password given with the request
        strict: Raise on mismatch instead of returning False
        target: Description of the protected item, for logs and errors

    Returns:
        True if the mutation may proceed, False if it should be skipped

    Raises:
        PasswordMismatchError: On mismatch when strict is set
    """
    if stored == supplied:
        return True

    logger.warning(f"Password mismatch for {target}")
    if strict:
        raise PasswordMismatchError(f"Password does not match for {target}")
    return False

"""
Comment Manager for the community bulletin board.

Creates comments on articles and deletes them behind their password.
"""

import logging

from core.db_manager import DBManager
from core.error_handler import NotFoundError
from logic.password_gate import check_password
from models.database import Comment
from models.views import CommentView


logger = logging.getLogger(__name__)


class CommentManager:
    """Manages comment creation and deletion."""

    def __init__(self, db_manager: DBManager, strict_passwords: bool = False):
        """
        Initialize CommentManager.

        Args:
            db_manager: DBManager instance for database operations
            strict_passwords: Raise PasswordMismatchError on a wrong password
                instead of silently skipping the deletion
        """
        self.db = db_manager
        self.strict_passwords = strict_passwords

    def create_comment(self, article_id: int, content: str, password: str) -> CommentView:
        """
        Attach a new comment to an article.

        Args:
            article_id: Article identifier
            content: Comment text
            password: Plaintext password gating deletion

        Returns:
            CommentView of the created comment

        Raises:
            NotFoundError: If the article doesn't exist
        """
        article = self.db.get_article_by_id(article_id)
        if not article:
            raise NotFoundError(f"Article {article_id} not found")

        comment = Comment(
            article_id=article.id,
            content=content or "",
            password=password or ""
        )
        self.db.save_comment(comment)

        logger.info(f"Created comment {comment.id} on article {article_id}")
        return CommentView.from_entity(comment)

    def delete_comment(self, comment_id: int, password: str) -> bool:
        """
        Delete a comment if the password matches.

        Args:
            comment_id: Comment identifier
            password: Password supplied by the requester

        Returns:
            True if deleted, False if skipped on mismatch

        Raises:
            NotFoundError: If the comment doesn't exist
            PasswordMismatchError: On a wrong password in strict mode
        """
        comment = self.db.get_comment_by_id(comment_id)
        if not comment:
            raise NotFoundError(f"Comment {comment_id} not found")

        if not check_password(comment.password, password, self.strict_passwords,
                              f"comment {comment_id}"):
            return False

        self.db.delete_comment(comment_id)
        logger.info(f"Deleted comment {comment_id}")
        return True

"""
Application Logic Layer for the community bulletin board

This module provides the board, article and comment access components that
sit between the database manager and the web layer.
"""

from logic.board_manager import BoardManager
from logic.article_manager import ArticleManager
from logic.comment_manager import CommentManager

__all__ = [
    'BoardManager',
    'ArticleManager',
    'CommentManager',
]

"""
Article Manager for the community bulletin board.

Manages article creation, retrieval, update and deletion within boards,
previous/next navigation, hashtag lookup, keyword search and attached
images. Mutations are gated by the article's password.
"""

import re
import logging
from typing import List, Optional

from core.db_manager import DBManager
from core.error_handler import NotFoundError, ValidationError
from core.image_store import ImageStore
from logic.password_gate import check_password
from models.database import Article, ArticleImage
from models.views import ArticleView, ArticleImageView


logger = logging.getLogger(__name__)


# Board id meaning "every board" for navigation and search
ALL_BOARDS = 0

SEARCH_CRITERIA = ("title", "content")

HASHTAG_PATTERN = re.compile(r"#(\w+)")


def extract_hashtags(content: str) -> List[str]:
    """
    Collect the hashtags referenced in article content.

    Args:
        content: Article body

    Returns:
        Unique tag texts without the leading '#', in first-seen order
    """
    tags = []
    for tag in HASHTAG_PATTERN.findall(content or ""):
        if tag not in tags:
            tags.append(tag)
    return tags


class ArticleManager:
    """
    Manages article operations.

    Responsibilities:
    - Create, read, update and delete articles scoped to a board
    - Previous/next navigation in insertion order
    - Hashtag lookup and title/content search
    - Add and remove article images
    """

    def __init__(
        self,
        db_manager: DBManager,
        image_store: ImageStore,
        strict_passwords: bool = False
    ):
        """
        Initialize ArticleManager.

        Args:
            db_manager: DBManager instance for database operations
            image_store: ImageStore instance for uploaded image files
            strict_passwords: Raise PasswordMismatchError on a wrong password
                instead of silently skipping the mutation
        """
        self.db = db_manager
        self.images = image_store
        self.strict_passwords = strict_passwords

    def create_article(self, board_id: int, title: str, content: str, password: str) -> ArticleView:
        """
        Create a new article in a board.

        Hashtags referenced in the content are associated with the article.

        Args:
            board_id: Board identifier where the article will be created
            title: Article title
            content: Article body
            password: Plaintext password gating later edits and deletion

        Returns:
            ArticleView of the created article, including its new id

        Raises:
            NotFoundError: If the board doesn't exist
        """
        board = self.db.get_board_by_id(board_id)
        if not board:
            raise NotFoundError(f"Board {board_id} not found")

        article = Article(
            board_id=board.id,
            title=title or "",
            content=content or "",
            password=password or ""
        )
        tags = extract_hashtags(article.content)
        self.db.save_article(article, tags)

        logger.info(f"Created article '{title}' with ID {article.id} in board {board_id}")

        return self.read_article(article.id)

    def get_all_articles(self) -> List[ArticleView]:
        """
        Retrieve every article across all boards.

        Returns:
            List of ArticleView objects in insertion order
        """
        return [ArticleView.from_entity(a) for a in self.db.get_all_articles()]

    def read_article(self, article_id: int) -> ArticleView:
        """
        Retrieve one article with its board, images, tags and comments.

        Args:
            article_id: Article identifier

        Returns:
            ArticleView

        Raises:
            NotFoundError: If the article doesn't exist
        """
        return ArticleView.from_entity(self._get_article(article_id))

    def update_article(self, article_id: int, title: str, content: str, password: str) -> ArticleView:
        """
        Overwrite an article's title and content if the password matches.

        Hashtags are re-derived from the new content.

        Args:
            article_id: Article identifier
            title: New title
            content: New content
            password: Password supplied by the editor

        Returns:
            ArticleView of the article after the call

        Raises:
            NotFoundError: If the article doesn't exist
            PasswordMismatchError: On a wrong password in strict mode
        """
        article = self._get_article(article_id)

        if check_password(article.password, password, self.strict_passwords,
                          f"article {article_id}"):
            content = content or ""
            self.db.update_article(article_id, title or "", content, extract_hashtags(content))
            logger.info(f"Updated article {article_id}")

        return self.read_article(article_id)

    def delete_article(self, article_id: int, password: str) -> bool:
        """
        Delete an article with its comments and images if the password matches.

        Args:
            article_id: Article identifier
            password: Password supplied by the requester

        Returns:
            True if the article was deleted, False if skipped on mismatch

        Raises:
            NotFoundError: If the article doesn't exist
            PasswordMismatchError: On a wrong password in strict mode
        """
        article = self._get_article(article_id)

        if not check_password(article.password, password, self.strict_passwords,
                              f"article {article_id}"):
            return False

        links = [image.link for image in article.images]
        self.db.delete_article(article_id)
        for link in links:
            self.images.delete_image(link)

        logger.info(f"Deleted article {article_id} with {len(article.comments)} comments "
                    f"and {len(links)} images")
        return True

    def get_previous(self, board_id: int, article_id: int) -> Optional[ArticleView]:
        """
        Retrieve the article inserted immediately before the given one.

        Args:
            board_id: Board to navigate within, or ALL_BOARDS
            article_id: Reference article identifier

        Returns:
            ArticleView, or None at the first article
        """
        article = self.db.get_previous_article(article_id, self._board_scope(board_id))
        return ArticleView.from_entity(article) if article else None

    def get_next(self, board_id: int, article_id: int) -> Optional[ArticleView]:
        """
        Retrieve the article inserted immediately after the given one.

        Args:
            board_id: Board to navigate within, or ALL_BOARDS
            article_id: Reference article identifier

        Returns:
            ArticleView, or None at the last article
        """
        article = self.db.get_next_article(article_id, self._board_scope(board_id))
        return ArticleView.from_entity(article) if article else None

    def get_articles_by_tag(self, tag: str) -> List[ArticleView]:
        """
        Retrieve all articles associated with a hashtag.

        Args:
            tag: Tag text, with or without the leading '#'

        Returns:
            List of ArticleView objects in insertion order; empty if the tag is unknown
        """
        hashtag = self.db.get_hashtag((tag or "").lstrip("#"))
        if not hashtag:
            return []
        return [ArticleView.from_entity(a) for a in hashtag.articles]

    def search_articles(self, board_id: int, criteria: str, query: str) -> List[ArticleView]:
        """
        Retrieve articles whose title or content contains the query.

        Matching is a case-sensitive substring test.

        Args:
            board_id: Board to search within, or ALL_BOARDS
            criteria: "title" or "content"
            query: Substring to look for

        Returns:
            List of matching ArticleView objects in insertion order

        Raises:
            ValidationError: If criteria is not supported
            NotFoundError: If a specific board doesn't exist
        """
        if criteria not in SEARCH_CRITERIA:
            raise ValidationError(
                f"Search criteria must be one of {', '.join(SEARCH_CRITERIA)}"
            )

        scope = self._board_scope(board_id)
        if scope is not None and not self.db.get_board_by_id(scope):
            raise NotFoundError(f"Board {board_id} not found")

        articles = self.db.search_articles(criteria, query or "", scope)
        logger.debug(f"Search {criteria}~'{query}' in board {board_id}: {len(articles)} hits")
        return [ArticleView.from_entity(a) for a in articles]

    def add_image(self, article_id: int, data: bytes, filename: str, password: str) -> Optional[ArticleImageView]:
        """
        Store an uploaded image and link it to an article if the password matches.

        Args:
            article_id: Article identifier
            data: Raw image bytes
            filename: Original upload filename
            password: Password supplied by the uploader

        Returns:
            ArticleImageView of the stored image, or None if skipped on mismatch

        Raises:
            NotFoundError: If the article doesn't exist
            PasswordMismatchError: On a wrong password in strict mode
            ValidationError: If the image is rejected by the image store
        """
        article = self._get_article(article_id)

        if not check_password(article.password, password, self.strict_passwords,
                              f"article {article_id}"):
            return None

        link = self.images.save_image(data, filename, article_id)
        image = ArticleImage(article_id=article_id, link=link)
        try:
            self.db.save_article_image(image)
        except Exception:
            self.images.delete_image(link)
            raise

        logger.info(f"Added image {image.id} to article {article_id}")
        return ArticleImageView.from_entity(image)

    def delete_image(self, article_id: int, image_id: int, password: str) -> bool:
        """
        Remove an image from an article if the article's password matches.

        Args:
            article_id: Article identifier
            image_id: Image identifier
            password: Password supplied by the requester

        Returns:
            True if the image was deleted, False if skipped on mismatch

        Raises:
            NotFoundError: If the article or image doesn't exist, or the
                image belongs to another article
            PasswordMismatchError: On a wrong password in strict mode
        """
        article = self._get_article(article_id)

        image = self.db.get_article_image_by_id(image_id)
        if not image or image.article_id != article.id:
            raise NotFoundError(f"Image {image_id} not found in article {article_id}")

        if not check_password(article.password, password, self.strict_passwords,
                              f"article {article_id}"):
            return False

        self.db.delete_article_image(image_id)
        self.images.delete_image(image.link)

        logger.info(f"Deleted image {image_id} from article {article_id}")
        return True

    def _get_article(self, article_id: int) -> Article:
        article = self.db.get_article_by_id(article_id)
        if not article:
            raise NotFoundError(f"Article {article_id} not found")
        return article

    @staticmethod
    def _board_scope(board_id: int) -> Optional[int]:
        if board_id is None or board_id == ALL_BOARDS:
            return None
        return board_id

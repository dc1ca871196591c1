"""
Database manager for the community bulletin board.

This module provides the DBManager class which handles all database operations
including initialization, CRUD operations, and transaction management.
"""

from pathlib import Path
from typing import List, Optional
from contextlib import contextmanager
from sqlalchemy import create_engine, event, func
from sqlalchemy.orm import sessionmaker, Session, joinedload, selectinload

from models.database import (
    Base,
    Board,
    Article,
    Comment,
    ArticleImage,
    HashTag,
)


def _article_load_options():
    """Loader options that populate everything an article view reads."""
    return (
        joinedload(Article.board),
        selectinload(Article.images),
        selectinload(Article.hashtags),
        selectinload(Article.comments),
    )


class DBManager:
    """
    Manages database operations for the bulletin board.

    Provides methods for initializing the database, saving and retrieving
    data, and managing transactions with automatic rollback on errors.
    Every returned entity is detached from its session with the
    relationships its view needs already loaded.
    """

    def __init__(self, db_path: Path):
        """
        Initialize the database manager.

        Args:
            db_path: Path to the SQLite database file
        """
        self.db_path = db_path
        self.engine = None
        self.SessionLocal = None

    def initialize_database(self):
        """
        Initialize the database by creating the schema if it doesn't exist.

        Creates all tables defined in the models and sets up the session factory.
        """
        # Ensure parent directory exists
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        db_url = f"sqlite:///{self.db_path}"
        self.engine = create_engine(
            db_url,
            echo=False,
            connect_args={"check_same_thread": False}
        )

        # Enable foreign key constraints for SQLite
        @event.listens_for(self.engine, "connect")
        def set_sqlite_pragma(dbapi_conn, connection_record):
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        Base.metadata.create_all(self.engine)

        # expire_on_commit=False keeps detached instances readable
        self.SessionLocal = sessionmaker(bind=self.engine, expire_on_commit=False)

    @contextmanager
    def get_session(self) -> Session:
        """
        Context manager for database sessions with automatic rollback on error.

        Yields:
            Session: SQLAlchemy session object

        Example:
            with db_manager.get_session() as session:
                session.add(board)
        """
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    # Board operations

    def save_board(self, board: Board) -> None:
        """
        Save a board to the database.

        Args:
            board: Board object to save

        Raises:
            IntegrityError: If a board with the same name already exists
        """
        with self.get_session() as session:
            session.add(board)

    def board_exists_by_name(self, name: str) -> bool:
        """Return True if a board with exactly this name exists."""
        with self.get_session() as session:
            return session.query(Board.id).filter(Board.name == name).first() is not None

    def get_all_boards(self) -> List[Board]:
        """
        Retrieve all boards in insertion order.

        Returns:
            List of Board objects (articles not loaded)
        """
        with self.get_session() as session:
            boards = session.query(Board).order_by(Board.id.asc()).all()
            session.expunge_all()
            return boards

    def get_board_by_id(self, board_id: int, with_articles: bool = False) -> Optional[Board]:
        """
        Retrieve a board by its ID.

        Args:
            board_id: Board identifier
            with_articles: Also load the board's articles and their children

        Returns:
            Board object if found, None otherwise
        """
        with self.get_session() as session:
            query = session.query(Board)
            if with_articles:
                query = query.options(
                    selectinload(Board.articles).options(*_article_load_options())
                )
            board = query.filter(Board.id == board_id).first()
            session.expunge_all()
            return board

    # Article operations

    def save_article(self, article: Article, tags: Optional[List[str]] = None) -> None:
        """
        Save a new article and associate it with the given hashtags.

        Missing hashtags are created; existing ones are reused. The
        article's generated ID is available on the instance afterwards.

        Args:
            article: Article object to save
            tags: Tag texts to associate with the article
        """
        with self.get_session() as session:
            article.hashtags = self._resolve_hashtags(session, tags or [])
            session.add(article)
            session.flush()
            session.expunge_all()

    def update_article(self, article_id: int, title: str, content: str,
                       tags: Optional[List[str]] = None) -> None:
        """
        Overwrite an article's title, content and hashtags.

        Args:
            article_id: Article identifier
            title: New title
            content: New content
            tags: New tag texts, replacing the previous associations
        """
        with self.get_session() as session:
            article = session.query(Article).filter(Article.id == article_id).first()
            if article is None:
                return
            article.title = title
            article.content = content
            article.hashtags = self._resolve_hashtags(session, tags or [])

    def delete_article(self, article_id: int) -> None:
        """
        Delete an article with its comments, images and tag associations.

        Args:
            article_id: Article identifier
        """
        with self.get_session() as session:
            article = session.query(Article).filter(Article.id == article_id).first()
            if article:
                session.delete(article)

    def get_article_by_id(self, article_id: int) -> Optional[Article]:
        """
        Retrieve an article by its ID.

        Args:
            article_id: Article identifier

        Returns:
            Article object if found, None otherwise
        """
        with self.get_session() as session:
            article = session.query(Article).options(
                *_article_load_options()
            ).filter(Article.id == article_id).first()
            session.expunge_all()
            return article

    def get_all_articles(self) -> List[Article]:
        """
        Retrieve every article across all boards.

        Returns:
            List of Article objects in insertion order
        """
        with self.get_session() as session:
            articles = session.query(Article).options(
                *_article_load_options()
            ).order_by(Article.id.asc()).all()
            session.expunge_all()
            return articles

    def get_previous_article(self, article_id: int, board_id: Optional[int] = None) -> Optional[Article]:
        """
        Retrieve the article inserted immediately before the given one.

        Args:
            article_id: Reference article identifier
            board_id: Restrict to this board; None means all boards

        Returns:
            Article object, or None at the start of the sequence
        """
        with self.get_session() as session:
            query = session.query(Article).options(*_article_load_options())
            if board_id is not None:
                query = query.filter(Article.board_id == board_id)
            article = query.filter(
                Article.id < article_id
            ).order_by(Article.id.desc()).first()
            session.expunge_all()
            return article

    def get_next_article(self, article_id: int, board_id: Optional[int] = None) -> Optional[Article]:
        """
        Retrieve the article inserted immediately after the given one.

        Args:
            article_id: Reference article identifier
            board_id: Restrict to this board; None means all boards

        Returns:
            Article object, or None at the end of the sequence
        """
        with self.get_session() as session:
            query = session.query(Article).options(*_article_load_options())
            if board_id is not None:
                query = query.filter(Article.board_id == board_id)
            article = query.filter(
                Article.id > article_id
            ).order_by(Article.id.asc()).first()
            session.expunge_all()
            return article

    def search_articles(self, field: str, query_text: str,
                        board_id: Optional[int] = None) -> List[Article]:
        """
        Retrieve articles whose title or content contains a substring.

        Matching is case-sensitive (``instr`` rather than ``LIKE``).

        Args:
            field: Either "title" or "content"
            query_text: Substring to look for
            board_id: Restrict to this board; None means all boards

        Returns:
            List of matching Article objects in insertion order
        """
        column = {"title": Article.title, "content": Article.content}[field]
        with self.get_session() as session:
            query = session.query(Article).options(*_article_load_options())
            if board_id is not None:
                query = query.filter(Article.board_id == board_id)
            articles = query.filter(
                func.instr(column, query_text) > 0
            ).order_by(Article.id.asc()).all()
            session.expunge_all()
            return articles

    # Hashtag operations

    def get_hashtag(self, tag: str) -> Optional[HashTag]:
        """
        Retrieve a hashtag with its articles loaded.

        Args:
            tag: Exact tag text

        Returns:
            HashTag object if found, None otherwise
        """
        with self.get_session() as session:
            hashtag = session.query(HashTag).options(
                selectinload(HashTag.articles).options(*_article_load_options())
            ).filter(HashTag.tag == tag).first()
            session.expunge_all()
            return hashtag

    def _resolve_hashtags(self, session: Session, tags: List[str]) -> List[HashTag]:
        """Return HashTag rows for the given texts, creating missing ones."""
        hashtags = []
        for tag in tags:
            hashtag = session.query(HashTag).filter(HashTag.tag == tag).first()
            if hashtag is None:
                hashtag = HashTag(tag=tag)
                session.add(hashtag)
            hashtags.append(hashtag)
        return hashtags

    # Comment operations

    def save_comment(self, comment: Comment) -> None:
        """
        Save a comment to the database.

        Args:
            comment: Comment object to save

        Raises:
            IntegrityError: If the referenced article does not exist
        """
        with self.get_session() as session:
            session.add(comment)
            session.flush()
            session.expunge_all()

    def get_comment_by_id(self, comment_id: int) -> Optional[Comment]:
        """
        Retrieve a comment by its ID.

        Args:
            comment_id: Comment identifier

        Returns:
            Comment object if found, None otherwise
        """
        with self.get_session() as session:
            comment = session.query(Comment).filter(Comment.id == comment_id).first()
            if comment:
                session.expunge(comment)
            return comment

    def delete_comment(self, comment_id: int) -> None:
        """
        Delete a comment by its ID.

        Args:
            comment_id: Comment identifier
        """
        with self.get_session() as session:
            comment = session.query(Comment).filter(Comment.id == comment_id).first()
            if comment:
                session.delete(comment)

    # Image operations

    def save_article_image(self, image: ArticleImage) -> None:
        """
        Save an article image record to the database.

        Args:
            image: ArticleImage object to save

        Raises:
            IntegrityError: If the referenced article does not exist
        """
        with self.get_session() as session:
            session.add(image)
            session.flush()
            session.expunge_all()

    def get_article_image_by_id(self, image_id: int) -> Optional[ArticleImage]:
        """
        Retrieve an article image by its ID.

        Args:
            image_id: Image identifier

        Returns:
            ArticleImage object if found, None otherwise
        """
        with self.get_session() as session:
            image = session.query(ArticleImage).filter(ArticleImage.id == image_id).first()
            if image:
                session.expunge(image)
            return image

    def delete_article_image(self, image_id: int) -> None:
        """
        Delete an article image record by its ID.

        Args:
            image_id: Image identifier
        """
        with self.get_session() as session:
            image = session.query(ArticleImage).filter(ArticleImage.id == image_id).first()
            if image:
                session.delete(image)

"""
Unit tests for database operations.

Tests CRUD operations for all models, foreign key constraints,
cascade deletes and ordering.
"""

import pytest
from sqlalchemy.exc import IntegrityError

from core.db_manager import DBManager
from models.database import Board, Article, Comment, ArticleImage


@pytest.fixture
def db_manager(tmp_path):
    """Create a temporary database for testing."""
    db_path = tmp_path / "test.db"
    manager = DBManager(db_path)
    manager.initialize_database()
    return manager


@pytest.fixture
def board_id(db_manager):
    """Save a board and return its ID."""
    board = Board(name="Test Board")
    db_manager.save_board(board)
    return board.id


def make_article(db_manager, board_id, title="Title", content="Body", tags=None):
    article = Article(board_id=board_id, title=title, content=content, password="pw")
    db_manager.save_article(article, tags)
    return article.id


class TestBoardOperations:
    """Test CRUD operations for Board model."""

    def test_save_board(self, db_manager, board_id):
        """Test saving a board to the database."""
        retrieved = db_manager.get_board_by_id(board_id)
        assert retrieved is not None
        assert retrieved.name == "Test Board"

    def test_board_exists_by_name(self, db_manager, board_id):
        """Test exact-name existence check."""
        assert db_manager.board_exists_by_name("Test Board")
        assert not db_manager.board_exists_by_name("test board")

    def test_get_all_boards_in_insertion_order(self, db_manager):
        """Test retrieving all boards in insertion order."""
        db_manager.save_board(Board(name="Board 1"))
        db_manager.save_board(Board(name="Board 2"))

        boards = db_manager.get_all_boards()
        assert [b.name for b in boards] == ["Board 1", "Board 2"]

    def test_duplicate_board_name(self, db_manager, board_id):
        """Test that duplicate board names raise IntegrityError."""
        with pytest.raises(IntegrityError):
            db_manager.save_board(Board(name="Test Board"))

    def test_get_board_with_articles(self, db_manager, board_id):
        """Test loading a board together with its articles."""
        make_article(db_manager, board_id, title="First")
        make_article(db_manager, board_id, title="Second")

        board = db_manager.get_board_by_id(board_id, with_articles=True)
        assert [a.title for a in board.articles] == ["First", "Second"]
        assert board.articles[0].board.name == "Test Board"

    def test_get_missing_board(self, db_manager):
        """Test that an unknown board ID returns None."""
        assert db_manager.get_board_by_id(999) is None


class TestArticleOperations:
    """Test CRUD operations for Article model."""

    def test_save_article_assigns_id(self, db_manager, board_id):
        """Test that saving an article assigns an ID."""
        article_id = make_article(db_manager, board_id)
        assert isinstance(article_id, int)

        article = db_manager.get_article_by_id(article_id)
        assert article.title == "Title"
        assert article.board.name == "Test Board"
        assert article.images == []
        assert article.comments == []

    def test_article_requires_existing_board(self, db_manager):
        """Test foreign key enforcement on board_id."""
        with pytest.raises(IntegrityError):
            make_article(db_manager, 999)

    def test_hashtags_are_shared(self, db_manager, board_id):
        """Test that articles reuse existing hashtag rows."""
        first = make_article(db_manager, board_id, tags=["python", "flask"])
        second = make_article(db_manager, board_id, tags=["python"])

        hashtag = db_manager.get_hashtag("python")
        assert [a.id for a in hashtag.articles] == [first, second]
        assert db_manager.get_hashtag("rust") is None

    def test_update_article_replaces_tags(self, db_manager, board_id):
        """Test that updating an article overwrites fields and tags."""
        article_id = make_article(db_manager, board_id, tags=["old"])

        db_manager.update_article(article_id, "New", "New body", ["new"])

        article = db_manager.get_article_by_id(article_id)
        assert article.title == "New"
        assert article.content == "New body"
        assert [h.tag for h in article.hashtags] == ["new"]
        assert db_manager.get_hashtag("old").articles == []

    def test_delete_article_cascades(self, db_manager, board_id):
        """Test that deleting an article removes its comments and images."""
        article_id = make_article(db_manager, board_id, tags=["tag"])
        comment = Comment(article_id=article_id, content="hi", password="c")
        image = ArticleImage(article_id=article_id, link="article_images/1/a.png")
        db_manager.save_comment(comment)
        db_manager.save_article_image(image)

        db_manager.delete_article(article_id)

        assert db_manager.get_article_by_id(article_id) is None
        assert db_manager.get_comment_by_id(comment.id) is None
        assert db_manager.get_article_image_by_id(image.id) is None
        assert db_manager.get_hashtag("tag").articles == []

    def test_previous_and_next_within_board(self, db_manager, board_id):
        """Test neighbour lookup restricted to a board."""
        other = Board(name="Other")
        db_manager.save_board(other)

        a = make_article(db_manager, board_id, title="A")
        x = make_article(db_manager, other.id, title="X")
        b = make_article(db_manager, board_id, title="B")

        assert db_manager.get_previous_article(b, board_id).id == a
        assert db_manager.get_next_article(a, board_id).id == b
        assert db_manager.get_previous_article(a, board_id) is None
        assert db_manager.get_next_article(b, board_id) is None

        # Global order includes the other board
        assert db_manager.get_next_article(a).id == x
        assert db_manager.get_previous_article(b).id == x

    def test_search_is_case_sensitive(self, db_manager, board_id):
        """Test substring search by title and content."""
        make_article(db_manager, board_id, title="Hello foo", content="plain")
        make_article(db_manager, board_id, title="Hello Foo", content="has foo")

        assert [a.title for a in db_manager.search_articles("title", "foo")] == ["Hello foo"]
        assert [a.title for a in db_manager.search_articles("content", "foo")] == ["Hello Foo"]


class TestCommentOperations:
    """Test CRUD operations for Comment model."""

    def test_save_and_delete_comment(self, db_manager, board_id):
        """Test saving, reading and deleting a comment."""
        article_id = make_article(db_manager, board_id)
        comment = Comment(article_id=article_id, content="Nice", password="c")
        db_manager.save_comment(comment)

        retrieved = db_manager.get_comment_by_id(comment.id)
        assert retrieved.content == "Nice"
        assert retrieved.created_at is not None

        db_manager.delete_comment(comment.id)
        assert db_manager.get_comment_by_id(comment.id) is None

    def test_comment_requires_existing_article(self, db_manager):
        """Test foreign key enforcement on article_id."""
        with pytest.raises(IntegrityError):
            db_manager.save_comment(Comment(article_id=999, content="x", password="c"))


class TestTransactionRollback:
    """Test transaction rollback behavior."""

    def test_rollback_on_error(self, db_manager, board_id):
        """Test that a failing session leaves no partial writes."""
        with pytest.raises(RuntimeError):
            with db_manager.get_session() as session:
                session.add(Board(name="Rolled Back"))
                session.flush()
                raise RuntimeError("boom")

        assert not db_manager.board_exists_by_name("Rolled Back")

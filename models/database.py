"""
SQLAlchemy database models for the community bulletin board.

This module defines the Board, Article, Comment, ArticleImage and HashTag
models. Articles belong to exactly one board and own their comments and
images; hashtags are shared between articles through an association table.
"""

from datetime import datetime
from sqlalchemy import Column, String, Integer, DateTime, Text, ForeignKey, Table
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


article_hashtags = Table(
    'article_hashtags',
    Base.metadata,
    Column('article_id', Integer, ForeignKey('articles.id', ondelete='CASCADE'), primary_key=True),
    Column('hashtag_id', Integer, ForeignKey('hashtags.id', ondelete='CASCADE'), primary_key=True),
)


class Board(Base):
    """
    Represents a named category of articles.

    Boards are seeded at startup and never modified afterwards.
    """
    __tablename__ = 'boards'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False, unique=True)

    # Relationships
    articles = relationship(
        "Article",
        back_populates="board",
        order_by="Article.id",
    )

    def __repr__(self):
        return f"<Board(id={self.id}, name={self.name})>"


class Article(Base):
    """
    Represents a post within a board.

    The id doubles as the insertion order used for previous/next navigation.
    The password is a plaintext shared secret gating edits and deletion.
    """
    __tablename__ = 'articles'

    id = Column(Integer, primary_key=True, autoincrement=True)
    board_id = Column(Integer, ForeignKey('boards.id'), nullable=False)
    title = Column(String, nullable=False)
    content = Column(Text, nullable=False, default="")
    password = Column(String, nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    # Relationships
    board = relationship("Board", back_populates="articles")
    comments = relationship(
        "Comment",
        back_populates="article",
        cascade="all, delete-orphan",
        order_by="Comment.id",
    )
    images = relationship(
        "ArticleImage",
        back_populates="article",
        cascade="all, delete-orphan",
        order_by="ArticleImage.id",
    )
    hashtags = relationship(
        "HashTag",
        secondary=article_hashtags,
        back_populates="articles",
        order_by="HashTag.id",
    )

    def __repr__(self):
        return f"<Article(id={self.id}, title={self.title})>"


class Comment(Base):
    """Represents a password-gated reply attached to an article."""
    __tablename__ = 'comments'

    id = Column(Integer, primary_key=True, autoincrement=True)
    article_id = Column(Integer, ForeignKey('articles.id', ondelete='CASCADE'), nullable=False)
    content = Column(Text, nullable=False)
    password = Column(String, nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    article = relationship("Article", back_populates="comments")

    def __repr__(self):
        return f"<Comment(id={self.id}, article_id={self.article_id})>"


class ArticleImage(Base):
    """
    Represents an uploaded image linked to an article.

    ``link`` is the path of the stored file relative to the media directory.
    """
    __tablename__ = 'article_images'

    id = Column(Integer, primary_key=True, autoincrement=True)
    article_id = Column(Integer, ForeignKey('articles.id', ondelete='CASCADE'), nullable=False)
    link = Column(String, nullable=False)

    article = relationship("Article", back_populates="images")

    def __repr__(self):
        return f"<ArticleImage(id={self.id}, link={self.link})>"


class HashTag(Base):
    """Represents a unique keyword used for reverse article lookup."""
    __tablename__ = 'hashtags'

    id = Column(Integer, primary_key=True, autoincrement=True)
    tag = Column(String, nullable=False, unique=True)

    articles = relationship(
        "Article",
        secondary=article_hashtags,
        back_populates="hashtags",
        order_by="Article.id",
    )

    def __repr__(self):
        return f"<HashTag(id={self.id}, tag={self.tag})>"

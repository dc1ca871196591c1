"""
Flattened view objects returned by the logic layer.

Each view is a plain projection of an entity's fields. Entities passed to
``from_entity`` must have the relationships used here already loaded.
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import List, Optional

from models.database import Board, Article, Comment, ArticleImage


@dataclass
class ArticleImageView:
    id: int
    link: str

    @classmethod
    def from_entity(cls, image: ArticleImage) -> "ArticleImageView":
        return cls(id=image.id, link=image.link)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class CommentView:
    id: int
    article_id: int
    content: str
    created_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, comment: Comment) -> "CommentView":
        return cls(
            id=comment.id,
            article_id=comment.article_id,
            content=comment.content,
            created_at=comment.created_at,
        )

    def to_dict(self) -> dict:
        data = asdict(self)
        if self.created_at is not None:
            data['created_at'] = self.created_at.isoformat()
        return data


@dataclass
class ArticleView:
    """Article with its board reference, images, tags and comments."""
    id: int
    title: str
    content: str
    board_id: int
    board_name: str
    created_at: Optional[datetime] = None
    images: List[ArticleImageView] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    comments: List[CommentView] = field(default_factory=list)

    @classmethod
    def from_entity(cls, article: Article) -> "ArticleView":
        return cls(
            id=article.id,
            title=article.title,
            content=article.content,
            board_id=article.board_id,
            board_name=article.board.name,
            created_at=article.created_at,
            images=[ArticleImageView.from_entity(i) for i in article.images],
            tags=[h.tag for h in article.hashtags],
            comments=[CommentView.from_entity(c) for c in article.comments],
        )

    def to_dict(self) -> dict:
        data = asdict(self)
        if self.created_at is not None:
            data['created_at'] = self.created_at.isoformat()
        data['comments'] = [c.to_dict() for c in self.comments]
        return data


@dataclass
class BoardView:
    id: int
    name: str
    articles: List[ArticleView] = field(default_factory=list)

    @classmethod
    def from_entity(cls, board: Board, with_articles: bool = False) -> "BoardView":
        articles = []
        if with_articles:
            articles = [ArticleView.from_entity(a) for a in board.articles]
        return cls(id=board.id, name=board.name, articles=articles)

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'name': self.name,
            'articles': [a.to_dict() for a in self.articles],
        }

"""
Data models module for the community bulletin board.

This module contains SQLAlchemy ORM models for:
- Boards, Articles, Comments
- Article images and hashtags

and the flattened view objects projected from them.
"""

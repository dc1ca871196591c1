"""
Board Manager for the community bulletin board.

Seeds the default boards at startup and serves read-only board lookups.
"""

import logging
from typing import List, Sequence

from core.db_manager import DBManager
from core.error_handler import NotFoundError
from models.database import Board
from models.views import BoardView


logger = logging.getLogger(__name__)


DEFAULT_BOARD_NAMES = (
    "자유 게시판",
    "개발 게시판",
    "일상 게시판",
    "사건사고 게시판",
)


class BoardManager:
    """
    Manages board operations.

    Responsibilities:
    - Seed the fixed set of default boards, once per process start
    - List all boards
    - Read one board with its articles
    """

    def __init__(self, db_manager: DBManager, default_names: Sequence[str] = DEFAULT_BOARD_NAMES):
        """
        Initialize BoardManager.

        Args:
            db_manager: DBManager instance for database operations
            default_names: Names of the boards created by seed_default_boards
        """
        self.db = db_manager
        self.default_names = list(default_names)

    def seed_default_boards(self) -> int:
        """
        Create each default board that does not exist yet.

        Safe to run on every startup; existing boards are matched by exact
        name and never duplicated.

        Returns:
            Number of boards created
        """
        created = 0
        for name in self.default_names:
            if self.db.board_exists_by_name(name):
                continue
            self.db.save_board(Board(name=name))
            created += 1
            logger.info(f"Seeded board '{name}'")

        logger.debug(f"Board seeding finished, {created} created")
        return created

    def get_all_boards(self) -> List[BoardView]:
        """
        Retrieve all boards in insertion order.

        Returns:
            List of BoardView objects without articles
        """
        return [BoardView.from_entity(b) for b in self.db.get_all_boards()]

    def read_board(self, board_id: int) -> BoardView:
        """
        Retrieve one board with its articles in insertion order.

        Args:
            board_id: Board identifier

        Returns:
            BoardView with articles

        Raises:
            NotFoundError: If the board doesn't exist
        """
        board = self.db.get_board_by_id(board_id, with_articles=True)
        if not board:
            raise NotFoundError(f"Board {board_id} not found")
        return BoardView.from_entity(board, with_articles=True)

"""Community Board Application Entry Point.

Main entry point for the community bulletin board. It handles
configuration, logging, database initialization, default board seeding,
and launches the Flask HTTP server.
"""

import sys
import argparse
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from config.config_manager import ConfigManager
from core.db_manager import DBManager
from core.image_store import ImageStore
from logic.board_manager import BoardManager
from logic.article_manager import ArticleManager
from logic.comment_manager import CommentManager
from web import create_app


def setup_logging(log_level: str, log_path: Path, max_bytes: int = 10485760, backup_count: int = 5):
    """
    Configure application logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_path: Path to log file
        max_bytes: Size at which the log file is rotated
        backup_count: Number of rotated files to keep
    """
    log_path.parent.mkdir(parents=True, exist_ok=True)

    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            RotatingFileHandler(log_path, maxBytes=max_bytes,
                                backupCount=backup_count, encoding='utf-8'),
            logging.StreamHandler(sys.stdout)
        ]
    )

    logger = logging.getLogger(__name__)
    logger.info(f"Logging initialized at level {log_level}")
    logger.info(f"Log file: {log_path}")


def parse_arguments(argv=None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        description='Community Board - password-gated bulletin board server',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run normally
  python main.py

  # Listen on all interfaces, port 9000
  python main.py --host 0.0.0.0 --port 9000

  # Reject wrong passwords with an error instead of ignoring the change
  python main.py --strict-passwords

  # Specify custom config file
  python main.py --config /path/to/config.yaml
        """
    )

    parser.add_argument(
        '--config',
        type=str,
        default=None,
        metavar='PATH',
        help='Path to configuration file'
    )

    parser.add_argument(
        '--host',
        type=str,
        default=None,
        help='HTTP listen address (default: from config)'
    )

    parser.add_argument(
        '--port',
        type=int,
        default=None,
        help='HTTP listen port (default: from config or 8080)'
    )

    parser.add_argument(
        '--strict-passwords',
        action='store_true',
        help='Reject mismatched passwords with an error'
    )

    parser.add_argument(
        '--log-level',
        type=str,
        default=None,
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        help='Override logging level from config'
    )

    return parser.parse_args(argv)


def build_app(config_manager: ConfigManager):
    """
    Wire the database, managers and Flask app from configuration.

    Initializes the schema and seeds the default boards before returning.

    Args:
        config_manager: Loaded configuration

    Returns:
        Configured Flask app instance
    """
    logger = logging.getLogger(__name__)

    storage_config = config_manager.get_storage_config()
    security_config = config_manager.get_security_config()
    boards_config = config_manager.get_boards_config()
    web_config = config_manager.get_web_config()

    logger.info("Initializing database...")
    db_path = config_manager.expand_path(storage_config.db_path)
    db_manager = DBManager(db_path)
    db_manager.initialize_database()
    logger.info(f"Database initialized: {db_path}")

    image_store = ImageStore(
        config_manager.expand_path(storage_config.media_dir),
        storage_config.max_image_size
    )

    strict = security_config.strict_password_check
    board_manager = BoardManager(db_manager, boards_config.default_names)
    article_manager = ArticleManager(db_manager, image_store, strict_passwords=strict)
    comment_manager = CommentManager(db_manager, strict_passwords=strict)

    created = board_manager.seed_default_boards()
    logger.info(f"Default boards ready ({created} created)")
    if strict:
        logger.info("Strict password checking enabled")

    return create_app(
        board_manager,
        article_manager,
        comment_manager,
        test_config={"DEBUG": web_config.debug}
    )


def main(argv=None):
    """
    Main application entry point.

    Initializes all components and starts the HTTP server.
    """
    args = parse_arguments(argv)

    config_path = Path(args.config) if args.config else None
    config_manager = ConfigManager(config_path)

    if args.host:
        config_manager.set_config('web', 'host', args.host)
    if args.port:
        config_manager.set_config('web', 'port', args.port)
    if args.strict_passwords:
        config_manager.set_config('security', 'strict_password_check', True)

    logging_config = config_manager.get_logging_config()
    if args.log_level:
        logging_config.level = args.log_level

    setup_logging(
        logging_config.level,
        config_manager.expand_path(logging_config.log_path),
        logging_config.max_log_size,
        logging_config.backup_count
    )

    logger = logging.getLogger(__name__)
    logger.info("=" * 60)
    logger.info("Community Board Starting")
    logger.info("=" * 60)

    app = build_app(config_manager)

    web_config = config_manager.get_web_config()
    logger.info(f"Listening on http://{web_config.host}:{web_config.port}")
    app.run(host=web_config.host, port=web_config.port, debug=web_config.debug)

    logger.info("Application shutdown complete")


if __name__ == '__main__':
    main()

"""Flask application factory for the bulletin board HTTP interface."""

from flask import Flask

from web import routes


def create_app(board_manager, article_manager, comment_manager, *, test_config=None):
    """Create and configure the Flask application.

    :param board_manager: Board access used by the routes.
    :type board_manager: logic.board_manager.BoardManager
    :param article_manager: Article access used by the routes.
    :type article_manager: logic.article_manager.ArticleManager
    :param comment_manager: Comment access used by the routes.
    :type comment_manager: logic.comment_manager.CommentManager
    :param test_config: Optional config dictionary applied after app creation.
    :type test_config: dict | None
    :returns: Configured Flask app instance.
    :rtype: flask.Flask
    """
    app = Flask(__name__)
    # Board names are Korean; keep them readable in responses
    app.json.ensure_ascii = False
    if test_config:
        app.config.update(test_config)

    app.config["BOARD_MANAGER"] = board_manager
    app.config["ARTICLE_MANAGER"] = article_manager
    app.config["COMMENT_MANAGER"] = comment_manager

    app.register_blueprint(routes.bp)
    return app

"""Route handlers translating HTTP requests into board, article and comment operations."""

from flask import Blueprint, current_app, jsonify, redirect, request
from sqlalchemy.exc import SQLAlchemyError

from core.error_handler import ErrorCategory, CommunityError, ValidationError, get_error_handler
from logic.article_manager import ALL_BOARDS

bp = Blueprint('community', __name__)

_STATUS_BY_CATEGORY = {
    ErrorCategory.NOT_FOUND: 404,
    ErrorCategory.AUTHORIZATION: 403,
    ErrorCategory.VALIDATION: 400,
    ErrorCategory.STORAGE: 500,
    ErrorCategory.UNKNOWN: 500,
}


def _boards():
    return current_app.config["BOARD_MANAGER"]


def _articles():
    return current_app.config["ARTICLE_MANAGER"]


def _comments():
    return current_app.config["COMMENT_MANAGER"]


def _payload():
    """Return the request body as a mapping, accepting JSON or form data."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form


def _int_value(value, name, default=None):
    """Parse an integer request value.

    :raises ValidationError: when the value is missing without default or not an integer.
    """
    if value is None or value == "":
        if default is None:
            raise ValidationError(f"Missing parameter: {name}")
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Parameter {name} must be an integer")


def _str_value(data, name):
    """Read a text field from a request body, defaulting to an empty string.

    :raises ValidationError: when a JSON body carries a non-string value.
    """
    value = data.get(name)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(f"Parameter {name} must be a string")
    return value


def _view_or_none(view):
    return view.to_dict() if view is not None else None


@bp.app_errorhandler(CommunityError)
@bp.app_errorhandler(SQLAlchemyError)
def _handle_error(exc):
    context = get_error_handler().handle_error(exc, f"{request.method} {request.path}")
    status = _STATUS_BY_CATEGORY.get(context.category, 500)
    return jsonify({"ok": False, "error": context.user_message}), status


@bp.get("/")
def root():
    return redirect("/board")


@bp.get("/board")
def list_all_boards():
    """List every board with all articles, newest first."""
    articles = _articles().get_all_articles()
    return jsonify({
        "boards": [b.to_dict() for b in _boards().get_all_boards()],
        "selected": None,
        "articles": [a.to_dict() for a in reversed(articles)],
    })


@bp.get("/board/<int:board_id>")
def list_one_board(board_id):
    """List every board plus one selected board's articles, newest first."""
    board = _boards().read_board(board_id)
    return jsonify({
        "boards": [b.to_dict() for b in _boards().get_all_boards()],
        "selected": {"id": board.id, "name": board.name},
        "articles": [a.to_dict() for a in reversed(board.articles)],
    })


@bp.post("/article")
def create_article():
    data = _payload()
    article = _articles().create_article(
        _int_value(data.get("board-id"), "board-id"),
        _str_value(data, "title"),
        _str_value(data, "content"),
        _str_value(data, "password"),
    )
    response = jsonify({"ok": True, "article": article.to_dict()})
    response.status_code = 201
    response.headers["Location"] = f"/article/{article.id}"
    return response


@bp.get("/article/<int:article_id>")
def read_article(article_id):
    """Return an article with its neighbours in the requested board (0 for all)."""
    board_id = _int_value(request.args.get("board"), "board", ALL_BOARDS)
    article = _articles().read_article(article_id)
    return jsonify({
        "article": article.to_dict(),
        "board": board_id,
        "before": _view_or_none(_articles().get_previous(board_id, article_id)),
        "after": _view_or_none(_articles().get_next(board_id, article_id)),
    })


@bp.post("/article/<int:article_id>/update")
def update_article(article_id):
    data = _payload()
    article = _articles().update_article(
        article_id,
        _str_value(data, "title"),
        _str_value(data, "content"),
        _str_value(data, "password"),
    )
    return jsonify({"ok": True, "article": article.to_dict()})


@bp.post("/article/<int:article_id>/delete")
def delete_article(article_id):
    deleted = _articles().delete_article(article_id, _str_value(_payload(), "password"))
    return jsonify({"ok": True, "deleted": deleted})


@bp.get("/article/hashtag")
def by_tag():
    tag = request.args.get("tag", "")
    articles = _articles().get_articles_by_tag(tag)
    return jsonify({"tag": tag, "articles": [a.to_dict() for a in articles]})


@bp.get("/article/search")
def search():
    query = request.args.get("q", "")
    criteria = request.args.get("criteria", "")
    board_id = _int_value(request.args.get("board-id"), "board-id", ALL_BOARDS)

    articles = _articles().search_articles(board_id, criteria, query)
    board_name = None
    if board_id != ALL_BOARDS:
        board_name = _boards().read_board(board_id).name

    return jsonify({
        "query": query,
        "criteria": criteria,
        "boardId": board_id,
        "boardName": board_name,
        "articles": [a.to_dict() for a in articles],
    })


@bp.post("/article/<int:article_id>/image")
def add_image(article_id):
    upload = request.files.get("image")
    if upload is None:
        raise ValidationError("Missing image upload")

    image = _articles().add_image(
        article_id,
        upload.read(),
        upload.filename,
        _str_value(request.form, "password"),
    )
    return jsonify({"ok": True, "image": _view_or_none(image)})


@bp.post("/article/<int:article_id>/image/<int:image_id>/delete")
def delete_image(article_id, image_id):
    deleted = _articles().delete_image(article_id, image_id, _str_value(_payload(), "password"))
    return jsonify({"ok": True, "deleted": deleted})


@bp.post("/article/<int:article_id>/comment")
def create_comment(article_id):
    data = _payload()
    comment = _comments().create_comment(
        article_id,
        _str_value(data, "content"),
        _str_value(data, "password"),
    )
    return jsonify({"ok": True, "comment": comment.to_dict()}), 201


@bp.post("/comment/<int:comment_id>/delete")
def delete_comment(comment_id):
    deleted = _comments().delete_comment(comment_id, _str_value(_payload(), "password"))
    return jsonify({"ok": True, "deleted": deleted})

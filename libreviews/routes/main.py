"""lib.reviews - 首页路由."""

from flask import Blueprint, current_app

from libreviews.services.reviews import list_recent
from libreviews.types import RouteReturn
from libreviews.utils import render

main_bp = Blueprint("main", __name__)


def index() -> RouteReturn:
    """首页,列出最近的评论."""
    reviews = list_recent(current_app.config["RECENT_REVIEWS_LIMIT"])
    return render.template("index.html", title_key="welcome", reviews=reviews)


main_bp.add_url_rule("/", view_func=index, methods=["GET"])

"""lib.reviews - 评论路由.

创建、编辑与删除均交给 ReviewFormHandler 按 (动作, 方法) 分发.
"""

from flask import Blueprint, request
from flask_login import current_user

from libreviews.constants import FormAction
from libreviews.errors import ResourceUnavailableError
from libreviews.services.reviews import get_review
from libreviews.types import RouteReturn
from libreviews.utils import render
from libreviews.views.review_form_handler import ReviewFormHandler

reviews_bp = Blueprint("reviews", __name__)

REVIEW_TEMPLATE = "reviews/review.html"
REVIEW_NOT_FOUND_TITLE_KEY = "review not found"


def new_review() -> RouteReturn:
    """撰写评论."""
    return ReviewFormHandler(action=FormAction.CREATE.value, method=request.method).execute()


def show_review(review_id: str) -> RouteReturn:
    """评论详情页,不存在或已删除时返回 404."""
    try:
        review = get_review(review_id)
    except ResourceUnavailableError:
        return render.resource_not_found(title_key=REVIEW_NOT_FOUND_TITLE_KEY, resource_id=review_id)
    review.populate_user_info(current_user)
    return render.template(REVIEW_TEMPLATE, review=review)


def edit_review(review_id: str) -> RouteReturn:
    """编辑评论."""
    return ReviewFormHandler(action=FormAction.EDIT.value, method=request.method, resource_id=review_id).execute()


def delete_review(review_id: str) -> RouteReturn:
    """删除评论."""
    return ReviewFormHandler(action=FormAction.DELETE.value, method=request.method, resource_id=review_id).execute()


reviews_bp.add_url_rule("/new/review", view_func=new_review, methods=["GET", "POST"])
reviews_bp.add_url_rule("/review/<review_id>", view_func=show_review, methods=["GET"])
reviews_bp.add_url_rule("/review/<review_id>/edit", view_func=edit_review, methods=["GET", "POST"])
reviews_bp.add_url_rule("/review/<review_id>/delete", view_func=delete_review, methods=["GET", "POST"])

"""评论服务."""

from .review_service import create_review, delete_review, get_review, list_recent, update_review

__all__ = ["create_review", "delete_review", "get_review", "list_recent", "update_review"]

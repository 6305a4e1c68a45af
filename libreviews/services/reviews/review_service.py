"""评论读写 Service.

职责:
- 评论的查询、创建、更新与软删除
- 多语言字段只替换当前编辑语言
- 调用 session 执行 add/flush,不返回 Response、不 commit
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError

from libreviews import db
from libreviews.constants import UnavailableReason
from libreviews.errors import DatabaseError, ResourceUnavailableError
from libreviews.models.review import Review
from libreviews.utils.mlstring import merge
from libreviews.utils.structlog_config import log_info

if TYPE_CHECKING:
    from libreviews.models.user import User
    from libreviews.types import FormValues

MULTILINGUAL_FIELDS = ("title", "text", "html")


def get_review(review_id: str | None, *, include_deleted: bool = False) -> Review:
    """按 ID 获取评论.

    Args:
        review_id: 评论 ID.
        include_deleted: 是否返回已软删除的评论.

    Returns:
        Review: 评论对象.

    Raises:
        ResourceUnavailableError: 评论不存在,或已删除且 ``include_deleted`` 为 False.

    """
    if not review_id:
        raise ResourceUnavailableError(review_id, reason=UnavailableReason.NOT_FOUND)
    try:
        review = db.session.get(Review, review_id)
    except SQLAlchemyError as exc:
        raise DatabaseError("查询评论失败", extra={"exception": str(exc), "review_id": review_id}) from exc
    if review is None:
        raise ResourceUnavailableError(review_id, reason=UnavailableReason.NOT_FOUND)
    if review.rev_deleted and not include_deleted:
        raise ResourceUnavailableError(review_id, reason=UnavailableReason.DELETED)
    return review


def list_recent(limit: int) -> list[Review]:
    """按创建时间倒序列出未删除的评论."""
    return (
        Review.query.filter(Review.rev_deleted.is_(False))
        .order_by(Review.created_on.desc())
        .limit(limit)
        .all()
    )


def create_review(values: FormValues, user: User, language: str) -> Review:
    """根据解析后的表单值创建评论.

    Args:
        values: ``parse_submission`` 产出的表单值.
        user: 作者.
        language: 内容语言.

    Returns:
        Review: 已 flush 的新评论.

    """
    now = datetime.now(UTC)
    review = Review(
        url=values["url"],
        title=dict(values.get("title") or {}),
        text=dict(values.get("text") or {}),
        html=dict(values.get("html") or {}),
        star_rating=values["star_rating"],
        original_language=language,
        created_by_id=user.id,
        created_on=now,
        rev_date=now,
        rev_user_id=user.id,
    )
    try:
        db.session.add(review)
        db.session.flush()
    except SQLAlchemyError as exc:
        raise DatabaseError("创建评论失败", extra={"exception": str(exc)}) from exc

    log_info("评论已创建", module="reviews", review_id=review.id, user_id=user.id, language=language)
    return review


def update_review(review: Review, values: FormValues, language: str, *, user: User | None = None) -> Review:
    """更新评论,多语言字段只覆盖 ``language`` 对应的译文."""
    review.url = values.get("url", review.url)
    if "star_rating" in values:
        review.star_rating = values["star_rating"]
    for field_name in MULTILINGUAL_FIELDS:
        update = values.get(field_name)
        if isinstance(update, Mapping):
            setattr(review, field_name, merge(getattr(review, field_name), {language: update.get(language, "")}))
    review.rev_date = datetime.now(UTC)
    if user is not None:
        review.rev_user_id = user.id

    try:
        db.session.add(review)
        db.session.flush()
    except SQLAlchemyError as exc:
        raise DatabaseError("更新评论失败", extra={"exception": str(exc), "review_id": review.id}) from exc

    log_info("评论已更新", module="reviews", review_id=review.id, language=language)
    return review


def delete_review(review: Review, user: User) -> Review:
    """软删除评论,记录删除人与时间."""
    review.rev_deleted = True
    review.rev_user_id = user.id
    review.rev_date = datetime.now(UTC)
    try:
        db.session.add(review)
        db.session.flush()
    except SQLAlchemyError as exc:
        raise DatabaseError("删除评论失败", extra={"exception": str(exc), "review_id": review.id}) from exc

    log_info("评论已删除", module="reviews", review_id=review.id, user_id=user.id)
    return review


__all__ = ["create_review", "delete_review", "get_review", "list_recent", "update_review"]

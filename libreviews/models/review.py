"""lib.reviews - 评论模型."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any
from uuid import uuid4

from libreviews import db

if TYPE_CHECKING:
    from libreviews.models.user import User

MIN_STAR_RATING = 1
MAX_STAR_RATING = 5


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _new_review_id() -> str:
    return str(uuid4())


class Review(db.Model):
    """评论模型.

    标题、正文与渲染后的 HTML 均为多语言字段(``{语言: 文本}``).
    删除采用软删除: 仅设置 ``rev_deleted`` 并记录删除人与时间.

    Attributes:
        id: UUID 字符串主键.
        url: 被评论对象的 URL.
        title: 多语言标题.
        text: 多语言 Markdown 正文(已转义).
        html: 多语言渲染结果.
        star_rating: 1-5 星评分.
        original_language: 创建时使用的语言.
        created_by_id: 作者 ID.
        rev_deleted: 是否已软删除.

    """

    __tablename__ = "reviews"

    id = db.Column(db.String(36), primary_key=True, default=_new_review_id)
    url = db.Column(db.String(2048), nullable=False, index=True)
    title = db.Column(db.JSON, nullable=False, default=dict)
    text = db.Column(db.JSON, nullable=False, default=dict)
    html = db.Column(db.JSON, nullable=False, default=dict)
    star_rating = db.Column(db.Integer, nullable=False)
    original_language = db.Column(db.String(8), nullable=False)
    created_on = db.Column(db.DateTime(timezone=True), nullable=False, default=_utcnow, index=True)
    created_by_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    rev_deleted = db.Column(db.Boolean, nullable=False, default=False)
    rev_date = db.Column(db.DateTime(timezone=True), nullable=False, default=_utcnow)
    rev_user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)

    creator = db.relationship("User", foreign_keys=[created_by_id], lazy="joined")

    # 由 populate_user_info 填充,不入库
    user_is_author = False
    user_can_edit = False
    user_can_delete = False

    def populate_user_info(self, user: User | Any | None) -> None:
        """根据当前用户计算权限标记.

        - 作者或超级用户可编辑
        - 作者、超级用户或站点版主可删除

        Args:
            user: 当前用户,匿名用户或 None 时所有标记为 False.

        """
        if user is None or not getattr(user, "is_authenticated", False):
            self.user_is_author = False
            self.user_can_edit = False
            self.user_can_delete = False
            return

        is_super_user = bool(getattr(user, "is_super_user", False))
        is_moderator = bool(getattr(user, "is_site_moderator", False))
        self.user_is_author = self.created_by_id is not None and self.created_by_id == getattr(user, "id", None)
        self.user_can_edit = self.user_is_author or is_super_user
        self.user_can_delete = self.user_is_author or is_super_user or is_moderator

    def __repr__(self) -> str:
        return f"<Review {self.id}>"

"""lib.reviews - 用户模型."""

from datetime import UTC, datetime

from flask import current_app
from flask_login import UserMixin

from libreviews import bcrypt, db

MIN_USER_PASSWORD_LENGTH = 6
MAX_USERNAME_LENGTH = 128


def _utcnow() -> datetime:
    return datetime.now(UTC)


class User(UserMixin, db.Model):
    """用户模型.

    管理用户的认证信息与站点权限标记.
    继承 Flask-Login 的 UserMixin 提供会话管理功能.

    Attributes:
        id: 用户 ID,主键.
        username: 用户名,唯一索引.
        password: 加密后的密码(bcrypt).
        is_trusted: 受信任用户,可查看错误详情.
        is_super_user: 超级用户,可编辑和删除任意评论.
        is_site_moderator: 站点版主,可删除任意评论.
        created_on: 注册时间.

    """

    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(MAX_USERNAME_LENGTH), unique=True, nullable=False, index=True)
    password = db.Column(db.String(255), nullable=False)
    is_trusted = db.Column(db.Boolean, nullable=False, default=False)
    is_super_user = db.Column(db.Boolean, nullable=False, default=False)
    is_site_moderator = db.Column(db.Boolean, nullable=False, default=False)
    created_on = db.Column(db.DateTime(timezone=True), nullable=False, default=_utcnow)

    def __init__(
        self,
        username: str | None = None,
        password: str | None = None,
        *,
        is_trusted: bool = False,
        is_super_user: bool = False,
        is_site_moderator: bool = False,
    ) -> None:
        """初始化用户.

        Args:
            username: 用户名
            password: 明文密码,写入前加密
            is_trusted: 是否受信任
            is_super_user: 是否超级用户
            is_site_moderator: 是否站点版主

        """
        if username is not None:
            self.username = username
        if password is not None:
            self.set_password(password)
        self.is_trusted = is_trusted
        self.is_super_user = is_super_user
        self.is_site_moderator = is_site_moderator

    def set_password(self, password: str) -> None:
        """设置密码(加密).

        Raises:
            ValueError: 密码长度不足时抛出.

        """
        if len(password) < MIN_USER_PASSWORD_LENGTH:
            error_msg = f"密码长度至少{MIN_USER_PASSWORD_LENGTH}位"
            raise ValueError(error_msg)
        rounds = current_app.config.get("BCRYPT_LOG_ROUNDS", 12)
        self.password = bcrypt.generate_password_hash(password, rounds=rounds).decode("utf-8")

    def check_password(self, password: str) -> bool:
        """验证密码."""
        return bcrypt.check_password_hash(self.password, password)

    def __repr__(self) -> str:
        return f"<User {self.username}>"

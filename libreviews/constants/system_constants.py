"""lib.reviews - 常量定义模块

统一管理错误分类、严重度与界面消息键.
消息键同时是 gettext 的 msgid,渲染前经过 flask_babel 翻译.
"""

from enum import Enum


class ErrorCategory(Enum):
    """错误分类枚举."""

    VALIDATION = "validation"
    BUSINESS = "business"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    SECURITY = "security"
    DATABASE = "database"
    SYSTEM = "system"


class ErrorSeverity(Enum):
    """错误严重程度枚举."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorMessages:
    """错误消息键."""

    INTERNAL_ERROR = "something went wrong"
    VALIDATION_ERROR = "invalid form data"
    PERMISSION_DENIED = "permission denied"
    RESOURCE_NOT_FOUND = "page not found"
    INVALID_REQUEST = "invalid request"
    AUTHENTICATION_REQUIRED = "signin required"
    INVALID_CREDENTIALS = "invalid credentials"
    CSRF_FAILED = "invalid csrf token"
    DATABASE_QUERY_ERROR = "database error"

    # 表单解析
    UNEXPECTED_FORM_DATA = "unexpected form data"
    UNKNOWN_CAPTCHA = "unknown captcha"
    INCORRECT_CAPTCHA_ANSWER = "incorrect captcha answer"
    NEED_FIELD = "need %(field)s"
    INVALID_FIELD = "invalid %(field)s"

    # 账户
    USERNAME_EXISTS = "username exists"
    PASSWORD_TOO_SHORT = "password too short"


class SuccessMessages:
    """成功消息键."""

    SIGNED_IN = "welcome back"
    SIGNED_OUT = "signed out"
    REGISTERED = "welcome new user"
    REVIEW_CREATED = "review created"
    REVIEW_UPDATED = "review updated"
    REVIEW_DELETED = "review deleted"
    LANGUAGE_CHANGED = "language changed"


__all__ = [
    "ErrorCategory",
    "ErrorMessages",
    "ErrorSeverity",
    "SuccessMessages",
]

"""表单动作常量."""

from __future__ import annotations

from enum import Enum


class FormAction(str, Enum):
    """FormHandler 支持的逻辑动作."""

    CREATE = "create"
    EDIT = "edit"
    DELETE = "delete"


class ReviewFormAction(str, Enum):
    """评论表单提交按钮的取值."""

    PREVIEW = "preview"
    PUBLISH = "publish"


class UnavailableReason(str, Enum):
    """资源不可用的原因."""

    NOT_FOUND = "not_found"
    DELETED = "deleted"

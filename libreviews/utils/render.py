"""页面渲染助手.

统一渲染模板并附带状态码,供表单处理器与路由复用.
"""

from __future__ import annotations

from flask import render_template

from libreviews.constants import HttpStatus

NOT_FOUND_TEMPLATE = "404.html"
NOT_FOUND_TITLE_KEY = "page not found title"
SIGNIN_REQUIRED_TEMPLATE = "signin_required.html"
PERMISSION_ERROR_TEMPLATE = "permission_error.html"


def template(name: str, *, status: int = HttpStatus.OK, **context: object) -> tuple[str, int]:
    """渲染模板.

    Args:
        name: 模板路径.
        status: HTTP 状态码.
        **context: 模板上下文,``title_key`` 会经 gettext 翻译为页面标题.

    Returns:
        (HTML, 状态码) 元组.

    """
    return render_template(name, **context), status


def signin_required(*, title_key: str | None = None) -> tuple[str, int]:
    """渲染"需要登录"页面."""
    return template(SIGNIN_REQUIRED_TEMPLATE, status=HttpStatus.UNAUTHORIZED, title_key=title_key)


def permission_error(*, title_key: str | None = None, details_key: str | None = None) -> tuple[str, int]:
    """渲染权限错误页面."""
    return template(
        PERMISSION_ERROR_TEMPLATE,
        status=HttpStatus.FORBIDDEN,
        title_key=title_key,
        details_key=details_key,
    )


def resource_not_found(*, title_key: str | None, resource_id: str | None) -> tuple[str, int]:
    """渲染 404 页面."""
    return template(
        NOT_FOUND_TEMPLATE,
        status=HttpStatus.NOT_FOUND,
        title_key=title_key or NOT_FOUND_TITLE_KEY,
        id=resource_id,
    )


__all__ = [
    "NOT_FOUND_TEMPLATE",
    "NOT_FOUND_TITLE_KEY",
    "PERMISSION_ERROR_TEMPLATE",
    "SIGNIN_REQUIRED_TEMPLATE",
    "permission_error",
    "resource_not_found",
    "signin_required",
    "template",
]

"""lib.reviews - 统一异常定义.

集中维护业务异常类型、严重度与 HTTP 状态码映射.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from werkzeug.exceptions import HTTPException

from libreviews.constants import HttpStatus, UnavailableReason
from libreviews.constants.system_constants import ErrorCategory, ErrorMessages, ErrorSeverity

if TYPE_CHECKING:
    from libreviews.types import LoggerExtra


@dataclass(slots=True, frozen=True)
class ExceptionMetadata:
    """异常的元信息."""

    status_code: int
    category: ErrorCategory
    severity: ErrorSeverity
    default_message_key: str

    @property
    def default_message(self) -> str:
        """根据 message key 获取默认文案."""
        return getattr(ErrorMessages, self.default_message_key, ErrorMessages.INTERNAL_ERROR)


class AppError(Exception):
    """统一的基础业务异常.

    Args:
        message: 自定义错误文案,若为空则根据 ``message_key`` 推导.
        message_key: ``ErrorMessages`` 中的键名.
        extra: 附加到日志的上下文.
        status_code: 覆盖元数据中的 HTTP 状态码.

    """

    metadata = ExceptionMetadata(
        status_code=HttpStatus.INTERNAL_SERVER_ERROR,
        category=ErrorCategory.SYSTEM,
        severity=ErrorSeverity.HIGH,
        default_message_key="INTERNAL_ERROR",
    )

    def __init__(
        self,
        message: str | None = None,
        *,
        message_key: str | None = None,
        extra: LoggerExtra | None = None,
        status_code: int | None = None,
    ) -> None:
        self.message_key = message_key or self.metadata.default_message_key
        self.message = message or (
            getattr(ErrorMessages, message_key, ErrorMessages.INTERNAL_ERROR)
            if message_key
            else self.metadata.default_message
        )
        self.extra = dict(extra or {})
        self._status_code = status_code or self.metadata.status_code
        super().__init__(self.message)

    @property
    def severity(self) -> ErrorSeverity:
        """返回异常实例对应的严重度."""
        return self.metadata.severity

    @property
    def category(self) -> ErrorCategory:
        """返回异常所属的业务分类."""
        return self.metadata.category

    @property
    def status_code(self) -> int:
        """返回异常对应的 HTTP 状态码."""
        return self._status_code

    @property
    def recoverable(self) -> bool:
        """严重度为 LOW 或 MEDIUM 时视为可恢复."""
        return self.severity in (ErrorSeverity.LOW, ErrorSeverity.MEDIUM)


class ValidationError(AppError):
    """表示输入参数或表单验证失败,默认返回 400."""

    metadata = ExceptionMetadata(
        status_code=HttpStatus.BAD_REQUEST,
        category=ErrorCategory.VALIDATION,
        severity=ErrorSeverity.LOW,
        default_message_key="VALIDATION_ERROR",
    )


class AuthorizationError(AppError):
    """表示当前用户缺少访问目标资源的权限,默认返回 403."""

    metadata = ExceptionMetadata(
        status_code=HttpStatus.FORBIDDEN,
        category=ErrorCategory.AUTHORIZATION,
        severity=ErrorSeverity.MEDIUM,
        default_message_key="PERMISSION_DENIED",
    )


class NotFoundError(AppError):
    """表示客户端请求的资源不存在,默认返回 404."""

    metadata = ExceptionMetadata(
        status_code=HttpStatus.NOT_FOUND,
        category=ErrorCategory.BUSINESS,
        severity=ErrorSeverity.LOW,
        default_message_key="RESOURCE_NOT_FOUND",
    )


class ResourceUnavailableError(NotFoundError):
    """资源不可用: 不存在或已被软删除.

    两种原因对调用方而言是同一种错误,``reason`` 仅用于日志.

    Args:
        resource_id: 请求的资源 ID.
        reason: ``UnavailableReason`` 之一.

    """

    def __init__(
        self,
        resource_id: str | None = None,
        *,
        reason: UnavailableReason = UnavailableReason.NOT_FOUND,
        message: str | None = None,
    ) -> None:
        self.resource_id = resource_id
        self.reason = reason
        super().__init__(message, extra={"resource_id": resource_id, "reason": reason.value})


class DatabaseError(AppError):
    """表示数据库查询或事务执行失败,默认返回 500."""

    metadata = ExceptionMetadata(
        status_code=HttpStatus.INTERNAL_SERVER_ERROR,
        category=ErrorCategory.DATABASE,
        severity=ErrorSeverity.HIGH,
        default_message_key="DATABASE_QUERY_ERROR",
    )


class FormConfigurationError(RuntimeError):
    """表单处理器配置错误(未知动作、缺少动词处理函数等).

    属于编程错误,不经过面向用户的错误映射.
    """


def map_exception_to_status(error: BaseException, default: int = HttpStatus.INTERNAL_SERVER_ERROR) -> int:
    """根据异常类型推导 HTTP 状态码.

    Args:
        error: 捕获到的异常对象.
        default: 无法匹配时的默认状态码.

    Returns:
        int: 与异常对应的 HTTP 状态码.

    """
    if isinstance(error, AppError):
        return error.status_code

    if isinstance(error, HTTPException):
        code = getattr(error, "code", None)
        if code is not None:
            return int(code)

    return default


__all__ = [
    "AppError",
    "AuthorizationError",
    "DatabaseError",
    "FormConfigurationError",
    "NotFoundError",
    "ResourceUnavailableError",
    "ValidationError",
    "map_exception_to_status",
]

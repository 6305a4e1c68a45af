"""常量模块。

集中管理系统常量，包括错误消息、Flash 类别、HTTP 方法与表单动作等。
"""

# 导入HTTP状态码常量（使用Python标准库）
from http import HTTPStatus as HttpStatus

from .flash_categories import FlashCategory
from .form_actions import FormAction, ReviewFormAction, UnavailableReason
from .http_methods import HttpMethod
from .system_constants import (
    ErrorCategory,
    ErrorMessages,
    ErrorSeverity,
    SuccessMessages,
)

__all__ = [
    "ErrorCategory",
    "ErrorMessages",
    "ErrorSeverity",
    "FlashCategory",
    "FormAction",
    "HttpMethod",
    "HttpStatus",
    "ReviewFormAction",
    "SuccessMessages",
    "UnavailableReason",
]

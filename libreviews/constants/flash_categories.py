"""Flask Flash消息类别常量.

定义Flash消息的标准类别(即会话中的消息桶),避免魔法字符串.
"""

from __future__ import annotations

from typing import ClassVar


class FlashCategory:
    """Flask Flash消息类别常量.

    表单校验失败写入 ``PAGE_ERRORS``,普通提示写入 ``PAGE_MESSAGES``,
    模板按类别分别渲染.
    """

    PAGE_ERRORS = "pageErrors"       # 页面级错误(表单校验等)
    PAGE_MESSAGES = "pageMessages"   # 页面级提示
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"

    ALL: ClassVar[tuple[str, ...]] = (PAGE_ERRORS, PAGE_MESSAGES, SUCCESS, ERROR, INFO)

    ERROR_CATEGORIES: ClassVar[tuple[str, ...]] = (PAGE_ERRORS, ERROR)

    BOOTSTRAP_CLASSES: ClassVar[dict[str, str]] = {
        PAGE_ERRORS: "alert-danger",
        PAGE_MESSAGES: "alert-info",
        SUCCESS: "alert-success",
        ERROR: "alert-danger",
        INFO: "alert-info",
    }

    @classmethod
    def is_valid(cls, category: str) -> bool:
        """验证消息类别是否有效.

        Args:
            category: 消息类别字符串

        Returns:
            bool: 是否为有效类别

        """
        return category in cls.ALL

    @classmethod
    def get_bootstrap_class(cls, category: str) -> str:
        """获取Bootstrap CSS类名."""
        return cls.BOOTSTRAP_CLASSES.get(category, "alert-info")

"""HTTP方法常量.

定义表单处理涉及的HTTP请求方法,避免魔法字符串.
"""

from typing import ClassVar


class HttpMethod:
    """HTTP方法常量."""

    GET: ClassVar[str] = "GET"           # 显示表单
    POST: ClassVar[str] = "POST"         # 提交表单
    HEAD: ClassVar[str] = "HEAD"         # 按 GET 处理

    FORM_METHODS: ClassVar[tuple[str, ...]] = (GET, POST)

    @classmethod
    def normalize(cls, method: str) -> str:
        """将请求方法归一化为表单处理使用的动词.

        Args:
            method: 原始 HTTP 方法.

        Returns:
            大写方法名,HEAD 归并为 GET.

        """
        upper = (method or cls.GET).upper()
        if upper == cls.HEAD:
            return cls.GET
        return upper

"""重定向目标校验.

登录后的 ``next`` 参数与切换语言后的返回地址只允许站内路径.
"""

from __future__ import annotations

from urllib.parse import urlparse


def is_safe_redirect_target(target: str) -> bool:
    """判断重定向目标是否为站内路径.

    拒绝带 scheme/netloc 的地址、``//`` 开头的协议相对地址、
    反斜杠以及 CR/LF 控制字符.

    Args:
        target: 目标 URL.

    Returns:
        是否允许跳转.

    """
    normalized = target.strip()
    if not normalized or not normalized.startswith("/") or normalized.startswith("//"):
        return False
    if any(char in normalized for char in ("\r", "\n", "\\")):
        return False

    parsed = urlparse(normalized)
    return not (parsed.scheme or parsed.netloc)


def resolve_safe_redirect_target(target: str | None, *, fallback: str) -> str:
    """返回安全的重定向目标,不安全或为空时回退到 ``fallback``."""
    if not target or not target.strip():
        return fallback
    normalized = target.strip()
    return normalized if is_safe_redirect_target(normalized) else fallback


__all__ = ["is_safe_redirect_target", "resolve_safe_redirect_target"]

"""多语言字符串工具.

多语言字段以 ``{"en": "...", "de": "..."}`` 的形式存储.
"""

from __future__ import annotations

from collections.abc import Mapping

FALLBACK_LANGUAGE = "en"


def resolve(value: Mapping[str, str] | None, language: str) -> str | None:
    """按语言解析多语言字符串.

    优先返回请求语言,其次英文,最后任意可用语言.

    Args:
        value: 多语言映射,可为 None.
        language: 目标语言代码.

    Returns:
        解析出的字符串,没有任何可用值时返回 None.

    """
    if not value:
        return None
    if value.get(language):
        return value[language]
    if value.get(FALLBACK_LANGUAGE):
        return value[FALLBACK_LANGUAGE]
    for candidate in value.values():
        if candidate:
            return candidate
    return None


def merge(existing: Mapping[str, str] | None, update: Mapping[str, str] | None) -> dict[str, str]:
    """合并多语言字符串,仅覆盖 ``update`` 中出现的语言."""
    merged = dict(existing or {})
    merged.update(update or {})
    return merged


__all__ = ["FALLBACK_LANGUAGE", "merge", "resolve"]

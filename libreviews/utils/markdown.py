"""Markdown 渲染.

使用 markdown-it-py 的 commonmark 预设并关闭原始 HTML,
用户输入中的标签会被转义而不是透传.
"""

from __future__ import annotations

from functools import lru_cache

from markdown_it import MarkdownIt
from markupsafe import Markup


@lru_cache(maxsize=1)
def _get_renderer() -> MarkdownIt:
    return MarkdownIt("commonmark", {"html": False, "breaks": True, "linkify": False})


def render_markdown(text: str) -> str:
    """将 Markdown 文本渲染为 HTML 字符串."""
    return _get_renderer().render(text or "")


def markdown_filter(text: str | None) -> Markup:
    """Jinja 过滤器: 渲染并标记为安全 HTML."""
    return Markup(render_markdown(text or ""))


__all__ = ["markdown_filter", "render_markdown"]

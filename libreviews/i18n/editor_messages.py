"""富文本编辑器使用的消息键.

表单模板将这些键的当前语言译文注入页面,供编辑器工具栏使用.
"""

from __future__ import annotations

from flask_babel import force_locale, gettext

EDITOR_MESSAGE_KEYS: tuple[str, ...] = (
    "accesskey",
    "insert image",
    "insert image help",
    "insert image dialog title",
    "insert",
    "insert horizontal rule",
    "insert horizontal rule help",
    "insert help",
    "image url",
    "image alt text",
    "add or remove link",
    "add link dialog title",
    "web address",
    "toggle bold",
    "toggle italic",
    "toggle code",
    "format block",
    "format block help",
    "format as bullet list",
    "format as numbered list",
    "format as quote",
    "format as paragraph help",
    "format as paragraph",
    "format as code block",
    "format as code block help",
    "format as heading",
    "format as level heading help",
    "format as level heading",
    "format as spoiler",
    "format as spoiler help",
    "format as nsfw",
    "format as nsfw help",
    "format as custom warning",
    "format as custom warning help",
    "format as custom warning dialog title",
    "custom warning text",
    "undo",
    "redo",
    "join with item above",
    "decrease item indentation",
    "required field",
    "ok",
    "cancel",
    "remember rte preference",
    "forget rte preference",
    "full screen mode",
    "spoiler warning",
    "nsfw warning",
)


def get_editor_message_keys() -> list[str]:
    """返回消息键列表的副本."""
    return list(EDITOR_MESSAGE_KEYS)


def get_editor_messages(locale: str | None = None) -> dict[str, str]:
    """返回 ``{消息键: 译文}``.

    Args:
        locale: 目标语言,为空时使用当前请求语言.

    """
    if locale is None:
        return {key: gettext(key) for key in EDITOR_MESSAGE_KEYS}
    with force_locale(locale):
        return {key: gettext(key) for key in EDITOR_MESSAGE_KEYS}


__all__ = ["EDITOR_MESSAGE_KEYS", "get_editor_message_keys", "get_editor_messages"]

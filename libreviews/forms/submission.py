"""表单提交解析.

按声明式的字段定义校验并转换 ``request.form``:
- 必填字段缺失时写入页面错误消息
- 按字段类型转换取值(数字、URL、多语言文本、Markdown、布尔)
- 标记未声明的字段
- 对启用问题验证码的表单校验答案

解析过程不会因为用户输入抛出异常,所有问题通过返回值和 flash 消息体现.
"""

from __future__ import annotations

import math
import re
from collections.abc import Collection, Sequence
from dataclasses import dataclass, field
from enum import Enum

from flask import flash
from flask_babel import gettext
from markupsafe import escape

from libreviews.constants import ErrorMessages, FlashCategory
from libreviews.services.captcha import (
    CAPTCHA_ANSWER_FIELD,
    CAPTCHA_ID_FIELD,
    get_question_captcha_service,
)
from libreviews.types import FormPayload, FormValues
from libreviews.utils.markdown import render_markdown
from libreviews.utils.structlog_config import get_form_logger
from libreviews.utils.url_utils import normalize_and_encode

CSRF_FIELD = "csrf_token"

# 仅接受 ASCII 十进制写法,拒绝下划线分组与全角/其他文字的数字
NUMBER_PATTERN = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)


class FieldType(str, Enum):
    """表单字段类型."""

    NUMBER = "number"
    URL = "url"
    TEXT = "text"
    MARKDOWN = "markdown"
    BOOLEAN = "boolean"


@dataclass(frozen=True, slots=True)
class FormField:
    """表单字段定义.

    Attributes:
        name: 表单中的字段名.
        key: 输出到 ``form_values`` 的键,默认与 ``name`` 相同.
        type: 字段类型,为空时原样透传.
        required: 是否必填.
        skip_value: 只做必填校验,不输出取值.
        flat: Markdown 字段是否平铺输出(文本与 HTML 分别写入两个键).
        html_key: 平铺时 HTML 输出的键.

    """

    name: str
    key: str | None = None
    type: FieldType | None = None
    required: bool = False
    skip_value: bool = False
    flat: bool = False
    html_key: str | None = None

    @property
    def value_key(self) -> str:
        return self.key or self.name


FormDefinition = Sequence[FormField]


@dataclass(slots=True)
class SubmissionResult:
    """表单解析结果.

    Attributes:
        has_required_fields: 所有必填字段是否都已提交.
        has_unknown_fields: 是否包含未声明的字段.
        has_correct_captcha: 验证码是否正确,未启用验证码时为 None.
        form_values: 转换后的取值.

    """

    has_required_fields: bool = True
    has_unknown_fields: bool = False
    has_correct_captcha: bool | None = None
    form_values: FormValues = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        """必填齐全、无未知字段且验证码未失败."""
        return self.has_required_fields and not self.has_unknown_fields and self.has_correct_captcha is not False


def _flash_error(message: str) -> None:
    flash(message, FlashCategory.PAGE_ERRORS)


def _parse_number(raw: str) -> int | float | None:
    text = raw.strip()
    if not NUMBER_PATTERN.fullmatch(text):
        return None
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return int(number) if number.is_integer() else number


def _escape_text(raw: str) -> str:
    return str(escape(raw.strip()))


def _convert(form_field: FormField, raw: str | None, language: str, values: FormValues) -> None:
    key = form_field.value_key
    field_type = form_field.type

    if field_type is FieldType.BOOLEAN:
        values[key] = bool(raw)
        return
    if raw is None or raw == "":
        # 非必填且未提交的字段不输出
        return

    if field_type is FieldType.NUMBER:
        number = _parse_number(raw)
        if number is None:
            _flash_error(gettext(ErrorMessages.INVALID_FIELD, field=form_field.name))
        values[key] = number
    elif field_type is FieldType.URL:
        try:
            values[key] = normalize_and_encode(raw.strip())
        except ValueError:
            _flash_error(gettext(ErrorMessages.INVALID_FIELD, field=form_field.name))
            values[key] = None
    elif field_type is FieldType.TEXT:
        values[key] = {language: _escape_text(raw)}
    elif field_type is FieldType.MARKDOWN:
        escaped = _escape_text(raw)
        rendered = render_markdown(raw.strip())
        if form_field.flat:
            values[key] = {language: escaped}
            values[form_field.html_key or f"{key}_html"] = {language: rendered}
        else:
            values[key] = {"text": {language: escaped}, "html": {language: rendered}}
    else:
        values[key] = raw


def parse_submission(
    form: FormPayload,
    *,
    form_def: FormDefinition,
    form_key: str | None = None,
    language: str,
    skip_required_check: Collection[str] = (),
) -> SubmissionResult:
    """解析表单提交.

    Args:
        form: 表单数据,通常为 ``request.form``.
        form_def: 字段定义,不会被修改.
        form_key: 表单全局唯一键,用于判断是否启用验证码.
        language: 内容语言,多语言字段按此语言输出.
        skip_required_check: 跳过校验且不输出的字段名.

    Returns:
        SubmissionResult: 解析结果.

    """
    fields: list[FormField] = list(form_def)
    fields.append(FormField(CSRF_FIELD, required=True, skip_value=True))

    result = SubmissionResult()
    captcha_service = get_question_captcha_service()
    if captcha_service.is_enabled(form_key):
        fields.append(FormField(CAPTCHA_ID_FIELD, required=True))
        fields.append(FormField(CAPTCHA_ANSWER_FIELD, required=True))
        result.has_correct_captcha = captcha_service.check_answer(form)

    unprocessed = set(form.keys())
    skipped = set(skip_required_check)

    for form_field in fields:
        unprocessed.discard(form_field.name)

        if form_field.name in skipped:
            continue

        raw = form.get(form_field.name)
        if form_field.required and not raw:
            _flash_error(gettext(ErrorMessages.NEED_FIELD, field=form_field.name))
            result.has_required_fields = False
            continue

        if form_field.skip_value:
            continue

        _convert(form_field, raw, language, result.form_values)

    if unprocessed:
        result.has_unknown_fields = True
        _flash_error(gettext(ErrorMessages.UNEXPECTED_FORM_DATA))
        get_form_logger().info(
            "表单包含未声明字段",
            module="forms",
            form_key=form_key,
            unknown_fields=sorted(unprocessed),
        )

    return result


__all__ = [
    "CSRF_FIELD",
    "FieldType",
    "FormDefinition",
    "FormField",
    "SubmissionResult",
    "parse_submission",
]

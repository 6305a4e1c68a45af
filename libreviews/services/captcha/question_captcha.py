"""问题式验证码服务.

配置包含两部分:
- 启用验证码的表单键(``QUESTION_CAPTCHA_FORMS``)
- 有序的问题/答案列表(YAML 文件,按下标寻址)

问题与答案都以 gettext 消息键保存,比较答案时使用当前语言的译文.
"""

from __future__ import annotations

import random
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path

import yaml
from flask import current_app, flash
from flask_babel import gettext

from libreviews.constants import ErrorMessages, FlashCategory
from libreviews.utils.structlog_config import get_system_logger

CAPTCHA_ID_FIELD = "captcha-id"
CAPTCHA_ANSWER_FIELD = "captcha-answer"
EXTENSION_KEY = "question_captcha"


@dataclass(frozen=True, slots=True)
class CaptchaQuestion:
    """单个验证问题."""

    question_key: str
    answer_key: str


@dataclass(frozen=True, slots=True)
class CaptchaChallenge:
    """渲染到表单中的验证问题."""

    id: int
    captcha: CaptchaQuestion


class QuestionCaptcha:
    """问题式验证码.

    Attributes:
        forms: 启用验证码的表单键集合.
        captchas: 有序的问题列表.

    """

    def __init__(self, forms: Iterable[str], captchas: Iterable[CaptchaQuestion]) -> None:
        self.forms = frozenset(forms)
        self.captchas: tuple[CaptchaQuestion, ...] = tuple(captchas)

    @classmethod
    def from_file(cls, path: str | Path, forms: Iterable[str]) -> QuestionCaptcha:
        """从 YAML 文件加载问题列表.

        文件格式::

            captchas:
              - question_key: "captcha question 1"
                answer_key: "captcha answer 1"

        Raises:
            ValueError: 文件结构不合法.

        """
        with Path(path).open(encoding="utf-8") as config_buffer:
            config = yaml.safe_load(config_buffer) or {}
        entries = config.get("captchas") or []
        if not isinstance(entries, list):
            raise ValueError(f"验证码配置格式错误: {path}")

        captchas = []
        for entry in entries:
            if not isinstance(entry, Mapping) or not entry.get("question_key") or not entry.get("answer_key"):
                raise ValueError(f"验证码配置条目缺少 question_key/answer_key: {entry!r}")
            captchas.append(CaptchaQuestion(str(entry["question_key"]), str(entry["answer_key"])))
        return cls(forms, captchas)

    def is_enabled(self, form_key: str | None) -> bool:
        """表单是否启用验证码."""
        return bool(form_key) and form_key in self.forms and bool(self.captchas)

    def get_question_captcha(self, form_key: str | None) -> CaptchaChallenge | None:
        """随机挑选一个问题,未启用时返回 None."""
        if not self.is_enabled(form_key):
            return None
        captcha_id = random.randrange(len(self.captchas))  # noqa: S311
        return CaptchaChallenge(id=captcha_id, captcha=self.captchas[captcha_id])

    def lookup(self, raw_id: object) -> CaptchaQuestion | None:
        """根据提交的 captcha-id 查找问题,非法下标返回 None."""
        try:
            captcha_id = int(str(raw_id).strip())
        except (TypeError, ValueError):
            return None
        if captcha_id < 0 or captcha_id >= len(self.captchas):
            return None
        return self.captchas[captcha_id]

    def check_answer(self, form: Mapping[str, str]) -> bool:
        """校验提交的验证码答案.

        缺少答案时直接返回 False(必填字段的提示已足够);
        未知问题与错误答案会写入页面错误消息.

        Args:
            form: 表单数据.

        Returns:
            答案是否正确.

        """
        answer_text = form.get(CAPTCHA_ANSWER_FIELD)
        if not answer_text:
            return False

        captcha = self.lookup(form.get(CAPTCHA_ID_FIELD))
        if captcha is None:
            flash(gettext(ErrorMessages.UNKNOWN_CAPTCHA), FlashCategory.PAGE_ERRORS)
            return False

        expected = gettext(captcha.answer_key)
        if answer_text.strip().upper() != expected.strip().upper():
            flash(gettext(ErrorMessages.INCORRECT_CAPTCHA_ANSWER), FlashCategory.PAGE_ERRORS)
            return False
        return True


def init_question_captcha(app) -> QuestionCaptcha:  # noqa: ANN001
    """加载验证码配置并挂载到 ``app.extensions``."""
    captcha = QuestionCaptcha.from_file(
        app.config["QUESTION_CAPTCHA_FILE"],
        app.config.get("QUESTION_CAPTCHA_FORMS", ()),
    )
    app.extensions[EXTENSION_KEY] = captcha
    get_system_logger().info(
        "问题验证码已加载",
        module="captcha",
        forms=sorted(captcha.forms),
        question_count=len(captcha.captchas),
    )
    return captcha


def get_question_captcha_service() -> QuestionCaptcha:
    """获取当前应用的验证码服务."""
    return current_app.extensions[EXTENSION_KEY]


__all__ = [
    "CAPTCHA_ANSWER_FIELD",
    "CAPTCHA_ID_FIELD",
    "CaptchaChallenge",
    "CaptchaQuestion",
    "QuestionCaptcha",
    "get_question_captcha_service",
    "init_question_captcha",
]

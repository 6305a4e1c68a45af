"""问题式验证码."""

from .question_captcha import (
    CAPTCHA_ANSWER_FIELD,
    CAPTCHA_ID_FIELD,
    QuestionCaptcha,
    get_question_captcha_service,
    init_question_captcha,
)

__all__ = [
    "CAPTCHA_ANSWER_FIELD",
    "CAPTCHA_ID_FIELD",
    "QuestionCaptcha",
    "get_question_captcha_service",
    "init_question_captcha",
]

"""问题式验证码的单元测试."""

import pytest
from flask import get_flashed_messages

from libreviews.services.captcha import QuestionCaptcha, get_question_captcha_service
from libreviews.services.captcha.question_captcha import CaptchaQuestion


def _service() -> QuestionCaptcha:
    return QuestionCaptcha(
        forms=["register"],
        captchas=[
            CaptchaQuestion("captcha question 1", "captcha answer 1"),
            CaptchaQuestion("captcha question 2", "  Blue "),
        ],
    )


@pytest.mark.unit
def test_packaged_config_is_loaded_for_register_form(app) -> None:
    service = get_question_captcha_service()

    assert service.is_enabled("register") is True
    assert service.is_enabled("signin") is False
    assert len(service.captchas) >= 1


@pytest.mark.unit
def test_get_question_captcha_returns_indexed_question() -> None:
    service = _service()

    challenge = service.get_question_captcha("register")

    assert challenge is not None
    assert service.captchas[challenge.id] == challenge.captcha
    assert service.get_question_captcha("signin") is None
    assert service.get_question_captcha(None) is None


@pytest.mark.unit
@pytest.mark.parametrize("raw_id", ["-1", "2", "abc", "", None])
def test_lookup_rejects_invalid_ids(raw_id) -> None:
    assert _service().lookup(raw_id) is None


@pytest.mark.unit
def test_check_answer_is_trimmed_and_case_insensitive(app) -> None:
    service = _service()
    with app.test_request_context("/"):
        assert service.check_answer({"captcha-id": "1", "captcha-answer": "bLuE  "}) is True
        assert service.check_answer({"captcha-id": " 0 ", "captcha-answer": "Captcha Answer 1"}) is True
        assert get_flashed_messages() == []


@pytest.mark.unit
def test_check_answer_failures_flash_page_errors(app) -> None:
    service = _service()
    with app.test_request_context("/"):
        assert service.check_answer({"captcha-id": "1", "captcha-answer": "red"}) is False
        assert service.check_answer({"captcha-id": "7", "captcha-answer": "blue"}) is False
        assert service.check_answer({"captcha-id": "1"}) is False
        assert get_flashed_messages(with_categories=True) == [
            ("pageErrors", "incorrect captcha answer"),
            ("pageErrors", "unknown captcha"),
        ]


@pytest.mark.unit
def test_from_file_reads_yaml_and_rejects_bad_entries(tmp_path) -> None:
    good = tmp_path / "captchas.yaml"
    good.write_text(
        'captchas:\n  - question_key: "q1"\n    answer_key: "a1"\n',
        encoding="utf-8",
    )
    service = QuestionCaptcha.from_file(good, ["register"])
    assert service.captchas == (CaptchaQuestion("q1", "a1"),)

    bad = tmp_path / "bad.yaml"
    bad.write_text('captchas:\n  - question_key: "q1"\n', encoding="utf-8")
    with pytest.raises(ValueError, match="question_key/answer_key"):
        QuestionCaptcha.from_file(bad, ["register"])


@pytest.mark.unit
def test_empty_question_list_disables_captcha() -> None:
    assert QuestionCaptcha(["register"], []).is_enabled("register") is False

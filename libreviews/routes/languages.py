"""lib.reviews - 界面语言切换."""

from flask import Blueprint, current_app, flash, make_response, redirect, request, url_for
from flask_babel import force_locale, gettext

from libreviews.constants import ErrorMessages, FlashCategory, SuccessMessages
from libreviews.errors import ValidationError
from libreviews.i18n.locale import LOCALE_COOKIE, is_supported
from libreviews.types import RouteReturn
from libreviews.utils.redirect_safety import resolve_safe_redirect_target
from libreviews.utils.structlog_config import log_info

languages_bp = Blueprint("languages", __name__)

LOCALE_COOKIE_MAX_AGE = 365 * 24 * 60 * 60


def change_language() -> RouteReturn:
    """切换界面语言并写入 ``locale`` Cookie.

    Form Parameters:
        lang: 目标语言.
        next: 切换后返回的站内路径,可选.

    Raises:
        ValidationError: 语言不受支持.

    """
    language = request.form.get("lang", "").strip()
    if not is_supported(language):
        raise ValidationError(ErrorMessages.INVALID_REQUEST, extra={"lang": language})

    target = resolve_safe_redirect_target(request.form.get("next"), fallback=url_for("main.index"))
    response = make_response(redirect(target))
    response.set_cookie(
        LOCALE_COOKIE,
        language,
        max_age=LOCALE_COOKIE_MAX_AGE,
        httponly=True,
        samesite="Lax",
        secure=current_app.config.get("SESSION_COOKIE_SECURE", False),
    )
    with force_locale(language):
        flash(gettext(SuccessMessages.LANGUAGE_CHANGED), FlashCategory.PAGE_MESSAGES)
    log_info("界面语言已切换", module="i18n", language=language)
    return response


languages_bp.add_url_rule("/actions/change-language", view_func=change_language, methods=["POST"])

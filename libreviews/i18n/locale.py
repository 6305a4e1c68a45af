"""请求语言选择."""

from __future__ import annotations

from flask import current_app, request

LOCALE_COOKIE = "locale"


def supported_locales() -> list[str]:
    return list(current_app.config.get("SUPPORTED_LOCALES") or [current_app.config["BABEL_DEFAULT_LOCALE"]])


def is_supported(locale: str | None) -> bool:
    return bool(locale) and locale in supported_locales()


def select_locale() -> str:
    """Flask-Babel 的 locale_selector.

    优先使用 ``locale`` Cookie,其次按 Accept-Language 匹配,最后回退默认语言.
    """
    cookie_locale = request.cookies.get(LOCALE_COOKIE)
    if is_supported(cookie_locale):
        return cookie_locale
    return request.accept_languages.best_match(supported_locales()) or current_app.config["BABEL_DEFAULT_LOCALE"]


__all__ = ["LOCALE_COOKIE", "is_supported", "select_locale", "supported_locales"]

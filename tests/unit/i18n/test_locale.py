import pytest

from libreviews.i18n.locale import select_locale


@pytest.mark.unit
def test_cookie_wins_over_accept_language(app) -> None:
    with app.test_request_context("/", headers={"Cookie": "locale=de", "Accept-Language": "en"}):
        assert select_locale() == "de"


@pytest.mark.unit
def test_unsupported_cookie_is_ignored(app) -> None:
    with app.test_request_context("/", headers={"Cookie": "locale=xx", "Accept-Language": "de"}):
        assert select_locale() == "de"


@pytest.mark.unit
def test_default_locale_when_nothing_matches(app) -> None:
    with app.test_request_context("/", headers={"Accept-Language": "ja"}):
        assert select_locale() == "en"

"""多语言字符串工具的单元测试."""

import pytest

from libreviews.utils.mlstring import merge, resolve


@pytest.mark.unit
def test_resolve_prefers_requested_language_then_english_then_any() -> None:
    value = {"de": "Hallo", "en": "Hello", "fr": "Bonjour"}

    assert resolve(value, "de") == "Hallo"
    assert resolve(value, "es") == "Hello"
    assert resolve({"fr": "Bonjour"}, "de") == "Bonjour"
    assert resolve({}, "en") is None
    assert resolve(None, "en") is None


@pytest.mark.unit
def test_merge_only_overrides_given_languages() -> None:
    existing = {"en": "Hello", "de": "Hallo"}

    assert merge(existing, {"de": "Servus"}) == {"en": "Hello", "de": "Servus"}
    assert existing == {"en": "Hello", "de": "Hallo"}

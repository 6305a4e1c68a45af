"""URL 规范化与编码的单元测试."""

import pytest

from libreviews.utils.url_utils import encode_uri, normalize, normalize_and_encode


@pytest.mark.unit
@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("example.com", "http://example.com"),
        ("HTTPS://Example.COM/", "https://example.com"),
        ("https://example.com:443/path", "https://example.com/path"),
        ("http://example.com:8080/Path?Q=1#Frag", "http://example.com:8080/Path?Q=1#Frag"),
        ("//cdn.example.org/lib.js", "http://cdn.example.org/lib.js"),
        ("  ", ""),
    ],
)
def test_normalize(raw, expected) -> None:
    assert normalize(raw) == expected


@pytest.mark.unit
def test_encode_uri_keeps_reserved_characters() -> None:
    assert encode_uri("http://example.com/a b?x=1&y=ä#top") == "http://example.com/a%20b?x=1&y=%C3%A4#top"


@pytest.mark.unit
def test_normalize_and_encode() -> None:
    assert normalize_and_encode("Example.com/über uns") == "http://example.com/%C3%BCber%20uns"


@pytest.mark.unit
@pytest.mark.parametrize("raw", ["[::1", "http://[oops"])
def test_normalize_rejects_unbalanced_ipv6_brackets(raw) -> None:
    with pytest.raises(ValueError):
        normalize_and_encode(raw)

"""URL 规范化与编码工具."""

from __future__ import annotations

from urllib.parse import quote, urlsplit, urlunsplit

DEFAULT_SCHEME = "http"
DEFAULT_PORTS = {"http": 80, "https": 443}

# 与浏览器 encodeURI 保留的字符一致(字母、数字与 -_.~ 由 quote 默认保留)
ENCODE_URI_SAFE = ";,/?:@&=+$!*'()#"


def normalize(url: str) -> str:
    """规范化用户输入的 URL.

    - 缺少协议时补全为 http
    - 协议与主机名小写
    - 去掉默认端口
    - 仅有根路径时去掉结尾的 "/"

    Args:
        url: 原始 URL.

    Returns:
        规范化后的 URL,空字符串原样返回.

    Raises:
        ValueError: URL 无法解析(例如 IPv6 主机的方括号不成对).

    """
    url = url.strip()
    if not url:
        return url
    if url.startswith("//"):
        url = f"{DEFAULT_SCHEME}:{url}"
    elif "://" not in url:
        url = f"{DEFAULT_SCHEME}://{url}"

    parts = urlsplit(url)
    scheme = parts.scheme.lower()
    netloc = parts.netloc
    if parts.hostname:
        host = parts.hostname
        if ":" in host:
            host = f"[{host}]"
        userinfo = netloc.rpartition("@")[0]
        netloc = f"{userinfo}@{host}" if userinfo else host
        try:
            port = parts.port
        except ValueError:
            port = None
        if port is not None and DEFAULT_PORTS.get(scheme) != port:
            netloc = f"{netloc}:{port}"

    path = parts.path
    if path == "/":
        path = ""
    return urlunsplit((scheme, netloc, path, parts.query, parts.fragment))


def encode_uri(url: str) -> str:
    """按 encodeURI 语义对 URL 做百分号编码."""
    return quote(url, safe=ENCODE_URI_SAFE)


def normalize_and_encode(url: str) -> str:
    """规范化后再编码,表单 url 字段使用."""
    return encode_uri(normalize(url))


__all__ = ["encode_uri", "normalize", "normalize_and_encode"]

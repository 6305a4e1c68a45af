# tests/unit/routes/conftest.py
"""路由测试专用 fixtures.

提供 test_client 和认证会话相关的 fixtures。CSRF 校验在这些测试中关闭,
但表单仍需携带 csrf_token 字段以满足提交解析.
"""

import pytest


@pytest.fixture
def client(app):
    """创建测试客户端."""
    app.config["WTF_CSRF_ENABLED"] = False
    return app.test_client()


@pytest.fixture
def login(client):
    """将指定用户写入会话."""

    def _login(user) -> None:
        with client.session_transaction() as session:
            session["_user_id"] = str(user.id)
            session["_fresh"] = True

    return _login


@pytest.fixture
def auth_client(client, make_user, login):
    """创建已认证的测试客户端."""
    user = make_user("test_author")
    login(user)
    client.user = user
    return client

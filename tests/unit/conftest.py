# tests/unit/conftest.py
"""单元测试专用 fixtures.

提供应用、请求上下文与测试用户相关的通用 fixtures。
"""

import pytest

from libreviews import create_app, db
from libreviews.models.user import User
from libreviews.settings import Settings


@pytest.fixture(autouse=True)
def _unit_test_env(monkeypatch):
    """为 unit tests 强制注入隔离环境变量.

    目标:
    - unit tests 只使用内存 SQLite
    - 避免开发者本机环境变量影响测试稳定性
    """
    monkeypatch.setenv("FLASK_ENV", "testing")
    monkeypatch.setenv("DATABASE_URL", "sqlite:///:memory:")
    monkeypatch.setenv("BCRYPT_LOG_ROUNDS", "4")
    monkeypatch.setenv("SUPPORTED_LOCALES", "en,de")
    monkeypatch.setenv("DEFAULT_LOCALE", "en")
    monkeypatch.setenv("QUESTION_CAPTCHA_FORMS", "register")
    monkeypatch.delenv("QUESTION_CAPTCHA_FILE", raising=False)


@pytest.fixture
def app():
    """创建测试应用实例(表结构已创建)."""
    app = create_app(settings=Settings.load())
    app.config["TESTING"] = True
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def make_user(app):
    """创建并持久化测试用户."""

    def _make_user(username: str = "alice", password: str = "secret-pass", **flags: bool) -> User:
        user = User(username=username, password=password, **flags)
        db.session.add(user)
        db.session.commit()
        return user

    return _make_user

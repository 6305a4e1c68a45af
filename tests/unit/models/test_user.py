import pytest

from libreviews.models.user import User


@pytest.mark.unit
def test_password_is_hashed_and_checked(app) -> None:
    user = User(username="bob", password="correct horse")

    assert user.password != "correct horse"
    assert user.check_password("correct horse") is True
    assert user.check_password("wrong") is False


@pytest.mark.unit
def test_short_password_is_rejected(app) -> None:
    with pytest.raises(ValueError, match="密码长度"):
        User(username="bob", password="abc")

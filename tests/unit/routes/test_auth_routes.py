"""认证路由的单元测试."""

import pytest

from libreviews.models.user import User


def _captcha_form(**overrides) -> dict:
    data = {
        "csrf_token": "token",
        "username": "newbie",
        "password": "long enough",
        "captcha-id": "0",
        "captcha-answer": "captcha answer 1",
    }
    data.update(overrides)
    return data


@pytest.mark.unit
def test_signin_with_valid_credentials(client, make_user) -> None:
    make_user("alice", "secret-pass")

    response = client.post(
        "/signin?next=/review/abc",
        data={"csrf_token": "token", "username": "alice", "password": "secret-pass"},
    )

    assert response.status_code == 302
    assert response.headers["Location"].endswith("/review/abc")
    with client.session_transaction() as session:
        assert session.get("_user_id")


@pytest.mark.unit
def test_signin_with_wrong_password(client, make_user) -> None:
    make_user("alice", "secret-pass")

    response = client.post("/signin", data={"csrf_token": "token", "username": "alice", "password": "nope"})

    assert response.status_code == 401
    assert b"invalid credentials" in response.data


@pytest.mark.unit
def test_signin_ignores_external_next(client, make_user) -> None:
    make_user("alice", "secret-pass")

    response = client.post(
        "/signin?next=https://evil.example",
        data={"csrf_token": "token", "username": "alice", "password": "secret-pass"},
    )

    assert response.headers["Location"] == "/"


@pytest.mark.unit
def test_register_page_shows_captcha_question(client) -> None:
    response = client.get("/register")

    assert response.status_code == 200
    assert b'name="captcha-id"' in response.data


@pytest.mark.unit
def test_register_with_correct_captcha(client) -> None:
    response = client.post("/register", data=_captcha_form())

    assert response.status_code == 302
    assert User.query.filter_by(username="newbie").one()


@pytest.mark.unit
def test_register_with_wrong_captcha(client) -> None:
    response = client.post("/register", data=_captcha_form(**{"captcha-answer": "wrong"}))

    assert response.status_code == 400
    assert b"incorrect captcha answer" in response.data
    assert User.query.count() == 0


@pytest.mark.unit
def test_register_rejects_duplicate_username(client, make_user) -> None:
    make_user("newbie")

    response = client.post("/register", data=_captcha_form())

    assert response.status_code == 400
    assert b"username exists" in response.data


@pytest.mark.unit
def test_signout(auth_client) -> None:
    response = auth_client.post("/signout", data={"csrf_token": "token"})

    assert response.status_code == 302
    with auth_client.session_transaction() as session:
        assert "_user_id" not in session

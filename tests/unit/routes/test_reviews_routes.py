"""评论路由的单元测试."""

import pytest

from libreviews import db
from libreviews.models.review import Review
from libreviews.services.reviews import create_review


def _review_form(**overrides) -> dict:
    data = {
        "csrf_token": "token",
        "review-url": "Example.com/book",
        "review-title": "A <b>good</b> book",
        "review-text": "I *really* liked it.",
        "review-rating": "4",
        "review-language": "en",
        "review-action": "publish",
    }
    data.update(overrides)
    return data


def _create(author, title: str = "Existing review") -> Review:
    review = create_review(
        {
            "url": "http://example.com/thing",
            "title": {"en": title},
            "text": {"en": "Some text"},
            "html": {"en": "<p>Some text</p>"},
            "star_rating": 3,
        },
        author,
        "en",
    )
    db.session.commit()
    return review


@pytest.mark.unit
def test_new_review_requires_signin(client) -> None:
    response = client.get("/new/review")

    assert response.status_code == 401
    assert b"write a review" in response.data


@pytest.mark.unit
def test_new_review_form_renders_for_signed_in_user(auth_client) -> None:
    response = auth_client.get("/new/review")

    assert response.status_code == 200
    assert b'name="review-title"' in response.data


@pytest.mark.unit
def test_publish_creates_review_and_redirects(auth_client) -> None:
    response = auth_client.post("/new/review", data=_review_form())

    assert response.status_code == 302
    review = Review.query.one()
    assert response.headers["Location"].endswith(f"/review/{review.id}")
    assert review.url == "http://example.com/book"
    assert review.title == {"en": "A &lt;b&gt;good&lt;/b&gt; book"}
    assert "<em>really</em>" in review.html["en"]
    assert review.star_rating == 4
    assert review.created_by_id == auth_client.user.id


@pytest.mark.unit
def test_preview_does_not_save(auth_client) -> None:
    response = auth_client.post("/new/review", data=_review_form(**{"review-action": "preview"}))

    assert response.status_code == 200
    assert b"<em>really</em>" in response.data
    assert Review.query.count() == 0


@pytest.mark.unit
@pytest.mark.parametrize("rating", ["0", "6", "2.5", "lots"])
def test_invalid_rating_is_rejected(auth_client, rating) -> None:
    response = auth_client.post("/new/review", data=_review_form(**{"review-rating": rating}))

    assert response.status_code == 200
    assert b"invalid review-rating" in response.data
    assert Review.query.count() == 0


@pytest.mark.unit
def test_missing_title_is_reported(auth_client) -> None:
    response = auth_client.post("/new/review", data=_review_form(**{"review-title": ""}))

    assert b"need review-title" in response.data
    assert Review.query.count() == 0


@pytest.mark.unit
def test_show_review_and_missing_review(client, make_user) -> None:
    review = _create(make_user())

    response = client.get(f"/review/{review.id}")
    assert response.status_code == 200
    assert b"Existing review" in response.data

    missing = client.get("/review/nope")
    assert missing.status_code == 404
    assert b"nope" in missing.data


@pytest.mark.unit
def test_author_can_edit_review(auth_client) -> None:
    review = _create(auth_client.user)

    form = auth_client.get(f"/review/{review.id}/edit")
    assert form.status_code == 200
    assert b"Existing review" in form.data

    response = auth_client.post(
        f"/review/{review.id}/edit",
        data=_review_form(**{"review-title": "Updated", "review-rating": "5"}),
    )
    assert response.status_code == 302
    db.session.refresh(review)
    assert review.title == {"en": "Updated"}
    assert review.star_rating == 5


@pytest.mark.unit
def test_other_user_cannot_edit_or_delete(auth_client, make_user) -> None:
    review = _create(make_user("someone_else"))

    assert auth_client.get(f"/review/{review.id}/edit").status_code == 403
    assert auth_client.post(f"/review/{review.id}/delete", data={"csrf_token": "token"}).status_code == 403
    db.session.refresh(review)
    assert review.rev_deleted is False


@pytest.mark.unit
def test_moderator_can_delete_but_not_edit(client, make_user, login) -> None:
    review = _create(make_user("author"))
    login(make_user("moderator", is_site_moderator=True))

    assert client.get(f"/review/{review.id}/edit").status_code == 403
    assert client.get(f"/review/{review.id}/delete").status_code == 200


@pytest.mark.unit
def test_delete_soft_deletes_and_then_returns_not_found(auth_client) -> None:
    review = _create(auth_client.user)

    response = auth_client.post(f"/review/{review.id}/delete", data={"csrf_token": "token"})
    assert response.status_code == 302

    db.session.refresh(review)
    assert review.rev_deleted is True
    assert review.rev_user_id == auth_client.user.id

    assert auth_client.get(f"/review/{review.id}").status_code == 404
    edit = auth_client.get(f"/review/{review.id}/edit")
    assert edit.status_code == 404
    assert b"edit review" in edit.data


@pytest.mark.unit
def test_index_lists_recent_reviews(client, make_user) -> None:
    _create(make_user(), title="Listed review")

    response = client.get("/")

    assert response.status_code == 200
    assert b"Listed review" in response.data


@pytest.mark.unit
def test_malformed_url_rerenders_form(auth_client) -> None:
    response = auth_client.post("/new/review", data=_review_form(**{"review-url": "[::1"}))

    assert response.status_code == 200
    assert b"invalid review-url" in response.data
    assert Review.query.count() == 0

"""评论服务的单元测试."""

import pytest

from libreviews import db
from libreviews.constants import UnavailableReason
from libreviews.errors import ResourceUnavailableError
from libreviews.services.reviews import create_review, delete_review, get_review, list_recent, update_review


def _values(title: str = "Great book") -> dict:
    return {
        "url": "http://example.com/book",
        "title": {"en": title},
        "text": {"en": "Loved it"},
        "html": {"en": "<p>Loved it</p>\n"},
        "star_rating": 5,
    }


@pytest.mark.unit
def test_create_and_get_review(make_user) -> None:
    author = make_user()

    review = create_review(_values(), author, "en")
    db.session.commit()

    loaded = get_review(review.id)
    assert loaded.title == {"en": "Great book"}
    assert loaded.original_language == "en"
    assert loaded.created_by_id == author.id
    assert loaded.rev_deleted is False


@pytest.mark.unit
def test_get_review_reports_missing_and_deleted(make_user) -> None:
    author = make_user()
    review = create_review(_values(), author, "en")
    delete_review(review, author)
    db.session.commit()

    with pytest.raises(ResourceUnavailableError) as missing:
        get_review("does-not-exist")
    assert missing.value.reason is UnavailableReason.NOT_FOUND

    with pytest.raises(ResourceUnavailableError) as deleted:
        get_review(review.id)
    assert deleted.value.reason is UnavailableReason.DELETED

    assert get_review(review.id, include_deleted=True).rev_user_id == author.id


@pytest.mark.unit
def test_update_review_replaces_only_edited_language(make_user) -> None:
    author = make_user()
    review = create_review(_values(), author, "en")

    update_review(
        review,
        {"url": review.url, "title": {"de": "Tolles Buch"}, "text": {"de": "Toll"}, "html": {"de": "<p>Toll</p>"}, "star_rating": 4},
        "de",
        user=author,
    )
    db.session.commit()

    loaded = get_review(review.id)
    assert loaded.title == {"en": "Great book", "de": "Tolles Buch"}
    assert loaded.html == {"en": "<p>Loved it</p>\n", "de": "<p>Toll</p>"}
    assert loaded.star_rating == 4


@pytest.mark.unit
def test_list_recent_skips_deleted_reviews(make_user) -> None:
    author = make_user()
    kept = create_review(_values("Kept"), author, "en")
    removed = create_review(_values("Removed"), author, "en")
    delete_review(removed, author)
    db.session.commit()

    assert [review.id for review in list_recent(10)] == [kept.id]

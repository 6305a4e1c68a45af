"""评论权限标记的单元测试."""

from types import SimpleNamespace

import pytest

from libreviews.models.review import Review


def _user(user_id: int, **flags: bool) -> SimpleNamespace:
    return SimpleNamespace(
        is_authenticated=True,
        id=user_id,
        is_super_user=flags.get("is_super_user", False),
        is_site_moderator=flags.get("is_site_moderator", False),
    )


@pytest.mark.unit
@pytest.mark.parametrize(
    ("user", "can_edit", "can_delete"),
    [
        (_user(1), True, True),
        (_user(2), False, False),
        (_user(2, is_super_user=True), True, True),
        (_user(2, is_site_moderator=True), False, True),
        (SimpleNamespace(is_authenticated=False), False, False),
        (None, False, False),
    ],
)
def test_populate_user_info(user, can_edit, can_delete) -> None:
    review = Review(created_by_id=1)

    review.populate_user_info(user)

    assert review.user_can_edit is can_edit
    assert review.user_can_delete is can_delete

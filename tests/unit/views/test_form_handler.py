"""FormHandler 分发逻辑的单元测试."""

from types import SimpleNamespace

import pytest

from libreviews.constants import UnavailableReason
from libreviews.errors import FormConfigurationError, ResourceUnavailableError
from libreviews.views.form_handler import ActionSpec, FormHandler, with_pre_flight_check

SIGNED_IN = SimpleNamespace(is_authenticated=True, id=1, is_trusted=False)
TRUSTED = SimpleNamespace(is_authenticated=True, id=2, is_trusted=True)
ANONYMOUS = SimpleNamespace(is_authenticated=False)


class _Thing:
    def __init__(self, *, deleted: bool = False, can_edit: bool = True, can_delete: bool = True) -> None:
        self.rev_deleted = deleted
        self._can_edit = can_edit
        self._can_delete = can_delete
        self.populated_with = None
        self.user_can_edit = False
        self.user_can_delete = False

    def populate_user_info(self, user) -> None:
        self.populated_with = user
        self.user_can_edit = self._can_edit
        self.user_can_delete = self._can_delete


class _ThingHandler(FormHandler):
    title_keys = {"create": "new thing", "edit": "edit thing", "delete": "delete thing"}

    def __init__(self, *, loader=None, **kwargs) -> None:
        self.calls: list[tuple[str, object]] = []
        self._loader = loader or (lambda ctx: _Thing())
        super().__init__(**kwargs)

    def load_data(self, ctx):
        return self._loader(ctx)

    def create_get(self, ctx, resource=None):
        self.calls.append(("create_get", resource))
        return "create form", 200

    def create_post(self, ctx, resource=None):
        self.calls.append(("create_post", resource))
        return "created", 201

    def edit_get(self, ctx, resource):
        self.calls.append(("edit_get", resource))
        return "edit form", 200

    def delete_get(self, ctx, resource):
        self.calls.append(("delete_get", resource))
        return "delete form", 200


@pytest.mark.unit
def test_unknown_action_is_a_configuration_error(app) -> None:
    handler = _ThingHandler(action="publish", user=SIGNED_IN)
    with app.test_request_context("/"), pytest.raises(FormConfigurationError):
        handler.execute()


@pytest.mark.unit
def test_missing_verb_handler_is_a_configuration_error(app) -> None:
    handler = _ThingHandler(action="edit", method="POST", resource_id="abc", user=SIGNED_IN)
    with app.test_request_context("/", method="POST"), pytest.raises(FormConfigurationError):
        handler.execute()
    assert handler.calls == []


@pytest.mark.unit
def test_head_dispatches_to_get_handler(app) -> None:
    handler = _ThingHandler(action="create", method="HEAD", user=SIGNED_IN)
    with app.test_request_context("/", method="HEAD"):
        assert handler.execute() == ("create form", 200)
    assert handler.calls == [("create_get", None)]


@pytest.mark.unit
def test_create_without_loader_invokes_handler_without_resource(app) -> None:
    handler = _ThingHandler(action="create", method="POST", user=SIGNED_IN)
    with app.test_request_context("/", method="POST"):
        assert handler.execute() == ("created", 201)
    assert handler.calls == [("create_post", None)]


@pytest.mark.unit
def test_anonymous_user_gets_signin_required_page(app) -> None:
    handler = _ThingHandler(action="create", user=ANONYMOUS)
    with app.test_request_context("/"):
        body, status = handler.execute()
    assert status == 401
    assert "new thing" in body
    assert handler.calls == []


@pytest.mark.unit
def test_all_checks_run_and_first_failure_response_wins(app) -> None:
    seen: list[str] = []

    def first(ctx):
        seen.append("first")
        ctx.respond(("first failure", 418))
        return False

    def second(ctx):
        seen.append("second")
        ctx.respond(("second failure", 409))
        return False

    def third(ctx):
        seen.append("third")
        return True

    handler = _ThingHandler(action="create", user=SIGNED_IN, extra_checks=[first, second, third])
    with app.test_request_context("/"):
        assert handler.execute() == ("first failure", 418)
    assert seen == ["first", "second", "third"]
    assert handler.calls == []


@pytest.mark.unit
def test_failed_check_without_response_is_a_configuration_error(app) -> None:
    handler = _ThingHandler(action="create", user=SIGNED_IN, extra_checks=[lambda ctx: False])
    with app.test_request_context("/"), pytest.raises(FormConfigurationError):
        handler.execute()


@pytest.mark.unit
def test_deleted_resource_renders_not_found_with_title_and_id(app) -> None:
    handler = _ThingHandler(
        action="edit",
        resource_id="thing-42",
        user=SIGNED_IN,
        loader=lambda ctx: _Thing(deleted=True),
    )
    with app.test_request_context("/"):
        body, status = handler.execute()
    assert status == 404
    assert "edit thing" in body
    assert "thing-42" in body
    assert handler.calls == []


@pytest.mark.unit
def test_unavailable_resource_renders_not_found(app) -> None:
    def loader(ctx):
        raise ResourceUnavailableError(ctx.resource_id, reason=UnavailableReason.NOT_FOUND)

    handler = _ThingHandler(action="delete", resource_id="missing", user=SIGNED_IN, loader=loader)
    with app.test_request_context("/"):
        body, status = handler.execute()
    assert status == 404
    assert "missing" in body
    assert handler.calls == []


@pytest.mark.unit
def test_other_loader_errors_propagate(app) -> None:
    def loader(ctx):
        raise RuntimeError("database is down")

    handler = _ThingHandler(action="edit", resource_id="x", user=SIGNED_IN, loader=loader)
    with app.test_request_context("/"), pytest.raises(RuntimeError, match="database is down"):
        handler.execute()


@pytest.mark.unit
def test_failed_permission_check_prevents_handler(app) -> None:
    thing = _Thing(can_edit=False)
    handler = _ThingHandler(action="edit", resource_id="x", user=SIGNED_IN, loader=lambda ctx: thing)
    with app.test_request_context("/"):
        body, status = handler.execute()
    assert status == 403
    assert "edit thing" in body
    assert thing.populated_with is SIGNED_IN
    assert handler.calls == []


@pytest.mark.unit
def test_permitted_user_reaches_handler_with_resource(app) -> None:
    thing = _Thing(can_delete=True)
    handler = _ThingHandler(action="delete", resource_id="x", user=SIGNED_IN, loader=lambda ctx: thing)
    with app.test_request_context("/"):
        assert handler.execute() == ("delete form", 200)
    assert handler.calls == [("delete_get", thing)]


@pytest.mark.unit
def test_trusted_check_renders_permission_error_for_untrusted_users(app) -> None:
    handler = _ThingHandler(action="create", user=SIGNED_IN)
    handler.actions = with_pre_flight_check(handler.actions, handler.user_is_trusted)
    with app.test_request_context("/"):
        body, status = handler.execute()
    assert status == 403
    assert "must be trusted" in body

    trusted_handler = _ThingHandler(action="create", user=TRUSTED)
    trusted_handler.actions = with_pre_flight_check(trusted_handler.actions, trusted_handler.user_is_trusted)
    with app.test_request_context("/"):
        assert trusted_handler.execute() == ("create form", 200)


@pytest.mark.unit
def test_with_pre_flight_check_returns_new_table() -> None:
    def check(ctx):
        return True

    original = {"create": ActionSpec(handlers={}, pre_flight_checks=())}

    updated = with_pre_flight_check(original, check)

    assert original["create"].pre_flight_checks == ()
    assert updated["create"].pre_flight_checks == (check,)

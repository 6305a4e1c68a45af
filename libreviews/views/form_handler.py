"""通用的创建/编辑/删除表单处理器.

FormHandler 根据 (动作, HTTP 方法) 分发到子类提供的处理函数:
- 每个动作先执行全部预检(默认要求登录),任一失败即返回预检渲染的响应
- 编辑与删除会先加载资源,资源不存在或已软删除时渲染 404
- 加载成功后执行资源权限检查,通过后才调用处理函数

动作表在构造时一次性组装,之后不再修改.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field, replace
from typing import Any, ClassVar

from flask import Request, request
from flask_login import current_user

from libreviews.constants import FormAction, HttpMethod, UnavailableReason
from libreviews.errors import FormConfigurationError, ResourceUnavailableError
from libreviews.types import RouteReturn
from libreviews.utils import render
from libreviews.utils.structlog_config import get_form_logger

MUST_BE_TRUSTED_KEY = "must be trusted"


@dataclass(slots=True)
class FormContext:
    """单个请求的处理上下文.

    Attributes:
        action: 当前动作.
        method: 归一化后的 HTTP 方法(HEAD 视为 GET).
        resource_id: 编辑/删除时的资源 ID.
        request: 当前请求.
        user: 当前用户,未登录时为匿名用户对象.
        title_key: 当前动作的页面标题键.
        response: 预检或权限检查渲染的响应,先写入者生效.

    """

    action: str
    method: str
    resource_id: str | None
    request: Request
    user: Any
    title_key: str | None = None
    response: RouteReturn | None = field(default=None)

    def respond(self, response: RouteReturn) -> None:
        """写入响应,已有响应时保持不变."""
        if self.response is None:
            self.response = response


Check = Callable[[FormContext], bool]
PermissionCheck = Callable[[FormContext, Any], bool]
DataLoader = Callable[[FormContext], Any]
ActionHandler = Callable[[FormContext, Any], RouteReturn]


@dataclass(frozen=True, slots=True)
class ActionSpec:
    """单个动作的配置.

    Attributes:
        handlers: HTTP 方法到处理函数的映射.
        pre_flight_checks: 调用处理函数前依次执行的预检.
        load_data: 资源加载函数,为空时处理函数不接收资源.
        resource_permission_check: 资源加载后的权限检查.
        title_key: 页面标题键.

    """

    handlers: Mapping[str, ActionHandler]
    pre_flight_checks: tuple[Check, ...] = ()
    load_data: DataLoader | None = None
    resource_permission_check: PermissionCheck | None = None
    title_key: str | None = None


ActionTable = Mapping[str, ActionSpec]


def with_pre_flight_check(actions: ActionTable, check: Check) -> dict[str, ActionSpec]:
    """返回为每个动作追加预检后的新动作表."""
    return {
        name: replace(spec, pre_flight_checks=(*spec.pre_flight_checks, check))
        for name, spec in actions.items()
    }


class FormHandler:
    """创建/编辑/删除表单的通用处理器.

    子类提供 ``create_get``/``create_post``/``edit_get``/``edit_post``/
    ``delete_get``/``delete_post`` 中需要的处理函数、``load_data`` 以及
    ``title_keys``.缺少处理函数的 (动作, 方法) 组合在执行时视为配置错误.

    Args:
        action: ``create``/``edit``/``delete`` 之一.
        method: HTTP 方法.
        resource_id: 编辑/删除的资源 ID.
        extra_checks: 追加到每个动作的预检.
        user: 当前用户,默认取 Flask-Login 的 ``current_user``.

    """

    title_keys: ClassVar[Mapping[str, str]] = {}

    def __init__(
        self,
        *,
        action: str = FormAction.CREATE.value,
        method: str = HttpMethod.GET,
        resource_id: str | None = None,
        extra_checks: Iterable[Check] = (),
        user: Any = None,
    ) -> None:
        self.action = action.value if isinstance(action, FormAction) else action
        self.method = HttpMethod.normalize(method)
        self.resource_id = resource_id
        self.user = user
        actions: ActionTable = self.build_actions()
        for check in extra_checks:
            actions = with_pre_flight_check(actions, check)
        self.actions: ActionTable = dict(actions)
        self.logger = get_form_logger()

    def build_actions(self) -> dict[str, ActionSpec]:
        """组装默认动作表,子类可覆盖."""
        return {
            FormAction.CREATE.value: ActionSpec(
                handlers=self._collect_handlers(FormAction.CREATE.value),
                pre_flight_checks=(self.user_is_signed_in,),
                title_key=self.title_keys.get(FormAction.CREATE.value),
            ),
            FormAction.EDIT.value: ActionSpec(
                handlers=self._collect_handlers(FormAction.EDIT.value),
                pre_flight_checks=(self.user_is_signed_in,),
                load_data=self.load_data,
                resource_permission_check=self.user_can_edit,
                title_key=self.title_keys.get(FormAction.EDIT.value),
            ),
            FormAction.DELETE.value: ActionSpec(
                handlers=self._collect_handlers(FormAction.DELETE.value),
                pre_flight_checks=(self.user_is_signed_in,),
                load_data=self.load_data,
                resource_permission_check=self.user_can_delete,
                title_key=self.title_keys.get(FormAction.DELETE.value),
            ),
        }

    def _collect_handlers(self, action: str) -> dict[str, ActionHandler]:
        handlers: dict[str, ActionHandler] = {}
        for method in HttpMethod.FORM_METHODS:
            handler = getattr(self, f"{action}_{method.lower()}", None)
            if callable(handler):
                handlers[method] = handler
        return handlers

    def load_data(self, ctx: FormContext) -> Any:
        """加载编辑/删除的目标资源,由子类实现.

        Raises:
            ResourceUnavailableError: 资源不存在或已删除.

        """
        raise FormConfigurationError(f"{self.__class__.__name__} 未实现 load_data")

    def build_context(self, spec: ActionSpec) -> FormContext:
        user = self.user if self.user is not None else current_user._get_current_object()
        return FormContext(
            action=self.action,
            method=self.method,
            resource_id=self.resource_id,
            request=request._get_current_object(),
            user=user,
            title_key=spec.title_key,
        )

    def execute(self) -> RouteReturn:
        """执行当前 (动作, 方法) 对应的处理流程.

        Returns:
            处理函数或预检/权限检查渲染的响应.

        Raises:
            FormConfigurationError: 未知动作,或该方法没有处理函数.

        """
        spec = self.actions.get(self.action)
        if spec is None:
            raise FormConfigurationError(f"无法识别的表单动作: {self.action}")
        handler = spec.handlers.get(self.method)
        if handler is None:
            raise FormConfigurationError(f"表单动作 {self.action} 未定义 {self.method} 处理函数")

        ctx = self.build_context(spec)

        # 预检负责渲染失败响应,全部执行完再决定是否继续
        may_proceed = True
        for check in spec.pre_flight_checks:
            if not check(ctx):
                may_proceed = False
        if not may_proceed:
            self.logger.info(
                "表单预检未通过",
                module="forms",
                form_action=self.action,
                method=self.method,
                resource_id=self.resource_id,
            )
            return self._require_response(ctx)

        if spec.load_data is None:
            return handler(ctx, None)

        try:
            resource = spec.load_data(ctx)
            if getattr(resource, "rev_deleted", False):
                raise ResourceUnavailableError(self.resource_id, reason=UnavailableReason.DELETED)
        except ResourceUnavailableError as exc:
            self.logger.info(
                "表单资源不可用",
                module="forms",
                form_action=self.action,
                resource_id=self.resource_id,
                reason=exc.reason.value,
            )
            return render.resource_not_found(title_key=spec.title_key, resource_id=self.resource_id)

        if spec.resource_permission_check is not None and not spec.resource_permission_check(ctx, resource):
            self.logger.info(
                "表单资源权限检查未通过",
                module="forms",
                form_action=self.action,
                resource_id=self.resource_id,
            )
            return self._require_response(ctx)

        return handler(ctx, resource)

    def _require_response(self, ctx: FormContext) -> RouteReturn:
        if ctx.response is None:
            raise FormConfigurationError(f"表单动作 {self.action} 的检查失败但未生成响应")
        return ctx.response

    # ------------------------------------------------------------------ #
    # 权限检查
    # ------------------------------------------------------------------ #
    def user_is_signed_in(self, ctx: FormContext) -> bool:
        if not getattr(ctx.user, "is_authenticated", False):
            ctx.respond(render.signin_required(title_key=ctx.title_key))
            return False
        return True

    def user_is_trusted(self, ctx: FormContext) -> bool:
        if not getattr(ctx.user, "is_authenticated", False) or not getattr(ctx.user, "is_trusted", False):
            ctx.respond(render.permission_error(title_key=ctx.title_key, details_key=MUST_BE_TRUSTED_KEY))
            return False
        return True

    def user_can_edit(self, ctx: FormContext, resource: Any) -> bool:
        return self._user_can(FormAction.EDIT, ctx, resource)

    def user_can_delete(self, ctx: FormContext, resource: Any) -> bool:
        return self._user_can(FormAction.DELETE, ctx, resource)

    def _user_can(self, action: FormAction, ctx: FormContext, resource: Any) -> bool:
        resource.populate_user_info(ctx.user)
        if action is FormAction.EDIT and resource.user_can_edit:
            return True
        if action is FormAction.DELETE and resource.user_can_delete:
            return True
        ctx.respond(render.permission_error(title_key=ctx.title_key))
        return False


__all__ = [
    "ActionHandler",
    "ActionSpec",
    "ActionTable",
    "Check",
    "DataLoader",
    "FormContext",
    "FormHandler",
    "PermissionCheck",
    "with_pre_flight_check",
]

"""lib.reviews - 用户认证路由."""

from flask import Blueprint, flash, redirect, request, url_for
from flask_babel import get_locale, gettext
from flask_login import current_user, login_required, login_user, logout_user

from libreviews import db
from libreviews.constants import ErrorMessages, FlashCategory, HttpMethod, SuccessMessages
from libreviews.forms.definitions.auth import (
    REGISTER_FORM,
    REGISTER_FORM_KEY,
    SIGNIN_FORM,
    SIGNIN_FORM_KEY,
)
from libreviews.forms.submission import parse_submission
from libreviews.models.user import MIN_USER_PASSWORD_LENGTH, User
from libreviews.services.captcha import get_question_captcha_service
from libreviews.types import RouteReturn
from libreviews.utils import render
from libreviews.utils.redirect_safety import resolve_safe_redirect_target
from libreviews.utils.structlog_config import get_auth_logger

# 创建蓝图
auth_bp = Blueprint("auth", __name__)

# 获取认证日志记录器
auth_logger = get_auth_logger()


def signin() -> RouteReturn:
    """用户登录页面.

    GET 请求渲染登录页面,POST 请求处理登录逻辑.

    Query Parameters:
        next: 登录成功后的重定向地址,可选.

    """
    if current_user.is_authenticated:
        return redirect(url_for("main.index"))

    if request.method != HttpMethod.POST:
        return render.template("auth/signin.html", title_key="sign in", username="")

    result = parse_submission(request.form, form_def=SIGNIN_FORM, form_key=SIGNIN_FORM_KEY, language=str(get_locale()))
    username = str(result.form_values.get("username", "")).strip()
    if not result.is_valid:
        return render.template("auth/signin.html", status=400, title_key="sign in", username=username)

    user = User.query.filter_by(username=username).first()
    if user is None or not user.check_password(result.form_values["password"]):
        auth_logger.warning("页面登录失败:用户名或密码错误", username=username, ip_address=request.remote_addr)
        flash(gettext(ErrorMessages.INVALID_CREDENTIALS), FlashCategory.PAGE_ERRORS)
        return render.template("auth/signin.html", status=401, title_key="sign in", username=username)

    login_user(user, remember=True)
    auth_logger.info("用户页面登录成功", module="auth", user_id=user.id, username=user.username)
    flash(gettext(SuccessMessages.SIGNED_IN), FlashCategory.PAGE_MESSAGES)
    return redirect(resolve_safe_redirect_target(request.args.get("next"), fallback=url_for("main.index")))


def signout() -> RouteReturn:
    """用户登出."""
    auth_logger.info("用户登出", user_id=current_user.id, username=current_user.username)
    logout_user()
    flash(gettext(SuccessMessages.SIGNED_OUT), FlashCategory.PAGE_MESSAGES)
    return redirect(url_for("main.index"))


def _render_register(*, username: str = "", status: int = 200) -> RouteReturn:
    return render.template(
        "auth/register.html",
        status=status,
        title_key="register",
        username=username,
        question_captcha=get_question_captcha_service().get_question_captcha(REGISTER_FORM_KEY),
    )


def register() -> RouteReturn:
    """注册新用户,表单启用问题验证码时需回答正确."""
    if current_user.is_authenticated:
        return redirect(url_for("main.index"))

    if request.method != HttpMethod.POST:
        return _render_register()

    result = parse_submission(
        request.form,
        form_def=REGISTER_FORM,
        form_key=REGISTER_FORM_KEY,
        language=str(get_locale()),
    )
    username = str(result.form_values.get("username", "")).strip()
    if not result.is_valid:
        return _render_register(username=username, status=400)

    if User.query.filter_by(username=username).first() is not None:
        flash(gettext(ErrorMessages.USERNAME_EXISTS), FlashCategory.PAGE_ERRORS)
        return _render_register(username=username, status=400)

    password = result.form_values["password"]
    if len(password) < MIN_USER_PASSWORD_LENGTH:
        flash(gettext(ErrorMessages.PASSWORD_TOO_SHORT), FlashCategory.PAGE_ERRORS)
        return _render_register(username=username, status=400)

    user = User(username=username, password=password)
    db.session.add(user)
    db.session.commit()
    login_user(user, remember=True)
    auth_logger.info("新用户注册", module="auth", user_id=user.id, username=user.username)
    flash(gettext(SuccessMessages.REGISTERED), FlashCategory.PAGE_MESSAGES)
    return redirect(url_for("main.index"))


auth_bp.add_url_rule("/signin", view_func=signin, methods=["GET", "POST"])
auth_bp.add_url_rule("/signout", view_func=login_required(signout), methods=["POST"])
auth_bp.add_url_rule("/register", view_func=register, methods=["GET", "POST"])

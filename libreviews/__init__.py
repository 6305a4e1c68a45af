"""lib.reviews - Flask 应用初始化.

基于Flask的社区评论站点.
"""

import logging
import traceback
from functools import lru_cache
from importlib import import_module
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

import click
from flask import Blueprint, Flask, g, jsonify, request
from flask.typing import ResponseReturnValue
from flask_babel import Babel, get_locale, gettext
from flask_bcrypt import Bcrypt
from flask_login import LoginManager, current_user
from flask_sqlalchemy import SQLAlchemy
from flask_wtf.csrf import CSRFError, CSRFProtect
from werkzeug.exceptions import HTTPException

from libreviews.constants import ErrorMessages, FlashCategory, HttpStatus
from libreviews.errors import AppError, NotFoundError, map_exception_to_status
from libreviews.i18n.locale import select_locale, supported_locales
from libreviews.infra.logging.request_middleware import register_request_logging
from libreviews.services.captcha import init_question_captcha
from libreviews.settings import Settings
from libreviews.utils import render
from libreviews.utils.markdown import markdown_filter
from libreviews.utils.mlstring import resolve as resolve_mlstring
from libreviews.utils.structlog_config import (
    ErrorContext,
    configure_structlog,
    enhanced_error_handler,
    get_system_logger,
)

if TYPE_CHECKING:
    from libreviews.models.user import User

# 初始化扩展
db = SQLAlchemy()
bcrypt = Bcrypt()
login_manager = LoginManager()
csrf = CSRFProtect()
babel = Babel()


@lru_cache(maxsize=1)
def get_user_model() -> type["User"]:
    """延迟加载 User 模型,避免循环导入."""
    return import_module("libreviews.models.user").User


def create_app(*, settings: Settings | None = None) -> Flask:
    """创建Flask应用实例.

    Args:
        settings: 可选的配置对象,用于测试或多环境启动.

    Returns:
        Flask: Flask应用实例

    """
    resolved_settings = settings or Settings.load()
    app = Flask(__name__)

    # 配置应用
    configure_app(app, resolved_settings)

    # 配置会话安全
    configure_security(app, resolved_settings)

    # 初始化扩展
    initialize_extensions(app, resolved_settings)

    # 注册蓝图
    configure_blueprints(app)

    # 配置日志
    configure_logging(app)

    # 配置统一日志系统
    configure_structlog(app)
    register_request_logging(app)

    # 设置全局日志级别
    log_level_name = str(app.config.get("LOG_LEVEL", "INFO"))
    logging.getLogger().setLevel(getattr(logging, log_level_name, logging.INFO))

    # 注册错误处理器
    configure_error_handlers(app)

    # 配置模板过滤器与上下文
    configure_template_filters(app)
    configure_template_context(app)

    configure_cli(app)

    return app


def configure_app(app: Flask, settings: Settings) -> None:
    """写入 Settings 提供的配置.

    Args:
        app: Flask 应用实例.
        settings: 统一配置对象,包含环境变量解析、默认值与校验结果.

    """
    app.config.from_mapping(settings.to_flask_config())
    app.config.setdefault("APPLICATION_ROOT", "/")


def configure_security(app: Flask, settings: Settings) -> None:
    """配置会话安全参数与 Cookie 选项."""
    app.config["PERMANENT_SESSION_LIFETIME"] = settings.session_lifetime_seconds
    app.config["SESSION_COOKIE_SECURE"] = settings.is_production
    app.config["SESSION_COOKIE_HTTPONLY"] = True
    app.config["SESSION_COOKIE_SAMESITE"] = "Lax"


def initialize_extensions(app: Flask, settings: Settings) -> None:
    """初始化数据库、登录、CSRF、国际化等 Flask 扩展.

    Args:
        app: Flask 应用实例.
        settings: 统一配置对象,用于扩展初始化参数注入.

    """
    # 初始化数据库
    db.init_app(app)

    # 初始化CSRF保护
    csrf.init_app(app)

    # 初始化密码加密
    bcrypt.init_app(app)

    # 初始化国际化
    babel.init_app(app, locale_selector=select_locale)

    # 初始化登录管理
    login_manager.init_app(app)
    login_manager.login_view = "auth.signin"
    login_manager.login_message = ErrorMessages.AUTHENTICATION_REQUIRED
    login_manager.login_message_category = FlashCategory.PAGE_ERRORS

    # 会话安全配置
    login_manager.session_protection = "basic"
    login_manager.remember_cookie_duration = settings.session_lifetime_seconds
    login_manager.remember_cookie_secure = settings.is_production
    login_manager.remember_cookie_httponly = True

    # 用户加载器
    @login_manager.user_loader
    def load_user(user_id: str) -> "User | None":
        if not str(user_id).isdigit():
            return None
        return db.session.get(get_user_model(), int(user_id))

    # 问题验证码
    init_question_captcha(app)


def configure_blueprints(app: Flask) -> None:
    """注册所有蓝图以暴露路由."""
    blueprint_specs: list[tuple[str, str, str | None]] = [
        ("libreviews.routes.main", "main_bp", None),
        ("libreviews.routes.auth", "auth_bp", None),
        ("libreviews.routes.reviews", "reviews_bp", None),
        ("libreviews.routes.languages", "languages_bp", None),
    ]

    blueprints: list[tuple[Blueprint, str | None]] = []
    for module_path, attr_name, prefix in blueprint_specs:
        module = import_module(module_path)
        blueprint = getattr(module, attr_name)
        blueprints.append((blueprint, prefix))

    for blueprint, prefix in blueprints:
        if prefix:
            app.register_blueprint(blueprint, url_prefix=prefix)
        else:
            app.register_blueprint(blueprint)


def configure_logging(app: Flask) -> None:
    """配置日志系统与文件处理器."""
    if not app.debug and not app.testing:
        # 创建日志目录
        log_path = Path(app.config["LOG_FILE"])
        log_path.parent.mkdir(parents=True, exist_ok=True)

        # 配置文件日志处理器
        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=app.config["LOG_MAX_SIZE"],
            backupCount=app.config["LOG_BACKUP_COUNT"],
        )
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]"),
        )
        file_handler.setLevel(getattr(logging, app.config["LOG_LEVEL"]))
        app.logger.addHandler(file_handler)

        app.logger.setLevel(getattr(logging, app.config["LOG_LEVEL"]))
        app.logger.info("lib.reviews 应用启动")


def _wants_json() -> bool:
    """请求体为 JSON 或客户端首选 JSON 时返回 True."""
    return request.is_json or request.accept_mimetypes.best == "application/json"


def _show_error_details(app: Flask) -> bool:
    """调试模式或受信任用户可查看错误详情."""
    if app.debug:
        return True
    return bool(getattr(current_user, "is_authenticated", False) and getattr(current_user, "is_trusted", False))


def configure_error_handlers(app: Flask) -> None:
    """注册统一错误处理.

    - HTTP 错误按状态码渲染错误页,404 使用独立模板
    - CSRF 校验失败渲染 400 错误页
    - 其余异常记录 error_id 后渲染 500 页面,调试模式或受信任用户可见堆栈
    - JSON 请求返回结构化载荷

    """
    @app.errorhandler(CSRFError)
    def handle_csrf_error(error: CSRFError) -> ResponseReturnValue:
        get_system_logger().warning("CSRF 校验失败", module="security", path=request.path, reason=error.description)
        if _wants_json():
            payload = enhanced_error_handler(error, ErrorContext(error, request))
            return jsonify(payload), HttpStatus.BAD_REQUEST
        return render.template(
            "error.html",
            status=HttpStatus.BAD_REQUEST,
            title_key=ErrorMessages.CSRF_FAILED,
            message=gettext(ErrorMessages.CSRF_FAILED),
            status_code=HttpStatus.BAD_REQUEST,
        )

    @app.errorhandler(HTTPException)
    def handle_http_exception(error: HTTPException) -> ResponseReturnValue:
        status_code = error.code or HttpStatus.INTERNAL_SERVER_ERROR
        if _wants_json():
            return jsonify({"error": True, "status": status_code, "message": error.description}), status_code
        if status_code == HttpStatus.NOT_FOUND:
            return render.resource_not_found(title_key=None, resource_id=None)
        return render.template(
            "error.html",
            status=status_code,
            title_key=error.name,
            message=error.description,
            status_code=status_code,
        )

    @app.errorhandler(Exception)
    def handle_global_exception(error: Exception) -> ResponseReturnValue:
        """全局错误处理."""
        payload = enhanced_error_handler(error, ErrorContext(error, request))
        status_code = map_exception_to_status(error)
        g._request_error_id = payload["error_id"]
        if _wants_json():
            return jsonify(payload), status_code
        if isinstance(error, NotFoundError):
            return render.resource_not_found(title_key=None, resource_id=getattr(error, "resource_id", None))

        show_details = _show_error_details(app)
        if isinstance(error, AppError) and error.recoverable:
            public_message = gettext(error.message)
        else:
            public_message = gettext(ErrorMessages.INTERNAL_ERROR)
        return render.template(
            "error.html",
            status=status_code,
            title_key=ErrorMessages.INTERNAL_ERROR,
            message=str(error) if show_details else public_message,
            error_id=payload["error_id"],
            details="".join(traceback.format_exception(error)) if show_details else None,
            status_code=status_code,
        )


def configure_template_filters(app: Flask) -> None:
    """注册多语言字符串与 Markdown 模板过滤器."""
    @app.template_filter("mlstring")
    def mlstring_filter(value: dict[str, str] | None) -> str:
        """按当前语言解析多语言字符串."""
        return resolve_mlstring(value, str(get_locale() or app.config["BABEL_DEFAULT_LOCALE"])) or ""

    app.add_template_filter(markdown_filter, "markdown")


def configure_template_context(app: Flask) -> None:
    """注入模板公共变量."""
    @app.context_processor
    def inject_page_context() -> dict[str, object]:
        return {
            "current_locale": str(get_locale() or app.config["BABEL_DEFAULT_LOCALE"]),
            "supported_locales": supported_locales(),
            "app_name": app.config.get("APP_NAME"),
            "flash_error_categories": FlashCategory.ERROR_CATEGORIES,
            "get_bootstrap_class": FlashCategory.get_bootstrap_class,
        }


def configure_cli(app: Flask) -> None:
    """注册命令行命令."""

    @app.cli.command("init-db")
    def init_db_command() -> None:
        """创建全部数据表."""
        db.create_all()
        get_system_logger().info("数据表已创建", module="cli")
        click.echo("Initialized the database.")


from libreviews.models import Review, User  # noqa: F401, E402

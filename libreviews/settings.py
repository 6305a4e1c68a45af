"""lib.reviews - 统一配置读取与校验.

目标:
- 将环境变量读取、默认值、校验集中到单一入口,避免散落在各模块中重复解析.
- `create_app(settings=...)` 只消费 Settings,不再直接读取环境变量.

说明:
- Settings 使用 `pydantic-settings` 的 `BaseSettings` 从环境变量与本地 `.env`(可选)读取配置.
- 生产环境默认更严格: 缺失关键密钥/连接串会直接抛出 ValueError.
"""

from __future__ import annotations

import json
import logging
import secrets
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

PACKAGE_ROOT = Path(__file__).resolve().parent
PROJECT_ROOT = PACKAGE_ROOT.parent
DOTENV_PATH = PROJECT_ROOT / ".env"

DEFAULT_ENVIRONMENT = "development"
APP_VERSION = "1.0.0"

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FILE = "userdata/logs/app.log"
DEFAULT_LOG_MAX_SIZE_BYTES = 10 * 1024 * 1024
DEFAULT_LOG_BACKUP_COUNT = 5

DEFAULT_SESSION_COOKIE_DURATION_MINUTES = 30 * 24 * 60
DEFAULT_SESSION_COOKIE_NAME = "libreviews_session"

DEFAULT_SUPPORTED_LOCALES = ("en", "de")
DEFAULT_LOCALE = "en"

DEFAULT_QUESTION_CAPTCHA_FORMS = ("register",)
DEFAULT_QUESTION_CAPTCHA_FILE = str(PACKAGE_ROOT / "config" / "question_captchas.yaml")

DEFAULT_BCRYPT_LOG_ROUNDS = 12
BCRYPT_LOG_ROUNDS_MIN = 4

DEFAULT_RECENT_REVIEWS_LIMIT = 20


def _parse_csv(raw: str) -> tuple[str, ...]:
    parts = [item.strip() for item in raw.split(",")]
    return tuple(item for item in parts if item)


def _resolve_sqlite_fallback_url() -> str:
    db_path = PROJECT_ROOT / "userdata" / "libreviews_dev.db"
    db_path.parent.mkdir(parents=True, exist_ok=True)
    return f"sqlite:///{db_path.absolute()}"


class Settings(BaseSettings):
    """应用运行时设置集合."""

    model_config = SettingsConfigDict(
        env_ignore_empty=True,
        extra="ignore",
        frozen=True,
        str_strip_whitespace=True,
        # CSV 字段(如 SUPPORTED_LOCALES)由 field_validator 解析,关闭自动 JSON 解码.
        enable_decoding=False,
    )

    environment: str = Field(default=DEFAULT_ENVIRONMENT, validation_alias="FLASK_ENV")
    debug: bool = Field(default=False, validation_alias="FLASK_DEBUG")

    app_name: str = Field(default="lib.reviews", validation_alias="APP_NAME")
    app_version: str = APP_VERSION

    secret_key: str = Field(default="", validation_alias="SECRET_KEY")
    database_url: str = Field(default="", validation_alias="DATABASE_URL")

    log_level: str = Field(default=DEFAULT_LOG_LEVEL, validation_alias="LOG_LEVEL")
    log_file: str = Field(default=DEFAULT_LOG_FILE, validation_alias="LOG_FILE")
    log_max_size_bytes: int = Field(default=DEFAULT_LOG_MAX_SIZE_BYTES, validation_alias="LOG_MAX_SIZE")
    log_backup_count: int = Field(default=DEFAULT_LOG_BACKUP_COUNT, validation_alias="LOG_BACKUP_COUNT")

    session_cookie_duration_minutes: int = Field(
        default=DEFAULT_SESSION_COOKIE_DURATION_MINUTES,
        validation_alias="SESSION_COOKIE_DURATION",
    )

    supported_locales: tuple[str, ...] = Field(
        default=DEFAULT_SUPPORTED_LOCALES,
        validation_alias="SUPPORTED_LOCALES",
    )
    default_locale: str = Field(default=DEFAULT_LOCALE, validation_alias="DEFAULT_LOCALE")

    question_captcha_forms: tuple[str, ...] = Field(
        default=DEFAULT_QUESTION_CAPTCHA_FORMS,
        validation_alias="QUESTION_CAPTCHA_FORMS",
    )
    question_captcha_file: str = Field(
        default=DEFAULT_QUESTION_CAPTCHA_FILE,
        validation_alias="QUESTION_CAPTCHA_FILE",
    )

    bcrypt_log_rounds: int = Field(default=DEFAULT_BCRYPT_LOG_ROUNDS, validation_alias="BCRYPT_LOG_ROUNDS")
    recent_reviews_limit: int = Field(default=DEFAULT_RECENT_REVIEWS_LIMIT, validation_alias="RECENT_REVIEWS_LIMIT")

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        return value.upper()

    @field_validator("supported_locales", "question_captcha_forms", mode="before")
    @classmethod
    def _parse_csv_values(cls, value: object) -> object:
        if value is None:
            return None
        if isinstance(value, str):
            raw = value.strip()
            if not raw:
                return ()
            if raw.startswith("["):
                parsed = json.loads(raw)
                if not isinstance(parsed, list):
                    raise ValueError("must be a JSON array or a comma-separated string")
                return tuple(item for item in (str(v).strip() for v in parsed) if item)
            return _parse_csv(raw)
        if isinstance(value, (list, tuple, set)):
            return tuple(text for text in (str(item).strip() for item in value) if text)
        return value

    @property
    def is_production(self) -> bool:
        """当前是否为生产环境."""
        return self.environment.strip().lower() == "production"

    @property
    def is_testing(self) -> bool:
        """当前是否为测试环境."""
        return self.environment.strip().lower() in {"testing", "test"}

    @property
    def session_lifetime_seconds(self) -> int:
        """会话 Cookie 有效期(秒)."""
        return self.session_cookie_duration_minutes * 60

    @property
    def sqlalchemy_engine_options(self) -> dict[str, object]:
        """生成 SQLAlchemy Engine 配置选项."""
        if self.database_url.startswith("sqlite"):
            return {"pool_pre_ping": True, "connect_args": {"check_same_thread": False}}
        return {"pool_pre_ping": True, "pool_recycle": 300, "echo": bool(self.debug)}

    def to_flask_config(self) -> dict[str, object]:
        """转换为 Flask app.config 可写入的配置字典."""
        return {
            "ENV": self.environment,
            "DEBUG": self.debug,
            "TESTING": self.is_testing,
            "APP_NAME": self.app_name,
            "APP_VERSION": self.app_version,
            "SECRET_KEY": self.secret_key,
            "SQLALCHEMY_DATABASE_URI": self.database_url,
            "SQLALCHEMY_TRACK_MODIFICATIONS": False,
            "SQLALCHEMY_ENGINE_OPTIONS": dict(self.sqlalchemy_engine_options),
            "LOG_LEVEL": self.log_level,
            "LOG_FILE": self.log_file,
            "LOG_MAX_SIZE": self.log_max_size_bytes,
            "LOG_BACKUP_COUNT": self.log_backup_count,
            "PERMANENT_SESSION_LIFETIME": self.session_lifetime_seconds,
            "SESSION_COOKIE_NAME": DEFAULT_SESSION_COOKIE_NAME,
            "BABEL_DEFAULT_LOCALE": self.default_locale,
            "SUPPORTED_LOCALES": list(self.supported_locales),
            "QUESTION_CAPTCHA_FORMS": list(self.question_captcha_forms),
            "QUESTION_CAPTCHA_FILE": self.question_captcha_file,
            "BCRYPT_LOG_ROUNDS": self.bcrypt_log_rounds,
            "RECENT_REVIEWS_LIMIT": self.recent_reviews_limit,
        }

    @classmethod
    def load(cls) -> Settings:
        """从环境变量加载 Settings 并执行必要校验."""
        load_dotenv(dotenv_path=DOTENV_PATH if DOTENV_PATH.exists() else None, override=False)
        return cls()

    @model_validator(mode="after")
    def _apply_defaults_and_validate(self) -> Settings:
        environment_normalized = self.environment.strip().lower()

        debug = self._resolve_debug(environment_normalized)
        self._ensure_secret_key(debug)
        self._ensure_database_url(environment_normalized)

        self._validate()
        return self

    def _resolve_debug(self, environment_normalized: str) -> bool:
        if "debug" in self.model_fields_set:
            return bool(self.debug)
        debug = environment_normalized == "development"
        object.__setattr__(self, "debug", debug)
        return debug

    def _ensure_secret_key(self, debug: bool) -> None:
        if self.secret_key:
            return
        if self.is_production:
            raise ValueError("SECRET_KEY environment variable must be set in production")
        object.__setattr__(self, "secret_key", secrets.token_urlsafe(32))
        if debug:
            logger.warning("⚠️  开发环境使用随机生成的SECRET_KEY,生产环境请设置环境变量")

    def _ensure_database_url(self, environment_normalized: str) -> None:
        if self.database_url:
            return
        if environment_normalized == "production":
            raise ValueError("DATABASE_URL environment variable must be set in production")

        object.__setattr__(self, "database_url", _resolve_sqlite_fallback_url())
        if environment_normalized not in {"testing", "test"}:
            logger.warning("⚠️  未设置 DATABASE_URL, 非 production 环境将回退 SQLite (fallback_sqlite_enabled=true)")

    def _validate(self) -> None:
        """执行跨字段校验,统一抛出可读的 ValueError."""
        errors: list[str] = []
        checks: list[tuple[str, bool]] = [
            ("SESSION_COOKIE_DURATION 必须为正整数(分钟)", self.session_cookie_duration_minutes <= 0),
            (f"BCRYPT_LOG_ROUNDS 不应小于 {BCRYPT_LOG_ROUNDS_MIN}", self.bcrypt_log_rounds < BCRYPT_LOG_ROUNDS_MIN),
            ("LOG_BACKUP_COUNT 必须为非负整数", self.log_backup_count < 0),
            ("LOG_LEVEL 非法", self.log_level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}),
            ("SUPPORTED_LOCALES 不能为空", not self.supported_locales),
            (
                "DEFAULT_LOCALE 必须包含在 SUPPORTED_LOCALES 中",
                bool(self.supported_locales) and self.default_locale not in self.supported_locales,
            ),
            ("RECENT_REVIEWS_LIMIT 必须为正整数", self.recent_reviews_limit <= 0),
        ]
        for message, condition in checks:
            if condition:
                errors.append(message)

        if errors:
            joined = "; ".join(errors)
            raise ValueError(f"配置校验失败: {joined}")

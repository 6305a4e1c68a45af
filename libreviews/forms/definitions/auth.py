"""登录与注册表单字段定义."""

from libreviews.forms.submission import FormField

SIGNIN_FORM_KEY = "signin"
REGISTER_FORM_KEY = "register"

SIGNIN_FORM: tuple[FormField, ...] = (
    FormField("username", required=True),
    FormField("password", required=True),
)

REGISTER_FORM: tuple[FormField, ...] = (
    FormField("username", required=True),
    FormField("password", required=True),
)

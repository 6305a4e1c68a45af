"""评论表单字段定义."""

from libreviews.forms.submission import FieldType, FormField

REVIEW_FORM_KEY = "review"

LANGUAGE_FIELD = "review-language"
ACTION_FIELD = "review-action"
RATING_FIELD = "review-rating"

REVIEW_FORM: tuple[FormField, ...] = (
    FormField("review-url", key="url", type=FieldType.URL, required=True),
    FormField("review-title", key="title", type=FieldType.TEXT, required=True),
    FormField("review-text", key="text", type=FieldType.MARKDOWN, required=True, flat=True, html_key="html"),
    FormField(RATING_FIELD, key="star_rating", type=FieldType.NUMBER, required=True),
    # 内容语言在解析前单独读取
    FormField(LANGUAGE_FIELD, skip_value=True),
    FormField(ACTION_FIELD, required=True, skip_value=True),
)

DELETE_REVIEW_FORM: tuple[FormField, ...] = ()

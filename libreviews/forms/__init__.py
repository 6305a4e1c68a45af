"""表单定义与提交解析."""

from .submission import CSRF_FIELD, FieldType, FormField, SubmissionResult, parse_submission

__all__ = ["CSRF_FIELD", "FieldType", "FormField", "SubmissionResult", "parse_submission"]

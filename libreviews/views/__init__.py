"""视图层: 表单处理器."""

from .form_handler import ActionSpec, FormContext, FormHandler, with_pre_flight_check

__all__ = ["ActionSpec", "FormContext", "FormHandler", "with_pre_flight_check"]

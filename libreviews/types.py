"""通用类型别名.

统一 JSON/Mapping 风格的类型,方便在视图、服务、表单等模块中共享定义.
"""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping, Sequence
from typing import Any, TypeAlias

from flask.typing import ResponseReturnValue

ScalarValue: TypeAlias = str | int | float | bool | None
JsonValue: TypeAlias = ScalarValue | Sequence["JsonValue"] | Mapping[str, "JsonValue"]
JsonDict: TypeAlias = dict[str, JsonValue]
StructlogEventDict: TypeAlias = MutableMapping[str, JsonValue]
LoggerExtra: TypeAlias = Mapping[str, JsonValue]
ContextDict: TypeAlias = dict[str, Any]

# 多语言字符串: {"en": "...", "de": "..."}
MultilingualString: TypeAlias = dict[str, str]
# 表单提交原始数据(request.form 或普通字典)
FormPayload: TypeAlias = Mapping[str, str]
# 表单解析后的值,值类型随字段类型变化
FormValues: TypeAlias = dict[str, Any]

RouteReturn: TypeAlias = ResponseReturnValue

__all__ = [
    "ContextDict",
    "FormPayload",
    "FormValues",
    "JsonDict",
    "JsonValue",
    "LoggerExtra",
    "MultilingualString",
    "RouteReturn",
    "ScalarValue",
    "StructlogEventDict",
]

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class AppError(Exception):
    code: str
    message: str
    status_code: int = 400
    details: dict[str, Any] | None = None

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.code}: {self.message}"

    def detail(self, key: str, default: Any = None) -> Any:
        return (self.details or {}).get(key, default)


# 本地校验错误（在任何网络请求之前抛出）
ERROR_CONTENT_EMPTY = "content_string_empty"
ERROR_CONTENT_TOO_LONG = "content_string_too_long"

# 客户端错误
ERROR_TRANSPORT = "transport_error"
ERROR_SERIALIZATION = "serialization_error"
ERROR_API = "api_error"

VALIDATION_CODES = frozenset({ERROR_CONTENT_EMPTY, ERROR_CONTENT_TOO_LONG})

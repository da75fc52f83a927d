"""受长度约束的文本值对象。"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar

from pydantic import GetCoreSchemaHandler
from pydantic_core import PydanticCustomError, core_schema

from ..shared.errors import (
    AppError,
    ERROR_CONTENT_EMPTY,
    ERROR_CONTENT_TOO_LONG,
    VALIDATION_CODES,
)


class ContentStringError(AppError):
    """ContentString 校验失败。"""

    def __init__(self, message: str, code: str, details: dict[str, Any] | None = None):
        super().__init__(code=code, message=message, status_code=422, details=details)

    @classmethod
    def empty(cls) -> "ContentStringError":
        return cls(message="Text is empty", code=ERROR_CONTENT_EMPTY)

    @classmethod
    def too_long(cls, length: int, max_len: int) -> "ContentStringError":
        return cls(
            message=f"Text is too long: {length} bytes (max {max_len})",
            code=ERROR_CONTENT_TOO_LONG,
            details={"length": length, "max": max_len},
        )

    @property
    def is_validation(self) -> bool:
        return self.code in VALIDATION_CODES

    @property
    def length(self) -> int | None:
        return self.detail("length")

    @property
    def max(self) -> int | None:
        return self.detail("max")


@dataclass(frozen=True)
class ContentString:
    """长度在 1..2000 之间的文本。

    长度按 UTF-8 编码后的字节数计算，与服务端及其它语言实现保持一致；
    因此多字节字符在接近上限时会更早被拒绝。

    实例构造即校验，构造成功后不可变；任何变换都需要重新构造。
    序列化（pydantic）时输出为普通 JSON 字符串，而不是对象。
    """

    text: str

    MAX_LEN: ClassVar[int] = 2000

    def __post_init__(self) -> None:
        if not isinstance(self.text, str):
            raise TypeError(f"ContentString expects str, got {type(self.text).__name__}")

        length = len(self.text.encode("utf-8"))
        if length == 0:
            raise ContentStringError.empty()
        if length > self.MAX_LEN:
            raise ContentStringError.too_long(length, self.MAX_LEN)

    @classmethod
    def new(cls, raw: str) -> "ContentString":
        return cls(raw)

    def as_text(self) -> str:
        return self.text

    def into_text(self) -> str:
        # str 本身不可变，直接交出底层文本即可
        return self.text

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        return f"ContentString({self.text!r})"

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        return core_schema.no_info_plain_validator_function(
            cls._coerce,
            serialization=core_schema.plain_serializer_function_ser_schema(
                lambda value: value.as_text(),
                info_arg=False,
                return_schema=core_schema.str_schema(),
            ),
        )

    @classmethod
    def _coerce(cls, value: Any) -> "ContentString":
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise PydanticCustomError(
                "content_string_type",
                "Input should be a valid string",
            )
        try:
            return cls(value)
        except ContentStringError as e:
            # 转成 pydantic 的校验错误，保留原始错误码
            raise PydanticCustomError(e.code, e.message, dict(e.details or {})) from e

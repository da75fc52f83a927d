"""Markov 文本生成服务接入层。"""

from __future__ import annotations

from typing import Any

import httpx
from pydantic import BaseModel
from pydantic_core import PydanticSerializationError

from src.application.schemas.markov import (
    GeneratePayload,
    InputPayload,
    MarkovClientConfig,
)
from src.shared.errors import (
    AppError,
    ERROR_API,
    ERROR_SERIALIZATION,
    ERROR_TRANSPORT,
)
from src.shared.logging import get_logger, log_extra
from src.shared.request_id import REQUEST_ID_HEADER, get_request_id

log = get_logger(__name__)

ENDPOINT_INPUT = "input"
ENDPOINT_GENERATE = "generate"


class MarkovClientError(AppError):
    """Markov 客户端错误"""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        code: str = ERROR_TRANSPORT,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message=message, status_code=status_code, code=code, details=details)

    @classmethod
    def api(cls, status: int, body: str) -> "MarkovClientError":
        return cls(
            message=f"unexpected API error: status {status}, body = {body}",
            status_code=status,
            code=ERROR_API,
            details={"status": status, "body": body},
        )

    @property
    def kind(self) -> str:
        return self.code

    @property
    def status(self) -> int | None:
        return self.detail("status")

    @property
    def body(self) -> str | None:
        return self.detail("body")


def normalize_base_url(base_url: str | httpx.URL) -> httpx.URL:
    """校验并规范化服务根地址。

    地址无效属于配置错误，直接抛 ValueError，而不是走 MarkovClientError。
    规范化后 path 总以 `/` 结尾，保证 `join` 拼接出 `{base}/input`。
    在编码后的 raw_path 上操作，`%2F` 之类的转义保持原样。
    """
    try:
        url = httpx.URL(str(base_url))
    except httpx.InvalidURL as e:
        raise ValueError(f"invalid base_url: {base_url!r}") from e

    if url.scheme not in ("http", "https") or not url.host:
        raise ValueError(f"base_url must be an absolute http(s) URL: {base_url!r}")

    raw_path = url.raw_path.split(b"?", 1)[0] or b"/"
    if not raw_path.endswith(b"/"):
        raw_path += b"/"
    return url.copy_with(raw_path=raw_path)


class MarkovChainClient:
    """Markov 文本生成服务客户端。

    同一个实例可被多个协程并发使用：除底层 `httpx.AsyncClient` 外没有可变状态。
    不做重试；所有错误原样抛给调用方。
    """

    def __init__(
        self,
        base_url: str | httpx.URL | None = None,
        *,
        config: MarkovClientConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """初始化客户端。

        Args:
            base_url: 服务根地址，优先级高于 config.base_url
            config: 客户端配置，如果为 None 则从 Settings 加载
            transport: 自定义传输层（测试时传入 httpx.MockTransport）

        Raises:
            ValueError: base_url 不是合法的 http(s) 绝对地址
        """
        if config is None:
            config = (
                MarkovClientConfig(base_url=str(base_url))
                if base_url is not None
                else MarkovClientConfig.from_settings()
            )
        self.config = config
        self.base_url = normalize_base_url(base_url if base_url is not None else config.base_url)
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(config.timeout),
            headers={"Content-Type": "application/json", **config.headers},
            transport=transport,
        )

    async def close(self) -> None:
        """关闭客户端"""
        if not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self) -> "MarkovChainClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    def endpoint_url(self, endpoint: str) -> httpx.URL:
        return self.base_url.join(endpoint)

    async def input(self, payload: InputPayload) -> None:
        """把文本提交给服务端入库（训练）。

        Raises:
            MarkovClientError: 序列化失败、网络错误或服务端返回非 2xx
        """
        if not isinstance(payload, InputPayload):
            raise TypeError(f"expected InputPayload, got {type(payload).__name__}")

        await self._post(ENDPOINT_INPUT, payload)

    submit_input = input

    async def generate(self, payload: GeneratePayload) -> str:
        """请求服务端生成文本，返回原始响应体（不做 JSON 解析）。

        Raises:
            MarkovClientError: 序列化失败、网络错误或服务端返回非 2xx
        """
        if not isinstance(payload, GeneratePayload):
            raise TypeError(f"expected GeneratePayload, got {type(payload).__name__}")

        response = await self._post(ENDPOINT_GENERATE, payload)
        return response.text

    async def _post(self, endpoint: str, payload: BaseModel) -> httpx.Response:
        url = self.endpoint_url(endpoint)
        body = self._serialize(payload)

        headers: dict[str, str] = {}
        request_id = get_request_id()
        if request_id:
            headers[REQUEST_ID_HEADER] = request_id

        log.info(
            f"markov.{endpoint}.start",
            extra=log_extra(url=str(url), body_bytes=len(body)),
        )
        try:
            response = await self._client.post(url, content=body, headers=headers)
        except httpx.RequestError as e:
            log.warning(
                f"markov.{endpoint}.network_error",
                extra=log_extra(url=str(url), error=repr(e)),
            )
            raise MarkovClientError(
                message=f"HTTP request failed: {e!r}",
                status_code=503,
                code=ERROR_TRANSPORT,
            ) from e

        if not response.is_success:
            log.warning(
                f"markov.{endpoint}.http_error",
                extra=log_extra(
                    status_code=response.status_code,
                    response_text=(response.text or "")[:500],
                ),
            )
            raise MarkovClientError.api(response.status_code, response.text)

        log.info(
            f"markov.{endpoint}.ok",
            extra=log_extra(status_code=response.status_code),
        )
        return response

    @staticmethod
    def _serialize(payload: BaseModel) -> bytes:
        try:
            return payload.model_dump_json().encode("utf-8")
        except (PydanticSerializationError, ValueError, TypeError) as e:
            raise MarkovClientError(
                message=f"failed to serialize JSON: {e}",
                status_code=500,
                code=ERROR_SERIALIZATION,
            ) from e

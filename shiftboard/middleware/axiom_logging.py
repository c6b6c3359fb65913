"""Axiom API 로깅 미들웨어.

Axiom API logging middleware.
Builds one structured event per request (method, path, params, masked
request body, status, duration, error detail) and ships it to Axiom.
Without Axiom credentials the event goes to the module logger instead.
Sensitive fields (password, token, secret) are masked before either sink.
"""

import json
import logging
import re
import time
from typing import Any

from axiom_py import Client as AxiomClient
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from shiftboard.config import settings

logger = logging.getLogger(__name__)

# 마스킹 대상 필드 패턴 — Fields to mask in request/response bodies
_SENSITIVE_KEYS = re.compile(
    r"(password|passwd|secret|token|authorization|api_key|apikey|credential)",
    re.IGNORECASE,
)

# 로깅 제외 경로 — Paths excluded from logging
_SKIP_PATHS = {"/health", "/docs", "/redoc", "/openapi.json"}

_MAX_ERROR_LEN = 500


def mask_sensitive(data: Any, depth: int = 0) -> Any:
    """민감 필드 자동 마스킹 — Recursively mask sensitive fields in dicts/lists."""
    if depth > 5:
        return "..."
    if isinstance(data, dict):
        return {
            k: "***" if _SENSITIVE_KEYS.search(str(k)) else mask_sensitive(v, depth + 1)
            for k, v in data.items()
        }
    if isinstance(data, list):
        return [mask_sensitive(item, depth + 1) for item in data[:20]]
    if isinstance(data, str) and len(data) > 2000:
        return data[:2000] + "...(truncated)"
    return data


def extract_error_detail(body: bytes) -> str:
    """에러 응답 body에서 사유 추출 — Pull "detail" out of an error response body."""
    try:
        payload = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return body.decode("utf-8", errors="replace")[:_MAX_ERROR_LEN]
    detail = payload.get("detail", payload) if isinstance(payload, dict) else payload
    if not isinstance(detail, str):
        detail = json.dumps(detail, default=str)
    if len(detail) > _MAX_ERROR_LEN:
        detail = detail[:_MAX_ERROR_LEN] + "..."
    return detail


def build_log_event(
    request: Request,
    status_code: int,
    duration_ms: float,
    request_body: Any = None,
    error_detail: str | None = None,
) -> dict[str, Any]:
    """요청 하나에 대한 로그 이벤트를 구성합니다 (Build the per-request log event)."""
    event: dict[str, Any] = {
        "method": request.method,
        "path": request.url.path,
        "status_code": status_code,
        "duration_ms": duration_ms,
    }
    if request.query_params:
        event["query_params"] = mask_sensitive(dict(request.query_params))
    if request.path_params:
        event["path_params"] = dict(request.path_params)
    if request_body is not None:
        event["request_body"] = request_body
    if error_detail:
        event["error"] = error_detail
    return event


async def _read_json_body(request: Request) -> Any:
    if request.method not in ("POST", "PUT", "PATCH"):
        return None
    body_bytes = await request.body()
    if not body_bytes:
        return None
    try:
        return mask_sensitive(json.loads(body_bytes))
    except (json.JSONDecodeError, UnicodeDecodeError):
        return "(non-json body)"


class AxiomLoggingMiddleware(BaseHTTPMiddleware):
    """모든 API 요청/응답을 Axiom에 로깅하는 미들웨어.

    Middleware that logs all API requests and responses to Axiom, or to the
    module logger when Axiom is not configured. Logging never fails a request.
    """

    def __init__(self, app: Any, client: AxiomClient | None = None) -> None:
        super().__init__(app)
        self._dataset: str = settings.AXIOM_DATASET
        self._client: AxiomClient | None = client

        if self._client is None and settings.AXIOM_API_TOKEN and settings.AXIOM_DATASET:
            self._client = AxiomClient(token=settings.AXIOM_API_TOKEN)

    def _emit(self, event: dict[str, Any]) -> None:
        if self._client is None:
            logger.info("%s %s -> %s (%sms)", event["method"], event["path"], event["status_code"], event["duration_ms"])
            return
        try:
            self._client.ingest_events(self._dataset, [event])
        except Exception:  # noqa: BLE001
            # 로깅 실패가 요청 처리에 영향주지 않음 — log failures never break a request
            logger.warning("Axiom ingest failed for %s %s", event["method"], event["path"], exc_info=True)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        # 제외 경로 스킵 — Skip excluded paths
        if request.url.path in _SKIP_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        request_body: Any = await _read_json_body(request)

        error_detail: str | None = None
        status_code: int = 500
        try:
            response = await call_next(request)
            status_code = response.status_code

            # 에러 응답시 body에서 사유 추출 — Extract error detail from error responses
            if status_code >= 400:
                resp_body = b""
                async for chunk in response.body_iterator:
                    resp_body += chunk if isinstance(chunk, bytes) else chunk.encode("utf-8")
                error_detail = extract_error_detail(resp_body)

                # 소비한 body를 다시 응답으로 반환 — Re-wrap consumed body
                response = Response(
                    content=resp_body,
                    status_code=status_code,
                    headers=dict(response.headers),
                    media_type=response.media_type,
                )
        except Exception as exc:
            error_detail = f"{type(exc).__name__}: {str(exc)[:300]}"
            raise
        finally:
            duration_ms = round((time.perf_counter() - start_time) * 1000, 2)
            self._emit(build_log_event(request, status_code, duration_ms, request_body, error_detail))

        return response

import logging
import time
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

logger = logging.getLogger("coachapi.http")


class LoggingMiddleware(BaseHTTPMiddleware):
    """요청/응답 로그 (상태 코드에 따라 레벨 결정, 처리 시간 포함)"""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start = time.perf_counter()
        client = request.client.host if request.client else "-"
        label = f"{request.method} {request.url.path} from {client}"

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(f"[Unhandled Error] {label}")
            raise

        duration_ms = (time.perf_counter() - start) * 1000
        message = f"[Response] {label} -> {response.status_code} in {duration_ms:.1f}ms"
        if response.status_code >= 500:
            logger.error(message)
        elif response.status_code >= 400:
            logger.warning(message)
        else:
            logger.info(message)
        return response

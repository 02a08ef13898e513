import logging
import time
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response


class HTTPLogMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, logger_name: str = "schedule_checker.http"):
        super().__init__(app)
        self._logger = logging.getLogger(logger_name)

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        method = request.method
        path = request.url.path
        client = request.client.host if request.client else "-"
        try:
            response: Response = await call_next(request)
        except Exception as e:
            dur_ms = int((time.perf_counter() - start) * 1000)
            self._logger.warning("http %s %s client=%s dur_ms=%s err=%r", method, path, client, dur_ms, e)
            raise
        dur_ms = int((time.perf_counter() - start) * 1000)
        self._logger.debug("http %s %s client=%s status=%s dur_ms=%s",
                           method, path, client, response.status_code, dur_ms)
        return response

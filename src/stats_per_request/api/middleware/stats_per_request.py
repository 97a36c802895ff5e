"""Request timing middleware that reports one metric sample per request."""
from __future__ import annotations

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from stats_per_request.application.dto.stats import RequestInfo
from stats_per_request.services.stats_service import RequestStatsRecorder


def request_info(request: Request) -> RequestInfo:
    path = request.url.path
    query = request.url.query
    return RequestInfo(
        method=request.method,
        path=path,
        request_uri=f"{path}?{query}" if query else path,
        headers=request.headers,
    )


class StatsPerRequestMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, recorder: RequestStatsRecorder) -> None:
        super().__init__(app)
        self._recorder = recorder

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        started = self._recorder.start()
        response = await call_next(request)
        await self._recorder.record(request_info(request), response.status_code, started)
        return response

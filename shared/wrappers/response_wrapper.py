from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response
from fastapi.responses import JSONResponse
from fastapi import Request
from shared.core.schemas import JsonOutResult
from shared.utils.app_status_code import AppStatusCode
from typing import Callable
import json


class JsonResponseMiddleware(BaseHTTPMiddleware):
    """Wraps bare JSON success bodies in the JsonOutResult envelope."""

    async def dispatch(self, request: Request, call_next: Callable):
        # Skip docs/openapi endpoints
        if request.url.path.startswith(("/openapi", "/docs", "/redoc")):
            return await call_next(request)

        response = await call_next(request)

        content_type = response.headers.get("content-type", "")
        if not (200 <= response.status_code < 400) or "application/json" not in content_type:
            return response

        # Read the full body
        body_bytes = b""
        async for chunk in response.body_iterator:
            body_bytes += chunk

        headers = {k: v for k, v in response.headers.items()
                   if k.lower() != "content-length"}

        try:
            data = json.loads(body_bytes.decode("utf-8"))
        except ValueError:
            data = None

        # Non-JSON or already wrapped, return as-is
        if data is None or (isinstance(data, dict) and {"status", "status_code", "message"}.issubset(data.keys())):
            return Response(
                content=body_bytes,
                status_code=response.status_code,
                headers=headers,
            )

        wrapped = JsonOutResult(
            data=data,
            status="Success",
            status_code=AppStatusCode.DATA_RETRIEVED_SUCCESSFULLY,
            message="Data retrieved successfully"
        ).model_dump()

        return JSONResponse(
            content=wrapped,
            status_code=response.status_code,
            headers=headers,
        )

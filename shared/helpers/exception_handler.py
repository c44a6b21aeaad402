import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError as PydanticValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from shared.core.schemas import JsonOutResult
from shared.utils.app_status_code import AppStatusCode
from shared.utils.exceptions import MarketplaceError

logger = logging.getLogger(__name__)


def _failure(message: str, status_code: str, data=None) -> dict:
    return JsonOutResult(
        data=data,
        status="Failure",
        status_code=str(status_code),
        message=message
    ).model_dump()


def _invalid_input(errors) -> dict:
    messages = [
        f"{'.'.join(str(p) for p in err.get('loc', ()) if p != 'body')}: {err.get('msg')}"
        for err in errors
    ]
    return _failure(", ".join(messages), AppStatusCode.INVALID_INPUT)


def setup_exception_handlers(app: FastAPI):

    @app.exception_handler(MarketplaceError)
    async def marketplace_exception_handler(request: Request, exc: MarketplaceError):
        if exc.http_status >= 500:
            wrapped = _failure("Internal server error", exc.status_code)
        else:
            wrapped = _failure(exc.message, exc.status_code, exc.details)
        return JSONResponse(content=wrapped, status_code=exc.http_status)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        # error_response() already built the envelope
        if isinstance(exc.detail, dict) and {"status", "status_code", "message"}.issubset(exc.detail.keys()):
            wrapped = exc.detail
        else:
            wrapped = _failure(str(exc.detail), exc.status_code)
        return JSONResponse(
            content=wrapped,
            status_code=exc.status_code or 400,
            headers=getattr(exc, "headers", None)
        )

    # malformed input is a plain 400 like every other validation failure
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(content=_invalid_input(exc.errors()), status_code=400)

    # query models built through Depends() validate on instantiation
    @app.exception_handler(PydanticValidationError)
    async def model_validation_exception_handler(request: Request, exc: PydanticValidationError):
        return JSONResponse(content=_invalid_input(exc.errors()), status_code=400)

    # Catch all unhandled exceptions
    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        wrapped = _failure("Internal server error", AppStatusCode.OPERATION_FAILED)
        return JSONResponse(content=wrapped, status_code=500)

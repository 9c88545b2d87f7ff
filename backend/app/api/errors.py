"""
Exception handlers rendering every failure as {"status": "error", "message": ...}.

Stack traces and internal identifiers never reach the client.
"""

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.exceptions import DomainException, InternalException
from app.core.logging import get_logger

logger = get_logger(__name__)


def error_response(status_code: int, message: str, **extra) -> JSONResponse:
    content = {"status": "error", "message": message}
    content.update({k: v for k, v in extra.items() if v})
    return JSONResponse(status_code=status_code, content=jsonable_encoder(content))


def _summarize_validation_errors(exc: RequestValidationError) -> list[dict]:
    return [
        {
            "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
            "message": err.get("msg", "Invalid value"),
        }
        for err in exc.errors()
    ]


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(DomainException)
    async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
        if isinstance(exc, InternalException):
            logger.error("request_internal_error", code=exc.code, message=exc.message)
            return error_response(exc.status_code, exc.message)

        logger.info("request_rejected", code=exc.code, status_code=exc.status_code)
        return error_response(exc.status_code, exc.message, details=exc.details)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = _summarize_validation_errors(exc)
        logger.info("request_invalid", errors=errors)
        return error_response(status.HTTP_400_BAD_REQUEST, "Invalid request data.", errors=errors)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        message = exc.detail if isinstance(exc.detail, str) else "Request failed."
        response = error_response(exc.status_code, message)
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("request_unhandled_error", error_type=type(exc).__name__)
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "An unexpected error occurred. Please try again later.",
        )

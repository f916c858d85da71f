"""
Exception handlers translating errors into JSON responses.

AppError subclasses become `{"code", "message"}` with the error's status.
Request body problems become a 400 mapping each offending field to its
message. Denials are logged with their internal kind, which never leaves the
process.
"""
from fastapi import FastAPI
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from slowapi.errors import RateLimitExceeded
from starlette.requests import Request
from starlette.responses import JSONResponse

from grocery.core.errors import AppError, ForbiddenError
from grocery.utils import get_logger


log = get_logger(__name__)


def _field_errors(exc: RequestValidationError) -> dict[str, str]:
    fields = {}
    for error in exc.errors():
        loc = error.get("loc") or ("root",)
        field = "root" if loc[-1] == "__root__" else str(loc[-1])
        fields.setdefault(field, error.get("msg", "Invalid value"))
    return fields


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields = _field_errors(exc)
    log.info("%s %s rejected: %s", request.method, request.url.path, fields)
    return JSONResponse(status_code=400, content=jsonable_encoder(fields))


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if isinstance(exc, ForbiddenError):
        log.info("%s %s forbidden (%s)", request.method, request.url.path, exc.kind.value)
    elif exc.status_code >= 500:
        log.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def rate_limit_handler(request: Request, _exc: RateLimitExceeded) -> JSONResponse:
    log.warning("Rate limit hit on %s", request.url.path)
    return JSONResponse(status_code=429, content={"code": "TOO_MANY_REQUESTS", "message": "You are going too fast"})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)

"""Shared error-shaping step: every failure leaves the app as a JSON body."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError, ResponseValidationError
from fastapi.responses import JSONResponse

from backend.app.core.errors import CRMError, InternalError
from backend.app.core.metrics import increment

logger = logging.getLogger(__name__)


async def crm_error_handler(request: Request, exc: CRMError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.info("%s %s rejected: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    increment("RequestValidationError")
    logger.info("%s %s payload rejected: %d violation(s)", request.method, request.url.path, len(exc.errors()))
    return JSONResponse(
        status_code=422,
        content={"error": "Invalid request payload", "detail": jsonable_errors(exc)},
    )


async def response_validation_handler(request: Request, exc: ResponseValidationError) -> JSONResponse:
    # a stored item that no longer fits its response model
    increment("ResponseValidationError")
    logger.error("%s %s produced an invalid response: %s", request.method, request.url.path, exc.errors())
    return await crm_error_handler(request, InternalError())


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    # pydantic error entries may carry exception objects under "ctx"
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CRMError, crm_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(ResponseValidationError, response_validation_handler)

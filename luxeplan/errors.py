"""
Application error taxonomy and the handlers that render it.

Every error leaves the API as ``{"message": ..., **extra}`` with the
matching status code.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import IS_PRODUCTION

logger = logging.getLogger(__name__)


class LuxePlanError(Exception):
    status_code = 500
    default_message = "Internal Server Error"

    def __init__(self, message: Optional[str] = None, **extra):
        self.message = message or self.default_message
        self.extra = extra
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"message": self.message, **self.extra}


class UnauthorizedError(LuxePlanError):
    status_code = 401
    default_message = "Unauthorized Access!"


class ForbiddenError(LuxePlanError):
    status_code = 403
    default_message = "Forbidden"


class NotFoundError(LuxePlanError):
    status_code = 404
    default_message = "Not Found"


class ConflictError(LuxePlanError):
    status_code = 409
    default_message = "Conflict"


class ValidationError(LuxePlanError):
    status_code = 400
    default_message = "Invalid request"


class ExpiredError(LuxePlanError):
    status_code = 410
    default_message = "Expired"


class PaymentFailedError(LuxePlanError):
    status_code = 402
    default_message = "Payment not completed"


class UpstreamError(LuxePlanError):
    status_code = 502
    default_message = "Upstream service unavailable"


class InternalError(LuxePlanError):
    pass


def register_exception_handlers(app: FastAPI):
    @app.exception_handler(LuxePlanError)
    async def luxeplan_error_handler(request: Request, exc: LuxePlanError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} - {exc.status_code}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        message = exc.detail if isinstance(exc.detail, str) else "Request failed"
        return JSONResponse(
            status_code=exc.status_code, content={"message": message}, headers=exc.headers
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """
        Convert 422 validation errors from HTTPBearer to 401 authentication errors
        when the issue is with the Authorization header
        """
        for error in exc.errors():
            if error.get("loc") and "authorization" in str(error.get("loc")).lower():
                logger.warning(
                    f"Authentication failed for {request.url.path}: Missing or invalid Authorization header"
                )
                return JSONResponse(
                    status_code=401, content={"message": UnauthorizedError.default_message}
                )

        logger.warning(f"Validation error for {request.url.path}: {exc.errors()}")
        errors = [
            {"loc": list(error.get("loc", [])), "msg": error.get("msg"), "type": error.get("type")}
            for error in exc.errors()
        ]
        return JSONResponse(status_code=422, content={"message": "Invalid request", "errors": errors})

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"{request.method} {request.url.path} - Unhandled error: {exc}")
        message = "Internal Server Error" if IS_PRODUCTION else str(exc) or "Internal Server Error"
        return JSONResponse(status_code=500, content={"message": message})

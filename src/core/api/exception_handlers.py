from fastapi import Request, status, FastAPI
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.core.utils.logging import get_logger
from src.modules.entitlements.exceptions import (
    EntitlementError,
    EntitlementRepositoryError,
    InvalidEntitlementRequestError,
    StripeCustomerNotFoundError,
    UsageLimitExceededError,
)

logger = get_logger(__name__)

async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """
    Handle HTTP exceptions.
    """
    return JSONResponse(
        status_code=exc.status_code,
        content={"code": "HTTP_ERROR", "detail": exc.detail},
    )

async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Handle validation errors.
    """
    errors = []
    for error in exc.errors():
        err_msg = {
            "loc": error.get("loc"),
            "msg": error.get("msg"),
            "type": error.get("type")
        }
        errors.append(err_msg)

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"code": "VALIDATION_ERROR", "detail": errors},
    )

async def entitlement_exception_handler(request: Request, exc: EntitlementError):
    """
    Map entitlement errors to HTTP responses.
    """
    if isinstance(exc, UsageLimitExceededError):
        return JSONResponse(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            content={
                "code": "USAGE_LIMIT_EXCEEDED",
                "detail": str(exc),
                "usage_type": exc.usage_type,
                "remaining": exc.remaining,
            },
        )
    if isinstance(exc, InvalidEntitlementRequestError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"code": "INVALID_REQUEST", "detail": str(exc)},
        )
    if isinstance(exc, StripeCustomerNotFoundError):
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"code": "CUSTOMER_NOT_FOUND", "detail": str(exc)},
        )
    if isinstance(exc, EntitlementRepositoryError):
        logger.error("entitlement_store_error", path=request.url.path, error=str(exc))
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"code": "STORE_UNAVAILABLE", "detail": "Entitlement store unavailable"},
        )

    logger.error("entitlement_error", path=request.url.path, error=str(exc))
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"code": "ENTITLEMENT_ERROR", "detail": str(exc)},
    )

async def general_exception_handler(request: Request, exc: Exception):
    """
    Handle unexpected exceptions.
    """
    logger.error("unhandled_exception", path=request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"code": "INTERNAL_ERROR", "detail": "An unexpected error occurred."},
    )

def setup_exception_handlers(app: FastAPI):
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(EntitlementError, entitlement_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

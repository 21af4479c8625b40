"""
Service error handling for routers.

Maps the domain exception hierarchy onto HTTP status codes in one place.

Dependencies: fastapi, restaurant_rag.core.exceptions
System role: Uniform error responses across endpoints
"""

import functools
import logging
from typing import Any, Callable, TypeVar

from fastapi import HTTPException, status

from restaurant_rag.core.exceptions import (
    ConfigurationError,
    EmbeddingProviderError,
    IndexUnavailableError,
    RestaurantRagError,
    SearchTimeoutError,
    StoreError,
    ValidationError,
)

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

STATUS_BY_ERROR: tuple[tuple[type[RestaurantRagError], int], ...] = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (ConfigurationError, status.HTTP_503_SERVICE_UNAVAILABLE),
    (EmbeddingProviderError, status.HTTP_502_BAD_GATEWAY),
    (IndexUnavailableError, status.HTTP_503_SERVICE_UNAVAILABLE),
    (SearchTimeoutError, status.HTTP_504_GATEWAY_TIMEOUT),
    (StoreError, status.HTTP_500_INTERNAL_SERVER_ERROR),
)


def status_for(error: RestaurantRagError) -> int:
    for error_type, status_code in STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def handle_service_errors(func: F) -> F:
    """
    Decorator translating RestaurantRagError into HTTPException.

    The response detail carries the message and the error's details
    (including the failed ingest stage, when there is one).
    """

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)
        except RestaurantRagError as e:
            status_code = status_for(e)
            if status_code >= 500:
                logger.error(
                    f"{func.__name__} failed",
                    extra={"error_type": type(e).__name__, "error": str(e)},
                )
            else:
                logger.warning(
                    f"{func.__name__} rejected",
                    extra={"error_type": type(e).__name__, "error": str(e)},
                )
            raise HTTPException(
                status_code=status_code,
                detail={"message": e.message, "details": _public_details(e)},
            ) from e

    return wrapper  # type: ignore[return-value]


def _public_details(error: RestaurantRagError) -> dict[str, Any]:
    return {key: value for key, value in error.details.items() if key != "error"}

"""Client für den externen Stundenplan-Generator (HTTP via httpx)."""

from .api import (
    API_TIMEOUT_SECONDS,
    GenerateAndValidateResponse,
    ScheduleApiClient,
    ValidateRequest,
)
from .errors import (
    ApiError,
    HttpError,
    NetworkError,
    RequestValidationError,
    SchemaError,
    ServiceTimeoutError,
)

__all__ = [
    "API_TIMEOUT_SECONDS",
    "GenerateAndValidateResponse",
    "ScheduleApiClient",
    "ValidateRequest",
    "ApiError",
    "HttpError",
    "NetworkError",
    "RequestValidationError",
    "SchemaError",
    "ServiceTimeoutError",
]

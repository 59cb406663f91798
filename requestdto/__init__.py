"""Request DTO binding and validation."""

__version__ = "0.1.0"

from .binding import bind_arguments, request_dto
from .config import Settings, load_settings
from .denormalizer import ObjectDenormalizer
from .errors import (
    BadRequestHttpException,
    ConstraintViolation,
    LogicError,
    MalformedBodyError,
    NotNormalizableValueError,
    RequestDtoError,
    ValidationFailedError,
    problem_response,
)
from .http import HTTPException, JSONResponse, Request, Response
from .markers import FromRequest, MarkerRegistry, default_registry, from_request
from .metadata import ArgumentMetadata, ArgumentMetadataFactory
from .resolver import RequestDtoResolver, Resolution, ResolutionStatus
from .validator import PydanticValidator

__all__ = [
    "__version__",
    "ArgumentMetadata",
    "ArgumentMetadataFactory",
    "BadRequestHttpException",
    "ConstraintViolation",
    "FromRequest",
    "HTTPException",
    "JSONResponse",
    "LogicError",
    "MalformedBodyError",
    "MarkerRegistry",
    "NotNormalizableValueError",
    "ObjectDenormalizer",
    "PydanticValidator",
    "Request",
    "RequestDtoError",
    "RequestDtoResolver",
    "Resolution",
    "ResolutionStatus",
    "Response",
    "Settings",
    "ValidationFailedError",
    "bind_arguments",
    "default_registry",
    "from_request",
    "load_settings",
    "problem_response",
    "request_dto",
]

"""Error taxonomy for request DTO resolution."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Sequence

from .http import HTTP_400_BAD_REQUEST, HTTPException, JSONResponse

_LOGGER = logging.getLogger("requestdto")

PROBLEM_TYPE = "https://tools.ietf.org/html/rfc2616#section-10"
PROBLEM_MEDIA_TYPE = "application/problem+json"


class LogicError(RuntimeError):
    """Raised when the resolver is driven against its own contract."""


class RequestDtoError(Exception):
    """Base class for client input failures carrying structured errors."""

    title = "An error occurred"

    def __init__(self, msg: str, errors: list[dict[str, Any]]) -> None:
        super().__init__(msg)
        self._errors = errors

    def errors(self) -> list[dict[str, Any]]:
        return self._errors


class MalformedBodyError(RequestDtoError):
    """The request body could not be decoded as JSON."""

    title = "Malformed request body"

    def __init__(self, msg: str, input_value: Any = None) -> None:
        super().__init__(
            msg,
            [
                {
                    "loc": [],
                    "msg": "Invalid JSON body",
                    "type": "json_invalid",
                    "input": input_value,
                }
            ],
        )


class NotNormalizableValueError(RequestDtoError):
    """A raw value does not match the declared field type."""

    title = "Type mismatch"

    def __init__(
        self,
        loc: Sequence[Any],
        msg: str,
        typ: str = "type_error",
        *,
        expected: Sequence[str] = (),
        actual: str | None = None,
        input_value: Any = None,
    ) -> None:
        self.loc = list(loc)
        self.expected = list(expected)
        self.actual = actual
        self.input_value = input_value
        error: dict[str, Any] = {
            "loc": list(loc),
            "msg": msg,
            "type": typ,
            "input": input_value,
        }
        if expected:
            error["expected"] = list(expected)
        if actual is not None:
            error["actual"] = actual
        super().__init__(msg, [error])


@dataclass(frozen=True)
class ConstraintViolation:
    """A single failed validation rule."""

    property_path: str
    message: str
    code: str = "value_error"
    invalid_value: Any = None

    def as_error(self) -> dict[str, Any]:
        loc = [part for part in self.property_path.split(".") if part]
        return {
            "loc": loc,
            "msg": self.message,
            "type": self.code,
            "input": self.invalid_value,
        }


class ValidationFailedError(RequestDtoError):
    """One or more declared constraints failed for a resolved instance."""

    title = "Validation Failed"

    def __init__(self, violations: Sequence[ConstraintViolation]) -> None:
        self.violations = list(violations)
        msg = "\n".join(f"{v.property_path}: {v.message}" for v in self.violations)
        super().__init__(msg, [v.as_error() for v in self.violations])


class BadRequestHttpException(HTTPException):
    """The single client-facing error raised by the resolver."""

    def __init__(
        self,
        cause: RequestDtoError,
        *,
        source: str | None = None,
        debug: bool = False,
    ) -> None:
        super().__init__(HTTP_400_BAD_REQUEST, str(cause))
        self.cause = cause
        errors = cause.errors()
        if source is not None:
            errors = [
                {**err, "loc": [source, *err["loc"]]} for err in errors
            ]
        detail = str(cause)
        if isinstance(cause, MalformedBodyError) and not debug:
            # decoder positions are only useful while debugging
            detail = "Invalid JSON body."
        self.problem: dict[str, Any] = {
            "type": PROBLEM_TYPE,
            "title": cause.title,
            "status": HTTP_400_BAD_REQUEST,
            "detail": detail,
            "errors": errors,
        }

    def errors(self) -> list[dict[str, Any]]:
        return self.problem["errors"]


def problem_response(exc: BadRequestHttpException) -> JSONResponse:
    """Render *exc* as an ``application/problem+json`` response."""

    _LOGGER.debug("Rendering problem response: %s", exc.problem["title"])
    return JSONResponse(
        exc.problem,
        status_code=exc.status_code,
        headers=exc.headers,
        media_type=PROBLEM_MEDIA_TYPE,
    )


__all__ = [
    "BadRequestHttpException",
    "ConstraintViolation",
    "LogicError",
    "MalformedBodyError",
    "NotNormalizableValueError",
    "RequestDtoError",
    "ValidationFailedError",
    "problem_response",
]

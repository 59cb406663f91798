"""Resolve controller arguments into validated request DTOs.

A parameter is bound when its declared type is a concrete dataclass or
pydantic model and either the parameter carries a :class:`FromRequest`
marker or the type itself was registered with :func:`from_request`.

Exactly one source is read per resolution:

* route parameters, when the request has any;
* otherwise the JSON body for state-changing methods;
* otherwise the query string.

JSON, type and validation failures all surface as a single
:class:`BadRequestHttpException`.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, Iterator, Mapping

from .config import Settings
from .denormalizer import Denormalizer, ObjectDenormalizer
from .errors import (
    BadRequestHttpException,
    LogicError,
    RequestDtoError,
    ValidationFailedError,
)
from .http import Request
from .markers import FromRequest, MarkerRegistry, default_registry
from .metadata import ArgumentMetadata, resolve_type
from .validator import Validator

_LOGGER = logging.getLogger("requestdto")

SOURCE_ROUTE = "path"
SOURCE_BODY = "body"
SOURCE_QUERY = "query"


class ResolutionStatus(str, enum.Enum):
    RESOLVED = "resolved"
    DECLINED = "declined"
    CLIENT_ERROR = "client_error"


@dataclass(frozen=True)
class Resolution:
    """Tagged outcome of :meth:`RequestDtoResolver.try_resolve`."""

    status: ResolutionStatus
    value: Any = None
    error: BadRequestHttpException | None = None

    @property
    def resolved(self) -> bool:
        return self.status is ResolutionStatus.RESOLVED


class RequestDtoResolver:
    """Bind a request to a typed, validated DTO argument.

    The resolver keeps no per-request state; one instance can serve every
    request of a process.
    """

    def __init__(
        self,
        denormalizer: Denormalizer | None = None,
        validator: Validator | None = None,
        registry: MarkerRegistry | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.denormalizer = denormalizer or ObjectDenormalizer()
        # declared rules already run while the DTO is built
        self.validator = validator
        self.registry = registry if registry is not None else default_registry
        self.settings = settings or Settings()

    def _target(self, argument: ArgumentMetadata) -> type | None:
        target = resolve_type(argument.type, self.registry)
        if target is None:
            return None
        if argument.has_attribute(FromRequest) or self.registry.is_marked(target):
            return target
        return None

    def supports(self, request: Request, argument: ArgumentMetadata) -> bool:
        """Return ``True`` when *argument* is bound from the request."""

        supported = self._target(argument) is not None
        _LOGGER.debug(
            "Argument %r (%r) %s request binding",
            argument.name,
            argument.type,
            "supports" if supported else "declines",
        )
        return supported

    def select_source(self, request: Request) -> tuple[str, Mapping[str, Any] | bytes]:
        """Pick the single source the DTO is built from.

        Route and query parameters are returned as mappings; the body is
        returned undecoded, with an empty body standing for ``{}``.
        """

        if request.path_params:
            return SOURCE_ROUTE, request.path_params
        if request.method in self.settings.body_methods:
            raw = request.body()
            return SOURCE_BODY, raw if raw.strip() else b"{}"
        return SOURCE_QUERY, request.query_params

    def resolve_value(self, request: Request, argument: ArgumentMetadata) -> Any:
        """Return the validated DTO for *argument* or raise a client error.

        Raises
        ------
        LogicError
            If *argument* is not eligible for request binding.
        BadRequestHttpException
            If the request data cannot be decoded, typed or validated.
        """

        target = self._target(argument)
        if target is None:
            raise LogicError(
                f"Argument {argument.name!r} of type {argument.type!r} is not "
                "bound from the request; check supports() before resolve()."
            )
        source, data = self.select_source(request)
        _LOGGER.debug("Binding %s from %s parameters", target.__name__, source)
        try:
            if source == SOURCE_BODY:
                instance = self.denormalizer.denormalize(
                    data,
                    target,
                    format="json",
                    strict_types=self.settings.strict_types,
                )
            else:
                # route and query values arrive as strings
                instance = self.denormalizer.denormalize(
                    data, target, strict_types=False
                )
            if self.validator is not None:
                violations = self.validator.validate(instance)
                if violations:
                    raise ValidationFailedError(violations)
        except RequestDtoError as exc:
            _LOGGER.info(
                "Rejected %s %s for %s: %s",
                request.method,
                source,
                target.__name__,
                type(exc).__name__,
            )
            raise BadRequestHttpException(
                exc, source=source, debug=self.settings.debug
            ) from exc
        return instance

    def resolve(
        self, request: Request, argument: ArgumentMetadata
    ) -> Iterator[Any]:
        """Yield the resolved DTO once, for hosts that pull resolver output."""

        yield self.resolve_value(request, argument)

    def try_resolve(self, request: Request, argument: ArgumentMetadata) -> Resolution:
        """Return a tagged outcome instead of raising for client errors."""

        if not self.supports(request, argument):
            return Resolution(ResolutionStatus.DECLINED)
        try:
            value = self.resolve_value(request, argument)
        except BadRequestHttpException as exc:
            return Resolution(ResolutionStatus.CLIENT_ERROR, error=exc)
        return Resolution(ResolutionStatus.RESOLVED, value=value)


__all__ = [
    "RequestDtoResolver",
    "Resolution",
    "ResolutionStatus",
    "SOURCE_BODY",
    "SOURCE_QUERY",
    "SOURCE_ROUTE",
]

"""Declarative validation through pydantic ``TypeAdapter`` instances."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Protocol

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from .errors import ConstraintViolation

_LOGGER = logging.getLogger("requestdto")

_TYPE_ADAPTER_CACHE: dict[Any, TypeAdapter[Any]] = {}

# wider ints cannot be written back as JSON text
_MAX_ECHO_BITS = 14000


class Validator(Protocol):
    def validate(self, instance: Any) -> list[ConstraintViolation]: ...


def get_type_adapter(tp: Any) -> TypeAdapter[Any]:
    """Return a cached ``TypeAdapter`` for *tp*."""

    adapter = _TYPE_ADAPTER_CACHE.get(tp)
    if adapter is None:
        # building twice under contention is harmless
        adapter = TypeAdapter(tp)
        _TYPE_ADAPTER_CACHE[tp] = adapter
    return adapter


def client_input(value: Any) -> Any:
    """Return *value*, or ``None`` when it is too large to echo to the client."""

    if isinstance(value, int) and value.bit_length() > _MAX_ECHO_BITS:
        return None
    return value


def violations_from(errors: Iterable[dict[str, Any]]) -> list[ConstraintViolation]:
    """Convert pydantic error dicts into :class:`ConstraintViolation` entries."""

    violations: list[ConstraintViolation] = []
    for err in errors:
        loc = [str(part) for part in err.get("loc", ()) if part != "__root__"]
        violations.append(
            ConstraintViolation(
                property_path=".".join(loc),
                message=err.get("msg", ""),
                code=err.get("type", "value_error"),
                invalid_value=client_input(err.get("input")),
            )
        )
    return violations


class PydanticValidator:
    """Run the rules declared on the type of an already built instance.

    Instances produced by :class:`~requestdto.denormalizer.ObjectDenormalizer`
    have passed these rules already. This validator is for instances built
    some other way, e.g. by hand in a handler, and for hosts that plug it into
    :class:`~requestdto.resolver.RequestDtoResolver` as an extra step.
    """

    def validate(self, instance: Any) -> list[ConstraintViolation]:
        adapter = get_type_adapter(type(instance))
        data = adapter.dump_python(instance, by_alias=True, warnings=False)
        try:
            adapter.validate_python(data)
        except PydanticValidationError as exc:
            violations = violations_from(exc.errors(include_url=False))
            _LOGGER.debug(
                "%d constraint violation(s) on %s",
                len(violations),
                type(instance).__name__,
            )
            return violations
        return []


__all__ = [
    "PydanticValidator",
    "Validator",
    "client_input",
    "get_type_adapter",
    "violations_from",
]

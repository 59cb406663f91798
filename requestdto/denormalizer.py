"""Conversion of raw request data into typed instances through pydantic.

Raw JSON bodies go through ``TypeAdapter.validate_json`` and already decoded
mappings (route and query parameters) through ``validate_python``. The
pydantic error report is folded into the package's own error types: the first
type or shape problem becomes a :class:`NotNormalizableValueError`, otherwise
every failed rule becomes a violation of a :class:`ValidationFailedError`.
"""

from __future__ import annotations

import logging
from typing import Any, Literal, Optional, Protocol

from pydantic import ValidationError as PydanticValidationError

from .errors import (
    MalformedBodyError,
    NotNormalizableValueError,
    RequestDtoError,
    ValidationFailedError,
)
from .markers import qualified_name
from .metadata import is_bindable_type
from .validator import client_input, get_type_adapter, violations_from

_LOGGER = logging.getLogger("requestdto")

# pydantic error types describing the shape of a value, not a declared rule
_TYPE_ERRORS = frozenset(
    {
        "missing",
        "enum",
        "literal_error",
        "is_instance_of",
        "int_from_float",
        "finite_number",
        "none_required",
        "json_type",
        "union_tag_invalid",
        "union_tag_not_found",
    }
)

# error type prefix -> python type name shown to the client
_EXPECTED_NAMES = {
    "frozen_set": "frozenset",
    "string": "str",
    "bytes": "bytes",
    "bool": "bool",
    "int": "int",
    "float": "float",
    "finite": "float",
    "list": "list",
    "tuple": "tuple",
    "set": "set",
    "dict": "dict",
}


class Denormalizer(Protocol):
    def denormalize(
        self,
        data: Any,
        target: type,
        *,
        format: Optional[Literal["json"]] = None,
        strict_types: bool = True,
    ) -> Any: ...


def is_type_error(error_type: str) -> bool:
    return error_type in _TYPE_ERRORS or error_type.endswith(
        ("_type", "_parsing", "_parsing_size")
    )


def _actual_name(value: Any) -> str:
    return "null" if value is None else type(value).__name__


def _expected_name(err: dict[str, Any]) -> str:
    ctx = err.get("ctx") or {}
    if "class_name" in ctx:
        return str(ctx["class_name"])
    if "expected" in ctx:
        return str(ctx["expected"])
    error_type = err["type"]
    for prefix, name in _EXPECTED_NAMES.items():
        if error_type.startswith(prefix + "_"):
            return name
    return error_type


def _type_mismatch(err: dict[str, Any], target: type) -> NotNormalizableValueError:
    loc = [part for part in err.get("loc", ()) if part != "__root__"]
    path = ".".join(str(part) for part in loc)
    owner = qualified_name(target)
    if err["type"] == "missing":
        return NotNormalizableValueError(
            loc,
            f'Cannot create an instance of "{owner}" from request data because '
            f'the "{path}" attribute is missing.',
            "missing",
        )
    value = err.get("input")
    actual = _actual_name(value)
    expected = _expected_name(err)
    if not loc:
        msg = f'Data expected to be an object for class "{owner}" ("{actual}" given).'
    else:
        msg = (
            f'The type of the "{path}" attribute for class "{owner}" must be '
            f'one of "{expected}" ("{actual}" given).'
        )
    return NotNormalizableValueError(
        loc,
        msg,
        err["type"],
        expected=[expected],
        actual=actual,
        input_value=client_input(value),
    )


def translate_errors(exc: PydanticValidationError, target: type) -> RequestDtoError:
    """Fold a pydantic error report into a single request error."""

    errors = exc.errors(include_url=False)
    for err in errors:
        if err["type"] == "json_invalid":
            return MalformedBodyError(f"Invalid JSON body: {err.get('msg', '')}")
    for err in errors:
        if is_type_error(err["type"]):
            return _type_mismatch(err, target)
    return ValidationFailedError(violations_from(errors))


class ObjectDenormalizer:
    """Build dataclass or pydantic model instances from raw request data.

    ``format="json"`` takes the raw body (``bytes`` or ``str``); otherwise
    *data* is an already decoded mapping. With ``strict_types`` the only
    conversion allowed is int to float.

    Instances hold no per-call state and can be shared across threads.
    """

    def denormalize(
        self,
        data: Any,
        target: type,
        *,
        format: Optional[Literal["json"]] = None,
        strict_types: bool = True,
    ) -> Any:
        if not is_bindable_type(target):
            raise TypeError(f"{target!r} is not a dataclass or pydantic model")
        adapter = get_type_adapter(target)
        try:
            if format == "json":
                return adapter.validate_json(data, strict=strict_types)
            return adapter.validate_python(data, strict=strict_types)
        except PydanticValidationError as exc:
            raise translate_errors(exc, target) from exc
        except (OverflowError, ValueError) as exc:
            # numeric conversions that fail outside pydantic's own checks
            _LOGGER.debug("Conversion to %s failed: %s", target.__name__, exc)
            raise NotNormalizableValueError(
                [],
                f'Cannot create an instance of "{qualified_name(target)}" from '
                f"request data: {exc}",
                "value_error",
            ) from exc


__all__ = ["Denormalizer", "ObjectDenormalizer", "is_type_error", "translate_errors"]

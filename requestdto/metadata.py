"""Per-argument metadata supplied to resolvers."""

from __future__ import annotations

import inspect
import sys
import types
from dataclasses import dataclass, is_dataclass
from typing import (
    Annotated,
    Any,
    Callable,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

from pydantic import BaseModel

from .markers import MarkerRegistry

_SCALAR_TYPES = (int, float, str, bool, bytes, complex, type(None))


@dataclass(frozen=True)
class ArgumentMetadata:
    """Declared shape of one controller argument.

    ``type`` may be a class, a dotted import path, a registered type name or
    ``None`` when the parameter is not annotated.
    """

    name: str
    type: Any = None
    is_nullable: bool = False
    attributes: tuple[Any, ...] = ()
    has_default: bool = False
    default: Any = None

    def get_attributes(self, kind: type) -> list[Any]:
        return [a for a in self.attributes if isinstance(a, kind)]

    def has_attribute(self, kind: type) -> bool:
        return any(isinstance(a, kind) for a in self.attributes)


def is_bindable_type(tp: Any) -> bool:
    """Return ``True`` for concrete object types the denormalizer can build."""

    if not inspect.isclass(tp):
        return False
    if tp in _SCALAR_TYPES or inspect.isabstract(tp):
        return False
    if getattr(tp, "_is_protocol", False):
        return False
    if is_dataclass(tp):
        return True
    return issubclass(tp, BaseModel) and tp is not BaseModel


def _lookup_loaded(path: str) -> Any:
    """Find *path* among already imported modules without importing anything."""

    parts = path.split(".")
    for idx in range(len(parts) - 1, 0, -1):
        module = sys.modules.get(".".join(parts[:idx]))
        if module is None:
            continue
        obj: Any = module
        for attr in parts[idx:]:
            obj = getattr(obj, attr, None)
            if obj is None:
                return None
        return obj
    return None


def resolve_type(declared: Any, registry: MarkerRegistry | None = None) -> type | None:
    """Turn a declared argument type into a concrete class.

    Unknown names and non-bindable types resolve to ``None``; this function
    never raises for malformed input.
    """

    if declared is None:
        return None
    if isinstance(declared, str):
        name = declared.strip()
        if not name:
            return None
        found = registry.lookup(name) if registry is not None else None
        if found is None:
            found = _lookup_loaded(name)
        declared = found
    return declared if is_bindable_type(declared) else None


def _unwrap(annotation: Any) -> tuple[Any, bool, tuple[Any, ...]]:
    """Split ``Annotated``/``Optional`` wrappers off *annotation*."""

    markers: tuple[Any, ...] = ()
    nullable = False
    if get_origin(annotation) is Annotated:
        annotation, *extra = get_args(annotation)
        markers = tuple(extra)
    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        args = [a for a in get_args(annotation) if a is not type(None)]
        if len(args) != len(get_args(annotation)):
            nullable = True
            if len(args) == 1:
                annotation = args[0]
                if get_origin(annotation) is Annotated:
                    annotation, *extra = get_args(annotation)
                    markers = markers + tuple(extra)
    return annotation, nullable, markers


class ArgumentMetadataFactory:
    """Build :class:`ArgumentMetadata` from a handler signature."""

    def create_argument_metadata(self, func: Callable[..., Any]) -> list[ArgumentMetadata]:
        sig = inspect.signature(func)
        try:
            hints = get_type_hints(func, include_extras=True)
        except Exception:  # noqa: BLE001 - fallback for unresolved hints
            hints = {}
        arguments: list[ArgumentMetadata] = []
        for name, param in sig.parameters.items():
            if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
                continue
            annotation = hints.get(name, param.annotation)
            if annotation is inspect.Parameter.empty:
                annotation = None
            declared, nullable, markers = _unwrap(annotation)
            has_default = param.default is not inspect.Parameter.empty
            arguments.append(
                ArgumentMetadata(
                    name=name,
                    type=declared,
                    is_nullable=nullable or (has_default and param.default is None),
                    attributes=markers,
                    has_default=has_default,
                    default=param.default if has_default else None,
                )
            )
        return arguments


__all__ = [
    "ArgumentMetadata",
    "ArgumentMetadataFactory",
    "is_bindable_type",
    "resolve_type",
]

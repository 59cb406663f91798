"""Bind handler parameters using :class:`RequestDtoResolver`."""

from __future__ import annotations

import functools
import inspect
from typing import Any, Callable, Mapping

from .errors import BadRequestHttpException, LogicError, problem_response
from .http import Request
from .metadata import ArgumentMetadata, ArgumentMetadataFactory
from .resolver import RequestDtoResolver

_FACTORY = ArgumentMetadataFactory()


def bind_arguments(
    func: Callable[..., Any],
    request: Request,
    resolver: RequestDtoResolver,
    extra: Mapping[str, Any] | None = None,
    arguments: list[ArgumentMetadata] | None = None,
) -> dict[str, Any]:
    """Return keyword arguments for calling *func* with *request*.

    DTO parameters go through *resolver*; parameters annotated ``Request``
    receive the request itself; anything else comes from *extra* or the
    parameter default.
    """

    extra = extra or {}
    if arguments is None:
        arguments = _FACTORY.create_argument_metadata(func)
    kwargs: dict[str, Any] = {}
    for argument in arguments:
        if resolver.supports(request, argument):
            kwargs[argument.name] = resolver.resolve_value(request, argument)
        elif argument.type is Request:
            kwargs[argument.name] = request
        elif argument.name in extra:
            kwargs[argument.name] = extra[argument.name]
        elif argument.has_default:
            kwargs[argument.name] = argument.default
        elif argument.is_nullable:
            kwargs[argument.name] = None
        else:
            raise LogicError(
                f"No value could be bound for argument {argument.name!r} "
                f"of {getattr(func, '__qualname__', func)!r}"
            )
    return kwargs


def request_dto(
    resolver: RequestDtoResolver | None = None,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Decorate a handler so DTO parameters are bound before it runs.

    The wrapped handler is called as ``handler(request, **extra)``; client
    errors are returned as ``application/problem+json`` responses.
    """

    bound_resolver = resolver or RequestDtoResolver()

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        arguments = _FACTORY.create_argument_metadata(func)
        if inspect.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(request: Request, **extra: Any) -> Any:
                try:
                    kwargs = bind_arguments(
                        func, request, bound_resolver, extra, arguments
                    )
                except BadRequestHttpException as exc:
                    return problem_response(exc)
                return await func(**kwargs)

            return async_wrapper

        @functools.wraps(func)
        def wrapper(request: Request, **extra: Any) -> Any:
            try:
                kwargs = bind_arguments(func, request, bound_resolver, extra, arguments)
            except BadRequestHttpException as exc:
                return problem_response(exc)
            return func(**kwargs)

        return wrapper

    return decorator


__all__ = ["bind_arguments", "request_dto"]

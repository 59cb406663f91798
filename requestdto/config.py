"""Environment-driven resolver configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

KNOWN_METHODS = {
    "GET",
    "HEAD",
    "OPTIONS",
    "TRACE",
    "POST",
    "PUT",
    "PATCH",
    "DELETE",
}
SAFE_METHODS = {"GET", "HEAD", "OPTIONS", "TRACE"}
DEFAULT_BODY_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})


@dataclass(frozen=True)
class Settings:
    """Runtime settings for :class:`~requestdto.resolver.RequestDtoResolver`."""

    strict_types: bool = True
    body_methods: frozenset[str] = field(default=DEFAULT_BODY_METHODS)
    debug: bool = False


def validate_settings(settings: Settings) -> None:
    """Validate *settings* for safe operation.

    Raises
    ------
    ValueError
        If the body method set names an unknown verb or a safe verb.
    """

    unknown = set(settings.body_methods) - KNOWN_METHODS
    if unknown:
        raise ValueError(f"Unsupported HTTP methods: {', '.join(sorted(unknown))}")
    safe = set(settings.body_methods) & SAFE_METHODS
    if safe:
        raise ValueError(
            f"Safe methods cannot carry a bound body: {', '.join(sorted(safe))}"
        )


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


def load_settings() -> Settings:
    """Return configuration derived from `REQUESTDTO_*` variables."""

    raw_methods = os.getenv("REQUESTDTO_BODY_METHODS")
    if raw_methods:
        methods = frozenset(
            m.strip().upper() for m in raw_methods.split(",") if m.strip()
        )
    else:
        methods = DEFAULT_BODY_METHODS
    settings = Settings(
        strict_types=_flag("REQUESTDTO_STRICT_TYPES", "1"),
        body_methods=methods,
        debug=_flag("REQUESTDTO_DEBUG", "0"),
    )
    validate_settings(settings)
    return settings


__all__ = [
    "DEFAULT_BODY_METHODS",
    "KNOWN_METHODS",
    "SAFE_METHODS",
    "Settings",
    "load_settings",
    "validate_settings",
]

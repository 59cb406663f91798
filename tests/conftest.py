"""
Pytest configuration and shared fixtures for the requestdto test suite.

This module provides the resolver under test, request builders and
argument descriptors shared by all test modules.
"""

import json
import sys
from pathlib import Path
from typing import Any, Callable, Dict

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from requestdto import (  # noqa: E402
    ArgumentMetadata,
    FromRequest,
    MarkerRegistry,
    ObjectDenormalizer,
    Request,
    RequestDtoResolver,
)


# ============================================================================
# Resolver fixtures
# ============================================================================

@pytest.fixture
def resolver() -> RequestDtoResolver:
    """Provide a resolver wired with the default collaborators."""
    return RequestDtoResolver(ObjectDenormalizer())


@pytest.fixture
def registry() -> MarkerRegistry:
    """Provide an isolated marker registry."""
    return MarkerRegistry()


# ============================================================================
# Request fixtures
# ============================================================================

@pytest.fixture
def json_request() -> Callable[..., Request]:
    """Build a request whose body is *data* encoded as JSON."""

    def build(data: Any, method: str = "POST", suffix: str = "") -> Request:
        return Request(method, body=(json.dumps(data) + suffix).encode())

    return build


@pytest.fixture
def argument() -> Callable[..., ArgumentMetadata]:
    """Build an argument descriptor, marked with ``FromRequest`` by default."""

    def build(
        declared: Any, attributes: tuple = (FromRequest(),), name: str = "dto"
    ) -> ArgumentMetadata:
        return ArgumentMetadata(name, declared, attributes=attributes)

    return build


@pytest.fixture
def full_payload() -> Dict[str, Any]:
    """Provide a payload matching every field of ``TestDto``."""
    return {
        "int": 5,
        "float": 9.99,
        "string": "foobar",
        "bool": True,
        "subType": {"test": "barfoo"},
    }

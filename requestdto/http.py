"""Minimal HTTP primitives consumed by the resolver."""

from __future__ import annotations

import json
from typing import Any, Mapping
from urllib.parse import parse_qs, urlsplit

HTTP_200_OK = 200
HTTP_400_BAD_REQUEST = 400


class Request:
    """Represent an incoming HTTP request.

    ``query_params`` is parsed from ``url`` unless given explicitly, in which
    case it is used verbatim (frameworks that pre-parse the query string can
    pass native values through).
    """

    def __init__(
        self,
        method: str = "GET",
        url: str = "/",
        body: bytes = b"",
        headers: Mapping[str, str] | None = None,
        path_params: Mapping[str, Any] | None = None,
        query_params: Mapping[str, Any] | None = None,
    ) -> None:
        self.method = method.upper()
        self.url = url
        self._body = body or b""
        self.headers = {k.lower(): v for k, v in (headers or {}).items()}
        self.path_params = dict(path_params or {})
        if query_params is None:
            parts = urlsplit(url)
            parsed_items = parse_qs(parts.query).items()
            self.query_params = {
                k: (v[0] if len(v) == 1 else v) for k, v in parsed_items
            }
        else:
            self.query_params = dict(query_params)

    def body(self) -> bytes:
        """Return the raw request body."""
        return self._body

    def __repr__(self) -> str:
        return f"Request(method={self.method!r}, url={self.url!r})"


class Response:
    """HTTP response container."""

    def __init__(
        self,
        content: str | bytes = b"",
        *,
        status_code: int = HTTP_200_OK,
        headers: Mapping[str, str] | None = None,
        media_type: str | None = None,
    ) -> None:
        if isinstance(content, str):
            self.body = content.encode()
            default_type = "text/plain; charset=utf-8"
        else:
            self.body = content
            default_type = "application/octet-stream"
        self.status_code = status_code
        self.headers = {k.lower(): v for k, v in (headers or {}).items()}
        self.media_type = media_type or default_type
        self.headers.setdefault("content-type", self.media_type)

    def serialize(self) -> tuple[int, bytes, dict[str, str]]:
        """Return ``(status_code, body, headers)`` for transmission."""
        return self.status_code, self.body, self.headers.copy()


class JSONResponse(Response):
    """Serialize content to JSON."""

    def __init__(
        self,
        content: Any,
        *,
        status_code: int = HTTP_200_OK,
        headers: Mapping[str, str] | None = None,
        media_type: str = "application/json",
    ) -> None:
        body = json.dumps(content, default=str).encode()
        super().__init__(
            body,
            status_code=status_code,
            headers=headers,
            media_type=media_type,
        )

    def json(self) -> Any:
        return json.loads(self.body.decode())


class HTTPException(Exception):
    """Error carrying an HTTP status code and optional headers."""

    def __init__(
        self,
        status_code: int,
        detail: Any = None,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(detail)
        self.status_code = status_code
        self.detail = detail
        self.headers = dict(headers or {})


__all__ = [
    "HTTPException",
    "JSONResponse",
    "Request",
    "Response",
    "HTTP_200_OK",
    "HTTP_400_BAD_REQUEST",
]

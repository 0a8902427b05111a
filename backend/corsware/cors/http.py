from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Protocol

from starlette.datastructures import Headers, MutableHeaders
from starlette.types import Scope


@dataclass(frozen=True)
class RequestContext:
    """Read-only view of the request metadata CORS decisions depend on."""

    method: str | None
    headers: Headers = field(default_factory=Headers)

    @classmethod
    def build(cls, method: str | None, headers: Mapping[str, str] | None = None) -> RequestContext:
        return cls(method=method, headers=Headers(headers=dict(headers or {})))

    @classmethod
    def from_scope(cls, scope: Scope) -> RequestContext:
        return cls(method=scope.get("method"), headers=Headers(scope=scope))

    @property
    def origin(self) -> str | None:
        return self.headers.get("origin")

    @property
    def request_headers(self) -> str | None:
        return self.headers.get("access-control-request-headers")

    @property
    def is_preflight(self) -> bool:
        return isinstance(self.method, str) and self.method.upper() == "OPTIONS"


class ResponseLike(Protocol):
    status_code: int

    def set_header(self, name: str, value: str) -> None: ...

    def get_header(self, name: str) -> str | None: ...

    def end(self) -> None: ...


class CollectedResponse:
    """In-memory response that records headers until a host writes them out."""

    def __init__(self) -> None:
        self.status_code = 200
        self.headers = MutableHeaders()
        self.ended = False

    def set_header(self, name: str, value: str) -> None:
        self.headers[name] = value

    def get_header(self, name: str) -> str | None:
        return self.headers.get(name)

    def end(self) -> None:
        self.ended = True

    def raw_headers(self) -> list[tuple[bytes, bytes]]:
        return list(self.headers.raw)

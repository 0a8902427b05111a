"""Header decisions for a request whose CORS options are fully resolved.

``decide`` is pure: it reads the options and the request and returns the headers to
set, the ``Vary`` names to add and whether the host should stop or carry on. Values
of the wrong type are skipped, never reported.
"""
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from numbers import Real
from typing import Any, Union

from corsware.cors.http import RequestContext, ResponseLike
from corsware.cors.options import (
    FixedOrigin,
    OriginList,
    PatternOrigin,
    ReflectOrigin,
    ResolvedOptions,
    Wildcard,
)
from corsware.cors.vary import vary

ALLOW_ORIGIN = "Access-Control-Allow-Origin"
ALLOW_CREDENTIALS = "Access-Control-Allow-Credentials"
ALLOW_METHODS = "Access-Control-Allow-Methods"
ALLOW_HEADERS = "Access-Control-Allow-Headers"
EXPOSE_HEADERS = "Access-Control-Expose-Headers"
MAX_AGE = "Access-Control-Max-Age"
REQUEST_HEADERS = "Access-Control-Request-Headers"


@dataclass(frozen=True)
class Continue:
    pass


@dataclass(frozen=True)
class ShortCircuit:
    status_code: int
    content_length_zero: bool = True


Decision = Union[Continue, ShortCircuit]


@dataclass(frozen=True)
class ResponseActions:
    headers: tuple[tuple[str, str], ...] = ()
    vary: tuple[str, ...] = ()
    decision: Decision = Continue()

    def header(self, name: str) -> str | None:
        for key, value in self.headers:
            if key.lower() == name.lower():
                return value
        return None


class _Actions:
    def __init__(self) -> None:
        self.headers: list[tuple[str, str]] = []
        self.vary: list[str] = []

    def set(self, name: str, value: str) -> None:
        self.headers.append((name, value))

    def freeze(self, decision: Decision) -> ResponseActions:
        return ResponseActions(headers=tuple(self.headers), vary=tuple(self.vary), decision=decision)


def _join(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, Sequence):
        return ",".join(str(item) for item in value)
    return ""


def _origin_allowed(policy, origin: str | None) -> bool:
    if isinstance(policy, ReflectOrigin):
        return True
    if origin is None:
        return False
    if isinstance(policy, FixedOrigin):
        return origin == policy.value
    if isinstance(policy, PatternOrigin):
        return policy.matches(origin)
    if isinstance(policy, OriginList):
        return any(_origin_allowed(entry, origin) for entry in policy.entries)
    return False


def _origin_headers(options: ResolvedOptions, request: RequestContext, actions: _Actions) -> None:
    policy = options.origin
    if policy is None or isinstance(policy, Wildcard):
        actions.set(ALLOW_ORIGIN, "*")
    elif isinstance(policy, FixedOrigin):
        actions.vary.append("Origin")
        actions.set(ALLOW_ORIGIN, policy.value)
    else:
        origin = request.origin
        if origin and _origin_allowed(policy, origin):
            actions.vary.append("Origin")
            actions.set(ALLOW_ORIGIN, origin)


def _credentials_headers(options: ResolvedOptions, actions: _Actions) -> None:
    if options.credentials is True:
        actions.set(ALLOW_CREDENTIALS, "true")


def _methods_headers(options: ResolvedOptions, actions: _Actions) -> None:
    methods = _join(options.methods)
    if methods:
        actions.set(ALLOW_METHODS, methods)


def _allowed_headers(options: ResolvedOptions, request: RequestContext, actions: _Actions) -> None:
    headers = options.allowed_headers or options.headers
    if headers:
        joined = _join(headers)
        if joined:
            actions.set(ALLOW_HEADERS, joined)
    elif request.request_headers:
        actions.vary.append(REQUEST_HEADERS)
        actions.set(ALLOW_HEADERS, request.request_headers)


def _max_age_value(max_age: Any) -> str:
    if isinstance(max_age, bool):
        return ""
    if isinstance(max_age, Real):
        if float(max_age).is_integer():
            return str(int(max_age))
        return str(max_age)
    if isinstance(max_age, str):
        return max_age
    return ""


def _cache_headers(options: ResolvedOptions, actions: _Actions) -> None:
    max_age = _max_age_value(options.max_age)
    if max_age:
        actions.set(MAX_AGE, max_age)


def _exposed_headers(options: ResolvedOptions, actions: _Actions) -> None:
    if options.exposed_headers:
        exposed = _join(options.exposed_headers)
        if exposed:
            actions.set(EXPOSE_HEADERS, exposed)


def decide(options: ResolvedOptions, request: RequestContext) -> ResponseActions:
    actions = _Actions()

    if request.is_preflight:
        _origin_headers(options, request, actions)
        _credentials_headers(options, actions)
        _methods_headers(options, actions)
        _allowed_headers(options, request, actions)
        _cache_headers(options, actions)
        _exposed_headers(options, actions)

        if options.preflight_continue:
            return actions.freeze(Continue())
        return actions.freeze(ShortCircuit(options.options_success_status))

    _origin_headers(options, request, actions)
    _credentials_headers(options, actions)
    _exposed_headers(options, actions)
    return actions.freeze(Continue())


def apply_actions(actions: ResponseActions, response: ResponseLike) -> None:
    """Write ``actions`` onto ``response``; ends it for a short-circuited preflight."""
    for name in actions.vary:
        vary(response, name)
    for name, value in actions.headers:
        response.set_header(name, value)

    decision = actions.decision
    if isinstance(decision, ShortCircuit):
        response.status_code = decision.status_code
        if decision.content_length_zero:
            response.set_header("Content-Length", "0")
        response.end()

"""CORS adapters around the resolver and the decision engine.

``CorsHandler`` is the awaitable form and also offers a continuation-style
``middleware``. ``CORSMiddleware`` wraps an ASGI app (FastAPI, Starlette, Socket.IO...)
and answers preflights itself unless ``preflight_continue`` is set.
"""
from __future__ import annotations

import inspect
from collections.abc import Callable
from typing import Any

from loguru import logger
from starlette.datastructures import MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from corsware.cors.engine import Continue, Decision, ResponseActions, ShortCircuit, apply_actions, decide
from corsware.cors.http import CollectedResponse, RequestContext, ResponseLike
from corsware.cors.resolver import resolve_options


class CorsHandler:
    def __init__(self, options: Any = None) -> None:
        self.options = options

    async def evaluate(self, request: RequestContext) -> ResponseActions | None:
        """Resolve options for ``request`` and decide; ``None`` means leave it alone."""
        resolved = await resolve_options(self.options, request)
        if resolved is None:
            return None
        return decide(resolved, request)

    async def __call__(self, request: RequestContext, response: ResponseLike) -> Decision:
        actions = await self.evaluate(request)
        if actions is None:
            return Continue()
        apply_actions(actions, response)
        return actions.decision

    async def middleware(
        self, request: RequestContext, response: ResponseLike, next: Callable[..., Any]
    ) -> None:
        """Run the handler and call ``next`` exactly once, with the error if one was raised."""
        try:
            await self(request, response)
        except Exception as e:
            result = next(e)
        else:
            result = next()
        if inspect.isawaitable(result):
            await result


class _StartMessage:
    """Response view over an ``http.response.start`` message; headers set by the app win."""

    def __init__(self, message: Message) -> None:
        message.setdefault("headers", [])
        self.headers = MutableHeaders(scope=message)
        self.status_code = message["status"]

    def set_header(self, name: str, value: str) -> None:
        if name.lower() == "vary" or name not in self.headers:
            self.headers[name] = value

    def get_header(self, name: str) -> str | None:
        return self.headers.get(name)

    def end(self) -> None:
        pass


class CORSMiddleware:
    def __init__(self, app: ASGIApp, options: Any = None) -> None:
        self.app = app
        self.handler = CorsHandler(options)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = RequestContext.from_scope(scope)
        actions = await self.handler.evaluate(request)
        if actions is None:
            await self.app(scope, receive, send)
            return

        if isinstance(actions.decision, ShortCircuit):
            response = CollectedResponse()
            apply_actions(actions, response)
            logger.debug(f"CORS preflight {scope.get('path')} from {request.origin} -> {response.status_code}")
            await send({"type": "http.response.start", "status": response.status_code, "headers": response.raw_headers()})
            await send({"type": "http.response.body", "body": b""})
            return

        async def send_wrapper(message: Message) -> None:
            if message["type"] == "http.response.start":
                apply_actions(actions, _StartMessage(message))
            await send(message)

        await self.app(scope, receive, send_wrapper)

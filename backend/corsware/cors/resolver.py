from __future__ import annotations

import inspect
from typing import Any

from loguru import logger

from corsware.cors.http import RequestContext
from corsware.cors.options import (
    CorsOptions,
    DynamicOrigin,
    OptionsInput,
    OptionsResolver,
    ResolvedOptions,
    classify_origin,
    decode_origin,
    is_denied,
    merge_options,
)


async def _call(func, *args) -> Any:
    result = func(*args)
    if inspect.isawaitable(result):
        result = await result
    return result


async def resolve_options(
    raw: OptionsInput | OptionsResolver, request: RequestContext
) -> ResolvedOptions | None:
    """Resolve the options for ``request``, then its origin policy.

    Returns ``None`` when CORS is switched off for this request, either statically or
    because the origin resolver returned a falsy value. Exceptions raised by either
    resolver propagate unchanged.
    """
    if callable(raw):
        try:
            raw = await _call(raw, request)
        except Exception as e:
            logger.warning(f"CORS options resolver failed: {e!r}")
            raise

    options = merge_options(raw)
    policy = classify_origin(options.origin)
    if policy is None:
        logger.debug(f"CORS disabled for {request.method} request from {request.origin}")
        return None

    if isinstance(policy, DynamicOrigin):
        try:
            origin = await _call(policy.resolver, request.origin)
        except Exception as e:
            logger.warning(f"CORS origin resolver failed for {request.origin}: {e!r}")
            raise
        if is_denied(origin):
            logger.debug(f"CORS origin resolver denied {request.origin}")
            return None
        policy = decode_origin(origin)

    return _resolved(options, policy)


def _resolved(options: CorsOptions, policy) -> ResolvedOptions:
    return ResolvedOptions(
        origin=policy,
        methods=options.methods,
        allowed_headers=options.allowed_headers,
        headers=options.headers,
        exposed_headers=options.exposed_headers,
        credentials=options.credentials,
        max_age=options.max_age,
        preflight_continue=options.preflight_continue,
        options_success_status=options.options_success_status,
    )

from corsware.cors.engine import Continue, ResponseActions, ShortCircuit, apply_actions, decide
from corsware.cors.http import CollectedResponse, RequestContext
from corsware.cors.options import (
    CorsOptions,
    DynamicOrigin,
    FixedOrigin,
    OriginList,
    PatternOrigin,
    ReflectOrigin,
    ResolvedOptions,
    Wildcard,
)
from corsware.cors.resolver import resolve_options

__all__ = [
    "CollectedResponse",
    "Continue",
    "CorsOptions",
    "DynamicOrigin",
    "FixedOrigin",
    "OriginList",
    "PatternOrigin",
    "ReflectOrigin",
    "RequestContext",
    "ResolvedOptions",
    "ResponseActions",
    "ShortCircuit",
    "Wildcard",
    "apply_actions",
    "decide",
    "resolve_options",
]

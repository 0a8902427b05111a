"""CORS options and the origin policy variants.

An ``origin`` option may be given in any of these shapes:

* ``"*"`` (the default) allows every origin with a literal ``*``.
* Any other string is a fixed origin, always sent as configured.
* A compiled ``re.Pattern`` is searched in the request origin; matches are reflected.
* A list of strings and patterns matches if any entry matches.
* ``True`` reflects whatever origin the request carries.
* Falsy values (``None``, ``False``, ``""``, ``0``) disable CORS for the
  request; an empty list does not, it just matches nothing.
* A callable receiving the request origin and returning one of the above,
  directly or as an awaitable.
* Anything else (sets, numbers...) matches nothing.

``decode_origin`` turns the static shapes into one of the dataclasses below, so that
the decision engine never has to look at raw option values again.
"""
from __future__ import annotations

import dataclasses
import re
from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Union

from corsware.core.errors import CorsConfigError

DEFAULT_METHODS = "GET,HEAD,PUT,PATCH,POST,DELETE"


@dataclass(frozen=True)
class Wildcard:
    pass


@dataclass(frozen=True)
class FixedOrigin:
    value: str


@dataclass(frozen=True)
class PatternOrigin:
    pattern: re.Pattern

    def matches(self, origin: str) -> bool:
        return self.pattern.search(origin) is not None


@dataclass(frozen=True)
class ReflectOrigin:
    pass


@dataclass(frozen=True)
class OriginList:
    entries: tuple[Union[FixedOrigin, PatternOrigin, ReflectOrigin], ...]


@dataclass(frozen=True)
class DynamicOrigin:
    resolver: Callable[[str | None], Any]


StaticOrigin = Union[Wildcard, FixedOrigin, PatternOrigin, ReflectOrigin, OriginList]
OriginPolicy = Union[StaticOrigin, DynamicOrigin]


@dataclass(frozen=True)
class CorsOptions:
    origin: Any = "*"
    methods: str | Sequence[str] | None = DEFAULT_METHODS
    allowed_headers: str | Sequence[str] | None = None
    headers: str | Sequence[str] | None = None
    exposed_headers: str | Sequence[str] | None = None
    credentials: bool = False
    max_age: int | str | None = None
    preflight_continue: bool = False
    options_success_status: int = 204


@dataclass(frozen=True)
class ResolvedOptions:
    """Options for one request, with ``origin`` reduced to a static policy."""

    origin: StaticOrigin
    methods: Any = DEFAULT_METHODS
    allowed_headers: Any = None
    headers: Any = None
    exposed_headers: Any = None
    credentials: Any = False
    max_age: Any = None
    preflight_continue: bool = False
    options_success_status: int = 204


DEFAULT_OPTIONS = CorsOptions()

OptionsInput = Union[CorsOptions, Mapping[str, Any], None]
OptionsResolver = Callable[[Any], Union[OptionsInput, Awaitable[OptionsInput]]]

_OPTION_NAMES = frozenset(f.name for f in dataclasses.fields(CorsOptions))


def merge_options(options: OptionsInput) -> CorsOptions:
    """Layer ``options`` over the defaults without touching ``DEFAULT_OPTIONS``."""
    if options is None:
        return DEFAULT_OPTIONS
    if isinstance(options, CorsOptions):
        return options
    if not isinstance(options, Mapping):
        raise CorsConfigError("CORS options must be a mapping or CorsOptions")
    unknown = set(options) - _OPTION_NAMES
    if unknown:
        raise CorsConfigError(f"Unknown CORS option(s): {', '.join(sorted(unknown))}")
    return dataclasses.replace(DEFAULT_OPTIONS, **options)


def is_denied(origin: Any) -> bool:
    """Falsy values switch CORS off, except empty lists and tuples."""
    return origin is None or (not origin and not isinstance(origin, (list, tuple)))


def is_dynamic(origin: Any) -> bool:
    return callable(origin) and not isinstance(origin, re.Pattern)


def _decode_entry(entry: Any) -> FixedOrigin | PatternOrigin | ReflectOrigin | None:
    if isinstance(entry, re.Pattern):
        return PatternOrigin(entry)
    if isinstance(entry, str):
        return FixedOrigin(entry)
    if entry is True:
        return ReflectOrigin()
    return None


def decode_origin(origin: Any) -> StaticOrigin:
    """Decode a static, non-denied ``origin`` value into its policy variant.

    Shapes that are not listed in the module docstring match nothing.
    """
    if origin == "*":
        return Wildcard()
    if isinstance(origin, str):
        return FixedOrigin(origin)
    if isinstance(origin, re.Pattern):
        return PatternOrigin(origin)
    if origin is True:
        return ReflectOrigin()
    if isinstance(origin, (list, tuple)):
        entries = (_decode_entry(entry) for entry in origin)
        return OriginList(tuple(entry for entry in entries if entry is not None))
    return OriginList(())


def classify_origin(origin: Any) -> OriginPolicy | None:
    """Return the policy for a merged ``origin`` option, or ``None`` when CORS is off."""
    if is_denied(origin):
        return None
    if is_dynamic(origin):
        return DynamicOrigin(origin)
    return decode_origin(origin)

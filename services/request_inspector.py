from __future__ import annotations

import re
from typing import Any, Mapping, Union

from fastapi import Request
from starlette.datastructures import QueryParams

from core.errors import ClientAddressError

DEFAULT_LANG = "en_US"

_INTEGER = re.compile(r"[+-]?[0-9]+")

Query = Union[QueryParams, Mapping[str, Any]]


def _first(query: Query, name: str) -> str:
    """First value of a query parameter, or "" when absent."""
    if hasattr(query, "getlist"):
        values = query.getlist(name)
        return values[0] if values else ""
    value = query.get(name)
    if isinstance(value, (list, tuple)):
        value = value[0] if value else ""
    return "" if value is None else str(value)


def is_param_set(request: Request, name: str) -> bool:
    return len(_first(request.query_params, name)) > 0


def lang(request: Request) -> str:
    """Requested locale code, passed through unvalidated."""
    return _first(request.query_params, "lang") or DEFAULT_LANG


def get_qs(query: Query, name: str, default: int) -> tuple[int, str]:
    """Read an integer query parameter for link building.

    Returns the number plus a ready-made "&name=value" fragment, or the
    default and "" when the parameter is missing or not an integer.
    """
    raw = _first(query, name)
    if not _INTEGER.fullmatch(raw):
        return default, ""
    return int(raw), f"&{name}={raw}"


def split_host_port(addr: str) -> tuple[str, str]:
    """Split "host:port" or "[v6host]:port"."""
    if addr.startswith("["):
        end = addr.find("]")
        if end < 0:
            raise ClientAddressError(f"missing ']' in address {addr!r}")
        host, rest = addr[1:end], addr[end + 1:]
        if not rest.startswith(":"):
            raise ClientAddressError(f"missing port in address {addr!r}")
        port = rest[1:]
        if ":" in port or "[" in port or "]" in port:
            raise ClientAddressError(f"unexpected characters in port of {addr!r}")
        return host, port

    if "]" in addr:
        raise ClientAddressError(f"unexpected ']' in address {addr!r}")
    host, sep, port = addr.rpartition(":")
    if not sep:
        raise ClientAddressError(f"missing port in address {addr!r}")
    if ":" in host:
        raise ClientAddressError(f"too many colons in address {addr!r}")
    return host, port


def get_host(request: Request) -> str:
    """Apparent client IP.

    A reverse proxy appends the real peer to X-Forwarded-For, so only the
    last entry is used; earlier hops are client supplied. Without the
    header, the connection's peer address is used.
    """
    forwarded = request.headers.get("x-forwarded-for", "")
    if forwarded:
        return forwarded.split(",")[-1].strip()

    client = request.scope.get("client")
    if not client:
        raise ClientAddressError("request has no peer address")
    if isinstance(client, str):
        return split_host_port(client)[0]
    return client[0]

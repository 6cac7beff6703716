"""Resource paths and query-language helpers.

Paths are relative to the configured base URL (`.../v3/company/`) and always start
with the realm id. Everything here is pure string work so it can be unit-tested
without a client.
"""

from __future__ import annotations

import re
from typing import Any, Mapping, Sequence
from urllib.parse import parse_qsl, quote_plus, urlencode, urlsplit, urlunsplit

from .entity import DEFAULT_CATALOG, EntityClassifier

Params = Mapping[str, Any] | Sequence[tuple[str, Any]]

_FROM_RE = re.compile(r"\bfrom\s+(\w+)", re.IGNORECASE)
_WHERE_RE = re.compile(r"\bwhere\b", re.IGNORECASE)
_TRAILING_WHERE_RE = re.compile(r"\bwhere\s*$", re.IGNORECASE)

INACTIVE_FILTER = "Active IN (true, false)"


def entity_path(
    realm_id: str, entity: str, catalog: EntityClassifier = DEFAULT_CATALOG
) -> str:
    return f"{realm_id}/{catalog.singular_of(entity).lower()}"


def query_path(query: str, realm_id: str) -> str:
    return f"{realm_id}/query?query={quote_plus(query)}"


def _pairs(params: Params | None) -> list[tuple[str, str]]:
    if not params:
        return []
    items = params.items() if isinstance(params, Mapping) else params
    return [(str(k), str(v)) for k, v in items]


def add_params(path: str, params: Params | None) -> str:
    """Append `params` to `path`, merging with whatever query string it already has."""

    pairs = _pairs(params)
    if not pairs:
        return path
    parts = urlsplit(path)
    merged = parse_qsl(parts.query, keep_blank_values=True) + pairs
    return urlunsplit(parts._replace(query=urlencode(merged)))


def finalize_path(
    path: str, *, params: Params | None = None, minor_version: str | None = None
) -> str:
    pairs = _pairs(params)
    if minor_version and not any(k == "minorversion" for k, _ in pairs):
        pairs.append(("minorversion", str(minor_version)))
    return add_params(path, pairs)


def extract_entity_from_query(query: str) -> str | None:
    """Entity named in the `FROM` clause (`select * from Invoice` -> `Invoice`)."""

    match = _FROM_RE.search(query or "")
    return match.group(1) if match else None


def build_all_query(
    entity: str,
    *,
    select: str | None = None,
    include_inactive: bool = False,
    catalog: EntityClassifier = DEFAULT_CATALOG,
) -> str:
    query = select or f"SELECT * FROM {catalog.singular_of(entity)}"
    if include_inactive:
        if _TRAILING_WHERE_RE.search(query):
            query = f"{query.rstrip()} {INACTIVE_FILTER}"
        elif _WHERE_RE.search(query):
            query = f"{query} AND {INACTIVE_FILTER}"
        else:
            query = f"{query} WHERE {INACTIVE_FILTER}"
    return query

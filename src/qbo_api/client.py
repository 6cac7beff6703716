"""QuickBooks Online (QBO) API client.

Purpose
- CRUD-style access to QBO entities (`query`, `get`, `create`, `update`, `delete`,
  `deactivate`) plus lazy pagination with `all`.
- One dispatch point (`request`) that builds the path, signs and sends, classifies
  failures and unwraps the entity payload.

Mutations need the record's current `SyncToken`. `update`, `delete` and
`deactivate` call `fetch_update_stamp` first, so each costs two round trips. The
stamp is never cached; a concurrent writer surfaces as `StaleObjectError`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, Iterator, Mapping

from .auth import build_auth
from .config import APP_CONNECTION_URL, QBOCredentials, QBOSettings
from .entity import DEFAULT_CATALOG, EntityClassifier
from .errors import NotFoundError, ParseFailure, UnsupportedOperation, raise_for_response
from .pagination import DEFAULT_PAGE_SIZE, paginate
from .paths import (
    Params,
    add_params,
    build_all_query,
    entity_path,
    extract_entity_from_query,
    finalize_path,
    query_path,
)
from .response import RawResponse, unwrap
from .transport import RequestDescriptor, Transport

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class UpdateStamp:
    id: str
    sync_token: str

    def as_payload(self) -> dict[str, str]:
        return {"Id": self.id, "SyncToken": self.sync_token}


class QBOClient:
    def __init__(
        self,
        *,
        credentials: QBOCredentials,
        settings: QBOSettings | None = None,
        catalog: EntityClassifier = DEFAULT_CATALOG,
        transport: Transport | None = None,
    ) -> None:
        self._credentials = credentials
        self._settings = settings or QBOSettings()
        self._catalog = catalog
        self._transport = transport or Transport(
            base_url=self._settings.base_url,
            auth=build_auth(credentials),
            timeout_seconds=self._settings.timeout_seconds,
            debug=self._settings.debug,
        )

    @classmethod
    def from_env(cls) -> "QBOClient":
        return cls(credentials=QBOCredentials.from_env(), settings=QBOSettings.from_env())

    @property
    def realm_id(self) -> str:
        return self._credentials.realm_id

    @property
    def settings(self) -> QBOSettings:
        return self._settings

    def entity_path(self, entity: str) -> str:
        return entity_path(self.realm_id, entity, self._catalog)

    # -- read ---------------------------------------------------------------

    def query(self, query: str, *, params: Params | None = None) -> list[Any] | None:
        """Run a query-language statement; None when nothing matched."""

        entity = extract_entity_from_query(query)
        return self.request(
            "GET", path=query_path(query, self.realm_id), entity=entity, params=params
        )

    def get(self, entity: str, id: str | int, *, params: Params | None = None) -> Any:
        path = f"{self.entity_path(entity)}/{id}"
        return self.request("GET", path=path, entity=entity, params=params)

    def all(
        self,
        entity: str,
        *,
        max_page_size: int = DEFAULT_PAGE_SIZE,
        select: str | None = None,
        include_inactive: bool = False,
    ) -> Iterator[Any]:
        """Lazily yield every record of `entity`, one page of `max_page_size` at a time."""

        base_query = build_all_query(
            entity, select=select, include_inactive=include_inactive, catalog=self._catalog
        )
        if max_page_size < 1:
            raise ValueError("max_page_size must be >= 1")
        return paginate(self.query, base_query, page_size=max_page_size)

    def company_info(self) -> Any:
        return self.get("CompanyInfo", self.realm_id)

    def reports(self, name: str, *, params: Params | None = None) -> Any:
        return self.request("GET", path=f"{self.realm_id}/reports/{name}", params=params)

    def cdc(self, entities: Iterable[str], changed_since: datetime | str) -> Any:
        """Change data capture: entities changed since `changed_since`."""

        if isinstance(changed_since, datetime):
            changed_since = changed_since.isoformat()
        names = ",".join(self._catalog.singular_of(e) for e in entities)
        path = add_params(
            f"{self.realm_id}/cdc", {"entities": names, "changedSince": changed_since}
        )
        return self.request("GET", path=path)

    # -- write --------------------------------------------------------------

    def create(self, entity: str, payload: Mapping[str, Any], *, params: Params | None = None) -> Any:
        return self.request(
            "POST", path=self.entity_path(entity), entity=entity, payload=dict(payload), params=params
        )

    def fetch_update_stamp(self, entity: str, id: str | int) -> UpdateStamp:
        record = self.get(entity, id)
        if not isinstance(record, dict) or isinstance(record, RawResponse) or "Id" not in record:
            name = self._catalog.singular_of(entity)
            raise NotFoundError(
                status_code=200,
                body=str(record),
                message=f"{name} {id} not found: the read returned no record with an Id",
            )
        return UpdateStamp(id=str(record["Id"]), sync_token=str(record.get("SyncToken", "")))

    def update(
        self,
        entity: str,
        id: str | int,
        payload: Mapping[str, Any],
        *,
        params: Params | None = None,
    ) -> Any:
        stamp = self.fetch_update_stamp(entity, id)
        body = {**payload, **stamp.as_payload()}
        return self.request(
            "POST", path=self.entity_path(entity), entity=entity, payload=body, params=params
        )

    def delete(self, entity: str, id: str | int) -> Any:
        if not self._catalog.is_transaction(entity):
            raise UnsupportedOperation(
                f"Delete is only for transaction entities; use deactivate for {entity}"
            )
        stamp = self.fetch_update_stamp(entity, id)
        path = add_params(self.entity_path(entity), {"operation": "delete"})
        return self.request("POST", path=path, entity=entity, payload=stamp.as_payload())

    def deactivate(self, entity: str, id: str | int) -> Any:
        if not self._catalog.is_name_list(entity):
            raise UnsupportedOperation(
                f"Deactivate is only for name list entities; use delete for {entity}"
            )
        stamp = self.fetch_update_stamp(entity, id)
        payload = {**stamp.as_payload(), "sparse": True, "Active": False}
        return self.request("POST", path=self.entity_path(entity), entity=entity, payload=payload)

    # -- connection ---------------------------------------------------------

    def disconnect(self) -> Any:
        return self.request("GET", path=f"{APP_CONNECTION_URL}/disconnect")

    def reconnect(self) -> Any:
        return self.request("GET", path=f"{APP_CONNECTION_URL}/reconnect")

    # -- dispatch -----------------------------------------------------------

    def request(
        self,
        method: str,
        *,
        path: str,
        entity: str | None = None,
        payload: Any = None,
        params: Params | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        descriptor = RequestDescriptor(
            method=method.upper(),
            path=finalize_path(path, params=params, minor_version=self._settings.minor_version),
            entity=entity,
            payload=payload,
            params=params,
            headers=headers,
        )
        resp = self._transport.send(descriptor)
        raise_for_response(resp, descriptor)

        try:
            return unwrap(resp.content, entity, self._catalog)
        except ParseFailure as e:
            e.request = descriptor
            raise

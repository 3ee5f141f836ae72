"""
Weaviate document store over the GraphQL and REST APIs.

Reads candidates with paginated GraphQL Get queries and deletes objects
one at a time through the REST objects endpoint.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import requests

from dedup.base import BaseDocumentStore, DeleteError, DocumentRecord, FetchError

from .config import StoreConfig
from .rate_limit import RateLimiter


@dataclass
class GraphQLQuery:
    """
    Typed builder for a Weaviate `Get` query.

    Only the subset needed to list documents: property selection, limit,
    cursor (`after`), offset and a single Equal filter on a text property.
    """
    class_name: str
    properties: List[str]
    limit: Optional[int] = None
    after: Optional[str] = None
    offset: Optional[int] = None
    where: Optional[Dict[str, str]] = None  # {"path": prop, "value": text}
    additional: List[str] = field(default_factory=lambda: ["id"])

    def __post_init__(self):
        if self.after is not None and self.where is not None:
            raise ValueError("Weaviate does not support cursor pagination with a where filter")

    def _arguments(self) -> str:
        args = []
        if self.where is not None:
            path = json.dumps([self.where["path"]])
            value = json.dumps(self.where["value"], ensure_ascii=False)
            args.append(f"where: {{path: {path}, operator: Equal, valueText: {value}}}")
        if self.limit is not None:
            args.append(f"limit: {int(self.limit)}")
        if self.after is not None:
            args.append(f"after: {json.dumps(self.after)}")
        if self.offset is not None:
            args.append(f"offset: {int(self.offset)}")
        return f"({', '.join(args)})" if args else ""

    def render(self) -> str:
        selection = " ".join(self.properties)
        additional = " ".join(self.additional)
        return (
            f"{{ Get {{ {self.class_name}{self._arguments()} "
            f"{{ {selection} _additional {{ {additional} }} }} }} }}"
        )


class WeaviateDocumentStore(BaseDocumentStore):
    """
    BaseDocumentStore backed by a Weaviate instance.

    Connection settings are injected through StoreConfig; nothing is read
    from the environment here.
    """

    def __init__(
        self,
        config: StoreConfig,
        session: Optional[requests.Session] = None,
        rate_limiter: Optional[RateLimiter] = None,
    ):
        """
        Args:
            config: Connection and schema settings
            session: HTTP session (a new one is created if None)
            rate_limiter: Pacing for delete requests (from config if None)
        """
        self.config = config
        self.session = session or requests.Session()
        self.session.headers.update(self._headers())
        self.rate_limiter = rate_limiter or RateLimiter(config.delete_interval)

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.config.api_key:
            headers["Authorization"] = f"Bearer {self.config.api_key}"
        return headers

    def describe(self) -> str:
        return f"Weaviate {self.config.url} ({self.config.class_name})"

    def ping(self) -> bool:
        """Check that the instance reports ready."""
        try:
            response = self.session.get(
                f"{self.config.url}/v1/.well-known/ready",
                timeout=self.config.timeout,
            )
        except requests.RequestException as e:
            print(f"[WEAVIATE] Connection error: {e}")
            return False
        return response.status_code == 200

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def _run_query(self, query: GraphQLQuery) -> List[Dict[str, Any]]:
        """Execute one Get query and return the (possibly empty) object list."""
        try:
            response = self.session.post(
                f"{self.config.url}/v1/graphql",
                json={"query": query.render()},
                timeout=self.config.timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as e:
            raise FetchError(f"GraphQL request failed: {e}") from e
        except ValueError as e:
            raise FetchError(f"GraphQL response is not valid JSON: {e}") from e

        if not isinstance(payload, dict):
            raise FetchError("GraphQL response has unexpected shape")
        if payload.get("errors"):
            messages = "; ".join(str(err.get("message", err)) for err in payload["errors"])
            raise FetchError(f"GraphQL errors: {messages}")

        data = payload.get("data") or {}
        get = data.get("Get") or {}
        return get.get(self.config.class_name) or []

    def _to_record(self, obj: Dict[str, Any]) -> Optional[DocumentRecord]:
        additional = obj.get("_additional") or {}
        doc_id = additional.get("id")
        if not doc_id:
            return None

        fm = self.config.field_map

        def text(key: str) -> Optional[str]:
            value = obj.get(fm[key])
            if value is None:
                return None
            return value if isinstance(value, str) else str(value)

        return DocumentRecord(
            id=str(doc_id),
            name=text("name"),
            content=text("content"),
            uploaded_at=text("uploaded_at"),
            source_tag=text("source_tag"),
            path=text("path"),
            file_type=text("file_type"),
        )

    def fetch_candidates(self, name_filter: Optional[str] = None) -> List[DocumentRecord]:
        """
        Read every document of the configured class.

        Unfiltered reads page with the `after` cursor; a name filter pages
        with offsets, since Weaviate cannot combine a cursor with `where`.

        Raises:
            FetchError: On transport, HTTP or GraphQL errors
        """
        properties = list(dict.fromkeys(self.config.field_map.values()))
        page_size = self.config.page_size
        where = {"path": self.config.field_map["name"], "value": name_filter} if name_filter else None

        records: List[DocumentRecord] = []
        skipped = 0
        after = None
        offset = 0

        while True:
            query = GraphQLQuery(
                class_name=self.config.class_name,
                properties=properties,
                limit=page_size,
                after=after if where is None else None,
                offset=offset if where is not None and offset else None,
                where=where,
            )
            objects = self._run_query(query)

            for obj in objects:
                record = self._to_record(obj)
                if record is None:
                    skipped += 1
                    continue
                records.append(record)

            if len(objects) < page_size:
                break
            if where is None:
                last = (objects[-1].get("_additional") or {}).get("id")
                if not last:
                    break
                after = last
            else:
                offset += page_size

        if skipped:
            print(f"[WEAVIATE] Skipped {skipped} objects without an id")
        print(f"[WEAVIATE] Fetched {len(records)} documents from {self.config.class_name}")
        return records

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def delete_by_id(self, document_id: str) -> None:
        """
        Delete one object by id.

        Raises:
            DeleteError: On transport errors, unknown ids and non-2xx statuses
        """
        self.rate_limiter.wait()
        url = f"{self.config.url}/v1/objects/{self.config.class_name}/{document_id}"
        try:
            response = self.session.delete(url, timeout=self.config.timeout)
        except requests.RequestException as e:
            raise DeleteError(f"Delete request for {document_id} failed: {e}") from e

        if response.status_code in (200, 204):
            return
        if response.status_code == 404:
            raise DeleteError(f"Document {document_id} not found")
        raise DeleteError(f"HTTP {response.status_code}: {response.text[:200]}")

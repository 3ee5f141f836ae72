"""
In-memory document store, optionally loaded from a JSONL export.

Used for offline dry runs against a dump of the Weaviate class and as a
test double for the engine.
"""

import json
import threading
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from dedup.base import BaseDocumentStore, DeleteError, DocumentRecord

from .config import DEFAULT_FIELD_MAP


def record_from_dict(data: Dict[str, Any], field_map: Optional[Dict[str, str]] = None) -> DocumentRecord:
    """
    Build a DocumentRecord from an exported object.

    Accepts both engine field names (name, content, ...) and Weaviate
    property names (file_name, zip_file_name, ...). The id may sit at the
    top level or under `_additional`.
    """
    field_map = field_map or DEFAULT_FIELD_MAP
    additional = data.get("_additional") or {}
    doc_id = data.get("id") or additional.get("id")
    if not doc_id:
        raise ValueError("record has no id")

    def pick(key: str) -> Optional[str]:
        value = data.get(key)
        if value is None:
            value = data.get(field_map[key])
        if value is None:
            return None
        return value if isinstance(value, str) else str(value)

    return DocumentRecord(
        id=str(doc_id),
        name=pick("name"),
        content=pick("content"),
        uploaded_at=pick("uploaded_at"),
        source_tag=pick("source_tag"),
        path=pick("path"),
        file_type=pick("file_type"),
    )


class InMemoryDocumentStore(BaseDocumentStore):
    """Dictionary-backed store keyed by document id."""

    def __init__(self, records: Iterable[DocumentRecord] = ()):
        self._records: Dict[str, DocumentRecord] = {}
        self._lock = threading.Lock()
        self.deleted: List[str] = []
        for record in records:
            if record.id in self._records:
                raise ValueError(f"Duplicate document id: {record.id}")
            self._records[record.id] = record

    @classmethod
    def from_jsonl(cls, path: Path) -> "InMemoryDocumentStore":
        """
        Load records from a JSONL file, one object per line.

        Invalid lines are reported and skipped.
        """
        records = []
        with open(path, 'r', encoding='utf-8') as f:
            for line_num, line in enumerate(f, 1):
                if not line.strip():
                    continue
                try:
                    records.append(record_from_dict(json.loads(line)))
                except (json.JSONDecodeError, ValueError) as e:
                    print(f"[ERROR] Line {line_num}: {e}")
        print(f"[STORE] Loaded {len(records)} documents from {path}")
        return cls(records)

    def describe(self) -> str:
        return f"in-memory store ({len(self._records)} documents)"

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, document_id: str) -> bool:
        return document_id in self._records

    def fetch_candidates(self, name_filter: Optional[str] = None) -> List[DocumentRecord]:
        with self._lock:
            records = list(self._records.values())
        if name_filter:
            records = [r for r in records if r.name == name_filter]
        return records

    def delete_by_id(self, document_id: str) -> None:
        with self._lock:
            if document_id not in self._records:
                raise DeleteError(f"Document {document_id} not found")
            del self._records[document_id]
            self.deleted.append(document_id)

"""
Weaviate helper functions for the cleanup scripts.
"""

import json
from pathlib import Path
from typing import List, Optional

from dedup.base import BaseDocumentStore, DocumentRecord
from store import InMemoryDocumentStore, StoreConfig, WeaviateDocumentStore


def get_document_store(
    input_path: Optional[str] = None,
    url: Optional[str] = None,
    class_name: Optional[str] = None,
) -> BaseDocumentStore:
    """
    Get a document store (offline JSONL dump or remote Weaviate).

    Args:
        input_path: JSONL export to load instead of connecting (None for remote)
        url: Weaviate URL (None reads WEAVIATE_URL)
        class_name: Weaviate class (None reads WEAVIATE_CLASS, default Documents)

    Returns:
        BaseDocumentStore instance
    """
    if input_path:
        print(f"[STORE] Using offline export: {input_path}")
        return InMemoryDocumentStore.from_jsonl(Path(input_path))

    config = StoreConfig.from_env(url=url, class_name=class_name)
    print(f"[WEAVIATE] Connecting to {config.url} (class: {config.class_name})")
    store = WeaviateDocumentStore(config)
    if not store.ping():
        print(f"[WEAVIATE] Warning: {config.url} did not report ready")
    return store


def export_documents_jsonl(records: List[DocumentRecord], output_path: Path) -> int:
    """
    Write a snapshot of documents as JSONL.

    The file can be fed back with --input for offline dry runs.

    Returns:
        Number of records written
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w', encoding='utf-8') as f:
        for record in records:
            f.write(json.dumps(record.to_dict(), ensure_ascii=False) + '\n')
    print(f"[EXPORT] Wrote {len(records)} documents to {output_path}")
    return len(records)

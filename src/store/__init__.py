"""
Document store implementations for the duplicate resolution engine.

- WeaviateDocumentStore: GraphQL reads and REST deletes against Weaviate
- InMemoryDocumentStore: offline store, loadable from a JSONL export
"""

from .config import StoreConfig, DEFAULT_FIELD_MAP
from .rate_limit import RateLimiter
from .weaviate import GraphQLQuery, WeaviateDocumentStore
from .memory import InMemoryDocumentStore, record_from_dict

__all__ = [
    "StoreConfig",
    "DEFAULT_FIELD_MAP",
    "RateLimiter",
    "GraphQLQuery",
    "WeaviateDocumentStore",
    "InMemoryDocumentStore",
    "record_from_dict",
]

"""
Connection settings for the Weaviate document store.

Values come from the environment (usually a .env file loaded by the
calling script) and are passed explicitly to the store constructor.
"""

import os
from dataclasses import dataclass, field
from typing import Dict, Optional


# Weaviate property names for each DocumentRecord field
DEFAULT_FIELD_MAP = {
    "name": "file_name",
    "content": "content",
    "uploaded_at": "upload_date",
    "source_tag": "zip_file_name",
    "path": "file_path",
    "file_type": "file_type",
}


@dataclass
class StoreConfig:
    """
    Configuration for WeaviateDocumentStore.

    Never hard-code credentials here; use from_env().
    """

    url: str
    api_key: Optional[str] = None
    class_name: str = "Documents"

    # Network
    timeout: float = 30.0
    page_size: int = 100

    # Minimum seconds between delete requests (0 disables pacing)
    delete_interval: float = 0.0

    field_map: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_FIELD_MAP))

    def __post_init__(self):
        """Validate configuration."""
        if not self.url:
            raise ValueError("url must be provided")
        self.url = self.url.rstrip("/")
        if "://" not in self.url:
            self.url = f"https://{self.url}"
        if self.page_size < 1:
            raise ValueError("page_size must be at least 1")
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")
        if self.delete_interval < 0:
            raise ValueError("delete_interval must not be negative")
        missing = set(DEFAULT_FIELD_MAP) - set(self.field_map)
        if missing:
            raise ValueError(f"field_map is missing: {sorted(missing)}")

    @classmethod
    def from_env(cls, **overrides) -> "StoreConfig":
        """
        Build a config from WEAVIATE_* environment variables.

        Keyword overrides that are not None win over the environment.

        Raises:
            ValueError: If WEAVIATE_URL is not set
        """
        url = os.getenv("WEAVIATE_URL")
        if not url and not overrides.get("url"):
            raise ValueError("WEAVIATE_URL must be provided or set in environment")

        values = {
            "url": url,
            "api_key": os.getenv("WEAVIATE_API_KEY") or None,
            "class_name": os.getenv("WEAVIATE_CLASS", "Documents"),
            "timeout": float(os.getenv("WEAVIATE_TIMEOUT", "30")),
            "page_size": int(os.getenv("WEAVIATE_PAGE_SIZE", "100")),
            "delete_interval": float(os.getenv("WEAVIATE_DELETE_INTERVAL", "0")),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

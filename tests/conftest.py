"""
Shared fixtures for the duplicate resolution tests.
"""

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from dedup.base import DocumentRecord  # noqa: E402

NOW = datetime(2025, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def make_record():
    """Factory for DocumentRecord with sensible defaults."""
    def _make(doc_id, name="report.md", content="some content here", **kwargs):
        return DocumentRecord(id=doc_id, name=name, content=content, **kwargs)
    return _make

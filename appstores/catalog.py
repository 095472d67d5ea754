"""
Catalog — the in-memory record store the whole site reads from.

The dataset is compiled once by the builder (see builder.py) and loaded once
per process. Nothing here creates, changes or deletes stores; a new dataset is
picked up by loading a new catalog.
"""

import json
import os
from typing import Optional

from appstores.config import DATASET_PATH
from appstores.models import DirectoryEntry


class StoreCatalog:
    """Read-only snapshot of every published store, in dataset order."""

    def __init__(self, entries=()):
        self._entries = tuple(entries)
        # First occurrence wins; the builder already rejects duplicate slugs.
        self._by_slug = {}
        for entry in self._entries:
            self._by_slug.setdefault(entry.slug, entry)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)

    def get_all(self) -> tuple:
        return self._entries

    def get_by_slug(self, slug: str) -> Optional[DirectoryEntry]:
        """Exact, case-sensitive lookup. Returns None when no store has this slug."""
        return self._by_slug.get(slug)

    def get_slugs(self) -> list[str]:
        return [e.slug for e in self._entries]

    def count(self) -> int:
        return len(self._entries)

    def total_app_count(self) -> int:
        return sum(e.metrics.app_count or 0 for e in self._entries)


def catalog_from_records(records: list[dict]) -> StoreCatalog:
    return StoreCatalog(DirectoryEntry.from_dict(r) for r in records)


def load_catalog(path: str = DATASET_PATH) -> StoreCatalog:
    """
    Load the compiled dataset from disk.

    A missing dataset is not an error: the site simply has no stores until
    the builder has run.
    """
    if not os.path.exists(path):
        print(f"No dataset found at {path}. Run the builder first: python -m appstores.builder")
        return StoreCatalog()

    with open(path, "r", encoding="utf-8") as f:
        records = json.load(f)

    return catalog_from_records(records)

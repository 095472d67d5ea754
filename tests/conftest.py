"""Shared fixtures: store records, entries and catalogs built from plain dicts."""

import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from appstores.catalog import StoreCatalog, catalog_from_records
from appstores.models import DirectoryEntry
from appstores.search import SearchEngine


def make_record(slug: str, name: str, category: str = "third-party", platforms=("android",), **extra) -> dict:
    """A minimal valid dataset record, with any extra camelCase fields merged in."""
    record = {
        "slug": slug,
        "name": name,
        "category": category,
        "platforms": list(platforms),
        "metadata": {"status": "active"},
    }
    record.update(extra)
    return record


def make_entry(slug: str, name: str, **kwargs) -> DirectoryEntry:
    return DirectoryEntry.from_dict(make_record(slug, name, **kwargs))


@pytest.fixture()
def new_record():
    """Factory for one-off records inside a test."""
    return make_record


@pytest.fixture()
def new_entry():
    """Factory for one-off entries inside a test."""
    return make_entry


@pytest.fixture()
def alpha_record() -> dict:
    """Android gaming store with a 30% commission and top stability."""
    return make_record(
        "a", "Alpha Store", category="gaming", platforms=["android"],
        fees={"commissionTiers": [{"percentage": 30, "description": "Standard rate"}]},
        ratings={"stability": 5},
    )


@pytest.fixture()
def beta_record() -> dict:
    """iOS gaming store with a 15% commission."""
    return make_record(
        "b", "Beta Store", category="gaming", platforms=["ios"],
        fees={"commissionTiers": [{"percentage": 15, "description": "Standard rate"}]},
        ratings={"stability": 3},
    )


@pytest.fixture()
def alpha(alpha_record) -> DirectoryEntry:
    return DirectoryEntry.from_dict(alpha_record)


@pytest.fixture()
def beta(beta_record) -> DirectoryEntry:
    return DirectoryEntry.from_dict(beta_record)


@pytest.fixture()
def two_store_catalog(alpha, beta) -> StoreCatalog:
    return StoreCatalog([alpha, beta])


@pytest.fixture()
def two_store_engine(two_store_catalog) -> SearchEngine:
    return SearchEngine(two_store_catalog)


@pytest.fixture()
def sample_records() -> list[dict]:
    """A small but varied directory, in dataset order."""
    return [
        make_record(
            "google-play", "Google Play", category="official", platforms=["android", "web"],
            tagline="The official app store for Android",
            description="Google's marketplace for Android apps and games.",
            company={"name": "Google LLC", "headquarters": "Mountain View, CA", "foundedYear": 2008},
            metrics={"appCount": 3_500_000},
            fees={
                "registrationFee": {"amount": 25, "currency": "USD", "type": "one-time"},
                "commissionTiers": [
                    {"percentage": 15, "description": "First $1M per year"},
                    {"percentage": 30, "description": "Above $1M per year"},
                ],
            },
            technical={"hasApi": True, "hasSdk": True, "supportsInAppPurchases": True,
                       "supportsSubscriptions": True},
            submission={"hasHumanReview": True, "typicalReviewTime": "1-3 days"},
            features={"hasBetaTesting": True, "hasAnalyticsDashboard": True},
            metadata={"status": "active", "featured": True, "featuredOrder": 1, "verified": True,
                      "dateAdded": "2024-01-01"},
            ratings={"stability": 5, "commission": 3, "competitiveness": 5, "discoverability": 4},
            relatedStores=["f-droid"],
        ),
        make_record(
            "f-droid", "F-Droid", category="open-source", platforms=["android"],
            tagline="Free and open source Android apps",
            description="A community catalogue of FOSS applications.",
            company={"name": "F-Droid Limited"},
            metrics={"appCount": 4_000},
            fees={"commissionTiers": [{"percentage": 0, "description": "No commission"}]},
            metadata={"status": "active", "dateAdded": "2024-03-01"},
            ratings={"stability": 4, "commission": 5, "technicalFreedom": 5},
        ),
        make_record(
            "steam", "Steam", category="gaming", platforms=["windows", "macos", "linux"],
            tagline="The largest PC gaming platform",
            description="Valve's digital distribution service for PC games.",
            company={"name": "Valve Corporation"},
            metrics={"appCount": 50_000},
            fees={
                "registrationFee": {"amount": 100, "currency": "USD", "type": "one-time"},
                "commissionTiers": [{"percentage": 30, "description": "Up to $10M"}],
            },
            technical={"hasApi": True},
            metadata={"status": "active", "featured": True, "featuredOrder": 3},
            ratings={"stability": 5, "competitiveness": 5},
        ),
        make_record(
            "gpt-store", "GPT Store", category="ai-assistants", platforms=["web"],
            tagline="Custom GPTs built on ChatGPT",
            company={"name": "OpenAI"},
            metadata={"status": "active", "featured": True, "dateAdded": "2024-06-01"},
        ),
    ]


@pytest.fixture()
def sample_catalog(sample_records) -> StoreCatalog:
    return catalog_from_records(sample_records)

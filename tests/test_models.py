"""Record parsing and validation: camelCase dataset shape <-> dataclasses."""

from datetime import date, datetime

import pytest

from appstores.models import DirectoryEntry, DirectoryEntrySummary, Fees, Metadata, RegistrationFee
from appstores.taxonomy import Category, EntryStatus, Platform, RatingDimension


def test_minimal_record_defaults(new_record):
    entry = DirectoryEntry.from_dict(new_record("acme", "Acme Apps", platforms=["ios", "android"]))

    assert entry.id == "acme"
    assert entry.category is Category.THIRD_PARTY
    assert entry.platforms == (Platform.IOS, Platform.ANDROID)
    assert entry.ratings is None
    assert entry.fees.commission_tiers == ()
    assert entry.technical.has_api is False
    assert entry.metadata.status is EntryStatus.ACTIVE


@pytest.mark.parametrize("missing", ["slug", "name", "category", "platforms"])
def test_required_fields(new_record, missing):
    record = new_record("acme", "Acme Apps")
    del record[missing]
    with pytest.raises(ValueError, match=missing):
        DirectoryEntry.from_dict(record)


def test_empty_platform_list_is_rejected(new_record):
    with pytest.raises(ValueError, match="platforms"):
        DirectoryEntry.from_dict(new_record("acme", "Acme Apps", platforms=[]))


def test_unknown_category_and_platform_are_rejected(new_record):
    with pytest.raises(ValueError, match="category"):
        DirectoryEntry.from_dict(new_record("acme", "Acme", category="arcade"))
    with pytest.raises(ValueError, match="platform"):
        DirectoryEntry.from_dict(new_record("acme", "Acme", platforms=["android", "symbian"]))


def test_ratings_keep_known_dimensions(new_record):
    entry = DirectoryEntry.from_dict(new_record(
        "acme", "Acme", ratings={"stability": 4, "reviewProcess": 2, "vibes": 5, "analytics": None},
    ))
    assert entry.ratings == {RatingDimension.STABILITY: 4, RatingDimension.REVIEW_PROCESS: 2}


@pytest.mark.parametrize("score", [0, 6, 3.5, "4", True])
def test_ratings_out_of_range_are_rejected(new_record, score):
    with pytest.raises(ValueError, match="stability"):
        DirectoryEntry.from_dict(new_record("acme", "Acme", ratings={"stability": score}))


def test_commission_tier_bounds(new_record):
    with pytest.raises(ValueError, match="0-100"):
        DirectoryEntry.from_dict(new_record("acme", "Acme", fees={"commissionTiers": [{"percentage": 130}]}))
    with pytest.raises(ValueError, match="number"):
        DirectoryEntry.from_dict(new_record("acme", "Acme", fees={"commissionTiers": [{"description": "?"}]}))


def test_unknown_pricing_model_is_rejected(new_record):
    with pytest.raises(ValueError, match="pricing model"):
        DirectoryEntry.from_dict(new_record("acme", "Acme", monetization={"models": ["barter"]}))


def test_free_to_publish():
    assert Fees().is_free_to_publish
    assert Fees(registration_fee=RegistrationFee(amount=0)).is_free_to_publish
    assert not Fees(registration_fee=RegistrationFee(amount=25)).is_free_to_publish


def test_metadata_dates_accept_strings_and_dates():
    meta = Metadata.from_dict({"lastUpdated": "2024-05-02T10:30:00Z", "dateAdded": date(2023, 1, 9)})
    assert meta.last_updated == date(2024, 5, 2)
    assert meta.date_added == date(2023, 1, 9)

    meta = Metadata.from_dict({"dateAdded": datetime(2022, 7, 1, 12, 0)})
    assert meta.date_added == date(2022, 7, 1)


def test_metadata_rejects_unknown_status():
    with pytest.raises(ValueError, match="status"):
        Metadata.from_dict({"status": "archived"})


def test_to_dict_uses_dataset_keys(sample_catalog):
    data = sample_catalog.get_by_slug("google-play").to_dict()

    assert data["category"] == "official"
    assert data["platforms"] == ["android", "web"]
    assert data["fees"]["registrationFee"] == {"amount": 25, "currency": "USD", "type": "one-time"}
    assert [t["percentage"] for t in data["fees"]["commissionTiers"]] == [15, 30]
    assert data["metadata"]["dateAdded"] == "2024-01-01"
    assert data["ratings"]["stability"] == 5
    assert data["relatedStores"] == ["f-droid"]
    assert "seo" not in data


def test_to_dict_then_from_dict_is_lossless(sample_catalog):
    for entry in sample_catalog:
        assert DirectoryEntry.from_dict(entry.to_dict()) == entry


def test_summary_field_names():
    assert DirectoryEntrySummary.field_names() == [
        "id", "name", "slug", "tagline", "logo", "category", "platforms",
        "app_count", "commission_tiers", "featured", "verified", "ratings",
    ]


@pytest.mark.parametrize("field_name", ["slug", "name", "tagline", "description", "url", "content"])
def test_text_fields_must_be_strings(new_record, field_name):
    record = new_record("acme", "Acme")
    record[field_name] = 2048
    with pytest.raises(ValueError, match=f"'{field_name}' must be text"):
        DirectoryEntry.from_dict(record)


def test_company_name_must_be_a_string(new_record):
    with pytest.raises(ValueError, match="'name' must be text"):
        DirectoryEntry.from_dict(new_record("acme", "Acme", company={"name": 3}))

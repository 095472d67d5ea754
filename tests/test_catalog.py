"""In-memory record store and dataset loading."""

import json

from appstores.catalog import StoreCatalog, load_catalog


def test_lookup_by_slug(sample_catalog):
    assert sample_catalog.get_by_slug("steam").name == "Steam"
    assert sample_catalog.get_by_slug("Steam") is None
    assert sample_catalog.get_by_slug("epic-games-store") is None


def test_get_all_keeps_dataset_order(sample_catalog):
    assert [e.slug for e in sample_catalog.get_all()] == ["google-play", "f-droid", "steam", "gpt-store"]
    assert sample_catalog.get_slugs() == ["google-play", "f-droid", "steam", "gpt-store"]


def test_counts(sample_catalog):
    assert sample_catalog.count() == 4
    assert len(sample_catalog) == 4
    # gpt-store has no app count
    assert sample_catalog.total_app_count() == 3_500_000 + 4_000 + 50_000


def test_first_entry_wins_on_duplicate_slug(new_entry):
    first = new_entry("dup", "First")
    second = new_entry("dup", "Second")
    catalog = StoreCatalog([first, second])

    assert catalog.get_by_slug("dup") is first
    assert catalog.count() == 2


def test_empty_catalog():
    catalog = StoreCatalog()
    assert catalog.count() == 0
    assert catalog.get_all() == ()
    assert catalog.total_app_count() == 0


def test_load_catalog_from_json(tmp_path, sample_records):
    path = tmp_path / "stores.json"
    path.write_text(json.dumps(sample_records), encoding="utf-8")

    catalog = load_catalog(str(path))
    assert catalog.get_slugs() == ["google-play", "f-droid", "steam", "gpt-store"]


def test_load_catalog_without_dataset(tmp_path, capsys):
    catalog = load_catalog(str(tmp_path / "missing.json"))

    assert catalog.count() == 0
    assert "No dataset found" in capsys.readouterr().out

"""
Dataset builder — compiles the authored store documents into one JSON file.

Each store lives in content/stores/<slug>.md: a YAML front matter block with
the structured fields, followed by the Markdown write-up.

    ---
    name: F-Droid
    slug: f-droid
    ...
    ---
    F-Droid is a catalogue of free and open-source Android apps...

Only stores whose metadata.status is "active" are published. Every record is
validated on the way in, so the site itself can trust the dataset.

Run with: python -m appstores.builder
"""

import argparse
import json
import os
import re

import yaml

from appstores.config import CONTENT_DIR, DATASET_PATH
from appstores.models import DirectoryEntry
from appstores.taxonomy import EntryStatus


CONTENT_EXTENSIONS = (".md", ".mdx")

_FRONT_MATTER_RE = re.compile(r"\A---\s*\n(?P<front_matter>.*?)\n---\s*(?:\n|\Z)", re.DOTALL)


class ContentError(ValueError):
    """A store document could not be turned into a valid dataset record."""

    def __init__(self, message: str, path: str = None):
        self.path = path
        super().__init__(f"{path}: {message}" if path else message)


def split_front_matter(text: str) -> tuple[dict, str]:
    """
    Separate the YAML front matter from the Markdown body.

    Returns:
        (front matter dict, body). A document without front matter gives ({}, text).

    Raises:
        ContentError: the front matter is not valid YAML, or not a mapping.
    """
    match = _FRONT_MATTER_RE.match(text)
    if not match:
        return {}, text

    try:
        data = yaml.safe_load(match.group("front_matter"))
    except yaml.YAMLError as e:
        raise ContentError(f"Invalid YAML front matter: {e}")

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ContentError(f"Front matter must be a mapping, got {type(data).__name__}")

    return data, text[match.end():]


def parse_store_file(path: str) -> dict:
    """Read one store document. The Markdown body becomes the `content` field."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            source = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise ContentError(f"Cannot read store document: {e}", path) from e

    try:
        data, body = split_front_matter(source)
    except ContentError as e:
        raise ContentError(str(e), path) from e

    data["content"] = body.strip()
    return data


def list_content_files(content_dir: str) -> list[str]:
    return sorted(
        os.path.join(content_dir, name)
        for name in os.listdir(content_dir)
        if name.endswith(CONTENT_EXTENSIONS)
    )


def _is_active(record: dict) -> bool:
    metadata = record.get("metadata") or {}
    return EntryStatus.parse(metadata.get("status")) is EntryStatus.ACTIVE


def build_dataset(content_dir: str = CONTENT_DIR) -> list[DirectoryEntry]:
    """
    Parse, filter, validate and sort every store document in a directory.

    Raises:
        ContentError: missing directory, unreadable document, invalid record,
                      or two documents sharing a slug.
    """
    if not os.path.isdir(content_dir):
        raise ContentError(f"Content directory not found: {content_dir}")

    files = list_content_files(content_dir)
    print(f"Found {len(files)} store documents in {content_dir}")

    entries = []
    seen_slugs = {}
    skipped = 0

    for path in files:
        record = parse_store_file(path)

        if not _is_active(record):
            skipped += 1
            continue

        try:
            entry = DirectoryEntry.from_dict(record)
        except (ValueError, TypeError, AttributeError) as e:
            raise ContentError(str(e), path) from e

        if entry.slug in seen_slugs:
            raise ContentError(f"Duplicate slug '{entry.slug}' (also used by {seen_slugs[entry.slug]})", path)
        seen_slugs[entry.slug] = path
        entries.append(entry)

    if skipped:
        print(f"  Skipped {skipped} stores that are not active")

    entries.sort(key=lambda e: (e.name.casefold(), e.name))
    return entries


def write_dataset(entries: list[DirectoryEntry], output_path: str = DATASET_PATH) -> None:
    output_dir = os.path.dirname(output_path)
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)

    with open(output_path, "w", encoding="utf-8") as f:
        json.dump([e.to_dict() for e in entries], f, indent=2, ensure_ascii=False)

    print(f"Generated {len(entries)} stores to {output_path}")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Compile store documents into the site dataset")
    parser.add_argument("--content-dir", type=str, default=CONTENT_DIR,
                        help=f"Directory of store documents (default: {CONTENT_DIR})")
    parser.add_argument("--output", type=str, default=DATASET_PATH,
                        help=f"Dataset file to write (default: {DATASET_PATH})")
    args = parser.parse_args(argv)

    try:
        entries = build_dataset(args.content_dir)
    except ContentError as e:
        print(f"Build failed: {e}")
        return 1

    write_dataset(entries, args.output)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

"""
Projection — turns a full store record into the lighter card used by list views.
"""

from appstores.models import DirectoryEntry, DirectoryEntrySummary


def to_summary(entry: DirectoryEntry) -> DirectoryEntrySummary:
    """Copy only the card fields. Missing optional values stay None."""
    return DirectoryEntrySummary(
        id=entry.id,
        name=entry.name,
        slug=entry.slug,
        tagline=entry.tagline,
        logo=entry.logo,
        category=entry.category,
        platforms=entry.platforms,
        app_count=entry.metrics.app_count,
        commission_tiers=entry.fees.commission_tiers,
        featured=entry.metadata.featured,
        verified=entry.metadata.verified,
        ratings=dict(entry.ratings) if entry.ratings is not None else None,
    )


def to_summaries(entries) -> list[DirectoryEntrySummary]:
    return [to_summary(e) for e in entries]

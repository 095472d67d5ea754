"""
Side-by-side comparison of two stores ("google-play-vs-apple-app-store").
"""

from dataclasses import dataclass
from typing import Optional

from appstores.models import DirectoryEntry
from appstores.sorting import MISSING_COMMISSION
from appstores.taxonomy import RATING_DIMENSIONS

SEPARATOR = "-vs-"

POPULAR_COMPARISONS = [
    "google-play-vs-apple-app-store",
    "google-play-vs-amazon-appstore",
    "apple-app-store-vs-samsung-galaxy-store",
    "steam-vs-epic-games-store",
    "f-droid-vs-google-play",
    "huawei-appgallery-vs-google-play",
]


@dataclass(frozen=True)
class ComparisonRow:
    label: str
    left: object
    right: object
    highlight: Optional[str] = None     # "left", "right" or None


def comparison_slug(slug1: str, slug2: str) -> str:
    return f"{slug1}{SEPARATOR}{slug2}"


def parse_comparison_slug(slug: str) -> Optional[tuple[str, str]]:
    """'a-vs-b' -> ('a', 'b'). Anything without exactly one separator gives None."""
    parts = (slug or "").split(SEPARATOR)
    if len(parts) != 2 or not all(parts):
        return None
    return parts[0], parts[1]


def get_comparison(catalog, slug: str) -> Optional[tuple[DirectoryEntry, DirectoryEntry]]:
    parsed = parse_comparison_slug(slug)
    if parsed is None:
        return None
    left, right = catalog.get_by_slug(parsed[0]), catalog.get_by_slug(parsed[1])
    if left is None or right is None:
        return None
    return left, right


def get_popular_comparisons(catalog) -> list[tuple[DirectoryEntry, DirectoryEntry]]:
    """The curated pairs whose stores both exist in the catalog."""
    pairs = (get_comparison(catalog, slug) for slug in POPULAR_COMPARISONS)
    return [p for p in pairs if p is not None]


def format_fee(entry: DirectoryEntry) -> str:
    fee = entry.fees.registration_fee
    if entry.fees.is_free_to_publish:
        return "Free"
    period = "/year" if fee.type == "annual" else "one-time"
    return f"{fee.currency}{fee.amount:g} {period}"


def format_number(num: Optional[int]) -> str:
    if not num:
        return "N/A"
    if num >= 1_000_000:
        return f"{num / 1_000_000:.1f}M"
    if num >= 1_000:
        return f"{num / 1_000:.0f}K"
    return str(num)


def _lower_wins(left: float, right: float) -> Optional[str]:
    if left < right:
        return "left"
    if right < left:
        return "right"
    return None


def _higher_wins(left: float, right: float) -> Optional[str]:
    return _lower_wins(-left, -right)


def _commission(entry: DirectoryEntry) -> Optional[float]:
    tiers = entry.fees.commission_tiers
    return tiers[0].percentage if tiers else None


def compare_entries(left: DirectoryEntry, right: DirectoryEntry) -> list[ComparisonRow]:
    """Rows for the comparison table, in display order."""
    left_commission, right_commission = _commission(left), _commission(right)

    def commission_text(value):
        return f"{value:g}%" if value is not None else "N/A"

    rows = [
        ComparisonRow(
            "Commission", commission_text(left_commission), commission_text(right_commission),
            _lower_wins(
                left_commission if left_commission is not None else MISSING_COMMISSION,
                right_commission if right_commission is not None else MISSING_COMMISSION,
            ),
        ),
        ComparisonRow("Registration Fee", format_fee(left), format_fee(right)),
        ComparisonRow("Review Time",
                      left.submission.typical_review_time or "Not specified",
                      right.submission.typical_review_time or "Not specified"),
        ComparisonRow("App Count", format_number(left.metrics.app_count), format_number(right.metrics.app_count)),
    ]

    booleans = [
        ("Has API", lambda e: e.technical.has_api),
        ("Has SDK", lambda e: e.technical.has_sdk),
        ("In-App Purchases", lambda e: e.technical.supports_in_app_purchases),
        ("Subscriptions", lambda e: e.technical.supports_subscriptions),
        ("Human Review", lambda e: e.submission.has_human_review),
        ("Analytics Dashboard", lambda e: e.features.has_analytics_dashboard),
        ("Beta Testing", lambda e: e.features.has_beta_testing),
    ]
    for label, getter in booleans:
        rows.append(ComparisonRow(label, getter(left), getter(right)))

    for info in RATING_DIMENSIONS:
        left_score = (left.ratings or {}).get(info.id)
        right_score = (right.ratings or {}).get(info.id)
        if left_score is None and right_score is None:
            continue
        rows.append(ComparisonRow(
            f"{info.name} rating", left_score, right_score,
            _higher_wins(left_score or 0, right_score or 0),
        ))

    return rows

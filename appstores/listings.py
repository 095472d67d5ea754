"""
Listings — the curated collections behind the home page and the landing pages
(featured, by category / platform, AI stores, features, monetization, best-of).

Everything returns store cards and never raises for an unknown id: unknown
feature, monetization type or dimension slug gives None, so the page layer can
render a not-found page.
"""

from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional

from appstores.config import FEATURED_LIMIT, LOW_COMMISSION_MAX, MIN_RATING_THRESHOLD
from appstores.filters import by_capability, by_category, by_platform, by_fee_status, by_min_rating
from appstores.projection import to_summaries
from appstores.sorting import rating_for, name_key
from appstores.taxonomy import AI_CATEGORIES, RatingDimension


UNORDERED_FEATURED = 99


def _featured_order(entry) -> int:
    order = entry.metadata.featured_order
    return order if order is not None else UNORDERED_FEATURED


# ============================================================
# HOME PAGE
# ============================================================

def get_featured(catalog, limit: int = FEATURED_LIMIT) -> list:
    featured = [e for e in catalog.get_all() if e.metadata.featured]
    featured.sort(key=_featured_order)
    return to_summaries(featured[:limit])


def get_ai_stores(catalog) -> list:
    in_ai = by_category(AI_CATEGORIES)
    stores = sorted((e for e in catalog.get_all() if in_ai(e)), key=_featured_order)
    return to_summaries(stores)


def get_recently_added(catalog, limit: int = 6, categories=None) -> list:
    """Newest first by date added; stores without a date go last."""
    stores = list(catalog.get_all())
    if categories is not None:
        in_categories = by_category(categories)
        stores = [e for e in stores if in_categories(e)]
    stores.sort(key=lambda e: (e.metadata.date_added is None,
                               -(e.metadata.date_added or date.min).toordinal()))
    return to_summaries(stores[:limit])


# ============================================================
# CATEGORY / PLATFORM PAGES
# ============================================================

def get_by_category(catalog, category) -> list:
    predicate = by_category([category])
    return to_summaries(e for e in catalog.get_all() if predicate(e))


def get_by_platform(catalog, platform) -> list:
    predicate = by_platform([platform])
    return to_summaries(e for e in catalog.get_all() if predicate(e))


def get_by_category_and_platform(catalog, category, platform) -> list:
    in_category = by_category([category])
    on_platform = by_platform([platform])
    return to_summaries(e for e in catalog.get_all() if in_category(e) and on_platform(e))


def get_related(catalog, entry, limit: int = 4) -> list:
    """
    Stores to show under a detail page.
    Explicit `relatedStores` win; otherwise stores sharing the category or a platform.
    """
    if entry.related_stores:
        wanted = set(entry.related_stores)
        return to_summaries(e for e in catalog.get_all() if e.slug in wanted)

    related = [
        e for e in catalog.get_all()
        if e.slug != entry.slug
        and (e.category == entry.category or any(p in entry.platforms for p in e.platforms))
    ]
    return to_summaries(related[:limit])


# ============================================================
# FEATURE PAGES
# ============================================================

@dataclass(frozen=True)
class CollectionInfo:
    id: str
    name: str
    short_name: str
    description: str
    predicate: Callable


FEATURES = [
    CollectionInfo("api", "App Stores with API Support", "API Support",
                   "App stores that provide APIs for automated publishing, analytics, and app management.",
                   by_capability("hasApi", True)),
    CollectionInfo("sdk", "App Stores with SDK Support", "SDK Support",
                   "App stores offering SDKs for deep integration with your applications.",
                   by_capability("hasSdk", True)),
    CollectionInfo("subscriptions", "App Stores Supporting Subscriptions", "Subscriptions",
                   "App stores that support subscription-based monetization for recurring revenue.",
                   by_capability("supportsSubscriptions", True)),
    CollectionInfo("in-app-purchases", "App Stores with In-App Purchases", "In-App Purchases",
                   "App stores enabling in-app purchase functionality for digital goods and consumables.",
                   by_capability("supportsInAppPurchases", True)),
    CollectionInfo("beta-testing", "App Stores with Beta Testing", "Beta Testing",
                   "App stores offering beta testing programs for pre-release app distribution.",
                   by_capability("hasBetaTesting", True)),
    CollectionInfo("analytics", "App Stores with Analytics Dashboard", "Analytics",
                   "App stores providing built-in analytics dashboards for tracking app performance.",
                   by_capability("hasAnalyticsDashboard", True)),
]


def _first_tier_at_most(maximum: float) -> Callable:
    # Stores without any commission tier are left out
    def predicate(entry) -> bool:
        tiers = entry.fees.commission_tiers
        return bool(tiers) and tiers[0].percentage <= maximum
    return predicate


def _first_tier_is_zero(entry) -> bool:
    tiers = entry.fees.commission_tiers
    return bool(tiers) and tiers[0].percentage == 0


MONETIZATION_TYPES = [
    CollectionInfo("free-to-publish", "Free to Publish App Stores", "Free to Publish",
                   "App stores with no registration fee or upfront cost to publish your apps.",
                   by_fee_status(True)),
    CollectionInfo("low-commission", "Low Commission App Stores", "Low Commission",
                   f"App stores with commission rates of {LOW_COMMISSION_MAX:g}% or less, maximizing your revenue share.",
                   _first_tier_at_most(LOW_COMMISSION_MAX)),
    CollectionInfo("no-commission", "Zero Commission App Stores", "Zero Commission",
                   "App stores that take no cut of your revenue - keep 100% of your earnings.",
                   _first_tier_is_zero),
]


def _find(collections: list[CollectionInfo], collection_id: str) -> Optional[CollectionInfo]:
    return next((c for c in collections if c.id == collection_id), None)


def get_feature(feature_id: str) -> Optional[CollectionInfo]:
    return _find(FEATURES, feature_id)


def get_monetization_type(type_id: str) -> Optional[CollectionInfo]:
    return _find(MONETIZATION_TYPES, type_id)


def get_collection_stores(catalog, collection: CollectionInfo) -> list:
    return to_summaries(e for e in catalog.get_all() if collection.predicate(e))


def get_feature_stores(catalog, feature_id: str) -> Optional[list]:
    feature = get_feature(feature_id)
    return get_collection_stores(catalog, feature) if feature else None


def get_monetization_stores(catalog, type_id: str) -> Optional[list]:
    monetization_type = get_monetization_type(type_id)
    return get_collection_stores(catalog, monetization_type) if monetization_type else None


def get_low_commission(catalog, maximum: float = LOW_COMMISSION_MAX) -> list:
    predicate = _first_tier_at_most(maximum)
    return to_summaries(e for e in catalog.get_all() if predicate(e))


# ============================================================
# BEST-OF PAGES
# ============================================================

DIMENSION_SLUGS = {
    RatingDimension.COMMISSION: "commission-rates",
    RatingDimension.REVIEW_PROCESS: "review-process",
    RatingDimension.STABILITY: "stability",
    RatingDimension.DEVELOPER_SUPPORT: "developer-support",
    RatingDimension.DISCOVERABILITY: "discoverability",
    RatingDimension.COMPETITIVENESS: "market-reach",
    RatingDimension.ENTRY_BARRIERS: "low-barriers",
    RatingDimension.TECHNICAL_FREEDOM: "technical-freedom",
    RatingDimension.ANALYTICS: "analytics",
}

SLUG_TO_DIMENSION = {slug: dimension for dimension, slug in DIMENSION_SLUGS.items()}


def dimension_from_slug(slug: str) -> Optional[RatingDimension]:
    return SLUG_TO_DIMENSION.get(slug)


def get_top_rated(catalog, dimension, limit: int = 20) -> list:
    """Stores rated on this dimension, best first (ties by name)."""
    parsed = RatingDimension.parse(dimension)
    if parsed is None:
        return []
    rated = to_summaries(e for e in catalog.get_all() if e.ratings and parsed in e.ratings)
    rated.sort(key=lambda s: (-rating_for(s, parsed), name_key(s)))
    return rated[:limit]


def get_by_min_rating(catalog, dimension, minimum: int = MIN_RATING_THRESHOLD) -> list:
    predicate = by_min_rating(dimension, minimum)
    parsed = RatingDimension.parse(dimension)
    stores = to_summaries(e for e in catalog.get_all() if predicate(e))
    stores.sort(key=lambda s: (-rating_for(s, parsed), name_key(s)))
    return stores

"""
Browse — the listing page's query pipeline.

    search (if q)  ->  filter  ->  sort  ->  cards

Both paths (search and plain browse) go through the same filter criteria, so
search results narrow exactly like the catalog does.
"""

from dataclasses import dataclass
from typing import Mapping, Optional

from appstores.filters import FilterCriteria, parse_filter_params, filter_entries, build_predicates
from appstores.projection import to_summaries
from appstores.search import SearchEngine, SearchResult
from appstores.sorting import SortOption, parse_sort_option, is_valid_sort_option, sort_summaries


@dataclass
class BrowseResult:
    stores: list                     # DirectoryEntrySummary (browse) or SearchResult (search)
    query: Optional[str]
    sort: Optional[SortOption]       # None when search results keep relevance order
    criteria: FilterCriteria

    @property
    def total(self) -> int:
        return len(self.stores)

    @property
    def is_search(self) -> bool:
        return self.query is not None


def filter_search_results(results: list[SearchResult], criteria: FilterCriteria) -> list[SearchResult]:
    """Apply filter criteria to search hits, keeping relevance order."""
    predicates = build_predicates(criteria)
    return [r for r in results if all(p(r.entry) for p in predicates)]


def browse_stores(catalog, engine: SearchEngine, params: Mapping) -> BrowseResult:
    """
    Run one listing request.

    Args:
        catalog: The StoreCatalog to browse.
        engine:  The SearchEngine built over the same catalog.
        params:  Raw query parameters: q, category, platform, sort, minRating,
                 free and capability flags such as hasApi.
    """
    criteria = parse_filter_params(params)
    raw_sort = params.get("sort")
    query = (params.get("q") or "").strip()

    if query:
        results = filter_search_results(engine.search(query), criteria)
        sort = None
        if is_valid_sort_option(raw_sort):
            sort = parse_sort_option(raw_sort)
            results = sort_summaries(results, sort, summary_of=lambda r: r.summary)
        return BrowseResult(stores=results, query=query, sort=sort, criteria=criteria)

    sort = parse_sort_option(raw_sort)
    cards = to_summaries(filter_entries(catalog.get_all(), criteria))
    return BrowseResult(stores=sort_summaries(cards, sort), query=None, sort=sort, criteria=criteria)

"""
App Store Directory — browse, search, compare and rank app marketplaces.
Run with: streamlit run appstores/dashboard.py
"""

import streamlit as st
import plotly.graph_objects as go
import pandas as pd

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from appstores.config import DATASET_PATH, CONTENT_DIR, MIN_RATING_THRESHOLD
from appstores.catalog import load_catalog
from appstores.search import SearchEngine
from appstores.browse import browse_stores
from appstores.builder import build_dataset, write_dataset, ContentError
from appstores.filters import parse_filter_params
from appstores.sorting import (
    SortOption, SORT_LABELS, parse_sort_option, is_valid_sort_option, overall_rating, first_commission,
)
from appstores.compare import compare_entries, comparison_slug, get_comparison, format_fee, format_number
from appstores.listings import (
    FEATURES, MONETIZATION_TYPES, DIMENSION_SLUGS,
    get_featured, get_related, get_top_rated, get_collection_stores, dimension_from_slug,
)
from appstores.taxonomy import (
    CATEGORIES, PLATFORMS, RATING_DIMENSIONS,
    get_category_info, get_platform_info, get_rating_dimension_info,
)

# ============================================================
# PAGE CONFIG
# ============================================================
st.set_page_config(
    page_title="App Store Directory",
    page_icon="◆",
    layout="wide",
    initial_sidebar_state="expanded",
)

# ============================================================
# STYLING
# ============================================================
CUSTOM_CSS = """
<style>
@import url('https://fonts.googleapis.com/css2?family=Inter:wght@300;400;500;600;700&display=swap');
html, body, [class*="css"] { font-family: 'Inter', -apple-system, BlinkMacSystemFont, sans-serif; }

footer {visibility: hidden;}
#MainMenu {visibility: hidden;}

:root {
    --bg-elevated: #232b36;
    --border: rgba(200,220,255,0.08);
    --text-primary: #e3e8ef;
    --text-secondary: #94a0b0;
    --accent: #4f8cc9;
}

[data-testid="stMetric"] {
    background: var(--bg-elevated);
    border: 1px solid var(--border); border-radius: 14px;
    padding: 18px 22px; box-shadow: 0 2px 12px rgba(0,0,0,0.2);
}
[data-testid="stMetric"] label {
    color: var(--text-secondary) !important; font-weight: 500; font-size: 0.72rem;
    text-transform: uppercase; letter-spacing: 0.06em;
}
[data-testid="stSidebar"] {
    background: linear-gradient(180deg, #0f141b 0%, #171e28 100%);
    border-right: 1px solid var(--border);
}
.stTabs [data-baseweb="tab-list"] { gap: 4px; border-bottom-color: var(--border); }
.stTabs [aria-selected="true"] { border-bottom: 2px solid var(--accent) !important; }
.streamlit-expanderHeader { font-weight: 500; border-radius: 10px; }
hr { border-color: var(--border); }
</style>
"""

st.markdown(CUSTOM_CSS, unsafe_allow_html=True)

CHART_COLORS = ["#4f8cc9", "#5fb39a", "#d0a24f", "#a07cc5", "#d9706a"]


def apply_chart_style(fig):
    fig.update_layout(
        font=dict(family="Inter, sans-serif", color="#94a0b0"),
        paper_bgcolor="rgba(0,0,0,0)", plot_bgcolor="rgba(0,0,0,0)",
        title_font=dict(size=14, color="#e3e8ef"),
        xaxis=dict(gridcolor="rgba(200,220,255,0.04)", linecolor="rgba(200,220,255,0.08)",
                   tickfont=dict(color="#94a0b0")),
        yaxis=dict(gridcolor="rgba(200,220,255,0.04)", linecolor="rgba(200,220,255,0.08)",
                   tickfont=dict(color="#94a0b0")),
        legend=dict(font=dict(color="#94a0b0", size=10)),
        margin=dict(l=40, r=20, t=45, b=35),
    )
    return fig


# ============================================================
# CACHED RESOURCES
# ============================================================
@st.cache_resource
def get_catalog():
    return load_catalog(DATASET_PATH)


@st.cache_resource
def get_search_engine():
    return SearchEngine(get_catalog())


def _category_label(category) -> str:
    info = get_category_info(category)
    return info.name if info else str(category)


def _platform_labels(platforms) -> str:
    names = []
    for p in platforms:
        info = get_platform_info(p)
        names.append(info.name if info else str(p))
    return ", ".join(names)


def _cards_table(cards) -> pd.DataFrame:
    rows = []
    for card in cards:
        commission = first_commission(card) if card.commission_tiers else None
        overall = overall_rating(card.ratings)
        rows.append({
            "Store": ("★ " if card.featured else "") + card.name,
            "Category": _category_label(card.category),
            "Platforms": _platform_labels(card.platforms),
            "Apps": format_number(card.app_count),
            "Commission": f"{commission:g}%" if commission is not None else "N/A",
            "Overall rating": round(overall, 1) if overall else None,
            "Verified": card.verified,
        })
    return pd.DataFrame(rows)


# ============================================================
# CHARTS
# ============================================================
def chart_ratings_radar(entries):
    dims = [d for d in RATING_DIMENSIONS if any(e.ratings and d.id in e.ratings for e in entries)]
    if not dims:
        st.caption("No ratings to compare.")
        return
    labels = [d.short_name for d in dims]
    fig = go.Figure()
    for idx, entry in enumerate(entries):
        scores = [(entry.ratings or {}).get(d.id, 0) for d in dims]
        fig.add_trace(go.Scatterpolar(
            r=scores + scores[:1], theta=labels + labels[:1], name=entry.name, fill="toself",
            line=dict(color=CHART_COLORS[idx % len(CHART_COLORS)], width=2), opacity=0.7,
        ))
    fig.update_layout(title="Ratings", height=420,
                      polar=dict(radialaxis=dict(range=[0, 5], tickfont=dict(color="#94a0b0"))))
    apply_chart_style(fig)
    st.plotly_chart(fig, use_container_width=True)


def chart_top_rated(cards, dimension):
    if not cards:
        return
    info = get_rating_dimension_info(dimension)
    df = pd.DataFrame([{"name": c.name, "score": c.ratings.get(dimension, 0)} for c in cards])
    fig = go.Figure(go.Bar(
        x=df["score"], y=df["name"], orientation="h", marker_color="#4f8cc9",
        text=df["score"], textposition="outside", textfont=dict(color="#94a0b0", size=11),
    ))
    fig.update_layout(title=f"{info.name if info else dimension} (1-5)", height=max(260, 40 * len(df)),
                      xaxis_range=[0, 5.5], yaxis=dict(autorange="reversed"))
    apply_chart_style(fig)
    st.plotly_chart(fig, use_container_width=True)


# ============================================================
# SIDEBAR
# ============================================================
def render_sidebar(catalog):
    st.sidebar.markdown("""
    <div style="text-align:center; padding:0.5rem 0 0.3rem;">
        <span style="color:#4f8cc9; font-size:1.4rem;">◆</span>
        <span style="font-size:1.1rem; font-weight:700; color:#e3e8ef; margin-left:6px;">App Store Directory</span>
    </div>""", unsafe_allow_html=True)
    st.sidebar.markdown("---")

    st.sidebar.caption(f"Stores listed: **{catalog.count():,}**")
    st.sidebar.caption(f"Apps across all stores: **{format_number(catalog.total_app_count())}**")

    featured = get_featured(catalog)
    if featured:
        st.sidebar.markdown("---")
        st.sidebar.markdown("**Featured**")
        for card in featured:
            st.sidebar.caption(f"◆ {card.name} — {card.tagline}")


# ============================================================
# STORE DETAIL
# ============================================================
def render_store_detail(catalog, entry):
    c1, c2 = st.columns([2, 1])
    with c1:
        st.markdown(f"**{entry.tagline}**")
        st.markdown(entry.description)
        if entry.url:
            st.markdown(f"[{entry.url}]({entry.url})")
    with c2:
        st.caption(f"Category: **{_category_label(entry.category)}**")
        st.caption(f"Platforms: **{_platform_labels(entry.platforms)}**")
        st.caption(f"Company: **{entry.company.name or '—'}**")
        st.caption(f"Registration fee: **{format_fee(entry)}**")

    if entry.fees.commission_tiers:
        st.markdown("###### Commission")
        for tier in entry.fees.commission_tiers:
            line = f"- **{tier.percentage:g}%** — {tier.description}"
            if tier.conditions:
                line += f" ({tier.conditions})"
            st.markdown(line)

    if entry.pros or entry.cons:
        p1, p2 = st.columns(2)
        with p1:
            st.markdown("###### ✅ Pros")
            for pro in entry.pros or ():
                st.markdown(f"- {pro}")
        with p2:
            st.markdown("###### ❌ Cons")
            for con in entry.cons or ():
                st.markdown(f"- {con}")

    if entry.content:
        st.markdown(entry.content)

    related = get_related(catalog, entry)
    if related:
        st.caption("Related: " + ", ".join(card.name for card in related))


# ============================================================
# TAB: BROWSE
# ============================================================
def render_browse(catalog, engine):
    # Initial state comes from the URL, through the same parsing the listing uses
    initial = parse_filter_params(st.query_params)
    initial_sort = parse_sort_option(st.query_params.get("sort"))

    query = st.text_input("Search stores", value=st.query_params.get("q", ""),
                          placeholder="e.g. android, open source, games...")

    f1, f2, f3, f4 = st.columns(4)
    with f1:
        category_ids = [c.id.value for c in CATEGORIES]
        categories = st.multiselect(
            "Category", category_ids,
            default=[c for c in category_ids if c in (initial.categories or ())],
            format_func=_category_label,
        )
    with f2:
        platform_ids = [p.id.value for p in PLATFORMS]
        platforms = st.multiselect(
            "Platform", platform_ids,
            default=[p for p in platform_ids if p in (initial.platforms or ())],
            format_func=lambda p: get_platform_info(p).name,
        )
    with f3:
        dimension_ids = ["all"] + [d.id.value for d in RATING_DIMENSIONS]
        current = initial.min_rating.dimension if initial.min_rating else "all"
        current = getattr(current, "value", current)
        min_rating = st.selectbox(
            f"Rated {MIN_RATING_THRESHOLD}+ on", dimension_ids,
            index=dimension_ids.index(current) if current in dimension_ids else 0,
            format_func=lambda d: "Any" if d == "all" else get_rating_dimension_info(d).short_name,
        )
    with f4:
        # Search results keep relevance order unless a sort is picked
        sort_options = ([None] if query else []) + list(SortOption)
        if query and not is_valid_sort_option(st.query_params.get("sort")):
            initial_sort = None
        sort = st.selectbox("Sort by", sort_options, index=sort_options.index(initial_sort),
                            format_func=lambda o: "Relevance" if o is None else SORT_LABELS[o])

    capabilities = dict(initial.capabilities or ())
    c1, c2, c3 = st.columns(3)
    with c1:
        has_api = st.checkbox("Has API", value=capabilities.get("hasApi", False))
    with c2:
        has_sdk = st.checkbox("Has SDK", value=capabilities.get("hasSdk", False))
    with c3:
        free = st.checkbox("Free to publish", value=bool(initial.free_to_publish))

    params = {}
    if sort is not None:
        params["sort"] = sort.value
    if query:
        params["q"] = query
    if categories:
        params["category"] = ",".join(categories)
    if platforms:
        params["platform"] = ",".join(platforms)
    if min_rating != "all":
        params["minRating"] = min_rating
    if has_api:
        params["hasApi"] = "true"
    if has_sdk:
        params["hasSdk"] = "true"
    if free:
        params["free"] = "true"

    # Keep the URL shareable
    st.query_params.clear()
    st.query_params.update(params)

    result = browse_stores(catalog, engine, params)
    noun = "store" if result.total == 1 else "stores"
    st.caption(f"**{result.total}** {noun} found" + (f' for "{result.query}"' if result.is_search else ""))

    if not result.stores:
        if result.is_search:
            st.info(f'No stores found for "{query}". Try a different search term.')
        else:
            st.info("No stores match your filters. Try adjusting your criteria.")
        return

    if result.is_search:
        entries = [r.entry for r in result.stores]
        cards = [r.summary for r in result.stores]
    else:
        cards = result.stores
        entries = [catalog.get_by_slug(c.slug) for c in cards]

    st.dataframe(_cards_table(cards), use_container_width=True, hide_index=True)

    st.markdown("---")
    for idx, entry in enumerate(entries):
        title = entry.name
        if result.is_search:
            fields = sorted({m.key for m in result.stores[idx].matches})
            title += f" · matched on {', '.join(fields)}"
        with st.expander(title):
            render_store_detail(catalog, entry)


# ============================================================
# TAB: COMPARE
# ============================================================
def render_compare(catalog):
    entries = list(catalog.get_all())
    if len(entries) < 2:
        st.info("At least two stores are needed for a comparison.")
        return

    slugs = [e.slug for e in entries]
    names = {e.slug: e.name for e in entries}
    c1, c2 = st.columns(2)
    with c1:
        left_slug = st.selectbox("First store", slugs, index=0, format_func=names.get, key="cmp_left")
    with c2:
        right_slug = st.selectbox("Second store", slugs, index=1, format_func=names.get, key="cmp_right")

    if left_slug == right_slug:
        st.caption("Pick two different stores.")
        return

    pair = get_comparison(catalog, comparison_slug(left_slug, right_slug))
    if pair is None:
        st.warning("One of these stores is no longer listed.")
        return
    left, right = pair

    st.markdown(f"### {left.name} vs {right.name}")
    rows = compare_entries(left, right)

    def mark(value, side, highlight):
        if isinstance(value, bool):
            text = "✔" if value else "✘"
        elif value is None:
            text = "—"
        else:
            text = str(value)
        return f"{text} ◆" if highlight == side else text

    df = pd.DataFrame([{
        "": row.label,
        left.name: mark(row.left, "left", row.highlight),
        right.name: mark(row.right, "right", row.highlight),
    } for row in rows])
    st.dataframe(df, use_container_width=True, hide_index=True)

    chart_ratings_radar([left, right])


# ============================================================
# TAB: BEST OF
# ============================================================
def render_best_of(catalog):
    slugs = list(DIMENSION_SLUGS.values())
    slug = st.selectbox("Best for", slugs,
                        format_func=lambda s: get_rating_dimension_info(dimension_from_slug(s)).name)
    dimension = dimension_from_slug(slug)
    info = get_rating_dimension_info(dimension)
    st.caption(info.description)

    cards = get_top_rated(catalog, dimension)
    if not cards:
        st.info("No stores are rated on this dimension yet.")
        return
    chart_top_rated(cards, dimension)
    st.dataframe(_cards_table(cards), use_container_width=True, hide_index=True)


# ============================================================
# TAB: COLLECTIONS
# ============================================================
def render_collections(catalog):
    c1, c2 = st.columns(2)
    with c1:
        st.markdown("##### By feature")
        for feature in FEATURES:
            cards = get_collection_stores(catalog, feature)
            with st.expander(f"{feature.short_name} — {len(cards)} stores"):
                st.caption(feature.description)
                for card in cards:
                    st.markdown(f"- {card.name}")
    with c2:
        st.markdown("##### By cost")
        for monetization_type in MONETIZATION_TYPES:
            cards = get_collection_stores(catalog, monetization_type)
            with st.expander(f"{monetization_type.short_name} — {len(cards)} stores"):
                st.caption(monetization_type.description)
                for card in cards:
                    st.markdown(f"- {card.name}")


# ============================================================
# TAB: MANAGE
# ============================================================
def render_manage(catalog, engine):
    st.markdown("### Dataset")
    m1, m2, m3 = st.columns(3)
    m1.metric("Stores", f"{catalog.count():,}")
    m2.metric("Apps listed", format_number(catalog.total_app_count()))
    m3.metric("Search index", "Built" if engine.is_built else "Not built")

    st.caption(f"Content: `{CONTENT_DIR}`")
    st.caption(f"Dataset: `{DATASET_PATH}`")

    if st.button("🔄 Rebuild dataset from content", type="primary", use_container_width=True):
        try:
            entries = build_dataset(CONTENT_DIR)
            write_dataset(entries, DATASET_PATH)
        except ContentError as e:
            import traceback
            st.error(f"Build failed: {e}")
            st.code(traceback.format_exc())
            return
        new_catalog = load_catalog(DATASET_PATH)
        engine.reset(new_catalog)
        get_catalog.clear()
        st.success(f"**{len(entries)}** stores compiled. Search index will rebuild on the next query.")
        st.rerun()


# ============================================================
# MAIN
# ============================================================
def main():
    catalog = get_catalog()
    engine = get_search_engine()

    render_sidebar(catalog)

    st.markdown("""
    <div style="display:flex; align-items:center; gap:10px; margin-bottom:0.2rem;">
        <span style="font-size:1.3rem; color:#4f8cc9;">◆</span>
        <span style="font-size:1.3rem; font-weight:700; color:#e3e8ef;">App Store Directory</span>
        <span style="color:#6b7585; font-size:0.8rem; margin-left:auto;">appstores.dev</span>
    </div>""", unsafe_allow_html=True)

    if not catalog.count():
        st.info("No stores loaded yet. Build the dataset from the **Manage** tab.")

    tab_browse, tab_compare, tab_best, tab_collections, tab_manage = st.tabs([
        "🔍 Browse", "⚖ Compare", "🏆 Best of", "📚 Collections", "⚙ Manage"
    ])

    with tab_browse:
        render_browse(catalog, engine)
    with tab_compare:
        render_compare(catalog)
    with tab_best:
        render_best_of(catalog)
    with tab_collections:
        render_collections(catalog)
    with tab_manage:
        render_manage(catalog, engine)


if __name__ == "__main__":
    main()

"""
Configuration loader.
Reads settings from .env file and makes them available to the rest of the app.
"""

import os
from dotenv import load_dotenv

load_dotenv()

PROJECT_ROOT = os.path.dirname(os.path.dirname(__file__))

# Authored store documents (Markdown with YAML front matter)
CONTENT_DIR = os.getenv("CONTENT_DIR", os.path.join(PROJECT_ROOT, "content", "stores"))

# Compiled dataset: a JSON array of active stores, sorted by name
DATASET_PATH = os.getenv("DATASET_PATH", os.path.join(PROJECT_ROOT, "data", "processed", "stores.json"))

# Fuzzy search: 0 = exact only, 1 = match anything
SEARCH_THRESHOLD = float(os.getenv("SEARCH_THRESHOLD", "0.3"))
SEARCH_MIN_QUERY_LENGTH = int(os.getenv("SEARCH_MIN_QUERY_LENGTH", "2"))

# Listing rules
MIN_RATING_THRESHOLD = int(os.getenv("MIN_RATING_THRESHOLD", "4"))
LOW_COMMISSION_MAX = float(os.getenv("LOW_COMMISSION_MAX", "15"))
FEATURED_LIMIT = int(os.getenv("FEATURED_LIMIT", "6"))
DEFAULT_SORT = os.getenv("DEFAULT_SORT", "featured")

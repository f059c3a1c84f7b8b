"""
Constants shared by the analysis pipeline.

Dendrogram node identifiers follow the format consumed by the results
viewer: leaves are ``leaf_<card id>`` and merges ``merge_<n>`` numbered in
merge order.
"""

from __future__ import annotations

# Similarity values are reported with two decimals
SIMILARITY_DECIMALS = 2
MAX_SIMILARITY_DECIMALS = 6

# Distances are compared as integer multiples of 10**-MAX_SIMILARITY_DECIMALS
DISTANCE_SCALE = 10 ** MAX_SIMILARITY_DECIMALS

LEAF_ID_PREFIX = "leaf_"
MERGE_ID_PREFIX = "merge_"

# Placeholder returned when there are no cards to cluster
EMPTY_NODE_ID = "empty"
EMPTY_NODE_NAME = "No cards"

# Long-format sort table columns
SESSION_COLUMN = "session_id"
CARD_ID_COLUMN = "card_id"
CARD_NAME_COLUMN = "card_name"
CATEGORY_COLUMN = "category"
SUBMITTED_COLUMN = "submitted"
EXCLUDED_COLUMN = "excluded"

REQUIRED_SORT_COLUMNS = frozenset({SESSION_COLUMN, CARD_ID_COLUMN, CARD_NAME_COLUMN})

# First column of exported matrix tables
MATRIX_LABEL_COLUMN = "card"

"""
Multi-Dimensional Analytics Core

Breakdown trees over analytics dimensions, dimension map coordinates and
selection label rendering.
"""
from multidim.catalog import (
    AGGREGATE_ITEM,
    AGGREGATE_ITEM_ID,
    Catalog,
    Dimension,
    DimensionItem,
    DimensionMapping,
    TimeContext,
    normalize,
)
from multidim.core import (
    NOT_FOUND,
    Branch,
    Leaf,
    aggregate,
    build_from_map,
    cartesian_product,
    depth,
    flatten,
    is_subset_of,
    iterate,
    map_values,
    value_at,
)
from multidim.config import configure_logging
from multidim.selection import describe_selection, get_label_names

__version__ = "1.0.0"

__all__ = [
    "AGGREGATE_ITEM",
    "AGGREGATE_ITEM_ID",
    "Catalog",
    "Dimension",
    "DimensionItem",
    "DimensionMapping",
    "TimeContext",
    "normalize",
    "NOT_FOUND",
    "Branch",
    "Leaf",
    "aggregate",
    "build_from_map",
    "cartesian_product",
    "depth",
    "flatten",
    "is_subset_of",
    "iterate",
    "map_values",
    "value_at",
    "describe_selection",
    "get_label_names",
    "configure_logging",
]

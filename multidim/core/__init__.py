"""
Multi-Dimensional Core Module
"""
from .dimension_map import (
    DimensionMap,
    aggregate,
    cartesian_product,
    dimension_ids_of,
    is_subset_of,
    same_items_ignoring_order,
)
from .tree import (
    NOT_FOUND,
    Branch,
    Leaf,
    MultiDimensional,
    TreeShapeError,
    all_dimension_ids,
    build_from_map,
    depth,
    dimension_ids,
    flatten,
    format_tree,
    is_leaf,
    iterate,
    leaf_value,
    log_tree,
    map_values,
    value_at,
    walk,
)

__all__ = [
    "DimensionMap",
    "aggregate",
    "cartesian_product",
    "dimension_ids_of",
    "is_subset_of",
    "same_items_ignoring_order",
    "NOT_FOUND",
    "Branch",
    "Leaf",
    "MultiDimensional",
    "TreeShapeError",
    "all_dimension_ids",
    "build_from_map",
    "depth",
    "dimension_ids",
    "flatten",
    "format_tree",
    "is_leaf",
    "iterate",
    "leaf_value",
    "log_tree",
    "map_values",
    "value_at",
    "walk",
]

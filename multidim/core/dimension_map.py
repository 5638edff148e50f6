"""
Dimension Map Operations

A dimension map is a flat coordinate in the breakdown space: dimension id
-> selected item id. A key bound to None is treated as absent, i.e. the
dimension is unconstrained. Operations never mutate their arguments.
"""

from itertools import product
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

import structlog

from multidim.catalog import Catalog, DimensionId, DimensionItem, DimensionItemId, TimeContext
from multidim.config import get_settings

logger = structlog.get_logger(__name__)
settings = get_settings()

DimensionMap = Dict[DimensionId, Optional[DimensionItemId]]


def dimension_ids_of(dimension_map: Mapping[DimensionId, Optional[DimensionItemId]]) -> List[DimensionId]:
    """Dimension ids that are bound to an item"""
    return [dimension_id for dimension_id, item_id in dimension_map.items() if item_id is not None]


def is_subset_of(
    first: Mapping[DimensionId, Optional[DimensionItemId]],
    second: Mapping[DimensionId, Optional[DimensionItemId]],
) -> bool:
    """True if every dimension pinned by `first` is pinned to the same item in `second`"""
    return all(second.get(dimension_id) == item_id for dimension_id, item_id in first.items())


def aggregate(dimension_maps: Sequence[Mapping[DimensionId, Optional[DimensionItemId]]]) -> DimensionMap:
    """
    Collapse several dimension maps into the coordinate they share.

    Keeps only the dimensions present in every map with the same item in
    every map; anything missing from one map or disagreeing across maps is
    dropped.

    Args:
        dimension_maps: at least one dimension map

    Raises:
        ValueError: if `dimension_maps` is empty
    """
    if not dimension_maps:
        raise ValueError("Cannot aggregate an empty list of dimension maps")

    first, rest = dimension_maps[0], dimension_maps[1:]
    return {
        dimension_id: item_id
        for dimension_id, item_id in first.items()
        if item_id is not None
        and all(other.get(dimension_id) == item_id for other in rest)
    }


def _items_for(
    catalog: Catalog,
    dimension_id: DimensionId,
    time_context: Optional[TimeContext],
) -> List[DimensionItem]:
    if time_context is not None and dimension_id == settings.dimensions.time_dimension_id:
        return time_context.items()

    dimension = catalog.get(dimension_id)
    if dimension is None:
        raise ValueError(f"Unknown dimension: {dimension_id}")
    return list(dimension.items)


def cartesian_product(
    catalog: Catalog,
    dimension_ids: Sequence[DimensionId],
    time_context: Optional[TimeContext] = None,
) -> List[DimensionMap]:
    """
    All combinations of one item from each dimension in `dimension_ids`.

    The first dimension varies slowest; items follow catalog order. When a
    time context is passed, the time dimension id enumerates synthesized
    step items instead of catalog items. No dimension ids yields a single
    empty map.

    Example:
        cartesian_product(catalog, ["country", "ads"])
        # [{"country": "germany", "ads": "google"}, {"country": "germany", "ads": "facebook"}, ...]
    """
    item_lists = [_items_for(catalog, dimension_id, time_context) for dimension_id in dimension_ids]

    combinations = [
        {dimension_id: item.id for dimension_id, item in zip(dimension_ids, combination)}
        for combination in product(*item_lists)
    ]

    logger.debug(
        "Dimension product computed",
        dimension_ids=list(dimension_ids),
        combinations=len(combinations),
    )
    return combinations


def same_items_ignoring_order(first: Iterable, second: Iterable) -> bool:
    """True if both collections hold the same elements, regardless of order"""
    first, second = list(first), list(second)
    if len(first) != len(second):
        return False
    first_set = set(first)
    return all(element in first_set for element in second)

"""
Dimension Catalog Module
"""
from .models import (
    AGGREGATE_ITEM,
    AGGREGATE_ITEM_ID,
    Catalog,
    Dimension,
    DimensionId,
    DimensionItem,
    DimensionItemId,
    DimensionMapping,
    ReferenceKind,
    normalize,
    sort_dimensions,
)
from .time import NOW, Granularity, TimeContext

__all__ = [
    "AGGREGATE_ITEM",
    "AGGREGATE_ITEM_ID",
    "Catalog",
    "Dimension",
    "DimensionId",
    "DimensionItem",
    "DimensionItemId",
    "DimensionMapping",
    "ReferenceKind",
    "normalize",
    "sort_dimensions",
    "NOW",
    "Granularity",
    "TimeContext",
]

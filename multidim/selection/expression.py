"""
Selection Expressions

A selection expression is an ordered list of directives applied to root
dimensions. Each directive is one of:
- Aggregate: collapse the root dimension into a single item
- GroupBy: break the root dimension down by another, mapped dimension
- Filter: restrict to one item, of the root dimension or of a mapped one

The legacy wire form is a list of id tuples:
    [dimension_id, AGGREGATE_ITEM_ID]            -- aggregate
    [dimension_id, via_dimension_id, AGGREGATE_ITEM_ID]
    [dimension_id, other_dimension_id]           -- group by
    [dimension_id, item_id]                      -- filter on the root dimension
    [dimension_id, via_dimension_id, item_id]    -- filter on a mapped dimension
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Union

from multidim.catalog import (
    AGGREGATE_ITEM_ID,
    Catalog,
    DimensionId,
    DimensionItemId,
    ReferenceKind,
)


@dataclass(frozen=True)
class Aggregate:
    """Collapse the whole dimension"""
    via_dimension_id: Optional[DimensionId] = None


@dataclass(frozen=True)
class GroupBy:
    """Break down by another dimension reached through item mappings"""
    dimension_id: DimensionId


@dataclass(frozen=True)
class Filter:
    """Restrict to one item of `dimension_id`"""
    dimension_id: DimensionId
    item_id: DimensionItemId


Selector = Union[Aggregate, GroupBy, Filter]


@dataclass(frozen=True)
class Selection:
    """One directive of a selection expression, applied to a root dimension"""
    root_dimension_id: DimensionId
    selector: Selector

    def to_ids(self) -> List[str]:
        """Legacy tuple form of this directive"""
        selector = self.selector
        if isinstance(selector, Aggregate):
            if selector.via_dimension_id is None:
                return [self.root_dimension_id, AGGREGATE_ITEM_ID]
            return [self.root_dimension_id, selector.via_dimension_id, AGGREGATE_ITEM_ID]
        if isinstance(selector, GroupBy):
            return [self.root_dimension_id, selector.dimension_id]
        if selector.dimension_id == self.root_dimension_id:
            return [self.root_dimension_id, selector.item_id]
        return [self.root_dimension_id, selector.dimension_id, selector.item_id]


SelectionExpression = List[Selection]


def parse_selection(ids: Sequence[str], catalog: Catalog) -> Selection:
    """
    Convert one legacy id tuple into a Selection.

    The last id decides the directive: the aggregate sentinel aggregates, a
    dimension id groups by, anything else is an item filter on the id
    before it.

    Raises:
        ValueError: if the tuple does not hold two or three ids
    """
    if len(ids) not in (2, 3):
        raise ValueError(
            f"Selection tuple must hold 2 or 3 ids, got {len(ids)}: {list(ids)}"
        )

    root_dimension_id, last = ids[0], ids[-1]
    kind = catalog.resolve(last)

    if kind == ReferenceKind.AGGREGATE:
        return Selection(root_dimension_id, Aggregate(ids[1] if len(ids) == 3 else None))
    if kind == ReferenceKind.DIMENSION:
        return Selection(root_dimension_id, GroupBy(last))
    return Selection(root_dimension_id, Filter(dimension_id=ids[-2], item_id=last))


def parse_selection_expression(
    expression: Optional[Iterable[Union[Selection, Sequence[str]]]],
    catalog: Catalog,
) -> SelectionExpression:
    """Normalize a mixed list of Selections and legacy id tuples"""
    if expression is None:
        return []
    return [
        entry if isinstance(entry, Selection) else parse_selection(entry, catalog)
        for entry in expression
    ]

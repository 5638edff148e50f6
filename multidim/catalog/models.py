"""
Dimension Catalog Records

Immutable records describing the breakdown axes of the analytics data:
- Dimension: a named axis (e.g. Country)
- DimensionItem: one discrete value of a dimension (e.g. Germany)
- DimensionMapping: a roll-up edge from an item into an item of another dimension
- Catalog: lookup table from dimension id to Dimension
"""

from collections import deque
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Optional, Set, Tuple

import structlog

logger = structlog.get_logger(__name__)

DimensionId = str
DimensionItemId = str

AGGREGATE_ITEM_ID: DimensionItemId = "AGGREGATE_LABEL_ID"


@dataclass(frozen=True)
class DimensionMapping:
    """Directed edge: the owning item, viewed through `to_dimension_id`, is `to_dimension_item_id`"""
    id: str
    to_dimension_id: DimensionId
    to_dimension_item_id: DimensionItemId


@dataclass(frozen=True)
class DimensionItem:
    """One discrete value within a Dimension"""
    id: DimensionItemId
    name: str
    mappings: Tuple[DimensionMapping, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "mappings", tuple(self.mappings))

    def mapped_item_id(self, dimension_id: DimensionId) -> Optional[DimensionItemId]:
        """Item this item rolls up into on `dimension_id`, if it declares one"""
        for mapping in self.mappings:
            if mapping.to_dimension_id == dimension_id:
                return mapping.to_dimension_item_id
        return None


AGGREGATE_ITEM = DimensionItem(id=AGGREGATE_ITEM_ID, name="Aggregate")


@dataclass(frozen=True)
class Dimension:
    """A named axis of breakdown"""
    id: DimensionId
    name: str
    items: Tuple[DimensionItem, ...] = ()
    owner_id: int = -1
    associated_model_ids: Tuple[int, ...] = field(default=())

    def __post_init__(self):
        object.__setattr__(self, "items", tuple(self.items))
        object.__setattr__(self, "associated_model_ids", tuple(self.associated_model_ids))

    @property
    def item_ids(self) -> List[DimensionItemId]:
        return [item.id for item in self.items]

    def get_item(self, item_id: DimensionItemId) -> Optional[DimensionItem]:
        """Find an item of this dimension by id"""
        for item in self.items:
            if item.id == item_id:
                return item
        return None


class ReferenceKind(str, Enum):
    """What an id found in a selection resolves to"""
    AGGREGATE = "aggregate"
    DIMENSION = "dimension"
    ITEM = "item"
    UNKNOWN = "unknown"


class Catalog(Mapping):
    """
    Read-only lookup table from dimension id to Dimension.

    Example:
        catalog = normalize([country, ads])
        catalog["country"].name  # "Country"
        catalog.find_item("country", "germany")
    """

    def __init__(self, dimensions: Optional[Dict[DimensionId, Dimension]] = None):
        self._dimensions: Dict[DimensionId, Dimension] = dict(dimensions or {})
        self._item_ids: Optional[Set[DimensionItemId]] = None

    def __getitem__(self, dimension_id: DimensionId) -> Dimension:
        return self._dimensions[dimension_id]

    def __iter__(self) -> Iterator[DimensionId]:
        return iter(self._dimensions)

    def __len__(self) -> int:
        return len(self._dimensions)

    def __repr__(self) -> str:
        return f"Catalog({list(self._dimensions)})"

    def find_item(
        self,
        dimension_id: DimensionId,
        item_id: DimensionItemId,
    ) -> Optional[DimensionItem]:
        """Find item `item_id` of dimension `dimension_id`; None when either is unknown"""
        dimension = self.get(dimension_id)
        if dimension is None:
            return None
        return dimension.get_item(item_id)

    def has_item(self, item_id: DimensionItemId) -> bool:
        """True if any dimension in the catalog holds an item with this id"""
        if self._item_ids is None:
            self._item_ids = {
                item.id for dimension in self._dimensions.values() for item in dimension.items
            }
        return item_id in self._item_ids

    def resolve(self, reference_id: str) -> ReferenceKind:
        """
        Classify an id appearing in a selection expression.

        Dimension ids take precedence over item ids when both spaces
        happen to contain the same string.
        """
        if reference_id == AGGREGATE_ITEM_ID:
            return ReferenceKind.AGGREGATE
        if reference_id in self._dimensions:
            return ReferenceKind.DIMENSION
        if self.has_item(reference_id):
            return ReferenceKind.ITEM
        return ReferenceKind.UNKNOWN

    def roll_up(
        self,
        dimension_id: DimensionId,
        item_id: DimensionItemId,
        target_dimension_id: DimensionId,
    ) -> Optional[DimensionItemId]:
        """
        Follow item mappings from `dimension_id`/`item_id` until reaching
        `target_dimension_id` (e.g. germany -> europe -> earth).

        Returns None when no chain of mappings leads to the target.
        """
        if dimension_id == target_dimension_id:
            return item_id

        visited: Set[Tuple[DimensionId, DimensionItemId]] = set()
        frontier = deque([(dimension_id, item_id)])
        while frontier:
            current_dimension_id, current_item_id = frontier.popleft()
            if (current_dimension_id, current_item_id) in visited:
                continue
            visited.add((current_dimension_id, current_item_id))

            item = self.find_item(current_dimension_id, current_item_id)
            if item is None:
                continue
            for mapping in item.mappings:
                if mapping.to_dimension_id == target_dimension_id:
                    return mapping.to_dimension_item_id
                frontier.append((mapping.to_dimension_id, mapping.to_dimension_item_id))

        return None


def normalize(dimensions: Iterable[Dimension]) -> Catalog:
    """Build a Catalog keyed by dimension id; later duplicates replace earlier ones"""
    table: Dict[DimensionId, Dimension] = {}
    for dimension in dimensions:
        if dimension.id in table:
            logger.debug("Duplicate dimension in catalog input", dimension_id=dimension.id)
        table[dimension.id] = dimension
    return Catalog(table)


def sort_dimensions(dimensions: Iterable[Dimension]) -> List[Dimension]:
    """Global ordering on dimensions: lexical by id"""
    return sorted(dimensions, key=lambda dimension: dimension.id)

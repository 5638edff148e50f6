"""
Selection Label Engine

Turns a selection expression into display strings, one (label, description)
pair per root dimension:
- no directive on the root dimension: None
- aggregated: (root name, "Aggregate"); overrides everything else
- grouped by another dimension: (root name, grouped dimension name); overrides filters
- filtered on one dimension: (filtered dimension name, "Item1, Item2")
- filtered on several dimensions: (root name, "Dim1 (Item1), Dim2 (Item2, Item3)")

Ids that cannot be resolved against the catalog are rendered with a
placeholder instead of failing, and collected on the report.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

import structlog

from multidim.catalog import AGGREGATE_ITEM, Catalog, Dimension, DimensionId, DimensionItemId
from multidim.config import get_settings
from .expression import Aggregate, Filter, GroupBy, Selection, parse_selection_expression

logger = structlog.get_logger(__name__)
settings = get_settings()

Label = Tuple[str, str]


@dataclass
class LabelReport:
    """Rendered labels plus the ids that could not be resolved"""
    labels: List[Optional[Label]]
    unresolved_ids: List[str] = field(default_factory=list)

    @property
    def has_unresolved(self) -> bool:
        return len(self.unresolved_ids) > 0


class LabelRenderer:
    """
    Renders selection expressions against a catalog.

    Example:
        renderer = LabelRenderer(catalog)
        report = renderer.render([["country", "germany"], ["country", "poland"]], [country])
        report.labels  # [("Country", "Germany, Poland")]
    """

    def __init__(
        self,
        catalog: Catalog,
        placeholder: Optional[str] = None,
        separator: Optional[str] = None,
    ):
        self.catalog = catalog
        self.placeholder = (
            placeholder if placeholder is not None else settings.dimensions.illegal_placeholder
        )
        self.separator = separator if separator is not None else settings.dimensions.label_separator

    def _unresolved_name(self, reference_id: str, unresolved: List[str]) -> str:
        if reference_id not in unresolved:
            unresolved.append(reference_id)
        return self.placeholder

    def _dimension_name(self, dimension_id: DimensionId, unresolved: List[str]) -> str:
        dimension = self.catalog.get(dimension_id)
        if dimension is None:
            return self._unresolved_name(dimension_id, unresolved)
        return dimension.name

    def _item_name(self, dimension_id: DimensionId, item_id: DimensionItemId, unresolved: List[str]) -> str:
        item = self.catalog.find_item(dimension_id, item_id)
        if item is None:
            return self._unresolved_name(item_id, unresolved)
        return item.name

    def _filter_label(self, root: Dimension, filters: List[Filter], unresolved: List[str]) -> Label:
        # Filters grouped by the dimension they target, in order of first appearance
        by_dimension: Dict[DimensionId, List[DimensionItemId]] = {}
        for selector in filters:
            by_dimension.setdefault(selector.dimension_id, []).append(selector.item_id)

        rendered = [
            (
                self._dimension_name(dimension_id, unresolved),
                self.separator.join(
                    self._item_name(dimension_id, item_id, unresolved) for item_id in item_ids
                ),
            )
            for dimension_id, item_ids in by_dimension.items()
        ]

        if len(rendered) == 1:
            return rendered[0]
        return root.name, self.separator.join(f"{name} ({items})" for name, items in rendered)

    def _label_for(
        self,
        root: Dimension,
        selections: List[Selection],
        unresolved: List[str],
    ) -> Optional[Label]:
        if not selections:
            return None

        aggregated = False
        group_by: Optional[GroupBy] = None
        filters: List[Filter] = []
        for selection in selections:
            selector = selection.selector
            if isinstance(selector, Aggregate):
                aggregated = True
            elif isinstance(selector, GroupBy):
                if group_by is None:
                    group_by = selector
            else:
                filters.append(selector)

        if aggregated:
            return root.name, AGGREGATE_ITEM.name
        if group_by is not None:
            return root.name, self._dimension_name(group_by.dimension_id, unresolved)
        return self._filter_label(root, filters, unresolved)

    def render(
        self,
        expression: Optional[Iterable[Union[Selection, Sequence[str]]]],
        root_dimensions: Sequence[Dimension],
    ) -> LabelReport:
        """
        Render one label per root dimension, in root dimension order.

        Args:
            expression: Selections or legacy id tuples
            root_dimensions: dimensions to report on
        """
        selections = parse_selection_expression(expression, self.catalog)

        by_root: Dict[DimensionId, List[Selection]] = {}
        for selection in selections:
            by_root.setdefault(selection.root_dimension_id, []).append(selection)

        # Collected per call; the renderer holds no state between renders
        unresolved: List[str] = []
        labels = [
            self._label_for(root, by_root.get(root.id, []), unresolved)
            for root in root_dimensions
        ]
        report = LabelReport(labels=labels, unresolved_ids=unresolved)

        if report.has_unresolved:
            logger.warning(
                "Selection references unresolved ids",
                unresolved_ids=report.unresolved_ids,
                root_dimensions=[root.id for root in root_dimensions],
            )
        return report


def describe_selection(
    expression: Optional[Iterable[Union[Selection, Sequence[str]]]],
    root_dimensions: Sequence[Dimension],
    catalog: Catalog,
) -> LabelReport:
    """Render labels and collect unresolved ids"""
    return LabelRenderer(catalog).render(expression, root_dimensions)


def get_label_names(
    expression: Optional[Iterable[Union[Selection, Sequence[str]]]],
    root_dimensions: Sequence[Dimension],
    catalog: Catalog,
) -> List[Optional[Label]]:
    """Labels only, one per root dimension (None where the dimension is unset)"""
    return describe_selection(expression, root_dimensions, catalog).labels

"""
Tree / DataFrame Projection

Converts multi-dimensional trees to polars DataFrames for tabular
consumers (breakdown tables, exports) and back:
- one row per leaf
- one Utf8 column per dimension id, null where a path lacks the dimension
- one value column
"""

from typing import Any, Dict, List, Optional, Sequence

import polars as pl
import structlog

from multidim.core.tree import Branch, Leaf, walk

logger = structlog.get_logger(__name__)


def tree_to_frame(
    tree: Any,
    value_column: str = "value",
    dimension_order: Optional[Sequence[str]] = None,
) -> pl.DataFrame:
    """
    Flatten a tree into a DataFrame, rows in visiting order.

    Args:
        tree: Multi-dimensional tree
        value_column: Name of the column holding leaf values
        dimension_order: Column order for dimensions; defaults to first appearance
    """
    dimension_maps: List[Dict[str, str]] = []
    values: List[Any] = []
    seen: Dict[str, None] = {}
    for dimension_map, value in walk(tree):
        dimension_maps.append(dimension_map)
        values.append(value)
        for dimension_id in dimension_map:
            seen.setdefault(dimension_id, None)

    columns = list(dimension_order) if dimension_order is not None else list(seen)
    if value_column in columns:
        raise ValueError(f"Value column '{value_column}' collides with a dimension id")

    df = pl.DataFrame(
        [
            pl.Series(
                dimension_id,
                [dimension_map.get(dimension_id) for dimension_map in dimension_maps],
                dtype=pl.Utf8,
            )
            for dimension_id in columns
        ]
        + [pl.Series(value_column, values, strict=False)]
    )

    logger.debug(f"Projected tree to {df.height} rows", columns=df.columns)
    return df


def tree_from_frame(
    df: pl.DataFrame,
    dimension_columns: Sequence[str],
    value_column: str = "value",
) -> Any:
    """
    Build a balanced tree from a DataFrame.

    The first dimension column becomes the outermost branch. Rows with a
    null in any dimension column are dropped; later rows overwrite earlier
    rows with the same coordinate.

    Raises:
        ValueError: if a column is missing, or no dimension columns are
            given and the frame does not hold exactly one row
    """
    missing = [column for column in [*dimension_columns, value_column] if column not in df.columns]
    if missing:
        raise ValueError(f"Columns not found: {missing}")

    if not dimension_columns:
        if df.height != 1:
            raise ValueError(f"Expected exactly one row without dimension columns, got {df.height}")
        return Leaf(df[value_column][0])

    complete = df.drop_nulls(subset=list(dimension_columns))
    if complete.height < df.height:
        logger.warning(
            "Dropped rows with null dimension items",
            dropped=df.height - complete.height,
            total=df.height,
        )

    nested: Dict[str, Any] = {}
    for row in complete.select([*dimension_columns, value_column]).iter_rows():
        *items, value = row
        level = nested
        for item in items[:-1]:
            level = level.setdefault(str(item), {})
        level[str(items[-1])] = value

    def build(level: Dict[str, Any], index: int) -> Branch:
        dimension_id = dimension_columns[index]
        if index == len(dimension_columns) - 1:
            return Branch(dimension_id, {item: Leaf(value) for item, value in level.items()})
        return Branch(dimension_id, {item: build(child, index + 1) for item, child in level.items()})

    return build(nested, 0)

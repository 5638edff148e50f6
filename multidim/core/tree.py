"""
Multi-Dimensional Tree

A value broken down along zero or more dimensions, stored as a trie of
dimension item choices:
- Leaf: holds the terminal payload
- Branch: one dimension id, and one subtree per item of that dimension

Subtrees below a branch may break down along different dimensions, so the
tree is neither required to be balanced nor complete. Nodes are never
mutated after construction; transformations rebuild from the leaves and
may share untouched subtrees with their input.

Any object that is not a Branch is accepted as a leaf payload wherever a
tree is expected, so `depth(5) == 0` and `flatten(5) == [5]`. Functions
that build trees always return Leaf instances.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import (
    Any,
    Callable,
    Generic,
    Iterator,
    List,
    Mapping,
    Optional,
    Tuple,
    TypeVar,
    Union,
)

import structlog

from multidim.catalog import DimensionId, DimensionItemId
from .dimension_map import DimensionMap, dimension_ids_of

logger = structlog.get_logger(__name__)

T = TypeVar("T")
S = TypeVar("S")


class TreeShapeError(ValueError):
    """Raised when a tree violates the uniform depth assumption in strict mode"""


class _NotFound:
    """Sentinel returned by value_at when the map leads outside the tree"""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NOT_FOUND"

    def __bool__(self) -> bool:
        return False


NOT_FOUND = _NotFound()


@dataclass(frozen=True)
class Leaf(Generic[T]):
    """Terminal node holding a payload"""
    value: T


@dataclass(frozen=True)
class Branch(Generic[T]):
    """Node breaking its subtrees down by the items of one dimension"""
    dimension_id: DimensionId
    children: Mapping[DimensionItemId, "MultiDimensional[T]"]

    def __post_init__(self):
        object.__setattr__(self, "children", MappingProxyType(dict(self.children)))

    def first_child(self) -> Optional["MultiDimensional[T]"]:
        return next(iter(self.children.values()), None)

    def __repr__(self) -> str:
        return f"Branch({self.dimension_id!r}, {dict(self.children)!r})"


MultiDimensional = Union[Leaf[T], Branch[T]]


def is_leaf(node: Any) -> bool:
    """True for anything that is not a Branch"""
    return not isinstance(node, Branch)


def leaf_value(node: Any) -> Any:
    """Payload of a leaf; bare payloads are returned unchanged"""
    return node.value if isinstance(node, Leaf) else node


def depth(node: Any, strict: bool = False) -> int:
    """
    Number of branch levels above the leaves.

    Follows the first child at every level, assuming all siblings have the
    same depth. With `strict=True` every sibling is inspected and a
    TreeShapeError is raised when they disagree.
    """
    if is_leaf(node):
        return 0
    if not node.children:
        return 1

    if strict:
        depths = {depth(child, strict=True) for child in node.children.values()}
        if len(depths) > 1:
            raise TreeShapeError(
                f"Children of dimension '{node.dimension_id}' have different depths: {sorted(depths)}"
            )
        return 1 + depths.pop()

    return 1 + depth(node.first_child())


def all_dimension_ids(node: Any) -> List[DimensionId]:
    """Dimension ids along the first path from the root down to a leaf"""
    ids = []
    while node is not None and not is_leaf(node):
        ids.append(node.dimension_id)
        node = node.first_child()
    return ids


def dimension_ids(node: Any) -> List[DimensionId]:
    """Dimension ids of every branch in the tree, depth first, duplicates kept"""
    if is_leaf(node):
        return []
    ids = [node.dimension_id]
    for child in node.children.values():
        ids.extend(dimension_ids(child))
    return ids


def value_at(
    node: Any,
    dimension_map: Mapping[DimensionId, Optional[DimensionItemId]],
    exact: bool = False,
    default: Any = NOT_FOUND,
) -> Any:
    """
    Find the value a dimension map points to.

    At every branch the map's item for the branch dimension selects the
    child to descend into. Returns `default` when the map lacks a
    dimension the tree branches on, or names an item the branch does not
    have. With `exact=True` the map must also name no dimensions beyond
    those on the path.

    Example:
        tree = build_from_map({"country": "germany", "ads": "google"}, 5)
        value_at(tree, {"country": "germany", "ads": "google"}, exact=True)  # 5
        value_at(tree, {"country": "germany"}, exact=True)  # NOT_FOUND
    """
    levels = 0
    while not is_leaf(node):
        item_id = dimension_map.get(node.dimension_id)
        if item_id is None or item_id not in node.children:
            return default
        node = node.children[item_id]
        levels += 1

    if exact and levels != len(dimension_ids_of(dimension_map)):
        return default
    return leaf_value(node)


def walk(node: Any, prefix: Optional[Mapping[DimensionId, DimensionItemId]] = None) -> Iterator[Tuple[DimensionMap, Any]]:
    """Yield (dimension map, value) for every leaf, depth first in child order"""
    path = dict(prefix or {})
    if is_leaf(node):
        yield path, leaf_value(node)
        return

    for item_id, child in node.children.items():
        yield from walk(child, {**path, node.dimension_id: item_id})


def iterate(
    node: Any,
    visit: Callable[[DimensionMap, Any], None],
    prefix: Optional[Mapping[DimensionId, DimensionItemId]] = None,
) -> None:
    """
    Call `visit(dimension_map, value)` for every leaf.

    Each call receives its own map holding exactly the dimensions on the
    path to that leaf (plus `prefix`).
    """
    for dimension_map, value in walk(node, prefix):
        visit(dimension_map, value)


def map_values(node: Any, mapper: Callable[[S], T]) -> "MultiDimensional[T]":
    """Apply `mapper` to every leaf, keeping the branch structure"""
    if is_leaf(node):
        return Leaf(mapper(leaf_value(node)))
    return Branch(
        node.dimension_id,
        {item_id: map_values(child, mapper) for item_id, child in node.children.items()},
    )


def flatten(node: Any) -> List[Any]:
    """All leaf values in visiting order"""
    return [value for _, value in walk(node)]


def build_from_map(
    dimension_map: Mapping[DimensionId, Optional[DimensionItemId]],
    value: T,
) -> "MultiDimensional[T]":
    """
    Tree holding a single value along the path described by `dimension_map`.

    The first entry of the map becomes the outermost branch. Entries bound
    to None are skipped.
    """
    tree: MultiDimensional[T] = Leaf(value)
    for dimension_id, item_id in reversed(list(dimension_map.items())):
        if item_id is not None:
            tree = Branch(dimension_id, {item_id: tree})
    return tree


def format_tree(node: Any, indent: str = "  ") -> str:
    """Readable multi-line rendering for debugging"""
    if is_leaf(node):
        return repr(leaf_value(node))

    lines = []

    def render(current: Any, level: int) -> None:
        pad = indent * level
        for item_id, child in current.children.items():
            if is_leaf(child):
                lines.append(f"{pad}{current.dimension_id}={item_id}: {leaf_value(child)!r}")
            else:
                lines.append(f"{pad}{current.dimension_id}={item_id}")
                render(child, level + 1)

    render(node, 0)
    return "\n".join(lines)


def log_tree(node: Any, name: str = "tree") -> None:
    """Emit the debug rendering of a tree through the module logger"""
    logger.debug(f"Multi-dimensional {name}", depth=depth(node), rendering=format_tree(node))

"""
Unit Tests - Multi-Dimensional Tree
"""
import pytest

from multidim.core.tree import (
    NOT_FOUND,
    Branch,
    Leaf,
    TreeShapeError,
    all_dimension_ids,
    build_from_map,
    depth,
    dimension_ids,
    flatten,
    format_tree,
    is_leaf,
    iterate,
    log_tree,
    map_values,
    value_at,
    walk,
)


@pytest.fixture
def breakdown() -> Branch:
    """Country -> ads breakdown"""
    return Branch("country", {
        "germany": Branch("ads", {"google": Leaf(10), "facebook": Leaf(4)}),
        "poland": Branch("ads", {"google": Leaf(3), "facebook": Leaf(1)}),
    })


@pytest.fixture
def unbalanced() -> Branch:
    """Germany broken down by ads, Poland not broken down further"""
    return Branch("country", {
        "germany": Branch("ads", {"google": Leaf(10)}),
        "poland": Leaf(7),
    })


class TestIsLeaf:
    """Tests for leaf discrimination"""
    
    def test_leaves(self):
        """Test non-branch values are leaves"""
        assert is_leaf(Leaf(1))
        assert is_leaf(1)
        assert is_leaf("9999")
    
    def test_branch_shaped_payload_is_leaf(self):
        """Test a payload shaped like a branch is not mistaken for one"""
        payload = {"dimension_id": "aaa", "children": {}}
        assert is_leaf(Leaf(payload))
        assert is_leaf(payload)
        assert flatten(Leaf(payload)) == [payload]
    
    def test_branch(self):
        """Test branches are not leaves"""
        assert not is_leaf(Branch("aaa", {}))


class TestDepth:
    """Tests for depth"""
    
    def test_zero(self):
        """Test leaves have depth 0"""
        assert depth(1) == 0
        assert depth("9999") == 0
        assert depth({"a": 2}) == 0
        assert depth(Leaf(1)) == 0
    
    def test_one(self):
        """Test an empty branch has depth 1"""
        assert depth(Branch("aaa", {})) == 1
    
    def test_nested(self, breakdown):
        """Test depth of a balanced tree"""
        assert depth(breakdown) == 2
        assert depth(breakdown, strict=True) == 2
    
    def test_build_from_map(self):
        """Test depth equals number of map entries"""
        assert depth(build_from_map({"a": "x", "b": "y", "c": "z"}, 1)) == 3
    
    def test_strict_rejects_uneven_siblings(self, unbalanced):
        """Test strict mode detects uneven depth"""
        assert depth(unbalanced) == 2
        with pytest.raises(TreeShapeError):
            depth(unbalanced, strict=True)


class TestDimensionIds:
    """Tests for dimension id collection"""
    
    def test_all_dimension_ids(self):
        """Test ids along the first path"""
        assert all_dimension_ids("test") == []
        tree = Branch("product", {"freemium": Leaf("2"), "enterprise": Leaf("3")})
        assert all_dimension_ids(tree) == ["product"]
    
    def test_all_dimension_ids_nested(self, breakdown):
        """Test ids along the first path of a nested tree"""
        assert all_dimension_ids(breakdown) == ["country", "ads"]
    
    def test_dimension_ids_every_branch(self, breakdown):
        """Test ids across all branches, duplicates kept"""
        assert dimension_ids(breakdown) == ["country", "ads", "ads"]
        assert dimension_ids(5) == []


class TestValueAt:
    """Tests for value_at"""
    
    def test_exact_match(self):
        """Test exact lookup of a single path"""
        tree = build_from_map({"a": "x", "b": "y"}, 5)
        assert value_at(tree, {"a": "x", "b": "y"}, exact=True) == 5
    
    def test_exact_map_too_short(self):
        """Test exact lookup fails when the map misses a path dimension"""
        tree = build_from_map({"a": "x", "b": "y"}, 5)
        assert value_at(tree, {"a": "x"}, exact=True) is NOT_FOUND
    
    def test_exact_map_too_long(self):
        """Test exact lookup fails when the map names extra dimensions"""
        tree = build_from_map({"a": "x"}, 5)
        assert value_at(tree, {"a": "x", "b": "y"}) == 5
        assert value_at(tree, {"a": "x", "b": "y"}, exact=True) is NOT_FOUND
    
    def test_missing_item(self, breakdown):
        """Test unknown items lead outside the tree"""
        assert value_at(breakdown, {"country": "france", "ads": "google"}) is NOT_FOUND
        assert value_at(breakdown, {"ads": "google"}) is NOT_FOUND
    
    def test_default(self, breakdown):
        """Test a custom fallback value"""
        assert value_at(breakdown, {"country": "france"}, default=0) == 0
    
    def test_unbalanced(self, unbalanced):
        """Test lookups on an unbalanced tree"""
        assert value_at(unbalanced, {"country": "poland"}, exact=True) == 7
        assert value_at(unbalanced, {"country": "germany", "ads": "google"}, exact=True) == 10
    
    def test_none_leaf_value(self):
        """Test a None payload is distinguishable from a miss"""
        tree = Branch("a", {"x": Leaf(None)})
        assert value_at(tree, {"a": "x"}) is None


class TestIterate:
    """Tests for iterate and walk"""
    
    def test_simple(self):
        """Test visits of a one level tree"""
        visited = []
        tree = Branch("dimid", {"label1": Leaf(1), "label2": Leaf(2)})
        
        iterate(tree, lambda dimension_map, value: visited.append((dimension_map, value)))
        
        assert visited == [
            ({"dimid": "label1"}, 1),
            ({"dimid": "label2"}, 2),
        ]
    
    def test_paths_not_shared(self, breakdown):
        """Test every visit gets its own map"""
        visited = []
        iterate(breakdown, lambda dimension_map, value: visited.append(dimension_map))
        
        visited[0]["country"] = "changed"
        
        assert visited[1] == {"country": "germany", "ads": "facebook"}
        assert visited[2] == {"country": "poland", "ads": "google"}
    
    def test_visit_count_and_keys(self, breakdown):
        """Test one visit per leaf and keys matching the tree dimensions"""
        maps = [dimension_map for dimension_map, _ in walk(breakdown)]
        assert len(maps) == len(flatten(breakdown))
        keys = set().union(*maps)
        assert keys == set(all_dimension_ids(breakdown))
    
    def test_prefix(self):
        """Test a prefix is carried into every map"""
        visited = []
        iterate(Branch("a", {"x": Leaf(1)}), lambda m, v: visited.append(m), {"time": "0"})
        assert visited == [{"time": "0", "a": "x"}]
    
    def test_leaf(self):
        """Test a bare leaf is visited once with an empty map"""
        assert list(walk(Leaf(3))) == [({}, 3)]


class TestMapValues:
    """Tests for map_values and flatten"""
    
    def test_structure_preserved(self, breakdown):
        """Test mapping keeps branches"""
        doubled = map_values(breakdown, lambda value: value * 2)
        
        assert all_dimension_ids(doubled) == all_dimension_ids(breakdown)
        assert value_at(doubled, {"country": "poland", "ads": "google"}) == 6
    
    def test_flatten_commutes_with_map(self, breakdown, unbalanced):
        """Test flatten(map(T, f)) == map(f, flatten(T))"""
        for tree in (breakdown, unbalanced, Leaf(2)):
            assert flatten(map_values(tree, str)) == [str(v) for v in flatten(tree)]
    
    def test_source_untouched(self, breakdown):
        """Test the input tree is left unchanged"""
        map_values(breakdown, lambda value: 0)
        assert flatten(breakdown) == [10, 4, 3, 1]
    
    def test_flatten_order(self, breakdown):
        """Test values follow visiting order"""
        assert flatten(breakdown) == [10, 4, 3, 1]


class TestBuildFromMap:
    """Tests for build_from_map"""
    
    def test_depth_0(self):
        """Test an empty map yields a leaf"""
        assert build_from_map({}, 1) == Leaf(1)
    
    def test_depth_1(self):
        """Test a one entry map"""
        assert build_from_map({"dim1": "label1"}, 1) == Branch("dim1", {"label1": Leaf(1)})
    
    def test_depth_2(self):
        """Test the first entry becomes the outermost branch"""
        tree = build_from_map({"dim1": "label1", "dim2": "label2"}, 1)
        assert tree == Branch("dim1", {"label1": Branch("dim2", {"label2": Leaf(1)})})
    
    def test_flatten(self):
        """Test the single value is the only leaf"""
        assert flatten(build_from_map({"a": "x", "b": "y"}, "v")) == ["v"]
    
    def test_none_entries_skipped(self):
        """Test unbound dimensions produce no branch"""
        assert build_from_map({"a": None, "b": "y"}, 1) == Branch("b", {"y": Leaf(1)})


class TestImmutability:
    """Tests for node immutability"""
    
    def test_children_read_only(self, breakdown):
        """Test children cannot be reassigned or mutated"""
        with pytest.raises(TypeError):
            breakdown.children["france"] = Leaf(0)
        with pytest.raises(AttributeError):
            breakdown.dimension_id = "other"
    
    def test_constructor_copies_children(self):
        """Test later changes to the source dict do not leak in"""
        children = {"x": Leaf(1)}
        tree = Branch("a", children)
        children["y"] = Leaf(2)
        assert list(tree.children) == ["x"]


class TestFormatTree:
    """Tests for format_tree"""
    
    def test_rendering(self, breakdown):
        """Test nested rendering"""
        rendered = format_tree(breakdown)
        assert rendered.splitlines()[0] == "country=germany"
        assert "  ads=google: 10" in rendered
    
    def test_leaf(self):
        """Test leaf rendering"""
        assert format_tree(Leaf("x")) == "'x'"
    
    def test_log_tree(self, breakdown):
        """Test logging the rendering does not raise"""
        log_tree(breakdown, name="breakdown")

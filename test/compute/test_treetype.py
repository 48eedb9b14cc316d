import pyarrow as pa

from rectangling.compute import TreeType, from_tree, from_trees, tree_array, tree_values
from rectangling.compute.treetype import TreeArray, is_tree_type


def test_tree_array_infers_arrow_types():
    assert tree_array([1, 2]).type == pa.int64()
    assert tree_array([1, 2.5]).type == pa.float64()
    assert pa.types.is_list(tree_array([[1], [2, 3]]).type)
    assert pa.types.is_struct(tree_array([{"a": 1}, {"b": "x"}]).type)


def test_tree_array_falls_back_to_trees():
    array = tree_array([1, "a", True, None, [1], {"k": "v"}])
    assert is_tree_type(array.type)
    assert isinstance(array, TreeArray)
    assert array.to_trees() == [1, "a", True, None, [1], {"k": "v"}]
    assert array.null_count == 1


def test_tree_array_huge_integers():
    array = tree_array([1, 2**70])
    assert is_tree_type(array.type)
    assert array.to_trees() == [1, 2**70]


def test_tree_values_of_chunked_column():
    column = pa.chunked_array(
        [TreeArray.from_trees([1, "a"]), TreeArray.from_trees([[1], None])],
        type=TreeType(),
    )
    assert tree_values(column) == [1, "a", [1], None]


def test_tree_values_of_native_column():
    assert tree_values(pa.chunked_array([[1, 2], [3]])) == [1, 2, 3]


def test_tree_scalar_as_py():
    array = tree_array([{"a": 1}, "b"])
    assert array[0].as_py() == {"a": 1}
    assert array[1].as_py() == "b"


def test_from_tree():
    table = from_tree({"a": [1, "x"]}, column="doc")
    assert table.column_names == ["doc"]
    assert table.num_rows == 1
    assert tree_values(table.column("doc")) == [{"a": [1, "x"]}]


def test_from_trees():
    table = from_trees([{"a": 1}, {"a": 2}])
    assert table.column_names == ["json"]
    assert table.column("json").to_pylist() == [{"a": 1}, {"a": 2}]


def test_tree_columns_survive_take_and_filter():
    table = pa.table({"x": [1, 2, 3], "y": tree_array([1, "a", [True]])})
    taken = table.take([2, 0])
    assert tree_values(taken.column("y")) == [[True], 1]
    filtered = table.filter(pa.array([False, True, True]))
    assert tree_values(filtered.column("y")) == ["a", [True]]

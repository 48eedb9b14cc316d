import pyarrow as pa
import pytest

from rectangling.compute import (
    ColumnShape,
    LengthenNode,
    NamingConflict,
    PyArrowTableDataSource,
    TypeMismatch,
    classify,
    from_trees,
    lengthen,
    tree_array,
    tree_values,
)
from rectangling.compute.treetype import is_tree_type


@pytest.fixture
def list_data():
    return pa.table({"x": [1, 2, 3], "y": [[11, 12, 13], [21], [31, 32]]})


@pytest.fixture
def empty_data():
    return pa.table({"x": [1, 2, 3, 4], "y": [[11, 12], [], None, [41]]})


@pytest.fixture
def tree_data():
    return pa.table(
        {"x": [1, 2, 3, 4], "y": tree_array([[11, "a"], [], None, "single"])}
    )


def test_lengthen_list_column(list_data):
    result = lengthen(list_data, "y")
    assert result.num_rows == 6
    assert result.to_pydict() == {
        "x": [1, 1, 1, 2, 3, 3],
        "y": [11, 12, 13, 21, 31, 32],
    }


@pytest.mark.parametrize("keep_empty", [False, True])
def test_lengthen_row_count(empty_data, keep_empty):
    lengths = [len(e or []) for e in empty_data.column("y").to_pylist()]
    expected = sum(max(n, 1 if keep_empty else 0) for n in lengths)
    assert lengthen(empty_data, "y", keep_empty=keep_empty).num_rows == expected


def test_lengthen_drops_empty(empty_data):
    result = lengthen(empty_data, "y")
    assert result.to_pydict() == {"x": [1, 1, 4], "y": [11, 12, 41]}


def test_lengthen_keep_empty(empty_data):
    result = lengthen(empty_data, "y", keep_empty=True)
    assert result.to_pydict() == {
        "x": [1, 1, 2, 3, 4],
        "y": [11, 12, None, None, 41],
    }


def test_lengthen_single_empty_row():
    data = pa.table({"x": [1], "y": pa.array([[]], type=pa.list_(pa.int64()))})
    assert lengthen(data, "y").num_rows == 0
    result = lengthen(data, "y", keep_empty=True)
    assert result.to_pydict() == {"x": [1], "y": [None]}


def test_lengthen_tree_column(tree_data):
    result = lengthen(tree_data, "y")
    assert result.column("x").to_pylist() == [1, 1, 4]
    assert tree_values(result.column("y")) == [11, "a", "single"]


def test_lengthen_tree_column_keep_empty(tree_data):
    result = lengthen(tree_data, "y", keep_empty=True)
    assert result.column("x").to_pylist() == [1, 1, 2, 3, 4]
    assert tree_values(result.column("y")) == [11, "a", None, None, "single"]


def test_lengthen_mixed_types_stay_nested():
    data = pa.table({"x": [1, 2], "y": tree_array([[1], ["a", True, 5]])})
    result = lengthen(data, "y")
    assert result.num_rows == 4
    assert is_tree_type(result.column("y").type)
    assert tree_values(result.column("y")) == [1, "a", True, 5]
    assert classify(result.column("y")) is ColumnShape.SCALARS


def test_lengthen_unifies_elements_when_possible():
    # The column is a tree column, but its elements are all numbers.
    data = pa.table({"y": tree_array([[1, 2], 3, None])})
    assert is_tree_type(data.column("y").type)
    result = lengthen(data, "y")
    assert result.column("y").type == pa.int64()
    assert result.column("y").to_pylist() == [1, 2, 3]


def test_lengthen_partially_nested_elements():
    data = pa.table({"y": tree_array([[1, 2], [3, [4]]])})
    result = lengthen(data, "y")
    assert classify(result.column("y")) is ColumnShape.SEQUENCES

    data = pa.table({"y": tree_array([[1, 2], [3], None, [[4]]])})
    result = lengthen(data, "y")
    assert tree_values(result.column("y")) == [1, 2, 3, [4]]


def test_lengthen_elements_are_nested():
    data = pa.table({"x": [1], "y": [[{"a": 1}, {"a": 2}]]})
    result = lengthen(data, "y")
    assert pa.types.is_struct(result.column("y").type)
    assert result.column("y").to_pylist() == [{"a": 1}, {"a": 2}]


def test_lengthen_keeps_column_position():
    data = pa.table({"a": [1], "y": [[1, 2]], "b": ["z"]})
    result = lengthen(data, "y")
    assert result.column_names == ["a", "y", "b"]
    assert result.column("b").to_pylist() == ["z", "z"]


def test_lengthen_indices_to(empty_data):
    result = lengthen(empty_data, "y", keep_empty=True, indices_to="y_id")
    assert result.column_names == ["x", "y", "y_id"]
    assert result.column("y_id").to_pylist() == [0, 1, None, None, 0]


def test_lengthen_indices_to_tree_column(tree_data):
    result = lengthen(tree_data, "y", indices_to="position")
    assert result.column("position").to_pylist() == [0, 1, 0]


def test_lengthen_indices_to_conflict(list_data):
    with pytest.raises(NamingConflict) as excinfo:
        lengthen(list_data, "y", indices_to="x")
    assert excinfo.value.column == "y"
    assert excinfo.value.name == "x"


def test_lengthen_struct_column_mismatch():
    data = pa.table({"y": [{"a": 1}]})
    with pytest.raises(TypeMismatch) as excinfo:
        lengthen(data, "y")
    assert excinfo.value.column == "y"


def test_lengthen_tree_records_mismatch():
    data = from_trees([{"a": 1}, {"a": "x"}], column="y")
    with pytest.raises(TypeMismatch):
        lengthen(data, "y")


def test_lengthen_flat_column_mismatch():
    data = pa.table({"y": [1, 2, 3]})
    with pytest.raises(TypeMismatch):
        lengthen(data, "y")


def test_lengthen_chunked_column():
    data = pa.Table.from_batches(
        [
            pa.record_batch({"x": [1], "y": [[11, 12]]}),
            pa.record_batch({"x": [2], "y": [[21]]}),
        ]
    )
    result = lengthen(data, "y")
    assert result.to_pydict() == {"x": [1, 1, 2], "y": [11, 12, 21]}


def test_lengthen_node(list_data):
    node = LengthenNode("y", PyArrowTableDataSource(list_data), keep_empty=True)
    assert str(node) == (
        "LengthenNode(column=y, keep_empty=True, indices_to=None, "
        "child=PyArrowTableDataSource(columns=['x', 'y'], rows=3))"
    )
    result = pa.Table.from_batches(node.batches())
    assert result.num_rows == 6

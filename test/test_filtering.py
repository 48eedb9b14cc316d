import pyarrow as pa
import pyarrow.compute as pc

from rectangling.compute import (
    FilterNode,
    FunctionCallExpression,
    PyArrowTableDataSource,
    ShapeExpression,
    TreeDataSource,
    col,
    tree_values,
    widen,
)


def test_filter_node_str():
    node = FilterNode(ShapeExpression("json", "record"), TreeDataSource([{"a": 1}]))
    assert str(node) == (
        "FilterNode(filter=ShapeExpression(json, record), "
        "child=TreeDataSource(column=json, rows=1))"
    )


def test_filter_malformed_rows_before_widening():
    source = TreeDataSource([{"id": 1}, "malformed", None, {"id": 2}])
    node = FilterNode(ShapeExpression("json", "record"), source)
    result = pa.Table.from_batches(node.batches())
    assert tree_values(result.column("json")) == [{"id": 1}, {"id": 2}]
    assert widen(result, "json").column("id").to_pylist() == [1, 2]


def test_filter_with_compute_function():
    data = pa.table({"x": [1, 2, 3], "y": [[1], [2], [3]]})
    node = FilterNode(
        FunctionCallExpression(pc.greater_equal, col("x"), 2),
        PyArrowTableDataSource(data),
    )
    result = pa.Table.from_batches(node.batches())
    assert result.to_pydict() == {"x": [2, 3], "y": [[2], [3]]}

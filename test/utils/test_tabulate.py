import pyarrow as pa

from rectangling.compute import ColumnShape, tree_array
from rectangling.utils.tabulate import describe_shapes, format_value, tabulate


def test_tabulate_flat_table():
    data = pa.table({"name": ["arrow", "tidyr"], "stars": [1.5, 2.0]})
    assert tabulate(data) == (
        "name  | stars\n"
        "----- | -----\n"
        "arrow | 1.50\n"
        "tidyr | 2.00"
    )


def test_tabulate_tree_column():
    data = pa.record_batch({"y": tree_array([1, "a", [True], None])})
    assert tabulate(data).splitlines() == [
        "y",
        "------",
        "1",
        "a",
        "[true]",
        "null",
    ]


def test_tabulate_max_rows():
    data = pa.table({"n": list(range(5))})
    text = tabulate(data, max_rows=2)
    assert text.splitlines()[-1] == "... and 3 more rows"
    assert len(text.splitlines()) == 5


def test_format_value_truncates():
    assert format_value("x" * 40) == "x" * 27 + "..."
    assert format_value({"key": "v" * 40}).endswith("...")


def test_describe_shapes():
    text = describe_shapes({"id": ColumnShape.FLAT, "tags": ColumnShape.SEQUENCES})
    assert text.splitlines() == [
        "column | shape",
        "------ | ---------",
        "id     | flat",
        "tags   | sequences",
    ]

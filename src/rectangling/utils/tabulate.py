"""Format tabular data into a text table for print.

the `tabulate` function takes a `pyarrow.Table` or `pyarrow.RecordBatch`
and formats it into a text table. Nested values that are still
waiting to be flattened are printed as compact JSON, long values
are truncated and the number of rows to display is limited.

Example:

    >>> import pyarrow as pa
    >>> data = {
    ...     "name": ["arrow", "tidyr"],
    ...     "owner": [{"login": "apache"}, {"login": "tidyverse"}],
    ...     "stars": [14500, 1300],
    ... }
    >>> print(tabulate(pa.table(data)))
    name  | owner                 | stars
    ----- | --------------------- | -----
    arrow | {"login":"apache"}    | 14500
    tidyr | {"login":"tidyverse"} | 1300
"""

import json
from typing import Any

import pyarrow as pa

from ..compute.treetype import tree_values


def tabulate(table: pa.Table | pa.RecordBatch, max_rows: int = 20) -> str:
    """Format a Table or RecordBatch into a text table.

    Will produce a string like::

        name  | owner              | topics
        ----- | ------------------ | ------
        arrow | {"login":"apache"} | data
    """
    cols = table.column_names
    head = table.slice(0, max_rows)
    columns = [tree_values(head.column(c)) for c in cols]
    rows = [[format_value(values[rowidx]) for values in columns] for rowidx in range(head.num_rows)]

    colsizes = compute_max_colsize(cols, rows)
    header = [maketablerow(cols, colsizes=colsizes)]
    separator = [maketablerow(["-"] * len(cols), colsizes=colsizes, fillvalue="-")]
    textrows = [maketablerow(row, colsizes=colsizes) for row in rows]

    text = "\n".join(header + separator + textrows)
    if table.num_rows > max_rows:
        text += f"\n... and {table.num_rows - max_rows} more rows"
    return text


def describe_shapes(shapes: dict[str, Any]) -> str:
    """Format the shape of each column, as returned by :func:`rectangling.compute.describe`."""
    rows = [[name, shape.value] for name, shape in shapes.items()]
    cols = ["column", "shape"]
    colsizes = compute_max_colsize(cols, rows)
    lines = [maketablerow(cols, colsizes=colsizes)]
    lines.append(maketablerow(["-"] * len(cols), colsizes=colsizes, fillvalue="-"))
    lines.extend(maketablerow(row, colsizes=colsizes) for row in rows)
    return "\n".join(lines)


def compute_max_colsize(cols: list[str], rows: list[list[str]]) -> list[int]:
    """Compute the maximum size of each column in a table."""
    return [
        max([len(row[colidx]) for row in rows] + [len(cols[colidx])])
        for colidx, _ in enumerate(cols)
    ]


def maketablerow(cols: list[str], colsizes: list[int], fillvalue: str = " ") -> str:
    """Make a table row with the given column sizes."""
    return " | ".join(
        [col.ljust(colsizes[idx], fillvalue) for idx, col in enumerate(cols)]
    ).rstrip()


def format_value(v: Any) -> str:
    """Format a value to be printed in the table.

    Floats are formatted to 2 decimal places, nested values
    are formatted as compact JSON and long strings are truncated.

    >>> format_value([1, {"a": True}])
    '[1,{"a":true}]'
    >>> format_value(None)
    'null'
    """
    if v is None:
        return "null"
    elif isinstance(v, bool):
        return "true" if v else "false"
    elif isinstance(v, float):
        return f"{v:.2f}"
    elif isinstance(v, (dict, list)):
        v = json.dumps(v, separators=(",", ":"), default=str)

    v = str(v)
    if len(v) > 30:
        v = v[:27] + "..."
    return v

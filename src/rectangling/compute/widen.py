"""Turn columns of records into new columns.

Widening takes a column where each cell is a record
(a dictionary with named children) and replaces it with
one column for each key found across all the records.

Given a table like::

    +----+---------------------------+
    | id | owner                     |
    +----+---------------------------+
    | 1  | {"login": "a", "uid": 10} |
    | 2  | {"login": "b"}            |
    | 3  | null                      |
    +----+---------------------------+

widening ``owner`` produces::

    +----+-------+------+
    | id | login | uid  |
    +----+-------+------+
    | 1  | a     | 10   |
    | 2  | b     | null |
    | 3  | null  | null |
    +----+-------+------+

The number of rows never changes, and the new columns
are placed where the widened column was.

>>> import pyarrow as pa
>>> data = pa.table({"id": [1, 2], "y": [{"a": 11, "b": 12}, {"a": 21}]})
>>> widen(data, "y").to_pydict()
{'id': [1, 2], 'a': [11, 21], 'b': [12, None]}

When the key names would collide with existing columns
the new columns can be namespaced by the original column name:

>>> widen(data, "y", names_sep="_").column_names
['id', 'y_a', 'y_b']
"""

import logging
from collections.abc import Iterable

import pyarrow as pa

from .base import QueryPlanNode, collect_table
from .errors import NamingConflict, TypeMismatch
from .shapes import Shape, shape_of
from .treetype import is_tree_type, tree_array, tree_values

logger = logging.getLogger(__name__)

__all__ = ("widen", "WidenNode")


def widen(
    table: pa.Table, columns: str | Iterable[str], names_sep: str | None = None
) -> pa.Table:
    """Replace record columns with one column for each of their keys.

    Multiple sibling columns can be widened at once,
    in such case the new names must be unique across all of them.

    :param table: The table containing the columns to widen.
    :param columns: The name of the column to widen, or a list of names.
    :param names_sep: When ``None`` the keys are used as the new column names,
                      otherwise the new names are ``column + names_sep + key``.
    :raises TypeMismatch: if a column contains values that are not records.
    :raises NamingConflict: if a new column name is already in use.
    """
    if isinstance(columns, str):
        columns = [columns]
    columns = list(columns)

    # Compute the new columns first, so that naming conflicts
    # can be detected across all the widened columns.
    expansions: dict[str, list[tuple[str, pa.Array]]] = {}
    for column in columns:
        children = _record_children(table, column)
        if names_sep is not None:
            children = [(f"{column}{names_sep}{key}", arr) for key, arr in children]
        expansions[column] = children

    taken = {name for name in table.column_names if name not in expansions}
    for column, children in expansions.items():
        for name, _ in children:
            if name in taken:
                raise NamingConflict(
                    f"Widening {column} generates column {name} which already exists",
                    column=column,
                    name=name,
                )
            taken.add(name)

    # Replace each column in place, starting from the rightmost one
    # so that the positions in the original table stay valid.
    # Removing and adding columns keeps the number of rows even
    # when no column is left.
    positions = sorted(
        ((table.column_names.index(column), column) for column in expansions),
        reverse=True,
    )
    result = table
    for position, column in positions:
        result = result.remove_column(position)
        for offset, (name, child) in enumerate(expansions[column]):
            result = result.add_column(position + offset, name, child)

    logger.debug(
        "Widened %s into %d columns", columns, sum(len(c) for c in expansions.values())
    )
    return result


def _record_children(table: pa.Table, column: str) -> list[tuple[str, pa.Array]]:
    """Split a column of records in its children, one array for each key."""
    chunked = table.column(column)
    datatype = chunked.type

    if pa.types.is_struct(datatype):
        # Flattening the struct accounts for the validity of the
        # struct itself, so null records produce null children.
        array = _combine(chunked)
        fields = [datatype.field(i).name for i in range(datatype.num_fields)]
        return list(zip(fields, array.flatten()))

    if pa.types.is_null(datatype):
        return []

    if not is_tree_type(datatype):
        raise TypeMismatch(
            f"Column {column} of type {datatype} does not contain records",
            column=column,
        )

    records = tree_values(chunked)
    keys: dict[str, None] = {}
    for rowidx, record in enumerate(records):
        shape = shape_of(record)
        if shape is Shape.ABSENT:
            continue
        if shape is not Shape.RECORD:
            raise TypeMismatch(
                f"Column {column} contains a {shape.value} at row {rowidx}, expected a record",
                column=column,
            )
        keys.update(dict.fromkeys(record))

    return [
        (key, tree_array([None if r is None else r.get(key) for r in records]))
        for key in keys
    ]


def _combine(chunked: pa.ChunkedArray) -> pa.Array:
    if chunked.num_chunks == 0:
        return pa.array([], type=chunked.type)
    return pa.concat_arrays(chunked.chunks)


class WidenNode(QueryPlanNode):
    """Widen one or more record columns of the data emitted by the child node.

    As the columns generated by widening a tree column depend
    on the keys found in all rows, the node needs to accumulate
    all the data of its child before it can widen it.

    >>> import pyarrow as pa
    >>> from rectangling.compute import PyArrowTableDataSource
    >>> data = pa.table({"y": [{"a": 11, "b": 12}]})
    >>> next(WidenNode("y", PyArrowTableDataSource(data)).batches()).to_pydict()
    {'a': [11], 'b': [12]}
    """

    def __init__(
        self,
        columns: str | list[str],
        child: QueryPlanNode,
        names_sep: str | None = None,
    ) -> None:
        """
        :param columns: The column, or list of columns, to widen.
        :param child: The node emitting the data to widen.
        :param names_sep: Separator to namespace the new columns, see :func:`widen`.
        """
        self.columns = columns
        self.child = child
        self.names_sep = names_sep

    def __str__(self) -> str:
        return f"WidenNode(columns={self.columns}, names_sep={self.names_sep!r}, child={self.child})"

    def batches(self) -> QueryPlanNode.RecordBatchesGenerator:
        """Widen all the data of the child node."""
        table = widen(collect_table(self.child), self.columns, names_sep=self.names_sep)
        yield from table.to_batches()

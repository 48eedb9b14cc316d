"""Turn columns of sequences into new rows.

Lengthening takes a column where each cell is a sequence
(a list with unnamed children, of variable length) and
emits one row for each element of the sequence, duplicating
the values of all the other columns.

Given a table like::

    +---+--------------+
    | x | y            |
    +---+--------------+
    | 1 | [11, 12, 13] |
    | 2 | [21]         |
    | 3 | []           |
    +---+--------------+

lengthening ``y`` produces::

    +---+----+
    | x | y  |
    +---+----+
    | 1 | 11 |
    | 1 | 12 |
    | 1 | 13 |
    | 2 | 21 |
    +---+----+

Rows with empty sequences disappear, unless ``keep_empty=True``
is provided, in which case they are preserved with a null element:

>>> import pyarrow as pa
>>> data = pa.table({"x": [1, 2, 3], "y": [[11, 12, 13], [21], []]})
>>> lengthen(data, "y").to_pydict()
{'x': [1, 1, 1, 2], 'y': [11, 12, 13, 21]}
>>> lengthen(data, "y", keep_empty=True).to_pydict()
{'x': [1, 1, 1, 2, 3], 'y': [11, 12, 13, 21, None]}

The elements of the sequences can be of any kind, and might
still be nested values that require further flattening.
When the elements can't be unified into a single type, for
example because they mix strings and numbers, lengthening
doesn't fail. Each element is preserved as is in a tree column
and it's up to the caller to decide what to do with them.
"""

import logging

import pyarrow as pa
import pyarrow.compute as pc

from .base import QueryPlanNode, collect_table
from .errors import NamingConflict, TypeMismatch
from .shapes import ColumnShape, Shape, classify, is_sequence_type, shape_of
from .treetype import is_tree_type, tree_array, tree_values

logger = logging.getLogger(__name__)

__all__ = ("lengthen", "LengthenNode")


def lengthen(
    table: pa.Table,
    column: str,
    keep_empty: bool = False,
    indices_to: str | None = None,
) -> pa.Table:
    """Replace a column of sequences with their elements, one row for each element.

    :param table: The table containing the column to lengthen.
    :param column: The name of the column to lengthen.
    :param keep_empty: Preserve rows with empty or null sequences
                       emitting a null element for them.
    :param indices_to: When provided, the name of a new column
                       where to store the position of each element
                       inside of its sequence.
    :raises TypeMismatch: if the column contains records or flat values.
    :raises NamingConflict: if the ``indices_to`` column already exists.
    """
    if indices_to is not None and indices_to in table.column_names:
        raise NamingConflict(
            f"Lengthening {column} generates column {indices_to} which already exists",
            column=column,
            name=indices_to,
        )

    chunked = table.column(column)
    datatype = chunked.type
    if is_sequence_type(datatype):
        parents, values, kept = _explode_list(chunked, keep_empty)
    elif pa.types.is_null(datatype):
        parents, values, kept = _explode_trees([None] * len(chunked), keep_empty)
    elif is_tree_type(datatype) and classify(chunked) is not ColumnShape.RECORDS:
        parents, values, kept = _explode_trees(tree_values(chunked), keep_empty)
    else:
        raise TypeMismatch(
            f"Column {column} of type {datatype} does not contain sequences",
            column=column,
        )

    position = table.column_names.index(column)
    result = table.take(parents).set_column(position, column, values)
    if indices_to is not None:
        result = result.add_column(
            position + 1, indices_to, _element_indices(parents, kept)
        )

    logger.debug(
        "Lengthened %s from %d to %d rows", column, table.num_rows, result.num_rows
    )
    return result


def _explode_list(
    chunked: pa.ChunkedArray, keep_empty: bool
) -> tuple[pa.Array, pa.Array, set[int]]:
    """Compute the row each element comes from and the elements themselves.

    Also returns the rows that were empty and preserved by ``keep_empty``.

    For Arrow list columns everything is done by compute functions,
    the parent indices tell from which row each element originated.
    """
    if chunked.num_chunks == 0:
        array = pa.array([], type=chunked.type)
    else:
        array = pa.concat_arrays(chunked.chunks)

    values = pc.list_flatten(array)
    parents = pc.list_parent_indices(array).cast(pa.int64())
    if not keep_empty:
        return parents, values, set()

    # Null sequences are treated like empty ones.
    lengths = pc.fill_null(pc.list_value_length(array), 0)
    empty_rows = pc.indices_nonzero(pc.equal(lengths, 0)).cast(pa.int64())
    if len(empty_rows) == 0:
        return parents, values, set()

    # Append a null element for each empty row and then
    # restore the original order of the rows. Sorting is stable,
    # so elements of the same row preserve their order too.
    parents = pa.concat_arrays([parents, empty_rows])
    values = pa.concat_arrays([values, pa.nulls(len(empty_rows), type=values.type)])
    order = pc.sort_indices(parents)
    return parents.take(order), values.take(order), set(empty_rows.to_pylist())


def _explode_trees(
    cells: list, keep_empty: bool
) -> tuple[pa.Array, pa.Array, set[int]]:
    """Compute the row each element comes from for a column of tree values.

    Cells that are not sequences count as a sequence of one element.
    """
    parents = []
    elements = []
    kept = set()
    for rowidx, cell in enumerate(cells):
        shape = shape_of(cell)
        if shape is Shape.SEQUENCE:
            items = cell
        elif shape is Shape.ABSENT:
            items = []
        else:
            items = [cell]

        if not items and keep_empty:
            items = [None]
            kept.add(rowidx)
        parents.extend([rowidx] * len(items))
        elements.extend(items)

    values = tree_array(elements)
    if is_tree_type(values.type):
        logger.debug("Elements could not be unified, they are preserved as trees")
    return pa.array(parents, type=pa.int64()), values, kept


def _element_indices(parents: pa.Array, kept: set[int]) -> pa.Array:
    """Position of each element within the sequence it comes from.

    Rows preserved only because of ``keep_empty`` have no position.
    """
    indices = []
    previous = None
    position = 0
    for parent in parents.to_pylist():
        position = position + 1 if parent == previous else 0
        previous = parent
        indices.append(None if parent in kept else position)
    return pa.array(indices, type=pa.int64())


class LengthenNode(QueryPlanNode):
    """Lengthen a sequence column of the data emitted by the child node.

    Elements are typed by looking at all of them, so the node
    accumulates all the data of its child before lengthening it.

    >>> import pyarrow as pa
    >>> from rectangling.compute import PyArrowTableDataSource
    >>> data = pa.table({"x": [1, 2], "y": [[11, 12], [21]]})
    >>> next(LengthenNode("y", PyArrowTableDataSource(data)).batches()).to_pydict()
    {'x': [1, 1, 2], 'y': [11, 12, 21]}
    """

    def __init__(
        self,
        column: str,
        child: QueryPlanNode,
        keep_empty: bool = False,
        indices_to: str | None = None,
    ) -> None:
        """
        :param column: The column to lengthen.
        :param child: The node emitting the data to lengthen.
        :param keep_empty: Preserve rows with empty sequences, see :func:`lengthen`.
        :param indices_to: Column where to store the position of the elements.
        """
        self.column = column
        self.child = child
        self.keep_empty = keep_empty
        self.indices_to = indices_to

    def __str__(self) -> str:
        return (
            f"LengthenNode(column={self.column}, keep_empty={self.keep_empty}, "
            f"indices_to={self.indices_to!r}, child={self.child})"
        )

    def batches(self) -> QueryPlanNode.RecordBatchesGenerator:
        """Lengthen all the data of the child node."""
        table = lengthen(
            collect_table(self.child),
            self.column,
            keep_empty=self.keep_empty,
            indices_to=self.indices_to,
        )
        yield from table.to_batches()

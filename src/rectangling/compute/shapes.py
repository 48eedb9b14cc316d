"""Classify the content of table columns.

To decide how a nested column should be flattened
we need to know what kind of values it contains:

* Columns of **records** (dictionaries) are flattened by
  widening them, every key becomes a new column.
* Columns of **sequences** (lists) are flattened by
  lengthening them, every element becomes a new row.

For Arrow native columns this is known just by looking at
the type of the column, ``struct`` columns contain records
and ``list`` columns contain sequences.

For tree columns, see :mod:`rectangling.compute.treetype`, the
values have to be inspected one by one as each cell can contain
a value of a different shape:

>>> from rectangling.compute import tree_array
>>> classify(tree_array([[1, "a"], "b", None]))
<ColumnShape.SEQUENCES: 'sequences'>
>>> classify(tree_array([{"a": 1}, [1, 2]]))
<ColumnShape.AMBIGUOUS: 'ambiguous'>
"""

import enum
from typing import Any

import pyarrow as pa

from .treetype import is_tree_type, tree_values


class Shape(enum.Enum):
    """Shape of a single tree value."""

    RECORD = "record"
    SEQUENCE = "sequence"
    SCALAR = "scalar"
    ABSENT = "absent"


class ColumnShape(enum.Enum):
    """Shape of the content of a whole column."""

    FLAT = "flat"
    """Nothing left to expand."""

    RECORDS = "records"
    """Can be widened."""

    SEQUENCES = "sequences"
    """Can be lengthened."""

    SCALARS = "scalars"
    """Scalars that could not be unified into a single type, still a tree column."""

    AMBIGUOUS = "ambiguous"
    """Records mixed with other shapes, requires manual intervention."""


def shape_of(value: Any) -> Shape:
    """Shape of a Python tree value.

    >>> shape_of({"a": 1}), shape_of([1]), shape_of("a"), shape_of(None)
    (<Shape.RECORD: 'record'>, <Shape.SEQUENCE: 'sequence'>, <Shape.SCALAR: 'scalar'>, <Shape.ABSENT: 'absent'>)
    """
    if value is None:
        return Shape.ABSENT
    elif isinstance(value, dict):
        return Shape.RECORD
    elif isinstance(value, list):
        return Shape.SEQUENCE
    return Shape.SCALAR


def is_sequence_type(datatype: pa.DataType) -> bool:
    """Whether the Arrow type holds sequences."""
    return (
        pa.types.is_list(datatype)
        or pa.types.is_large_list(datatype)
        or pa.types.is_fixed_size_list(datatype)
    )


def classify(column: pa.Array | pa.ChunkedArray) -> ColumnShape:
    """Detect how the content of a column can be flattened.

    Tree columns holding only records are wide-able,
    those holding sequences, even when mixed with scalars,
    are long-able. Records mixed with anything else
    are ambiguous, as neither widening nor lengthening
    the column would make progress.
    """
    datatype = column.type
    if pa.types.is_struct(datatype):
        return ColumnShape.RECORDS
    if is_sequence_type(datatype):
        return ColumnShape.SEQUENCES
    if not is_tree_type(datatype):
        return ColumnShape.FLAT

    shapes = {shape_of(v) for v in tree_values(column)}
    shapes.discard(Shape.ABSENT)
    if not shapes:
        return ColumnShape.FLAT
    if Shape.RECORD in shapes:
        if shapes == {Shape.RECORD}:
            return ColumnShape.RECORDS
        return ColumnShape.AMBIGUOUS
    if Shape.SEQUENCE in shapes:
        return ColumnShape.SEQUENCES
    return ColumnShape.SCALARS


def describe(table: pa.Table) -> dict[str, ColumnShape]:
    """Classify every column of a table.

    >>> import pyarrow as pa
    >>> describe(pa.table({"id": [1], "tags": [["a", "b"]]}))
    {'id': <ColumnShape.FLAT: 'flat'>, 'tags': <ColumnShape.SEQUENCES: 'sequences'>}
    """
    return {name: classify(table.column(name)) for name in table.column_names}

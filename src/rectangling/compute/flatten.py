"""Flatten nested data until the table is rectangular.

Real world nested data, like responses of web APIs, tends to
mix records and sequences at many levels of depth. Turning
it into a table requires applying :func:`rectangling.compute.widen`
and :func:`rectangling.compute.lengthen` multiple times, and how
many times depends on the data itself.

:func:`flatten` automates that process: it looks at the columns
of the table, widens the first column of records it finds or
lengthens the first column of sequences it finds, and then
starts again from the resulting table. It stops when no column
is left that can be expanded::

    {"name": "x", "tags": ["a", "b"], "owner": {"id": 1}}

    json                     -> widen json
    name | tags | owner      -> lengthen tags
    name | tags | owner      -> widen owner
    name | tags | id         -> done

>>> from rectangling.compute import from_tree
>>> data = from_tree({"name": "x", "tags": ["a", "b"], "owner": {"id": 1}})
>>> flatten(data).to_pydict()
{'name': ['x', 'x'], 'tags': ['a', 'b'], 'id': [1, 1]}

Sibling sequence columns are lengthened one after the other,
so their elements get combined in all possible ways.

Automatic flattening is a convenience, it can't solve every case.
When a column mixes records with sequences there is no way to know
which one of the two primitives is the right one. A column mixing
records with scalars is ambiguous as well: lengthening it would treat
every cell as a sequence of one element and produce the same column
again, while widening it fails on the scalars. In both cases
:class:`rectangling.compute.AmbiguousShape` is raised.
In such case the caller has to resolve the column manually, for example
filtering the malformed rows out with a :class:`rectangling.compute.ShapeExpression`
and then widening or lengthening the columns one by one.
"""

import logging

import pyarrow as pa

from .base import QueryPlanNode, collect_table
from .errors import AmbiguousShape
from .lengthen import lengthen
from .shapes import ColumnShape, describe
from .widen import widen

logger = logging.getLogger(__name__)

__all__ = ("flatten", "FlattenNode")


def flatten(
    table: pa.Table, names_sep: str | None = None, keep_empty: bool = False
) -> pa.Table:
    """Widen and lengthen the columns of a table until it's flat.

    Columns of scalars that could not be unified into a single type
    are left as tree columns, as there is nothing more to expand in them.
    An already flat table is returned as is.

    :param table: The table to flatten.
    :param names_sep: Naming mode for the widened columns, see :func:`widen`.
    :param keep_empty: Policy for empty sequences, see :func:`lengthen`.
    :raises AmbiguousShape: if a column mixes records with sequences or with scalars.
    :raises NamingConflict: if widening a column generates a duplicated name.
    """
    step = 0
    while True:
        shapes = describe(table)
        expandable = [
            (name, shape)
            for name, shape in shapes.items()
            if shape in (ColumnShape.RECORDS, ColumnShape.SEQUENCES)
        ]
        if not expandable:
            break

        name, shape = expandable[0]
        step += 1
        if shape is ColumnShape.RECORDS:
            table = widen(table, name, names_sep=names_sep)
        else:
            table = lengthen(table, name, keep_empty=keep_empty)
        logger.debug(
            "Flatten step %d: %s %s, now %d rows and %d columns",
            step,
            "widened" if shape is ColumnShape.RECORDS else "lengthened",
            name,
            table.num_rows,
            table.num_columns,
        )

    for name, shape in shapes.items():
        if shape is ColumnShape.AMBIGUOUS:
            raise AmbiguousShape(
                f"Column {name} mixes records with other shapes, "
                "it has to be widened or lengthened manually",
                column=name,
            )
    return table


class FlattenNode(QueryPlanNode):
    """Flatten all the data emitted by the child node.

    >>> import pyarrow as pa
    >>> from rectangling.compute import PyArrowTableDataSource
    >>> data = pa.table({"y": [[{"a": 1}, {"a": 2}]]})
    >>> next(FlattenNode(PyArrowTableDataSource(data)).batches()).to_pydict()
    {'a': [1, 2]}
    """

    def __init__(
        self,
        child: QueryPlanNode,
        names_sep: str | None = None,
        keep_empty: bool = False,
    ) -> None:
        """
        :param child: The node emitting the data to flatten.
        :param names_sep: Naming mode for the widened columns, see :func:`widen`.
        :param keep_empty: Policy for empty sequences, see :func:`lengthen`.
        """
        self.child = child
        self.names_sep = names_sep
        self.keep_empty = keep_empty

    def __str__(self) -> str:
        return f"FlattenNode(names_sep={self.names_sep!r}, keep_empty={self.keep_empty}, child={self.child})"

    def batches(self) -> QueryPlanNode.RecordBatchesGenerator:
        """Flatten all the data of the child node."""
        table = flatten(
            collect_table(self.child),
            names_sep=self.names_sep,
            keep_empty=self.keep_empty,
        )
        yield from table.to_batches()

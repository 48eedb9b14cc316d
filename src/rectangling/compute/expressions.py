"""Expressions executed by compute engine nodes.

Filters need a ``predicate``, so an expression that
returns ``true`` or ``false`` for each row that has to be
filtered.

When rectangling data, the most common reason to filter
rows is to get rid of malformed values before widening or
lengthening a column. :class:`ShapeExpression` checks the
shape of the values of a column for that purpose, while
:class:`FunctionCallExpression` allows to use any
:mod:`pyarrow.compute` function on flat columns.
"""

from collections.abc import Callable

import pyarrow as pa

from .base import Expression
from .shapes import Shape, shape_of
from .treetype import tree_values


def apply_expression_if_needed(batch: pa.RecordBatch, o: Expression | pa.Array) -> pa.Array:
    """Invoke Apply on expressions when needed

    If the provided object is an Expression,
    it will be applied to the target batch.

    Otherwise it will treat it as if it's
    already the result of an expression
    or a literal value.
    """
    if isinstance(o, Expression):
        o = o.apply(batch)
    return o


class FunctionCallExpression(Expression):
    """Call a compute function on its arguments.

    Given a compute function, and a set of arguments
    (other expressions, literals or data), execute
    the function on the provided arguments and return
    the resulting data.

    For example to keep only the rows with a positive id::

        FunctionCallExpression(pyarrow.compute.greater, ColumnRef("id"), 0)
    """

    def __init__(self, func: Callable, *args: Expression) -> None:
        """
        :param func: The function accepting the arguments.
        :param *args: The arguments for the function.
        """
        self.func = func
        self.args = args

    def __str__(self) -> str:
        func_name = getattr(self.func, "__name__", repr(self.func))
        return f"{func_name}({','.join(map(str, self.args))})"

    def apply(self, batch: pa.RecordBatch) -> pa.Array:
        """Invoke the function resolving all arguments on the recordbatch."""
        args = tuple(apply_expression_if_needed(batch, arg) for arg in self.args)
        return self.func(*args)


class ShapeExpression(Expression):
    """Check which values of a column have the requested shape.

    Works on tree columns as well as on native Arrow columns,
    for the latter all the non null values have the same shape.

    >>> from rectangling.compute import tree_array
    >>> batch = pa.record_batch({"y": tree_array([{"a": 1}, [1, 2], None])})
    >>> ShapeExpression("y", "record").apply(batch).to_pylist()
    [True, False, False]
    """

    def __init__(self, column: str, *shapes: Shape | str) -> None:
        """
        :param column: The name of the column to check.
        :param shapes: The accepted shapes, ``record``, ``sequence``,
                       ``scalar`` or ``absent``.
        """
        self.column = column
        self.shapes = frozenset(Shape(s) for s in shapes)

    def __str__(self) -> str:
        shapes = ",".join(sorted(s.value for s in self.shapes))
        return f"ShapeExpression({self.column}, {shapes})"

    def apply(self, batch: pa.RecordBatch) -> pa.Array:
        """Get a boolean mask telling which rows match the shapes."""
        values = tree_values(batch.column(self.column))
        return pa.array([shape_of(v) in self.shapes for v in values], type=pa.bool_())

"""The Dataframe object itself."""
from typing import Any, Self

import pyarrow as pa

from ..compute import (
  FilterNode,
  FlattenNode,
  JSONDataSource,
  LengthenNode,
  PyArrowTableDataSource,
  TreeDataSource,
  WidenNode,
  describe,
)
from ..compute.base import QueryPlanNode, collect_table
from ..compute.expressions import Expression
from ..compute.shapes import ColumnShape


class Dataframe:
  """Data structure that handles nested data in rows and columns.

  The rectangling dataframe object is lazy, which means that
  any transformation will be applied only when the
  ``.collect()`` method will be invoked and no data is kept
  in memory until that moment (unless it already was).

  >>> df = Dataframe.from_tree({"id": 1, "tags": ["a", "b"]}).widen("json").lengthen("tags")
  >>> df.to_arrow().to_pydict()
  {'id': [1, 1], 'tags': ['a', 'b']}
  """
  def __init__(self, node_or_table: QueryPlanNode|pa.Table) -> None:
    """
    :param node_or_table: A compute engine node expected to emit
                          the data for the dataframe or a `pyarrow.Table`.
    """
    if isinstance(node_or_table, pa.Table):
      node_or_table = PyArrowTableDataSource(node_or_table)

    if not isinstance(node_or_table, QueryPlanNode):
      raise ValueError("Invalid input, expected a QueryPlanNode or a PyArrow Table")

    self.node = node_or_table

  @classmethod
  def from_tree(cls, tree: Any, column: str = "json") -> Self:
    """Create a Dataframe with a single row containing the tree.

    :param tree: A tree value, like a decoded JSON document.
    :param column: The name of the column holding the tree.
    """
    return cls(TreeDataSource([tree], column=column))

  @classmethod
  def from_trees(cls, trees: list[Any], column: str = "json") -> Self:
    """Create a Dataframe with one row for each tree.

    :param trees: The tree values.
    :param column: The name of the column holding the trees.
    """
    return cls(TreeDataSource(trees, column=column))

  @classmethod
  def open_json(cls, filename: str, column: str = "json", lines: bool = False) -> Self:
    """Open a JSON file and create a Dataframe out of its data.

    :param filename: The path to a local JSON file.
    :param column: The name of the column holding the documents.
    :param lines: Read the file as JSON Lines, one row per line.
    """
    return cls(JSONDataSource(filename, column=column, lines=lines))

  def filter(self, expression: Expression) -> Self:
    """Apply a filter to the data and return a new Dataframe.

    The returned dataframe will only contain the data that
    matches the filter predicate.

    :param expression: The expression representing the predicate.
                       for example ``ShapeExpression("json", "record")``.
    """
    return self.__class__(FilterNode(expression, self.node))

  def widen(self, columns: str|list[str], names_sep: str|None = None) -> Self:
    """Widen one or more record columns into one column per key.

    See :func:`rectangling.compute.widen`.
    """
    return self.__class__(WidenNode(columns, self.node, names_sep=names_sep))

  def lengthen(self, column: str, keep_empty: bool = False, indices_to: str|None = None) -> Self:
    """Lengthen a sequence column into one row per element.

    See :func:`rectangling.compute.lengthen`.
    """
    return self.__class__(
      LengthenNode(column, self.node, keep_empty=keep_empty, indices_to=indices_to)
    )

  def flatten(self, names_sep: str|None = None, keep_empty: bool = False) -> Self:
    """Widen and lengthen the columns until the data is flat.

    Collecting the data might raise :class:`rectangling.compute.AmbiguousShape`
    when a column can't be flattened automatically.
    See :func:`rectangling.compute.flatten`.
    """
    return self.__class__(FlattenNode(self.node, names_sep=names_sep, keep_empty=keep_empty))

  def describe(self) -> dict[str, ColumnShape]:
    """Collect the data and report the shape of each column."""
    return describe(self.to_arrow())

  def collect(self) -> Self:
    """Collect all data of the dataframe in memory.

    Returns a new Dataframe that has all data from the
    previous dataframe eagerly loaded in memory.
    """
    return self.__class__(self.to_arrow())

  def to_arrow(self) -> pa.Table:
    """Collect all the data and return a pyarrow.Table"""
    return collect_table(self.node)

  def __str__(self) -> str:
    return f"Dataframe({self.node})"

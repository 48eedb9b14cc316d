"""The Rectangling Compute Engine

The compute engine turns nested data, like decoded JSON documents,
into flat tables. Tables are Apache Arrow tables: nested values
are stored in ``struct`` and ``list`` columns when Arrow is able
to type them and in tree columns (see :mod:`rectangling.compute.treetype`)
when the data is too heterogeneous for Arrow.

Flattening relies on two primitives:

* :func:`widen` turns a column of records into one column for each key.
* :func:`lengthen` turns a column of sequences into one row for each element.

Which one has to be applied depends on what a column contains,
which is computed by :func:`classify`. :func:`flatten` applies
them repeatedly until the table is flat:

>>> from rectangling.compute import from_tree, widen, lengthen, flatten
>>> repos = from_tree([
...     {"name": "arrow", "owner": {"login": "apache"}, "topics": ["data", "columnar"]},
...     {"name": "tidyr", "owner": {"login": "tidyverse"}, "topics": []},
... ], column="repos")
>>> repos = lengthen(repos, "repos")
>>> repos = widen(repos, "repos")
>>> repos.column_names
['name', 'owner', 'topics']
>>> flatten(repos, names_sep="_").to_pydict()
{'name': ['arrow', 'arrow'], 'owner_login': ['apache', 'apache'], 'topics': ['data', 'columnar']}

The primitives are also available as query plan nodes,
so that they can be combined with data sources and filters.
Building a query plan requires to combine the nodes that we want
to be executed starting with one ``DataSource`` node as the
leaf node of the query:

>>> from rectangling.compute import TreeDataSource, FilterNode, ShapeExpression, FlattenNode
>>> query = FlattenNode(
...     FilterNode(
...         ShapeExpression("json", "record"),
...         TreeDataSource([{"id": 1, "tags": ["a"]}, "malformed", {"id": 2, "tags": ["b", "c"]}]),
...     )
... )
>>> for data in query.batches():
...     print(data.to_pydict())
{'id': [1, 2, 2], 'tags': ['a', 'b', 'c']}
"""

from .base import ColumnRef, col, lit
from .datasources import JSONDataSource, PyArrowTableDataSource, TreeDataSource
from .errors import AmbiguousShape, NamingConflict, RectanglingError, TypeMismatch
from .expressions import FunctionCallExpression, ShapeExpression
from .filtering import FilterNode
from .flatten import FlattenNode, flatten
from .lengthen import LengthenNode, lengthen
from .shapes import ColumnShape, Shape, classify, describe
from .treetype import TreeType, from_tree, from_trees, tree_array, tree_values
from .widen import WidenNode, widen

__all__ = (
    "JSONDataSource",
    "PyArrowTableDataSource",
    "TreeDataSource",
    "FilterNode",
    "FunctionCallExpression",
    "ShapeExpression",
    "col",
    "lit",
    "ColumnRef",
    "widen",
    "WidenNode",
    "lengthen",
    "LengthenNode",
    "flatten",
    "FlattenNode",
    "classify",
    "describe",
    "ColumnShape",
    "Shape",
    "TreeType",
    "tree_array",
    "tree_values",
    "from_tree",
    "from_trees",
    "RectanglingError",
    "TypeMismatch",
    "NamingConflict",
    "AmbiguousShape",
)

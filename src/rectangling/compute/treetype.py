"""Arrow storage for tree values.

Tree values are what you get out of a JSON decoder: dictionaries
(records), lists (sequences) and scalars. Most of the time Arrow
is able to infer a type for them by itself, records become
``struct`` columns and sequences become ``list`` columns::

    >>> import pyarrow as pa
    >>> pa.types.is_struct(tree_array([{"a": 1, "b": [1, 2]}]).type)
    True

But real world nested data is frequently heterogeneous and
Arrow refuses to build an array out of values that can't share a type::

    [{"a": 1}, [1, 2], "text"]

For those cases we rely on an extension type, :class:`TreeType`,
that stores each cell as its own JSON document. This way any
tree value can be placed in a column of a table and dealt with
later on, when the rectangling transforms split it into smaller
pieces that Arrow is able to type again::

    >>> is_tree_type(tree_array([1, "a", True]).type)
    True

Arrow nulls are the absence marker for both kinds of columns.
"""

import json
import logging
from typing import Any

import pyarrow as pa

logger = logging.getLogger(__name__)


class TreeType(pa.ExtensionType):
    """Arrow extension type for columns holding arbitrary tree values.

    The storage is a ``large_string`` column where every non null
    cell contains a JSON document.
    """

    def __init__(self) -> None:
        super().__init__(pa.large_string(), "rectangling.tree")

    def __arrow_ext_serialize__(self) -> bytes:
        return b""

    @classmethod
    def __arrow_ext_deserialize__(cls, storage_type: pa.DataType, serialized: bytes) -> "TreeType":
        return cls()

    def __arrow_ext_class__(self) -> type:
        return TreeArray

    def __arrow_ext_scalar_class__(self) -> type:
        return TreeScalar


class TreeArray(pa.ExtensionArray):
    """An array of tree values."""

    @classmethod
    def from_trees(cls, values: list[Any]) -> "TreeArray":
        """Build an array storing each value as a JSON document."""
        storage = pa.array(
            [None if v is None else json.dumps(v) for v in values],
            type=pa.large_string(),
        )
        return pa.ExtensionArray.from_storage(TreeType(), storage)

    def to_trees(self) -> list[Any]:
        """Decode the cells back to Python tree values."""
        return [None if v is None else json.loads(v) for v in self.storage.to_pylist()]


class TreeScalar(pa.ExtensionScalar):
    """A single tree value, decoded on access."""

    def as_py(self, **kwargs: Any) -> Any:
        text = self.value.as_py() if self.value is not None else None
        return None if text is None else json.loads(text)


try:
    pa.register_extension_type(TreeType())
except pa.ArrowKeyError:
    # Registered already, when the module is imported twice.
    pass


def is_tree_type(datatype: pa.DataType) -> bool:
    """Whether the Arrow type is the tree extension type."""
    return isinstance(datatype, TreeType)


def tree_array(values: list[Any]) -> pa.Array:
    """Build the best Arrow array for the given tree values.

    Arrow inference is tried first, when it can't unify the values
    into a single type they are stored in a tree column instead,
    preserving each value as is.

    >>> tree_array([1, 2, None]).to_pylist()
    [1, 2, None]
    >>> tree_array([1, "a", True]).to_trees()
    [1, 'a', True]
    """
    try:
        return pa.array(values)
    except (pa.ArrowInvalid, pa.ArrowTypeError, pa.ArrowNotImplementedError, OverflowError) as e:
        logger.debug("Unable to unify %d values into an Arrow type: %s", len(values), e)
        return TreeArray.from_trees(values)


def tree_values(column: pa.Array | pa.ChunkedArray) -> list[Any]:
    """Get the content of a column as Python tree values.

    Works for tree columns as well as for any regular Arrow column.
    """
    if not is_tree_type(column.type):
        return column.to_pylist()

    chunks = column.chunks if isinstance(column, pa.ChunkedArray) else [column]
    values = []
    for chunk in chunks:
        values.extend(
            None if v is None else json.loads(v) for v in chunk.storage.to_pylist()
        )
    return values


def from_trees(trees: list[Any], column: str = "json") -> pa.Table:
    """Create a table with one row for each of the provided trees.

    >>> from_trees([{"id": 1}, {"id": 2}]).column_names
    ['json']
    """
    return pa.table({column: tree_array(list(trees))})


def from_tree(tree: Any, column: str = "json") -> pa.Table:
    """Wrap a single tree into a table with one row and one column.

    This is usually the starting point of rectangling a parsed JSON document.

    >>> from_tree({"id": 1, "name": "x"}).num_rows
    1
    """
    return from_trees([tree], column=column)

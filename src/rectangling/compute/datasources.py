"""Query Plan nodes that load data

The datasource nodes are expected to fetch the data from some source,
convert it into the format accepted by the compute engine and forward it
to the next node in the plan.

Nested data is loaded as a table with a single column,
one row for each top-level tree. Flattening that column
is then up to the other nodes of the plan.
"""

import json
from typing import Any

import pyarrow as pa

from .base import QueryPlanNode
from .treetype import from_trees


class DataSourceNode(QueryPlanNode):
    """Base class for nodes that load data from a source.

    Data sources are the leaf nodes of a query plan, they have no child.
    """


class PyArrowTableDataSource(DataSourceNode):
    """Load data from an in-memory pyarrow.Table or pyarrow.RecordBatch.

    Given a :class:`pyarrow.Table` or `pyarrow.RecordBatch` object,
    allow to use its data in a query plan.
    """

    def __init__(self, table: pa.Table | pa.RecordBatch) -> None:
        """
        :param table: The table or recordbatch with the data to read.
        """
        self.table = table
        self.is_recordbatch = isinstance(table, pa.RecordBatch)

    def __str__(self) -> str:
        return f"PyArrowTableDataSource(columns={self.table.column_names}, rows={self.table.num_rows})"

    def batches(self) -> QueryPlanNode.RecordBatchesGenerator:
        """Emit the data contained in the Table for consumption by other node."""
        if self.is_recordbatch:
            yield self.table
        else:
            yield from self.table.to_batches()


class TreeDataSource(DataSourceNode):
    """Load data from in-memory tree values.

    Each tree becomes a row of a table with a single column.
    Trees are typically the result of decoding a JSON document.

    >>> source = TreeDataSource([{"id": 1}, {"id": 2}], column="user")
    >>> next(source.batches()).column_names
    ['user']
    """

    def __init__(self, trees: list[Any], column: str = "json") -> None:
        """
        :param trees: The tree values, one for each row.
        :param column: The name of the column where to place the trees.
        """
        self.trees = trees
        self.column = column

    def __str__(self) -> str:
        return f"TreeDataSource(column={self.column}, rows={len(self.trees)})"

    def batches(self) -> QueryPlanNode.RecordBatchesGenerator:
        """Emit all the trees as a single batch.

        A single batch is emitted as the type of the
        column depends on all the trees.
        """
        yield from from_trees(self.trees, column=self.column).to_batches()


class JSONDataSource(DataSourceNode):
    """Load nested data from a JSON file.

    By default the whole file is a single JSON document.
    When the document is an array, each element becomes a row,
    otherwise the document is loaded as a single row.

    With ``lines=True`` the file is read as JSON Lines,
    one document per line and one row for each document.
    Empty lines are skipped.
    """

    def __init__(self, filename: str, column: str = "json", lines: bool = False) -> None:
        """
        :param filename: The path of the local JSON file.
        :param column: The name of the column where to place the documents.
        :param lines: Read the file as JSON Lines.
        """
        self.filename = filename
        self.column = column
        self.lines = lines

    def __str__(self) -> str:
        return f"JSONDataSource({self.filename}, column={self.column}, lines={self.lines})"

    def batches(self) -> QueryPlanNode.RecordBatchesGenerator:
        """Parse the JSON file and emit the batches."""
        yield from from_trees(self.read_trees(), column=self.column).to_batches()

    def read_trees(self) -> list[Any]:
        """Decode the content of the file into a list of trees.

        :raises json.JSONDecodeError: if the file doesn't contain valid JSON.
        """
        with open(self.filename, encoding="utf-8") as f:
            if self.lines:
                return [json.loads(line) for line in f if line.strip()]
            document = json.load(f)

        if isinstance(document, list):
            return document
        return [document]

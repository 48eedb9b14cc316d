"""Query plan nodes that implement filtering of rows.

Before a nested column can be widened or lengthened
it's frequently necessary to get rid of the rows that
contain malformed data. For example a column of records
where some rows contain plain strings can't be widened.

This module implements the basic filtering capabilities.
"""

from .base import QueryPlanNode
from .expressions import Expression


class FilterNode(QueryPlanNode):
    """Filter data based on a predicate expression.

    The filter expects an expression that when applied
    to the batch of data being filtered returns ``true``
    or ``false`` for each row in the data to mark which
    rows have to be preserved and which rows have to be discarded.

    >>> from rectangling.compute import ShapeExpression, TreeDataSource
    >>> source = TreeDataSource([{"id": 1}, "malformed", {"id": 2}])
    >>> predicate = ShapeExpression("json", "record")
    >>> next(FilterNode(predicate, source).batches()).num_rows
    2
    """

    def __init__(self, expression: Expression, child: QueryPlanNode) -> None:
        """
        :param expression: The predicate expression to filter with.
        :param child: The node emitting the data to be filtered.
        """
        self.expression = expression
        self.child = child

    def __str__(self) -> str:
        return f"FilterNode(filter={self.expression}, child={self.child})"

    def batches(self) -> QueryPlanNode.RecordBatchesGenerator:
        """Apply the filtering to the child node.

        For each recordbatch yielded by the child node,
        apply the expression and keep only the rows
        for which it returned ``true``.
        """
        for batch in self.child.batches():
            mask = self.expression.apply(batch)
            yield batch.filter(mask)

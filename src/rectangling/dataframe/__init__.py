"""Dataframe API for rectangling nested data.

Working with nested data usually involves a sequence of steps,
each one widening or lengthening a column until the data
becomes a table that can be analysed. A dataframe allows to
chain those steps in a fluent way::

    df = Dataframe.open_json("repos.json") \\
      .widen("json") \\
      .widen("owner", names_sep="_") \\
      .lengthen("topics") \\
      .collect()

The dataframe is built on top of the rectangling compute engine,
each method adds a new node to the query plan that will be
executed when the data is collected.
"""

from ..compute import col, lit
from .dataframe import Dataframe

__all__ = ("Dataframe", "col", "lit")

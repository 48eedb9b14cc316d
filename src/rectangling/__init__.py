"""Rectangling

Turn nested data into tidy tables.

Data coming from web APIs and document stores is usually
made of deeply nested records and lists. Analysing it
requires to first turn it into a rectangle: a table made of
rows and columns. This process is named *rectangling*.

Rectangling is built as a small data platform on top of Apache Arrow,
each component is isolated within its own package and each
self documented in literate programming style.

The primary components are:

* The Compute Engine, in charge of widening and lengthening nested data.
* The Dataframe API, which provides an high level API for the compute engine.
* The ``pyground-rectangle`` command, to rectangle JSON files from the shell.

For the user guide and code documentation of each component, refer to the
component itself.
"""

from . import compute

__all__ = ("compute",)

"""Errors raised by the rectangling transforms.

All the errors carry the name of the column that caused them,
so that callers can decide how to recover. Usually by picking
a different naming mode, by widening or lengthening columns
manually or by filtering out malformed rows first.

When values of a column can't be unified into a single type
no error is raised at all, the column is kept as a tree column
and :func:`rectangling.compute.classify` will report it as still nested.
"""


class RectanglingError(Exception):
    """Base class for errors raised while rectangling data."""

    def __init__(self, message: str, column: str) -> None:
        super().__init__(message)
        self.column = column


class TypeMismatch(RectanglingError):
    """A column doesn't contain the shape of values the transform expects.

    For example widening a column that contains lists.
    """


class NamingConflict(RectanglingError):
    """A generated column name collides with an existing one."""

    def __init__(self, message: str, column: str, name: str) -> None:
        super().__init__(message, column)
        self.name = name


class AmbiguousShape(RectanglingError):
    """A column mixes Records with other shapes and can't be flattened automatically."""

"""Shell commands exposing Rectangling functionalities.

This module contains the shell commands that can be used to rectangle nested data.

Rectangle
=========

``pyground-rectangle`` turns JSON files into tables::

    pyground-rectangle repos.json

When no step is provided, the data is flattened automatically.
Steps can be provided explicitly and are applied in the given order::

    pyground-rectangle repos.json --widen json --widen owner --names-sep _ --lengthen topics

To find out which columns still need to be flattened use ``--describe``::

    pyground-rectangle repos.json --widen json --describe
"""

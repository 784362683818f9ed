#!/usr/bin/env python3
"""Exceptions raised by the Q-score plot logic.

Empty inputs are never errors; these are reserved for selections that cannot
be resolved against the run and for structurally inconsistent metric data.
"""


class QScorePlotError(Exception):
    """Base class for all Q-score plotting errors."""


class InvalidReadError(QScorePlotError, ValueError):
    """Raised when a read selection does not exist in the run info."""


class InvalidFilterOptionError(QScorePlotError, ValueError):
    """Raised when a filter option is outside the bounds of the run."""


class IndexOutOfBoundsError(QScorePlotError, IndexError):
    """Raised when a bin maps outside the histogram it is paired with.

    This signals an inconsistent bin table / histogram pairing upstream and
    must never be clamped or skipped.
    """

# tapegrad/core/errors.py
"""
Exceptions raised by tape construction and the Term operators.

Every class also derives from the builtin exception callers would reach for
first (IndexError for a bad id, TypeError for the wrong node kind, ...), so
plain `except IndexError` keeps working.
"""


class TapeError(Exception):
    """Base class for all tapegrad errors."""


class OutOfRangeIdError(TapeError, IndexError):
    """An id does not name a node already appended to the tape."""

    def __init__(self, idx, size):
        super().__init__(f"node id {idx!r} out of range for tape of {size} node(s)")
        self.idx = idx
        self.size = size


class WrongNodeKindError(TapeError, TypeError):
    """An operation targets a node (or a kind) it does not support."""


class CrossTapeError(TapeError, ValueError):
    """Two Terms recorded on different tapes were combined."""


class UnknownFunctionError(TapeError, KeyError):
    """No builtin unary function is registered under the requested name."""

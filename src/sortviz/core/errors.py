from __future__ import annotations


class SortVizError(Exception):
    """
    Base class for every error raised by the sorting engine.

    `reason` is a short machine-friendly tag the presentation layer can show
    or switch on; the message stays human readable.
    """

    reason: str = "error"

    def __init__(self, message: str, *, reason: str | None = None) -> None:
        super().__init__(message)
        if reason is not None:
            self.reason = reason


class InvalidConfiguration(SortVizError, ValueError):
    """
    Bad size / speed / algorithm selection. Rejected before any run starts.
    """

    reason = "invalid_configuration"


class IndexOutOfRange(SortVizError, IndexError):
    """
    An engine touched a position outside the sequence.

    Unreachable with correct engine logic; surfaces as a Failed run.
    """

    reason = "index_out_of_range"


class Cancelled(SortVizError):
    """
    Control-flow signal raised at a suspension point after cancel().

    Not a fault: the session unwinds to Cancelled without logging an error.
    """

    reason = "cancelled"


class RunAlreadyActive(SortVizError):
    reason = "run_already_active"


class InvalidSessionTransition(SortVizError):
    reason = "invalid_transition"

"""
Custom exceptions for the reactor_transient library.
"""


class ReactorTransientError(Exception):
    """Base exception for all reactor_transient errors."""
    pass


class ConfigurationError(ReactorTransientError):
    """Invalid model parameter or parameter file."""
    pass


class InvalidTableError(ReactorTransientError):
    """Time-series table cannot be built from the supplied rows."""
    pass


class OutOfRangeError(ReactorTransientError):
    """Query time lies outside the range a table query supports."""

    def __init__(self, time: float, start: float, end: float, message: str = None):
        if message is None:
            message = f"Time {time} outside table range [{start}, {end}]"
        super().__init__(message)
        self.time = time
        self.start = start
        self.end = end


class InputDeckError(ReactorTransientError):
    """Input deck could not be loaded."""

    def __init__(self, message: str, source: str = None):
        if source is not None:
            message = f"{source}: {message}"
        super().__init__(message)
        self.source = source


class MalformedRowError(InputDeckError):
    """A line of the input deck could not be parsed."""

    def __init__(self, line_number: int, line: str, reason: str, source: str = None):
        super().__init__(f"line {line_number}: {reason}: {line!r}", source)
        self.line_number = line_number
        self.line = line


class InsufficientDataError(InputDeckError):
    """Input deck holds fewer than two data rows."""

    def __init__(self, count: int, source: str = None):
        super().__init__(f"need at least 2 data rows, found {count}", source)
        self.count = count

"""Exceptions raised by the Fibonacci spiral library."""


class SpiralError(Exception):
    """Base exception for rejected spiral requests."""

    # Error codes
    ERR_INVALID_INPUT = 100
    ERR_SOURCE_UNAVAILABLE = 101
    ERR_SESSION_BUSY = 102

    def __init__(self, message: str, code: int = 0):
        super().__init__(message)
        self.code = code


class InvalidInputError(SpiralError):
    """Requested Fibonacci indices are out of range or out of order."""

    def __init__(self, message: str):
        super().__init__(message, SpiralError.ERR_INVALID_INPUT)


class SourceUnavailableError(SpiralError):
    """The persisted buffer path is empty, has the wrong extension or cannot be opened."""

    def __init__(self, message: str):
        super().__init__(message, SpiralError.ERR_SOURCE_UNAVAILABLE)


class SessionBusyError(SpiralError):
    """A session was started while another one is still active."""

    def __init__(self, message: str):
        super().__init__(message, SpiralError.ERR_SESSION_BUSY)

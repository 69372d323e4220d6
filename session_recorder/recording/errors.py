"""Exceptions raised by the session store and its consumers."""


class SessionRecorderError(Exception):
    """Base exception for session recorder errors."""
    pass


class SessionNotFoundError(SessionRecorderError, LookupError):
    """No session exists for the given instance, id or path."""
    pass


class InvalidSessionFileError(SessionRecorderError, ValueError):
    """A session document parsed but is not a usable session."""

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.path = path

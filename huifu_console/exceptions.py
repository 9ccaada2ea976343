"""Exceptions raised by the console."""


class ConsoleError(Exception):
    pass


class ConsoleTransportError(ConsoleError):
    """The backend could not be reached or answered with something that is not JSON."""

    def __init__(self, message, *, method=None, url=None):
        super().__init__(message)
        self.method = method
        self.url = url


class ConsoleConfigError(ConsoleError):
    pass

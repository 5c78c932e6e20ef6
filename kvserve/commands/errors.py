"""Error raised by command handlers to reject a request."""

from __future__ import annotations


class CommandError(Exception):
    """A command could not be carried out; ``message`` is sent back to the client."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
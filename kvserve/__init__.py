"""In-memory key-value server speaking the RESP protocol."""

__version__ = "0.1.0"
"""telnetctl — minimal interactive TCP client."""

__version__ = "0.1.0"

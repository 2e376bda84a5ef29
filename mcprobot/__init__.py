"""Build Model Context Protocol tool servers served over a text stream or HTTP."""

__version__ = "0.1.0"
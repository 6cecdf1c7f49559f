"""Threading, logging and time utilities for multi-threaded server programs."""

__version__ = "0.1.0"
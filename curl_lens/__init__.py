"""curl-lens: turn pasted curl commands into structured HTTP requests."""

__version__ = "1.0.0"

"""statusboard - live view of a BMad workflow status file."""

__version__ = "0.1.0"

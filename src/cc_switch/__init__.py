"""cc-switch configuration persistence and recovery engine."""

__version__ = "0.1.0"

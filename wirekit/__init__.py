"""Dependency injection analysis: provider graphs, validation and call planning."""

__version__ = "0.1.0"
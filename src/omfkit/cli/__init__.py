"""
omfkit Command-Line Interface
=============================

This package provides the command-line tools for omfkit:

- **omfdump**: Object module record lister and decoder

Each tool is implemented as a Click-based CLI application with
comprehensive help and error reporting.
"""

__all__ = ["omfdump"]

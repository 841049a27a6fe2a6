"""Detect how to build and run an arbitrary source repository."""

__version__ = "0.1.0"

"""Vigil - video review console with an interactive metadata graph."""

__version__ = "0.1.0"

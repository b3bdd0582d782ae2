"""Structured document engine for knowledge bases and blog posts."""

__version__ = "0.1.0"

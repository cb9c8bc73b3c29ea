"""Toolkit for operations services: metrics, logging, caching, hashing and helpers."""

__version__ = "0.1.0"
"""Lightweight Ethereum wallet core."""

__version__ = "0.1.0"

"""Shorter, deterministic job workspace paths for build nodes."""

__version__ = "0.1.0"

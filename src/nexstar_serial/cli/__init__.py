"""Command line interface for NexStar serial telescope control."""

from nexstar_serial import __version__


__all__ = ["__version__"]

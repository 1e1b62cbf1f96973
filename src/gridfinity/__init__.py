"""Gridfinity baseplates, bins and bed-sized interlocking baseplate sets."""

__version__ = "0.1.0"
